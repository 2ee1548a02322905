"""
Quat - Mutable rotation quaternion stored as (x, y, z, w).

Multiplication follows the Hamilton product. ``a.mul(b)`` leaves ``a * b`` in
``a``; ``a.pmul(b)`` leaves ``b * a`` in ``a`` (pre-multiply, ``b`` is the
outer/parent rotation).

Degenerate input never raises:
- inverting a zero quaternion yields the zero quaternion
- swinging between opposite vectors picks a perpendicular axis
- normalizing a zero quaternion leaves it unchanged
"""

import math
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from rigretarget.core.logging import get_logger
from .vec3 import Vec3, VecLike, _components

logger = get_logger("algebra.quat")

QuatLike = Union["Quat", np.ndarray, Iterable[float]]

# Swing thresholds on the dot product of two unit vectors
SWING_PARALLEL = 0.999999
SWING_OPPOSITE = -0.999999
SWING_AXIS_EPSILON = 0.000001


def _mul_components(
    ax: float, ay: float, az: float, aw: float,
    bx: float, by: float, bz: float, bw: float,
) -> Tuple[float, float, float, float]:
    """Hamilton product a * b on raw (x, y, z, w) components."""
    return (
        ax * bw + aw * bx + ay * bz - az * by,
        ay * bw + aw * by + az * bx - ax * bz,
        az * bw + aw * bz + ax * by - ay * bx,
        aw * bw - ax * bx - ay * by - az * bz,
    )


def _invert_components(
    x: float, y: float, z: float, w: float
) -> Tuple[float, float, float, float]:
    """conjugate(q) / |q|^2, or the zero quaternion when |q|^2 is zero."""
    dot = x * x + y * y + z * z + w * w
    if dot == 0:
        return 0.0, 0.0, 0.0, 0.0

    inv = 1.0 / dot
    return -x * inv, -y * inv, -z * inv, w * inv


class Quat:
    """Rotation quaternion backed by a numpy array in (x, y, z, w) order."""

    __slots__ = ("_q",)

    def __init__(
        self,
        x: Union[float, QuatLike, None] = None,
        y: Optional[float] = None,
        z: Optional[float] = None,
        w: Optional[float] = None,
    ):
        self._q = np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)

        if x is None:
            return
        if y is not None and z is not None and w is not None:
            self.xyzw(x, y, z, w)
        else:
            self.copy(x)

    # =========================================================================
    # CONTAINER PROTOCOL
    # =========================================================================

    def __getitem__(self, i):
        return float(self._q[i]) if isinstance(i, int) else self._q[i]

    def __setitem__(self, i, value) -> None:
        self._q[i] = value

    def __len__(self) -> int:
        return 4

    def __iter__(self):
        return (float(c) for c in self._q)

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._q.copy()
        return self._q.astype(dtype)

    def __repr__(self) -> str:
        x, y, z, w = self._q
        return f"Quat({x:.6g}, {y:.6g}, {z:.6g}, {w:.6g})"

    def to_array(self) -> np.ndarray:
        return self._q.copy()

    def to_wxyz(self) -> np.ndarray:
        """Components as a [w, x, y, z] array."""
        x, y, z, w = self._q
        return np.array([w, x, y, z], dtype=np.float64)

    def from_wxyz(self, q: Sequence[float]) -> "Quat":
        """Set from a [w, x, y, z] sequence."""
        return self.xyzw(q[1], q[2], q[3], q[0])

    # =========================================================================
    # SETTERS
    # =========================================================================

    def identity(self) -> "Quat":
        self._q[:] = (0.0, 0.0, 0.0, 1.0)
        return self

    def copy(self, q: QuatLike) -> "Quat":
        if isinstance(q, Quat):
            self._q[:] = q._q
        else:
            self._q[:] = np.asarray(q, dtype=np.float64).reshape(4)
        return self

    def copy_to(self, q) -> "Quat":
        for i in range(4):
            q[i] = float(self._q[i])
        return self

    def xyzw(self, x: float, y: float, z: float, w: float) -> "Quat":
        self._q[0] = x
        self._q[1] = y
        self._q[2] = z
        self._q[3] = w
        return self

    def copy_obj(self, o) -> "Quat":
        """Copy from any object exposing ``x``, ``y``, ``z`` and ``w``."""
        return self.xyzw(o.x, o.y, o.z, o.w)

    # =========================================================================
    # GETTERS
    # =========================================================================

    @property
    def x(self) -> float:
        return float(self._q[0])

    @property
    def y(self) -> float:
        return float(self._q[1])

    @property
    def z(self) -> float:
        return float(self._q[2])

    @property
    def w(self) -> float:
        return float(self._q[3])

    @property
    def length_sqr(self) -> float:
        return float(np.dot(self._q, self._q))

    @property
    def length(self) -> float:
        return math.sqrt(self.length_sqr)

    def clone(self) -> "Quat":
        return Quat(self)

    def is_close(self, q: QuatLike, tol: float = 1e-6) -> bool:
        """Component-wise comparison (q and -q are treated as different)."""
        return bool(np.allclose(self._q, np.asarray(q, dtype=np.float64), atol=tol))

    def is_same_rotation(self, q: QuatLike, tol: float = 1e-6) -> bool:
        """True when both quaternions describe the same rotation (sign agnostic)."""
        other = np.asarray(q, dtype=np.float64)
        return abs(abs(float(np.dot(self._q, other))) - 1.0) < tol

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def mul(self, q: QuatLike) -> "Quat":
        """this = this * q"""
        self._q[:] = _mul_components(*self._q, *_quat_components(q))
        return self

    def pmul(self, q: QuatLike) -> "Quat":
        """this = q * this"""
        self._q[:] = _mul_components(*_quat_components(q), *self._q)
        return self

    def norm(self) -> "Quat":
        length = self.length_sqr
        if length > 0:
            self._q /= math.sqrt(length)
        return self

    def invert(self) -> "Quat":
        if self.length_sqr == 0:
            logger.warning("Zero length quaternion, cannot invert")
        self._q[:] = _invert_components(*self._q)
        return self

    def negate(self) -> "Quat":
        self._q *= -1.0
        return self

    def dot_negate(self, chk: QuatLike) -> "Quat":
        """Flip sign when this points away from ``chk`` (same rotation, shorter path)."""
        if float(np.dot(self._q, _quat_components(chk))) < 0:
            self._q *= -1.0
        return self

    # =========================================================================
    # SPECIAL OPERATORS
    # =========================================================================

    def pmul_invert(self, q: QuatLike) -> "Quat":
        """
        this = inverse(q) * this, without building the inverse separately.

        Used to bring a world rotation into a parent's local space.
        """
        inv = _invert_components(*_quat_components(q))
        self._q[:] = _mul_components(*inv, *self._q)
        return self

    def pmul_axis_angle(self, axis: VecLike, rad: float) -> "Quat":
        """Pre-multiply by a rotation of ``rad`` around a unit ``axis``."""
        a = _components(axis)
        half = rad * 0.5
        s = math.sin(half)
        self._q[:] = _mul_components(a[0] * s, a[1] * s, a[2] * s, math.cos(half), *self._q)
        return self

    def pmul_swing(self, a: VecLike, b: VecLike) -> "Quat":
        """Pre-multiply by the shortest rotation from unit vector ``a`` to ``b``."""
        av = _components(a)
        dot = Vec3.dot(av, b)

        if dot < SWING_OPPOSITE:
            tmp = Vec3().from_cross((-1.0, 0.0, 0.0), av)
            if tmp.len < SWING_AXIS_EPSILON:
                tmp.from_cross((0.0, 1.0, 0.0), av)
            return self.pmul_axis_angle(tmp.norm(), math.pi)
        if dot > SWING_PARALLEL:
            return self

        swing = Quat().from_swing(av, b)
        swing.dot_negate(self)
        self._q[:] = _mul_components(*swing._q, *self._q)
        return self

    # =========================================================================
    # FROM OPS
    # =========================================================================

    def from_mul(self, a: QuatLike, b: QuatLike) -> "Quat":
        self._q[:] = _mul_components(*_quat_components(a), *_quat_components(b))
        return self

    def from_invert(self, q: QuatLike) -> "Quat":
        self._q[:] = _invert_components(*_quat_components(q))
        return self

    def from_axis_angle(self, axis: VecLike, rad: float) -> "Quat":
        """Axis must be normalized, angle in radians."""
        a = _components(axis)
        half = rad * 0.5
        s = math.sin(half)
        self._q[:] = (a[0] * s, a[1] * s, a[2] * s, math.cos(half))
        return self

    def from_swing(self, a: VecLike, b: VecLike) -> "Quat":
        """
        Shortest swing rotation from unit vector ``a`` to unit vector ``b``.

        Uses the half-angle form (cross, 1 + dot) so no trig call is needed.
        Opposite vectors produce a 180 degree turn around an axis perpendicular
        to ``a`` (X cross a, falling back to Y cross a).
        """
        av = _components(a)
        dot = Vec3.dot(av, b)

        if dot < SWING_OPPOSITE:
            tmp = Vec3().from_cross((-1.0, 0.0, 0.0), av)
            if tmp.len < SWING_AXIS_EPSILON:
                tmp.from_cross((0.0, 1.0, 0.0), av)
            self.from_axis_angle(tmp.norm(), math.pi)
        elif dot > SWING_PARALLEL:
            self.identity()
        else:
            v = Vec3.cross_of(av, b)
            self._q[:] = (v[0], v[1], v[2], 1.0 + dot)
            self.norm()

        return self

    def from_look(self, fwd: VecLike, up: VecLike = (0.0, 1.0, 0.0)) -> "Quat":
        """Rotation whose forward (Z) axis points along ``fwd``."""
        x_axis, y_axis, z_axis = Vec3.look(fwd, up)
        return self.from_axes(x_axis, y_axis, z_axis)

    def from_axes(self, x_axis: VecLike, y_axis: VecLike, z_axis: VecLike) -> "Quat":
        """Rotation from three orthonormal basis vectors."""
        m00, m01, m02 = _components(x_axis)
        m10, m11, m12 = _components(y_axis)
        m20, m21, m22 = _components(z_axis)

        t = m00 + m11 + m22

        if t > 0.0:
            s = math.sqrt(t + 1.0)
            w = s * 0.5
            s = 0.5 / s
            x = (m12 - m21) * s
            y = (m20 - m02) * s
            z = (m01 - m10) * s
        elif m00 >= m11 and m00 >= m22:
            s = math.sqrt(1.0 + m00 - m11 - m22)
            x = 0.5 * s
            s = 0.5 / s
            y = (m01 + m10) * s
            z = (m02 + m20) * s
            w = (m12 - m21) * s
        elif m11 > m22:
            s = math.sqrt(1.0 + m11 - m00 - m22)
            y = 0.5 * s
            s = 0.5 / s
            x = (m10 + m01) * s
            z = (m21 + m12) * s
            w = (m20 - m02) * s
        else:
            s = math.sqrt(1.0 + m22 - m00 - m11)
            z = 0.5 * s
            s = 0.5 / s
            x = (m20 + m02) * s
            y = (m21 + m12) * s
            w = (m01 - m10) * s

        return self.xyzw(x, y, z, w)

    # =========================================================================
    # ROTATIONS
    # =========================================================================

    def rot_x(self, rad: float) -> "Quat":
        """Post-multiply by a rotation around the local X axis."""
        rad *= 0.5
        ax, ay, az, aw = self._q
        bx = math.sin(rad)
        bw = math.cos(rad)

        self._q[:] = (ax * bw + aw * bx, ay * bw + az * bx, az * bw - ay * bx, aw * bw - ax * bx)
        return self

    def rot_y(self, rad: float) -> "Quat":
        rad *= 0.5
        ax, ay, az, aw = self._q
        by = math.sin(rad)
        bw = math.cos(rad)

        self._q[:] = (ax * bw - az * by, ay * bw + aw * by, az * bw + ax * by, aw * bw - ay * by)
        return self

    def rot_z(self, rad: float) -> "Quat":
        rad *= 0.5
        ax, ay, az, aw = self._q
        bz = math.sin(rad)
        bw = math.cos(rad)

        self._q[:] = (ax * bw + ay * bz, ay * bw - ax * bz, az * bw + aw * bz, aw * bw - az * bz)
        return self

    # =========================================================================
    # CONVERT
    # =========================================================================

    def from_mat3(self, m: Union[np.ndarray, Sequence[float]]) -> "Quat":
        """
        Set from a 3x3 rotation matrix.

        Accepts a (3, 3) array in column-vector convention (columns are the
        rotated basis axes) or a flat length 9 column-major sequence. Uses
        Shoemake's trace method, branching on the largest diagonal entry when
        the trace is small.
        """
        m = np.asarray(m, dtype=np.float64)
        if m.shape == (3, 3):
            m = m.T.reshape(9)
        else:
            m = m.reshape(9)

        trace = m[0] + m[4] + m[8]

        if trace > 0.0:
            root = math.sqrt(trace + 1.0)  # 2w
            self._q[3] = 0.5 * root
            root = 0.5 / root  # 1/(4w)
            self._q[0] = (m[5] - m[7]) * root
            self._q[1] = (m[6] - m[2]) * root
            self._q[2] = (m[1] - m[3]) * root
        else:
            i = 0
            if m[4] > m[0]:
                i = 1
            if m[8] > m[i * 3 + i]:
                i = 2

            j = (i + 1) % 3
            k = (i + 2) % 3

            root = math.sqrt(m[i * 3 + i] - m[j * 3 + j] - m[k * 3 + k] + 1.0)
            self._q[i] = 0.5 * root
            root = 0.5 / root
            self._q[3] = (m[j * 3 + k] - m[k * 3 + j]) * root
            self._q[j] = (m[j * 3 + i] + m[i * 3 + j]) * root
            self._q[k] = (m[k * 3 + i] + m[i * 3 + k]) * root

        return self

    def to_mat3(self) -> np.ndarray:
        """(3, 3) rotation matrix, column-vector convention."""
        x, y, z, w = self._q
        xx, yy, zz = x * x, y * y, z * z
        xy, xz, yz = x * y, x * z, y * z
        wx, wy, wz = w * x, w * y, w * z

        return np.array([
            [1 - 2 * (yy + zz), 2 * (xy - wz), 2 * (xz + wy)],
            [2 * (xy + wz), 1 - 2 * (xx + zz), 2 * (yz - wx)],
            [2 * (xz - wy), 2 * (yz + wx), 1 - 2 * (xx + yy)],
        ], dtype=np.float64)


def _quat_components(q: QuatLike) -> Tuple[float, float, float, float]:
    if isinstance(q, Quat):
        x, y, z, w = q._q
    else:
        x, y, z, w = np.asarray(q, dtype=np.float64).reshape(4)
    return float(x), float(y), float(z), float(w)
