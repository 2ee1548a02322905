"""
Vec3 - Mutable 3 component vector.

Every operator mutates the receiver and returns it so calls can be chained.
The ``from_*`` family computes a fresh value from its arguments without
reading the receiver's previous components.

Degenerate input (zero length, parallel axes) never raises: normalizing a
zero vector leaves it unchanged.
"""

import math
from typing import Iterable, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .quat import Quat


VecLike = Union["Vec3", np.ndarray, Iterable[float]]


class Vec3:
    """Three component float vector backed by a numpy array."""

    __slots__ = ("_v",)

    def __init__(
        self,
        x: Union[float, VecLike, None] = None,
        y: Optional[float] = None,
        z: Optional[float] = None,
    ):
        self._v = np.zeros(3, dtype=np.float64)

        if x is None:
            return
        if y is not None and z is not None:
            self._v[0] = x
            self._v[1] = y
            self._v[2] = z
        else:
            self.copy(x)

    # =========================================================================
    # CONTAINER PROTOCOL
    # =========================================================================

    def __getitem__(self, i):
        return float(self._v[i]) if isinstance(i, int) else self._v[i]

    def __setitem__(self, i, value) -> None:
        self._v[i] = value

    def __len__(self) -> int:
        return 3

    def __iter__(self):
        return (float(c) for c in self._v)

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._v.copy()
        return self._v.astype(dtype)

    def __repr__(self) -> str:
        return f"Vec3({self._v[0]:.6g}, {self._v[1]:.6g}, {self._v[2]:.6g})"

    def to_array(self) -> np.ndarray:
        """Copy of the components as a numpy array."""
        return self._v.copy()

    def to_tuple(self) -> Tuple[float, float, float]:
        return (float(self._v[0]), float(self._v[1]), float(self._v[2]))

    # =========================================================================
    # SETTERS
    # =========================================================================

    def zero(self) -> "Vec3":
        self._v[:] = 0.0
        return self

    def copy(self, v: VecLike) -> "Vec3":
        self._v[:] = _components(v)
        return self

    def copy_to(self, v) -> "Vec3":
        """Write this vector's components into ``v`` (Vec3 or mutable sequence)."""
        v[0] = float(self._v[0])
        v[1] = float(self._v[1])
        v[2] = float(self._v[2])
        return self

    def xyz(self, x: float, y: float, z: float) -> "Vec3":
        self._v[0] = x
        self._v[1] = y
        self._v[2] = z
        return self

    def copy_obj(self, o) -> "Vec3":
        """Copy from any object exposing ``x``, ``y`` and ``z`` attributes."""
        self._v[0] = o.x
        self._v[1] = o.y
        self._v[2] = o.z
        return self

    @property
    def x(self) -> float:
        return float(self._v[0])

    @x.setter
    def x(self, value: float) -> None:
        self._v[0] = value

    @property
    def y(self) -> float:
        return float(self._v[1])

    @y.setter
    def y(self, value: float) -> None:
        self._v[1] = value

    @property
    def z(self) -> float:
        return float(self._v[2])

    @z.setter
    def z(self, value: float) -> None:
        self._v[2] = value

    # =========================================================================
    # GETTERS
    # =========================================================================

    @property
    def len(self) -> float:
        return math.sqrt(self.len_sqr)

    @property
    def len_sqr(self) -> float:
        v = self._v
        return float(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])

    def clone(self) -> "Vec3":
        return Vec3(self)

    def is_close(self, v: VecLike, tol: float = 1e-6) -> bool:
        return bool(np.allclose(self._v, _components(v), atol=tol))

    # =========================================================================
    # FROM OPS
    # =========================================================================

    def from_add(self, a: VecLike, b: VecLike) -> "Vec3":
        self._v[:] = _components(a) + _components(b)
        return self

    def from_sub(self, a: VecLike, b: VecLike) -> "Vec3":
        self._v[:] = _components(a) - _components(b)
        return self

    def from_scale(self, v: VecLike, scalar: float) -> "Vec3":
        """Set to ``v`` scaled by ``scalar`` (1.0 is 100%)."""
        self._v[:] = _components(v) * scalar
        return self

    def from_scale_then_add(self, scalar: float, a: VecLike, b: VecLike) -> "Vec3":
        self._v[:] = _components(a) * scalar + _components(b)
        return self

    def from_norm(self, v: VecLike) -> "Vec3":
        c = _components(v)
        mag = math.sqrt(float(c[0] * c[0] + c[1] * c[1] + c[2] * c[2]))
        if mag == 0:
            return self

        self._v[:] = c / mag
        return self

    def from_cross(self, a: VecLike, b: VecLike) -> "Vec3":
        ax, ay, az = _components(a)
        bx, by, bz = _components(b)

        self._v[0] = ay * bz - az * by
        self._v[1] = az * bx - ax * bz
        self._v[2] = ax * by - ay * bx
        return self

    def from_quat(self, q: "Quat", v: Optional[VecLike] = None) -> "Vec3":
        """Set to ``v`` rotated by ``q``. ``v`` defaults to forward (0, 0, 1)."""
        if v is None:
            v = (0.0, 0.0, 1.0)
        self._v[:] = _components(v)
        return self.transform_quat(q)

    def from_lerp(self, a: VecLike, b: VecLike, t: float) -> "Vec3":
        self._v[:] = _components(a) * (1.0 - t) + _components(b) * t
        return self

    def from_plane_snap(
        self,
        pnt: Optional[VecLike],
        plane_norm: VecLike,
        plane_pos: VecLike = (0.0, 0.0, 0.0),
    ) -> "Vec3":
        """Project a point onto a plane. ``None`` projects this vector."""
        p = self._v.copy() if pnt is None else _components(pnt)
        n = _components(plane_norm)
        dot = float(np.dot(p - _components(plane_pos), n))

        self._v[:] = p - n * dot
        return self

    # =========================================================================
    # OPERATORS
    # =========================================================================

    def add(self, v: VecLike) -> "Vec3":
        self._v += _components(v)
        return self

    def sub(self, v: VecLike) -> "Vec3":
        self._v -= _components(v)
        return self

    def mul(self, v: VecLike) -> "Vec3":
        """Component-wise multiply."""
        self._v *= _components(v)
        return self

    def scale(self, scalar: float) -> "Vec3":
        self._v *= scalar
        return self

    def inv_scale(self, scalar: float) -> "Vec3":
        self._v /= scalar
        return self

    def scale_then_add(self, scalar: float, v: VecLike) -> "Vec3":
        self._v += _components(v) * scalar
        return self

    def cross(self, b: VecLike) -> "Vec3":
        return self.from_cross(self._v.copy(), b)

    def norm(self) -> "Vec3":
        mag = self.len
        if mag != 0:
            self._v /= mag
        return self

    def negate(self) -> "Vec3":
        self._v *= -1.0
        return self

    def transform_quat(self, q: "Quat") -> "Vec3":
        """Rotate this vector by a quaternion (x, y, z, w)."""
        qx, qy, qz, qw = q[0], q[1], q[2], q[3]
        vx, vy, vz = self._v

        x1 = qy * vz - qz * vy
        y1 = qz * vx - qx * vz
        z1 = qx * vy - qy * vx

        x2 = qw * x1 + qy * z1 - qz * y1
        y2 = qw * y1 + qz * x1 - qx * z1
        z2 = qw * z1 + qx * y1 - qy * x1

        self._v[0] = vx + 2 * x2
        self._v[1] = vy + 2 * y2
        self._v[2] = vz + 2 * z2
        return self

    def axis_angle(self, axis: VecLike, rad: float) -> "Vec3":
        """Rotate around a unit axis using Rodrigues' formula."""
        a = _components(axis)
        v = self._v.copy()
        cp = np.array(Vec3().from_cross(a, v))
        dot = float(np.dot(a, v))
        s = math.sin(rad)
        c = math.cos(rad)

        self._v[:] = v * c + cp * s + a * dot * (1.0 - c)
        return self

    # =========================================================================
    # STATIC OPS
    # =========================================================================

    @staticmethod
    def length(a: VecLike) -> float:
        return float(np.linalg.norm(_components(a)))

    @staticmethod
    def length_sqr(a: VecLike) -> float:
        c = _components(a)
        return float(np.dot(c, c))

    @staticmethod
    def dist(a: VecLike, b: VecLike) -> float:
        return float(np.linalg.norm(_components(a) - _components(b)))

    @staticmethod
    def dist_sqr(a: VecLike, b: VecLike) -> float:
        d = _components(a) - _components(b)
        return float(np.dot(d, d))

    @staticmethod
    def dot(a: VecLike, b: VecLike) -> float:
        return float(np.dot(_components(a), _components(b)))

    @staticmethod
    def cross_of(a: VecLike, b: VecLike, out: Optional["Vec3"] = None) -> "Vec3":
        out = out if out is not None else Vec3()
        return out.from_cross(a, b)

    @staticmethod
    def angle(a: VecLike, b: VecLike) -> float:
        """Angle between two vectors, atan2 form (stable near 0 and pi)."""
        d = Vec3.dot(a, b)
        c = Vec3.cross_of(a, b)
        return math.atan2(c.len, d)

    @staticmethod
    def look(fwd: VecLike, up: VecLike = (0.0, 1.0, 0.0)) -> Tuple["Vec3", "Vec3", "Vec3"]:
        """Orthonormal (right, up, forward) basis looking along ``fwd``."""
        up_v = _components(up)
        z_axis = Vec3(fwd).norm()
        x_axis = Vec3().from_cross(up_v, z_axis).norm()

        # Forward and up are parallel, nudge forward off the up axis
        if x_axis.len_sqr == 0:
            if abs(up_v[2]) == 1:
                z_axis[0] += 0.0001
            else:
                z_axis[2] += 0.0001

            z_axis.norm()
            x_axis.from_cross(up_v, z_axis).norm()

        y_axis = Vec3().from_cross(z_axis, x_axis).norm()
        return x_axis, y_axis, z_axis


def _components(v: VecLike) -> np.ndarray:
    """Return the 3 components of a vector-like value as a float64 array."""
    if isinstance(v, Vec3):
        return v._v.copy()
    return np.asarray(v, dtype=np.float64).reshape(3).copy()
