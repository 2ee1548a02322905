"""
Transform - position / rotation / non-uniform scale triple.

Parent-child composition (``parent ∘ child``):
    position = parent.position + parent.rotation * (parent.scale ⊙ child.position)
    scale    = parent.scale ⊙ child.scale
    rotation = parent.rotation * child.rotation

``mul`` composes a child onto the receiver (receiver is the parent),
``pmul`` composes a parent onto the receiver (receiver is the child); walking a
joint up to the root with ``pmul`` gives the same world transform as the
top-down pass with ``from_mul``.

Composition is exact (associative) when every parent in the chain carries a
uniform scale. A non-uniform parent scale combined with a rotated child is
approximated without shear, as any TRS representation must.

Inverting a transform with a zero scale component yields inf/nan scale on
purpose: a zero-scale joint cannot be animated and the bad value must stay
visible.
"""

from typing import Optional

import numpy as np

from .quat import Quat, QuatLike
from .vec3 import Vec3, VecLike, _components


class Transform:
    """Local or world space transform of a joint."""

    __slots__ = ("rotation", "position", "scale")

    def __init__(
        self,
        rotation: Optional[object] = None,
        position: Optional[VecLike] = None,
        scale: Optional[VecLike] = None,
    ):
        self.rotation = Quat()
        self.position = Vec3()
        self.scale = Vec3(1.0, 1.0, 1.0)

        if isinstance(rotation, Transform):
            self.copy(rotation)
        else:
            self.set(rotation, position, scale)

    def __repr__(self) -> str:
        return f"Transform(rotation={self.rotation}, position={self.position}, scale={self.scale})"

    # =========================================================================
    # SETTERS / GETTERS
    # =========================================================================

    def copy(self, t: "Transform") -> "Transform":
        self.rotation.copy(t.rotation)
        self.position.copy(t.position)
        self.scale.copy(t.scale)
        return self

    def set(
        self,
        rotation: Optional[QuatLike] = None,
        position: Optional[VecLike] = None,
        scale: Optional[VecLike] = None,
    ) -> "Transform":
        """Overwrite any of the three parts; ``None`` leaves a part untouched."""
        if rotation is not None:
            self.rotation.copy(rotation)
        if position is not None:
            self.position.copy(position)
        if scale is not None:
            self.scale.copy(scale)
        return self

    def identity(self) -> "Transform":
        self.rotation.identity()
        self.position.zero()
        self.scale.xyz(1.0, 1.0, 1.0)
        return self

    def clone(self) -> "Transform":
        return Transform(self)

    def is_close(self, t: "Transform", tol: float = 1e-5) -> bool:
        """Compare positions and scales, and rotations up to sign."""
        return (
            self.position.is_close(t.position, tol)
            and self.scale.is_close(t.scale, tol)
            and self.rotation.is_same_rotation(t.rotation, tol)
        )

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def mul(self, child: "Transform") -> "Transform":
        """this = this ∘ child"""
        return self.from_mul(self.clone(), child)

    def pmul(self, parent: "Transform") -> "Transform":
        """this = parent ∘ this (accumulate a parent while walking to the root)."""
        self.position.mul(parent.scale).transform_quat(parent.rotation).add(parent.position)
        self.scale.mul(parent.scale)
        self.rotation.pmul(parent.rotation)
        return self

    def invert(self) -> "Transform":
        return self.from_invert(self.clone())

    # =========================================================================
    # FROM OPERATORS
    # =========================================================================

    def from_mul(self, parent: "Transform", child: "Transform") -> "Transform":
        """
        Combine a parent's world transform with a child's local transform.

        Args:
            parent: Transform of the parent
            child: Transform of the child, relative to the parent

        Returns:
            self, holding ``parent ∘ child``
        """
        p = Vec3(parent.scale).mul(child.position).transform_quat(parent.rotation)
        self.position.from_add(parent.position, p)
        self.scale.copy(_components(parent.scale) * _components(child.scale))
        self.rotation.from_mul(parent.rotation, child.rotation)
        return self

    def from_invert(self, t: "Transform") -> "Transform":
        """Set to the inverse of ``t`` such that ``t ∘ inverse`` is identity."""
        with np.errstate(divide="ignore", invalid="ignore"):
            inv_scale = 1.0 / _components(t.scale)

        self.rotation.from_invert(t.rotation)
        self.scale.copy(inv_scale)

        # invScale ⊙ (invRot * -pos)
        self.position.copy(t.position).negate().transform_quat(self.rotation).mul(inv_scale)
        return self

    # =========================================================================
    # TRANSFORMATION
    # =========================================================================

    def transform_vec3(self, v: VecLike, out: Optional[Vec3] = None) -> Vec3:
        """Local point to the space this transform lives in: rot * (scale ⊙ v) + pos."""
        out = out if out is not None else Vec3()
        return out.copy(v).mul(self.scale).transform_quat(self.rotation).add(self.position)

    def transform_vec3_rev(self, v: VecLike, out: Optional[Vec3] = None) -> Vec3:
        """
        Apply an already inverted transform to a world point: scale ⊙ (rot * (v + pos)).

        The receiver must hold the inverted rotation, the reciprocal scale and
        the negated position of the space to enter. ``to_local_pos`` does the
        same from a regular transform.
        """
        out = out if out is not None else Vec3()
        return out.copy(v).add(self.position).transform_quat(self.rotation).mul(self.scale)

    def transform_direction(self, v: VecLike, out: Optional[Vec3] = None) -> Vec3:
        """Rotate and scale a direction; translation is ignored."""
        out = out if out is not None else Vec3()
        return out.copy(v).mul(self.scale).transform_quat(self.rotation)

    def to_local_pos(self, world_pos: VecLike, out: Optional[Vec3] = None) -> Vec3:
        """World point into this transform's local space."""
        out = out if out is not None else Vec3()
        inv_rot = Quat().from_invert(self.rotation)
        with np.errstate(divide="ignore", invalid="ignore"):
            inv_scale = 1.0 / _components(self.scale)

        return out.copy(world_pos).sub(self.position).transform_quat(inv_rot).mul(inv_scale)

    def to_local_rot(self, world_rot: QuatLike, out: Optional[Quat] = None) -> Quat:
        """World rotation into this transform's local space."""
        out = out if out is not None else Quat()
        return out.copy(world_rot).pmul_invert(self.rotation)

    # =========================================================================
    # STATIC
    # =========================================================================

    @staticmethod
    def combine(parent: "Transform", child: "Transform") -> "Transform":
        """New transform holding ``parent ∘ child``."""
        return Transform().from_mul(parent, child)

    @staticmethod
    def local_from_world(child_world: "Transform", parent_world: "Transform") -> "Transform":
        """
        Local transform that places ``child_world`` under ``parent_world``.

        Satisfies ``combine(parent_world, local) == child_world``.
        """
        local = Transform()
        parent_world.to_local_pos(child_world.position, local.position)
        parent_world.to_local_rot(child_world.rotation, local.rotation)
        with np.errstate(divide="ignore", invalid="ignore"):
            local.scale.copy(_components(child_world.scale) / _components(parent_world.scale))
        return local
