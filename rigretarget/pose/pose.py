"""
Pose - detached, mutable snapshot of a skeleton.

A pose is built from a live skeleton, edited freely (chain corrections,
resets) and pushed back with ``write_back``. The live skeleton is never
touched in between, so the displayed rig cannot be corrupted by a half
finished edit.

World transforms are derived data. Read them either through
``update_world_all`` followed by ``joint.world``, or through ``get_world``
which walks a single joint up to the root; both give the same result.

A pose is meant to be edited by one caller at a time. Give concurrent tasks
their own ``clone()``.
"""

from typing import Dict, List, Optional, Union

from rigretarget.algebra import Transform
from rigretarget.core import get_logger
from .joint import Joint

logger = get_logger("pose")


class Pose:
    """Joint hierarchy snapshot with local transforms and cached world transforms."""

    def __init__(self, skeleton=None):
        self.src_pose: Optional["Pose"] = None
        self.name_idx: Dict[str, int] = {}
        self.joints: List[Joint] = []
        self.root_offset = Transform()  # Absolute root transform
        self.pose_offset = Transform()  # Skeleton's ancestor transform at snapshot time

        if skeleton is not None:
            self.from_skeleton(skeleton)

    def __len__(self) -> int:
        return len(self.joints)

    # =========================================================================
    # GETTERS / SETTERS
    # =========================================================================

    def get_joint(self, key: Union[int, str]) -> Optional[Joint]:
        """
        Get a joint by index or name.

        Args:
            key: Joint index or joint name

        Returns:
            Joint, or None when the index or name is unknown
        """
        if isinstance(key, str):
            idx = self.name_idx.get(key)
            return self.joints[idx] if idx is not None else None

        if 0 <= key < len(self.joints):
            return self.joints[key]
        return None

    def clone(self) -> "Pose":
        p = Pose()
        p.root_offset.copy(self.root_offset)
        p.pose_offset.copy(self.pose_offset)
        p.joints = [j.clone() for j in self.joints]
        p.src_pose = self
        p.name_idx = self.name_idx  # Shared, never changes after construction
        return p

    def from_skeleton(self, skeleton) -> "Pose":
        """
        Snapshot a live skeleton.

        Joint order matches ``skeleton.bones`` exactly; ``write_back`` relies
        on it. A bone whose parent is not an earlier bone becomes a root.
        """
        self.name_idx = {}
        self.joints = []

        for i, bone in enumerate(skeleton.bones):
            joint = Joint().from_bone(bone)
            joint.index = i
            self.name_idx[joint.name] = i

            parent = getattr(bone, "parent", None)
            if parent is not None:
                pidx = self.name_idx.get(parent.name)
                if pidx is None:
                    logger.warning(f"Parent '{parent.name}' of '{joint.name}' not found before it, treating as root")
                else:
                    joint.pindex = pidx
                    self.joints[pidx].children.append(i)

            self.joints.append(joint)

        offset = getattr(skeleton, "world_offset", None)
        if offset is not None:
            self.pose_offset.copy(offset)
        else:
            self.pose_offset.identity()

        logger.debug(f"Pose created with {len(self.joints)} joints")
        self.update_world_all()
        return self

    def reset(self) -> bool:
        """Copy every local transform back from the source pose."""
        if self.src_pose is None:
            logger.error("Pose.reset: no source pose available for resetting")
            return False

        for joint, src in zip(self.joints, self.src_pose.joints):
            joint.local.copy(src.local)
        return True

    def write_back(self, skeleton) -> None:
        """Push every local transform onto the live skeleton, by index."""
        if len(skeleton.bones) != len(self.joints):
            logger.warning(
                f"Skeleton has {len(skeleton.bones)} bones, pose has {len(self.joints)} joints"
            )

        for joint, bone in zip(self.joints, skeleton.bones):
            bone.position[:] = joint.local.position.to_array()
            bone.quaternion[:] = joint.local.rotation.to_array()
            bone.scale[:] = joint.local.scale.to_array()

    def set_rot(self, i: int, rot) -> "Pose":
        self.joints[i].local.rotation.copy(rot)
        return self

    def set_pos(self, i: int, pos) -> "Pose":
        self.joints[i].local.position.copy(pos)
        return self

    def set_scl(self, i: int, scl) -> "Pose":
        self.joints[i].local.scale.copy(scl)
        return self

    def set_scalar(self, i: int, s: float) -> "Pose":
        self.joints[i].local.scale.xyz(s, s, s)
        return self

    # =========================================================================
    # COMPUTE
    # =========================================================================

    def update_world_all(self) -> "Pose":
        """Recompute every cached world transform top-down. Idempotent."""
        for joint in self.joints:
            if joint.pindex != -1:
                joint.world.from_mul(self.joints[joint.pindex].world, joint.local)
            else:
                joint.world.from_mul(self.root_offset, self.pose_offset).mul(joint.local)
        return self

    def get_world(self, joint_idx: int, out: Optional[Transform] = None) -> Transform:
        """
        World transform of one joint, walking parent links to the root.

        Args:
            joint_idx: Joint index, or -1 for the pose's own root space
            out: Optional transform to write into

        Returns:
            World transform (identity-initialized ``out`` if the joint is unknown)
        """
        out = out if out is not None else Transform()

        if joint_idx == -1:
            return out.from_mul(self.root_offset, self.pose_offset)

        joint = self.get_joint(joint_idx)
        if joint is None:
            logger.error(f"Pose.get_world: joint not found {joint_idx}")
            return out

        # Compose parent-first, in the same order as update_world_all
        path = [joint]
        while joint.pindex != -1:
            joint = self.joints[joint.pindex]
            path.append(joint)

        out.from_mul(self.root_offset, self.pose_offset)
        for joint in reversed(path):
            out.mul(joint.local)
        return out
