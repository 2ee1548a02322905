"""
Chain corrections - additive rotations applied on top of a retargeted pose.

Both operators rotate only the first joint of a chain. The rotation is built
in world space, applied to the joint's current world rotation and brought
back into the parent's local space:

    local = inverse(parent_world) * delta * joint_world

A zero angle is a no-op that skips every transform computation.
"""

import math
from typing import Any, Dict, Iterable, List, Optional, Union

from rigretarget.algebra import Quat, Transform, Vec3
from rigretarget.core import get_logger
from .chain_config import ChainLink, ChainTable

logger = get_logger("retarget.additive")

TWIST_AXIS_EPSILON = 1e-8


def _resolve_chain(pose, chains: ChainTable, chain_name: str, op_name: str) -> Optional[List[ChainLink]]:
    if pose is None:
        logger.error(f"{op_name}: missing working pose")
        return None

    chain = chains.get(chain_name) if chains is not None else None
    if not chain:
        logger.error(f"{op_name}: chain '{chain_name}' not found")
        return None

    return chain


def _write_world_delta(pose, link: ChainLink, parent: Transform, current: Transform,
                       axis: Vec3, angle: float) -> None:
    rot = (
        Quat()
        .from_axis_angle(axis, angle)  # World space rotation
        .mul(current.rotation)         # Applied to the joint
        .pmul_invert(parent.rotation)  # Back to local space
    )
    pose.set_rot(link.idx, rot)


class AxisAdditive:
    """Rotate a chain's first joint around one of its own current axes."""

    SUPPORTED_AXES = ("y",)

    def __init__(self, chain_name: str, axis: str = "y", angle: float = 0.0):
        self.chain_name = chain_name
        self.axis = axis
        self.angle = angle

    def __repr__(self) -> str:
        return f"AxisAdditive({self.chain_name!r}, axis={self.axis!r}, angle={self.angle:.4f})"

    def apply(self, pose, chains: ChainTable) -> bool:
        """
        Apply the correction to ``pose``.

        Args:
            pose: Working pose, edited in place
            chains: Chain table of the rig the pose belongs to

        Returns:
            True if a rotation was written
        """
        if self.angle == 0:
            return False

        chain = _resolve_chain(pose, chains, self.chain_name, "AxisAdditive")
        if chain is None:
            return False

        link = chain[0]
        parent = pose.get_world(link.pidx)
        current = Transform().from_mul(parent, pose.joints[link.idx].local)

        if self.axis != "y":
            logger.error(f"AxisAdditive: axis not implemented '{self.axis}'")
            return False
        axis = Vec3().from_quat(current.rotation, link.twist)

        _write_world_delta(pose, link, parent, current, axis, self.angle)
        return True


class ChainTwistAdditive:
    """Twist a chain's first joint around the line from chain start to chain end."""

    def __init__(self, chain_name: str, angle: float = 0.0):
        self.chain_name = chain_name
        self.angle = angle

    def __repr__(self) -> str:
        return f"ChainTwistAdditive({self.chain_name!r}, angle={self.angle:.4f})"

    def apply(self, pose, chains: ChainTable) -> bool:
        if self.angle == 0:
            return False

        chain = _resolve_chain(pose, chains, self.chain_name, "ChainTwistAdditive")
        if chain is None:
            return False

        first = chain[0]
        last = chain[-1]

        parent = pose.get_world(first.pidx)
        start = Transform().from_mul(parent, pose.joints[first.idx].local)
        end = pose.get_world(last.idx)

        axis = Vec3().from_sub(end.position, start.position)
        if axis.len_sqr < TWIST_AXIS_EPSILON:
            logger.debug(f"ChainTwistAdditive: chain '{self.chain_name}' has no length, skipping")
            return False
        axis.norm()

        _write_world_delta(pose, first, parent, start, axis, self.angle)
        return True


ChainOperator = Union[AxisAdditive, ChainTwistAdditive]


def corrections_from_config(entries: Optional[Iterable[Dict[str, Any]]]) -> List[ChainOperator]:
    """
    Build chain operators from config records.

    Record format::

        {type: axis | twist, chain: armL, angle_deg: 15}   # or angle: <radians>
        {type: axis, chain: legR, axis: y, angle: 0.2}

    Invalid records are logged and skipped.
    """
    ops: List[ChainOperator] = []

    for entry in entries or []:
        op_type = str(entry.get("type", "")).lower()
        chain = entry.get("chain")
        if not chain:
            logger.error(f"Correction without chain name: {entry}")
            continue

        if "angle_deg" in entry:
            angle = math.radians(float(entry["angle_deg"]))
        else:
            angle = float(entry.get("angle", 0.0))

        if op_type == "axis":
            ops.append(AxisAdditive(chain, axis=str(entry.get("axis", "y")).lower(), angle=angle))
        elif op_type == "twist":
            ops.append(ChainTwistAdditive(chain, angle=angle))
        else:
            logger.error(f"Unknown correction type '{op_type}' for chain '{chain}'")

    return ops


def apply_corrections(pose, chains: ChainTable, ops: Iterable[ChainOperator]) -> int:
    """Apply operators in order; returns how many wrote a rotation."""
    applied = 0
    for op in ops:
        if op.apply(pose, chains):
            applied += 1
    logger.debug(f"Applied {applied} chain corrections")
    return applied
