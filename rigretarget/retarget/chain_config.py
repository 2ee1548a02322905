"""
Human chain configuration.

A chain is a named, ordered run of joints (an arm from upper arm to hand, a
finger from base to tip). Chain operators address joints through a chain
table built once per rig, never through name lookups at apply time.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from rigretarget.algebra import Vec3
from rigretarget.core import get_logger

logger = get_logger("retarget.chains")


ChainConfig = Dict[str, List[str]]


@dataclass
class ChainLink:
    """One joint of a resolved chain."""
    name: str
    idx: int
    pidx: int
    twist: Vec3 = field(default_factory=lambda: Vec3(0.0, 1.0, 0.0))  # Local bone axis


ChainTable = Dict[str, List[ChainLink]]


class HumanChainConfig:
    """Chain name -> joint names for the known humanoid rigs."""

    # Canonical source rig (deform joints of the reference skeleton)
    REFERENCE_CHAINS: Dict[str, List[str]] = {
        "pelvis": ["DEF-hips"],
        "spine": ["DEF-spine001", "DEF-spine002", "DEF-spine003"],
        "head": ["DEF-neck", "DEF-head"],
        "armL": ["DEF-upper_armL", "DEF-forearmL", "DEF-handL"],
        "armR": ["DEF-upper_armR", "DEF-forearmR", "DEF-handR"],
        "legL": ["DEF-thighL", "DEF-shinL", "DEF-footL"],
        "legR": ["DEF-thighR", "DEF-shinR", "DEF-footR"],
        "fingersThumbL": ["DEF-thumb01L", "DEF-thumb02L", "DEF-thumb03L", "DEF-thumb04_tipL"],
        "fingersThumbR": ["DEF-thumb01R", "DEF-thumb02R", "DEF-thumb03R", "DEF-thumb04_tipR"],
        "fingersIndexL": ["DEF-f_index01L", "DEF-f_index02L", "DEF-f_index03L", "DEF-f_index04_tipL"],
        "fingersIndexR": ["DEF-f_index01R", "DEF-f_index02R", "DEF-f_index03R", "DEF-f_index04_tipR"],
        "fingersMiddleL": ["DEF-f_middle01L", "DEF-f_middle02L", "DEF-f_middle03L", "DEF-f_middle04_tipL"],
        "fingersMiddleR": ["DEF-f_middle01R", "DEF-f_middle02R", "DEF-f_middle03R", "DEF-f_middle04_tipR"],
        "fingersRingL": ["DEF-f_ring01L", "DEF-f_ring02L", "DEF-f_ring03L", "DEF-f_ring04_tipL"],
        "fingersRingR": ["DEF-f_ring01R", "DEF-f_ring02R", "DEF-f_ring03R", "DEF-f_ring04_tipR"],
        "fingersPinkyL": ["DEF-f_pinky01L", "DEF-f_pinky02L", "DEF-f_pinky03L", "DEF-f_pinky04_tipL"],
        "fingersPinkyR": ["DEF-f_pinky01R", "DEF-f_pinky02R", "DEF-f_pinky03R", "DEF-f_pinky04_tipR"],
    }

    MIXAMO_CHAINS: Dict[str, List[str]] = {
        "pelvis": ["mixamorigHips"],
        "spine": ["mixamorigSpine", "mixamorigSpine1", "mixamorigSpine2"],
        "head": ["mixamorigNeck", "mixamorigHead"],
        "armL": ["mixamorigLeftArm", "mixamorigLeftForeArm", "mixamorigLeftHand"],
        "armR": ["mixamorigRightArm", "mixamorigRightForeArm", "mixamorigRightHand"],
        "legL": ["mixamorigLeftUpLeg", "mixamorigLeftLeg", "mixamorigLeftFoot"],
        "legR": ["mixamorigRightUpLeg", "mixamorigRightLeg", "mixamorigRightFoot"],
        "fingersThumbL": ["mixamorigLeftHandThumb1", "mixamorigLeftHandThumb2", "mixamorigLeftHandThumb3", "mixamorigLeftHandThumb4"],
        "fingersThumbR": ["mixamorigRightHandThumb1", "mixamorigRightHandThumb2", "mixamorigRightHandThumb3", "mixamorigRightHandThumb4"],
        "fingersIndexL": ["mixamorigLeftHandIndex1", "mixamorigLeftHandIndex2", "mixamorigLeftHandIndex3", "mixamorigLeftHandIndex4"],
        "fingersIndexR": ["mixamorigRightHandIndex1", "mixamorigRightHandIndex2", "mixamorigRightHandIndex3", "mixamorigRightHandIndex4"],
        "fingersMiddleL": ["mixamorigLeftHandMiddle1", "mixamorigLeftHandMiddle2", "mixamorigLeftHandMiddle3", "mixamorigLeftHandMiddle4"],
        "fingersMiddleR": ["mixamorigRightHandMiddle1", "mixamorigRightHandMiddle2", "mixamorigRightHandMiddle3", "mixamorigRightHandMiddle4"],
        "fingersRingL": ["mixamorigLeftHandRing1", "mixamorigLeftHandRing2", "mixamorigLeftHandRing3", "mixamorigLeftHandRing4"],
        "fingersRingR": ["mixamorigRightHandRing1", "mixamorigRightHandRing2", "mixamorigRightHandRing3", "mixamorigRightHandRing4"],
        "fingersPinkyL": ["mixamorigLeftHandPinky1", "mixamorigLeftHandPinky2", "mixamorigLeftHandPinky3", "mixamorigLeftHandPinky4"],
        "fingersPinkyR": ["mixamorigRightHandPinky1", "mixamorigRightHandPinky2", "mixamorigRightHandPinky3", "mixamorigRightHandPinky4"],
    }

    PRESETS = {
        "reference": REFERENCE_CHAINS,
        "mixamo": MIXAMO_CHAINS,
    }

    @classmethod
    def get_preset(cls, name: str) -> ChainConfig:
        """Copy of a named preset; unknown names give an empty config."""
        preset = cls.PRESETS.get(name)
        if preset is None:
            logger.error(f"Unknown chain preset '{name}'")
            return {}
        return {chain: list(joints) for chain, joints in preset.items()}

    @staticmethod
    def target_config_from_mapping(
        source_config: Mapping[str, List[str]],
        mapping: Mapping[str, str],
    ) -> ChainConfig:
        """
        Derive a target rig's chains from a bone mapping.

        Swaps every source joint name for the target joint mapped onto it.
        Unmapped joints are dropped; chains left empty are removed.

        Args:
            source_config: Chains of the source rig
            mapping: Target bone name -> source bone name (auto-mapper output)

        Returns:
            Chain config using target bone names
        """
        source_to_target: Dict[str, str] = {}
        for target_name, source_name in mapping.items():
            source_to_target.setdefault(source_name, target_name)

        target_config: ChainConfig = {}
        for chain_name, joint_names in source_config.items():
            names = [source_to_target[n] for n in joint_names if n in source_to_target]
            if names:
                target_config[chain_name] = names
            else:
                logger.debug(f"Chain '{chain_name}' has no mapped joints")

        return target_config


def build_chain_table(pose, chain_config: Mapping[str, List[str]]) -> ChainTable:
    """
    Resolve chain joint names against a pose, once per rig.

    Args:
        pose: Pose whose joint indices the table should address
        chain_config: Chain name -> ordered joint names

    Returns:
        Chain name -> ordered ChainLinks; missing joints are skipped
    """
    table: ChainTable = {}

    for chain_name, joint_names in chain_config.items():
        links: List[ChainLink] = []
        for joint_name in joint_names:
            joint = pose.get_joint(joint_name)
            if joint is None:
                logger.warning(f"Chain '{chain_name}': joint '{joint_name}' not in pose")
                continue
            links.append(ChainLink(name=joint.name, idx=joint.index, pidx=joint.pindex))

        if links:
            table[chain_name] = links

    logger.debug(f"Chain table built with {len(table)} chains")
    return table
