"""Direct mappers for rigs whose naming convention is known up front."""

from enum import Enum
from typing import Dict, Iterable, Sequence

from rigretarget.core import get_logger
from .bone_metadata import BoneMetadata

logger = get_logger("automap.direct")


class TargetBoneMappingType(str, Enum):
    """How a target rig should be mapped."""
    REFERENCE = "reference"  # Same rig as the source
    MIXAMO = "mixamo"
    CUSTOM = "custom"        # Unknown convention, heuristic matching


class ReferenceRigMapper:
    """Target rig that carries every bone of the reference rig."""

    @staticmethod
    def is_source_same_as_target(source_names: Sequence[str], target_names: Iterable[str]) -> bool:
        target = set(target_names)
        return bool(source_names) and all(name in target for name in source_names)

    @staticmethod
    def map_reference_bones(source_bones: Sequence[BoneMetadata],
                            target_bones: Sequence[BoneMetadata]) -> Dict[str, str]:
        target_names = {b.name for b in target_bones}
        mappings = {b.name: b.name for b in source_bones if b.name in target_names}
        logger.info(f"Reference rig mapping complete: {len(mappings)} bones mapped")
        return mappings


def _finger_bone_map() -> Dict[str, str]:
    """Finger entries; both rigs number four joints per finger, the last a tip."""
    fingers = (("thumb", "Thumb"), ("f_index", "Index"), ("f_middle", "Middle"),
               ("f_ring", "Ring"), ("f_pinky", "Pinky"))
    bone_map = {}
    for side, mixamo_side in (("L", "Left"), ("R", "Right")):
        for prefix, finger in fingers:
            for n in range(1, 4):
                bone_map[f"DEF-{prefix}0{n}{side}"] = f"mixamorig{mixamo_side}Hand{finger}{n}"
            bone_map[f"DEF-{prefix}04_tip{side}"] = f"mixamorig{mixamo_side}Hand{finger}4"
    return bone_map


class MixamoMapper:
    """Direct name mapping for Mixamo rigs (``mixamorig`` prefixed bones)."""

    SIGNATURE = "mixamorig"

    # Reference bone name -> Mixamo bone name, namespace separator removed
    BONE_MAP: Dict[str, str] = {
        # Torso
        "DEF-hips": "mixamorigHips",
        "DEF-spine001": "mixamorigSpine",
        "DEF-spine002": "mixamorigSpine1",
        "DEF-spine003": "mixamorigSpine2",
        "DEF-neck": "mixamorigNeck",
        "DEF-head": "mixamorigHead",
        "DEF-headtip": "mixamorigHeadTop_End",

        # Left Arm
        "DEF-shoulderL": "mixamorigLeftShoulder",
        "DEF-upper_armL": "mixamorigLeftArm",
        "DEF-forearmL": "mixamorigLeftForeArm",
        "DEF-handL": "mixamorigLeftHand",

        # Right Arm
        "DEF-shoulderR": "mixamorigRightShoulder",
        "DEF-upper_armR": "mixamorigRightArm",
        "DEF-forearmR": "mixamorigRightForeArm",
        "DEF-handR": "mixamorigRightHand",

        # Left Leg
        "DEF-thighL": "mixamorigLeftUpLeg",
        "DEF-shinL": "mixamorigLeftLeg",
        "DEF-footL": "mixamorigLeftFoot",
        "DEF-toeL": "mixamorigLeftToeBase",
        "DEF-toe_tipL": "mixamorigLeftToe_End",

        # Right Leg
        "DEF-thighR": "mixamorigRightUpLeg",
        "DEF-shinR": "mixamorigRightLeg",
        "DEF-footR": "mixamorigRightFoot",
        "DEF-toeR": "mixamorigRightToeBase",
        "DEF-toe_tipR": "mixamorigRightToe_End",
        **_finger_bone_map(),
    }

    @classmethod
    def is_target_valid_skeleton(cls, bone_names: Iterable[str]) -> bool:
        """True if any bone name contains ``mixamorig`` (case-insensitive)."""
        return any(cls.SIGNATURE in name.lower() for name in bone_names)

    @classmethod
    def map_mixamo_bones(cls, source_bones: Sequence[BoneMetadata],
                         target_bones: Sequence[BoneMetadata]) -> Dict[str, str]:
        """
        Map reference bones onto a Mixamo rig.

        Args:
            source_bones: Reference rig bones
            target_bones: Mixamo rig bones, with or without the ':' namespace

        Returns:
            Target bone name -> source bone name
        """
        targets = {b.name.replace(":", ""): b.name for b in target_bones}
        mappings: Dict[str, str] = {}

        for source in source_bones:
            expected = cls.BONE_MAP.get(source.name)
            if expected is None:
                continue
            target_name = targets.get(expected)
            if target_name is not None:
                mappings[target_name] = source.name
                logger.debug(f"Mapped: {target_name} -> {source.name}")

        logger.info(f"Mixamo mapping complete: {len(mappings)} bones mapped")
        return mappings


def detect_mapping_type(source_names: Sequence[str], target_names: Sequence[str]) -> TargetBoneMappingType:
    """Pick the mapping strategy for a target rig from its bone names."""
    if ReferenceRigMapper.is_source_same_as_target(source_names, target_names):
        return TargetBoneMappingType.REFERENCE
    if MixamoMapper.is_target_valid_skeleton(target_names):
        return TargetBoneMappingType.MIXAMO
    return TargetBoneMappingType.CUSTOM

