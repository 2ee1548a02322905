"""
BoneAutoMapper - best-effort bone correspondence between two rigs.

Source is the reference rig the animations are authored on; target is an
imported rig whose naming convention is not known in advance. The result
maps target bone names to source bone names. Partial and empty results are
valid; deciding whether enough bones mapped is up to the caller.
"""

from typing import Dict, List, Mapping, Optional, Union

from rigretarget.core import get_logger
from .bone_metadata import (
    BoneCategory,
    BoneMetadata,
    create_all_bone_metadata,
    filter_category,
)
from .category_mapper import BoneCategoryMapper
from .direct_mappers import (
    MixamoMapper,
    ReferenceRigMapper,
    TargetBoneMappingType,
    detect_mapping_type,
)

logger = get_logger("automap")

ParentMap = Dict[str, Optional[str]]

# Matched in this order; earlier categories keep their entries
CATEGORY_ORDER = [
    (BoneCategory.TORSO, BoneCategoryMapper.map_torso_bones),
    (BoneCategory.ARMS, BoneCategoryMapper.map_arm_bones),
    (BoneCategory.HANDS, BoneCategoryMapper.map_hand_bones),
    (BoneCategory.LEGS, BoneCategoryMapper.map_leg_bones),
    (BoneCategory.WINGS, BoneCategoryMapper.map_wing_bones),
    (BoneCategory.TAIL, BoneCategoryMapper.map_tail_bones),
    (BoneCategory.UNKNOWN, BoneCategoryMapper.map_unknown_bones),
]


class BoneAutoMapper:
    """Automatic bone mapping between a source and a target rig."""

    @classmethod
    def auto_map_bones(
        cls,
        source,
        target,
        mapping_type: Optional[Union[TargetBoneMappingType, str]] = None,
    ) -> Dict[str, str]:
        """
        Suggest a bone mapping.

        Args:
            source: Reference rig (Skeleton, Pose, name -> parent map or bone names)
            target: Imported rig, same accepted forms
            mapping_type: Force a strategy; detected from bone names when None

        Returns:
            Target bone name -> source bone name
        """
        source_parent_map = cls.extract_bone_parent_map(source)
        target_parent_map = cls.extract_bone_parent_map(target)

        if not source_parent_map or not target_parent_map:
            logger.info("Auto-mapping skipped: empty skeleton")
            return {}

        source_meta = create_all_bone_metadata(source_parent_map)
        target_meta = create_all_bone_metadata(target_parent_map)

        if mapping_type is None:
            mapping_type = detect_mapping_type(list(source_parent_map), list(target_parent_map))
        else:
            mapping_type = TargetBoneMappingType(mapping_type)
        logger.debug(f"Target mapping type: {mapping_type.value}")

        if mapping_type == TargetBoneMappingType.REFERENCE:
            return ReferenceRigMapper.map_reference_bones(source_meta, target_meta)

        if mapping_type == TargetBoneMappingType.MIXAMO:
            logger.info("Target skeleton is a Mixamo rig, using direct name mapping")
            return MixamoMapper.map_mixamo_bones(source_meta, target_meta)

        mappings = cls.map_by_category(source_meta, target_meta)
        logger.info(f"Auto-mapped {len(mappings)} of {len(target_meta)} target bones")
        return mappings

    @staticmethod
    def map_by_category(source_meta: List[BoneMetadata],
                        target_meta: List[BoneMetadata]) -> Dict[str, str]:
        mappings: Dict[str, str] = {}

        for category, matcher in CATEGORY_ORDER:
            source_bones = filter_category(source_meta, category)
            target_bones = filter_category(target_meta, category)
            if not source_bones or not target_bones:
                continue

            partial = matcher(source_bones, target_bones)
            for target_name, source_name in partial.items():
                mappings.setdefault(target_name, source_name)

            logger.debug(f"{category.value}: {len(partial)} of {len(target_bones)} bones mapped")

        return mappings

    @staticmethod
    def extract_bone_parent_map(skeleton) -> ParentMap:
        """
        Bone name -> parent bone name (None for roots), in skeleton order.

        Accepts a Skeleton-like object with ``parent_map()``, a Pose, a
        name -> parent mapping, or an iterable of bone names. Duplicate names
        keep their first occurrence.
        """
        if skeleton is None:
            return {}

        if hasattr(skeleton, "parent_map"):
            return dict(skeleton.parent_map())

        if hasattr(skeleton, "joints"):
            joints = skeleton.joints
            parent_map: ParentMap = {}
            for joint in joints:
                if joint.name in parent_map:
                    continue
                parent_map[joint.name] = joints[joint.pindex].name if joint.pindex != -1 else None
            return parent_map

        if isinstance(skeleton, Mapping):
            return dict(skeleton)

        parent_map = {}
        for name in skeleton:
            parent_map.setdefault(str(name), None)
        return parent_map


def auto_map_bones(source, target, mapping_type=None) -> Dict[str, str]:
    return BoneAutoMapper.auto_map_bones(source, target, mapping_type)
