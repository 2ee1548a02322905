"""Automatic bone mapping between rigs with different naming conventions"""

from .bone_metadata import (
    BoneCategory,
    BoneSide,
    BoneMetadata,
    categorize_bone,
    determine_bone_side,
    normalize_bone_name,
    create_bone_metadata,
    create_all_bone_metadata,
)
from .category_mapper import BoneCategoryMapper
from .direct_mappers import (
    TargetBoneMappingType,
    ReferenceRigMapper,
    MixamoMapper,
    detect_mapping_type,
)
from .auto_mapper import BoneAutoMapper, auto_map_bones

__all__ = [
    "BoneCategory", "BoneSide", "BoneMetadata",
    "categorize_bone", "determine_bone_side", "normalize_bone_name",
    "create_bone_metadata", "create_all_bone_metadata",
    "BoneCategoryMapper",
    "TargetBoneMappingType", "ReferenceRigMapper", "MixamoMapper", "detect_mapping_type",
    "BoneAutoMapper", "auto_map_bones",
]
