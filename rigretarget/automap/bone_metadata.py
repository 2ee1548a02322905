"""Bone name analysis for automatic bone mapping.

Every bone gets a category, a side and a normalized name, derived from
its own name only. The keyword, side and synonym tables below are plain
ordered data consulted top to bottom; the functions are the only place
that knows how to walk them.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from rigretarget.core import get_logger

logger = get_logger("automap.metadata")


class BoneCategory(str, Enum):
    """Anatomical area a bone belongs to."""
    TORSO = "torso"
    ARMS = "arms"
    HANDS = "hands"
    LEGS = "legs"
    WINGS = "wings"
    TAIL = "tail"
    UNKNOWN = "unknown"


class BoneSide(str, Enum):
    """Side of the body a bone belongs to."""
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    UNKNOWN = "unknown"


@dataclass
class BoneMetadata:
    """Everything the matchers need to know about one bone."""
    name: str                       # Original bone name
    normalized_name: str            # Comparable form of the name
    side: BoneSide
    category: BoneCategory
    parent_name: Optional[str] = None  # None for root bones


# =============================================================================
# TABLES
# =============================================================================

# Tested in this order, first containing keyword wins. A name matching two
# categories goes to the earlier one ("HandArmature" is arms, not hands).
CATEGORY_KEYWORDS: List[Tuple[BoneCategory, Tuple[str, ...]]] = [
    (BoneCategory.TORSO, ("spine", "chest", "neck", "head", "hips", "pelvis", "root",
                          "cog", "center", "torso", "back", "ribcage")),
    (BoneCategory.ARMS, ("shoulder", "arm", "elbow", "wrist", "clavicle", "scapula",
                         "upperarm", "forearm")),
    (BoneCategory.HANDS, ("hand", "finger", "thumb", "index", "middle", "ring", "pinky",
                          "palm", "knuckle", "metacarpal", "phalanx")),
    (BoneCategory.LEGS, ("leg", "thigh", "knee", "ankle", "foot", "toe", "heel", "hip",
                         "upperleg", "lowerleg", "shin", "calf")),
    (BoneCategory.WINGS, ("wing", "feather", "pinion")),
    (BoneCategory.TAIL, ("tail",)),
]

# Whole prefix/suffix tokens, checked before the looser rules
SIDE_ANCHORS: List[Tuple[BoneSide, Tuple[re.Pattern, ...]]] = [
    (BoneSide.LEFT, tuple(re.compile(p) for p in (r"left$", r"^left", r"^l_", r"_l$"))),
    (BoneSide.RIGHT, tuple(re.compile(p) for p in (r"right$", r"^right", r"^r_", r"_r$"))),
]

SIDE_SUBSTRINGS: List[Tuple[BoneSide, str]] = [
    (BoneSide.LEFT, "left"),
    (BoneSide.RIGHT, "right"),
]

# Blender style "armL" / "legR"
SIDE_LAST_CHAR: Dict[str, BoneSide] = {
    "l": BoneSide.LEFT,
    "r": BoneSide.RIGHT,
}

SIDE_TOKENS = frozenset(("left", "right", "l", "r"))

RULE_CATEGORY = "category"
RULE_ANCHOR = "anchor"
RULE_SUBSTRING = "substring"
RULE_LAST_CHAR = "last_char"
RULE_NONE = "none"

CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
SEPARATORS = re.compile(r"[-.\s:]")

# Rig-engine and exporter prefixes, stripped repeatedly ("armature_def_spine")
ENGINE_PREFIX = re.compile(r"^(mixamorig\d*|armature|rig|bone|jnt|joint|def|bip\d*|cc_base)_+")

GLUED_SIDE = re.compile(r"^(left|right)|(left|right)$")
INNER_LEADING_ZEROS = re.compile(r"(?<=[a-z])0+(?=\d)")
NUMERIC_SUFFIX = re.compile(r"_?0*(\d+)$")

FINGER_NAMES = ("thumb", "index", "middle", "ring", "pinky")

# Category specific folding of naming variations onto one canonical token
CATEGORY_SYNONYMS: Dict[BoneCategory, List[Tuple[re.Pattern, str]]] = {
    BoneCategory.TORSO: [
        (re.compile(r"pelvis"), "hips"),
    ],
    BoneCategory.ARMS: [
        (re.compile(r"upper_?arm|up_?arm"), "upperarm"),
        (re.compile(r"lower_?arm|low_?arm|fore_?arm"), "forearm"),
        (re.compile(r"^arm$"), "upperarm"),  # Mixamo/Unity "LeftArm"
    ],
    BoneCategory.HANDS: [
        (re.compile(r"little"), "pinky"),
        (re.compile(r"^hand_(?=(thumb|index|middle|ring|pinky))"), ""),
        (re.compile(r"^(f|finger)_"), ""),
        (re.compile(r"_?tip$"), ""),
    ],
    BoneCategory.LEGS: [
        (re.compile(r"upper_?leg|up_?leg|thigh"), "thigh"),
        (re.compile(r"lower_?leg|low_?leg|shin|calf"), "calf"),
        (re.compile(r"^leg$"), "calf"),  # Mixamo/Unity "LeftLeg"
        (re.compile(r"toe_?base"), "toe"),
    ],
}


# =============================================================================
# ANALYSIS
# =============================================================================

def categorize_bone(bone_name: str) -> BoneCategory:
    """Category of the first keyword list containing a match."""
    lowered = bone_name.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return BoneCategory.UNKNOWN


def detect_side(bone_name: str, category: BoneCategory) -> Tuple[BoneSide, str]:
    """Side of a bone plus the rule that decided it."""
    if category == BoneCategory.TORSO:
        return BoneSide.CENTER, RULE_CATEGORY

    lowered = bone_name.lower()

    for side, patterns in SIDE_ANCHORS:
        if any(p.search(lowered) for p in patterns):
            return side, RULE_ANCHOR

    for side, token in SIDE_SUBSTRINGS:
        if token in lowered:
            return side, RULE_SUBSTRING

    if lowered:
        side = SIDE_LAST_CHAR.get(lowered[-1])
        if side is not None:
            return side, RULE_LAST_CHAR

    return BoneSide.UNKNOWN, RULE_NONE


def determine_bone_side(bone_name: str, category: BoneCategory) -> BoneSide:
    """
    Determine which side of the body a bone belongs to.

    Torso bones are always center. Otherwise the rules run from strict to
    loose: anchored left/right tokens, then "left"/"right" anywhere, then a
    trailing l/r character. A looser rule never overrides a stricter one.
    """
    return detect_side(bone_name, category)[0]


def _strip_side(name: str, rule: str) -> str:
    tokens = name.split("_")
    kept = [t for t in tokens if t not in SIDE_TOKENS]
    stripped = len(kept) != len(tokens)
    name = "_".join(kept)

    unglued = GLUED_SIDE.sub("", name)
    if unglued != name:
        stripped = True
        name = unglued

    if not stripped:
        if rule == RULE_SUBSTRING:
            name = re.sub(r"left|right", "", name, count=1)
        elif rule == RULE_LAST_CHAR:
            name = name[:-1]

    return name


def _cleanup(name: str) -> str:
    name = re.sub(r"__+", "_", name)
    return name.strip("_")


def normalize_bone_name(bone_name: str, category: BoneCategory, side: BoneSide,
                        side_rule: Optional[str] = None) -> str:
    """
    Normalize a bone name for comparison.

    Steps, in order:
        1. Split camelCase into underscore separated tokens
        2. Lowercase; '-', '.', ':' and whitespace become '_'
        3. Strip known rig-engine prefixes
        4. Strip the side marker when the side is known
        5. Collapse numeric suffixes ("01", "001", "_1" -> "1")
        6. Fold category specific synonyms
        7. Collapse repeated underscores

    Args:
        bone_name: Raw bone name
        category: Category from categorize_bone
        side: Side from determine_bone_side
        side_rule: Rule that decided the side; re-detected when omitted

    Returns:
        Normalized name; "LeftUpperArm" and "RightUpperArm" both give "upperarm"
    """
    normalized = CAMEL_BOUNDARY.sub("_", bone_name)
    normalized = SEPARATORS.sub("_", normalized.lower())
    normalized = _cleanup(normalized)

    while True:
        stripped = ENGINE_PREFIX.sub("", normalized, count=1)
        if stripped == normalized or not stripped:
            break
        normalized = stripped

    if side in (BoneSide.LEFT, BoneSide.RIGHT):
        if side_rule is None:
            side_rule = detect_side(bone_name, category)[1]
        normalized = _cleanup(_strip_side(normalized, side_rule))

    normalized = INNER_LEADING_ZEROS.sub("", normalized)
    normalized = NUMERIC_SUFFIX.sub(r"\1", normalized)

    for pattern, replacement in CATEGORY_SYNONYMS.get(category, []):
        normalized = pattern.sub(replacement, normalized)

    return _cleanup(normalized)


def create_bone_metadata(bone_name: str, parent_name: Optional[str] = None) -> BoneMetadata:
    category = categorize_bone(bone_name)
    side, rule = detect_side(bone_name, category)
    return BoneMetadata(
        name=bone_name,
        normalized_name=normalize_bone_name(bone_name, category, side, rule),
        side=side,
        category=category,
        parent_name=parent_name,
    )


def create_all_bone_metadata(parent_map: Mapping[str, Optional[str]]) -> List[BoneMetadata]:
    """Metadata for every bone of a name -> parent-name map, in map order."""
    metadata = [create_bone_metadata(name, parent) for name, parent in parent_map.items()]
    for meta in metadata:
        logger.debug(
            f"{meta.name}: {meta.category.value}/{meta.side.value} -> '{meta.normalized_name}'"
        )
    return metadata


def filter_category(bones: Iterable[BoneMetadata], category: BoneCategory) -> List[BoneMetadata]:
    return [b for b in bones if b.category == category]
