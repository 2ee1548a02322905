"""Per-category bone matchers.

Each matcher takes the source and target bones of one category and returns
a partial ``target name -> source name`` map. Matching is by normalized
name and side; a bone with no acceptable partner stays unmapped.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from rigretarget.core import get_logger
from .bone_metadata import FINGER_NAMES, BoneMetadata, BoneSide

logger = get_logger("automap.category")

BoneMapping = Dict[str, str]


def _compact(name: str) -> str:
    return name.replace("_", "")


class _SourcePool:
    """Source bones of one category, each handed out at most once."""

    def __init__(self, source_bones: Sequence[BoneMetadata]):
        self.bones = list(source_bones)
        self.used = set()
        self._exact: Dict[Tuple[str, BoneSide], List[int]] = {}
        self._compact: Dict[Tuple[str, BoneSide], List[int]] = {}

        for i, bone in enumerate(self.bones):
            self._exact.setdefault((bone.normalized_name, bone.side), []).append(i)
            self._compact.setdefault((_compact(bone.normalized_name), bone.side), []).append(i)

    def _take(self, candidates: Optional[List[int]]) -> Optional[BoneMetadata]:
        for i in candidates or []:
            if i not in self.used:
                self.used.add(i)
                return self.bones[i]
        return None

    def take_exact(self, target: BoneMetadata) -> Optional[BoneMetadata]:
        return self._take(self._exact.get((target.normalized_name, target.side)))

    def take_compact(self, target: BoneMetadata) -> Optional[BoneMetadata]:
        return self._take(self._compact.get((_compact(target.normalized_name), target.side)))

    def unused(self) -> List[Tuple[int, BoneMetadata]]:
        return [(i, b) for i, b in enumerate(self.bones) if i not in self.used]


def _map_by_name(source_bones: Sequence[BoneMetadata],
                 target_bones: Sequence[BoneMetadata],
                 compact: bool = True) -> Tuple[BoneMapping, _SourcePool, List[BoneMetadata]]:
    """
    Exact matching pass shared by every category.

    Returns:
        (mappings, source pool, target bones left unmatched)
    """
    pool = _SourcePool(source_bones)
    mappings: BoneMapping = {}
    unmatched: List[BoneMetadata] = []

    # Exact normalized names first, so a compact-form match can never steal
    # a bone another target matches exactly
    pending = []
    for target in target_bones:
        source = pool.take_exact(target)
        if source is not None:
            mappings[target.name] = source.name
        else:
            pending.append(target)

    for target in pending:
        source = pool.take_compact(target) if compact else None
        if source is not None:
            mappings[target.name] = source.name
        else:
            unmatched.append(target)

    return mappings, pool, unmatched


def finger_of(bone: BoneMetadata) -> Optional[str]:
    """Finger keyword in a normalized hand bone name, if any."""
    for finger in FINGER_NAMES:
        if finger in bone.normalized_name:
            return finger
    return None


def _chain_positions(bones: Sequence[BoneMetadata]) -> Dict[str, int]:
    """Position of each finger bone along its (side, finger) chain, in bone order."""
    counters: Dict[Tuple[BoneSide, str], int] = {}
    positions: Dict[str, int] = {}
    for bone in bones:
        finger = finger_of(bone)
        if finger is None:
            continue
        key = (bone.side, finger)
        positions[bone.name] = counters.get(key, 0)
        counters[key] = positions[bone.name] + 1
    return positions


class BoneCategoryMapper:
    """Matchers for each bone category."""

    @staticmethod
    def map_torso_bones(source_bones: Sequence[BoneMetadata],
                        target_bones: Sequence[BoneMetadata]) -> BoneMapping:
        mappings, _, _ = _map_by_name(source_bones, target_bones)
        return mappings

    @staticmethod
    def map_arm_bones(source_bones: Sequence[BoneMetadata],
                      target_bones: Sequence[BoneMetadata]) -> BoneMapping:
        mappings, _, _ = _map_by_name(source_bones, target_bones)
        return mappings

    @staticmethod
    def map_hand_bones(source_bones: Sequence[BoneMetadata],
                       target_bones: Sequence[BoneMetadata]) -> BoneMapping:
        """
        Map hand bones.

        Exact normalized names first. Fingers left over are paired by side and
        finger, choosing the source bone whose position along its finger chain
        is closest to the target's.
        """
        mappings, pool, unmatched = _map_by_name(source_bones, target_bones)
        if not unmatched:
            return mappings

        source_positions = _chain_positions(source_bones)
        target_positions = _chain_positions(target_bones)

        for target in unmatched:
            finger = finger_of(target)
            if finger is None:
                continue

            best = None
            best_distance = None
            for i, source in pool.unused():
                if source.side != target.side or finger_of(source) != finger:
                    continue
                distance = abs(source_positions[source.name] - target_positions[target.name])
                if best_distance is None or distance < best_distance:
                    best, best_distance = i, distance

            if best is not None:
                pool.used.add(best)
                mappings[target.name] = pool.bones[best].name
                logger.debug(f"Finger fallback: {target.name} -> {pool.bones[best].name}")

        return mappings

    @staticmethod
    def map_leg_bones(source_bones: Sequence[BoneMetadata],
                      target_bones: Sequence[BoneMetadata]) -> BoneMapping:
        mappings, _, _ = _map_by_name(source_bones, target_bones)
        return mappings

    @staticmethod
    def map_wing_bones(source_bones: Sequence[BoneMetadata],
                       target_bones: Sequence[BoneMetadata]) -> BoneMapping:
        mappings, _, _ = _map_by_name(source_bones, target_bones)
        return mappings

    @staticmethod
    def map_tail_bones(source_bones: Sequence[BoneMetadata],
                       target_bones: Sequence[BoneMetadata]) -> BoneMapping:
        mappings, _, _ = _map_by_name(source_bones, target_bones)
        return mappings

    @staticmethod
    def map_unknown_bones(source_bones: Sequence[BoneMetadata],
                          target_bones: Sequence[BoneMetadata]) -> BoneMapping:
        """Exact normalized name and side only."""
        mappings, _, _ = _map_by_name(source_bones, target_bones, compact=False)
        return mappings
