"""
Live skeleton view.

A ``Skeleton`` is the ordered, index-stable joint list a ``Pose`` snapshots
and writes back to. Rendering runtimes keep their own bone objects; anything
exposing the same attributes (``bones`` with ``name``, ``parent``,
``position``, ``quaternion``, ``scale``, plus ``world_offset``) works too.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from rigretarget.algebra import Transform
from rigretarget.core import get_logger

logger = get_logger("pose.skeleton")


def _vec(values: Optional[Iterable[float]], default: Iterable[float], size: int) -> np.ndarray:
    if values is None:
        values = default
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.shape != (size,):
        raise ValueError(f"Expected {size} components, got {arr.shape}")
    return arr


@dataclass(eq=False)
class Bone:
    """A single joint of a live skeleton."""
    name: str
    parent: Optional["Bone"] = None
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    quaternion: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0]))  # x, y, z, w
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    def __post_init__(self):
        self.position = _vec(self.position, (0.0, 0.0, 0.0), 3)
        self.quaternion = _vec(self.quaternion, (0.0, 0.0, 0.0, 1.0), 4)
        self.scale = _vec(self.scale, (1.0, 1.0, 1.0), 3)

    @property
    def parent_name(self) -> Optional[str]:
        return self.parent.name if self.parent is not None else None


@dataclass
class Skeleton:
    """Ordered bone list plus the transform of whatever the skeleton is nested under."""
    bones: List[Bone] = field(default_factory=list)
    world_offset: Transform = field(default_factory=Transform)

    def __len__(self) -> int:
        return len(self.bones)

    def bone_names(self) -> List[str]:
        return [b.name for b in self.bones]

    def get_bone(self, name: str) -> Optional[Bone]:
        for bone in self.bones:
            if bone.name == name:
                return bone
        return None

    def parent_map(self) -> Dict[str, Optional[str]]:
        """Bone name -> parent bone name (None for roots), in bone order."""
        return {b.name: b.parent_name for b in self.bones}

    @classmethod
    def from_records(
        cls,
        records: Iterable[Dict[str, Any]],
        world_offset: Optional[Transform] = None,
    ) -> "Skeleton":
        """
        Build a skeleton from plain records.

        Each record needs ``name`` and may carry ``parent`` (a bone name),
        ``position``, ``rotation`` (x, y, z, w) and ``scale``. Parents may be
        listed after their children; unknown parents make the bone a root.

        Args:
            records: Iterable of bone dictionaries, in skeleton order
            world_offset: Transform the skeleton is nested under

        Returns:
            Skeleton with bones in record order
        """
        records = list(records)
        bones: List[Bone] = []
        by_name: Dict[str, Bone] = {}

        for rec in records:
            bone = Bone(
                name=str(rec["name"]),
                position=rec.get("position"),
                quaternion=rec.get("rotation"),
                scale=rec.get("scale"),
            )
            bones.append(bone)
            by_name[bone.name] = bone

        for rec, bone in zip(records, bones):
            parent_name = rec.get("parent")
            if parent_name is None:
                continue
            parent = by_name.get(parent_name)
            if parent is None:
                logger.warning(f"Bone '{bone.name}' references unknown parent '{parent_name}', treating as root")
                continue
            bone.parent = parent

        skeleton = cls(bones=bones)
        if world_offset is not None:
            skeleton.world_offset.copy(world_offset)
        return skeleton

    def to_records(self) -> List[Dict[str, Any]]:
        """Inverse of ``from_records``; plain lists so the result is YAML friendly."""
        return [
            {
                "name": b.name,
                "parent": b.parent_name,
                "position": [float(v) for v in b.position],
                "rotation": [float(v) for v in b.quaternion],
                "scale": [float(v) for v in b.scale],
            }
            for b in self.bones
        ]
