"""Joint - one node of a Pose snapshot."""

from dataclasses import dataclass, field
from typing import List

from rigretarget.algebra import Transform


@dataclass(eq=False)
class Joint:
    """
    A joint owned by a Pose.

    ``local`` is authoritative. ``world`` is a cache that is only valid right
    after ``Pose.update_world_all``.
    """
    name: str = ""
    index: int = -1
    pindex: int = -1  # -1 = root
    children: List[int] = field(default_factory=list)
    local: Transform = field(default_factory=Transform)
    world: Transform = field(default_factory=Transform)

    @property
    def is_root(self) -> bool:
        return self.pindex == -1

    def from_bone(self, bone) -> "Joint":
        """Copy name and local transform from a live skeleton bone."""
        self.name = bone.name
        self.local.set(bone.quaternion, bone.position, bone.scale)
        return self

    def clone(self) -> "Joint":
        return Joint(
            name=self.name,
            index=self.index,
            pindex=self.pindex,
            children=list(self.children),
            local=self.local.clone(),
            world=self.world.clone(),
        )
