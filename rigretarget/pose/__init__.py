"""Skeleton snapshot module"""

from .skeleton import Bone, Skeleton
from .joint import Joint
from .pose import Pose

__all__ = ["Bone", "Skeleton", "Joint", "Pose"]
