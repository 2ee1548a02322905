"""Vector, quaternion and transform algebra"""

from .vec3 import Vec3
from .quat import Quat
from .transform import Transform

__all__ = ["Vec3", "Quat", "Transform"]
