"""Shared rig builders for the test suite."""

import sys
import os
import math

# Add the project root to sys.path
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
sys.path.insert(0, project_root)

from rigretarget.algebra import Quat, Transform
from rigretarget.pose import Skeleton


def quat_list(axis, angle):
    return list(Quat().from_axis_angle(axis, angle))


def build_arm_skeleton(world_offset=None):
    """
    Small humanoid-ish rig, three hierarchy levels deep:

        DEF-hips
        ├── DEF-spine001
        │   └── DEF-upper_armL
        │       └── DEF-forearmL
        │           └── DEF-handL
        └── DEF-thighL
    """
    records = [
        {"name": "DEF-hips", "position": [0, 1, 0], "rotation": quat_list((0, 1, 0), 0.2)},
        {"name": "DEF-spine001", "parent": "DEF-hips", "position": [0, 0.3, 0],
         "rotation": quat_list((1, 0, 0), 0.1)},
        {"name": "DEF-upper_armL", "parent": "DEF-spine001", "position": [0.2, 0.4, 0],
         "rotation": quat_list((0, 0, 1), -math.pi / 2), "scale": [1.5, 1.5, 1.5]},
        {"name": "DEF-forearmL", "parent": "DEF-upper_armL", "position": [0, 0.3, 0],
         "rotation": quat_list((1, 0, 0), 0.4)},
        {"name": "DEF-handL", "parent": "DEF-forearmL", "position": [0, 0.25, 0],
         "scale": [1.0, 0.8, 1.2]},
        {"name": "DEF-thighL", "parent": "DEF-hips", "position": [0.1, -0.05, 0],
         "rotation": quat_list((0, 0, 1), math.pi)},
    ]
    if world_offset is None:
        world_offset = Transform(Quat().from_axis_angle((0, 1, 0), 0.5), (2, 0, -1), (2, 2, 2))
    return Skeleton.from_records(records, world_offset=world_offset)


def build_stretched_skeleton():
    """
    Four-bone chain whose root is scaled non-uniformly and whose
    descendants are rotated, so the scale has to be applied before
    the child rotations when composing world transforms.

        root (scale 1, 2, 3)
        └── upper (rot z 0.7)
            └── lower (rot x 0.3)
                └── tip
    """
    records = [
        {"name": "root", "position": [0, 1, 0], "scale": [1.0, 2.0, 3.0]},
        {"name": "upper", "parent": "root", "position": [0, 1, 0],
         "rotation": quat_list((0, 0, 1), 0.7)},
        {"name": "lower", "parent": "upper", "position": [1, 0, 0],
         "rotation": quat_list((1, 0, 0), 0.3)},
        {"name": "tip", "parent": "lower", "position": [0, 1, 0]},
    ]
    return Skeleton.from_records(records)
