import unittest
import numpy as np

from helpers import build_arm_skeleton
from rigretarget.pose import Bone, Skeleton


class TestSkeleton(unittest.TestCase):
    def test_from_records_resolves_parents(self):
        skel = build_arm_skeleton()
        self.assertEqual(len(skel), 6)
        self.assertIsNone(skel.get_bone("DEF-hips").parent)
        self.assertEqual(skel.get_bone("DEF-handL").parent_name, "DEF-forearmL")

    def test_parent_listed_after_child(self):
        skel = Skeleton.from_records([
            {"name": "child", "parent": "root"},
            {"name": "root"},
        ])
        self.assertIs(skel.get_bone("child").parent, skel.get_bone("root"))

    def test_unknown_parent_becomes_root(self):
        with self.assertLogs("rigretarget.pose.skeleton", level="WARNING"):
            skel = Skeleton.from_records([{"name": "orphan", "parent": "missing"}])
        self.assertIsNone(skel.bones[0].parent)

    def test_defaults(self):
        bone = Bone("b")
        np.testing.assert_allclose(bone.position, [0, 0, 0])
        np.testing.assert_allclose(bone.quaternion, [0, 0, 0, 1])
        np.testing.assert_allclose(bone.scale, [1, 1, 1])

    def test_bad_component_count(self):
        with self.assertRaises(ValueError):
            Bone("b", position=[1, 2])

    def test_parent_map_order(self):
        skel = build_arm_skeleton()
        parent_map = skel.parent_map()
        self.assertEqual(list(parent_map), skel.bone_names())
        self.assertIsNone(parent_map["DEF-hips"])
        self.assertEqual(parent_map["DEF-thighL"], "DEF-hips")

    def test_records_round_trip(self):
        skel = build_arm_skeleton()
        copy = Skeleton.from_records(skel.to_records())
        self.assertEqual(copy.parent_map(), skel.parent_map())
        for a, b in zip(copy.bones, skel.bones):
            np.testing.assert_allclose(a.position, b.position)
            np.testing.assert_allclose(a.quaternion, b.quaternion)
            np.testing.assert_allclose(a.scale, b.scale)


if __name__ == "__main__":
    unittest.main()
