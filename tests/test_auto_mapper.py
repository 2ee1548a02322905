import unittest

from helpers import build_arm_skeleton
from rigretarget.automap import (
    BoneAutoMapper,
    MixamoMapper,
    ReferenceRigMapper,
    TargetBoneMappingType,
    auto_map_bones,
    create_all_bone_metadata,
    detect_mapping_type,
)
from rigretarget.pose import Pose
from rigretarget.retarget import HumanChainConfig


def reference_bone_names():
    names = []
    for joints in HumanChainConfig.REFERENCE_CHAINS.values():
        names.extend(joints)
    return names


def mixamo_bone_names(namespace=":"):
    names = []
    for joints in HumanChainConfig.MIXAMO_CHAINS.values():
        names.extend(j.replace("mixamorig", f"mixamorig{namespace}", 1) for j in joints)
    return names


class TestAutoMapBones(unittest.TestCase):
    def test_exact_match_scenario(self):
        mappings = auto_map_bones(["Spine", "Chest", "Neck"], ["Spine", "Chest"])
        self.assertEqual(mappings, {"Spine": "Spine", "Chest": "Chest"})

    def test_unmapped_wing(self):
        source = ["Spine", "LeftUpperArm", "LeftWing1"]
        target = ["spine", "left_upper_arm"]
        mappings = auto_map_bones(source, target)

        self.assertEqual(mappings, {"spine": "Spine", "left_upper_arm": "LeftUpperArm"})
        self.assertNotIn("LeftWing1", mappings.values())

    def test_empty_inputs(self):
        self.assertEqual(auto_map_bones([], []), {})
        self.assertEqual(auto_map_bones([], ["Spine"]), {})
        self.assertEqual(auto_map_bones(["Spine"], []), {})
        self.assertEqual(auto_map_bones(None, ["Spine"]), {})

    def test_reference_rig_identity(self):
        names = reference_bone_names()
        mappings = auto_map_bones(names, names + ["extra_bone"])
        self.assertEqual(len(mappings), len(names))
        self.assertTrue(all(k == v for k, v in mappings.items()))

    def test_mixamo_direct_mapping(self):
        target = mixamo_bone_names()
        mappings = auto_map_bones(reference_bone_names(), target)

        self.assertEqual(mappings["mixamorig:Hips"], "DEF-hips")
        self.assertEqual(mappings["mixamorig:Spine2"], "DEF-spine003")
        self.assertEqual(mappings["mixamorig:LeftArm"], "DEF-upper_armL")
        self.assertEqual(mappings["mixamorig:RightUpLeg"], "DEF-thighR")
        self.assertEqual(mappings["mixamorig:LeftHandThumb4"], "DEF-thumb04_tipL")
        self.assertEqual(mappings["mixamorig:RightHandPinky2"], "DEF-f_pinky02R")
        self.assertEqual(len(mappings), len(target))

    def test_mixamo_without_namespace(self):
        target = mixamo_bone_names(namespace="")
        mappings = auto_map_bones(reference_bone_names(), target)
        self.assertEqual(mappings["mixamorigLeftForeArm"], "DEF-forearmL")

    def test_forced_custom_on_mixamo_rig(self):
        mappings = auto_map_bones(
            reference_bone_names(), mixamo_bone_names(), mapping_type="custom"
        )
        self.assertEqual(mappings["mixamorig:Hips"], "DEF-hips")
        self.assertEqual(mappings["mixamorig:LeftArm"], "DEF-upper_armL")
        self.assertEqual(mappings["mixamorig:RightForeArm"], "DEF-forearmR")
        self.assertEqual(mappings["mixamorig:LeftUpLeg"], "DEF-thighL")
        self.assertEqual(mappings["mixamorig:LeftLeg"], "DEF-shinL")
        self.assertEqual(mappings["mixamorig:LeftHandIndex1"], "DEF-f_index01L")
        self.assertEqual(mappings["mixamorig:RightHandIndex4"], "DEF-f_index04_tipR")

    def test_custom_humanoid_rig(self):
        source = reference_bone_names()
        target = [
            "Hips", "LeftUpperArm", "RightUpperArm", "LeftLowerArm", "LeftHand",
            "LeftUpperLeg", "LeftLowerLeg", "LeftFoot",
        ]
        mappings = auto_map_bones(source, target)
        self.assertEqual(mappings, {
            "Hips": "DEF-hips",
            "LeftUpperArm": "DEF-upper_armL",
            "RightUpperArm": "DEF-upper_armR",
            "LeftLowerArm": "DEF-forearmL",
            "LeftHand": "DEF-handL",
            "LeftUpperLeg": "DEF-thighL",
            "LeftLowerLeg": "DEF-shinL",
            "LeftFoot": "DEF-footL",
        })

    def test_accepts_skeleton_and_pose(self):
        skeleton = build_arm_skeleton()
        pose = Pose(build_arm_skeleton())
        mappings = BoneAutoMapper.auto_map_bones(skeleton, pose)
        self.assertEqual(mappings, {name: name for name in skeleton.bone_names()})

    def test_extract_parent_map(self):
        skeleton = build_arm_skeleton()
        from_pose = BoneAutoMapper.extract_bone_parent_map(Pose(skeleton))
        self.assertEqual(from_pose, skeleton.parent_map())

        from_dict = BoneAutoMapper.extract_bone_parent_map({"a": None, "b": "a"})
        self.assertEqual(from_dict, {"a": None, "b": "a"})

        from_names = BoneAutoMapper.extract_bone_parent_map(["a", "b", "a"])
        self.assertEqual(from_names, {"a": None, "b": None})


class TestDirectMappers(unittest.TestCase):
    def test_detect_mapping_type(self):
        self.assertEqual(detect_mapping_type(["a", "b"], ["b", "a", "c"]), TargetBoneMappingType.REFERENCE)
        self.assertEqual(detect_mapping_type(["a"], ["mixamorig:Hips"]), TargetBoneMappingType.MIXAMO)
        self.assertEqual(detect_mapping_type(["a"], ["MIXAMORIG_hips"]), TargetBoneMappingType.MIXAMO)
        self.assertEqual(detect_mapping_type(["a"], ["Hips"]), TargetBoneMappingType.CUSTOM)
        self.assertEqual(detect_mapping_type([], ["Hips"]), TargetBoneMappingType.CUSTOM)

    def test_reference_mapper(self):
        self.assertTrue(ReferenceRigMapper.is_source_same_as_target(["a"], ["a", "b"]))
        self.assertFalse(ReferenceRigMapper.is_source_same_as_target(["a", "c"], ["a", "b"]))

    def test_mixamo_bone_map_covers_chains(self):
        for chain, joints in HumanChainConfig.REFERENCE_CHAINS.items():
            mixamo = HumanChainConfig.MIXAMO_CHAINS[chain]
            for ref_name, mixamo_name in zip(joints, mixamo):
                self.assertEqual(MixamoMapper.BONE_MAP[ref_name], mixamo_name, chain)

    def test_mixamo_mapper_ignores_unknown(self):
        source = create_all_bone_metadata({"DEF-hips": None, "DEF-jaw": "DEF-hips"})
        target = create_all_bone_metadata({"mixamorig:Hips": None, "mixamorig:Jaw": "mixamorig:Hips"})
        self.assertEqual(MixamoMapper.map_mixamo_bones(source, target), {"mixamorig:Hips": "DEF-hips"})


if __name__ == "__main__":
    unittest.main()
