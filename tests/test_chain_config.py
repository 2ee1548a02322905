import unittest

from helpers import build_arm_skeleton
from rigretarget.pose import Pose
from rigretarget.retarget import HumanChainConfig, build_chain_table


class TestHumanChainConfig(unittest.TestCase):
    def test_presets_have_same_chains(self):
        self.assertEqual(
            set(HumanChainConfig.REFERENCE_CHAINS), set(HumanChainConfig.MIXAMO_CHAINS)
        )

    def test_get_preset_returns_copy(self):
        preset = HumanChainConfig.get_preset("reference")
        preset["armL"].append("extra")
        self.assertNotIn("extra", HumanChainConfig.REFERENCE_CHAINS["armL"])

    def test_unknown_preset(self):
        with self.assertLogs("rigretarget.retarget.chains", level="ERROR"):
            self.assertEqual(HumanChainConfig.get_preset("nope"), {})

    def test_target_config_from_mapping(self):
        source = {
            "armL": ["DEF-upper_armL", "DEF-forearmL", "DEF-handL"],
            "legL": ["DEF-thighL", "DEF-shinL"],
            "tail": ["DEF-tail01"],
        }
        mapping = {
            "LeftArm": "DEF-upper_armL",
            "LeftHand": "DEF-handL",
            "LeftUpLeg": "DEF-thighL",
            "LeftLeg": "DEF-shinL",
        }
        target = HumanChainConfig.target_config_from_mapping(source, mapping)
        self.assertEqual(target, {
            "armL": ["LeftArm", "LeftHand"],
            "legL": ["LeftUpLeg", "LeftLeg"],
        })


class TestBuildChainTable(unittest.TestCase):
    def setUp(self):
        self.pose = Pose(build_arm_skeleton())

    def test_links_carry_indices(self):
        table = build_chain_table(self.pose, {"armL": ["DEF-upper_armL", "DEF-forearmL", "DEF-handL"]})
        links = table["armL"]
        self.assertEqual([l.name for l in links], ["DEF-upper_armL", "DEF-forearmL", "DEF-handL"])
        self.assertEqual([l.idx for l in links], [2, 3, 4])
        self.assertEqual([l.pidx for l in links], [1, 2, 3])
        self.assertEqual(list(links[0].twist), [0.0, 1.0, 0.0])

    def test_missing_joints_skipped(self):
        with self.assertLogs("rigretarget.retarget.chains", level="WARNING"):
            table = build_chain_table(self.pose, {
                "armL": ["DEF-upper_armL", "DEF-missing"],
                "armR": ["DEF-upper_armR"],
            })
        self.assertEqual([l.name for l in table["armL"]], ["DEF-upper_armL"])
        self.assertNotIn("armR", table)

    def test_reference_preset_on_partial_rig(self):
        with self.assertLogs("rigretarget.retarget.chains", level="WARNING"):
            table = build_chain_table(self.pose, HumanChainConfig.get_preset("reference"))
        self.assertIn("pelvis", table)
        self.assertEqual(len(table["armL"]), 3)


if __name__ == "__main__":
    unittest.main()
