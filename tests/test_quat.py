import sys
import os
import math
import unittest
import numpy as np

# Add the project root to sys.path
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
sys.path.insert(0, project_root)

from rigretarget.algebra import Vec3, Quat


def random_unit_vectors(rng, n):
    v = rng.normal(size=(n, 3))
    return v / np.linalg.norm(v, axis=1, keepdims=True)


class TestQuatBasics(unittest.TestCase):
    def test_identity_default(self):
        np.testing.assert_allclose(Quat().to_array(), [0, 0, 0, 1])

    def test_wxyz_conversion(self):
        q = Quat(0.1, 0.2, 0.3, 0.9)
        np.testing.assert_allclose(q.to_wxyz(), [0.9, 0.1, 0.2, 0.3])
        np.testing.assert_allclose(Quat().from_wxyz([0.9, 0.1, 0.2, 0.3]).to_array(), q.to_array())

    def test_mul_vs_pmul(self):
        a = Quat().from_axis_angle((1, 0, 0), 0.5)
        b = Quat().from_axis_angle((0, 1, 0), 0.3)

        ab = a.clone().mul(b)
        ba = a.clone().pmul(b)
        np.testing.assert_allclose(ab.to_array(), Quat().from_mul(a, b).to_array())
        np.testing.assert_allclose(ba.to_array(), Quat().from_mul(b, a).to_array())
        self.assertFalse(ab.is_close(ba))

    def test_mul_composes_rotations(self):
        a = Quat().from_axis_angle((0, 0, 1), math.pi / 2)
        b = Quat().from_axis_angle((1, 0, 0), math.pi / 2)

        # (a * b) v == a (b v)
        v = (0.3, -0.2, 0.7)
        combined = Vec3(v).transform_quat(Quat().from_mul(a, b))
        nested = Vec3(v).transform_quat(b).transform_quat(a)
        np.testing.assert_allclose(combined.to_array(), nested.to_array(), atol=1e-12)

    def test_invert(self):
        q = Quat().from_axis_angle(Vec3(1, 2, 3).norm(), 1.1)
        inv = q.clone().invert()
        np.testing.assert_allclose(Quat().from_mul(q, inv).to_array(), [0, 0, 0, 1], atol=1e-12)
        np.testing.assert_allclose(Quat().from_invert(q).to_array(), inv.to_array())

    def test_invert_zero_quaternion(self):
        q = Quat(0, 0, 0, 0)
        with self.assertLogs("rigretarget.algebra.quat", level="WARNING"):
            q.invert()
        np.testing.assert_allclose(q.to_array(), [0, 0, 0, 0])
        np.testing.assert_allclose(Quat().from_invert((0, 0, 0, 0)).to_array(), [0, 0, 0, 0])

    def test_norm_zero_unchanged(self):
        q = Quat(0, 0, 0, 0).norm()
        np.testing.assert_allclose(q.to_array(), [0, 0, 0, 0])

    def test_pmul_invert(self):
        parent = Quat().from_axis_angle((0, 1, 0), 0.8)
        world = Quat().from_axis_angle(Vec3(1, 1, 0).norm(), 0.4)

        local = world.clone().pmul_invert(parent)
        expected = Quat().from_mul(Quat().from_invert(parent), world)
        np.testing.assert_allclose(local.to_array(), expected.to_array(), atol=1e-12)
        self.assertTrue(Quat().from_mul(parent, local).is_same_rotation(world))

    def test_pmul_axis_angle(self):
        q = Quat().from_axis_angle((1, 0, 0), 0.3)
        expected = Quat().from_mul(Quat().from_axis_angle((0, 0, 1), 0.6), q)
        np.testing.assert_allclose(q.clone().pmul_axis_angle((0, 0, 1), 0.6).to_array(), expected.to_array())

    def test_dot_negate(self):
        q = Quat(0, 0, 0, -1).dot_negate(Quat())
        np.testing.assert_allclose(q.to_array(), [0, 0, 0, 1])

        kept = Quat(0, 0, 0, 1).dot_negate(Quat())
        np.testing.assert_allclose(kept.to_array(), [0, 0, 0, 1])

    def test_same_rotation_sign_agnostic(self):
        q = Quat().from_axis_angle((0, 1, 0), 1.0)
        self.assertTrue(q.is_same_rotation(q.clone().negate()))
        self.assertFalse(q.is_close(q.clone().negate()))

    def test_rot_axes(self):
        np.testing.assert_allclose(
            Quat().rot_x(0.5).to_array(), Quat().from_axis_angle((1, 0, 0), 0.5).to_array()
        )
        np.testing.assert_allclose(
            Quat().rot_y(0.5).to_array(), Quat().from_axis_angle((0, 1, 0), 0.5).to_array()
        )
        np.testing.assert_allclose(
            Quat().rot_z(0.5).to_array(), Quat().from_axis_angle((0, 0, 1), 0.5).to_array()
        )

        # Local axis: post-multiplied
        base = Quat().from_axis_angle((0, 1, 0), 0.4)
        expected = Quat().from_mul(base, Quat().from_axis_angle((1, 0, 0), 0.2))
        np.testing.assert_allclose(base.clone().rot_x(0.2).to_array(), expected.to_array(), atol=1e-12)


class TestQuatSwing(unittest.TestCase):
    def test_swing_rotates_a_onto_b(self):
        rng = np.random.default_rng(7)
        a_list = random_unit_vectors(rng, 20)
        b_list = random_unit_vectors(rng, 20)

        for a, b in zip(a_list, b_list):
            q = Quat().from_swing(a, b)
            self.assertAlmostEqual(q.length, 1.0, places=9)
            np.testing.assert_allclose(Vec3(a).transform_quat(q).to_array(), b, atol=1e-9)

    def test_swing_parallel_is_identity(self):
        q = Quat().from_swing((0, 1, 0), (0, 1, 0))
        np.testing.assert_allclose(q.to_array(), [0, 0, 0, 1])

    def test_swing_opposite_vectors(self):
        rng = np.random.default_rng(11)
        vectors = list(random_unit_vectors(rng, 10)) + [
            np.array([1.0, 0.0, 0.0]),
            np.array([-1.0, 0.0, 0.0]),
            np.array([0.0, 1.0, 0.0]),
            np.array([0.0, 0.0, 1.0]),
        ]

        for a in vectors:
            q = Quat().from_swing(a, -a)
            arr = q.to_array()
            self.assertFalse(np.any(np.isnan(arr)))
            self.assertAlmostEqual(q.length, 1.0, places=9)
            # 180 degrees: w == 0
            self.assertAlmostEqual(q.w, 0.0, places=9)
            np.testing.assert_allclose(Vec3(a).transform_quat(q).to_array(), -a, atol=1e-9)

    def test_pmul_swing(self):
        base = Quat().from_axis_angle((1, 0, 0), 0.3)
        a = Vec3(0, 1, 0)
        b = Vec3(1, 1, 0).norm()

        q = base.clone().pmul_swing(a, b)
        self.assertTrue(q.is_same_rotation(Quat().from_mul(Quat().from_swing(a, b), base)))

        flipped = base.clone().pmul_swing(a, Vec3(a).negate())
        self.assertAlmostEqual(flipped.length, 1.0, places=9)
        self.assertFalse(np.any(np.isnan(flipped.to_array())))

        same = base.clone().pmul_swing(a, a)
        np.testing.assert_allclose(same.to_array(), base.to_array())

    def test_unit_norm_preserved(self):
        rng = np.random.default_rng(3)
        q = Quat()
        axes = random_unit_vectors(rng, 50)
        others = random_unit_vectors(rng, 50)

        for i in range(50):
            step = Quat().from_axis_angle(axes[i], rng.uniform(-math.pi, math.pi))
            if i % 3 == 0:
                q.mul(step)
            elif i % 3 == 1:
                q.pmul(step)
            else:
                q.pmul(Quat().from_swing(axes[i], others[i]))
            self.assertAlmostEqual(q.length, 1.0, places=9)


class TestQuatConversions(unittest.TestCase):
    def test_mat3_round_trip(self):
        rng = np.random.default_rng(5)
        axes = random_unit_vectors(rng, 25)
        angles = rng.uniform(-math.pi, math.pi, size=25)
        # Near 180 degrees exercises the small trace branches
        angles[:3] = [math.pi, math.pi - 1e-4, -math.pi + 1e-3]

        for axis, angle in zip(axes, angles):
            q = Quat().from_axis_angle(axis, angle)
            back = Quat().from_mat3(q.to_mat3())
            self.assertTrue(back.is_same_rotation(q, tol=1e-9))

    def test_mat3_columns_are_rotated_axes(self):
        q = Quat().from_axis_angle((0, 0, 1), math.pi / 2)
        m = q.to_mat3()
        np.testing.assert_allclose(m[:, 0], [0, 1, 0], atol=1e-12)
        np.testing.assert_allclose(m[:, 1], [-1, 0, 0], atol=1e-12)

        flat = m.T.reshape(9)  # column-major
        self.assertTrue(Quat().from_mat3(flat).is_same_rotation(q))

    def test_from_look(self):
        q = Quat().from_look((1, 0, 0))
        fwd = Vec3().from_quat(q)
        np.testing.assert_allclose(fwd.to_array(), [1, 0, 0], atol=1e-9)
        up = Vec3().from_quat(q, (0, 1, 0))
        np.testing.assert_allclose(up.to_array(), [0, 1, 0], atol=1e-9)


if __name__ == "__main__":
    unittest.main()
