"""Tests for loft3d/skinning.py — humanoid skeleton and skin weights."""

import numpy as np
import numpy.testing as npt
import pytest

from loft3d.skinning import (
    HUMANOID_BONES,
    JOINT_THRESHOLD,
    BoneDef,
    Skeleton,
    assign_skin_weights,
    bind_pose_world_positions,
)


# ===========================================================================
# Skeleton
# ===========================================================================

class TestHumanoidSkeleton:
    def setup_method(self):
        self.skel = Skeleton.humanoid()
        self.world = dict(zip(self.skel.names, self.skel.world_positions))

    def test_bone_count(self):
        assert len(self.skel.bones) == 16
        assert self.skel.world_positions.shape == (16, 3)

    def test_parents_precede_children(self):
        for i, parent in enumerate(self.skel.parents):
            assert parent < i

    def test_root(self):
        assert self.skel.parents[0] == -1
        npt.assert_allclose(self.world["Root"], [0.0, 0.95, 0.0])

    @pytest.mark.parametrize("name, expected", [
        ("Head", [0.0, 1.65, 0.0]),
        ("L_Shoulder", [-0.38, 1.35, 0.0]),
        ("R_Hand", [0.38, 0.75, 0.0]),
        ("L_Knee", [-0.12, 0.55, 0.0]),
        ("R_Foot", [0.12, 0.15, 0.0]),
    ])
    def test_world_positions(self, name, expected):
        npt.assert_allclose(self.world[name], expected, atol=1e-12)

    def test_world_is_accumulated_offsets(self):
        offsets = self.skel.offsets
        for i, bone in enumerate(HUMANOID_BONES):
            base = self.skel.world_positions[bone.parent] if bone.parent >= 0 else 0.0
            npt.assert_allclose(self.skel.world_positions[i], base + offsets[i])


class TestBindPose:
    def test_child_before_parent_rejected(self):
        bones = [BoneDef("A", 1, (0, 0, 0)), BoneDef("B", -1, (0, 1, 0))]
        with pytest.raises(ValueError):
            bind_pose_world_positions(bones)

    def test_self_parent_rejected(self):
        with pytest.raises(ValueError):
            bind_pose_world_positions([BoneDef("A", 0, (0, 0, 0))])

    def test_chain(self):
        bones = [BoneDef("A", -1, (1, 0, 0)), BoneDef("B", 0, (0, 2, 0)), BoneDef("C", 1, (0, 0, 3))]
        npt.assert_allclose(bind_pose_world_positions(bones), [[1, 0, 0], [1, 2, 0], [1, 2, 3]])


# ===========================================================================
# Skin weights
# ===========================================================================

class TestAssignSkinWeights:
    def setup_method(self):
        self.pair = np.array([[0.0, 0.0, 0.0], [0.2, 0.0, 0.0]])

    def test_far_vertex_rigid(self):
        skin = assign_skin_weights([[5.0, 0.0, 0.0]], self.pair)
        npt.assert_array_equal(skin.joints[0], [1, 0])
        npt.assert_allclose(skin.weights[0], [1.0, 0.0])

    def test_midpoint_even_split(self):
        skin = assign_skin_weights([[0.1, 0.0, 0.0]], self.pair)
        npt.assert_array_equal(skin.joints[0], [0, 1])
        npt.assert_allclose(skin.weights[0], [0.5, 0.5])

    def test_blend_weights(self):
        skin = assign_skin_weights([[0.05, 0.0, 0.0]], self.pair)
        npt.assert_array_equal(skin.joints[0], [0, 1])
        npt.assert_allclose(skin.weights[0], [0.75, 0.25])

    def test_second_bone_too_far(self):
        bones = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        skin = assign_skin_weights([[0.1, 0.0, 0.0]], bones)
        npt.assert_allclose(skin.weights[0], [1.0, 0.0])
        assert skin.joints[0, 0] == 0

    def test_coincident_bones(self):
        bones = np.zeros((2, 3))
        skin = assign_skin_weights([[0.0, 0.0, 0.0]], bones)
        npt.assert_allclose(skin.weights[0], [0.5, 0.5])

    def test_single_bone(self):
        skin = assign_skin_weights([[0.0, 0.0, 0.0], [3.0, 3.0, 3.0]], [[0.0, 0.0, 0.0]])
        npt.assert_array_equal(skin.joints, [[0, 0], [0, 0]])
        npt.assert_allclose(skin.weights, [[1.0, 0.0], [1.0, 0.0]])

    def test_no_bones(self):
        with pytest.raises(ValueError):
            assign_skin_weights([[0.0, 0.0, 0.0]], np.zeros((0, 3)))

    def test_custom_threshold(self):
        skin = assign_skin_weights([[0.05, 0.0, 0.0]], self.pair, joint_threshold=0.01)
        npt.assert_allclose(skin.weights[0], [1.0, 0.0])

    def test_humanoid_weight_invariants(self):
        rng = np.random.default_rng(7)
        verts = rng.uniform([-0.6, 0.0, -0.3], [0.6, 1.9, 0.3], size=(500, 3))
        skel = Skeleton.humanoid()
        skin = assign_skin_weights(verts, skel.world_positions)
        assert skin.joints.shape == (500, 2)
        npt.assert_allclose(skin.weights.sum(axis=1), 1.0)
        assert np.all(skin.weights >= 0.0)
        assert np.all((skin.weights > 0).sum(axis=1) >= 1)
        assert skin.joints.max() < 16

    def test_vertex_at_joint(self):
        skel = Skeleton.humanoid()
        root = skel.world_positions[0]
        skin = assign_skin_weights([root], skel.world_positions)
        assert skin.joints[0, 0] == 0
        npt.assert_allclose(skin.weights[0], [1.0, 0.0])
        assert JOINT_THRESHOLD == 0.15
