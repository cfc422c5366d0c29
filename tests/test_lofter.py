"""Tests for loft3d/lofter.py — rings, stitching, caps and the loft itself."""

from collections import Counter

import numpy as np
import numpy.testing as npt
import pytest

from loft3d.lofter import LoftOptions, cap_fan, generate_ring, loft, ring_centroid, stitch_rings
from loft3d.silhouette import Span


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _samples(levels, left, right):
    return {float(y): Span(left, right) for y in levels}


def _edge_counts(indices) -> Counter:
    edges = Counter()
    for tri in np.asarray(indices):
        for i in range(3):
            a, b = int(tri[i]), int(tri[(i + 1) % 3])
            edges[(min(a, b), max(a, b))] += 1
    return edges


# ===========================================================================
# Building blocks
# ===========================================================================

class TestGenerateRing:
    def test_ellipse(self):
        ring = generate_ring(2.0, 1.0, 0.5, 4)
        npt.assert_allclose(ring, [[0, 2, 0.5], [1, 2, 0], [0, 2, -0.5], [-1, 2, 0]], atol=1e-12)

    def test_top_shape_scaled(self):
        shape = np.array([[0.0, 1.0], [0.5, 0.0], [0.0, -1.0], [-0.5, 0.0]])
        ring = generate_ring(0.0, 2.0, 3.0, 4, shape)
        npt.assert_allclose(ring[:, 0], [0, 1, 0, -1])
        npt.assert_allclose(ring[:, 2], [3, 0, -3, 0])

    def test_short_top_shape_padded_with_ellipse(self):
        shape = np.array([[0.0, 0.5], [0.5, 0.0]])
        ring = generate_ring(0.0, 1.0, 1.0, 4, shape)
        npt.assert_allclose(ring[:, [0, 2]], [[0, 0.5], [0.5, 0], [0, -1], [-1, 0]], atol=1e-12)

    def test_long_top_shape_truncated(self):
        shape = np.tile([[0.5, 0.5]], (6, 1))
        ring = generate_ring(0.0, 1.0, 1.0, 4, shape)
        assert ring.shape == (4, 3)
        npt.assert_allclose(ring[:, [0, 2]], np.tile([0.5, 0.5], (4, 1)))


class TestStitchRings:
    def test_first_quad(self):
        tris = stitch_rings(2, 4)
        npt.assert_array_equal(tris[0], [0, 4, 1])
        npt.assert_array_equal(tris[1], [1, 4, 5])

    def test_wraps_around(self):
        tris = stitch_rings(2, 4)
        npt.assert_array_equal(tris[-2], [3, 7, 0])
        npt.assert_array_equal(tris[-1], [0, 7, 4])

    def test_count(self):
        assert stitch_rings(5, 10).shape == (2 * 4 * 10, 3)


class TestCaps:
    def test_fan(self):
        npt.assert_array_equal(cap_fan(8, 12, 4), [[8, 12, 9], [9, 12, 10], [10, 12, 11], [11, 12, 8]])

    def test_centroid(self):
        ring = generate_ring(1.5, 1.0, 1.0, 8) + np.array([2.0, 0.0, -1.0])
        npt.assert_allclose(ring_centroid(ring), [2.0, 1.5, -1.0], atol=1e-12)


# ===========================================================================
# Lofting
# ===========================================================================

class TestLoft:
    def setup_method(self):
        self.levels = [0.0, 1.0, 2.0]
        self.front = _samples(self.levels, -1.0, 1.0)
        self.side = _samples(self.levels, -1.0, 1.0)

    def test_cylinder_counts(self):
        mesh = loft(self.front, self.side, LoftOptions(0.0, 2.0, verts_per_ring=8))
        assert mesh.vertex_count == 3 * 8
        assert mesh.triangle_count == 2 * 2 * 8
        assert mesh.rings.shape == (3, 8, 3)
        assert mesh.cap_count == 0

    def test_cylinder_constant_radius(self):
        mesh = loft(self.front, self.side, LoftOptions(0.0, 2.0, verts_per_ring=12))
        r = np.hypot(mesh.positions[:, 0], mesh.positions[:, 2])
        npt.assert_allclose(r, 1.0)

    def test_ring_heights(self):
        mesh = loft(self.front, self.side, LoftOptions(0.0, 2.0, verts_per_ring=6))
        npt.assert_allclose(mesh.rings[:, :, 1], np.repeat([[0.0], [1.0], [2.0]], 6, axis=1))

    def test_open_tube_edges(self):
        mesh = loft(self.front, self.side, LoftOptions(0.0, 2.0, verts_per_ring=8))
        counts = Counter(_edge_counts(mesh.indices).values())
        # top and bottom ring outlines are the only boundary
        assert counts[1] == 2 * 8
        assert set(counts) == {1, 2}

    def test_capped_tube_is_closed(self):
        opts = LoftOptions(0.0, 2.0, verts_per_ring=8, cap_top=True, cap_bottom=True)
        mesh = loft(self.front, self.side, opts)
        assert mesh.vertex_count == 3 * 8 + 2
        assert mesh.triangle_count == 2 * 2 * 8 + 2 * 8
        assert mesh.cap_count == 2
        assert set(_edge_counts(mesh.indices).values()) == {2}

    def test_cap_vertex_order(self):
        opts = LoftOptions(0.0, 2.0, verts_per_ring=8, cap_top=True, cap_bottom=True)
        mesh = loft(self.front, self.side, opts)
        npt.assert_allclose(mesh.positions[24], [0.0, 0.0, 0.0], atol=1e-12)
        npt.assert_allclose(mesh.positions[25], [0.0, 2.0, 0.0], atol=1e-12)

    def test_single_cap(self):
        opts = LoftOptions(0.0, 2.0, verts_per_ring=8, cap_top=True)
        mesh = loft(self.front, self.side, opts)
        assert mesh.vertex_count == 3 * 8 + 1
        npt.assert_allclose(mesh.positions[-1], [0.0, 2.0, 0.0], atol=1e-12)

    def test_indices_in_range(self):
        opts = LoftOptions(0.0, 2.0, verts_per_ring=7, cap_top=True, cap_bottom=True)
        mesh = loft(self.front, self.side, opts)
        assert mesh.indices.min() >= 0
        assert mesh.indices.max() < mesh.vertex_count

    def test_offsets(self):
        opts = LoftOptions(0.0, 2.0, verts_per_ring=8, offset_x=1.0, offset_y=0.5, offset_z=-2.0)
        mesh = loft(self.front, self.side, opts)
        centres = mesh.rings.mean(axis=1)
        npt.assert_allclose(centres, [[1.0, 0.5, -2.0], [1.0, 1.5, -2.0], [1.0, 2.5, -2.0]], atol=1e-12)

    def test_silhouette_centres(self):
        front = _samples(self.levels, 1.0, 3.0)
        side = _samples(self.levels, -4.0, -2.0)
        mesh = loft(front, side, LoftOptions(0.0, 2.0, verts_per_ring=8))
        npt.assert_allclose(mesh.rings.mean(axis=1)[:, [0, 2]], [[2.0, -3.0]] * 3, atol=1e-12)

    def test_elliptic_section(self):
        side = _samples(self.levels, -0.25, 0.25)
        mesh = loft(self.front, side, LoftOptions(0.0, 2.0, verts_per_ring=4))
        npt.assert_allclose(mesh.rings[0], [[0, 0, 0.25], [1, 0, 0], [0, 0, -0.25], [-1, 0, 0]], atol=1e-12)

    def test_levels_outside_range_ignored(self):
        mesh = loft(self.front, self.side, LoftOptions(0.5, 2.0, verts_per_ring=8))
        assert mesh.rings.shape[0] == 2

    def test_degenerate_level_skipped(self):
        front = dict(self.front)
        front[1.0] = Span(0.0, 0.0)
        mesh = loft(front, self.side, LoftOptions(0.0, 2.0, verts_per_ring=8))
        assert mesh.rings.shape[0] == 2

    def test_level_missing_from_side_skipped(self):
        side = {0.0: self.side[0.0], 2.0: self.side[2.0]}
        mesh = loft(self.front, side, LoftOptions(0.0, 2.0, verts_per_ring=8))
        assert mesh.rings.shape[0] == 2

    def test_normals_unit_length(self):
        mesh = loft(self.front, self.side, LoftOptions(0.0, 2.0, verts_per_ring=8))
        npt.assert_allclose(np.linalg.norm(mesh.normals, axis=1), 1.0)
        assert mesh.uvs.shape == (mesh.vertex_count, 2)

    def test_top_shape(self):
        shape = np.array([[0.0, 1.0], [1.0, 0.0], [0.0, -1.0], [-1.0, 0.0]])
        opts = LoftOptions(0.0, 2.0, verts_per_ring=4, top_shape=shape)
        mesh = loft(self.front, self.side, opts)
        npt.assert_allclose(mesh.rings[1], [[0, 1, 1], [1, 1, 0], [0, 1, -1], [-1, 1, 0]], atol=1e-12)

    def test_mismatched_top_shape(self):
        opts = LoftOptions(0.0, 2.0, verts_per_ring=8, top_shape=np.zeros((4, 2)) + 0.5)
        mesh = loft(self.front, self.side, opts)
        assert mesh.rings.shape == (3, 8, 3)
        npt.assert_allclose(mesh.rings[1, :4, 0], 0.5)
        npt.assert_allclose(np.hypot(mesh.rings[1, 4:, 0], mesh.rings[1, 4:, 2]), 1.0)

    @pytest.mark.parametrize("levels", [[], [1.0]])
    def test_too_few_levels(self, levels):
        front = _samples(levels, -1.0, 1.0)
        assert loft(front, self.side, LoftOptions(0.0, 2.0)) is None

    def test_too_few_rings(self):
        front = dict(self.front)
        front[0.0] = Span(0.0, 0.0)
        front[1.0] = Span(0.0, 0.0)
        assert loft(front, self.side, LoftOptions(0.0, 2.0)) is None
