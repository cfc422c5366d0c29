"""Tests for loft3d/silhouette.py — horizontal bounds of a polyline per height."""

import numpy as np
import numpy.testing as npt

from loft3d.silhouette import Span, sample_levels, sample_silhouette


# A closed 4 × 10 rectangle, Y up.
_RECT = [(0, 0), (4, 0), (4, 10), (0, 10), (0, 0)]


class TestSpan:
    def test_half_width_and_center(self):
        s = Span(1.0, 5.0)
        assert s.half_width == 2.0
        assert s.center == 3.0


class TestSampleLevels:
    def test_endpoints_exact(self):
        levels = sample_levels(0.3, 1.7, 8)
        assert levels[0] == 0.3
        assert levels[-1] == 1.7
        assert len(levels) == 8

    def test_no_samples(self):
        assert sample_levels(0.0, 1.0, 0).shape == (0,)


class TestSampleSilhouette:
    def test_rectangle_constant_bounds(self):
        samples = sample_silhouette(_RECT, 0.0, 10.0, 5)
        assert list(samples) == [0.0, 2.5, 5.0, 7.5, 10.0]
        for span in samples.values():
            assert span == Span(0.0, 4.0)

    def test_keys_ascending(self):
        samples = sample_silhouette(_RECT, 0.0, 10.0, 7)
        keys = list(samples)
        assert keys == sorted(keys)

    def test_sloped_edge_interpolated(self):
        samples = sample_silhouette([(0, 0), (10, 10)], 0.0, 10.0, 3)
        npt.assert_allclose(samples[5.0], (5.0, 5.0))

    def test_levels_outside_polyline_absent(self):
        samples = sample_silhouette([(0, 0), (2, 5), (4, 0)], 0.0, 10.0, 3)
        assert set(samples) == {0.0, 5.0}
        assert samples[0.0] == Span(0.0, 4.0)
        npt.assert_allclose(samples[5.0], (2.0, 2.0))

    def test_polyline_not_closed_implicitly(self):
        # the seam from (4, 5) back to (0, 0) is never an edge
        samples = sample_silhouette([(0, 0), (0, 10), (4, 10), (4, 5)], 0.0, 10.0, 5)
        assert samples[2.5] == Span(0.0, 0.0)
        assert samples[7.5] == Span(0.0, 4.0)

    def test_horizontal_edges_skipped(self):
        samples = sample_silhouette([(0, 5), (10, 5)], 0.0, 10.0, 3)
        assert samples == {}

    def test_empty_input(self):
        assert sample_silhouette(np.zeros((0, 2)), 0.0, 1.0, 4) == {}

    def test_zero_samples(self):
        assert sample_silhouette(_RECT, 0.0, 10.0, 0) == {}

    def test_multiple_crossings_take_extremes(self):
        # a "W" shape crosses y = 5 four times
        w = [(0, 10), (2, 0), (4, 10), (6, 0), (8, 10)]
        samples = sample_silhouette(w, 0.0, 10.0, 3)
        npt.assert_allclose(samples[5.0], (1.0, 7.0))
