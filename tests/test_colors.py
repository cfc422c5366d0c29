"""Tests for loft3d/colors.py — colour parsing and height zones."""

import numpy as np
import numpy.testing as npt
import pytest

from loft3d.colors import (
    DEFAULT_COLOR,
    ColorZone,
    apply_color_zones,
    apply_solid_color,
    hex_to_rgb,
    parse_color,
    zone_colors,
)
from loft3d.mesh import MeshData

GRAY = (0xCC / 255.0,) * 3


class TestParseColor:
    def test_hex_to_rgb(self):
        npt.assert_allclose(hex_to_rgb(0xFF8000), (1.0, 128 / 255.0, 0.0))

    @pytest.mark.parametrize("value, expected", [
        (0x00FF00, (0.0, 1.0, 0.0)),
        ("0x0000FF", (0.0, 0.0, 1.0)),
        ("#ff0000", (1.0, 0.0, 0.0)),
        ("ffffff", (1.0, 1.0, 1.0)),
        ("  #000000 ", (0.0, 0.0, 0.0)),
    ])
    def test_formats(self, value, expected):
        npt.assert_allclose(parse_color(value), expected)

    @pytest.mark.parametrize("value", [None, "red", "", True, 1.5])
    def test_fallback_gray(self, value):
        npt.assert_allclose(parse_color(value), GRAY)

    def test_default_constant(self):
        npt.assert_allclose(hex_to_rgb(DEFAULT_COLOR), GRAY)


class TestZones:
    def setup_method(self):
        self.zones = [
            ColorZone(0.0, 1.0, 0xFF0000),
            ColorZone(0.5, 2.0, 0x00FF00),
        ]

    def test_first_match_wins(self):
        colors = zone_colors([0.75], self.zones)
        npt.assert_allclose(colors[0], (1.0, 0.0, 0.0))

    def test_half_open_interval(self):
        colors = zone_colors([1.0, 2.0], self.zones)
        npt.assert_allclose(colors[0], (0.0, 1.0, 0.0))
        npt.assert_allclose(colors[1], GRAY)

    def test_unmatched_default(self):
        colors = zone_colors([-1.0, 5.0], self.zones)
        npt.assert_allclose(colors, [GRAY, GRAY])

    def test_no_zones(self):
        assert zone_colors([0.0, 1.0], []).shape == (2, 3)


class TestApply:
    def setup_method(self):
        pos = np.array([[0, 0, 0], [0, 1.5, 0], [1, 0.2, 0]], dtype=float)
        self.mesh = MeshData(positions=pos, indices=[[0, 1, 2]])

    def test_zones_by_height(self):
        out = apply_color_zones(self.mesh, [ColorZone(0.0, 1.0, "#ffffff")])
        npt.assert_allclose(out.colors, [(1, 1, 1), GRAY, (1, 1, 1)])
        assert self.mesh.colors is None

    def test_solid(self):
        out = apply_solid_color(self.mesh, "0x112233")
        assert out.colors.shape == (3, 3)
        npt.assert_allclose(out.colors[2], (0x11 / 255.0, 0x22 / 255.0, 0x33 / 255.0))
