"""Vertex colouring: colour parsing and height-zone rules."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, Tuple, Union

import numpy as np

from .mesh import MeshData

RGB = Tuple[float, float, float]
ColorValue = Union[int, str, None]

DEFAULT_COLOR = 0xCCCCCC


def hex_to_rgb(value: int) -> RGB:
    """``0xRRGGBB`` → ``(r, g, b)`` in ``[0, 1]``."""
    value = int(value) & 0xFFFFFF
    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


def parse_color(value: ColorValue) -> RGB:
    """Parse ``0xRRGGBB`` ints and ``"0x…"``, ``"#…"`` or bare hex strings.

    Anything unparsable falls back to the neutral default gray.
    """
    if isinstance(value, bool):
        return hex_to_rgb(DEFAULT_COLOR)
    if isinstance(value, int):
        return hex_to_rgb(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0x"):
            text = text[2:]
        elif text.startswith("#"):
            text = text[1:]
        try:
            return hex_to_rgb(int(text, 16))
        except ValueError:
            pass
    return hex_to_rgb(DEFAULT_COLOR)


@dataclass(frozen=True)
class ColorZone:
    """Colour applied to vertices with ``y_min <= y < y_max``."""

    y_min: float
    y_max: float
    color: ColorValue


def zone_colors(y: np.ndarray, zones: Sequence[ColorZone]) -> np.ndarray:
    """``(N, 3)`` colours for heights *y*; the first matching zone wins."""
    y = np.asarray(y, dtype=np.float64)
    out = np.tile(np.array(parse_color(DEFAULT_COLOR)), (len(y), 1))
    assigned = np.zeros(len(y), dtype=bool)
    for zone in zones:
        hit = ~assigned & (y >= zone.y_min) & (y < zone.y_max)
        out[hit] = parse_color(zone.color)
        assigned |= hit
    return out


def apply_color_zones(mesh: MeshData, zones: Sequence[ColorZone]) -> MeshData:
    """Return a copy of *mesh* coloured by vertex height."""
    return replace(mesh, colors=zone_colors(mesh.positions[:, 1], zones))


def apply_solid_color(mesh: MeshData, color: ColorValue) -> MeshData:
    """Return a copy of *mesh* with every vertex set to *color*."""
    return replace(mesh, colors=np.tile(np.array(parse_color(color)), (mesh.vertex_count, 1)))
