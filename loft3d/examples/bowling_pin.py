"""Bowling pin demo asset.

Usage::

    from loft3d.examples import BowlingPin
    from loft3d.pipeline import run_pipeline

    config = BowlingPin("build/pin")
    run_pipeline(config)

The pin is rotationally symmetric, so the same silhouette serves as both
the front and the side view.  Drawn on a 200 × 200 canvas (Y down): ball
top at Y=10, neck at Y=80, belly at Y=150, base at Y=190.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from loft3d.colors import ColorZone
from loft3d.config import ComponentSpec, LoftConfig

PIN_PATH = (
    "M 80 10 C 78 10 70 20 70 40 C 70 55 88 70 88 80 C 88 90 75 100 72 120 "
    "C 68 140 60 155 60 165 C 60 175 62 185 65 190 L 135 190 "
    "C 138 185 140 175 140 165 C 140 155 132 140 128 120 "
    "C 125 100 112 90 112 80 C 112 70 130 55 130 40 C 130 20 122 10 120 10 Z"
)

SVG_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 200">
  <path id="{id}" d="{d}" fill="none" stroke="black"/>
</svg>
"""


def pin_svg(path_id: str = "body") -> str:
    """SVG document holding the pin outline under *path_id*."""
    return SVG_TEMPLATE.format(id=path_id, d=PIN_PATH)


def BowlingPin(
    out_dir: Union[str, Path],
    scale: float = 0.01,
    verts_per_ring: int = 10,
    samples_per_unit: float = 60.0,
) -> LoftConfig:
    """Write the pin drawings into *out_dir* and return a ready config.

    Parameters
    ----------
    out_dir:
        Directory receiving ``pin-front.svg``, ``pin-side.svg`` and, once the
        pipeline has run, ``bowling_pin.npz``.
    scale:
        Source units → world units (default: 200 px ↦ 2 m canvas).
    verts_per_ring:
        Vertices per cross-section ring.
    samples_per_unit:
        Cross-section density per world unit of height.

    Returns
    -------
    LoftConfig
        One capped ``body`` component with white/red/white colour bands.
    """
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    front = out / "pin-front.svg"
    side = out / "pin-side.svg"
    front.write_text(pin_svg(), encoding="utf-8")
    side.write_text(pin_svg(), encoding="utf-8")

    return LoftConfig(
        name="bowling_pin",
        svg_front=front,
        svg_side=side,
        svg_height=200.0,
        svg_center_x=100.0,
        scale=scale,
        verts_per_ring=verts_per_ring,
        samples_per_unit=samples_per_unit,
        components=(ComponentSpec(id="body", cap_top=True, cap_bottom=True),),
        y_ranges=(
            ColorZone(0.0, 0.5, "0xeeeeee"),
            ColorZone(0.5, 1.2, "0xcc0000"),
            ColorZone(1.2, 2.0, "0xeeeeee"),
        ),
        output=out / "bowling_pin.npz",
    )
