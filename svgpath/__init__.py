"""svgpath — SVG path outlines to polylines (pure numpy).

Flattens the ``d`` attribute of SVG ``<path>`` elements into ``(N, 2)``
polylines, and reads every named path of an SVG file.

Quick start
-----------
>>> from svgpath import parse_path
>>> parse_path("M 0 0 L 10 0 L 10 10 Z").shape
(4, 2)

>>> from svgpath import read_svg_paths
>>> paths = read_svg_paths("character-front.svg")   # doctest: +SKIP
>>> paths["body"].shape                              # doctest: +SKIP
(87, 2)

Coordinates are returned exactly as drawn: SVG Y grows downward.  Flipping
and scaling to world units is the caller's job (see
:func:`loft3d.pipeline.to_world`).
"""

from .document import read_svg_paths
from .parser import cubic_points, parse_path, parse_path_points, quadratic_points

__all__ = [
    "parse_path",
    "parse_path_points",
    "cubic_points",
    "quadratic_points",
    "read_svg_paths",
]
