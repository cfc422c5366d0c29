"""SVG path ``d`` attribute → flattened polyline.

Supported commands
------------------
``M L H V C Q S T Z`` in absolute (upper case) and relative (lower case)
form.  Curves are flattened at a fixed resolution:

* cubic (``C``/``S``) — 8 uniform steps, ``t = 1/8 … 8/8``
* quadratic (``Q``/``T``) — 6 uniform steps, ``t = 1/6 … 6/6``

The start point of each curve is not emitted again; it is already the last
point of the polyline.

Smooth continuations (``S``/``T``) reflect the previous control point about
the current point.  Without a previous control point the reflected control
equals the current point.

Parsing never raises: argument groups that are short of numbers, arc
commands (``A``) and stray text are skipped and reported at DEBUG level.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from _loft_common import _F, as_points

logger = logging.getLogger(__name__)

Point2D = Tuple[float, float]

CUBIC_STEPS = 8
QUADRATIC_STEPS = 6

# Exponent markers (e/E) are not command letters, so splitting on this set
# keeps "1e-3" inside its segment.
_SEGMENT_RE = re.compile(r"([MLHVCSQTAZmlhvcsqtaz])([^MLHVCSQTAZmlhvcsqtaz]*)")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")
_SEPARATOR_RE = re.compile(r"[\s,]+")


# ---------------------------------------------------------------------------
# Pen state
# ---------------------------------------------------------------------------

@dataclass
class _PenState:
    """Mutable cursor threaded through the command handlers."""

    cx: float = 0.0
    cy: float = 0.0
    sx: float = 0.0
    sy: float = 0.0
    prev_cp: Optional[Point2D] = None

    def origin(self, rel: bool) -> Point2D:
        return (self.cx, self.cy) if rel else (0.0, 0.0)

    def reflected_cp(self) -> Point2D:
        if self.prev_cp is None:
            return (self.cx, self.cy)
        return (2.0 * self.cx - self.prev_cp[0], 2.0 * self.cy - self.prev_cp[1])


# ---------------------------------------------------------------------------
# Curve evaluation
# ---------------------------------------------------------------------------

def cubic_points(p0: Point2D, p1: Point2D, p2: Point2D, p3: Point2D,
                 steps: int = CUBIC_STEPS) -> _F:
    """Sample a cubic Bézier at ``t = 1/steps … 1``; returns ``(steps, 2)``."""
    t = np.arange(1, steps + 1, dtype=np.float64)[:, None] / steps
    it = 1.0 - t
    P = np.array([p0, p1, p2, p3], dtype=np.float64)
    return (it ** 3) * P[0] + 3.0 * (it ** 2) * t * P[1] + 3.0 * it * (t ** 2) * P[2] + (t ** 3) * P[3]


def quadratic_points(p0: Point2D, p1: Point2D, p2: Point2D,
                     steps: int = QUADRATIC_STEPS) -> _F:
    """Sample a quadratic Bézier at ``t = 1/steps … 1``; returns ``(steps, 2)``."""
    t = np.arange(1, steps + 1, dtype=np.float64)[:, None] / steps
    it = 1.0 - t
    P = np.array([p0, p1, p2], dtype=np.float64)
    return (it ** 2) * P[0] + 2.0 * it * t * P[1] + (t ** 2) * P[2]


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------
# Each handler consumes complete argument groups from *nums*, appends points
# to *out* and updates *pen*.  Trailing partial groups are ignored.

def _groups(nums: List[float], size: int):
    for i in range(0, len(nums) - size + 1, size):
        yield nums[i:i + size]


def _move(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    for i, (x, y) in enumerate(_groups(nums, 2)):
        ox, oy = pen.origin(rel)
        pen.cx, pen.cy = ox + x, oy + y
        if i == 0:
            pen.sx, pen.sy = pen.cx, pen.cy
        out.append((pen.cx, pen.cy))
    pen.prev_cp = None


def _line(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    for x, y in _groups(nums, 2):
        ox, oy = pen.origin(rel)
        pen.cx, pen.cy = ox + x, oy + y
        out.append((pen.cx, pen.cy))
    pen.prev_cp = None


def _horizontal(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    for (x,) in _groups(nums, 1):
        pen.cx = pen.cx + x if rel else x
        out.append((pen.cx, pen.cy))
    pen.prev_cp = None


def _vertical(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    for (y,) in _groups(nums, 1):
        pen.cy = pen.cy + y if rel else y
        out.append((pen.cx, pen.cy))
    pen.prev_cp = None


def _emit_cubic(pen: _PenState, c1: Point2D, c2: Point2D, end: Point2D,
                out: List[Point2D]) -> None:
    out.extend(map(tuple, cubic_points((pen.cx, pen.cy), c1, c2, end)))
    pen.prev_cp = c2
    pen.cx, pen.cy = end


def _emit_quadratic(pen: _PenState, c: Point2D, end: Point2D, out: List[Point2D]) -> None:
    out.extend(map(tuple, quadratic_points((pen.cx, pen.cy), c, end)))
    pen.prev_cp = c
    pen.cx, pen.cy = end


def _cubic(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    for x1, y1, x2, y2, x3, y3 in _groups(nums, 6):
        ox, oy = pen.origin(rel)
        _emit_cubic(pen, (ox + x1, oy + y1), (ox + x2, oy + y2), (ox + x3, oy + y3), out)


def _smooth_cubic(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    for x2, y2, x3, y3 in _groups(nums, 4):
        ox, oy = pen.origin(rel)
        _emit_cubic(pen, pen.reflected_cp(), (ox + x2, oy + y2), (ox + x3, oy + y3), out)


def _quadratic(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    for x1, y1, x2, y2 in _groups(nums, 4):
        ox, oy = pen.origin(rel)
        _emit_quadratic(pen, (ox + x1, oy + y1), (ox + x2, oy + y2), out)


def _smooth_quadratic(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    for x2, y2 in _groups(nums, 2):
        ox, oy = pen.origin(rel)
        _emit_quadratic(pen, pen.reflected_cp(), (ox + x2, oy + y2), out)


def _close(pen: _PenState, nums: List[float], rel: bool, out: List[Point2D]) -> None:
    pen.cx, pen.cy = pen.sx, pen.sy
    out.append((pen.cx, pen.cy))
    pen.prev_cp = None


_HANDLERS: Dict[str, Callable[[_PenState, List[float], bool, List[Point2D]], None]] = {
    "M": _move,
    "L": _line,
    "H": _horizontal,
    "V": _vertical,
    "C": _cubic,
    "S": _smooth_cubic,
    "Q": _quadratic,
    "T": _smooth_quadratic,
    "Z": _close,
}


# ---------------------------------------------------------------------------
# Tokenising
# ---------------------------------------------------------------------------

def _read_numbers(args: str, command: str) -> List[float]:
    nums = [float(tok) for tok in _NUMBER_RE.findall(args)]
    residue = _SEPARATOR_RE.sub("", _NUMBER_RE.sub("", args))
    if residue:
        logger.debug("Ignoring malformed text %r after command %r", residue, command)
    return nums


def parse_path_points(d: str) -> List[Point2D]:
    """Parse *d* and return the flattened polyline as a list of tuples."""
    points: List[Point2D] = []
    pen = _PenState()
    if not d:
        return points

    head = _SEGMENT_RE.split(d, maxsplit=1)[0]
    if head.strip():
        logger.debug("Ignoring text before first command: %r", head.strip())

    for command, args in _SEGMENT_RE.findall(d):
        handler = _HANDLERS.get(command.upper())
        if handler is None:
            logger.debug("Skipping unsupported path command %r", command)
            continue
        handler(pen, _read_numbers(args, command), command.islower(), points)
    return points


def parse_path(d: str) -> _F:
    """Parse an SVG path ``d`` string into a ``(N, 2)`` float64 polyline.

    Parameters
    ----------
    d:
        Path command string, e.g. ``"M 0 0 L 10 0 L 10 10 Z"``.

    Returns
    -------
    numpy.ndarray
        Shape ``(N, 2)``; ``(0, 2)`` when no command produced a point.

    Examples
    --------
    >>> parse_path("M 0 0 L 10 0 L 10 10 Z").tolist()
    [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 0.0]]
    """
    return as_points(parse_path_points(d))
