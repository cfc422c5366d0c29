"""Silhouette sampling: left/right X bounds of a polyline at evenly spaced heights."""

from __future__ import annotations

from typing import Dict, NamedTuple

import numpy as np

from _loft_common import _F, as_points


class Span(NamedTuple):
    """Horizontal extent of a silhouette at one height level."""

    left: float
    right: float

    @property
    def half_width(self) -> float:
        return (self.right - self.left) / 2.0

    @property
    def center(self) -> float:
        return (self.right + self.left) / 2.0


SilhouetteSampleMap = Dict[float, Span]


def sample_levels(y_min: float, y_max: float, num_samples: int) -> _F:
    """Evenly spaced height levels across ``[y_min, y_max]``, both ends exact."""
    if num_samples < 1:
        return np.zeros(0, dtype=np.float64)
    return np.linspace(y_min, y_max, num_samples, dtype=np.float64)


def sample_silhouette(
    points,
    y_min: float,
    y_max: float,
    num_samples: int,
) -> SilhouetteSampleMap:
    """Sample the horizontal extent of *points* at *num_samples* heights.

    Every consecutive pair of points is an edge; the polyline is **not**
    closed implicitly, so an outline drawn without ``Z`` leaves a gap at its
    seam.  Horizontal edges are skipped.  Each remaining edge widens the
    bounds of every level inside its Y span (ends included) by the X of the
    edge at that level.

    Parameters
    ----------
    points:
        ``(N, 2)`` polyline.
    y_min, y_max:
        Height range to sample.
    num_samples:
        Number of levels.

    Returns
    -------
    dict
        ``{level: Span(left, right)}`` in ascending level order.  Levels no
        edge reaches are absent rather than zero-width.
    """
    P = as_points(points)
    levels = sample_levels(y_min, y_max, num_samples)
    left = np.full(len(levels), np.inf)
    right = np.full(len(levels), -np.inf)

    for (x0, y0), (x1, y1) in zip(P[:-1], P[1:]):
        if y0 == y1:
            continue
        lo, hi = min(y0, y1), max(y0, y1)
        hit = (levels >= lo) & (levels <= hi)
        if not hit.any():
            continue
        x = x0 + (levels[hit] - y0) / (y1 - y0) * (x1 - x0)
        left[hit] = np.minimum(left[hit], x)
        right[hit] = np.maximum(right[hit], x)

    return {
        float(y): Span(float(l), float(r))
        for y, l, r in zip(levels, left, right)
        if np.isfinite(l)
    }
