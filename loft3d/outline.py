"""Top-view outline → per-angle unit cross-section shape."""

from __future__ import annotations

from typing import Optional

import numpy as np

from _loft_common import _F, as_points, vec2

# Minimum centred extent (source units) below which the outline has collapsed.
MIN_EXTENT = 1e-3
# Ray hits closer than this to the centre are ignored.
MIN_RAY_T = 0.01
_PARALLEL_EPS = 1e-8


def ring_directions(verts_per_ring: int) -> _F:
    """Unit ray directions ``(sin θ, cos θ)`` for ``θ = 2πi / verts_per_ring``."""
    theta = np.arange(verts_per_ring, dtype=np.float64) * (2.0 * np.pi / verts_per_ring)
    return vec2(np.sin(theta), np.cos(theta))


def normalize_top_outline(
    points,
    center_x: float,
    center_y: float,
    verts_per_ring: int,
) -> Optional[_F]:
    """Turn a closed top-view outline into a normalized ring shape.

    The outline is centred on ``(center_x, center_y)`` and each axis is
    divided by its own maximum absolute value, so the result spans
    ``[-1, 1]`` in X and Z independently.  For every ring slot a ray is cast
    from the origin and the nearest crossing with the closed outline is
    kept.  Slots whose ray meets no edge fall back to the unit circle.

    Parameters
    ----------
    points:
        ``(N, 2)`` top-view polyline in source coordinates; the second
        column is depth (Z).
    center_x, center_y:
        Centre of the outline in source coordinates.
    verts_per_ring:
        Number of ring slots.

    Returns
    -------
    numpy.ndarray or None
        ``(verts_per_ring, 2)`` array of ``(x, z)`` offsets, or ``None`` when
        the outline has fewer than 3 points or a collapsed extent; callers
        then use an elliptical cross-section.
    """
    P = as_points(points)
    if len(P) < 3:
        return None

    centred = P - np.array([center_x, center_y])
    extent = np.abs(centred).max(axis=0)
    if extent[0] < MIN_EXTENT or extent[1] < MIN_EXTENT:
        return None
    norm = centred / extent

    A = norm
    E = np.roll(norm, -1, axis=0) - norm          # edge vectors, closed
    dirs = ring_directions(verts_per_ring)

    shape = np.empty((verts_per_ring, 2), dtype=np.float64)
    for i, (dx, dz) in enumerate(dirs):
        denom = dx * E[:, 1] - dz * E[:, 0]
        ok = np.abs(denom) >= _PARALLEL_EPS
        safe = np.where(ok, denom, 1.0)
        t = (A[:, 0] * E[:, 1] - A[:, 1] * E[:, 0]) / safe
        s = (A[:, 0] * dz - A[:, 1] * dx) / safe
        valid = ok & (t > MIN_RAY_T) & (s >= 0.0) & (s <= 1.0)
        best = min(1.0, float(t[valid].min())) if valid.any() else 1.0
        shape[i] = (dx * best, dz * best)

    return shape
