"""Shared numpy helpers used by both svgpath and loft3d.

This module provides:

* **Type alias**: :data:`_F`
* **Vector constructors**: :func:`vec2`, :func:`vec3`
* **Math helpers**: :func:`length`, :func:`normalize_rows`
* **Array coercion**: :func:`as_points`

Not meant to be imported directly by end users; import from
``svgpath`` or ``loft3d`` instead.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------
_F = npt.NDArray[np.floating]

__all__ = [
    "_F",
    "vec2", "vec3",
    "length", "normalize_rows",
    "as_points",
]


# ===========================================================================
# Vector constructors
# ===========================================================================

def vec2(x: _F, y: _F) -> _F:
    """Stack *x* and *y* into a ``(..., 2)`` array."""
    x, y = np.broadcast_arrays(x, y)
    return np.stack([x, y], axis=-1)


def vec3(x: _F, y: _F, z: _F) -> _F:
    """Stack *x*, *y*, *z* into a ``(..., 3)`` array."""
    x, y, z = np.broadcast_arrays(x, y, z)
    return np.stack([x, y, z], axis=-1)


# ===========================================================================
# Math helpers
# ===========================================================================

def length(v: _F) -> _F:
    """Euclidean length along the last axis."""
    return np.linalg.norm(v, axis=-1)


def normalize_rows(v: _F) -> _F:
    """Unit-length rows of *v*; zero rows stay zero."""
    n = length(v)[..., None]
    return v / np.where(n > 0.0, n, 1.0)


# ===========================================================================
# Array coercion
# ===========================================================================

def as_points(points, dim: int = 2) -> _F:
    """Coerce a point sequence into a ``(N, dim)`` float64 array.

    An empty sequence gives a ``(0, dim)`` array rather than ``(0,)``.
    """
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, dim), dtype=np.float64)
    return arr.reshape(-1, dim)
