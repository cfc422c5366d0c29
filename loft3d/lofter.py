"""Cross-section lofting: front + side silhouettes → ring-stitched tube mesh.

Algorithm
---------
For every height level present in the front samples (and inside the
requested range) the front view gives the half-width and X centre, the side
view gives the half-depth and Z centre.  A ring of ``V`` vertices is placed
at that level, either on an ellipse or on a normalized top-view shape
scaled by the half extents.  Consecutive rings are stitched with two
triangles per slot; optional caps close the ends with a fan around the ring
centroid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from _loft_common import _F, vec3
from .mesh import ComponentMesh, compute_vertex_normals
from .outline import ring_directions
from .silhouette import SilhouetteSampleMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoftOptions:
    """Per-component lofting parameters."""

    y_min: float
    y_max: float
    verts_per_ring: int = 10
    offset_x: float = 0.0
    offset_y: float = 0.0
    offset_z: float = 0.0
    cap_top: bool = False
    cap_bottom: bool = False
    top_shape: Optional[_F] = None


# ---------------------------------------------------------------------------
# Rings
# ---------------------------------------------------------------------------

def generate_ring(
    y: float,
    half_width: float,
    half_depth: float,
    verts_per_ring: int,
    top_shape: Optional[_F] = None,
) -> _F:
    """Return a ``(V, 3)`` ring centred on the Y axis at height *y*.

    Slots not covered by *top_shape* fall back to the ellipse; extra shape
    entries are ignored.
    """
    dirs = ring_directions(verts_per_ring)
    if top_shape is not None:
        shape = np.asarray(top_shape, dtype=np.float64).reshape(-1, 2)[:verts_per_ring]
        dirs[: len(shape)] = shape
    x = half_width * dirs[:, 0]
    z = half_depth * dirs[:, 1]
    return vec3(x, np.full(verts_per_ring, y), z)


def stitch_rings(num_rings: int, verts_per_ring: int) -> _F:
    """Side triangles joining ring ``r`` to ring ``r + 1`` for every slot.

    For slot ``v``: ``a = rV + v``, ``b = rV + (v+1) % V``,
    ``c = (r+1)V + v``, ``d = (r+1)V + (v+1) % V`` give triangles
    ``(a, c, b)`` and ``(b, c, d)``.
    """
    V = verts_per_ring
    r = np.arange(num_rings - 1)[:, None]
    v = np.arange(V)[None, :]
    a = r * V + v
    b = r * V + (v + 1) % V
    c = (r + 1) * V + v
    d = (r + 1) * V + (v + 1) % V
    tris = np.stack([np.stack([a, c, b], axis=-1), np.stack([b, c, d], axis=-1)], axis=2)
    return tris.reshape(-1, 3)


def cap_fan(ring_base: int, cap_index: int, verts_per_ring: int) -> _F:
    """Fan triangles ``(base + v, cap, base + (v+1) % V)``."""
    v = np.arange(verts_per_ring)
    return np.stack(
        [ring_base + v, np.full(verts_per_ring, cap_index), ring_base + (v + 1) % verts_per_ring],
        axis=-1,
    )


def ring_centroid(ring: _F) -> _F:
    """Mean X and Z of *ring*, at the ring's height."""
    return np.array([ring[:, 0].mean(), ring[0, 1], ring[:, 2].mean()])


# ---------------------------------------------------------------------------
# Lofting
# ---------------------------------------------------------------------------

def loft(
    front_samples: SilhouetteSampleMap,
    side_samples: SilhouetteSampleMap,
    options: LoftOptions,
) -> Optional[ComponentMesh]:
    """Loft a tube mesh from front and side silhouette samples.

    Parameters
    ----------
    front_samples, side_samples:
        Maps from :func:`loft3d.silhouette.sample_silhouette` built over the
        same range and sample count, so their keys coincide.
    options:
        Range, ring resolution, offsets, caps and optional top shape.

    Returns
    -------
    ComponentMesh or None
        ``None`` when fewer than two levels lie in range or fewer than two
        non-degenerate rings survive.
    """
    V = options.verts_per_ring
    levels = sorted(y for y in front_samples if options.y_min <= y <= options.y_max)
    if len(levels) < 2:
        logger.warning(
            "loft: fewer than 2 height levels between %.4f and %.4f",
            options.y_min, options.y_max,
        )
        return None

    shift = np.array([options.offset_x, 0.0, options.offset_z])
    rings: List[_F] = []
    for y in levels:
        front = front_samples[y]
        side = side_samples.get(y)
        if side is None:
            continue
        half_width = front.half_width
        half_depth = side.half_width
        if half_width <= 0.0 or half_depth <= 0.0:
            continue
        ring = generate_ring(y + options.offset_y, half_width, half_depth, V, options.top_shape)
        rings.append(ring + np.array([front.center, 0.0, side.center]) + shift)

    if len(rings) < 2:
        logger.warning("loft: fewer than 2 valid rings")
        return None

    ring_arr = np.stack(rings)                          # (R, V, 3)
    positions = [ring_arr.reshape(-1, 3)]
    indices = [stitch_rings(len(rings), V)]

    next_index = len(rings) * V
    if options.cap_bottom:
        positions.append(ring_centroid(rings[0])[None, :])
        indices.append(cap_fan(0, next_index, V))
        next_index += 1
    if options.cap_top:
        positions.append(ring_centroid(rings[-1])[None, :])
        indices.append(cap_fan((len(rings) - 1) * V, next_index, V))
        next_index += 1

    pos = np.concatenate(positions, axis=0)
    idx = np.concatenate(indices, axis=0)
    return ComponentMesh(
        positions=pos,
        indices=idx,
        uvs=np.zeros((len(pos), 2)),
        normals=compute_vertex_normals(pos, idx),
        rings=ring_arr,
        cap_count=int(options.cap_bottom) + int(options.cap_top),
    )
