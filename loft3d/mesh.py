"""Indexed triangle meshes: container, vertex normals and merging."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

import numpy as np
import numpy.typing as npt

from _loft_common import _F, normalize_rows

_I = npt.NDArray[np.integer]


# ===========================================================================
# Containers
# ===========================================================================

@dataclass
class MeshData:
    """Indexed triangle mesh.

    Attributes
    ----------
    positions:
        ``(N, 3)`` float64 vertex positions.
    indices:
        ``(F, 3)`` int64 triangle vertex indices.
    colors:
        Optional ``(N, 3)`` RGB vertex colours in ``[0, 1]``.
    uvs:
        Optional ``(N, 2)`` texture coordinates.
    normals:
        Optional ``(N, 3)`` unit vertex normals.
    """

    positions: _F
    indices: _I
    colors: Optional[_F] = None
    uvs: Optional[_F] = None
    normals: Optional[_F] = None

    def __post_init__(self) -> None:
        self.positions = np.asarray(self.positions, dtype=np.float64).reshape(-1, 3)
        self.indices = np.asarray(self.indices, dtype=np.int64).reshape(-1, 3)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    def with_normals(self) -> "MeshData":
        """Return a copy whose normals are recomputed from the triangles."""
        return replace(self, normals=compute_vertex_normals(self.positions, self.indices))


@dataclass
class ComponentMesh(MeshData):
    """Mesh produced by the lofter, keeping its cross-section rings.

    ``rings`` has shape ``(R, V, 3)``; the first ``R * V`` positions are the
    flattened rings and the trailing ``cap_count`` positions are cap centres.
    """

    rings: _F = field(default_factory=lambda: np.zeros((0, 0, 3)))
    cap_count: int = 0


# ===========================================================================
# Normals
# ===========================================================================

def face_normals(positions: _F, indices: _I) -> _F:
    """Unnormalized (area-weighted) face normals ``(p1 - p0) × (p2 - p0)``."""
    tris = positions[indices]                       # (F, 3, 3)
    return np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])


def compute_vertex_normals(positions: _F, indices: _I) -> _F:
    """Smooth vertex normals by face accumulation and per-vertex averaging.

    Each face normal is added to its three vertices; the sums are then
    normalized.  Vertices shared between triangles get smoothed normals,
    duplicated vertices (part seams) stay faceted.  Vertices referenced by
    no triangle get a zero normal.
    """
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    indices = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    acc = np.zeros_like(positions)
    if len(indices):
        fn = face_normals(positions, indices)
        for corner in range(3):
            np.add.at(acc, indices[:, corner], fn)
    return normalize_rows(acc)


# ===========================================================================
# Merging
# ===========================================================================

def _attribute(mesh: MeshData, name: str, width: int) -> _F:
    value = getattr(mesh, name)
    if value is None:
        return np.zeros((mesh.vertex_count, width), dtype=np.float64)
    return np.asarray(value, dtype=np.float64).reshape(-1, width)


def merge_meshes(meshes: Sequence[MeshData]) -> MeshData:
    """Concatenate *meshes* into one indexed mesh.

    Vertex attributes are concatenated in input order; a mesh without
    colours or UVs contributes zeros for its span.  Each mesh's indices are
    offset by the number of vertices appended before it.  Normals are
    recomputed over the merged buffer.

    Raises
    ------
    ValueError
        If *meshes* is empty.
    """
    if not meshes:
        raise ValueError("merge_meshes() needs at least one mesh")

    counts = [m.vertex_count for m in meshes]
    offsets = np.concatenate([[0], np.cumsum(counts)[:-1]]).astype(np.int64)

    positions = np.concatenate([m.positions for m in meshes], axis=0)
    colors = np.concatenate([_attribute(m, "colors", 3) for m in meshes], axis=0)
    uvs = np.concatenate([_attribute(m, "uvs", 2) for m in meshes], axis=0)
    indices = np.concatenate(
        [m.indices + off for m, off in zip(meshes, offsets)], axis=0
    )

    return MeshData(
        positions=positions,
        indices=indices,
        colors=colors,
        uvs=uvs,
        normals=compute_vertex_normals(positions, indices),
    )
