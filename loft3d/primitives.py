"""Parametric primitive meshes for addons and rigid child objects.

All primitives are centred on the origin; cylinders run along Y.  Winding
is counter-clockwise seen from outside, so face normals point outward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

import numpy as np

from _loft_common import _F, vec3
from .colors import DEFAULT_COLOR, ColorValue, apply_solid_color
from .config import AddonSpec, ChildSpec
from .mesh import MeshData, compute_vertex_normals, merge_meshes

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]

TIRE_COLOR = 0x222222
HUB_COLOR = 0x888888


# ===========================================================================
# Transforms
# ===========================================================================

def rotation_matrix(rx: float, ry: float, rz: float) -> _F:
    """Euler rotation in XYZ order: ``Rx @ Ry @ Rz``."""
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)
    Rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    Ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    Rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return Rx @ Ry @ Rz


def transform_mesh(
    mesh: MeshData,
    rotation: Optional[Sequence[float]] = None,
    position: Optional[Sequence[float]] = None,
    translate_first: bool = False,
) -> MeshData:
    """Rotate *mesh* about its local origin, then translate it.

    With *translate_first* the mesh is moved to *position* before the
    rotation, so the rotation pivots about the world origin.
    """
    positions = mesh.positions
    normals = mesh.normals
    if translate_first and position is not None:
        positions = positions + np.asarray(position, dtype=np.float64)
        position = None
    if rotation is not None:
        R = rotation_matrix(*rotation)
        positions = positions @ R.T
        if normals is not None:
            normals = normals @ R.T
    if position is not None:
        positions = positions + np.asarray(position, dtype=np.float64)
    return replace(mesh, positions=positions, normals=normals)


# ===========================================================================
# Primitive meshes
# ===========================================================================

# (outward normal, u axis, v axis) with u × v = normal
_BOX_FACES = (
    ((1, 0, 0), (0, 0, -1), (0, 1, 0)),
    ((-1, 0, 0), (0, 0, 1), (0, 1, 0)),
    ((0, 1, 0), (1, 0, 0), (0, 0, -1)),
    ((0, -1, 0), (1, 0, 0), (0, 0, 1)),
    ((0, 0, 1), (1, 0, 0), (0, 1, 0)),
    ((0, 0, -1), (-1, 0, 0), (0, 1, 0)),
)


def box_mesh(sx: float, sy: float, sz: float) -> MeshData:
    """Axis-aligned box of full size ``(sx, sy, sz)``: 24 vertices, 12 triangles."""
    half = np.array([sx, sy, sz], dtype=np.float64) / 2.0
    corners = np.array([[-1, -1], [1, -1], [1, 1], [-1, 1]], dtype=np.float64)
    positions, normals, uvs, indices = [], [], [], []
    for f, (n, u, v) in enumerate(_BOX_FACES):
        n, u, v = (np.array(a, dtype=np.float64) for a in (n, u, v))
        centre = n * half
        positions.append(centre + corners[:, :1] * (u * half) + corners[:, 1:] * (v * half))
        normals.append(np.tile(n, (4, 1)))
        uvs.append((corners + 1.0) / 2.0)
        base = 4 * f
        indices.append([[base, base + 1, base + 2], [base, base + 2, base + 3]])
    return MeshData(
        positions=np.concatenate(positions),
        indices=np.array(indices).reshape(-1, 3),
        uvs=np.concatenate(uvs),
        normals=np.concatenate(normals),
    )


def cylinder_mesh(
    radius_top: float,
    radius_bottom: float,
    height: float,
    segments: int = 8,
) -> MeshData:
    """Capped cylinder (or frustum) along Y, centred on the origin.

    The side is a grid of ``segments + 1`` columns (seam duplicated for UVs)
    by 2 rows; each cap is a fan around its own centre vertex.
    """
    S = int(segments)
    h = height / 2.0
    theta = np.arange(S + 1) * (2.0 * np.pi / S)
    sin, cos = np.sin(theta), np.cos(theta)
    col = np.arange(S + 1)

    # side rows: 0 = top, 1 = bottom
    side = np.concatenate([
        vec3(radius_top * sin, np.full(S + 1, h), radius_top * cos),
        vec3(radius_bottom * sin, np.full(S + 1, -h), radius_bottom * cos),
    ])
    side_uv = np.concatenate([
        np.stack([col / S, np.ones(S + 1)], axis=-1),
        np.stack([col / S, np.zeros(S + 1)], axis=-1),
    ])
    j = np.arange(S)
    a, b, c, d = j, (S + 1) + j, (S + 1) + j + 1, j + 1
    side_idx = np.concatenate([np.stack([a, b, d], -1), np.stack([b, c, d], -1)])

    # caps: centre then S rim vertices
    top_base = len(side)
    bot_base = top_base + S + 1
    top = np.concatenate([[[0.0, h, 0.0]], vec3(radius_top * sin[:S], np.full(S, h), radius_top * cos[:S])])
    bot = np.concatenate([[[0.0, -h, 0.0]], vec3(radius_bottom * sin[:S], np.full(S, -h), radius_bottom * cos[:S])])
    rim = 1 + j
    rim_next = 1 + (j + 1) % S
    top_idx = np.stack([np.full(S, top_base), top_base + rim, top_base + rim_next], -1)
    bot_idx = np.stack([np.full(S, bot_base), bot_base + rim_next, bot_base + rim], -1)
    cap_uv = np.concatenate([[[0.5, 0.5]], np.stack([0.5 + 0.5 * sin[:S], 0.5 + 0.5 * cos[:S]], -1)])

    positions = np.concatenate([side, top, bot])
    indices = np.concatenate([side_idx, top_idx, bot_idx])
    return MeshData(
        positions=positions,
        indices=indices,
        uvs=np.concatenate([side_uv, cap_uv, cap_uv]),
        normals=compute_vertex_normals(positions, indices),
    )


def sphere_mesh(radius: float, width_segments: int = 6, height_segments: int = 4) -> MeshData:
    """UV sphere: ``(H + 1) × (W + 1)`` vertices, pole rows collapse to points."""
    W, H = int(width_segments), int(height_segments)
    u = np.arange(W + 1) / W
    v = np.arange(H + 1) / H
    U, Vv = np.meshgrid(u, v)                     # (H+1, W+1)
    positions = vec3(
        -radius * np.cos(U * 2.0 * np.pi) * np.sin(Vv * np.pi),
        radius * np.cos(Vv * np.pi),
        radius * np.sin(U * 2.0 * np.pi) * np.sin(Vv * np.pi),
    ).reshape(-1, 3)
    uvs = np.stack([U, 1.0 - Vv], axis=-1).reshape(-1, 2)

    tris = []
    for iy in range(H):
        for ix in range(W):
            a = iy * (W + 1) + ix + 1
            b = iy * (W + 1) + ix
            c = (iy + 1) * (W + 1) + ix
            d = (iy + 1) * (W + 1) + ix + 1
            if iy != 0:
                tris.append((a, b, d))
            if iy != H - 1:
                tris.append((b, c, d))
    indices = np.array(tris, dtype=np.int64).reshape(-1, 3)
    return MeshData(
        positions=positions,
        indices=indices,
        uvs=uvs,
        normals=compute_vertex_normals(positions, indices),
    )


# ===========================================================================
# Addons
# ===========================================================================

def addon_geometry(spec: AddonSpec) -> Optional[MeshData]:
    """Untransformed, uncoloured primitive for *spec*; ``None`` for unknown types."""
    kind = spec.type.lower()
    if kind == "box":
        if spec.size is None:
            logger.warning("Addon %r: box needs a 'size'", spec.label)
            return None
        return box_mesh(*spec.size)
    if kind == "cylinder":
        r_top = spec.radius_top if spec.radius_top is not None else spec.radius
        r_bot = spec.radius_bottom if spec.radius_bottom is not None else spec.radius
        if r_top is None or r_bot is None or spec.height is None:
            logger.warning("Addon %r: cylinder needs a radius and a 'height'", spec.label)
            return None
        return cylinder_mesh(r_top, r_bot, spec.height, spec.segments or 8)
    if kind == "sphere":
        if spec.radius is None:
            logger.warning("Addon %r: sphere needs a 'radius'", spec.label)
            return None
        return sphere_mesh(spec.radius, spec.segments or 6, spec.segments or 4)
    logger.warning("Unknown addon type: %s", spec.type)
    return None


def build_addon(spec: AddonSpec) -> Optional[MeshData]:
    """Transformed, solid-coloured addon mesh; ``None`` if it cannot be built."""
    mesh = addon_geometry(spec)
    if mesh is None:
        return None
    mesh = transform_mesh(mesh, rotation=spec.rotation, position=spec.position, translate_first=True)
    color = spec.color if spec.color is not None else DEFAULT_COLOR
    return apply_solid_color(mesh, color)


# ===========================================================================
# Child objects
# ===========================================================================

@dataclass(frozen=True)
class ChildObject:
    """Named rigid sub-mesh with its own local transform (not baked in)."""

    name: str
    mesh: MeshData
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)


def _colored(mesh: MeshData, color: ColorValue) -> MeshData:
    return apply_solid_color(mesh, color if color is not None else DEFAULT_COLOR)


def wheel_parts(radius: float, width: float, right_side: bool) -> Sequence[MeshData]:
    """Tire, hub cap and five spokes of a wheel lying along the X axis."""
    axle = (0.0, 0.0, np.pi / 2.0)
    tire = transform_mesh(cylinder_mesh(radius, radius, width, 14), rotation=axle)
    hub = transform_mesh(cylinder_mesh(radius * 0.6, radius * 0.6, width + 0.02, 10), rotation=axle)
    parts = [_colored(tire, TIRE_COLOR), _colored(hub, HUB_COLOR)]

    face_x = width / 2.0 + 0.01 if right_side else -width / 2.0 - 0.01
    for i in range(5):
        angle = i / 5.0 * 2.0 * np.pi
        spoke = transform_mesh(
            box_mesh(0.02, radius * 0.35, 0.025),
            rotation=(angle, 0.0, 0.0),
            position=(face_x, np.sin(angle) * radius * 0.35, np.cos(angle) * radius * 0.35),
        )
        parts.append(_colored(spoke, HUB_COLOR))
    return parts


def build_child(spec: ChildSpec) -> Optional[ChildObject]:
    """Build a named rigid child; ``None`` for unknown types."""
    kind = spec.type.lower()
    if kind == "wheel":
        right_side = spec.position is not None and spec.position[0] > 0
        mesh = merge_meshes(wheel_parts(spec.radius or 0.25, spec.width or 0.14, right_side))
    elif kind == "box":
        mesh = _colored(box_mesh(*(spec.size or (0.1, 0.1, 0.1))), spec.color)
    elif kind == "cylinder":
        r = spec.radius or 0.1
        mesh = cylinder_mesh(r, r, spec.height or 0.1, spec.segments or 12)
        if spec.rotate_x:
            mesh = transform_mesh(mesh, rotation=(spec.rotate_x, 0.0, 0.0))
        if spec.rotate_z:
            mesh = transform_mesh(mesh, rotation=(0.0, 0.0, spec.rotate_z))
        mesh = _colored(mesh, spec.color)
    else:
        logger.warning("Unknown child type %r for %r", spec.type, spec.name)
        return None

    return ChildObject(
        name=spec.name,
        mesh=mesh,
        position=spec.position or (0.0, 0.0, 0.0),
        rotation=spec.rotation or (0.0, 0.0, 0.0),
    )
