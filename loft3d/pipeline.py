"""Batch orchestration: SVG silhouettes + config → :class:`LoftedAsset`.

Steps per component (declared order)
------------------------------------
1. Look up the front/side (and optional top) polylines by path id.
2. Convert source coordinates to world units (Y flipped, scaled).
3. Build the top-view shape, if any.
4. Sample both silhouettes over the component's height range.
5. Loft, then colour.

Addons follow the components.  Everything that survives is merged in
declared order; when a skeleton is requested the merged mesh is skinned and
the authored animation table is attached.

Component work may fan out over a thread pool; results are always joined in
declared order so the merged buffers are identical across runs.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from _loft_common import _F, as_points
from svgpath import read_svg_paths
from .colors import DEFAULT_COLOR, apply_color_zones, apply_solid_color
from .config import ComponentSpec, LoftConfig, load_animation_table
from .export import Exporter, NpzExporter
from .lofter import LoftOptions, loft
from .mesh import MeshData, merge_meshes
from .outline import normalize_top_outline
from .primitives import ChildObject, build_addon, build_child
from .silhouette import sample_silhouette
from .skinning import Skeleton, SkinBinding, assign_skin_weights

logger = logging.getLogger(__name__)

MIN_SAMPLES = 4


class PipelineError(RuntimeError):
    """Raised when a run produces nothing to export."""


@dataclass
class LoftedAsset:
    """Everything handed to an exporter."""

    name: str
    mesh: MeshData
    skeleton: Optional[Skeleton] = None
    skin: Optional[SkinBinding] = None
    animations: Optional[List[Any]] = None
    children: List[ChildObject] = field(default_factory=list)

    @property
    def is_skinned(self) -> bool:
        return self.skeleton is not None


@dataclass(frozen=True)
class ViewSet:
    """Named polylines of the three orthographic drawings."""

    front: Dict[str, _F]
    side: Dict[str, _F]
    top: Dict[str, _F] = field(default_factory=dict)

    @classmethod
    def load(cls, config: LoftConfig) -> "ViewSet":
        front = read_svg_paths(config.svg_front)
        side = read_svg_paths(config.svg_side)
        top = read_svg_paths(config.svg_top) if config.svg_top else {}
        logger.info("Front SVG: %d paths", len(front))
        logger.info("Side SVG: %d paths", len(side))
        if config.svg_top:
            logger.info("Top SVG: %d paths", len(top))
        return cls(front=front, side=side, top=top)


# ===========================================================================
# Per-component steps
# ===========================================================================

def to_world(points, center_x: float, source_height: float, scale: float) -> _F:
    """Source (Y down) → world (Y up): ``((x - cx) * s, (H - y) * s)``."""
    P = as_points(points)
    return np.stack([(P[:, 0] - center_x) * scale, (source_height - P[:, 1]) * scale], axis=-1)


def sample_count(y_min: float, y_max: float, samples_per_unit: float) -> int:
    """Vertical resolution proportional to the part's height, at least 4."""
    return max(MIN_SAMPLES, int(math.ceil((y_max - y_min) * samples_per_unit)))


def color_component(mesh: MeshData, spec: ComponentSpec, config: LoftConfig) -> MeshData:
    """Component zones > component colour > global zones > default gray."""
    if spec.y_ranges is not None:
        return apply_color_zones(mesh, spec.y_ranges)
    if spec.color is not None:
        return apply_solid_color(mesh, spec.color)
    if config.y_ranges:
        return apply_color_zones(mesh, config.y_ranges)
    return apply_solid_color(mesh, DEFAULT_COLOR)


def build_component(spec: ComponentSpec, views: ViewSet, config: LoftConfig) -> Optional[MeshData]:
    """Loft and colour one component; ``None`` (with a warning) if it is skipped."""
    front_raw = views.front.get(spec.front_key)
    side_raw = views.side.get(spec.side_key)
    if front_raw is None:
        logger.warning("Component %r: no front path found for %r", spec.id, spec.front_key)
        return None
    if side_raw is None:
        logger.warning("Component %r: no side path found for %r", spec.id, spec.side_key)
        return None
    if len(front_raw) == 0 or len(side_raw) == 0:
        logger.warning("Component %r: front or side path has no points", spec.id)
        return None

    verts_per_ring = spec.verts_per_ring or config.verts_per_ring

    top_shape = None
    top_raw = views.top.get(spec.top_key)
    if top_raw is not None and len(top_raw) >= 3:
        top_shape = normalize_top_outline(
            top_raw, config.resolved_top_center_x, config.top_center_y, verts_per_ring
        )
        if top_shape is not None:
            logger.debug(
                "Component %r: top outline %d points -> %d shape vertices",
                spec.id, len(top_raw), len(top_shape),
            )

    front = to_world(front_raw, config.front_center_x, config.svg_height, config.scale)
    side = to_world(side_raw, config.resolved_side_center_x, config.svg_height, config.scale)

    all_y = np.concatenate([front[:, 1], side[:, 1]])
    y_min = float(all_y.min()) if spec.y_min is None else float(spec.y_min)
    y_max = float(all_y.max()) if spec.y_max is None else float(spec.y_max)
    num_samples = sample_count(y_min, y_max, config.samples_per_unit)

    front_samples = sample_silhouette(front, y_min, y_max, num_samples)
    side_samples = sample_silhouette(side, y_min, y_max, num_samples)
    logger.debug(
        "Component %r: Y range %.3f - %.3f, %d/%d samples",
        spec.id, y_min, y_max, len(front_samples), len(side_samples),
    )

    mesh = loft(front_samples, side_samples, LoftOptions(
        y_min=y_min,
        y_max=y_max,
        verts_per_ring=verts_per_ring,
        offset_x=spec.offset_x,
        offset_y=spec.offset_y,
        offset_z=spec.offset_z,
        cap_top=spec.cap_top,
        cap_bottom=spec.cap_bottom,
        top_shape=top_shape,
    ))
    if mesh is None:
        logger.warning("Component %r: failed to generate geometry", spec.id)
        return None

    mesh = color_component(mesh, spec, config)
    logger.info("Component %r: %d verts, %d tris", spec.id, mesh.vertex_count, mesh.triangle_count)
    return mesh


# ===========================================================================
# Whole run
# ===========================================================================

def build_components(
    config: LoftConfig,
    views: ViewSet,
    workers: Optional[int] = None,
) -> List[Optional[MeshData]]:
    """Build every component; result order matches ``config.components``."""
    specs = config.components
    if workers and workers > 1 and len(specs) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda s: build_component(s, views, config), specs))
    return [build_component(s, views, config) for s in specs]


def build_addons(config: LoftConfig) -> List[Optional[MeshData]]:
    out = []
    for spec in config.addons:
        mesh = build_addon(spec)
        if mesh is not None:
            logger.info("Addon %r: %d verts, %d tris", spec.label, mesh.vertex_count, mesh.triangle_count)
        out.append(mesh)
    return out


def build_children(config: LoftConfig) -> List[ChildObject]:
    children = []
    for spec in config.children:
        child = build_child(spec)
        if child is not None:
            logger.info("Child %r: %d verts", child.name, child.mesh.vertex_count)
            children.append(child)
    return children


def build_asset(
    config: LoftConfig,
    workers: Optional[int] = None,
    views: Optional[ViewSet] = None,
) -> LoftedAsset:
    """Run the whole pipeline and return the asset without exporting it.

    Raises
    ------
    PipelineError
        If no component or addon produced geometry.
    """
    logger.info("Processing: %s", config.name)
    if views is None:
        views = ViewSet.load(config)
    if workers is None:
        workers = config.workers

    parts: Sequence[Optional[MeshData]] = build_components(config, views, workers) + build_addons(config)
    meshes = [m for m in parts if m is not None]
    if not meshes:
        raise PipelineError("no geometries generated")

    merged = merge_meshes(meshes)
    asset = LoftedAsset(name=config.name, mesh=merged)

    if config.skeleton:
        skeleton = Skeleton.humanoid()
        logger.info("Building skeleton (%d bones)", len(skeleton.bones))
        asset.skeleton = skeleton
        asset.skin = assign_skin_weights(merged.positions, skeleton.world_positions)
        asset.animations = load_animation_table(config.animations)
        logger.info("Attached %d animation clips", len(asset.animations))
    elif config.children:
        asset.children = build_children(config)

    logger.info(
        "Merged %d parts: %d verts, %d tris",
        len(meshes), merged.vertex_count, merged.triangle_count,
    )
    return asset


def run_pipeline(
    config: LoftConfig,
    exporter: Optional[Exporter] = None,
    output: Optional[Union[str, Path]] = None,
    workers: Optional[int] = None,
) -> Path:
    """Build the asset described by *config* and export it.

    Returns
    -------
    pathlib.Path
        Path written by the exporter.
    """
    asset = build_asset(config, workers=workers)
    exporter = exporter or NpzExporter()
    target = Path(output) if output is not None else config.output
    written = exporter.export(asset, target)
    logger.info("Exported: %s", written)
    return written
