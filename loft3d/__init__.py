"""
loft3d — 3D Meshes Lofted from Orthographic Silhouettes
=======================================================

Builds low-poly game meshes from hand-drawn front, side and (optionally)
top view outlines.  Each named part is sampled as a stack of horizontal
cross-sections, lofted into a ring-stitched tube, coloured, and merged
with the other parts into one indexed mesh.

Implemented features
--------------------
- Silhouette sampling: :func:`sample_silhouette`
- Top-view cross-section shapes: :func:`normalize_top_outline`
- Lofting: :func:`loft` with optional end caps and per-part offsets
- Mesh merging with smooth vertex normals: :func:`merge_meshes`
- Vertex colour zones: :class:`ColorZone`
- Parametric addons (box, cylinder, sphere) and rigid child objects
- Fixed humanoid skeleton and two-bone skin weights:
  :class:`Skeleton`, :func:`assign_skin_weights`
- Batch orchestration from a JSON config: :func:`run_pipeline`
- Example assemblies: :func:`~loft3d.examples.BowlingPin`

Quick start
-----------

From a config file::

    from loft3d import load_config, run_pipeline

    config = load_config("characters/knight.json")
    run_pipeline(config, workers=4)         # writes config.output (.npz)

From code::

    from loft3d import build_asset
    from loft3d.examples import BowlingPin

    asset = build_asset(BowlingPin("build/pin"))
    print(asset.mesh.vertex_count, asset.mesh.triangle_count)

Command line::

    python -m loft3d characters/knight.json --workers 4
    python -m loft3d --demo -o pin.npz
"""

from .colors import ColorZone, parse_color
from .config import (
    AddonSpec,
    ChildSpec,
    ComponentSpec,
    LoftConfig,
    config_from_dict,
    load_config,
)
from .export import Exporter, NpzExporter
from .lofter import LoftOptions, loft
from .mesh import ComponentMesh, MeshData, compute_vertex_normals, merge_meshes
from .outline import normalize_top_outline
from .pipeline import LoftedAsset, PipelineError, build_asset, run_pipeline
from .silhouette import Span, sample_silhouette
from .skinning import Skeleton, SkinBinding, assign_skin_weights

__version__ = "0.1.0"

__all__ = [
    "ColorZone",
    "parse_color",
    "AddonSpec",
    "ChildSpec",
    "ComponentSpec",
    "LoftConfig",
    "config_from_dict",
    "load_config",
    "Exporter",
    "NpzExporter",
    "LoftOptions",
    "loft",
    "ComponentMesh",
    "MeshData",
    "compute_vertex_normals",
    "merge_meshes",
    "normalize_top_outline",
    "LoftedAsset",
    "PipelineError",
    "build_asset",
    "run_pipeline",
    "Span",
    "sample_silhouette",
    "Skeleton",
    "SkinBinding",
    "assign_skin_weights",
    "__version__",
]
