"""Hand-off of a finished asset to an on-disk format.

The container format of the real game asset (glTF/GLB) lives outside this
package.  :class:`Exporter` is the seam; :class:`NpzExporter` is a plain
numpy archive useful for inspection, tests and downstream conversion.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Union

import numpy as np

if TYPE_CHECKING:
    from .pipeline import LoftedAsset


class Exporter:
    """Writes a :class:`~loft3d.pipeline.LoftedAsset` to *path*."""

    def export(self, asset: "LoftedAsset", path: Union[str, Path]) -> Path:
        raise NotImplementedError


def asset_arrays(asset: "LoftedAsset") -> Dict[str, np.ndarray]:
    """Flatten *asset* into named arrays.

    Static assets carry their rigid children as ``child<i>_*`` arrays;
    skinned assets carry the skeleton, the binding and the animation table
    (as a JSON string, unmodified).
    """
    mesh = asset.mesh
    arrays: Dict[str, np.ndarray] = {
        "name": np.array(asset.name),
        "positions": mesh.positions.astype(np.float32),
        "normals": np.asarray(mesh.normals, dtype=np.float32),
        "colors": np.asarray(mesh.colors, dtype=np.float32),
        "uvs": np.asarray(mesh.uvs, dtype=np.float32),
        "indices": mesh.indices.astype(np.uint32),
    }

    if asset.skeleton is not None:
        skel = asset.skeleton
        arrays.update(
            bone_names=np.array(skel.names),
            bone_parents=skel.parents.astype(np.int32),
            bone_offsets=skel.offsets.astype(np.float32),
            bone_world_positions=skel.world_positions.astype(np.float32),
            animations=np.array(json.dumps(asset.animations or [])),
        )
        if asset.skin is not None:
            arrays.update(
                skin_joints=asset.skin.joints.astype(np.uint16),
                skin_weights=asset.skin.weights.astype(np.float32),
            )
        return arrays

    arrays["child_names"] = np.array([c.name for c in asset.children], dtype=str)
    for i, child in enumerate(asset.children):
        prefix = f"child{i}_"
        arrays[prefix + "positions"] = child.mesh.positions.astype(np.float32)
        arrays[prefix + "indices"] = child.mesh.indices.astype(np.uint32)
        arrays[prefix + "colors"] = np.asarray(child.mesh.colors, dtype=np.float32)
        arrays[prefix + "normals"] = np.asarray(child.mesh.normals, dtype=np.float32)
        arrays[prefix + "position"] = np.array(child.position, dtype=np.float32)
        arrays[prefix + "rotation"] = np.array(child.rotation, dtype=np.float32)
    return arrays


class NpzExporter(Exporter):
    """Compressed ``.npz`` archive of :func:`asset_arrays`."""

    def export(self, asset: "LoftedAsset", path: Union[str, Path]) -> Path:
        path = Path(path)
        out_dir = os.path.dirname(path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with path.open("wb") as fh:
            np.savez_compressed(fh, **asset_arrays(asset))
        return path
