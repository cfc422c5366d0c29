"""Render an exported ``.npz`` asset from three camera angles on one page.

Uses matplotlib's 3-D axes with the stored vertex colours, shaded by a
single diagonal light.  Rigid child objects of static assets are drawn at
their local transforms.

Usage::

    python scripts/preview_asset.py bowling_pin.npz          # saves bowling_pin.png
    python scripts/preview_asset.py knight.npz --out knight_preview.png
    python scripts/preview_asset.py --demo                   # build and show the pin

Requirements: numpy, matplotlib
    pip install "pyloft[viz]"
"""
from __future__ import annotations

import argparse
import os
import sys
import tempfile

# Ensure the repo root (parent of scripts/) is importable regardless of cwd
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from loft3d.primitives import rotation_matrix


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _load_triangles(path: str):
    """Return ``(name, tris, colors)``: asset name, ``(F, 3, 3)`` world triangles
    and ``(F, 3)`` colours."""
    with np.load(path) as data:
        name = str(data["name"])
        parts = [(data["positions"], data["indices"], data["colors"])]

        if "child_names" in data:
            for i in range(len(data["child_names"])):
                prefix = f"child{i}_"
                R = rotation_matrix(*data[prefix + "rotation"])
                pos = data[prefix + "positions"] @ R.T + data[prefix + "position"]
                parts.append((pos, data[prefix + "indices"], data[prefix + "colors"]))

    tris, colors = [], []
    for pos, idx, col in parts:
        idx = idx.astype(np.int64)
        tris.append(pos[idx])
        colors.append(col[idx].mean(axis=1))
    return name, np.concatenate(tris), np.concatenate(colors)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_asset(path: str, out_path: str) -> None:
    name, tris, base_colors = _load_triangles(path)

    # Y is up in the asset; matplotlib's Z is up
    view_tris = tris[..., [0, 2, 1]]

    e1 = tris[:, 1] - tris[:, 0]
    e2 = tris[:, 2] - tris[:, 0]
    norms = np.cross(e1, e2)
    nlen = np.linalg.norm(norms, axis=1, keepdims=True)
    norms = norms / np.where(nlen > 0, nlen, 1.0)
    light = np.array([0.577, 0.577, 0.577])       # diagonal illumination
    diffuse = np.clip(norms @ light, 0.0, 1.0)
    shade = 0.3 + 0.7 * diffuse                   # ambient + diffuse
    face_colors = np.clip(base_colors * shade[:, None], 0.0, 1.0)

    lo = view_tris.reshape(-1, 3).min(axis=0)
    hi = view_tris.reshape(-1, 3).max(axis=0)
    centre = (lo + hi) / 2.0
    half = (hi - lo).max() / 2.0 * 1.05

    views = [("front", 10, -90), ("side", 10, 0), ("three-quarter", 20, -55)]
    fig = plt.figure(figsize=(len(views) * 4.0, 4.5), facecolor="#111111")
    for idx, (label, elev, azim) in enumerate(views):
        ax = fig.add_subplot(1, len(views), idx + 1, projection="3d")
        ax.set_facecolor("#111111")
        ax.set_axis_off()
        ax.set_title(label, color="white", fontsize=9, pad=1)
        ax.add_collection3d(Poly3DCollection(view_tris, facecolors=face_colors,
                                             edgecolors="none", alpha=1.0))
        ax.set_xlim(centre[0] - half, centre[0] + half)
        ax.set_ylim(centre[1] - half, centre[1] + half)
        ax.set_zlim(centre[2] - half, centre[2] + half)
        ax.set_box_aspect([1, 1, 1])
        ax.view_init(elev=elev, azim=azim)

    fig.suptitle(f"{name} — {len(tris)} triangles", color="white", fontsize=12)
    plt.tight_layout(pad=0.3)
    fig.savefig(out_path, dpi=150, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    print(f"Saved: {out_path}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render an exported loft3d .npz asset to a PNG preview."
    )
    parser.add_argument("asset", nargs="?", help="Path to an exported .npz asset")
    parser.add_argument("--out", default=None, help="Output PNG path")
    parser.add_argument("--demo", action="store_true",
                        help="Build the bowling pin demo and preview it")
    args = parser.parse_args()

    if args.demo:
        from loft3d.examples import BowlingPin
        from loft3d.pipeline import run_pipeline

        with tempfile.TemporaryDirectory() as tmp:
            asset = str(run_pipeline(BowlingPin(tmp)))
            render_asset(asset, args.out or "bowling_pin.png")
        return

    if not args.asset:
        parser.error("an asset path is required unless --demo is given")
    out = args.out or os.path.splitext(args.asset)[0] + ".png"
    render_asset(args.asset, out)


if __name__ == "__main__":
    main()
