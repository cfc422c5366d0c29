"""Fixed humanoid skeleton and distance-based skin weights.

The skeleton is a constant table of bone records (name, parent index, local
offset); parents always precede their children.  Bind-pose world positions
are the local offsets accumulated down the parent chain and are used only
to weight vertices, never as runtime transforms.

Weighting rule
--------------
For each vertex find the nearest bone (distance ``d1``) and the second
nearest (``d2``).  When ``d1 < threshold`` and ``d2 < 2 * threshold`` the
vertex sits near a joint and is blended::

    w1 = 1 - d1 / (d1 + d2)
    w2 = 1 - d2 / (d1 + d2)

(then normalized so ``w1 + w2 = 1``).  Otherwise it is bound rigidly to the
nearest bone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from _loft_common import _F, as_points, length

JOINT_THRESHOLD = 0.15


class BoneDef(NamedTuple):
    """One bone record: *parent* is ``-1`` for the root."""

    name: str
    parent: int
    offset: Tuple[float, float, float]


HUMANOID_BONES: Tuple[BoneDef, ...] = (
    BoneDef("Root",       -1, (0.0, 0.95, 0.0)),
    BoneDef("Spine",       0, (0.0, 0.2, 0.0)),
    BoneDef("Chest",       1, (0.0, 0.2, 0.0)),
    BoneDef("Head",        2, (0.0, 0.3, 0.0)),
    BoneDef("L_Shoulder",  2, (-0.38, 0.0, 0.0)),
    BoneDef("L_Elbow",     4, (0.0, -0.3, 0.0)),
    BoneDef("L_Hand",      5, (0.0, -0.3, 0.0)),
    BoneDef("R_Shoulder",  2, (0.38, 0.0, 0.0)),
    BoneDef("R_Elbow",     7, (0.0, -0.3, 0.0)),
    BoneDef("R_Hand",      8, (0.0, -0.3, 0.0)),
    BoneDef("L_Hip",       0, (-0.12, 0.0, 0.0)),
    BoneDef("L_Knee",     10, (0.0, -0.4, 0.0)),
    BoneDef("L_Foot",     11, (0.0, -0.4, 0.0)),
    BoneDef("R_Hip",       0, (0.12, 0.0, 0.0)),
    BoneDef("R_Knee",     13, (0.0, -0.4, 0.0)),
    BoneDef("R_Foot",     14, (0.0, -0.4, 0.0)),
)


def bind_pose_world_positions(bones: Sequence[BoneDef]) -> _F:
    """Accumulate local offsets through the parent chain; ``(B, 3)``.

    Raises
    ------
    ValueError
        If a bone's parent does not come before it.
    """
    world = np.zeros((len(bones), 3), dtype=np.float64)
    for i, bone in enumerate(bones):
        if bone.parent >= i:
            raise ValueError(
                f"bone {bone.name!r} (index {i}) has parent {bone.parent}; "
                "parents must precede children"
            )
        base = world[bone.parent] if bone.parent >= 0 else 0.0
        world[i] = base + np.asarray(bone.offset, dtype=np.float64)
    return world


@dataclass(frozen=True)
class Skeleton:
    """Ordered bones plus their bind-pose world positions."""

    bones: Tuple[BoneDef, ...]
    world_positions: _F

    @classmethod
    def from_bones(cls, bones: Sequence[BoneDef]) -> "Skeleton":
        bones = tuple(bones)
        return cls(bones=bones, world_positions=bind_pose_world_positions(bones))

    @classmethod
    def humanoid(cls) -> "Skeleton":
        """The fixed 16-bone humanoid rig."""
        return cls.from_bones(HUMANOID_BONES)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(b.name for b in self.bones)

    @property
    def parents(self) -> npt.NDArray[np.integer]:
        return np.array([b.parent for b in self.bones], dtype=np.int64)

    @property
    def offsets(self) -> _F:
        return np.array([b.offset for b in self.bones], dtype=np.float64)


@dataclass(frozen=True)
class SkinBinding:
    """Per-vertex bone influences.

    ``joints`` and ``weights`` are ``(N, 2)``; a rigidly bound vertex has a
    zero second weight.
    """

    joints: npt.NDArray[np.integer]
    weights: _F


def assign_skin_weights(
    vertices,
    bone_positions,
    joint_threshold: float = JOINT_THRESHOLD,
) -> SkinBinding:
    """Bind every vertex to at most two bones by bind-pose distance.

    Parameters
    ----------
    vertices:
        ``(N, 3)`` vertex positions.
    bone_positions:
        ``(B, 3)`` bind-pose world positions, ``B >= 1``.
    joint_threshold:
        Distance under which a vertex is considered near a joint.

    Returns
    -------
    SkinBinding
        Weights of every row sum to 1.  Ties between equidistant bones go
        to the lower bone index.
    """
    V = as_points(vertices, 3)
    B = as_points(bone_positions, 3)
    if len(B) == 0:
        raise ValueError("assign_skin_weights() needs at least one bone")

    dist = length(V[:, None, :] - B[None, :, :])            # (N, B)
    order = np.argsort(dist, axis=1, kind="stable")
    bone1 = order[:, 0]
    rows = np.arange(len(V))
    d1 = dist[rows, bone1]

    joints = np.zeros((len(V), 2), dtype=np.int64)
    weights = np.zeros((len(V), 2), dtype=np.float64)
    joints[:, 0] = bone1
    weights[:, 0] = 1.0

    if len(B) < 2:
        return SkinBinding(joints=joints, weights=weights)

    bone2 = order[:, 1]
    d2 = dist[rows, bone2]
    blend = (d1 < joint_threshold) & (d2 < 2.0 * joint_threshold)

    total = d1 + d2
    even = total <= 0.0
    safe_total = np.where(even, 1.0, total)
    w1 = np.where(even, 0.5, 1.0 - d1 / safe_total)
    w2 = np.where(even, 0.5, 1.0 - d2 / safe_total)
    norm = w1 + w2

    joints[blend, 1] = bone2[blend]
    weights[blend, 0] = (w1 / norm)[blend]
    weights[blend, 1] = (w2 / norm)[blend]
    return SkinBinding(joints=joints, weights=weights)
