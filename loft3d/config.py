"""Declarative pipeline description loaded from JSON.

Keys may be written in snake_case or in camelCase (``svgFront``,
``capTop``, ``yRanges`` …); both spell the same field.  Relative file paths
are resolved against the directory of the config file.

Minimal example::

    {
      "name": "bowling_pin",
      "svg_front": "pin-front.svg",
      "svg_side": "pin-side.svg",
      "svg_height": 200,
      "svg_center_x": 100,
      "scale": 0.01,
      "components": [{"id": "body", "cap_top": true, "cap_bottom": true}],
      "y_ranges": [{"y_min": 0, "y_max": 0.5, "color": "0xeeeeee"}]
    }
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .colors import ColorValue, ColorZone

Vec3 = Tuple[float, float, float]

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


# ===========================================================================
# Specs
# ===========================================================================

@dataclass(frozen=True)
class ComponentSpec:
    """One lofted part of the model."""

    id: str
    front_path: Optional[str] = None
    side_path: Optional[str] = None
    top_path: Optional[str] = None
    y_min: Optional[float] = None
    y_max: Optional[float] = None
    offset_x: float = 0.0
    offset_y: float = 0.0
    offset_z: float = 0.0
    cap_top: bool = False
    cap_bottom: bool = False
    color: ColorValue = None
    y_ranges: Optional[Tuple[ColorZone, ...]] = None
    verts_per_ring: Optional[int] = None

    @property
    def front_key(self) -> str:
        return self.front_path or self.id

    @property
    def side_key(self) -> str:
        return self.side_path or self.id

    @property
    def top_key(self) -> str:
        return self.top_path or self.id


@dataclass(frozen=True)
class AddonSpec:
    """Parametric primitive merged into the mesh for detail lofting cannot express."""

    type: str
    id: Optional[str] = None
    size: Optional[Vec3] = None
    radius: Optional[float] = None
    radius_top: Optional[float] = None
    radius_bottom: Optional[float] = None
    height: Optional[float] = None
    segments: Optional[int] = None
    position: Optional[Vec3] = None
    rotation: Optional[Vec3] = None
    color: ColorValue = None

    @property
    def label(self) -> str:
        return self.id or self.type


@dataclass(frozen=True)
class ChildSpec:
    """Named rigid attachment of a static model (wheel, light, …)."""

    name: str
    type: str
    radius: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    size: Optional[Vec3] = None
    segments: Optional[int] = None
    rotate_x: Optional[float] = None
    rotate_z: Optional[float] = None
    position: Optional[Vec3] = None
    rotation: Optional[Vec3] = None
    color: ColorValue = None


@dataclass(frozen=True)
class LoftConfig:
    """Complete description of one asset build."""

    svg_front: Path
    svg_side: Path
    components: Tuple[ComponentSpec, ...]
    name: str = "lofted_model"
    svg_top: Optional[Path] = None
    svg_height: float = 200.0
    svg_center_x: float = 100.0
    side_center_x: Optional[float] = None
    top_center_x: Optional[float] = None
    top_center_y: float = 100.0
    scale: float = 1.0
    verts_per_ring: int = 10
    samples_per_unit: float = 40.0
    y_ranges: Tuple[ColorZone, ...] = ()
    addons: Tuple[AddonSpec, ...] = ()
    children: Tuple[ChildSpec, ...] = ()
    skeleton: bool = False
    animations: Optional[Path] = None
    workers: Optional[int] = None
    output: Path = field(default_factory=lambda: Path("output.npz"))

    @property
    def front_center_x(self) -> float:
        return self.svg_center_x

    @property
    def resolved_side_center_x(self) -> float:
        return self.svg_center_x if self.side_center_x is None else self.side_center_x

    @property
    def resolved_top_center_x(self) -> float:
        return self.svg_center_x if self.top_center_x is None else self.top_center_x


# ===========================================================================
# Parsing
# ===========================================================================

def snake_case(key: str) -> str:
    """``"svgCenterX"`` → ``"svg_center_x"``; snake_case keys pass through."""
    return _CAMEL_RE.sub("_", key).lower()


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {snake_case(k): v for k, v in data.items()}


def _build(cls, data: Mapping[str, Any], where: str, **overrides):
    """Instantiate dataclass *cls* from the known keys of *data*."""
    if not isinstance(data, Mapping):
        raise ValueError(f"{where}: expected an object, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    kwargs = {k: v for k, v in _normalize_keys(data).items() if k in known}
    kwargs.update(overrides)
    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise ValueError(f"{where}: {exc}") from exc


def _vec3(value: Any, where: str) -> Optional[Vec3]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{where}: expected a list of 3 numbers, got {value!r}")
    return (float(value[0]), float(value[1]), float(value[2]))


def parse_zones(items: Optional[Sequence[Mapping[str, Any]]], where: str) -> Tuple[ColorZone, ...]:
    """Parse a list of ``{y_min, y_max, color}`` objects."""
    if not items:
        return ()
    zones = []
    for i, item in enumerate(items):
        zone = _build(ColorZone, item, f"{where}[{i}]")
        zones.append(ColorZone(float(zone.y_min), float(zone.y_max), zone.color))
    return tuple(zones)


def parse_component(data: Mapping[str, Any], index: int) -> ComponentSpec:
    where = f"components[{index}]"
    norm = _normalize_keys(data) if isinstance(data, Mapping) else data
    if isinstance(norm, Mapping) and "id" not in norm:
        raise ValueError(f"{where}: missing required key 'id'")
    zones = norm.get("y_ranges") if isinstance(norm, Mapping) else None
    return _build(
        ComponentSpec, data, where,
        y_ranges=parse_zones(zones, f"{where}.y_ranges") if zones is not None else None,
    )


def parse_addon(data: Mapping[str, Any], index: int) -> AddonSpec:
    where = f"addons[{index}]"
    norm = _normalize_keys(data) if isinstance(data, Mapping) else {}
    if "type" not in norm:
        raise ValueError(f"{where}: missing required key 'type'")
    return _build(
        AddonSpec, data, where,
        size=_vec3(norm.get("size"), f"{where}.size"),
        position=_vec3(norm.get("position"), f"{where}.position"),
        rotation=_vec3(norm.get("rotation"), f"{where}.rotation"),
    )


def parse_child(data: Mapping[str, Any], index: int) -> ChildSpec:
    where = f"children[{index}]"
    norm = _normalize_keys(data) if isinstance(data, Mapping) else {}
    for key in ("name", "type"):
        if key not in norm:
            raise ValueError(f"{where}: missing required key {key!r}")
    return _build(
        ChildSpec, data, where,
        size=_vec3(norm.get("size"), f"{where}.size"),
        position=_vec3(norm.get("position"), f"{where}.position"),
        rotation=_vec3(norm.get("rotation"), f"{where}.rotation"),
    )


def config_from_dict(
    data: Mapping[str, Any],
    base_dir: Union[str, Path] = ".",
    default_name: str = "lofted_model",
) -> LoftConfig:
    """Build a :class:`LoftConfig` from an already-decoded JSON object.

    Raises
    ------
    ValueError
        If a required key is missing or a value has the wrong shape.
    """
    if not isinstance(data, Mapping):
        raise ValueError("config: expected a JSON object at the top level")
    base = Path(base_dir)
    norm = _normalize_keys(data)

    for key in ("svg_front", "svg_side", "components"):
        if key not in norm:
            raise ValueError(f"config: missing required key {key!r}")
    if not isinstance(norm["components"], list):
        raise ValueError("config: 'components' must be a list")

    def _path(key: str) -> Optional[Path]:
        value = norm.get(key)
        return None if value is None else base / value

    overrides = dict(
        name=norm.get("name") or default_name,
        svg_front=_path("svg_front"),
        svg_side=_path("svg_side"),
        svg_top=_path("svg_top"),
        animations=_path("animations"),
        output=_path("output") or base / "output.npz",
        components=tuple(parse_component(c, i) for i, c in enumerate(norm["components"])),
        y_ranges=parse_zones(norm.get("y_ranges"), "y_ranges"),
        addons=tuple(parse_addon(a, i) for i, a in enumerate(norm.get("addons") or [])),
        children=tuple(parse_child(c, i) for i, c in enumerate(norm.get("children") or [])),
        skeleton=bool(norm.get("skeleton", False)),
    )
    return _build(LoftConfig, data, "config", **overrides)


def load_config(path: Union[str, Path]) -> LoftConfig:
    """Read a JSON pipeline description from *path*."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    return config_from_dict(data, base_dir=path.parent, default_name=path.stem)


def load_animation_table(path: Optional[Union[str, Path]]) -> List[Any]:
    """Load the authored animation clip table; ``[]`` when no file is configured.

    The table is passed to the exporter unmodified.
    """
    if path is None:
        return []
    with Path(path).open("r", encoding="utf-8") as fh:
        table = json.load(fh)
    if isinstance(table, Mapping) and "clips" in table:
        table = table["clips"]
    if not isinstance(table, list):
        raise ValueError(f"{path}: animation table must be a JSON list of clips")
    return table
