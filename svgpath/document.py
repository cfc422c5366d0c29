"""Read named ``<path>`` elements from an SVG document."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Union

from _loft_common import _F
from .parser import parse_path

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def read_svg_paths(path: Union[str, Path]) -> Dict[str, _F]:
    """Parse every ``<path>`` element of the SVG file at *path*.

    Elements are keyed by their ``id`` attribute; elements without one are
    keyed ``path_<n>`` where *n* is the number of paths collected so far.
    Elements without a ``d`` attribute are ignored.  Works with and without
    the SVG namespace declaration.

    Returns
    -------
    dict
        ``{id: (N, 2) polyline}`` in document order.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    xml.etree.ElementTree.ParseError
        If the file is not well-formed XML.
    """
    path = Path(path)
    root = ET.parse(path).getroot()

    paths: Dict[str, _F] = {}
    for el in root.iter():
        if _local_name(el.tag) != "path":
            continue
        d = el.get("d")
        if not d:
            continue
        key = el.get("id") or f"path_{len(paths)}"
        points = parse_path(d)
        logger.debug("Parsed path %r in %s: %d points", key, path.name, len(points))
        paths[key] = points

    return paths
