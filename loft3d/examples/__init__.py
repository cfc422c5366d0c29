"""loft3d.examples — demo assets.

Implemented assemblies
----------------------
:func:`BowlingPin`
    Symmetric bowling pin lofted from one silhouette used for both views.
"""

from .bowling_pin import BowlingPin

__all__ = ["BowlingPin"]
