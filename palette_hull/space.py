from __future__ import annotations

"""
Palette space: the convex region spanned by the palette in RGB space.

Exports:
  PaletteSpace                       frozen, read-only, safe to share across threads
  build(points, *, margin)           -> PaletteSpace  (raises DegenerateHullError)
  build_from_hex(hex_list, *, margin)-> PaletteSpace
"""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .constants import (
    CONTAINMENT_TOLERANCE,
    MIN_HULL_VOLUME,
    RGB_CUBE_DIAGONAL,
    SEARCH_MARGIN,
)
from .core_types import Points, hex_list_to_points
from .errors import DegenerateHullError
from .geometry import Ball, ConvexPolyhedron, Placement


@dataclass(frozen=True, eq=False)
class PaletteSpace:
    """
    Hull of the palette plus the fixed primitives used by every query.

    palette   : float64 [P,3] palette points as given
    hull      : ConvexPolyhedron boundary
    point     : zero-radius ball standing in for one RGB value
    origin    : identity placement of the hull
    margin    : closest-point search bound, larger than the RGB cube diagonal
    """

    palette: Points
    hull: ConvexPolyhedron
    point: Ball
    origin: Placement
    margin: float

    def contains(self, rgb: Sequence[float]) -> bool:
        """True when rgb lies inside or on the hull."""
        p = np.asarray(rgb, dtype=np.float64).reshape(3)
        return self.hull.contains(p, CONTAINMENT_TOLERANCE)

    def describe(self) -> List[Tuple[str, Any]]:
        """(name, value) pairs for config/debug lines."""
        return [
            ("Palette", int(self.palette.shape[0])),
            ("Hull vertices", int(self.hull.vertices.shape[0])),
            ("Faces", int(self.hull.faces.shape[0])),
            ("Volume", float(self.hull.volume)),
        ]


def _as_points(points: Any) -> Points:
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"palette points must have shape (N, 3), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("palette points must be finite")
    return arr


def build(points: Any, *, margin: float = SEARCH_MARGIN) -> PaletteSpace:
    """
    Build the palette space from RGB points.

    Raises:
      ValueError          : malformed input or a margin that does not cover the RGB cube
      DegenerateHullError : fewer than 4 distinct points, or no positive volume
    """
    if not margin > RGB_CUBE_DIAGONAL:
        raise ValueError(
            f"margin {margin} must exceed the RGB cube diagonal {RGB_CUBE_DIAGONAL:.3f}"
        )
    palette = _as_points(points)

    distinct = np.unique(palette, axis=0)
    if distinct.shape[0] < 4:
        raise DegenerateHullError(
            f"palette needs at least 4 distinct colours, got {distinct.shape[0]}"
        )

    centred = distinct - distinct.mean(axis=0)
    rank = int(np.linalg.matrix_rank(centred))
    if rank < 3:
        what = "coplanar" if rank == 2 else "collinear" if rank == 1 else "coincident"
        raise DegenerateHullError(f"palette colours are {what}; hull has no volume")

    try:
        qhull = ConvexHull(distinct)
    except QhullError as e:
        raise DegenerateHullError(f"convex hull failed: {e}") from e

    volume = float(qhull.volume)
    if volume <= MIN_HULL_VOLUME:
        raise DegenerateHullError(f"hull volume {volume:g} is not positive")

    palette = palette.copy()
    for arr in (palette, distinct):
        arr.setflags(write=False)

    hull = ConvexPolyhedron(
        vertices=distinct[qhull.vertices].copy(),
        faces=qhull.simplices.astype(np.int64, copy=True),
        points=distinct,
        equations=qhull.equations.astype(np.float64, copy=True),
        volume=volume,
    )
    return PaletteSpace(
        palette=palette,
        hull=hull,
        point=Ball(0.0),
        origin=Placement.identity(),
        margin=float(margin),
    )


def build_from_hex(hex_list: Sequence[str], *, margin: float = SEARCH_MARGIN) -> PaletteSpace:
    """Decode hex colours and build the palette space (InvalidHexError on bad entries)."""
    return build(hex_list_to_points(hex_list), margin=margin)


__all__ = ["PaletteSpace", "build", "build_from_hex"]
