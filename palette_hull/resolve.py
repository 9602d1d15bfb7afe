from __future__ import annotations

"""
Nearest-point resolver.

The query colour is a zero-radius ball placed at its RGB coordinates; the
closest-points query against the palette hull then covers both cases:
  Intersecting  -> the colour is inside (or on) the hull, keep it
  WithinMargin  -> take the closest hull point, snapped to a contained integer colour
  Disjoint      -> cannot happen with a margin above the cube diagonal; raise
"""

import itertools
from typing import Sequence, Union

import numpy as np

from .constants import TRUNCATION_EPS
from .core_types import RGBTuple, Vec3, coerce_to_rgb_tuple
from .errors import InternalGeometryInvariantError
from .geometry import ClosestPoints, Intersecting, Placement, WithinMargin, closest_points
from .space import PaletteSpace

QueryLike = Union[Sequence[float], np.ndarray]

# floor/ceil corners (0, 1) plus one ring around them
_LATTICE_OFFSETS = np.array(list(itertools.product((-1, 0, 1, 2), repeat=3)), dtype=np.float64)


def _query(space: PaletteSpace, p: Vec3) -> ClosestPoints:
    result = closest_points(
        space.origin,
        space.hull,
        Placement(p),
        space.point,
        space.margin,
    )
    if isinstance(result, (Intersecting, WithinMargin)):
        return result
    raise InternalGeometryInvariantError(
        f"query {tuple(float(v) for v in p)} is further than margin "
        f"{space.margin:g} from a hull of {space.palette.shape[0]} colours"
    )


def closest_point(space: PaletteSpace, query: QueryLike) -> Vec3:
    """Unrounded closest point of the hull to `query` (the query itself when contained)."""
    p = np.asarray(query, dtype=np.float64).reshape(3)
    result = _query(space, p)
    if isinstance(result, WithinMargin):
        return result.point1
    return p.copy()


def truncate_channels(point: Vec3) -> RGBTuple:
    """Float RGB to integer channels, truncating toward zero and clamping to 0..255."""
    clipped = np.clip(np.asarray(point, dtype=np.float64) + TRUNCATION_EPS, 0.0, 255.0)
    return coerce_to_rgb_tuple(np.trunc(clipped).astype(np.uint8))


def snap_into_hull(space: PaletteSpace, point: Vec3) -> RGBTuple:
    """
    Integer colour for a hull point that the hull itself contains.

    Order of preference:
      1) the truncated point
      2) the contained lattice point nearest to `point` among the floor/ceil
         corners and the ring around them
      3) the nearest palette colour (always contained)
    The result therefore resolves to itself.
    """
    p = np.asarray(point, dtype=np.float64).reshape(3)
    first = truncate_channels(p)
    if space.contains(first):
        return first

    base = np.floor(p + TRUNCATION_EPS)
    lattice = np.unique(np.clip(base + _LATTICE_OFFSETS, 0.0, 255.0), axis=0)
    inside = np.array([space.contains(c) for c in lattice], dtype=bool)
    pool = lattice[inside] if inside.any() else space.palette
    d2 = np.sum((pool - p) ** 2, axis=1)
    return coerce_to_rgb_tuple(pool[int(np.argmin(d2))].astype(np.uint8))


def resolve(space: PaletteSpace, query: QueryLike) -> RGBTuple:
    """
    Nearest colour of the palette hull for one RGB value.

    Pure: the same space and query always give the same answer, and
    resolve(space, resolve(space, q)) == resolve(space, q).
    Raises InternalGeometryInvariantError only if the margin is broken.
    """
    rgb = coerce_to_rgb_tuple(query)
    result = _query(space, np.array(rgb, dtype=np.float64))
    if isinstance(result, WithinMargin):
        return snap_into_hull(space, result.point1)
    return rgb


__all__ = ["closest_point", "truncate_channels", "snap_into_hull", "resolve"]
