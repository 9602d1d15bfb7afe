from __future__ import annotations

"""
Convex shapes and the closest-points query used by the resolver.

Shapes:
  Ball              : sphere with a radius; radius 0 is a point.
  Placement         : pure translation in RGB space.
  ConvexPolyhedron  : triangulated hull boundary with outward facet planes.

Query:
  closest_points(pos1, hull, pos2, ball, margin) -> Intersecting | WithinMargin | Disjoint

Hot spot: closest_points_on_triangles, evaluated once per cache miss over every
hull face. It is vectorised over faces so small palettes stay cheap.
"""

from dataclasses import dataclass, field
from typing import Union

import numpy as np
from numpy.typing import NDArray

from .constants import CONTAINMENT_TOLERANCE, GEOM_EPS
from .core_types import Points, Vec3


# Shapes


@dataclass(frozen=True)
class Ball:
    """Sphere centred on its placement."""

    radius: float


@dataclass(frozen=True, eq=False)
class Placement:
    """Translation that puts a local shape into RGB space."""

    translation: Vec3 = field(default_factory=lambda: np.zeros(3, dtype=np.float64))

    @classmethod
    def identity(cls) -> "Placement":
        return cls(np.zeros(3, dtype=np.float64))

    @classmethod
    def at(cls, x: float, y: float, z: float) -> "Placement":
        return cls(np.array([x, y, z], dtype=np.float64))

    def to_world(self, local: np.ndarray) -> np.ndarray:
        return local + self.translation

    def to_local(self, world: np.ndarray) -> np.ndarray:
        return world - self.translation


@dataclass(frozen=True, eq=False)
class ConvexPolyhedron:
    """
    Triangulated convex boundary.

    vertices  : float64 [V,3]  hull vertices
    faces     : int64 [F,3]    rows of vertex indices into `points`
    points    : float64 [P,3]  all input points (faces index into these)
    equations : float64 [F,4]  unit outward normal and offset per face
    volume    : float
    """

    vertices: Points
    faces: NDArray[np.int64]
    points: Points
    equations: NDArray[np.float64]
    volume: float

    def signed_distances(self, p: Vec3) -> NDArray[np.float64]:
        """Signed distance of p to every facet plane; positive means outside."""
        return self.equations[:, :3] @ p + self.equations[:, 3]

    def contains(self, p: Vec3, tol: float = CONTAINMENT_TOLERANCE) -> bool:
        return bool(np.max(self.signed_distances(p)) <= tol)

    def closest_boundary_point(self, p: Vec3) -> Vec3:
        """Closest point to p on the hull surface."""
        a = self.points[self.faces[:, 0]]
        b = self.points[self.faces[:, 1]]
        c = self.points[self.faces[:, 2]]
        candidates = closest_points_on_triangles(p, a, b, c)
        diff = candidates - p
        dist2 = np.einsum("ij,ij->i", diff, diff)
        dist2 = np.where(np.isfinite(dist2), dist2, np.inf)
        return candidates[int(np.argmin(dist2))]


# Query results


@dataclass(frozen=True)
class Intersecting:
    """The shapes touch or overlap."""


@dataclass(frozen=True, eq=False)
class WithinMargin:
    """Closest points on shape 1 and shape 2, in world coordinates."""

    point1: Vec3
    point2: Vec3

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self.point2 - self.point1))


@dataclass(frozen=True)
class Disjoint:
    """The shapes are further apart than the margin."""


ClosestPoints = Union[Intersecting, WithinMargin, Disjoint]


# Triangle maths


def closest_points_on_triangles(
    p: Vec3, a: Points, b: Points, c: Points
) -> Points:
    """
    Closest point to p on each triangle (a[i], b[i], c[i]).

    Voronoi-region test on barycentric dot products: vertex regions first,
    then edge regions, then the face interior. Returns float64 [F,3]. Rows for
    zero-area triangles may hold NaN; callers mask those out.
    """
    ab = b - a
    ac = c - a
    ap = p - a
    bp = p - b
    cp = p - c

    d1 = np.einsum("ij,ij->i", ab, ap)
    d2 = np.einsum("ij,ij->i", ac, ap)
    d3 = np.einsum("ij,ij->i", ab, bp)
    d4 = np.einsum("ij,ij->i", ac, bp)
    d5 = np.einsum("ij,ij->i", ab, cp)
    d6 = np.einsum("ij,ij->i", ac, cp)

    vc = d1 * d4 - d3 * d2
    vb = d5 * d2 - d1 * d6
    va = d3 * d6 - d5 * d4

    with np.errstate(divide="ignore", invalid="ignore"):
        t_ab = d1 / (d1 - d3)
        t_ac = d2 / (d2 - d6)
        t_bc = (d4 - d3) / ((d4 - d3) + (d5 - d6))
        denom = va + vb + vc
        v = vb / denom
        w = vc / denom

    on_ab = a + t_ab[:, None] * ab
    on_ac = a + t_ac[:, None] * ac
    on_bc = b + t_bc[:, None] * (c - b)
    inside = a + v[:, None] * ab + w[:, None] * ac

    in_a = (d1 <= 0.0) & (d2 <= 0.0)
    in_b = (d3 >= 0.0) & (d4 <= d3)
    in_ab = (vc <= 0.0) & (d1 >= 0.0) & (d3 <= 0.0)
    in_c = (d6 >= 0.0) & (d5 <= d6)
    in_ac = (vb <= 0.0) & (d2 >= 0.0) & (d6 <= 0.0)
    in_bc = (va <= 0.0) & ((d4 - d3) >= 0.0) & ((d5 - d6) >= 0.0)

    conds = [in_a, in_b, in_ab, in_c, in_ac, in_bc]
    choices = [a, b, on_ab, c, on_ac, on_bc]
    return np.select(
        [m[:, None] for m in conds],
        choices,
        default=np.where(np.abs(denom)[:, None] > GEOM_EPS, inside, np.nan),
    )


# Closest points between a convex polyhedron and a ball


def closest_points(
    pos1: Placement,
    g1: ConvexPolyhedron,
    pos2: Placement,
    g2: Ball,
    margin: float,
) -> ClosestPoints:
    """
    Closest features of a placed hull and a placed ball.

    Intersecting when the ball centre lies inside the hull or the gap is not
    positive. WithinMargin with both world-space points when the gap is at
    most `margin`. Disjoint otherwise.
    """
    centre = pos1.to_local(pos2.translation)
    if g1.contains(centre):
        return Intersecting()

    on_hull = g1.closest_boundary_point(centre)
    diff = centre - on_hull
    dist = float(np.sqrt(diff @ diff))
    gap = dist - float(g2.radius)
    if gap <= CONTAINMENT_TOLERANCE:
        return Intersecting()
    if gap > margin:
        return Disjoint()

    on_ball = centre - diff * (float(g2.radius) / dist)
    return WithinMargin(pos1.to_world(on_hull), pos1.to_world(on_ball))


__all__ = [
    "Ball",
    "Placement",
    "ConvexPolyhedron",
    "Intersecting",
    "WithinMargin",
    "Disjoint",
    "ClosestPoints",
    "closest_points_on_triangles",
    "closest_points",
]
