import numpy as np
import pytest

from palette_hull.geometry import (
    Ball,
    Disjoint,
    Intersecting,
    Placement,
    WithinMargin,
    closest_points,
    closest_points_on_triangles,
)

A = np.array([[0.0, 0.0, 0.0]])
B = np.array([[10.0, 0.0, 0.0]])
C = np.array([[0.0, 10.0, 0.0]])


@pytest.mark.parametrize(
    "p, expected",
    [
        ((2, 3, 5), (2, 3, 0)),  # face interior
        ((-1, -1, 0), (0, 0, 0)),  # vertex a
        ((20, -1, 0), (10, 0, 0)),  # vertex b
        ((-1, 20, 3), (0, 10, 0)),  # vertex c
        ((5, -3, 1), (5, 0, 0)),  # edge ab
        ((-2, 4, 0), (0, 4, 0)),  # edge ac
        ((6, 6, 0), (5, 5, 0)),  # edge bc
    ],
)
def test_closest_point_on_triangle_regions(p, expected):
    got = closest_points_on_triangles(np.array(p, dtype=np.float64), A, B, C)
    assert got.shape == (1, 3)
    np.testing.assert_allclose(got[0], expected, atol=1e-9)


def test_closest_points_on_many_triangles_at_once():
    a = np.vstack([A, A + 100.0])
    b = np.vstack([B, B + 100.0])
    c = np.vstack([C, C + 100.0])
    got = closest_points_on_triangles(np.array([2.0, 3.0, 5.0]), a, b, c)
    np.testing.assert_allclose(got[0], (2, 3, 0), atol=1e-9)
    np.testing.assert_allclose(got[1], (100, 100, 100), atol=1e-9)


def test_degenerate_triangle_does_not_poison_the_result():
    a = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])
    b = np.array([[10.0, 0.0, 0.0], [0.0, 0.0, 0.0]])
    c = np.array([[0.0, 10.0, 0.0], [0.0, 0.0, 0.0]])
    got = closest_points_on_triangles(np.array([2.0, 3.0, 5.0]), a, b, c)
    np.testing.assert_allclose(got[0], (2, 3, 0), atol=1e-9)
    np.testing.assert_allclose(got[1], (0, 0, 0), atol=1e-9)


def test_placement_round_trip():
    pos = Placement.at(1.0, 2.0, 3.0)
    local = np.array([4.0, 5.0, 6.0])
    np.testing.assert_allclose(pos.to_local(pos.to_world(local)), local)
    np.testing.assert_allclose(Placement.identity().translation, np.zeros(3))


def test_point_inside_hull_intersects(tetra_space):
    result = closest_points(
        tetra_space.origin, tetra_space.hull, Placement.at(100, 60, 30), Ball(0.0), 1e5
    )
    assert isinstance(result, Intersecting)


def test_point_outside_hull_within_margin(tetra_space):
    result = closest_points(
        tetra_space.origin, tetra_space.hull, Placement.at(255, 255, 0), Ball(0.0), 1e5
    )
    assert isinstance(result, WithinMargin)
    np.testing.assert_allclose(result.point1, (170, 170, 85), atol=1e-6)
    np.testing.assert_allclose(result.point2, (255, 255, 0), atol=1e-9)
    assert result.distance == pytest.approx(255.0 / np.sqrt(3.0))


def test_ball_radius_shortens_the_gap(tetra_space):
    result = closest_points(
        tetra_space.origin, tetra_space.hull, Placement.at(255, 255, 0), Ball(10.0), 1e5
    )
    assert isinstance(result, WithinMargin)
    assert result.distance == pytest.approx(255.0 / np.sqrt(3.0) - 10.0)

    touching = closest_points(
        tetra_space.origin, tetra_space.hull, Placement.at(255, 255, 0), Ball(200.0), 1e5
    )
    assert isinstance(touching, Intersecting)


def test_far_point_is_disjoint_beyond_margin(tetra_space):
    result = closest_points(
        tetra_space.origin, tetra_space.hull, Placement.at(0, 0, 255), Ball(0.0), 1.0
    )
    assert isinstance(result, Disjoint)


def test_hull_placement_moves_the_hull(tetra_space):
    shifted = Placement.at(1000.0, 0.0, 0.0)
    result = closest_points(shifted, tetra_space.hull, Placement.at(1100, 60, 30), Ball(0.0), 1e5)
    assert isinstance(result, Intersecting)
