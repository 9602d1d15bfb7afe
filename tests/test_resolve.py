import dataclasses
import math

import numpy as np
import pytest

from palette_hull.errors import InternalGeometryInvariantError
from palette_hull.resolve import closest_point, resolve, snap_into_hull, truncate_channels
from palette_hull.space import build

from conftest import TETRA

YELLOW = (255, 255, 0)


def _sample_boundary(space, steps=40):
    """Barycentric grid over every hull face."""
    pts = space.hull.points
    samples = []
    for i in range(steps + 1):
        for j in range(steps + 1 - i):
            u, v = i / steps, j / steps
            w = 1.0 - u - v
            for f in space.hull.faces:
                samples.append(u * pts[f[0]] + v * pts[f[1]] + w * pts[f[2]])
    return np.array(samples)


def test_palette_colours_are_fixed_points(nord_space, tetra_space):
    for space in (nord_space, tetra_space):
        for p in space.palette:
            rgb = tuple(int(v) for v in p)
            assert resolve(space, rgb) == rgb


def test_yellow_maps_to_nearest_boundary_point(tetra_space):
    exact = closest_point(tetra_space, YELLOW)
    np.testing.assert_allclose(exact, (170, 170, 85), atol=1e-6)

    samples = _sample_boundary(tetra_space)
    sample_dist = np.linalg.norm(samples - np.array(YELLOW, dtype=np.float64), axis=1)
    exact_dist = float(np.linalg.norm(exact - np.array(YELLOW, dtype=np.float64)))
    assert exact_dist <= float(sample_dist.min()) + 1e-9

    mapped = resolve(tetra_space, YELLOW)
    assert mapped == (170, 170, 85)
    mapped_dist = math.dist(mapped, YELLOW)
    assert mapped_dist <= float(sample_dist.min()) + math.sqrt(3.0)


def test_near_black_stays_put(tetra_space):
    mapped = resolve(tetra_space, (10, 10, 10))
    assert all(abs(m - 10) <= 2 for m in mapped)


def test_inside_colour_is_unchanged(tetra_space):
    assert resolve(tetra_space, (100, 60, 30)) == (100, 60, 30)


@pytest.mark.parametrize(
    "query, expected",
    [
        ((255, 255, 0), (170, 170, 85)),  # face red-green-white
        ((0, 0, 255), (85, 85, 85)),  # edge black-white
        ((0, 255, 255), (127, 255, 127)),  # edge green-white, 127.5 truncated
        ((255, 0, 255), (255, 127, 127)),  # edge red-white, 127.5 truncated
    ],
)
def test_outside_colours_truncate_and_are_idempotent(tetra_space, query, expected):
    once = resolve(tetra_space, query)
    assert once == expected
    assert resolve(tetra_space, once) == once


def test_projection_is_idempotent(nord_space, rgb_grid):
    for q in rgb_grid:
        p = closest_point(nord_space, q)
        np.testing.assert_allclose(closest_point(nord_space, p), p, atol=1e-6)


def test_resolve_is_idempotent(nord_space, rgb_grid):
    for q in rgb_grid:
        once = resolve(nord_space, q)
        assert resolve(nord_space, once) == once, (tuple(q), once)


@pytest.mark.parametrize("query", [(0, 0, 135), (0, 0, 150), (255, 0, 0), (0, 255, 0)])
def test_resolve_is_idempotent_off_the_grid(nord_space, query):
    once = resolve(nord_space, query)
    assert nord_space.contains(once)
    assert resolve(nord_space, once) == once


def test_outputs_stay_in_the_hull(nord_space, rgb_grid):
    for q in rgb_grid:
        assert nord_space.contains(resolve(nord_space, q))


def test_thin_hull_outputs_are_contained_fixed_points(rgb_grid):
    # sliver with no lattice points along its long edge
    sliver = build(np.array([[0, 0, 0], [255, 254, 0], [255, 255, 1], [0, 1, 0]], dtype=np.float64))
    for q in rgb_grid:
        once = resolve(sliver, q)
        assert sliver.contains(once), (tuple(q), once)
        assert resolve(sliver, once) == once


def test_snap_keeps_contained_truncation(tetra_space):
    assert snap_into_hull(tetra_space, np.array([170.0, 170.0, 85.0])) == (170, 170, 85)


def test_snap_moves_outside_truncation_into_the_hull(nord_space):
    p = closest_point(nord_space, (0, 0, 135))
    assert not nord_space.contains(truncate_channels(p))
    snapped = snap_into_hull(nord_space, p)
    assert snapped != truncate_channels(p)
    assert nord_space.contains(snapped)
    assert resolve(nord_space, (0, 0, 135)) == snapped


def test_resolve_is_pure(nord_space):
    assert resolve(nord_space, (12, 200, 99)) == resolve(nord_space, (12, 200, 99))


def test_resolve_accepts_numpy_rows(tetra_space):
    row = np.array([255, 255, 0], dtype=np.uint8)
    assert resolve(tetra_space, row) == (170, 170, 85)


def test_disjoint_query_raises_internal_error(tetra_space):
    broken = dataclasses.replace(tetra_space, margin=1.0)
    with pytest.raises(InternalGeometryInvariantError, match="margin"):
        resolve(broken, (0, 0, 255))
    # contained colours never reach the margin check
    assert resolve(broken, (100, 60, 30)) == (100, 60, 30)


def test_truncate_channels():
    assert truncate_channels(np.array([169.9999999, 0.5, 254.9])) == (170, 0, 254)
    assert truncate_channels(np.array([-0.3, 255.4, 12.0])) == (0, 255, 12)


def test_tetra_vertices_match_fixture(tetra_space):
    np.testing.assert_array_equal(tetra_space.palette, TETRA)
