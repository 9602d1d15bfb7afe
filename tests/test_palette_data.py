import numpy as np
import pytest

from palette_hull.core_types import (
    assert_u8_pixels,
    coerce_to_rgb_tuple,
    hex_list_to_points,
    hex_to_rgb,
)
from palette_hull.errors import InvalidHexError
from palette_hull.palette_data import (
    NORD,
    NORD_HEXES,
    parse_hex_list,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("#2E3440", (0x2E, 0x34, 0x40)),
        ("2e3440", (0x2E, 0x34, 0x40)),
        (" #fff ", (255, 255, 255)),
        ("0a0", (0, 170, 0)),
    ],
)
def test_hex_to_rgb(text, expected):
    assert hex_to_rgb(text) == expected


@pytest.mark.parametrize("text", ["", "#12345", "zzzzzz", "#1234567", "#gg0000"])
def test_bad_hex(text):
    with pytest.raises(InvalidHexError):
        hex_to_rgb(text)


def test_parse_hex_list():
    assert parse_hex_list('"2E3440, 3B4252,,434C5E"') == ["2E3440", "3B4252", "434C5E"]
    assert parse_hex_list("") == []


def test_nord_palette():
    assert len(NORD) == 16
    assert NORD_HEXES[0] == "#2e3440"
    assert NORD[0] == ("#2e3440", "Polar Night 0")
    points = hex_list_to_points(NORD_HEXES)
    assert points.shape == (16, 3)
    assert points.dtype == np.float64


def test_points_from_bare_hexes():
    np.testing.assert_array_equal(
        hex_list_to_points(["000000", "#FFFFFF", "f00"]), [[0, 0, 0], [255, 255, 255], [255, 0, 0]]
    )


def test_coerce_and_validate():
    assert coerce_to_rgb_tuple(np.array([1, 2, 3], dtype=np.uint8)) == (1, 2, 3)
    assert coerce_to_rgb_tuple([4.7, 5, 6]) == (4, 5, 6)
    with pytest.raises(ValueError):
        coerce_to_rgb_tuple([1, 2])
    with pytest.raises(TypeError):
        assert_u8_pixels(np.zeros((2, 3), dtype=np.int32))
