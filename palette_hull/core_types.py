# palette_hull/core_types.py
from __future__ import annotations

"""
Core type aliases and small RGB helpers shared by the geometry, cache and mapper.
"""

from typing import Callable, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidHexError

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3) or (N, 3)
Points = NDArray[np.float64]  # (N, 3) palette / hull points
Vec3 = NDArray[np.float64]  # (3,)

# Callable signatures

ColourCompute = Callable[[], RGBTuple]


def hex_to_rgb(hex_str: HexStr) -> RGBTuple:
    """
    Parse '#rrggbb', 'rrggbb', '#rgb' or 'rgb' (case-insensitive) into an RGB tuple.

    Raises InvalidHexError for anything else.
    """
    s = hex_str.strip().lower()
    if s.startswith("#"):
        s = s[1:]
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise InvalidHexError(f"not a hex colour: {hex_str!r}")
    try:
        return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
    except ValueError:
        raise InvalidHexError(f"not a hex colour: {hex_str!r}") from None


def hex_list_to_points(hex_list: Sequence[str]) -> Points:
    """Convert hex strings to a (N,3) float64 array of RGB points."""
    out = np.empty((len(hex_list), 3), dtype=np.float64)
    for i, hx in enumerate(hex_list):
        out[i] = hex_to_rgb(hx)
    return out


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> RGBTuple:
    """
    Coerce a 3-length sequence or array row to an (int, int, int) RGB tuple.
    Used for cache keys taken from NumPy rows.
    """
    if isinstance(value, np.ndarray):
        if value.size < 3:
            raise ValueError("array too small for RGB")
        flat = value.reshape(-1)
        return (int(flat[0]), int(flat[1]), int(flat[2]))
    if len(value) < 3:  # type: ignore[arg-type]
        raise ValueError("sequence too small for RGB")
    v = value  # type: ignore[assignment]
    return (int(v[0]), int(v[1]), int(v[2]))


def assert_u8_pixels(pixels: np.ndarray) -> U8Image:
    """Validate a uint8 (..., 3) pixel buffer and return it typed as U8Image."""
    if pixels.dtype != np.uint8 or pixels.ndim < 2 or pixels.shape[-1] != 3:
        raise TypeError("expected uint8 (..., 3) pixel buffer")
    return pixels  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Image",
    "Points",
    "Vec3",
    "ColourCompute",
    # helpers
    "hex_to_rgb",
    "hex_list_to_points",
    "coerce_to_rgb_tuple",
    "assert_u8_pixels",
]
