# palette_hull/__init__.py
"""
palette_hull package.

Purpose:
  Remap image colours to the nearest colour inside the convex hull of a palette
  in RGB space. See hull_transfer.py for the CLI.

Public API:
  build / build_from_hex : construct a PaletteSpace (raises DegenerateHullError).
  resolve                : nearest hull colour for one RGB value.
  closest_point          : unrounded nearest hull point.
  ShardedCache           : thread-safe memoisation of resolved colours.
  map_image / map_colour : cached, parallel mapping of pixel buffers.
  PixelCounter / ProgressReporter : progress counter and polling reporter.
  NORD                   : default palette.

Quick start:
  from palette_hull import build_from_hex, map_image, NORD_HEXES
  space = build_from_hex(NORD_HEXES)
  out = map_image(space, pixels, workers=4)
"""

__version__ = "0.2.0"

from . import core_types
from . import geometry
from . import palette_data
from . import utils

from .errors import (
    PaletteError,
    InvalidHexError,
    DegenerateHullError,
    InternalGeometryInvariantError,
    TransferCancelled,
)
from .palette_data import NORD, NORD_HEXES
from .space import PaletteSpace, build, build_from_hex
from .resolve import closest_point, resolve
from .cache import ShardedCache
from .progress import PixelCounter, ProgressReporter
from .mapper import map_colour, map_image

__all__ = [
    "__version__",
    "core_types",
    "geometry",
    "palette_data",
    "utils",
    "PaletteError",
    "InvalidHexError",
    "DegenerateHullError",
    "InternalGeometryInvariantError",
    "TransferCancelled",
    "NORD",
    "NORD_HEXES",
    "PaletteSpace",
    "build",
    "build_from_hex",
    "closest_point",
    "resolve",
    "ShardedCache",
    "PixelCounter",
    "ProgressReporter",
    "map_colour",
    "map_image",
]
