"""
Tunables used across the project.

- Geometry: search margin, tolerances, minimum hull volume
- Cache: shard count
- Mapper: chunk size
- Progress: poll interval
"""
from __future__ import annotations

import math

# =========
# Geometry
# =========

# Longest distance between two points of the RGB cube.
RGB_CUBE_DIAGONAL: float = 255.0 * math.sqrt(3.0)

# Upper bound for the closest-point search. Must exceed RGB_CUBE_DIAGONAL.
SEARCH_MARGIN: float = 99999.0

# Signed facet distance at or below which a point counts as inside the hull.
CONTAINMENT_TOLERANCE: float = 1e-6

# Float noise absorbed before truncating a hull point to integer channels.
TRUNCATION_EPS: float = 1e-6

# Hulls with volume at or below this are rejected as degenerate.
MIN_HULL_VOLUME: float = 1e-9

# Below this squared length a triangle edge or normal is treated as zero.
GEOM_EPS: float = 1e-12

# =====
# Cache
# =====

# Power of two so shard selection is a mask.
CACHE_SHARDS: int = 64

# ======
# Mapper
# ======

# Pixels per work item handed to the thread pool.
CHUNK_PIXELS: int = 65_536

# ========
# Progress
# ========

# Seconds between progress polls.
PROGRESS_INTERVAL: float = 0.2

__all__ = [
    "RGB_CUBE_DIAGONAL",
    "SEARCH_MARGIN",
    "CONTAINMENT_TOLERANCE",
    "TRUNCATION_EPS",
    "MIN_HULL_VOLUME",
    "GEOM_EPS",
    "CACHE_SHARDS",
    "CHUNK_PIXELS",
    "PROGRESS_INTERVAL",
]
