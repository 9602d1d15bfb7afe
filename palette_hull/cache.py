from __future__ import annotations

"""
Sharded memoisation cache for resolved colours.

Keys are exact RGB triples. Each shard is a plain dict behind its own lock, so
threads working on different colours rarely contend. The compute callback
runs outside any lock; two threads missing the same key may both compute it,
which is harmless because the resolver is pure.

No eviction: at most 256**3 keys, in practice the distinct colours of one image.
"""

import threading
from typing import Dict, List, Optional, Tuple

from .constants import CACHE_SHARDS
from .core_types import ColourCompute, RGBTuple


class ShardedCache:
    """Thread-safe RGB -> RGB map with per-shard locks and hit/miss counters."""

    def __init__(self, shards: int = CACHE_SHARDS) -> None:
        if shards < 1 or shards & (shards - 1):
            raise ValueError(f"shards must be a power of two, got {shards}")
        self._mask = shards - 1
        self._maps: List[Dict[RGBTuple, RGBTuple]] = [{} for _ in range(shards)]
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(shards)]
        self._hits = [0] * shards
        self._misses = [0] * shards

    def _shard(self, key: RGBTuple) -> int:
        packed = (key[0] << 16) | (key[1] << 8) | key[2]
        # mix high bits down so neighbouring colours spread over shards
        return (packed ^ (packed >> 7) ^ (packed >> 15)) & self._mask

    def get(self, key: RGBTuple) -> Optional[RGBTuple]:
        i = self._shard(key)
        with self._locks[i]:
            return self._maps[i].get(key)

    def get_or_compute(self, key: RGBTuple, compute: ColourCompute) -> RGBTuple:
        """Stored value for key; on a miss, call compute(), store and return it."""
        i = self._shard(key)
        lock = self._locks[i]
        with lock:
            hit = self._maps[i].get(key)
            if hit is not None:
                self._hits[i] += 1
                return hit
            self._misses[i] += 1

        value = compute()

        with lock:
            self._maps[i][key] = value
        return value

    def __len__(self) -> int:
        total = 0
        for i, lock in enumerate(self._locks):
            with lock:
                total += len(self._maps[i])
        return total

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 3:
            return False
        return self.get(key) is not None  # type: ignore[arg-type]

    def stats(self) -> List[Tuple[str, int]]:
        """(name, value) pairs: entries, hits, misses."""
        hits = misses = 0
        for i, lock in enumerate(self._locks):
            with lock:
                hits += self._hits[i]
                misses += self._misses[i]
        return [("Entries", len(self)), ("Hits", hits), ("Misses", misses)]


__all__ = ["ShardedCache"]
