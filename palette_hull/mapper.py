from __future__ import annotations

"""
Pixel mapper: drives the cache and the resolver over a whole pixel buffer.

Steps per chunk:
  1) unique colours of the chunk (with inverse index)
  2) cached lookup per unique colour, resolver on miss
  3) scatter the mapped colours back in input order

Chunks run on a ThreadPoolExecutor. Output order always matches input order.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Optional, Tuple

import numpy as np

from .cache import ShardedCache
from .constants import CHUNK_PIXELS
from .core_types import RGBTuple, U8Image, assert_u8_pixels, coerce_to_rgb_tuple
from .errors import TransferCancelled
from .progress import PixelCounter
from .resolve import resolve
from .space import PaletteSpace
from .utils import split_into_chunks, unique_rgb_with_inverse


def map_colour(space: PaletteSpace, cache: ShardedCache, rgb: RGBTuple) -> RGBTuple:
    """Cached resolve() of a single colour."""
    key = coerce_to_rgb_tuple(rgb)
    return cache.get_or_compute(key, partial(resolve, space, key))


def _map_chunk(
    space: PaletteSpace,
    cache: ShardedCache,
    flat_in: U8Image,
    flat_out: U8Image,
    span: Tuple[int, int],
    counter: Optional[PixelCounter],
    cancel: Optional[threading.Event],
) -> int:
    """Map flat_in[start:end] into flat_out[start:end]; returns pixels done."""
    if cancel is not None and cancel.is_set():
        raise TransferCancelled("transfer cancelled")
    start, end = span
    uniques, inverse = unique_rgb_with_inverse(flat_in[start:end])
    mapped = np.empty_like(uniques)
    for i in range(uniques.shape[0]):
        mapped[i] = map_colour(space, cache, coerce_to_rgb_tuple(uniques[i]))
    flat_out[start:end] = mapped[inverse]
    if counter is not None:
        counter.add(end - start)
    return end - start


def map_image(
    space: PaletteSpace,
    pixels: np.ndarray,
    *,
    cache: Optional[ShardedCache] = None,
    workers: int = 1,
    chunk_pixels: int = CHUNK_PIXELS,
    counter: Optional[PixelCounter] = None,
    cancel: Optional[threading.Event] = None,
) -> U8Image:
    """
    Map every pixel of a uint8 (..., 3) buffer to its nearest hull colour.

    Args:
      space        : built PaletteSpace (shared read-only)
      pixels       : uint8 [H,W,3] image or [N,3] colour list
      cache        : shared ShardedCache; a fresh one when omitted
      workers      : threads; 1 runs inline
      chunk_pixels : pixels per work item
      counter      : advanced by each finished chunk's pixel count
      cancel       : checked before each chunk; raises TransferCancelled when set.
                     Set here when any chunk fails or the caller is interrupted.

    Returns:
      uint8 array with the same shape as `pixels`. Nothing is returned on cancel.
    """
    src = assert_u8_pixels(np.asarray(pixels))
    if cache is None:
        cache = ShardedCache()
    if cancel is None:
        cancel = threading.Event()

    flat_in = np.ascontiguousarray(src).reshape(-1, 3)
    flat_out = np.empty_like(flat_in)
    spans = split_into_chunks(flat_in.shape[0], chunk_pixels)
    run_one = partial(_map_chunk, space, cache, flat_in, flat_out, counter=counter, cancel=cancel)

    if workers <= 1 or len(spans) <= 1:
        for span in spans:
            run_one(span)
    else:
        with ThreadPoolExecutor(max_workers=int(workers)) as ex:
            futures = [ex.submit(run_one, span) for span in spans]
            try:
                for fut in futures:
                    fut.result()
            except BaseException:
                # running chunks stop at their next check
                cancel.set()
                for fut in futures:
                    fut.cancel()
                raise

    return flat_out.reshape(src.shape)


__all__ = ["map_colour", "map_image"]
