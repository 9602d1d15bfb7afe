from __future__ import annotations

"""
Shared utilities for palette_hull.

Duration / ETA formatting, pixel buffer helpers, work splitting and the tidy
print-based logging used by the CLI and the progress reporter.
"""

import math
import os
import sys
from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import U8Image


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_eta(seconds: float | None) -> str:
    """Format an ETA as 'Hh Mm', 'Mm Ss', 'Ss', or '--:--' when unknown."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "--:--"
    total = int(round(seconds))
    if total >= 3600:
        return f"{total // 3600}h {(total % 3600) // 60}m"
    if total >= 60:
        return f"{total // 60}m {total % 60}s"
    return f"{total}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'S.Ss', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        return f"{minutes}m {int(round(seconds - 60 * minutes))}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


def format_number_compact(value: Any) -> str:
    """1,234 for ints; trimmed 3-decimal floats; 'on'/'off' for bools; str otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """Format (name, value) pairs as 'Name: value' blocks separated by sep."""
    return sep.join(f"{name}{eq}{format_number_compact(value)}" for name, value in pairs)


# Pixel helpers


def default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def split_into_chunks(total: int, chunk: int) -> List[Tuple[int, int]]:
    """Partition [0, total) into contiguous [start, end) spans of at most chunk items."""
    chunk = max(1, int(chunk))
    return [(start, min(start + chunk, total)) for start in range(0, total, chunk)]


def unique_rgb_with_inverse(flat_rgb: U8Image) -> Tuple[U8Image, np.ndarray]:
    """
    Unique RGB rows of a (N,3) buffer and the inverse index.

    unique_rgb[inverse] reconstructs flat_rgb.
    """
    if flat_rgb.shape[0] == 0:
        return np.zeros((0, 3), dtype=np.uint8), np.zeros((0,), dtype=np.int64)
    uniques, inverse = np.unique(flat_rgb, axis=0, return_inverse=True)
    return uniques.astype(np.uint8, copy=False), inverse.reshape(-1).astype(np.int64, copy=False)


def count_unique_rgb(pixels: U8Image) -> int:
    """Number of distinct colours in a (..., 3) buffer."""
    flat = pixels.reshape(-1, 3)
    if flat.shape[0] == 0:
        return 0
    packed = (
        (flat[:, 0].astype(np.uint32) << 16)
        | (flat[:, 1].astype(np.uint32) << 8)
        | flat[:, 2].astype(np.uint32)
    )
    return int(np.unique(packed).size)


#  CLI / progress logging


def print_progress_line(message: str, final: bool = False) -> None:
    """Print a single-line progress message that overwrites previous output."""
    sys.stdout.write("\r\033[K" + message)
    if final:
        sys.stdout.write("\n")
    sys.stdout.flush()


def enable_line_buffered_stdout() -> None:
    """Line-buffer stdout where the stream supports .reconfigure()."""
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] CPU cores: 8  Workers: 6  Palette: 16
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_eta",
    "format_total_duration_compact",
    "format_number_compact",
    "key_value_pairs_to_string",
    # pixel helpers
    "default_workers",
    "split_into_chunks",
    "unique_rgb_with_inverse",
    "count_unique_rgb",
    # logging / progress
    "print_progress_line",
    "enable_line_buffered_stdout",
    "print_config_line",
    "log",
    "debug_log",
    "warn",
    "error",
]
