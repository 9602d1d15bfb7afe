#!/usr/bin/env python3
"""
hull_transfer.py
Recolour an image into the convex hull of a colour palette.

Usage:
  python hull_transfer.py IMAGE [-o OUTPUT] [-c "2E3440,3B4252,434C5E,..."] [-t] [--workers N] [--chunk PIXELS] [--debug] [--no-progress]

Palette:
  Comma-separated hex codes. Uses the Nord palette when omitted: https://www.nordtheme.com/
  At least 4 colours that are not all on one plane.

Output:
  Tries to honour the OUTPUT extension. Otherwise uses the input's format, or JPEG.
  Without OUTPUT, writes out.<ext> in the working directory.

Notes:
  Every pixel is replaced by the closest colour inside or on the palette hull.
  Colours already inside the hull are kept. CPU bound; chunks run on a ThreadPoolExecutor.
"""

from __future__ import annotations

import argparse
import os
import threading
import time
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import UnidentifiedImageError

from palette_hull.cache import ShardedCache
from palette_hull.constants import CHUNK_PIXELS
from palette_hull.errors import PaletteError, TransferCancelled
from palette_hull.image_io import load_image_rgb, resolve_output, save_image_rgb
from palette_hull.mapper import map_image
from palette_hull.palette_data import NORD_HEXES, parse_hex_list
from palette_hull.progress import PixelCounter, ProgressReporter
from palette_hull.space import build_from_hex
from palette_hull.utils import (
    # formatting
    format_seconds_compact,
    format_total_duration_compact,
    # pixel helpers
    count_unique_rgb,
    default_workers,
    # pretty logging
    debug_log,
    enable_line_buffered_stdout,
    error,
    key_value_pairs_to_string,
    log,
    print_config_line,
    warn,
)

EXIT_OK = 0
EXIT_BAD_INPUT = 2
EXIT_INTERRUPTED = 130


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        image: Path to the input image
        output: optional Path for the result
        colors: optional comma-separated hex list
        timing: bool, print read/transfer/write durations
        workers: threads for the pixel transfer
        debug: bool for hull and cache details
        progress: bool, show the progress line
    """
    parser = argparse.ArgumentParser(
        prog="hull_transfer",
        description="Converts image to color palette",
    )
    parser.add_argument("image", type=Path, help="Image to convert")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Set output name. Tries to honour set extension. Example: output.png",
    )
    parser.add_argument(
        "-c",
        "--colors",
        default="",
        help=(
            'Hexcodes in quotes and split by comma. Example: "2E3440,3B4252,434C5E". '
            "Uses Nord color palette if not set: https://www.nordtheme.com/"
        ),
    )
    parser.add_argument("-t", "--timing", action="store_true", help="Prints timings")
    parser.add_argument(
        "--workers", type=int, default=default_workers(), help="Transfer threads"
    )
    parser.add_argument(
        "--chunk",
        type=int,
        default=CHUNK_PIXELS,
        help="Pixels per work item",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose hull/cache details")
    parser.add_argument(
        "--no-progress",
        dest="progress",
        action="store_false",
        help="Hide the progress line",
    )
    return parser.parse_args(argv)


def _palette_hexes(colors: str) -> List[str]:
    hexes = parse_hex_list(colors) if colors else []
    return hexes or list(NORD_HEXES)


def run(args: argparse.Namespace) -> int:
    """
    Full transfer: palette -> read -> transfer -> write -> report.

    The palette is validated before the image is touched. The output file is
    written only once the whole buffer is mapped.
    """
    t_start = time.perf_counter()

    hexes = _palette_hexes(args.colors)
    try:
        space = build_from_hex(hexes)
    except PaletteError as e:
        error(f"bad palette: {e}")
        return EXIT_BAD_INPUT

    print_config_line(
        "run",
        [("CPU cores", os.cpu_count() or 1), ("Workers", args.workers), ("Palette", len(hexes))],
        debug=False,
    )
    if args.debug:
        print_config_line("hull", space.describe(), debug=True)

    src: Path = args.image
    if not src.exists():
        error(f"not found: {src}")
        return EXIT_BAD_INPUT

    # Read
    t0 = time.perf_counter()
    try:
        rgb_in, input_format = load_image_rgb(src)
    except (UnidentifiedImageError, OSError) as e:
        error(f"cannot read {src}: {e}")
        return EXIT_BAD_INPUT
    out_path, out_format = resolve_output(args.output, input_format)
    height, width = int(rgb_in.shape[0]), int(rgb_in.shape[1])
    if args.timing:
        log(f"Read took {format_seconds_compact(time.perf_counter() - t0)}")
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width}x{height}"),
                    ("Format", input_format or "-"),
                    ("Unique colours", count_unique_rgb(rgb_in)),
                ]
            )
        )

    # Transfer
    t0 = time.perf_counter()
    total = width * height
    cache = ShardedCache()
    counter = PixelCounter()
    cancel = threading.Event()
    try:
        with ProgressReporter(counter, total, enabled=args.progress):
            mapped = map_image(
                space,
                rgb_in,
                cache=cache,
                workers=args.workers,
                chunk_pixels=args.chunk,
                counter=counter,
                cancel=cancel,
            )
    except (KeyboardInterrupt, TransferCancelled):
        warn("transfer cancelled; nothing written")
        return EXIT_INTERRUPTED
    map_secs = time.perf_counter() - t0
    if args.timing:
        log(f"Transfer took {format_seconds_compact(map_secs)}")
    if args.debug:
        print_config_line("cache", cache.stats(), debug=True)
        if map_secs > 0:
            debug_log(
                f"throughput {(total / map_secs) / 1e6:.2f} MPx/s  "
                f"({total / 1e6:.2f} MPx in {format_seconds_compact(map_secs)})"
            )

    # Write
    t0 = time.perf_counter()
    try:
        save_image_rgb(out_path, mapped, out_format)
    except (OSError, ValueError, KeyError) as e:
        error(f"cannot write {out_path}: {e}")
        return EXIT_BAD_INPUT
    if args.timing:
        log(f"Write took {format_seconds_compact(time.perf_counter() - t0)}")

    log(f"Wrote {out_path.name} | size={width}x{height} | palette_size={len(hexes)}")
    if args.timing or args.debug:
        log(f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}")
    return EXIT_OK


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
