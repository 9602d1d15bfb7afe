# palette_hull/palette_data.py
from __future__ import annotations

"""
Palette definitions and hex-list parsing.

Exports:
  NORD: list[tuple[str, str]]  # [(hex, name), ...], the default palette
  NORD_HEXES: list[str]
  parse_hex_list("2E3440,3B4252,...") -> list[str]
"""

from typing import List, Tuple

# https://www.nordtheme.com/
NORD: List[Tuple[str, str]] = [
    ("#2e3440", "Polar Night 0"),
    ("#3b4252", "Polar Night 1"),
    ("#434c5e", "Polar Night 2"),
    ("#4c566a", "Polar Night 3"),
    ("#d8dee9", "Snow Storm 0"),
    ("#e5e9f0", "Snow Storm 1"),
    ("#eceff4", "Snow Storm 2"),
    ("#8fbcbb", "Frost 0"),
    ("#88c0d0", "Frost 1"),
    ("#81a1c1", "Frost 2"),
    ("#5e81ac", "Frost 3"),
    ("#bf616a", "Aurora Red"),
    ("#d08770", "Aurora Orange"),
    ("#ebcb8b", "Aurora Yellow"),
    ("#a3be8c", "Aurora Green"),
    ("#b48ead", "Aurora Purple"),
]

NORD_HEXES: List[str] = [hx for hx, _ in NORD]


def parse_hex_list(text: str) -> List[str]:
    """Split a comma-separated hex list, dropping blanks and surrounding quotes."""
    cleaned = text.strip().strip("\"'")
    return [tok.strip() for tok in cleaned.split(",") if tok.strip()]


__all__ = [
    "NORD",
    "NORD_HEXES",
    "parse_hex_list",
]
