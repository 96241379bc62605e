"""
utils/colors.py — Hex colour parsing shared by model validation and renderers.
"""

from __future__ import annotations

from typing import Tuple


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """Convert '#RGB' or '#RRGGBB' to an (r, g, b) tuple of 0-255 ints.

    Raises:
        ValueError: If the string is not a hex colour.
    """
    h = value.strip().lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    if len(h) != 6:
        raise ValueError(f"Not a hex colour: {value!r}")
    try:
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    except ValueError:
        raise ValueError(f"Not a hex colour: {value!r}") from None


def hex_to_norm(value: str) -> Tuple[float, float, float]:
    """Convert a hex colour to a matplotlib normalised (0-1) tuple."""
    r, g, b = hex_to_rgb(value)
    return (r / 255, g / 255, b / 255)
