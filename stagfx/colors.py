"""
Hex color parsing.

Accepts ``#rgb`` and ``#rrggbb`` (case-insensitive) and RGB triples.
"""

from __future__ import annotations

import re
from typing import Sequence, Tuple, Union

from .errors import InvalidHexError

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]

ColorTypes = Union[str, Sequence[int]]
"A hex string or an RGB(A) sequence of 0-255 ints"

_HEX_RE = re.compile(r"^#([A-Fa-f0-9]{3}|[A-Fa-f0-9]{6})$")


def validate_hex(hex_str: object) -> None:
    """Raise :class:`InvalidHexError` unless ``hex_str`` is a valid hex color."""
    if not isinstance(hex_str, str) or not _HEX_RE.match(hex_str):
        raise InvalidHexError(hex_str)


def parse_hex_color(hex_str: str) -> RGB:
    """Convert a hex color string to an RGB tuple.

    >>> parse_hex_color('#f80')
    (255, 136, 0)
    >>> parse_hex_color('#1E90FF')
    (30, 144, 255)
    """
    validate_hex(hex_str)
    digits = hex_str[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
    )


def to_rgb(color: ColorTypes) -> RGB:
    """Normalize a hex string or RGB(A) sequence to an RGB tuple.

    Sequences must hold three or four ints in 0-255; a fourth (alpha)
    component is dropped.
    """
    if isinstance(color, str):
        return parse_hex_color(color)
    try:
        values = [int(v) for v in color]
    except (TypeError, ValueError) as e:
        raise InvalidHexError(color) from e
    if len(values) not in (3, 4) or any(v < 0 or v > 255 for v in values):
        raise InvalidHexError(color)
    return values[0], values[1], values[2]


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Format an RGB triple as ``#RRGGBB``."""
    r, g, b = rgb[:3]
    return f"#{int(r):02X}{int(g):02X}{int(b):02X}"


__all__ = ["RGB", "RGBA", "ColorTypes", "validate_hex", "parse_hex_color", "to_rgb", "rgb_to_hex"]
