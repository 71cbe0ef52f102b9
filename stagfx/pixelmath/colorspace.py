"""RGB <-> HSL conversion.

Hue is expressed in degrees ``[0, 360)``, saturation and lightness in
``[0, 1]``. RGB channels are 8-bit values ``0-255``.

Scalar helpers are used for constant colors (e.g. a tint target), the
``*_array`` variants operate on whole ``(H, W, 3)`` pixel buffers.
"""

from __future__ import annotations

import numpy as np


def rgb_to_hsl(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert one RGB color (0-255) to ``(hue, saturation, lightness)``."""
    rn, gn, bn = r / 255.0, g / 255.0, b / 255.0
    c_max = max(rn, gn, bn)
    c_min = min(rn, gn, bn)
    lightness = (c_max + c_min) / 2.0
    delta = c_max - c_min

    if delta == 0:
        return 0.0, 0.0, lightness

    saturation = delta / (1.0 - abs(2.0 * lightness - 1.0))
    if c_max == rn:
        hue = 60.0 * (((gn - bn) / delta) % 6.0)
    elif c_max == gn:
        hue = 60.0 * ((bn - rn) / delta + 2.0)
    else:
        hue = 60.0 * ((rn - gn) / delta + 4.0)
    return hue % 360.0, min(saturation, 1.0), lightness


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> tuple[int, int, int]:
    """Convert one HSL color back to rounded 8-bit RGB."""
    rgb = hsl_to_rgb_array(
        np.float64(hue), np.float64(saturation), np.float64(lightness)
    )
    r, g, b = (int(v) for v in np.rint(rgb))
    return r, g, b


def rgb_to_hsl_array(rgb: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Vectorized RGB -> HSL.

    Args:
        rgb: Array of shape (..., 3) with values 0-255 (any numeric dtype)

    Returns:
        Tuple of (hue, saturation, lightness) float64 arrays of shape (...)
    """
    norm = rgb.astype(np.float64) / 255.0
    r, g, b = norm[..., 0], norm[..., 1], norm[..., 2]
    c_max = norm.max(axis=-1)
    c_min = norm.min(axis=-1)
    delta = c_max - c_min
    lightness = (c_max + c_min) / 2.0

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)
    denom = 1.0 - np.abs(2.0 * lightness - 1.0)
    saturation = np.where(chromatic, delta / np.where(denom > 0, denom, 1.0), 0.0)
    saturation = np.clip(saturation, 0.0, 1.0)

    hue = np.where(
        c_max == r,
        ((g - b) / safe_delta) % 6.0,
        np.where(c_max == g, (b - r) / safe_delta + 2.0, (r - g) / safe_delta + 4.0),
    )
    hue = np.where(chromatic, (hue * 60.0) % 360.0, 0.0)
    return hue, saturation, lightness


def hsl_to_rgb_array(
    hue: np.ndarray | float,
    saturation: np.ndarray | float,
    lightness: np.ndarray | float,
) -> np.ndarray:
    """Vectorized HSL -> RGB.

    The three inputs are broadcast against each other, so a constant hue and
    saturation can be combined with a per-pixel lightness buffer.

    Returns:
        float64 array of shape (..., 3) with unrounded values 0-255
    """
    hue, saturation, lightness = np.broadcast_arrays(
        np.asarray(hue, dtype=np.float64),
        np.asarray(saturation, dtype=np.float64),
        np.asarray(lightness, dtype=np.float64),
    )
    chroma = (1.0 - np.abs(2.0 * lightness - 1.0)) * saturation
    h_prime = (hue % 360.0) / 60.0
    x = chroma * (1.0 - np.abs(h_prime % 2.0 - 1.0))
    m = lightness - chroma / 2.0
    zero = np.zeros_like(chroma)

    sector = np.floor(h_prime).astype(np.int64) % 6
    r = np.choose(sector, [chroma, x, zero, zero, x, chroma])
    g = np.choose(sector, [x, chroma, chroma, x, zero, zero])
    b = np.choose(sector, [zero, zero, x, chroma, chroma, x])

    rgb = np.stack([r + m, g + m, b + m], axis=-1)
    return np.clip(rgb * 255.0, 0.0, 255.0)


__all__ = ["rgb_to_hsl", "hsl_to_rgb", "rgb_to_hsl_array", "hsl_to_rgb_array"]
