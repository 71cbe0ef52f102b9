"""Geometric masks for circular crops and ring borders.

Pixels are classified by the squared distance of their center
``(x + 0.5, y + 0.5)`` from the canvas center. The edge is hard: a pixel is
either fully in or fully out, so results are bit-for-bit reproducible.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence

import numpy as np


class RingBand(IntEnum):
    """Classification of a pixel relative to a ring."""
    OUTSIDE = 0
    BORDER = 1
    INSIDE = 2


def squared_distances(size: int) -> np.ndarray:
    """Squared distance of every pixel center from the center of a square.

    Returns:
        float64 array of shape (size, size)
    """
    center = size / 2.0
    coords = np.arange(size, dtype=np.float64) + 0.5 - center
    return coords[np.newaxis, :] ** 2 + coords[:, np.newaxis] ** 2


def circle_mask(size: int, radius: float | None = None) -> np.ndarray:
    """Boolean mask of the disc with ``radius`` (default ``size / 2``)."""
    if radius is None:
        radius = size / 2.0
    return squared_distances(size) <= radius * radius


def ring_bands(size: int, inner_radius: float, outer_radius: float) -> np.ndarray:
    """Classify pixels of a square canvas into :class:`RingBand` values.

    - distance > outer radius -> OUTSIDE
    - inner radius < distance <= outer radius -> BORDER
    - distance <= inner radius -> INSIDE
    """
    if inner_radius > outer_radius:
        raise ValueError(f"Inner radius {inner_radius} exceeds outer radius {outer_radius}")
    dist_sq = squared_distances(size)
    bands = np.full((size, size), RingBand.OUTSIDE, dtype=np.uint8)
    bands[dist_sq <= outer_radius * outer_radius] = RingBand.BORDER
    bands[dist_sq <= inner_radius * inner_radius] = RingBand.INSIDE
    return bands


def crop_circle(pixels: np.ndarray) -> np.ndarray:
    """Zero the alpha of every pixel outside the inscribed circle.

    Args:
        pixels: Square RGBA uint8 array (size, size, 4)

    Returns:
        New array with the same shape
    """
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected RGBA image (H, W, 4), got shape {pixels.shape}")
    height, width = pixels.shape[:2]
    if height != width:
        raise ValueError(f"Circular crop needs a square image, got {width}x{height}")
    result = pixels.copy()
    result[~circle_mask(width), 3] = 0
    return result


def ring_canvas(size: int, border_width: int, color: Sequence[int]) -> np.ndarray:
    """Transparent canvas of ``size + 2 * border_width`` with a solid ring.

    The ring spans from radius ``size / 2`` (exclusive) to the canvas edge
    radius (inclusive). The inner disc and the corners stay transparent.

    Args:
        size: Side length of the image the ring will surround
        border_width: Ring thickness in pixels
        color: RGB or RGBA ring color; alpha defaults to 255
    """
    side = size + 2 * border_width
    rgba = list(color[:4]) + [255] * (4 - len(color[:4]))
    canvas = np.zeros((side, side, 4), dtype=np.uint8)
    bands = ring_bands(side, size / 2.0, side / 2.0)
    canvas[bands == RingBand.BORDER] = rgba
    return canvas


__all__ = ["RingBand", "squared_distances", "circle_mask", "ring_bands", "crop_circle", "ring_canvas"]
