"""
Pure pixel math: color spaces, blend modes and geometric masks.

Nothing in this package performs I/O or holds state.
"""

from .colorspace import rgb_to_hsl, hsl_to_rgb, rgb_to_hsl_array, hsl_to_rgb_array
from .blend import (
    BlendMode,
    wash,
    tint,
    softlight,
    mix,
    blend_color,
    blend_pixel,
    grayscale,
    invert,
    sepia,
    alpha_over,
)
from .masks import RingBand, squared_distances, circle_mask, ring_bands, crop_circle, ring_canvas

__all__ = [
    # Color spaces
    "rgb_to_hsl",
    "hsl_to_rgb",
    "rgb_to_hsl_array",
    "hsl_to_rgb_array",
    # Blending
    "BlendMode",
    "wash",
    "tint",
    "softlight",
    "mix",
    "blend_color",
    "blend_pixel",
    "grayscale",
    "invert",
    "sepia",
    "alpha_over",
    # Masks
    "RingBand",
    "squared_distances",
    "circle_mask",
    "ring_bands",
    "crop_circle",
    "ring_canvas",
]
