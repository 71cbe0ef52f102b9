"""Per-pixel color math.

Blend modes mix every source pixel with one constant target color:

- ``wash``: linear interpolation towards the target, weighted by ``opacity``
- ``tint``: keep the source lightness, take hue and saturation from the target
- ``softlight``: soft-light compositing of the target over the source

The blended color is then mixed back with the original by ``intensity``
(0 = untouched, 1 = fully blended). Alpha is never modified.

All functions take RGBA uint8 arrays of shape (H, W, 4) and return new
arrays; inputs are never written to.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import numpy as np

from .colorspace import rgb_to_hsl, rgb_to_hsl_array, hsl_to_rgb_array


class BlendMode(Enum):
    """How a target color is mixed into an image."""
    TINT = "tint"
    WASH = "wash"
    SOFTLIGHT = "softlight"


# ITU-R BT.709 luminosity coefficients
LUMA_R = 0.2126
LUMA_G = 0.7152
LUMA_B = 0.0722

SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])


def _check_rgba(pixels: np.ndarray) -> None:
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected RGBA image (H, W, 4), got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected uint8 dtype, got {pixels.dtype}")


def _with_alpha(rgb: np.ndarray, source: np.ndarray) -> np.ndarray:
    result = np.empty_like(source)
    result[..., :3] = rgb
    result[..., 3] = source[..., 3]
    return result


# ============================================================================
# Blend modes (return float64 RGB, shape (H, W, 3))
# ============================================================================

def wash(pixels: np.ndarray, target: Sequence[int], opacity: float) -> np.ndarray:
    """``target * opacity + orig * (1 - opacity)`` per channel, truncated."""
    orig = pixels[..., :3].astype(np.float64)
    tgt = np.asarray(target[:3], dtype=np.float64)
    return np.trunc(tgt * opacity + orig * (1.0 - opacity))


def tint(pixels: np.ndarray, target: Sequence[int]) -> np.ndarray:
    """Recolor with the target's hue/saturation while keeping source lightness."""
    target_hue, target_sat, _ = rgb_to_hsl(*target[:3])
    _, _, lightness = rgb_to_hsl_array(pixels[..., :3])
    return np.rint(hsl_to_rgb_array(target_hue, target_sat, lightness))


def softlight(pixels: np.ndarray, target: Sequence[int]) -> np.ndarray:
    """Soft-light the target color over the source (W3C compositing formula)."""
    b = pixels[..., :3].astype(np.float64) / 255.0
    s = np.asarray(target[:3], dtype=np.float64) / 255.0
    s = np.broadcast_to(s, b.shape)

    d = np.where(b <= 0.25, ((16.0 * b - 12.0) * b + 4.0) * b, np.sqrt(b))
    dark = b - (1.0 - 2.0 * s) * b * (1.0 - b)
    light = b + (2.0 * s - 1.0) * (d - b)
    out = np.where(s < 0.5, dark, light)
    return np.rint(np.clip(out, 0.0, 1.0) * 255.0)


def mix(original: np.ndarray, blended: np.ndarray, intensity: float) -> np.ndarray:
    """Interpolate from ``original`` to ``blended`` by ``intensity``."""
    orig = original.astype(np.float64)
    if intensity >= 1.0:
        return blended.astype(np.float64)
    if intensity <= 0.0:
        return orig
    return np.rint(orig + (blended - orig) * intensity)


def blend_color(
    pixels: np.ndarray,
    target: Sequence[int],
    mode: BlendMode | str = BlendMode.TINT,
    opacity: float = 1.0,
    intensity: float = 1.0,
) -> np.ndarray:
    """Blend a constant color into an RGBA image.

    Args:
        pixels: RGBA uint8 array (H, W, 4)
        target: RGB target color (0-255)
        mode: Blend mode
        opacity: Weight of the target color for ``wash`` (0-1)
        intensity: How much of the blended result replaces the original (0-1)

    Returns:
        New RGBA uint8 array, alpha copied from ``pixels``
    """
    _check_rgba(pixels)
    mode = BlendMode(mode)
    if mode == BlendMode.WASH:
        blended = wash(pixels, target, opacity)
    elif mode == BlendMode.TINT:
        blended = tint(pixels, target)
    else:
        blended = softlight(pixels, target)
    rgb = mix(pixels[..., :3], blended, intensity)
    return _with_alpha(np.clip(rgb, 0, 255).astype(np.uint8), pixels)


def blend_pixel(
    rgba: Sequence[int],
    target: Sequence[int],
    mode: BlendMode | str = BlendMode.TINT,
    opacity: float = 1.0,
    intensity: float = 1.0,
) -> tuple[int, int, int, int]:
    """Single-pixel form of :func:`blend_color`, handy for inspection."""
    px = np.array([[list(rgba)]], dtype=np.uint8)
    r, g, b, a = blend_color(px, target, mode, opacity, intensity)[0, 0]
    return int(r), int(g), int(b), int(a)


# ============================================================================
# Whole-image adjustments
# ============================================================================

def grayscale(pixels: np.ndarray) -> np.ndarray:
    """Convert to grayscale using BT.709 luminosity.

    Y = 0.2126*R + 0.7152*G + 0.0722*B, truncated; alpha preserved.
    """
    _check_rgba(pixels)
    r = pixels[:, :, 0].astype(np.float32)
    g = pixels[:, :, 1].astype(np.float32)
    b = pixels[:, :, 2].astype(np.float32)
    gray = np.clip(LUMA_R * r + LUMA_G * g + LUMA_B * b, 0, 255).astype(np.uint8)
    return np.stack([gray, gray, gray, pixels[:, :, 3]], axis=2)


def invert(pixels: np.ndarray) -> np.ndarray:
    """Negate the color channels, keep alpha."""
    _check_rgba(pixels)
    return _with_alpha(255 - pixels[..., :3], pixels)


def sepia(pixels: np.ndarray, intensity: float = 1.0) -> np.ndarray:
    """Classic sepia tone, mixed with the original by ``intensity``."""
    _check_rgba(pixels)
    rgb = pixels[..., :3].astype(np.float64)
    toned = np.clip(rgb @ SEPIA_MATRIX.T, 0.0, 255.0)
    out = mix(rgb, np.trunc(toned), intensity)
    return _with_alpha(np.clip(out, 0, 255).astype(np.uint8), pixels)


# ============================================================================
# Compositing
# ============================================================================

def alpha_over(dst: np.ndarray, src: np.ndarray, x: int = 0, y: int = 0) -> np.ndarray:
    """Composite ``src`` over ``dst`` with its top-left corner at (x, y).

    Standard Porter-Duff "source over" on straight (non-premultiplied) alpha.
    ``src`` must lie fully inside ``dst``. Returns a new array.
    """
    _check_rgba(dst)
    _check_rgba(src)
    h, w = src.shape[:2]
    if x < 0 or y < 0 or y + h > dst.shape[0] or x + w > dst.shape[1]:
        raise ValueError(
            f"Source {w}x{h} at ({x}, {y}) exceeds destination "
            f"{dst.shape[1]}x{dst.shape[0]}"
        )

    result = dst.copy()
    region = result[y:y + h, x:x + w].astype(np.float64) / 255.0
    top = src.astype(np.float64) / 255.0

    src_a = top[..., 3:4]
    dst_a = region[..., 3:4]
    out_a = src_a + dst_a * (1.0 - src_a)
    safe_a = np.where(out_a > 0, out_a, 1.0)
    out_rgb = (top[..., :3] * src_a + region[..., :3] * dst_a * (1.0 - src_a)) / safe_a
    out_rgb = np.where(out_a > 0, out_rgb, 0.0)

    composed = np.concatenate([out_rgb, out_a], axis=-1)
    result[y:y + h, x:x + w] = np.clip(np.rint(composed * 255.0), 0, 255).astype(np.uint8)
    return result


__all__ = [
    "BlendMode",
    "wash", "tint", "softlight", "mix",
    "blend_color", "blend_pixel",
    "grayscale", "invert", "sepia",
    "alpha_over",
]
