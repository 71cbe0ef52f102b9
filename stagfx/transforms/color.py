"""Color transform: blend a constant color into every pixel.

Modes:
    tint: target hue/saturation with the source lightness
    wash: ``target * opacity + source * (1 - opacity)``
    softlight: soft-light compositing of the target over the source

``intensity`` then fades between the original (0) and the blended
result (1). Alpha is left untouched.
"""

from __future__ import annotations

from ..pixelmath.blend import blend_color
from ..raster import RasterImage
from .base import single_input
from .requests import ColorRequest


def color(images: list[RasterImage], request: ColorRequest) -> RasterImage:
    image = single_input(images, 'color')
    pixels = blend_color(
        image.get_pixels(),
        request.rgb,
        mode=request.mode,
        opacity=request.opacity,
        intensity=request.intensity,
    )
    return RasterImage(pixels, copy=False)


__all__ = ['color']
