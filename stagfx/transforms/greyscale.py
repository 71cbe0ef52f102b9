"""Greyscale transform.

Uses ITU-R BT.709 luminosity coefficients:
Y = 0.2126*R + 0.7152*G + 0.0722*B

Alpha is preserved.
"""

from __future__ import annotations

from ..pixelmath import blend
from ..raster import RasterImage
from .base import single_input
from .requests import GreyscaleRequest


def greyscale(images: list[RasterImage], request: GreyscaleRequest) -> RasterImage:
    image = single_input(images, 'greyscale')
    return RasterImage(blend.grayscale(image.get_pixels()), copy=False)


__all__ = ['greyscale']
