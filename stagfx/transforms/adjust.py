"""Simple single-image adjustments: invert, sepia and blur."""

from __future__ import annotations

import PIL.ImageFilter

from ..pixelmath import blend
from ..raster import RasterImage
from .base import single_input
from .requests import BlurRequest, InvertRequest, SepiaRequest


def invert(images: list[RasterImage], request: InvertRequest) -> RasterImage:
    """Negate RGB, keep alpha."""
    image = single_input(images, 'invert')
    return RasterImage(blend.invert(image.get_pixels()), copy=False)


def sepia(images: list[RasterImage], request: SepiaRequest) -> RasterImage:
    image = single_input(images, 'sepia')
    return RasterImage(blend.sepia(image.get_pixels(), request.intensity), copy=False)


def blur(images: list[RasterImage], request: BlurRequest) -> RasterImage:
    """Gaussian blur of all four channels with ``request.radius``."""
    image = single_input(images, 'blur')
    if request.radius == 0:
        return image.copy()
    pil_img = image.to_pil().filter(PIL.ImageFilter.GaussianBlur(radius=request.radius))
    return RasterImage.from_pil(pil_img)


__all__ = ['invert', 'sepia', 'blur']
