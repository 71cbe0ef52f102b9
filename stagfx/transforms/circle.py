"""Circle transform.

Crops the image to its inscribed circle. Non-square inputs are first
cover-cropped to ``min(width, height)`` squared. With a border the output
grows by ``2 * border_width``:

1. allocate a transparent canvas of ``size + 2 * border_width``
2. paint the ring between radius ``size / 2`` and the canvas edge
3. composite the circular source into the center
4. crop the composite to a circle again so the outer edge is exact
"""

from __future__ import annotations

import logging

from ..colors import to_rgb
from ..errors import BorderTooLargeError
from ..pixelmath.blend import alpha_over
from ..pixelmath.masks import crop_circle, ring_canvas
from ..raster import RasterImage
from .base import single_input
from .requests import CircleRequest

logger = logging.getLogger(__name__)

DEFAULT_BORDER_COLOR = (0, 0, 0)


def circle(images: list[RasterImage], request: CircleRequest) -> RasterImage:
    image = single_input(images, 'circle')
    size = min(image.width, image.height)
    border_width = request.border_width

    if border_width > 0 and border_width >= size / 2:
        raise BorderTooLargeError(border_width, size)

    if not image.is_square:
        logger.debug(f"Cover-cropping {image.width}x{image.height} to {size}x{size}")
        image = image.resized_to_cover(size, size)

    cropped = crop_circle(image.get_pixels())
    if border_width == 0:
        return RasterImage(cropped, copy=False)

    border_color = to_rgb(request.border_color) if request.border_color is not None else DEFAULT_BORDER_COLOR
    canvas = ring_canvas(size, border_width, border_color)
    composite = alpha_over(canvas, cropped, border_width, border_width)
    return RasterImage(crop_circle(composite), copy=False)


__all__ = ['circle']
