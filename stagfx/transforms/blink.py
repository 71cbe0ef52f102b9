"""Blink transform: an animation cycling through the input images.

The first image defines the frame size. Every other image with different
dimensions is cover-cropped to it (aspect preserving, overflow cut off),
never letterboxed.
"""

from __future__ import annotations

import logging

from ..errors import MinimumImagesError
from ..raster import Animation, RasterImage
from .requests import BlinkRequest

logger = logging.getLogger(__name__)


def normalize_frames(images: list[RasterImage]) -> list[RasterImage]:
    """Cover-crop all images to the size of the first one."""
    width, height = images[0].size
    frames = []
    for index, image in enumerate(images):
        if image.size != (width, height):
            logger.debug(
                f"Frame {index}: resizing {image.width}x{image.height} to {width}x{height}"
            )
            image = image.resized_to_cover(width, height)
        frames.append(image)
    return frames


def blink(images: list[RasterImage], request: BlinkRequest) -> Animation:
    if len(images) < BlinkRequest.min_images:
        raise MinimumImagesError(BlinkRequest.min_images, len(images))
    return Animation(frames=normalize_frames(images), delay=request.delay, loop=request.loop)


__all__ = ['blink', 'normalize_frames']
