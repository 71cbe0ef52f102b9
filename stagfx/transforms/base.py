"""Handler contract shared by all transforms."""

from __future__ import annotations

from typing import Any, Callable, Union

from ..raster import Animation, RasterImage

TransformOutput = Union[RasterImage, Animation]
"A still image or an animation; the processor encodes either"

Handler = Callable[[list[RasterImage], Any], TransformOutput]
"handler(images, request) -> output. Must not modify ``images``."


def single_input(images: list[RasterImage], transform: str) -> RasterImage:
    """Return the only image of ``images``."""
    if len(images) != 1:
        raise ValueError(f"{transform} takes exactly one image, got {len(images)}")
    return images[0]


__all__ = ['TransformOutput', 'Handler', 'single_input']
