"""
stagfx - named image transforms (greyscale, color blend, circle crop, blink
animation) behind one dispatcher.

Example:
    >>> import stagfx
    >>> png = stagfx.circle('avatar.png', border_width=8, border_color='#1e90ff')
    >>> gif = stagfx.blink(['a.png', 'b.png'], delay=150)
    >>> data = stagfx.execute('color', {'input': 'photo.jpg', 'hex': '#f80', 'mode': 'wash'})
"""

from __future__ import annotations

from typing import Any, Sequence

from .errors import (
    TransformError,
    ValidationError,
    MissingParameterError,
    InvalidOptionError,
    InvalidHexError,
    MinimumImagesError,
    BorderTooLargeError,
    NotFoundError,
    TransformNotFoundError,
    AssetNotFoundError,
    DecodeError,
    ProcessingError,
    RegistrationError,
)
from .raster import RasterImage, Animation
from .pixelmath import BlendMode
from .registry import TransformRegistry, TransformEntry, create_default_registry
from .processor import Processor, get_default_processor, execute
from .transforms.requests import (
    ImageReference,
    TransformRequest,
    GreyscaleRequest,
    ColorRequest,
    CircleRequest,
    BlinkRequest,
    InvertRequest,
    SepiaRequest,
    BlurRequest,
)


def transform(name: str, params: Any) -> bytes:
    """Alias of :func:`execute`."""
    return execute(name, params)


def greyscale(input: ImageReference) -> bytes:
    return execute('greyscale', {'input': input})


def color(
    input: ImageReference,
    color: Any,
    mode: BlendMode | str = BlendMode.TINT,
    opacity: float = 0.5,
    intensity: float = 1.0,
) -> bytes:
    """Blend ``color`` (hex string or RGB triple) into the image."""
    return execute('color', {
        'input': input,
        'color': color,
        'mode': mode,
        'opacity': opacity,
        'intensity': intensity,
    })


def circle(input: ImageReference, border_width: int = 0, border_color: Any = None) -> bytes:
    params: dict[str, Any] = {'input': input, 'border_width': border_width}
    if border_color is not None:
        params['border_color'] = border_color
    return execute('circle', params)


def blink(inputs: Sequence[ImageReference], delay: int | None = None, loop: bool | None = None) -> bytes:
    """Animated GIF of ``inputs``; unset options come from the configuration."""
    params: dict[str, Any] = {'inputs': list(inputs)}
    if delay is not None:
        params['delay'] = delay
    if loop is not None:
        params['loop'] = loop
    return execute('blink', params)


def invert(input: ImageReference) -> bytes:
    return execute('invert', {'input': input})


def sepia(input: ImageReference, intensity: float = 1.0) -> bytes:
    return execute('sepia', {'input': input, 'intensity': intensity})


def blur(input: ImageReference, radius: float = 5.0) -> bytes:
    return execute('blur', {'input': input, 'radius': radius})


__all__ = [
    # Entry points
    "execute",
    "transform",
    "greyscale",
    "color",
    "circle",
    "blink",
    "invert",
    "sepia",
    "blur",
    # Engine
    "Processor",
    "get_default_processor",
    "TransformRegistry",
    "TransformEntry",
    "create_default_registry",
    # Data
    "RasterImage",
    "Animation",
    "BlendMode",
    "ImageReference",
    "TransformRequest",
    "GreyscaleRequest",
    "ColorRequest",
    "CircleRequest",
    "BlinkRequest",
    "InvertRequest",
    "SepiaRequest",
    "BlurRequest",
    # Errors
    "TransformError",
    "ValidationError",
    "MissingParameterError",
    "InvalidOptionError",
    "InvalidHexError",
    "MinimumImagesError",
    "BorderTooLargeError",
    "NotFoundError",
    "TransformNotFoundError",
    "AssetNotFoundError",
    "DecodeError",
    "ProcessingError",
    "RegistrationError",
]

__version__ = "0.1.0"
