"""
Built-in transforms.

Each transform is a handler ``(images, request) -> RasterImage | Animation``
paired with a validator that turns raw parameters into its typed request.
"""

from .base import Handler, TransformOutput, single_input
from .requests import (
    ImageReference,
    TransformRequest,
    GreyscaleRequest,
    ColorRequest,
    CircleRequest,
    BlinkRequest,
    InvertRequest,
    SepiaRequest,
    BlurRequest,
    AnyTransformRequest,
    REQUEST_TYPES,
    parse_request,
)
from .validation import Validator, validators, coerce_request
from .greyscale import greyscale
from .color import color
from .circle import circle
from .blink import blink
from .adjust import invert, sepia, blur

BUILTIN_TRANSFORMS: dict[str, tuple[Handler, Validator]] = {
    'greyscale': (greyscale, validators['greyscale']),
    'color': (color, validators['color']),
    'circle': (circle, validators['circle']),
    'blink': (blink, validators['blink']),
    'invert': (invert, validators['invert']),
    'sepia': (sepia, validators['sepia']),
    'blur': (blur, validators['blur']),
}
"Name -> (handler, validator) for every transform shipped with stagfx"

__all__ = [
    # Contract
    'Handler',
    'TransformOutput',
    'Validator',
    'single_input',
    # Requests
    'ImageReference',
    'TransformRequest',
    'GreyscaleRequest',
    'ColorRequest',
    'CircleRequest',
    'BlinkRequest',
    'InvertRequest',
    'SepiaRequest',
    'BlurRequest',
    'AnyTransformRequest',
    'REQUEST_TYPES',
    'parse_request',
    'validators',
    'coerce_request',
    # Handlers
    'greyscale',
    'color',
    'circle',
    'blink',
    'invert',
    'sepia',
    'blur',
    'BUILTIN_TRANSFORMS',
]
