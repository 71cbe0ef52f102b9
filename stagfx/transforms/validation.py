"""
Request validators.

A validator takes whatever the caller passed (a request model or a plain
mapping), checks every option and returns the typed request. It never
touches pixel data. All failures are :class:`~stagfx.errors.ValidationError`
subclasses naming the offending parameter.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, TypeVar

import pydantic

from ..colors import to_rgb
from ..errors import (
    InvalidOptionError,
    MinimumImagesError,
    MissingParameterError,
    ValidationError,
)
from ..raster import RasterImage
from .requests import (
    BlinkRequest,
    BlurRequest,
    CircleRequest,
    ColorRequest,
    GreyscaleRequest,
    InvertRequest,
    SepiaRequest,
    TransformRequest,
)

RequestT = TypeVar('RequestT', bound=TransformRequest)

Validator = Callable[[Any], TransformRequest]


def _flatten(params: Mapping[str, Any]) -> dict[str, Any]:
    """Merge a nested ``options`` mapping into the top level."""
    data = dict(params)
    options = data.pop('options', None)
    if options is not None:
        if not isinstance(options, Mapping):
            raise InvalidOptionError('options', 'Must be a mapping')
        for key, value in options.items():
            data.setdefault(key, value)
    return data


def _field_name(loc: tuple) -> str:
    if not loc:
        return 'request'
    name = str(loc[0])
    if len(loc) > 1 and isinstance(loc[1], int):
        name += f'[{loc[1]}]'
    return name


def translate_pydantic_error(error: pydantic.ValidationError) -> ValidationError:
    """Map the first pydantic error onto a stagfx validation error."""
    details = error.errors()
    if not details:
        return ValidationError(str(error), cause=error)
    first = details[0]
    name = _field_name(tuple(first.get('loc', ())))
    if first.get('type') == 'missing':
        result: ValidationError = MissingParameterError(name)
    else:
        result = InvalidOptionError(name, first.get('msg', 'invalid value'))
    result.cause = error
    return result


def coerce_request(model: type[RequestT], params: Any) -> RequestT:
    """Turn ``params`` into an instance of ``model``.

    :param model: The expected request class
    :param params: A ``model`` instance or a mapping of its fields (a nested
        ``options`` mapping is flattened first)
    :raises ValidationError: If the parameters do not fit the model
    """
    if isinstance(params, model):
        return params
    expected = model.model_fields['transform'].default
    if isinstance(params, TransformRequest):
        raise InvalidOptionError(
            'transform', f"Expected a '{expected}' request, got '{params.transform}'"
        )
    if not isinstance(params, Mapping):
        raise ValidationError(
            f"Parameters for '{expected}' must be a mapping or {model.__name__}, "
            f"got {type(params).__name__}"
        )
    data = _flatten(params)
    data.pop('transform', None)
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise translate_pydantic_error(e) from e


def check_image_reference(reference: Any, name: str = 'input') -> None:
    """Reject empty or unusable image references."""
    if isinstance(reference, RasterImage):
        return
    if isinstance(reference, (bytes, bytearray)):
        if not reference:
            raise InvalidOptionError(name, 'Image data is empty')
        return
    if not str(reference).strip():
        raise MissingParameterError(name)


def check_color(value: Any) -> None:
    """Raise :class:`InvalidHexError` unless ``value`` is a usable color."""
    to_rgb(value)


# ============================================================================
# Per-transform validators
# ============================================================================

def validate_greyscale(params: Any) -> GreyscaleRequest:
    request = coerce_request(GreyscaleRequest, params)
    check_image_reference(request.input)
    return request


def validate_color(params: Any) -> ColorRequest:
    request = coerce_request(ColorRequest, params)
    check_image_reference(request.input)
    check_color(request.color)
    return request


def validate_circle(params: Any) -> CircleRequest:
    request = coerce_request(CircleRequest, params)
    check_image_reference(request.input)
    if request.border_color is not None:
        check_color(request.border_color)
    return request


def validate_blink(params: Any) -> BlinkRequest:
    """Blink needs at least two frames; checked before the options."""
    if isinstance(params, Mapping):
        inputs = params.get('inputs')
        if inputs is None or (isinstance(inputs, (list, tuple)) and len(inputs) < BlinkRequest.min_images):
            raise MinimumImagesError(BlinkRequest.min_images, 0 if inputs is None else len(inputs))
    request = coerce_request(BlinkRequest, params)
    if len(request.inputs) < BlinkRequest.min_images:
        raise MinimumImagesError(BlinkRequest.min_images, len(request.inputs))
    for index, reference in enumerate(request.inputs):
        check_image_reference(reference, f'inputs[{index}]')
    return request


def validate_invert(params: Any) -> InvertRequest:
    request = coerce_request(InvertRequest, params)
    check_image_reference(request.input)
    return request


def validate_sepia(params: Any) -> SepiaRequest:
    request = coerce_request(SepiaRequest, params)
    check_image_reference(request.input)
    return request


def validate_blur(params: Any) -> BlurRequest:
    request = coerce_request(BlurRequest, params)
    check_image_reference(request.input)
    return request


validators: dict[str, Validator] = {
    'greyscale': validate_greyscale,
    'color': validate_color,
    'circle': validate_circle,
    'blink': validate_blink,
    'invert': validate_invert,
    'sepia': validate_sepia,
    'blur': validate_blur,
}


__all__ = [
    'Validator',
    'translate_pydantic_error',
    'coerce_request',
    'check_image_reference',
    'check_color',
    'validate_greyscale',
    'validate_color',
    'validate_circle',
    'validate_blink',
    'validate_invert',
    'validate_sepia',
    'validate_blur',
    'validators',
]
