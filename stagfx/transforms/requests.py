"""Typed transform requests.

Each transform has exactly one request model. The models form a tagged
union on the ``transform`` field, so ``parse_request`` can turn a plain
mapping into the right model.

Field names are snake_case; the camelCase names used by older callers
(``blendMode``, ``borderWidth``, ``borderColor``) and ``hex`` for the color
are accepted as aliases.
"""

from pathlib import Path
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from ..colors import RGB, to_rgb
from ..pixelmath.blend import BlendMode
from ..raster import RasterImage

ImageReference = Union[str, Path, bytes, RasterImage]
"An asset name or path, encoded image bytes, or an already decoded image"

ColorValue = Union[str, tuple[int, int, int]]
"A hex string ('#rgb' / '#rrggbb') or an RGB triple"


class TransformRequest(BaseModel):
    """Base class of all transform requests."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
        arbitrary_types_allowed=True,
        frozen=True,
    )

    transform: str

    # Number of images the transform needs at minimum
    min_images: ClassVar[int] = 1

    def image_references(self) -> list[ImageReference]:
        """The image inputs of this request, in order."""
        return [self.input]  # type: ignore[attr-defined]


class GreyscaleRequest(TransformRequest):
    """Convert to greyscale."""

    transform: Literal['greyscale'] = 'greyscale'
    input: ImageReference


class ColorRequest(TransformRequest):
    """Blend a constant color into the image."""

    transform: Literal['color'] = 'color'
    input: ImageReference
    color: ColorValue = Field(alias='hex')
    mode: BlendMode = Field(default=BlendMode.TINT, alias='blendMode')
    opacity: float = Field(default=0.5, ge=0.0, le=1.0)
    intensity: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator('mode', mode='before')
    @classmethod
    def _normalize_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def rgb(self) -> RGB:
        return to_rgb(self.color)


class CircleRequest(TransformRequest):
    """Circular crop with an optional ring border."""

    transform: Literal['circle'] = 'circle'
    input: ImageReference
    border_width: int = Field(default=0, ge=0, alias='borderWidth')
    border_color: Optional[ColorValue] = Field(default=None, alias='borderColor')


class BlinkRequest(TransformRequest):
    """Animated GIF cycling through the input images."""

    transform: Literal['blink'] = 'blink'
    inputs: list[ImageReference]
    delay: int = Field(default=200, ge=0)  # Milliseconds per frame, GIF stores it rounded to 10 ms
    loop: bool = Field(default=True, strict=True)

    min_images: ClassVar[int] = 2

    def image_references(self) -> list[ImageReference]:
        return list(self.inputs)


class InvertRequest(TransformRequest):
    """Negate the colors."""

    transform: Literal['invert'] = 'invert'
    input: ImageReference


class SepiaRequest(TransformRequest):
    """Vintage sepia tone."""

    transform: Literal['sepia'] = 'sepia'
    input: ImageReference
    intensity: float = Field(default=1.0, ge=0.0, le=1.0)


class BlurRequest(TransformRequest):
    """Gaussian blur."""

    transform: Literal['blur'] = 'blur'
    input: ImageReference
    radius: float = Field(default=5.0, ge=0.0, le=100.0)


AnyTransformRequest = Annotated[
    Union[
        GreyscaleRequest,
        ColorRequest,
        CircleRequest,
        BlinkRequest,
        InvertRequest,
        SepiaRequest,
        BlurRequest,
    ],
    Field(discriminator='transform'),
]

REQUEST_TYPES: dict[str, type[TransformRequest]] = {
    'greyscale': GreyscaleRequest,
    'color': ColorRequest,
    'circle': CircleRequest,
    'blink': BlinkRequest,
    'invert': InvertRequest,
    'sepia': SepiaRequest,
    'blur': BlurRequest,
}

_request_adapter = TypeAdapter(AnyTransformRequest)


def parse_request(data: dict[str, Any]) -> TransformRequest:
    """Build the request model selected by ``data['transform']``.

    Raises pydantic's ValidationError; use the transform validators to get
    stagfx errors instead.
    """
    return _request_adapter.validate_python(data)


__all__ = [
    'ImageReference',
    'ColorValue',
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
]
