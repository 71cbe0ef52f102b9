"""
Exception hierarchy for stagfx.

Every error raised by the library derives from :class:`TransformError` and
carries a stable upper-case ``code`` plus an optional underlying ``cause``.
The five kinds callers are expected to distinguish are:

- :class:`ValidationError` - bad/missing parameter, out-of-range option,
  malformed color, too few frames
- :class:`NotFoundError` - unknown transform name or missing asset
- :class:`DecodeError` - bytes are not a supported image
- :class:`ProcessingError` - unexpected failure during pixel work
- :class:`RegistrationError` - duplicate name or frozen registry
"""

from __future__ import annotations

from typing import Iterable


class TransformError(Exception):
    """Base class for all image transformation errors."""

    code: str = "TRANSFORM_ERROR"

    def __init__(self, message: str, cause: BaseException | None = None, code: str | None = None):
        if code is not None:
            self.code = code
        self.message = message
        self.cause = cause
        super().__init__(f"[{self.code}] {message}")
        if cause is not None:
            self.__cause__ = cause


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationError(TransformError):
    """A transform request was rejected before any pixel work began."""

    code = "VALIDATION_ERROR"


class MissingParameterError(ValidationError):
    """A required parameter is missing."""

    code = "MISSING_PARAM"

    def __init__(self, param: str):
        self.param = param
        super().__init__(f"Required parameter missing: {param}")


class InvalidOptionError(ValidationError):
    """An option has the wrong type or is out of range."""

    code = "INVALID_OPTION"

    def __init__(self, option: str, message: str):
        self.option = option
        super().__init__(f"Invalid option '{option}': {message}")


class InvalidHexError(ValidationError):
    """A color string is not ``#rgb`` or ``#rrggbb``."""

    code = "INVALID_HEX"

    def __init__(self, hex_value: object):
        self.hex_value = hex_value
        super().__init__(f"Invalid hex color value: {hex_value}")


class MinimumImagesError(ValidationError):
    """Not enough images were passed to a multi-image transform."""

    code = "MIN_IMAGES"

    def __init__(self, min_required: int, given: int | None = None):
        self.min_required = min_required
        self.given = given
        message = f"At least {min_required} images required"
        if given is not None:
            message += f", got {given}"
        super().__init__(message)


class BorderTooLargeError(InvalidOptionError):
    """The circle border does not fit into the image."""

    def __init__(self, border_width: int, size: int):
        self.border_width = border_width
        self.size = size
        super().__init__(
            "border_width",
            f"{border_width}px border is too large for a {size}px image "
            f"(must be less than {size / 2:g})",
        )


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

class NotFoundError(TransformError):
    """A named transform or asset does not exist."""

    code = "NOT_FOUND"


class TransformNotFoundError(NotFoundError):
    """No transform is registered under the requested name."""

    code = "TRANSFORM_NOT_FOUND"

    def __init__(self, name: str, known: Iterable[str] | None = None):
        self.name = name
        self.known = sorted(known) if known is not None else []
        message = f"Transform not found: {name}"
        if self.known:
            message += f" (available: {', '.join(self.known)})"
        super().__init__(message)


class AssetNotFoundError(NotFoundError):
    """An input path could not be resolved to a readable file."""

    code = "ASSET_NOT_FOUND"

    def __init__(self, path: object, reason: str = "not found", cause: BaseException | None = None):
        self.path = path
        self.reason = reason
        super().__init__(f"Asset {reason}: {path}", cause=cause)


# ---------------------------------------------------------------------------
# Codec / processing / registry
# ---------------------------------------------------------------------------

class DecodeError(TransformError):
    """Input bytes are not a supported image format."""

    code = "INVALID_IMAGE"


class ProcessingError(TransformError):
    """An unexpected failure happened while a transform was running."""

    code = "PROCESSING_ERROR"

    def __init__(self, message: str, cause: BaseException | None = None, transform: str | None = None):
        self.transform = transform
        super().__init__(message, cause=cause)

    @property
    def root_cause(self) -> BaseException:
        """The innermost error of the cause chain (self if there is none)."""
        current: BaseException = self
        seen = {id(current)}
        while current.__cause__ is not None and id(current.__cause__) not in seen:
            current = current.__cause__
            seen.add(id(current))
        return current


class RegistrationError(TransformError):
    """A transform could not be registered."""

    code = "PLUGIN_EXISTS"


__all__ = [
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
