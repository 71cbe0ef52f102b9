"""
Implements :class:`RasterImage`, the in-memory RGBA8 image every transform
works on, and :class:`Animation`, an ordered list of frames with timing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import PIL.Image

Pixel = tuple[int, int, int, int]


class RasterImage:
    """
    A rectangular grid of RGBA samples, 8 bit per channel.

    The pixels are stored row-major in a contiguous numpy array of shape
    ``(height, width, 4)``. Width and height are always positive.

    Coordinates outside ``[0, width) x [0, height)`` are a programming error
    and raise :class:`IndexError`; they are never clamped or ignored.
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray, copy: bool = True):
        """
        :param pixels: RGBA uint8 array of shape (height, width, 4)
        :param copy: If False the array is referenced (and possibly modified)
            by this image instead of being copied
        """
        if not isinstance(pixels, np.ndarray):
            raise TypeError(f"Expected numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected RGBA array (H, W, 4), got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 dtype, got {pixels.dtype}")
        if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
            raise ValueError(f"Image dimensions must be positive, got {pixels.shape[1]}x{pixels.shape[0]}")
        self._pixels = np.array(pixels, copy=True) if copy else np.ascontiguousarray(pixels)

    # ---- construction ----

    @classmethod
    def new(cls, width: int, height: int, color: Sequence[int] = (0, 0, 0, 0)) -> RasterImage:
        """Allocate an image filled with ``color`` (transparent by default)."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = _to_rgba(color)
        return cls(pixels, copy=False)

    @classmethod
    def from_pil(cls, image: PIL.Image.Image) -> RasterImage:
        """Create from a Pillow image of any mode."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.asarray(image, dtype=np.uint8), copy=True)

    @classmethod
    def decode(cls, data: bytes) -> RasterImage:
        """Decode PNG/JPEG/GIF/BMP/WebP bytes. See :func:`stagfx.codec.decode`."""
        from .codec import decode
        return decode(data)

    # ---- properties ----

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    @property
    def is_square(self) -> bool:
        return self.width == self.height

    def get_pixels(self) -> np.ndarray:
        """The underlying (height, width, 4) array. Not a copy."""
        return self._pixels

    def to_pil(self) -> PIL.Image.Image:
        return PIL.Image.fromarray(self._pixels)

    def copy(self) -> RasterImage:
        return RasterImage(self._pixels, copy=True)

    # ---- pixel access ----

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside of the {self.width}x{self.height} image"
            )

    def get_pixel(self, x: int, y: int) -> Pixel:
        self._check_bounds(x, y)
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
        self._check_bounds(x, y)
        self._pixels[y, x] = _to_rgba(color)

    def fill(self, color: Sequence[int]) -> None:
        """Set every pixel to ``color``."""
        self._pixels[...] = _to_rgba(color)

    # ---- geometry ----

    def cropped(self, x: int, y: int, width: int, height: int) -> RasterImage:
        """Copy of the region with top-left (x, y); must lie inside the image."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Crop dimensions must be positive, got {width}x{height}")
        self._check_bounds(x, y)
        self._check_bounds(x + width - 1, y + height - 1)
        return RasterImage(self._pixels[y:y + height, x:x + width], copy=True)

    def cropped_square(self, size: int) -> RasterImage:
        """Centered ``size`` x ``size`` crop. ``size`` may not exceed either side."""
        if size > self.width or size > self.height:
            raise ValueError(f"Cannot crop {size}x{size} from {self.width}x{self.height}")
        x = (self.width - size) // 2
        y = (self.height - size) // 2
        return self.cropped(x, y, size, size)

    def resized(self, width: int, height: int, resample: PIL.Image.Resampling = PIL.Image.Resampling.LANCZOS) -> RasterImage:
        """Stretch to exactly ``width`` x ``height``."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Target dimensions must be positive, got {width}x{height}")
        if (width, height) == self.size:
            return self.copy()
        return RasterImage.from_pil(self.to_pil().resize((width, height), resample=resample))

    def resized_to_cover(self, width: int, height: int) -> RasterImage:
        """Scale preserving aspect ratio until both sides cover the target,
        then crop the centered ``width`` x ``height`` region.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Target dimensions must be positive, got {width}x{height}")
        if (width, height) == self.size:
            return self.copy()

        scale = max(width / self.width, height / self.height)
        new_w = max(width, math.ceil(self.width * scale - 1e-9))
        new_h = max(height, math.ceil(self.height * scale - 1e-9))
        scaled = self if (new_w, new_h) == self.size else self.resized(new_w, new_h)

        x = (new_w - width) // 2
        y = (new_h - height) // 2
        return scaled.cropped(x, y, width, height)

    # ---- encoding ----

    def encode(self, filetype: str = "png") -> bytes:
        """Compress the image. See :func:`stagfx.codec.encode`."""
        from .codec import encode
        return encode(self, filetype)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.size == other.size and np.array_equal(self._pixels, other._pixels)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"RasterImage({self.width}x{self.height})"


@dataclass
class Animation:
    """Frames of equal size, each shown for ``delay`` milliseconds.

    :param frames: The frames in display order
    :param delay: Per-frame delay in milliseconds, encoded rounded to 10 ms
    :param loop: True repeats forever, False plays once
    """
    frames: list[RasterImage] = field(default_factory=list)
    delay: int = 200
    loop: bool = True

    @property
    def size(self) -> tuple[int, int]:
        if not self.frames:
            return 0, 0
        return self.frames[0].size

    def __len__(self) -> int:
        return len(self.frames)

    def encode(self) -> bytes:
        """Encode as animated GIF. See :func:`stagfx.codec.encode_animation`."""
        from .codec import encode_animation
        return encode_animation(self)


def _to_rgba(color: Sequence[int]) -> Pixel:
    values = [int(v) for v in color]
    if len(values) == 3:
        values.append(255)
    if len(values) != 4 or any(v < 0 or v > 255 for v in values):
        raise ValueError(f"Expected RGB or RGBA color with values 0-255, got {tuple(color)}")
    return values[0], values[1], values[2], values[3]


__all__ = ["RasterImage", "Animation", "Pixel"]
