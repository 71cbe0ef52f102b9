"""
Image encoding and decoding.

Decoding sniffs the file signature with :mod:`filetype` before handing the
bytes to Pillow, so garbage input fails fast with a :class:`DecodeError`
instead of a Pillow-specific exception.
"""

from __future__ import annotations

import io
import logging

import filetype
import PIL.GifImagePlugin
import PIL.Image
import numpy as np

from .errors import DecodeError
from .raster import Animation, RasterImage

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_FILETYPES = ["png", "jpg", "jpeg", "gif", "bmp", "webp"]
"List of image file types which can be read and written"

SUPPORTED_IMAGE_FILETYPE_SET = set(SUPPORTED_IMAGE_FILETYPES)

MIN_HEADER_SIZE = 8
"Fewer bytes than this cannot hold any supported signature"

DEFAULT_MAX_PIXELS = 4096 * 4096


def detect_format(data: bytes) -> str | None:
    """Return the normalized extension ('png', 'jpeg', ...) or None."""
    kind = filetype.guess(data)
    if kind is None:
        return None
    extension = kind.extension.lower()
    if extension == "jpg":
        extension = "jpeg"
    return extension


def decode(data: bytes, max_pixels: int | None = DEFAULT_MAX_PIXELS) -> RasterImage:
    """
    Decode compressed image bytes into an RGBA :class:`RasterImage`.

    Multi-frame inputs (animated GIF/WebP) yield their first frame.

    :param data: PNG, JPEG, GIF, BMP or WebP bytes
    :param max_pixels: Reject images with more pixels than this. None disables
        the check.
    :return: The decoded image
    :raises DecodeError: If the data is not a supported, intact image
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeError(f"Expected bytes, got {type(data).__name__}")
    data = bytes(data)
    if len(data) < MIN_HEADER_SIZE:
        raise DecodeError(
            f"Data too small to be a valid image ({len(data)} bytes)"
        )

    file_format = detect_format(data)
    if file_format is None or file_format not in SUPPORTED_IMAGE_FILETYPE_SET:
        raise DecodeError(
            f"Unsupported or unrecognized image format: {file_format or 'unknown'}"
        )

    try:
        with PIL.Image.open(io.BytesIO(data)) as pil_img:
            width, height = pil_img.size
            if max_pixels is not None and width * height > max_pixels:
                raise DecodeError(
                    f"Image of {width}x{height} exceeds the limit of {max_pixels} pixels"
                )
            pil_img.seek(0)
            pil_img.load()
            rgba = pil_img.convert("RGBA")
    except DecodeError:
        raise
    except (OSError, EOFError, ValueError, SyntaxError, PIL.Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode {file_format} image: {e}", cause=e) from e

    if rgba.width <= 0 or rgba.height <= 0:
        raise DecodeError(f"Decoded {file_format} image has no pixels")
    return RasterImage(np.asarray(rgba, dtype=np.uint8), copy=True)


def encode(image: RasterImage, filetype: str = "png", quality: int = 90) -> bytes:
    """
    Compress an image and return the file's data.

    :param image: The image to encode
    :param filetype: "png", "jpg"/"jpeg", "gif", "bmp" or "webp"
    :param quality: Quality for lossy formats (0-100)
    :return: The encoded bytes
    """
    filetype = filetype.lstrip(".").lower()
    if filetype == "jpg":
        filetype = "jpeg"
    if filetype not in SUPPORTED_IMAGE_FILETYPE_SET:
        raise ValueError(f"Unsupported output format: {filetype}")

    pil_img = image.to_pil()
    parameters = {}
    if filetype == "jpeg":
        # JPEG has no alpha, flatten onto white
        background = PIL.Image.new("RGB", pil_img.size, (255, 255, 255))
        background.paste(pil_img, (0, 0), pil_img)
        pil_img = background
        parameters["quality"] = quality
    elif filetype == "bmp":
        pil_img = pil_img.convert("RGB")
    elif filetype == "webp":
        parameters["quality"] = quality

    output_stream = io.BytesIO()
    pil_img.save(output_stream, format=filetype.upper(), **parameters)
    return output_stream.getvalue()


GIF_DELAY_UNIT = 10
"GIF stores frame delays in hundredths of a second"

GIF_MAX_DELAY = 0xFFFF * GIF_DELAY_UNIT

GIF_TRANSPARENT_INDEX = 255
"Palette slot reserved for transparent pixels, frames are quantized to 255 colors"

GIF_TRAILER = b";"


def gif_delay(delay: int) -> int:
    """Round a delay in milliseconds to the nearest value a GIF can store."""
    return min(round(delay / GIF_DELAY_UNIT) * GIF_DELAY_UNIT, GIF_MAX_DELAY)


def _gif_frame(frame: RasterImage) -> tuple[PIL.Image.Image, bool]:
    """
    Quantize a frame to a 256 entry palette.

    Pixels with alpha below 128 are moved to :data:`GIF_TRANSPARENT_INDEX`.

    :return: The palette image and whether it has transparent pixels
    """
    image = frame.to_pil()
    mask = PIL.Image.eval(image.getchannel("A"), lambda a: 255 if a < 128 else 0)
    palette_image = image.convert("RGB").convert("P", palette=PIL.Image.Palette.ADAPTIVE, colors=255)
    palette = palette_image.getpalette() or []
    palette_image.putpalette(palette + [0] * (768 - len(palette)))
    transparent = mask.getbbox() is not None
    if transparent:
        palette_image.paste(GIF_TRANSPARENT_INDEX, mask=mask)
    return palette_image, transparent


def encode_animation(animation: Animation) -> bytes:
    """
    Encode frames as an animated GIF.

    Every input frame becomes one GIF frame, consecutive equal frames included,
    each carrying ``animation.delay`` milliseconds rounded to the nearest 10 ms
    (see :func:`gif_delay`). A looping animation repeats forever (``loop=0``),
    otherwise the loop extension is omitted and viewers play it once.
    """
    if not animation.frames:
        raise ValueError("Animation has no frames")
    size = animation.frames[0].size
    for index, frame in enumerate(animation.frames):
        if frame.size != size:
            raise ValueError(
                f"Frame {index} is {frame.width}x{frame.height}, expected {size[0]}x{size[1]}"
            )

    delay = gif_delay(animation.delay)
    if delay != animation.delay:
        logger.debug(f"GIF delay {animation.delay} ms rounded to {delay} ms")
    gif_frames = [_gif_frame(frame) for frame in animation.frames]

    # Pillow's save_all merges a frame equal to its predecessor, so the stream
    # is written frame by frame with the GIF plugin's header and frame writers.
    header_info = {"duration": delay}
    if animation.loop:
        header_info["loop"] = 0
    first = gif_frames[0][0].copy()
    first.info["version"] = b"89a"
    header, _ = PIL.GifImagePlugin.getheader(first, info=header_info)

    output_stream = io.BytesIO()
    for block in header:
        output_stream.write(block)
    for palette_image, transparent in gif_frames:
        parameters = {"duration": delay, "disposal": 2, "include_color_table": True}
        if transparent:
            parameters["transparency"] = GIF_TRANSPARENT_INDEX
        for block in PIL.GifImagePlugin.getdata(palette_image, **parameters):
            output_stream.write(block)
    output_stream.write(GIF_TRAILER)

    data = output_stream.getvalue()
    logger.debug(f"Encoded {len(gif_frames)} frame GIF ({len(data)} bytes)")
    return data
