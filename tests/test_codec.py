"""Tests for image decoding and encoding."""

import io

import numpy as np
import PIL.Image
import pytest

from stagfx.codec import decode, detect_format, encode, encode_animation, gif_delay
from stagfx.errors import DecodeError, TransformError
from stagfx.raster import Animation, RasterImage

from conftest import png_bytes, solid


def read_gif(data: bytes):
    """Return (frame count, per-frame durations, info of the first frame)."""
    img = PIL.Image.open(io.BytesIO(data))
    info = dict(img.info)
    durations = []
    for index in range(img.n_frames):
        img.seek(index)
        durations.append(img.info.get('duration'))
    return img.n_frames, durations, info


class TestDecode:

    def test_png(self, square_png):
        image = decode(square_png)
        assert image.size == (100, 100)
        assert image.get_pixel(50, 50) == (255, 0, 0, 255)

    def test_rgb_jpeg_becomes_rgba(self):
        output = io.BytesIO()
        PIL.Image.new('RGB', (40, 30), (0, 0, 200)).save(output, format='JPEG')
        image = decode(output.getvalue())
        assert image.size == (40, 30)
        assert image.get_pixel(0, 0)[3] == 255

    def test_palette_png_becomes_rgba(self):
        output = io.BytesIO()
        PIL.Image.new('P', (8, 8), 0).save(output, format='PNG')
        assert decode(output.getvalue()).get_pixels().shape == (8, 8, 4)

    def test_too_small(self):
        with pytest.raises(DecodeError, match='too small') as exc_info:
            decode(b'\x89PNG')
        assert exc_info.value.code == 'INVALID_IMAGE'
        assert isinstance(exc_info.value, TransformError)

    def test_empty(self):
        with pytest.raises(DecodeError):
            decode(b'')

    def test_garbage(self):
        with pytest.raises(DecodeError):
            decode(b'this is definitely not an image file')

    def test_truncated(self, square_png):
        with pytest.raises(DecodeError):
            decode(square_png[:len(square_png) // 2])

    def test_not_bytes(self):
        with pytest.raises(DecodeError):
            decode('image.png')

    def test_pixel_limit(self, square_png):
        with pytest.raises(DecodeError, match='exceeds'):
            decode(square_png, max_pixels=100 * 99)
        assert decode(square_png, max_pixels=None).size == (100, 100)

    def test_animated_gif_uses_first_frame(self):
        frames = [solid(20, 10, (255, 0, 0, 255)), solid(20, 10, (0, 0, 255, 255))]
        data = encode_animation(Animation(frames=frames))
        image = decode(data)
        assert image.size == (20, 10)
        assert image.get_pixel(5, 5) == (255, 0, 0, 255)


class TestEncode:

    def test_png_round_trip(self, gradient_image):
        assert decode(encode(gradient_image, 'png')) == gradient_image

    def test_png_keeps_transparency(self):
        image = solid(10, 10, (1, 2, 3, 0))
        assert decode(encode(image)).get_pixel(0, 0)[3] == 0

    def test_jpeg_flattens_onto_white(self):
        data = encode(solid(16, 16, (0, 0, 0, 0)), 'jpg')
        assert detect_format(data) == 'jpeg'
        r, g, b, a = decode(data).get_pixel(8, 8)
        assert min(r, g, b) >= 250
        assert a == 255

    @pytest.mark.parametrize('filetype', ['png', 'jpeg', 'gif', 'bmp', 'webp'])
    def test_formats_detected(self, filetype):
        data = encode(solid(12, 12, (200, 100, 50, 255)), filetype)
        assert detect_format(data) == filetype
        assert decode(data).size == (12, 12)

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            encode(solid(2, 2), 'tiff')

    def test_raster_shortcuts(self):
        image = solid(3, 3)
        assert RasterImage.decode(image.encode()) == image


class TestEncodeAnimation:

    @pytest.fixture
    def frames(self):
        return [
            solid(30, 20, (255, 0, 0, 255)),
            solid(30, 20, (0, 255, 0, 255)),
            solid(30, 20, (0, 0, 255, 255)),
        ]

    def test_frames_and_delay(self, frames):
        count, durations, info = read_gif(encode_animation(Animation(frames, delay=150)))
        assert count == 3
        assert durations == [150, 150, 150]
        assert info.get('loop') == 0

    def test_no_loop(self, frames):
        data = Animation(frames, delay=80, loop=False).encode()
        count, durations, info = read_gif(data)
        assert count == 3
        assert 'loop' not in info

    def test_size(self, frames):
        img = PIL.Image.open(io.BytesIO(encode_animation(Animation(frames))))
        assert img.size == (30, 20)

    def test_equal_frames_kept(self):
        """Consecutive equal frames stay separate frames with their own delay."""
        frames = [solid(8, 8, (255, 0, 0, 255)), solid(8, 8, (255, 0, 0, 255))]
        count, durations, _ = read_gif(encode_animation(Animation(frames, delay=100)))
        assert count == 2
        assert durations == [100, 100]

    def test_equal_runs_kept(self, frames):
        sequence = [frames[0], frames[0], frames[1], frames[1], frames[1], frames[0]]
        count, durations, _ = read_gif(encode_animation(Animation(sequence, delay=50)))
        assert count == 6
        assert durations == [50] * 6

    def test_frame_colors(self, frames):
        img = PIL.Image.open(io.BytesIO(encode_animation(Animation(frames))))
        colors = []
        for index in range(img.n_frames):
            img.seek(index)
            colors.append(img.convert('RGBA').getpixel((15, 10)))
        assert colors == [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255)]

    def test_transparent_pixels(self):
        pixels = np.zeros((10, 10, 4), dtype=np.uint8)
        pixels[:, 5:] = (0, 0, 255, 255)
        frame = RasterImage(pixels)
        img = PIL.Image.open(io.BytesIO(encode_animation(Animation([frame, frame]))))
        rgba = img.convert('RGBA')
        assert rgba.getpixel((1, 5))[3] == 0
        assert rgba.getpixel((8, 5)) == (0, 0, 255, 255)

    @pytest.mark.parametrize('delay, stored', [(14, 10), (15, 20), (16, 20), (120, 120), (4, 0), (0, 0)])
    def test_delay_rounded_to_10ms(self, frames, delay, stored):
        assert gif_delay(delay) == stored
        _, durations, _ = read_gif(encode_animation(Animation(frames, delay=delay)))
        assert durations == [stored] * 3

    def test_delay_capped(self):
        assert gif_delay(10_000_000) == 655350

    def test_mismatched_frames(self, frames):
        frames.append(solid(10, 10))
        with pytest.raises(ValueError, match='Frame 3'):
            encode_animation(Animation(frames))

    def test_no_frames(self):
        with pytest.raises(ValueError):
            encode_animation(Animation([]))


class TestDetectFormat:

    def test_png(self, square_png):
        assert detect_format(square_png) == 'png'

    def test_unknown(self):
        assert detect_format(b'plain text, nothing else') is None

    def test_png_helper_matches_codec(self):
        image = solid(4, 4, (9, 9, 9, 9))
        assert decode(png_bytes(image)) == image
        assert np.array_equal(decode(encode(image)).get_pixels(), image.get_pixels())
