"""
Pytest fixtures for stagfx tests
"""

import io

import numpy as np
import PIL.Image
import pytest

from stagfx.config import Settings
from stagfx.processor import Processor
from stagfx.raster import RasterImage


def solid(width: int, height: int, color=(255, 0, 0, 255)) -> RasterImage:
    """Image filled with a single color."""
    return RasterImage.new(width, height, color)


def png_bytes(image: RasterImage) -> bytes:
    output = io.BytesIO()
    image.to_pil().save(output, format="PNG")
    return output.getvalue()


def open_png(data: bytes) -> PIL.Image.Image:
    img = PIL.Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.fixture
def gradient_image() -> RasterImage:
    """64x48 image with a horizontal red and vertical green gradient."""
    pixels = np.zeros((48, 64, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.linspace(0, 255, 64, dtype=np.uint8)[np.newaxis, :]
    pixels[:, :, 1] = np.linspace(0, 255, 48, dtype=np.uint8)[:, np.newaxis]
    pixels[:, :, 2] = 80
    pixels[:, :, 3] = 255
    return RasterImage(pixels)


@pytest.fixture
def square_png() -> bytes:
    """100x100 opaque red PNG."""
    return png_bytes(solid(100, 100))


@pytest.fixture
def wide_png() -> bytes:
    """160x80 opaque blue PNG."""
    return png_bytes(solid(160, 80, (0, 0, 255, 255)))


@pytest.fixture
def assets_dir(tmp_path, square_png, wide_png):
    """Assets directory holding red.png and wide.png."""
    directory = tmp_path / "assets"
    directory.mkdir()
    (directory / "red.png").write_bytes(square_png)
    (directory / "wide.png").write_bytes(wide_png)
    (directory / "green.png").write_bytes(png_bytes(solid(100, 100, (0, 255, 0, 255))))
    return directory


@pytest.fixture
def settings(assets_dir) -> Settings:
    return Settings(ASSETS_DIR=assets_dir, ASSET_MODE="strict")


@pytest.fixture
def processor(settings) -> Processor:
    """Processor with the built-in transforms and the temporary assets."""
    return Processor(settings=settings)
