"""Tests for transform dispatch, input loading and error wrapping."""

import logging

import pytest

import stagfx
from stagfx.codec import decode, detect_format
from stagfx.config import Settings
from stagfx.errors import (
    AssetNotFoundError,
    DecodeError,
    InvalidHexError,
    InvalidOptionError,
    NotFoundError,
    ProcessingError,
    TransformError,
    TransformNotFoundError,
    ValidationError,
)
from stagfx.processor import Processor
from stagfx.raster import Animation, RasterImage
from stagfx.registry import TransformRegistry
from stagfx.transforms.requests import CircleRequest, GreyscaleRequest, InvertRequest

from conftest import png_bytes, solid


def failing_handler(images, request):
    raise RuntimeError('boom')


class TestDispatch:

    def test_unknown_transform(self, processor):
        with pytest.raises(TransformNotFoundError) as exc_info:
            processor.execute('sharpen', {'input': 'red.png'})
        assert isinstance(exc_info.value, NotFoundError)
        assert 'sharpen' in str(exc_info.value)
        assert 'greyscale' in exc_info.value.known

    def test_name_case_insensitive(self, processor, square_png):
        assert detect_format(processor.execute('GreyScale', {'input': square_png})) == 'png'

    def test_transforms_listing(self, processor):
        assert processor.transforms() == ['blink', 'blur', 'circle', 'color', 'greyscale', 'invert', 'sepia']
        assert processor.has_transform('Circle')
        assert not processor.has_transform('sharpen')

    def test_request_model(self, processor, square_png):
        data = processor.execute('circle', CircleRequest(input=square_png, border_width=4))
        result = decode(data)
        assert result.size == (108, 108)
        assert result.get_pixel(1, 54) == (0, 0, 0, 255)

    def test_wrong_request_model(self, processor, square_png):
        with pytest.raises(InvalidOptionError) as exc_info:
            processor.execute('greyscale', InvertRequest(input=square_png))
        assert exc_info.value.option == 'transform'

    def test_params_must_be_mapping(self, processor):
        with pytest.raises(ValidationError):
            processor.execute('greyscale', 42)

    def test_transform_key_ignored(self, processor, square_png):
        data = processor.execute('greyscale', {'transform': 'color', 'input': square_png})
        assert decode(data).get_pixel(0, 0) == (54, 54, 54, 255)


class TestErrors:

    def test_validation_propagates_unchanged(self, processor, square_png):
        with pytest.raises(InvalidHexError) as exc_info:
            processor.execute('color', {'input': square_png, 'color': 'nope'})
        assert not isinstance(exc_info.value, ProcessingError)

    def test_validation_before_loading(self, processor):
        """A bad option is reported even though the asset does not exist."""
        with pytest.raises(InvalidHexError):
            processor.execute('color', {'input': 'missing.png', 'color': 'nope'})

    def test_unexpected_errors_are_wrapped(self, settings):
        registry = TransformRegistry()
        registry.register('explode', failing_handler)
        processor = Processor(registry=registry.freeze(), settings=settings)

        with pytest.raises(ProcessingError) as exc_info:
            processor.execute('explode', {})
        error = exc_info.value
        assert error.code == 'PROCESSING_ERROR'
        assert error.transform == 'explode'
        assert 'explode' in str(error)
        assert 'boom' in str(error)
        assert isinstance(error.cause, RuntimeError)
        assert error.__cause__ is error.cause
        assert error.root_cause is error.cause

    def test_failure_logged(self, settings, caplog):
        registry = TransformRegistry()
        registry.register('explode', failing_handler)
        processor = Processor(registry=registry, settings=settings)
        with caplog.at_level(logging.WARNING, logger='stagfx.processor'):
            with pytest.raises(ProcessingError):
                processor.execute('explode', {})
        assert 'boom' in caplog.text

    def test_transform_errors_not_wrapped(self, settings):
        def handler(images, request):
            raise InvalidOptionError('size', 'too big')

        registry = TransformRegistry()
        registry.register('picky', handler)
        processor = Processor(registry=registry, settings=settings)
        with pytest.raises(InvalidOptionError):
            processor.execute('picky', {})

    def test_decode_error(self, processor):
        with pytest.raises(DecodeError):
            processor.execute('greyscale', {'input': b'not an image, just some bytes'})

    def test_unsupported_output(self, settings):
        registry = TransformRegistry()
        registry.register('weird', lambda images, request: 42)
        processor = Processor(registry=registry, settings=settings)
        with pytest.raises(ProcessingError) as exc_info:
            processor.execute('weird', {})
        assert isinstance(exc_info.value.root_cause, TypeError)

    def test_all_errors_share_base(self, processor):
        with pytest.raises(TransformError):
            processor.execute('sharpen', {})


class TestInputs:

    def test_raster_input_not_modified(self, processor):
        image = RasterImage.new(10, 10, (255, 0, 0, 255))
        processor.execute('invert', {'input': image})
        assert image.get_pixel(0, 0) == (255, 0, 0, 255)

    def test_absolute_path(self, processor, assets_dir):
        data = processor.execute('greyscale', {'input': str(assets_dir / 'red.png')})
        assert decode(data).size == (100, 100)

    def test_path_object(self, processor, assets_dir):
        assert decode(processor.execute('greyscale', {'input': assets_dir / 'wide.png'})).size == (160, 80)

    def test_strict_missing_asset(self, processor):
        with pytest.raises(AssetNotFoundError) as exc_info:
            processor.execute('greyscale', {'input': 'missing.png'})
        assert exc_info.value.code == 'ASSET_NOT_FOUND'
        assert 'missing.png' in str(exc_info.value)

    def test_directory_is_not_an_asset(self, processor, assets_dir):
        (assets_dir / 'folder').mkdir()
        with pytest.raises(AssetNotFoundError, match='not a file'):
            processor.execute('greyscale', {'input': 'folder'})

    def test_warn_falls_back_to_literal_path(self, assets_dir, tmp_path, monkeypatch, caplog):
        work = tmp_path / 'work'
        work.mkdir()
        (work / 'local.png').write_bytes(png_bytes(solid(7, 5)))
        monkeypatch.chdir(work)

        processor = Processor(settings=Settings(ASSETS_DIR=assets_dir, ASSET_MODE='warn'))
        with caplog.at_level(logging.WARNING, logger='stagfx.processor'):
            data = processor.execute('greyscale', {'input': 'local.png'})
        assert decode(data).size == (7, 5)
        assert 'local.png' in caplog.text

    def test_silent_falls_back_without_logging(self, assets_dir, tmp_path, monkeypatch, caplog):
        work = tmp_path / 'work'
        work.mkdir()
        (work / 'local.png').write_bytes(png_bytes(solid(7, 5)))
        monkeypatch.chdir(work)

        processor = Processor(settings=Settings(ASSETS_DIR=assets_dir, ASSET_MODE='silent'))
        with caplog.at_level(logging.WARNING, logger='stagfx.processor'):
            data = processor.execute('greyscale', {'input': 'local.png'})
        assert decode(data).size == (7, 5)
        assert 'local.png' not in caplog.text

    def test_warn_still_fails_if_nothing_exists(self, assets_dir, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        processor = Processor(settings=Settings(ASSETS_DIR=assets_dir, ASSET_MODE='warn'))
        with pytest.raises(AssetNotFoundError):
            processor.execute('greyscale', {'input': 'nowhere.png'})

    def test_unsupported_reference_type(self, processor):
        with pytest.raises(InvalidOptionError):
            processor.execute('greyscale', {'input': 3.14})
        with pytest.raises(TypeError):
            processor.load_image(3.14)


class TestOutput:

    def test_output_format_setting(self, assets_dir, square_png):
        processor = Processor(settings=Settings(ASSETS_DIR=assets_dir, OUTPUT_FORMAT='jpeg'))
        assert detect_format(processor.execute('greyscale', {'input': square_png})) == 'jpeg'

    def test_animation_always_gif(self, assets_dir):
        processor = Processor(settings=Settings(ASSETS_DIR=assets_dir, OUTPUT_FORMAT='jpeg'))
        data = processor.execute('blink', {'inputs': ['red.png', 'green.png']})
        assert detect_format(data) == 'gif'

    def test_blink_defaults_from_settings(self, assets_dir):
        processor = Processor(settings=Settings(
            ASSETS_DIR=assets_dir, DEFAULT_BLINK_DELAY=300, DEFAULT_BLINK_LOOP=False,
        ))
        request = processor._apply_defaults(
            stagfx.BlinkRequest(inputs=['red.png', 'green.png'])
        )
        assert request.delay == 300
        assert request.loop is False

    def test_explicit_blink_options_win(self, assets_dir):
        processor = Processor(settings=Settings(ASSETS_DIR=assets_dir, DEFAULT_BLINK_DELAY=300))
        request = processor._apply_defaults(
            stagfx.BlinkRequest(inputs=['red.png', 'green.png'], delay=50)
        )
        assert request.delay == 50

    def test_border_color_default_from_settings(self, assets_dir, square_png):
        processor = Processor(settings=Settings(ASSETS_DIR=assets_dir, DEFAULT_BORDER_COLOR='#ff00ff'))
        result = decode(processor.execute('circle', {'input': square_png, 'border_width': 6}))
        assert result.get_pixel(1, 56) == (255, 0, 255, 255)

    def test_encode_output(self, processor):
        frames = [solid(4, 4, (255, 0, 0, 255)), solid(4, 4, (0, 0, 255, 255))]
        assert detect_format(processor.encode_output(Animation(frames))) == 'gif'
        assert processor.encode_output(b'raw') == b'raw'
        with pytest.raises(TypeError):
            processor.encode_output('nope')


class TestPublicApi:

    def test_module_shortcuts(self, square_png):
        assert decode(stagfx.greyscale(square_png)).get_pixel(0, 0) == (54, 54, 54, 255)
        assert decode(stagfx.circle(square_png, border_width=5)).size == (110, 110)
        assert decode(stagfx.invert(square_png)).get_pixel(0, 0) == (0, 255, 255, 255)
        wash = stagfx.color(square_png, '#0000ff', mode='wash', opacity=1.0)
        assert decode(wash).get_pixel(0, 0) == (0, 0, 255, 255)

    def test_transform_alias(self, square_png):
        assert stagfx.transform('greyscale', {'input': square_png}) == stagfx.execute('greyscale', {'input': square_png})

    def test_blink_shortcut(self, square_png):
        data = stagfx.blink([square_png, png_bytes(solid(100, 100, (0, 0, 255, 255)))], delay=90, loop=False)
        assert detect_format(data) == 'gif'

    def test_request_model_direct(self, square_png):
        data = stagfx.execute('greyscale', GreyscaleRequest(input=square_png))
        assert decode(data).size == (100, 100)
