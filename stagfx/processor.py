"""
Transform execution.

:class:`Processor` is the single entry point that runs a named transform:

1. look up the name in the registry (unknown -> :class:`TransformNotFoundError`)
2. run the validator, if any, before touching pixel data; its errors
   propagate unchanged
3. resolve and decode the input images
4. run the handler and encode its output
5. wrap any unexpected exception of steps 3-4 in a :class:`ProcessingError`
   that keeps the original as its cause

Each call decodes its own images, so concurrent calls share nothing but the
registry, which is only read.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterable

from . import codec
from .assets import AssetResolver, check_file, read_asset
from .config import Settings, settings as default_settings
from .errors import AssetNotFoundError, ProcessingError, TransformError
from .raster import Animation, RasterImage
from .registry import TransformRegistry, create_default_registry
from .transforms.requests import BlinkRequest, CircleRequest, TransformRequest

logger = logging.getLogger(__name__)


class Processor:
    """Runs registered transforms.

    :param registry: Transforms to dispatch to. Defaults to a frozen registry
        of all built-in transforms.
    :param resolver: Resolves asset names. Defaults to one rooted at
        ``settings.ASSETS_DIR``.
    :param settings: Configuration; the module-level settings by default.
    """

    def __init__(
        self,
        registry: TransformRegistry | None = None,
        resolver: AssetResolver | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings if settings is not None else default_settings
        self.registry = registry if registry is not None else create_default_registry()
        self.resolver = resolver if resolver is not None else AssetResolver(self.settings.ASSETS_DIR)

    # ---- introspection ----

    def has_transform(self, name: str) -> bool:
        return name in self.registry

    def transforms(self) -> list[str]:
        """Names of all transforms this processor can run."""
        return self.registry.names()

    # ---- execution ----

    def execute(self, name: str, params: Any) -> bytes:
        """
        Run transform ``name`` with ``params`` and return the encoded result.

        :param name: Transform name, case-insensitive
        :param params: A request model or a mapping of its fields
        :return: PNG (or ``settings.OUTPUT_FORMAT``) bytes for still images,
            GIF bytes for animations
        :raises TransformNotFoundError: Unknown transform
        :raises ValidationError: Rejected parameters
        :raises NotFoundError: Missing input asset
        :raises DecodeError: Input is not a supported image
        :raises ProcessingError: Any other failure, with the original as cause
        """
        entry = self.registry.lookup(name)
        request = entry.validator(params) if entry.validator is not None else params
        request = self._apply_defaults(request)

        start = time.perf_counter()
        try:
            images = self.load_inputs(request)
            output = entry.handler(images, request)
            data = self.encode_output(output)
        except TransformError:
            raise
        except Exception as e:
            logger.warning(f"Transform '{entry.name}' failed: {e}")
            raise ProcessingError(
                f"Failed to process {entry.name} transform: {e}",
                cause=e,
                transform=entry.name,
            ) from e

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug(
            f"Transform '{entry.name}' done: {len(images)} input(s), "
            f"{len(data)} bytes, {elapsed_ms:.1f} ms"
        )
        return data

    def execute_many(self, jobs: Iterable[tuple[str, Any]], max_workers: int | None = None) -> list[bytes]:
        """
        Run independent ``(name, params)`` jobs on a thread pool.

        Results are returned in job order. The first failing job's error is
        raised once all jobs have finished.
        """
        jobs = list(jobs)
        if not jobs:
            return []
        max_workers = max_workers or min(len(jobs), os.cpu_count() or 1)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(self.execute, name, params) for name, params in jobs]
        return [future.result() for future in futures]

    # ---- helpers ----

    def _apply_defaults(self, request: Any) -> Any:
        """Fill options the caller left out from the configuration."""
        if isinstance(request, BlinkRequest):
            update = {}
            if 'delay' not in request.model_fields_set:
                update['delay'] = self.settings.DEFAULT_BLINK_DELAY
            if 'loop' not in request.model_fields_set:
                update['loop'] = self.settings.DEFAULT_BLINK_LOOP
            return request.model_copy(update=update) if update else request
        if isinstance(request, CircleRequest) and request.border_color is None:
            return request.model_copy(update={'border_color': self.settings.DEFAULT_BORDER_COLOR})
        return request

    def resolve_path(self, reference: str | os.PathLike) -> Path:
        """
        Resolve an asset name according to ``settings.ASSET_MODE``.

        strict: unresolved assets raise :class:`AssetNotFoundError`.
        warn: log a warning and fall back to the literal path.
        silent: fall back to the literal path without logging.
        """
        try:
            return self.resolver.resolve(reference)
        except AssetNotFoundError:
            mode = self.settings.ASSET_MODE
            if mode == "strict":
                raise
            if mode == "warn":
                logger.warning(f"Asset not found: {reference}")
            return check_file(reference)

    def load_image(self, reference: Any) -> RasterImage:
        """Decode one image reference into a private :class:`RasterImage`."""
        max_pixels = self.settings.MAX_IMAGE_PIXELS
        if isinstance(reference, RasterImage):
            return reference.copy()
        if isinstance(reference, (bytes, bytearray, memoryview)):
            return codec.decode(bytes(reference), max_pixels=max_pixels)
        if isinstance(reference, (str, os.PathLike)):
            path = self.resolve_path(reference)
            return codec.decode(read_asset(path), max_pixels=max_pixels)
        raise TypeError(f"Unsupported image reference type: {type(reference).__name__}")

    def load_inputs(self, request: Any) -> list[RasterImage]:
        """Decode all images referenced by ``request``, in order."""
        if isinstance(request, TransformRequest):
            references = request.image_references()
        elif hasattr(request, 'image_references'):
            references = list(request.image_references())
        else:
            references = []
        return [self.load_image(reference) for reference in references]

    def encode_output(self, output: Any) -> bytes:
        """Encode a handler result."""
        if isinstance(output, Animation):
            return codec.encode_animation(output)
        if isinstance(output, RasterImage):
            return codec.encode(output, self.settings.OUTPUT_FORMAT)
        if isinstance(output, (bytes, bytearray)):
            return bytes(output)
        raise TypeError(f"Handler returned unsupported type {type(output).__name__}")


_default_processor: Processor | None = None
_default_lock = threading.Lock()


def get_default_processor() -> Processor:
    """The shared processor with the built-in transforms, created on first use."""
    global _default_processor
    if _default_processor is None:
        with _default_lock:
            if _default_processor is None:
                _default_processor = Processor()
    return _default_processor


def execute(name: str, params: Any) -> bytes:
    """Run ``name`` on the default processor. See :meth:`Processor.execute`."""
    return get_default_processor().execute(name, params)


__all__ = ['Processor', 'get_default_processor', 'execute']
