"""
Transform registry.

Maps case-insensitive transform names to a handler and an optional
validator. A name can be registered exactly once; registering it again is an
error rather than an overwrite, so one module can never silently mask
another's transform.

Writes are serialized by a lock and published copy-on-write: readers always
see a complete snapshot of the name -> entry mapping and never need to lock.
After :meth:`TransformRegistry.freeze` the registry is immutable.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping

from .errors import RegistrationError, TransformNotFoundError
from .transforms.base import Handler
from .transforms.validation import Validator

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Registry key for ``name``: stripped and lower-cased."""
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Transform name must be a non-empty string, got {name!r}")
    return name.strip().lower()


@dataclass(frozen=True)
class TransformEntry:
    """A registered transform."""
    name: str
    handler: Handler
    validator: Validator | None = None


class TransformRegistry:
    """Registry of named transforms.

    Example:
        registry = TransformRegistry()
        registry.register('greyscale', greyscale, validate_greyscale)
        registry.freeze()
    """

    def __init__(self):
        self._entries: Mapping[str, TransformEntry] = MappingProxyType({})
        self._lock = threading.Lock()
        self._frozen = False

    def register(self, name: str, handler: Handler, validator: Validator | None = None) -> TransformEntry:
        """Register ``handler`` (and ``validator``) under ``name``.

        :raises RegistrationError: If the name is taken or the registry is frozen
        """
        if not callable(handler):
            raise TypeError(f"Handler for '{name}' is not callable")
        if validator is not None and not callable(validator):
            raise TypeError(f"Validator for '{name}' is not callable")
        key = normalize_name(name)

        with self._lock:
            if self._frozen:
                raise RegistrationError(
                    f"Cannot register '{key}': registry is frozen", code="REGISTRY_FROZEN"
                )
            if key in self._entries:
                raise RegistrationError(f"Plugin '{key}' is already registered")
            entry = TransformEntry(key, handler, validator)
            entries = dict(self._entries)
            entries[key] = entry
            self._entries = MappingProxyType(entries)

        logger.debug(f"Registered transform '{key}'")
        return entry

    def freeze(self) -> TransformRegistry:
        """Disallow further registrations. Returns self for chaining."""
        with self._lock:
            self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> TransformEntry | None:
        """The entry for ``name``, or None."""
        try:
            key = normalize_name(name)
        except ValueError:
            return None
        return self._entries.get(key)

    def lookup(self, name: str) -> TransformEntry:
        """The entry for ``name``.

        :raises TransformNotFoundError: If nothing is registered under it
        """
        entries = self._entries
        try:
            key = normalize_name(name)
        except ValueError:
            raise TransformNotFoundError(str(name), entries.keys()) from None
        entry = entries.get(key)
        if entry is None:
            raise TransformNotFoundError(name, entries.keys())
        return entry

    def names(self) -> list[str]:
        """Sorted names of all registered transforms."""
        return sorted(self._entries)

    def snapshot(self) -> Mapping[str, TransformEntry]:
        """Read-only view of the current entries."""
        return self._entries

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"TransformRegistry({', '.join(self.names())}; {state})"


def create_default_registry(freeze: bool = True) -> TransformRegistry:
    """Registry holding every built-in transform.

    :param freeze: Freeze the registry before returning it. Pass False to add
        custom transforms first, then call :meth:`TransformRegistry.freeze`.
    """
    from .transforms import BUILTIN_TRANSFORMS

    registry = TransformRegistry()
    for name, (handler, validator) in BUILTIN_TRANSFORMS.items():
        registry.register(name, handler, validator)
    if freeze:
        registry.freeze()
    return registry


__all__ = ['normalize_name', 'TransformEntry', 'TransformRegistry', 'create_default_registry']
