"""
Resolution of logical asset names to image files on disk.
"""

from __future__ import annotations

import os
from pathlib import Path

from .errors import AssetNotFoundError, ValidationError


class AssetResolver:
    """
    Maps asset names to absolute paths of existing regular files.

    Relative names are looked up below ``base_dir``; absolute paths are
    checked as they are. The resolver never creates directories.
    """

    def __init__(self, base_dir: str | os.PathLike | None = None):
        """
        :param base_dir: Directory holding the assets. Defaults to
            ``./assets`` below the current working directory.
        """
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd() / "assets"

    def candidate(self, name: str | os.PathLike) -> Path:
        """The path ``name`` maps to, without checking that it exists."""
        if isinstance(name, os.PathLike):
            name = os.fspath(name)
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Asset name must be a non-empty string")
        path = Path(name).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path.absolute()

    def resolve(self, name: str | os.PathLike) -> Path:
        """
        Resolve ``name`` to an absolute file path.

        :raises ValidationError: If the name is empty or not a string
        :raises AssetNotFoundError: If nothing exists at the path, or it is
            not a regular file
        """
        return check_file(self.candidate(name))

    def exists(self, name: str | os.PathLike) -> bool:
        """True if ``name`` resolves to a regular file."""
        try:
            self.resolve(name)
        except (AssetNotFoundError, ValidationError):
            return False
        return True


def check_file(path: str | os.PathLike) -> Path:
    """Return ``path`` as absolute :class:`Path` if it is an existing regular file."""
    path = Path(path).absolute()
    if not path.exists():
        raise AssetNotFoundError(path, "not found")
    if not path.is_file():
        raise AssetNotFoundError(path, "not a file")
    return path


def read_asset(path: str | os.PathLike) -> bytes:
    """Read a file's bytes, mapping missing files to :class:`AssetNotFoundError`."""
    path = check_file(path)
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError as e:
        raise AssetNotFoundError(path, "not found", cause=e) from e
    except IsADirectoryError as e:
        raise AssetNotFoundError(path, "not a file", cause=e) from e


__all__ = ["AssetResolver", "check_file", "read_asset"]
