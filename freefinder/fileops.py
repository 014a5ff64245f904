"""Filesystem mutation primitives used by clipboard, move and delete flows.

Each primitive acts on one item and raises a ``FinderError`` kind on failure.
Nothing here is transactional across items; callers collect per-item errors.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from send2trash import send2trash
from send2trash.exceptions import TrashPermissionError

from .errors import ConflictError, FinderError, InvalidNameError, PermissionDeniedError, translate_os_error

logger = logging.getLogger(__name__)


def validate_item_name(name: str) -> str:
    """Return ``name`` stripped, or raise ``InvalidNameError``."""
    stripped = name.strip()
    if not stripped or stripped in {".", ".."}:
        raise InvalidNameError("A name is required")
    if "/" in stripped or os.sep in stripped or "\0" in stripped:
        raise InvalidNameError(f"{stripped!r} is not a valid name")
    return stripped


class FileOperations:
    """Single-item move/copy/delete/trash/create primitives."""

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def move(self, source: Path, destination: Path) -> None:
        try:
            shutil.move(os.fspath(source), os.fspath(destination))
        except shutil.Error as exc:
            raise FinderError(str(exc), source) from exc
        except OSError as exc:
            raise translate_os_error(exc, source) from exc

    def copy(self, source: Path, destination: Path) -> None:
        try:
            if source.is_dir() and not source.is_symlink():
                shutil.copytree(source, destination, symlinks=True)
            else:
                shutil.copy2(source, destination, follow_symlinks=False)
        except shutil.Error as exc:
            raise FinderError(str(exc), source) from exc
        except OSError as exc:
            raise translate_os_error(exc, source) from exc

    def delete(self, path: Path) -> None:
        """Remove ``path`` permanently, recursing into folders."""
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            raise translate_os_error(exc, path) from exc

    def trash(self, path: Path) -> None:
        try:
            send2trash(os.fspath(path))
        except TrashPermissionError as exc:
            raise PermissionDeniedError(f"Cannot move {path.name} to the Trash", path) from exc
        except OSError as exc:
            raise translate_os_error(exc, path) from exc
        logger.debug("moved %s to the trash", path)

    def create_directory(self, path: Path) -> None:
        try:
            path.mkdir()
        except OSError as exc:
            raise translate_os_error(exc, path) from exc

    def create_file(self, path: Path) -> None:
        try:
            with open(path, "x", encoding="utf-8"):
                pass
        except OSError as exc:
            raise translate_os_error(exc, path) from exc

    def rename(self, source: Path, new_name: str) -> Path:
        """Rename ``source`` within its folder and return the new path."""
        destination = source.with_name(validate_item_name(new_name))
        if destination == source:
            return source
        # Case-only renames report the source itself as existing.
        if self.exists(destination) and not _same_file(source, destination):
            raise ConflictError(f"An item named {destination.name!r} already exists", destination)
        try:
            source.rename(destination)
        except OSError as exc:
            raise translate_os_error(exc, source) from exc
        return destination


def _same_file(first: Path, second: Path) -> bool:
    try:
        return os.path.samefile(first, second)
    except OSError:
        return False


__all__ = ["FileOperations", "validate_item_name"]
