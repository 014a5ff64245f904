"""Local directory listing: the default ``DirectoryContentsProvider``."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from pygments.lexers import find_lexer_class_for_filename
from pygments.util import ClassNotFound

from ..errors import FinderError, translate_os_error
from ..location import FilesystemLocation, Location
from .sorting import sort_entries
from .types import FileEntry, SortCriteria

PACKAGE_SUFFIXES = frozenset(
    {
        ".app",
        ".bundle",
        ".framework",
        ".kext",
        ".pkg",
        ".plugin",
        ".photoslibrary",
        ".xcodeproj",
        ".xcworkspace",
    }
)


class DirectoryContentsProvider(Protocol):
    """Lists one location. Raises ``FinderError`` when it cannot."""

    def list_contents(
        self,
        location: Location,
        show_hidden: bool,
        sort: SortCriteria,
    ) -> list[FileEntry]: ...


def is_package_name(name: str) -> bool:
    return Path(name).suffix.lower() in PACKAGE_SUFFIXES


@lru_cache(maxsize=512)
def _kind_for_suffix(name: str) -> str:
    try:
        lexer_cls = find_lexer_class_for_filename(name)
    except ClassNotFound:
        lexer_cls = None
    if lexer_cls is not None:
        if lexer_cls.name == "Text only":
            return "Plain Text"
        return f"{lexer_cls.name} source"
    suffix = Path(name).suffix
    if suffix:
        return f"{suffix[1:].upper()} File"
    return "Document"


def kind_label(name: str, is_directory: bool, is_package: bool) -> str:
    """Human-readable kind shown in the kind column and used for kind sorting."""
    if is_package:
        return "Package"
    if is_directory:
        return "Folder"
    suffix = Path(name).suffix.lower()
    # Cache by suffix, not by full name, so large directories stay cheap.
    return _kind_for_suffix(f"x{suffix}" if suffix else name)


def icon_name(is_directory: bool, is_package: bool, is_symlink: bool) -> str:
    if is_package:
        return "package"
    if is_directory:
        return "folder-symlink" if is_symlink else "folder"
    return "document-symlink" if is_symlink else "document"


def entry_for_dir_entry(child: os.DirEntry) -> FileEntry:
    """Build a ``FileEntry`` from one ``os.scandir`` record."""
    name = child.name
    try:
        is_dir = child.is_dir(follow_symlinks=True)
    except OSError:
        is_dir = False
    try:
        is_symlink = child.is_symlink()
    except OSError:
        is_symlink = False

    byte_size = 0
    mtime_ns: int | None = None
    try:
        stat = child.stat(follow_symlinks=True)
    except OSError:
        try:
            stat = child.stat(follow_symlinks=False)
        except OSError:
            stat = None
    if stat is not None:
        mtime_ns = int(stat.st_mtime_ns)
        if not is_dir:
            byte_size = int(stat.st_size)

    is_package = is_dir and is_package_name(name)
    is_directory = is_dir and not is_package
    return FileEntry(
        location=FilesystemLocation(Path(child.path)),
        name=name,
        is_directory=is_directory,
        is_package=is_package,
        is_hidden=name.startswith("."),
        byte_size=byte_size,
        mtime_ns=mtime_ns,
        kind=kind_label(name, is_directory, is_package),
        icon=icon_name(is_directory, is_package, is_symlink),
    )


def list_directory(directory: Path, show_hidden: bool) -> list[FileEntry]:
    """Return unsorted entries of ``directory``; raise ``FinderError`` on failure."""
    entries: list[FileEntry] = []
    try:
        with os.scandir(directory) as children:
            for child in children:
                if not show_hidden and child.name.startswith("."):
                    continue
                entries.append(entry_for_dir_entry(child))
    except NotADirectoryError as exc:
        raise FinderError(f"Not a folder: {directory}", directory) from exc
    except OSError as exc:
        raise translate_os_error(exc, directory) from exc
    return entries


class LocalDirectoryProvider:
    """``DirectoryContentsProvider`` backed by ``os.scandir``."""

    def list_contents(
        self,
        location: Location,
        show_hidden: bool,
        sort: SortCriteria,
    ) -> list[FileEntry]:
        if not isinstance(location, FilesystemLocation):
            raise FinderError(f"{location.name} is not a filesystem location")
        return sort_entries(list_directory(location.path, show_hidden), sort)


def default_trash_paths() -> tuple[Path, ...]:
    """Trash directories of the current user on macOS and freedesktop systems."""
    home = Path.home()
    data_home = Path(os.environ.get("XDG_DATA_HOME") or home / ".local" / "share")
    return (
        home / ".Trash",
        data_home / "Trash",
        data_home / "Trash" / "files",
    )


def is_trash_location(location: Location, trash_paths: tuple[Path, ...]) -> bool:
    if not isinstance(location, FilesystemLocation):
        return False
    return any(location.path == FilesystemLocation.of(path).path for path in trash_paths)


__all__ = [
    "PACKAGE_SUFFIXES",
    "DirectoryContentsProvider",
    "LocalDirectoryProvider",
    "is_package_name",
    "kind_label",
    "icon_name",
    "entry_for_dir_entry",
    "list_directory",
    "default_trash_paths",
    "is_trash_location",
]
