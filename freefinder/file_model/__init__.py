"""Domain model for listed directory entries.

This package contains non-UI listing primitives:
- entry, display-row and sort-criteria datatypes
- directory-first natural ordering
- the local ``DirectoryContentsProvider`` built on ``os.scandir``
"""

from __future__ import annotations

from .types import DisplayEntry, FileEntry, SortCriteria, SortField
from .sorting import natural_key, sort_entries
from .fs import (
    DirectoryContentsProvider,
    LocalDirectoryProvider,
    default_trash_paths,
    is_trash_location,
    kind_label,
    list_directory,
)

__all__ = [
    "DisplayEntry",
    "FileEntry",
    "SortCriteria",
    "SortField",
    "natural_key",
    "sort_entries",
    "DirectoryContentsProvider",
    "LocalDirectoryProvider",
    "default_trash_paths",
    "is_trash_location",
    "kind_label",
    "list_directory",
]
