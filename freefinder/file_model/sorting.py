"""Directory-first ordering with natural name comparison."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .types import FileEntry, SortCriteria, SortField

_DIGIT_RUN_RE = re.compile(r"(\d+)")


def natural_key(text: str) -> tuple[tuple[int, int, str], ...]:
    """Case-insensitive key comparing digit runs by numeric value.

    ``"file2"`` sorts before ``"file10"``; digit runs sort before letters.
    """
    parts: list[tuple[int, int, str]] = []
    for token in _DIGIT_RUN_RE.split(text):
        if not token:
            continue
        if token.isdigit():
            parts.append((0, int(token), token))
        else:
            parts.append((1, 0, token.casefold()))
    return tuple(parts)


def _field_key(entry: FileEntry, field: SortField) -> tuple:
    if field is SortField.NAME:
        return (natural_key(entry.name),)
    if field is SortField.DATE_MODIFIED:
        mtime = entry.mtime_ns if entry.mtime_ns is not None else -1
        return (mtime, natural_key(entry.name))
    if field is SortField.SIZE:
        return (entry.byte_size, natural_key(entry.name))
    return (natural_key(entry.kind), natural_key(entry.name))


def sort_entries(entries: Iterable[FileEntry], criteria: SortCriteria) -> list[FileEntry]:
    """Return entries with directories first, each group ordered by ``criteria``.

    Descending order reverses the field ordering within each group; the
    directory group always stays ahead of files.
    """
    directories: list[FileEntry] = []
    files: list[FileEntry] = []
    for entry in entries:
        (directories if entry.is_directory else files).append(entry)

    reverse = not criteria.ascending
    directories.sort(key=lambda item: _field_key(item, criteria.field), reverse=reverse)
    files.sort(key=lambda item: _field_key(item, criteria.field), reverse=reverse)
    return directories + files


__all__ = ["natural_key", "sort_entries"]
