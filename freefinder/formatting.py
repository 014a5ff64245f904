"""Plain-text column labels for listing rows."""

from __future__ import annotations

from datetime import datetime

from .file_model import DisplayEntry, FileEntry

PLACEHOLDER = "--"
_SIZE_UNITS = ("KB", "MB", "GB", "TB")


def format_size(entry: FileEntry) -> str:
    """Finder-style decimal size; folders have no size."""
    if entry.is_directory or entry.is_package:
        return PLACEHOLDER
    size = entry.byte_size
    if size == 0:
        return "Zero bytes"
    if size < 1000:
        return f"{size} bytes"
    value = float(size)
    for unit in _SIZE_UNITS:
        value /= 1000.0
        if value < 1000.0 or unit == _SIZE_UNITS[-1]:
            return f"{value:.1f} {unit}" if value < 10 else f"{value:.0f} {unit}"
    return PLACEHOLDER


def format_modified(entry: FileEntry) -> str:
    if entry.mtime_ns is None:
        return PLACEHOLDER
    return datetime.fromtimestamp(entry.mtime_ns / 1_000_000_000).strftime("%Y-%m-%d %H:%M")


def format_row(row: DisplayEntry, expanded: bool = False, name_width: int = 40) -> str:
    """One text row: indented name with a disclosure marker, then size, date and kind."""
    entry = row.entry
    marker = ("▾ " if expanded else "▸ ") if entry.is_directory else "  "
    name = f"{'  ' * row.depth}{marker}{entry.name}"
    return f"{name:<{name_width}} {format_size(entry):>10}  {format_modified(entry):<16}  {entry.kind}"


__all__ = [
    "PLACEHOLDER",
    "format_size",
    "format_modified",
    "format_row",
]
