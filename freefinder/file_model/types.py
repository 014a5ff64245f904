"""Domain datatypes for listed directory entries."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..location import Location


@dataclass(frozen=True, eq=False)
class FileEntry:
    """One listed item. Identity is its location; metadata is a snapshot."""

    location: Location
    name: str
    is_directory: bool
    is_package: bool = False
    is_hidden: bool = False
    byte_size: int = 0
    mtime_ns: int | None = None
    kind: str = "Document"
    icon: str = "document"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileEntry):
            return NotImplemented
        return self.location == other.location

    def __hash__(self) -> int:
        return hash(self.location)


@dataclass(frozen=True)
class DisplayEntry:
    """One flattened row of the expansion tree."""

    entry: FileEntry
    depth: int


class SortField(enum.Enum):
    NAME = "name"
    DATE_MODIFIED = "date_modified"
    SIZE = "size"
    KIND = "kind"

    @classmethod
    def parse(cls, value: str) -> SortField | None:
        lowered = value.strip().lower().replace("-", "_")
        for field in cls:
            if field.value == lowered:
                return field
        return None


@dataclass(frozen=True)
class SortCriteria:
    field: SortField = SortField.NAME
    ascending: bool = True

    def toggled(self, field: SortField) -> SortCriteria:
        """Same field flips direction; a different field starts ascending."""
        if field == self.field:
            return SortCriteria(field, not self.ascending)
        return SortCriteria(field, True)


__all__ = [
    "FileEntry",
    "DisplayEntry",
    "SortField",
    "SortCriteria",
]
