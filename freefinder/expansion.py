"""Inline expansion state: which folders are open and their cached children."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .file_model import DisplayEntry, FileEntry
from .location import FilesystemLocation, Location, NetworkHostLocation, NetworkShareLocation


def _is_descendant(candidate: Location, ancestor: Location) -> bool:
    """Return whether ``candidate`` sits strictly below ``ancestor`` in the tree."""
    if isinstance(candidate, FilesystemLocation) and isinstance(ancestor, FilesystemLocation):
        return candidate != ancestor and candidate.is_within(ancestor)
    if isinstance(candidate, NetworkShareLocation) and isinstance(ancestor, NetworkHostLocation):
        return candidate.hostname == ancestor.hostname
    return False


class ExpansionCache:
    """Expanded-location set plus per-location child listings.

    ``children[L]`` only exists while ``L`` is expanded. Children are stored
    after expansion is requested, never before.
    """

    def __init__(self) -> None:
        self.expanded: set[Location] = set()
        self.children: dict[Location, list[FileEntry]] = {}

    def is_expanded(self, location: Location) -> bool:
        return location in self.expanded

    def is_loaded(self, location: Location) -> bool:
        return location in self.children

    def expand(self, location: Location) -> bool:
        """Mark ``location`` expanded; return ``False`` if it already was."""
        if location in self.expanded:
            return False
        self.expanded.add(location)
        return True

    def collapse(self, location: Location) -> set[Location]:
        """Collapse ``location`` and every expanded descendant.

        Returns the locations that stopped being expanded.
        """
        if location not in self.expanded:
            return set()
        removed = {location}
        removed.update(item for item in self.expanded if _is_descendant(item, location))
        for item in removed:
            self.expanded.discard(item)
            self.children.pop(item, None)
        return removed

    def set_children(self, location: Location, entries: Iterable[FileEntry]) -> bool:
        """Store children for an expanded location; ignored once collapsed."""
        if location not in self.expanded:
            return False
        self.children[location] = list(entries)
        return True

    def clear(self) -> set[Location]:
        """Drop all expansion state; return what was expanded."""
        removed = set(self.expanded)
        self.expanded.clear()
        self.children.clear()
        return removed

    def flatten(
        self,
        top_level: Iterable[FileEntry],
        matches: Callable[[str], bool] | None = None,
    ) -> list[DisplayEntry]:
        """Depth-first rows for ``top_level`` and every expanded subtree.

        ``matches`` filters names independently at each depth; a folder that
        does not match hides its subtree with it.
        """
        rows: list[DisplayEntry] = []

        def walk(entries: Iterable[FileEntry], depth: int, ancestry: frozenset[Location]) -> None:
            for entry in entries:
                if matches is not None and not matches(entry.name):
                    continue
                rows.append(DisplayEntry(entry, depth))
                location = entry.location
                if location in self.expanded and location not in ancestry:
                    walk(self.children.get(location, ()), depth + 1, ancestry | {location})

        walk(top_level, 0, frozenset())
        return rows


__all__ = ["ExpansionCache"]
