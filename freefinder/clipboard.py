"""Copy/cut clipboard, transfer planning and conflict detection.

A transfer is planned (destination names checked) before anything is
mutated. A plan with conflicts is parked as a ``PendingConflict`` until the
user confirms an overwrite or cancels; a plan without conflicts executes item
by item, collecting per-item errors instead of stopping.
"""

from __future__ import annotations

import enum
import itertools
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import ConflictError, FinderError
from .fileops import FileOperations
from .location import FilesystemLocation, Location

MAX_CLIPBOARD_HISTORY = 50

_ENTRY_IDS = itertools.count(1)


class Pasteboard(Protocol):
    def publish(self, locations: Iterable[Location]) -> bool: ...


class TransferMode(enum.Enum):
    COPY = "copy"
    MOVE = "move"


@dataclass(frozen=True)
class ClipboardEntry:
    sources: frozenset[FilesystemLocation]
    is_cut: bool
    timestamp: float
    entry_id: int = 0


@dataclass(frozen=True)
class TransferItem:
    source: Path
    destination: Path


@dataclass(frozen=True)
class TransferPlan:
    mode: TransferMode
    destination: FilesystemLocation
    items: tuple[TransferItem, ...]
    conflicts: tuple[str, ...] = ()


@dataclass(frozen=True)
class TransferOutcome:
    plan: TransferPlan
    succeeded: tuple[TransferItem, ...]
    errors: tuple[FinderError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class PendingConflict:
    """Colliding names (sorted) blocking ``plan`` until overwrite or cancel."""

    names: tuple[str, ...]
    plan: TransferPlan
    clipboard_entry: ClipboardEntry | None = None


@dataclass(frozen=True)
class PendingMove:
    sources: tuple[FilesystemLocation, ...]
    destination: FilesystemLocation


def plan_transfer(
    sources: Iterable[FilesystemLocation],
    destination: FilesystemLocation,
    mode: TransferMode,
    exists: Callable[[Path], bool],
) -> TransferPlan:
    """Map each source to ``destination/<name>`` and collect colliding names.

    A name collides when the target already exists or when two sources share
    the same name.
    """
    items: list[TransferItem] = []
    conflicts: set[str] = set()
    claimed: set[str] = set()
    for source in sorted(sources, key=lambda item: str(item.path)):
        name = source.path.name
        target = destination.path / name
        if name in claimed or exists(target):
            conflicts.add(name)
        claimed.add(name)
        items.append(TransferItem(source.path, target))
    return TransferPlan(mode, destination, tuple(items), tuple(sorted(conflicts)))


def execute_transfer(plan: TransferPlan, ops: FileOperations, overwrite: bool = False) -> TransferOutcome:
    """Run every item of ``plan``; failures are collected, not raised.

    Items whose source already is the destination are skipped. With
    ``overwrite`` an existing destination is removed before the transfer,
    except when it was written earlier in this run or contains the source;
    such items fail with a ``ConflictError`` and nothing is removed.
    """
    succeeded: list[TransferItem] = []
    errors: list[FinderError] = []
    written: set[Path] = set()
    for item in plan.items:
        if item.source == item.destination:
            continue
        if item.destination in written:
            errors.append(ConflictError(f"An item named {item.destination.name!r} was already placed here", item.source))
            continue
        if item.source.is_relative_to(item.destination):
            errors.append(
                ConflictError(f"{item.destination.name!r} cannot be replaced by an item inside it", item.source)
            )
            continue
        written.add(item.destination)
        try:
            if overwrite and ops.exists(item.destination):
                ops.delete(item.destination)
            if plan.mode is TransferMode.MOVE:
                ops.move(item.source, item.destination)
            else:
                ops.copy(item.source, item.destination)
        except FinderError as exc:
            errors.append(exc)
            continue
        succeeded.append(item)
    return TransferOutcome(plan, tuple(succeeded), tuple(errors))


def filter_move_sources(
    sources: Iterable[Location],
    destination: FilesystemLocation,
) -> tuple[FilesystemLocation, ...]:
    """Drop sources already inside ``destination`` and the destination itself."""
    kept: list[FilesystemLocation] = []
    for source in sources:
        if not isinstance(source, FilesystemLocation):
            continue
        if source == destination or source.parent() == destination:
            continue
        if source not in kept:
            kept.append(source)
    return tuple(kept)


class ClipboardCoordinator:
    """Holds the single active clipboard entry plus a short history."""

    def __init__(self, pasteboard: Pasteboard | None = None, max_history: int = MAX_CLIPBOARD_HISTORY) -> None:
        self._pasteboard = pasteboard
        self.max_history = max(1, max_history)
        self.current: ClipboardEntry | None = None
        self.history: list[ClipboardEntry] = []

    @property
    def is_empty(self) -> bool:
        return self.current is None

    def copy(self, locations: Iterable[Location]) -> ClipboardEntry | None:
        return self._set(locations, is_cut=False)

    def cut(self, locations: Iterable[Location]) -> ClipboardEntry | None:
        return self._set(locations, is_cut=True)

    def _set(self, locations: Iterable[Location], is_cut: bool) -> ClipboardEntry | None:
        sources = frozenset(location for location in locations if isinstance(location, FilesystemLocation))
        if not sources:
            return None
        entry = ClipboardEntry(sources, is_cut, time.time(), next(_ENTRY_IDS))
        self.current = entry
        self.history.insert(0, entry)
        del self.history[self.max_history :]
        self._publish(sources)
        return entry

    def _publish(self, sources: frozenset[FilesystemLocation]) -> None:
        if self._pasteboard is not None:
            self._pasteboard.publish(sources)

    def restore(self, entry: ClipboardEntry) -> None:
        """Make a history entry current again."""
        self.current = entry
        self._publish(entry.sources)

    def clear(self) -> None:
        self.current = None

    def remove_from_history(self, entry: ClipboardEntry) -> None:
        self.history = [item for item in self.history if item.entry_id != entry.entry_id]
        if self.current is not None and self.current.entry_id == entry.entry_id:
            self.current = None

    def clear_history(self) -> None:
        self.history.clear()
        self.current = None

    def finish_paste(self, entry: ClipboardEntry, outcome: TransferOutcome) -> None:
        """Consume a cut entry once its items moved; copies stay on the clipboard.

        Sources that failed to move stay on the clipboard so a retry can pick
        them up.
        """
        if not entry.is_cut or self.current is None or self.current.entry_id != entry.entry_id:
            return
        moved = {item.source for item in outcome.succeeded}
        remaining = frozenset(source for source in entry.sources if source.path not in moved)
        if outcome.ok or not remaining:
            self.current = None
            return
        self.current = ClipboardEntry(remaining, True, entry.timestamp, entry.entry_id)


__all__ = [
    "MAX_CLIPBOARD_HISTORY",
    "Pasteboard",
    "TransferMode",
    "ClipboardEntry",
    "TransferItem",
    "TransferPlan",
    "TransferOutcome",
    "PendingConflict",
    "PendingMove",
    "plan_transfer",
    "execute_transfer",
    "filter_move_sources",
    "ClipboardCoordinator",
]
