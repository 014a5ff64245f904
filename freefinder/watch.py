"""Poll-based change monitoring for the current and expanded folders.

Each watched folder keeps a digest of its own stat data and its visible
children. A sample whose digest differs from the stored one counts as a
change notification; the session debounces those before refreshing.
"""

from __future__ import annotations

import hashlib
import os
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from .location import FilesystemLocation, Location

DEFAULT_DEBOUNCE_SECONDS = 0.2
DEFAULT_WATCH_POLL_SECONDS = 0.5


def _update_digest(digest, token: str) -> None:
    """Append a token plus separator byte to a hash digest."""
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def build_directory_signature(directory: Path, show_hidden: bool) -> str:
    """Digest a folder's own stat state and sorted child metadata."""
    digest = hashlib.blake2b(digest_size=20)
    _update_digest(digest, f"dir:{directory}")
    _update_digest(digest, f"show_hidden:{1 if show_hidden else 0}")
    try:
        st = directory.stat()
    except FileNotFoundError:
        _update_digest(digest, "dir_stat:missing")
        return digest.hexdigest()
    except OSError:
        _update_digest(digest, "dir_stat:error")
        return digest.hexdigest()
    _update_digest(digest, f"dir_stat:ok:{st.st_mode}")

    children: list[tuple[str, bool, int, int, int]] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                name = child.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    is_dir = child.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                try:
                    child_stat = child.stat(follow_symlinks=False)
                    children.append((name, is_dir, child_stat.st_mtime_ns, child_stat.st_size, child_stat.st_mode))
                except OSError:
                    children.append((name, is_dir, 0, 0, 0))
    except OSError:
        _update_digest(digest, "children:error")
        return digest.hexdigest()

    children.sort(key=lambda item: (item[0].casefold(), item[0]))
    for name, is_dir, mtime_ns, size, mode in children:
        _update_digest(digest, f"child:{name}:{1 if is_dir else 0}:{mtime_ns}:{size}:{mode}")
    return digest.hexdigest()


def sample_signatures(
    locations: Iterable[FilesystemLocation],
    show_hidden: bool,
    build_signature: Callable[[Path, bool], str] = build_directory_signature,
) -> dict[FilesystemLocation, str]:
    """Compute signatures for ``locations``; safe to run off the owner thread."""
    return {location: build_signature(location.path, show_hidden) for location in locations}


@dataclass
class WatchHandle:
    location: FilesystemLocation
    signature: str | None = None
    last_poll: float | None = None


class DirectoryWatcher:
    """One watch handle per filesystem location; network locations are skipped.

    The owner calls ``due`` to pick handles whose poll interval elapsed,
    samples them (usually in the background) and hands the samples back to
    ``record``, which reports the locations whose contents changed.
    """

    def __init__(
        self,
        *,
        poll_seconds: float = DEFAULT_WATCH_POLL_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.poll_seconds = max(0.0, poll_seconds)
        self._monotonic = monotonic
        self._handles: dict[FilesystemLocation, WatchHandle] = {}

    @property
    def watched(self) -> set[FilesystemLocation]:
        return set(self._handles)

    def is_watching(self, location: Location) -> bool:
        return location in self._handles

    def watch(self, location: Location) -> bool:
        if not isinstance(location, FilesystemLocation) or location in self._handles:
            return False
        self._handles[location] = WatchHandle(location)
        return True

    def unwatch(self, location: Location) -> bool:
        if not isinstance(location, FilesystemLocation):
            return False
        return self._handles.pop(location, None) is not None

    def sync(self, locations: Iterable[Location]) -> None:
        """Watch exactly the filesystem locations in ``locations``."""
        wanted = {location for location in locations if isinstance(location, FilesystemLocation)}
        for location in list(self._handles):
            if location not in wanted:
                del self._handles[location]
        for location in wanted:
            self.watch(location)

    def stop_all(self) -> None:
        self._handles.clear()

    def reset_signatures(self) -> None:
        """Forget stored digests, e.g. after the hidden-file mode changed."""
        for handle in self._handles.values():
            handle.signature = None

    def due(self) -> list[FilesystemLocation]:
        """Return handles whose poll interval elapsed and mark them polled."""
        now = self._monotonic()
        out: list[FilesystemLocation] = []
        for handle in self._handles.values():
            if handle.last_poll is not None and (now - handle.last_poll) < self.poll_seconds:
                continue
            handle.last_poll = now
            out.append(handle.location)
        return out

    def record(self, samples: dict[FilesystemLocation, str]) -> list[FilesystemLocation]:
        """Store samples; return watched locations whose digest changed.

        The first sample of a handle only establishes its baseline. Samples
        for locations no longer watched are ignored.
        """
        changed: list[FilesystemLocation] = []
        for location, signature in samples.items():
            handle = self._handles.get(location)
            if handle is None:
                continue
            if handle.signature is None:
                handle.signature = signature
                continue
            if handle.signature != signature:
                handle.signature = signature
                changed.append(location)
        return changed


class Debouncer:
    """Cancelable deadline; ``fire_if_due`` reports an uncancelled expiry once."""

    def __init__(
        self,
        delay_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.delay_seconds = max(0.0, delay_seconds)
        self._monotonic = monotonic
        self._deadline: float | None = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def schedule(self) -> None:
        """Cancel any pending deadline and start a new one."""
        self._deadline = self._monotonic() + self.delay_seconds

    def cancel(self) -> None:
        self._deadline = None

    def fire_if_due(self) -> bool:
        if self._deadline is None or self._monotonic() < self._deadline:
            return False
        self._deadline = None
        return True


__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "DEFAULT_WATCH_POLL_SECONDS",
    "build_directory_signature",
    "sample_signatures",
    "WatchHandle",
    "DirectoryWatcher",
    "Debouncer",
]
