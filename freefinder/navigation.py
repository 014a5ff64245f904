"""Navigation history: back/forward stacks over locations.

This module intentionally has no UI concerns. It also derives the parent
location and the breadcrumb segments shown in the path bar.
"""

from __future__ import annotations

from .location import (
    FilesystemLocation,
    Location,
    NetworkHostLocation,
    NetworkRoot,
    NetworkShareLocation,
    strip_discovery_domain,
)

NETWORK_BREADCRUMB_LABEL = "Network"


def volume_label(location: FilesystemLocation) -> str:
    """Label for the filesystem root segment of a breadcrumb."""
    return location.path.anchor or "/"


class NavigationState:
    """Current location plus unbounded back/forward stacks.

    ``go_back``/``go_forward`` only move locations between the stacks;
    ``navigate`` is the only operation that discards forward history.
    """

    def __init__(self, current: Location) -> None:
        self.current: Location = current
        self.back_stack: list[Location] = []
        self.forward_stack: list[Location] = []

    @property
    def can_go_back(self) -> bool:
        return bool(self.back_stack)

    @property
    def can_go_forward(self) -> bool:
        return bool(self.forward_stack)

    @property
    def can_go_to_parent(self) -> bool:
        return self.parent() is not None

    def navigate(self, to: Location) -> bool:
        """Make ``to`` current; return ``False`` when it already is."""
        if to == self.current:
            return False
        self.back_stack.append(self.current)
        self.forward_stack.clear()
        self.current = to
        return True

    def go_back(self) -> Location | None:
        if not self.back_stack:
            return None
        previous = self.back_stack.pop()
        self.forward_stack.append(self.current)
        self.current = previous
        return previous

    def go_forward(self) -> Location | None:
        if not self.forward_stack:
            return None
        following = self.forward_stack.pop()
        self.back_stack.append(self.current)
        self.current = following
        return following

    def parent(self) -> Location | None:
        current = self.current
        if isinstance(current, FilesystemLocation):
            return current.parent()
        if isinstance(current, NetworkShareLocation):
            return current.host
        if isinstance(current, NetworkHostLocation):
            return NetworkRoot()
        return None

    def path_breadcrumb(self) -> list[tuple[str, Location]]:
        """Return ``(label, location)`` segments from the root to current."""
        current = self.current
        if isinstance(current, FilesystemLocation):
            segments: list[tuple[str, Location]] = []
            cursor: FilesystemLocation | None = current
            while cursor is not None and not cursor.is_root:
                segments.append((cursor.name, cursor))
                cursor = cursor.parent()
            root = cursor if cursor is not None else current
            segments.append((volume_label(root), root))
            segments.reverse()
            return segments

        segments = [(NETWORK_BREADCRUMB_LABEL, NetworkRoot())]
        if isinstance(current, NetworkShareLocation):
            current = current.host
        if isinstance(current, NetworkHostLocation) and current.hostname:
            segments.append((strip_discovery_domain(current.hostname), current))
        return segments


__all__ = ["NETWORK_BREADCRUMB_LABEL", "NavigationState", "volume_label"]
