"""System clipboard publishing for interop with other applications."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pyperclip

from .location import FilesystemLocation, Location

logger = logging.getLogger(__name__)


class SystemPasteboard:
    """Writes copied/cut locations to the OS clipboard as newline-joined paths.

    Publishing is best effort: a missing clipboard mechanism is logged and
    otherwise ignored.
    """

    def publish(self, locations: Iterable[Location]) -> bool:
        paths = sorted(str(location.path) for location in locations if isinstance(location, FilesystemLocation))
        if not paths:
            return False
        try:
            pyperclip.copy("\n".join(paths))
        except pyperclip.PyperclipException:
            logger.debug("system clipboard unavailable", exc_info=True)
            return False
        return True


__all__ = ["SystemPasteboard"]
