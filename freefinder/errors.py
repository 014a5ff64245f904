"""Error kinds surfaced by the browsing session.

Every failure the session reports is a ``FinderError``. Filesystem primitives
translate ``OSError`` through ``translate_os_error`` so callers can branch on
kind instead of errno values.
"""

from __future__ import annotations

import errno
from pathlib import Path


class FinderError(Exception):
    """Base class for recoverable session errors."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class PermissionDeniedError(FinderError):
    """The operation was refused by filesystem permissions."""


class NotFoundError(FinderError):
    """The target path does not exist."""


class ConflictError(FinderError):
    """A destination name already exists."""


class InvalidNameError(FinderError):
    """A user-supplied file name cannot be used."""


class NetworkError(FinderError):
    """A network primitive failed for a reason other than authentication."""


class AuthRequiredError(NetworkError):
    """A network primitive needs credentials before it can proceed."""


def translate_os_error(exc: OSError, path: Path | None = None) -> FinderError:
    """Map an ``OSError`` onto the matching ``FinderError`` kind."""
    target = path
    if target is None and exc.filename is not None:
        target = Path(str(exc.filename))
    label = str(target) if target is not None else "item"
    reason = exc.strerror or str(exc)

    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return PermissionDeniedError(f"Permission denied: {label}", target)
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return NotFoundError(f"No such file or directory: {label}", target)
    if isinstance(exc, FileExistsError) or exc.errno == errno.EEXIST:
        return ConflictError(f"An item named {target.name if target else label!r} already exists", target)
    return FinderError(f"{label}: {reason}", target)


__all__ = [
    "FinderError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "InvalidNameError",
    "NetworkError",
    "AuthRequiredError",
    "translate_os_error",
]
