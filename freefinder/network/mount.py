"""Share mounting through the platform's mount command.

Credentials are percent-encoded into the share URL. The command's exit
status alone is not trusted: success means a mount point for the share can
actually be found afterwards.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from urllib.parse import quote

from ..location import NetworkShareLocation
from .process import run_command
from .types import Credentials, MountAuthRequired, MountFailed, MountResult, ProcessOutcome, ShareMounted

logger = logging.getLogger(__name__)

OSASCRIPT_PATH = "/usr/bin/osascript"
GIO = "gio"


def mount_url(location: NetworkShareLocation, credentials: Credentials | None = None) -> str:
    """Return the share URL, embedding ``user:password@`` when given."""
    if credentials is None or credentials.is_empty:
        return location.url
    user = quote(credentials.username, safe="")
    password = quote(credentials.password, safe="")
    share = quote(location.share, safe="")
    return f"{location.protocol.scheme}://{user}:{password}@{location.hostname}/{share}"


def build_mount_command(url: str, platform: str = sys.platform) -> list[str]:
    if platform == "darwin":
        escaped = url.replace("\\", "\\\\").replace('"', '\\"')
        return [OSASCRIPT_PATH, "-e", f'mount volume "{escaped}"']
    return [GIO, "mount", url]


def default_volume_roots(platform: str = sys.platform) -> tuple[Path, ...]:
    if platform == "darwin":
        return (Path("/Volumes"),)
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR") or f"/run/user/{os.getuid()}"
    return (Path(runtime_dir) / "gvfs", Path("/media") / os.environ.get("USER", ""), Path("/mnt"))


def _matches_share(entry_name: str, share: str) -> bool:
    lowered = entry_name.lower()
    target = share.lower()
    if lowered == target:
        return True
    # gvfs names mounts like "smb-share:server=nas.local,share=public".
    return f"share={target}" in lowered.split(",")


def find_mount_point(share: str, volume_roots: Sequence[Path]) -> Path | None:
    """Probe ``<root>/<share>`` first, then scan each root for a name match."""
    for root in volume_roots:
        candidate = root / share
        if candidate.is_dir():
            return candidate
    for root in volume_roots:
        try:
            with os.scandir(root) as entries:
                for child in entries:
                    if _matches_share(child.name, share) and child.is_dir():
                        return Path(child.path)
        except OSError:
            continue
    return None


class ShareMounter:
    """Runs the mount command and confirms the resulting mount point."""

    def __init__(
        self,
        *,
        run: Callable[[Sequence[str]], ProcessOutcome] = run_command,
        volume_roots: Sequence[Path] | None = None,
        platform: str = sys.platform,
    ) -> None:
        self._run = run
        self._platform = platform
        self._volume_roots = tuple(volume_roots) if volume_roots is not None else default_volume_roots(platform)

    def mount(self, location: NetworkShareLocation, credentials: Credentials | None = None) -> MountResult:
        outcome = self._run(build_mount_command(mount_url(location, credentials), self._platform))
        if not outcome.launched:
            return MountFailed(outcome.stderr.strip() or f"Could not mount {location.share}")
        mount_point = find_mount_point(location.share, self._volume_roots)
        if mount_point is not None:
            return ShareMounted(str(mount_point))
        logger.info("mount of %s on %s found no mount point (exit %d)", location.share, location.hostname, outcome.exit_status)
        return MountAuthRequired()


__all__ = [
    "mount_url",
    "build_mount_command",
    "default_volume_roots",
    "find_mount_point",
    "ShareMounter",
]
