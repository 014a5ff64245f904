"""Share enumeration through the platform's share-listing command.

The command's outcome is classified into exactly one of: a share listing,
authentication required, or a generic failure. The authentication heuristic
is a replaceable classifier because exit codes and messages differ between
tools and versions.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from urllib.parse import quote

from ..location import ShareProtocol, strip_discovery_domain
from .process import run_command
from .types import (
    Credentials,
    EnumerationAuthRequired,
    EnumerationFailed,
    EnumerationResult,
    NetworkShare,
    ProcessOutcome,
    SharesListed,
)

logger = logging.getLogger(__name__)

SMBUTIL_PATH = "/usr/bin/smbutil"
SMBCLIENT = "smbclient"

_COLUMN_GAP_RE = re.compile(r"\s{2,}")


@dataclass(frozen=True)
class AuthFailureClassifier:
    """Decides whether a failed command outcome means "credentials needed"."""

    exit_statuses: frozenset[int] = frozenset({68, 77})
    markers: tuple[str, ...] = (
        "authentication",
        "logon failure",
        "nt_status_logon_failure",
        "nt_status_access_denied",
        "access denied",
        "permission denied",
    )

    def __call__(self, outcome: ProcessOutcome) -> bool:
        if outcome.exit_status == 0 or not outcome.launched:
            return False
        if outcome.exit_status in self.exit_statuses:
            return True
        text = f"{outcome.stderr}\n{outcome.stdout}".lower()
        return any(marker in text for marker in self.markers)


def build_enumeration_command(
    hostname: str,
    credentials: Credentials | None,
    platform: str = sys.platform,
) -> list[str]:
    """Build the share-listing argv for ``hostname``."""
    host = strip_discovery_domain(hostname) if platform == "darwin" else hostname
    if platform == "darwin":
        if credentials is not None and not credentials.is_empty:
            user = quote(credentials.username, safe="")
            password = quote(credentials.password, safe="")
            return [SMBUTIL_PATH, "view", f"//{user}:{password}@{host}"]
        return [SMBUTIL_PATH, "view", f"//{host}"]

    argv = [SMBCLIENT, "-g", "-L", f"//{host}"]
    if credentials is not None and not credentials.is_empty:
        argv.extend(["-U", f"{credentials.username}%{credentials.password}"])
    else:
        argv.append("-N")
    return argv


def parse_share_listing(output: str, hostname: str) -> tuple[NetworkShare, ...]:
    """Extract disk shares from ``smbutil view`` or ``smbclient -g -L`` output."""
    shares: list[NetworkShare] = []
    seen: set[str] = set()
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        name: str | None = None
        if "|" in line:
            fields = line.split("|")
            if len(fields) >= 2 and fields[0].strip() == "Disk":
                name = fields[1].strip()
        else:
            # Table rows separate columns with runs of spaces; names may contain single spaces.
            columns = _COLUMN_GAP_RE.split(line)
            if len(columns) >= 2 and columns[1] == "Disk":
                name = columns[0]
        if not name or name in seen:
            continue
        seen.add(name)
        shares.append(NetworkShare(hostname=hostname, name=name, protocol=ShareProtocol.SMB))
    return tuple(shares)


def classify_enumeration(
    outcome: ProcessOutcome,
    hostname: str,
    is_auth_failure: Callable[[ProcessOutcome], bool],
) -> EnumerationResult:
    if outcome.exit_status == 0:
        return SharesListed(parse_share_listing(outcome.stdout, hostname))
    if is_auth_failure(outcome):
        return EnumerationAuthRequired()
    message = outcome.stderr.strip() or f"Failed to connect to {strip_discovery_domain(hostname)}"
    return EnumerationFailed(message)


class ShareEnumerator:
    """Runs the share-listing command and classifies its outcome."""

    def __init__(
        self,
        *,
        run: Callable[[Sequence[str]], ProcessOutcome] = run_command,
        is_auth_failure: Callable[[ProcessOutcome], bool] | None = None,
        platform: str = sys.platform,
    ) -> None:
        self._run = run
        self._is_auth_failure = is_auth_failure or AuthFailureClassifier()
        self._platform = platform

    def enumerate(self, hostname: str, credentials: Credentials | None = None) -> EnumerationResult:
        argv = build_enumeration_command(hostname, credentials, self._platform)
        outcome = self._run(argv)
        result = classify_enumeration(outcome, hostname, self._is_auth_failure)
        if not isinstance(result, SharesListed):
            logger.info("share enumeration on %s: %s", hostname, type(result).__name__)
        return result


__all__ = [
    "AuthFailureClassifier",
    "build_enumeration_command",
    "parse_share_listing",
    "classify_enumeration",
    "ShareEnumerator",
]
