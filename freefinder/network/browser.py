"""Network share browser: host discovery, share enumeration and mounting.

Per host: undiscovered -> discovered -> enumerating -> shares ready, auth
required, or enumeration error. Per share: not mounted -> mounting ->
mounted, auth required, or error.

Blocking primitives (``run_enumeration``/``run_mount``) are safe to call off
the owner thread. Every ``begin_*``/``apply_*`` method mutates state and must
be called by the owner.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..file_model import FileEntry
from ..location import FilesystemLocation, NetworkShareLocation
from .discovery import DiscoveryEvent, HostRegistry, ZeroconfDiscovery
from .mount import ShareMounter
from .shares import ShareEnumerator
from .types import (
    Credentials,
    EnumerationAuthRequired,
    EnumerationResult,
    HostState,
    MountAuthRequired,
    MountFailed,
    MountResult,
    MountState,
    NetworkHost,
    NetworkShare,
    ShareMounted,
    SharesListed,
    display_host_name,
)

logger = logging.getLogger(__name__)

NETWORK_COMPUTER_KIND = "Network Computer"
NETWORK_SHARE_KIND = "Network Share"


class ServiceDiscovery(Protocol):
    @property
    def is_running(self) -> bool: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def drain_events(self) -> list[DiscoveryEvent]: ...


def host_entry(host: NetworkHost) -> FileEntry:
    return FileEntry(
        location=host.location,
        name=host.name,
        is_directory=True,
        kind=NETWORK_COMPUTER_KIND,
        icon="network-computer",
    )


def share_entry(share: NetworkShare) -> FileEntry:
    return FileEntry(
        location=share.location,
        name=share.name,
        is_directory=True,
        kind=NETWORK_SHARE_KIND,
        icon="network-share",
    )


class NetworkShareBrowser:
    """Discovered hosts, per-host share cache and per-share mount state."""

    def __init__(
        self,
        *,
        discovery: ServiceDiscovery | None = None,
        enumerator: ShareEnumerator | None = None,
        mounter: ShareMounter | None = None,
    ) -> None:
        self._discovery = discovery if discovery is not None else ZeroconfDiscovery()
        self._enumerator = enumerator or ShareEnumerator()
        self._mounter = mounter or ShareMounter()
        self.registry = HostRegistry()
        self.host_states: dict[str, HostState] = {}
        self.enumeration_errors: dict[str, str] = {}
        self.mount_states: dict[NetworkShareLocation, MountState] = {}
        self.mount_errors: dict[NetworkShareLocation, str] = {}
        self._shares: dict[str, tuple[NetworkShare, ...]] = {}

    # Discovery

    @property
    def hosts(self) -> list[NetworkHost]:
        return self.registry.hosts

    @property
    def is_discovering(self) -> bool:
        return self._discovery.is_running

    def start_discovery(self) -> None:
        self._discovery.start()

    def stop_discovery(self) -> None:
        """Stop both protocol browsers; already discovered hosts stay listed."""
        self._discovery.stop()

    def drain_discovery(self) -> bool:
        """Merge queued discovery events; return whether the host list changed."""
        events = self._discovery.drain_events()
        if not events:
            return False
        changed = self.registry.merge_events(events)
        for host in self.registry.hosts:
            self.host_states.setdefault(host.id, HostState.DISCOVERED)
        return changed

    # Enumeration

    def host_state(self, hostname: str) -> HostState | None:
        return self.host_states.get(hostname.lower())

    def shares_for(self, hostname: str) -> tuple[NetworkShare, ...]:
        return self._shares.get(hostname.lower(), ())

    def begin_enumeration(self, hostname: str) -> None:
        self.host_states[hostname.lower()] = HostState.ENUMERATING
        self.enumeration_errors.pop(hostname.lower(), None)

    def run_enumeration(self, hostname: str, credentials: Credentials | None = None) -> EnumerationResult:
        return self._enumerator.enumerate(hostname, credentials)

    def apply_enumeration(self, hostname: str, result: EnumerationResult) -> HostState:
        key = hostname.lower()
        if isinstance(result, SharesListed):
            self._shares[key] = result.shares
            state = HostState.SHARES_READY
        elif isinstance(result, EnumerationAuthRequired):
            state = HostState.AUTH_REQUIRED
        else:
            self.enumeration_errors[key] = result.message
            state = HostState.ENUMERATION_ERROR
        self.host_states[key] = state
        return state

    # Mounting

    def mount_state(self, location: NetworkShareLocation) -> MountState:
        return self.mount_states.get(location, MountState.NOT_MOUNTED)

    def begin_mount(self, location: NetworkShareLocation) -> None:
        self.mount_states[location] = MountState.MOUNTING
        self.mount_errors.pop(location, None)

    def run_mount(self, location: NetworkShareLocation, credentials: Credentials | None = None) -> MountResult:
        return self._mounter.mount(location, credentials)

    def apply_mount(self, location: NetworkShareLocation, result: MountResult) -> FilesystemLocation | None:
        """Record a mount outcome; return the mount point on success."""
        if isinstance(result, ShareMounted):
            self.mount_states[location] = MountState.MOUNTED
            return FilesystemLocation.of(result.mount_point)
        if isinstance(result, MountAuthRequired):
            self.mount_states[location] = MountState.AUTH_REQUIRED
        elif isinstance(result, MountFailed):
            self.mount_states[location] = MountState.ERROR
            self.mount_errors[location] = result.message
        else:
            raise TypeError(f"unexpected mount result: {result!r}")
        return None

    # Listing rows

    def host_entries(self) -> list[FileEntry]:
        return [host_entry(host) for host in self.registry.hosts]

    def share_entries(self, hostname: str) -> list[FileEntry]:
        return [share_entry(share) for share in self.shares_for(hostname)]

    def describe_error(self, hostname: str) -> str:
        message = self.enumeration_errors.get(hostname.lower())
        return message or f"Failed to connect to {display_host_name(hostname)}"


__all__ = [
    "NETWORK_COMPUTER_KIND",
    "NETWORK_SHARE_KIND",
    "ServiceDiscovery",
    "host_entry",
    "share_entry",
    "NetworkShareBrowser",
]
