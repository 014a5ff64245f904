"""Network browsing datatypes: hosts, shares, credentials and outcomes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ..location import NetworkHostLocation, NetworkShareLocation, ShareProtocol, strip_discovery_domain


@dataclass
class NetworkHost:
    """A discovered host; several discovery browsers merge into one record."""

    hostname: str
    name: str
    protocols: set[ShareProtocol] = field(default_factory=set)

    @property
    def id(self) -> str:
        return self.hostname.lower()

    @property
    def location(self) -> NetworkHostLocation:
        return NetworkHostLocation(self.hostname)


@dataclass(frozen=True)
class NetworkShare:
    hostname: str
    name: str
    protocol: ShareProtocol = ShareProtocol.SMB

    @property
    def id(self) -> str:
        return f"{self.hostname}/{self.name}"

    @property
    def location(self) -> NetworkShareLocation:
        return NetworkShareLocation(self.protocol, self.hostname, self.name)


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = ""

    @classmethod
    def guest(cls) -> Credentials:
        return cls("guest", "")

    @property
    def is_empty(self) -> bool:
        return not self.username

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password=<hidden>)"


class HostState(enum.Enum):
    DISCOVERED = "discovered"
    ENUMERATING = "enumerating"
    SHARES_READY = "shares_ready"
    AUTH_REQUIRED = "auth_required"
    ENUMERATION_ERROR = "enumeration_error"


class MountState(enum.Enum):
    NOT_MOUNTED = "not_mounted"
    MOUNTING = "mounting"
    MOUNTED = "mounted"
    AUTH_REQUIRED = "auth_required"
    ERROR = "error"


@dataclass(frozen=True)
class ProcessOutcome:
    """Exit status and captured output of one external command."""

    exit_status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def launched(self) -> bool:
        return self.exit_status >= 0


@dataclass(frozen=True)
class SharesListed:
    shares: tuple[NetworkShare, ...]


@dataclass(frozen=True)
class EnumerationAuthRequired:
    pass


@dataclass(frozen=True)
class EnumerationFailed:
    message: str


EnumerationResult = SharesListed | EnumerationAuthRequired | EnumerationFailed


@dataclass(frozen=True)
class ShareMounted:
    mount_point: str


@dataclass(frozen=True)
class MountAuthRequired:
    pass


@dataclass(frozen=True)
class MountFailed:
    message: str


MountResult = ShareMounted | MountAuthRequired | MountFailed


def display_host_name(hostname: str) -> str:
    return strip_discovery_domain(hostname)


__all__ = [
    "ShareProtocol",
    "NetworkHost",
    "NetworkShare",
    "Credentials",
    "HostState",
    "MountState",
    "ProcessOutcome",
    "SharesListed",
    "EnumerationAuthRequired",
    "EnumerationFailed",
    "EnumerationResult",
    "ShareMounted",
    "MountAuthRequired",
    "MountFailed",
    "MountResult",
    "display_host_name",
]
