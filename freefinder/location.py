"""Browsable locations: filesystem paths and network pseudo-paths.

A location is one of four frozen variants. Filesystem locations resolve to a
real directory; the network variants are virtual browsing nodes (root, host)
or a share that becomes a filesystem location once mounted.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlsplit

DISCOVERY_DOMAIN_SUFFIX = ".local"
NETWORK_SCHEME = "network"


class ShareProtocol(enum.Enum):
    """File-sharing protocols the browser can discover and mount."""

    SMB = "smb"
    AFP = "afp"

    @property
    def scheme(self) -> str:
        return self.value

    @property
    def service_type(self) -> str:
        """DNS-SD service type advertised by hosts offering this protocol."""
        if self is ShareProtocol.SMB:
            return "_smb._tcp.local."
        return "_afpovertcp._tcp.local."

    @classmethod
    def from_scheme(cls, scheme: str) -> ShareProtocol | None:
        lowered = scheme.strip().lower()
        for protocol in cls:
            if protocol.value == lowered:
                return protocol
        return None


def strip_discovery_domain(hostname: str) -> str:
    """Return ``hostname`` without its trailing ``.local`` decoration."""
    if hostname.lower().endswith(DISCOVERY_DOMAIN_SUFFIX):
        return hostname[: -len(DISCOVERY_DOMAIN_SUFFIX)]
    return hostname


@dataclass(frozen=True)
class FilesystemLocation:
    """A directory or file on a local (or mounted) filesystem."""

    path: Path

    @classmethod
    def of(cls, path: Path | str) -> FilesystemLocation:
        """Build a normalized location for ``path``."""
        expanded = Path(path).expanduser()
        try:
            resolved = expanded.resolve()
        except OSError:
            resolved = Path(os.path.abspath(expanded))
        return cls(resolved)

    @property
    def name(self) -> str:
        return self.path.name or self.path.anchor or str(self.path)

    @property
    def is_root(self) -> bool:
        return self.path.parent == self.path

    def child(self, name: str) -> FilesystemLocation:
        return FilesystemLocation(self.path / name)

    def parent(self) -> FilesystemLocation | None:
        if self.is_root:
            return None
        return FilesystemLocation(self.path.parent)

    def is_within(self, other: FilesystemLocation) -> bool:
        """Return whether this location equals or lives below ``other``."""
        return self.path == other.path or self.path.is_relative_to(other.path)


@dataclass(frozen=True)
class NetworkRoot:
    """Virtual root listing discovered network hosts."""

    @property
    def name(self) -> str:
        return "Network"

    @property
    def url(self) -> str:
        return f"{NETWORK_SCHEME}://"


@dataclass(frozen=True)
class NetworkHostLocation:
    """Virtual node listing the shares of one host."""

    hostname: str

    @property
    def name(self) -> str:
        return strip_discovery_domain(self.hostname)

    @property
    def url(self) -> str:
        return f"{NETWORK_SCHEME}://{self.hostname}"


@dataclass(frozen=True)
class NetworkShareLocation:
    """A mountable share; resolves to a filesystem location after mounting."""

    protocol: ShareProtocol
    hostname: str
    share: str

    @property
    def name(self) -> str:
        return self.share

    @property
    def url(self) -> str:
        return f"{self.protocol.scheme}://{self.hostname}/{self.share}"

    @property
    def host(self) -> NetworkHostLocation:
        return NetworkHostLocation(self.hostname)


Location = FilesystemLocation | NetworkRoot | NetworkHostLocation | NetworkShareLocation


def parse_server_address(address: str) -> NetworkHostLocation | NetworkShareLocation | None:
    """Parse a "Connect to Server" address such as ``smb://nas.local/public``.

    A missing scheme means SMB. Returns ``None`` for blank addresses, bare
    schemes, unknown schemes or addresses without a host.
    """
    text = address.strip()
    if not text:
        return None
    if "://" not in text:
        text = f"{ShareProtocol.SMB.scheme}://{text}"
    try:
        parts = urlsplit(text)
        hostname = parts.hostname
    except ValueError:
        return None
    protocol = ShareProtocol.from_scheme(parts.scheme)
    if protocol is None or not hostname:
        return None
    # urlsplit lowercases hostname; keep the typed spelling for display.
    netloc_host = parts.netloc.rsplit("@", 1)[-1].split(":", 1)[0] or hostname
    share = unquote(parts.path.strip("/").split("/", 1)[0])
    if share:
        return NetworkShareLocation(protocol, netloc_host, share)
    return NetworkHostLocation(netloc_host)


__all__ = [
    "DISCOVERY_DOMAIN_SUFFIX",
    "ShareProtocol",
    "strip_discovery_domain",
    "FilesystemLocation",
    "NetworkRoot",
    "NetworkHostLocation",
    "NetworkShareLocation",
    "Location",
    "parse_server_address",
]
