"""Credential prompting and retry dispatch for network operations.

At most one prompt is pending. Submitting credentials clears it and hands
back the retry the caller should run; a retry that fails again raises a new
prompt through ``require_enumeration``/``require_mount``.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..location import NetworkShareLocation, strip_discovery_domain
from .types import Credentials


@dataclass(frozen=True)
class EnumerationPrompt:
    """Credentials needed to list shares on ``hostname``."""

    hostname: str

    @property
    def server_name(self) -> str:
        return strip_discovery_domain(self.hostname)


@dataclass(frozen=True)
class MountPrompt:
    """Credentials needed to mount the share at ``location``."""

    location: NetworkShareLocation

    @property
    def server_name(self) -> str:
        return strip_discovery_domain(self.location.hostname)


AuthPrompt = EnumerationPrompt | MountPrompt


@dataclass(frozen=True)
class EnumerationRetry:
    hostname: str
    credentials: Credentials


@dataclass(frozen=True)
class MountRetry:
    location: NetworkShareLocation
    credentials: Credentials


AuthRetry = EnumerationRetry | MountRetry


class CredentialStore:
    """Last accepted credentials per host, kept in memory for the session."""

    def __init__(self) -> None:
        self._by_host: dict[str, Credentials] = {}

    def remember(self, hostname: str, credentials: Credentials) -> None:
        self._by_host[hostname.lower()] = credentials

    def lookup(self, hostname: str) -> Credentials | None:
        return self._by_host.get(hostname.lower())

    def forget(self, hostname: str) -> None:
        self._by_host.pop(hostname.lower(), None)

    def clear(self) -> None:
        self._by_host.clear()


class AuthenticationCoordinator:
    """Single pending auth prompt plus the session's credential store."""

    def __init__(self, store: CredentialStore | None = None) -> None:
        self.store = store or CredentialStore()
        self.prompt: AuthPrompt | None = None

    @property
    def is_prompting(self) -> bool:
        return self.prompt is not None

    def require_enumeration(self, hostname: str) -> AuthPrompt:
        self.prompt = EnumerationPrompt(hostname)
        return self.prompt

    def require_mount(self, location: NetworkShareLocation) -> AuthPrompt:
        self.prompt = MountPrompt(location)
        return self.prompt

    def submit(self, credentials: Credentials) -> AuthRetry | None:
        """Clear the pending prompt and return the retry it asked for."""
        prompt = self.prompt
        self.prompt = None
        if isinstance(prompt, EnumerationPrompt):
            return EnumerationRetry(prompt.hostname, credentials)
        if isinstance(prompt, MountPrompt):
            return MountRetry(prompt.location, credentials)
        return None

    def cancel(self) -> None:
        self.prompt = None

    def credentials_for(self, hostname: str) -> Credentials | None:
        return self.store.lookup(hostname)

    def accept(self, hostname: str, credentials: Credentials | None) -> None:
        """Remember credentials that just worked against ``hostname``."""
        if credentials is not None and not credentials.is_empty:
            self.store.remember(hostname, credentials)


__all__ = [
    "EnumerationPrompt",
    "MountPrompt",
    "AuthPrompt",
    "EnumerationRetry",
    "MountRetry",
    "AuthRetry",
    "CredentialStore",
    "AuthenticationCoordinator",
]
