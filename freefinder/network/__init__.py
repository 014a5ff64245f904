"""Network browsing: DNS-SD discovery, share listing, mounting and auth."""

from __future__ import annotations

from .auth import (
    AuthenticationCoordinator,
    AuthPrompt,
    CredentialStore,
    EnumerationPrompt,
    EnumerationRetry,
    MountPrompt,
    MountRetry,
)
from .browser import NetworkShareBrowser
from .discovery import DiscoveryEvent, HostRegistry, ZeroconfDiscovery
from .mount import ShareMounter
from .shares import AuthFailureClassifier, ShareEnumerator
from .types import (
    Credentials,
    EnumerationAuthRequired,
    EnumerationFailed,
    HostState,
    MountAuthRequired,
    MountFailed,
    MountState,
    NetworkHost,
    NetworkShare,
    ProcessOutcome,
    ShareMounted,
    SharesListed,
)

__all__ = [
    "AuthenticationCoordinator",
    "AuthPrompt",
    "CredentialStore",
    "EnumerationPrompt",
    "EnumerationRetry",
    "MountPrompt",
    "MountRetry",
    "NetworkShareBrowser",
    "DiscoveryEvent",
    "HostRegistry",
    "ZeroconfDiscovery",
    "ShareMounter",
    "AuthFailureClassifier",
    "ShareEnumerator",
    "Credentials",
    "EnumerationAuthRequired",
    "EnumerationFailed",
    "HostState",
    "MountAuthRequired",
    "MountFailed",
    "MountState",
    "NetworkHost",
    "NetworkShare",
    "ProcessOutcome",
    "ShareMounted",
    "SharesListed",
]
