"""DNS-SD host discovery: one zeroconf browser per share protocol.

zeroconf invokes handlers on its own threads, so events are only queued
there; the owner drains them and merges them into the host registry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from queue import Empty, Queue

from zeroconf import ServiceBrowser, ServiceStateChange, Zeroconf

from ..location import DISCOVERY_DOMAIN_SUFFIX, ShareProtocol
from .types import NetworkHost

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryEvent:
    """A host advertising ``protocol`` was seen."""

    instance_name: str
    protocol: ShareProtocol


def instance_name_from_service(name: str, service_type: str) -> str:
    """Strip the service type from a DNS-SD instance name."""
    if name.endswith(service_type):
        name = name[: -len(service_type)]
    return name.rstrip(".")


def hostname_for_instance(instance_name: str) -> str:
    return f"{instance_name}{DISCOVERY_DOMAIN_SUFFIX}"


class HostRegistry:
    """Discovered hosts keyed by lowercase hostname, in discovery order.

    Append/merge only: a host seen again through another protocol gains that
    protocol instead of a second record.
    """

    def __init__(self) -> None:
        self._hosts: dict[str, NetworkHost] = {}

    def __len__(self) -> int:
        return len(self._hosts)

    def __contains__(self, hostname: object) -> bool:
        return isinstance(hostname, str) and hostname.lower() in self._hosts

    @property
    def hosts(self) -> list[NetworkHost]:
        return list(self._hosts.values())

    def get(self, hostname: str) -> NetworkHost | None:
        return self._hosts.get(hostname.lower())

    def merge(self, instance_name: str, protocol: ShareProtocol) -> bool:
        """Record one sighting; return whether the registry changed."""
        hostname = hostname_for_instance(instance_name)
        key = hostname.lower()
        host = self._hosts.get(key)
        if host is None:
            self._hosts[key] = NetworkHost(hostname=hostname, name=instance_name, protocols={protocol})
            return True
        if protocol in host.protocols:
            return False
        host.protocols.add(protocol)
        return True

    def merge_events(self, events: Iterable[DiscoveryEvent]) -> bool:
        changed = False
        for event in events:
            changed = self.merge(event.instance_name, event.protocol) or changed
        return changed

    def clear(self) -> None:
        self._hosts.clear()


class ZeroconfDiscovery:
    """Runs one ``ServiceBrowser`` per protocol until ``stop`` is called."""

    def __init__(
        self,
        protocols: Iterable[ShareProtocol] = tuple(ShareProtocol),
        zeroconf_factory=Zeroconf,
    ) -> None:
        self._protocols = tuple(protocols)
        self._zeroconf_factory = zeroconf_factory
        self._zeroconf: Zeroconf | None = None
        self._browsers: list[ServiceBrowser] = []
        self._events: Queue[DiscoveryEvent] = Queue()

    @property
    def is_running(self) -> bool:
        return self._zeroconf is not None

    def start(self) -> None:
        if self._zeroconf is not None:
            return
        self._zeroconf = self._zeroconf_factory()
        for protocol in self._protocols:
            self._browsers.append(
                ServiceBrowser(
                    self._zeroconf,
                    protocol.service_type,
                    handlers=[self._on_service_state_change],
                )
            )
        logger.debug("started discovery for %s", ", ".join(p.value for p in self._protocols))

    def stop(self) -> None:
        for browser in self._browsers:
            browser.cancel()
        self._browsers = []
        if self._zeroconf is not None:
            self._zeroconf.close()
            self._zeroconf = None

    def drain_events(self) -> list[DiscoveryEvent]:
        out: list[DiscoveryEvent] = []
        while True:
            try:
                out.append(self._events.get_nowait())
            except Empty:
                break
        return out

    def _on_service_state_change(
        self,
        zeroconf: Zeroconf,
        service_type: str,
        name: str,
        state_change: ServiceStateChange,
    ) -> None:
        if state_change is not ServiceStateChange.Added:
            return
        protocol = next((p for p in self._protocols if p.service_type == service_type), None)
        if protocol is None:
            return
        self._events.put(DiscoveryEvent(instance_name_from_service(name, service_type), protocol))


__all__ = [
    "DiscoveryEvent",
    "instance_name_from_service",
    "hostname_for_instance",
    "HostRegistry",
    "ZeroconfDiscovery",
]
