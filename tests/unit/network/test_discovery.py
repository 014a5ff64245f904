"""Tests for DNS-SD discovery events and the merged host registry."""

from __future__ import annotations

import unittest
from unittest import mock

from zeroconf import ServiceStateChange

from freefinder.location import NetworkHostLocation, ShareProtocol
from freefinder.network.discovery import (
    DiscoveryEvent,
    HostRegistry,
    ZeroconfDiscovery,
    hostname_for_instance,
    instance_name_from_service,
)


class HostRegistryTests(unittest.TestCase):
    def test_same_host_from_two_protocol_browsers_merges_into_one_record(self) -> None:
        registry = HostRegistry()

        self.assertTrue(registry.merge("Studio", ShareProtocol.SMB))
        self.assertTrue(registry.merge("studio", ShareProtocol.AFP))
        self.assertFalse(registry.merge("Studio", ShareProtocol.SMB))

        self.assertEqual(len(registry), 1)
        host = registry.get("STUDIO.local")
        assert host is not None
        self.assertEqual(host.protocols, {ShareProtocol.SMB, ShareProtocol.AFP})
        self.assertEqual(host.id, "studio.local")
        self.assertEqual(host.location, NetworkHostLocation("Studio.local"))
        self.assertIn("studio.local", registry)

    def test_merge_events_keeps_discovery_order(self) -> None:
        registry = HostRegistry()
        changed = registry.merge_events(
            [
                DiscoveryEvent("nas", ShareProtocol.SMB),
                DiscoveryEvent("studio", ShareProtocol.AFP),
                DiscoveryEvent("nas", ShareProtocol.AFP),
            ]
        )
        self.assertTrue(changed)
        self.assertEqual([host.name for host in registry.hosts], ["nas", "studio"])
        self.assertFalse(registry.merge_events([]))


class ServiceNameTests(unittest.TestCase):
    def test_instance_names(self) -> None:
        self.assertEqual(instance_name_from_service("Studio._smb._tcp.local.", "_smb._tcp.local."), "Studio")
        self.assertEqual(hostname_for_instance("Studio"), "Studio.local")


class ZeroconfDiscoveryTests(unittest.TestCase):
    def test_start_opens_one_browser_per_protocol_and_stop_closes_them(self) -> None:
        zeroconf = mock.Mock()
        with mock.patch("freefinder.network.discovery.ServiceBrowser") as browser_cls:
            discovery = ZeroconfDiscovery(zeroconf_factory=lambda: zeroconf)
            discovery.start()
            discovery.start()

            self.assertTrue(discovery.is_running)
            service_types = sorted(call.args[1] for call in browser_cls.call_args_list)
            self.assertEqual(service_types, ["_afpovertcp._tcp.local.", "_smb._tcp.local."])

            discovery.stop()

        self.assertFalse(discovery.is_running)
        self.assertEqual(browser_cls.return_value.cancel.call_count, 2)
        zeroconf.close.assert_called_once_with()

    def test_added_services_are_queued_until_drained(self) -> None:
        discovery = ZeroconfDiscovery()
        handler = discovery._on_service_state_change
        handler(
            zeroconf=None,
            service_type="_smb._tcp.local.",
            name="Studio._smb._tcp.local.",
            state_change=ServiceStateChange.Added,
        )
        handler(
            zeroconf=None,
            service_type="_afpovertcp._tcp.local.",
            name="Studio._afpovertcp._tcp.local.",
            state_change=ServiceStateChange.Added,
        )
        handler(
            zeroconf=None,
            service_type="_smb._tcp.local.",
            name="Gone._smb._tcp.local.",
            state_change=ServiceStateChange.Removed,
        )

        self.assertEqual(
            discovery.drain_events(),
            [DiscoveryEvent("Studio", ShareProtocol.SMB), DiscoveryEvent("Studio", ShareProtocol.AFP)],
        )
        self.assertEqual(discovery.drain_events(), [])


if __name__ == "__main__":
    unittest.main()
