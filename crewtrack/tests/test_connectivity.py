"""
Tests for ConnectivityMonitor: change notifications and the HEAD probe.
"""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from crewtrack.connectivity import ConnectivityMonitor

from .test_common import UNREACHABLE_URL, FakeRealtimeServer


class TestConnectivityMonitor(unittest.TestCase):

    def test_online_by_default(self):
        self.assertTrue(ConnectivityMonitor().is_online)
        self.assertFalse(ConnectivityMonitor(online=False).is_online)

    def test_listeners_hear_changes_only(self):
        monitor = ConnectivityMonitor()
        listener = MagicMock()
        monitor.add_listener(listener)

        monitor.set_online(True)
        monitor.set_online(False)
        monitor.set_online(False)
        monitor.set_online(True)

        self.assertEqual([c.args for c in listener.call_args_list], [(False,), (True,)])

    def test_remove_listener(self):
        monitor = ConnectivityMonitor()
        listener = MagicMock()
        remove = monitor.add_listener(listener)

        remove()
        remove()
        monitor.set_online(False)

        listener.assert_not_called()

    def test_listener_error_does_not_block_others(self):
        monitor = ConnectivityMonitor()
        broken = MagicMock(side_effect=RuntimeError("listener bug"))
        other = MagicMock()
        monitor.add_listener(broken)
        monitor.add_listener(other)

        with self.assertLogs("crewtrack.connectivity", level="ERROR"):
            monitor.set_online(False)

        other.assert_called_once_with(False)
        self.assertFalse(monitor.is_online)


class TestConnectivityProbe(unittest.IsolatedAsyncioTestCase):

    async def test_reachable_server(self):
        server = await FakeRealtimeServer().start()
        monitor = ConnectivityMonitor(online=False)
        listener = MagicMock()
        monitor.add_listener(listener)
        try:
            reachable = await monitor.async_probe(f"{server.base_url}/health", timeout=5)
        finally:
            await server.close()

        self.assertTrue(reachable)
        self.assertTrue(monitor.is_online)
        listener.assert_called_once_with(True)

    async def test_server_error_counts_as_unreachable(self):
        server = await FakeRealtimeServer().start()
        server.respond("HEAD", "health", {}, status=503)
        monitor = ConnectivityMonitor()
        try:
            with self.assertLogs("crewtrack.connectivity", level="WARNING"):
                reachable = await monitor.async_probe(f"{server.base_url}/health", timeout=5)
        finally:
            await server.close()

        self.assertFalse(reachable)
        self.assertFalse(monitor.is_online)

    async def test_unreachable_host(self):
        monitor = ConnectivityMonitor()

        with self.assertLogs("crewtrack.connectivity", level="WARNING"):
            reachable = await monitor.async_probe(f"{UNREACHABLE_URL}/health", timeout=5)

        self.assertFalse(reachable)
        self.assertFalse(monitor.is_online)
