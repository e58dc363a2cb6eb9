"""
Tests for RealtimeTransport against an in-process aiohttp server.
"""

from __future__ import annotations

import unittest

import aiohttp

from crewtrack.connectivity import ConnectivityMonitor
from crewtrack.errors import (
    ErrorKind,
    InvalidResponseError,
    OfflineError,
    RequestTimeoutError,
    TransportError,
)
from crewtrack.requests import RealtimeTransport

from .test_common import UNREACHABLE_URL, FakeRealtimeServer


class TestRealtimeTransport(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.server = await FakeRealtimeServer().start()
        self.connectivity = ConnectivityMonitor()
        self.transport = self.server.transport(connectivity=self.connectivity)

    async def asyncTearDown(self):
        await self.transport.close()
        await self.server.close()

    async def test_get_returns_status_and_body(self):
        self.server.respond("GET", "crew/locations", {"success": True, "crews": []})

        response = await self.transport.fetch_with_timeout("GET", "crew/locations")

        self.assertEqual(response.status, 200)
        self.assertTrue(response.ok)
        self.assertEqual(response.body, {"success": True, "crews": []})

    async def test_post_sends_json_with_content_type(self):
        self.server.respond("POST", "crew/location", {"success": True, "location_id": 1})

        await self.transport.fetch_with_timeout("POST", "crew/location", payload={"crew_id": 7})

        [request] = self.server.requests
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.json, {"crew_id": 7})
        self.assertEqual(request.headers["Content-Type"], "application/json")

    async def test_query_params_forwarded(self):
        self.server.respond("GET", "crew/7/status-history", {"success": True, "history": []})

        await self.transport.fetch_with_timeout("GET", "crew/7/status-history", params={"limit": 10})

        self.assertEqual(self.server.requests[0].query, {"limit": "10"})

    async def test_offline_sends_nothing(self):
        self.connectivity.set_online(False)

        with self.assertRaises(OfflineError) as ctx:
            await self.transport.fetch_with_timeout("GET", "crew/locations")

        self.assertEqual(ctx.exception.message, "No internet connection")
        self.assertEqual(ctx.exception.kind, ErrorKind.OFFLINE)
        self.assertEqual(self.server.requests, [])

    async def test_timeout_raises_distinct_error(self):
        transport = self.server.transport(timeout_ms=100)
        self.server.respond("GET", "jobs/active", {"success": True, "jobs": []}, delay=2)
        try:
            with self.assertRaises(RequestTimeoutError) as ctx:
                await transport.fetch_with_timeout("GET", "jobs/active")
        finally:
            await transport.close()

        self.assertEqual(ctx.exception.kind, ErrorKind.TIMEOUT)
        self.assertEqual(ctx.exception.timeout_ms, 100)
        self.assertEqual(
            ctx.exception.message, "Request timeout - server may be slow or unreachable"
        )

    async def test_http_error_status_is_not_raised(self):
        self.server.respond("GET", "dashboard/stats", {"success": False, "error": "db down"}, status=500)

        response = await self.transport.fetch_with_timeout("GET", "dashboard/stats")

        self.assertFalse(response.ok)
        self.assertEqual(response.status, 500)
        self.assertEqual(response.body["error"], "db down")

    async def test_html_error_page_gives_empty_body(self):
        self.server.respond("GET", "jobs/active", status=502, text="<html>Bad gateway</html>")

        response = await self.transport.fetch_with_timeout("GET", "jobs/active")

        self.assertEqual(response.status, 502)
        self.assertEqual(response.body, {})

    async def test_undecodable_error_page_gives_empty_body(self):
        self.server.respond("GET", "jobs/active", status=502, text=b"<html>\xff\xfe Bad gateway</html>")

        response = await self.transport.fetch_with_timeout("GET", "jobs/active")

        self.assertEqual(response.status, 502)
        self.assertEqual(response.body, {})

    async def test_non_json_success_is_invalid(self):
        self.server.respond("GET", "jobs/active", status=200, text="<html>login</html>")

        with self.assertRaises(InvalidResponseError) as ctx:
            await self.transport.fetch_with_timeout("GET", "jobs/active")

        self.assertEqual(ctx.exception.kind, ErrorKind.TRANSPORT)

    async def test_non_object_success_is_invalid(self):
        self.server.respond("GET", "jobs/active", [1, 2, 3])

        with self.assertRaises(InvalidResponseError):
            await self.transport.fetch_with_timeout("GET", "jobs/active")

    async def test_unsupported_method(self):
        with self.assertRaises(ValueError):
            await self.transport.fetch_with_timeout("DELETE", "jobs/active")

    async def test_url_for(self):
        self.assertEqual(
            self.transport.url_for("/crew/locations"), f"{self.server.base_url}/crew/locations"
        )


class TestTransportConnectionErrors(unittest.IsolatedAsyncioTestCase):

    async def test_connection_refused_is_transport_error(self):
        transport = RealtimeTransport(UNREACHABLE_URL, timeout_ms=2000)
        try:
            with self.assertRaises(TransportError) as ctx:
                await transport.fetch_with_timeout("GET", "crew/locations")
        finally:
            await transport.close()

        self.assertEqual(ctx.exception.kind, ErrorKind.TRANSPORT)
        self.assertTrue(ctx.exception.message.startswith("Network error"))

    async def test_shared_session_not_closed(self):
        async with aiohttp.ClientSession() as session:
            transport = RealtimeTransport(UNREACHABLE_URL, session=session)
            await transport.close()
            self.assertFalse(session.closed)
