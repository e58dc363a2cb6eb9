"""
The client's notion of "is this device online".

The host flips the flag from whatever network signal it has (OS events, a
probe loop, a UI toggle); the transport consults it before every request
and the coordinator listens for the offline→online edge.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

import aiohttp

from .const import PROBE_TIMEOUT

_LOGGER = logging.getLogger(__name__)


class ConnectivityMonitor:
    """Holds the online flag and notifies listeners when it changes."""

    def __init__(self, online: bool = True) -> None:
        self._online = online
        self._listeners: list[Callable[[bool], None]] = []

    @property
    def is_online(self) -> bool:
        return self._online

    def set_online(self, online: bool) -> None:
        """Update the flag; listeners only hear about actual changes."""
        if online == self._online:
            return
        self._online = online
        _LOGGER.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in list(self._listeners):
            try:
                listener(online)
            except Exception as exc:  # noqa: BLE001
                _LOGGER.error("Error in connectivity listener: %s", exc)

    def add_listener(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        """Register listener(online); returns a function that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def async_probe(self, url: str, timeout: int = PROBE_TIMEOUT) -> bool:
        """
        Check whether url is reachable by sending a HEAD request.

        Any HTTP answer below 500 counts as reachable. The online flag is
        updated to the outcome, so listeners fire on transitions.
        """
        reachable = False
        try:
            timeout_config = aiohttp.ClientTimeout(total=timeout)
            async with aiohttp.ClientSession(timeout=timeout_config) as session:
                async with session.head(url) as response:
                    reachable = response.status < 500
                    if not reachable:
                        _LOGGER.warning("Probe URL is not healthy (status %s)", response.status)
        except (asyncio.TimeoutError, TimeoutError):
            _LOGGER.warning("Timeout while probing %s", url)
        except aiohttp.ClientError as exc:
            _LOGGER.warning("Probe of %s failed: %s", url, exc)

        self.set_online(reachable)
        return reachable
