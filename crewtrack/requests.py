"""
Low-level HTTP transport for the realtime API.

Every outbound call goes through RealtimeTransport.fetch_with_timeout, which
refuses to touch the network while the device is offline, bounds each call by
a single timeout, and classifies failures into the errors.py taxonomy.
HTTP status codes are *not* raised here; the api layer decides what they mean.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any

import aiohttp

from .connectivity import ConnectivityMonitor
from .const import REQUEST_TIMEOUT_MS
from .errors import InvalidResponseError, OfflineError, RequestTimeoutError, TransportError

_LOGGER = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT")


@dataclasses.dataclass(frozen=True)
class TransportResponse:
    """Status code plus the decoded JSON object of one response."""

    status: int
    body: dict = dataclasses.field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class RealtimeTransport:
    """Bounded-timeout HTTP access to one realtime API base URL."""

    def __init__(
        self,
        base_url: str,
        connectivity: ConnectivityMonitor | None = None,
        timeout_ms: int = REQUEST_TIMEOUT_MS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self.connectivity = connectivity or ConnectivityMonitor()
        self.timeout_ms = timeout_ms
        self._session = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def fetch_with_timeout(
        self,
        method: str,
        path: str,
        payload: dict | None = None,
        params: dict | None = None,
    ) -> TransportResponse:
        """
        Perform one request bounded by ``timeout_ms``.

        Args:
            method: HTTP method (GET, POST, PUT)
            path: Path relative to the base URL, e.g. "crew/locations"
            payload: JSON body for writes (optional)
            params: URL query parameters (optional)

        Returns:
            TransportResponse with the status and decoded JSON body

        Raises:
            OfflineError: connectivity monitor reports offline; nothing was sent
            RequestTimeoutError: the timeout elapsed and the request was aborted
            TransportError: connection-level failure
            InvalidResponseError: a 2xx answer whose body is not a JSON object
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = self.url_for(path)
        if not self.connectivity.is_online:
            _LOGGER.debug("Offline - not sending %s %s", method, url)
            raise OfflineError()

        headers = {"accept": "application/json"}
        kwargs: dict[str, Any] = {
            "headers": headers,
            "params": params,
            "timeout": aiohttp.ClientTimeout(total=self.timeout_ms / 1000),
        }
        if payload is not None:
            headers["Content-Type"] = "application/json"
            kwargs["json"] = payload

        session = self._get_session()
        try:
            async with session.request(method, url, **kwargs) as response:
                return await _process_response(response, url)
        except (asyncio.TimeoutError, TimeoutError) as exc:
            _LOGGER.warning(
                "Timeout on %s request to %s after %s ms", method, url, self.timeout_ms
            )
            raise RequestTimeoutError(timeout_ms=self.timeout_ms) from exc
        except (aiohttp.ClientError, OSError) as exc:
            _LOGGER.warning("Network error on %s request to %s: %s", method, url, exc)
            raise TransportError(f"Network error: {exc}") from exc

    async def close(self) -> None:
        """Close the HTTP session if this transport created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None


async def _process_response(response: aiohttp.ClientResponse, url: str) -> TransportResponse:
    """
    Decode the response body.

    Error responses that are not JSON (e.g. an HTML proxy page) come back with
    an empty body so the caller falls back to its default message.
    """
    content_type = response.headers.get("Content-Type", "")
    try:
        body = await response.json(content_type=None)
    except ValueError as exc:
        text = await response.text(errors="replace")
        _LOGGER.warning(
            "Received non-JSON response from %s: status %s, content-type: %s, body preview: %s",
            url, response.status, content_type, text[:200],
        )
        if 200 <= response.status < 300:
            raise InvalidResponseError(
                f"HTTP {response.status} with {content_type} "
                f"(expected application/json) from {url}"
            ) from exc
        return TransportResponse(response.status, {})

    if body is None:
        body = {}
    if not isinstance(body, dict):
        if 200 <= response.status < 300:
            raise InvalidResponseError(f"Expected a JSON object from {url}, got {type(body).__name__}")
        body = {}
    return TransportResponse(response.status, body)
