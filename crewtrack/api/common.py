"""
Shared request/normalise helper for the domain operations.

Each operation supplies a path, a fallback error message and a parser for
the success body; call_api turns every RealtimeError into a failed ApiResult.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from ..errors import ApplicationError, HttpError, InvalidResponseError, RealtimeError
from ..requests import RealtimeTransport
from .result import ApiResult

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

# Keys that ApiResult carries in dedicated fields
_ENVELOPE_KEYS = frozenset({"success", "error", "timestamp"})


def error_message(body: dict, fallback: str) -> str:
    """Server-supplied ``error`` string, or the fallback if absent."""
    message = body.get("error")
    if not message:
        return fallback
    return message if isinstance(message, str) else str(message)


def extra_fields(body: dict, payload_key: str | None = None) -> dict[str, Any]:
    return {
        key: value
        for key, value in body.items()
        if key not in _ENVELOPE_KEYS and key != payload_key
    }


async def call_api(
    transport: RealtimeTransport,
    method: str,
    path: str,
    fallback_error: str,
    parse: Callable[[dict], T],
    payload: dict | None = None,
    params: dict | None = None,
    payload_key: str | None = None,
) -> ApiResult[T]:
    """
    Perform one call and normalise the outcome.

    Args:
        transport: Transport bound to the realtime API base URL
        method: HTTP method
        path: Path relative to the base URL
        fallback_error: Message used when the server gives none; also the log prefix
        parse: Builds the typed payload from a success body
        payload: JSON body for writes (optional)
        params: Query parameters (optional)
        payload_key: Body key consumed by parse, left out of ``extra``

    Returns:
        ApiResult with ``data`` on success, or ``error``/``failure`` set
    """
    try:
        response = await transport.fetch_with_timeout(method, path, payload=payload, params=params)
        body = response.body
        if not response.ok:
            raise HttpError(response.status, error_message(body, fallback_error), body)
        if body.get("success") is False:
            raise ApplicationError(error_message(body, fallback_error), body)
        try:
            data = parse(body)
        except (ValidationError, AttributeError, KeyError, TypeError, ValueError) as exc:
            raise InvalidResponseError(
                f"{fallback_error}: unexpected response format"
            ) from exc
    except RealtimeError as exc:
        _LOGGER.warning("%s: %s", fallback_error, exc.message)
        return ApiResult.fail(exc)

    return ApiResult.ok(
        data,
        timestamp=body.get("timestamp"),
        extra=extra_fields(body, payload_key),
    )
