"""
Health check of the realtime API and its database.

Unlike the other reads, an unhealthy server still answers with a meaningful
body (HTTP 500, ``status: "unhealthy"``), so the parsed HealthStatus is kept
on the failed result as well.
"""
import logging

from pydantic import ValidationError

from ..errors import ApplicationError, HttpError, RealtimeError
from ..models import HealthStatus
from ..requests import RealtimeTransport
from .common import error_message, extra_fields
from .result import ApiResult

_LOGGER = logging.getLogger(__name__)

FALLBACK_ERROR = "Health check failed"


def _parse_health(body: dict) -> HealthStatus | None:
    if "status" not in body and "database" not in body:
        return None
    try:
        return HealthStatus.model_validate(body)
    except ValidationError:
        return None


async def check_health(transport: RealtimeTransport) -> ApiResult[HealthStatus]:
    """Ask the server whether it and its database are reachable."""
    try:
        response = await transport.fetch_with_timeout("GET", "health")
    except RealtimeError as exc:
        _LOGGER.warning("Health check error: %s", exc.message)
        return ApiResult.fail(exc)

    body = response.body
    health = _parse_health(body)
    extra = extra_fields(body)

    if not response.ok:
        failure = HttpError(response.status, error_message(body, FALLBACK_ERROR), body)
    elif body.get("success") is False:
        failure = ApplicationError(error_message(body, FALLBACK_ERROR), body)
    else:
        return ApiResult.ok(health, timestamp=body.get("timestamp"), extra=extra)

    _LOGGER.warning(
        "Realtime API unhealthy (HTTP %s, database %s): %s",
        response.status, health.database if health else "unknown", failure.message,
    )
    return ApiResult.fail(failure, data=health, timestamp=body.get("timestamp"), extra=extra)
