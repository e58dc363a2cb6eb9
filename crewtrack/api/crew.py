"""
Crew location and status operations.

Responsible for:
- Reporting a crew member's position and reading every crew's latest position
- Changing a crew member's status and reading the status history
"""
import logging

from ..const import DEFAULT_HISTORY_LIMIT
from ..models import CrewLocation, LocationUpdate, StatusHistoryEntry, StatusUpdate
from ..requests import RealtimeTransport
from .common import call_api
from .result import ApiResult

_LOGGER = logging.getLogger(__name__)


async def update_crew_location(transport: RealtimeTransport, update: LocationUpdate) -> ApiResult[int]:
    """
    Report a crew position; data is the new location_id.

    Corresponding CURL command:
    curl -X 'POST' '<base>/crew/location' \
      -H 'Content-Type: application/json' \
      -d '{"crew_id": 7, "latitude": 14.55, "longitude": 121.02}'
    """
    return await call_api(
        transport,
        "POST",
        "crew/location",
        "Failed to update location",
        lambda body: body.get("location_id"),
        payload=update.to_payload(),
        payload_key="location_id",
    )


def parse_crew_locations(body: dict) -> list[CrewLocation]:
    """
    Build CrewLocation objects from a ``crews`` body.

    Crews without a recent position come back with NULL coordinates from
    the server; they have no marker to show and are left out, as are rows
    that are not objects at all.
    """
    crews = []
    for raw in body["crews"]:
        if not isinstance(raw, dict):
            _LOGGER.warning("Skipping malformed crew row: %r", raw)
            continue
        if raw.get("latitude") is None or raw.get("longitude") is None:
            _LOGGER.debug("Skipping crew %s without a recent position", raw.get("crew_id"))
            continue
        crews.append(CrewLocation.model_validate(raw))
    return crews


async def get_crew_locations(transport: RealtimeTransport) -> ApiResult[list[CrewLocation]]:
    """Latest position of every active crew member."""
    return await call_api(
        transport,
        "GET",
        "crew/locations",
        "Failed to get crew locations",
        parse_crew_locations,
        payload_key="crews",
    )


async def update_crew_status(transport: RealtimeTransport, update: StatusUpdate) -> ApiResult[int]:
    """Change a crew member's status; data is the new status_id."""
    return await call_api(
        transport,
        "POST",
        "crew/status",
        "Failed to update status",
        lambda body: body.get("status_id"),
        payload=update.to_payload(),
        payload_key="status_id",
    )


async def get_crew_status_history(
    transport: RealtimeTransport, crew_id: int, limit: int = DEFAULT_HISTORY_LIMIT
) -> ApiResult[list[StatusHistoryEntry]]:
    """Most recent status periods of one crew member, newest first."""
    return await call_api(
        transport,
        "GET",
        f"crew/{crew_id}/status-history",
        "Failed to get status history",
        lambda body: [StatusHistoryEntry.model_validate(row) for row in body.get("history", [])],
        params={"limit": limit},
        payload_key="history",
    )
