"""Real-time crew and job tracking client for the car-wash operations dashboard."""
import logging

from .api import ApiResult, RealtimeApi
from .config import RealtimeConfig
from .connectivity import ConnectivityMonitor
from .const import (
    TOPIC_ACTIVE_JOBS,
    TOPIC_CREW_LOCATIONS,
    TOPIC_DASHBOARD_STATS,
    TOPIC_ERROR,
    VERSION,
)
from .coordinator import PollState, RealtimeCoordinator, RealtimeErrorEvent
from .errors import ErrorKind, RealtimeError
from .event_bus import EventBus
from .realtime_data import RealtimeSnapshot

__version__ = VERSION

__all__ = [
    "ApiResult",
    "ConnectivityMonitor",
    "ErrorKind",
    "EventBus",
    "PollState",
    "RealtimeApi",
    "RealtimeConfig",
    "RealtimeCoordinator",
    "RealtimeError",
    "RealtimeErrorEvent",
    "RealtimeSnapshot",
    "TOPIC_ACTIVE_JOBS",
    "TOPIC_CREW_LOCATIONS",
    "TOPIC_DASHBOARD_STATS",
    "TOPIC_ERROR",
    "async_create_coordinator",
]

_LOGGER = logging.getLogger(__name__)


async def async_create_coordinator(
    config: RealtimeConfig | dict,
    connectivity: ConnectivityMonitor | None = None,
    initial_refresh: bool = True,
) -> RealtimeCoordinator:
    """
    Build a coordinator and optionally load the first snapshot.

    A failed initial load is reported on the ``error`` topic like any other
    tick; it does not prevent the coordinator from being returned.
    """
    if not isinstance(config, RealtimeConfig):
        config = RealtimeConfig.from_dict(config)
    coordinator = RealtimeCoordinator.from_config(config, connectivity)
    if initial_refresh:
        health = await coordinator.api.check_health()
        if not health.success:
            _LOGGER.warning("Realtime API not healthy at startup: %s", health.error)
        await coordinator.async_refresh()
    return coordinator
