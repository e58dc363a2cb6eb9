"""
RealtimeSnapshot — immutable copy of the latest data the coordinator fetched.

Pure data; nothing here touches the network.
"""
from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Optional

from .models import ActiveJob, CrewLocation, DashboardStats

if TYPE_CHECKING:
    from .coordinator import RealtimeErrorEvent


@dataclasses.dataclass(frozen=True)
class RealtimeSnapshot:
    """
    Latest successful read of each resource, plus the last error reported.

    The coordinator swaps in a new instance with dataclasses.replace();
    readers may hold on to an old one safely.
    """

    # crew_id → latest location
    crews: dict[int, CrewLocation] = dataclasses.field(default_factory=dict)

    # job id → job, in the server's priority order
    jobs: dict[int, ActiveJob] = dataclasses.field(default_factory=dict)

    stats: Optional[DashboardStats] = None

    # Server timestamps of the reads above
    crews_updated: Optional[str] = None
    jobs_updated: Optional[str] = None
    stats_updated: Optional[str] = None

    last_error: Optional["RealtimeErrorEvent"] = None
