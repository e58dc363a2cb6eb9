"""
RealtimeApi — typed access to every realtime endpoint.

The per-resource modules hold the request/parse logic as plain functions;
this class binds them to one transport so hosts and the coordinator can
share a single HTTP session.
"""
from __future__ import annotations

from ..config import RealtimeConfig
from ..connectivity import ConnectivityMonitor
from ..const import DEFAULT_HISTORY_LIMIT, DEFAULT_MESSAGE_LIMIT
from ..models import (
    ActiveJob,
    CrewLocation,
    DashboardStats,
    HealthStatus,
    JobUpdate,
    LocationUpdate,
    MessageDraft,
    RealtimeMessage,
    StatusHistoryEntry,
    StatusUpdate,
)
from ..requests import RealtimeTransport
from . import crew, dashboard, health, jobs, messages
from .result import ApiResult

__all__ = ["ApiResult", "RealtimeApi"]


class RealtimeApi:
    """Every domain operation, bound to one transport. Methods never raise RealtimeError."""

    def __init__(self, transport: RealtimeTransport) -> None:
        self.transport = transport

    @classmethod
    def from_config(
        cls, config: RealtimeConfig, connectivity: ConnectivityMonitor | None = None
    ) -> RealtimeApi:
        return cls(
            RealtimeTransport(
                config.base_url,
                connectivity=connectivity,
                timeout_ms=config.request_timeout_ms,
            )
        )

    @property
    def connectivity(self) -> ConnectivityMonitor:
        return self.transport.connectivity

    # ------------------------------------------------------------------
    # Crew
    # ------------------------------------------------------------------

    async def update_crew_location(self, update: LocationUpdate) -> ApiResult[int]:
        return await crew.update_crew_location(self.transport, update)

    async def get_crew_locations(self) -> ApiResult[list[CrewLocation]]:
        return await crew.get_crew_locations(self.transport)

    async def update_crew_status(self, update: StatusUpdate) -> ApiResult[int]:
        return await crew.update_crew_status(self.transport, update)

    async def get_crew_status_history(
        self, crew_id: int, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> ApiResult[list[StatusHistoryEntry]]:
        return await crew.get_crew_status_history(self.transport, crew_id, limit)

    # ------------------------------------------------------------------
    # Jobs and dashboard
    # ------------------------------------------------------------------

    async def update_job(self, update: JobUpdate) -> ApiResult[None]:
        return await jobs.update_job(self.transport, update)

    async def get_active_jobs(self) -> ApiResult[list[ActiveJob]]:
        return await jobs.get_active_jobs(self.transport)

    async def get_dashboard_stats(self) -> ApiResult[DashboardStats]:
        return await dashboard.get_dashboard_stats(self.transport)

    # ------------------------------------------------------------------
    # Messages and health
    # ------------------------------------------------------------------

    async def send_message(self, draft: MessageDraft) -> ApiResult[int]:
        return await messages.send_message(self.transport, draft)

    async def get_messages(
        self, recipient_type: str, recipient_id: int, limit: int = DEFAULT_MESSAGE_LIMIT
    ) -> ApiResult[list[RealtimeMessage]]:
        return await messages.get_messages(self.transport, recipient_type, recipient_id, limit)

    async def check_health(self) -> ApiResult[HealthStatus]:
        return await health.check_health(self.transport)

    async def close(self) -> None:
        await self.transport.close()
