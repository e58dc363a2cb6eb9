"""
RealtimeCoordinator — the poll scheduler behind a live operations dashboard.

Responsibilities:
- Own the RealtimeApi and EventBus for the lifetime of a dashboard session.
- Drive a fixed-interval timer; each firing runs one tick:
    crew locations → active jobs → dashboard stats
  and pushes each result to its topic as soon as it arrives.
- Count consecutive failed ticks; once MAX_CONSECUTIVE_ERRORS is reached the
  circuit opens and ticks only report the pause until the counter is reset.
- Skip the network entirely while the device is offline.
- Keep a RealtimeSnapshot of the latest successful reads.
"""
from __future__ import annotations

import asyncio
import dataclasses
import enum
import logging
from typing import Any, Callable

from .api import ApiResult, RealtimeApi
from .config import RealtimeConfig
from .connectivity import ConnectivityMonitor
from .const import (
    DEFAULT_POLL_INTERVAL_MS,
    MAX_CONSECUTIVE_ERRORS,
    TOPIC_ACTIVE_JOBS,
    TOPIC_CREW_LOCATIONS,
    TOPIC_DASHBOARD_STATS,
    TOPIC_ERROR,
)
from .errors import ApplicationError, CircuitOpenError, ErrorKind, OfflineError, RealtimeError
from .event_bus import EventBus
from .models import ActiveJob, CrewLocation
from .realtime_data import RealtimeSnapshot

__all__ = ["PollState", "RealtimeCoordinator", "RealtimeErrorEvent"]

_LOGGER = logging.getLogger(__name__)


class PollState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    CIRCUIT_OPEN = "circuit_open"


@dataclasses.dataclass(frozen=True)
class RealtimeErrorEvent:
    """Payload of the ``error`` topic."""

    kind: ErrorKind
    message: str
    consecutive_errors: int
    error: BaseException | None = None
    circuit_open: bool = False

    @classmethod
    def from_exception(
        cls, exc: BaseException, consecutive_errors: int, circuit_open: bool = False
    ) -> RealtimeErrorEvent:
        if isinstance(exc, RealtimeError):
            kind, message = exc.kind, exc.message
        else:
            kind, message = ErrorKind.UNEXPECTED, str(exc) or type(exc).__name__
        return cls(
            kind=kind,
            message=message,
            consecutive_errors=consecutive_errors,
            error=exc,
            circuit_open=circuit_open,
        )


class RealtimeCoordinator:
    """
    Polls the realtime API on a fixed interval and fans results out to
    subscribers.

    All state is touched only from the event loop, so no locking is needed.
    """

    def __init__(
        self,
        api: RealtimeApi,
        bus: EventBus | None = None,
        config: RealtimeConfig | None = None,
    ) -> None:
        self.api = api
        self.bus = bus or EventBus()

        self._max_errors = config.max_consecutive_errors if config else MAX_CONSECUTIVE_ERRORS
        self._default_interval_ms = config.poll_interval_ms if config else DEFAULT_POLL_INTERVAL_MS

        self._timer: asyncio.Task | None = None
        self._tick_task: asyncio.Task | None = None
        self._interval_ms: int | None = None
        self._consecutive_errors: int = 0

        # Snapshot starts empty; readers must handle missing data until the first tick
        self.data = RealtimeSnapshot()

        self._remove_connectivity_listener: Callable[[], None] | None = None
        if config is None or config.reset_on_reconnect:
            self._remove_connectivity_listener = self.connectivity.add_listener(
                self._on_connectivity_change
            )

    @classmethod
    def from_config(
        cls, config: RealtimeConfig, connectivity: ConnectivityMonitor | None = None
    ) -> RealtimeCoordinator:
        """Build the api, transport and coordinator from one config."""
        return cls(RealtimeApi.from_config(config, connectivity), config=config)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def connectivity(self) -> ConnectivityMonitor:
        return self.api.connectivity

    @property
    def state(self) -> PollState:
        if self._timer is None:
            return PollState.IDLE
        if self._consecutive_errors >= self._max_errors:
            return PollState.CIRCUIT_OPEN
        return PollState.RUNNING

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    @property
    def consecutive_errors(self) -> int:
        return self._consecutive_errors

    @property
    def max_consecutive_errors(self) -> int:
        return self._max_errors

    @property
    def interval_ms(self) -> int | None:
        return self._interval_ms

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self, topic: str, listener: Callable[[Any], None], replay: bool = False
    ) -> Callable[[], None]:
        """Register listener for topic; returns the unsubscribe function."""
        return self.bus.subscribe(topic, listener, replay=replay)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, interval_ms: int | None = None) -> None:
        """
        Start polling every interval_ms (default from config, 5000 ms).

        Must be called from a running event loop. A running timer is stopped
        first, so there is never more than one. The first tick fires after one
        full interval; use async_refresh() for an immediate load.
        """
        if interval_ms is None:
            interval_ms = self._default_interval_ms
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        if self._timer is not None:
            self.stop()

        self._interval_ms = interval_ms
        self._timer = asyncio.get_running_loop().create_task(
            self._run_timer(interval_ms / 1000)
        )
        _LOGGER.info("Real-time updates started (%s ms interval)", interval_ms)

    def stop(self) -> None:
        """
        Cancel the timer and reset the error counter.

        A tick already in flight is not cancelled and may still emit once.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            _LOGGER.info("Real-time updates stopped")
        self._interval_ms = None
        self._consecutive_errors = 0

    def reset_error_counter(self) -> None:
        """Close the circuit; the next tick performs a full read cycle."""
        self._consecutive_errors = 0
        _LOGGER.info("Error counter reset - resuming normal operation")

    async def async_refresh(self) -> None:
        """Run one tick now, or wait for the one already in flight."""
        if self._tick_task is None or self._tick_task.done():
            self._tick_task = asyncio.get_running_loop().create_task(self._async_tick())
        await self._tick_task

    async def async_shutdown(self) -> None:
        """Clean up all resources owned by this coordinator."""
        timer = self._timer
        self.stop()
        pending = [task for task in (timer, self._tick_task) if task is not None]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tick_task = None

        if self._remove_connectivity_listener is not None:
            self._remove_connectivity_listener()
            self._remove_connectivity_listener = None
        await self.api.close()

    # ------------------------------------------------------------------
    # Timer and tick
    # ------------------------------------------------------------------

    async def _run_timer(self, interval: float) -> None:
        """Fire a tick every interval seconds until cancelled."""
        while True:
            await asyncio.sleep(interval)
            self._fire_tick()

    def _fire_tick(self) -> None:
        if self._tick_task is not None and not self._tick_task.done():
            _LOGGER.debug("Previous real-time update still in flight - skipping tick")
            return
        self._tick_task = asyncio.get_running_loop().create_task(self._async_tick())

    async def _async_tick(self) -> None:
        """
        One scheduler tick.

        Circuit open: report the pause, fetch nothing, leave the counter alone.
        Offline: count the tick as failed, report it, fetch nothing.
        Otherwise: run the read cycle; any failure counts and is reported,
        a fully successful cycle resets the counter.
        """
        if self._consecutive_errors >= self._max_errors:
            _LOGGER.warning(
                "Too many consecutive errors (%s), pausing real-time updates",
                self._consecutive_errors,
            )
            self._emit_error(CircuitOpenError(self._consecutive_errors), circuit_open=True)
            return

        if not self.connectivity.is_online:
            self._consecutive_errors += 1
            _LOGGER.info(
                "Offline - skipping real-time update (%s/%s)",
                self._consecutive_errors, self._max_errors,
            )
            self._emit_error(OfflineError())
            return

        try:
            await self._run_read_cycle()
        except Exception as exc:  # noqa: BLE001
            self._consecutive_errors += 1
            _LOGGER.error(
                "Real-time update error (%s/%s): %s",
                self._consecutive_errors, self._max_errors, exc,
            )
            self._emit_error(exc)
            return

        self._consecutive_errors = 0

    async def _run_read_cycle(self) -> None:
        """
        Fetch the three resources in order, pushing each as it arrives.

        Every read runs even if an earlier one failed; the first failure is
        raised once all three results have been published.
        """
        failures: list[RealtimeError] = []

        crews = await self.api.get_crew_locations()
        if crews.success:
            self.data = dataclasses.replace(
                self.data,
                crews={crew.crew_id: crew for crew in crews.data or []},
                crews_updated=crews.timestamp,
            )
        self._publish(TOPIC_CREW_LOCATIONS, crews, failures)

        jobs = await self.api.get_active_jobs()
        if jobs.success:
            self.data = dataclasses.replace(
                self.data,
                jobs={job.id: job for job in jobs.data or []},
                jobs_updated=jobs.timestamp,
            )
        self._publish(TOPIC_ACTIVE_JOBS, jobs, failures)

        stats = await self.api.get_dashboard_stats()
        if stats.success:
            self.data = dataclasses.replace(
                self.data, stats=stats.data, stats_updated=stats.timestamp
            )
        self._publish(TOPIC_DASHBOARD_STATS, stats, failures)

        if failures:
            raise failures[0]

    def _publish(self, topic: str, result: ApiResult, failures: list[RealtimeError]) -> None:
        """Emit result on topic and record its failure, if any."""
        self.bus.emit(topic, result)
        if not result.success:
            failures.append(
                result.failure or ApplicationError(result.error or f"{topic} update failed")
            )

    def _emit_error(self, exc: BaseException, circuit_open: bool = False) -> None:
        event = RealtimeErrorEvent.from_exception(exc, self._consecutive_errors, circuit_open)
        self.data = dataclasses.replace(self.data, last_error=event)
        self.bus.emit(TOPIC_ERROR, event)

    def _on_connectivity_change(self, online: bool) -> None:
        if online and self._consecutive_errors:
            _LOGGER.info("Connectivity restored")
            self.reset_error_counter()

    # ------------------------------------------------------------------
    # Snapshot helpers
    # ------------------------------------------------------------------

    def get_crew(self, crew_id: int) -> CrewLocation | None:
        return self.data.crews.get(crew_id)

    def get_job(self, job_id: int) -> ActiveJob | None:
        return self.data.jobs.get(job_id)

    def jobs_for_crew(self, crew_id: int) -> list[ActiveJob]:
        """Active jobs currently assigned to crew_id."""
        return [job for job in self.data.jobs.values() if job.crew_id == crew_id]
