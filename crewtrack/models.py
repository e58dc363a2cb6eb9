"""
Wire models for the realtime API.

Pydantic models for crew locations, active jobs, dashboard aggregates,
messages and the write-intent payloads. Everything here is a server-owned
snapshot; the client never treats these as authoritative state.
"""
from __future__ import annotations

import json
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CrewStatus = Literal["online", "offline", "busy", "available", "break", "emergency"]
JobStatus = Literal["pending", "assigned", "en_route", "in_progress", "completed", "cancelled", "on_hold"]
JobStage = Literal[
    "preparation", "pre_wash", "washing", "rinsing", "drying",
    "interior", "detailing", "inspection", "completed",
]
SenderType = Literal["crew", "customer", "admin", "system"]
RecipientType = Literal["crew", "customer", "admin", "broadcast"]
MessageType = Literal["text", "location", "photo", "status_update", "alert"]
MessagePriority = Literal["low", "normal", "high", "urgent"]

# Forward path of a job; cancelled / on_hold branch off it
JOB_STATUS_FLOW: tuple[str, ...] = ("pending", "assigned", "en_route", "in_progress", "completed")
TERMINAL_JOB_STATUSES = frozenset({"completed", "cancelled"})


def can_transition_job(current: str, new: str) -> bool:
    """
    Return True if a job may move from current to new status.

    Forward moves along JOB_STATUS_FLOW are allowed (skipping steps too);
    cancelled and on_hold are reachable from any non-terminal status, and a
    job on hold may resume to any non-terminal forward status.
    """
    if current in TERMINAL_JOB_STATUSES or current == new:
        return False
    if new in ("cancelled", "on_hold"):
        return True
    if new not in JOB_STATUS_FLOW:
        return False
    if current == "on_hold":
        return True
    if current not in JOB_STATUS_FLOW:
        return False
    return JOB_STATUS_FLOW.index(new) > JOB_STATUS_FLOW.index(current)


class _ServerModel(BaseModel):
    """Base for models parsed from server responses; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # LEFT JOINs yield NULL for missing rows; let the field defaults apply
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class _WriteModel(BaseModel):
    """Base for write payloads; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# ==================== Crew ====================


class CrewLocation(_ServerModel):
    """Latest known position and state of one crew member."""

    crew_id: int
    name: str = ""
    phone: Optional[str] = None
    crew_group_id: Optional[int] = None
    group_name: Optional[str] = None
    group_color: Optional[str] = None
    status: CrewStatus = "offline"
    status_since: Optional[str] = None

    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    heading: Optional[float] = None
    speed: Optional[float] = None
    address: Optional[str] = None

    # Device telemetry, absent on a crew's first report
    battery_level: Optional[int] = None
    signal_strength: Optional[int] = None
    last_update: Optional[str] = None

    current_job_id: Optional[int] = None
    job_number: Optional[str] = None
    job_status: Optional[str] = None
    job_address: Optional[str] = None
    service_name: Optional[str] = None
    service_category: Optional[str] = None
    job_progress: Optional[float] = None

    @property
    def has_job(self) -> bool:
        return self.current_job_id is not None


class StatusHistoryEntry(_ServerModel):
    """One row of a crew's status history; extra columns are kept."""

    model_config = ConfigDict(extra="allow")

    crew_id: Optional[int] = None
    status: Optional[str] = None
    reason: Optional[str] = None
    started_at: Optional[str] = None
    ended_at: Optional[str] = None
    duration_minutes: Optional[int] = None

    @property
    def is_current(self) -> bool:
        return self.ended_at is None


class LocationUpdate(_WriteModel):
    """Position report sent by a crew device."""

    crew_id: int = Field(..., gt=0)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(None, gt=0, description="GPS accuracy in meters")
    altitude: Optional[float] = None
    heading: Optional[float] = Field(None, ge=0, le=360)
    speed: Optional[float] = Field(None, ge=0)
    address: Optional[str] = None
    battery_level: Optional[int] = Field(None, ge=0, le=100)
    signal_strength: Optional[int] = Field(None, ge=0, le=100)
    timestamp: Optional[str] = None


class StatusUpdate(_WriteModel):
    crew_id: int = Field(..., gt=0)
    status: CrewStatus
    reason: Optional[str] = None
    location_id: Optional[int] = None


# ==================== Jobs ====================


class ActiveJob(_ServerModel):
    """A job that is not yet closed, with its assigned crew snapshot."""

    id: int
    job_number: str
    status: JobStatus
    customer_id: Optional[int] = None
    service_address: str = ""
    service_latitude: Optional[float] = None
    service_longitude: Optional[float] = None

    scheduled_start: Optional[str] = None
    actual_start: Optional[str] = None
    estimated_duration: int = 0
    total_amount: float = 0.0
    special_instructions: Optional[str] = None

    crew_id: Optional[int] = None
    crew_name: Optional[str] = None
    crew_phone: Optional[str] = None
    crew_latitude: Optional[float] = None
    crew_longitude: Optional[float] = None
    crew_last_update: Optional[str] = None

    service_name: str = ""
    service_category: str = ""
    wash_type: str = ""
    service_duration: int = 0

    group_name: Optional[str] = None
    group_color: Optional[str] = None
    overall_progress: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES

    @property
    def has_crew(self) -> bool:
        return self.crew_id is not None


class JobUpdate(_WriteModel):
    job_id: int = Field(..., gt=0)
    status: JobStatus
    progress_percentage: Optional[float] = Field(None, ge=0, le=100)
    stage: Optional[JobStage] = None
    notes: Optional[str] = None
    photos: Optional[list[str]] = None


# ==================== Dashboard ====================


class CrewCounts(_ServerModel):
    total_crew: int = 0
    online_crew: int = 0
    busy_crew: int = 0
    available_crew: int = 0
    break_crew: int = 0
    offline_crew: int = 0


class JobCounts(_ServerModel):
    total_active_jobs: int = 0
    pending_jobs: int = 0
    assigned_jobs: int = 0
    en_route_jobs: int = 0
    in_progress_jobs: int = 0
    completed_today: int = 0


class RevenueTotals(_ServerModel):
    today_revenue: float = 0.0
    week_revenue: float = 0.0
    month_revenue: float = 0.0


class DashboardStats(_ServerModel):
    crew: CrewCounts = Field(default_factory=CrewCounts)
    jobs: JobCounts = Field(default_factory=JobCounts)
    revenue: RevenueTotals = Field(default_factory=RevenueTotals)


# ==================== Messages ====================


class MessageDraft(_WriteModel):
    """Fields of a message to send; the server assigns id and timestamps."""

    job_id: Optional[int] = None
    sender_type: SenderType
    sender_id: int
    recipient_type: RecipientType
    recipient_id: Optional[int] = None
    message_type: MessageType = "text"
    content: str
    metadata: Optional[dict[str, Any]] = None
    priority: MessagePriority = "normal"


class RealtimeMessage(_ServerModel):
    id: int
    job_id: Optional[int] = None
    sender_type: SenderType
    sender_id: int
    recipient_type: RecipientType
    recipient_id: Optional[int] = None
    message_type: MessageType
    content: str
    metadata: Optional[dict[str, Any]] = None
    priority: MessagePriority = "normal"
    read_at: Optional[str] = None
    delivered_at: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _decode_metadata(cls, value: Any) -> Any:
        # Stored as a JSON text column; some drivers hand it back undecoded
        if isinstance(value, str):
            try:
                value = json.loads(value) if value else None
            except ValueError:
                return {"raw": value}
        if value is not None and not isinstance(value, dict):
            return {"value": value}
        return value

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


# ==================== Health ====================


class HealthStatus(_ServerModel):
    status: str = "unknown"
    database: str = "unknown"
