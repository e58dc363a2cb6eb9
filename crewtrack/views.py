"""
Display helpers for crew/job data.

Responsibilities:
- Flatten CrewLocation records into map-marker view models.
- Great-circle distance between two coordinates.
- Human-readable durations and status colours.

Pure functions only; no I/O.
"""
from __future__ import annotations

import dataclasses
from math import asin, cos, radians, sin, sqrt
from typing import Iterable, Optional

from .const import (
    DEFAULT_CREW_RATING,
    DEFAULT_JOB_DURATION,
    DEFAULT_SERVICE_TYPE,
    DEFAULT_STATUS_COLOR,
    DEFAULT_VEHICLE_TYPE,
    DEFAULT_WASH_TYPE,
    EARTH_RADIUS_KM,
    STATUS_COLORS,
)
from .models import CrewLocation


@dataclasses.dataclass(frozen=True)
class MarkerLocation:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class MarkerJob:
    id: int
    customer: str
    vehicle_type: str
    service_type: str
    wash_type: str
    start_time: Optional[str]
    estimated_duration: int
    address: Optional[str]
    progress: float


@dataclasses.dataclass(frozen=True)
class CrewMarker:
    """One crew member as drawn on the live map."""

    id: str
    name: str
    phone: Optional[str]
    status: str
    location: MarkerLocation
    current_job: Optional[MarkerJob]
    group_id: str
    group_name: Optional[str]
    rating: float
    completed_jobs: int
    last_active: Optional[str]

    @property
    def color(self) -> str:
        return get_status_color(self.status)


def _marker_job(crew: CrewLocation) -> MarkerJob | None:
    if not crew.current_job_id:
        return None
    return MarkerJob(
        id=crew.current_job_id,
        customer=f"Job {crew.job_number}",
        vehicle_type=DEFAULT_VEHICLE_TYPE,
        service_type=crew.service_category or DEFAULT_SERVICE_TYPE,
        wash_type=DEFAULT_WASH_TYPE,
        start_time=crew.status_since,
        estimated_duration=DEFAULT_JOB_DURATION,
        address=crew.job_address or crew.address,
        progress=crew.job_progress or 0,
    )


def convert_crew_to_map_data(crews: Iterable[CrewLocation]) -> list[CrewMarker]:
    """Convert crew locations into map markers, filling display defaults."""
    return [
        CrewMarker(
            id=f"crew-{crew.crew_id}",
            name=crew.name,
            phone=crew.phone,
            status=crew.status,
            location=MarkerLocation(
                latitude=crew.latitude,
                longitude=crew.longitude,
                accuracy=crew.accuracy,
                timestamp=crew.last_update,
            ),
            current_job=_marker_job(crew),
            group_id=f"group-{crew.crew_group_id}",
            group_name=crew.group_name,
            rating=DEFAULT_CREW_RATING,
            completed_jobs=0,
            last_active=crew.last_update,
        )
        for crew in crews
    ]


def get_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres (haversine formula)."""
    d_lat = radians(lat2 - lat1)
    d_lon = radians(lon2 - lon1)
    a = sin(d_lat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lon / 2) ** 2
    c = 2 * asin(sqrt(a))
    return EARTH_RADIUS_KM * c


def format_duration(minutes: int) -> str:
    """90 → "1h 30m", 120 → "2h", 45 → "45m"."""
    if minutes < 60:
        return f"{minutes}m"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}m" if remaining > 0 else f"{hours}h"


def get_status_color(status: str) -> str:
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)
