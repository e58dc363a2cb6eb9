"""
The uniform envelope every domain operation returns.

Mirrors the server's ``{success, <payload>, error, timestamp}`` bodies while
keeping the structured failure next to the plain message.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Generic, Optional, TypeVar

from ..errors import ErrorKind, RealtimeError

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class ApiResult(Generic[T]):
    """Outcome of one API call. Never raised, always returned."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    failure: Optional[RealtimeError] = None
    timestamp: Optional[str] = None
    # Remaining top-level keys of the response body (e.g. "message")
    extra: dict[str, Any] = dataclasses.field(default_factory=dict)

    @classmethod
    def ok(cls, data: T | None = None, timestamp: str | None = None, extra: dict | None = None) -> ApiResult[T]:
        return cls(success=True, data=data, timestamp=timestamp, extra=extra or {})

    @classmethod
    def fail(
        cls,
        failure: RealtimeError,
        data: T | None = None,
        timestamp: str | None = None,
        extra: dict | None = None,
    ) -> ApiResult[T]:
        return cls(
            success=False,
            data=data,
            error=failure.message,
            failure=failure,
            timestamp=timestamp,
            extra=extra or {},
        )

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.failure.kind if self.failure is not None else None

    def __bool__(self) -> bool:
        return self.success
