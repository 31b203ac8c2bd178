"""Response envelope and resource models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


# --- Enums ---

class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


_TERMINAL_STATUSES = {TaskStatus.COMPLETED.value, TaskStatus.FAILED.value, TaskStatus.CANCELLED.value}


def _int_header(headers: dict[str, str], name: str) -> int | None:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


# --- Envelope ---

@dataclass
class RateLimitInfo:
    limit: int | None = None
    remaining: int | None = None
    reset: int | None = None  # epoch seconds

    @classmethod
    def from_headers(cls, headers: dict[str, str]) -> RateLimitInfo | None:
        lowered = {k.lower(): v for k, v in headers.items()}
        info = cls(
            limit=_int_header(lowered, "x-ratelimit-limit"),
            remaining=_int_header(lowered, "x-ratelimit-remaining"),
            reset=_int_header(lowered, "x-ratelimit-reset"),
        )
        if info.limit is None and info.remaining is None and info.reset is None:
            return None
        return info


@dataclass
class ApiError:
    code: str
    message: str
    details: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApiError:
        return cls(
            code=data.get("code", "UNKNOWN_ERROR"),
            message=data.get("message", ""),
            details=data.get("details"),
        )


@dataclass
class ApiResponse(Generic[T]):
    """Standard ``{success, data, message, timestamp, requestId}`` envelope."""

    success: bool = True
    data: T | None = None
    message: str = ""
    timestamp: str = ""
    request_id: str = ""
    status_code: int = 200
    next_cursor: str | None = None
    rate_limit: RateLimitInfo | None = None
    error: ApiError | None = None

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse[Any]:
        """Parse a decoded JSON body into an envelope.

        Bodies that are not an envelope (no ``success`` key) are wrapped as
        ``data`` so endpoints returning bare JSON still work.
        """
        headers = headers or {}
        rate_limit = RateLimitInfo.from_headers(headers)
        if not isinstance(payload, dict) or "success" not in payload:
            return cls(
                success=200 <= status_code < 300,
                data=payload,
                status_code=status_code,
                rate_limit=rate_limit,
            )

        data = payload.get("data")
        next_cursor = payload.get("nextCursor")
        if next_cursor is None and isinstance(data, dict) and "nextCursor" in data:
            next_cursor = data.get("nextCursor")
            if "items" in data:
                data = data["items"]
        error = payload.get("error")
        return cls(
            success=bool(payload.get("success")),
            data=data,
            message=payload.get("message") or "",
            timestamp=payload.get("timestamp") or "",
            request_id=payload.get("requestId") or "",
            status_code=status_code,
            next_cursor=next_cursor or None,
            rate_limit=rate_limit,
            error=ApiError.from_dict(error) if isinstance(error, dict) else None,
        )


@dataclass
class Page(Generic[T]):
    """One page of a cursor-paginated listing."""

    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None

    @property
    def has_more(self) -> bool:
        return bool(self.next_cursor)


# --- Resources ---

@dataclass
class Agent:
    id: str
    name: str = ""
    description: str = ""
    status: str = ""
    config: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Agent:
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            description=data.get("description") or "",
            status=data.get("status") or "",
            config=data.get("config") or {},
            created_at=data.get("createdAt") or data.get("created_at") or "",
            updated_at=data.get("updatedAt") or data.get("updated_at") or "",
            raw=data,
        )


@dataclass
class Task:
    id: str
    agent_id: str = ""
    status: str = TaskStatus.PENDING.value
    input: Any = None
    result: Any = None
    error: str | None = None
    created_at: str = ""
    updated_at: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_terminal(self) -> bool:
        return self.status in _TERMINAL_STATUSES

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        error = data.get("error")
        if isinstance(error, dict):
            error = error.get("message") or str(error)
        return cls(
            id=str(data.get("id") or data.get("taskId") or ""),
            agent_id=data.get("agentId") or data.get("agent_id") or "",
            status=data.get("status") or TaskStatus.PENDING.value,
            input=data.get("input"),
            result=data.get("result"),
            error=error,
            created_at=data.get("createdAt") or data.get("created_at") or "",
            updated_at=data.get("updatedAt") or data.get("updated_at") or "",
            raw=data,
        )
