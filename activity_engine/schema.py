"""Core data schema for operator activity events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Optional


class Category(str, Enum):
    """Canonical bucket for a device operation type."""

    PICKING = "PICKING"
    MOVE_BOBINA = "MOVE_BOBINA"
    MOVE_LOTE = "MOVE_LOTE"
    INVENTORY = "INVENTORY"
    ENTRY = "ENTRY"
    WASTE = "WASTE"
    TARE = "TARE"
    PRINT = "PRINT"
    CONFIG = "CONFIG"
    AUTH = "AUTH"
    OTHER = "OTHER"


class Status(str, Enum):
    """Shift activity status of one operator."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    NONE = "none"


@dataclass
class CanonicalEvent:
    """Normalized event record used by all analytics modules."""

    timestamp: datetime
    source_user_id: str
    operator_id: str
    operation_type: str
    operation_category: Category
    document_id: str = ""
    device_id: str = ""
    source: str = "webhook"
    raw_payload: dict[str, Any] = field(default_factory=dict)
    event_id: str = ""
    app_version: str = ""


@dataclass
class Rejection:
    """A raw record that could not be normalized, with the reason."""

    raw: Any
    reason: str


@dataclass
class Operator:
    id: str
    name: str
    daily_target: Optional[int] = None
    active: bool = True


def _parse_clock(value: str) -> time:
    hour, minute = value.strip().split(":")[:2]
    return time(int(hour), int(minute))


@dataclass
class ShiftWindow:
    """Working-hours interval of one calendar day.

    ``start_time`` and ``end_time`` are local "HH:MM" strings. An end time at
    or before the start time means the shift runs past midnight.
    """

    day: date
    start_time: str
    end_time: str
    threshold_minutes: float
    activity_categories: Optional[tuple[Category, ...]] = None

    def bounds(self) -> tuple[datetime, datetime]:
        """Return ``(shift_start, shift_end)`` as wall-clock datetimes."""

        start = datetime.combine(self.day, _parse_clock(self.start_time))
        end = datetime.combine(self.day, _parse_clock(self.end_time))
        if end <= start:
            end += timedelta(days=1)
        return start, end

    @classmethod
    def from_settings(cls, day, settings, activity_categories=None) -> "ShiftWindow":
        """Build the default shift of ``day`` from :class:`EngineSettings`."""

        if isinstance(day, str):
            day = date.fromisoformat(day)
        return cls(
            day=day,
            start_time=settings.default_shift_start,
            end_time=settings.default_shift_end,
            threshold_minutes=settings.default_threshold_minutes,
            activity_categories=activity_categories,
        )


@dataclass(frozen=True)
class Gap:
    start: datetime
    end: datetime
    minutes: float


@dataclass
class OperatorShiftSummary:
    """Per-operator activity figures for one shift, recomputed per query."""

    operator_id: str
    operator_name: str
    total_orders: int
    activity_events: int
    first_close: Optional[datetime]
    last_close: Optional[datetime]
    gaps: list[Gap]
    max_gap: Optional[float]
    status: Status
    orders_per_hour: Optional[float]
    avg_interval_min: Optional[float]
    events: list[CanonicalEvent] = field(default_factory=list)
    daily_target: Optional[int] = None

    @property
    def gap_count(self) -> int:
        return len(self.gaps)

    @property
    def in_target(self) -> Optional[bool]:
        if not self.daily_target:
            return None
        return self.total_orders >= self.daily_target


@dataclass(frozen=True)
class Anomaly:
    id: str
    type: str
    severity: str
    title: str
    description: str
    related_ids: tuple[str, ...]
