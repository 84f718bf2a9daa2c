"""Cadence metrics over a time-sorted event list."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import numpy as np

from activity_engine.schema import CanonicalEvent


def round_half_up(value: float, places: int = 1) -> float:
    """Round the exact binary value half away from zero, so 1.45 (stored as
    1.4499...) rounds down and 0.25 rounds up."""

    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_cadence(sorted_events: list[CanonicalEvent]) -> tuple[Optional[float], Optional[float]]:
    """Return ``(orders_per_hour, avg_interval_min)``.

    Throughput is measured over the span from the first to the last event,
    so it is None when that span is zero. The average interval needs at
    least two events.
    """

    if not sorted_events:
        return None, None

    origin = sorted_events[0].timestamp
    seconds = np.array([(event.timestamp - origin).total_seconds() for event in sorted_events], dtype=float)
    intervals = np.diff(seconds)

    span_hours = float(seconds[-1] - seconds[0]) / 3600.0
    orders_per_hour = round_half_up(len(sorted_events) / span_hours) if span_hours > 0 else None

    avg_interval_min = round_half_up(float(intervals.mean()) / 60.0) if len(intervals) else None
    return orders_per_hour, avg_interval_min
