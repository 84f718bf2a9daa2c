"""Display helpers for report output."""

from __future__ import annotations

from datetime import datetime
from typing import Optional


def format_time(value: Optional[datetime]) -> str:
    if value is None:
        return "—"
    return value.strftime("%H:%M")


def format_duration(minutes: Optional[float]) -> str:
    """``"X min"`` below an hour, ``"Xh Ym"`` above."""

    if minutes is None:
        return "—"
    if minutes < 60:
        return f"{round(minutes)} min"
    hours = int(minutes // 60)
    return f"{hours}h {round(minutes % 60)}m"
