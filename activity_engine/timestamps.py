"""Timestamp parsing for the formats sent by scanner devices and imports."""

from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo

from dateutil import parser

from activity_engine.errors import TimestampError

_DAY_FIRST = re.compile(r"(\d{2})/(\d{2})/(\d{4})\s+(\d{2}):(\d{2})(?::(\d{2}))?")

# Two defaults that differ in every date field; a value parsed identically
# under both carried its own year, month and day.
_PROBE_DEFAULTS = (datetime(2000, 1, 1), datetime(2004, 2, 2))


def _to_wall_clock(value: datetime, tz: Optional[tzinfo]) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(tz or ZoneInfo("UTC")).replace(tzinfo=None)


def _parse_generic(text: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    try:
        first, second = (parser.parse(text, dayfirst=True, default=d) for d in _PROBE_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return first


def _parse_day_first(text: str) -> Optional[datetime]:
    match = _DAY_FIRST.search(text)
    if not match:
        return None
    day, month, year, hour, minute, second = match.groups()
    try:
        return datetime(int(year), int(month), int(day), int(hour), int(minute), int(second or "00"))
    except ValueError:
        return None


def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> datetime:
    """Parse ``value`` into a naive wall-clock datetime.

    Tries ISO-8601 and other generic date-time layouts first, then the
    ``DD/MM/YYYY HH:MM[:SS]`` device layout. Aware values are converted to
    ``tz`` (UTC when omitted) before the offset is dropped.
    """

    if value is None:
        raise TimestampError("unparseable timestamp: empty value")
    if isinstance(value, datetime):
        return _to_wall_clock(value, tz)

    text = str(value).strip()
    if not text:
        raise TimestampError("unparseable timestamp: empty value")

    parsed = _parse_generic(text) or _parse_day_first(text)
    if parsed is None:
        raise TimestampError(f"unparseable timestamp: {text!r}")
    return _to_wall_clock(parsed, tz)


def normalize_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[str]:
    """Return the canonical ISO-8601 form of ``value``, or None if unparseable."""

    try:
        return parse_timestamp(value, tz).isoformat()
    except TimestampError:
        return None
