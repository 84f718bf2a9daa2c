"""Handheld device usage panel."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from activity_engine.schema import CanonicalEvent

UNKNOWN_DEVICE = "—"


@dataclass
class DeviceActivity:
    device_id: str
    total_events: int = 0
    last_event_time: Optional[datetime] = None
    last_operator_id: Optional[str] = None
    operator_ids: list[str] = field(default_factory=list)
    status: str = "no_activity"


def device_status(last_event_time: Optional[datetime], now: datetime, inactive_minutes: int = 30) -> str:
    if last_event_time is None:
        return "no_activity"
    if now - last_event_time <= timedelta(minutes=inactive_minutes):
        return "active"
    return "inactive"


def summarize_devices(
    events: Iterable[CanonicalEvent],
    now: datetime,
    inactive_minutes: Optional[int] = None,
    settings=None,
) -> list[DeviceActivity]:
    """Aggregate events per device, active devices first, then most recent use.

    The inactivity window is ``inactive_minutes`` when given, else
    ``settings.device_inactive_minutes``, else 30.
    """

    if inactive_minutes is None:
        inactive_minutes = settings.device_inactive_minutes if settings is not None else 30

    devices: dict[str, DeviceActivity] = {}
    for event in events:
        key = event.device_id or UNKNOWN_DEVICE
        device = devices.setdefault(key, DeviceActivity(device_id=key))
        device.total_events += 1
        if event.operator_id not in device.operator_ids:
            device.operator_ids.append(event.operator_id)
        if device.last_event_time is None or event.timestamp > device.last_event_time:
            device.last_event_time = event.timestamp
            device.last_operator_id = event.operator_id

    for device in devices.values():
        device.status = device_status(device.last_event_time, now, inactive_minutes)

    ordered = sorted(devices.values(), key=lambda d: d.last_event_time or datetime.min, reverse=True)
    return sorted(ordered, key=lambda d: d.status != "active")
