from datetime import datetime

from activity_engine.config import EngineSettings
from activity_engine.devices import UNKNOWN_DEVICE, device_status, summarize_devices
from activity_engine.schema import CanonicalEvent, Category

NOW = datetime(2026, 2, 19, 12, 0)


def event(clock, operator_id, device_id):
    return CanonicalEvent(
        timestamp=datetime.fromisoformat(f"2026-02-19T{clock}:00"),
        source_user_id=operator_id,
        operator_id=operator_id,
        operation_type="PICKING_FINISHED",
        operation_category=Category.PICKING,
        device_id=device_id,
    )


def test_device_status():
    assert device_status(None, NOW) == "no_activity"
    assert device_status(datetime(2026, 2, 19, 11, 30), NOW) == "active"
    assert device_status(datetime(2026, 2, 19, 11, 29), NOW) == "inactive"


def test_summarize_devices():
    events = [
        event("08:00", "op1", "PDA-1"),
        event("09:00", "op2", "PDA-1"),
        event("10:00", "op1", "PDA-2"),
        event("11:45", "op3", "PDA-3"),
        event("07:00", "op4", ""),
    ]
    devices = summarize_devices(events, NOW)

    assert [d.device_id for d in devices] == ["PDA-3", "PDA-2", "PDA-1", UNKNOWN_DEVICE]
    assert devices[0].status == "active"
    pda1 = devices[2]
    assert pda1.total_events == 2
    assert pda1.operator_ids == ["op1", "op2"]
    assert pda1.last_operator_id == "op2"
    assert pda1.last_event_time == datetime(2026, 2, 19, 9, 0)
    assert pda1.status == "inactive"


def test_summarize_devices_empty():
    assert summarize_devices([], NOW) == []


def test_inactivity_window_from_settings(monkeypatch):
    events = [event("11:15", "op1", "PDA-1")]
    assert summarize_devices(events, NOW)[0].status == "inactive"
    assert summarize_devices(events, NOW, settings=EngineSettings())[0].status == "inactive"

    monkeypatch.setenv("ACTIVITY_DEVICE_INACTIVE_MINUTES", "60")
    assert summarize_devices(events, NOW, settings=EngineSettings())[0].status == "active"


def test_explicit_window_overrides_settings():
    events = [event("11:15", "op1", "PDA-1")]
    settings = EngineSettings(device_inactive_minutes=60)
    assert summarize_devices(events, NOW, inactive_minutes=10, settings=settings)[0].status == "inactive"
