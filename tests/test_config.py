from datetime import date

from activity_engine.config import EngineSettings, site_timezone
from activity_engine.schema import ShiftWindow


def test_defaults():
    settings = EngineSettings()
    assert settings.default_threshold_minutes == 30
    assert settings.default_activity_preset == "operativa"
    assert settings.slot_minutes == 15
    assert str(site_timezone(settings)) == "UTC"


def test_environment_override(monkeypatch):
    monkeypatch.setenv("ACTIVITY_DEFAULT_THRESHOLD_MINUTES", "45")
    monkeypatch.setenv("ACTIVITY_DEFAULT_SHIFT_END", "14:00")
    settings = EngineSettings()
    assert settings.default_threshold_minutes == 45

    shift = ShiftWindow.from_settings("2026-02-19", settings)
    assert shift.day == date(2026, 2, 19)
    assert shift.threshold_minutes == 45
    assert shift.bounds()[1].hour == 14


def test_independent_instances():
    relaxed = EngineSettings(default_threshold_minutes=60)
    assert EngineSettings().default_threshold_minutes == 30
    assert relaxed.default_threshold_minutes == 60
