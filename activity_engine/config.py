"""Engine settings.

Values are read from ``ACTIVITY_*`` environment variables (or a ``.env``
file). Callers build an :class:`EngineSettings` and pass it to the entry
points that need it; nothing here is cached at import time.
"""

from __future__ import annotations

from typing import Optional
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Defaults for shift windows, anomaly rules and ingestion reports."""

    model_config = SettingsConfigDict(env_prefix="ACTIVITY_", env_file=".env", extra="ignore")

    # Shift defaults
    default_shift_start: str = "07:00"
    default_shift_end: str = "15:00"
    default_threshold_minutes: int = 30
    default_activity_preset: str = "operativa"

    # Status rules
    red_gap_count: int = 3
    red_gap_factor: float = 3.0

    # Heatmap
    slot_minutes: int = 15

    # Anomaly rules
    high_speed_interval_min: float = 2.0
    high_speed_min_events: int = 3

    # Device panel
    device_inactive_minutes: int = 30

    # Ingestion reports
    max_reported_errors: int = 10
    max_reported_import_errors: int = 20

    # Site timezone used to bring aware timestamps to wall-clock time
    timezone: str = "UTC"

    category_map_path: Optional[str] = None

    # Direct SQL source (pending credentials)
    sql_db_host: Optional[str] = None
    sql_db_port: int = 1433
    sql_db_user: Optional[str] = None
    sql_db_password: Optional[str] = None
    sql_db_name: Optional[str] = None

    log_level: str = "INFO"


def site_timezone(settings: EngineSettings) -> ZoneInfo:
    return ZoneInfo(settings.timezone)
