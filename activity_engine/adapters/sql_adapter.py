"""Direct SQL Server source for device operations.

The connector is waiting on read-only credentials for the device vendor's
database; until then every call reports ``pending_config`` instead of
failing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from activity_engine.config import EngineSettings
from activity_engine.schema import ShiftWindow

logger = logging.getLogger(__name__)

PENDING_CONFIG = "pending_config"

_REQUIRED = ("sql_db_host", "sql_db_user", "sql_db_password", "sql_db_name")


@dataclass
class SyncResult:
    status: str
    message: str
    missing: list[str] = field(default_factory=list)
    query_range: Optional[tuple[str, str]] = None


def missing_credentials(settings: EngineSettings) -> list[str]:
    return [f"ACTIVITY_{name.upper()}" for name in _REQUIRED if not getattr(settings, name)]


def sync_from_sql(
    settings: EngineSettings,
    day: Optional[date] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
) -> SyncResult:
    """Report the sync status and the range a sync of ``day`` would query."""

    missing = missing_credentials(settings)
    if missing:
        logger.warning("SQL sync not configured, missing %s", ", ".join(missing))
        return SyncResult(
            status=PENDING_CONFIG,
            message="SQL source not configured; set " + ", ".join(missing),
            missing=missing,
        )

    shift = ShiftWindow(
        day=day or date.today(),
        start_time=start_time or settings.default_shift_start,
        end_time=end_time or settings.default_shift_end,
        threshold_minutes=settings.default_threshold_minutes,
    )
    start, end = shift.bounds()
    # TODO: query the operations log once the vendor confirms table and column names.
    return SyncResult(
        status=PENDING_CONFIG,
        message="Credentials present; waiting for the vendor's operations table layout",
        query_range=(start.isoformat(), end.isoformat()),
    )
