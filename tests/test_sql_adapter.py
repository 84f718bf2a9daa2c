from datetime import date

from activity_engine.adapters.sql_adapter import PENDING_CONFIG, sync_from_sql
from activity_engine.config import EngineSettings


def test_missing_credentials_are_reported():
    result = sync_from_sql(EngineSettings(sql_db_host="10.0.0.5"))
    assert result.status == PENDING_CONFIG
    assert result.missing == ["ACTIVITY_SQL_DB_USER", "ACTIVITY_SQL_DB_PASSWORD", "ACTIVITY_SQL_DB_NAME"]
    assert result.query_range is None


def test_configured_source_is_still_pending():
    settings = EngineSettings(
        sql_db_host="10.0.0.5",
        sql_db_user="reader",
        sql_db_password="secret",
        sql_db_name="alma",
    )
    result = sync_from_sql(settings, day=date(2026, 2, 18))
    assert result.status == PENDING_CONFIG
    assert result.missing == []
    assert result.query_range == ("2026-02-18T07:00:00", "2026-02-18T15:00:00")
