from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from activity_engine.errors import TimestampError
from activity_engine.timestamps import normalize_timestamp, parse_timestamp


def test_iso_timestamp_is_kept():
    assert parse_timestamp("2026-02-19T08:32:00") == datetime(2026, 2, 19, 8, 32)
    assert normalize_timestamp("2026-02-19T08:32:00") == "2026-02-19T08:32:00"
    assert parse_timestamp("2026-02-19 08:32:15") == datetime(2026, 2, 19, 8, 32, 15)


def test_day_first_device_format():
    assert parse_timestamp("19/02/2026 08:32:00") == datetime(2026, 2, 19, 8, 32)
    assert parse_timestamp("19/02/2026 08:32") == datetime(2026, 2, 19, 8, 32, 0)
    assert parse_timestamp("05/02/2026 10:00") == datetime(2026, 2, 5, 10, 0)


def test_locale_variant():
    assert parse_timestamp("Feb 19 2026 08:32") == datetime(2026, 2, 19, 8, 32)


def test_aware_timestamp_converted_to_site_time():
    assert parse_timestamp("2026-02-19T08:32:00Z") == datetime(2026, 2, 19, 8, 32)
    madrid = ZoneInfo("Europe/Madrid")
    assert parse_timestamp("2026-02-19T08:32:00+00:00", madrid) == datetime(2026, 2, 19, 9, 32)


def test_datetime_passthrough():
    value = datetime(2026, 2, 19, 8, 32)
    assert parse_timestamp(value) == value


@pytest.mark.parametrize("value", [None, "", "   ", "garbage", "08:32"])
def test_unparseable_values(value):
    with pytest.raises(TimestampError):
        parse_timestamp(value)
    assert normalize_timestamp(value) is None
