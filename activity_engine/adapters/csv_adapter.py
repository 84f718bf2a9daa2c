"""CSV adapter for device export files."""

from __future__ import annotations

import csv
from typing import Mapping, Optional

from activity_engine.categories import load_category_table
from activity_engine.config import EngineSettings, site_timezone
from activity_engine.normalizer import normalize_batch
from activity_engine.schema import CanonicalEvent, Rejection


def parse(
    file_path: str,
    user_map: Optional[Mapping[str, str]] = None,
    settings: Optional[EngineSettings] = None,
) -> tuple[list[CanonicalEvent], list[Rejection]]:
    """Parse a CSV export into canonical events and rejected rows.

    Column names may follow any of the known field aliases. Rows without a
    timestamp, operator or document id are returned as rejections.
    """

    settings = settings or EngineSettings()
    with open(file_path, newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return [], []

        rows = [{key.strip(): value for key, value in row.items() if key} for row in reader]

    return normalize_batch(
        rows,
        source_map=user_map,
        source="csv_import",
        require_document=True,
        tz=site_timezone(settings),
        table=load_category_table(settings),
    )
