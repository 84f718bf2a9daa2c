"""JSON adapter for batch import files."""

from __future__ import annotations

import json
from typing import Mapping, Optional

from activity_engine.categories import load_category_table
from activity_engine.config import EngineSettings, site_timezone
from activity_engine.normalizer import normalize_batch
from activity_engine.schema import CanonicalEvent, Operator, Rejection


def parse(
    file_path: str,
    user_map: Optional[Mapping[str, str]] = None,
    settings: Optional[EngineSettings] = None,
) -> tuple[list[CanonicalEvent], list[Rejection]]:
    """Parse a JSON import file into canonical events and rejected records.

    The file holds a list of records or an object with ``events`` and an
    optional ``user_map``; an explicit ``user_map`` argument wins.
    """

    settings = settings or EngineSettings()
    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, dict) and isinstance(payload.get("events"), list):
        records = payload["events"]
        user_map = user_map if user_map is not None else payload.get("user_map")
    elif isinstance(payload, list):
        records = payload
    else:
        raise ValueError("JSON payload must be a list of objects or contain an 'events' list")

    return normalize_batch(
        records,
        source_map=user_map,
        source="json_import",
        require_document=True,
        tz=site_timezone(settings),
        table=load_category_table(settings),
    )


def parse_operators(file_path: str) -> list[Operator]:
    """Load operators from a JSON list of ``{id, name, daily_target?, active?}``."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("Operators file must be a list of objects")

    operators = []
    for index, item in enumerate(payload, start=1):
        if not item.get("id") or not item.get("name"):
            raise ValueError(f"Operator {index}: missing id or name")
        target = item.get("daily_target")
        operators.append(
            Operator(
                id=str(item["id"]).strip(),
                name=str(item["name"]).strip(),
                daily_target=int(target) if target not in (None, "") else None,
                active=bool(item.get("active", True)),
            )
        )
    return operators
