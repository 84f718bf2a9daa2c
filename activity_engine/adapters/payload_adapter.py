"""Webhook-style payload ingestion.

A payload is a list of records, an object with an ``events`` list, or one
bare record. Objects may also carry a ``user_map`` (device user id ->
operator id) and a ``source`` tag.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from activity_engine.categories import load_category_table
from activity_engine.config import EngineSettings, site_timezone
from activity_engine.errors import PayloadError
from activity_engine.normalizer import normalize_batch
from activity_engine.schema import CanonicalEvent, Rejection

logger = logging.getLogger(__name__)

_SINGLE_RECORD_KEYS = ("timestamp", "user_id", "usuario")


@dataclass
class IngestReport:
    imported: int
    skipped: int
    errors: list[Rejection]
    events: list[CanonicalEvent] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "imported": self.imported,
            "skipped": self.skipped,
            "errors": [{"raw": e.raw, "reason": e.reason} for e in self.errors],
        }


def build_report(events: list[CanonicalEvent], rejections: list[Rejection], max_errors: int) -> IngestReport:
    """Counts plus at most ``max_errors`` sample rejections."""

    return IngestReport(
        imported=len(events),
        skipped=len(rejections),
        errors=rejections[:max_errors],
        events=events,
    )


def extract_raw_events(body: Any) -> list:
    if isinstance(body, list):
        records = body
    elif isinstance(body, dict) and isinstance(body.get("events"), list):
        records = body["events"]
    elif isinstance(body, dict) and any(body.get(key) for key in _SINGLE_RECORD_KEYS):
        records = [body]
    else:
        raise PayloadError("No events found in payload")

    if not records:
        raise PayloadError("No events provided")
    return records


def ingest_payload(
    body: Any,
    store=None,
    settings: Optional[EngineSettings] = None,
    require_document: bool = False,
    default_source: str = "webhook",
) -> IngestReport:
    """Normalize a payload and bulk-insert the accepted events into ``store``."""

    settings = settings or EngineSettings()
    records = extract_raw_events(body)

    options = body if isinstance(body, dict) else {}
    user_map = options.get("user_map") or {}
    source = options.get("source") or default_source

    events, rejections = normalize_batch(
        records,
        source_map=user_map,
        source=source,
        require_document=require_document,
        tz=site_timezone(settings),
        table=load_category_table(settings),
    )

    if store is not None and events:
        store.bulk_insert_events(events)

    max_errors = settings.max_reported_import_errors if require_document else settings.max_reported_errors
    report = build_report(events, rejections, max_errors)
    logger.info("Ingested %s payload: %d imported, %d skipped", source, report.imported, report.skipped)
    return report
