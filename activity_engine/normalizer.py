"""Raw device record -> canonical event mapping."""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import tzinfo
from typing import Any, Iterable, Mapping, Optional

from activity_engine.categories import DEFAULT_CATEGORY_TABLE, CategoryTable
from activity_engine.errors import TimestampError
from activity_engine.schema import CanonicalEvent, Rejection
from activity_engine.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

REASON_TIMESTAMP = "invalid or missing timestamp"
REASON_SOURCE_ID = "missing source id"
REASON_OPERATOR_DOCUMENT = "missing operator/document id"
REASON_NOT_OBJECT = "record is not an object"

# Field names used by the different device-software versions and exports,
# probed in order; the first non-empty value wins.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "event_id": ("id", "event_id", "eventId"),
    "timestamp": ("timestamp", "fecha_hora", "FECHA_HORA", "datetime"),
    "user_id": ("user_id", "usuario", "USUARIO", "userId"),
    "operation_type": ("operation_type", "tipo_op", "TIPO_OP", "type", "action"),
    "document_id": ("document_id", "documento", "DOCUMENTO", "order_id", "orderId", "picking_id"),
    "device_id": ("device_id", "dispositivo", "DISPOSITIVO", "pda_id", "pdaId"),
    "app_version": ("app_version", "version", "apk_version"),
}


def _first_present(raw: Mapping[str, Any], aliases: Iterable[str]) -> Any:
    for alias in aliases:
        value = raw.get(alias)
        if value not in (None, ""):
            return value
    return None


def _text(raw: Mapping[str, Any], field: str, aliases: Mapping[str, tuple[str, ...]]) -> str:
    value = _first_present(raw, aliases[field])
    return "" if value is None else str(value).strip()


def _content_id(raw: Mapping[str, Any]) -> str:
    digest = hashlib.sha1(json.dumps(raw, sort_keys=True, default=str).encode("utf-8"))
    return digest.hexdigest()[:16]


def normalize_event(
    raw: Mapping[str, Any],
    source_map: Optional[Mapping[str, str]] = None,
    source: str = "webhook",
    require_document: bool = False,
    tz: Optional[tzinfo] = None,
    table: CategoryTable = DEFAULT_CATEGORY_TABLE,
    aliases: Mapping[str, tuple[str, ...]] = FIELD_ALIASES,
) -> CanonicalEvent | Rejection:
    """Map one raw record onto a :class:`CanonicalEvent`.

    Returns a :class:`Rejection` instead when the record is not a mapping
    or has no usable timestamp or user. With ``require_document`` (file imports) a record
    must also resolve to an operator and carry a document id.
    """

    if not isinstance(raw, Mapping):
        return Rejection(raw=raw, reason=REASON_NOT_OBJECT)

    source_map = source_map or {}

    try:
        timestamp = parse_timestamp(_first_present(raw, aliases["timestamp"]), tz)
    except TimestampError:
        return Rejection(raw=raw, reason=REASON_TIMESTAMP)

    source_user_id = _text(raw, "user_id", aliases)
    operator_id = str(source_map.get(source_user_id) or source_user_id)
    document_id = _text(raw, "document_id", aliases)

    if require_document:
        if not operator_id or not document_id:
            return Rejection(raw=raw, reason=REASON_OPERATOR_DOCUMENT)
    elif not source_user_id:
        return Rejection(raw=raw, reason=REASON_SOURCE_ID)

    operation_type = _text(raw, "operation_type", aliases)
    return CanonicalEvent(
        timestamp=timestamp,
        source_user_id=source_user_id,
        operator_id=operator_id,
        operation_type=operation_type,
        operation_category=table.classify(operation_type),
        document_id=document_id,
        device_id=_text(raw, "device_id", aliases),
        source=source,
        raw_payload=dict(raw),
        event_id=_text(raw, "event_id", aliases) or _content_id(raw),
        app_version=_text(raw, "app_version", aliases),
    )


def normalize_batch(
    raws: Iterable[Any],
    source_map: Optional[Mapping[str, str]] = None,
    source: str = "webhook",
    require_document: bool = False,
    tz: Optional[tzinfo] = None,
    table: CategoryTable = DEFAULT_CATEGORY_TABLE,
) -> tuple[list[CanonicalEvent], list[Rejection]]:
    """Normalize a batch, splitting accepted events from rejections."""

    events: list[CanonicalEvent] = []
    rejections: list[Rejection] = []
    for index, raw in enumerate(raws):
        result = normalize_event(raw, source_map, source, require_document, tz, table)
        if isinstance(result, Rejection):
            logger.debug("Record %d rejected: %s", index, result.reason)
            rejections.append(result)
        else:
            events.append(result)

    logger.info("Normalized %s batch: %d accepted, %d rejected", source, len(events), len(rejections))
    return events, rejections
