"""Cross-operator anomaly detection over a period's events.

Rules are independent; one event may feed several anomalies. The result is
recomputed from scratch on each call and its order depends only on the
input order, with errors ahead of warnings.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from activity_engine.cadence import compute_cadence
from activity_engine.schema import Anomaly, CanonicalEvent, Operator, ShiftWindow

logger = logging.getLogger(__name__)

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

DUPLICATE_ORDER = "duplicate_order"
SHARED_DEVICE = "shared_device"
HIGH_SPEED = "high_speed"
OUT_OF_SHIFT = "out_of_shift"


def _duplicate_orders(events: list[CanonicalEvent], names: dict[str, str]) -> list[Anomaly]:
    by_document: dict[str, list[CanonicalEvent]] = {}
    for event in events:
        if event.document_id:
            by_document.setdefault(event.document_id, []).append(event)

    anomalies = []
    for document_id, group in by_document.items():
        if len(group) < 2:
            continue
        operators = list(dict.fromkeys(names.get(e.operator_id, e.operator_id) for e in group))
        anomalies.append(
            Anomaly(
                id=f"dup-{document_id}",
                type=DUPLICATE_ORDER,
                severity=SEVERITY_ERROR,
                title=f"Duplicate order: {document_id}",
                description=(
                    f"Order {document_id} appears {len(group)} times (operators: {', '.join(operators)})"
                ),
                related_ids=tuple(e.event_id for e in group),
            )
        )
    return anomalies


def _shared_devices(events: list[CanonicalEvent], names: dict[str, str]) -> list[Anomaly]:
    by_device: dict[str, dict[str, None]] = {}
    for event in events:
        if event.device_id:
            by_device.setdefault(event.device_id, {})[event.operator_id] = None

    anomalies = []
    for device_id, operator_ids in by_device.items():
        if len(operator_ids) < 2:
            continue
        labels = [names.get(op_id, op_id) for op_id in operator_ids]
        anomalies.append(
            Anomaly(
                id=f"shared-{device_id}",
                type=SHARED_DEVICE,
                severity=SEVERITY_WARNING,
                title=f"Shared device: {device_id}",
                description=f"Device {device_id} was used by {', '.join(labels)} in the same period",
                related_ids=tuple(operator_ids),
            )
        )
    return anomalies


def _high_speed(
    events: list[CanonicalEvent],
    names: dict[str, str],
    min_events: int,
    max_interval_min: float,
) -> list[Anomaly]:
    by_operator: dict[str, list[CanonicalEvent]] = {}
    for event in events:
        by_operator.setdefault(event.operator_id, []).append(event)

    anomalies = []
    for operator_id, group in by_operator.items():
        if len(group) < min_events:
            continue
        _, avg_interval_min = compute_cadence(sorted(group, key=lambda e: e.timestamp))
        if avg_interval_min is None or avg_interval_min >= max_interval_min:
            continue
        label = names.get(operator_id, operator_id)
        anomalies.append(
            Anomaly(
                id=f"speed-{operator_id}",
                type=HIGH_SPEED,
                severity=SEVERITY_WARNING,
                title=f"Abnormal speed: {label}",
                description=(
                    f"Average interval of {avg_interval_min} min/order "
                    f"(< {max_interval_min:g} min, possible device error)"
                ),
                related_ids=(operator_id,),
            )
        )
    return anomalies


def _out_of_shift(events: list[CanonicalEvent], shift: ShiftWindow) -> list[Anomaly]:
    shift_start, shift_end = shift.bounds()
    outside = [e for e in events if e.timestamp < shift_start or e.timestamp > shift_end]
    if not outside:
        return []
    return [
        Anomaly(
            id="out-of-shift",
            type=OUT_OF_SHIFT,
            severity=SEVERITY_WARNING,
            title=f"{len(outside)} event(s) outside the shift",
            description=f"Events found outside the {shift.start_time}-{shift.end_time} shift window",
            related_ids=tuple(e.event_id for e in outside),
        )
    ]


def detect_anomalies(
    operators: Iterable[Operator],
    events: Iterable[CanonicalEvent],
    shift: Optional[ShiftWindow] = None,
    settings=None,
) -> list[Anomaly]:
    """Scan ``events`` for duplicate orders, shared devices, abnormal speed
    and, when ``shift`` is given, events outside the shift window."""

    events = list(events)
    names = {op.id: op.name for op in operators}
    min_events = settings.high_speed_min_events if settings is not None else 3
    max_interval = settings.high_speed_interval_min if settings is not None else 2.0

    anomalies = _duplicate_orders(events, names)
    anomalies += _shared_devices(events, names)
    anomalies += _high_speed(events, names, min_events, max_interval)
    if shift is not None:
        anomalies += _out_of_shift(events, shift)

    # sorted() is stable, so each severity tier keeps detection order.
    anomalies = sorted(anomalies, key=lambda a: 0 if a.severity == SEVERITY_ERROR else 1)
    logger.debug("Detected %d anomalies over %d events", len(anomalies), len(events))
    return anomalies
