"""Per-operator activity counts in fixed-width shift slots."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable

import numpy as np

from activity_engine.schema import CanonicalEvent, Operator, ShiftWindow


@dataclass
class HeatmapRow:
    operator_id: str
    operator_name: str
    counts: list[int]


@dataclass
class Heatmap:
    slots: list[str]
    rows: list[HeatmapRow]


def build_heatmap(
    operators: Iterable[Operator],
    events: Iterable[CanonicalEvent],
    shift: ShiftWindow,
    slot_minutes: int = 15,
) -> Heatmap:
    """Count each operator's events per ``slot_minutes`` bucket.

    The window is half-open here: an event exactly at shift end is left out,
    unlike the inclusive bound used for shift summaries.
    """

    shift_start, shift_end = shift.bounds()
    slot_seconds = slot_minutes * 60
    total_slots = math.ceil((shift_end - shift_start).total_seconds() / slot_seconds)

    slots = [(shift_start + timedelta(seconds=i * slot_seconds)).strftime("%H:%M") for i in range(total_slots)]

    offsets_by_operator: dict[str, list[float]] = {}
    for event in events:
        if shift_start <= event.timestamp < shift_end:
            offsets_by_operator.setdefault(event.operator_id, []).append(
                (event.timestamp - shift_start).total_seconds()
            )

    rows = []
    for operator in operators:
        offsets = np.asarray(offsets_by_operator.get(operator.id, []), dtype=float)
        indexes = np.floor(offsets / slot_seconds).astype(int)
        indexes = indexes[(indexes >= 0) & (indexes < total_slots)]
        counts = np.bincount(indexes, minlength=total_slots)[:total_slots]
        rows.append(HeatmapRow(operator_id=operator.id, operator_name=operator.name, counts=counts.tolist()))

    return Heatmap(slots=slots, rows=rows)
