"""Per-operator shift summaries: idle gaps, cadence and status."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from activity_engine.cadence import compute_cadence
from activity_engine.errors import OperatorNotFoundError
from activity_engine.schema import (
    CanonicalEvent,
    Category,
    Gap,
    Operator,
    OperatorShiftSummary,
    ShiftWindow,
    Status,
)

RED_GAP_COUNT = 3
RED_GAP_FACTOR = 3.0


def derive_status(
    gaps: Sequence[Gap],
    max_gap: float,
    threshold_minutes: float,
    red_gap_count: int = RED_GAP_COUNT,
    red_gap_factor: float = RED_GAP_FACTOR,
) -> Status:
    """Green without gaps; red on many gaps or one very long gap; else yellow."""

    if not gaps:
        return Status.GREEN
    if len(gaps) >= red_gap_count or max_gap > threshold_minutes * red_gap_factor:
        return Status.RED
    return Status.YELLOW


def find_gaps(timestamps, shift_start, shift_end, threshold_minutes: float) -> list[Gap]:
    """Idle intervals longer than the threshold, shift boundaries included.

    ``timestamps`` must be sorted and lie inside the shift window.
    """

    edges = [shift_start, *timestamps, shift_end]
    gaps = []
    for start, end in zip(edges, edges[1:]):
        minutes = (end - start).total_seconds() / 60.0
        if minutes > threshold_minutes:
            gaps.append(Gap(start=start, end=end, minutes=minutes))
    return gaps


def _empty_summary(operator: Operator) -> OperatorShiftSummary:
    return OperatorShiftSummary(
        operator_id=operator.id,
        operator_name=operator.name,
        total_orders=0,
        activity_events=0,
        first_close=None,
        last_close=None,
        gaps=[],
        max_gap=None,
        status=Status.NONE,
        orders_per_hour=None,
        avg_interval_min=None,
        events=[],
        daily_target=operator.daily_target,
    )


def compute_operator_summary(
    operator: Operator,
    events: Iterable[CanonicalEvent],
    shift: ShiftWindow,
    activity_categories: Optional[Iterable[Category]] = None,
    red_gap_count: int = RED_GAP_COUNT,
    red_gap_factor: float = RED_GAP_FACTOR,
) -> OperatorShiftSummary:
    """Summarize one operator's activity inside ``shift``.

    Every event of the operator inside the window (bounds inclusive) counts
    toward ``total_orders`` and the timeline. Gap and cadence figures use
    only the events whose category is in ``activity_categories`` (falling
    back to ``shift.activity_categories``); an empty or missing filter
    counts every category.
    """

    shift_start, shift_end = shift.bounds()
    all_op_events = sorted(
        (e for e in events if e.operator_id == operator.id and shift_start <= e.timestamp <= shift_end),
        key=lambda e: e.timestamp,
    )

    categories = activity_categories if activity_categories is not None else shift.activity_categories
    allowed = set(categories or ())
    op_events = [e for e in all_op_events if e.operation_category in allowed] if allowed else all_op_events

    if not op_events:
        return _empty_summary(operator)

    gaps = find_gaps([e.timestamp for e in op_events], shift_start, shift_end, shift.threshold_minutes)
    max_gap = max((gap.minutes for gap in gaps), default=0.0)
    orders_per_hour, avg_interval_min = compute_cadence(op_events)

    return OperatorShiftSummary(
        operator_id=operator.id,
        operator_name=operator.name,
        total_orders=len(all_op_events),
        activity_events=len(op_events),
        first_close=op_events[0].timestamp,
        last_close=op_events[-1].timestamp,
        gaps=gaps,
        max_gap=max_gap,
        status=derive_status(gaps, max_gap, shift.threshold_minutes, red_gap_count, red_gap_factor),
        orders_per_hour=orders_per_hour,
        avg_interval_min=avg_interval_min,
        events=all_op_events,
        daily_target=operator.daily_target,
    )


def compute_all_summaries(
    operators: Iterable[Operator],
    events: Iterable[CanonicalEvent],
    shift: ShiftWindow,
    activity_categories: Optional[Iterable[Category]] = None,
    red_gap_count: int = RED_GAP_COUNT,
    red_gap_factor: float = RED_GAP_FACTOR,
) -> list[OperatorShiftSummary]:
    """One summary per operator, in operator-list order."""

    events = list(events)
    categories = tuple(activity_categories) if activity_categories is not None else None
    return [
        compute_operator_summary(op, events, shift, categories, red_gap_count, red_gap_factor) for op in operators
    ]


def find_operator(operators: Iterable[Operator], operator_id: str) -> Operator:
    for operator in operators:
        if operator.id == operator_id:
            return operator
    raise OperatorNotFoundError(operator_id)
