"""Dashboard-level metrics over a set of shift summaries."""

from __future__ import annotations

from typing import Iterable, Optional

from activity_engine.schema import Operator, OperatorShiftSummary, Status

STATUS_ORDER = {Status.RED: 0, Status.YELLOW: 1, Status.GREEN: 2, Status.NONE: 3}


def compute_overview(operators: list[Operator], summaries: list[OperatorShiftSummary]) -> dict:
    """Compute operator, activity, order, gap and daily-target totals."""

    if not summaries:
        return {
            "operators": len(operators),
            "active_operators": 0,
            "total_orders": 0,
            "total_gaps": 0,
            "operators_with_target": sum(1 for op in operators if op.daily_target),
            "operators_in_target": 0,
        }

    orders_by_operator = {s.operator_id: s.total_orders for s in summaries}
    with_target = [op for op in operators if op.daily_target and op.daily_target > 0]
    in_target = [op for op in with_target if orders_by_operator.get(op.id, 0) >= op.daily_target]

    return {
        "operators": len(operators),
        "active_operators": sum(1 for s in summaries if s.total_orders > 0),
        "total_orders": sum(s.total_orders for s in summaries),
        "total_gaps": sum(s.gap_count for s in summaries),
        "operators_with_target": len(with_target),
        "operators_in_target": len(in_target),
    }


def rank_summaries(summaries: Iterable[OperatorShiftSummary]) -> list[OperatorShiftSummary]:
    """Order summaries red, yellow, green, none; busiest first within a status."""

    return sorted(summaries, key=lambda s: (STATUS_ORDER.get(s.status, 3), -(s.total_orders or 0)))


def target_progress(current: int, target: Optional[int]) -> Optional[int]:
    """Percent of the daily target reached, capped at 100."""

    if not target:
        return None
    return min(100, round(current / target * 100))
