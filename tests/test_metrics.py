from dataclasses import replace
from datetime import date, datetime

from activity_engine.metrics import compute_overview, rank_summaries, target_progress
from activity_engine.schema import CanonicalEvent, Category, Operator, ShiftWindow, Status
from activity_engine.summary import compute_all_summaries

OPERATORS = [Operator("op1", "Ana", daily_target=2), Operator("op2", "Luis", daily_target=5), Operator("op3", "Marta")]


def sample_events():
    stamps = [("op1", "07:10"), ("op1", "07:20"), ("op2", "07:05"), ("op2", "12:00"), ("op3", "07:00")]
    return [
        CanonicalEvent(
            timestamp=datetime.fromisoformat(f"2026-02-19T{clock}:00"),
            source_user_id=op,
            operator_id=op,
            operation_type="PICKING_FINISHED",
            operation_category=Category.PICKING,
        )
        for op, clock in stamps
    ]


def summaries():
    shift = ShiftWindow(date(2026, 2, 19), "07:00", "08:00", 30)
    return compute_all_summaries(OPERATORS, sample_events(), shift)


def test_compute_overview():
    overview = compute_overview(OPERATORS, summaries())
    assert overview == {
        "operators": 3,
        "active_operators": 3,
        "total_orders": 4,
        "total_gaps": 3,
        "operators_with_target": 2,
        "operators_in_target": 1,
    }


def test_compute_overview_empty():
    overview = compute_overview(OPERATORS, [])
    assert overview["active_operators"] == 0
    assert overview["operators_with_target"] == 2
    assert overview["operators_in_target"] == 0


def test_rank_summaries():
    base = summaries()[0]
    unordered = [
        replace(base, operator_id="green", status=Status.GREEN, total_orders=9),
        replace(base, operator_id="none", status=Status.NONE, total_orders=0),
        replace(base, operator_id="red-small", status=Status.RED, total_orders=1),
        replace(base, operator_id="yellow", status=Status.YELLOW, total_orders=4),
        replace(base, operator_id="red-big", status=Status.RED, total_orders=7),
    ]
    ranked = rank_summaries(unordered)
    assert [s.operator_id for s in ranked] == ["red-big", "red-small", "yellow", "green", "none"]


def test_target_progress():
    assert target_progress(3, None) is None
    assert target_progress(3, 4) == 75
    assert target_progress(9, 4) == 100
