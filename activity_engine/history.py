"""Multi-day event counts per operator, compared with daily targets."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from activity_engine.schema import CanonicalEvent, Operator


def date_range(days: int, today: Optional[date] = None) -> list[date]:
    """The ``days`` calendar days ending with ``today``, oldest first."""

    today = today or date.today()
    return [today - timedelta(days=days - 1 - i) for i in range(days)]


def cell_level(count: int, target: Optional[int]) -> str:
    if count == 0:
        return "empty"
    if not target:
        return "no_target"
    ratio = count / target
    if ratio >= 1:
        return "met"
    if ratio >= 0.5:
        return "half"
    return "below"


@dataclass
class HistoryRow:
    operator_id: str
    operator_name: str
    daily_target: Optional[int]
    counts: list[int]
    levels: list[str]

    @property
    def total(self) -> int:
        return sum(self.counts)


@dataclass
class HistoryGrid:
    dates: list[date]
    rows: list[HistoryRow]


def build_history(operators: Iterable[Operator], events: Iterable[CanonicalEvent], dates: list[date]) -> HistoryGrid:
    """Count events per operator per day; operators idle on every day are left out."""

    wanted = set(dates)
    counts = Counter(
        (event.operator_id, event.timestamp.date()) for event in events if event.timestamp.date() in wanted
    )

    rows = []
    for operator in operators:
        per_day = [counts.get((operator.id, day), 0) for day in dates]
        if not any(per_day):
            continue
        rows.append(
            HistoryRow(
                operator_id=operator.id,
                operator_name=operator.name,
                daily_target=operator.daily_target,
                counts=per_day,
                levels=[cell_level(count, operator.daily_target) for count in per_day],
            )
        )
    return HistoryGrid(dates=list(dates), rows=rows)
