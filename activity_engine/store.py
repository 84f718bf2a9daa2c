"""Persistence collaborator contract and an in-memory implementation."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date
from typing import Iterable, Protocol

from activity_engine.schema import CanonicalEvent, Operator, ShiftWindow


class EventStore(Protocol):
    def list_operators(self) -> list[Operator]: ...

    def create_operator(self, operator: Operator) -> Operator: ...

    def delete_operator(self, operator_id: str) -> None: ...

    def list_events(self, order_by: str = "-timestamp", limit: int = 10000) -> list[CanonicalEvent]: ...

    def create_event(self, event: CanonicalEvent) -> CanonicalEvent: ...

    def delete_event(self, event_id: str) -> None: ...

    def bulk_insert_events(self, events: Iterable[CanonicalEvent]) -> None: ...


class InMemoryStore:
    """Dict-backed store for scripts and tests."""

    def __init__(self, operators: Iterable[Operator] = (), events: Iterable[CanonicalEvent] = ()) -> None:
        self._operators: dict[str, Operator] = {op.id: op for op in operators}
        self._events: list[CanonicalEvent] = []
        self.bulk_insert_events(events)

    def list_operators(self) -> list[Operator]:
        return list(self._operators.values())

    def create_operator(self, operator: Operator) -> Operator:
        if not operator.id:
            operator = replace(operator, id=uuid.uuid4().hex)
        self._operators[operator.id] = operator
        return operator

    def delete_operator(self, operator_id: str) -> None:
        self._operators.pop(operator_id, None)

    def list_events(self, order_by: str = "-timestamp", limit: int = 10000) -> list[CanonicalEvent]:
        """Events sorted by ``order_by`` (a field name, ``-`` for descending)."""

        field_name = order_by.lstrip("-")
        ordered = sorted(self._events, key=lambda e: getattr(e, field_name), reverse=order_by.startswith("-"))
        return ordered[:limit]

    def create_event(self, event: CanonicalEvent) -> CanonicalEvent:
        if not event.event_id:
            event = replace(event, event_id=uuid.uuid4().hex)
        self._events.append(event)
        return event

    def delete_event(self, event_id: str) -> None:
        self._events = [e for e in self._events if e.event_id != event_id]

    def bulk_insert_events(self, events: Iterable[CanonicalEvent]) -> None:
        for event in events:
            self.create_event(event)


def events_on_date(events: Iterable[CanonicalEvent], day: date) -> list[CanonicalEvent]:
    """Client-side date filter applied after ``list_events``."""

    return [e for e in events if e.timestamp.date() == day]


def events_for_shift(events: Iterable[CanonicalEvent], shift: ShiftWindow) -> list[CanonicalEvent]:
    """Keep events on every calendar day the shift touches.

    An overnight shift spans two days. Events outside the window itself are
    kept so out-of-shift activity can still be reported.
    """

    start, end = shift.bounds()
    return [e for e in events if start.date() <= e.timestamp.date() <= end.date()]
