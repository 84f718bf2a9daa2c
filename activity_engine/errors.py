"""Exception types raised by the activity engine."""

from __future__ import annotations


class ActivityEngineError(Exception):
    """Base class for engine errors."""


class TimestampError(ActivityEngineError, ValueError):
    """Raised when a timestamp matches none of the known formats."""


class PayloadError(ActivityEngineError, ValueError):
    """Raised when an ingestion payload carries no event records."""


class OperatorNotFoundError(ActivityEngineError, LookupError):
    """Raised when an operator id is not present in the operator list."""

    def __init__(self, operator_id: str) -> None:
        super().__init__(f"Operator '{operator_id}' not found")
        self.operator_id = operator_id


class UnknownPresetError(ActivityEngineError, KeyError):
    """Raised for an activity preset id that is not configured."""

    def __init__(self, preset_id: str) -> None:
        super().__init__(preset_id)
        self.preset_id = preset_id

    def __str__(self) -> str:
        return f"Unknown activity preset '{self.preset_id}'"
