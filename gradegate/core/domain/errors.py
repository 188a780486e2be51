"""Exception hierarchy for the grade engine."""

from __future__ import annotations

from decimal import Decimal


class GradeEngineError(ValueError):
    """Base class for engine-level errors."""


class InvalidGradeValue(GradeEngineError):
    """Raised when a component value falls outside [0, scale max]."""

    def __init__(self, component: str, bound: Decimal, value: object = None) -> None:
        self.component = component
        self.bound = bound
        self.value = value
        super().__init__(
            f"{component} must be within [0, {bound}]"
            + (f", got {value}" if value is not None else "")
        )


class InvalidTrimester(GradeEngineError):
    """Raised when a trimester number is not 1, 2 or 3."""


class StaleRecordError(GradeEngineError):
    """Raised when a grade record was modified since it was read."""

    def __init__(self, record_key: str, expected_version: int, actual_version: int | None) -> None:
        self.record_key = record_key
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"stale grade record {record_key}: expected version {expected_version}, "
            f"found {actual_version}"
        )


class GradeEntryClosed(GradeEngineError):
    """Raised when no active entry window allows editing a component."""


class PaymentTransitionError(GradeEngineError):
    """Raised when a payment month would leave the Paid state."""
