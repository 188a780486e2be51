"""Domain models for grade records, payments and access decisions.

Responsibilities:
  - Define data carriers for components, trimester/final records, payment months,
    delinquency status, change events and entry windows.

Inputs/Outputs:
  - TrimesterRecord and GradeChangeEvent are persisted/audited by infra layers.
  - FinalRecord, DelinquencyStatus and AccessDecision are derived per query, never stored.

Invariants:
  - Models carry no policy; derived fields are produced by core.grading and core.finance.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from .enums import (
    AggregationStatus,
    EducationTier,
    EntryWindowStatus,
    GradeComponent,
    PaymentStatus,
    ReasonCode,
)


@dataclass(frozen=True)
class GradeComponents:
    mac: Optional[Decimal] = None
    pp: Optional[Decimal] = None
    pt: Optional[Decimal] = None

    def get(self, component: GradeComponent) -> Optional[Decimal]:
        return getattr(self, component.value.lower())

    def is_complete(self) -> bool:
        return self.mac is not None and self.pp is not None and self.pt is not None


@dataclass(frozen=True)
class TrimesterResult:
    status: AggregationStatus
    average: Optional[Decimal]
    classification: Optional[str]
    approved: Optional[bool]


@dataclass(frozen=True)
class FinalResult:
    status: AggregationStatus
    final_average: Optional[Decimal]
    final_classification: Optional[str]


def make_record_key(
    student_id: int, discipline_id: int, class_id: int, trimester: int, academic_year: str
) -> str:
    return f"{student_id}:{discipline_id}:{class_id}:{academic_year}:T{trimester}"


@dataclass(frozen=True)
class TrimesterRecord:
    student_id: int
    discipline_id: int
    class_id: int
    trimester: int
    academic_year: str
    components: GradeComponents
    average: Optional[Decimal] = None
    classification: Optional[str] = None
    approved: Optional[bool] = None
    version: int = 0

    @property
    def key(self) -> str:
        return make_record_key(
            self.student_id, self.discipline_id, self.class_id, self.trimester, self.academic_year
        )


@dataclass(frozen=True)
class FinalRecord:
    student_id: int
    discipline_id: int
    academic_year: str
    trimester_averages: tuple[Optional[Decimal], Optional[Decimal], Optional[Decimal]]
    final_average: Optional[Decimal]
    final_classification: Optional[str]
    tier: EducationTier


@dataclass(frozen=True)
class PaymentMonth:
    student_id: int
    year_month: str  # "YYYY-MM"
    status: PaymentStatus
    due_date: datetime.date


@dataclass(frozen=True)
class DelinquencyStatus:
    in_contencioso: bool
    overdue_months: list[str]
    days_remaining: int
    grades_visible: bool


@dataclass(frozen=True)
class AccessDecision:
    student_id: int
    allowed: bool
    reason: ReasonCode
    overdue_months: list[str] = field(default_factory=list)
    days_remaining: int = 0
    message: str = ""


@dataclass(frozen=True)
class GradeChangeEvent:
    record_key: str
    component: GradeComponent
    old_value: Optional[Decimal]
    new_value: Optional[Decimal]
    editor_id: int
    changed_at: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class EntryWindow:
    component: GradeComponent
    trimester: int
    academic_year: str
    start_date: datetime.date
    end_date: datetime.date
    status: EntryWindowStatus
    name: Optional[str] = None


@dataclass(frozen=True)
class ClassStatistics:
    total_students: int
    approved: int
    failed: int
    pending: int
    overall_average: Optional[Decimal]
    approval_rate: Decimal
    median: Optional[float] = None
    std_dev: Optional[float] = None
