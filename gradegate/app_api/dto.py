"""DTO definitions for app-level data exchange.

Responsibilities:
  - Define stable, typed structures for grade entry inputs and report outputs.
Must not:
  - Implement business logic beyond input validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from gradegate.core.domain.errors import InvalidTrimester
from gradegate.core.domain.models import (
    AccessDecision,
    FinalRecord,
    GradeChangeEvent,
    TrimesterRecord,
)


@dataclass(frozen=True)
class GradeEntry:
    student_id: int
    discipline_id: int
    class_id: int
    trimester: int
    academic_year: str
    editor_id: int
    mac: object = None
    pp: object = None
    pt: object = None
    reason: Optional[str] = None
    expected_version: Optional[int] = None

    def validate(self) -> None:
        if self.trimester not in (1, 2, 3):
            raise InvalidTrimester(f"trimester must be 1, 2 or 3, got {self.trimester}")

        if not self.academic_year or not self.academic_year.strip():
            raise ValueError("academic_year must be non-empty")
        object.__setattr__(self, "academic_year", self.academic_year.strip())

        if self.expected_version is not None and self.expected_version < 0:
            raise ValueError("expected_version must be >= 0")

        if self.mac is None and self.pp is None and self.pt is None:
            raise ValueError("at least one of mac, pp or pt must be provided")


@dataclass(frozen=True)
class RecordedGrade:
    record: TrimesterRecord
    events: list[GradeChangeEvent]


@dataclass(frozen=True)
class BatchEntryError:
    student_id: int
    error: str
    error_type: str


@dataclass(frozen=True)
class BatchEntryResult:
    successes: list[RecordedGrade] = field(default_factory=list)
    errors: list[BatchEntryError] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.successes)

    @property
    def error_count(self) -> int:
        return len(self.errors)


@dataclass(frozen=True)
class StudentReport:
    student_id: int
    academic_year: str
    access: AccessDecision
    finals: list[FinalRecord]

    @property
    def visible(self) -> bool:
        return self.access.allowed
