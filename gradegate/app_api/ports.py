"""Port definitions for app-level dependencies.

Responsibilities:
  - Define interface contracts for grade storage, grade history, catalog and entry windows.
Must not:
  - Implement logic; interfaces only.
"""

from __future__ import annotations

from typing import Optional, Protocol

from gradegate.core.access.ports import FinanceRepository
from gradegate.core.domain.models import (
    EntryWindow,
    GradeChangeEvent,
    GradeComponents,
    TrimesterRecord,
)

__all__ = [
    "AcademicCatalog",
    "EntryWindowProvider",
    "FinanceRepository",
    "GradeHistoryRepository",
    "GradeRepository",
]


class GradeRepository(Protocol):
    def fetch(
        self, student_id: int, discipline_id: int, class_id: int, trimester: int, year: str
    ) -> GradeComponents:
        ...

    def fetch_record(
        self, student_id: int, discipline_id: int, class_id: int, trimester: int, year: str
    ) -> Optional[TrimesterRecord]:
        ...

    def save(self, record: TrimesterRecord, expected_version: int) -> TrimesterRecord:
        ...

    def list_year(self, student_id: int, discipline_id: int, year: str) -> list[TrimesterRecord]:
        ...

    def list_student_year(self, student_id: int, year: str) -> list[TrimesterRecord]:
        ...

    def list_class_trimester(
        self, class_id: int, discipline_id: int, trimester: int, year: str
    ) -> list[TrimesterRecord]:
        ...


class GradeHistoryRepository(Protocol):
    def append(self, event: GradeChangeEvent) -> None:
        ...

    def list_for(self, record_key: str) -> list[GradeChangeEvent]:
        ...


class AcademicCatalog(Protocol):
    def get_class_designation(self, class_id: int) -> str:
        ...


class EntryWindowProvider(Protocol):
    def list_windows(self, trimester: int, academic_year: str) -> list[EntryWindow]:
        ...
