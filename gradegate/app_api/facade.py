from __future__ import annotations

import datetime
import logging
import sqlite3
from collections import defaultdict
from typing import Callable, Iterable, Optional, Sequence

from gradegate.core.access.gate import AccessGate
from gradegate.core.domain.enums import EducationTier, GradeComponent
from gradegate.core.domain.errors import GradeEntryClosed
from gradegate.core.domain.models import (
    AccessDecision,
    ClassStatistics,
    DelinquencyStatus,
    FinalRecord,
    FinalResult,
    GradeChangeEvent,
    GradeComponents,
    PaymentMonth,
    TrimesterRecord,
    TrimesterResult,
)
from gradegate.core.engine.grade_engine import GradeEngine
from gradegate.core.entry.windows import can_edit_component
from gradegate.core.grading.final import build_final_record
from gradegate.core.grading.trimester import make_components, validate_components
from .dto import BatchEntryError, BatchEntryResult, GradeEntry, RecordedGrade, StudentReport
from .ports import (
    AcademicCatalog,
    EntryWindowProvider,
    FinanceRepository,
    GradeHistoryRepository,
    GradeRepository,
)

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class GradeEngineApplication:
    def __init__(
        self,
        engine: GradeEngine,
        grade_repo: GradeRepository,
        finance_repo: FinanceRepository,
        catalog: AcademicCatalog,
        history_repo: GradeHistoryRepository,
        entry_windows: Optional[EntryWindowProvider] = None,
        conn: Optional[sqlite3.Connection] = None,
        clock: Callable[[], datetime.date] = datetime.date.today,
        now: Callable[[], str] = _utc_now_iso,
    ) -> None:
        self._engine = engine
        self._grade_repo = grade_repo
        self._catalog = catalog
        self._history_repo = history_repo
        self._entry_windows = entry_windows
        self._conn = conn
        self._clock = clock
        self._now = now
        self._gate = AccessGate(finance_repo, engine.delinquency_evaluator, clock=clock)

    @property
    def engine(self) -> GradeEngine:
        return self._engine

    # Pure computations

    def compute_trimester(self, components: GradeComponents, tier: EducationTier) -> TrimesterResult:
        return self._engine.compute_trimester(components, tier)

    def compute_final(self, trimester_averages: Sequence[object], tier: EducationTier) -> FinalResult:
        return self._engine.compute_final(trimester_averages, tier)

    def evaluate_delinquency(
        self, payment_months: Optional[Iterable[PaymentMonth]], today: datetime.date
    ) -> DelinquencyStatus:
        return self._engine.evaluate_delinquency(payment_months, today)

    def can_view_grades(self, student_id: int, today: Optional[datetime.date] = None) -> AccessDecision:
        return self._gate.can_view_grades(student_id, today)

    # Grade entry

    def tier_for_class(self, class_id: int) -> EducationTier:
        return self._engine.resolve_tier(self._catalog.get_class_designation(class_id))

    def _check_entry_windows(
        self, entry: GradeEntry, changed: list[GradeComponent], today: datetime.date
    ) -> None:
        if self._entry_windows is None or not changed:
            return
        windows = self._entry_windows.list_windows(entry.trimester, entry.academic_year)
        for component in changed:
            if not can_edit_component(component, entry.trimester, entry.academic_year, windows, today):
                raise GradeEntryClosed(
                    f"no active entry window for {component.value} "
                    f"trimester={entry.trimester} year={entry.academic_year}"
                )

    def record_grades(self, entry: GradeEntry, today: Optional[datetime.date] = None) -> RecordedGrade:
        entry.validate()
        tier = self.tier_for_class(entry.class_id)
        incoming = make_components(entry.mac, entry.pp, entry.pt)
        if incoming == GradeComponents():
            raise ValueError("at least one of mac, pp or pt must be provided")
        validate_components(incoming, tier)

        existing = self._grade_repo.fetch_record(
            entry.student_id,
            entry.discipline_id,
            entry.class_id,
            entry.trimester,
            entry.academic_year,
        )
        current = existing.components if existing is not None else GradeComponents()
        expected_version = entry.expected_version
        if expected_version is None:
            expected_version = existing.version if existing is not None else 0

        changed = [
            c
            for c in GradeComponent
            if incoming.get(c) is not None and incoming.get(c) != current.get(c)
        ]
        self._check_entry_windows(entry, changed, today or self._clock())
        if existing is not None and not changed:
            return RecordedGrade(record=existing, events=[])

        merged = GradeComponents(
            mac=incoming.mac if incoming.mac is not None else current.mac,
            pp=incoming.pp if incoming.pp is not None else current.pp,
            pt=incoming.pt if incoming.pt is not None else current.pt,
        )
        result = self._engine.compute_trimester(merged, tier)
        record = TrimesterRecord(
            student_id=entry.student_id,
            discipline_id=entry.discipline_id,
            class_id=entry.class_id,
            trimester=entry.trimester,
            academic_year=entry.academic_year,
            components=merged,
            average=result.average,
            classification=result.classification,
            approved=result.approved,
            version=expected_version,
        )
        changed_at = self._now()
        events = [
            GradeChangeEvent(
                record_key=record.key,
                component=c,
                old_value=current.get(c),
                new_value=merged.get(c),
                editor_id=entry.editor_id,
                changed_at=changed_at,
                reason=entry.reason,
            )
            for c in changed
        ]

        # A transaction opened by the caller is left for the caller to finish.
        owns_tx = self._conn is not None and not self._conn.in_transaction
        if owns_tx:
            self._conn.execute("BEGIN")
        try:
            saved = self._grade_repo.save(record, expected_version)
            for event in events:
                self._history_repo.append(event)
            if owns_tx:
                self._conn.commit()
        except Exception:
            if owns_tx:
                self._conn.rollback()
            raise

        logger.info(
            "grades_recorded record=%s version=%s changed=%s editor_id=%s",
            saved.key,
            saved.version,
            ",".join(c.value for c in changed),
            entry.editor_id,
        )
        return RecordedGrade(record=saved, events=events)

    def record_grades_batch(
        self, entries: Iterable[GradeEntry], today: Optional[datetime.date] = None
    ) -> BatchEntryResult:
        result = BatchEntryResult()
        for entry in entries:
            try:
                result.successes.append(self.record_grades(entry, today))
            except ValueError as exc:
                logger.warning(
                    "grade_entry_rejected student_id=%s err=%s", entry.student_id, exc
                )
                result.errors.append(
                    BatchEntryError(
                        student_id=entry.student_id,
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                )
        return result

    def grade_history(self, record_key: str) -> list[GradeChangeEvent]:
        return self._history_repo.list_for(record_key)

    # Derived views

    def final_for(self, student_id: int, discipline_id: int, class_id: int, year: str) -> FinalRecord:
        tier = self.tier_for_class(class_id)
        records = self._grade_repo.list_year(student_id, discipline_id, year)
        return build_final_record(
            student_id, discipline_id, year, records, tier, strict=self._engine.strict_final
        )

    def student_report(
        self,
        student_id: int,
        class_id: int,
        year: str,
        today: Optional[datetime.date] = None,
    ) -> StudentReport:
        decision = self._gate.can_view_grades(student_id, today)
        if not decision.allowed:
            return StudentReport(student_id=student_id, academic_year=year, access=decision, finals=[])

        tier = self.tier_for_class(class_id)
        by_discipline: dict[int, list[TrimesterRecord]] = defaultdict(list)
        for record in self._grade_repo.list_student_year(student_id, year):
            by_discipline[record.discipline_id].append(record)

        finals = [
            build_final_record(
                student_id, discipline_id, year, records, tier, strict=self._engine.strict_final
            )
            for discipline_id, records in sorted(by_discipline.items())
        ]
        return StudentReport(student_id=student_id, academic_year=year, access=decision, finals=finals)

    def class_statistics(
        self, class_id: int, discipline_id: int, trimester: int, year: str
    ) -> ClassStatistics:
        tier = self.tier_for_class(class_id)
        records = self._grade_repo.list_class_trimester(class_id, discipline_id, trimester, year)
        results = [self._engine.compute_trimester(r.components, tier) for r in records]
        return self._engine.class_statistics(results, tier)
