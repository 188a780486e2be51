"""SQLite repository for grade_trimester persistence.

Responsibilities:
  - Read and write TrimesterRecord rows with optimistic version checks.
Must not:
  - Compute averages or classifications; callers pass fully derived records.
  - Commit; transaction boundaries belong to the caller.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional, Sequence

from gradegate.core.domain.errors import StaleRecordError
from gradegate.core.domain.models import GradeComponents, TrimesterRecord
from .decimal_columns import decimal_to_text, int_to_bool, text_to_decimal

_SELECT_COLUMNS = """
    student_id, discipline_id, class_id, trimester, academic_year,
    mac, pp, pt, average, classification, approved, version
"""


def _row_to_record(row: Sequence[Any]) -> TrimesterRecord:
    return TrimesterRecord(
        student_id=int(row[0]),
        discipline_id=int(row[1]),
        class_id=int(row[2]),
        trimester=int(row[3]),
        academic_year=str(row[4]),
        components=GradeComponents(
            mac=text_to_decimal(row[5]),
            pp=text_to_decimal(row[6]),
            pt=text_to_decimal(row[7]),
        ),
        average=text_to_decimal(row[8]),
        classification=row[9],
        approved=int_to_bool(row[10]),
        version=int(row[11]),
    )


class SqliteGradeRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def fetch_record(
        self, student_id: int, discipline_id: int, class_id: int, trimester: int, year: str
    ) -> Optional[TrimesterRecord]:
        row = self._conn.execute(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM grade_trimester
            WHERE student_id = ? AND discipline_id = ? AND class_id = ?
              AND trimester = ? AND academic_year = ?
            """,
            (student_id, discipline_id, class_id, trimester, year),
        ).fetchone()
        if row is None:
            return None
        return _row_to_record(row)

    def fetch(
        self, student_id: int, discipline_id: int, class_id: int, trimester: int, year: str
    ) -> GradeComponents:
        record = self.fetch_record(student_id, discipline_id, class_id, trimester, year)
        if record is None:
            return GradeComponents()
        return record.components

    def _current_version(self, record: TrimesterRecord) -> Optional[int]:
        row = self._conn.execute(
            """
            SELECT version
            FROM grade_trimester
            WHERE student_id = ? AND discipline_id = ? AND class_id = ?
              AND trimester = ? AND academic_year = ?
            """,
            (
                record.student_id,
                record.discipline_id,
                record.class_id,
                record.trimester,
                record.academic_year,
            ),
        ).fetchone()
        if row is None:
            return None
        return int(row[0])

    def save(self, record: TrimesterRecord, expected_version: int) -> TrimesterRecord:
        components = record.components
        approved = None if record.approved is None else int(record.approved)
        new_version = expected_version + 1

        if expected_version == 0:
            try:
                self._conn.execute(
                    """
                    INSERT INTO grade_trimester (
                      student_id, discipline_id, class_id, trimester, academic_year,
                      mac, pp, pt, average, classification, approved, version
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.student_id,
                        record.discipline_id,
                        record.class_id,
                        record.trimester,
                        record.academic_year,
                        decimal_to_text(components.mac),
                        decimal_to_text(components.pp),
                        decimal_to_text(components.pt),
                        decimal_to_text(record.average),
                        record.classification,
                        approved,
                        new_version,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise StaleRecordError(
                    record.key, expected_version, self._current_version(record)
                ) from exc
        else:
            cur = self._conn.execute(
                """
                UPDATE grade_trimester
                SET mac = ?, pp = ?, pt = ?, average = ?, classification = ?, approved = ?,
                    version = version + 1, updated_at = datetime('now')
                WHERE student_id = ? AND discipline_id = ? AND class_id = ?
                  AND trimester = ? AND academic_year = ? AND version = ?
                """,
                (
                    decimal_to_text(components.mac),
                    decimal_to_text(components.pp),
                    decimal_to_text(components.pt),
                    decimal_to_text(record.average),
                    record.classification,
                    approved,
                    record.student_id,
                    record.discipline_id,
                    record.class_id,
                    record.trimester,
                    record.academic_year,
                    expected_version,
                ),
            )
            if cur.rowcount != 1:
                raise StaleRecordError(record.key, expected_version, self._current_version(record))

        return TrimesterRecord(
            student_id=record.student_id,
            discipline_id=record.discipline_id,
            class_id=record.class_id,
            trimester=record.trimester,
            academic_year=record.academic_year,
            components=components,
            average=record.average,
            classification=record.classification,
            approved=record.approved,
            version=new_version,
        )

    def list_year(self, student_id: int, discipline_id: int, year: str) -> list[TrimesterRecord]:
        rows = self._conn.execute(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM grade_trimester
            WHERE student_id = ? AND discipline_id = ? AND academic_year = ?
            ORDER BY trimester
            """,
            (student_id, discipline_id, year),
        ).fetchall()
        return [_row_to_record(row) for row in rows]

    def list_student_year(self, student_id: int, year: str) -> list[TrimesterRecord]:
        rows = self._conn.execute(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM grade_trimester
            WHERE student_id = ? AND academic_year = ?
            ORDER BY discipline_id, trimester
            """,
            (student_id, year),
        ).fetchall()
        return [_row_to_record(row) for row in rows]

    def list_class_trimester(
        self, class_id: int, discipline_id: int, trimester: int, year: str
    ) -> list[TrimesterRecord]:
        rows = self._conn.execute(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM grade_trimester
            WHERE class_id = ? AND discipline_id = ? AND trimester = ? AND academic_year = ?
            ORDER BY student_id
            """,
            (class_id, discipline_id, trimester, year),
        ).fetchall()
        return [_row_to_record(row) for row in rows]
