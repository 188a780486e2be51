"""SQLite repository for class designations and grade-entry windows."""

from __future__ import annotations

import datetime
import sqlite3

from gradegate.core.domain.enums import EntryWindowStatus, GradeComponent
from gradegate.core.domain.models import EntryWindow


class SqliteAcademicCatalog:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def upsert_class(self, class_id: int, designation: str) -> None:
        self._conn.execute(
            """
            INSERT INTO class_catalog (class_id, designation)
            VALUES (?, ?)
            ON CONFLICT(class_id) DO UPDATE SET designation = excluded.designation
            """,
            (class_id, designation),
        )

    def get_class_designation(self, class_id: int) -> str:
        row = self._conn.execute(
            "SELECT designation FROM class_catalog WHERE class_id = ?",
            (class_id,),
        ).fetchone()
        if row is None:
            raise ValueError(f"Unknown class_id: {class_id}")
        return str(row[0])


class SqliteEntryWindowProvider:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def insert_window(self, window: EntryWindow) -> None:
        self._conn.execute(
            """
            INSERT INTO entry_window (
              name, component, trimester, academic_year, start_date, end_date, status
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                window.name,
                window.component.value,
                window.trimester,
                window.academic_year,
                window.start_date.isoformat(),
                window.end_date.isoformat(),
                window.status.value,
            ),
        )

    def list_windows(self, trimester: int, academic_year: str) -> list[EntryWindow]:
        rows = self._conn.execute(
            """
            SELECT name, component, trimester, academic_year, start_date, end_date, status
            FROM entry_window
            WHERE trimester = ? AND academic_year = ?
            ORDER BY start_date, window_id
            """,
            (trimester, academic_year),
        ).fetchall()
        return [
            EntryWindow(
                name=row[0],
                component=GradeComponent(row[1]),
                trimester=int(row[2]),
                academic_year=row[3],
                start_date=datetime.date.fromisoformat(row[4]),
                end_date=datetime.date.fromisoformat(row[5]),
                status=EntryWindowStatus(row[6]),
            )
            for row in rows
        ]
