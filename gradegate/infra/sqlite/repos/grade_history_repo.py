"""SQLite repository for the append-only grade_change_event log."""

from __future__ import annotations

import sqlite3

from gradegate.core.domain.enums import GradeComponent
from gradegate.core.domain.models import GradeChangeEvent
from .decimal_columns import decimal_to_text, text_to_decimal


class SqliteGradeHistoryRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def append(self, event: GradeChangeEvent) -> None:
        self._conn.execute(
            """
            INSERT INTO grade_change_event (
              record_key, component, old_value, new_value, editor_id, reason, changed_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                event.record_key,
                event.component.value,
                decimal_to_text(event.old_value),
                decimal_to_text(event.new_value),
                event.editor_id,
                event.reason,
                event.changed_at,
            ),
        )

    def list_for(self, record_key: str) -> list[GradeChangeEvent]:
        rows = self._conn.execute(
            """
            SELECT record_key, component, old_value, new_value, editor_id, reason, changed_at
            FROM grade_change_event
            WHERE record_key = ?
            ORDER BY event_id
            """,
            (record_key,),
        ).fetchall()
        return [
            GradeChangeEvent(
                record_key=row[0],
                component=GradeComponent(row[1]),
                old_value=text_to_decimal(row[2]),
                new_value=text_to_decimal(row[3]),
                editor_id=int(row[4]),
                reason=row[5],
                changed_at=row[6],
            )
            for row in rows
        ]
