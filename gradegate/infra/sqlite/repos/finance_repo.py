"""SQLite repository for the monthly payment ledger (payment_month).

Responsibilities:
  - Insert billing-cycle months and list a student's pending months chronologically.
  - Move a month from PENDING to PAID exactly once.
Must not:
  - Decide delinquency; that belongs to core.finance.
"""

from __future__ import annotations

import datetime
import sqlite3
from typing import Iterable, Optional

from gradegate.core.domain.enums import PaymentStatus
from gradegate.core.domain.errors import PaymentTransitionError
from gradegate.core.domain.models import PaymentMonth


class SqliteFinanceRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def insert_months(self, months: Iterable[PaymentMonth]) -> None:
        self._conn.executemany(
            """
            INSERT INTO payment_month (student_id, year_month, status, due_date)
            VALUES (?, ?, ?, ?)
            """,
            [
                (m.student_id, m.year_month, m.status.value, m.due_date.isoformat())
                for m in months
            ],
        )

    def list_pending_months(self, student_id: int) -> list[PaymentMonth]:
        rows = self._conn.execute(
            """
            SELECT student_id, year_month, status, due_date
            FROM payment_month
            WHERE student_id = ? AND status = ?
            ORDER BY due_date, year_month
            """,
            (student_id, PaymentStatus.PENDING.value),
        ).fetchall()
        return [
            PaymentMonth(
                student_id=int(row[0]),
                year_month=row[1],
                status=PaymentStatus(row[2]),
                due_date=datetime.date.fromisoformat(row[3]),
            )
            for row in rows
        ]

    def _status_of(self, student_id: int, year_month: str) -> Optional[PaymentStatus]:
        row = self._conn.execute(
            "SELECT status FROM payment_month WHERE student_id = ? AND year_month = ?",
            (student_id, year_month),
        ).fetchone()
        if row is None:
            return None
        return PaymentStatus(row[0])

    def mark_paid(self, student_id: int, year_month: str, paid_at: str) -> None:
        cur = self._conn.execute(
            """
            UPDATE payment_month
            SET status = ?, paid_at = ?
            WHERE student_id = ? AND year_month = ? AND status = ?
            """,
            (
                PaymentStatus.PAID.value,
                paid_at,
                student_id,
                year_month,
                PaymentStatus.PENDING.value,
            ),
        )
        if cur.rowcount == 1:
            return
        status = self._status_of(student_id, year_month)
        if status is None:
            raise ValueError(f"Unknown payment month {year_month} for student {student_id}")
        raise PaymentTransitionError(
            f"payment month {year_month} for student {student_id} is already {status.value}"
        )
