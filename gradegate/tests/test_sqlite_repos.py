"""Tests for the SQLite repositories and schema guards."""

from __future__ import annotations

import datetime
import sqlite3
from decimal import Decimal
from typing import Iterator

import pytest

from gradegate.core.domain.enums import EntryWindowStatus, GradeComponent, PaymentStatus
from gradegate.core.domain.errors import PaymentTransitionError, StaleRecordError
from gradegate.core.domain.models import (
    EntryWindow,
    GradeChangeEvent,
    GradeComponents,
    PaymentMonth,
    TrimesterRecord,
)
from gradegate.infra.sqlite.db import get_connection
from gradegate.infra.sqlite.migrator import apply_migrations
from gradegate.infra.sqlite.repos.catalog_repo import SqliteAcademicCatalog, SqliteEntryWindowProvider
from gradegate.infra.sqlite.repos.finance_repo import SqliteFinanceRepository
from gradegate.infra.sqlite.repos.grade_history_repo import SqliteGradeHistoryRepository
from gradegate.infra.sqlite.repos.grade_repo import SqliteGradeRepository

YEAR = "2025/2026"


@pytest.fixture()
def conn() -> Iterator[sqlite3.Connection]:
    connection = get_connection(":memory:")
    apply_migrations(connection)
    yield connection
    connection.close()


def _record(trimester: int = 1, version: int = 0, mac: str | None = "12") -> TrimesterRecord:
    return TrimesterRecord(
        student_id=1,
        discipline_id=2,
        class_id=3,
        trimester=trimester,
        academic_year=YEAR,
        components=GradeComponents(
            mac=Decimal(mac) if mac is not None else None,
            pp=Decimal("14"),
            pt=Decimal("16"),
        ),
        average=Decimal("14.20"),
        classification="Bom",
        approved=True,
        version=version,
    )


def test_migrations_are_idempotent(conn: sqlite3.Connection) -> None:
    apply_migrations(conn)
    tables = {
        row[0]
        for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    }
    assert {"grade_trimester", "grade_change_event", "payment_month", "entry_window", "class_catalog"} <= tables


def test_grade_round_trip_keeps_decimals_exact(conn: sqlite3.Connection) -> None:
    repo = SqliteGradeRepository(conn)

    saved = repo.save(_record(mac="12.05"), expected_version=0)
    loaded = repo.fetch_record(1, 2, 3, 1, YEAR)

    assert saved.version == 1
    assert loaded is not None
    assert loaded.components.mac == Decimal("12.05")
    assert loaded.average == Decimal("14.20")
    assert loaded.approved is True
    assert loaded.version == 1
    assert repo.fetch(1, 2, 3, 1, YEAR) == loaded.components


def test_fetch_missing_record_returns_empty_components(conn: sqlite3.Connection) -> None:
    repo = SqliteGradeRepository(conn)

    assert repo.fetch_record(1, 2, 3, 1, YEAR) is None
    assert repo.fetch(1, 2, 3, 1, YEAR) == GradeComponents()


def test_update_bumps_version(conn: sqlite3.Connection) -> None:
    repo = SqliteGradeRepository(conn)
    repo.save(_record(), expected_version=0)

    updated = repo.save(_record(mac="18"), expected_version=1)

    assert updated.version == 2
    assert repo.fetch(1, 2, 3, 1, YEAR).mac == Decimal("18")


def test_stale_update_is_rejected(conn: sqlite3.Connection) -> None:
    repo = SqliteGradeRepository(conn)
    repo.save(_record(), expected_version=0)
    repo.save(_record(mac="13"), expected_version=1)

    with pytest.raises(StaleRecordError) as excinfo:
        repo.save(_record(mac="19"), expected_version=1)

    assert excinfo.value.expected_version == 1
    assert excinfo.value.actual_version == 2
    assert repo.fetch(1, 2, 3, 1, YEAR).mac == Decimal("13")


def test_concurrent_first_insert_is_rejected(conn: sqlite3.Connection) -> None:
    repo = SqliteGradeRepository(conn)
    repo.save(_record(), expected_version=0)

    with pytest.raises(StaleRecordError):
        repo.save(_record(mac="5"), expected_version=0)


def test_list_queries_are_ordered(conn: sqlite3.Connection) -> None:
    repo = SqliteGradeRepository(conn)
    repo.save(_record(trimester=3), expected_version=0)
    repo.save(_record(trimester=1), expected_version=0)

    assert [r.trimester for r in repo.list_year(1, 2, YEAR)] == [1, 3]
    assert [r.trimester for r in repo.list_student_year(1, YEAR)] == [1, 3]
    assert [r.student_id for r in repo.list_class_trimester(3, 2, 1, YEAR)] == [1]


def test_history_is_append_only(conn: sqlite3.Connection) -> None:
    repo = SqliteGradeHistoryRepository(conn)
    key = _record().key
    repo.append(
        GradeChangeEvent(
            record_key=key,
            component=GradeComponent.MAC,
            old_value=None,
            new_value=Decimal("12"),
            editor_id=99,
            changed_at="2025-10-01T10:00:00+00:00",
        )
    )
    repo.append(
        GradeChangeEvent(
            record_key=key,
            component=GradeComponent.MAC,
            old_value=Decimal("12"),
            new_value=Decimal("13.5"),
            editor_id=99,
            changed_at="2025-10-02T10:00:00+00:00",
            reason="revisão",
        )
    )

    events = repo.list_for(key)
    assert [e.new_value for e in events] == [Decimal("12"), Decimal("13.5")]
    assert events[1].old_value == Decimal("12")
    assert events[1].reason == "revisão"

    with pytest.raises(sqlite3.DatabaseError, match="append-only"):
        conn.execute("UPDATE grade_change_event SET new_value = '20'")
    with pytest.raises(sqlite3.DatabaseError, match="append-only"):
        conn.execute("DELETE FROM grade_change_event")


def _payment(year_month: str, status: PaymentStatus = PaymentStatus.PENDING) -> PaymentMonth:
    year, month = (int(p) for p in year_month.split("-"))
    return PaymentMonth(
        student_id=1,
        year_month=year_month,
        status=status,
        due_date=datetime.date(year, month, 15),
    )


def test_pending_months_listed_chronologically(conn: sqlite3.Connection) -> None:
    repo = SqliteFinanceRepository(conn)
    repo.insert_months(
        [_payment("2025-11"), _payment("2025-09"), _payment("2025-10", PaymentStatus.PAID)]
    )

    assert [m.year_month for m in repo.list_pending_months(1)] == ["2025-09", "2025-11"]
    assert repo.list_pending_months(2) == []


def test_mark_paid_is_one_way(conn: sqlite3.Connection) -> None:
    repo = SqliteFinanceRepository(conn)
    repo.insert_months([_payment("2025-09")])

    repo.mark_paid(1, "2025-09", "2025-09-10")
    assert repo.list_pending_months(1) == []

    with pytest.raises(PaymentTransitionError):
        repo.mark_paid(1, "2025-09", "2025-09-11")
    with pytest.raises(ValueError, match="Unknown payment month"):
        repo.mark_paid(1, "2025-12", "2025-12-01")


def test_schema_blocks_paid_to_pending(conn: sqlite3.Connection) -> None:
    repo = SqliteFinanceRepository(conn)
    repo.insert_months([_payment("2025-09", PaymentStatus.PAID)])

    with pytest.raises(sqlite3.DatabaseError, match="cannot return to pending"):
        conn.execute("UPDATE payment_month SET status = 'PENDING' WHERE year_month = '2025-09'")


def test_catalog_and_windows(conn: sqlite3.Connection) -> None:
    catalog = SqliteAcademicCatalog(conn)
    catalog.upsert_class(3, "10ª Classe")
    catalog.upsert_class(3, "11ª Classe")

    assert catalog.get_class_designation(3) == "11ª Classe"
    with pytest.raises(ValueError, match="Unknown class_id"):
        catalog.get_class_designation(404)

    windows = SqliteEntryWindowProvider(conn)
    window = EntryWindow(
        component=GradeComponent.PT,
        trimester=2,
        academic_year=YEAR,
        start_date=datetime.date(2026, 3, 1),
        end_date=datetime.date(2026, 3, 20),
        status=EntryWindowStatus.ACTIVE,
        name="Provas T2",
    )
    windows.insert_window(window)

    assert windows.list_windows(2, YEAR) == [window]
    assert windows.list_windows(1, YEAR) == []
