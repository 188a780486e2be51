"""Tests for the academic-year billing calendar."""

from __future__ import annotations

import datetime

import pytest

from gradegate.core.domain.enums import PaymentStatus
from gradegate.core.finance.calendar import (
    calendar_year_for,
    due_date_for,
    month_label,
    month_number,
    parse_year_month,
    payment_month,
)


@pytest.mark.parametrize(
    "name,number",
    [("Janeiro", 1), ("março", 3), ("Marco", 3), (" SETEMBRO ", 9), ("Dezembro", 12)],
)
def test_month_number_is_case_and_accent_insensitive(name: str, number: int) -> None:
    assert month_number(name) == number


def test_unknown_month_name_raises() -> None:
    with pytest.raises(ValueError):
        month_number("Brumário")


def test_months_before_start_month_belong_to_next_year() -> None:
    assert calendar_year_for(9, 2025) == 2025
    assert calendar_year_for(12, 2025) == 2025
    assert calendar_year_for(1, 2025) == 2026
    assert calendar_year_for(7, 2025) == 2026


def test_payment_month_uses_due_day() -> None:
    month = payment_month(4, "Fevereiro", 2025)

    assert month.year_month == "2026-02"
    assert month.due_date == datetime.date(2026, 2, 15)
    assert month.status == PaymentStatus.PENDING


def test_payment_month_with_custom_due_day() -> None:
    month = payment_month(4, "Outubro", 2025, status=PaymentStatus.PAID, due_day=10)

    assert month.due_date == datetime.date(2025, 10, 10)
    assert month.status == PaymentStatus.PAID


def test_due_date_and_label() -> None:
    assert due_date_for("2025-11") == datetime.date(2025, 11, 15)
    assert month_label("2025-09") == "Setembro 2025"


@pytest.mark.parametrize("value", ["2025", "2025-13", "abcd-ef", "2025-00"])
def test_parse_year_month_rejects_malformed(value: str) -> None:
    with pytest.raises(ValueError):
        parse_year_month(value)
