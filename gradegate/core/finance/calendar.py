"""Billing calendar for an academic year.

Responsibilities:
  - Map Portuguese month names of a ledger to "YYYY-MM" and a due date.
  - Render year-month labels for display.

Invariants:
  - Months from the start month through December belong to the start year;
    earlier months belong to the following calendar year.
"""

from __future__ import annotations

import datetime
import unicodedata

from gradegate.core.domain.enums import PaymentStatus
from gradegate.core.domain.models import PaymentMonth

MONTH_NAMES: tuple[str, ...] = (
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
)


def _fold(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name.strip().casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_MONTH_NUMBERS: dict[str, int] = {_fold(name): i + 1 for i, name in enumerate(MONTH_NAMES)}


def month_number(month_name: str) -> int:
    number = _MONTH_NUMBERS.get(_fold(month_name))
    if number is None:
        raise ValueError(f"Unknown month name: {month_name!r}")
    return number


def calendar_year_for(month: int, academic_year_start: int, start_month: int = 9) -> int:
    if month >= start_month:
        return academic_year_start
    return academic_year_start + 1


def format_year_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def parse_year_month(year_month: str) -> tuple[int, int]:
    try:
        year_s, month_s = year_month.split("-", 1)
        year, month = int(year_s), int(month_s)
    except ValueError as exc:
        raise ValueError(f"year_month must be 'YYYY-MM', got {year_month!r}") from exc
    if month < 1 or month > 12:
        raise ValueError(f"year_month must be 'YYYY-MM', got {year_month!r}")
    return year, month


def year_month_of(day: datetime.date) -> str:
    return format_year_month(day.year, day.month)


def due_date_for(year_month: str, due_day: int = 15) -> datetime.date:
    year, month = parse_year_month(year_month)
    return datetime.date(year, month, due_day)


def month_label(year_month: str) -> str:
    year, month = parse_year_month(year_month)
    return f"{MONTH_NAMES[month - 1]} {year}"


def payment_month(
    student_id: int,
    month_name: str,
    academic_year_start: int,
    status: PaymentStatus = PaymentStatus.PENDING,
    due_day: int = 15,
    start_month: int = 9,
) -> PaymentMonth:
    month = month_number(month_name)
    year = calendar_year_for(month, academic_year_start, start_month)
    year_month = format_year_month(year, month)
    return PaymentMonth(
        student_id=student_id,
        year_month=year_month,
        status=status,
        due_date=due_date_for(year_month, due_day),
    )
