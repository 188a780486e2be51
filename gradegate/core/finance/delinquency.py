"""Delinquency (contencioso) evaluation over a student's monthly payment ledger.

Responsibilities:
  - Collect overdue months (Pending with due date before today) in chronological order.
  - Decide contencioso against a configured threshold.
  - Count down the grace period when the current month is the only pending month due so far.

Inputs/Outputs:
  - Inputs: PaymentMonth sequence (possibly None) and the evaluation date.
  - Outputs: DelinquencyStatus; recomputed per query, never stored.

Invariants:
  - Missing or malformed payment data yields zero overdue months; never raises.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import replace
from typing import Iterable, Optional

from gradegate.core.domain.enums import PaymentStatus
from gradegate.core.domain.models import DelinquencyStatus, PaymentMonth
from .calendar import year_month_of

logger = logging.getLogger(__name__)

DEFAULT_CONTENCIOSO_THRESHOLD = 2
DEFAULT_GRACE_PERIOD_DAYS = 5

CLEAR_STATUS = DelinquencyStatus(
    in_contencioso=False,
    overdue_months=[],
    days_remaining=0,
    grades_visible=True,
)


def _pending_months(payment_months: Iterable[PaymentMonth]) -> list[PaymentMonth]:
    pending: dict[str, PaymentMonth] = {}
    for month in payment_months:
        if not isinstance(month, PaymentMonth):
            logger.warning("payment_month_skipped value=%r", month)
            continue
        if not isinstance(month.due_date, datetime.date):
            logger.warning(
                "payment_month_skipped year_month=%s due_date=%r", month.year_month, month.due_date
            )
            continue
        if month.status != PaymentStatus.PENDING:
            continue
        if isinstance(month.due_date, datetime.datetime):
            month = replace(month, due_date=month.due_date.date())
        existing = pending.get(month.year_month)
        if existing is None or month.due_date < existing.due_date:
            pending[month.year_month] = month
    return sorted(pending.values(), key=lambda m: (m.due_date, m.year_month))


def evaluate_delinquency(
    payment_months: Optional[Iterable[PaymentMonth]],
    today: datetime.date,
    contencioso_threshold: int = DEFAULT_CONTENCIOSO_THRESHOLD,
    grace_period_days: int = DEFAULT_GRACE_PERIOD_DAYS,
) -> DelinquencyStatus:
    if payment_months is None:
        return CLEAR_STATUS
    if isinstance(today, datetime.datetime):
        today = today.date()

    pending = _pending_months(payment_months)
    overdue = [m for m in pending if m.due_date < today]
    in_contencioso = len(overdue) >= contencioso_threshold

    days_remaining = 0
    if not in_contencioso:
        current_key = year_month_of(today)
        current = next((m for m in pending if m.year_month == current_key), None)
        arrears = [m for m in overdue if m.year_month != current_key]
        if current is not None and not arrears:
            days_since_due = (today - current.due_date).days
            days_remaining = max(0, grace_period_days - days_since_due)

    return DelinquencyStatus(
        in_contencioso=in_contencioso,
        overdue_months=[m.year_month for m in overdue],
        days_remaining=days_remaining,
        grades_visible=not in_contencioso,
    )


class DelinquencyEvaluator:
    def __init__(
        self,
        contencioso_threshold: int = DEFAULT_CONTENCIOSO_THRESHOLD,
        grace_period_days: int = DEFAULT_GRACE_PERIOD_DAYS,
    ) -> None:
        if contencioso_threshold < 1:
            raise ValueError("contencioso_threshold must be >= 1")
        if grace_period_days < 0:
            raise ValueError("grace_period_days must be >= 0")
        self._threshold = contencioso_threshold
        self._grace_days = grace_period_days

    @property
    def contencioso_threshold(self) -> int:
        return self._threshold

    def evaluate(
        self, payment_months: Optional[Iterable[PaymentMonth]], today: datetime.date
    ) -> DelinquencyStatus:
        return evaluate_delinquency(
            payment_months,
            today,
            contencioso_threshold=self._threshold,
            grace_period_days=self._grace_days,
        )
