"""Grade visibility gate driven by delinquency status.

Responsibilities:
  - Fetch a student's pending months and turn the DelinquencyStatus into an AccessDecision.
  - List overdue months when access is denied.

Invariants:
  - Read-only: never blocks grade entry and never touches grade data.
  - Finance read failures fail open with PAYMENT_DATA_UNAVAILABLE.
"""

from __future__ import annotations

import datetime
import logging
from typing import Callable, Optional

from gradegate.core.domain.enums import ReasonCode, reason_message
from gradegate.core.domain.models import AccessDecision, DelinquencyStatus
from gradegate.core.finance.calendar import month_label
from gradegate.core.finance.delinquency import DelinquencyEvaluator
from .ports import FinanceRepository

logger = logging.getLogger(__name__)


def _reason_for(status: DelinquencyStatus) -> ReasonCode:
    if status.in_contencioso:
        return ReasonCode.CONTENCIOSO
    if status.days_remaining > 0:
        return ReasonCode.GRACE_PERIOD
    if status.overdue_months:
        return ReasonCode.OVERDUE_BELOW_THRESHOLD
    return ReasonCode.PAYMENTS_UP_TO_DATE


def decision_from_status(student_id: int, status: DelinquencyStatus) -> AccessDecision:
    reason = _reason_for(status)
    message = reason_message(reason)
    if status.overdue_months:
        labels = ", ".join(month_label(m) for m in status.overdue_months)
        message = f"{message} Overdue months ({len(status.overdue_months)}): {labels}."
    elif reason == ReasonCode.GRACE_PERIOD:
        message = f"{message} Days remaining: {status.days_remaining}."
    return AccessDecision(
        student_id=student_id,
        allowed=status.grades_visible,
        reason=reason,
        overdue_months=list(status.overdue_months),
        days_remaining=status.days_remaining,
        message=message,
    )


class AccessGate:
    def __init__(
        self,
        finance_repo: FinanceRepository,
        evaluator: Optional[DelinquencyEvaluator] = None,
        clock: Callable[[], datetime.date] = datetime.date.today,
    ) -> None:
        self._finance_repo = finance_repo
        self._evaluator = evaluator or DelinquencyEvaluator()
        self._clock = clock

    def evaluate(self, student_id: int, today: Optional[datetime.date] = None) -> Optional[DelinquencyStatus]:
        as_of = today or self._clock()
        try:
            months = self._finance_repo.list_pending_months(student_id)
            return self._evaluator.evaluate(months, as_of)
        except Exception as exc:
            logger.warning("finance_read_failed student_id=%s err=%s", student_id, exc)
            return None

    def can_view_grades(self, student_id: int, today: Optional[datetime.date] = None) -> AccessDecision:
        status = self.evaluate(student_id, today)
        if status is None:
            return AccessDecision(
                student_id=student_id,
                allowed=True,
                reason=ReasonCode.PAYMENT_DATA_UNAVAILABLE,
                message=reason_message(ReasonCode.PAYMENT_DATA_UNAVAILABLE),
            )
        decision = decision_from_status(student_id, status)
        if not decision.allowed:
            logger.info(
                "grades_hidden student_id=%s overdue_months=%s",
                student_id,
                ",".join(decision.overdue_months),
            )
        return decision
