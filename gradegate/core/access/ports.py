from __future__ import annotations

from typing import Protocol

from gradegate.core.domain.models import PaymentMonth


class FinanceRepository(Protocol):
    def list_pending_months(self, student_id: int) -> list[PaymentMonth]:
        ...
