"""Tier-aware grade engine for a single configuration.

Responsibilities:
  - Resolve tiers from class designations through the single TierResolver.
  - Run trimester and final aggregation, delinquency evaluation and class statistics.
  - Build billing months from the configured due day and academic-year start month.

Inputs/Outputs:
  - Inputs: components, trimester averages, payment ledgers, EngineConfig.
  - Outputs: TrimesterResult, FinalResult, DelinquencyStatus, ClassStatistics.

Invariants:
  - Same inputs and config produce the same outputs; no I/O.
"""

from __future__ import annotations

import datetime
from typing import Callable, Iterable, Optional, Sequence

from gradegate.core.domain.enums import EducationTier, PaymentStatus
from gradegate.core.domain.models import (
    ClassStatistics,
    DelinquencyStatus,
    FinalResult,
    GradeComponents,
    PaymentMonth,
    TrimesterResult,
)
from gradegate.core.finance.calendar import payment_month
from gradegate.core.finance.delinquency import DelinquencyEvaluator
from gradegate.core.grading.final import compute_final
from gradegate.core.grading.statistics import summarize
from gradegate.core.grading.tier_resolver import TierResolver
from gradegate.core.grading.trimester import compute_trimester
from gradegate.engine_config import EngineConfig

_DEBUG_FN: Callable[[str], None] | None = None


def set_engine_debug(fn: Callable[[str], None] | None) -> None:
    global _DEBUG_FN
    _DEBUG_FN = fn


class GradeEngine:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        tier_resolver: Optional[TierResolver] = None,
        strict_final: bool = False,
    ) -> None:
        self._config = config or EngineConfig()
        self._tier_resolver = tier_resolver or TierResolver()
        self._strict_final = strict_final
        self._delinquency = DelinquencyEvaluator(
            contencioso_threshold=self._config.contencioso_threshold,
            grace_period_days=self._config.grace_period_days,
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def strict_final(self) -> bool:
        return self._strict_final

    @property
    def tier_resolver(self) -> TierResolver:
        return self._tier_resolver

    @property
    def delinquency_evaluator(self) -> DelinquencyEvaluator:
        return self._delinquency

    def resolve_tier(self, class_designation: Optional[str]) -> EducationTier:
        return self._tier_resolver.resolve(class_designation)

    def compute_trimester(self, components: GradeComponents, tier: EducationTier) -> TrimesterResult:
        result = compute_trimester(components, tier)
        if _DEBUG_FN is not None:
            _DEBUG_FN(
                f"TRIMESTER tier={tier.value} mac={components.mac} pp={components.pp} "
                f"pt={components.pt} status={result.status.value} average={result.average}"
            )
        return result

    def compute_final(self, trimester_averages: Sequence[object], tier: EducationTier) -> FinalResult:
        result = compute_final(trimester_averages, tier, strict=self._strict_final)
        if _DEBUG_FN is not None:
            _DEBUG_FN(
                f"FINAL tier={tier.value} averages={list(trimester_averages)} "
                f"strict={self._strict_final} final={result.final_average}"
            )
        return result

    def evaluate_delinquency(
        self, payment_months: Optional[Iterable[PaymentMonth]], today: datetime.date
    ) -> DelinquencyStatus:
        status = self._delinquency.evaluate(payment_months, today)
        if _DEBUG_FN is not None:
            _DEBUG_FN(
                f"DELINQUENCY today={today.isoformat()} overdue={status.overdue_months} "
                f"threshold={self._config.contencioso_threshold} "
                f"contencioso={status.in_contencioso} days_remaining={status.days_remaining}"
            )
        return status

    def class_statistics(
        self, results: Iterable[TrimesterResult | FinalResult], tier: EducationTier
    ) -> ClassStatistics:
        return summarize(results, tier)

    def billing_month(
        self,
        student_id: int,
        month_name: str,
        academic_year_start: int,
        status: PaymentStatus = PaymentStatus.PENDING,
    ) -> PaymentMonth:
        return payment_month(
            student_id,
            month_name,
            academic_year_start,
            status=status,
            due_day=self._config.payment_due_day,
            start_month=self._config.academic_year_start_month,
        )
