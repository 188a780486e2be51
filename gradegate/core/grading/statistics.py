"""Class report statistics over trimester or final results."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

import numpy as np

from gradegate.core.domain.enums import AggregationStatus, EducationTier
from gradegate.core.domain.models import ClassStatistics, FinalResult, TrimesterResult
from .decimals import round1, round2
from .trimester import is_approved


def _average_of(result: TrimesterResult | FinalResult) -> Optional[Decimal]:
    if isinstance(result, FinalResult):
        return result.final_average
    return result.average


def summarize(
    results: Iterable[TrimesterResult | FinalResult],
    tier: EducationTier,
) -> ClassStatistics:
    total = 0
    approved = 0
    failed = 0
    pending = 0
    averages: list[Decimal] = []
    for result in results:
        total += 1
        average = _average_of(result)
        if result.status == AggregationStatus.PENDING or average is None:
            pending += 1
            continue
        averages.append(average)
        if is_approved(tier, average):
            approved += 1
        else:
            failed += 1

    overall: Optional[Decimal] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None
    if averages:
        overall = round2(sum(averages, Decimal("0")) / Decimal(len(averages)))
        values = np.asarray([float(a) for a in averages], dtype=float)
        median = float(np.median(values))
        std_dev = float(np.std(values))

    approval_rate = Decimal("0")
    if total:
        approval_rate = round1(Decimal(approved) * Decimal(100) / Decimal(total))

    return ClassStatistics(
        total_students=total,
        approved=approved,
        failed=failed,
        pending=pending,
        overall_average=overall,
        approval_rate=approval_rate,
        median=median,
        std_dev=std_dev,
    )
