"""Year-end aggregation over trimester averages.

Responsibilities:
  - Average whichever trimester averages are present (lenient) or require all three (strict).
  - Reuse the trimester classification for the final average.

Invariants:
  - No present averages means no final average; never a zero.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from gradegate.core.domain.enums import AggregationStatus, EducationTier
from gradegate.core.domain.models import FinalRecord, FinalResult, TrimesterRecord
from .decimals import round2, to_decimal
from .trimester import classify

TRIMESTERS = (1, 2, 3)

PENDING_FINAL = FinalResult(
    status=AggregationStatus.PENDING,
    final_average=None,
    final_classification=None,
)


def compute_final(
    trimester_averages: Sequence[object],
    tier: EducationTier,
    strict: bool = False,
) -> FinalResult:
    averages = [to_decimal(v) for v in trimester_averages]
    present = [v for v in averages if v is not None]
    if not present:
        return PENDING_FINAL
    if strict and (len(averages) < len(TRIMESTERS) or len(present) < len(averages)):
        return PENDING_FINAL

    final_average = round2(sum(present, Decimal("0")) / Decimal(len(present)))
    return FinalResult(
        status=AggregationStatus.COMPLETE,
        final_average=final_average,
        final_classification=classify(tier, final_average),
    )


def averages_by_trimester(
    records: Sequence[TrimesterRecord],
) -> tuple[Optional[Decimal], Optional[Decimal], Optional[Decimal]]:
    slots: dict[int, Optional[Decimal]] = {t: None for t in TRIMESTERS}
    for record in records:
        if record.trimester in slots:
            slots[record.trimester] = record.average
    return slots[1], slots[2], slots[3]


def build_final_record(
    student_id: int,
    discipline_id: int,
    academic_year: str,
    records: Sequence[TrimesterRecord],
    tier: EducationTier,
    strict: bool = False,
) -> FinalRecord:
    averages = averages_by_trimester(records)
    result = compute_final(list(averages), tier, strict=strict)
    return FinalRecord(
        student_id=student_id,
        discipline_id=discipline_id,
        academic_year=academic_year,
        trimester_averages=averages,
        final_average=result.final_average,
        final_classification=result.final_classification,
        tier=tier,
    )
