"""Grading scales per education tier.

Responsibilities:
  - Define scale max, approval threshold, component weights and classification bands.
  - Aggregators and validators must read thresholds from this table only.

Invariants:
  - Bands are ordered by descending lower bound; lower bounds are inclusive.
  - Must remain stable for auditability; changes alter every derived grade.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .enums import EducationTier, GradeComponent


@dataclass(frozen=True)
class TierScale:
    tier: EducationTier
    scale_max: Decimal
    approval_threshold: Decimal
    bands: tuple[tuple[Decimal, str], ...]


COMPONENT_WEIGHTS: dict[GradeComponent, Decimal] = {
    GradeComponent.MAC: Decimal("0.30"),
    GradeComponent.PP: Decimal("0.30"),
    GradeComponent.PT: Decimal("0.40"),
}

TIER_SCALES: dict[EducationTier, TierScale] = {
    EducationTier.PRIMARY: TierScale(
        tier=EducationTier.PRIMARY,
        scale_max=Decimal("10"),
        approval_threshold=Decimal("5"),
        bands=(
            (Decimal("5"), "Positiva"),
            (Decimal("0"), "Negativa"),
        ),
    ),
    EducationTier.SECONDARY: TierScale(
        tier=EducationTier.SECONDARY,
        scale_max=Decimal("20"),
        approval_threshold=Decimal("10"),
        bands=(
            (Decimal("17"), "Muito Bom"),
            (Decimal("14"), "Bom"),
            (Decimal("10"), "Suficiente"),
            (Decimal("0"), "Insuficiente"),
        ),
    ),
}


def scale_for(tier: EducationTier) -> TierScale:
    return TIER_SCALES[tier]


if sum(COMPONENT_WEIGHTS.values()) != Decimal("1"):
    raise RuntimeError("COMPONENT_WEIGHTS must sum to 1")

for _scale in TIER_SCALES.values():
    _lows = [low for low, _ in _scale.bands]
    if _lows != sorted(_lows, reverse=True) or _lows[-1] != Decimal("0"):
        raise RuntimeError(f"Invalid classification bands for {_scale.tier.value}")
