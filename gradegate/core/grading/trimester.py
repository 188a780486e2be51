"""Trimester aggregation: weighted components to average, classification and approval.

Responsibilities:
  - Validate components against the tier scale.
  - Compute the weighted average (MAC 30%, PP 30%, PT 40%) rounded half-up to 2 places.
  - Classify an average with the tier's bands.

Inputs/Outputs:
  - Inputs: GradeComponents and an EducationTier.
  - Outputs: TrimesterResult; PENDING when any component is absent.

Invariants:
  - Pure and deterministic; no clamping of out-of-range values.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from gradegate.core.domain.enums import AggregationStatus, EducationTier, GradeComponent
from gradegate.core.domain.errors import InvalidGradeValue
from gradegate.core.domain.models import GradeComponents, TrimesterResult
from gradegate.core.domain.scales import COMPONENT_WEIGHTS, scale_for
from .decimals import round2, to_decimal

PENDING_RESULT = TrimesterResult(
    status=AggregationStatus.PENDING,
    average=None,
    classification=None,
    approved=None,
)


def make_components(mac: object = None, pp: object = None, pt: object = None) -> GradeComponents:
    return GradeComponents(mac=to_decimal(mac), pp=to_decimal(pp), pt=to_decimal(pt))


def validate_component(component: GradeComponent, value: Optional[Decimal], tier: EducationTier) -> None:
    if value is None:
        return
    bound = scale_for(tier).scale_max
    if value < 0 or value > bound:
        raise InvalidGradeValue(component.value, bound, value)


def validate_components(components: GradeComponents, tier: EducationTier) -> None:
    for component in GradeComponent:
        validate_component(component, components.get(component), tier)


def classify(tier: EducationTier, average: Decimal) -> str:
    for low, label in scale_for(tier).bands:
        if average >= low:
            return label
    return scale_for(tier).bands[-1][1]


def is_approved(tier: EducationTier, average: Decimal) -> bool:
    return average >= scale_for(tier).approval_threshold


def weighted_average(components: GradeComponents) -> Optional[Decimal]:
    if not components.is_complete():
        return None
    total = sum(
        (components.get(c) * weight for c, weight in COMPONENT_WEIGHTS.items()),
        Decimal("0"),
    )
    return round2(total)


def compute_trimester(components: GradeComponents, tier: EducationTier) -> TrimesterResult:
    validate_components(components, tier)
    average = weighted_average(components)
    if average is None:
        return PENDING_RESULT
    return TrimesterResult(
        status=AggregationStatus.COMPLETE,
        average=average,
        classification=classify(tier, average),
        approved=is_approved(tier, average),
    )
