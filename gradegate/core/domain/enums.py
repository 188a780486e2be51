"""Domain enums for grading tiers, payments and access reasoning.

Responsibilities:
  - Define EducationTier, GradeComponent and PaymentStatus identifiers persisted in storage.
  - Provide stable access-gate reason codes and their display metadata.

Invariants:
  - Enum values must remain stable for persistence and audits.
  - ReasonCode metadata must be complete and deterministic.
"""

from __future__ import annotations

from enum import Enum


class EducationTier(Enum):
    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"


class GradeComponent(Enum):
    MAC = "MAC"
    PP = "PP"
    PT = "PT"


class AggregationStatus(Enum):
    COMPLETE = "COMPLETE"
    PENDING = "PENDING"


class PaymentStatus(Enum):
    PAID = "PAID"
    PENDING = "PENDING"


class EntryWindowStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ReasonCategory(Enum):
    BLOCKING = "BLOCKING"
    WARNING = "WARNING"
    INFO = "INFO"


# Stable identifiers for access decisions; value is the persisted code.
class ReasonCode(Enum):
    PAYMENTS_UP_TO_DATE = "PAYMENTS_UP_TO_DATE"
    GRACE_PERIOD = "GRACE_PERIOD"
    OVERDUE_BELOW_THRESHOLD = "OVERDUE_BELOW_THRESHOLD"
    CONTENCIOSO = "CONTENCIOSO"
    PAYMENT_DATA_UNAVAILABLE = "PAYMENT_DATA_UNAVAILABLE"


# UI/audit metadata keyed by reason code.
REASON_METADATA: dict[ReasonCode, dict[str, object]] = {
    ReasonCode.PAYMENTS_UP_TO_DATE: {
        "category": ReasonCategory.INFO,
        "message": "No overdue payments; grades are visible.",
    },
    ReasonCode.GRACE_PERIOD: {
        "category": ReasonCategory.WARNING,
        "message": "Current month is pending; pay before the grace period ends.",
    },
    ReasonCode.OVERDUE_BELOW_THRESHOLD: {
        "category": ReasonCategory.WARNING,
        "message": "Overdue months exist but have not reached the contencioso threshold.",
    },
    ReasonCode.CONTENCIOSO: {
        "category": ReasonCategory.BLOCKING,
        "message": "Student is in contencioso; grades are hidden until overdue months are paid.",
    },
    ReasonCode.PAYMENT_DATA_UNAVAILABLE: {
        "category": ReasonCategory.INFO,
        "message": "Payment data could not be read; access granted.",
    },
}


def reason_message(reason: ReasonCode) -> str:
    return str(REASON_METADATA[reason]["message"])


_missing = [rc for rc in ReasonCode if rc not in REASON_METADATA]
if _missing:
    raise RuntimeError(f"Missing REASON_METADATA for: {[m.value for m in _missing]}")

_extra = [k for k in REASON_METADATA.keys() if k not in set(ReasonCode)]
if _extra:
    raise RuntimeError(f"Extra REASON_METADATA keys: {[e.value for e in _extra]}")
