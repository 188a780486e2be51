"""Resolve a class designation to its education tier.

Responsibilities:
  - Own the single list of primary-tier class prefixes.
  - Match on exact label or prefix followed by " " or "-"; never by substring.

Invariants:
  - Unrecognized labels resolve to SECONDARY and the fallback is logged.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from gradegate.core.domain.enums import EducationTier
from gradegate.core.domain.scales import TierScale, scale_for

logger = logging.getLogger(__name__)

PRIMARY_CLASS_PREFIXES: tuple[str, ...] = (
    "Iniciação",
    "INICIÇÃO",
    "Pré-Classe",
    "1ª Classe",
    "2ª Classe",
    "3ª Classe",
    "4ª Classe",
    "5ª Classe",
    "6ª Classe",
)

# Labels that are known secondary grades; they resolve without a fallback warning.
SECONDARY_CLASS_PREFIXES: tuple[str, ...] = (
    "7ª Classe",
    "8ª Classe",
    "9ª Classe",
    "10ª Classe",
    "11ª Classe",
    "12ª Classe",
    "13ª Classe",
)


def _normalize(label: str) -> str:
    return label.strip().casefold()


def _matches_prefix(normalized: str, prefix: str) -> bool:
    p = _normalize(prefix)
    return normalized == p or normalized.startswith(p + " ") or normalized.startswith(p + "-")


class TierResolver:
    def __init__(
        self,
        primary_prefixes: Iterable[str] = PRIMARY_CLASS_PREFIXES,
        secondary_prefixes: Iterable[str] = SECONDARY_CLASS_PREFIXES,
    ) -> None:
        self._primary = tuple(primary_prefixes)
        self._secondary = tuple(secondary_prefixes)

    def resolve(self, class_designation: Optional[str]) -> EducationTier:
        if not class_designation or not class_designation.strip():
            logger.warning("tier_fallback designation=%r tier=%s", class_designation, "SECONDARY")
            return EducationTier.SECONDARY

        normalized = _normalize(class_designation)
        if any(_matches_prefix(normalized, p) for p in self._primary):
            return EducationTier.PRIMARY
        if not any(_matches_prefix(normalized, p) for p in self._secondary):
            logger.warning("tier_fallback designation=%r tier=%s", class_designation, "SECONDARY")
        return EducationTier.SECONDARY

    def resolve_scale(self, class_designation: Optional[str]) -> TierScale:
        return scale_for(self.resolve(class_designation))


_DEFAULT_RESOLVER = TierResolver()


def resolve_tier(class_designation: Optional[str]) -> EducationTier:
    return _DEFAULT_RESOLVER.resolve(class_designation)
