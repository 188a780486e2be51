from __future__ import annotations

from decimal import Decimal
from typing import Optional


def decimal_to_text(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def text_to_decimal(raw: Optional[object]) -> Optional[Decimal]:
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="ignore")
    text = str(raw).strip()
    if not text:
        return None
    return Decimal(text)


def int_to_bool(raw: Optional[object]) -> Optional[bool]:
    if raw is None:
        return None
    return bool(int(raw))
