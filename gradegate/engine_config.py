from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class EngineConfig:
    profile: str = "default"
    contencioso_threshold: int = 2
    grace_period_days: int = 5
    payment_due_day: int = 15
    academic_year_start_month: int = 9
    cache_ttl_seconds: float | None = None


def _configs_dir() -> Path:
    return Path(__file__).resolve().parent / "configs"


def _require(payload: dict[str, Any], key: str, expected_type: type) -> Any:
    if key not in payload:
        raise ValueError(f"Missing required field '{key}' in engine config")
    value = payload[key]
    if expected_type is float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' must be float")
        return float(value)
    if expected_type is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' must be int")
        return value
    if not isinstance(value, expected_type):
        raise ValueError(f"Field '{key}' must be {expected_type.__name__}")
    return value


def config_from_payload(payload: Any) -> EngineConfig:
    if not isinstance(payload, dict):
        raise ValueError("Engine config must be a JSON object")

    contencioso_threshold = _require(payload, "contencioso_threshold", int)
    if contencioso_threshold < 1:
        raise ValueError("Field 'contencioso_threshold' must be >= 1")

    grace_period_days = _require(payload, "grace_period_days", int)
    if grace_period_days < 0:
        raise ValueError("Field 'grace_period_days' must be >= 0")

    payment_due_day = _require(payload, "payment_due_day", int)
    if payment_due_day < 1 or payment_due_day > 28:
        raise ValueError("Field 'payment_due_day' must be within [1, 28]")

    academic_year_start_month = _require(payload, "academic_year_start_month", int)
    if academic_year_start_month < 1 or academic_year_start_month > 12:
        raise ValueError("Field 'academic_year_start_month' must be within [1, 12]")

    cache_ttl_seconds: float | None = None
    if payload.get("cache_ttl_seconds") is not None:
        cache_ttl_seconds = _require(payload, "cache_ttl_seconds", float)
        if cache_ttl_seconds <= 0.0:
            raise ValueError("Field 'cache_ttl_seconds' must be > 0")

    return EngineConfig(
        profile=_require(payload, "profile", str),
        contencioso_threshold=contencioso_threshold,
        grace_period_days=grace_period_days,
        payment_due_day=payment_due_day,
        academic_year_start_month=academic_year_start_month,
        cache_ttl_seconds=cache_ttl_seconds,
    )


def load_engine_config_file(path: str | Path) -> EngineConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"Engine config not found: {config_path}")
    payload = json.loads(config_path.read_text(encoding="utf-8"))
    return config_from_payload(payload)


def load_engine_config(profile: str = "default") -> EngineConfig:
    config_path = _configs_dir() / f"{profile}.json"
    if not config_path.exists():
        raise ValueError(f"Unknown engine config profile: {profile}")

    config = load_engine_config_file(config_path)
    if config.profile != profile:
        raise ValueError(
            f"profile mismatch: requested '{profile}', config has '{config.profile}'"
        )
    return config
