"""Construct a fully wired app instance over a SQLite connection.

Responsibilities:
  - Assemble engine config, repositories, cache and optional entry windows.
Must not:
  - Implement grading or delinquency logic; composition only.
"""

from __future__ import annotations

import datetime
import sqlite3
from typing import Any, Callable, Optional

from gradegate.app_api.facade import GradeEngineApplication
from gradegate.core.engine.grade_engine import GradeEngine
from gradegate.engine_config import EngineConfig, load_engine_config
from gradegate.infra.cache.tagged_cache import CachedGradeRepository, TaggedCache
from gradegate.infra.sqlite.migrator import apply_migrations
from gradegate.infra.sqlite.repos.catalog_repo import SqliteAcademicCatalog, SqliteEntryWindowProvider
from gradegate.infra.sqlite.repos.finance_repo import SqliteFinanceRepository
from gradegate.infra.sqlite.repos.grade_history_repo import SqliteGradeHistoryRepository
from gradegate.infra.sqlite.repos.grade_repo import SqliteGradeRepository


def build_grade_engine_app(
    conn: sqlite3.Connection,
    config: Optional[EngineConfig] = None,
    profile: str = "default",
    enforce_entry_windows: bool = False,
    enable_cache: bool = True,
    strict_final: bool = False,
    migrate: bool = True,
    clock: Callable[[], datetime.date] = datetime.date.today,
    **kwargs: Any,
) -> GradeEngineApplication:
    """
    Composition root: build and wire the engine, SQLite repositories and cache,
    and return the application facade.
    """
    if config is None:
        config = load_engine_config(profile)
    if migrate:
        apply_migrations(conn)

    engine = GradeEngine(config=config, strict_final=strict_final)

    grade_repo = SqliteGradeRepository(conn)
    if enable_cache:
        grade_repo = CachedGradeRepository(
            grade_repo,
            TaggedCache(ttl_seconds=config.cache_ttl_seconds),
        )

    entry_windows = SqliteEntryWindowProvider(conn) if enforce_entry_windows else None

    return GradeEngineApplication(
        engine=engine,
        grade_repo=grade_repo,
        finance_repo=SqliteFinanceRepository(conn),
        catalog=SqliteAcademicCatalog(conn),
        history_repo=SqliteGradeHistoryRepository(conn),
        entry_windows=entry_windows,
        conn=conn,
        clock=clock,
        **kwargs,
    )
