"""Tests for the tagged read cache and the caching grade repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import pytest

from gradegate.core.domain.errors import StaleRecordError
from gradegate.core.domain.models import GradeComponents, TrimesterRecord
from gradegate.infra.cache.tagged_cache import CachedGradeRepository, TaggedCache

YEAR = "2025/2026"


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _CountingGradeRepo:
    def __init__(self) -> None:
        self.records: dict[tuple[int, int, int, int, str], TrimesterRecord] = {}
        self.reads = 0
        self.fail_saves = False

    def fetch_record(
        self, student_id: int, discipline_id: int, class_id: int, trimester: int, year: str
    ) -> Optional[TrimesterRecord]:
        self.reads += 1
        return self.records.get((student_id, discipline_id, class_id, trimester, year))

    def fetch(
        self, student_id: int, discipline_id: int, class_id: int, trimester: int, year: str
    ) -> GradeComponents:
        record = self.fetch_record(student_id, discipline_id, class_id, trimester, year)
        return record.components if record is not None else GradeComponents()

    def save(self, record: TrimesterRecord, expected_version: int) -> TrimesterRecord:
        if self.fail_saves:
            raise StaleRecordError(record.key, expected_version, None)
        key = (record.student_id, record.discipline_id, record.class_id, record.trimester, record.academic_year)
        saved = TrimesterRecord(
            student_id=record.student_id,
            discipline_id=record.discipline_id,
            class_id=record.class_id,
            trimester=record.trimester,
            academic_year=record.academic_year,
            components=record.components,
            version=expected_version + 1,
        )
        self.records[key] = saved
        return saved

    def list_year(self, student_id: int, discipline_id: int, year: str) -> list[TrimesterRecord]:
        self.reads += 1
        return [
            r
            for (s, d, _c, _t, y), r in sorted(self.records.items())
            if s == student_id and d == discipline_id and y == year
        ]

    def list_student_year(self, student_id: int, year: str) -> list[TrimesterRecord]:
        self.reads += 1
        return [r for (s, _d, _c, _t, y), r in sorted(self.records.items()) if s == student_id and y == year]

    def list_class_trimester(
        self, class_id: int, discipline_id: int, trimester: int, year: str
    ) -> list[TrimesterRecord]:
        self.reads += 1
        return [
            r
            for (_s, d, c, t, y), r in sorted(self.records.items())
            if c == class_id and d == discipline_id and t == trimester and y == year
        ]


def _record(student_id: int = 1, mac: str = "10") -> TrimesterRecord:
    return TrimesterRecord(
        student_id=student_id,
        discipline_id=2,
        class_id=3,
        trimester=1,
        academic_year=YEAR,
        components=GradeComponents(mac=Decimal(mac)),
    )


def test_get_or_load_hits_after_first_load() -> None:
    cache = TaggedCache()
    calls: list[int] = []

    def loader() -> str:
        calls.append(1)
        return "value"

    assert cache.get_or_load("k", ["t"], loader) == "value"
    assert cache.get_or_load("k", ["t"], loader) == "value"
    assert len(calls) == 1
    assert cache.stats() == {"entries": 1, "hits": 1, "misses": 1}


def test_invalidate_tags_drops_every_tagged_entry() -> None:
    cache = TaggedCache()
    cache.set("a", 1, ["student:1", "class:x"])
    cache.set("b", 2, ["student:1"])
    cache.set("c", 3, ["student:2"])

    assert cache.invalidate_tags(["student:1"]) == 2
    assert len(cache) == 1
    assert cache.invalidate_tags(["class:x"]) == 0


def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache = TaggedCache(ttl_seconds=10, clock=clock)
    cache.set("k", "old", [])

    clock.now = 9.9
    assert cache.get_or_load("k", [], lambda: "new") == "old"
    clock.now = 10.0
    assert cache.get_or_load("k", [], lambda: "new") == "new"


def test_empty_cache_instance_is_used() -> None:
    cache = TaggedCache()
    repo = CachedGradeRepository(_CountingGradeRepo(), cache)

    assert repo.cache is cache


def test_reads_are_cached_until_save() -> None:
    inner = _CountingGradeRepo()
    repo = CachedGradeRepository(inner)
    repo.save(_record(), expected_version=0)

    repo.fetch_record(1, 2, 3, 1, YEAR)
    repo.fetch(1, 2, 3, 1, YEAR)
    repo.list_student_year(1, YEAR)
    repo.list_student_year(1, YEAR)
    assert inner.reads == 2

    repo.save(_record(mac="15"), expected_version=1)

    assert repo.fetch(1, 2, 3, 1, YEAR).mac == Decimal("15")
    assert inner.reads == 3


def test_save_invalidates_class_listing() -> None:
    inner = _CountingGradeRepo()
    repo = CachedGradeRepository(inner)
    repo.save(_record(student_id=1), expected_version=0)

    assert len(repo.list_class_trimester(3, 2, 1, YEAR)) == 1
    repo.save(_record(student_id=2), expected_version=0)

    assert len(repo.list_class_trimester(3, 2, 1, YEAR)) == 2


def test_save_for_other_student_keeps_unrelated_entries() -> None:
    inner = _CountingGradeRepo()
    repo = CachedGradeRepository(inner)
    repo.save(_record(student_id=1), expected_version=0)
    repo.list_year(1, 2, YEAR)

    repo.save(_record(student_id=5), expected_version=0)
    repo.list_year(1, 2, YEAR)

    assert inner.reads == 1


def test_failed_save_still_invalidates() -> None:
    inner = _CountingGradeRepo()
    repo = CachedGradeRepository(inner)
    repo.fetch_record(1, 2, 3, 1, YEAR)
    inner.fail_saves = True

    with pytest.raises(StaleRecordError):
        repo.save(_record(), expected_version=0)

    repo.fetch_record(1, 2, 3, 1, YEAR)
    assert inner.reads == 2


def test_listed_records_are_copies() -> None:
    repo = CachedGradeRepository(_CountingGradeRepo())
    repo.save(_record(), expected_version=0)

    listing = repo.list_year(1, 2, YEAR)
    listing.clear()

    assert len(repo.list_year(1, 2, YEAR)) == 1
