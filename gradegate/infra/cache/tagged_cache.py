"""Repository-level read cache with tag invalidation.

Responsibilities:
  - Cache grade reads keyed by entity identity, each entry carrying invalidation tags.
  - Invalidate every entry sharing a tag when a write touches that entity.
Must not:
  - Cache writes or hold uncommitted state across saves; saves always reach the inner repository.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Optional, TypeVar

from gradegate.app_api.ports import GradeRepository
from gradegate.core.domain.models import GradeComponents, TrimesterRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Entry:
    value: object
    tags: frozenset[str]
    expires_at: Optional[float]


class TaggedCache:
    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, _Entry] = {}
        self._by_tag: dict[str, set[Hashable]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _drop(self, key: Hashable) -> None:
        entry = self._entries.pop(key, None)
        if entry is None:
            return
        for tag in entry.tags:
            keys = self._by_tag.get(tag)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._by_tag[tag]

    def set(self, key: Hashable, value: object, tags: Iterable[str]) -> None:
        self._drop(key)
        expires_at = None if self._ttl is None else self._clock() + self._ttl
        entry = _Entry(value=value, tags=frozenset(tags), expires_at=expires_at)
        self._entries[key] = entry
        for tag in entry.tags:
            self._by_tag.setdefault(tag, set()).add(key)

    def get_or_load(self, key: Hashable, tags: Iterable[str], loader: Callable[[], T]) -> T:
        entry = self._entries.get(key)
        if entry is not None:
            if entry.expires_at is None or self._clock() < entry.expires_at:
                self.hits += 1
                return entry.value  # type: ignore[return-value]
            self._drop(key)
        self.misses += 1
        value = loader()
        self.set(key, value, tags)
        return value

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        removed = 0
        for tag in tags:
            for key in list(self._by_tag.get(tag, ())):
                self._drop(key)
                removed += 1
        if removed:
            logger.debug("cache_invalidated entries=%s", removed)
        return removed

    def clear(self) -> None:
        self._entries.clear()
        self._by_tag.clear()

    def stats(self) -> dict[str, int]:
        return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}


def _student_tag(student_id: int) -> str:
    return f"student:{student_id}"


def _class_tag(class_id: int, discipline_id: int, trimester: int, year: str) -> str:
    return f"class:{class_id}:{discipline_id}:{year}:T{trimester}"


class CachedGradeRepository:
    """Read-through cache in front of a GradeRepository; saves invalidate by tag."""

    def __init__(self, inner: GradeRepository, cache: Optional[TaggedCache] = None) -> None:
        self._inner = inner
        self._cache = cache if cache is not None else TaggedCache()

    @property
    def cache(self) -> TaggedCache:
        return self._cache

    def fetch_record(
        self, student_id: int, discipline_id: int, class_id: int, trimester: int, year: str
    ) -> Optional[TrimesterRecord]:
        return self._cache.get_or_load(
            ("record", student_id, discipline_id, class_id, trimester, year),
            [_student_tag(student_id), _class_tag(class_id, discipline_id, trimester, year)],
            lambda: self._inner.fetch_record(student_id, discipline_id, class_id, trimester, year),
        )

    def fetch(
        self, student_id: int, discipline_id: int, class_id: int, trimester: int, year: str
    ) -> GradeComponents:
        record = self.fetch_record(student_id, discipline_id, class_id, trimester, year)
        if record is None:
            return GradeComponents()
        return record.components

    def save(self, record: TrimesterRecord, expected_version: int) -> TrimesterRecord:
        try:
            return self._inner.save(record, expected_version)
        finally:
            self._cache.invalidate_tags(
                [
                    _student_tag(record.student_id),
                    _class_tag(
                        record.class_id, record.discipline_id, record.trimester, record.academic_year
                    ),
                ]
            )

    def list_year(self, student_id: int, discipline_id: int, year: str) -> list[TrimesterRecord]:
        return list(
            self._cache.get_or_load(
                ("year", student_id, discipline_id, year),
                [_student_tag(student_id)],
                lambda: self._inner.list_year(student_id, discipline_id, year),
            )
        )

    def list_student_year(self, student_id: int, year: str) -> list[TrimesterRecord]:
        return list(
            self._cache.get_or_load(
                ("student_year", student_id, year),
                [_student_tag(student_id)],
                lambda: self._inner.list_student_year(student_id, year),
            )
        )

    def list_class_trimester(
        self, class_id: int, discipline_id: int, trimester: int, year: str
    ) -> list[TrimesterRecord]:
        return list(
            self._cache.get_or_load(
                ("class", class_id, discipline_id, trimester, year),
                [_class_tag(class_id, discipline_id, trimester, year)],
                lambda: self._inner.list_class_trimester(class_id, discipline_id, trimester, year),
            )
        )
