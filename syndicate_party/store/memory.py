"""In-memory repository with version-checked writes."""

from __future__ import annotations

import itertools
import threading
from dataclasses import fields, replace
from typing import Any, Sequence

from syndicate_party.clock import SYSTEM_CLOCK, Clock
from syndicate_party.exceptions import ConcurrencyConflictError, ResourceNotFoundError
from syndicate_party.store.base import Criterion, Page, PageRequest, Repository, T


def _sort_key(field_name: str):
    def key(entity: Any) -> tuple[bool, Any]:
        value = getattr(entity, field_name)
        return (value is None, value)

    return key


class InMemoryRepository(Repository[T]):
    """Dict-backed repository for a single entity type.

    Entities are copied on the way in and out so callers never hold a
    reference to the stored record. A lock guards the version check and
    the write so two updates carrying the same version cannot both land.

    Parameters
    ----------
    entity_type : type
        Entity dataclass stored here; its name is used in error messages.
    clock : Clock
        Source of audit timestamps.
    """

    def __init__(self, entity_type: type, clock: Clock = SYSTEM_CLOCK) -> None:
        self.entity_name = entity_type.__name__
        self._field_names = frozenset(f.name for f in fields(entity_type))
        self._clock = clock
        self._rows: dict[int, T] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_by_id(self, entity_id: int) -> T | None:
        """Return a copy of the stored entity, or None."""
        row = self._rows.get(entity_id)
        return replace(row) if row is not None else None

    def exists_by_id(self, entity_id: int) -> bool:
        """Check whether an entity with this id is stored."""
        return entity_id in self._rows

    def save(self, entity: T) -> T:
        """Insert a new entity or compare-and-swap an existing one."""
        with self._lock:
            if entity.id is None:
                stored = self._insert(entity)
            else:
                stored = self._compare_and_swap(entity)
            self._rows[stored.id] = stored
        return replace(stored)

    def _insert(self, entity: T) -> T:
        created_at = entity.created_at or self._clock.now()
        return replace(
            entity,
            id=next(self._ids),
            version=0,
            created_at=created_at,
            updated_at=created_at,
        )

    def _compare_and_swap(self, entity: T) -> T:
        current = self._rows.get(entity.id)
        if current is None:
            raise ResourceNotFoundError(f"{self.entity_name} not found with ID: {entity.id}")
        if entity.version is None or entity.version != current.version:
            raise ConcurrencyConflictError(
                f"{self.entity_name} {entity.id} was modified by another transaction "
                f"(expected version {entity.version}, found {current.version})"
            )
        return replace(
            entity,
            version=current.version + 1,
            created_at=current.created_at,
            updated_at=self._clock.now(),
        )

    def delete_by_id(self, entity_id: int) -> bool:
        """Remove an entity; return False if it was not stored."""
        with self._lock:
            return self._rows.pop(entity_id, None) is not None

    def _check_field(self, name: str) -> None:
        if name not in self._field_names:
            raise ValueError(f"Unknown field {name!r} for {self.entity_name}")

    def find(self, criteria: Sequence[Criterion], page_request: PageRequest) -> Page[T]:
        """Return one sorted page of entities matching every criterion."""
        self._check_field(page_request.sort)
        for criterion in criteria:
            self._check_field(criterion.field)
        with self._lock:
            matches = [row for row in self._rows.values() if all(c.matches(row) for c in criteria)]
        matches.sort(key=_sort_key(page_request.sort), reverse=page_request.descending)
        window = matches[page_request.offset : page_request.offset + page_request.size]
        return Page(
            content=[replace(row) for row in window],
            page=page_request.page,
            size=page_request.size,
            total_elements=len(matches),
            sort=page_request.sort,
            descending=page_request.descending,
        )

    def count(self, criteria: Sequence[Criterion] = ()) -> int:
        """Count entities matching every criterion."""
        for criterion in criteria:
            self._check_field(criterion.field)
        with self._lock:
            return sum(1 for row in self._rows.values() if all(c.matches(row) for c in criteria))

    def __len__(self) -> int:
        return len(self._rows)
