"""Repository contract, query criteria and paging types."""

from __future__ import annotations

import contextlib
import math
import re
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, Sequence, TypeVar

from syndicate_party.config import PagingConfig

T = TypeVar("T")


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match on a text field."""

    field: str
    text: str

    def matches(self, entity: Any) -> bool:
        value = getattr(entity, self.field)
        return value is not None and self.text.casefold() in value.casefold()


@dataclass(frozen=True)
class Equals:
    """Equality match on a field (typically an enum)."""

    field: str
    value: Any

    def matches(self, entity: Any) -> bool:
        return getattr(entity, self.field) == self.value


# Signed base-10 integer, no surrounding whitespace
ENTITY_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ReferencesId:
    """Match a string reference field whose integer value is ``entity_id``.

    References are stored as the caller wrote them, so ``"+1"`` and ``"007"``
    refer to ids 1 and 7. Blank or unparsable values never match.
    """

    field: str
    entity_id: int

    def matches(self, entity: Any) -> bool:
        value = getattr(entity, self.field)
        return (
            value is not None
            and ENTITY_ID_PATTERN.fullmatch(value) is not None
            and int(value) == self.entity_id
        )


Criterion = Contains | Equals | ReferencesId


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page request with a single sort key."""

    page: int = 0
    size: int = 20
    sort: str = "id"
    descending: bool = False

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError(f"page must be >= 0, got {self.page}")
        if self.size < 1:
            raise ValueError(f"size must be >= 1, got {self.size}")

    @classmethod
    def of(
        cls,
        page: int = 0,
        size: int | None = None,
        sort: str = "id",
        descending: bool = False,
        paging: PagingConfig | None = None,
    ) -> PageRequest:
        """Build a request using configured defaults, clamping ``size`` to the maximum."""
        paging = paging or PagingConfig()
        size = paging.default_size if size is None else min(size, paging.max_size)
        return cls(page=page, size=size, sort=sort, descending=descending)

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    """One page of query results."""

    content: list[T]
    page: int
    size: int
    total_elements: int
    sort: str = "id"
    descending: bool = False

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def is_first(self) -> bool:
        return not self.has_previous

    @property
    def is_last(self) -> bool:
        return not self.has_next

    def __iter__(self) -> Iterator[T]:
        return iter(self.content)

    def __len__(self) -> int:
        return len(self.content)


class Repository(ABC, Generic[T]):
    """Storage contract for a single party entity type.

    ``save`` inserts when the entity has no id, assigning the id,
    ``version = 0`` and both audit timestamps. Otherwise it performs a
    compare-and-swap update keyed on ``(id, version)``: the write succeeds
    and bumps the version by one only when the supplied version equals
    the persisted one, and raises ``ConcurrencyConflictError`` otherwise.
    """

    entity_name: str

    @abstractmethod
    def find_by_id(self, entity_id: int) -> T | None:
        """Return the entity with ``entity_id`` or None."""

    @abstractmethod
    def exists_by_id(self, entity_id: int) -> bool:
        """Return True if an entity with ``entity_id`` is stored."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Insert or compare-and-swap update ``entity``; return the stored copy."""

    @abstractmethod
    def delete_by_id(self, entity_id: int) -> bool:
        """Remove the entity; return False if nothing was deleted."""

    @abstractmethod
    def find(self, criteria: Sequence[Criterion], page_request: PageRequest) -> Page[T]:
        """Return the page of entities matching every criterion."""

    @abstractmethod
    def count(self, criteria: Sequence[Criterion] = ()) -> int:
        """Count entities matching every criterion."""

    def find_all(self, page_request: PageRequest) -> Page[T]:
        """Return an unfiltered page."""
        return self.find((), page_request)


@dataclass
class PartyRepositories:
    """Repositories for all party entities sharing one unit of work.

    A PostgreSQL bundle shares one connection, so units of work are
    serialized: a second thread entering ``transaction()`` waits until the
    first one commits or rolls back instead of nesting as a savepoint.

    Parameters
    ----------
    connection : Any
        psycopg connection when backed by PostgreSQL; None for in-memory.
    """

    companies: Repository
    borrowers: Repository
    investors: Repository
    connection: Any = field(default=None, repr=False)
    _lock: Any = field(default_factory=threading.RLock, init=False, repr=False)

    @contextlib.contextmanager
    def transaction(self) -> Iterator[Any]:
        """Scope for one service call."""
        if self.connection is None:
            yield None
            return
        with self._lock:
            with self.connection.transaction() as tx:
                yield tx

    def close(self) -> None:
        """Close the shared connection, if any."""
        if self.connection is not None:
            self.connection.close()
