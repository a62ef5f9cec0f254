"""PostgreSQL repositories backed by psycopg.

Optimistic locking is pushed into the UPDATE statement itself::

    UPDATE companies SET ..., version = version + 1
    WHERE id = %s AND version = %s
    RETURNING *

so no read-compare-write window exists in application code. When no
row comes back the id is looked up once more to tell a stale version
(``ConcurrencyConflictError``) from a vanished row (``ResourceNotFoundError``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Sequence

import psycopg
from psycopg import sql

from syndicate_party.clock import SYSTEM_CLOCK, Clock
from syndicate_party.exceptions import (
    ConcurrencyConflictError,
    ResourceNotFoundError,
    StorageError,
)
from syndicate_party.models.base import Money
from syndicate_party.models.party import (
    Borrower,
    Company,
    CreditRating,
    Industry,
    Investor,
    InvestorType,
)
from syndicate_party.store.base import (
    Contains,
    Criterion,
    Equals,
    Page,
    PageRequest,
    ReferencesId,
    Repository,
    T,
)

logger = logging.getLogger(__name__)

AUDIT_COLUMNS = ("id", "created_at", "updated_at", "version")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS companies (
    id BIGSERIAL PRIMARY KEY,
    company_name VARCHAR(255) NOT NULL,
    registration_number VARCHAR(64),
    industry VARCHAR(32),
    address VARCHAR(512),
    country VARCHAR(64),
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL,
    version BIGINT NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS borrowers (
    id BIGSERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    email VARCHAR(320),
    phone_number VARCHAR(64),
    company_id VARCHAR(32),
    credit_limit NUMERIC(19, 2),
    credit_rating VARCHAR(8),
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL,
    version BIGINT NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS investors (
    id BIGSERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    email VARCHAR(320),
    phone_number VARCHAR(64),
    company_id VARCHAR(32),
    investment_capacity NUMERIC(19, 2) NOT NULL DEFAULT 0,
    current_investment_amount NUMERIC(19, 2) NOT NULL DEFAULT 0,
    investor_type VARCHAR(32),
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL,
    version BIGINT NOT NULL DEFAULT 0
);
"""


def _optional(converter: Callable[[Any], Any]) -> Callable[[Any], Any]:
    return lambda value: None if value is None else converter(value)


@dataclass(frozen=True)
class TableMapping:
    """Maps an entity dataclass onto a table whose columns share its field names."""

    table: str
    entity_type: type
    columns: tuple[str, ...]
    readers: dict[str, Callable[[Any], Any]] = field(default_factory=dict)

    def to_params(self, entity: Any) -> list[Any]:
        return [_to_db(getattr(entity, column)) for column in self.columns]

    def from_row(self, row: dict[str, Any]) -> Any:
        values = {}
        for column in (*self.columns, *AUDIT_COLUMNS):
            reader = self.readers.get(column)
            values[column] = reader(row[column]) if reader else row[column]
        return self.entity_type(**values)

    def check_field(self, name: str) -> None:
        if name not in self.columns and name not in AUDIT_COLUMNS:
            raise ValueError(f"Unknown field {name!r} for {self.table}")


def _to_db(value: Any) -> Any:
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, Enum):
        return value.value
    return value


COMPANY_TABLE = TableMapping(
    table="companies",
    entity_type=Company,
    columns=("company_name", "registration_number", "industry", "address", "country"),
    readers={"industry": _optional(Industry)},
)

BORROWER_TABLE = TableMapping(
    table="borrowers",
    entity_type=Borrower,
    columns=("name", "email", "phone_number", "company_id", "credit_limit", "credit_rating"),
    readers={"credit_limit": _optional(Money.of), "credit_rating": _optional(CreditRating)},
)

INVESTOR_TABLE = TableMapping(
    table="investors",
    entity_type=Investor,
    columns=(
        "name",
        "email",
        "phone_number",
        "company_id",
        "investment_capacity",
        "current_investment_amount",
        "investor_type",
        "is_active",
    ),
    readers={
        "investment_capacity": Decimal,
        "current_investment_amount": Money.of,
        "investor_type": _optional(InvestorType),
    },
)


class PostgresRepository(Repository[T]):
    """Repository for one entity type on a shared psycopg connection.

    The connection must use ``psycopg.rows.dict_row`` so rows come back
    keyed by column name.

    Parameters
    ----------
    connection : psycopg.Connection
        Open connection shared by all repositories of a unit of work.
    mapping : TableMapping
        Table layout for the entity type.
    entity_name : str
        Human-readable type name used in error messages.
    clock : Clock
        Source of audit timestamps.
    """

    def __init__(
        self,
        connection: psycopg.Connection,
        mapping: TableMapping,
        entity_name: str,
        clock: Clock = SYSTEM_CLOCK,
    ) -> None:
        self._conn = connection
        self._mapping = mapping
        self.entity_name = entity_name
        self._clock = clock
        self._table = sql.Identifier(mapping.table)

    def _execute(self, query: sql.Composable, params: Sequence[Any] = ()) -> Any:
        try:
            return self._conn.execute(query, params)
        except psycopg.Error as e:
            raise StorageError(f"{self.entity_name} query failed on {self._mapping.table}: {e}") from e

    def find_by_id(self, entity_id: int) -> T | None:
        """Return the entity with this id, or None."""
        query = sql.SQL("SELECT * FROM {} WHERE id = %s").format(self._table)
        row = self._execute(query, (entity_id,)).fetchone()
        return self._mapping.from_row(row) if row is not None else None

    def exists_by_id(self, entity_id: int) -> bool:
        """Check whether a row with this id exists."""
        query = sql.SQL("SELECT 1 FROM {} WHERE id = %s").format(self._table)
        return self._execute(query, (entity_id,)).fetchone() is not None

    def save(self, entity: T) -> T:
        """Insert a new entity or run a version-checked UPDATE."""
        if entity.id is None:
            return self._insert(entity)
        return self._compare_and_swap(entity)

    def _insert(self, entity: T) -> T:
        created_at = entity.created_at or self._clock.now()
        columns = [*self._mapping.columns, "created_at", "updated_at", "version"]
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            self._table,
            sql.SQL(", ").join(map(sql.Identifier, columns)),
            sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )
        params = [*self._mapping.to_params(entity), created_at, created_at, 0]
        row = self._execute(query, params).fetchone()
        return self._mapping.from_row(row)

    def _compare_and_swap(self, entity: T) -> T:
        if entity.version is None:
            raise ConcurrencyConflictError(
                f"{self.entity_name} {entity.id} cannot be updated without a version"
            )
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in self._mapping.columns
        )
        query = sql.SQL(
            "UPDATE {} SET {}, updated_at = %s, version = version + 1 "
            "WHERE id = %s AND version = %s RETURNING *"
        ).format(self._table, assignments)
        params = [*self._mapping.to_params(entity), self._clock.now(), entity.id, entity.version]
        row = self._execute(query, params).fetchone()
        if row is not None:
            return self._mapping.from_row(row)

        if not self.exists_by_id(entity.id):
            raise ResourceNotFoundError(f"{self.entity_name} not found with ID: {entity.id}")
        logger.debug(
            "Version check failed for %s %s at version %s", self.entity_name, entity.id, entity.version
        )
        raise ConcurrencyConflictError(
            f"{self.entity_name} {entity.id} was modified by another transaction "
            f"(expected version {entity.version})"
        )

    def delete_by_id(self, entity_id: int) -> bool:
        """Delete a row; return False if none matched."""
        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(self._table)
        return self._execute(query, (entity_id,)).rowcount > 0

    def _where(self, criteria: Sequence[Criterion]) -> tuple[sql.Composable, list[Any]]:
        if not criteria:
            return sql.SQL(""), []
        clauses = []
        params: list[Any] = []
        for criterion in criteria:
            self._mapping.check_field(criterion.field)
            column = sql.Identifier(criterion.field)
            if isinstance(criterion, Contains):
                clauses.append(sql.SQL("{} ILIKE %s").format(column))
                params.append(f"%{_escape_like(criterion.text)}%")
            elif isinstance(criterion, Equals):
                clauses.append(sql.SQL("{} = %s").format(column))
                params.append(_to_db(criterion.value))
            elif isinstance(criterion, ReferencesId):
                # Compare by integer value; non-numeric references never match
                clauses.append(
                    sql.SQL(
                        "CASE WHEN {} ~ '^[+-]?[0-9]+$' THEN CAST({} AS NUMERIC) = %s ELSE FALSE END"
                    ).format(column, column)
                )
                params.append(criterion.entity_id)
        return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params

    def find(self, criteria: Sequence[Criterion], page_request: PageRequest) -> Page[T]:
        """Return one sorted page of rows matching every criterion."""
        self._mapping.check_field(page_request.sort)
        where, params = self._where(criteria)
        total = self.count(criteria)
        query = sql.SQL("SELECT * FROM {}{} ORDER BY {} {}, id LIMIT %s OFFSET %s").format(
            self._table,
            where,
            sql.Identifier(page_request.sort),
            sql.SQL("DESC" if page_request.descending else "ASC"),
        )
        rows = self._execute(query, [*params, page_request.size, page_request.offset]).fetchall()
        return Page(
            content=[self._mapping.from_row(row) for row in rows],
            page=page_request.page,
            size=page_request.size,
            total_elements=total,
            sort=page_request.sort,
            descending=page_request.descending,
        )

    def count(self, criteria: Sequence[Criterion] = ()) -> int:
        """Count rows matching every criterion."""
        where, params = self._where(criteria)
        query = sql.SQL("SELECT COUNT(*) AS total FROM {}{}").format(self._table, where)
        return self._execute(query, params).fetchone()["total"]


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def create_schema(connection: psycopg.Connection) -> None:
    """Create party tables if they do not exist."""
    try:
        connection.execute(SCHEMA_SQL)
    except psycopg.Error as e:
        raise StorageError(f"Failed to create party schema: {e}") from e
    logger.info("Party schema ready")
