"""Storage backends for party entities."""

import logging

from syndicate_party.clock import SYSTEM_CLOCK, Clock
from syndicate_party.config import PartyConfig
from syndicate_party.exceptions import ConfigurationError, StorageError
from syndicate_party.models.party import Borrower, Company, Investor
from syndicate_party.store.base import (
    Contains,
    Criterion,
    Equals,
    Page,
    PageRequest,
    PartyRepositories,
    ReferencesId,
    Repository,
)
from syndicate_party.store.memory import InMemoryRepository

logger = logging.getLogger(__name__)

__all__ = [
    "Contains",
    "Criterion",
    "Equals",
    "InMemoryRepository",
    "Page",
    "PageRequest",
    "PartyRepositories",
    "ReferencesId",
    "Repository",
    "create_repositories",
    "memory_repositories",
]


def memory_repositories(clock: Clock = SYSTEM_CLOCK) -> PartyRepositories:
    """Build an in-memory repository bundle."""
    return PartyRepositories(
        companies=InMemoryRepository(Company, clock),
        borrowers=InMemoryRepository(Borrower, clock),
        investors=InMemoryRepository(Investor, clock),
    )


def create_repositories(config: PartyConfig, clock: Clock = SYSTEM_CLOCK) -> PartyRepositories:
    """Build the repository bundle for the configured storage backend."""
    if config.storage_backend == "memory":
        logger.info("Using in-memory party storage")
        return memory_repositories(clock)

    if config.storage_backend == "postgres":
        import psycopg
        from psycopg.rows import dict_row

        from syndicate_party.store.postgres import (
            BORROWER_TABLE,
            COMPANY_TABLE,
            INVESTOR_TABLE,
            PostgresRepository,
            create_schema,
        )

        try:
            conn = psycopg.connect(
                config.postgres.connection_string, autocommit=True, row_factory=dict_row
            )
        except psycopg.Error as e:
            raise StorageError(
                f"Cannot connect to PostgreSQL at {config.postgres.host}:{config.postgres.port}: {e}"
            ) from e
        try:
            create_schema(conn)
        except StorageError:
            conn.close()
            raise
        logger.info(
            "Using PostgreSQL party storage at %s:%s/%s",
            config.postgres.host,
            config.postgres.port,
            config.postgres.database,
        )
        return PartyRepositories(
            companies=PostgresRepository(conn, COMPANY_TABLE, "Company", clock),
            borrowers=PostgresRepository(conn, BORROWER_TABLE, "Borrower", clock),
            investors=PostgresRepository(conn, INVESTOR_TABLE, "Investor", clock),
            connection=conn,
        )

    raise ConfigurationError(f"Unknown storage backend {config.storage_backend!r}")
