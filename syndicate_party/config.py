"""Configuration management for syndicate-party."""

from dataclasses import dataclass, field
from enum import Enum

from syndicate_party.exceptions import ConfigurationError

STORAGE_BACKENDS = ("memory", "postgres")


class CompanyDeletePolicy(str, Enum):
    """What to do when a deleted company is still referenced."""

    RESTRICT = "restrict"
    IGNORE = "ignore"


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "syndicate"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class PagingConfig:
    """Page size defaults applied to list and search calls."""

    default_size: int = 20
    max_size: int = 100

    def __post_init__(self) -> None:
        if self.default_size < 1:
            raise ConfigurationError(f"default_size must be positive, got {self.default_size}")
        if self.max_size < self.default_size:
            raise ConfigurationError(
                f"max_size ({self.max_size}) must be >= default_size ({self.default_size})"
            )


@dataclass
class PartyConfig:
    """Main configuration for syndicate-party."""

    storage_backend: str = "memory"
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    paging: PagingConfig = field(default_factory=PagingConfig)
    company_delete_policy: CompanyDeletePolicy = CompanyDeletePolicy.RESTRICT
    log_level: str = "INFO"
    log_format: str = "standard"

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend {self.storage_backend!r}; "
                f"expected one of {', '.join(STORAGE_BACKENDS)}"
            )

    @classmethod
    def from_env(cls) -> "PartyConfig":
        """Create config from environment variables."""
        import os

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=_int_env("POSTGRES_PORT", 5432),
            database=os.getenv("POSTGRES_DB", "syndicate"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        paging = PagingConfig(
            default_size=_int_env("PARTY_DEFAULT_PAGE_SIZE", 20),
            max_size=_int_env("PARTY_MAX_PAGE_SIZE", 100),
        )

        policy_value = os.getenv("PARTY_COMPANY_DELETE_POLICY", "restrict").lower()
        try:
            policy = CompanyDeletePolicy(policy_value)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid PARTY_COMPANY_DELETE_POLICY: {policy_value!r}"
            ) from e

        return cls(
            storage_backend=os.getenv("PARTY_STORAGE_BACKEND", "memory").lower(),
            postgres=postgres,
            paging=paging,
            company_delete_policy=policy,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _int_env(name: str, default: int) -> int:
    import os

    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
