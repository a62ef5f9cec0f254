"""Custom exception hierarchy for syndicate-party."""


class PartyError(Exception):
    """Base exception for all syndicate-party errors."""


class ResourceNotFoundError(PartyError):
    """Raised when a referenced entity does not exist."""


class InvalidReferenceError(ResourceNotFoundError):
    """Raised when a foreign key reference is malformed or dangling."""


class BusinessRuleViolationError(PartyError):
    """Raised when a domain rule rejects the requested change."""


class ConcurrencyConflictError(PartyError):
    """Raised when an update carries a stale version."""


class ConfigurationError(PartyError):
    """Raised when configuration is invalid or missing."""


class StorageError(PartyError):
    """Raised when the storage backend fails unexpectedly."""
