"""Domain models for party management."""

from syndicate_party.models.base import Money

__all__ = ["Money"]
