"""Application services for party management."""

from syndicate_party.services.party import PartyService

__all__ = ["PartyService"]
