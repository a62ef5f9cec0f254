"""Shared machinery for party request generators."""

from __future__ import annotations

import random
from abc import ABC
from typing import Sequence, TypeVar

from faker import Faker

V = TypeVar("V")


class BaseGenerator(ABC):
    """Seeded Faker plus a private ``random.Random`` for request generators.

    Each generator owns its random stream, so two generators built with
    the same seed produce the same requests regardless of what else runs
    in the process.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_US``).
    """

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        self.random = random.Random(seed)
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)

    def pick_weighted(self, options: Sequence[V], weights: Sequence[float]) -> V:
        return self.random.choices(options, weights=weights, k=1)[0]

    def maybe_company_id(self, company_ids: Sequence[int], rate: float) -> str | None:
        """Return a string company reference for roughly ``rate`` of calls.

        Returns None when no ids are supplied.
        """
        if not company_ids or self.random.random() >= rate:
            return None
        return str(self.random.choice(company_ids))
