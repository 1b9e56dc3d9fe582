"""Per-provider running cost totals for one conversation."""

import logging
import math
from collections.abc import Iterator, Mapping

from .constants import PROVIDER_IDS
from .errors import InvalidProviderError

logger = logging.getLogger(__name__)


class CostLedger(Mapping[str, float]):
    """Cumulative cost per provider.

    Holds exactly one entry per known provider, starting at zero. Entries only
    grow, through :meth:`record`.
    """

    def __init__(self) -> None:
        self._totals: dict[str, float] = {provider_id: 0.0 for provider_id in PROVIDER_IDS}

    @classmethod
    def from_mapping(cls, totals: Mapping[str, float]) -> "CostLedger":
        """Rebuild a ledger from running totals held by a client.

        Providers absent from ``totals`` start at zero.
        """
        ledger = cls()
        for provider_id, total in totals.items():
            ledger.record(provider_id, total)
        return ledger

    def record(self, provider_id: str, cost: float) -> float:
        if provider_id not in self._totals:
            raise InvalidProviderError(provider_id)
        if not (math.isfinite(cost) and cost >= 0):
            raise ValueError(f"cost must be a finite non-negative number: {cost}")

        self._totals[provider_id] += cost
        logger.debug(
            "Cost recorded",
            extra={"provider": provider_id, "cost": cost, "total": self._totals[provider_id]},
        )
        return self._totals[provider_id]

    def total(self) -> float:
        return sum(self._totals.values())

    def snapshot(self) -> dict[str, float]:
        return dict(self._totals)

    def __getitem__(self, provider_id: str) -> float:
        return self._totals[provider_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._totals)

    def __len__(self) -> int:
        return len(self._totals)

    def __repr__(self) -> str:
        return f"CostLedger({self._totals!r})"
