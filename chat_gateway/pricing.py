"""Cost computation shared by every provider."""

import math
from collections.abc import Sequence

from .constants import GEMINI_TOKENS_PER_CHARACTER, TOKENS_PER_PRICE_UNIT
from .schemas import Message


def compute_cost(token_count: float, price_per_million: float) -> float:
    """Return the dollar cost of ``token_count`` tokens at ``price_per_million``."""
    if not (math.isfinite(token_count) and token_count >= 0):
        raise ValueError(f"token_count must be a finite non-negative number: {token_count}")
    if not (math.isfinite(price_per_million) and price_per_million >= 0):
        raise ValueError(
            f"price_per_million must be a finite non-negative number: {price_per_million}"
        )
    return (token_count / TOKENS_PER_PRICE_UNIT) * price_per_million


def estimate_tokens(history: Sequence[Message]) -> float:
    """Character-count heuristic for providers that report no usage.

    The figure is approximate by construction: 1.3 tokens per character of
    every message content sent in the call.
    """
    return sum(len(message.content) for message in history) * GEMINI_TOKENS_PER_CHARACTER
