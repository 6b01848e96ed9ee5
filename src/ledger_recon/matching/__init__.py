"""Matching engine and strategies."""

from .engine import MatchingEngine
from .strategies import (
    CHECK_MATCHES,
    CLOSE_MATCHES,
    MATCHED,
    CheckNumberStrategy,
    DateAmountStrategy,
    MatchingStrategy,
)

__all__ = [
    "MatchingEngine",
    "MatchingStrategy",
    "DateAmountStrategy",
    "CheckNumberStrategy",
    "MATCHED",
    "CLOSE_MATCHES",
    "CHECK_MATCHES",
]
