"""
Matching strategies for transaction reconciliation.
Each strategy implements one matching tier.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, Optional

from ..models.transaction import MatchPair, MatchType, NormalizedTransaction
from ..normalization.fields import amounts_match, days_difference

MATCHED = "matched"
CLOSE_MATCHES = "close_matches"
CHECK_MATCHES = "check_matches"


class MatchingStrategy(ABC):
    """
    Abstract base class for matching tiers.

    A tier sees only transactions left unmatched by earlier tiers and
    reports which MatchResult partition its pairs belong to.
    """

    partition: str = MATCHED

    @abstractmethod
    def find_match(
        self,
        bank_txn: NormalizedTransaction,
        candidates: list[NormalizedTransaction],
    ) -> Optional[NormalizedTransaction]:
        """
        Return the first candidate this tier accepts for ``bank_txn``.

        Args:
            bank_txn: Unmatched bank transaction
            candidates: Unmatched internal transactions, in ledger order

        Returns:
            The accepted internal transaction, or None
        """
        pass

    @abstractmethod
    def build_pair(
        self,
        bank_txn: NormalizedTransaction,
        internal_txn: NormalizedTransaction,
        tier_name: str,
    ) -> MatchPair:
        """Describe an accepted pairing."""
        pass


class DateAmountStrategy(MatchingStrategy):
    """
    Amount match with the dates inside a window.

    First-fit: the earliest eligible candidate wins even if a later one
    has a closer date.
    """

    partition = MATCHED

    def __init__(
        self,
        window_days: int = 30,
        amount_tolerance: Decimal = Decimal("0.01"),
    ):
        """
        Args:
            window_days: Maximum absolute days between the two dates
            amount_tolerance: Absolute amounts must differ by less than this
        """
        self.window_days = window_days
        self.amount_tolerance = amount_tolerance

    def find_match(
        self,
        bank_txn: NormalizedTransaction,
        candidates: list[NormalizedTransaction],
    ) -> Optional[NormalizedTransaction]:
        for internal_txn in candidates:
            if not amounts_match(bank_txn.amount, internal_txn.amount, self.amount_tolerance):
                continue
            if abs(days_difference(bank_txn.date, internal_txn.date)) <= self.window_days:
                return internal_txn
        return None

    def build_pair(
        self,
        bank_txn: NormalizedTransaction,
        internal_txn: NormalizedTransaction,
        tier_name: str,
    ) -> MatchPair:
        days = days_difference(bank_txn.date, internal_txn.date)
        return MatchPair(
            bank=bank_txn,
            internal=internal_txn,
            days_difference=days,
            match_type=MatchType.EXACT if days == 0 else MatchType.DATE_MATCH,
            tier=tier_name,
        )


class CheckNumberStrategy(MatchingStrategy):
    """
    Check number plus amount, regardless of date.

    Only bank transactions that look like checks are considered.
    """

    partition = CHECK_MATCHES

    def __init__(
        self,
        amount_tolerance: Decimal = Decimal("0.01"),
        check_indicators: Iterable[str] = ("check", "chk", "check paid", "disbursement"),
    ):
        self.amount_tolerance = amount_tolerance
        self.check_indicators = [i.lower() for i in check_indicators]

    def is_check(self, txn: NormalizedTransaction) -> bool:
        """Whether the type or description mentions a check indicator."""
        kind = txn.transaction_type.lower()
        description = txn.description.lower()
        return any(i in kind or i in description for i in self.check_indicators)

    def find_match(
        self,
        bank_txn: NormalizedTransaction,
        candidates: list[NormalizedTransaction],
    ) -> Optional[NormalizedTransaction]:
        if not bank_txn.check_number or not self.is_check(bank_txn):
            return None

        for internal_txn in candidates:
            if (
                internal_txn.check_number == bank_txn.check_number
                and amounts_match(bank_txn.amount, internal_txn.amount, self.amount_tolerance)
            ):
                return internal_txn
        return None

    def build_pair(
        self,
        bank_txn: NormalizedTransaction,
        internal_txn: NormalizedTransaction,
        tier_name: str,
    ) -> MatchPair:
        return MatchPair(
            bank=bank_txn,
            internal=internal_txn,
            days_difference=days_difference(bank_txn.date, internal_txn.date),
            match_type=MatchType.CHECK,
            tier=tier_name,
            check_number=bank_txn.check_number,
        )
