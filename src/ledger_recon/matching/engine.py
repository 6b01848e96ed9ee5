"""
Tiered matching engine for per-account reconciliation.
Tiers run in priority order, each over the residue of the previous ones.
"""

from decimal import Decimal
import logging

from ..config import MatchingTier, ReconConfig
from ..models.transaction import AccountGroup, MatchResult, NormalizedTransaction
from ..utils.exceptions import ConfigurationError
from .strategies import CheckNumberStrategy, DateAmountStrategy, MatchingStrategy

logger = logging.getLogger(__name__)


class MatchingEngine:
    """
    Pairs bank and internal transactions of one account.

    Matching is greedy first-fit: bank transactions are visited in ledger
    order and each takes the first still-unmatched internal transaction
    its tier accepts. The result is deterministic for a given input
    order but not a globally optimal assignment.
    """

    def __init__(self, config: ReconConfig):
        """
        Initialize the matching engine.

        Args:
            config: Application configuration
        """
        self.config = config
        self.strategies = self._build_strategies()

    def _build_strategies(self) -> list[tuple[str, MatchingStrategy]]:
        """
        Build enabled tiers from configuration.

        Returns:
            List of (tier_name, strategy) tuples ordered by priority
        """
        enabled_tiers = [t for t in self.config.matching.tiers if t.enabled]
        sorted_tiers = sorted(enabled_tiers, key=lambda t: t.priority)

        strategies: list[tuple[str, MatchingStrategy]] = []
        for tier in sorted_tiers:
            strategies.append((tier.name, self._create_strategy(tier)))
            logger.debug(f"Loaded matching tier: {tier.name} ({tier.strategy})")

        return strategies

    def _create_strategy(self, tier: MatchingTier) -> MatchingStrategy:
        matching = self.config.matching
        tolerance = Decimal(str(matching.amount_tolerance))

        if tier.strategy == "date_amount":
            window = (
                tier.tolerance_days
                if tier.tolerance_days is not None
                else matching.close_match_days
            )
            return DateAmountStrategy(window_days=window, amount_tolerance=tolerance)

        if tier.strategy == "check_number":
            return CheckNumberStrategy(
                amount_tolerance=tolerance,
                check_indicators=matching.check_indicators,
            )

        raise ConfigurationError(
            f"Unknown matching strategy '{tier.strategy}' in tier '{tier.name}'"
        )

    def match(
        self,
        bank_transactions: list[NormalizedTransaction],
        internal_transactions: list[NormalizedTransaction],
    ) -> MatchResult:
        """
        Partition one account's transactions into pairs and leftovers.

        Args:
            bank_transactions: The account's bank transactions, in ledger order
            internal_transactions: The account's internal transactions, in ledger order

        Returns:
            MatchResult in which every input transaction appears exactly once
        """
        result = MatchResult()

        # Transactions compare by identity, so ids are safe membership keys
        matched_bank: set[int] = set()
        matched_internal: set[int] = set()

        for tier_name, strategy in self.strategies:
            pairs = getattr(result, strategy.partition)
            tier_count = 0

            for bank_txn in bank_transactions:
                if id(bank_txn) in matched_bank:
                    continue

                candidates = [
                    t for t in internal_transactions if id(t) not in matched_internal
                ]
                internal_txn = strategy.find_match(bank_txn, candidates)
                if internal_txn is None:
                    continue

                pairs.append(strategy.build_pair(bank_txn, internal_txn, tier_name))
                matched_bank.add(id(bank_txn))
                matched_internal.add(id(internal_txn))
                tier_count += 1

            logger.debug(
                f"Tier {tier_name}: {tier_count} matches, "
                f"{len(bank_transactions) - len(matched_bank)} bank and "
                f"{len(internal_transactions) - len(matched_internal)} internal remaining"
            )

        result.bank_only = [t for t in bank_transactions if id(t) not in matched_bank]
        result.my_only = [t for t in internal_transactions if id(t) not in matched_internal]

        return result

    def match_accounts(self, groups: dict[str, AccountGroup]) -> dict[str, MatchResult]:
        """
        Match every account independently.

        Args:
            groups: Account groups keyed by account key

        Returns:
            MatchResult per account key, in the order of ``groups``
        """
        results: dict[str, MatchResult] = {}
        for account_key, group in groups.items():
            result = self.match(group.bank, group.internal)
            logger.debug(
                f"Account {account_key}: {len(result.matched)} matched, "
                f"{len(result.check_matches)} check, {len(result.bank_only)} bank-only, "
                f"{len(result.my_only)} internal-only"
            )
            results[account_key] = result
        return results
