"""
Reconciliation run orchestration.
Normalizes both ledgers, groups them by account, matches each account
and aggregates the results.
"""

from datetime import datetime
from typing import Optional
import logging

from .config import ReconConfig
from .grouping import account_name_map, build_account_groups
from .matching.engine import MatchingEngine
from .models.transaction import Ledger, ReconciliationRun, TransactionSource
from .normalization.normalizer import TransactionNormalizer
from .reports.summary import aggregate, summarize_account
from .utils.exceptions import LedgerLoadError

logger = logging.getLogger(__name__)

UNKNOWN_ACCOUNT_NAME = "Unknown"


class Reconciler:
    """Runs a full reconciliation of a bank ledger against an internal ledger."""

    def __init__(self, config: ReconConfig):
        self.config = config
        self.normalizer = TransactionNormalizer(config)
        self.engine = MatchingEngine(config)

    def run(
        self,
        bank_ledger: Optional[Ledger],
        internal_ledger: Optional[Ledger],
        period: str,
    ) -> ReconciliationRun:
        """
        Reconcile two loaded ledgers for a reporting period.

        Args:
            bank_ledger: Records from the bank feed
            internal_ledger: Records from the internal accounting export
            period: Reporting period label, e.g. "03-2024"

        Returns:
            ReconciliationRun with per-account results and the summary

        Raises:
            LedgerLoadError: If either ledger is missing
        """
        if bank_ledger is None:
            raise LedgerLoadError("Bank ledger could not be loaded")
        if internal_ledger is None:
            raise LedgerLoadError("Internal ledger could not be loaded")

        start_time = datetime.now()
        logger.info(
            f"Starting reconciliation for {period}: {len(bank_ledger.records)} bank txns, "
            f"{len(internal_ledger.records)} internal txns"
        )

        bank_txns = self.normalizer.normalize_ledger(bank_ledger.records, TransactionSource.BANK)
        internal_txns = self.normalizer.normalize_ledger(
            internal_ledger.records, TransactionSource.INTERNAL
        )

        groups = build_account_groups(bank_txns, internal_txns)
        names = account_name_map(internal_txns)
        results = self.engine.match_accounts(groups)

        summaries = []
        for account_key, result in results.items():
            name = names.get(account_key, UNKNOWN_ACCOUNT_NAME)
            logger.info(f"Processed: {account_key} - {name}")
            summaries.append(summarize_account(account_key, name, result))

        summary = aggregate(summaries, period=period, processed_at=start_time)
        elapsed = (datetime.now() - start_time).total_seconds()

        logger.info(
            f"Reconciliation complete in {elapsed:.2f}s: {summary.total_accounts} accounts, "
            f"{summary.total_matched} matched, {summary.total_bank_only} bank-only, "
            f"{summary.total_my_only} internal-only"
        )

        return ReconciliationRun(
            period=period,
            groups=groups,
            results=results,
            account_names=names,
            summary=summary,
            bank_headers=list(bank_ledger.headers),
            internal_headers=list(internal_ledger.headers),
            processing_time_seconds=elapsed,
        )
