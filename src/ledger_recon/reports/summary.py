"""Roll per-account match results up into a summary report."""

from datetime import datetime
from typing import Iterable, Optional

from ..models.transaction import AccountSummary, MatchResult, SummaryReport


def summarize_account(
    account_key: str, account_name: Optional[str], result: MatchResult
) -> AccountSummary:
    """Count one account's partitions."""
    return AccountSummary(
        account_key=account_key,
        account_name=account_name,
        bank_count=result.bank_count,
        internal_count=result.internal_count,
        matched_count=len(result.matched),
        close_match_count=len(result.close_matches),
        check_match_count=len(result.check_matches),
        bank_only_count=len(result.bank_only),
        my_only_count=len(result.my_only),
    )


def aggregate(
    summaries: Iterable[AccountSummary],
    period: str,
    processed_at: Optional[datetime] = None,
) -> SummaryReport:
    """
    Build the global report from per-account summaries.

    Accounts are ordered by display name; the sort is stable and accounts
    without a name go last.

    Args:
        summaries: One summary per account
        period: Reporting period label, e.g. "03-2024"
        processed_at: Run timestamp (defaults to now)

    Returns:
        SummaryReport with derived totals
    """
    accounts = sorted(
        summaries,
        key=lambda a: (a.account_name is None, a.account_name or ""),
    )
    return SummaryReport(
        period=period,
        processed_at=processed_at or datetime.now(),
        accounts=accounts,
    )
