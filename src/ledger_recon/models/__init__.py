"""Data models for reconciliation."""

from .transaction import (
    UNASSIGNED,
    UNASSIGNED_NAME,
    AccountGroup,
    AccountSummary,
    Ledger,
    MatchPair,
    MatchResult,
    MatchType,
    NormalizedTransaction,
    ReconciliationRun,
    SummaryReport,
    TransactionSource,
)

__all__ = [
    "UNASSIGNED",
    "UNASSIGNED_NAME",
    "AccountGroup",
    "AccountSummary",
    "Ledger",
    "MatchPair",
    "MatchResult",
    "MatchType",
    "NormalizedTransaction",
    "ReconciliationRun",
    "SummaryReport",
    "TransactionSource",
]
