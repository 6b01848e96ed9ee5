"""Data models for reconciliation transactions and results."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

UNASSIGNED = "UNASSIGNED"
UNASSIGNED_NAME = "Unassigned Transactions"


class TransactionSource(Enum):
    """Ledger a transaction came from."""

    BANK = "bank"
    INTERNAL = "internal"


class MatchType(str, Enum):
    """How a matched pair was classified."""

    EXACT = "exact"
    DATE_MATCH = "date-match"
    CHECK = "check"


@dataclass(eq=False)
class NormalizedTransaction:
    """
    Comparable view of one raw ledger record.

    Both ledgers are normalized into this shape before grouping and
    matching. Instances compare by identity so two identical rows in a
    ledger remain two transactions.
    """

    source: TransactionSource

    # Position of the record in its source ledger
    index: int

    # None when the source value could not be parsed
    date: Optional[date]

    # Signed as reported by the source; 0 when unparseable
    amount: Decimal

    account_key: str = UNASSIGNED
    account_name: str = ""
    description: str = ""
    check_number: Optional[str] = None
    transaction_type: str = ""

    # Original record, passed through to reports untouched
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def is_assigned(self) -> bool:
        return self.account_key != UNASSIGNED


@dataclass
class MatchPair:
    """A bank transaction paired with an internal transaction."""

    bank: NormalizedTransaction
    internal: NormalizedTransaction
    days_difference: int
    match_type: MatchType
    tier: str
    check_number: Optional[str] = None

    @property
    def is_exact(self) -> bool:
        return self.match_type == MatchType.EXACT


@dataclass
class MatchResult:
    """Partition of one account's transactions produced by the matching engine."""

    matched: list[MatchPair] = field(default_factory=list)

    # Reserved tier; no strategy fills it with the default configuration
    close_matches: list[MatchPair] = field(default_factory=list)

    check_matches: list[MatchPair] = field(default_factory=list)
    bank_only: list[NormalizedTransaction] = field(default_factory=list)
    my_only: list[NormalizedTransaction] = field(default_factory=list)

    @property
    def all_pairs(self) -> list[MatchPair]:
        return self.matched + self.close_matches + self.check_matches

    @property
    def bank_count(self) -> int:
        return len(self.all_pairs) + len(self.bank_only)

    @property
    def internal_count(self) -> int:
        return len(self.all_pairs) + len(self.my_only)


@dataclass
class AccountGroup:
    """Bank and internal transactions sharing an account key."""

    account_key: str
    bank: list[NormalizedTransaction] = field(default_factory=list)
    internal: list[NormalizedTransaction] = field(default_factory=list)


@dataclass
class AccountSummary:
    """Per-account counts for the master summary."""

    account_key: str
    account_name: Optional[str]
    bank_count: int
    internal_count: int
    matched_count: int
    close_match_count: int
    check_match_count: int
    bank_only_count: int
    my_only_count: int

    @property
    def match_rate(self) -> float:
        """Percentage of internal transactions matched."""
        if self.internal_count == 0:
            return 0.0
        return (self.matched_count / self.internal_count) * 100

    @property
    def match_rate_display(self) -> str:
        return f"{self.match_rate:.1f}"


@dataclass
class SummaryReport:
    """Global roll-up of a reconciliation run."""

    period: str
    processed_at: datetime
    accounts: list[AccountSummary] = field(default_factory=list)

    @property
    def total_accounts(self) -> int:
        return len(self.accounts)

    @property
    def total_bank(self) -> int:
        return sum(a.bank_count for a in self.accounts)

    @property
    def total_internal(self) -> int:
        return sum(a.internal_count for a in self.accounts)

    @property
    def total_matched(self) -> int:
        return sum(a.matched_count for a in self.accounts)

    @property
    def total_close(self) -> int:
        return sum(a.close_match_count for a in self.accounts)

    @property
    def total_check(self) -> int:
        return sum(a.check_match_count for a in self.accounts)

    # Unmatched totals are derived rather than re-counted so they always
    # agree with the per-account arithmetic.
    @property
    def total_bank_only(self) -> int:
        return self.total_bank - self.total_matched - self.total_close - self.total_check

    @property
    def total_my_only(self) -> int:
        return self.total_internal - self.total_matched - self.total_close - self.total_check

    @property
    def overall_match_rate(self) -> float:
        if self.total_internal == 0:
            return 0.0
        return (self.total_matched / self.total_internal) * 100


@dataclass
class Ledger:
    """Raw records loaded from one ledger file."""

    source: TransactionSource
    headers: list[str]
    records: list[dict[str, Any]]
    filename: str = ""

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class ReconciliationRun:
    """Everything produced by one reconciliation run."""

    period: str
    groups: dict[str, AccountGroup]
    results: dict[str, MatchResult]
    account_names: dict[str, str]
    summary: SummaryReport
    bank_headers: list[str] = field(default_factory=list)
    internal_headers: list[str] = field(default_factory=list)
    processing_time_seconds: float = 0.0

    def account_name(self, account_key: str) -> str:
        return self.account_names.get(account_key, "Unknown")
