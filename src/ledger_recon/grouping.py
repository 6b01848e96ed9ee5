"""Per-account grouping of normalized transactions."""

from typing import Iterable
import logging

from .models.transaction import (
    UNASSIGNED,
    UNASSIGNED_NAME,
    AccountGroup,
    NormalizedTransaction,
)

logger = logging.getLogger(__name__)


def group_by_account(
    transactions: Iterable[NormalizedTransaction],
) -> dict[str, list[NormalizedTransaction]]:
    """
    Bucket transactions by account key.

    Buckets keep the original relative order of their transactions and
    appear in first-seen key order. Records without an account land in
    the UNASSIGNED bucket, which the normalizer has already keyed.
    """
    groups: dict[str, list[NormalizedTransaction]] = {}
    for txn in transactions:
        groups.setdefault(txn.account_key, []).append(txn)
    return groups


def account_name_map(
    internal_transactions: Iterable[NormalizedTransaction],
) -> dict[str, str]:
    """
    Map account keys to display names taken from the internal ledger.

    Later records overwrite earlier ones for the same key.
    """
    names: dict[str, str] = {}
    for txn in internal_transactions:
        if txn.is_assigned and txn.account_name:
            names[txn.account_key] = txn.account_name
    names[UNASSIGNED] = UNASSIGNED_NAME
    return names


def build_account_groups(
    bank_transactions: Iterable[NormalizedTransaction],
    internal_transactions: Iterable[NormalizedTransaction],
) -> dict[str, AccountGroup]:
    """Pair up bank and internal buckets over the union of account keys."""
    bank_by_account = group_by_account(bank_transactions)
    internal_by_account = group_by_account(internal_transactions)

    groups: dict[str, AccountGroup] = {}
    for key in list(bank_by_account) + list(internal_by_account):
        if key in groups:
            continue
        groups[key] = AccountGroup(
            account_key=key,
            bank=bank_by_account.get(key, []),
            internal=internal_by_account.get(key, []),
        )

    logger.debug(
        f"Grouped into {len(groups)} accounts "
        f"({len(bank_by_account)} in bank ledger, {len(internal_by_account)} internal)"
    )
    return groups
