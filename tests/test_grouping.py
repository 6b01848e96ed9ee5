from ledger_recon.grouping import account_name_map, build_account_groups, group_by_account
from ledger_recon.models.transaction import UNASSIGNED, TransactionSource
from ledger_recon.normalization.normalizer import TransactionNormalizer

from conftest import INTERNAL_ACCOUNT, INTERNAL_NAME


def test_group_by_account_is_stable(make_txn):
    txns = [
        make_txn(1, account="A", index=0),
        make_txn(2, account="B", index=1),
        make_txn(3, account="A", index=2),
    ]

    groups = group_by_account(txns)

    assert list(groups) == ["A", "B"]
    assert [t.index for t in groups["A"]] == [0, 2]


def test_unassigned_bucket_for_both_sources(config):
    normalizer = TransactionNormalizer(config)
    bank = normalizer.normalize_ledger(
        [
            {"Account Number": "", "Amount": "1"},
            {"Account Number": "null", "Amount": "2"},
            {"Amount": "3"},
        ],
        TransactionSource.BANK,
    )
    internal = normalizer.normalize_ledger(
        [{INTERNAL_ACCOUNT: "  ", "Amount": "1"}, {INTERNAL_ACCOUNT: None, "Amount": "2"}],
        TransactionSource.INTERNAL,
    )

    assert list(group_by_account(bank)) == [UNASSIGNED]
    assert len(group_by_account(bank)[UNASSIGNED]) == 3
    assert list(group_by_account(internal)) == [UNASSIGNED]


def test_account_name_map_last_write_wins(config):
    internal = TransactionNormalizer(config).normalize_ledger(
        [
            {INTERNAL_ACCOUNT: "1001", INTERNAL_NAME: "Old Name"},
            {INTERNAL_ACCOUNT: "1001", INTERNAL_NAME: " New Name "},
            {INTERNAL_ACCOUNT: "2002", INTERNAL_NAME: ""},
            {INTERNAL_ACCOUNT: "", INTERNAL_NAME: "Nobody"},
        ],
        TransactionSource.INTERNAL,
    )

    names = account_name_map(internal)

    assert names == {"1001": "New Name", UNASSIGNED: "Unassigned Transactions"}


def test_account_name_map_always_has_unassigned():
    assert account_name_map([]) == {UNASSIGNED: "Unassigned Transactions"}


def test_build_account_groups_uses_union_of_keys(make_txn):
    bank = [make_txn(1, account="A"), make_txn(2, account="B")]
    internal = [
        make_txn(1, account="B", source=TransactionSource.INTERNAL),
        make_txn(5, account="C", source=TransactionSource.INTERNAL),
    ]

    groups = build_account_groups(bank, internal)

    assert list(groups) == ["A", "B", "C"]
    assert groups["A"].internal == []
    assert groups["B"].bank == [bank[1]]
    assert groups["B"].internal == [internal[0]]
    assert groups["C"].bank == []
