import logging
from datetime import date
from decimal import Decimal

import pytest

from ledger_recon.config import INTERNAL_PREFIX, ReconConfig
from ledger_recon.models.transaction import NormalizedTransaction, TransactionSource

INTERNAL_ACCOUNT = f"{INTERNAL_PREFIX}ACBT_AccountNumber"
INTERNAL_NAME = f"{INTERNAL_PREFIX}DI FullName"


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logging.getLogger("ledger_recon").handlers = []


@pytest.fixture
def config():
    return ReconConfig()


@pytest.fixture
def make_txn():
    """Factory for normalized transactions with sensible defaults."""

    def _make(
        amount,
        txn_date=date(2024, 3, 1),
        source=TransactionSource.BANK,
        account="1001",
        index=0,
        **kwargs,
    ):
        return NormalizedTransaction(
            source=source,
            index=index,
            date=txn_date,
            amount=Decimal(str(amount)),
            account_key=account,
            **kwargs,
        )

    return _make


@pytest.fixture
def bank_records():
    return [
        {"Date": "03/01/2024", "Amount": "-100.00", "Account Number": "1001", "Description": "CHECK 1001"},
        {"Date": "03/05/2024", "Amount": "250.00", "Account Number": "1001", "Description": "DEPOSIT"},
        {"Date": "03/07/2024", "Amount": "(75.50)", "Account Number": "2002", "Description": "FEE"},
        {"Date": "03/09/2024", "Amount": "-10.00", "Account Number": "", "Description": "MISC"},
    ]


@pytest.fixture
def internal_records():
    return [
        {
            "Date": "03/02/2024",
            "Amount": "100.00",
            INTERNAL_ACCOUNT: "1001",
            INTERNAL_NAME: "Estate of Jane Doe",
            "Description1": "Funeral home",
            "Check Number": "1001",
            "Transaction Type": "Disbursement",
        },
        {
            "Date": "03/20/2024",
            "Amount": "40.00",
            INTERNAL_ACCOUNT: "1001",
            INTERNAL_NAME: "Estate of Jane Doe",
            "Description1": "Court filing",
            "Check Number": "",
            "Transaction Type": "Disbursement",
        },
        {
            "Date": "03/07/2024",
            "Amount": "75.50",
            INTERNAL_ACCOUNT: "2002",
            INTERNAL_NAME: "Estate of Adam Roe",
            "Description1": "Bank fee",
            "Check Number": "",
            "Transaction Type": "Fee",
        },
    ]
