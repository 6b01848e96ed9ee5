import pytest
from click.testing import CliRunner

from ledger_recon.cli import main

from conftest import INTERNAL_ACCOUNT, INTERNAL_NAME


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def ledgers(tmp_path):
    bank = tmp_path / "bank.csv"
    bank.write_text(
        "Date,Amount,Account Number,Description\n"
        "03/01/2024,-100.00,1001,CHECK 1001\n"
        "03/05/2024,250.00,1001,DEPOSIT\n"
    )
    internal = tmp_path / "internal.csv"
    internal.write_text(
        f'Date,Amount,"{INTERNAL_ACCOUNT}","{INTERNAL_NAME}",Description1\n'
        "03/02/2024,100.00,1001,Estate of Jane Doe,Funeral home\n"
    )
    return bank, internal


def test_reconcile_dry_run(runner, ledgers):
    bank, internal = ledgers

    result = runner.invoke(main, ["reconcile", str(bank), str(internal), "-p", "03-2024", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Dry run" in result.output
    assert "Reconciliation Summary - 03-2024" in result.output


def test_reconcile_writes_reports(runner, ledgers, tmp_path):
    bank, internal = ledgers
    out = tmp_path / "reports"

    result = runner.invoke(
        main, ["reconcile", str(bank), str(internal), "-p", "03-2024", "-o", str(out)]
    )

    assert result.exit_code == 0, result.output
    folders = list(out.iterdir())
    assert len(folders) == 1
    assert (folders[0] / "Master_Summary_03-2024.xlsx").exists()


def test_reconcile_load_failure_exits_nonzero(runner, ledgers, tmp_path):
    bank, _ = ledgers
    empty = tmp_path / "empty.csv"
    empty.write_text("")

    result = runner.invoke(main, ["reconcile", str(bank), str(empty), "--dry-run"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_parse_ledger(runner, ledgers):
    bank, _ = ledgers

    result = runner.invoke(main, ["parse-ledger", str(bank), "--source", "bank"])

    assert result.exit_code == 0, result.output
    assert "Total transactions: 2" in result.output


def test_init_config(runner, tmp_path):
    path = tmp_path / "config.yaml"

    result = runner.invoke(main, ["init-config", "-o", str(path)])

    assert result.exit_code == 0, result.output
    assert path.exists()
