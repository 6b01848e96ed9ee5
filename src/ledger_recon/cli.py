"""
Command-line interface for the ledger reconciliation tool.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import ReconConfig, generate_default_config, load_config
from .models.transaction import ReconciliationRun, SummaryReport, TransactionSource
from .normalization.normalizer import TransactionNormalizer
from .parsers.ledger_parser import LedgerParser
from .reconciler import Reconciler
from .reports.excel_generator import ExcelReportGenerator
from .utils.logging_config import setup_logging

console = Console()


@click.group()
@click.version_option(version="0.1.0")
def main():
    """Bank vs. internal ledger reconciliation tool."""
    pass


@main.command()
@click.argument("bank_file", type=click.Path(exists=True, path_type=Path))
@click.argument("internal_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-p",
    "--period",
    default=None,
    help="Reporting period label, e.g. 03-2024 (defaults to the current month)",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory that receives the report folder",
)
@click.option("--close-days", type=int, default=None, help="Override the matching window in days")
@click.option(
    "--amount-tolerance",
    type=float,
    default=None,
    help="Override amount tolerance in dollars",
)
@click.option(
    "--check-matching/--no-check-matching",
    default=None,
    help="Enable or disable the check-number matching tier",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--dry-run", is_flag=True, help="Match and show the summary without writing reports")
def reconcile(
    bank_file: Path,
    internal_file: Path,
    period: Optional[str],
    config: Optional[Path],
    output: Path,
    close_days: Optional[int],
    amount_tolerance: Optional[float],
    check_matching: Optional[bool],
    verbose: bool,
    dry_run: bool,
):
    """
    Reconcile a bank ledger with the internal accounting ledger.

    BANK_FILE: Bank feed export (CSV or Excel)
    INTERNAL_FILE: Internal accounting export (CSV or Excel)
    """
    recon_config = load_config(config)
    setup_logging(
        logging.DEBUG if verbose else recon_config.logging.level,
        log_format=recon_config.logging.format,
    )
    period = period or datetime.now().strftime("%m-%Y")

    try:
        _apply_overrides(recon_config, close_days, amount_tolerance, check_matching)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Loading bank ledger...", total=None)
            bank_ledger = LedgerParser(recon_config, TransactionSource.BANK).parse_file(bank_file)
            progress.update(task, completed=True)

            task = progress.add_task("Loading internal ledger...", total=None)
            internal_ledger = LedgerParser(recon_config, TransactionSource.INTERNAL).parse_file(
                internal_file
            )
            progress.update(task, completed=True)

            task = progress.add_task("Matching transactions...", total=None)
            run = Reconciler(recon_config).run(bank_ledger, internal_ledger, period)
            progress.update(task, completed=True)

        _display_summary(run.summary, run)

        if dry_run:
            console.print("\n[yellow]Dry run - no reports generated[/yellow]")
            return

        folder = ExcelReportGenerator(recon_config).generate(run, output)
        console.print(f"\n[green]Reports generated: {folder}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command("parse-ledger")
@click.argument("ledger_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-s",
    "--source",
    type=click.Choice([s.value for s in TransactionSource]),
    default=TransactionSource.BANK.value,
    show_default=True,
)
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
@click.option("-n", "--rows", type=int, default=20, show_default=True)
def parse_ledger(ledger_file: Path, source: str, config: Optional[Path], rows: int):
    """
    Parse a ledger and show how its rows normalize.

    LEDGER_FILE: Bank or internal export (CSV or Excel)
    """
    recon_config = load_config(config)
    txn_source = TransactionSource(source)

    try:
        ledger = LedgerParser(recon_config, txn_source).parse_file(ledger_file)
        transactions = TransactionNormalizer(recon_config).normalize_ledger(
            ledger.records, txn_source
        )
    except Exception as e:
        console.print(f"[red]Error parsing file: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"{source.title()} Transactions: {ledger_file.name}")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Account")
    table.add_column("Check #")
    table.add_column("Description")

    for txn in transactions[:rows]:
        table.add_row(
            txn.date.strftime("%m/%d/%Y") if txn.date else "-",
            f"{txn.amount:,.2f}",
            txn.account_key,
            txn.check_number or "-",
            txn.description[:40] + "..." if len(txn.description) > 40 else txn.description,
        )

    console.print(table)

    if len(transactions) > rows:
        console.print(f"\n... and {len(transactions) - rows} more transactions")

    console.print(f"\nTotal transactions: {len(transactions)}")


@main.command("init-config")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml"))
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _display_summary(summary: SummaryReport, run: Optional[ReconciliationRun] = None) -> None:
    """Display per-account and total counts in the console."""
    table = Table(title=f"Reconciliation Summary - {summary.period}")
    table.add_column("Account", style="cyan")
    table.add_column("Name")
    table.add_column("Bank", justify="right")
    table.add_column("Ours", justify="right")
    table.add_column("Matched", justify="right")
    table.add_column("Close", justify="right")
    table.add_column("Bank Only", justify="right")
    table.add_column("Our Only", justify="right")
    table.add_column("Match %", justify="right")

    for account in summary.accounts:
        table.add_row(
            account.account_key,
            account.account_name or "Unknown",
            str(account.bank_count),
            str(account.internal_count),
            str(account.matched_count),
            str(account.close_match_count),
            str(account.bank_only_count),
            str(account.my_only_count),
            account.match_rate_display,
        )

    table.add_section()
    table.add_row(
        "TOTALS",
        "",
        str(summary.total_bank),
        str(summary.total_internal),
        str(summary.total_matched),
        str(summary.total_close),
        str(summary.total_bank_only),
        str(summary.total_my_only),
        f"{summary.overall_match_rate:.1f}",
        style="bold",
    )

    console.print(table)
    if summary.total_check:
        console.print(f"Check-number matches: {summary.total_check}")
    if run is not None:
        console.print(f"Processing time: {run.processing_time_seconds:.2f}s")


def _apply_overrides(
    config: ReconConfig,
    close_days: Optional[int],
    amount_tolerance: Optional[float],
    check_matching: Optional[bool],
) -> None:
    """Apply command-line overrides to this run's configuration."""
    matching = config.matching
    if close_days is not None:
        matching.close_match_days = close_days
        for tier in matching.tiers:
            if tier.strategy == "date_amount":
                tier.tolerance_days = None
    if amount_tolerance is not None:
        matching.amount_tolerance = amount_tolerance
    if check_matching is not None:
        for tier in matching.tiers:
            if tier.strategy == "check_number":
                tier.enabled = check_matching


if __name__ == "__main__":
    main()
