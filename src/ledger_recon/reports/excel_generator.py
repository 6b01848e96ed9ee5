"""
Excel report generator for reconciliation results.
Writes one workbook per account plus a master summary workbook.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import logging
import numbers
import re

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..config import ReconConfig
from ..models.transaction import (
    MatchPair,
    MatchResult,
    NormalizedTransaction,
    ReconciliationRun,
    SummaryReport,
)
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4285F4", end_color="4285F4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
SUBHEADER_FILL = PatternFill(start_color="F0F0F0", end_color="F0F0F0", fill_type="solid")
CLOSE_FILL = PatternFill(start_color="FFF3CD", end_color="FFF3CD", fill_type="solid")
CHECK_FILL = PatternFill(start_color="E6F3FF", end_color="E6F3FF", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

PAIR_HEADERS = [
    "Bank Date",
    "Bank Amount",
    "Our Date",
    "Our Amount",
    "Our Check #",
    "Description",
    "Type",
    "Match Type",
    "Days Diff",
]

SUMMARY_HEADERS = [
    "Account Number",
    "Account Name",
    "Bank Trans",
    "Our Trans",
    "Matched",
    "Close Matches",
    "Bank Only",
    "Our Only",
    "Match Rate %",
]

_UNSAFE_FILENAME = re.compile(r"[^\w\-. ]+")


class ExcelReportGenerator:
    """Generates per-account reconciliation workbooks and a master summary."""

    def __init__(self, config: ReconConfig):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config
        self.output_config = config.output
        self.sheets = config.output.sheets

    def generate(
        self, run: ReconciliationRun, output_dir: Path, run_date: Optional[datetime] = None
    ) -> Path:
        """
        Write every report for a reconciliation run.

        Args:
            run: Completed reconciliation run
            output_dir: Directory that receives the run folder
            run_date: Date stamped into the folder name (defaults to today)

        Returns:
            Path of the run folder

        Raises:
            ReportGenerationError: If a workbook cannot be written
        """
        run_date = run_date or datetime.now()
        folder = output_dir / self.output_config.folder_template.format(
            period=_safe_name(run.period), date=run_date.strftime("%Y%m%d")
        )
        logger.info(f"Generating reports in: {folder}")

        try:
            folder.mkdir(parents=True, exist_ok=True)
            written: set[Path] = set()

            for account_key, result in run.results.items():
                group = run.groups[account_key]
                self.generate_account_workbook(
                    folder=folder,
                    account_key=account_key,
                    account_name=run.account_name(account_key),
                    bank_transactions=group.bank,
                    internal_transactions=group.internal,
                    result=result,
                    period=run.period,
                    bank_headers=run.bank_headers,
                    internal_headers=run.internal_headers,
                    written=written,
                )

            self.generate_summary_workbook(folder, run.summary)
        except ReportGenerationError:
            raise
        except Exception as e:
            logger.error(f"Failed to generate reports: {e}")
            raise ReportGenerationError(f"Failed to generate reports: {e}") from e

        logger.info(f"Reports saved: {folder}")
        return folder

    def generate_account_workbook(
        self,
        folder: Path,
        account_key: str,
        account_name: str,
        bank_transactions: list[NormalizedTransaction],
        internal_transactions: list[NormalizedTransaction],
        result: MatchResult,
        period: str,
        bank_headers: list[str],
        internal_headers: list[str],
        written: Optional[set[Path]] = None,
    ) -> Path:
        """
        Write the seven-sheet workbook for one account.

        Paths already in ``written`` get a numeric suffix, so accounts whose
        names reduce to the same file name do not overwrite each other.
        """
        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        sheets = self.sheets
        self._create_raw_sheet(
            wb, sheets.bank, bank_headers, bank_transactions,
            "No bank transactions for this account",
        )
        self._create_raw_sheet(
            wb, sheets.internal, internal_headers, internal_transactions,
            "No internal transactions for this account",
        )
        self._create_pair_sheet(wb, sheets.matched, result.matched, "No matched transactions")
        self._create_pair_sheet(
            wb, sheets.close_matches, result.close_matches,
            "No close matches requiring review", fill=CLOSE_FILL,
        )
        self._create_pair_sheet(
            wb, sheets.check_matches, result.check_matches,
            "No check matches found", fill=CHECK_FILL, with_check_number=True,
        )
        self._create_raw_sheet(
            wb, sheets.bank_only, bank_headers, result.bank_only,
            "No unmatched bank transactions",
        )
        self._create_raw_sheet(
            wb, sheets.my_only, internal_headers, result.my_only,
            "No unmatched internal transactions",
        )

        filename = self.output_config.account_filename_template.format(
            name=_safe_name(account_name),
            account=_safe_name(account_key),
            period=_safe_name(period),
        )
        output_path = _unique_path(folder / filename, written)
        wb.save(output_path)
        logger.debug(f"Account workbook saved: {output_path}")
        return output_path

    def generate_summary_workbook(self, folder: Path, summary: SummaryReport) -> Path:
        """Write the master summary workbook."""
        wb = Workbook()
        ws = wb.active
        ws.title = self.sheets.summary

        ws["A1"] = "Reconciliation Summary Report"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(SUMMARY_HEADERS))

        ws["A2"] = "Month/Year:"
        ws["B2"] = summary.period
        ws["A3"] = "Processed:"
        ws["B3"] = summary.processed_at.strftime("%Y-%m-%d %H:%M:%S")
        ws["A4"] = "Total Accounts:"
        ws["B4"] = summary.total_accounts

        self._write_header_row(ws, 6, SUMMARY_HEADERS)

        row = 7
        for account in summary.accounts:
            values = [
                account.account_key,
                account.account_name or "Unknown",
                account.bank_count,
                account.internal_count,
                account.matched_count,
                account.close_match_count,
                account.bank_only_count,
                account.my_only_count,
                float(account.match_rate_display),
            ]
            self._write_row(ws, row, values)
            row += 1

        row += 1
        totals = [
            "TOTALS",
            "",
            summary.total_bank,
            summary.total_internal,
            summary.total_matched,
            summary.total_close,
            summary.total_bank_only,
            summary.total_my_only,
            round(summary.overall_match_rate, 1),
        ]
        self._write_row(ws, row, totals)
        for col in range(1, len(totals) + 1):
            cell = ws.cell(row=row, column=col)
            cell.font = Font(bold=True)
            cell.fill = SUBHEADER_FILL

        self._auto_fit_columns(ws)

        output_path = folder / self.output_config.summary_filename_template.format(
            period=_safe_name(summary.period)
        )
        wb.save(output_path)
        logger.info(f"Master summary saved: {output_path}")
        return output_path

    def _create_raw_sheet(
        self,
        wb: Workbook,
        title: str,
        headers: list[str],
        transactions: list[NormalizedTransaction],
        empty_message: str,
    ) -> None:
        """Sheet echoing source rows under the source headers."""
        ws = wb.create_sheet(title)
        if not transactions:
            ws["A1"] = empty_message
            return

        self._write_header_row(ws, 1, headers)
        for row_num, txn in enumerate(transactions, start=2):
            self._write_row(ws, row_num, [_cell_value(txn.raw.get(h, "")) for h in headers])

        self._auto_fit_columns(ws)

    def _create_pair_sheet(
        self,
        wb: Workbook,
        title: str,
        pairs: list[MatchPair],
        empty_message: str,
        fill: Optional[PatternFill] = None,
        with_check_number: bool = False,
    ) -> None:
        """Sheet listing matched pairs side by side."""
        ws = wb.create_sheet(title)
        if not pairs:
            ws["A1"] = empty_message
            return

        headers = list(PAIR_HEADERS)
        if with_check_number:
            headers.insert(-1, "Matched Check #")
        self._write_header_row(ws, 1, headers)

        for row_num, pair in enumerate(pairs, start=2):
            values = [
                _cell_value(pair.bank.raw.get(self.config.input.bank.date_field, "")),
                _cell_value(pair.bank.raw.get(self.config.input.bank.amount_field, "")),
                _cell_value(pair.internal.raw.get(self.config.input.internal.date_field, "")),
                _cell_value(pair.internal.raw.get(self.config.input.internal.amount_field, "")),
                pair.internal.check_number or "",
                pair.internal.description,
                pair.internal.transaction_type,
                pair.match_type.value,
            ]
            if with_check_number:
                values.append(pair.check_number or "")
            values.append(pair.days_difference)
            self._write_row(ws, row_num, values, fill=fill)

        self._auto_fit_columns(ws)

    def _write_header_row(self, ws: Worksheet, row: int, headers: list[str]) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER
            cell.alignment = Alignment(horizontal="center")

    def _write_row(
        self, ws: Worksheet, row: int, values: list[Any], fill: Optional[PatternFill] = None
    ) -> None:
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.border = THIN_BORDER
            if fill is not None:
                cell.fill = fill

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.iter_cols():
            column = get_column_letter(column_cells[0].column)
            max_length = max(
                (len(str(cell.value)) for cell in column_cells if cell.value is not None),
                default=0,
            )
            ws.column_dimensions[column].width = min(max_length + 2, 50)


def _safe_name(value: str) -> str:
    """Make a value usable inside a file name."""
    cleaned = _UNSAFE_FILENAME.sub("_", str(value)).strip()
    return cleaned or "Unknown"


def _unique_path(path: Path, written: Optional[set[Path]]) -> Path:
    """Suffix ``path`` with _2, _3, ... until it is not in ``written``, then record it."""
    if written is None:
        return path
    candidate = path
    counter = 2
    while candidate in written:
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        counter += 1
    written.add(candidate)
    return candidate


def _cell_value(value: Any) -> Any:
    """Values openpyxl can store; anything exotic is written as text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return value
    # numpy scalars from read_excel register as numbers but are not int/float
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, (str, datetime)):
        return value
    return str(value)
