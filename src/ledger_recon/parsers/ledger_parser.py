"""
Ledger file parser.
Loads bank and internal ledgers from CSV or Excel into raw records.
"""

from pathlib import Path
from typing import Any
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.transaction import Ledger, TransactionSource
from ..normalization.fields import format_date, is_missing
from ..utils.exceptions import LedgerLoadError

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


class LedgerParser:
    """
    Parser for ledger exports.

    Records are kept as plain dicts keyed by header so every source
    column passes through to the reports. Only the date column is
    rewritten, into MM/DD/YYYY form.
    """

    def __init__(self, config: ReconConfig, source: TransactionSource):
        """
        Initialize the parser.

        Args:
            config: Application configuration object
            source: Which ledger this parser reads
        """
        self.config = config
        self.source = source
        self.mapping = (
            config.input.bank if source == TransactionSource.BANK else config.input.internal
        )

    def parse_file(self, file_path: Path) -> Ledger:
        """
        Parse a ledger file.

        Args:
            file_path: Path to a .csv or Excel file

        Returns:
            Ledger with headers and records

        Raises:
            LedgerLoadError: If the file cannot be read or has no columns
        """
        logger.info(f"Parsing {self.source.value} ledger: {file_path}")

        try:
            df = self._read(file_path)
        except Exception as e:
            logger.error(f"Failed to read {self.source.value} ledger: {e}")
            raise LedgerLoadError(f"Failed to read {file_path.name}: {e}") from e

        ledger = self.parse_dataframe(df, filename=file_path.name)
        logger.info(
            f"Extracted {len(ledger.records)} transactions from {self.source.value} ledger"
        )
        return ledger

    def _read(self, file_path: Path) -> pd.DataFrame:
        if file_path.suffix.lower() in EXCEL_SUFFIXES:
            return pd.read_excel(file_path, sheet_name=0)

        return pd.read_csv(
            file_path,
            encoding=self.config.input.encoding,
            delimiter=self.config.input.delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )

    def parse_dataframe(self, df: pd.DataFrame, filename: str = "") -> Ledger:
        """
        Convert a DataFrame into a Ledger.

        Args:
            df: Raw ledger table
            filename: Source file name for display

        Returns:
            Ledger with stripped headers and non-empty records
        """
        if len(df.columns) == 0:
            raise LedgerLoadError(f"{self.source.value} ledger has no columns")

        headers = [str(c).strip() for c in df.columns]
        df = df.copy()
        df.columns = headers

        records: list[dict[str, Any]] = []
        for _, row in df.iterrows():
            record = {h: self._clean_cell(row[h]) for h in headers}
            if all(v == "" for v in record.values()):
                continue

            date_field = self.mapping.date_field
            if record.get(date_field, "") != "":
                record[date_field] = format_date(
                    record[date_field], tuple(self.config.input.date_formats)
                )

            records.append(record)

        if not records:
            logger.warning(f"{self.source.value} ledger has headers but no transactions")

        return Ledger(
            source=self.source,
            headers=headers,
            records=records,
            filename=filename,
        )

    @staticmethod
    def _clean_cell(value: Any) -> Any:
        if is_missing(value):
            return ""
        if isinstance(value, str):
            return value.strip()
        return value
