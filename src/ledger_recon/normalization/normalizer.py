"""Converts raw ledger records into normalized transactions."""

from typing import Any, Iterable, Optional
import logging

from ..config import ReconConfig, SourceMapping
from ..models.transaction import NormalizedTransaction, TransactionSource
from .fields import (
    as_text,
    extract_check_number,
    normalize_account_key,
    parse_amount,
    parse_date,
)

logger = logging.getLogger(__name__)


class TransactionNormalizer:
    """
    Applies the per-source field mapping to raw records.

    Normalization never rejects a record: each raw record produces
    exactly one NormalizedTransaction, with defaults standing in for
    values that cannot be parsed.
    """

    def __init__(self, config: ReconConfig):
        self.config = config
        self.date_formats = tuple(config.input.date_formats)
        self.mappings: dict[TransactionSource, SourceMapping] = {
            TransactionSource.BANK: config.input.bank,
            TransactionSource.INTERNAL: config.input.internal,
        }

    def normalize(
        self, raw: dict[str, Any], source: TransactionSource, index: int = 0
    ) -> NormalizedTransaction:
        """Normalize a single raw record from ``source``."""
        mapping = self.mappings[source]
        description = _field_text(raw, mapping.description_field)

        return NormalizedTransaction(
            source=source,
            index=index,
            date=parse_date(raw.get(mapping.date_field), self.date_formats),
            amount=parse_amount(raw.get(mapping.amount_field)),
            account_key=normalize_account_key(raw.get(mapping.account_field)),
            account_name=_field_text(raw, mapping.name_field),
            description=description,
            check_number=extract_check_number(
                raw.get(mapping.check_number_field) if mapping.check_number_field else None,
                description,
            ),
            transaction_type=_field_text(raw, mapping.type_field),
            raw=raw,
        )

    def normalize_ledger(
        self, records: Iterable[dict[str, Any]], source: TransactionSource
    ) -> list[NormalizedTransaction]:
        """Normalize every record of a ledger, preserving order."""
        transactions = [
            self.normalize(raw, source, idx) for idx, raw in enumerate(records)
        ]

        undated = sum(1 for txn in transactions if txn.date is None)
        if undated:
            logger.warning(
                f"{undated} of {len(transactions)} {source.value} transactions "
                f"have no parseable date and cannot be matched by date"
            )
        logger.debug(f"Normalized {len(transactions)} {source.value} transactions")

        return transactions


def _field_text(raw: dict[str, Any], field_name: Optional[str]) -> str:
    if not field_name:
        return ""
    return as_text(raw.get(field_name))
