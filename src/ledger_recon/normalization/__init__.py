"""Field parsing and record normalization."""

from .fields import (
    MISSING_DATE_DAYS,
    amounts_match,
    days_difference,
    extract_check_number,
    format_date,
    normalize_account_key,
    parse_amount,
    parse_date,
)
from .normalizer import TransactionNormalizer

__all__ = [
    "MISSING_DATE_DAYS",
    "amounts_match",
    "days_difference",
    "extract_check_number",
    "format_date",
    "normalize_account_key",
    "parse_amount",
    "parse_date",
    "TransactionNormalizer",
]
