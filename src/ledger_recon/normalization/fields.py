"""
Field-level parsing for heterogeneous ledger values.

Every function here is total: malformed input degrades to a documented
default (``None`` date, zero amount, ``UNASSIGNED`` key) instead of
raising, so one bad cell never aborts a reconciliation run.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union
import numbers
import re

import pandas as pd

from ..models.transaction import UNASSIGNED

DEFAULT_DATE_FORMATS = ("%m/%d/%Y", "%Y-%m-%d", "%m/%d/%y")
DISPLAY_DATE_FORMAT = "%m/%d/%Y"

# Day zero of spreadsheet serial dates (serial 25569 == 1970-01-01)
SPREADSHEET_EPOCH = datetime(1899, 12, 30)

# Returned by days_difference when a date is unknown; larger than any window
MISSING_DATE_DAYS = 999

DEFAULT_AMOUNT_TOLERANCE = Decimal("0.01")
ZERO = Decimal("0")

_DATE_SPLIT = re.compile(r"[/\-]")
_AMOUNT_NOISE = re.compile(r"[$,\s]")
_CHECK_IN_DESCRIPTION = re.compile(r"(?:CHECK|CHK|#)\s*#?\s*(\d+)", re.IGNORECASE)
_DIGITS = re.compile(r"\d+")
_LEADING_NUMBER = re.compile(r"\d*\.?\d+(?:[eE][-+]?\d+)?")


def is_missing(value: Any) -> bool:
    """True for None, NaN and NaT."""
    if value is None or value is pd.NaT:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def as_text(value: Any) -> str:
    """Render a cell as trimmed text; integral floats lose their ``.0``."""
    if is_missing(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_date(value: Any, date_formats=DEFAULT_DATE_FORMATS) -> Optional[date]:
    """
    Parse a date from a string, date-like object or spreadsheet serial.

    Args:
        value: Raw cell value
        date_formats: strptime formats tried before generic parsing

    Returns:
        Calendar date, or None if nothing parses
    """
    if is_missing(value) or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, (numbers.Real, Decimal)):
        return _from_serial(value)

    if isinstance(value, str):
        return _parse_date_string(value.strip(), date_formats)

    return None


def _from_serial(value: Union[numbers.Real, Decimal]) -> Optional[date]:
    try:
        return (SPREADSHEET_EPOCH + timedelta(days=float(value))).date()
    except (OverflowError, ValueError):
        return None


def _parse_date_string(text: str, date_formats) -> Optional[date]:
    if not text:
        return None

    for fmt in date_formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        parsed = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        parsed = None
    if parsed is not None and not is_missing(parsed):
        return parsed.date()

    # Last resort: US month/day/year with any separator mix
    parts = _DATE_SPLIT.split(text)
    if len(parts) == 3:
        try:
            month, day, year = (int(p) for p in parts)
            if year < 100:
                year += 2000
            return date(year, month, day)
        except ValueError:
            return None

    return None


def format_date(value: Any, date_formats=DEFAULT_DATE_FORMATS) -> str:
    """Render a value as MM/DD/YYYY, or as plain text if it is not a date."""
    parsed = parse_date(value, date_formats)
    if parsed is not None:
        return parsed.strftime(DISPLAY_DATE_FORMAT)
    if is_missing(value):
        return ""
    return str(value)


def parse_amount(value: Any) -> Decimal:
    """
    Parse a signed amount.

    Parentheses and a leading minus both mark a negative value; having
    both still yields a single negation. Currency symbols, thousands
    separators and whitespace are ignored, and only the leading number is
    read. Anything without a leading number is 0.
    """
    if is_missing(value) or isinstance(value, bool):
        return ZERO

    text = str(value).strip()
    negative = False

    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1].strip()

    if text.startswith("-"):
        negative = True
        text = text[1:]

    text = _AMOUNT_NOISE.sub("", text)

    # "$-12.00" puts the sign after the symbol
    if text.startswith("-"):
        negative = True
        text = text[1:]

    # Trailing text such as "USD", "CR" or a sign suffix is ignored
    number = _LEADING_NUMBER.match(text)
    if number is None:
        return ZERO

    try:
        amount = Decimal(number.group(0))
    except InvalidOperation:
        return ZERO

    if not amount.is_finite():
        return ZERO

    amount = abs(amount)
    return -amount if negative else amount


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def amounts_match(
    amount1: Any, amount2: Any, tolerance: Any = DEFAULT_AMOUNT_TOLERANCE
) -> bool:
    """
    Compare absolute amounts within a strict tolerance.

    Signs are ignored: a payment is negative in the bank feed and
    positive in the internal ledger.
    """
    difference = abs(abs(_to_decimal(amount1)) - abs(_to_decimal(amount2)))
    return difference < _to_decimal(tolerance)


def days_difference(date1: Optional[date], date2: Optional[date]) -> int:
    """Signed whole days ``date1 - date2``; MISSING_DATE_DAYS if either is unknown."""
    if date1 is None or date2 is None:
        return MISSING_DATE_DAYS
    return (date1 - date2).days


def normalize_account_key(value: Any) -> str:
    """Trimmed account identifier, or UNASSIGNED for empty/null values."""
    key = as_text(value)
    if not key or key == "null":
        return UNASSIGNED
    return key


def extract_check_number(value: Any, description: str = "") -> Optional[str]:
    """
    Find a check number in a reference field or, failing that, a description.

    Args:
        value: Check number / reference cell
        description: Free-text description, searched for "CHECK #1004" forms

    Returns:
        Digits of the check number, the raw reference if it has no digits,
        or None
    """
    reference = as_text(value)
    if reference and reference not in ("null", "0"):
        digits = _DIGITS.search(reference)
        return digits.group(0) if digits else reference

    if description:
        found = _CHECK_IN_DESCRIPTION.search(description)
        if found:
            return found.group(1)

    return None
