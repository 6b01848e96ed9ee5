from datetime import date, datetime
from decimal import Decimal

import pandas as pd
import pytest

from ledger_recon.models.transaction import UNASSIGNED
from ledger_recon.normalization.fields import (
    MISSING_DATE_DAYS,
    amounts_match,
    days_difference,
    extract_check_number,
    format_date,
    normalize_account_key,
    parse_amount,
    parse_date,
)


class TestParseAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("(123.45)", Decimal("-123.45")),
            ("-$1,200.00", Decimal("-1200.00")),
            ("$1,234.56", Decimal("1234.56")),
            (" 42 ", Decimal("42")),
            ("$-12.00", Decimal("-12.00")),
            (-100.0, Decimal("-100.0")),
            (250, Decimal("250")),
        ],
    )
    def test_parses_formats(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "abc", "NaN", float("nan"), "()", "$"])
    def test_unparseable_is_zero(self, raw):
        assert parse_amount(raw) == Decimal("0")

    def test_parentheses_and_minus_do_not_double_negate(self):
        assert parse_amount("(-5.00)") == Decimal("-5.00")

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("100.00 USD", Decimal("100.00")),
            ("1,200.00-", Decimal("1200.00")),
            ("$50.00CR", Decimal("50.00")),
            ("-75.25 DR", Decimal("-75.25")),
            (".5", Decimal(".5")),
        ],
    )
    def test_reads_leading_number_and_ignores_suffix(self, raw, expected):
        assert parse_amount(raw) == expected


class TestAmountsMatch:
    def test_sign_insensitive(self):
        assert amounts_match(Decimal("5.00"), Decimal("-5.00"))
        assert amounts_match(5.00, -5.00)

    def test_tolerance_is_strict(self):
        assert not amounts_match(Decimal("5.00"), Decimal("-5.01"))
        assert not amounts_match(5.00, -5.01)

    def test_within_tolerance(self):
        assert amounts_match(Decimal("10.004"), Decimal("10.00"))

    def test_custom_tolerance(self):
        assert amounts_match(Decimal("10.00"), Decimal("10.50"), tolerance=1)
        assert not amounts_match(Decimal("10.00"), Decimal("11.00"), tolerance=1)


class TestDaysDifference:
    def test_signed_difference(self):
        assert days_difference(date(2024, 3, 1), date(2024, 3, 2)) == -1
        assert days_difference(date(2024, 3, 31), date(2024, 3, 1)) == 30

    def test_missing_date_uses_sentinel(self):
        assert days_difference(None, date(2024, 3, 1)) == MISSING_DATE_DAYS
        assert days_difference(date(2024, 3, 1), None) == MISSING_DATE_DAYS


class TestParseDate:
    @pytest.mark.parametrize(
        "raw",
        [
            "03/01/2024",
            "2024-03-01",
            "3/1/24",
            "3-1-2024",
            " 03/01/2024 ",
            datetime(2024, 3, 1, 15, 30),
            pd.Timestamp("2024-03-01"),
            date(2024, 3, 1),
            45352,
            45352.75,
        ],
    )
    def test_parses_to_march_first(self, raw):
        assert parse_date(raw) == date(2024, 3, 1)

    def test_spreadsheet_epoch(self):
        assert parse_date(25569) == date(1970, 1, 1)

    def test_two_digit_year(self):
        assert parse_date("12-31-24") == date(2024, 12, 31)

    @pytest.mark.parametrize("raw", ["", None, "not a date", float("nan"), True, ["03/01/2024"]])
    def test_unparseable_is_none(self, raw):
        assert parse_date(raw) is None


class TestFormatDate:
    def test_canonical_form(self):
        assert format_date(date(2024, 3, 1)) == "03/01/2024"
        assert format_date("2024-03-01") == "03/01/2024"

    def test_unparseable_passes_through(self):
        assert format_date("pending") == "pending"
        assert format_date(None) == ""


class TestAccountKey:
    def test_trims(self):
        assert normalize_account_key("  1001 ") == "1001"

    def test_integral_float_from_spreadsheet(self):
        assert normalize_account_key(1001.0) == "1001"

    @pytest.mark.parametrize("raw", ["", "   ", None, "null", float("nan")])
    def test_unassigned(self, raw):
        assert normalize_account_key(raw) == UNASSIGNED


class TestExtractCheckNumber:
    def test_numeric_part_of_reference(self):
        assert extract_check_number("CHK-1004") == "1004"

    def test_reference_without_digits(self):
        assert extract_check_number("ABC") == "ABC"

    def test_falls_back_to_description(self):
        assert extract_check_number("", "CHECK #2001 paid") == "2001"
        assert extract_check_number(None, "chk 77") == "77"

    @pytest.mark.parametrize("raw", ["0", "null", "", None, 0.0])
    def test_ignored_references(self, raw):
        assert extract_check_number(raw, "rent") is None
