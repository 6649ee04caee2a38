"""Unit tests for multiflow.core.formatting module."""

from multiflow.core.formatting import (
    format_currency,
    format_currency_live,
    format_percent,
    format_signed_currency,
    parse_currency,
    parse_percent,
    sanitize_decimal,
)


class TestSanitizeDecimal:
    """Tests for sanitize_decimal function."""

    def test_keeps_first_decimal_point(self):
        assert sanitize_decimal("1,250.5.0") == "1250.50"

    def test_strips_letters(self):
        assert sanitize_decimal("abc12") == "12"

    def test_empty(self):
        assert sanitize_decimal("") == ""


class TestParsing:
    """Tests for currency and percent parsing."""

    def test_currency_with_symbols(self):
        assert parse_currency("$1,800.00") == 1800.0

    def test_negative_currency(self):
        assert parse_currency("-$5") == -5.0

    def test_currency_without_digits(self):
        """Nothing numeric left gives None, not zero."""
        assert parse_currency("n/a") is None
        assert parse_currency(None) is None

    def test_percent(self):
        assert parse_percent("6.5%") == 6.5
        assert parse_percent("%") is None


class TestFormatting:
    """Tests for display formatting helpers."""

    def test_currency(self):
        assert format_currency(1234.4) == "$1,234"
        assert format_currency(-5) == "-$5"
        assert format_currency(1234.5, decimals=2) == "$1,234.50"

    def test_currency_rounding_to_zero_has_no_sign(self):
        assert format_currency(-0.4) == "$0"

    def test_live_currency(self):
        """Typed digits are read as cents."""
        assert format_currency_live("123456") == "$1,234.56"
        assert format_currency_live("") == ""

    def test_signed_currency(self):
        assert format_signed_currency(150) == "+$150"
        assert format_signed_currency(-28) == "-$28"

    def test_percent(self):
        assert format_percent(0.0702) == "7.0%"
        assert format_percent(0.0702, decimals=2) == "7.02%"
