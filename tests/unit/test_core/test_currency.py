#!/usr/bin/env python3
"""Tests for core currency utilities."""

from decimal import Decimal
from fractions import Fraction

import pytest

from budget.core.currency import (
    MAX_AMOUNT_CENTS,
    cents_to_dollars_str,
    dollars_to_cents,
    format_cents,
    format_cents_short,
    from_monthly_cents,
    parse_cents_from_input,
    round_half_away,
    to_monthly_cents,
    validate_amount_cents,
)
from budget.core.exceptions import AmountTooLargeError
from budget.core.models import Cadence


class TestRounding:
    """Test half-away-from-zero rounding."""

    @pytest.mark.currency
    @pytest.mark.parametrize(
        "value,expected",
        [
            (2.5, 3),
            (-2.5, -3),
            (2.4, 2),
            (Fraction(1, 2), 1),
            (Fraction(-1, 2), -1),
            (Fraction(7, 3), 2),
            (Decimal("0.5"), 1),
            (Decimal("-1.5"), -2),
        ],
    )
    def test_round_half_away(self, value, expected):
        """Ties round away from zero for every numeric type."""
        assert round_half_away(value) == expected


class TestCadenceConversion:
    """Test conversion between cadence amounts and monthly figures."""

    @pytest.mark.currency
    @pytest.mark.parametrize(
        "amount,cadence,expected",
        [
            (1000, Cadence.WEEKLY, 4333),
            (1000, Cadence.FORTNIGHTLY, 2167),
            (1000, Cadence.MONTHLY, 1000),
            (1000, Cadence.QUARTERLY, 333),
            (120000, Cadence.YEARLY, 10000),
            (10000, "weekly", 43333),
        ],
    )
    def test_to_monthly_cents(self, amount, cadence, expected):
        """Fixed annualised factors, never calendar month lengths."""
        assert to_monthly_cents(amount, cadence) == expected

    @pytest.mark.currency
    def test_to_monthly_rounds_ties_away_from_zero(self):
        """6 cents a year is half a cent a month."""
        assert to_monthly_cents(6, Cadence.YEARLY) == 1
        assert to_monthly_cents(-6, Cadence.YEARLY) == -1

    @pytest.mark.currency
    @pytest.mark.parametrize(
        "monthly,cadence,expected",
        [
            (4333, Cadence.WEEKLY, 1000),
            (2167, Cadence.FORTNIGHTLY, 1000),
            (1000, Cadence.MONTHLY, 1000),
            (333, Cadence.QUARTERLY, 999),
            (10000, Cadence.YEARLY, 120000),
        ],
    )
    def test_from_monthly_cents(self, monthly, cadence, expected):
        """Reciprocal factors undo the monthly conversion within rounding."""
        assert from_monthly_cents(monthly, cadence) == expected

    @pytest.mark.currency
    @pytest.mark.parametrize("cadence", list(Cadence))
    def test_round_trip_error_is_bounded(self, cadence):
        """Round trips are exact for monthly and within 12 cents otherwise."""
        for amount in (1, 99, 1234, 50000, 987654):
            round_trip = from_monthly_cents(to_monthly_cents(amount, cadence), cadence)
            if cadence == Cadence.MONTHLY:
                assert round_trip == amount
            else:
                assert abs(round_trip - amount) <= 12


class TestInputParsing:
    """Test parsing of user-entered amounts."""

    @pytest.mark.currency
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("$1,234.56", 123456),
            ("45.99", 4599),
            ("1.235", 124),
            ("-10", -1000),
            ("1e2", 10000),
            ("  $ 5 ", 500),
            ("", 0),
            ("abc", 0),
            ("nan", 0),
        ],
    )
    def test_parse_cents_from_input(self, text, expected):
        """Noise is stripped and junk counts as zero."""
        assert parse_cents_from_input(text) == expected

    @pytest.mark.currency
    def test_ceiling_is_accepted(self):
        """The maximum amount itself is valid."""
        assert parse_cents_from_input("999999999") == MAX_AMOUNT_CENTS

    @pytest.mark.currency
    def test_amount_above_ceiling_raises(self):
        """Amounts past the ceiling fail loudly instead of being clamped."""
        with pytest.raises(AmountTooLargeError) as exc_info:
            parse_cents_from_input("1000000000")
        assert exc_info.value.limit_cents == MAX_AMOUNT_CENTS

        with pytest.raises(ValueError):
            parse_cents_from_input("-1e12")

    @pytest.mark.currency
    def test_validate_amount_cents(self):
        """Valid amounts pass through unchanged."""
        assert validate_amount_cents(-500) == -500
        with pytest.raises(AmountTooLargeError):
            validate_amount_cents(MAX_AMOUNT_CENTS + 1)

    @pytest.mark.currency
    def test_dollars_to_cents(self):
        """Float, int and string dollars convert to cents."""
        assert dollars_to_cents(45.99) == 4599
        assert dollars_to_cents(0.125) == 13
        assert dollars_to_cents(12) == 1200
        assert dollars_to_cents("$3.50") == 350


class TestFormatting:
    """Test formatting of cents for display."""

    @pytest.mark.currency
    def test_cents_to_dollars_str(self):
        """Test formatting cents as dollar strings."""
        assert cents_to_dollars_str(4599) == "45.99"
        assert cents_to_dollars_str(5) == "0.05"
        assert cents_to_dollars_str(-4599) == "-45.99"
        assert cents_to_dollars_str(123456789) == "1,234,567.89"

    @pytest.mark.currency
    def test_format_cents(self):
        """Test dollar formatting with sign before the symbol."""
        assert format_cents(123456) == "$1,234.56"
        assert format_cents(-500) == "-$5.00"
        assert format_cents(0) == "$0.00"

    @pytest.mark.currency
    @pytest.mark.parametrize(
        "cents,expected",
        [
            (150000, "$1.5k"),
            (1500000, "$15k"),
            (150000000, "$1.5M"),
            (-150000, "-$1.5k"),
            (4550, "$46"),
        ],
    )
    def test_format_cents_short(self, cents, expected):
        """Abbreviated amounts for chart axes."""
        assert format_cents_short(cents) == expected
