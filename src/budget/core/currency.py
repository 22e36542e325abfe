#!/usr/bin/env python3
"""
Currency Conversion and Handling Utilities

All money in the engine is an integer number of cents. Derived figures
(cadence conversions, interest) are computed with exact integer or Decimal
arithmetic and rounded half away from zero to a whole cent.

Key Principles:
- Never let a float amount cross a public boundary
- Cadence conversions use fixed annualised divisors (52 weeks, 26 fortnights,
  12 months) so quarterly and yearly items spread evenly over every month
- Amount ceilings fail loudly; everything else degrades gracefully
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from fractions import Fraction

from .exceptions import AmountTooLargeError
from .models import Cadence

# Maximum amount in dollars (approximately $1 billion)
MAX_AMOUNT_DOLLARS = 999_999_999

MAX_AMOUNT_CENTS = MAX_AMOUNT_DOLLARS * 100

# Multiplier that turns one payment of each cadence into a monthly figure.
_MONTHLY_FACTORS: dict[Cadence, Fraction] = {
    Cadence.WEEKLY: Fraction(52, 12),
    Cadence.FORTNIGHTLY: Fraction(26, 12),
    Cadence.MONTHLY: Fraction(1),
    Cadence.QUARTERLY: Fraction(1, 3),
    Cadence.YEARLY: Fraction(1, 12),
}

_INPUT_NOISE = re.compile(r"[$,\s]")


def round_half_away(value: float | Fraction | Decimal) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Args:
        value: Number to round

    Returns:
        Rounded integer

    Examples:
        round_half_away(2.5) -> 3
        round_half_away(-2.5) -> -3
    """
    if isinstance(value, Fraction):
        numerator, denominator = value.numerator, value.denominator
        quotient, remainder = divmod(abs(numerator), denominator)
        if remainder * 2 >= denominator:
            quotient += 1
        return quotient if numerator >= 0 else -quotient
    if not isinstance(value, Decimal):
        value = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_monthly_cents(amount_cents: int, cadence: Cadence | str) -> int:
    """
    Convert an amount at any cadence to its equivalent monthly figure.

    Uses fixed annualised divisors rather than real month lengths, so a
    yearly bill shows the same share in every month instead of a lump sum.

    Args:
        amount_cents: Amount per cadence period in cents
        cadence: Repetition period of the amount

    Returns:
        Monthly equivalent in cents, rounded half away from zero

    Examples:
        to_monthly_cents(10000, "weekly") -> 43333
        to_monthly_cents(120000, "yearly") -> 10000
    """
    factor = _MONTHLY_FACTORS[Cadence(cadence)]
    return round_half_away(amount_cents * factor)


def from_monthly_cents(monthly_cents: int, cadence: Cadence | str) -> int:
    """
    Convert a monthly figure back to an amount per cadence period.

    Exact inverse of to_monthly_cents using the reciprocal factor; round-trips
    exactly for monthly amounts and within rounding for the other cadences.

    Args:
        monthly_cents: Monthly amount in cents
        cadence: Target repetition period

    Returns:
        Amount per period in cents
    """
    factor = _MONTHLY_FACTORS[Cadence(cadence)]
    return round_half_away(monthly_cents / factor)


def validate_amount_cents(cents: int) -> int:
    """
    Reject amounts beyond the supported ceiling.

    Silently truncating a user-entered amount would corrupt their data, so this
    raises instead of clamping.

    Args:
        cents: Amount in cents (either sign)

    Returns:
        The same amount

    Raises:
        AmountTooLargeError: If abs(cents) exceeds MAX_AMOUNT_CENTS
    """
    if abs(cents) > MAX_AMOUNT_CENTS:
        raise AmountTooLargeError(cents, MAX_AMOUNT_CENTS)
    return cents


def parse_cents_from_input(text: str) -> int:
    """
    Parse a user-entered dollar string to cents.

    Dollar signs, commas and whitespace are ignored. Empty or unparseable input
    is treated as zero. More than two decimal places round half away from zero.

    Args:
        text: Raw input such as "$1,234.56", "1.5", "-10" or "1e2"

    Returns:
        Amount in cents

    Raises:
        AmountTooLargeError: If the parsed amount exceeds MAX_AMOUNT_CENTS

    Examples:
        parse_cents_from_input("$1,000") -> 100000
        parse_cents_from_input("1.235") -> 124
        parse_cents_from_input("abc") -> 0
    """
    cleaned = _INPUT_NOISE.sub("", text or "")
    if not cleaned:
        return 0
    try:
        dollars = Decimal(cleaned)
    except InvalidOperation:
        return 0
    if not dollars.is_finite():
        return 0
    return validate_amount_cents(round_half_away(dollars * 100))


def dollars_to_cents(dollars: float | int | str) -> int:
    """Convert a dollar amount to cents, rounding half away from zero."""
    if isinstance(dollars, str):
        return parse_cents_from_input(dollars)
    if isinstance(dollars, float):
        return round_half_away(Decimal(repr(dollars)) * 100)
    return dollars * 100


def cents_to_dollars_str(cents: int) -> str:
    """
    Convert cents to a plain dollar string using integer arithmetic.

    Example:
        cents_to_dollars_str(-4599) -> "-45.99"
    """
    is_negative = cents < 0
    dollars, remainder = divmod(abs(int(cents)), 100)
    text = f"{dollars:,}.{remainder:02d}"
    return f"-{text}" if is_negative else text


def format_cents(cents: int) -> str:
    """Format cents as a dollar string with $ prefix, e.g. "-$1,234.50"."""
    if cents < 0:
        return f"-${cents_to_dollars_str(-cents)}"
    return f"${cents_to_dollars_str(cents)}"


def format_cents_short(cents: int) -> str:
    """
    Format cents as an abbreviated dollar string for chart axes.

    Examples:
        format_cents_short(150000) -> "$1.5k"
        format_cents_short(1500000) -> "$15k"
        format_cents_short(150000000) -> "$1.5M"
    """
    dollars = Fraction(abs(cents), 100)
    sign = "-" if cents < 0 else ""

    if dollars >= 1_000_000:
        scaled, suffix = dollars / 1_000_000, "M"
    elif dollars >= 1000:
        scaled, suffix = dollars / 1000, "k"
    else:
        return f"{sign}${round_half_away(dollars)}"

    if scaled >= 10:
        return f"{sign}${round_half_away(scaled)}{suffix}"
    tenths = round_half_away(scaled * 10)
    return f"{sign}${tenths // 10}.{tenths % 10}{suffix}"
