#!/usr/bin/env python3
"""
Generic Bank CSV Import

Imports CSV exports from any bank given a column mapping. Mappings and date
formats can be auto-detected from the header row and sample values.

Amount modes:
- single: one signed amount column (positive = income, negative = expense,
  "(100.00)" is negative)
- split: separate debit (expense) and credit (income) columns
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum

import pandas as pd

from ..core.currency import round_half_away
from ..core.models import ParsedTransaction, TransactionType
from .csv_rows import read_csv_rows
from .dedup import create_fingerprint
from .sanitize import sanitize_formula_injection

logger = logging.getLogger(__name__)

SOURCE_TAG = "csv"

DATE_HEADERS = [
    "date",
    "time",
    "timestamp",
    "transaction date",
    "posted date",
    "settled date",
    "value date",
    "trans date",
    "effective date",
]
DESCRIPTION_HEADERS = [
    "description",
    "details",
    "narrative",
    "memo",
    "payee",
    "merchant",
    "transaction description",
    "particulars",
    "reference",
]
AMOUNT_HEADERS = ["amount", "total", "value", "sum", "total (aud)", "amount (aud)"]
DEBIT_HEADERS = ["debit", "withdrawal", "outflow", "debit amount"]
CREDIT_HEADERS = ["credit", "deposit", "inflow", "credit amount"]
CATEGORY_HEADERS = ["category", "type", "label", "tag"]

_ISO = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})")
_SLASHED = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})")
_DASHED = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{2,4})")
_DASHED_FULL = re.compile(r"^\d{1,2}-\d{1,2}-\d{4}$")
_AMOUNT_NOISE = re.compile(r"[$,\s]")


class AmountMode(Enum):
    """How amounts are laid out in the file."""

    SINGLE = "single"
    SPLIT = "split"


class DateFormat(Enum):
    """Date layouts understood by parse_date."""

    ISO = "YYYY-MM-DD"
    DMY_SLASH = "DD/MM/YYYY"
    MDY_SLASH = "MM/DD/YYYY"
    DMY_DASH = "DD-MM-YYYY"
    AUTO = "auto"


@dataclass(frozen=True)
class ColumnMapping:
    """Which CSV header feeds each transaction field (None when absent)."""

    date: str | None = None
    description: str | None = None
    amount: str | None = None
    debit: str | None = None
    credit: str | None = None
    category: str | None = None


@dataclass
class GenericParseResult:
    """Parsed transactions plus fatal errors and per-row warnings."""

    transactions: list[ParsedTransaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _match_header(headers: list[str], candidates: list[str]) -> str | None:
    lowered = [h.strip().lower() for h in headers]
    for candidate in candidates:
        if candidate in lowered:
            return headers[lowered.index(candidate)]
    return None


def auto_detect_mapping(headers: list[str]) -> ColumnMapping:
    """
    Guess the column mapping from header names (case-insensitive).

    Candidates are tried in priority order, so "Date" beats "Settled Date"
    when both exist.
    """
    return ColumnMapping(
        date=_match_header(headers, DATE_HEADERS),
        description=_match_header(headers, DESCRIPTION_HEADERS),
        amount=_match_header(headers, AMOUNT_HEADERS),
        debit=_match_header(headers, DEBIT_HEADERS),
        credit=_match_header(headers, CREDIT_HEADERS),
        category=_match_header(headers, CATEGORY_HEADERS),
    )


def auto_detect_date_format(samples: list[str]) -> DateFormat:
    """
    Guess the date format from sample values.

    Slash-separated dates are disambiguated by any component above 12;
    ambiguous samples default to day-first (Australian) order.

    Args:
        samples: Raw date cells, typically the first few rows

    Returns:
        Detected DateFormat, or AUTO when nothing is recognizable
    """
    values = [s.strip() for s in samples if s and s.strip()]
    if not values:
        return DateFormat.AUTO

    iso_count = slash_count = dash_count = first_over_12 = second_over_12 = 0
    for value in values:
        if re.match(r"^\d{4}[-/]", value):
            iso_count += 1
        elif "/" in value:
            slash_count += 1
            parts = value.split("/")
            if parts[0].isdigit() and int(parts[0]) > 12:
                first_over_12 += 1
            if len(parts) > 1 and parts[1].isdigit() and int(parts[1]) > 12:
                second_over_12 += 1
        elif _DASHED_FULL.match(value):
            dash_count += 1

    if iso_count > len(values) / 2:
        return DateFormat.ISO
    if dash_count > len(values) / 2:
        return DateFormat.DMY_DASH
    if slash_count:
        if second_over_12 and not first_over_12:
            return DateFormat.MDY_SLASH
        return DateFormat.DMY_SLASH
    return DateFormat.AUTO


def _build_date(year: str, month: str, day: str) -> str | None:
    full_year = int(year) + 2000 if len(year) == 2 else int(year)
    try:
        return date(full_year, int(month), int(day)).isoformat()
    except ValueError:
        return None


def parse_date(value: str, date_format: DateFormat = DateFormat.AUTO) -> str | None:
    """
    Parse a date cell into an ISO date.

    Args:
        value: Raw cell text
        date_format: Expected layout; AUTO tries ISO, day-first slashes,
            day-first dashes and finally pandas' own parser

    Returns:
        ISO date, or None when the value does not match or is not a real date
    """
    text = value.strip()
    fmt = DateFormat(date_format)

    if fmt in (DateFormat.ISO, DateFormat.AUTO):
        match = _ISO.match(text)
        if match:
            return _build_date(match.group(1), match.group(2), match.group(3))
        if fmt == DateFormat.ISO:
            return None

    if fmt in (DateFormat.DMY_SLASH, DateFormat.AUTO):
        match = _SLASHED.match(text)
        if match:
            return _build_date(match.group(3), match.group(2), match.group(1))

    if fmt == DateFormat.MDY_SLASH:
        match = _SLASHED.match(text)
        if match:
            return _build_date(match.group(3), match.group(1), match.group(2))

    if fmt in (DateFormat.DMY_DASH, DateFormat.AUTO):
        match = _DASHED.match(text)
        if match:
            return _build_date(match.group(3), match.group(2), match.group(1))

    if fmt == DateFormat.AUTO:
        parsed = pd.to_datetime(text, errors="coerce", dayfirst=True)
        if not pd.isna(parsed):
            return parsed.date().isoformat()

    return None


def parse_amount_cents(value: str) -> int | None:
    """
    Signed cents of an amount cell.

    Returns:
        Cents (0 for a blank cell), or None when the text is not a number
    """
    cleaned = _AMOUNT_NOISE.sub("", value)
    if not cleaned:
        return 0
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return round_half_away(amount * 100)


def parse_generic_csv(
    raw_text: str,
    mapping: ColumnMapping,
    amount_mode: AmountMode | str = AmountMode.SINGLE,
    date_format: DateFormat | str = DateFormat.AUTO,
) -> GenericParseResult:
    """
    Parse a bank CSV with an explicit column mapping.

    Missing required columns are fatal errors; problems with single rows are
    warnings and the row is left out. Blank and zero-amount rows are ignored.

    Args:
        raw_text: Entire CSV document
        mapping: Column mapping (see auto_detect_mapping)
        amount_mode: single or split
        date_format: Date layout, or auto to detect from the first 10 rows

    Returns:
        GenericParseResult
    """
    mode = AmountMode(amount_mode)
    csv_rows = read_csv_rows(raw_text)
    result = GenericParseResult(errors=list(csv_rows.errors))

    if not mapping.date or not mapping.description:
        result.errors.append("Date and Description columns are required.")
        return result
    if mode == AmountMode.SINGLE and not mapping.amount:
        result.errors.append("Amount column is required in single column mode.")
        return result
    if mode == AmountMode.SPLIT and (not mapping.debit or not mapping.credit):
        result.errors.append("Debit and Credit columns are required in split mode.")
        return result

    fmt = DateFormat(date_format)
    if fmt == DateFormat.AUTO:
        samples = [row.get(mapping.date, "") for row in csv_rows.rows[:10]]
        fmt = auto_detect_date_format(samples)
        logger.debug("Detected date format %s", fmt.value)

    for index, row in enumerate(csv_rows.rows):
        line = index + 2
        raw_date = row.get(mapping.date, "")
        raw_description = row.get(mapping.description, "")
        if not raw_date.strip() or not raw_description.strip():
            continue

        row_date = parse_date(raw_date, fmt)
        if row_date is None:
            result.warnings.append(f'Row {line}: Could not parse date "{raw_date}"')
            continue

        if mode == AmountMode.SINGLE:
            raw_amount = row.get(mapping.amount, "")
            signed = parse_amount_cents(raw_amount)
            if signed is None:
                result.warnings.append(f'Row {line}: Could not parse amount "{raw_amount}"')
                continue
            if signed == 0:
                continue
            transaction_type = TransactionType.INCOME if signed > 0 else TransactionType.EXPENSE
            amount_cents = abs(signed)
        else:
            debit = abs(parse_amount_cents(row.get(mapping.debit, "")) or 0)
            credit = abs(parse_amount_cents(row.get(mapping.credit, "")) or 0)
            if debit == 0 and credit == 0:
                continue
            if debit > 0:
                transaction_type, amount_cents = TransactionType.EXPENSE, debit
            else:
                transaction_type, amount_cents = TransactionType.INCOME, credit

        raw_category = row.get(mapping.category, "").strip() if mapping.category else ""
        description = raw_description.strip()

        result.transactions.append(
            ParsedTransaction(
                date=row_date,
                description=sanitize_formula_injection(description),
                amount_cents=amount_cents,
                type=transaction_type,
                fingerprint=create_fingerprint(description, row_date, amount_cents, SOURCE_TAG),
                category=sanitize_formula_injection(raw_category) if raw_category else None,
                source=SOURCE_TAG,
            )
        )

    if result.warnings:
        logger.warning("Generic CSV import produced %d warnings", len(result.warnings))
    return result
