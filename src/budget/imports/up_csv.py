#!/usr/bin/env python3
"""
Up Bank CSV Import

Parses the transaction export of the Up bank app into ParsedTransaction
candidates. Rows that are not real spending or income (internal transfers,
round-ups, covers, moves to linked 2Up accounts) are skipped with a reason
instead of being imported.

Expected columns (a trailing currency suffix such as " (AUD)" is tolerated and
extra columns are ignored):
    Time, Account Name, Transaction Type, Payee, Description, Category, Tags,
    Subtotal, Round Up, Total, Payment Method, Settled Date
"""

import logging
import re
from datetime import date, datetime, tzinfo
from decimal import Decimal, InvalidOperation
from zoneinfo import ZoneInfo

from ..core.currency import round_half_away
from ..core.models import ImportBatch, ParsedTransaction, SkippedRow, TransactionType
from .csv_rows import read_csv_rows
from .dedup import create_fingerprint
from .sanitize import sanitize_formula_injection

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "up-csv"

# Transaction types that move money between the user's own accounts
SKIP_TYPES = frozenset({"Transfer", "Round Up", "Cover"})

# Payees that are the user's own linked accounts
SKIP_PAYEES = frozenset({"2Up", "2UP"})

_CURRENCY_SUFFIX = re.compile(r"\s*\([A-Z]{3}\)$")
_LEADING_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_AMOUNT_NOISE = re.compile(r"[$,\s]")


def normalize_header(header: str) -> str:
    """Strip whitespace and a trailing currency code: "Total (AUD)" -> "Total"."""
    return _CURRENCY_SUFFIX.sub("", header.strip())


def parse_up_timestamp(value: str, tz: tzinfo | None = None) -> str | None:
    """
    Calendar date of an Up timestamp such as "2026-01-15 09:30:00 +11:00".

    Args:
        value: Timestamp text from the Time column
        tz: Optional zone to convert into before taking the date

    Returns:
        ISO date, or None when the value cannot be parsed
    """
    text = value.strip()
    if not text:
        return None

    parsed: datetime | None = None
    try:
        parsed = datetime.strptime(text, "%Y-%m-%d %H:%M:%S %z")
    except ValueError:
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = None

    if parsed is not None:
        if tz is not None and parsed.tzinfo is not None:
            parsed = parsed.astimezone(tz)
        return parsed.date().isoformat()

    match = _LEADING_DATE.match(text)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3))).isoformat()
        except ValueError:
            return None
    return None


def parse_signed_cents(value: str) -> int:
    """Signed cents of an amount cell; blank or invalid text counts as 0."""
    cleaned = _AMOUNT_NOISE.sub("", value)
    if not cleaned:
        return 0
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return 0
    if not amount.is_finite():
        return 0
    return round_half_away(amount * 100)


def build_notes(payee: str, description: str, tags: str) -> str:
    """Join the bank description (when it adds to the payee) and tags."""
    parts = []
    if description and description != payee:
        parts.append(description)
    if tags.strip():
        parts.append(f"Tags: {tags.strip()}")
    return " | ".join(parts)


def _classify(row: dict[str, str], tz: tzinfo | None) -> tuple[str | None, str | None, int]:
    """
    Apply the skip rules to one row, first match wins.

    Returns:
        (skip reason or None, ISO date or None, signed cents)
    """
    signed_cents = parse_signed_cents(row.get("Total", ""))
    if signed_cents == 0:
        return "Zero amount", None, 0

    row_date = parse_up_timestamp(row.get("Time", ""), tz)
    if row_date is None:
        return "Could not parse date", None, signed_cents

    transaction_type = row.get("Transaction Type", "").strip()
    if transaction_type in SKIP_TYPES:
        return f"Skipped transaction type: {transaction_type}", row_date, signed_cents

    payee = row.get("Payee", "").strip()
    if payee in SKIP_PAYEES:
        return f"Skipped internal account: {payee}", row_date, signed_cents

    if not payee and not row.get("Description", "").strip():
        return "Missing description", row_date, signed_cents

    return None, row_date, signed_cents


def parse_up_csv(raw_text: str, *, tz: str | tzinfo | None = None, source: str = DEFAULT_SOURCE) -> ImportBatch:
    """
    Parse an Up bank CSV export.

    Args:
        raw_text: Entire CSV document
        tz: Optional IANA zone name or tzinfo; timestamps are converted into it
            before the calendar date is taken
        source: Source tag recorded on fingerprints and transactions

    Returns:
        ImportBatch; malformed content lands in errors, never raises
    """
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    csv_rows = read_csv_rows(raw_text)
    batch = ImportBatch(errors=list(csv_rows.errors))

    for index, raw_row in enumerate(csv_rows.rows):
        row = {normalize_header(key): (value or "") for key, value in raw_row.items()}
        line = index + 2  # header is line 1

        reason, row_date, signed_cents = _classify(row, zone)
        if reason is not None:
            logger.debug("Skipping line %d: %s", line, reason)
            batch.skipped.append(SkippedRow(row=raw_row, reason=reason, line=line))
            continue

        payee = row.get("Payee", "").strip()
        bank_description = row.get("Description", "").strip()
        description = payee or bank_description
        amount_cents = abs(signed_cents)

        batch.transactions.append(
            ParsedTransaction(
                date=row_date,
                description=sanitize_formula_injection(description),
                amount_cents=amount_cents,
                type=TransactionType.INCOME if signed_cents > 0 else TransactionType.EXPENSE,
                fingerprint=create_fingerprint(description, row_date, amount_cents, source),
                category=row.get("Category", "").strip() or None,
                payment_method=row.get("Payment Method", "").strip() or None,
                notes=sanitize_formula_injection(build_notes(payee, bank_description, row.get("Tags", ""))),
                source=source,
            )
        )

    if batch.skipped:
        logger.info(
            "Parsed %d Up transactions, skipped %d rows", len(batch.transactions), len(batch.skipped)
        )
    return batch
