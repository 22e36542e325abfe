#!/usr/bin/env python3
"""
Import Fingerprints and Duplicate Filtering

A fingerprint identifies a real-world transaction across imports. Two parsed
rows with the same fingerprint are the same transaction, so re-importing an
overlapping export never creates duplicates.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..core.models import ParsedTransaction

logger = logging.getLogger(__name__)


def create_fingerprint(description: str, date: str, amount_cents: int, source: str) -> str:
    """
    Stable dedup key for a transaction.

    Computed from the raw description (before sanitization) so that future
    imports of the same row reproduce it.

    Args:
        description: Raw description text
        date: ISO date
        amount_cents: Amount in cents (sign ignored)
        source: Import source tag, e.g. "up-csv" or "csv"

    Returns:
        "{source}:{date}|{abs amount}|{normalized description}"

    Example:
        create_fingerprint(" Coffee ", "2026-01-15", -450, "up-csv")
        -> "up-csv:2026-01-15|450|coffee"
    """
    return f"{source}:{date}|{abs(amount_cents)}|{description.strip().lower()}"


@dataclass
class DuplicateSplit:
    """Result of checking a batch against existing fingerprints."""

    unique: list[ParsedTransaction] = field(default_factory=list)
    duplicates: list[ParsedTransaction] = field(default_factory=list)


@dataclass
class Reconciliation:
    """Result of reconciling several batches at once."""

    unique: list[ParsedTransaction] = field(default_factory=list)
    duplicates: list[ParsedTransaction] = field(default_factory=list)
    cross_batch_duplicates: list[ParsedTransaction] = field(default_factory=list)


def filter_duplicates(
    transactions: Iterable[ParsedTransaction], existing_fingerprints: set[str] | frozenset[str]
) -> DuplicateSplit:
    """Partition transactions by membership of their fingerprint in existing_fingerprints."""
    split = DuplicateSplit()
    for transaction in transactions:
        if transaction.fingerprint in existing_fingerprints:
            split.duplicates.append(transaction)
        else:
            split.unique.append(transaction)
    return split


def reconcile_batches(
    batches: Iterable[Iterable[ParsedTransaction]], existing_fingerprints: set[str] | frozenset[str]
) -> Reconciliation:
    """
    Reconcile several parsed batches (e.g. overlapping export files) together.

    Each transaction is first checked against stored records, then against
    everything already accepted from earlier batches or earlier in its own
    batch.

    Args:
        batches: Parsed transactions per file, in import order
        existing_fingerprints: Fingerprints already in the ledger

    Returns:
        Reconciliation with unique, duplicates (already stored) and
        cross_batch_duplicates (repeated within this import)
    """
    result = Reconciliation()
    seen: set[str] = set()
    for batch in batches:
        split = filter_duplicates(batch, existing_fingerprints)
        result.duplicates.extend(split.duplicates)
        for transaction in split.unique:
            if transaction.fingerprint in seen:
                result.cross_batch_duplicates.append(transaction)
            else:
                seen.add(transaction.fingerprint)
                result.unique.append(transaction)

    logger.debug(
        "Reconciled import: %d unique, %d existing, %d repeated",
        len(result.unique),
        len(result.duplicates),
        len(result.cross_batch_duplicates),
    )
    return result
