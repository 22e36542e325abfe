#!/usr/bin/env python3
"""
Phased Import Pipeline

Commits reconciled transactions to a store in explicit phases, reporting
progress after each one:

    collect (10%)      gather category and payment method names
    create (20%)       get-or-create them in the store
    apply-rules (30%)  run category rules over the batch
    map (60%)          build ledger records
    persist (80%)      bulk import into the store
    complete (100%)

The store is an external collaborator described by the ImportStore protocol.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from ..core.models import ParsedTransaction, TransactionType
from .rules import CategoryRule, apply_rules_to_batch

logger = logging.getLogger(__name__)


class ImportPhase(Enum):
    """Pipeline phases with their progress percentage."""

    COLLECT = ("collect", 10)
    CREATE = ("create", 20)
    APPLY_RULES = ("apply-rules", 30)
    MAP = ("map", 60)
    PERSIST = ("persist", 80)
    COMPLETE = ("complete", 100)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def percent(self) -> int:
        return self.value[1]


ProgressCallback = Callable[[ImportPhase], None]


class ImportStore(Protocol):
    """
    Protocol for the persistence side of an import.

    Implementations own storage; the pipeline only passes names and records
    across this boundary.
    """

    def get_or_create_categories(self, names: list[str]) -> dict[str, str]:
        """
        Resolve category names to ids, creating missing categories.

        Args:
            names: Distinct category names from the import

        Returns:
            Mapping of name to category id
        """
        ...

    def get_or_create_payment_methods(self, names: list[str]) -> dict[str, str]:
        """
        Resolve payment method names to stored values, creating missing ones.

        Returns:
            Mapping of name to stored payment method
        """
        ...

    def bulk_import(self, records: list[dict[str, Any]]) -> None:
        """
        Persist ledger records in one operation.

        Args:
            records: camelCase transaction dicts
        """
        ...


@dataclass(frozen=True)
class ImportStats:
    """Summary shown once an import completes."""

    total: int
    imported: int
    duplicates: int
    skipped: int
    auto_categorized: int
    needs_review: int

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for display."""
        return {
            "total": self.total,
            "imported": self.imported,
            "duplicates": self.duplicates,
            "skipped": self.skipped,
            "auto_categorized": self.auto_categorized,
            "needs_review": self.needs_review,
        }


class ImportPipeline:
    """
    Runs the import phases against a store.

    Example:
        pipeline = ImportPipeline(store, rules, progress=lambda p: print(p.percent))
        stats = pipeline.run(split.unique, split.duplicates, len(batch.skipped))
    """

    def __init__(
        self,
        store: ImportStore,
        rules: Iterable[CategoryRule] = (),
        progress: ProgressCallback | None = None,
        import_source: str = "up-csv",
        imported_at: str | None = None,
    ):
        self.store = store
        self.rules = list(rules)
        self.progress = progress
        self.import_source = import_source
        self.imported_at = imported_at

    def _report(self, phase: ImportPhase) -> None:
        logger.debug("Import phase %s (%d%%)", phase.label, phase.percent)
        if self.progress is not None:
            self.progress(phase)

    def run(
        self,
        transactions: Sequence[ParsedTransaction],
        duplicates: Sequence[ParsedTransaction] = (),
        skipped_count: int = 0,
    ) -> ImportStats:
        """
        Import transactions and return the summary.

        A rule-assigned category beats the category named in the file.
        Expenses left without a category count as needing review.

        Args:
            transactions: Unique transactions to persist
            duplicates: Transactions already in the ledger (counted only)
            skipped_count: Rows the parser skipped (counted only)

        Returns:
            ImportStats
        """
        self._report(ImportPhase.COLLECT)
        category_names = sorted({t.category for t in transactions if t.category})
        payment_method_names = sorted({t.payment_method for t in transactions if t.payment_method})

        self._report(ImportPhase.CREATE)
        category_ids = self.store.get_or_create_categories(category_names)
        payment_methods = self.store.get_or_create_payment_methods(payment_method_names)

        self._report(ImportPhase.APPLY_RULES)
        rule_categories = apply_rules_to_batch(transactions, self.rules)

        self._report(ImportPhase.MAP)
        auto_categorized = 0
        needs_review = 0
        records: list[dict[str, Any]] = []
        for index, transaction in enumerate(transactions):
            category_id = rule_categories.get(index)
            if category_id is None and transaction.category:
                category_id = category_ids.get(transaction.category)
            if category_id:
                auto_categorized += 1
            elif transaction.type == TransactionType.EXPENSE:
                needs_review += 1
            records.append(self._to_record(transaction, category_id, payment_methods))

        self._report(ImportPhase.PERSIST)
        self.store.bulk_import(records)

        self._report(ImportPhase.COMPLETE)
        stats = ImportStats(
            total=len(transactions) + len(duplicates) + skipped_count,
            imported=len(transactions),
            duplicates=len(duplicates),
            skipped=skipped_count,
            auto_categorized=auto_categorized,
            needs_review=needs_review,
        )
        logger.info(
            "Imported %d transactions (%d duplicates, %d skipped, %d need review)",
            stats.imported,
            stats.duplicates,
            stats.skipped,
            stats.needs_review,
        )
        return stats

    def _to_record(
        self, transaction: ParsedTransaction, category_id: str | None, payment_methods: dict[str, str]
    ) -> dict[str, Any]:
        record: dict[str, Any] = {
            "type": transaction.type.value,
            "date": transaction.date,
            "description": transaction.description,
            "amountCents": transaction.amount_cents,
            "categoryId": category_id,
            "savingsGoalId": None,
            "importFingerprint": transaction.fingerprint,
            "importSource": self.import_source,
        }
        if self.imported_at:
            record["importedAt"] = self.imported_at
        if transaction.notes:
            record["notes"] = transaction.notes
        if transaction.payment_method and transaction.payment_method in payment_methods:
            record["paymentMethod"] = payment_methods[transaction.payment_method]
        return record
