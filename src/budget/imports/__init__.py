"""
Imports Package

Bank CSV parsing, fingerprint-based reconciliation, category rules, the phased
import pipeline and backup loading.
"""

from .backup import CURRENT_DATA_VERSION, BudgetBackup, EngineData, backup_error_message, load_backup
from .dedup import DuplicateSplit, Reconciliation, create_fingerprint, filter_duplicates, reconcile_batches
from .generic_csv import (
    AmountMode,
    ColumnMapping,
    DateFormat,
    GenericParseResult,
    auto_detect_date_format,
    auto_detect_mapping,
    parse_generic_csv,
)
from .pipeline import ImportPhase, ImportPipeline, ImportStats, ImportStore
from .rules import CategoryRule, MatchType, apply_rules, apply_rules_to_batch, matches_rule
from .sanitize import sanitize_formula_injection
from .up_csv import parse_up_csv

__all__ = [
    "CURRENT_DATA_VERSION",
    "AmountMode",
    "BudgetBackup",
    "CategoryRule",
    "ColumnMapping",
    "DateFormat",
    "DuplicateSplit",
    "EngineData",
    "GenericParseResult",
    "ImportPhase",
    "ImportPipeline",
    "ImportStats",
    "ImportStore",
    "MatchType",
    "Reconciliation",
    "apply_rules",
    "apply_rules_to_batch",
    "auto_detect_date_format",
    "auto_detect_mapping",
    "backup_error_message",
    "create_fingerprint",
    "filter_duplicates",
    "load_backup",
    "matches_rule",
    "parse_generic_csv",
    "parse_up_csv",
    "reconcile_batches",
    "sanitize_formula_injection",
]
