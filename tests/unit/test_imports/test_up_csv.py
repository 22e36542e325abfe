#!/usr/bin/env python3
"""Tests for the Up bank CSV parser."""

from zoneinfo import ZoneInfo

import pytest

from budget.core.models import TransactionType
from budget.imports.up_csv import (
    build_notes,
    normalize_header,
    parse_signed_cents,
    parse_up_csv,
    parse_up_timestamp,
)
from tests.fixtures.up_csv_samples import up_csv, up_csv_row


class TestHelpers:
    """Test cell-level helpers."""

    @pytest.mark.imports
    def test_normalize_header(self):
        assert normalize_header(" Total (AUD) ") == "Total"
        assert normalize_header("Payee") == "Payee"

    @pytest.mark.imports
    @pytest.mark.parametrize(
        "value,expected",
        [("-45.99", -4599), ("1,500.00", 150000), ("$0.005", 1), ("", 0), ("n/a", 0), ("NaN", 0)],
    )
    def test_parse_signed_cents(self, value, expected):
        assert parse_signed_cents(value) == expected

    @pytest.mark.imports
    def test_parse_up_timestamp(self):
        assert parse_up_timestamp("2026-01-15 09:30:00 +11:00") == "2026-01-15"
        assert parse_up_timestamp("2026-01-15T09:30:00") == "2026-01-15"
        assert parse_up_timestamp("2026-01-15 sometime") == "2026-01-15"
        assert parse_up_timestamp("yesterday") is None
        assert parse_up_timestamp("") is None

    @pytest.mark.imports
    def test_timestamp_converted_into_zone(self):
        """A late UTC purchase falls on the next day in Sydney."""
        sydney = ZoneInfo("Australia/Sydney")
        assert parse_up_timestamp("2026-01-15 23:30:00 +00:00") == "2026-01-15"
        assert parse_up_timestamp("2026-01-15 23:30:00 +00:00", sydney) == "2026-01-16"

    @pytest.mark.imports
    def test_build_notes(self):
        assert build_notes("Woolworths", "Woolworths Metro", "food") == "Woolworths Metro | Tags: food"
        assert build_notes("Woolworths", "Woolworths", "") == ""


class TestParseUpCsv:
    """Test whole-document parsing."""

    @pytest.mark.imports
    def test_purchase(self):
        batch = parse_up_csv(up_csv(up_csv_row()))

        assert batch.errors == []
        assert batch.skipped == []
        (transaction,) = batch.transactions
        assert transaction.date == "2026-01-15"
        assert transaction.description == "Woolworths"
        assert transaction.amount_cents == 4599
        assert transaction.type == TransactionType.EXPENSE
        assert transaction.category == "Groceries"
        assert transaction.payment_method == "card"
        assert transaction.notes == "Woolworths Metro"
        assert transaction.fingerprint == "up-csv:2026-01-15|4599|woolworths"
        assert transaction.source == "up-csv"

    @pytest.mark.imports
    def test_income(self):
        batch = parse_up_csv(up_csv(up_csv_row(transaction_type="Deposit", payee="Employer", total="1500.00")))

        assert batch.transactions[0].type == TransactionType.INCOME
        assert batch.transactions[0].amount_cents == 150000

    @pytest.mark.imports
    def test_description_falls_back_to_bank_description(self):
        batch = parse_up_csv(up_csv(up_csv_row(payee="", description="Interest")))
        assert batch.transactions[0].description == "Interest"

    @pytest.mark.imports
    @pytest.mark.parametrize(
        "row,reason",
        [
            (up_csv_row(total="0.00"), "Zero amount"),
            (up_csv_row(time="not a time"), "Could not parse date"),
            (up_csv_row(transaction_type="Transfer"), "Skipped transaction type: Transfer"),
            (up_csv_row(transaction_type="Round Up"), "Skipped transaction type: Round Up"),
            (up_csv_row(transaction_type="Cover"), "Skipped transaction type: Cover"),
            (up_csv_row(payee="2Up"), "Skipped internal account: 2Up"),
            (up_csv_row(transaction_type="Transfer Out", payee="2UP"), "Skipped internal account: 2UP"),
            (up_csv_row(payee="", description=""), "Missing description"),
        ],
    )
    def test_skipped_rows(self, row, reason):
        batch = parse_up_csv(up_csv(row))

        assert batch.transactions == []
        assert [s.reason for s in batch.skipped] == [reason]
        assert batch.skipped[0].line == 2

    @pytest.mark.imports
    def test_zero_amount_wins_over_other_reasons(self):
        """Classification stops at the first matching rule."""
        batch = parse_up_csv(up_csv(up_csv_row(transaction_type="Transfer", total="0")))
        assert batch.skipped[0].reason == "Zero amount"

    @pytest.mark.imports
    def test_every_row_is_accounted_for(self):
        text = up_csv(up_csv_row(), up_csv_row(transaction_type="Transfer"), up_csv_row(payee="Cafe"))
        batch = parse_up_csv(text)

        assert batch.row_count == 3
        assert len(batch.transactions) == 2
        assert batch.skipped[0].line == 3

    @pytest.mark.imports
    def test_formula_injection_is_neutralized(self):
        batch = parse_up_csv(up_csv(up_csv_row(payee="=HYPERLINK(x)", description="Shop")))

        transaction = batch.transactions[0]
        assert transaction.description == "'=HYPERLINK(x)"
        assert transaction.fingerprint == "up-csv:2026-01-15|4599|=hyperlink(x)"

    @pytest.mark.imports
    def test_timezone_and_source(self):
        batch = parse_up_csv(
            up_csv(up_csv_row(time="2026-01-15 23:30:00 +00:00")), tz="Australia/Sydney", source="up-joint"
        )
        assert batch.transactions[0].date == "2026-01-16"
        assert batch.transactions[0].fingerprint.startswith("up-joint:2026-01-16|")

    @pytest.mark.imports
    def test_malformed_content_is_reported(self):
        text = up_csv(up_csv_row(), up_csv_row() + ",extra,fields")
        batch = parse_up_csv(text)

        assert len(batch.transactions) == 1
        assert any("Malformed row" in e for e in batch.errors)

    @pytest.mark.imports
    def test_empty_document(self):
        batch = parse_up_csv("")
        assert batch.transactions == [] and batch.skipped == [] and batch.errors == []
