#!/usr/bin/env python3
"""Tests for the mapped generic bank CSV parser."""

import pytest

from budget.core.models import TransactionType
from budget.imports.generic_csv import (
    AmountMode,
    ColumnMapping,
    DateFormat,
    auto_detect_date_format,
    auto_detect_mapping,
    parse_amount_cents,
    parse_date,
    parse_generic_csv,
)

SINGLE_MAPPING = ColumnMapping(date="Date", description="Description", amount="Amount")


class TestAutoDetection:
    """Test header and date format guessing."""

    @pytest.mark.imports
    def test_mapping_from_headers(self):
        mapping = auto_detect_mapping(["Transaction Date", "Narrative", "Debit", "Credit", "Category"])

        assert mapping == ColumnMapping(
            date="Transaction Date", description="Narrative", debit="Debit", credit="Credit", category="Category"
        )

    @pytest.mark.imports
    def test_mapping_prefers_earlier_candidates(self):
        mapping = auto_detect_mapping(["Settled Date", "DATE", "Payee", "Description", "Amount"])

        assert mapping.date == "DATE"
        assert mapping.description == "Description"
        assert mapping.amount == "Amount"

    @pytest.mark.imports
    @pytest.mark.parametrize(
        "samples,expected",
        [
            (["2026-01-15", "2026-01-16"], DateFormat.ISO),
            (["15/01/2026", "03/02/2026"], DateFormat.DMY_SLASH),
            (["01/15/2026", "02/03/2026"], DateFormat.MDY_SLASH),
            (["01/02/2026"], DateFormat.DMY_SLASH),
            (["15-01-2026", "16-01-2026"], DateFormat.DMY_DASH),
            (["", "  "], DateFormat.AUTO),
            (["Jan 15"], DateFormat.AUTO),
        ],
    )
    def test_date_format(self, samples, expected):
        assert auto_detect_date_format(samples) == expected


class TestCellParsing:
    """Test date and amount cells."""

    @pytest.mark.imports
    @pytest.mark.parametrize(
        "value,fmt,expected",
        [
            ("2026-01-15", DateFormat.ISO, "2026-01-15"),
            ("15/01/2026", DateFormat.ISO, None),
            ("15/01/2026", DateFormat.DMY_SLASH, "2026-01-15"),
            ("15/01/26", DateFormat.DMY_SLASH, "2026-01-15"),
            ("01/15/2026", DateFormat.MDY_SLASH, "2026-01-15"),
            ("15-01-2026", DateFormat.DMY_DASH, "2026-01-15"),
            ("31/02/2026", DateFormat.DMY_SLASH, None),
            ("15/01/2026", DateFormat.AUTO, "2026-01-15"),
            ("15 Jan 2026", DateFormat.AUTO, "2026-01-15"),
            ("garbage", DateFormat.AUTO, None),
        ],
    )
    def test_parse_date(self, value, fmt, expected):
        assert parse_date(value, fmt) == expected

    @pytest.mark.imports
    @pytest.mark.parametrize(
        "value,expected",
        [("$1,234.56", 123456), ("-4.50", -450), ("(100.00)", -10000), ("", 0), ("abc", None), ("inf", None)],
    )
    def test_parse_amount_cents(self, value, expected):
        assert parse_amount_cents(value) == expected


class TestParseGenericCsv:
    """Test whole-document parsing."""

    @pytest.mark.imports
    def test_single_amount_column(self):
        text = (
            "Date,Description,Amount,Category\n"
            "15/01/2026,Coffee,-4.50,Eating Out\n"
            "16/01/2026,Salary,2500.00,\n"
            "17/01/2026,Nothing,0,\n"
        )
        mapping = ColumnMapping(date="Date", description="Description", amount="Amount", category="Category")

        result = parse_generic_csv(text, mapping)

        assert result.errors == [] and result.warnings == []
        coffee, salary = result.transactions
        assert (coffee.date, coffee.amount_cents, coffee.type) == ("2026-01-15", 450, TransactionType.EXPENSE)
        assert coffee.category == "Eating Out"
        assert coffee.fingerprint == "csv:2026-01-15|450|coffee"
        assert (salary.amount_cents, salary.type, salary.category) == (250000, TransactionType.INCOME, None)

    @pytest.mark.imports
    def test_split_columns(self):
        text = "Date,Description,Debit,Credit\n2026-01-15,Coffee,4.50,\n2026-01-16,Salary,,2500\n2026-01-17,Blank,,\n"
        mapping = ColumnMapping(date="Date", description="Description", debit="Debit", credit="Credit")

        result = parse_generic_csv(text, mapping, amount_mode="split", date_format="YYYY-MM-DD")

        assert [(t.type, t.amount_cents) for t in result.transactions] == [
            (TransactionType.EXPENSE, 450),
            (TransactionType.INCOME, 250000),
        ]

    @pytest.mark.imports
    def test_bad_rows_become_warnings(self):
        text = (
            "Date,Description,Amount\n"
            "15/01/2026,Coffee,-4.50\n"
            "someday,Thing,-1\n"
            "18/01/2026,Oops,abc\n"
            ",No date,1\n"
        )

        result = parse_generic_csv(text, SINGLE_MAPPING, date_format=DateFormat.DMY_SLASH)

        assert len(result.transactions) == 1
        assert result.warnings == ['Row 3: Could not parse date "someday"', 'Row 4: Could not parse amount "abc"']

    @pytest.mark.imports
    def test_description_is_sanitized(self):
        result = parse_generic_csv("Date,Description,Amount\n2026-01-15,@SUM(A1),-1\n", SINGLE_MAPPING)

        assert result.transactions[0].description == "'@SUM(A1)"
        assert result.transactions[0].fingerprint == "csv:2026-01-15|100|@sum(a1)"

    @pytest.mark.imports
    @pytest.mark.parametrize(
        "mapping,mode,message",
        [
            (ColumnMapping(description="Description", amount="Amount"), AmountMode.SINGLE, "Date and Description"),
            (ColumnMapping(date="Date", description="Description"), AmountMode.SINGLE, "Amount column"),
            (ColumnMapping(date="Date", description="Description", debit="Debit"), AmountMode.SPLIT, "Debit and Credit"),
        ],
    )
    def test_missing_columns_are_errors(self, mapping, mode, message):
        result = parse_generic_csv("Date,Description,Amount\n2026-01-15,Coffee,-1\n", mapping, mode)

        assert result.transactions == []
        assert message in result.errors[0]
