"""
Tests for the tabular and line-oriented extractors.
"""

import sys
from datetime import date, datetime
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from statement_normalizer.config import ParseOptions
from statement_normalizer.exceptions import MissingColumnError
from statement_normalizer.formats.line_oriented import (
    MANY_AMOUNTS_UNMARKED_WARNING,
    MULTIPLE_AMOUNTS_WARNING,
    TYPE_UNCLEAR_WARNING,
    LineOrientedExtractor,
    resolve,
)
from statement_normalizer.formats.tabular import (
    SIGN_INFERRED_WARNING,
    TabularExtractor,
    detect_column_roles,
)
from statement_normalizer.models import TransactionType
from statement_normalizer.utils.formatting import DATE_FALLBACK_WARNING
from statement_normalizer.utils.spreadsheet import read_delimited
from statement_normalizer.utils.validation import UNUSUAL_DATE_WARNING

TODAY = date(2024, 3, 15)


def tabular(text):
    return TabularExtractor().extract(read_delimited(text), TODAY)


def lines(text):
    return LineOrientedExtractor().extract(text, TODAY)


class TestColumnRoles:
    """Tests for header keyword matching."""

    def test_basic_roles(self):
        """Common labels map to roles."""
        roles = detect_column_roles(["Date", "Description", "Debit", "Credit", "Balance"])
        assert roles == {'date': 0, 'description': 1, 'debit': 2, 'credit': 3}

    def test_bank_export_labels(self):
        """Bank export labels are recognised and 'Withdrawal Amt' is not an amount column."""
        roles = detect_column_roles(
            ["Txn Dt", "Narration", "Chq./Ref.No.", "Withdrawal Amt.", "Deposit Amt.", "Closing Balance"]
        )
        assert roles == {'date': 0, 'description': 1, 'debit': 3, 'credit': 4}

    def test_amount_column(self):
        """A plain amount label is the signed amount role."""
        roles = detect_column_roles(["Value Date", "Particulars", "Amount (INR)"])
        assert roles == {'date': 0, 'description': 1, 'amount': 2}

    def test_first_match_wins(self):
        """The left-most column wins a role."""
        roles = detect_column_roles(["Txn Date", "Value Date", "Remarks", "Amount"])
        assert roles['date'] == 0


class TestTabularExtractor:
    """Tests for CSV and spreadsheet rows."""

    def test_clean_csv(self):
        """Debit and credit columns give confident transactions."""
        result = tabular(
            "Date,Description,Debit,Credit\n"
            "01-03-2024,Coffee Shop,150.00,\n"
            "02-03-2024,Salary,,50000.00\n"
        )
        assert len(result.transactions) == 2

        coffee, salary = result.transactions
        assert (coffee.date, coffee.description, coffee.amount) == ("2024-03-01", "Coffee Shop", 150.0)
        assert coffee.type == TransactionType.DEBIT
        assert coffee.confidence == 0.9
        assert coffee.warnings == []

        assert (salary.date, salary.amount, salary.type) == ("2024-03-02", 50000.0, TransactionType.CREDIT)
        assert salary.confidence == 0.9

    def test_missing_date_column(self):
        """A header without a date column is rejected."""
        with pytest.raises(MissingColumnError) as exc_info:
            tabular("Narration,Amount\nCoffee,100\n")
        assert 'date' in exc_info.value.missing_roles
        assert isinstance(exc_info.value, ValueError)

    def test_missing_amount_columns(self):
        """A header without debit, credit or amount is rejected."""
        with pytest.raises(MissingColumnError) as exc_info:
            tabular("Date,Description,Balance\n01-03-2024,Coffee,100\n")
        assert exc_info.value.missing_roles == ('debit/credit/amount',)

    def test_signed_amount_column(self):
        """The amount sign decides the type at lower confidence."""
        result = tabular(
            "Date,Description,Amount\n"
            "01-03-2024,Salary March,50000\n"
            "02-03-2024,Rent payment,-15000\n"
        )
        salary, rent = result.transactions
        assert salary.type == TransactionType.CREDIT
        assert rent.type == TransactionType.DEBIT
        assert rent.amount == 15000.0
        for tx in result.transactions:
            assert tx.confidence == 0.7
            assert tx.warnings == [SIGN_INFERRED_WARNING]

    def test_amount_with_dr_suffix(self):
        """A Dr/Cr suffix in the amount column states the type."""
        result = tabular(
            'Date,Description,Amount\n'
            '01-03-2024,Card purchase,"1,200.00 Dr"\n'
            '02-03-2024,Cashback,"45.00 Cr"\n'
        )
        card, cashback = result.transactions
        assert (card.amount, card.type, card.confidence) == (1200.0, TransactionType.DEBIT, 0.9)
        assert (cashback.amount, cashback.type) == (45.0, TransactionType.CREDIT)
        assert card.warnings == []

    def test_amount_with_attached_suffix(self):
        """A suffix written straight after the digits still states the type."""
        result = tabular(
            'Date,Description,Amount\n'
            '01-03-2024,Card purchase,"1,200.00Dr"\n'
            '02-03-2024,Cashback,45.00Cr\n'
        )
        card, cashback = result.transactions
        assert (card.amount, card.type, card.confidence) == (1200.0, TransactionType.DEBIT, 0.9)
        assert (cashback.amount, cashback.type, cashback.confidence) == (45.0, TransactionType.CREDIT, 0.9)
        assert card.warnings == []
        assert cashback.warnings == []

    def test_zero_debit_falls_through_to_credit(self):
        """A 0.00 debit cell does not hide the credit amount."""
        result = tabular("Date,Description,Debit,Credit\n06-03-2024,Interest,0.00,12.50\n")
        tx = result.transactions[0]
        assert (tx.amount, tx.type) == (12.5, TransactionType.CREDIT)

    def test_quoted_cells(self):
        """Quoted fields may contain commas."""
        result = tabular(
            'Date,Description,Debit,Credit\n'
            '01-03-2024,"Amazon, Inc","1,500.00",\n'
        )
        tx = result.transactions[0]
        assert tx.description == "Amazon, Inc"
        assert tx.amount == 1500.0

    def test_rows_dropped(self):
        """Short rows, short descriptions and rows without amounts are dropped."""
        result = tabular(
            "Date,Description,Debit,Credit\n"
            "01-03-2024,AB,100,\n"
            "02-03-2024,Coffee\n"
            "03-03-2024,No amount here,,\n"
            "04-03-2024,Bookshop,250,\n"
        )
        assert [tx.description for tx in result.transactions] == ["Bookshop"]
        assert result.dropped == 3

    def test_timestamp_date_cells(self):
        """Date cells exported with a time of day keep their date."""
        result = tabular(
            "Date,Description,Debit,Credit\n"
            "2024-03-01 10:15:00,Coffee Shop,150,\n"
            "02/03/2024 18:40,Bookshop,90,\n"
        )
        coffee, books = result.transactions
        assert coffee.date == "2024-03-01"
        assert books.date == "2024-03-02"
        assert coffee.warnings == []
        assert coffee.confidence == 0.9

    def test_unreadable_date(self):
        """Unreadable dates fall back to today with a warning."""
        result = tabular("Date,Description,Debit,Credit\nsomeday,Coffee Shop,150,\n")
        tx = result.transactions[0]
        assert tx.date == "2024-03-15"
        assert DATE_FALLBACK_WARNING in tx.warnings
        assert tx.confidence <= 0.5

    def test_header_after_preamble(self):
        """Account details above the header row are skipped."""
        result = tabular(
            "HDFC Bank\n"
            "Account No: 50100012345678\n"
            "Date,Narration,Withdrawal Amt,Deposit Amt,Closing Balance\n"
            "01/03/2024,UPI Swiggy,250.00,,9750.00\n"
        )
        assert result.metadata['header_row'] == 2
        tx = result.transactions[0]
        assert (tx.date, tx.description, tx.amount) == ("2024-03-01", "UPI Swiggy", 250.0)
        assert tx.type == TransactionType.DEBIT

    def test_spreadsheet_values(self):
        """Native spreadsheet values (dates, numbers, serials) are handled."""
        rows = [
            ["Date", "Description", "Amount"],
            [datetime(2024, 3, 1), "Salary", 50000],
            [45352, "ATM withdrawal", -2000.0],
            [None, None, None],
        ]
        result = TabularExtractor().extract(rows, TODAY)
        assert len(result.transactions) == 2
        salary, atm = result.transactions
        assert salary.date == "2024-03-01"
        assert salary.type == TransactionType.CREDIT
        assert atm.date == "2024-03-01"
        assert (atm.amount, atm.type) == (2000.0, TransactionType.DEBIT)

    def test_description_length_option(self):
        """Description limits come from the options."""
        options = ParseOptions(max_description_length=5)
        rows = read_delimited("Date,Description,Debit\n01-03-2024,Supermarket,10\n")
        tx = TabularExtractor(options).extract(rows, TODAY).transactions[0]
        assert tx.description == "Super"


class TestResolve:
    """Tests for the amount/type tie-break table."""

    @pytest.mark.parametrize("amounts, credit, debit, expected_type, expected_conf", [
        ([100.0], True, False, TransactionType.CREDIT, 0.95),
        ([100.0], False, True, TransactionType.DEBIT, 0.95),
        ([100.0], True, True, TransactionType.DEBIT, 0.6),
        ([100.0], False, False, TransactionType.DEBIT, 0.6),
        ([100.0, 200.0], False, True, TransactionType.DEBIT, 0.85),
        ([100.0, 200.0], True, False, TransactionType.CREDIT, 0.85),
        ([500.0, 1500.0], False, False, TransactionType.DEBIT, 0.65),
        ([1.0, 2.0, 3.0], True, False, TransactionType.CREDIT, 0.75),
        ([1.0, 2.0, 3.0], False, False, TransactionType.DEBIT, 0.5),
    ])
    def test_table(self, amounts, credit, debit, expected_type, expected_conf):
        """Type and confidence follow the candidate count and markers."""
        resolution = resolve(amounts, credit, debit)
        assert resolution.amount == amounts[0]
        assert resolution.type == expected_type
        assert resolution.confidence == expected_conf

    def test_warnings(self):
        """Unmarked resolutions carry review warnings."""
        assert resolve([100.0], True, False).warnings == []
        assert resolve([100.0], False, False).warnings == [TYPE_UNCLEAR_WARNING]
        assert MULTIPLE_AMOUNTS_WARNING in resolve([1.0, 2.0], False, False).warnings
        assert MANY_AMOUNTS_UNMARKED_WARNING in resolve([1.0, 2.0, 3.0], False, False).warnings

    @pytest.mark.parametrize("amounts", [[], [0.0], [-5.0], [float('nan')]])
    def test_no_amount(self, amounts):
        """No positive first candidate means no transaction."""
        assert resolve(amounts, True, False) is None

    def test_single_marker_beats_ambiguous(self):
        """A single marker always scores higher than an ambiguous line."""
        for n in (1, 2, 3):
            marked = resolve([1.0] * n, True, False).confidence
            unmarked = resolve([1.0] * n, False, False).confidence
            assert marked > unmarked


class TestLineOrientedExtractor:
    """Tests for free-form statement text."""

    def test_ambiguous_line(self):
        """Two amounts and no marker: first amount, debit, low confidence."""
        result = lines("02-03-2024 Payment XYZ 500 1500")
        tx = result.transactions[0]
        assert (tx.date, tx.description, tx.amount) == ("2024-03-02", "Payment XYZ", 500.0)
        assert tx.type == TransactionType.DEBIT
        assert 0.6 <= tx.confidence <= 0.7
        assert MULTIPLE_AMOUNTS_WARNING in tx.warnings

    def test_single_marked_amount(self):
        """One amount and a credit keyword is a confident credit."""
        tx = lines("05-03-2024 Salary credited 50,000.00").transactions[0]
        assert (tx.amount, tx.type, tx.confidence) == (50000.0, TransactionType.CREDIT, 0.95)
        assert tx.warnings == []

    def test_noise_lines_excluded(self):
        """Balances and totals never become transactions."""
        result = lines(
            "01-03-2024 Opening Balance 1,000.00\n"
            "02-03-2024 ATM withdrawal 500.00\n"
            "31-03-2024 Closing Balance 500.00\n"
            "Total Debit 500.00\n"
            "31-03-2024 Total Debit 500.00\n"
        )
        assert len(result.transactions) == 1
        tx = result.transactions[0]
        assert tx.description == "ATM withdrawal"
        assert (tx.type, tx.confidence) == (TransactionType.DEBIT, 0.95)

    def test_currency_prefixed_amounts(self):
        """Amounts written straight after INR, Rs or the rupee sign are kept."""
        result = lines(
            "01-03-2024 Grocery store purchase INR500.00\n"
            "02-03-2024 Cash deposit Rs.750\n"
            "03-03-2024 Bill payment Rs1,200.50\n"
        )
        assert result.dropped == 0
        grocery, cash, bill = result.transactions
        assert (grocery.description, grocery.amount, grocery.type) == (
            "Grocery store purchase", 500.0, TransactionType.DEBIT)
        assert (cash.description, cash.amount, cash.type) == (
            "Cash deposit", 750.0, TransactionType.CREDIT)
        assert (bill.description, bill.amount) == ("Bill payment", 1200.5)

    def test_letters_before_number_still_glue(self):
        """Other letters before a number mark a reference, not an amount."""
        tx = lines("04-03-2024 UPI REF TXN998877 paid to Ravi 300.00").transactions[0]
        assert tx.amount == 300.0
        assert tx.confidence == 0.95

    def test_three_amounts(self):
        """Three amounts without a marker give the lowest confidence."""
        tx = lines("03-03-2024 UPI SWIGGY 250.00 100.00 9,750.00").transactions[0]
        assert tx.amount == 250.0
        assert tx.confidence == 0.5
        assert tx.confidence <= 0.6

    def test_three_amounts_marked(self):
        tx = lines("04-03-2024 NEFT salary 45,000.00 10.00 54,750.00").transactions[0]
        assert (tx.amount, tx.type, tx.confidence) == (45000.0, TransactionType.CREDIT, 0.75)

    def test_conflicting_markers(self):
        """Both markers present means the type is unclear."""
        tx = lines("06-03-2024 Refund of debit card charge 99.00").transactions[0]
        assert (tx.type, tx.confidence) == (TransactionType.DEBIT, 0.6)
        assert TYPE_UNCLEAR_WARNING in tx.warnings

    def test_attached_cr_suffix(self):
        """'2,000.00Cr' is an amount plus a credit marker."""
        tx = lines("07-03-2024 IMPS from Ravi 2,000.00Cr 12,000.00").transactions[0]
        assert (tx.amount, tx.type, tx.confidence) == (2000.0, TransactionType.CREDIT, 0.85)
        assert tx.description == "IMPS from Ravi"

    def test_continuation_line(self):
        """A short description is completed from the next undated line."""
        result = lines(
            "08-03-2024 1,250.00\n"
            "Amazon Marketplace order\n"
            "09-03-2024 Grocery store purchase 300.00\n"
        )
        first, second = result.transactions
        assert first.description == "Amazon Marketplace order"
        assert first.amount == 1250.0
        assert second.description == "Grocery store purchase"
        assert (second.type, second.confidence) == (TransactionType.DEBIT, 0.95)

    def test_continuation_stops_at_dated_line(self):
        """A dated line is never merged into the previous transaction."""
        result = lines("10-03-2024 55.00\n11-03-2024 Coffee 4.50\n")
        assert [tx.description for tx in result.transactions] == ["Coffee"]
        assert result.dropped == 1

    def test_header_boundary(self):
        """Lines before the column header are ignored."""
        result = lines(
            "HDFC BANK LTD\n"
            "Account No: 50100012345678\n"
            "Statement of account for period 01/03/2024 to 31/03/2024\n"
            "Date Narration Withdrawal Deposit Balance\n"
            "01/03/24 UPI-SWIGGY 250.00 9,750.00\n"
        )
        assert result.metadata['header_line'] == 3
        tx = result.transactions[0]
        assert (tx.date, tx.amount) == ("2024-03-01", 250.0)
        assert tx.description == "UPI-SWIGGY"

    def test_unusual_date(self):
        """Dates far from today are kept but flagged."""
        tx = lines("01-01-2019 Old cheque deposit 100.00").transactions[0]
        assert tx.date == "2019-01-01"
        assert UNUSUAL_DATE_WARNING in tx.warnings
        assert tx.confidence <= 0.6

    def test_month_name_date(self):
        tx = lines("12-Mar-2024 Interest credited 42.10").transactions[0]
        assert (tx.date, tx.amount, tx.type) == ("2024-03-12", 42.1, TransactionType.CREDIT)

    def test_time_and_reference_numbers_ignored(self):
        """Times, reference codes and long reference numbers are not amounts."""
        first, second = lines(
            "13/03/2024 10:34:29 CALIFORNIA BURRITO 293.00\n"
            "14/03/2024 NEFT-HDFC0001234 UTR 123456789012 750.00\n"
        ).transactions
        assert first.amount == 293.0
        assert first.confidence == 0.6
        assert second.amount == 750.0
        assert second.confidence == 0.6

    def test_extraction_is_repeatable(self):
        """The same input and date give the same output."""
        text = "02-03-2024 Payment XYZ 500 1500\n05-03-2024 Salary credited 50,000.00"
        assert lines(text).transactions == lines(text).transactions

    def test_no_dated_lines(self):
        """Text without dates yields nothing."""
        result = lines("Welcome to your statement\nNothing to see here")
        assert result.transactions == []
