"""Tests for date parsing and building new transactions."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from ledgerdesk.bulk import build_transaction, new_transaction, parse_date
from ledgerdesk.errors import InvalidDateError, InvalidInputError
from ledgerdesk.models.operations import CreateOperation, TransactionKind
from ledgerdesk.resolution import classify


class TestParseDate:
    """Tests for parse_date()."""

    def test_valid_date(self):
        assert parse_date("2024-06-15") == date(2024, 6, 15)

    def test_leap_day(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["15-06-2024", "2024/06/15", "2024-6-15", "", "yesterday"])
    def test_wrong_format(self, value):
        with pytest.raises(InvalidDateError) as exc_info:
            parse_date(value)
        assert exc_info.value.field == "date"

    @pytest.mark.parametrize("value", ["2024-02-30", "2023-02-29", "2024-13-01", "2024-00-10"])
    def test_impossible_calendar_date(self, value):
        with pytest.raises(InvalidDateError):
            parse_date(value)

    def test_is_invalid_input(self):
        with pytest.raises(InvalidInputError):
            parse_date("nope")


class TestBuildTransaction:
    """Tests for build_transaction()."""

    def test_expense(self, maps):
        op = CreateOperation(
            kind=TransactionKind.EXPENSE,
            date="2024-06-15",
            account_id="A",
            amount=Decimal("500"),
            tag_ids=["tag-food"],
            payee="Coffee Shop",
            comment="Morning coffee",
        )
        tx = build_transaction(op, maps)

        assert tx.date == date(2024, 6, 15)
        assert tx.outcome_amount == Decimal("500")
        assert tx.income_amount == 0
        assert tx.outcome_instrument == tx.income_instrument == 1
        assert tx.tags == ["tag-food"]
        assert tx.payee == "Coffee Shop"
        assert tx.comment == "Morning coffee"
        assert tx.user == 0
        assert tx.created == tx.changed
        assert tx.created.tzinfo is not None
        assert classify(tx) == TransactionKind.EXPENSE

    def test_fresh_ids(self, maps):
        op = CreateOperation(kind="income", date="2024-06-15", account_id="A", amount=Decimal("1"))
        first = build_transaction(op, maps)
        second = build_transaction(op, maps)
        assert first.id != second.id

    def test_no_tags_stays_unset(self, maps):
        op = CreateOperation(kind="expense", date="2024-06-15", account_id="A", amount=Decimal("1"))
        assert build_transaction(op, maps).tags is None

    def test_invalid_date(self, maps):
        op = CreateOperation(kind="expense", date="2024-02-31", account_id="A", amount=Decimal("1"))
        with pytest.raises(InvalidDateError):
            build_transaction(op, maps)

    def test_transfer_is_classified_as_transfer(self, maps):
        op = CreateOperation(
            kind="transfer",
            date="2024-06-15",
            account_id="A",
            amount=Decimal("1000"),
            to_account_id="B",
            to_amount=Decimal("15"),
        )
        tx = build_transaction(op, maps)
        assert classify(tx) == TransactionKind.TRANSFER
        assert tx.income_account == "B"
        assert tx.income_instrument == 2


class TestNewTransaction:
    """Tests for new_transaction()."""

    def test_stamps_identity_and_times(self):
        tx = new_transaction(
            date(2024, 6, 20),
            outcome_account="A",
            outcome_amount=Decimal("1000"),
            outcome_instrument=1,
            income_account="B",
            income_amount=Decimal("11"),
            income_instrument=2,
            tags=["tag-food"],
        )
        assert tx.user == 0
        assert tx.created == tx.changed
        assert tx.tags == ["tag-food"]
        assert classify(tx) == TransactionKind.TRANSFER

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            new_transaction(
                date(2024, 6, 20),
                outcome_account="A",
                outcome_amount=Decimal("0"),
                outcome_instrument=1,
                income_account="A",
                income_amount=Decimal("-5"),
                income_instrument=1,
            )
