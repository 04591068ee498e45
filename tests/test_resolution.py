"""Tests for classification, lookup maps and instrument/side resolution."""

from decimal import Decimal

import pytest

from ledgerdesk.errors import MissingDestinationAccountError, UnresolvedInstrumentError
from ledgerdesk.models.operations import CreateOperation, TransactionKind
from ledgerdesk.resolution import (
    classify,
    resolve_instrument,
    resolve_sides,
)
from tests.factories import make_transaction


def create_op(kind: str, **fields) -> CreateOperation:
    fields.setdefault("date", "2024-06-15")
    fields.setdefault("account_id", "A")
    fields.setdefault("amount", Decimal("500"))
    return CreateOperation(kind=kind, **fields)


class TestClassifier:
    """Tests for classify()."""

    @pytest.mark.parametrize("outcome,income", [("1", "1"), ("1000", "15"), ("0.01", "999")])
    def test_both_positive_distinct_accounts_is_transfer(self, outcome, income):
        tx = make_transaction(
            "tx", outcome_account="A", outcome_amount=outcome,
            income_account="B", income_amount=income,
        )
        assert classify(tx) == TransactionKind.TRANSFER

    def test_both_positive_same_account_is_income(self):
        """Transfer requires two different accounts."""
        tx = make_transaction("tx", outcome_amount="100", income_amount="50")
        assert classify(tx) == TransactionKind.INCOME

    def test_income_only_is_income(self):
        tx = make_transaction("tx", income_amount="1000", income_account="B")
        assert classify(tx) == TransactionKind.INCOME

    def test_outcome_only_is_expense(self):
        tx = make_transaction("tx", outcome_amount="300", income_account="B")
        assert classify(tx) == TransactionKind.EXPENSE

    def test_all_zero_is_expense(self):
        assert classify(make_transaction("tx")) == TransactionKind.EXPENSE


class TestLookupMaps:
    """Tests for build_lookup_maps()."""

    def test_resolves_known_ids(self, maps):
        assert maps.account_name("A") == "Main Account"
        assert maps.tag_name("tag-food") == "Groceries"
        assert maps.instrument_symbol(1) == "₽"
        assert maps.account_instrument("B") == 2

    def test_falls_back_to_id(self, maps):
        assert maps.account_name("unknown") == "unknown"
        assert maps.tag_name("unknown") == "unknown"
        assert maps.instrument_symbol(999) == "999"

    def test_account_without_instrument_not_indexed(self, maps):
        assert maps.account_name("C") == "Legacy"
        assert maps.account_instrument("C") is None


class TestResolveInstrument:
    """Tests for resolve_instrument()."""

    def test_explicit_always_wins(self, maps):
        """An override beats the account's own currency."""
        assert resolve_instrument(maps, "A", 2) == 2
        assert resolve_instrument(maps, "C", 7) == 7
        assert resolve_instrument(maps, "nope", 3) == 3

    def test_derived_from_account(self, maps):
        assert resolve_instrument(maps, "A") == 1
        assert resolve_instrument(maps, "B", None) == 2

    def test_fails_without_account_instrument(self, maps):
        with pytest.raises(UnresolvedInstrumentError) as exc_info:
            resolve_instrument(maps, "C")
        assert exc_info.value.account_id == "C"
        assert exc_info.value.field == "instrument_id"


class TestResolveSides:
    """Tests for resolve_sides()."""

    def test_expense(self, maps):
        sides = resolve_sides(create_op("expense"), maps)
        assert sides.outcome_account == sides.income_account == "A"
        assert sides.outcome_amount == Decimal("500")
        assert sides.income_amount == 0
        assert sides.outcome_instrument == sides.income_instrument == 1

    def test_income(self, maps):
        sides = resolve_sides(create_op("income", account_id="B", amount=Decimal("70")), maps)
        assert sides.outcome_account == sides.income_account == "B"
        assert sides.income_amount == Decimal("70")
        assert sides.outcome_amount == 0
        assert sides.outcome_instrument == sides.income_instrument == 2

    def test_expense_with_override_uses_it_on_both_sides(self, maps):
        sides = resolve_sides(create_op("expense", instrument_id=2), maps)
        assert sides.outcome_instrument == sides.income_instrument == 2

    def test_transfer_cross_currency(self, maps):
        sides = resolve_sides(
            create_op(
                "transfer",
                amount=Decimal("1000"),
                to_account_id="B",
                to_amount=Decimal("15"),
            ),
            maps,
        )
        assert (sides.outcome_account, sides.outcome_amount, sides.outcome_instrument) == (
            "A", Decimal("1000"), 1,
        )
        assert (sides.income_account, sides.income_amount, sides.income_instrument) == (
            "B", Decimal("15"), 2,
        )

    def test_transfer_destination_amount_defaults_to_source(self, maps):
        sides = resolve_sides(create_op("transfer", to_account_id="B"), maps)
        assert sides.income_amount == sides.outcome_amount == Decimal("500")

    def test_transfer_requires_destination(self, maps):
        with pytest.raises(MissingDestinationAccountError):
            resolve_sides(create_op("transfer"), maps)

    def test_transfer_destination_instrument_resolved_independently(self, maps):
        with pytest.raises(UnresolvedInstrumentError) as exc_info:
            resolve_sides(create_op("transfer", to_account_id="C"), maps)
        assert exc_info.value.field == "to_instrument_id"

        sides = resolve_sides(
            create_op("transfer", to_account_id="C", to_instrument_id=2), maps
        )
        assert sides.outcome_instrument == 1
        assert sides.income_instrument == 2

    def test_unresolvable_source_fails(self, maps):
        with pytest.raises(UnresolvedInstrumentError):
            resolve_sides(create_op("expense", account_id="C"), maps)
