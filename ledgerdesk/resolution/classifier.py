"""Derive the semantic kind of a transaction from its double-entry fields."""

from ledgerdesk.models.ledger import Transaction
from ledgerdesk.models.operations import TransactionKind


def classify(tx: Transaction) -> TransactionKind:
    """
    Classify a transaction as expense, income or transfer.

    Rules, in order:
    1. Both amounts positive on two different accounts -> TRANSFER
    2. Income positive and (no outcome, or same account) -> INCOME
    3. Everything else (including all-zero) -> EXPENSE
    """
    if (
        tx.outcome_amount > 0
        and tx.income_amount > 0
        and tx.outcome_account != tx.income_account
    ):
        return TransactionKind.TRANSFER

    if tx.income_amount > 0 and (
        tx.outcome_amount == 0 or tx.outcome_account == tx.income_account
    ):
        return TransactionKind.INCOME

    return TransactionKind.EXPENSE
