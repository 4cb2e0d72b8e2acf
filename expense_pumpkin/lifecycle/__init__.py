"""Expense collection lifecycle, templates and preferences."""

from expense_pumpkin.lifecycle.ledger import ExpenseLedger, insert_sorted
from expense_pumpkin.lifecycle.preferences import CurrencyPreference
from expense_pumpkin.lifecycle.templates import RepeatableExpenseBook

__all__ = [
    "CurrencyPreference",
    "ExpenseLedger",
    "RepeatableExpenseBook",
    "insert_sorted",
]
