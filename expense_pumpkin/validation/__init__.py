"""Input validation package."""

from expense_pumpkin.validation.validator import ExpenseValidator

__all__ = ["ExpenseValidator"]
