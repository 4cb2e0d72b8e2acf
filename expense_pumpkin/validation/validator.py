"""
Expense Input Validation

Validation checks a raw form submission field by field and reports every
problem at once, keyed by field. It never raises and never fixes input:
a submission is either valid (with cleaned values) or rejected with
issues, and no record is created from a rejected submission.

Rules:
- month: 'YYYY-MM'
- description: 1..max characters after trimming (or a known category)
- amount: a number > 0, <= max amount, at most 2 decimal places as typed
- currency: one of the supported codes
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from expense_pumpkin.config.catalog import (
    category_description,
    is_known_category,
    is_supported_currency,
)
from expense_pumpkin.config.settings import AppSettings
from expense_pumpkin.models.expense import (
    MONTH_KEY_PATTERN,
    ExpenseInput,
    ValidationIssue,
    ValidationResult,
)


_MONTH_KEY_RE = re.compile(MONTH_KEY_PATTERN)


class ExpenseValidator:
    """Validates ExpenseInput against the configured limits."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or AppSettings()

    def _validate_month(self, month: str) -> list[ValidationIssue]:
        if not month:
            return [ValidationIssue(
                field="month",
                issue_type="missing",
                message="Please select a month",
            )]
        if not _MONTH_KEY_RE.match(month):
            return [ValidationIssue(
                field="month",
                issue_type="invalid_format",
                message="Month must look like YYYY-MM",
            )]
        return []

    def _resolve_description(
        self,
        expense_input: ExpenseInput,
    ) -> tuple[Optional[str], list[ValidationIssue]]:
        if expense_input.category:
            if not is_known_category(expense_input.category):
                return None, [ValidationIssue(
                    field="category",
                    issue_type="invalid_value",
                    message=f"Unknown category: {expense_input.category}",
                )]
            return category_description(expense_input.category), []

        description = (expense_input.description or "").strip()
        if not description:
            return None, [ValidationIssue(
                field="description",
                issue_type="missing",
                message="Please enter a description",
            )]

        max_length = self._settings.max_description_length
        if len(description) > max_length:
            return None, [ValidationIssue(
                field="description",
                issue_type="too_long",
                message=f"Description must be at most {max_length} characters",
            )]
        return description, []

    def parse_amount(self, raw: str) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        """
        Parse an amount exactly as typed.

        Returns:
            (amount, issues); amount is None whenever issues is non-empty
        """
        text = (raw or "").strip()
        if not text:
            return None, [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter an expense amount",
            )]

        try:
            amount = Decimal(text)
        except InvalidOperation:
            amount = None

        if amount is None or not amount.is_finite():
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Please enter a valid number",
            )]

        if amount <= 0:
            return None, [ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount must be greater than zero",
            )]

        max_amount = Decimal(str(self._settings.max_amount))
        if amount > max_amount:
            return None, [ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message=f"Amount must not exceed {max_amount:,.0f}",
            )]

        decimals = self._settings.max_amount_decimals
        if amount.as_tuple().exponent < -decimals:
            return None, [ValidationIssue(
                field="amount",
                issue_type="too_precise",
                message=f"Amount can have at most {decimals} decimal places",
            )]

        return amount, []

    def _validate_currency(self, currency: str) -> list[ValidationIssue]:
        if not currency:
            return [ValidationIssue(
                field="currency",
                issue_type="missing",
                message="Please select a currency",
            )]
        if not is_supported_currency(currency):
            return [ValidationIssue(
                field="currency",
                issue_type="invalid_value",
                message=f"Unsupported currency: {currency}",
            )]
        return []

    def validate(self, expense_input: ExpenseInput) -> ValidationResult:
        """Validate every field and return cleaned values when all pass."""
        issues: list[ValidationIssue] = []

        issues.extend(self._validate_month(expense_input.month))
        description, description_issues = self._resolve_description(expense_input)
        issues.extend(description_issues)
        amount, amount_issues = self.parse_amount(expense_input.amount)
        issues.extend(amount_issues)
        currency = expense_input.currency.upper()
        issues.extend(self._validate_currency(currency))

        if issues:
            return ValidationResult(is_valid=False, issues=issues)

        return ValidationResult(
            is_valid=True,
            month=expense_input.month,
            description=description,
            amount=float(amount),
            currency=currency,
        )
