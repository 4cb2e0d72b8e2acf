"""
Core Data Models for Expense Pumpkin

These models define the schemas for every record that is stored,
migrated, aggregated or exported. They are designed to:
1. Reject malformed stored data at load time
2. Serialize to the same JSON shape that is persisted
3. Stay immutable once created (records are never edited)

Current records are month-level and carry a currency. Legacy records are
day-level, single-currency, and only ever read during migration.
"""

import time
from typing import Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
)


MONTH_KEY_PATTERN = r"^\d{4}-\d{2}$"


def current_time_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


def new_expense_id(now_ms: Optional[int] = None) -> str:
    """
    Time-based id with a random suffix, e.g. '1718000000000-k2j9x0a1b'.

    Collisions are improbable, not impossible; the store does not check.
    """
    now_ms = current_time_ms() if now_ms is None else now_ms
    return f"{now_ms}-{uuid4().hex[:9]}"


# =============================================================================
# STORED RECORDS
# =============================================================================

class Expense(BaseModel):
    """
    A single expense in the current (month-level) schema.

    `currency` may be missing on records written by early versions;
    consumers resolve it with `resolved_currency(default)`.

    Input limits (description length, amount range) belong to
    ExpenseValidator and its settings; stored records only need the shape.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique id"
    )
    month: str = Field(
        ...,
        pattern=MONTH_KEY_PATTERN,
        description="Month the expense belongs to (YYYY-MM)"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Free text or '<icon> <label>' for categories"
    )
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Amount in `currency`"
    )
    currency: Optional[str] = Field(
        default=None,
        description="ISO 4217 code"
    )
    timestamp: int = Field(
        ...,
        ge=0,
        description="Creation time in ms since epoch"
    )

    @property
    def year_part(self) -> str:
        return self.month.split("-")[0]

    @property
    def month_part(self) -> str:
        return self.month.split("-")[1]

    def resolved_currency(self, default: str) -> str:
        return self.currency or default

    @classmethod
    def create(
        cls,
        month: str,
        description: str,
        amount: float,
        currency: Optional[str],
        now_ms: Optional[int] = None,
    ) -> "Expense":
        """Build a new record with a fresh id and timestamp."""
        now_ms = current_time_ms() if now_ms is None else now_ms
        return cls(
            id=new_expense_id(now_ms),
            month=month,
            description=description,
            amount=amount,
            currency=currency,
            timestamp=now_ms,
        )


class LegacyExpense(BaseModel):
    """
    A day-level expense from the previous schema.

    Field types are strict: a legacy record whose fields have the wrong
    primitive type is structurally invalid and is not migrated.
    """
    model_config = ConfigDict(frozen=True)

    id: StrictStr
    date: StrictStr  # YYYY-MM-DD
    amount: Union[StrictInt, StrictFloat]
    timestamp: Union[StrictInt, StrictFloat]

    @property
    def month_key(self) -> str:
        return self.date[:7]


class RepeatableExpense(BaseModel):
    """
    A saved shortcut for re-adding a recurring expense.

    Equality is exact field equality, which is what deduplication uses.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    category: str = Field(..., min_length=1)
    amount: str = Field(..., min_length=1, description="Amount as typed")
    currency: str = Field(..., min_length=1)


# =============================================================================
# INPUT & VALIDATION
# =============================================================================

class ExpenseInput(BaseModel):
    """
    Raw expense form submission.

    Everything is kept as typed; ExpenseValidator decides what is valid.
    Either `description` or `category` is used; a category wins.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    month: str = ""
    amount: str = ""
    currency: str = ""
    description: Optional[str] = None
    category: Optional[str] = None


class ValidationIssue(BaseModel):
    """A single problem with one input field."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating an ExpenseInput.

    When valid, the cleaned values are populated and ready for
    ExpenseLedger.add(). When invalid, `issues` says why, per field.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    month: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None

    @property
    def errors_by_field(self) -> dict[str, str]:
        """First message per field, in the order issues were found."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            errors.setdefault(issue.field, issue.message)
        return errors


# =============================================================================
# AGGREGATION RESULTS
# =============================================================================

class MonthTotal(BaseModel):
    """Combined total for one month (currencies are not converted)."""
    model_config = ConfigDict(frozen=True)

    month: str
    total: float


class CurrencyTotal(BaseModel):
    """Total for one currency within a month."""
    model_config = ConfigDict(frozen=True)

    currency: str
    total: float
    symbol: str


class MonthSummary(BaseModel):
    """Everything a month card needs."""

    month: str
    count: int
    total: float
    breakdown: list[CurrencyTotal] = Field(default_factory=list)
    display_amount: str
    is_mixed: bool = False
    is_current_month: bool = False
    is_most_expensive: bool = False


class ExpenseStatistics(BaseModel):
    """Headline numbers for the statistics panel."""

    total_count: int
    active_month_count: int
    average_per_active_month: float
    current_month: str
    current_month_total: float
    most_expensive_month: Optional[MonthTotal] = None
