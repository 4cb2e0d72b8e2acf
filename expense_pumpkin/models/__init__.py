"""
Data Models Package

All records, inputs, results and events used by Expense Pumpkin.
"""

from expense_pumpkin.models.expense import (
    MONTH_KEY_PATTERN,
    CurrencyTotal,
    Expense,
    ExpenseInput,
    ExpenseStatistics,
    LegacyExpense,
    MonthSummary,
    MonthTotal,
    RepeatableExpense,
    ValidationIssue,
    ValidationResult,
    current_time_ms,
    new_expense_id,
)
from expense_pumpkin.models.events import (
    EventSeverity,
    TrackerEvent,
    TrackerEventBuilder,
    TrackerEventType,
)
from expense_pumpkin.models.outcomes import (
    AddExpenseResult,
    ErrorKind,
    ExportResult,
    LegacyRecordCheck,
    MigrationOutcome,
    MigrationStatus,
    StartupReport,
)

__all__ = [
    # Records
    "MONTH_KEY_PATTERN",
    "Expense",
    "LegacyExpense",
    "RepeatableExpense",
    "current_time_ms",
    "new_expense_id",
    # Input & validation
    "ExpenseInput",
    "ValidationIssue",
    "ValidationResult",
    # Aggregation
    "CurrencyTotal",
    "ExpenseStatistics",
    "MonthSummary",
    "MonthTotal",
    # Events
    "EventSeverity",
    "TrackerEvent",
    "TrackerEventBuilder",
    "TrackerEventType",
    # Outcomes
    "AddExpenseResult",
    "ErrorKind",
    "ExportResult",
    "LegacyRecordCheck",
    "MigrationOutcome",
    "MigrationStatus",
    "StartupReport",
]
