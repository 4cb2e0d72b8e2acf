"""
CSV Export

Serializes expenses to CSV:

    Month,Year,Description,Amount,Currency
    01,2024,🛒 Groceries,1500.00,INR

A field is quoted (with inner quotes doubled) exactly when it contains a
double quote, comma, carriage return or newline. Rows are joined with
'\\n' and there is no trailing newline.
"""

from datetime import date
from typing import Sequence

from pydantic import BaseModel

from expense_pumpkin.config.catalog import DEFAULT_CURRENCY
from expense_pumpkin.models.expense import Expense


CSV_HEADERS = ("Month", "Year", "Description", "Amount", "Currency")
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"

_SPECIAL_CHARACTERS = ('"', ",", "\r", "\n")


class ExportWithNoDataError(Exception):
    """Raised when asked to export an empty collection."""
    pass


class CsvArtifact(BaseModel):
    """A generated CSV file, ready to be delivered."""

    filename: str
    content: str
    row_count: int
    media_type: str = CSV_MEDIA_TYPE


def escape_csv_field(field: str) -> str:
    if any(char in field for char in _SPECIAL_CHARACTERS):
        return '"' + field.replace('"', '""') + '"'
    return field


def expense_to_row(expense: Expense, default_currency: str = DEFAULT_CURRENCY) -> str:
    row = [
        escape_csv_field(expense.month_part),
        escape_csv_field(expense.year_part),
        escape_csv_field(expense.description),
        f"{expense.amount:.2f}",
        escape_csv_field(expense.resolved_currency(default_currency)),
    ]
    return ",".join(row)


def to_csv(expenses: Sequence[Expense], default_currency: str = DEFAULT_CURRENCY) -> str:
    """
    Serialize expenses in collection order.

    An empty sequence produces only the header row.
    """
    rows = [",".join(CSV_HEADERS)]
    rows.extend(expense_to_row(expense, default_currency) for expense in expenses)
    return "\n".join(rows)


def generate_filename(today: date, prefix: str = "expense-pumpkin") -> str:
    """e.g. 'expense-pumpkin-export-2024-03-09.csv'."""
    return f"{prefix}-export-{today:%Y-%m-%d}.csv"


def build_csv_artifact(
    expenses: Sequence[Expense],
    today: date,
    prefix: str = "expense-pumpkin",
    default_currency: str = DEFAULT_CURRENCY,
) -> CsvArtifact:
    """
    Build the export file for `expenses`.

    Raises:
        ExportWithNoDataError: If there is nothing to export. Checked before
            any serialization happens.
    """
    if not expenses:
        raise ExportWithNoDataError("No expenses to export")

    return CsvArtifact(
        filename=generate_filename(today, prefix),
        content=to_csv(expenses, default_currency),
        row_count=len(expenses),
    )
