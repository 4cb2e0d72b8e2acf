"""
Aggregation Engine

Pure functions over a sequence of current-schema expenses. Nothing here
reads storage or mutates its input.

Two kinds of totals:
- `monthly_totals` adds amounts regardless of currency. Mixed-currency
  months get a combined number; it is what ranks months against each
  other (most expensive month, statistics).
- `currency_breakdown` keeps currencies apart; it is what a month card
  displays, showing "Mixed" when more than one currency is present.

Sums use math.fsum, so results do not depend on the order of the input.
A total that overflows the float range is non-finite, never an exception.
"""

import math
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from expense_pumpkin.config.catalog import DEFAULT_CURRENCY, get_currency_symbol
from expense_pumpkin.models.expense import (
    CurrencyTotal,
    Expense,
    ExpenseStatistics,
    MonthSummary,
    MonthTotal,
)


MIXED_LABEL = "Mixed"


def total_of(amounts: Iterable[float]) -> float:
    """
    Order-independent sum of amounts.

    Totals past the float range come back non-finite (inf, or nan for
    mixed infinities) instead of raising, the same as adding them up one
    by one would.
    """
    values = list(amounts)
    try:
        return math.fsum(values)
    except (OverflowError, ValueError):
        return sum(values)


def month_key(day: date) -> str:
    return f"{day:%Y-%m}"


def monthly_totals(expenses: Sequence[Expense]) -> dict[str, float]:
    """Sum of amounts per month, currencies combined."""
    grouped: dict[str, list[float]] = defaultdict(list)
    for expense in expenses:
        grouped[expense.month].append(expense.amount)
    return {month: total_of(amounts) for month, amounts in grouped.items()}


def most_expensive_month(expenses: Sequence[Expense]) -> Optional[MonthTotal]:
    """
    Month with the highest combined total.

    Ties go to the most recent month (greatest 'YYYY-MM' string).
    Returns None when there are no expenses.
    """
    totals = monthly_totals(expenses)
    if not totals:
        return None

    max_total = max(totals.values())
    top_months = [month for month, total in totals.items() if total == max_total]
    return MonthTotal(month=max(top_months), total=max_total)


def by_month(expenses: Sequence[Expense], month: str) -> list[Expense]:
    return [expense for expense in expenses if expense.month == month]


def month_total(expenses: Sequence[Expense], month: str) -> float:
    return total_of(expense.amount for expense in expenses if expense.month == month)


def currency_breakdown(
    expenses: Sequence[Expense],
    month: str,
    default_currency: str = DEFAULT_CURRENCY,
) -> list[CurrencyTotal]:
    """
    Per-currency totals for one month, largest first.

    Records without a currency count toward `default_currency`.
    Equal totals keep the order in which the currency first appeared.
    """
    grouped: dict[str, list[float]] = {}
    for expense in by_month(expenses, month):
        currency = expense.resolved_currency(default_currency)
        grouped.setdefault(currency, []).append(expense.amount)

    breakdown = [
        CurrencyTotal(
            currency=currency,
            total=total_of(amounts),
            symbol=get_currency_symbol(currency),
        )
        for currency, amounts in grouped.items()
    ]
    return sorted(breakdown, key=lambda item: item.total, reverse=True)


def is_mixed_currency(breakdown: Sequence[CurrencyTotal]) -> bool:
    return len(breakdown) > 1


def format_amount(symbol: str, amount: float) -> str:
    return f"{symbol}{amount:.2f}"


def month_display_amount(
    expenses: Sequence[Expense],
    month: str,
    default_currency: str = DEFAULT_CURRENCY,
) -> str:
    """What a month card shows: 'Mixed', '₹1500.00', or a zero amount."""
    breakdown = currency_breakdown(expenses, month, default_currency)
    if is_mixed_currency(breakdown):
        return MIXED_LABEL
    if breakdown:
        return format_amount(breakdown[0].symbol, breakdown[0].total)
    return format_amount(get_currency_symbol(default_currency), 0)


def expenses_in_display_order(expenses: Sequence[Expense], month: str) -> list[Expense]:
    """A month's expenses ordered by creation time, for the expanded card."""
    return sorted(by_month(expenses, month), key=lambda expense: expense.timestamp)


def total_count(expenses: Sequence[Expense]) -> int:
    return len(expenses)


def count_by_month(expenses: Sequence[Expense]) -> dict[str, int]:
    counts: dict[str, int] = defaultdict(int)
    for expense in expenses:
        counts[expense.month] += 1
    return dict(counts)


def average_per_active_period(expenses: Sequence[Expense]) -> float:
    """
    Grand total divided by the number of distinct months with expenses.

    Months without expenses are not counted. 0 for no expenses.
    """
    if not expenses:
        return 0.0

    active_months = {expense.month for expense in expenses}
    return total_of(expense.amount for expense in expenses) / len(active_months)


def year_overview(
    expenses: Sequence[Expense],
    year: int,
    today: Optional[date] = None,
    default_currency: str = DEFAULT_CURRENCY,
) -> list[MonthSummary]:
    """Twelve month summaries (January first) for one calendar year."""
    current = month_key(today) if today else None
    top = most_expensive_month(expenses)

    summaries = []
    for month_number in range(1, 13):
        month = f"{year:04d}-{month_number:02d}"
        breakdown = currency_breakdown(expenses, month, default_currency)
        month_expenses = by_month(expenses, month)
        summaries.append(MonthSummary(
            month=month,
            count=len(month_expenses),
            total=total_of(expense.amount for expense in month_expenses),
            breakdown=breakdown,
            display_amount=month_display_amount(expenses, month, default_currency),
            is_mixed=is_mixed_currency(breakdown),
            is_current_month=month == current,
            is_most_expensive=top is not None and top.month == month,
        ))
    return summaries


def summarize(expenses: Sequence[Expense], today: date) -> ExpenseStatistics:
    """Headline statistics as of `today`."""
    current = month_key(today)
    return ExpenseStatistics(
        total_count=total_count(expenses),
        active_month_count=len({expense.month for expense in expenses}),
        average_per_active_month=average_per_active_period(expenses),
        current_month=current,
        current_month_total=month_total(expenses, current),
        most_expensive_month=most_expensive_month(expenses),
    )
