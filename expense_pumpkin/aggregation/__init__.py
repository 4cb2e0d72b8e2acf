"""Aggregation over expense collections."""

from expense_pumpkin.aggregation.engine import (
    MIXED_LABEL,
    average_per_active_period,
    by_month,
    count_by_month,
    currency_breakdown,
    expenses_in_display_order,
    format_amount,
    is_mixed_currency,
    month_display_amount,
    month_key,
    month_total,
    monthly_totals,
    most_expensive_month,
    summarize,
    total_of,
    total_count,
    year_overview,
)

__all__ = [
    "MIXED_LABEL",
    "average_per_active_period",
    "by_month",
    "count_by_month",
    "currency_breakdown",
    "expenses_in_display_order",
    "format_amount",
    "is_mixed_currency",
    "month_display_amount",
    "month_key",
    "month_total",
    "monthly_totals",
    "most_expensive_month",
    "summarize",
    "total_of",
    "total_count",
    "year_overview",
]
