"""
Tests for the aggregation engine.
"""

import itertools
import math
from datetime import date

import pytest

from expense_pumpkin.aggregation import engine
from expense_pumpkin.models.expense import MonthTotal


class TestMonthlyTotals:
    """Tests for monthly_totals."""

    def test_sums_per_month_ignoring_currency(self, make_expense):
        """Test amounts are combined regardless of currency."""
        expenses = [
            make_expense("2024-01", 100, "INR"),
            make_expense("2024-01", 50, "USD"),
            make_expense("2024-02", 25, "INR"),
        ]
        assert engine.monthly_totals(expenses) == {"2024-01": 150, "2024-02": 25}

    def test_empty(self):
        """Test no expenses gives no totals."""
        assert engine.monthly_totals([]) == {}

    def test_order_independent(self, make_expense):
        """Test permuting the input never changes the totals."""
        expenses = [
            make_expense("2024-01", 0.1),
            make_expense("2024-01", 0.2),
            make_expense("2024-01", 0.3),
            make_expense("2024-02", 1e16),
            make_expense("2024-02", 1.0),
        ]
        expected = engine.monthly_totals(expenses)
        for permutation in itertools.permutations(expenses):
            assert engine.monthly_totals(list(permutation)) == expected


class TestMostExpensiveMonth:
    """Tests for most_expensive_month."""

    def test_none_when_empty(self):
        """Test no expenses gives no month."""
        assert engine.most_expensive_month([]) is None

    def test_highest_total_wins(self, make_expense):
        """Test the month with the highest total is returned."""
        expenses = [
            make_expense("2024-01", 10),
            make_expense("2024-02", 300),
            make_expense("2024-03", 20),
        ]
        assert engine.most_expensive_month(expenses) == MonthTotal(month="2024-02", total=300)

    def test_tie_goes_to_most_recent_month(self, make_expense):
        """Test equal totals resolve to the greatest month string."""
        expenses = [
            make_expense("2024-03", 100),
            make_expense("2024-01", 100),
            make_expense("2024-02", 50),
        ]
        result = engine.most_expensive_month(expenses)
        assert result.month == "2024-03"
        assert result.total == 100

    def test_tie_break_ignores_input_order(self, make_expense):
        """Test the tie-break is not first-found."""
        base = [
            make_expense("2023-12", 40),
            make_expense("2024-01", 40),
            make_expense("2022-06", 40),
        ]
        for permutation in itertools.permutations(base):
            assert engine.most_expensive_month(list(permutation)).month == "2024-01"

    def test_mixed_currency_months_use_naive_sum(self, make_expense):
        """Test mixed currencies are summed without conversion for ranking."""
        expenses = [
            make_expense("2024-01", 60, "USD"),
            make_expense("2024-01", 60, "JPY"),
            make_expense("2024-02", 100, "INR"),
        ]
        assert engine.most_expensive_month(expenses).month == "2024-01"


class TestCurrencyBreakdown:
    """Tests for per-currency month totals and display."""

    def test_sorted_by_descending_total(self, make_expense):
        """Test the largest currency total comes first."""
        expenses = [
            make_expense("2024-01", 10, "USD"),
            make_expense("2024-01", 500, "INR"),
            make_expense("2024-01", 15, "USD"),
            make_expense("2024-02", 999, "EUR"),
        ]
        breakdown = engine.currency_breakdown(expenses, "2024-01")
        assert [(c.currency, c.total, c.symbol) for c in breakdown] == [
            ("INR", 500, "₹"),
            ("USD", 25, "$"),
        ]

    def test_missing_currency_counts_as_default(self, make_expense):
        """Test records without currency fall into the default."""
        expenses = [make_expense("2024-01", 10, None), make_expense("2024-01", 5, "EUR")]
        breakdown = engine.currency_breakdown(expenses, "2024-01", default_currency="EUR")
        assert len(breakdown) == 1
        assert breakdown[0].total == 15

    def test_unknown_currency_symbol_is_code(self, make_expense):
        """Test unsupported codes display as themselves."""
        breakdown = engine.currency_breakdown([make_expense("2024-01", 10, "CHF")], "2024-01")
        assert breakdown[0].symbol == "CHF"

    def test_display_mixed(self, make_expense):
        """Test a month with several currencies shows 'Mixed'."""
        expenses = [make_expense("2024-01", 10, "USD"), make_expense("2024-01", 10, "EUR")]
        assert engine.month_display_amount(expenses, "2024-01") == "Mixed"

    def test_display_single_currency(self, make_expense):
        """Test a single-currency month shows a formatted amount."""
        expenses = [make_expense("2024-01", 10, "USD"), make_expense("2024-01", 5.5, "USD")]
        assert engine.month_display_amount(expenses, "2024-01") == "$15.50"

    def test_display_empty_month(self):
        """Test an empty month shows zero in the default currency."""
        assert engine.month_display_amount([], "2024-01", default_currency="GBP") == "£0.00"


class TestStatistics:
    """Tests for counts, averages and summaries."""

    def test_average_per_active_period(self, make_expense):
        """Test the divisor is the number of distinct active months."""
        expenses = [
            make_expense("2024-01", 100),
            make_expense("2024-01", 50),
            make_expense("2024-06", 150),
        ]
        assert engine.average_per_active_period(expenses) == 150

    def test_average_empty(self):
        """Test the average of nothing is zero."""
        assert engine.average_per_active_period([]) == 0

    def test_counts(self, make_expense):
        """Test count_by_month and total_count."""
        expenses = [
            make_expense("2024-01", 1),
            make_expense("2024-01", 2),
            make_expense("2024-02", 3),
        ]
        assert engine.count_by_month(expenses) == {"2024-01": 2, "2024-02": 1}
        assert engine.total_count(expenses) == 3

    def test_display_order_is_by_timestamp(self, make_expense):
        """Test expanded-month ordering uses creation time."""
        late = make_expense("2024-01", 1, timestamp=300)
        early = make_expense("2024-01", 2, timestamp=100)
        other = make_expense("2024-02", 3, timestamp=50)
        ordered = engine.expenses_in_display_order([late, other, early], "2024-01")
        assert ordered == [early, late]

    def test_summarize(self, make_expense):
        """Test headline statistics."""
        expenses = [
            make_expense("2024-02", 40),
            make_expense("2024-03", 10),
            make_expense("2024-03", 20),
        ]
        stats = engine.summarize(expenses, today=date(2024, 3, 15))
        assert stats.total_count == 3
        assert stats.active_month_count == 2
        assert stats.current_month == "2024-03"
        assert stats.current_month_total == 30
        assert stats.average_per_active_month == 35
        assert stats.most_expensive_month == MonthTotal(month="2024-02", total=40)

    def test_year_overview(self, make_expense):
        """Test twelve month summaries with flags."""
        expenses = [
            make_expense("2024-01", 10, "USD"),
            make_expense("2024-01", 10, "EUR"),
            make_expense("2024-05", 100, "INR"),
            make_expense("2025-01", 5, "INR"),
        ]
        overview = engine.year_overview(expenses, 2024, today=date(2024, 5, 2))

        assert [s.month for s in overview][:2] == ["2024-01", "2024-02"]
        assert len(overview) == 12

        january, may = overview[0], overview[4]
        assert january.is_mixed is True
        assert january.display_amount == "Mixed"
        assert january.count == 2
        assert may.is_current_month is True
        assert may.is_most_expensive is True
        assert may.display_amount == "₹100.00"
        assert overview[1].count == 0


class TestLargeAmounts:
    """Tests for totals that leave the float range."""

    def test_total_of_overflow_is_infinite(self):
        """Test an overflowing sum comes back as inf rather than raising."""
        assert engine.total_of([1e308, 1e308]) == math.inf

    def test_total_of_stays_exact(self):
        """Test ordinary sums do not depend on order."""
        assert engine.total_of([0.1, 0.2, 0.3]) == engine.total_of([0.3, 0.1, 0.2])

    def test_monthly_totals_overflow(self, make_expense):
        """Test an overflowing month total is infinite."""
        expenses = [make_expense("2024-01", 1e308), make_expense("2024-01", 1e308)]
        assert engine.monthly_totals(expenses) == {"2024-01": math.inf}

    def test_summarize_overflow(self, make_expense):
        """Test statistics over huge amounts are computed without raising."""
        expenses = [
            make_expense("2024-01", 1e308),
            make_expense("2024-01", 1e308),
            make_expense("2024-02", 5),
        ]
        stats = engine.summarize(expenses, today=date(2024, 1, 10))
        assert stats.current_month_total == math.inf
        assert stats.average_per_active_month == math.inf
        assert stats.most_expensive_month == MonthTotal(month="2024-01", total=math.inf)

    def test_year_overview_overflow(self, make_expense):
        """Test the overview still has twelve months."""
        expenses = [make_expense("2024-03", 1e308), make_expense("2024-03", 1e308)]
        overview = engine.year_overview(expenses, 2024, today=date(2024, 3, 1))
        assert len(overview) == 12
        assert overview[2].total == math.inf
        assert overview[2].is_most_expensive is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
