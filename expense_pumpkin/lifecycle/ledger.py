"""
Record Lifecycle

Expenses are only ever appended or cleared as a whole. The collection is
kept sorted by month: each new record goes in after every record of the
same or an earlier month, so same-month records stay in insertion order.
"""

from bisect import bisect_right
from operator import attrgetter
from typing import Callable, Optional, Sequence

from expense_pumpkin.aggregation.engine import by_month
from expense_pumpkin.models.events import TrackerEventBuilder
from expense_pumpkin.models.expense import Expense, current_time_ms
from expense_pumpkin.reporting import EventReporter
from expense_pumpkin.services.storage import PersistentValue


def insert_sorted(expenses: Sequence[Expense], expense: Expense) -> list[Expense]:
    """New list with `expense` inserted after all records of months <= its month."""
    index = bisect_right(expenses, expense.month, key=attrgetter("month"))
    return [*expenses[:index], expense, *expenses[index:]]


class ExpenseLedger:
    """
    The current expense collection.

    Args:
        records: Persisted expense list
        reporter: Where lifecycle events go
        clock: Millisecond clock for new records
    """

    def __init__(
        self,
        records: PersistentValue[list[Expense]],
        reporter: EventReporter,
        clock: Callable[[], int] = current_time_ms,
    ):
        self._records = records
        self._reporter = reporter
        self._clock = clock

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._records.value)

    @property
    def persisted(self) -> PersistentValue[list[Expense]]:
        return self._records

    def __len__(self) -> int:
        return len(self._records.value)

    def add(
        self,
        month: str,
        description: str,
        amount: float,
        currency: Optional[str],
    ) -> Expense:
        """
        Create a record and insert it in month order.

        The record is kept in memory even if persisting it fails; check
        `last_write_error` afterwards.
        """
        expense = Expense.create(
            month=month,
            description=description,
            amount=amount,
            currency=currency,
            now_ms=self._clock(),
        )
        self._records.set(insert_sorted(self._records.value, expense))
        self._reporter.report(TrackerEventBuilder.expense_added(expense.id, expense.month))
        return expense

    def clear(self) -> None:
        count = len(self._records.value)
        self._records.set([])
        self._reporter.report(TrackerEventBuilder.expenses_cleared(count))

    def by_month(self, month: str) -> list[Expense]:
        return by_month(self._records.value, month)

    @property
    def last_write_error(self):
        return self._records.last_write_error

    def on_external_update(self, handler: Callable[[list[Expense]], None]) -> Callable[[], None]:
        return self._records.on_external_update(handler)
