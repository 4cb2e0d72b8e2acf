"""Saved repeatable expenses (quick-fill shortcuts)."""

from expense_pumpkin.models.expense import RepeatableExpense
from expense_pumpkin.services.storage import PersistentValue


class RepeatableExpenseBook:
    """
    Small persisted list of repeatable expense templates.

    Identical templates are stored once. When the list is full the oldest
    template is dropped.
    """

    def __init__(self, templates: PersistentValue[list[RepeatableExpense]], limit: int = 20):
        self._templates = templates
        self._limit = limit

    @property
    def templates(self) -> tuple[RepeatableExpense, ...]:
        return tuple(self._templates.value)

    def save(self, template: RepeatableExpense) -> bool:
        """Add a template. Returns False if an identical one already exists."""
        current = self._templates.value
        if template in current:
            return False

        updated = [*current, template]
        self._templates.set(updated[-self._limit:])
        return True

    def remove(self, template: RepeatableExpense) -> bool:
        """Remove a template. Returns False if it was not saved."""
        current = self._templates.value
        if template not in current:
            return False

        self._templates.set([t for t in current if t != template])
        return True
