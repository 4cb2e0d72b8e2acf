"""Shared fixtures for the Expense Pumpkin tests."""

import pytest
from pydantic import TypeAdapter

from expense_pumpkin.config import AppSettings, StorageSettings
from expense_pumpkin.models.expense import Expense
from expense_pumpkin.reporting import RecordingReporter
from expense_pumpkin.services.storage import InMemoryKeyValueStore, PersistentValue


FIXED_NOW_MS = 1_700_000_000_000

EXPENSE_LIST = TypeAdapter(list[Expense])


@pytest.fixture
def storage_settings():
    return StorageSettings()


@pytest.fixture
def app_settings():
    return AppSettings()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def make_expense():
    """Factory for expenses with predictable ids and timestamps."""
    counter = {"n": 0}

    def factory(month, amount, currency="INR", description="Test expense", timestamp=None):
        counter["n"] += 1
        return Expense(
            id=f"{FIXED_NOW_MS}-test{counter['n']:05d}",
            month=month,
            description=description,
            amount=amount,
            currency=currency,
            timestamp=timestamp if timestamp is not None else FIXED_NOW_MS + counter["n"],
        )

    return factory


@pytest.fixture
def expense_records(store, storage_settings, reporter):
    """Persisted, initially empty expense collection."""
    return PersistentValue(
        store,
        storage_settings.expenses_storage_key,
        EXPENSE_LIST,
        [],
        reporter,
    )
