"""
Storage Services Package

Abstract key-value capability, two concrete backends and the typed
record store adapter built on top of them.
"""

from expense_pumpkin.services.storage.interface import (
    ChangeCallback,
    KeyValueStore,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
)
from expense_pumpkin.services.storage.memory import InMemoryKeyValueStore
from expense_pumpkin.services.storage.file_store import FileKeyValueStore
from expense_pumpkin.services.storage.record_store import PersistentValue

__all__ = [
    # Interface
    "ChangeCallback",
    "KeyValueStore",
    # Exceptions
    "QuotaExceededError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "PersistentValue",
]
