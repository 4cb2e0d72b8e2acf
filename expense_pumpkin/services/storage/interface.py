"""
Abstract Key-Value Storage Interface

The tracker only needs a string key-value store with four capabilities:
read, write, delete, an availability probe, and a notification when
another process changes a key. Anything providing those (an in-memory
dict, a directory of files, a browser's local storage bridge) can back it.

Implementations never notify subscribers about their own writes, only
about changes made elsewhere.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional


ChangeCallback = Callable[[Optional[str]], None]


class KeyValueStore(ABC):
    """
    Abstract interface for persistent key-value storage.

    Values are opaque strings; serialization is the caller's concern.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageUnavailableError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            QuotaExceededError: If the write would exceed the size limit
            StorageUnavailableError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Deleting an absent key is not an error."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Probe whether reads and writes currently work."""
        pass

    @abstractmethod
    def subscribe(self, key: str, callback: ChangeCallback) -> Callable[[], None]:
        """
        Be told when another process changes `key`.

        The callback receives the new raw value (None when removed).

        Returns:
            A callable that cancels the subscription
        """
        pass


class SubscriptionRegistry:
    """Per-key callback lists shared by the concrete stores."""

    def __init__(self):
        self._callbacks: dict[str, list[ChangeCallback]] = {}

    def add(self, key: str, callback: ChangeCallback) -> Callable[[], None]:
        self._callbacks.setdefault(key, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._callbacks.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def keys(self) -> list[str]:
        return [key for key, callbacks in self._callbacks.items() if callbacks]

    def notify(self, key: str, value: Optional[str]) -> None:
        for callback in list(self._callbacks.get(key, [])):
            callback(value)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class QuotaExceededError(StorageError):
    """A write was refused because of the storage size limit."""
    pass


class StorageUnavailableError(StorageError):
    """The storage backend cannot be used at all."""
    pass
