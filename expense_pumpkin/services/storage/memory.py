"""
In-memory key-value store.

Used when nothing persistent is available, and in tests. A quota and an
"unavailable" switch let callers exercise the failure paths, and
`receive_external_change` stands in for a write made by another tab.
"""

from typing import Callable, Optional

from expense_pumpkin.services.storage.interface import (
    ChangeCallback,
    KeyValueStore,
    QuotaExceededError,
    StorageUnavailableError,
    SubscriptionRegistry,
)


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store with an optional size quota (in UTF-8 bytes)."""

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        quota_bytes: Optional[int] = None,
        available: bool = True,
    ):
        self._data: dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes
        self._available = available
        self._subscriptions = SubscriptionRegistry()

    @property
    def data(self) -> dict[str, str]:
        """Snapshot of the stored values."""
        return dict(self._data)

    def set_available(self, available: bool) -> None:
        self._available = available

    def _ensure_available(self) -> None:
        if not self._available:
            raise StorageUnavailableError("In-memory store is switched off")

    def _size_with(self, key: str, value: str) -> int:
        size = sum(
            len(k.encode("utf-8")) + len(v.encode("utf-8"))
            for k, v in self._data.items()
            if k != key
        )
        return size + len(key.encode("utf-8")) + len(value.encode("utf-8"))

    def get(self, key: str) -> Optional[str]:
        self._ensure_available()
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._ensure_available()
        if self._quota_bytes is not None:
            needed = self._size_with(key, value)
            if needed > self._quota_bytes:
                raise QuotaExceededError(
                    f"Writing '{key}' needs {needed} bytes, quota is {self._quota_bytes}"
                )
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._ensure_available()
        self._data.pop(key, None)

    def is_available(self) -> bool:
        return self._available

    def subscribe(self, key: str, callback: ChangeCallback) -> Callable[[], None]:
        return self._subscriptions.add(key, callback)

    def receive_external_change(self, key: str, value: Optional[str]) -> None:
        """Apply a change made by another process and notify subscribers."""
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
        self._subscriptions.notify(key, value)
