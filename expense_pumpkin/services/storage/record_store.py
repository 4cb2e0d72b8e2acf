"""
Record Store Adapter

Binds one storage key to one typed, JSON-serialized value and keeps an
in-memory copy that is always authoritative for the current process.

Policies:
- Unavailable storage: work purely in memory, never touch the store
- Corrupted stored value: delete the key, start from the initial value
- Failed write (quota or otherwise): keep the in-memory value, report,
  no retry and no rollback
- External update: replace the in-memory value wholesale if it parses,
  otherwise ignore it (last writer wins)
"""

from typing import Callable, Generic, Optional, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from expense_pumpkin.models.events import TrackerEventBuilder
from expense_pumpkin.reporting import EventReporter
from expense_pumpkin.services.storage.interface import (
    KeyValueStore,
    QuotaExceededError,
    StorageError,
)


T = TypeVar("T")

logger = structlog.get_logger(__name__)


class PersistentValue(Generic[T]):
    """
    A typed value persisted under a single key.

    Args:
        store: Backing key-value capability
        key: Storage key owned by this value
        adapter: pydantic TypeAdapter describing the stored JSON
        initial: Value used when nothing (valid) is stored
        reporter: Where storage problems are reported
        available: Known availability; probed from the store when None
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        adapter: TypeAdapter[T],
        initial: T,
        reporter: EventReporter,
        available: Optional[bool] = None,
    ):
        self._store = store
        self._key = key
        self._adapter = adapter
        self._initial = initial
        self._reporter = reporter
        self._available = store.is_available() if available is None else available
        self._handlers: list[Callable[[T], None]] = []
        self.last_write_error: Optional[StorageError] = None
        self.discarded_on_load = False

        if not self._available:
            logger.warning("storage_unavailable_using_memory", key=key)

        self._value = self._load()
        self._unsubscribe = (
            store.subscribe(key, self._on_external_change) if self._available else None
        )

    @property
    def key(self) -> str:
        return self._key

    @property
    def available(self) -> bool:
        return self._available

    @property
    def value(self) -> T:
        return self._value

    def _load(self) -> T:
        if not self._available:
            return self._initial

        try:
            raw = self._store.get(self._key)
        except StorageError as e:
            logger.error("storage_read_failed", key=self._key, error=str(e))
            return self._initial

        if raw is None:
            return self._initial

        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            self.discarded_on_load = True
            self._reporter.report(
                TrackerEventBuilder.corrupted_data_discarded(self._key, str(e))
            )
            try:
                self._store.remove(self._key)
            except StorageError as remove_error:
                logger.warning(
                    "corrupted_value_not_removed",
                    key=self._key,
                    error=str(remove_error),
                )
            return self._initial

    def serialize(self, value: T) -> str:
        return self._adapter.dump_json(value).decode("utf-8")

    def set(self, value: T) -> bool:
        """
        Replace the value.

        The in-memory value always changes. Returns True only when the new
        value also reached the store; failures are left in
        `last_write_error` and reported.
        """
        self._value = value
        self.last_write_error = None

        if not self._available:
            return False

        try:
            self._store.set(self._key, self.serialize(value))
            return True
        except QuotaExceededError as e:
            self.last_write_error = e
            self._reporter.report(TrackerEventBuilder.quota_exceeded(self._key, str(e)))
        except StorageError as e:
            self.last_write_error = e
            self._reporter.report(TrackerEventBuilder.storage_write_failed(self._key, str(e)))
        return False

    def update(self, func: Callable[[T], T]) -> bool:
        """Set the value to func(current value)."""
        return self.set(func(self._value))

    def delete(self) -> None:
        """Remove the key from the store and reset to the initial value."""
        self._value = self._initial
        if self._available:
            try:
                self._store.remove(self._key)
            except StorageError as e:
                self._reporter.report(TrackerEventBuilder.storage_write_failed(self._key, str(e)))

    def on_external_update(self, handler: Callable[[T], None]) -> Callable[[], None]:
        """
        Call `handler(new_value)` whenever another process replaces the value.

        Returns:
            A callable that removes the handler again
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def _on_external_change(self, raw: Optional[str]) -> None:
        if not raw:
            return

        try:
            value = self._adapter.validate_json(raw)
        except ValidationError as e:
            self._reporter.report(
                TrackerEventBuilder.external_update_ignored(self._key, str(e))
            )
            return

        self._value = value
        self._reporter.report(TrackerEventBuilder.external_update_applied(self._key))
        for handler in list(self._handlers):
            handler(value)

    def close(self) -> None:
        """Stop listening for external changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
