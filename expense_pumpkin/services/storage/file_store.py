"""
Directory-backed key-value store.

Each key is one UTF-8 file in a directory. Writes go to a temporary file
that is then renamed over the target, so a reader in another process sees
either the old value or the new one.

Other processes sharing the directory play the role of other tabs:
`poll_external_changes()` compares each subscribed key with what this
store last saw and notifies subscribers about anything that moved.
"""

import errno
import os
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import quote

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_pumpkin.services.storage.interface import (
    ChangeCallback,
    KeyValueStore,
    QuotaExceededError,
    StorageUnavailableError,
    SubscriptionRegistry,
)


logger = structlog.get_logger(__name__)

PROBE_FILE = "__storage_probe__"
VALUE_SUFFIX = ".value"

# Raised while another process briefly holds the file
TRANSIENT_ERRORS = (PermissionError, BlockingIOError, InterruptedError)

# Disk-full style failures are reported as quota problems, never retried
QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class FileKeyValueStore(KeyValueStore):
    """
    Store values as files under `directory`.

    Args:
        directory: Where values live (created on first write)
        quota_bytes: Maximum total size of all values, or None for no limit
        retry_attempts: Attempts for writes hitting a transient OS error
    """

    def __init__(
        self,
        directory: Path,
        quota_bytes: Optional[int] = None,
        retry_attempts: int = 3,
    ):
        self._directory = Path(directory)
        self._quota_bytes = quota_bytes
        self._retry_attempts = retry_attempts
        self._subscriptions = SubscriptionRegistry()
        self._known: dict[str, Optional[str]] = {}

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        return self._directory / f"{quote(key, safe='-_.')}{VALUE_SUFFIX}"

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read '{key}': {e}") from e

    def _used_bytes_except(self, key: str) -> int:
        target = self._path(key)
        if not self._directory.is_dir():
            return 0
        return sum(
            path.stat().st_size
            for path in self._directory.glob(f"*{VALUE_SUFFIX}")
            if path != target
        )

    def _atomic_write(self, path: Path, value: str) -> None:
        tmp_path = path.with_name(f".{path.name}.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)

    def get(self, key: str) -> Optional[str]:
        return self._read(key)

    def set(self, key: str, value: str) -> None:
        encoded_size = len(value.encode("utf-8"))
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            if self._quota_bytes is not None:
                needed = self._used_bytes_except(key) + encoded_size
                if needed > self._quota_bytes:
                    raise QuotaExceededError(
                        f"Writing '{key}' needs {needed} bytes, quota is {self._quota_bytes}"
                    )

            for attempt in Retrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(multiplier=0.05, max=1),
                retry=retry_if_exception_type(TRANSIENT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    self._atomic_write(self._path(key), value)
        except OSError as e:
            if e.errno in QUOTA_ERRNOS:
                raise QuotaExceededError(f"No space left writing '{key}': {e}") from e
            raise StorageUnavailableError(f"Cannot write '{key}': {e}") from e

        self._known[key] = value

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot remove '{key}': {e}") from e
        self._known[key] = None

    def is_available(self) -> bool:
        probe = self._directory / PROBE_FILE
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            probe.write_text("test", encoding="utf-8")
            probe.unlink()
            return True
        except OSError as e:
            logger.warning("storage_probe_failed", directory=str(self._directory), error=str(e))
            return False

    def subscribe(self, key: str, callback: ChangeCallback) -> Callable[[], None]:
        if key not in self._known:
            self._known[key] = self._read(key)
        return self._subscriptions.add(key, callback)

    def poll_external_changes(self) -> list[str]:
        """
        Notify subscribers about keys another process changed.

        Returns:
            The keys whose value differed from what this store last saw
        """
        changed = []
        for key in self._subscriptions.keys():
            current = self._read(key)
            if current != self._known.get(key):
                self._known[key] = current
                changed.append(key)
                self._subscriptions.notify(key, current)
        return changed
