"""
Selected currency preference.

Stored as the bare currency code (not JSON) under its own key.
"""

import structlog

from expense_pumpkin.config.catalog import is_supported_currency
from expense_pumpkin.services.storage import KeyValueStore, StorageError


logger = structlog.get_logger(__name__)


class CurrencyPreference:
    """
    The currency new expenses default to.

    Reads fall back to `default` when nothing is stored, the store fails,
    or the stored code is not supported. Writes that fail are logged and
    the choice is kept for this session.
    """

    def __init__(self, store: KeyValueStore, key: str, default: str, available: bool = True):
        self._store = store
        self._key = key
        self._default = default
        self._available = available
        self._current = self._load()

    def _load(self) -> str:
        if not self._available:
            return self._default

        try:
            saved = self._store.get(self._key)
        except StorageError as e:
            logger.warning("currency_preference_unreadable", error=str(e))
            return self._default

        if saved and is_supported_currency(saved.strip()):
            return saved.strip()
        if saved:
            logger.warning("currency_preference_unsupported", saved=saved)
        return self._default

    @property
    def currency(self) -> str:
        return self._current

    def set(self, currency: str) -> bool:
        """
        Select a currency.

        Returns:
            False if the code is unsupported (nothing changes) or the
            choice could not be persisted
        """
        code = currency.strip().upper()
        if not is_supported_currency(code):
            return False

        self._current = code
        if not self._available:
            return False

        try:
            self._store.set(self._key, code)
        except StorageError as e:
            logger.warning("currency_preference_not_saved", error=str(e))
            return False
        return True
