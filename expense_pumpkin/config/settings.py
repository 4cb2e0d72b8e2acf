"""
Configuration Management for Expense Pumpkin

Uses pydantic-settings for type-safe configuration from environment variables.

All storage key names and application defaults live here and are handed
to the store adapter, the migrator and the ledger at construction time.
Nothing else in the package hard-codes a storage key.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_pumpkin.config.catalog import DEFAULT_CURRENCY, is_supported_currency


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PUMPKIN_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    namespace: str = Field(
        default="expense-pumpkin",
        min_length=1,
        description="Prefix shared by every key this application owns"
    )

    # Key suffixes (joined to the namespace)
    expenses_key: str = Field(
        default="expenses",
        description="Current-schema expense collection"
    )
    currency_key: str = Field(
        default="currency",
        description="Selected currency preference"
    )
    repeatables_key: str = Field(
        default="repeatable-expenses",
        description="Saved repeatable expense templates"
    )
    migration_flag_key: str = Field(
        default="migrated",
        description="Marker written once legacy data has been migrated"
    )

    # The legacy key predates the namespace and is used verbatim
    legacy_key: str = Field(
        default="halloween-expenses",
        description="Day-level collection written by the previous schema"
    )

    data_dir: Path = Field(
        default=Path.home() / ".expense-pumpkin",
        description="Directory used by the file-backed store"
    )
    quota_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1024,
        description="Maximum total size of all stored values"
    )
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a write that hits a transient OS error"
    )

    def _key(self, suffix: str) -> str:
        return f"{self.namespace}-{suffix}"

    @property
    def expenses_storage_key(self) -> str:
        return self._key(self.expenses_key)

    @property
    def currency_storage_key(self) -> str:
        return self._key(self.currency_key)

    @property
    def repeatables_storage_key(self) -> str:
        return self._key(self.repeatables_key)

    @property
    def migration_flag_storage_key(self) -> str:
        return self._key(self.migration_flag_key)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PUMPKIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    default_currency: str = Field(
        default=DEFAULT_CURRENCY,
        description="Currency used when a record or preference has none"
    )
    export_prefix: str = Field(
        default="expense-pumpkin",
        min_length=1,
        description="Prefix of exported CSV file names"
    )

    # Input limits
    max_amount: float = Field(
        default=999_999_999,
        gt=0,
        description="Largest amount a single expense may have"
    )
    max_amount_decimals: int = Field(
        default=2,
        ge=0,
        description="Decimal places allowed in an entered amount"
    )
    max_description_length: int = Field(
        default=200,
        ge=1,
        description="Maximum description length after trimming"
    )
    max_repeatable_expenses: int = Field(
        default=20,
        ge=1,
        description="How many repeatable expense templates are kept"
    )

    @field_validator('default_currency')
    @classmethod
    def validate_default_currency(cls, v: str) -> str:
        """The default currency must be one we can display."""
        code = v.strip().upper()
        if not is_supported_currency(code):
            raise ValueError(f"Unsupported default currency: {v}")
        return code


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
