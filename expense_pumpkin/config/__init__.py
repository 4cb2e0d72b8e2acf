"""Configuration package."""

from expense_pumpkin.config.catalog import (
    DEFAULT_CATEGORY,
    DEFAULT_CURRENCY,
    EXPENSE_CATEGORIES,
    SUPPORTED_CURRENCIES,
    CategoryOption,
    CurrencyOption,
    category_description,
    get_category_display,
    get_currency,
    get_currency_symbol,
    is_known_category,
    is_supported_currency,
)
from expense_pumpkin.config.settings import (
    AppSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    # Catalog
    "DEFAULT_CATEGORY",
    "DEFAULT_CURRENCY",
    "EXPENSE_CATEGORIES",
    "SUPPORTED_CURRENCIES",
    "CategoryOption",
    "CurrencyOption",
    "category_description",
    "get_category_display",
    "get_currency",
    "get_currency_symbol",
    "is_known_category",
    "is_supported_currency",
    # Settings
    "AppSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
