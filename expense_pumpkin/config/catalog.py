"""
Static lookup tables: supported currencies and expense categories.

These tables are read-only. Lookups fall back gracefully for unknown
codes so that stored data with an unexpected value still displays.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class CurrencyOption(BaseModel):
    """A supported currency."""
    model_config = ConfigDict(frozen=True)

    code: str    # ISO 4217 code
    symbol: str
    name: str


class CategoryOption(BaseModel):
    """A predefined expense category."""
    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    icon: str


SUPPORTED_CURRENCIES: tuple[CurrencyOption, ...] = (
    CurrencyOption(code="INR", symbol="₹", name="Indian Rupee"),
    CurrencyOption(code="USD", symbol="$", name="US Dollar"),
    CurrencyOption(code="EUR", symbol="€", name="Euro"),
    CurrencyOption(code="GBP", symbol="£", name="British Pound"),
    CurrencyOption(code="JPY", symbol="¥", name="Japanese Yen"),
    CurrencyOption(code="CAD", symbol="C$", name="Canadian Dollar"),
)

DEFAULT_CURRENCY = "INR"

EXPENSE_CATEGORIES: tuple[CategoryOption, ...] = (
    CategoryOption(value="rent", label="Rent", icon="🏠"),
    CategoryOption(value="utilities", label="Utilities", icon="💡"),
    CategoryOption(value="groceries", label="Groceries", icon="🛒"),
    CategoryOption(value="transportation", label="Transportation", icon="🚗"),
    CategoryOption(value="healthcare", label="Healthcare", icon="🏥"),
    CategoryOption(value="entertainment", label="Entertainment", icon="🎬"),
    CategoryOption(value="dining", label="Dining Out", icon="🍽️"),
    CategoryOption(value="shopping", label="Shopping", icon="🛍️"),
    CategoryOption(value="subscriptions", label="Subscriptions", icon="📱"),
    CategoryOption(value="insurance", label="Insurance", icon="🛡️"),
    CategoryOption(value="education", label="Education", icon="📚"),
    CategoryOption(value="fitness", label="Fitness", icon="💪"),
    CategoryOption(value="travel", label="Travel", icon="✈️"),
    CategoryOption(value="pets", label="Pets", icon="🐾"),
    CategoryOption(value="gifts", label="Gifts", icon="🎁"),
    CategoryOption(value="savings", label="Savings", icon="💰"),
    CategoryOption(value="debt", label="Debt Payment", icon="💳"),
    CategoryOption(value="other", label="Other", icon="📝"),
)

DEFAULT_CATEGORY = "other"

_CURRENCIES_BY_CODE = {c.code: c for c in SUPPORTED_CURRENCIES}
_CATEGORIES_BY_VALUE = {c.value: c for c in EXPENSE_CATEGORIES}


def is_supported_currency(code: Optional[str]) -> bool:
    return code in _CURRENCIES_BY_CODE


def get_currency(code: str) -> Optional[CurrencyOption]:
    return _CURRENCIES_BY_CODE.get(code)


def get_currency_symbol(code: str) -> str:
    """Symbol for a currency code, or the code itself if unsupported."""
    currency = _CURRENCIES_BY_CODE.get(code)
    return currency.symbol if currency else code


def is_known_category(value: Optional[str]) -> bool:
    return value in _CATEGORIES_BY_VALUE


def get_category_display(value: str) -> CategoryOption:
    """Category for a value; unknown values display as the default category."""
    return _CATEGORIES_BY_VALUE.get(value) or _CATEGORIES_BY_VALUE[DEFAULT_CATEGORY]


def category_description(value: str) -> str:
    """Description stored for a category-based expense, e.g. '🛒 Groceries'."""
    category = get_category_display(value)
    return f"{category.icon} {category.label}"
