"""Conversion between editable country price rules and their stored form.

Stored form, as persisted on a product::

    {"GB": {"priceCents": 1999, "currency": "GBP"}, ...}

Editable form, as handled by the listing editor::

    [{"id": "csp-GB", "country": "United Kingdom", "fixedPrice": 19.99}, ...]
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

COUNTRY_CODES: dict[str, str] = {
    "United States": "US",
    "Canada": "CA",
    "United Kingdom": "GB",
    "Australia": "AU",
    "Germany": "DE",
    "France": "FR",
    "Japan": "JP",
    "India": "IN",
    "Brazil": "BR",
    "China": "CN",
    "Italy": "IT",
    "Spain": "ES",
    "Mexico": "MX",
    "Netherlands": "NL",
    "Switzerland": "CH",
    "Sweden": "SE",
    "Singapore": "SG",
    "United Arab Emirates": "AE",
    "New Zealand": "NZ",
    "South Africa": "ZA",
}

COUNTRY_NAMES: dict[str, str] = {code: name for name, code in COUNTRY_CODES.items()}

CURRENCY_SYMBOLS: dict[str, str] = {
    "United States": "$",
    "Canada": "$",
    "United Kingdom": "£",
    "Australia": "$",
    "Germany": "€",
    "France": "€",
    "Japan": "¥",
    "India": "₹",
    "Brazil": "R$",
    "China": "¥",
    "Italy": "€",
    "Spain": "€",
    "Mexico": "$",
    "Netherlands": "€",
    "Switzerland": "CHF",
    "Sweden": "kr",
    "Singapore": "$",
    "United Arab Emirates": "AED",
    "New Zealand": "$",
    "South Africa": "R",
}

# Currency is derived from the display symbol, so every "$" country is billed
# in USD and every "¥" country in JPY (Canada, Australia, China, ...).
SYMBOL_CURRENCIES: dict[str, str] = {
    "$": "USD",
    "£": "GBP",
    "€": "EUR",
    "¥": "JPY",
    "₹": "INR",
    "R$": "BRL",
    "CHF": "CHF",
    "kr": "SEK",
    "AED": "AED",
    "R": "ZAR",
}

DEFAULT_SYMBOL = "$"
DEFAULT_CURRENCY = "USD"
RULE_ID_PREFIX = "csp-"


@dataclass
class CountryPriceRule:
    """One editable per-country price override."""

    id: str
    country: str
    fixed_price: float | None = None
    discount_percentage: float | None = None

    @property
    def is_percentage(self) -> bool:
        return self.discount_percentage is not None and self.fixed_price is None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CountryPriceRule":
        return cls(
            id=str(data.get("id") or ""),
            country=str(data.get("country") or ""),
            fixed_price=data.get("fixedPrice"),
            discount_percentage=data.get("discountPercentage"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "country": self.country}
        if self.fixed_price is not None:
            data["fixedPrice"] = self.fixed_price
        if self.discount_percentage is not None:
            data["discountPercentage"] = self.discount_percentage
        return data


def country_code(country: str) -> str | None:
    return COUNTRY_CODES.get(country)


def currency_symbol(country: str) -> str:
    return CURRENCY_SYMBOLS.get(country, DEFAULT_SYMBOL)


def currency_code(country: str) -> str:
    return SYMBOL_CURRENCIES.get(currency_symbol(country), DEFAULT_CURRENCY)


def dollars_to_cents(amount: float) -> int:
    """Convert to cents, rounding half a cent up."""
    return math.floor(amount * 100 + 0.5)


def cents_to_dollars(cents: int) -> float:
    return cents / 100


def prices_from_storage(stored: dict[str, Any] | None) -> list[CountryPriceRule]:
    """Expand the stored per-country map into editable rules.

    Unknown country codes keep the raw code as the display name. Entries that
    are not ``{"priceCents": ...}`` objects are skipped.
    """
    if not stored:
        return []

    rules: list[CountryPriceRule] = []
    for code, entry in stored.items():
        if not isinstance(entry, dict) or not isinstance(entry.get("priceCents"), int | float):
            logger.warning("Skipping malformed country price for %s: %r", code, entry)
            continue
        rules.append(
            CountryPriceRule(
                id=f"{RULE_ID_PREFIX}{code}",
                country=COUNTRY_NAMES.get(code, code),
                fixed_price=cents_to_dollars(entry["priceCents"]),
            )
        )
    return rules


def prices_to_storage(rules: list[CountryPriceRule] | None) -> dict[str, Any] | None:
    """Collapse editable rules into the stored map.

    Percentage rules, rules for countries without a known code, and rules
    without a positive fixed price are not persisted. Returns ``None`` when
    nothing remains so the field is cleared.
    """
    stored: dict[str, Any] = {}
    for rule in rules or []:
        if rule.is_percentage or not rule.fixed_price:
            continue
        code = country_code(rule.country)
        if code is None:
            continue
        stored[code] = {
            "priceCents": dollars_to_cents(rule.fixed_price),
            "currency": currency_code(rule.country),
        }
    return stored or None
