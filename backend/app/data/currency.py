"""Currency utilities — display-currency conversion and price label parsing."""

import math
import re
from dataclasses import dataclass
from typing import Literal, get_args

DisplayCurrency = Literal["USD", "EUR", "GBP", "AUD", "CAD", "JPY", "SGD"]

SourceCurrency = Literal["USD", "EUR", "GBP", "AUD", "CAD", "JPY", "SGD", "MXN", "BRL"]

DISPLAY_CURRENCIES: tuple[str, ...] = get_args(DisplayCurrency)

# Approximate rate to USD (1 unit of source = rate USD)
SOURCE_TO_USD: dict[str, float] = {
    "USD": 1.0,
    "EUR": 1.08,
    "GBP": 1.27,
    "AUD": 0.65,
    "CAD": 0.72,
    "JPY": 0.0067,
    "SGD": 0.74,
    "MXN": 0.058,
    "BRL": 0.17,
}

CURRENCY_PREFIXES: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "AUD": "AUD ",
    "CAD": "CAD ",
    "SGD": "SGD ",
}

# Symbol / code markers recognised in curated price strings, longest first
_PRICE_MARKERS: list[tuple[str, str]] = [
    ("MXN", "MXN"), ("BRL", "BRL"), ("AUD", "AUD"), ("CAD", "CAD"),
    ("SGD", "SGD"), ("USD", "USD"), ("EUR", "EUR"), ("GBP", "GBP"),
    ("A$", "AUD"), ("C$", "CAD"), ("S$", "SGD"), ("R$", "BRL"),
    ("€", "EUR"), ("£", "GBP"), ("¥", "JPY"), ("$", "USD"),
]

_FROM_PREFIX = re.compile(r"^from\s+", re.IGNORECASE)
_AMOUNT = re.compile(r"(\d+(?:\.\d+)?)")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def convert_to_display(value: float, from_currency: SourceCurrency, to_currency: DisplayCurrency) -> float:
    """Convert from a source currency to a display currency via USD."""
    usd = value * SOURCE_TO_USD[from_currency]
    if to_currency == "USD":
        return usd
    return usd / SOURCE_TO_USD[to_currency]


def format_in_currency(value: float, currency: DisplayCurrency) -> str:
    """Whole units with thousands separators, e.g. '€1,250'."""
    prefix = CURRENCY_PREFIXES.get(currency, "$")
    return f"{prefix}{_round_half_up(value):,}"


@dataclass(frozen=True)
class ParsedPrice:
    value: float
    currency: str
    from_prefix: bool


def parse_price_label(label: str) -> ParsedPrice | None:
    """Parse a curated price string ('€400', 'From €3,500', 'A$ 250')."""
    if not label:
        return None
    text = label.strip()
    from_prefix = bool(_FROM_PREFIX.match(text))
    text = _FROM_PREFIX.sub("", text).replace(",", "").strip()

    for marker, currency in _PRICE_MARKERS:
        if marker in text:
            match = _AMOUNT.search(text)
            if not match:
                return None
            return ParsedPrice(float(match.group(1)), currency, from_prefix)
    return None


def localize_price_label(label: str, to_currency: DisplayCurrency) -> str | None:
    """Re-render a curated price label in the display currency, or None if unparsable."""
    parsed = parse_price_label(label)
    if parsed is None:
        return None
    converted = convert_to_display(parsed.value, parsed.currency, to_currency)
    formatted = format_in_currency(converted, to_currency)
    return f"From {formatted}" if parsed.from_prefix else formatted
