"""Locale-aware number parsing and currency display helpers.

Coaches type amounts the way their country writes them: ``1.234,50`` in
Germany, ``1,234.50`` in the US. Parsing keeps only the last separator as
the decimal point; whether that separator is a comma is decided by the
owner's country.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

# ─── constants ───────────────────────────────────────────────────────────────

COMMA_DECIMAL_COUNTRIES = frozenset(
    {
        "DE", "FR", "ES", "IT", "NL", "BE", "AT", "FI", "PT", "GR", "IE",
        "LU", "MT", "CY", "SK", "SI", "EE", "LV", "LT", "PL", "CZ", "HU",
        "RO", "BG", "HR", "SE", "DK", "NO", "IS", "CH", "LI", "AD", "MC",
        "SM", "VA",
    }
)

CURRENCY_SYMBOLS = "$€£¥₹₽₩₪₦₨₫₴₸₺₼₾₿"

MAX_ABS_VALUE = 999_999_999

_SPACES = re.compile(r"[\s ]+")
_ALL_BUT_LAST_SEPARATOR = re.compile(r"[.,](?=.*[.,])")
_NUMERIC = re.compile(r"^-?\d*\.?\d*$")
_CURRENCY = re.compile(f"[{re.escape(CURRENCY_SYMBOLS)}]")

CURRENCY_DISPLAY = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "NGN": "₦",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF ",
    "ZAR": "R",
}


@dataclass(frozen=True)
class NumberParseResult:
    value: Optional[float]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


def uses_comma_decimal(country: Optional[str]) -> bool:
    return bool(country) and country.upper() in COMMA_DECIMAL_COUNTRIES


def parse_localized_number(
    raw: Union[str, int, float, None], country: Optional[str] = None
) -> NumberParseResult:
    """Parse a user-typed number.

    Spaces and non-breaking spaces are removed, every separator except the
    last is treated as a thousands separator, and the last one becomes the
    decimal point (comma-decimal countries) or is dropped when it is a
    comma elsewhere.
    """
    if raw is None:
        return NumberParseResult(None)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return _bounded(float(raw))

    cleaned = _SPACES.sub("", str(raw))
    if not cleaned:
        return NumberParseResult(None)
    if cleaned in ("-", ".", ",", "-.", "-,"):
        return NumberParseResult(None, "Incomplete number")

    cleaned = _ALL_BUT_LAST_SEPARATOR.sub("", cleaned).rstrip(".")
    if uses_comma_decimal(country):
        cleaned = cleaned.replace(",", ".")
    else:
        cleaned = cleaned.replace(",", "")

    if not cleaned or cleaned == "-" or not _NUMERIC.match(cleaned):
        return NumberParseResult(None, "Invalid number format")

    try:
        value = float(cleaned)
    except ValueError:
        return NumberParseResult(None, "Invalid number format")
    return _bounded(value)


def _bounded(value: float) -> NumberParseResult:
    if abs(value) > MAX_ABS_VALUE:
        return NumberParseResult(None, "Invalid number format")
    return NumberParseResult(value)


def parse_amount(raw: Union[str, int, float, None], country: Optional[str] = None) -> Optional[float]:
    """Parse a money cell, stripping currency symbols. ``None`` when unparseable."""
    if isinstance(raw, str):
        raw = _CURRENCY.sub("", raw)
    result = parse_localized_number(raw, country)
    return result.value if result.ok else None


def format_amount(amount: Optional[float], currency: str = "USD") -> str:
    """Display an amount with its currency symbol, e.g. ``$120.00``."""
    if amount is None:
        return ""
    symbol = CURRENCY_DISPLAY.get(currency.upper(), f"{currency.upper()} ")
    return f"{symbol}{amount:,.2f}"
