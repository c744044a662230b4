"""Number and ticker normalization for user-typed text.

``normalize_number`` turns what a user types into a price or account field
("25k", "1,234.56", "$1.5M") into a float. Garbage and empty input come
back as ``None``; that is "not a number", which calculations read as zero
(``as_amount``) while displays show it as unset.
"""

import math
import re
from typing import Optional

SHORTHAND_MULTIPLIERS: dict[str, float] = {
    "k": 1_000.0,
    "m": 1_000_000.0,
}

_NON_NUMERIC = re.compile(r"[^0-9.]")
_TICKER_DISALLOWED = re.compile(r"[^A-Z0-9.\-]")


def _sanitize(text: str) -> str:
    """Keep digits and the first decimal point; drop anything after a second one."""
    cleaned = _NON_NUMERIC.sub("", text)
    first = cleaned.find(".")
    if first == -1:
        return cleaned
    second = cleaned.find(".", first + 1)
    if second != -1:
        cleaned = cleaned[:second]
    return cleaned


def normalize_number(text: Optional[str]) -> Optional[float]:
    """Parse user-facing numeric text.

    Args:
        text: Raw field text. Thousands separators, currency symbols and
            other non-numeric characters are ignored. A trailing ``K``/``M``
            (any case) multiplies by one thousand / one million.

    Returns:
        The parsed value, or None when nothing numeric remains.
    """
    if text is None:
        return None

    value = str(text).strip()
    if not value:
        return None

    multiplier = 1.0
    suffix = value[-1].lower()
    if suffix in SHORTHAND_MULTIPLIERS:
        multiplier = SHORTHAND_MULTIPLIERS[suffix]
        value = value[:-1]

    digits = _sanitize(value)
    if not digits or digits == ".":
        return None

    number = float(digits)
    if not math.isfinite(number):
        return None
    return number * multiplier


def as_amount(value: Optional[float]) -> float:
    """Value to use in a calculation: "not a number" counts as zero."""
    if value is None or not math.isfinite(value):
        return 0.0
    return value


def normalize_ticker(ticker: Optional[str]) -> str:
    """Strip a leading ``$``, upper-case, and keep letters, digits, dot and dash."""
    if not ticker or not isinstance(ticker, str):
        return ""
    symbol = ticker.strip()
    if symbol.startswith("$"):
        symbol = symbol[1:]
    return _TICKER_DISALLOWED.sub("", symbol.upper())
