"""Alert pattern families.

Each family is one alert layout, with its own entry, stop and risk
expressions. Families are tried in order and the first one that finds
both an entry and a stop wins outright; values from families that only
partly matched are discarded.
"""

import re
from dataclasses import dataclass

# Price capture: digits with optional thousands separators and decimals
_PRICE = r"\$?([0-9][0-9,]*\.?[0-9]*)"
_PERCENT = r"([0-9]+(?:\.[0-9]+)?)\s*%"

# Leading $SYMBOL token; must start with a letter so "$243.10" is not a ticker
TICKER_PATTERN = re.compile(r"\$([A-Za-z][A-Za-z0-9.\-]*)")


@dataclass(frozen=True)
class PatternFamily:
    """Entry/stop/risk expressions for one alert layout."""
    name: str
    entry: re.Pattern
    stop: re.Pattern
    risk: re.Pattern


SINGLE_LINE = PatternFamily(
    name="single_line",
    entry=re.compile(
        r"\b(?:adding|add|starter).*?(?:\$[A-Z]+)?.*?@\s*" + _PRICE,
        re.IGNORECASE,
    ),
    stop=re.compile(
        r"\b(?:stop\s*(?:loss)?|sl)\b.*?@\s*" + _PRICE,
        re.IGNORECASE,
    ),
    risk=re.compile(
        r"\brisk(?:ing)?\b[^\d]*?" + _PERCENT,
        re.IGNORECASE,
    ),
)

MULTI_LINE = PatternFamily(
    name="multi_line",
    entry=re.compile(
        r"\b(?:adding|add|starter).*?@\s*" + _PRICE,
        re.IGNORECASE | re.DOTALL,
    ),
    stop=re.compile(
        r"\b(?:stop.*?loss|sl)\b.*?@\s*" + _PRICE,
        re.IGNORECASE | re.DOTALL,
    ),
    risk=re.compile(
        r"\brisk(?:ing)?\b.*?" + _PERCENT,
        re.IGNORECASE | re.DOTALL,
    ),
)

# "Entry: 243.10 / Stop: 237.90 / Risk: 1%"
LABELLED = PatternFamily(
    name="labelled",
    entry=re.compile(
        r"\b(?:entry|buy|long)\b(?:\s*price)?\s*[:=@]\s*" + _PRICE,
        re.IGNORECASE,
    ),
    stop=re.compile(
        r"\b(?:stop(?:\s*loss)?|sl)\b(?:\s*price)?\s*[:=@]\s*" + _PRICE,
        re.IGNORECASE,
    ),
    risk=re.compile(
        r"\brisk\b[^\d\n]*?" + _PERCENT,
        re.IGNORECASE,
    ),
)

DEFAULT_PATTERN_FAMILIES: tuple[PatternFamily, ...] = (SINGLE_LINE, MULTI_LINE, LABELLED)
