"""Trade Alert Parser.

Extracts a long trade setup (entry, stop, optional risk % and ticker)
from pasted alert text such as:

    Adding $TSLA shares @ 243.10
    Stop loss @ 237.90
    Risking 1%

Pattern families are tried in order; the first that yields both an entry
and a stop is used, and values are never mixed across families. A setup
that cannot be located is reported as NOT_FOUND; one that is located but
breaks a rule (stop above entry, implausible risk) is INVALID.
"""

import logging
import re
from typing import Optional, Sequence

from src.alert_parser.config import (
    DEFAULT_ALERT_PARSER_CONFIG,
    AlertField,
    AlertParserConfig,
    ParseErrorKind,
)
from src.alert_parser.models import AlertParseFailure, AlertParseOutcome, AlertParseResult
from src.alert_parser.patterns import DEFAULT_PATTERN_FAMILIES, TICKER_PATTERN, PatternFamily
from src.position_calculator.normalize import normalize_ticker

logger = logging.getLogger(__name__)

_NUMBER_NOISE = re.compile(r"[,\s]")


def _to_number(raw: Optional[str]) -> Optional[float]:
    """Strip separators and parse; None when the capture is not a number."""
    if raw is None:
        return None
    cleaned = _NUMBER_NOISE.sub("", raw)
    try:
        return float(cleaned)
    except ValueError:
        return None


def _first_group(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


class AlertParser:
    """Parses free-text trade alerts into entry/stop/risk values.

    Example:
        parser = AlertParser()
        outcome = parser.parse("Adding $NVDA @ 120\\nSL @ 114\\nRisking 0.5%")
        if outcome.is_ok:
            print(outcome.result.entry, outcome.result.stop)
    """

    def __init__(
        self,
        config: Optional[AlertParserConfig] = None,
        families: Optional[Sequence[PatternFamily]] = None,
    ) -> None:
        self.config = config or DEFAULT_ALERT_PARSER_CONFIG
        self.families = tuple(families) if families is not None else DEFAULT_PATTERN_FAMILIES

    def parse(self, text: Optional[str]) -> AlertParseOutcome:
        """Parse one alert.

        Args:
            text: Raw alert text, possibly multi-line.

        Returns:
            AlertParseOutcome holding either the result or a failure.
        """
        raw = text or ""
        if not raw.strip():
            return self._fail(ParseErrorKind.NOT_FOUND, AlertField.TEXT, "Please paste an alert first", raw)

        entry_raw = stop_raw = risk_raw = None
        matched: Optional[PatternFamily] = None
        saw_entry = False

        for family in self.families:
            entry_candidate = _first_group(family.entry, raw)
            stop_candidate = _first_group(family.stop, raw)
            saw_entry = saw_entry or entry_candidate is not None
            if entry_candidate is not None and stop_candidate is not None:
                entry_raw, stop_raw = entry_candidate, stop_candidate
                risk_raw = _first_group(family.risk, raw)
                matched = family
                break

        if matched is None:
            if not saw_entry:
                return self._fail(
                    ParseErrorKind.NOT_FOUND, AlertField.ENTRY,
                    "Could not find entry price in alert", raw,
                )
            return self._fail(
                ParseErrorKind.NOT_FOUND, AlertField.STOP,
                "Could not find stop loss in alert", raw,
            )

        entry = _to_number(entry_raw)
        if entry is None or not entry > 0:
            return self._fail(ParseErrorKind.INVALID, AlertField.ENTRY, "Invalid entry price", raw)

        stop = _to_number(stop_raw)
        if stop is None or not stop > 0:
            return self._fail(ParseErrorKind.INVALID, AlertField.STOP, "Invalid stop loss price", raw)

        if stop >= entry:
            return self._fail(
                ParseErrorKind.INVALID, AlertField.STOP,
                "Stop loss must be below entry price (long positions only).", raw,
            )

        risk_pct = None
        if risk_raw is not None:
            risk_pct = _to_number(risk_raw)
            if risk_pct is None or not 0 < risk_pct <= self.config.max_risk_pct:
                return self._fail(
                    ParseErrorKind.INVALID, AlertField.RISK_PCT,
                    f"Risk percentage must be between 0 and {self.config.max_risk_pct:g}.", raw,
                )
            if self.config.enforce_plausible_risk and risk_pct > self.config.plausible_risk_pct:
                return self._fail(
                    ParseErrorKind.INVALID, AlertField.RISK_PCT,
                    f"Risk percentage seems high (>{self.config.plausible_risk_pct:g}%). Please verify.", raw,
                )

        ticker = self._extract_ticker(raw)
        logger.debug(
            "Parsed alert with %s pattern: ticker=%s entry=%s stop=%s risk=%s",
            matched.name, ticker, entry, stop, risk_pct,
        )
        return AlertParseOutcome(result=AlertParseResult(
            entry=entry,
            stop=stop,
            risk_pct=risk_pct,
            ticker=ticker,
            pattern_name=matched.name,
        ))

    @staticmethod
    def _extract_ticker(text: str) -> Optional[str]:
        match = TICKER_PATTERN.search(text)
        if not match:
            return None
        symbol = normalize_ticker(match.group(1).rstrip(".-"))
        return symbol or None

    @staticmethod
    def _fail(kind: ParseErrorKind, field: AlertField, message: str, raw: str) -> AlertParseOutcome:
        logger.warning(
            "Alert parse failed: %s", message,
            extra={"error_kind": kind.value},
        )
        return AlertParseOutcome(failure=AlertParseFailure(
            kind=kind, field=field, message=message, raw_text=raw,
        ))


def parse_alert(text: Optional[str], config: Optional[AlertParserConfig] = None) -> AlertParseOutcome:
    """Parse an alert with the default pattern families."""
    return AlertParser(config).parse(text)
