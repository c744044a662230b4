"""Tests for the trade alert parser."""

import pytest

from src.alert_parser.config import (
    DEFAULT_ALERT_PARSER_CONFIG,
    AlertField,
    AlertParserConfig,
    ParseErrorKind,
)
from src.alert_parser.models import AlertParseOutcome, AlertParseResult
from src.alert_parser.parser import AlertParser, parse_alert
from src.alert_parser.patterns import DEFAULT_PATTERN_FAMILIES, LABELLED, TICKER_PATTERN
from src.position_calculator.sizing import PositionSizingEngine

TSLA_ALERT = "Adding $TSLA shares @ 243.10\nStop loss @ 237.90\nRisking 1%"


@pytest.fixture
def parser():
    return AlertParser()


# =========================================================================
# Config Tests
# =========================================================================


class TestConfig:
    def test_error_kinds(self):
        assert ParseErrorKind.NOT_FOUND.value == "not_found"
        assert ParseErrorKind.INVALID.value == "invalid"

    def test_default_bounds(self):
        assert DEFAULT_ALERT_PARSER_CONFIG.max_risk_pct == 100.0
        assert DEFAULT_ALERT_PARSER_CONFIG.plausible_risk_pct == 10.0
        assert DEFAULT_ALERT_PARSER_CONFIG.enforce_plausible_risk is True

    def test_family_order(self):
        assert [f.name for f in DEFAULT_PATTERN_FAMILIES] == ["single_line", "multi_line", "labelled"]


# =========================================================================
# Successful Parses
# =========================================================================


class TestParse:
    def test_reference_alert(self, parser):
        outcome = parser.parse(TSLA_ALERT)
        assert outcome.is_ok
        r = outcome.result
        assert r.ticker == "TSLA"
        assert r.entry == 243.10
        assert r.stop == 237.90
        assert r.risk_pct == 1.0
        assert r.pattern_name == "single_line"
        assert outcome.failure is None

    def test_multi_line_block(self, parser):
        text = "Starter $NVDA\nPrice @ 120.50\nSL @ 114\nRisk 0.5%"
        r = parser.parse(text).result
        assert r.pattern_name == "multi_line"
        assert r.ticker == "NVDA"
        assert r.entry == 120.5
        assert r.stop == 114.0
        assert r.risk_pct == 0.5

    def test_labelled_block(self, parser):
        text = "TSLA long\nEntry: 243.10\nStop: 237.90\nRisk: 1%"
        r = parser.parse(text).result
        assert r.pattern_name == "labelled"
        assert r.entry == 243.10
        assert r.stop == 237.90
        assert r.risk_pct == 1.0
        assert r.ticker is None

    def test_dollar_prices_and_separators(self, parser):
        text = "Adding $BRK.A @ $612,345.50\nStop loss @ $600,000"
        r = parser.parse(text).result
        assert r.ticker == "BRK.A"
        assert r.entry == 612_345.5
        assert r.stop == 600_000.0

    def test_ticker_case_folded_and_trimmed(self, parser):
        r = parser.parse("Adding $amd. shares @ 150\nSL @ 140").result
        assert r.ticker == "AMD"

    @pytest.mark.parametrize("verb", ["Added", "Adds", "ADDING"])
    def test_entry_keyword_inflections(self, parser, verb):
        r = parser.parse(f"{verb} $TSLA @ 100\nStop loss @ 95").result
        assert r.pattern_name == "single_line"
        assert r.ticker == "TSLA"
        assert (r.entry, r.stop) == (100.0, 95.0)

    def test_missing_risk_is_optional(self, parser):
        r = parser.parse("Add $SPY @ 500\nStop @ 495").result
        assert r.risk_pct is None

    def test_surrounding_whitespace(self, parser):
        assert parser.parse("\n\n   " + TSLA_ALERT + "   \n").is_ok

    def test_risk_at_plausible_limit(self, parser):
        r = parser.parse("Adding $X @ 50\nStop loss @ 45\nRisking 10%").result
        assert r.risk_pct == 10.0

    def test_fractional_risk(self, parser):
        r = parser.parse("Adding $X @ 50\nStop loss @ 45\nRisking 0.75%").result
        assert r.risk_pct == 0.75

    def test_module_function(self):
        assert parse_alert(TSLA_ALERT).result.ticker == "TSLA"


class TestFamilyOrdering:
    def test_first_complete_family_wins(self, parser):
        text = "Adding $X @ 50\nStop loss @ 45\nEntry: 60\nStop: 40"
        r = parser.parse(text).result
        assert r.pattern_name == "single_line"
        assert (r.entry, r.stop) == (50.0, 45.0)

    def test_partial_matches_are_not_merged(self, parser):
        # The first families find an entry of 50 but no stop
        text = "Adding $X @ 50 for now\nEntry: 60\nStop: 40"
        r = parser.parse(text).result
        assert r.pattern_name == "labelled"
        assert (r.entry, r.stop) == (60.0, 40.0)

    def test_custom_families(self):
        parser = AlertParser(families=[LABELLED])
        assert parser.parse(TSLA_ALERT).is_not_found
        assert parser.parse("Entry: 10\nStop: 9").is_ok


# =========================================================================
# Failures
# =========================================================================


class TestNotFound:
    @pytest.mark.parametrize("text", ["", "   \n  ", None])
    def test_empty_text(self, parser, text):
        outcome = parser.parse(text)
        assert outcome.is_not_found
        assert outcome.failure.field == AlertField.TEXT
        assert outcome.failure.message == "Please paste an alert first"

    def test_no_entry(self, parser):
        outcome = parser.parse("Stop loss @ 95")
        assert outcome.is_not_found
        assert outcome.failure.field == AlertField.ENTRY

    def test_no_stop(self, parser):
        outcome = parser.parse("Adding $AAPL @ 180")
        assert outcome.is_not_found
        assert outcome.failure.field == AlertField.STOP

    def test_raw_text_kept(self, parser):
        outcome = parser.parse("gm everyone")
        assert outcome.failure.raw_text == "gm everyone"
        assert outcome.result is None


class TestInvalid:
    def test_stop_above_entry_is_rejected_not_swapped(self, parser):
        outcome = parser.parse("Adding $AAPL @ 180\nStop loss @ 185")
        assert outcome.is_invalid
        assert outcome.failure.kind == ParseErrorKind.INVALID
        assert outcome.failure.field == AlertField.STOP
        assert outcome.failure.message == "Stop loss must be below entry price (long positions only)."

    def test_stop_equal_entry(self, parser):
        assert parser.parse("Adding $AAPL @ 180\nStop loss @ 180").is_invalid

    def test_zero_entry(self, parser):
        outcome = parser.parse("Adding $AAPL @ 0\nStop loss @ 0")
        assert outcome.is_invalid
        assert outcome.failure.field == AlertField.ENTRY

    def test_implausible_risk(self, parser):
        outcome = parser.parse("Adding $AAPL @ 180\nStop loss @ 170\nRisking 15%")
        assert outcome.is_invalid
        assert outcome.failure.field == AlertField.RISK_PCT
        assert outcome.failure.message == "Risk percentage seems high (>10%). Please verify."

    def test_risk_above_hundred(self, parser):
        outcome = parser.parse("Adding $AAPL @ 180\nStop loss @ 170\nRisking 150%")
        assert outcome.failure.message == "Risk percentage must be between 0 and 100."

    def test_zero_risk(self, parser):
        outcome = parser.parse("Adding $AAPL @ 180\nStop loss @ 170\nRisking 0%")
        assert outcome.is_invalid
        assert outcome.failure.field == AlertField.RISK_PCT

    def test_lenient_config_accepts_high_risk(self):
        parser = AlertParser(AlertParserConfig(enforce_plausible_risk=False))
        r = parser.parse("Adding $AAPL @ 180\nStop loss @ 170\nRisking 15%").result
        assert r.risk_pct == 15.0


# =========================================================================
# Models & Integration
# =========================================================================


class TestModels:
    def test_outcome_flags(self):
        outcome = AlertParseOutcome(result=AlertParseResult(entry=10.0, stop=9.0))
        assert outcome.is_ok
        assert not outcome.is_not_found
        assert not outcome.is_invalid

    def test_to_calculation_input(self):
        inputs = AlertParseResult(entry=10.0, stop=9.0).to_calculation_input(5_000.0)
        assert inputs.account_size == 5_000.0
        assert inputs.risk_pct == 1.0
        assert inputs.max_account_pct == 100.0
        assert inputs.target_price == 0.0

    def test_parsed_risk_carries_through(self):
        inputs = AlertParseResult(entry=10.0, stop=9.0, risk_pct=0.5).to_calculation_input(5_000.0)
        assert inputs.risk_pct == 0.5

    def test_sizes_parsed_alert(self, parser):
        inputs = parser.parse(TSLA_ALERT).result.to_calculation_input(25_000.0)
        outcome = PositionSizingEngine().calculate(inputs)
        assert outcome.is_ok
        # 250 / 5.20 = 48.07
        assert outcome.result.shares == 48

    def test_ticker_pattern_needs_letter(self):
        assert TICKER_PATTERN.search("@ $243.10") is None
        assert TICKER_PATTERN.search("buy $meta now").group(1) == "meta"
