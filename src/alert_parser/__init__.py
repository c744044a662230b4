"""Alert Parser Module.

Turns pasted trade-alert text into a validated long setup that can be
fed straight into the position calculator.

Example:
    from src.alert_parser import parse_alert

    outcome = parse_alert("Adding $TSLA shares @ 243.10\\nStop loss @ 237.90\\nRisking 1%")
    if outcome.is_ok:
        inputs = outcome.result.to_calculation_input(account_size=25_000)
"""

from src.alert_parser.config import (
    ParseErrorKind,
    AlertField,
    AlertParserConfig,
    DEFAULT_ALERT_PARSER_CONFIG,
)

from src.alert_parser.models import (
    AlertParseResult,
    AlertParseFailure,
    AlertParseOutcome,
)

from src.alert_parser.patterns import PatternFamily, DEFAULT_PATTERN_FAMILIES, TICKER_PATTERN
from src.alert_parser.parser import AlertParser, parse_alert

__all__ = [
    # Config
    "ParseErrorKind",
    "AlertField",
    "AlertParserConfig",
    "DEFAULT_ALERT_PARSER_CONFIG",
    # Models
    "AlertParseResult",
    "AlertParseFailure",
    "AlertParseOutcome",
    # Patterns
    "PatternFamily",
    "DEFAULT_PATTERN_FAMILIES",
    "TICKER_PATTERN",
    # Parser
    "AlertParser",
    "parse_alert",
]
