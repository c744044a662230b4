"""CLI entry point: python main.py size --account 25k --entry 100 --stop 95"""

import argparse
import sys
from typing import Optional

from src.alert_parser import AlertParser
from src.db.engine import get_sync_session_factory
from src.journal import JournalAnalytics, SnapshotStatus, SqlSnapshotStore
from src.logging_config import CalculationContext, configure_logging, get_logger
from src.position_calculator import (
    CalculationInput,
    PositionSizingEngine,
    SizingOutcome,
    normalize_number,
)
from src.settings import get_settings

logger = get_logger("tradesizer.cli")


def _fmt_money(value: Optional[float]) -> str:
    return f"${value:,.2f}" if value is not None else "-"


def _fmt_pct(value: Optional[float]) -> str:
    return f"{value:.2f}%" if value is not None else "-"


def _fmt_ratio(value: Optional[float], suffix: str = "") -> str:
    return f"{value:.2f}{suffix}" if value is not None else "-"


def format_outcome(outcome: SizingOutcome) -> str:
    """Human-readable sizing report."""
    if outcome.is_empty:
        return "Enter account size, entry and stop to size a position."
    if not outcome.is_ok:
        return "\n".join(f"  {e.field.value}: {e.message}" for e in outcome.errors)

    r = outcome.result
    m = r.metrics
    lines = [
        f"  Shares:             {r.shares:,d}",
        f"  Position size:      {_fmt_money(r.position_size)}",
        f"  % of account:       {_fmt_pct(r.percent_of_account)}",
        f"  Risk per share:     {_fmt_money(r.risk_per_share)}",
        f"  Dollar risk:        {_fmt_money(r.dollar_risk)}",
        f"  Total risk:         {_fmt_money(r.total_risk)}",
        f"  Stop distance:      {_fmt_pct(m.stop_distance_pct)}",
        f"  5R target:          {_fmt_money(m.five_r_target)}",
    ]
    if r.is_limited_by_max_account:
        lines.append(
            f"  Limited by max position ({_fmt_money(r.max_position_value)}): "
            f"{r.raw_shares:,d} -> {r.shares:,d} shares"
        )
    if m.has_profit_metrics:
        lines += [
            f"  R-multiple:         {_fmt_ratio(m.r_multiple, 'R')}",
            f"  Profit per share:   {_fmt_money(m.profit_per_share)}",
            f"  Total profit:       {_fmt_money(m.total_profit)}",
            f"  ROI:                {_fmt_pct(m.roi_pct)}",
            f"  Risk:reward:        {_fmt_ratio(m.risk_reward_ratio, ':1')}",
        ]
    if m.trim_plan is not None:
        t = m.trim_plan
        lines.append(
            f"  Trim {t.trim_pct:g}% at 5R:       {t.shares_to_trim:,d} shares @ "
            f"{_fmt_money(t.trim_price)} = {_fmt_money(t.trim_profit)}"
        )
    return "\n".join(lines)


def _save(outcome: SizingOutcome, ticker: str, notes: str) -> None:
    session = get_sync_session_factory()()
    try:
        snapshot = SqlSnapshotStore(session).create(outcome, ticker=ticker, notes=notes)
    finally:
        session.close()
    print(f"\nSaved snapshot {snapshot.snapshot_id}")


def cmd_size(args: argparse.Namespace, engine: PositionSizingEngine) -> int:
    inputs = CalculationInput.from_text(
        account_size=args.account,
        risk_pct=args.risk,
        max_account_pct=args.max_account,
        entry_price=args.entry,
        stop_price=args.stop,
        target_price=args.target,
        config=engine.config,
    )
    with CalculationContext(source="cli"):
        outcome = engine.calculate(inputs)
    print(format_outcome(outcome))

    if not outcome.is_ok:
        if not outcome.is_empty:
            logger.warning("Inputs rejected: %d validation error(s)", len(outcome.errors))
        return 1

    if args.scenarios:
        print("\n  Risk scenarios:")
        for s in engine.risk_scenarios(inputs):
            print(
                f"    {s.risk_pct:>5g}%  {s.shares:>7,d} shares  "
                f"{_fmt_money(s.position_size):>14s}  risk {_fmt_money(s.dollar_risk)}"
            )

    if args.save:
        _save(outcome, args.ticker or "", args.notes or "")
    return 0


def cmd_parse(args: argparse.Namespace, engine: PositionSizingEngine) -> int:
    text = args.text if args.text is not None else sys.stdin.read()
    settings = get_settings()
    parser = AlertParser(settings.alert_parser_config())

    with CalculationContext(source="alert"):
        outcome = parser.parse(text)
    if not outcome.is_ok:
        print(f"Could not parse alert ({outcome.failure.kind.value}): {outcome.failure.message}")
        return 1

    result = outcome.result
    print(f"  Ticker:  {result.ticker or '-'}")
    print(f"  Entry:   {_fmt_money(result.entry)}")
    print(f"  Stop:    {_fmt_money(result.stop)}")
    print(f"  Risk:    {_fmt_pct(result.risk_pct)}")

    account = normalize_number(args.account)
    if account:
        inputs = result.to_calculation_input(
            account_size=account,
            max_account_pct=settings.default_max_account_pct,
            default_risk_pct=settings.default_risk_pct,
        )
        with CalculationContext(source="alert"):
            sized = engine.calculate(inputs)
        print()
        print(format_outcome(sized))
        return 0 if sized.is_ok else 1
    return 0


def cmd_journal(args: argparse.Namespace, engine: PositionSizingEngine) -> int:
    session = get_sync_session_factory()()
    try:
        snapshots = SqlSnapshotStore(session).list(ticker=args.ticker, status=args.status)
    finally:
        session.close()

    for snap in snapshots:
        print(
            f"  {snap.created_at:%Y-%m-%d %H:%M}  {snap.ticker or '-':<8s} "
            f"{snap.shares:>6,d} @ {_fmt_money(snap.entry):>10s}  stop {_fmt_money(snap.stop):>10s}  "
            f"{snap.status.value}"
        )

    summary = JournalAnalytics().summarize(snapshots)
    print(f"\n  Trades: {summary.total_trades}  "
          f"Planned risk: {_fmt_money(summary.total_planned_risk)}  "
          f"Exposure: {_fmt_money(summary.total_exposure)}  "
          f"Avg R: {_fmt_ratio(summary.avg_r_multiple, 'R')}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tradesizer - risk-based position sizing for long equity trades"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    size = sub.add_parser("size", help="Size a position from account, entry and stop")
    size.add_argument("--account", required=True, help="Account size (e.g. 25000, 25k, 1.5m)")
    size.add_argument("--entry", required=True, help="Entry price")
    size.add_argument("--stop", required=True, help="Stop-loss price")
    size.add_argument("--risk", default=None, help="Risk per trade in percent (default: TRADESIZER_DEFAULT_RISK_PCT or 1)")
    size.add_argument("--max-account", default=None, help="Max position as percent of account (default: no cap)")
    size.add_argument("--target", default=None, help="Profit target price")
    size.add_argument("--scenarios", action="store_true", help="Show sizing at preset risk levels")
    size.add_argument("--save", action="store_true", help="Save the result to the journal")
    size.add_argument("--ticker", default=None, help="Ticker for the saved snapshot")
    size.add_argument("--notes", default=None, help="Notes for the saved snapshot")

    parse = sub.add_parser("parse", help="Extract entry/stop/risk from alert text")
    parse.add_argument("text", nargs="?", default=None, help="Alert text (reads stdin if omitted)")
    parse.add_argument("--account", default=None, help="Size the parsed setup for this account")

    journal = sub.add_parser("journal", help="List saved snapshots with a summary")
    journal.add_argument("--ticker", default=None, help="Filter by ticker substring")
    journal.add_argument(
        "--status", default=None, choices=[s.value for s in SnapshotStatus],
        help="Filter by status",
    )
    return parser


COMMANDS = {
    "size": cmd_size,
    "parse": cmd_parse,
    "journal": cmd_journal,
}


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.logging_config())
    engine = PositionSizingEngine(settings.sizing_config())

    return COMMANDS[args.command](args, engine)


if __name__ == "__main__":
    sys.exit(main())
