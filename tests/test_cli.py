"""Tests for the command-line entry point."""

import io
import logging

import pytest

import main
import src.db.engine as db_engine

TSLA_ALERT = "Adding $TSLA shares @ 243.10\nStop loss @ 237.90\nRisking 1%"


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch, tmp_path, reset_settings):
    """Journal in a per-test SQLite file and an untouched root logger."""
    db_path = tmp_path / "journal.db"
    monkeypatch.setenv("TRADESIZER_JOURNAL_DATABASE_URL", f"sqlite:///{db_path}")
    _fresh_engine(monkeypatch)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    _fresh_engine(monkeypatch)
    root.handlers[:] = handlers
    root.setLevel(level)


def _fresh_engine(monkeypatch):
    """Drop the cached engine, as a new process would start without one."""
    if db_engine._sync_engine is not None:
        db_engine._sync_engine.dispose()
    monkeypatch.setattr(db_engine, "_sync_engine", None)


# =========================================================================
# size
# =========================================================================


class TestSizeCommand:
    def test_sizes_position(self, capsys):
        code = main.main(["size", "--account", "10k", "--entry", "100", "--stop", "95", "--target", "115"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Shares:             20" in out
        assert "$2,000.00" in out
        assert "5R target:          $125.00" in out
        assert "3.00R" in out

    def test_invalid_inputs(self, capsys):
        code = main.main(["size", "--account", "10000", "--entry", "100", "--stop", "105"])
        assert code == 1
        assert "Stop loss must be below entry price" in capsys.readouterr().out

    def test_empty_inputs(self, capsys):
        code = main.main(["size", "--account", "0", "--entry", "0", "--stop", "0"])
        assert code == 1
        assert "Enter account size" in capsys.readouterr().out

    def test_position_cap(self, capsys):
        main.main([
            "size", "--account", "10000", "--risk", "2", "--entry", "50",
            "--stop", "45", "--max-account", "5",
        ])
        out = capsys.readouterr().out
        assert "Limited by max position" in out
        assert "40 -> 10 shares" in out

    def test_scenarios(self, capsys):
        main.main(["size", "--account", "10000", "--entry", "100", "--stop", "95", "--scenarios"])
        out = capsys.readouterr().out
        assert "Risk scenarios" in out
        assert "0.25%" in out

    def test_save_and_list_journal(self, capsys):
        main.main([
            "size", "--account", "10000", "--entry", "100", "--stop", "95",
            "--save", "--ticker", "$aapl", "--notes", "breakout",
        ])
        assert "Saved snapshot" in capsys.readouterr().out

        assert main.main(["journal"]) == 0
        out = capsys.readouterr().out
        assert "AAPL" in out
        assert "Trades: 1" in out

    def test_default_risk_from_env(self, capsys, monkeypatch):
        monkeypatch.setenv("TRADESIZER_DEFAULT_RISK_PCT", "2")
        main.main(["size", "--account", "10000", "--entry", "100", "--stop", "95"])
        out = capsys.readouterr().out
        assert "Dollar risk:        $200.00" in out
        assert "Shares:             40" in out

    def test_default_max_account_from_env(self, capsys, monkeypatch):
        monkeypatch.setenv("TRADESIZER_DEFAULT_MAX_ACCOUNT_PCT", "5")
        main.main(["size", "--account", "10000", "--risk", "2", "--entry", "50", "--stop", "45"])
        assert "40 -> 10 shares" in capsys.readouterr().out

    def test_explicit_risk_beats_env(self, capsys, monkeypatch):
        monkeypatch.setenv("TRADESIZER_DEFAULT_RISK_PCT", "2")
        main.main(["size", "--account", "10000", "--entry", "100", "--stop", "95", "--risk", "0.5"])
        assert "Dollar risk:        $50.00" in capsys.readouterr().out

    def test_saved_snapshot_survives_new_engine(self, capsys, monkeypatch, tmp_path):
        main.main([
            "size", "--account", "10000", "--entry", "100", "--stop", "95",
            "--save", "--ticker", "AAPL",
        ])
        capsys.readouterr()
        _fresh_engine(monkeypatch)

        assert main.main(["journal", "--ticker", "aapl"]) == 0
        out = capsys.readouterr().out
        assert "Trades: 1" in out
        assert (tmp_path / "journal.db").exists()

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            main.main([])


# =========================================================================
# parse
# =========================================================================


class TestParseCommand:
    def test_parses_argument(self, capsys):
        assert main.main(["parse", TSLA_ALERT]) == 0
        out = capsys.readouterr().out
        assert "TSLA" in out
        assert "$243.10" in out
        assert "$237.90" in out
        assert "1.00%" in out

    def test_reads_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(TSLA_ALERT))
        assert main.main(["parse"]) == 0
        assert "TSLA" in capsys.readouterr().out

    def test_sizes_with_account(self, capsys):
        assert main.main(["parse", TSLA_ALERT, "--account", "25k"]) == 0
        assert "Shares:             48" in capsys.readouterr().out

    def test_reports_failure(self, capsys):
        assert main.main(["parse", "gm everyone"]) == 1
        assert "Could not parse alert (not_found)" in capsys.readouterr().out

    def test_lenient_risk_from_env(self, capsys, monkeypatch):
        monkeypatch.setenv("TRADESIZER_ALERT_ENFORCE_PLAUSIBLE_RISK", "false")
        text = "Adding $X @ 50\nStop loss @ 45\nRisking 15%"
        assert main.main(["parse", text]) == 0
        assert "15.00%" in capsys.readouterr().out
