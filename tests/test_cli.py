import pytest

from exactcalc_pkg import config
from exactcalc_pkg.cli import REPL
from exactcalc_pkg.cli import main_entry
from exactcalc_pkg.cli.context import ReplContext


@pytest.fixture(autouse=True)
def restore_config(monkeypatch):
    # main_entry writes CLI overrides straight into the config module
    monkeypatch.setattr(config, "OUTPUT_DIGITS", config.OUTPUT_DIGITS)
    monkeypatch.setattr(config, "WORKER_TIMEOUT", config.WORKER_TIMEOUT)
    monkeypatch.setattr(config, "WORKER_LONG_TIMEOUT", config.WORKER_LONG_TIMEOUT)


def test_version(capsys):
    assert main_entry(["-v"]) == 0
    assert capsys.readouterr().out.strip() == config.VERSION


def test_eval_exact(capsys):
    assert main_entry(["-e", "2+3×4"]) == 0
    assert capsys.readouterr().out.strip() == "14"


def test_eval_symbolic(capsys):
    assert main_entry(["-e", "√8", "--digits", "5"]) == 0
    assert capsys.readouterr().out.strip() == "2√2 ≈ 2.82842…"


def test_eval_degrees(capsys):
    assert main_entry(["--degrees", "-e", "sin(30)"]) == 0
    assert capsys.readouterr().out.strip() == "0.5"


def test_eval_huge_integer(capsys):
    assert main_entry(["-e", "10^5000"]) == 0
    assert capsys.readouterr().out.strip() == "1" + "0" * 5000


def test_eval_error(capsys):
    assert main_entry(["-e", "1÷0"]) == 1
    assert capsys.readouterr().out.startswith("Error:")


def test_eval_empty(capsys):
    assert main_entry(["-e", "  "]) == 1
    assert "Empty input" in capsys.readouterr().out


def test_timeout_override():
    main_entry(["-t", "3.5", "-v"])
    assert config.WORKER_TIMEOUT == 3.5
    assert config.WORKER_LONG_TIMEOUT == 3.5


class TestREPL:
    def test_continues_from_previous_result(self, capsys):
        repl = REPL()
        repl.process_input("2+3")
        repl.process_input("×2")
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["5", "10"]
        assert len(repl.ctx.store) == 2

    def test_leading_minus_starts_fresh(self, capsys):
        repl = REPL()
        repl.process_input("2+3")
        repl.process_input("-1")
        assert capsys.readouterr().out.splitlines() == ["5", "-1"]
        assert repl.ctx.last_short_rep == "-1"

    def test_mode_commands(self, capsys):
        repl = REPL()
        repl.process_input("deg")
        assert repl.ctx.degree_mode
        repl.process_input("cos(60)")
        repl.process_input("rad")
        assert not repl.ctx.degree_mode
        out = capsys.readouterr().out.splitlines()
        assert out == ["Degree mode", "0.5", "Radian mode"]

    def test_error_keeps_previous_result(self, capsys):
        repl = REPL(ReplContext(digits=4))
        repl.process_input("1÷3")
        repl.process_input("÷0")
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "1/3 ≈ 0.3333…"
        assert out[1].startswith("Error:")
        assert repl.ctx.last_short_rep == "0.33333333…"

    def test_quit(self):
        repl = REPL()
        repl.process_input("quit")
        assert not repl.running

    def test_eof_stops_loop(self, monkeypatch):
        def raise_eof(prompt):
            raise EOFError

        monkeypatch.setattr("builtins.input", raise_eof)
        repl = REPL()
        repl.loop_once()
        assert not repl.running

    def test_help(self, capsys):
        REPL().process_input("help")
        assert "Commands:" in capsys.readouterr().out
