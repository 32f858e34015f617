from __future__ import annotations

import argparse
from typing import Optional

from ..config import VERSION
from ..expression.expr import CalculatorExpr
from ..expression.keys import KeyId
from ..expression.keys import is_binary
from ..expression.keys import key_for_char
from ..logging_config import get_logger
from ..worker import eval_user_expression
from ..worker import evaluate_safely
from .context import ReplContext

logger = get_logger("cli.app")

HELP_TEXT = """\
Type an expression and press Enter, for example:
  2+3×4        1/3+1/6      √2×√2       sin(30)
  100+10%      5!           2^0.5       ln(e^3)
A line starting with +, ×, ÷ or ^ continues from the previous result.

Commands:
  deg      trigonometric functions use degrees
  rad      trigonometric functions use radians (default)
  help     show this text
  quit     leave (also: exit)
"""


def print_help_text() -> None:
    print(HELP_TEXT)


class REPL:
    """Read-eval-print loop over calculator expressions."""

    def __init__(self, context: Optional[ReplContext] = None):
        self.ctx = context if context else ReplContext()
        self.running = True

    def start(self) -> None:
        print(f"exactcalc v{VERSION}. Type 'help' for commands, 'quit' to exit.")
        while self.running:
            self.loop_once()

    def loop_once(self) -> None:
        prompt = "deg> " if self.ctx.degree_mode else ">>> "
        try:
            raw = input(prompt)
        except EOFError:
            self.running = False
            return
        except KeyboardInterrupt:
            print()
            self.running = False
            return
        self.process_input(raw)

    def process_input(self, text: str) -> None:
        """Handle one line: a command or an expression."""
        text = text.strip()
        if not text or text.startswith("#"):
            return
        lowered = text.lower()
        if lowered in ("quit", "exit"):
            self.running = False
            return
        if lowered in ("help", "?"):
            print_help_text()
            return
        if lowered == "deg":
            self.ctx.degree_mode = True
            print("Degree mode")
            return
        if lowered == "rad":
            self.ctx.degree_mode = False
            print("Radian mode")
            return
        self._evaluate_line(text)

    def _continues_previous(self, text: str) -> bool:
        if self.ctx.last_index is None:
            return False
        key = key_for_char(text[0], self.ctx.display)
        return key is not None and is_binary(key) and key is not KeyId.OP_SUB

    def _evaluate_line(self, text: str) -> None:
        if self._continues_previous(text):
            expr = CalculatorExpr.abbreviate(self.ctx.last_index, self.ctx.last_short_rep)
        else:
            expr = CalculatorExpr()
        leftover = expr.add_string(text, self.ctx.display)
        if leftover:
            print(f"Error: cannot interpret input starting at '{leftover}'")
            return
        store = self.ctx.store
        out = evaluate_safely(
            expr,
            store,
            degree_mode=self.ctx.degree_mode,
            long_timeout=True,
            digits=self.ctx.digits,
        )
        if not out.get("ok"):
            print(f"Error: {out.get('error')}")
            return
        index = store.add_expr(expr, self.ctx.degree_mode)
        store.put_result_if_absent(index, out["result"])
        self.ctx.last_index = index
        self.ctx.last_short_rep = out["short_rep"]
        print(out["display"])


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the exactcalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="exactcalc")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--degrees",
        action="store_true",
        help="Interpret trigonometric arguments in degrees",
    )
    parser.add_argument(
        "--digits", type=int, help="Digits after the decimal point in results"
    )
    parser.add_argument(
        "-t", "--timeout", type=float, help="Override evaluation timeout (seconds)"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    args = parser.parse_args(argv)

    from .. import config as _config
    from ..logging_config import setup_logging

    setup_logging(level=args.log_level or _config.LOG_LEVEL, log_file=args.log_file)

    # Apply CLI configuration overrides
    if args.timeout and args.timeout > 0:
        _config.WORKER_TIMEOUT = float(args.timeout)
        _config.WORKER_LONG_TIMEOUT = float(args.timeout)
    if args.digits is not None and args.digits >= 0:
        _config.OUTPUT_DIGITS = int(args.digits)

    if args.version:
        print(VERSION)
        return 0
    if args.eval_expr is not None:
        expr = args.eval_expr.strip()
        if not expr:
            print("Error: Empty input. Please enter an expression.")
            return 1
        res = eval_user_expression(expr, degree_mode=args.degrees)
        if not res.ok:
            print(f"Error: {res.error}")
            return 1
        print(res.display)
        return 0

    logger.debug("Starting interactive session")
    REPL(ReplContext(degree_mode=args.degrees)).start()
    return 0
