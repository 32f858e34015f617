"""Background evaluation with timeouts and cooperative cancellation.

Constructive real evaluation can run for an unbounded time (comparing two
equal irrational values never terminates).  Every evaluation therefore runs on
a shared thread pool under its own abort event; when the caller stops waiting
the event is set and the computation raises ``AbortedError`` at its next
check point.  Result strings are produced inside the same pool task, since
approximating a value can cost far more than building it.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any
from typing import Optional

from . import config
from .expression.expr import CalculatorExpr
from .expression.resolver import ExprResolver
from .expression.resolver import ExprStore
from .logging_config import get_logger
from .reals.constructive import abort_on
from .types import CalculatorError
from .types import EvalResult
from .utils.formatting import DisplayContext
from .utils.formatting import approximate_decimal
from .utils.formatting import format_result
from .utils.formatting import short_representation

logger = get_logger("worker")

_pool: Optional[ThreadPoolExecutor] = None
_pool_lock = threading.Lock()


def _get_pool() -> ThreadPoolExecutor:
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = ThreadPoolExecutor(
                max_workers=max(1, config.WORKER_POOL_SIZE),
                thread_name_prefix="exactcalc-eval",
            )
        return _pool


def _evaluate(
    expr: CalculatorExpr,
    resolver: ExprResolver,
    degree_mode: bool,
    digits: Optional[int],
    abort: threading.Event,
) -> dict[str, Any]:
    with abort_on(abort):
        value = expr.eval(degree_mode, resolver)
        exact = value.to_nice_string() if value.exactly_displayable() else None
        return {
            "ok": True,
            "result": value,
            "exact": exact,
            "approx": approximate_decimal(value, digits),
            "display": format_result(value, digits),
            "short_rep": short_representation(value),
        }


def _error(message: str, code: str) -> dict[str, Any]:
    return {"ok": False, "error": message, "error_code": code}


def evaluate_safely(
    expr: CalculatorExpr,
    resolver: ExprResolver,
    degree_mode: bool = False,
    timeout: Optional[float] = None,
    long_timeout: bool = False,
    digits: Optional[int] = None,
) -> dict[str, Any]:
    """Evaluate and format ``expr`` on the worker pool.

    Args:
        expr: Expression to evaluate; it must not be modified while this runs
        resolver: Source of referenced expressions
        degree_mode: Interpret trig arguments and results in degrees
        timeout: Seconds to wait; defaults to WORKER_TIMEOUT or WORKER_LONG_TIMEOUT
        long_timeout: Use the long default timeout (explicit "=" evaluation)
        digits: Digits after the point in the approximate result

    Returns:
        Dict with ``ok`` and either ``result``/``exact``/``approx``/``display``/
        ``short_rep`` or ``error``/``error_code``.
    """
    if timeout is None:
        timeout = config.WORKER_LONG_TIMEOUT if long_timeout else config.WORKER_TIMEOUT
    abort = threading.Event()
    # snapshot so later edits by the caller cannot race with evaluation
    snapshot = expr.clone()
    future = _get_pool().submit(_evaluate, snapshot, resolver, degree_mode, digits, abort)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        abort.set()
        logger.info(f"Evaluation timed out after {timeout}s; abort requested")
        return _error(f"Evaluation timed out after {timeout} seconds", "TIMEOUT")
    except CalculatorError as e:
        logger.debug(f"Evaluation failed: {e.code}: {e}")
        return _error(str(e) or type(e).__name__, e.code)
    except ZeroDivisionError as e:
        return _error(str(e) or "Division by zero", "ZERO_DIVISION")
    except RecursionError:
        logger.warning("Evaluation exceeded the recursion limit")
        return _error("Expression too complex", "TOO_COMPLEX")
    except (ValueError, OverflowError, MemoryError) as e:
        logger.warning(f"Evaluation failed on an oversized value: {e}")
        return _error(f"Result too large to compute: {e}", "TOO_COMPLEX")


def eval_user_expression(
    text: str,
    resolver: Optional[ExprResolver] = None,
    degree_mode: bool = False,
    ctx: Optional[DisplayContext] = None,
    timeout: Optional[float] = None,
    digits: Optional[int] = None,
) -> EvalResult:
    """Type ``text`` into a new expression and evaluate it."""
    expr = CalculatorExpr()
    leftover = expr.add_string(text, ctx)
    if leftover:
        return EvalResult(
            ok=False,
            error=f"Cannot interpret input starting at: {leftover!r}",
            error_code="SYNTAX_ERROR",
        )
    if expr.is_empty():
        return EvalResult(ok=False, error="Empty expression", error_code="SYNTAX_ERROR")
    if resolver is None:
        resolver = ExprStore()
    data = evaluate_safely(
        expr, resolver, degree_mode=degree_mode, timeout=timeout, long_timeout=True, digits=digits
    )
    return EvalResult.from_dict(data)
