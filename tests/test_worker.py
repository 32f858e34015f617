import threading
import time

import pytest

from exactcalc_pkg.expression.expr import CalculatorExpr
from exactcalc_pkg.expression.resolver import ExprStore
from exactcalc_pkg.reals.constructive import check_abort
from exactcalc_pkg.reals.unified_real import UnifiedReal
from exactcalc_pkg.worker import eval_user_expression
from exactcalc_pkg.worker import evaluate_safely


def _expr(text: str) -> CalculatorExpr:
    expr = CalculatorExpr()
    assert expr.add_string(text) == ""
    return expr


def test_success_fields():
    out = evaluate_safely(_expr("1÷3"), ExprStore(), digits=5)
    assert out["ok"] is True
    assert out["result"].definitely_equals(UnifiedReal(1).divide(UnifiedReal(3)))
    assert out["exact"] == "1/3"
    assert out["approx"] == "0.33333…"
    assert out["display"] == "1/3 ≈ 0.33333…"
    assert out["short_rep"] == "0.33333333…"


def test_unnamed_result_has_no_exact_form():
    out = evaluate_safely(_expr("e÷π"), ExprStore(), digits=3)
    assert out["ok"] is True
    assert out["exact"] is None
    assert out["approx"] == "0.865…"


@pytest.mark.parametrize(
    "text, code",
    [
        ("1÷0", "ZERO_DIVISION"),
        ("ln(0)", "DOMAIN_ERROR"),
        ("(-1)!", "DOMAIN_ERROR"),
        ("2)", "SYNTAX_ERROR"),
        ("sin(", "SYNTAX_ERROR"),
        ("0^-1", "ZERO_DIVISION"),
    ],
)
def test_error_codes(text, code):
    out = evaluate_safely(_expr(text), ExprStore())
    assert out["ok"] is False
    assert out["error_code"] == code
    assert out["error"]


def test_unknown_reference():
    out = evaluate_safely(CalculatorExpr.abbreviate(42, "1"), ExprStore())
    assert out["error_code"] == "UNKNOWN_EXPRESSION"


def test_timeout_aborts_computation(monkeypatch):
    aborted = threading.Event()

    def spin(self, degree_mode, resolver):
        try:
            while True:
                check_abort()
                time.sleep(0.005)
        finally:
            aborted.set()

    monkeypatch.setattr(CalculatorExpr, "eval", spin)
    out = evaluate_safely(_expr("1"), ExprStore(), timeout=0.05)
    assert out["ok"] is False
    assert out["error_code"] == "TIMEOUT"
    assert aborted.wait(5)


def test_timeout_covers_approximation(monkeypatch):
    aborted = threading.Event()

    def spin(self, n):
        try:
            while True:
                check_abort()
                time.sleep(0.005)
        finally:
            aborted.set()

    monkeypatch.setattr(UnifiedReal, "to_string_truncated", spin)
    started = time.monotonic()
    out = evaluate_safely(_expr("1÷3"), ExprStore(), timeout=0.05)
    assert time.monotonic() - started < 2
    assert out["error_code"] == "TIMEOUT"
    assert aborted.wait(5)


def test_oversized_value_is_reported(monkeypatch):
    def explode(self, degree_mode, resolver):
        raise ValueError("Exceeds the limit for integer string conversion")

    monkeypatch.setattr(CalculatorExpr, "eval", explode)
    out = evaluate_safely(_expr("1"), ExprStore())
    assert out["ok"] is False
    assert out["error_code"] == "TOO_COMPLEX"


def test_caller_edits_do_not_reach_worker():
    expr = _expr("2+3")
    out = evaluate_safely(expr, ExprStore())
    expr.add_string("×10")
    assert out["result"].definitely_equals(UnifiedReal(5))


class TestEvalUserExpression:
    def test_ok(self):
        res = eval_user_expression("2^10")
        assert res.ok
        assert res.approx == "1024"
        assert res.error is None

    def test_degrees(self):
        res = eval_user_expression("cos(60)", degree_mode=True)
        assert res.approx == "0.5"

    def test_leftover_input(self):
        res = eval_user_expression("2+x")
        assert not res.ok
        assert res.error_code == "SYNTAX_ERROR"
        assert "x" in res.error

    def test_empty(self):
        res = eval_user_expression("   ")
        assert res.error_code == "SYNTAX_ERROR"

    def test_huge_factorial(self):
        res = eval_user_expression("2000!")
        assert res.ok
        assert len(res.approx) == 5736
        assert res.display == res.approx
        assert res.exact == res.approx

    def test_huge_power_of_ten(self):
        res = eval_user_expression("10^5000")
        assert res.ok
        assert res.approx == "1" + "0" * 5000

    def test_shared_store(self):
        store = ExprStore()
        index = store.add_expr(_expr("6×7"))
        outer = CalculatorExpr.abbreviate(index, "42")
        outer.add_string("+1")
        out = evaluate_safely(outer, store)
        assert out["approx"] == "43"
        assert store.get_result(index).definitely_equals(UnifiedReal(42))
