import threading
import unittest

import pytest
import sympy as sp

from exactcalc_pkg.reals.constructive import CR
from exactcalc_pkg.reals.constructive import abort_on
from exactcalc_pkg.reals.constructive import decimal_string
from exactcalc_pkg.types import AbortedError
from exactcalc_pkg.types import DomainError
from exactcalc_pkg.types import PrecisionOverflowError

PREC = 200  # bits checked against sympy


def _as_rational(x: CR, bits: int = PREC) -> sp.Rational:
    return sp.Rational(x.approx_get(-bits), 2**bits)


def _close(x: CR, expected, bits: int = PREC) -> bool:
    reference = sp.Rational(str(sp.N(expected, 90)))
    return abs(_as_rational(x, bits) - reference) < sp.Rational(1, 2 ** (bits - 4))


@pytest.mark.parametrize(
    "value, expected",
    [
        (CR.PI, sp.pi),
        (CR.ONE.exp(), sp.E),
        (CR.LN2, sp.log(2)),
        (CR.value_of(2).sqrt(), sp.sqrt(2)),
        (CR.value_of(10).ln(), sp.log(10)),
        (CR.value_of(1).atan(), sp.pi / 4),
        (CR.value_of(3).sin(), sp.sin(3)),
        (CR.value_of(3).cos(), sp.cos(3)),
        (CR.value_of(1).divide(CR.value_of(2)).asin(), sp.pi / 6),
        (CR.value_of(7).ln(), sp.log(7)),
        (CR.value_of(-2).exp(), sp.exp(-2)),
    ],
)
def test_against_sympy(value, expected):
    assert _close(value, expected)


class TestCRArithmetic(unittest.TestCase):
    def test_integer_operations(self):
        x = CR.value_of(6).multiply(CR.value_of(7)).subtract(CR.value_of(2))
        self.assertEqual(x.big_integer_value(), 40)
        self.assertEqual(CR.value_of(12).shift_right(2).big_integer_value(), 3)

    def test_divide(self):
        third = CR.ONE.divide(CR.value_of(3))
        self.assertTrue(third.to_string(10).startswith("0.33333333"))

    def test_negative_string(self):
        self.assertTrue(CR.value_of(-5).divide(CR.value_of(4)).to_string(2).startswith("-1.2"))

    def test_from_string(self):
        x = CR.from_string("-12.75")
        self.assertEqual(x.compare_to(CR.value_of(-12), -50), -1)
        self.assertEqual(x.multiply(CR.value_of(4)).big_integer_value(), -51)

    def test_compare_with_tolerance(self):
        self.assertEqual(CR.PI.compare_to(CR.value_of(3)), 1)
        self.assertEqual(CR.value_of(3).compare_to(CR.PI), -1)
        self.assertEqual(CR.PI.compare_to(CR.PI.add(CR.ONE.shift_right(80)), -40), 0)

    def test_signum(self):
        self.assertEqual(CR.PI.negate().signum(), -1)
        self.assertEqual(CR.value_of(0).signum(-20), 0)

    def test_float_conversion(self):
        self.assertAlmostEqual(float(CR.PI), 3.141592653589793)
        self.assertEqual(float(CR.value_of(0)), 0.0)

    def test_value_of_float(self):
        self.assertEqual(CR.value_of(0.5).multiply(CR.value_of(4)).big_integer_value(), 2)

    def test_ln_of_negative(self):
        with self.assertRaises(DomainError):
            CR.value_of(-1).ln()

    def test_sqrt_of_negative(self):
        with self.assertRaises(DomainError):
            CR.value_of(-4).sqrt().approx_get(-10)

    def test_precision_overflow(self):
        with self.assertRaises(PrecisionOverflowError):
            CR.PI.approx_get(-(2**30))


class TestAbort(unittest.TestCase):
    def test_equal_values_abort_instead_of_looping(self):
        event = threading.Event()
        event.set()
        a = CR.value_of(2).sqrt()
        b = CR.value_of(2).sqrt()
        with abort_on(event):
            with self.assertRaises(AbortedError):
                a.compare_to(b)

    def test_abort_scope_is_restored(self):
        event = threading.Event()
        event.set()
        with abort_on(event):
            pass
        self.assertEqual(CR.PI.compare_to(CR.value_of(3)), 1)

    def test_approximation_count_increases(self):
        before = CR.approximation_count()
        CR.value_of(5).sqrt().approx_get(-100)
        self.assertGreater(CR.approximation_count(), before)


def _repeated(block: int, width: int, times: int) -> int:
    n = 0
    for _ in range(times):
        n = n * 10**width + block
    return n


@pytest.mark.parametrize(
    "n, expected",
    [
        (0, "0"),
        (-42, "-42"),
        (10**5000, "1" + "0" * 5000),
        (10**5000 + 1, "1" + "0" * 4999 + "1"),
        (-(10**6000) - 7, "-1" + "0" * 5999 + "7"),
        (_repeated(123456789, 9, 600), "123456789" * 600),
    ],
    ids=["zero", "neg42", "1e5000", "1e5000p1", "neg1e6000m7", "repeated"],
)
def test_decimal_string_ignores_int_str_limit(n, expected):
    assert decimal_string(n) == expected


def test_to_string_of_huge_value():
    assert CR.value_of(10**5000).to_string(2) == "1" + "0" * 5000 + ".00"


if __name__ == "__main__":
    unittest.main()
