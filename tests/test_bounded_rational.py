import sys
import unittest

import pytest

from exactcalc_pkg.reals import bounded_rational as br
from exactcalc_pkg.reals.bounded_rational import BoundedRational
from exactcalc_pkg.types import DomainError
from exactcalc_pkg.types import ZeroDivisionException


class TestBoundedRationalArithmetic(unittest.TestCase):
    def test_add_reduces(self):
        result = br.add(BoundedRational(1, 3), BoundedRational(1, 6))
        self.assertEqual(result, br.HALF)
        self.assertEqual(result.numerator, 1)
        self.assertEqual(result.denominator, 2)

    def test_negative_denominator_is_normalized(self):
        r = BoundedRational(4, -6)
        self.assertEqual(r.to_nice_string(), "-2/3")
        self.assertEqual(r.signum(), -1)

    def test_none_propagates(self):
        self.assertIsNone(br.add(None, br.ONE))
        self.assertIsNone(br.multiply(br.TWO, None))
        self.assertIsNone(br.sqrt(None))
        self.assertIsNone(br.pow(br.TWO, None))

    def test_divide(self):
        self.assertEqual(br.divide(BoundedRational(3), BoundedRational(4)), BoundedRational(3, 4))

    def test_inverse_of_zero(self):
        with self.assertRaises(ZeroDivisionException):
            br.inverse(br.ZERO)
        # also catchable as the builtin
        with self.assertRaises(ZeroDivisionError):
            br.divide(br.ONE, br.ZERO)

    def test_zero_denominator(self):
        with self.assertRaises(ZeroDivisionException):
            BoundedRational(1, 0)

    def test_too_big_returns_none(self):
        tiny = BoundedRational(1, 3**6000)
        self.assertFalse(tiny.too_big())
        self.assertIsNone(br.multiply(tiny, tiny))

    def test_integers_are_never_too_big(self):
        big = BoundedRational(2**9000)
        self.assertIsNotNone(br.multiply(big, big))


class TestBoundedRationalQueries(unittest.TestCase):
    def test_sqrt_exact(self):
        self.assertEqual(br.sqrt(BoundedRational(9, 4)), BoundedRational(3, 2))
        self.assertIsNone(br.sqrt(br.TWO))
        self.assertEqual(br.sqrt(br.ZERO), br.ZERO)

    def test_sqrt_negative(self):
        with self.assertRaises(DomainError):
            br.sqrt(br.MINUS_ONE)

    def test_digits_required(self):
        self.assertEqual(br.digits_required(br.ZERO), 0)
        self.assertEqual(br.digits_required(BoundedRational(17)), 0)
        self.assertEqual(br.digits_required(BoundedRational(1, 8)), 3)
        self.assertEqual(br.digits_required(BoundedRational(3, 20)), 2)
        self.assertEqual(br.digits_required(br.THIRD), sys.maxsize)
        self.assertEqual(br.digits_required(None), sys.maxsize)

    def test_to_string_truncated(self):
        self.assertEqual(BoundedRational(-1, 3).to_string_truncated(3), "-0.333")
        self.assertEqual(BoundedRational(2, 3).to_string_truncated(2), "0.66")
        self.assertEqual(BoundedRational(15).to_string_truncated(0), "15.")
        self.assertEqual(br.ZERO.to_string_truncated(2), "0.00")

    def test_pow(self):
        self.assertEqual(BoundedRational(2, 3).pow(3), BoundedRational(8, 27))
        self.assertEqual(BoundedRational(2, 3).pow(-2), BoundedRational(9, 4))
        self.assertEqual(br.MINUS_ONE.pow(10**30 + 1), br.MINUS_ONE)
        self.assertIsNone(BoundedRational(3, 2).pow(2**1001))

    def test_zero_to_negative_power(self):
        self.assertEqual(br.ZERO.pow(3), br.ZERO)
        with self.assertRaises(ZeroDivisionException):
            br.ZERO.pow(-1)
        with self.assertRaises(ZeroDivisionException):
            br.pow(br.ZERO, br.MINUS_TWO)

    def test_strings_beyond_int_str_limit(self):
        big = BoundedRational(10**5000)
        self.assertEqual(big.to_nice_string(), "1" + "0" * 5000)
        self.assertEqual(big.to_string_truncated(2), "1" + "0" * 5000 + ".00")
        self.assertEqual(str(BoundedRational(1, 10**4999 * 3)), "1/3" + "0" * 4999)

    def test_whole_number_bits(self):
        self.assertEqual(br.ZERO.whole_number_bits(), br.NO_WHOLE_BITS)
        self.assertEqual(BoundedRational(1024).whole_number_bits(), 11)

    def test_int_value(self):
        self.assertEqual(BoundedRational(-15, 5).int_value(), -3)
        with self.assertRaises(DomainError):
            br.HALF.int_value()
        self.assertIsNone(br.as_big_integer(br.HALF))


@pytest.mark.parametrize(
    "value, expected",
    [(0.5, BoundedRational(1, 2)), (-0.25, BoundedRational(-1, 4)), (3.0, BoundedRational(3))],
)
def test_from_float_is_exact(value, expected):
    assert BoundedRational.from_float(value) == expected


def test_from_float_rejects_nan():
    with pytest.raises(DomainError):
        BoundedRational.from_float(float("nan"))


def test_cr_value_matches():
    third = BoundedRational(1, 3).cr_value()
    assert third.to_string(5).startswith("0.3333")


if __name__ == "__main__":
    unittest.main()
