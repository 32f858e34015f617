import unittest

import pytest

from exactcalc_pkg.reals import unified_real as ur
from exactcalc_pkg.reals.bounded_rational import BoundedRational
from exactcalc_pkg.reals.constructive import CR
from exactcalc_pkg.reals.unified_real import UnifiedReal
from exactcalc_pkg.types import DomainError
from exactcalc_pkg.types import ZeroDivisionException

TEST_PREC = -100  # bits to the right of the binary point

RADIANS_PER_DEGREE = CR.PI.divide(CR.value_of(180))
UR_15 = UnifiedReal(15)
UR_30 = UnifiedReal(30)
UR_MINUS30 = UnifiedReal(-30)


def check_eq(x: UnifiedReal, y: CR) -> bool:
    return x.cr_value().compare_to(y, TEST_PREC) == 0


def _tan(x: CR) -> CR:
    return x.sin().divide(x.cos())


class TestUnifiedRealBasics(unittest.TestCase):
    def test_strings(self):
        b = UnifiedReal(BoundedRational(4, -6))
        self.assertEqual(b.to_nice_string(), "-2/3")
        self.assertEqual(b.to_string_truncated(1), "-0.6")
        self.assertEqual(UR_15.to_string_truncated(0), "15.")
        self.assertEqual(ur.ZERO.to_string_truncated(2), "0.00")
        self.assertEqual(ur.PI.to_string_truncated(5), "3.14159")
        self.assertEqual(ur.PI.negate().to_string_truncated(3), "-3.141")

    def test_nice_strings(self):
        self.assertEqual(ur.PI.multiply(ur.TWO).to_nice_string(), "2π")
        self.assertEqual(UnifiedReal(BoundedRational(3, 4)).sqrt().to_nice_string(), "(1/2)√3")
        self.assertEqual(UnifiedReal(8).ln().to_nice_string(), "3ln(2)")
        self.assertEqual(ur.E.to_nice_string(), "e")

    def test_signum_and_zero(self):
        self.assertEqual(ur.ZERO.signum(), 0)
        self.assertTrue(ur.ZERO.definitely_zero())
        self.assertFalse(ur.ZERO.definitely_non_zero())
        self.assertFalse(ur.PI.definitely_zero())
        self.assertTrue(ur.PI.definitely_non_zero())
        self.assertEqual(ur.ONE.negate().signum(), -1)
        self.assertEqual(ur.E.signum(), 1)

    def test_big_integer_value(self):
        self.assertEqual(UnifiedReal(400).big_integer_value(), 400)
        self.assertIsNone(ur.HALF.big_integer_value())
        self.assertEqual(UnifiedReal(BoundedRational(15, -5)).big_integer_value(), -3)

    def test_digits_required(self):
        self.assertEqual(ur.ZERO.digits_required(), 0)
        self.assertEqual(ur.HALF.digits_required(), 1)
        self.assertEqual(ur.ONE.divide(UnifiedReal(-2)).digits_required(), 1)

    def test_factorial(self):
        self.assertTrue(ur.ZERO.fact().definitely_equals(ur.ONE))
        self.assertTrue(ur.TWO.fact().definitely_equals(ur.TWO))
        self.assertTrue(UR_15.fact().definitely_equals(UnifiedReal(1307674368000)))

    def test_factorial_domain(self):
        with self.assertRaises(DomainError):
            ur.MINUS_ONE.fact()
        with self.assertRaises(DomainError):
            UnifiedReal(BoundedRational(5, 2)).fact()
        with self.assertRaises(DomainError):
            UnifiedReal(2**21).fact()

    def test_exactly_displayable(self):
        self.assertTrue(ur.ONE.exactly_displayable())
        self.assertTrue(ur.PI.exactly_displayable())
        self.assertTrue(ur.E.divide(ur.E).exactly_displayable())
        self.assertFalse(ur.E.divide(ur.PI).exactly_displayable())

    def test_equality_operator_is_identity(self):
        x = UnifiedReal(2)
        self.assertIn(x, [ur.ONE, x])
        self.assertNotIn(UnifiedReal(2), [x])
        self.assertEqual({x: "two"}[x], "two")
        self.assertEqual(len({x, x, ur.TWO}), 2)

    def test_huge_factorial_prints_in_full(self):
        digits = UnifiedReal(2000).fact().to_nice_string()
        self.assertEqual(len(digits), 5736)
        self.assertTrue(digits.startswith("331627509245063324"))
        self.assertTrue(digits.endswith("0" * 499))
        self.assertFalse(digits.endswith("0" * 500))


class TestUnifiedRealSymbolic(unittest.TestCase):
    def test_ln_of_nine_root_three(self):
        r = UnifiedReal(9).multiply(UnifiedReal(3).sqrt()).ln()
        self.assertTrue(check_eq(r, CR.value_of(9).multiply(CR.value_of(3).sqrt()).ln()))
        self.assertTrue(r.exactly_displayable())
        self.assertTrue(check_eq(r.exp(), CR.value_of(9).multiply(CR.value_of(3).sqrt())))
        self.assertTrue(r.exp().exactly_displayable())

    def test_undecidable_equality(self):
        x = ur.E.divide(ur.PI)
        self.assertFalse(x.definitely_equals(ur.E.divide(ur.PI)))

    def test_square_roots(self):
        self.assertTrue(
            UnifiedReal(32).sqrt().definitely_equals(UnifiedReal(2).sqrt().multiply(UnifiedReal(4)))
        )
        self.assertTrue(UnifiedReal(10).sqrt().multiply(ur.TEN.sqrt()).definitely_equals(ur.TEN))
        self.assertTrue(
            UnifiedReal(BoundedRational(4, 9)).sqrt().definitely_equals(ur.TWO.divide(UnifiedReal(3)))
        )

    def test_logs(self):
        self.assertTrue(UnifiedReal(32).ln().divide(ur.TWO.ln()).definitely_equals(UnifiedReal(5)))
        self.assertTrue(ur.ONE.ln().definitely_zero())

    def test_sqrt_rationality(self):
        for i in range(11):
            r = UnifiedReal(i)
            root = r.sqrt()
            if i in (0, 1, 4, 9):
                self.assertTrue(root.definitely_rational(), i)
            else:
                self.assertTrue(root.definitely_irrational(), i)
            self.assertTrue(root.definitely_algebraic())
            self.assertTrue(root.multiply(root).definitely_equals(r), i)

    def test_trig_special_values(self):
        self.assertTrue(ur.PI.sin().definitely_zero())
        self.assertTrue(ur.PI.cos().definitely_equals(ur.MINUS_ONE))
        self.assertTrue(ur.PI_OVER_6.sin().definitely_equals(ur.HALF))
        self.assertTrue(ur.PI_OVER_4.tan().definitely_equals(ur.ONE))
        self.assertTrue(ur.HALF.asin().definitely_equals(ur.PI_OVER_6))
        self.assertTrue(ur.ONE.atan().definitely_equals(ur.PI_OVER_4))

    def test_degree_conversion(self):
        sin30 = UR_30.multiply(ur.RADIANS_PER_DEGREE).sin()
        self.assertTrue(sin30.definitely_equals(ur.HALF))
        asin_half = ur.HALF.asin().divide(ur.RADIANS_PER_DEGREE)
        self.assertTrue(asin_half.definitely_equals(UR_30))

    def test_tangent_undefined(self):
        with self.assertRaises(DomainError):
            ur.PI_OVER_2.tan()
        with self.assertRaises(DomainError):
            UnifiedReal(270).multiply(ur.RADIANS_PER_DEGREE).tan()

    def test_arcsin_out_of_range(self):
        with self.assertRaises(DomainError):
            ur.TWO.asin()

    def test_pow(self):
        self.assertTrue(ur.TWO.pow(UnifiedReal(10)).definitely_equals(UnifiedReal(1024)))
        self.assertTrue(ur.TWO.pow(ur.HALF).definitely_equals(UnifiedReal(2).sqrt()))
        self.assertTrue(ur.TWO.pow(-2).definitely_equals(UnifiedReal(BoundedRational(1, 4))))
        self.assertTrue(ur.MINUS_TWO.pow(UnifiedReal(3)).definitely_equals(UnifiedReal(-8)))
        self.assertTrue(ur.E.pow(ur.ONE).definitely_equals(ur.E))

    def test_pow_domain(self):
        with self.assertRaises(DomainError):
            ur.MINUS_TWO.pow(UnifiedReal(BoundedRational(1, 3)))

    def test_errors(self):
        with self.assertRaises(ZeroDivisionException):
            ur.ONE.divide(ur.ZERO)
        with self.assertRaises(ZeroDivisionException):
            ur.ZERO.pow(UnifiedReal(-1))
        with self.assertRaises(ZeroDivisionException):
            ur.ZERO.pow(ur.MINUS_HALF)
        with self.assertRaises(ZeroDivisionException):
            ur.ZERO.pow(ur.PI.negate())
        with self.assertRaises(DomainError):
            ur.ZERO.ln()
        with self.assertRaises(DomainError):
            ur.MINUS_ONE.ln()
        with self.assertRaises(DomainError):
            UnifiedReal(-4).sqrt()

    def test_comparisons(self):
        self.assertEqual(ur.PI.compare_to(UnifiedReal(3)), 1)
        self.assertEqual(ur.E.compare_to(ur.PI), -1)
        self.assertTrue(ur.PI.definitely_not_equals(UnifiedReal(3)))
        self.assertFalse(ur.PI.definitely_not_equals(ur.PI))

    def test_independent_factors_differ_without_approximation(self):
        pi = ur.PI
        root2 = UnifiedReal(2).sqrt()
        before = CR.approximation_count()
        self.assertTrue(pi.definitely_not_equals(root2))
        self.assertTrue(root2.definitely_not_equals(pi))
        self.assertEqual(CR.approximation_count(), before)
        self.assertTrue(ur.E.pow(UnifiedReal(3)).ln().approx_equals(UnifiedReal(3), -100))


_RATIONAL_SAMPLES = [
    ur.HALF,
    ur.MINUS_HALF,
    ur.ONE,
    ur.MINUS_ONE,
    UnifiedReal(100),
    UnifiedReal(BoundedRational(4, 9)),
    UnifiedReal(BoundedRational(-4, 9)),
    UnifiedReal(BoundedRational(4, 13)),
    UnifiedReal(36),
]
_DEGREE_SAMPLES = [UnifiedReal(d) for d in range(-360, 361, 45)]
_PI_SAMPLES = [ur.PI.multiply(UnifiedReal(BoundedRational(k, 8))) for k in range(-8, 9, 3)]


@pytest.mark.parametrize("x", _RATIONAL_SAMPLES + _DEGREE_SAMPLES + _PI_SAMPLES)
def test_operations_match_constructive_reals(x):
    x_cr = x.cr_value()
    assert check_eq(x.add(ur.ONE), x_cr.add(CR.ONE))
    assert check_eq(x.subtract(UR_MINUS30), x_cr.subtract(CR.value_of(-30)))
    assert check_eq(x.multiply(UR_15), x_cr.multiply(CR.value_of(15)))
    assert check_eq(x.divide(UR_15), x_cr.divide(CR.value_of(15)))
    assert check_eq(x.sin(), x_cr.sin())
    assert check_eq(x.cos(), x_cr.cos())
    if x.cos().cr_value().signum(-50) != 0:
        assert check_eq(x.tan(), _tan(x_cr))
    assert check_eq(x.multiply(ur.RADIANS_PER_DEGREE).sin(), x_cr.multiply(RADIANS_PER_DEGREE).sin())
    if x.compare_to(UR_30) <= 0 and x.compare_to(UR_MINUS30) >= 0:
        assert check_eq(x.exp(), x_cr.exp())
        assert check_eq(UR_15.pow(x), CR.value_of(15).ln().multiply(x_cr).exp())
    if x.compare_to(ur.ONE) < 0 and x.compare_to(ur.MINUS_ONE) > 0:
        assert check_eq(x.asin(), x_cr.asin())
        assert check_eq(x.acos(), x_cr.acos())
    assert check_eq(x.atan(), x_cr.atan())
    if x.signum() > 0:
        assert check_eq(x.ln(), x_cr.ln())
        assert check_eq(x.sqrt(), x_cr.sqrt())


if __name__ == "__main__":
    unittest.main()
