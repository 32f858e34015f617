"""Real numbers as an exact rational times a (preferably named) constructive real.

A :class:`UnifiedReal` is ``rat * cr`` where ``rat`` is a
:class:`BoundedRational` and ``cr`` is a constructive real.  Whenever possible
``cr`` is one of a small set of *named* constants (1, pi, e, a few square
roots and natural logarithms).  Two values sharing a named factor combine and
compare by rational arithmetic alone, which keeps the common calculator cases
(integers, fractions, small multiples of pi or sqrt(2)) exact and decidable.
Anything else falls back to lazy constructive real arithmetic.

Named factors are compared by identity, never by value.
"""

from __future__ import annotations

import math
import sys
from typing import Optional

from .. import config
from ..logging_config import get_logger
from ..types import DomainError
from ..types import ZeroDivisionException
from . import bounded_rational as br
from .bounded_rational import BoundedRational
from .constructive import CR
from .constructive import check_abort
from .constructive import decimal_string

logger = get_logger("reals.unified")

CR_ONE = CR.ONE
CR_PI = CR.PI
CR_E = CR.ONE.exp()
CR_SQRT2 = CR.value_of(2).sqrt()
CR_SQRT3 = CR.value_of(3).sqrt()
CR_SQRT5 = CR.value_of(5).sqrt()
CR_SQRT6 = CR.value_of(6).sqrt()
CR_SQRT7 = CR.value_of(7).sqrt()
CR_SQRT10 = CR.value_of(10).sqrt()
CR_LN2 = CR.value_of(2).ln()
CR_LN3 = CR.value_of(3).ln()
CR_LN5 = CR.value_of(5).ln()
CR_LN6 = CR.value_of(6).ln()
CR_LN7 = CR.value_of(7).ln()
CR_LN10 = CR.value_of(10).ln()

# named factor -> its square; iteration order is the order sqrt() tries divisors
_SQUARES: dict[CR, int] = {
    CR_ONE: 1,
    CR_SQRT2: 2,
    CR_SQRT3: 3,
    CR_SQRT5: 5,
    CR_SQRT6: 6,
    CR_SQRT7: 7,
    CR_SQRT10: 10,
}
_SQRT_OF: dict[int, CR] = {n: cr for cr, n in _SQUARES.items()}

# named factor -> n such that the factor is ln(n)
_LOG_ARGS: dict[CR, int] = {
    CR_LN2: 2,
    CR_LN3: 3,
    CR_LN5: 5,
    CR_LN6: 6,
    CR_LN7: 7,
    CR_LN10: 10,
}
_LN_OF: dict[int, CR] = {n: cr for cr, n in _LOG_ARGS.items()}


def _get_square(cr: CR) -> Optional[BoundedRational]:
    n = _SQUARES.get(cr)
    return None if n is None else BoundedRational(n)


def _cr_name(cr: CR) -> Optional[str]:
    if cr is CR_ONE:
        return ""
    if cr is CR_PI:
        return "π"
    if cr is CR_E:
        return "e"
    n = _SQUARES.get(cr)
    if n is not None:
        return f"√{n}"
    n = _LOG_ARGS.get(cr)
    if n is not None:
        return f"ln({n})"
    return None


def _is_named(cr: CR) -> bool:
    return cr is CR_PI or cr is CR_E or cr in _SQUARES or cr in _LOG_ARGS


def _definitely_algebraic(cr: CR) -> bool:
    return cr in _SQUARES


def _definitely_independent(r1: CR, r2: CR) -> bool:
    """True if no rational multiple of r1 can equal a nonzero multiple of r2.

    e and pi are transcendental, so independent of every algebraic factor.
    Distinct square roots of squarefree integers are independent, as are
    distinct logs with no integer power relation and logs versus square
    roots.  Whether e and pi are related is unknown.
    """
    if r1 is r2:
        return False
    if r1 is CR_E or r1 is CR_PI:
        return _definitely_algebraic(r2)
    if r2 is CR_E or r2 is CR_PI:
        return _definitely_algebraic(r1)
    return _is_named(r1) and _is_named(r2)


class UnifiedReal:
    """Immutable product of a :class:`BoundedRational` and a :class:`CR`.

    ``==`` is object identity.  Numeric equality is not decidable in general;
    use :meth:`definitely_equals` or :meth:`approx_equals`.
    """

    __slots__ = ("_rat", "_cr")

    def __init__(
        self,
        value: "BoundedRational | CR | int",
        cr: Optional[CR] = None,
    ):
        if isinstance(value, CR):
            self._rat = br.ONE
            self._cr = value
        elif isinstance(value, BoundedRational):
            self._rat = value
            self._cr = CR_ONE if cr is None else cr
        elif isinstance(value, int) and not isinstance(value, bool):
            self._rat = BoundedRational(value)
            self._cr = CR_ONE if cr is None else cr
        else:
            raise TypeError(f"Cannot build UnifiedReal from {type(value).__name__}")

    @classmethod
    def value_of(cls, x: int | float) -> "UnifiedReal":
        if isinstance(x, float):
            if x in (0.0, 1.0):
                return cls.value_of(int(x))
            return cls(BoundedRational.from_float(x))
        if x == 0:
            return ZERO
        if x == 1:
            return ONE
        return cls(BoundedRational.value_of(x))

    @property
    def rat_factor(self) -> BoundedRational:
        return self._rat

    @property
    def cr_factor(self) -> CR:
        return self._cr

    def _pi_twelfths(self) -> Optional[int]:
        """self / (pi/12) mod 24 when that is an integer, else None."""
        if self.definitely_zero():
            return 0
        if self._cr is CR_PI:
            quotient = br.as_big_integer(br.multiply(self._rat, br.TWELVE))
            if quotient is None:
                return None
            return quotient % 24
        return None

    # Classification

    def definitely_rational(self) -> bool:
        return self._cr is CR_ONE or self._rat.signum() == 0

    def definitely_irrational(self) -> bool:
        return not self.definitely_rational() and _is_named(self._cr)

    def definitely_algebraic(self) -> bool:
        return _definitely_algebraic(self._cr) or self._rat.signum() == 0

    def definitely_zero(self) -> bool:
        return self._rat.signum() == 0

    def definitely_non_zero(self) -> bool:
        return _is_named(self._cr) and self._rat.signum() != 0

    def definitely_one(self) -> bool:
        return self._cr is CR_ONE and self._rat == br.ONE

    def exactly_displayable(self) -> bool:
        return _cr_name(self._cr) is not None

    def exactly_truncatable(self) -> bool:
        return (
            self._cr is CR_ONE
            or self._rat.signum() == 0
            or self.definitely_irrational()
        )

    # Conversion and display

    def __str__(self) -> str:
        return f"{self._rat}*{self._cr}"

    def __repr__(self) -> str:
        return f"UnifiedReal({self.to_nice_string()!r})"

    def to_nice_string(self) -> str:
        """Exact symbolic form such as ``2π``, ``(1/2)√3`` or ``-3/4``.

        Falls back to a decimal rendering of the constructive real when the
        factor has no name.
        """
        if self._cr is CR_ONE or self._rat.signum() == 0:
            return self._rat.to_nice_string()
        name = _cr_name(self._cr)
        if name is not None:
            bi = br.as_big_integer(self._rat)
            if bi is not None:
                if bi == 1:
                    return name
                return self._rat.to_nice_string() + name
            return "(" + self._rat.to_nice_string() + ")" + name
        if self._rat == br.ONE:
            return str(self._cr)
        return str(self.cr_value())

    def to_string_truncated(self, n: int) -> str:
        """Decimal string with ``n`` digits after the point.

        Truncation is exact for rational and provably irrational values;
        otherwise an extra precision margin is used and the last digit may be
        off by one.
        """
        if self._cr is CR_ONE or self._rat.signum() == 0:
            return self._rat.to_string_truncated(n)
        scaled = CR.value_of(10**n).multiply(self.cr_value())
        negative = False
        if self.exactly_truncatable():
            int_scaled = scaled.approx_get(0)
            if int_scaled < 0:
                negative = True
                int_scaled = -int_scaled
            if CR.value_of(int_scaled).compare_to(scaled.abs()) > 0:
                int_scaled -= 1
        else:
            extra = config.TRUNCATION_EXTRA_PREC
            int_scaled = scaled.approx_get(-extra)
            if int_scaled < 0:
                negative = True
                int_scaled = -int_scaled
            int_scaled >>= extra
        digits = decimal_string(int_scaled)
        if len(digits) < n + 1:
            digits = "0" * (n + 1 - len(digits)) + digits
        sign = "-" if negative else ""
        return sign + digits[: len(digits) - n] + "." + digits[len(digits) - n :]

    def __float__(self) -> float:
        if self._cr is CR_ONE:
            return float(self._rat)
        return float(self.cr_value())

    def cr_value(self) -> CR:
        return self._rat.cr_value().multiply(self._cr)

    def bounded_rational_value(self) -> Optional[BoundedRational]:
        if self._cr is CR_ONE or self._rat.signum() == 0:
            return self._rat
        return None

    def big_integer_value(self) -> Optional[int]:
        return br.as_big_integer(self.bounded_rational_value())

    def digits_required(self) -> int:
        """Fractional decimal digits needed for an exact rendering, or sys.maxsize."""
        if self._cr is CR_ONE or self._rat.signum() == 0:
            return br.digits_required(self._rat)
        return sys.maxsize

    # Comparison

    def is_comparable(self, u: "UnifiedReal") -> bool:
        """True if compare_to(u) is known to terminate."""
        tol = config.DEFAULT_COMPARE_TOLERANCE
        return (
            (
                self._cr is u._cr
                and (_is_named(self._cr) or self._cr.signum(tol) != 0)
            )
            or (self._rat.signum() == 0 and u._rat.signum() == 0)
            or _definitely_independent(self._cr, u._cr)
            or self.cr_value().compare_to(u.cr_value(), tol) != 0
        )

    def compare_to(self, u: "UnifiedReal", a: Optional[int] = None) -> int:
        """Three way comparison.

        Without a tolerance this may not terminate if the values are equal
        but not provably so.  With tolerance ``a`` values within ``2**a`` of
        each other may compare as 0 unless they are comparable exactly.
        """
        if a is not None:
            if self.is_comparable(u):
                return self.compare_to(u)
            return self.cr_value().compare_to(u.cr_value(), a)
        if self.definitely_zero() and u.definitely_zero():
            return 0
        if self._cr is u._cr:
            signum = self._cr.signum()
            return signum * self._rat.compare_to(u._rat)
        return self.cr_value().compare_to(u.cr_value())

    def signum(self, a: Optional[int] = None) -> int:
        return self.compare_to(ZERO, a)

    def approx_equals(self, u: "UnifiedReal", a: int) -> bool:
        if self.is_comparable(u):
            if _definitely_independent(self._cr, u._cr) and (
                self._rat.signum() != 0 or u._rat.signum() != 0
            ):
                return False
            return self.compare_to(u) == 0
        return self.cr_value().compare_to(u.cr_value(), a) == 0

    def definitely_equals(self, u: "UnifiedReal") -> bool:
        return self.is_comparable(u) and self.compare_to(u) == 0

    def definitely_not_equals(self, u: "UnifiedReal") -> bool:
        """True if the values are known to differ; never approximates."""
        is_named = _is_named(self._cr)
        u_is_named = _is_named(u._cr)
        if is_named and u_is_named:
            if _definitely_independent(self._cr, u._cr):
                return self._rat.signum() != 0 or u._rat.signum() != 0
            return self._rat != u._rat
        if self._rat.signum() == 0:
            return u_is_named and u._rat.signum() != 0
        if u._rat.signum() == 0:
            return is_named and self._rat.signum() != 0
        return False

    # Arithmetic

    def add(self, u: "UnifiedReal") -> "UnifiedReal":
        if self._cr is u._cr:
            n_rat = br.add(self._rat, u._rat)
            if n_rat is not None:
                return UnifiedReal(n_rat, self._cr)
        if self.definitely_zero():
            return u
        if u.definitely_zero():
            return self
        return UnifiedReal(self.cr_value().add(u.cr_value()))

    def negate(self) -> "UnifiedReal":
        return UnifiedReal(br.negate(self._rat), self._cr)

    def subtract(self, u: "UnifiedReal") -> "UnifiedReal":
        return self.add(u.negate())

    def multiply(self, u: "UnifiedReal") -> "UnifiedReal":
        if self._cr is CR_ONE:
            n_rat = br.multiply(self._rat, u._rat)
            if n_rat is not None:
                return UnifiedReal(n_rat, u._cr)
        if u._cr is CR_ONE:
            n_rat = br.multiply(self._rat, u._rat)
            if n_rat is not None:
                return UnifiedReal(n_rat, self._cr)
        if self.definitely_zero() or u.definitely_zero():
            return ZERO
        if self._cr is u._cr:
            square = _get_square(self._cr)
            if square is not None:
                n_rat = br.multiply(br.multiply(square, self._rat), u._rat)
                if n_rat is not None:
                    return UnifiedReal(n_rat)
        n_rat = br.multiply(self._rat, u._rat)
        if n_rat is not None:
            return UnifiedReal(n_rat, self._cr.multiply(u._cr))
        return UnifiedReal(self.cr_value().multiply(u.cr_value()))

    def inverse(self) -> "UnifiedReal":
        if self.definitely_zero():
            raise ZeroDivisionException()
        square = _get_square(self._cr)
        if square is not None:
            n_rat = br.inverse(br.multiply(self._rat, square))
            if n_rat is not None:
                return UnifiedReal(n_rat, self._cr)
        return UnifiedReal(br.inverse(self._rat), self._cr.inverse())

    def divide(self, u: "UnifiedReal") -> "UnifiedReal":
        if self._cr is u._cr:
            if u.definitely_zero():
                raise ZeroDivisionException()
            n_rat = br.divide(self._rat, u._rat)
            if n_rat is not None:
                return UnifiedReal(n_rat, CR_ONE)
        return self.multiply(u.inverse())

    def sqrt(self) -> "UnifiedReal":
        if self.definitely_zero():
            return ZERO
        if self._cr is CR_ONE:
            for factor, divisor in _SQUARES.items():
                rat_sqrt = br.sqrt(br.divide(self._rat, BoundedRational(divisor)))
                if rat_sqrt is not None:
                    return UnifiedReal(rat_sqrt, factor)
        return UnifiedReal(self.cr_value().sqrt())

    # Trigonometry

    def sin(self) -> "UnifiedReal":
        pi_twelfths = self._pi_twelfths()
        if pi_twelfths is not None:
            result = _sin_pi_twelfths(pi_twelfths)
            if result is not None:
                return result
        return UnifiedReal(self.cr_value().sin())

    def cos(self) -> "UnifiedReal":
        pi_twelfths = self._pi_twelfths()
        if pi_twelfths is not None:
            result = _cos_pi_twelfths(pi_twelfths)
            if result is not None:
                return result
        return UnifiedReal(self.cr_value().cos())

    def tan(self) -> "UnifiedReal":
        pi_twelfths = self._pi_twelfths()
        if pi_twelfths is not None:
            if pi_twelfths in (6, 18):
                raise DomainError("Tangent undefined")
            top = _sin_pi_twelfths(pi_twelfths)
            bottom = _cos_pi_twelfths(pi_twelfths)
            if top is not None and bottom is not None:
                return top.divide(bottom)
        return self.sin().divide(self.cos())

    def _check_asin_domain(self) -> None:
        if self.is_comparable(ONE) and (
            self.compare_to(ONE) > 0 or self.compare_to(MINUS_ONE) < 0
        ):
            raise DomainError("inverse trig argument out of range")

    def _asin_non_halves(self) -> "UnifiedReal":
        if self.compare_to(ZERO, -10) < 0:
            return self.negate()._asin_non_halves().negate()
        if self.definitely_equals(HALF_SQRT2):
            return UnifiedReal(br.QUARTER, CR_PI)
        if self.definitely_equals(HALF_SQRT3):
            return UnifiedReal(br.THIRD, CR_PI)
        return UnifiedReal(self.cr_value().asin())

    def asin(self) -> "UnifiedReal":
        self._check_asin_domain()
        halves = self.multiply(TWO).big_integer_value()
        if halves is not None:
            return _asin_halves(halves)
        return self._asin_non_halves()

    def acos(self) -> "UnifiedReal":
        return PI_OVER_2.subtract(self.asin())

    def atan(self) -> "UnifiedReal":
        if self.compare_to(ZERO, -10) < 0:
            return self.negate().atan().negate()
        as_bi = self.big_integer_value()
        if as_bi is not None and as_bi <= 1:
            return ZERO if as_bi == 0 else PI_OVER_4
        if self.definitely_equals(THIRD_SQRT3):
            return PI_OVER_6
        if self.definitely_equals(SQRT3):
            return PI_OVER_3
        return UnifiedReal(self.cr_value().atan())

    # Powers, logarithms, factorial

    def _exp_ln_pow(self, exp: int) -> "UnifiedReal":
        sign = self.signum(config.DEFAULT_COMPARE_TOLERANCE)
        if sign > 0:
            return UnifiedReal(self.cr_value().ln().multiply(CR.value_of(exp)).exp())
        if sign < 0:
            result = self.cr_value().negate().ln().multiply(CR.value_of(exp)).exp()
            if exp & 1:
                result = result.negate()
            return UnifiedReal(result)
        # Too close to zero to take a log; multiply it out.
        if exp < 0:
            return UnifiedReal(_recursive_pow(self.cr_value(), -exp).inverse())
        return UnifiedReal(_recursive_pow(self.cr_value(), exp))

    def _int_pow(self, exp: int) -> "UnifiedReal":
        if exp == 1:
            return self
        if exp == 0:
            return ONE
        abs_exp = abs(exp)
        if self._cr is CR_ONE and abs_exp.bit_length() <= config.HARD_RECURSIVE_POW_LIMIT_BITS:
            rat_pow = self._rat.pow(exp)
            if rat_pow is not None:
                return UnifiedReal(rat_pow)
        if abs_exp > config.RECURSIVE_POW_LIMIT:
            return self._exp_ln_pow(exp)
        square = _get_square(self._cr)
        if square is not None:
            rat_pow = self._rat.pow(exp)
            if rat_pow is not None:
                n_rat = br.multiply(rat_pow, square.pow(exp >> 1))
                if n_rat is not None:
                    if exp & 1:
                        return UnifiedReal(n_rat, self._cr)
                    return UnifiedReal(n_rat)
        return self._exp_ln_pow(exp)

    def pow(self, expon: "UnifiedReal | int") -> "UnifiedReal":
        """``self ** expon``.

        Integral and half-integral rational exponents stay exact where
        possible; a negative base with any other exponent is a DomainError.
        """
        if isinstance(expon, int):
            return self._int_pow(expon)
        if self._cr is CR_E:
            if self._rat == br.ONE:
                return expon.exp()
            rat_part = UnifiedReal(self._rat).pow(expon)
            return expon.exp().multiply(rat_part)
        exp_as_br = expon.bounded_rational_value()
        if exp_as_br is not None:
            exp_as_bi = br.as_big_integer(exp_as_br)
            if exp_as_bi is not None:
                return self._int_pow(exp_as_bi)
            exp_as_bi = br.as_big_integer(br.multiply(br.TWO, exp_as_br))
            if exp_as_bi is not None:
                return self._int_pow(exp_as_bi).sqrt()
        if self.definitely_zero():
            if expon.signum(config.DEFAULT_COMPARE_TOLERANCE) < 0:
                raise ZeroDivisionException("Zero to a negative power")
            return ZERO
        if self.signum(config.DEFAULT_COMPARE_TOLERANCE) < 0:
            raise DomainError("Negative base for pow() with non-integer exponent")
        return UnifiedReal(self.cr_value().ln().multiply(expon.cr_value()).exp())

    def ln(self) -> "UnifiedReal":
        if self._cr is CR_E:
            return UnifiedReal(self._rat, CR_ONE).ln().add(ONE)
        if self.is_comparable(ZERO):
            if self.signum() <= 0:
                raise DomainError("log(non-positive)")
            compare1 = self.compare_to(ONE, config.DEFAULT_COMPARE_TOLERANCE)
            if compare1 == 0:
                if self.definitely_equals(ONE):
                    return ZERO
            elif compare1 < 0:
                return self.inverse().ln().negate()
            bi = br.as_big_integer(self._rat)
            if bi is not None:
                if self._cr is CR_ONE:
                    for base, factor in _LN_OF.items():
                        int_log = _int_log(bi, base)
                        if int_log != 0:
                            return UnifiedReal(BoundedRational(int_log), factor)
                else:
                    square = _SQUARES.get(self._cr)
                    if square is not None and square in _LN_OF:
                        int_log = _int_log(bi, square)
                        if int_log != 0:
                            n_rat = br.add(BoundedRational(int_log), br.HALF)
                            if n_rat is not None:
                                return UnifiedReal(n_rat, _LN_OF[square])
        return UnifiedReal(self.cr_value().ln())

    def exp(self) -> "UnifiedReal":
        if self.definitely_equals(ZERO):
            return ONE
        if self.definitely_equals(ONE):
            return E
        base = _LOG_ARGS.get(self._cr)
        if base is not None:
            need_sqrt = False
            rat_exponent: Optional[BoundedRational] = self._rat
            if br.as_big_integer(rat_exponent) is None:
                need_sqrt = True
                rat_exponent = br.multiply(rat_exponent, br.TWO)
            n_rat = br.pow(BoundedRational(base), rat_exponent)
            if n_rat is not None:
                result = UnifiedReal(n_rat)
                if need_sqrt:
                    result = result.sqrt()
                return result
        return UnifiedReal(self.cr_value().exp())

    def fact(self) -> "UnifiedReal":
        as_bi = self.big_integer_value()
        if as_bi is None:
            as_bi = self.cr_value().approx_get(0)  # nearest integer
            if not self.approx_equals(UnifiedReal(as_bi), config.DEFAULT_COMPARE_TOLERANCE):
                raise DomainError("Non-integral factorial argument")
        if as_bi < 0:
            raise DomainError("Negative factorial argument")
        if as_bi.bit_length() > config.MAX_FACTORIAL_BITS:
            raise DomainError("Factorial argument too big")
        return UnifiedReal(BoundedRational(_gen_factorial(as_bi, 1)))


def _sin_pi_twelfths(n: int) -> Optional[UnifiedReal]:
    if n >= 12:
        neg_result = _sin_pi_twelfths(n - 12)
        return None if neg_result is None else neg_result.negate()
    return _SIN_PI_TWELFTHS.get(n)


def _cos_pi_twelfths(n: int) -> Optional[UnifiedReal]:
    sin_arg = n + 6
    if sin_arg >= 24:
        sin_arg -= 24
    return _sin_pi_twelfths(sin_arg)


def _asin_halves(n: int) -> UnifiedReal:
    """asin(n/2) for n in -2..2."""
    if n < 0:
        return _asin_halves(-n).negate()
    if n == 0:
        return ZERO
    if n == 1:
        return UnifiedReal(br.SIXTH, CR_PI)
    if n == 2:
        return UnifiedReal(br.HALF, CR_PI)
    raise ValueError(f"asin of {n}/2 is outside the table")


def _recursive_pow(base: CR, exp: int) -> CR:
    if exp == 1:
        return base
    if exp & 1:
        return base.multiply(_recursive_pow(base, exp - 1))
    tmp = _recursive_pow(base, exp >> 1)
    check_abort()
    return tmp.multiply(tmp)


def _int_log(n: int, base: int) -> int:
    """k such that base**k == n, or 0 if there is none."""
    if n <= 1:
        return 0
    approx = math.log(n) / math.log(base)
    if abs(approx - round(approx)) > 1.0e-6:
        return 0
    result = round(approx)
    check_abort()
    if base**result != n:
        return 0
    return result


def _gen_factorial(n: int, step: int) -> int:
    """Product n * (n - step) * (n - 2*step) * ... down to 1."""
    if n > 4 * step:
        prod1 = _gen_factorial(n, 2 * step)
        check_abort()
        prod2 = _gen_factorial(n - step, 2 * step)
        check_abort()
        return prod1 * prod2
    if n == 0:
        return 1
    res = n
    i = n - step
    while i > 1:
        res *= i
        i -= step
    return res


PI = UnifiedReal(CR_PI)
E = UnifiedReal(CR_E)
ZERO = UnifiedReal(br.ZERO)
ONE = UnifiedReal(br.ONE)
MINUS_ONE = UnifiedReal(br.MINUS_ONE)
TWO = UnifiedReal(br.TWO)
MINUS_TWO = UnifiedReal(br.MINUS_TWO)
HALF = UnifiedReal(br.HALF)
MINUS_HALF = UnifiedReal(br.MINUS_HALF)
TEN = UnifiedReal(br.TEN)
RADIANS_PER_DEGREE = UnifiedReal(BoundedRational(1, 180), CR_PI)

SQRT3 = UnifiedReal(CR_SQRT3)
HALF_SQRT2 = UnifiedReal(br.HALF, CR_SQRT2)
HALF_SQRT3 = UnifiedReal(br.HALF, CR_SQRT3)
THIRD_SQRT3 = UnifiedReal(br.THIRD, CR_SQRT3)
PI_OVER_2 = UnifiedReal(br.HALF, CR_PI)
PI_OVER_3 = UnifiedReal(br.THIRD, CR_PI)
PI_OVER_4 = UnifiedReal(br.QUARTER, CR_PI)
PI_OVER_6 = UnifiedReal(br.SIXTH, CR_PI)

_SIN_PI_TWELFTHS = {
    0: ZERO,
    2: HALF,
    3: HALF_SQRT2,
    4: HALF_SQRT3,
    6: ONE,
    8: HALF_SQRT3,
    9: HALF_SQRT2,
    10: HALF,
}
