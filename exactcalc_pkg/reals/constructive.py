"""Constructive (lazily approximated) real numbers.

A constructive real ``x`` is represented by an object that can produce, for
any requested precision ``p``, an integer ``a`` such that
``|a * 2**p - x| < 2**p``.  Values are combined into a DAG of operation nodes
and nothing is computed until an approximation is requested; the most precise
approximation produced so far is cached on every node.

The algorithms follow Hans Boehm's constructive reals package: power series
for exp/cos/atan/ln/asin evaluated on pre-scaled arguments, argument reduction
in the public methods, and Newton iteration for square roots.

Long computations check :func:`check_abort` between series terms so that a
caller can cancel evaluation through :func:`abort_on` or :data:`please_stop`.
"""

from __future__ import annotations

import math
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from ..logging_config import get_logger
from ..types import AbortedError
from ..types import DomainError
from ..types import PrecisionOverflowError

logger = get_logger("reals.constructive")

# msd() result for a value not known to be nonzero at the requested precision
MIN_MSD = -(1 << 31)

please_stop = threading.Event()  # process wide "stop everything" flag
_local = threading.local()

_stats_lock = threading.Lock()
_approximations = 0


@contextmanager
def abort_on(event: threading.Event) -> Iterator[threading.Event]:
    """Make ``event`` the cancellation flag of the current thread.

    Every constructive real computation performed inside the block raises
    :class:`AbortedError` at its next check point once ``event`` is set.
    """
    previous = getattr(_local, "event", None)
    _local.event = event
    try:
        yield event
    finally:
        _local.event = previous


def check_abort() -> None:
    if please_stop.is_set():
        logger.debug("Global stop flag set; abandoning computation")
        raise AbortedError("Computation stopped")
    event = getattr(_local, "event", None)
    if event is not None and event.is_set():
        logger.debug("Abort requested for current thread")
        raise AbortedError("Computation aborted")


def check_prec(n: int) -> None:
    if n >= (1 << 28) or n < -(1 << 28):
        raise PrecisionOverflowError(f"Precision {n} out of range")


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def shift(k: int, n: int) -> int:
    if n == 0:
        return k
    if n < 0:
        return k >> -n
    return k << n


def scale(k: int, n: int) -> int:
    """Multiply ``k`` by ``2**n``, rounding to nearest when ``n`` is negative."""
    if n >= 0:
        return k << n
    return (shift(k, n + 1) + 1) >> 1


def bound_log2(n: int) -> int:
    """Smallest ``b`` with ``2**b > |n|``."""
    return abs(n).bit_length()


# comfortably below the interpreter's int to str digit limit
_DIRECT_STR_BITS = 12000


def decimal_string(n: int) -> str:
    """``str(n)`` for integers of any size.

    Large values are split at a power of ten and converted piecewise, so the
    result does not depend on ``sys.get_int_max_str_digits()``.
    """
    if n < 0:
        return "-" + decimal_string(-n)
    bits = n.bit_length()
    if bits <= _DIRECT_STR_BITS:
        return str(n)
    check_abort()
    low_digits = int(bits * 0.30103) // 2
    high, low = divmod(n, 10**low_digits)
    return decimal_string(high) + decimal_string(low).rjust(low_digits, "0")


def _note_approximation() -> None:
    global _approximations
    with _stats_lock:
        _approximations += 1


class CR:
    """Base class of all constructive reals.

    Subclasses implement :meth:`_approximate`; everything else, including the
    precision cache, is shared.
    """

    please_stop = please_stop

    ZERO: "CR"
    ONE: "CR"
    PI: "CR"
    LN2: "CR"

    def __init__(self) -> None:
        # (min_prec, max_appr) of the best approximation so far
        self._cache: Optional[tuple[int, int]] = None

    def _approximate(self, precision: int) -> int:
        raise NotImplementedError

    @staticmethod
    def approximation_count() -> int:
        """Number of fresh approximations computed by any constructive real."""
        return _approximations

    # Construction

    @staticmethod
    def value_of(n: int | float) -> "CR":
        if isinstance(n, float):
            if math.isnan(n):
                raise DomainError("NaN argument")
            if math.isinf(n):
                raise DomainError("Infinite argument")
            num, den = n.as_integer_ratio()
            result: CR = IntCR(num)
            if den != 1:
                result = result.shift_right(den.bit_length() - 1)
            return result
        return IntCR(int(n))

    @staticmethod
    def from_string(s: str, radix: int = 10) -> "CR":
        """Parse a plain (optionally fractional) numeral such as ``"-12.75"``."""
        s = s.strip()
        whole, point, fraction = s.partition(".")
        if not point:
            fraction = "0"
        scaled = int(whole + fraction, radix)
        divisor = radix ** len(fraction)
        return CR.value_of(scaled).divide(CR.value_of(divisor))

    # Approximation

    def approx_get(self, precision: int) -> int:
        """Return ``a`` with ``|a * 2**precision - self| < 2**precision``."""
        check_prec(precision)
        cache = self._cache
        if cache is not None and precision >= cache[0]:
            return scale(cache[1], cache[0] - precision)
        result = self._approximate(precision)
        _note_approximation()
        self._cache = (precision, result)
        return result

    def _known_msd(self) -> int:
        min_prec, max_appr = self._cache
        return min_prec + abs(max_appr).bit_length() - 1

    def msd(self, n: Optional[int] = None) -> int:
        """Position of the most significant digit.

        With ``n`` given, may return :data:`MIN_MSD` if the value is smaller
        than ``2**n``; without it, iterates until the msd is known (which does
        not terminate for zero).
        """
        if n is None:
            return self.iter_msd(MIN_MSD)
        cache = self._cache
        if cache is None or -1 <= cache[1] <= 1:
            self.approx_get(n - 1)
            if abs(self._cache[1]) <= 1:
                return MIN_MSD
        return self._known_msd()

    def iter_msd(self, n: int) -> int:
        prec = 0
        while prec > n + 30:
            msd = self.msd(prec)
            if msd != MIN_MSD:
                return msd
            check_prec(prec)
            check_abort()
            prec = _div(prec * 3, 2) - 16
        return self.msd(n)

    # Comparison

    def compare_to(self, x: "CR", a: Optional[int] = None) -> int:
        """Compare with ``x``.

        With tolerance ``a``, returns 0 when the values are within ``2**a`` of
        each other.  Without it, loops with growing precision and never
        returns for equal values.
        """
        if a is not None:
            needed_prec = a - 1
            this_appr = self.approx_get(needed_prec)
            x_appr = x.approx_get(needed_prec)
            if this_appr > x_appr + 1:
                return 1
            if this_appr < x_appr - 1:
                return -1
            return 0
        a = -20
        while True:
            check_prec(a)
            result = self.compare_to(x, a)
            if result != 0:
                return result
            check_abort()
            a *= 2

    def signum(self, a: Optional[int] = None) -> int:
        if a is not None:
            cache = self._cache
            if cache is not None and cache[1] != 0:
                return _sign(cache[1])
            return _sign(self.approx_get(a - 1))
        a = -20
        while True:
            check_prec(a)
            result = self.signum(a)
            if result != 0:
                return result
            check_abort()
            a *= 2

    # Conversion

    def to_string(self, n: int = 10, radix: int = 10) -> str:
        """Decimal (or other radix) rendering rounded to ``n`` fractional digits."""
        if radix == 16:
            scaled_cr = self.shift_left(4 * n)
        else:
            scaled_cr = self.multiply(IntCR(radix**n))
        scaled_int = scaled_cr.approx_get(0)
        scaled_string = _to_radix(abs(scaled_int), radix)
        if n == 0:
            result = scaled_string
        else:
            length = len(scaled_string)
            if length <= n:
                scaled_string = "0" * (n + 1 - length) + scaled_string
                length = n + 1
            result = scaled_string[: length - n] + "." + scaled_string[length - n :]
        if scaled_int < 0:
            result = "-" + result
        return result

    def __str__(self) -> str:
        return self.to_string(10)

    def big_integer_value(self) -> int:
        return self.approx_get(0)

    def int_value(self) -> int:
        return self.approx_get(0)

    def __float__(self) -> float:
        my_msd = self.iter_msd(-1080)
        if my_msd == MIN_MSD:
            return 0.0
        needed_prec = my_msd - 60
        appr = self.approx_get(needed_prec)
        if needed_prec + abs(appr).bit_length() > 1024:
            return math.inf if appr > 0 else -math.inf
        return math.ldexp(float(appr), needed_prec)

    # Arithmetic

    def add(self, x: "CR") -> "CR":
        return AddCR(self, x)

    def shift_left(self, n: int) -> "CR":
        check_prec(n)
        return ShiftedCR(self, n)

    def shift_right(self, n: int) -> "CR":
        check_prec(n)
        return ShiftedCR(self, -n)

    def negate(self) -> "CR":
        return NegCR(self)

    def subtract(self, x: "CR") -> "CR":
        return AddCR(self, x.negate())

    def multiply(self, x: "CR") -> "CR":
        return MultCR(self, x)

    def inverse(self) -> "CR":
        return InvCR(self)

    def divide(self, x: "CR") -> "CR":
        return MultCR(self, x.inverse())

    def select(self, x: "CR", y: "CR") -> "CR":
        """``x`` if self is negative, otherwise ``y``."""
        return SelectCR(self, x, y)

    def abs(self) -> "CR":
        return self.select(self.negate(), self)

    # Transcendental functions

    def exp(self) -> "CR":
        rough_appr = self.approx_get(-10)
        if rough_appr > 2 or rough_appr < -2:
            square_root = self.shift_right(1).exp()
            return square_root.multiply(square_root)
        return PrescaledExpCR(self)

    def cos(self) -> "CR":
        halfpi_multiples = self.divide(CR.PI).approx_get(-1)
        if abs(halfpi_multiples) >= 2:
            pi_multiples = scale(halfpi_multiples, -1)
            adjustment = CR.PI.multiply(CR.value_of(pi_multiples))
            if pi_multiples & 1:
                return self.subtract(adjustment).cos().negate()
            return self.subtract(adjustment).cos()
        if abs(self.approx_get(-1)) >= 2:
            cos_half = self.shift_right(1).cos()
            return cos_half.multiply(cos_half).shift_left(1).subtract(CR.ONE)
        return PrescaledCosCR(self)

    def sin(self) -> "CR":
        return _HALF_PI.subtract(self).cos()

    def tan(self) -> "CR":
        return self.sin().divide(self.cos())

    def asin(self) -> "CR":
        rough_appr = self.approx_get(-10)
        if rough_appr > 750:  # 1/sqrt(2) + a bit
            new_arg = CR.ONE.subtract(self.multiply(self)).sqrt()
            return new_arg.acos()
        if rough_appr < -750:
            return self.negate().asin().negate()
        return PrescaledAsinCR(self)

    def acos(self) -> "CR":
        return _HALF_PI.subtract(self.asin())

    def atan(self) -> "CR":
        return self.divide(CR.ONE.add(self.multiply(self)).sqrt()).asin()

    def ln(self) -> "CR":
        rough_appr = self.approx_get(-4)  # sixteenths
        if rough_appr < 0:
            raise DomainError("ln(negative)")
        if rough_appr <= 8:
            return self.inverse().ln().negate()
        if rough_appr >= 24:
            if rough_appr <= 64:
                quarter = self.sqrt().sqrt().ln()
                return quarter.shift_left(2)
            extra_bits = rough_appr.bit_length() - 3
            scaled_result = self.shift_right(extra_bits).ln()
            return scaled_result.add(CR.value_of(extra_bits).multiply(CR.LN2))
        return self._simple_ln()

    def _simple_ln(self) -> "CR":
        return PrescaledLnCR(self.subtract(CR.ONE))

    def sqrt(self) -> "CR":
        return SqrtCR(self)


class SlowCR(CR):
    """Node whose approximations are expensive; rounds requests to coarse steps."""

    max_prec = -64
    prec_incr = 32

    def approx_get(self, precision: int) -> int:
        check_prec(precision)
        cache = self._cache
        if cache is not None and precision >= cache[0]:
            return scale(cache[1], cache[0] - precision)
        if precision >= self.max_prec:
            eval_prec = self.max_prec
        else:
            eval_prec = (precision - self.prec_incr + 1) & ~(self.prec_incr - 1)
        result = self._approximate(eval_prec)
        _note_approximation()
        self._cache = (eval_prec, result)
        return scale(result, eval_prec - precision)


class IntCR(CR):
    def __init__(self, value: int):
        super().__init__()
        self.value = value

    def _approximate(self, p: int) -> int:
        return scale(self.value, -p)


class AddCR(CR):
    def __init__(self, x: CR, y: CR):
        super().__init__()
        self.op1 = x
        self.op2 = y

    def _approximate(self, p: int) -> int:
        return scale(self.op1.approx_get(p - 2) + self.op2.approx_get(p - 2), -2)


class ShiftedCR(CR):
    def __init__(self, x: CR, n: int):
        super().__init__()
        self.op = x
        self.count = n

    def _approximate(self, p: int) -> int:
        return self.op.approx_get(p - self.count)


class NegCR(CR):
    def __init__(self, x: CR):
        super().__init__()
        self.op = x

    def _approximate(self, p: int) -> int:
        return -self.op.approx_get(p)


class SelectCR(CR):
    def __init__(self, s: CR, x: CR, y: CR):
        super().__init__()
        self.selector = s
        self.selector_sign = _sign(s.approx_get(-20))
        self.op1 = x
        self.op2 = y

    def _approximate(self, p: int) -> int:
        if self.selector_sign < 0:
            return self.op1.approx_get(p)
        if self.selector_sign > 0:
            return self.op2.approx_get(p)
        op1_appr = self.op1.approx_get(p - 1)
        op2_appr = self.op2.approx_get(p - 1)
        if abs(op1_appr - op2_appr) <= 1:
            return scale(op1_appr, -1)
        if self.selector.signum() < 0:
            self.selector_sign = -1
            return scale(op1_appr, -1)
        self.selector_sign = 1
        return scale(op2_appr, -1)


class MultCR(CR):
    def __init__(self, x: CR, y: CR):
        super().__init__()
        self.op1 = x
        self.op2 = y

    def _approximate(self, p: int) -> int:
        half_prec = (p >> 1) - 1
        op1, op2 = self.op1, self.op2
        msd_op1 = op1.msd(half_prec)
        if msd_op1 == MIN_MSD:
            msd_op2 = op2.msd(half_prec)
            if msd_op2 == MIN_MSD:
                return 0
            # Second operand is the larger one; approximate it more coarsely.
            op1, op2 = op2, op1
            msd_op1 = msd_op2
        prec2 = p - msd_op1 - 3
        appr2 = op2.approx_get(prec2)
        if appr2 == 0:
            return 0
        msd_op2 = op2._known_msd()
        prec1 = p - msd_op2 - 3
        appr1 = op1.approx_get(prec1)
        return scale(appr1 * appr2, prec1 + prec2 - p)


class InvCR(CR):
    def __init__(self, x: CR):
        super().__init__()
        self.op = x

    def _approximate(self, p: int) -> int:
        msd = self.op.msd()
        inv_msd = 1 - msd
        digits_needed = inv_msd - p + 3
        prec_needed = msd - digits_needed
        log_scale_factor = -p - prec_needed
        if log_scale_factor < 0:
            return 0
        dividend = 1 << log_scale_factor
        scaled_divisor = self.op.approx_get(prec_needed)
        abs_scaled_divisor = abs(scaled_divisor)
        result = (dividend + (abs_scaled_divisor >> 1)) // abs_scaled_divisor
        return -result if scaled_divisor < 0 else result


class PrescaledExpCR(CR):
    """exp(x) for |x| < 1/2 by its Taylor series."""

    def __init__(self, x: CR):
        super().__init__()
        self.op = x

    def _approximate(self, p: int) -> int:
        if p >= 1:
            return 0
        iterations_needed = -p // 2 + 2
        calc_precision = p - bound_log2(2 * iterations_needed) - 4
        op_prec = p - 3
        op_appr = self.op.approx_get(op_prec)
        scaled_1 = 1 << -calc_precision
        current_term = scaled_1
        current_sum = scaled_1
        n = 0
        max_trunc_error = 1 << (p - 4 - calc_precision)
        while abs(current_term) >= max_trunc_error:
            check_abort()
            n += 1
            current_term = scale(current_term * op_appr, op_prec)
            current_term = _div(current_term, n)
            current_sum += current_term
        return scale(current_sum, calc_precision - p)


class PrescaledCosCR(SlowCR):
    """cos(x) for |x| < 1 by its Taylor series."""

    def __init__(self, x: CR):
        super().__init__()
        self.op = x

    def _approximate(self, p: int) -> int:
        if p >= 1:
            return 0
        iterations_needed = -p // 2 + 4
        calc_precision = p - bound_log2(2 * iterations_needed) - 4
        op_prec = p - 2
        op_appr = self.op.approx_get(op_prec)
        max_trunc_error = 1 << (p - 4 - calc_precision)
        n = 0
        current_term = 1 << -calc_precision
        current_sum = current_term
        while abs(current_term) >= max_trunc_error:
            check_abort()
            n += 2
            current_term = scale(current_term * op_appr, op_prec)
            current_term = scale(current_term * op_appr, op_prec)
            current_term = _div(current_term, -n * (n - 1))
            current_sum += current_term
        return scale(current_sum, calc_precision - p)


class IntegralAtanCR(SlowCR):
    """atan(1/n) for an integer n > 1."""

    def __init__(self, n: int):
        super().__init__()
        self.op = n

    def _approximate(self, p: int) -> int:
        if p >= 1:
            return 0
        iterations_needed = -p // 2 + 2
        calc_precision = p - bound_log2(2 * iterations_needed) - 2
        scaled_1 = 1 << -calc_precision
        op_squared = self.op * self.op
        op_inverse = scaled_1 // self.op
        current_power = op_inverse
        current_term = op_inverse
        current_sum = op_inverse
        current_sign = 1
        n = 1
        max_trunc_error = 1 << (p - 2 - calc_precision)
        while abs(current_term) >= max_trunc_error:
            check_abort()
            n += 2
            current_power //= op_squared
            current_sign = -current_sign
            current_term = _div(current_power, current_sign * n)
            current_sum += current_term
        return scale(current_sum, calc_precision - p)


class PrescaledLnCR(SlowCR):
    """ln(1 + x) for |x| < 1/2."""

    def __init__(self, x: CR):
        super().__init__()
        self.op = x

    def _approximate(self, p: int) -> int:
        if p >= 0:
            return 0
        iterations_needed = -p
        calc_precision = p - bound_log2(2 * iterations_needed) - 4
        op_prec = p - 3
        op_appr = self.op.approx_get(op_prec)
        x_nth = scale(op_appr, op_prec - calc_precision)
        current_term = x_nth
        current_sum = current_term
        n = 1
        current_sign = 1
        max_trunc_error = 1 << (p - 4 - calc_precision)
        while abs(current_term) >= max_trunc_error:
            check_abort()
            n += 1
            current_sign = -current_sign
            x_nth = scale(x_nth * op_appr, op_prec)
            current_term = _div(x_nth, n * current_sign)
            current_sum += current_term
        return scale(current_sum, calc_precision - p)


class PrescaledAsinCR(SlowCR):
    """asin(x) for |x| <= 0.75 by its power series."""

    def __init__(self, x: CR):
        super().__init__()
        self.op = x

    def _approximate(self, p: int) -> int:
        if p >= 2:
            return 0
        iterations_needed = _div(-3 * p, 2) + 4
        calc_precision = p - bound_log2(2 * iterations_needed) - 4
        op_prec = p - 3
        op_appr = self.op.approx_get(op_prec)
        max_last_term = 1 << (p - 4 - calc_precision)
        exp = 1
        current_term = shift(op_appr, op_prec - calc_precision)
        current_sum = current_term
        current_factor = current_term
        while abs(current_term) >= max_last_term:
            check_abort()
            exp += 2
            current_factor *= exp - 2
            current_factor = scale(current_factor * op_appr, op_prec + 2)
            current_factor *= op_appr
            current_factor = _div(current_factor, exp - 1)
            current_factor = scale(current_factor, op_prec - 2)
            current_term = _div(current_factor, exp)
            current_sum += current_term
        return scale(current_sum, calc_precision - p)


class SqrtCR(CR):
    """Square root: floating point start, then Newton steps on cached values."""

    FP_PREC = 50
    FP_OP_PREC = 60

    def __init__(self, x: CR):
        super().__init__()
        self.op = x

    def _approximate(self, p: int) -> int:
        max_op_prec_needed = 2 * p - 1
        msd = self.op.iter_msd(max_op_prec_needed)
        if msd <= max_op_prec_needed:
            return 0
        result_msd = _div(msd, 2)
        result_digits = result_msd - p
        if result_digits > self.FP_PREC:
            appr_digits = result_digits // 2 + 6
            appr_prec = result_msd - appr_digits
            prod_prec = 2 * appr_prec
            op_appr = self.op.approx_get(prod_prec)
            last_appr = self.approx_get(appr_prec)
            prod_prec_scaled_numerator = last_appr * last_appr + op_appr
            scaled_numerator = scale(prod_prec_scaled_numerator, appr_prec - p)
            shifted_result = _div(scaled_numerator, last_appr)
            return (shifted_result + 1) >> 1
        op_prec = (msd - self.FP_OP_PREC) & ~1
        working_prec = op_prec - self.FP_OP_PREC
        scaled_bi_appr = self.op.approx_get(op_prec) << self.FP_OP_PREC
        scaled_appr = float(scaled_bi_appr)
        if scaled_appr < 0.0:
            raise DomainError("sqrt(negative)")
        scaled_sqrt = int(math.sqrt(scaled_appr))
        return shift(scaled_sqrt, _div(working_prec, 2) - p)


def _to_radix(n: int, radix: int) -> str:
    if radix == 10:
        return decimal_string(n)
    if radix == 16:
        return format(n, "x")
    if radix == 2:
        return format(n, "b")
    if radix == 8:
        return format(n, "o")
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, radix)
        out.append(digits[r])
    return "".join(reversed(out))


def _atan_reciprocal(n: int) -> CR:
    return IntegralAtanCR(n)


CR.ZERO = CR.value_of(0)
CR.ONE = CR.value_of(1)

_FOUR = CR.value_of(4)
CR.PI = _FOUR.multiply(
    _FOUR.multiply(_atan_reciprocal(5)).subtract(_atan_reciprocal(239))
)
_HALF_PI = CR.PI.shift_right(1)

# ln(2) = 7 ln(10/9) - 2 ln(25/24) + 3 ln(81/80), all arguments close to 1
_TEN_NINTHS = CR.value_of(10).divide(CR.value_of(9))
_TWENTYFIVE_TWENTYFOURTHS = CR.value_of(25).divide(CR.value_of(24))
_EIGHTYONE_EIGHTIETHS = CR.value_of(81).divide(CR.value_of(80))
CR.LN2 = (
    CR.value_of(7)
    .multiply(_TEN_NINTHS._simple_ln())
    .subtract(CR.value_of(2).multiply(_TWENTYFIVE_TWENTYFOURTHS._simple_ln()))
    .add(CR.value_of(3).multiply(_EIGHTYONE_EIGHTIETHS._simple_ln()))
)
