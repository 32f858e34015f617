"""Exact rationals that refuse to grow without bound.

:class:`BoundedRational` wraps ``sympy.Rational``.  Arithmetic goes through the
module level functions (``add``, ``multiply``, ...) which accept ``None`` as
"unknown" and return ``None`` once a non-integral result would need more than
``MAX_RATIONAL_BITS`` bits; callers then fall back to constructive reals.
"""

from __future__ import annotations

import math
import sys
from typing import Optional

import sympy as sp
from sympy import integer_nthroot
from sympy.ntheory import multiplicity

from .. import config
from ..types import DomainError
from ..types import ZeroDivisionException
from .constructive import CR
from .constructive import check_abort
from .constructive import decimal_string

NO_WHOLE_BITS = -sys.maxsize - 1  # whole_number_bits() of zero


class BoundedRational:
    """Immutable fraction ``num / den``."""

    __slots__ = ("_value",)

    def __init__(self, num: int | sp.Rational, den: int = 1):
        if isinstance(num, sp.Rational) and den == 1:
            self._value = num
            return
        if den == 0:
            raise ZeroDivisionException()
        self._value = sp.Rational(int(num), int(den))

    @classmethod
    def value_of(cls, n: int) -> "BoundedRational":
        cached = _SMALL.get(n) if -2 <= n <= 10 else None
        return cached if cached is not None else cls(n)

    @classmethod
    def from_float(cls, x: float) -> "BoundedRational":
        """Exact binary value of ``x``."""
        if math.isinf(x) or math.isnan(x):
            raise DomainError("Infinity or NaN not convertible to BoundedRational")
        if x == int(x) and abs(x) <= 1000:
            return cls.value_of(int(x))
        return cls(sp.Rational(x))

    @property
    def numerator(self) -> int:
        return int(self._value.p)

    @property
    def denominator(self) -> int:
        return int(self._value.q)

    def too_big(self) -> bool:
        if self._value.q == 1:
            return False
        return (
            int(self._value.p).bit_length() + int(self._value.q).bit_length()
            > config.MAX_RATIONAL_BITS
        )

    # Queries

    def signum(self) -> int:
        p = self._value.p
        return (p > 0) - (p < 0)

    def is_integer(self) -> bool:
        return self._value.q == 1

    def int_value(self) -> int:
        if self._value.q != 1:
            raise DomainError("int_value of non-integer")
        return int(self._value.p)

    def whole_number_bits(self) -> int:
        """Approximate log2 of the magnitude, or NO_WHOLE_BITS for zero."""
        if self._value.p == 0:
            return NO_WHOLE_BITS
        return int(abs(self._value.p)).bit_length() - int(self._value.q).bit_length()

    def cr_value(self) -> CR:
        num = CR.value_of(self.numerator)
        if self._value.q == 1:
            return num
        return num.divide(CR.value_of(self.denominator))

    def __float__(self) -> float:
        bits = self.whole_number_bits()
        if bits == NO_WHOLE_BITS or bits < -1100:
            return 0.0
        try:
            return self.numerator / self.denominator
        except OverflowError:
            return math.inf if self.signum() > 0 else -math.inf

    # Comparison

    def compare_to(self, other: "BoundedRational") -> int:
        if self._value < other._value:
            return -1
        return 1 if self._value > other._value else 0

    def __lt__(self, other: "BoundedRational") -> bool:
        return self._value < other._value

    def __le__(self, other: "BoundedRational") -> bool:
        return self._value <= other._value

    def __gt__(self, other: "BoundedRational") -> bool:
        return self._value > other._value

    def __ge__(self, other: "BoundedRational") -> bool:
        return self._value >= other._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundedRational):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    # Display

    def __str__(self) -> str:
        return f"{decimal_string(self.numerator)}/{decimal_string(self.denominator)}"

    def __repr__(self) -> str:
        return f"BoundedRational({self._value.p}, {self._value.q})"

    def to_nice_string(self) -> str:
        if self._value.q == 1:
            return decimal_string(self.numerator)
        return str(self)

    def to_string_truncated(self, n: int) -> str:
        """Decimal string with exactly ``n`` digits after the point, truncated toward zero."""
        digits = decimal_string(abs(self.numerator) * 10**n // self.denominator)
        if len(digits) < n + 1:
            digits = "0" * (n + 1 - len(digits)) + digits
        sign = "-" if self.signum() < 0 else ""
        return sign + digits[: len(digits) - n] + "." + digits[len(digits) - n :]

    # Powers

    def pow(self, exp: int) -> Optional["BoundedRational"]:
        """``self ** exp`` or None if the result would be too large."""
        if exp == 0:
            return ONE
        if exp == 1:
            return self
        if self._value.q == 1:
            if self._value.p == 0:
                if exp < 0:
                    raise ZeroDivisionException()
                return ZERO
            if self._value.p == 1:
                return ONE
            if self._value.p == -1:
                return MINUS_ONE if exp & 1 else ONE
        if abs(exp).bit_length() > config.HARD_RECURSIVE_POW_LIMIT_BITS:
            return None
        base = inverse(self) if exp < 0 else self
        return base._raw_pow(abs(exp))

    def _raw_pow(self, exp: int) -> Optional["BoundedRational"]:
        result = sp.Integer(1)
        for bit in bin(exp)[2:]:
            result = result * result
            if bit == "1":
                result = result * self._value
            check_abort()
            candidate = BoundedRational(result)
            if candidate.too_big():
                return None
        return BoundedRational(result)


def as_big_integer(r: Optional[BoundedRational]) -> Optional[int]:
    """The integer value of ``r``, or None if ``r`` is unknown or not integral."""
    if r is None or not r.is_integer():
        return None
    return r.numerator


def _bounded(value: sp.Rational) -> Optional[BoundedRational]:
    result = BoundedRational(value)
    return None if result.too_big() else result


def add(r1: Optional[BoundedRational], r2: Optional[BoundedRational]) -> Optional[BoundedRational]:
    if r1 is None or r2 is None:
        return None
    return _bounded(r1._value + r2._value)


def negate(r: Optional[BoundedRational]) -> Optional[BoundedRational]:
    if r is None:
        return None
    return BoundedRational(-r._value)


def subtract(r1: Optional[BoundedRational], r2: Optional[BoundedRational]) -> Optional[BoundedRational]:
    return add(r1, negate(r2))


def multiply(r1: Optional[BoundedRational], r2: Optional[BoundedRational]) -> Optional[BoundedRational]:
    if r1 is None or r2 is None:
        return None
    if r1 is ONE:
        return r2
    if r2 is ONE:
        return r1
    return _bounded(r1._value * r2._value)


def inverse(r: Optional[BoundedRational]) -> Optional[BoundedRational]:
    if r is None:
        return None
    if r._value.p == 0:
        raise ZeroDivisionException()
    return BoundedRational(1 / r._value)


def divide(r1: Optional[BoundedRational], r2: Optional[BoundedRational]) -> Optional[BoundedRational]:
    return multiply(r1, inverse(r2))


def sqrt(r: Optional[BoundedRational]) -> Optional[BoundedRational]:
    """Exact square root, or None if ``r`` is not the square of a rational."""
    if r is None:
        return None
    if r.signum() < 0:
        raise DomainError("sqrt(negative)")
    num_root, num_exact = integer_nthroot(r.numerator, 2)
    if not num_exact:
        return None
    den_root, den_exact = integer_nthroot(r.denominator, 2)
    if not den_exact:
        return None
    return BoundedRational(int(num_root), int(den_root))


def pow(base: Optional[BoundedRational], exp: Optional[BoundedRational]) -> Optional[BoundedRational]:
    """``base ** exp`` for an integral rational exponent; None otherwise."""
    if exp is None or base is None:
        return None
    if not exp.is_integer():
        return None
    return base.pow(exp.numerator)


def digits_required(r: Optional[BoundedRational]) -> int:
    """Decimal digits after the point needed to write ``r`` exactly.

    Returns ``sys.maxsize`` for unknown values and for denominators with
    prime factors other than 2 and 5.
    """
    if r is None:
        return sys.maxsize
    den = r.denominator
    if den == 1:
        return 0
    if den.bit_length() > config.MAX_RATIONAL_BITS:
        return sys.maxsize
    powers_of_two = multiplicity(2, den)
    powers_of_five = multiplicity(5, den)
    if den != 2**powers_of_two * 5**powers_of_five:
        return sys.maxsize
    return max(powers_of_two, powers_of_five)


ZERO = BoundedRational(0)
ONE = BoundedRational(1)
MINUS_ONE = BoundedRational(-1)
TWO = BoundedRational(2)
MINUS_TWO = BoundedRational(-2)
TEN = BoundedRational(10)
TWELVE = BoundedRational(12)
HALF = BoundedRational(1, 2)
MINUS_HALF = BoundedRational(-1, 2)
THIRD = BoundedRational(1, 3)
QUARTER = BoundedRational(1, 4)
SIXTH = BoundedRational(1, 6)

_SMALL = {-2: MINUS_TWO, -1: MINUS_ONE, 0: ZERO, 1: ONE, 2: TWO, 10: TEN}
