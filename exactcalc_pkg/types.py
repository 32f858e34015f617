"""Exception types and result containers shared across exactcalc."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class CalculatorError(Exception):
    """Base class for all calculator failures.

    Attributes:
        code: Stable machine readable error code
    """

    code = "CALCULATOR_ERROR"

    def __init__(self, message: str = "", code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class ParseError(CalculatorError):
    """Malformed or incomplete expression."""

    code = "SYNTAX_ERROR"


class ZeroDivisionException(CalculatorError, ZeroDivisionError):
    code = "ZERO_DIVISION"

    def __init__(self, message: str = "Division by zero", code: str | None = None):
        super().__init__(message, code)


class DomainError(CalculatorError, ArithmeticError):
    """Argument outside the domain of an operation (e.g. ln(-1), (-1)!)."""

    code = "DOMAIN_ERROR"


class PrecisionOverflowError(CalculatorError, ArithmeticError):
    """Requested approximation precision does not fit the supported range."""

    code = "PRECISION_OVERFLOW"


class AbortedError(CalculatorError):
    """A long running computation was cancelled cooperatively."""

    code = "ABORTED"


class CorruptDataError(CalculatorError, ValueError):
    """Serialized expression data could not be decoded."""

    code = "CORRUPT_DATA"


@dataclass
class EvalResult:
    """Typed view of a worker evaluation result."""

    ok: bool
    result: Optional[Any] = None
    exact: Optional[str] = None
    approx: Optional[str] = None
    display: Optional[str] = None
    short_rep: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvalResult":
        return cls(
            ok=bool(data.get("ok")),
            result=data.get("result"),
            exact=data.get("exact"),
            approx=data.get("approx"),
            display=data.get("display"),
            short_rep=data.get("short_rep"),
            error=data.get("error"),
            error_code=data.get("error_code"),
        )
