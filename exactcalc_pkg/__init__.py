"""exactcalc: exact and lazily evaluated calculator arithmetic.

Expressions are built key by key (``CalculatorExpr``), evaluated to
``UnifiedReal`` values (an exact rational times a constructive real), and
formatted for display through an explicit ``DisplayContext``.
"""

from .config import VERSION
from .expression.expr import CalculatorExpr
from .expression.keys import KeyId
from .expression.resolver import ExprResolver
from .expression.resolver import ExprStore
from .reals.bounded_rational import BoundedRational
from .reals.constructive import CR
from .reals.unified_real import UnifiedReal
from .types import AbortedError
from .types import CalculatorError
from .types import CorruptDataError
from .types import DomainError
from .types import EvalResult
from .types import ParseError
from .types import PrecisionOverflowError
from .types import ZeroDivisionException
from .utils.formatting import DisplayContext
from .worker import eval_user_expression
from .worker import evaluate_safely

__version__ = VERSION

__all__ = [
    "AbortedError",
    "BoundedRational",
    "CR",
    "CalculatorError",
    "CalculatorExpr",
    "CorruptDataError",
    "DisplayContext",
    "DomainError",
    "EvalResult",
    "ExprResolver",
    "ExprStore",
    "KeyId",
    "ParseError",
    "PrecisionOverflowError",
    "UnifiedReal",
    "ZeroDivisionException",
    "eval_user_expression",
    "evaluate_safely",
    "__version__",
]
