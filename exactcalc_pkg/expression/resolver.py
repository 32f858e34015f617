"""Lookup of stored expressions referenced by ``PreEval`` tokens."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Optional
from typing import Protocol

from ..logging_config import get_logger
from ..reals.unified_real import UnifiedReal
from ..types import CalculatorError

if TYPE_CHECKING:
    from .expr import CalculatorExpr

logger = get_logger("expression.resolver")


class ExprResolver(Protocol):
    """What evaluation needs to know about other expressions."""

    def get_expr(self, index: int) -> "CalculatorExpr":
        ...

    def get_degree_mode(self, index: int) -> bool:
        ...

    def get_result(self, index: int) -> Optional[UnifiedReal]:
        """Cached value of expression ``index``, or None if not yet evaluated."""
        ...

    def put_result_if_absent(self, index: int, value: UnifiedReal) -> UnifiedReal:
        """Store ``value`` unless a result is already present; return the stored result."""
        ...


@dataclass
class ExprInfo:
    expr: "CalculatorExpr"
    degree_mode: bool = False
    result: Optional[UnifiedReal] = None


class ExprStore:
    """In-memory :class:`ExprResolver` safe to share between evaluation threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._exprs: dict[int, ExprInfo] = {}
        self._next_index = 1

    def add_expr(self, expr: "CalculatorExpr", degree_mode: bool = False) -> int:
        """Store a copy of ``expr`` and return its new index."""
        with self._lock:
            index = self._next_index
            self._next_index += 1
            self._exprs[index] = ExprInfo(expr.clone(), degree_mode)
        logger.debug(f"Stored expression {index} ({len(expr)} tokens)")
        return index

    def set_expr(self, index: int, expr: "CalculatorExpr", degree_mode: bool = False) -> None:
        """Replace expression ``index``, discarding any cached result."""
        with self._lock:
            self._exprs[index] = ExprInfo(expr.clone(), degree_mode)
            if index >= self._next_index:
                self._next_index = index + 1

    def remove(self, index: int) -> None:
        with self._lock:
            self._exprs.pop(index, None)

    def _info(self, index: int) -> ExprInfo:
        with self._lock:
            info = self._exprs.get(index)
        if info is None:
            raise CalculatorError(f"Unknown expression index {index}", code="UNKNOWN_EXPRESSION")
        return info

    def get_expr(self, index: int) -> "CalculatorExpr":
        return self._info(index).expr

    def get_degree_mode(self, index: int) -> bool:
        return self._info(index).degree_mode

    def get_result(self, index: int) -> Optional[UnifiedReal]:
        return self._info(index).result

    def put_result_if_absent(self, index: int, value: UnifiedReal) -> UnifiedReal:
        with self._lock:
            info = self._exprs.get(index)
            if info is None:
                raise CalculatorError(
                    f"Unknown expression index {index}", code="UNKNOWN_EXPRESSION"
                )
            if info.result is None:
                info.result = value
            return info.result

    def __contains__(self, index: object) -> bool:
        with self._lock:
            return index in self._exprs

    def __len__(self) -> int:
        with self._lock:
            return len(self._exprs)
