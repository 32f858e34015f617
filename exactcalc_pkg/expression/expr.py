"""Editable calculator expressions and their evaluation.

A :class:`CalculatorExpr` is the token list behind the formula display.  It is
edited key by key (``add``/``delete``), can embed references to other stored
expressions (``PreEval`` tokens), and evaluates to a :class:`UnifiedReal` with
a small recursive descent parser:

    expr   := term { ('+' | '-') (percent | term) }
    term   := signed { ['×' | '÷'] signed }        juxtaposition multiplies
    signed := ['-'] factor
    factor := suffix ['^' signed]
    suffix := unary { '!' | '²' | '%' }
    unary  := constant | pre-eval | π | e | '√' ['-'] unary
            | '(' expr [')'] | function expr [')']

Trailing binary operators are ignored, so a half typed expression such as
``2+3×`` still has a value.
"""

from __future__ import annotations

import io
from typing import BinaryIO
from typing import Iterable
from typing import NamedTuple
from typing import Optional

from ..logging_config import get_logger
from ..reals import unified_real as ur
from ..reals.unified_real import UnifiedReal
from ..types import ParseError
from ..utils.formatting import DisplayContext
from .keys import NOT_DIGIT
from .keys import KeyId
from .keys import digit_value
from .keys import exponent_end
from .keys import fun_for_string
from .keys import is_binary
from .keys import is_func
from .keys import is_prefix
from .keys import is_trig_func
from .keys import key_for_char
from .resolver import ExprResolver
from .tokens import Constant
from .tokens import Operator
from .tokens import PreEval
from .tokens import Rendered
from .tokens import Token
from .tokens import read_int
from .tokens import read_token
from .tokens import render
from .tokens import write_int
from .tokens import write_token

logger = get_logger("expression.expr")

ONE_HUNDREDTH = UnifiedReal(100).inverse()

# the × that add() puts between a PreEval and a new literal; delete() matches it by identity
_INSERTED_MUL = Operator(KeyId.OP_MUL)

_UNARY_FUNCS = {
    KeyId.FUN_LN: UnifiedReal.ln,
    KeyId.FUN_EXP: UnifiedReal.exp,
}


class _EvalContext(NamedTuple):
    degree_mode: bool
    prefix_length: int  # tokens at or past this index are not part of the input
    resolver: ExprResolver


class _EvalRet(NamedTuple):
    pos: int  # first token not consumed
    val: UnifiedReal


class CalculatorExpr:
    """Token list for one formula, with editing, evaluation and persistence."""

    def __init__(self, tokens: Optional[Iterable[Token]] = None):
        self._tokens: list[Token] = list(tokens) if tokens is not None else []

    # Queries

    @property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"CalculatorExpr({self._tokens!r})"

    def is_empty(self) -> bool:
        return not self._tokens

    def is_constant(self) -> bool:
        """True when the whole expression is a single literal."""
        return len(self._tokens) == 1 and isinstance(self._tokens[0], Constant)

    def has_trailing_constant(self) -> bool:
        return bool(self._tokens) and isinstance(self._tokens[-1], Constant)

    def has_trailing_binary(self) -> bool:
        if not self._tokens:
            return False
        last = self._tokens[-1]
        return isinstance(last, Operator) and is_binary(last.key)

    def trailing_binary_ops_start(self) -> int:
        result = len(self._tokens)
        while result > 0:
            last = self._tokens[result - 1]
            if not isinstance(last, Operator) or not is_binary(last.key):
                break
            result -= 1
        return result

    def has_interesting_ops(self) -> bool:
        """Is the expression worth evaluating beyond echoing a literal?"""
        last = self.trailing_binary_ops_start()
        first = 0
        if last > first and self._is_operator_unchecked(first, KeyId.OP_SUB):
            first += 1  # a leading minus alone is not interesting
        for token in self._tokens[first:last]:
            if isinstance(token, Operator):
                return True
            if isinstance(token, PreEval) and token.has_ellipsis():
                return True
        return False

    def has_trig_funcs(self) -> bool:
        return any(
            isinstance(t, Operator) and is_trig_func(t.key) for t in self._tokens
        )

    # Editing

    def add(self, key: KeyId) -> bool:
        """Append one key press.

        A binary operator replaces any trailing binary operators.  Returns
        False if the key cannot be added here (the expression is unchanged).
        """
        last = self._tokens[-1] if self._tokens else None
        last_op = last.key if isinstance(last, Operator) else None
        if is_binary(key) and not is_prefix(key):
            if (
                last is None
                or last_op is KeyId.LPAREN
                or (last_op is not None and is_func(last_op))
                or (last_op is not None and is_prefix(last_op) and last_op is not KeyId.OP_SUB)
            ):
                return False
            while self.has_trailing_binary():
                self.delete()

        if digit_value(key) != NOT_DIGIT or key is KeyId.DEC_POINT:
            # juxtaposition is multiplication, so a literal may start anywhere
            if isinstance(last, Constant):
                updated = last.with_key(key)
                if updated is None:
                    return False
                self._tokens[-1] = updated
                return True
            started = Constant().with_key(key)
            if started is None:
                return False
            if isinstance(last, PreEval):
                self._tokens.append(_INSERTED_MUL)
            self._tokens.append(started)
            return True

        self._tokens.append(Operator(key))
        return True

    def add_exponent(self, exp: int) -> None:
        """Set the exponent of the trailing literal."""
        if not self.has_trailing_constant():
            raise ValueError("add_exponent requires a trailing constant")
        self._tokens[-1] = self._tokens[-1].with_exponent(exp)

    def delete(self) -> None:
        """Undo the effect of the last key; a no-op on an empty expression."""
        if not self._tokens:
            return
        last = self._tokens[-1]
        if isinstance(last, Constant):
            shorter = last.deleted()
            if not shorter.is_empty():
                self._tokens[-1] = shorter
                return
            self._tokens.pop()
            if self._tokens and self._tokens[-1] is _INSERTED_MUL:
                self._tokens.pop()
            return
        self._tokens.pop()

    def remove_trailing_additive_operators(self) -> None:
        while self._tokens:
            last = self._tokens[-1]
            if not isinstance(last, Operator) or last.key not in (KeyId.OP_ADD, KeyId.OP_SUB):
                break
            self._tokens.pop()

    def append(self, other: "CalculatorExpr") -> None:
        """Concatenate ``other``, inserting × between two adjacent operands."""
        if self._tokens and other._tokens:
            if not isinstance(self._tokens[-1], Operator) and not isinstance(
                other._tokens[0], Operator
            ):
                self._tokens.append(Operator(KeyId.OP_MUL))
        self._tokens.extend(other._tokens)

    def clear(self) -> None:
        self._tokens.clear()

    def clone(self) -> "CalculatorExpr":
        return CalculatorExpr(self._tokens)

    @classmethod
    def abbreviate(cls, index: int, short_rep: str) -> "CalculatorExpr":
        """A one token expression standing for stored expression ``index``."""
        return cls([PreEval(index, short_rep)])

    def add_string(self, text: str, ctx: Optional[DisplayContext] = None) -> str:
        """Feed pasted or typed text in as key presses.

        Whitespace and grouping separators are skipped, ``E`` directly after a
        digit starts an exponent, and function names must be followed by
        ``(``.  Returns the part of ``text`` that could not be converted
        ("" if everything was used).
        """
        grouping = ctx.grouping_separator if ctx is not None else ","
        current = 0
        length = len(text)
        last_was_digit = False
        while current < length:
            c = text[current]
            if c.isspace() or c == grouping:
                current += 1
                continue
            key = key_for_char(c, ctx)
            exp_end = exponent_end(text, current)
            if last_was_digit and exp_end != current:
                self.add_exponent(_parse_exponent(text, current, exp_end))
                current = exp_end
                last_was_digit = False
                continue
            is_digit = key is not None and digit_value(key) != NOT_DIGIT
            if (
                current == 0
                and (is_digit or key is KeyId.DEC_POINT)
                and self.has_trailing_constant()
            ):
                # never extend an existing literal with pasted digits
                self.add(KeyId.OP_MUL)
            last_was_digit = is_digit or (last_was_digit and key is KeyId.DEC_POINT)
            # "exp(" is a function, not e followed by junk
            func = fun_for_string(text, current, ctx) if c.isalpha() else None
            if key is not None and func is None:
                self.add(key)
                current += 1
                continue
            if func is not None:
                self.add(func)
                if func is KeyId.OP_SQRT:
                    self.add(KeyId.LPAREN)
                current = text.index("(", current) + 1
                continue
            logger.debug(f"Unconvertible input at offset {current}: {text[current:]!r}")
            return text[current:]
        return ""

    # Display

    def render(self, ctx: DisplayContext) -> list[Rendered]:
        return [render(t, ctx) for t in self._tokens]

    def to_text(self, ctx: DisplayContext) -> str:
        return "".join(r.text for r in self.render(ctx))

    # Evaluation

    def _is_operator_unchecked(self, i: int, op: KeyId) -> bool:
        token = self._tokens[i]
        return isinstance(token, Operator) and token.key is op

    def _is_operator(self, i: int, op: KeyId, ec: _EvalContext) -> bool:
        if i >= ec.prefix_length:
            return False
        return self._is_operator_unchecked(i, op)

    @staticmethod
    def _to_radians(x: UnifiedReal, ec: _EvalContext) -> UnifiedReal:
        return x.multiply(ur.RADIANS_PER_DEGREE) if ec.degree_mode else x

    @staticmethod
    def _from_radians(x: UnifiedReal, ec: _EvalContext) -> UnifiedReal:
        return x.divide(ur.RADIANS_PER_DEGREE) if ec.degree_mode else x

    def _eval_function_arg(self, i: int, ec: _EvalContext) -> _EvalRet:
        # the function token itself stands for the opening parenthesis
        arg = self._eval_expr(i, ec)
        if self._is_operator(arg.pos, KeyId.RPAREN, ec):
            return _EvalRet(arg.pos + 1, arg.val)
        return arg

    def _eval_unary(self, i: int, ec: _EvalContext) -> _EvalRet:
        if i >= ec.prefix_length:
            raise ParseError("Unexpected expression end")
        token = self._tokens[i]
        if isinstance(token, Constant):
            return _EvalRet(i + 1, UnifiedReal(token.to_rational()))
        if isinstance(token, PreEval):
            res = ec.resolver.get_result(token.index)
            if res is None:
                res = CalculatorExpr.nested_eval(token.index, ec.resolver)
            return _EvalRet(i + 1, res)

        key = token.key
        if key is KeyId.CONST_PI:
            return _EvalRet(i + 1, ur.PI)
        if key is KeyId.CONST_E:
            return _EvalRet(i + 1, ur.E)
        if key is KeyId.OP_SQRT:
            # binds tighter than anything else; accepts a leading minus
            if self._is_operator(i + 1, KeyId.OP_SUB, ec):
                arg = self._eval_unary(i + 2, ec)
                return _EvalRet(arg.pos, arg.val.negate().sqrt())
            arg = self._eval_unary(i + 1, ec)
            return _EvalRet(arg.pos, arg.val.sqrt())
        if key is KeyId.LPAREN:
            return self._eval_function_arg(i + 1, ec)
        if not is_func(key):
            raise ParseError(f"Unrecognized token in expression: {key.name}")

        arg = self._eval_function_arg(i + 1, ec)
        x = arg.val
        if key is KeyId.FUN_SIN:
            val = self._to_radians(x, ec).sin()
        elif key is KeyId.FUN_COS:
            val = self._to_radians(x, ec).cos()
        elif key is KeyId.FUN_TAN:
            val = self._to_radians(x, ec).tan()
        elif key is KeyId.FUN_LOG:
            val = x.ln().divide(ur.TEN.ln())
        elif key is KeyId.FUN_ARCSIN:
            val = self._from_radians(x.asin(), ec)
        elif key is KeyId.FUN_ARCCOS:
            val = self._from_radians(x.acos(), ec)
        elif key is KeyId.FUN_ARCTAN:
            val = self._from_radians(x.atan(), ec)
        else:
            val = _UNARY_FUNCS[key](x)
        return _EvalRet(arg.pos, val)

    def _eval_suffix(self, i: int, ec: _EvalContext) -> _EvalRet:
        pos, val = self._eval_unary(i, ec)
        while True:
            if self._is_operator(pos, KeyId.OP_FACT, ec):
                val = val.fact()
            elif self._is_operator(pos, KeyId.OP_SQR, ec):
                val = val.multiply(val)
            elif self._is_operator(pos, KeyId.OP_PCT, ec):
                val = val.multiply(ONE_HUNDREDTH)
            else:
                break
            pos += 1
        return _EvalRet(pos, val)

    def _eval_factor(self, i: int, ec: _EvalContext) -> _EvalRet:
        pos, val = self._eval_suffix(i, ec)
        if self._is_operator(pos, KeyId.OP_POW, ec):
            exp = self._eval_signed_factor(pos + 1, ec)
            return _EvalRet(exp.pos, val.pow(exp.val))
        return _EvalRet(pos, val)

    def _eval_signed_factor(self, i: int, ec: _EvalContext) -> _EvalRet:
        negative = self._is_operator(i, KeyId.OP_SUB, ec)
        pos, val = self._eval_factor(i + 1 if negative else i, ec)
        return _EvalRet(pos, val.negate() if negative else val)

    def _can_start_factor(self, i: int, ec: _EvalContext) -> bool:
        if i >= ec.prefix_length:
            return False
        token = self._tokens[i]
        if not isinstance(token, Operator):
            return True
        if is_binary(token.key):
            return False
        return token.key not in (KeyId.OP_FACT, KeyId.RPAREN)

    def _eval_term(self, i: int, ec: _EvalContext) -> _EvalRet:
        pos, val = self._eval_signed_factor(i, ec)
        while True:
            is_mul = self._is_operator(pos, KeyId.OP_MUL, ec)
            is_div = not is_mul and self._is_operator(pos, KeyId.OP_DIV, ec)
            if not (is_mul or is_div or self._can_start_factor(pos, ec)):
                break
            if is_mul or is_div:
                pos += 1
            factor = self._eval_signed_factor(pos, ec)
            val = val.divide(factor.val) if is_div else val.multiply(factor.val)
            pos = factor.pos
        return _EvalRet(pos, val)

    def _is_percent(self, pos: int) -> bool:
        """Is ``pos`` a bare operand followed by % and then nothing, +, - or )?

        ``100+10%`` means 110, while ``100+(10)%`` is the naive 100.1.
        """
        if len(self._tokens) < pos + 2 or not self._is_operator_unchecked(
            pos + 1, KeyId.OP_PCT
        ):
            return False
        if isinstance(self._tokens[pos], Operator):
            return False
        if len(self._tokens) == pos + 2:
            return True
        after = self._tokens[pos + 2]
        if not isinstance(after, Operator):
            return False
        return after.key in (KeyId.OP_ADD, KeyId.OP_SUB, KeyId.RPAREN)

    def _get_percent_factor(
        self, pos: int, is_subtraction: bool, ec: _EvalContext
    ) -> _EvalRet:
        val = self._eval_unary(pos, ec).val
        if is_subtraction:
            val = val.negate()
        return _EvalRet(pos + 2, ur.ONE.add(val.multiply(ONE_HUNDREDTH)))

    def _eval_expr(self, i: int, ec: _EvalContext) -> _EvalRet:
        pos, val = self._eval_term(i, ec)
        while True:
            is_plus = self._is_operator(pos, KeyId.OP_ADD, ec)
            if not (is_plus or self._is_operator(pos, KeyId.OP_SUB, ec)):
                break
            if self._is_percent(pos + 1):
                factor = self._get_percent_factor(pos + 1, not is_plus, ec)
                val = val.multiply(factor.val)
                pos = factor.pos
            else:
                term = self._eval_term(pos + 1, ec)
                val = val.add(term.val) if is_plus else val.subtract(term.val)
                pos = term.pos
        return _EvalRet(pos, val)

    def _add_referenced_exprs(self, indices: list[int], resolver: ExprResolver) -> None:
        for token in self._tokens:
            if isinstance(token, PreEval):
                if resolver.get_result(token.index) is None and token.index not in indices:
                    indices.append(token.index)

    def get_transitively_referenced_exprs(self, resolver: ExprResolver) -> list[int]:
        """Unevaluated expressions this one depends on, directly or not.

        The order is reversed breadth first search, which evaluates simple
        chains of references innermost first.  It is not a full topological
        order, so evaluating in list order can still recurse occasionally.
        """
        indices: list[int] = []
        self._add_referenced_exprs(indices, resolver)
        scanned = 0
        while scanned != len(indices):
            resolver.get_expr(indices[scanned])._add_referenced_exprs(indices, resolver)
            scanned += 1
        indices.reverse()
        return indices

    @staticmethod
    def nested_eval(index: int, resolver: ExprResolver) -> UnifiedReal:
        """Evaluate stored expression ``index``, save the result and return the saved value."""
        nested = resolver.get_expr(index)
        ec = _EvalContext(
            resolver.get_degree_mode(index), nested.trailing_binary_ops_start(), resolver
        )
        value = nested._eval_expr(0, ec).val
        return resolver.put_result_if_absent(index, value)

    def eval(self, degree_mode: bool, resolver: ExprResolver) -> UnifiedReal:
        """Value of the expression, ignoring trailing binary operators.

        Raises:
            ParseError: If the tokens do not form a complete expression
            CalculatorError: Arithmetic failures from the real number layer
        """
        for index in self.get_transitively_referenced_exprs(resolver):
            CalculatorExpr.nested_eval(index, resolver)
        prefix_length = self.trailing_binary_ops_start()
        logger.debug(f"Evaluating {prefix_length} tokens (degree_mode={degree_mode})")
        ec = _EvalContext(degree_mode, prefix_length, resolver)
        res = self._eval_expr(0, ec)
        if res.pos != prefix_length:
            raise ParseError("Failed to parse full expression")
        return res.val

    # Persistence

    def write(self, out: BinaryIO) -> None:
        write_int(out, len(self._tokens))
        for token in self._tokens:
            write_token(token, out)

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.write(buffer)
        return buffer.getvalue()

    @classmethod
    def read(cls, inp: BinaryIO) -> "CalculatorExpr":
        count = read_int(inp)
        return cls(read_token(inp) for _ in range(count))

    @classmethod
    def from_bytes(cls, data: bytes) -> "CalculatorExpr":
        return cls.read(io.BytesIO(data))


def _parse_exponent(text: str, start: int, end: int) -> int:
    """Value of the ``E[-]digits`` exponent in ``text[start:end]``."""
    i = start + 1  # skip "E"
    sign = 1
    if key_for_char(text[i]) is KeyId.OP_SUB:
        sign = -1
        i += 1
    return sign * int(text[i:end])
