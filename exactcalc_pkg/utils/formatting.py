"""Display helpers: localized key labels and result formatting.

The label table is an explicit, immutable :class:`DisplayContext` passed to
every rendering call.  Callers build a new context when the locale changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Mapping
from typing import Optional

from .. import config
from ..expression.keys import ELLIPSIS
from ..expression.keys import KeyId
from ..expression.keys import is_func
from ..logging_config import get_logger
from ..reals.unified_real import UnifiedReal

logger = get_logger("utils.formatting")

FIGURE_SPACE = " "  # stands in for a digit not yet known

_DEFAULT_LABELS = {
    KeyId.DIGIT_0: "0",
    KeyId.DIGIT_1: "1",
    KeyId.DIGIT_2: "2",
    KeyId.DIGIT_3: "3",
    KeyId.DIGIT_4: "4",
    KeyId.DIGIT_5: "5",
    KeyId.DIGIT_6: "6",
    KeyId.DIGIT_7: "7",
    KeyId.DIGIT_8: "8",
    KeyId.DIGIT_9: "9",
    KeyId.DEC_POINT: ".",
    KeyId.OP_POW: "^",
    KeyId.OP_MUL: "×",
    KeyId.OP_DIV: "÷",
    KeyId.OP_ADD: "+",
    KeyId.OP_SUB: "−",
    KeyId.OP_SQRT: "√",
    KeyId.OP_FACT: "!",
    KeyId.OP_SQR: "²",
    KeyId.OP_PCT: "%",
    KeyId.LPAREN: "(",
    KeyId.RPAREN: ")",
    KeyId.CONST_PI: "π",
    KeyId.CONST_E: "e",
    KeyId.FUN_SIN: "sin",
    KeyId.FUN_COS: "cos",
    KeyId.FUN_TAN: "tan",
    KeyId.FUN_ARCSIN: "sin⁻¹",
    KeyId.FUN_ARCCOS: "cos⁻¹",
    KeyId.FUN_ARCTAN: "tan⁻¹",
    KeyId.FUN_LN: "ln",
    KeyId.FUN_LOG: "log",
    KeyId.FUN_EXP: "exp",
}

_DEFAULT_DESCRIPTIONS = {
    KeyId.OP_FACT: "factorial",
    KeyId.FUN_SIN: "sine",
    KeyId.FUN_COS: "cosine",
    KeyId.FUN_TAN: "tangent",
    KeyId.FUN_ARCSIN: "inverse sine",
    KeyId.FUN_ARCCOS: "inverse cosine",
    KeyId.FUN_ARCTAN: "inverse tangent",
    KeyId.FUN_LN: "natural log",
    KeyId.FUN_LOG: "log",
    KeyId.FUN_EXP: "exponential",
    KeyId.LPAREN: "left parenthesis",
    KeyId.RPAREN: "right parenthesis",
    KeyId.OP_POW: "power",
    KeyId.DEC_POINT: "point",
}

# result characters that pass through translation unchanged
_PASSTHROUGH = frozenset("/()ln√π" + ELLIPSIS)


@dataclass(frozen=True)
class DisplayContext:
    """Immutable localization table for rendering keys and results.

    Attributes:
        labels: Display text for every key (function names without "(")
        descriptions: Optional spoken descriptions for accessibility
        decimal_point: Locale decimal separator
        grouping_separator: Locale thousands separator
        minus_sign: Character used for negative results
    """

    labels: Mapping[KeyId, str]
    descriptions: Mapping[KeyId, str] = field(default_factory=dict)
    decimal_point: str = "."
    grouping_separator: str = ","
    minus_sign: str = "−"

    def __post_init__(self) -> None:
        missing = [key.name for key in KeyId if not self.labels.get(key)]
        if missing:
            raise ValueError(f"DisplayContext missing labels for: {', '.join(missing)}")
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))
        object.__setattr__(
            self, "descriptions", MappingProxyType(dict(self.descriptions))
        )

    @classmethod
    def default(cls) -> "DisplayContext":
        """English labels with calculator style operator glyphs."""
        return cls(labels=_DEFAULT_LABELS, descriptions=_DEFAULT_DESCRIPTIONS)

    def label(self, key: KeyId) -> str:
        return self.labels[key]

    def key_text(self, key: KeyId) -> str:
        """Text shown for a key inside an expression; functions include "("."""
        if is_func(key):
            return self.labels[key] + self.labels[KeyId.LPAREN]
        return self.labels[key]

    def description(self, key: KeyId) -> Optional[str]:
        desc = self.descriptions.get(key)
        if desc is not None and is_func(key):
            lparen = self.descriptions.get(KeyId.LPAREN)
            if lparen:
                return f"{desc} {lparen}"
        return desc

    def translate_result(self, s: str) -> str:
        """Map an internal result string (ASCII digits, '.', ',', '-') to display form."""
        out = []
        length = len(s)
        for i, c in enumerate(s):
            if i >= length - 1 and c == "e":
                continue  # trailing "e" of a dropped exponent
            if c in "eE":
                out.append("E")
            elif c == " ":
                out.append(FIGURE_SPACE)
            elif c == ",":
                out.append(self.grouping_separator)
            elif c == ".":
                out.append(self.decimal_point)
            elif c == "-":
                out.append(self.minus_sign)
            elif "0" <= c <= "9":
                out.append(self.labels[KeyId[f"DIGIT_{c}"]])
            else:
                if c not in _PASSTHROUGH:
                    logger.debug(f"Untranslated result character: {c!r}")
                out.append(c)
        return "".join(out)


def add_commas(s: str, begin: int = 0, end: Optional[int] = None) -> str:
    """Insert ',' every three digits of ``s[begin:end]``, skipping a leading sign."""
    if end is None:
        end = len(s)
    current = begin
    while current < end and s[current] in "- ":
        current += 1
    result = [s[begin:current]]
    while current < end:
        result.append(s[current])
        current += 1
        if (end - current) % 3 == 0 and end != current:
            result.append(",")
    return "".join(result)


def _exact_decimal(value: UnifiedReal, digits: int) -> str:
    text = value.to_string_truncated(digits)
    if digits == 0:
        return text.rstrip(".")
    return text


def approximate_decimal(value: UnifiedReal, digits: int | None = None) -> str:
    """Exact decimal if it fits in ``digits`` places, else a truncation ending in an ellipsis."""
    if digits is None:
        digits = config.OUTPUT_DIGITS
    required = value.digits_required()
    if required <= digits:
        return _exact_decimal(value, required)
    return value.to_string_truncated(digits) + ELLIPSIS


def format_result(value: UnifiedReal, digits: int | None = None) -> str:
    """Human readable rendering of an evaluation result.

    Rationals that terminate within ``digits`` decimals are printed exactly;
    values with a recognized symbolic form are shown as ``form ≈ decimal``;
    anything else is a truncated decimal ending in an ellipsis.
    """
    approx = approximate_decimal(value, digits)
    if approx.endswith(ELLIPSIS) and value.exactly_displayable():
        return f"{value.to_nice_string()} ≈ {approx}"
    return approx


def short_representation(value: UnifiedReal, digits: int | None = None) -> str:
    """Compact decimal stored in PreEval tokens; ends in an ellipsis if inexact."""
    if digits is None:
        digits = config.SHORT_REP_DIGITS
    return approximate_decimal(value, digits)
