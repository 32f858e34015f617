"""Calculator key identifiers and the tables built on them.

Key Contents:
    - KeyId: closed enumeration of every button an expression can contain
    - Classification predicates (binary, prefix, suffix, function, digit)
    - The single byte operator encoding used by the persistence format
    - Mapping of typed or pasted text onto key presses
"""

from __future__ import annotations

import unicodedata
from enum import Enum
from enum import auto
from typing import TYPE_CHECKING
from typing import Optional

from .. import config
from ..types import CorruptDataError

if TYPE_CHECKING:
    from ..utils.formatting import DisplayContext

NOT_DIGIT = 10
ELLIPSIS = "…"
MINUS_SIGN = "−"


class KeyId(Enum):
    """Every key that can appear in an expression."""

    DIGIT_0 = auto()
    DIGIT_1 = auto()
    DIGIT_2 = auto()
    DIGIT_3 = auto()
    DIGIT_4 = auto()
    DIGIT_5 = auto()
    DIGIT_6 = auto()
    DIGIT_7 = auto()
    DIGIT_8 = auto()
    DIGIT_9 = auto()
    DEC_POINT = auto()
    OP_POW = auto()  # binary
    OP_MUL = auto()
    OP_DIV = auto()
    OP_ADD = auto()
    OP_SUB = auto()  # binary and prefix
    OP_SQRT = auto()  # prefix
    OP_FACT = auto()  # suffix
    OP_SQR = auto()
    OP_PCT = auto()
    LPAREN = auto()
    RPAREN = auto()
    CONST_PI = auto()
    CONST_E = auto()
    FUN_SIN = auto()
    FUN_COS = auto()
    FUN_TAN = auto()
    FUN_ARCSIN = auto()
    FUN_ARCCOS = auto()
    FUN_ARCTAN = auto()
    FUN_LN = auto()
    FUN_LOG = auto()
    FUN_EXP = auto()


_DIGITS = (
    KeyId.DIGIT_0,
    KeyId.DIGIT_1,
    KeyId.DIGIT_2,
    KeyId.DIGIT_3,
    KeyId.DIGIT_4,
    KeyId.DIGIT_5,
    KeyId.DIGIT_6,
    KeyId.DIGIT_7,
    KeyId.DIGIT_8,
    KeyId.DIGIT_9,
)
_DIGIT_VALUES = {key: value for value, key in enumerate(_DIGITS)}

_BINARY = frozenset(
    {KeyId.OP_POW, KeyId.OP_MUL, KeyId.OP_DIV, KeyId.OP_ADD, KeyId.OP_SUB}
)
_PREFIX = frozenset({KeyId.OP_SQRT, KeyId.OP_SUB})
_SUFFIX = frozenset({KeyId.OP_FACT, KeyId.OP_PCT, KeyId.OP_SQR})
_TRIG_FUNCS = frozenset(
    {
        KeyId.FUN_SIN,
        KeyId.FUN_COS,
        KeyId.FUN_TAN,
        KeyId.FUN_ARCSIN,
        KeyId.FUN_ARCCOS,
        KeyId.FUN_ARCTAN,
    }
)
_FUNCS = _TRIG_FUNCS | {KeyId.FUN_LN, KeyId.FUN_LOG, KeyId.FUN_EXP}

# Persistent single byte encoding; must never change.
_TO_BYTE = {
    KeyId.CONST_PI: "p",
    KeyId.CONST_E: "e",
    KeyId.OP_SQRT: "r",
    KeyId.OP_FACT: "!",
    KeyId.OP_PCT: "%",
    KeyId.FUN_SIN: "s",
    KeyId.FUN_COS: "c",
    KeyId.FUN_TAN: "t",
    KeyId.FUN_ARCSIN: "S",
    KeyId.FUN_ARCCOS: "C",
    KeyId.FUN_ARCTAN: "T",
    KeyId.FUN_LN: "l",
    KeyId.FUN_LOG: "L",
    KeyId.FUN_EXP: "E",
    KeyId.LPAREN: "(",
    KeyId.RPAREN: ")",
    KeyId.OP_POW: "^",
    KeyId.OP_MUL: "*",
    KeyId.OP_DIV: "/",
    KeyId.OP_ADD: "+",
    KeyId.OP_SUB: "-",
    KeyId.OP_SQR: "2",
}
_FROM_BYTE = {ord(ch): key for key, ch in _TO_BYTE.items()}

_CHAR_KEYS = {
    ".": KeyId.DEC_POINT,
    ",": KeyId.DEC_POINT,
    "-": KeyId.OP_SUB,
    MINUS_SIGN: KeyId.OP_SUB,
    "+": KeyId.OP_ADD,
    "*": KeyId.OP_MUL,
    "×": KeyId.OP_MUL,  # multiplication sign
    "/": KeyId.OP_DIV,
    "÷": KeyId.OP_DIV,  # division sign
    "e": KeyId.CONST_E,
    "E": KeyId.CONST_E,
    "p": KeyId.CONST_PI,
    "P": KeyId.CONST_PI,
    "π": KeyId.CONST_PI,
    "^": KeyId.OP_POW,
    "!": KeyId.OP_FACT,
    "%": KeyId.OP_PCT,
    "(": KeyId.LPAREN,
    ")": KeyId.RPAREN,
    "√": KeyId.OP_SQRT,
    "²": KeyId.OP_SQR,
}

_FUNCTION_NAMES = {
    "sin": KeyId.FUN_SIN,
    "cos": KeyId.FUN_COS,
    "tan": KeyId.FUN_TAN,
    "arcsin": KeyId.FUN_ARCSIN,
    "arccos": KeyId.FUN_ARCCOS,
    "arctan": KeyId.FUN_ARCTAN,
    "asin": KeyId.FUN_ARCSIN,
    "acos": KeyId.FUN_ARCCOS,
    "atan": KeyId.FUN_ARCTAN,
    "ln": KeyId.FUN_LN,
    "log": KeyId.FUN_LOG,
    "exp": KeyId.FUN_EXP,
    "sqrt": KeyId.OP_SQRT,
}


def is_binary(key: KeyId) -> bool:
    return key in _BINARY


def is_prefix(key: KeyId) -> bool:
    return key in _PREFIX


def is_suffix(key: KeyId) -> bool:
    return key in _SUFFIX


def is_trig_func(key: KeyId) -> bool:
    return key in _TRIG_FUNCS


def is_func(key: KeyId) -> bool:
    return key in _FUNCS


def digit_value(key: KeyId) -> int:
    """Value of a digit key, or NOT_DIGIT."""
    return _DIGIT_VALUES.get(key, NOT_DIGIT)


def key_for_digit(value: int) -> Optional[KeyId]:
    if 0 <= value <= 9:
        return _DIGITS[value]
    return None


def to_byte(key: KeyId) -> int:
    """Persistent encoding of an operator key; digits have none."""
    try:
        return ord(_TO_BYTE[key])
    except KeyError:
        raise ValueError(f"Key {key.name} has no byte encoding") from None


def from_byte(b: int) -> KeyId:
    key = _FROM_BYTE.get(b)
    if key is None:
        raise CorruptDataError(f"Unexpected single byte operator encoding: {b:#04x}")
    return key


def key_for_char(c: str, ctx: Optional["DisplayContext"] = None) -> Optional[KeyId]:
    """Key that typing ``c`` corresponds to, or None."""
    if c.isdecimal():
        return key_for_digit(unicodedata.decimal(c))
    key = _CHAR_KEYS.get(c)
    if key is not None:
        return key
    if ctx is not None:
        if c == ctx.decimal_point:
            return KeyId.DEC_POINT
        pi_label = ctx.label(KeyId.CONST_PI)
        if len(pi_label) == 1 and c == pi_label:
            return KeyId.CONST_PI
    return None


def fun_for_string(
    s: str, pos: int, ctx: Optional["DisplayContext"] = None
) -> Optional[KeyId]:
    """Function key whose name starts at ``s[pos]`` and is followed by ``(``."""
    paren_pos = s.find("(", pos)
    if paren_pos == -1:
        return None
    name = s[pos:paren_pos]
    key = _FUNCTION_NAMES.get(name)
    if key is None and ctx is not None:
        for candidate in _FUNCS:
            if ctx.label(candidate) == name:
                return candidate
    return key


def exponent_end(s: str, offset: int) -> int:
    """End of an ``E[-]digits`` exponent starting at ``offset``, or ``offset`` if none."""
    i = offset
    length = len(s)
    if i >= length - 1 or s[i] != "E":
        return offset
    i += 1
    if key_for_char(s[i]) is KeyId.OP_SUB:
        i += 1
    if i == length or not s[i].isdecimal():
        return offset
    i += 1
    while i < length and s[i].isdecimal():
        i += 1
        if i > offset + config.MAX_EXPONENT_CHARS:
            return offset
    return i
