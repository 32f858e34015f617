"""Expression tokens and their binary encoding.

An expression is a flat sequence of three kinds of token:

    - Operator: a single non-digit key (operators, parentheses, constants,
      function names)
    - Constant: a decimal literal being typed, kept as strings so editing
      is lossless
    - PreEval: a reference to a previously evaluated expression, shown by a
      short representation

The encoding follows Java ``DataOutput`` conventions (big-endian integers,
length prefixed modified UTF-8 strings) so saved expressions stay readable.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO
from typing import Optional
from typing import Union

from .. import config
from ..logging_config import get_logger
from ..reals.bounded_rational import BoundedRational
from ..types import CorruptDataError
from ..types import ParseError
from ..utils.formatting import DisplayContext
from ..utils.formatting import add_commas
from .keys import ELLIPSIS
from .keys import KeyId
from .keys import digit_value
from .keys import from_byte
from .keys import to_byte

logger = get_logger("expression.tokens")

SAW_DECIMAL = 0x1
HAS_EXPONENT = 0x2

_INT = struct.Struct(">i")
_USHORT = struct.Struct(">H")
_INT_MIN = -(1 << 31)
_INT_MAX = (1 << 31) - 1


class TokenKind(IntEnum):
    CONSTANT = 0
    OPERATOR = 1
    PRE_EVAL = 2


@dataclass(frozen=True)
class Operator:
    key: KeyId

    @property
    def kind(self) -> TokenKind:
        return TokenKind.OPERATOR


@dataclass(frozen=True)
class Constant:
    """A decimal literal as typed: ``whole[.fraction][E exponent]``."""

    whole: str = ""
    fraction: str = ""
    saw_decimal: bool = False
    exponent: int = 0

    @property
    def kind(self) -> TokenKind:
        return TokenKind.CONSTANT

    def with_key(self, key: KeyId) -> Optional["Constant"]:
        """The constant after typing ``key``, or None if the key is rejected."""
        if key is KeyId.DEC_POINT:
            if self.saw_decimal or self.exponent != 0:
                return None
            return Constant(self.whole, self.fraction, True, self.exponent)
        val = digit_value(key)
        if self.exponent != 0:
            if abs(self.exponent) > config.MAX_CONSTANT_EXPONENT:
                return None
            if self.exponent > 0:
                exponent = 10 * self.exponent + val
            else:
                exponent = 10 * self.exponent - val
            return Constant(self.whole, self.fraction, self.saw_decimal, exponent)
        if self.saw_decimal:
            return Constant(self.whole, self.fraction + str(val), True, 0)
        return Constant(self.whole + str(val), self.fraction, False, 0)

    def with_exponent(self, exp: int) -> "Constant":
        return Constant(self.whole, self.fraction, self.saw_decimal, exp)

    def deleted(self) -> "Constant":
        """Undo the most recent key: exponent digit, fraction digit, point, then whole digit."""
        if self.exponent != 0:
            exp = abs(self.exponent) // 10
            return self.with_exponent(exp if self.exponent > 0 else -exp)
        if self.fraction:
            return Constant(self.whole, self.fraction[:-1], self.saw_decimal, 0)
        if self.saw_decimal:
            return Constant(self.whole, "", False, 0)
        return Constant(self.whole[:-1], "", False, 0)

    def is_empty(self) -> bool:
        return not self.saw_decimal and not self.whole

    def to_rational(self) -> BoundedRational:
        digits = (self.whole or "0") + self.fraction
        if not self.whole and not self.fraction:
            raise ParseError("Constant without digits")
        num = int(digits)
        den = 10 ** len(self.fraction)
        if self.exponent > 0:
            num *= 10**self.exponent
        elif self.exponent < 0:
            den *= 10 ** (-self.exponent)
        return BoundedRational(num, den)

    def __str__(self) -> str:
        result = self.whole if self.exponent != 0 else add_commas(self.whole)
        if self.saw_decimal:
            result += "." + self.fraction
        if self.exponent != 0:
            result += f"E{self.exponent}"
        return result


@dataclass(frozen=True)
class PreEval:
    """Reference to another stored expression; ``short_rep`` is what the user sees."""

    index: int
    short_rep: str

    @property
    def kind(self) -> TokenKind:
        return TokenKind.PRE_EVAL

    def has_ellipsis(self) -> bool:
        return ELLIPSIS in self.short_rep


Token = Union[Operator, Constant, PreEval]


@dataclass(frozen=True)
class Rendered:
    text: str
    description: Optional[str] = None


def render(token: Token, ctx: DisplayContext) -> Rendered:
    """Localized text of a single token."""
    if isinstance(token, Operator):
        return Rendered(ctx.key_text(token.key), ctx.description(token.key))
    if isinstance(token, Constant):
        return Rendered(ctx.translate_result(str(token)))
    if isinstance(token, PreEval):
        return Rendered(ctx.translate_result(token.short_rep))
    raise TypeError(f"Not a token: {token!r}")


# Modified UTF-8 as written by java.io.DataOutput.writeUTF


def _encode_utf(s: str) -> bytes:
    units = s.encode("utf-16-be", "surrogatepass")
    out = bytearray()
    for i in range(0, len(units), 2):
        c = (units[i] << 8) | units[i + 1]
        if 0x0001 <= c <= 0x007F:
            out.append(c)
        elif c <= 0x07FF:
            out.append(0xC0 | (c >> 6))
            out.append(0x80 | (c & 0x3F))
        else:
            out.append(0xE0 | (c >> 12))
            out.append(0x80 | ((c >> 6) & 0x3F))
            out.append(0x80 | (c & 0x3F))
    if len(out) > 0xFFFF:
        raise ValueError(f"Encoded string too long: {len(out)} bytes")
    return bytes(out)


def _decode_utf(data: bytes) -> str:
    units = bytearray()
    i = 0
    n = len(data)
    try:
        while i < n:
            b = data[i]
            if b < 0x80:
                c = b
                i += 1
            elif b & 0xE0 == 0xC0:
                c = ((b & 0x1F) << 6) | (data[i + 1] & 0x3F)
                i += 2
            elif b & 0xF0 == 0xE0:
                c = ((b & 0x0F) << 12) | ((data[i + 1] & 0x3F) << 6) | (data[i + 2] & 0x3F)
                i += 3
            else:
                raise CorruptDataError(f"Malformed modified UTF-8 at byte {i}")
            units += c.to_bytes(2, "big")
    except IndexError:
        raise CorruptDataError("Truncated modified UTF-8 string") from None
    return units.decode("utf-16-be", "surrogatepass")


def _read_exact(inp: BinaryIO, n: int) -> bytes:
    data = inp.read(n)
    if data is None or len(data) != n:
        raise CorruptDataError("Unexpected end of data")
    return data


def write_int(out: BinaryIO, value: int) -> None:
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"Value does not fit in 32 bits: {value}")
    out.write(_INT.pack(value))


def read_int(inp: BinaryIO) -> int:
    return _INT.unpack(_read_exact(inp, 4))[0]


def _write_utf(out: BinaryIO, s: str) -> None:
    data = _encode_utf(s)
    out.write(_USHORT.pack(len(data)))
    out.write(data)


def _read_utf(inp: BinaryIO) -> str:
    (length,) = _USHORT.unpack(_read_exact(inp, 2))
    return _decode_utf(_read_exact(inp, length))


def write_token(token: Token, out: BinaryIO) -> None:
    if isinstance(token, Operator):
        out.write(bytes([to_byte(token.key)]))
    elif isinstance(token, Constant):
        out.write(bytes([TokenKind.CONSTANT]))
        _write_utf(out, token.whole)
        flags = (SAW_DECIMAL if token.saw_decimal else 0) | (
            HAS_EXPONENT if token.exponent != 0 else 0
        )
        out.write(bytes([flags]))
        if token.saw_decimal:
            _write_utf(out, token.fraction)
        if token.exponent != 0:
            write_int(out, token.exponent)
    elif isinstance(token, PreEval):
        if not _INT_MIN <= token.index <= _INT_MAX:
            raise ValueError(f"Expression index too large to save: {token.index}")
        out.write(bytes([TokenKind.PRE_EVAL]))
        write_int(out, token.index)
        _write_utf(out, token.short_rep)
    else:
        raise TypeError(f"Not a token: {token!r}")


def read_token(inp: BinaryIO) -> Token:
    kind = _read_exact(inp, 1)[0]
    if kind >= 0x20:
        return Operator(from_byte(kind))
    if kind == TokenKind.CONSTANT:
        whole = _read_utf(inp)
        flags = _read_exact(inp, 1)[0]
        fraction = _read_utf(inp) if flags & SAW_DECIMAL else ""
        exponent = read_int(inp) if flags & HAS_EXPONENT else 0
        return Constant(whole, fraction, bool(flags & SAW_DECIMAL), exponent)
    if kind == TokenKind.PRE_EVAL:
        index = read_int(inp)
        short_rep = _read_utf(inp)
        if index == -1:
            logger.warning("Unresolved expression reference; substituting placeholder")
            return Constant(saw_decimal=True)
        return PreEval(index, short_rep)
    raise CorruptDataError(f"Bad token kind byte: {kind:#04x}")
