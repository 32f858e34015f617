import unittest

import pytest

from exactcalc_pkg.expression import keys
from exactcalc_pkg.expression.keys import KeyId
from exactcalc_pkg.types import CorruptDataError
from exactcalc_pkg.utils.formatting import DisplayContext


class TestKeyClassification(unittest.TestCase):
    def test_subtraction_is_binary_and_prefix(self):
        self.assertTrue(keys.is_binary(KeyId.OP_SUB))
        self.assertTrue(keys.is_prefix(KeyId.OP_SUB))
        self.assertFalse(keys.is_suffix(KeyId.OP_SUB))

    def test_suffixes(self):
        for key in (KeyId.OP_FACT, KeyId.OP_PCT, KeyId.OP_SQR):
            self.assertTrue(keys.is_suffix(key), key)
            self.assertFalse(keys.is_binary(key), key)

    def test_functions(self):
        self.assertTrue(keys.is_trig_func(KeyId.FUN_ARCTAN))
        self.assertTrue(keys.is_func(KeyId.FUN_ARCTAN))
        self.assertFalse(keys.is_trig_func(KeyId.FUN_LN))
        self.assertTrue(keys.is_func(KeyId.FUN_EXP))
        self.assertFalse(keys.is_func(KeyId.OP_SQRT))

    def test_digits(self):
        self.assertEqual(keys.digit_value(KeyId.DIGIT_7), 7)
        self.assertEqual(keys.digit_value(KeyId.CONST_PI), keys.NOT_DIGIT)
        self.assertIs(keys.key_for_digit(0), KeyId.DIGIT_0)
        self.assertIsNone(keys.key_for_digit(10))


class TestByteEncoding(unittest.TestCase):
    def test_known_bytes(self):
        self.assertEqual(keys.to_byte(KeyId.CONST_PI), ord("p"))
        self.assertEqual(keys.to_byte(KeyId.FUN_ARCSIN), ord("S"))
        self.assertEqual(keys.to_byte(KeyId.OP_SQR), ord("2"))

    def test_every_operator_round_trips(self):
        for key in KeyId:
            if keys.digit_value(key) != keys.NOT_DIGIT or key is KeyId.DEC_POINT:
                continue
            self.assertIs(keys.from_byte(keys.to_byte(key)), key)

    def test_digits_have_no_byte(self):
        with self.assertRaises(ValueError):
            keys.to_byte(KeyId.DIGIT_3)

    def test_unknown_byte(self):
        with self.assertRaises(CorruptDataError):
            keys.from_byte(ord("z"))


@pytest.mark.parametrize(
    "char, expected",
    [
        ("7", KeyId.DIGIT_7),
        ("٣", KeyId.DIGIT_3),  # arabic-indic three
        (".", KeyId.DEC_POINT),
        ("−", KeyId.OP_SUB),
        ("×", KeyId.OP_MUL),
        ("÷", KeyId.OP_DIV),
        ("π", KeyId.CONST_PI),
        ("²", KeyId.OP_SQR),
        ("√", KeyId.OP_SQRT),
        ("x", None),
    ],
)
def test_key_for_char(char, expected):
    assert keys.key_for_char(char) is expected


def test_key_for_char_uses_context_decimal_point():
    ctx = DisplayContext.default()
    ctx = DisplayContext(ctx.labels, ctx.descriptions, decimal_point="·")
    assert keys.key_for_char("·", ctx) is KeyId.DEC_POINT
    assert keys.key_for_char("·") is None


@pytest.mark.parametrize(
    "text, pos, expected",
    [
        ("sin(30)", 0, KeyId.FUN_SIN),
        ("2+arctan(1)", 2, KeyId.FUN_ARCTAN),
        ("sqrt(2)", 0, KeyId.OP_SQRT),
        ("sin30", 0, None),
        ("foo(1)", 0, None),
    ],
)
def test_fun_for_string(text, pos, expected):
    assert keys.fun_for_string(text, pos) is expected


@pytest.mark.parametrize(
    "text, offset, expected",
    [
        ("E12", 0, 3),
        ("1E-5+2", 1, 4),
        ("E", 0, 0),
        ("E-", 0, 0),
        ("Ex", 0, 0),
        ("E1234567", 0, 8),
        ("E12345678", 0, 0),
        ("2+3", 1, 1),
    ],
)
def test_exponent_end(text, offset, expected):
    assert keys.exponent_end(text, offset) == expected


if __name__ == "__main__":
    unittest.main()
