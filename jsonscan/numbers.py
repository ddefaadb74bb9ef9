"""Reading JSON numbers: bounded integers, floats and arbitrary precision values."""

from __future__ import annotations

import math
import re
import struct
from decimal import Decimal, InvalidOperation
from typing import Callable

from .scanner import Scanner

UINT32_MAX = 0xFFFFFFFF
UINT64_MAX = 0xFFFFFFFFFFFFFFFF

_DIGITS = re.compile(rb"[0-9]*")
_NUMBER_CHARS = re.compile(rb"[-+.eE0-9]*")
_BIG_INT = re.compile(r"[+-]?[0-9]+")
_END_OF_NUMBER = frozenset(b",]} \t\n")
_ZERO = ord("0")
_NINE = ord("9")
_ONE = ord("1")
_MINUS = ord("-")
_DOT = ord(".")
_MAX_UINT64_DIGITS = 20


def validate_float(text: str) -> str | None:
    """Return why ``text`` is not an acceptable float, or None if it is."""
    if not text:
        return "empty number"
    if text[0] == "-":
        return "-- is not valid"
    dot = text.find(".")
    if dot != -1:
        if dot == len(text) - 1:
            return "dot can not be last character"
        if text[dot + 1] not in "0123456789":
            return "missing digit after dot"
    return None


def _to_float64(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise OverflowError(text)
    return value


def _to_float32(text: str) -> float:
    value = _to_float64(text)
    return struct.unpack("f", struct.pack("f", value))[0]


class NumberScanner(Scanner):
    """Scanner that reads JSON numbers into bounded or unbounded values."""

    # -- integers ---------------------------------------------------------

    def read_int(self) -> int:
        return self.read_int64()

    def read_uint(self) -> int:
        return self.read_uint64()

    def read_int8(self) -> int:
        return self._read_signed("ReadInt8", 8)

    def read_int16(self) -> int:
        return self._read_signed("ReadInt16", 16)

    def read_int32(self) -> int:
        return self._read_signed("ReadInt32", 32)

    def read_int64(self) -> int:
        return self._read_signed("ReadInt64", 64)

    def read_uint8(self) -> int:
        return self._read_small_unsigned("ReadUint8", 0xFF)

    def read_uint16(self) -> int:
        return self._read_small_unsigned("ReadUint16", 0xFFFF)

    def read_uint32(self) -> int:
        return self._read_uint32(self._next_token())

    def read_uint64(self) -> int:
        return self._read_uint64(self._next_token())

    def _read_signed(self, operation: str, bits: int) -> int:
        limit = 1 << (bits - 1)
        reader = self._read_uint32 if bits <= 32 else self._read_uint64
        c = self._next_token()
        if c == _MINUS:
            value = reader(self._read_byte())
            if value > limit:
                raise self._error(operation, f"overflow: {value}")
            return -value
        value = reader(c)
        if value > limit - 1:
            raise self._error(operation, f"overflow: {value}")
        return value

    def _read_small_unsigned(self, operation: str, limit: int) -> int:
        value = self._read_uint32(self._next_token())
        if value > limit:
            raise self._error(operation, f"overflow: {value}")
        return value

    def _read_uint32(self, first: int | None) -> int:
        return self._read_unsigned(first, UINT32_MAX, "readUint32")

    def _read_uint64(self, first: int | None) -> int:
        return self._read_unsigned(first, UINT64_MAX, "readUint64")

    def _read_unsigned(self, first: int | None, limit: int, operation: str) -> int:
        if first == _ZERO:
            self._assert_integer()
            return 0
        if first is None or not _ONE <= first <= _NINE:
            raise self._error(operation, f"unexpected character: {self._describe(first)}")
        value = first - _ZERO
        while True:
            match = _DIGITS.match(self._buf, self._head, self._tail)
            digits = match.group()
            if digits:
                if len(digits) > _MAX_UINT64_DIGITS:
                    raise self._error(operation, "overflow")
                value = value * 10 ** len(digits) + int(digits)
                if value > limit:
                    raise self._error(operation, "overflow")
            self._head = match.end()
            if self._head < self._tail or not self._load_more():
                self._assert_integer()
                return value

    def _assert_integer(self) -> None:
        if self._head < self._tail and self._buf[self._head] == _DOT:
            raise self._error("assertInteger", "can not decode float as int")

    # -- floats -----------------------------------------------------------

    def read_float32(self) -> float:
        return self._read_float("readFloat32", _to_float32)

    def read_float64(self) -> float:
        return self._read_float("readFloat64", _to_float64)

    def _read_float(self, operation: str, convert: Callable[[str], float]) -> float:
        c = self._next_token()
        if c == _MINUS:
            return -self._read_positive_float(operation, convert)
        if c is not None:
            self._unread_byte()
        return self._read_positive_float(operation, convert)

    def _read_positive_float(self, operation: str, convert: Callable[[str], float]) -> float:
        if self._head < self._tail:
            first = self._buf[self._head]
            if first in _END_OF_NUMBER:
                raise self._error(operation, "empty number")
            if first == _DOT:
                raise self._error(operation, "leading dot is invalid")
            if first == _ZERO and self._head + 1 < self._tail:
                if _ZERO <= self._buf[self._head + 1] <= _NINE:
                    raise self._error(operation, "leading zero is invalid")
        slow = operation + "SlowPath"
        text = self._read_number_as_string()
        problem = validate_float(text)
        if problem is not None:
            raise self._error(slow, problem)
        try:
            return convert(text)
        except OverflowError:
            raise self._error(slow, f"value out of range: {text}") from None
        except ValueError:
            raise self._error(slow, f"invalid syntax: {text}") from None

    def _read_number_as_string(self) -> str:
        collected = bytearray()
        while True:
            match = _NUMBER_CHARS.match(self._buf, self._head, self._tail)
            collected += match.group()
            self._head = match.end()
            if self._head < self._tail or not self._load_more():
                break
        if not collected:
            raise self._error("readNumberAsString", "invalid number")
        return collected.decode("ascii")

    # -- arbitrary precision ----------------------------------------------

    def read_big_float(self) -> Decimal:
        text = self._read_number_as_string()
        try:
            return Decimal(text)
        except InvalidOperation:
            raise self._error("ReadBigFloat", f"invalid number: {text}") from None

    def read_big_int(self) -> int:
        text = self._read_number_as_string()
        if not _BIG_INT.fullmatch(text):
            raise self._error("ReadBigInt", "invalid big int")
        # Going through Decimal avoids the digit limit on str-to-int conversion.
        return int(Decimal(text))

    def read_number(self) -> str:
        """Return the literal text of the number at the current position."""
        return self._read_number_as_string()