"""JSON numbers kept as their literal text, and raw undecoded JSON values."""

from __future__ import annotations

import math
import re
from typing import Any

from .iterator import Iterator

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INFINITY_WORDS = frozenset({"inf", "infinity"})
_QUOTE = ord('"')
_LETTER_N = ord("n")


class Number(str):
    """A JSON number held as the literal text it was written with."""

    def __repr__(self) -> str:
        return f"Number({str.__repr__(self)})"

    def to_float(self) -> float:
        """Return the number as a float; raise ValueError if it is not one or is out of range."""
        text = str(self)
        if not text or text != text.strip() or "_" in text:
            raise ValueError(f"invalid syntax: {text!r}")
        value = float(text)
        if math.isinf(value) and text.lstrip("+-").lower() not in _INFINITY_WORDS:
            raise ValueError(f"value out of range: {text!r}")
        return value

    def to_int(self) -> int:
        """Return the number as a signed 64-bit integer; raise ValueError otherwise."""
        text = str(self)
        if not _INTEGER.fullmatch(text):
            raise ValueError(f"invalid syntax: {text!r}")
        value = int(text)
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"value out of range: {text!r}")
        return value


class RawMessage(bytes):
    """The raw bytes of a JSON value, kept without decoding."""

    def __repr__(self) -> str:
        return f"RawMessage({bytes.__repr__(self)})"


def cast_json_number(value: Any) -> str | None:
    """Return the literal text if ``value`` is a Number, otherwise None."""
    if isinstance(value, Number):
        return str(value)
    return None


def decode_number(iterator: Iterator) -> Number:
    """Read a number, a string holding a number, or null (as an empty Number)."""
    c = iterator._next_token()
    if c == _QUOTE:
        iterator._unread_byte()
        return Number(iterator.read_string())
    if c == _LETTER_N:
        iterator._skip_bytes(b"ull", "skipFourBytes")
        return Number("")
    if c is not None:
        iterator._unread_byte()
    return Number(iterator.read_number())


def decode_raw_message(iterator: Iterator) -> RawMessage | None:
    """Read the next value as raw bytes; null reads as None."""
    if iterator.read_nil():
        return None
    return RawMessage(iterator.skip_and_return_bytes())