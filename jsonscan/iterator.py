"""Streaming JSON iterator: objects, literals, and validating skips of values."""

from __future__ import annotations

import re
from typing import Any, Callable

from .numbers import NumberScanner
from .scanner import DEFAULT_BUFFER_SIZE

DEFAULT_MAX_DEPTH = 10000

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x1000193
_UINT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63

_QUOTE = ord('"')
_COLON = ord(":")
_COMMA = ord(",")
_LBRACE = ord("{")
_RBRACE = ord("}")
_LBRACKET = ord("[")
_RBRACKET = ord("]")
_DOT = ord(".")
_LETTER_N = ord("n")
_LETTER_T = ord("t")
_LETTER_F = ord("f")
_ZERO = ord("0")

_NUMBER_START = frozenset(b"-123456789")
_NUMBER_END = frozenset(b",]} \t\n\r")
_DIGITS = frozenset(b"0123456789")
_STRING_STOP = re.compile(rb'["\\\x00-\x1f]')

ObjectCallback = Callable[["Iterator", str], bool]


def _fnv_hash(data: bytes) -> int:
    value = _FNV_OFFSET
    for b in data:
        value = ((value ^ b) * _FNV_PRIME) & _UINT64_MASK
    return value - (1 << 64) if value >= _INT64_SIGN else value


def field_hash(name: str, case_sensitive: bool = False) -> int:
    """Hash a field name the way field lookups do, as a signed 64-bit value."""
    if not case_sensitive:
        name = name.lower()
    return _fnv_hash(name.encode("utf-8"))


class Iterator(NumberScanner):
    """Reads JSON values one at a time, tracking nesting depth."""

    def __init__(
        self,
        source: Any = b"",
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        case_sensitive: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._depth = 0
        self.case_sensitive = case_sensitive
        self.max_depth = max_depth
        self.attachment: Any = None
        super().__init__(source, buffer_size)

    def reset(self, data: Any) -> None:
        super().reset(data)
        self._depth = 0

    # -- nesting ----------------------------------------------------------

    def _increment_depth(self) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            raise self._error("incrementDepth", "exceeded max depth")

    def _decrement_depth(self) -> None:
        self._depth -= 1
        if self._depth < 0:
            raise self._error("decrementDepth", "unexpected negative nesting")

    def _expect_colon(self, operation: str) -> None:
        c = self._next_token()
        if c != _COLON:
            raise self._error(
                operation, f"expect : after object field, but found {self._describe(c)}"
            )

    # -- objects ----------------------------------------------------------

    def read_object(self) -> str | None:
        """Read the next field name of an object; None once the object ends or is null."""
        c = self._next_token()
        if c == _LETTER_N:
            self._skip_bytes(b"ull", "skipThreeBytes")
            return None
        if c == _LBRACE:
            c = self._next_token()
            if c == _QUOTE:
                self._unread_byte()
                field = self.read_string()
                self._expect_colon("ReadObject")
                return field
            if c == _RBRACE:
                return None
            raise self._error("ReadObject", f'expect " after {{, but found {self._describe(c)}')
        if c == _COMMA:
            field = self.read_string()
            self._expect_colon("ReadObject")
            return field
        if c == _RBRACE:
            return None
        raise self._error(
            "ReadObject", f"expect {{ or , or }} or n, but found {self._describe(c)}"
        )

    def _walk_object(self, callback: ObjectCallback, operation: str, colon_operation: str) -> bool:
        c = self._next_token()
        if c == _LBRACE:
            self._increment_depth()
            c = self._next_token()
            if c == _QUOTE:
                self._unread_byte()
                while True:
                    field = self.read_string()
                    self._expect_colon(colon_operation)
                    if not callback(self, field):
                        self._decrement_depth()
                        return False
                    c = self._next_token()
                    if c != _COMMA:
                        break
                if c != _RBRACE:
                    raise self._error(operation, "object not ended with }")
                self._decrement_depth()
                return True
            if c == _RBRACE:
                self._decrement_depth()
                return True
            raise self._error(operation, f'expect " after {{, but found {self._describe(c)}')
        if c == _LETTER_N:
            self._skip_bytes(b"ull", "skipThreeBytes")
            return True
        raise self._error(operation, f"expect {{ or n, but found {self._describe(c)}")

    def read_object_cb(self, callback: ObjectCallback) -> bool:
        """Call ``callback(iterator, field)`` for each field; stop early when it returns false."""
        return self._walk_object(callback, "ReadObjectCB", "ReadObject")

    def read_map_cb(self, callback: ObjectCallback) -> bool:
        """Like read_object_cb, for objects whose keys may be any string."""
        return self._walk_object(callback, "ReadMapCB", "ReadMapCB")

    def _read_object_start(self) -> bool:
        c = self._next_token()
        if c == _LBRACE:
            c = self._next_token()
            if c == _RBRACE:
                return False
            self._unread_byte()
            return True
        if c == _LETTER_N:
            self._skip_bytes(b"ull", "skipThreeBytes")
            return False
        raise self._error("readObjectStart", f"expect {{ or n, but found {self._describe(c)}")

    def _read_field_hash(self) -> int:
        c = self._next_token()
        if c != _QUOTE:
            raise self._error("readFieldHash", f'expect ", but found {self._describe(c)}')
        self._unread_byte()
        data = self.read_string().encode("utf-8")
        if not self.case_sensitive:
            data = data.lower()
        c = self._next_token()
        if c != _COLON:
            raise self._error("readFieldHash", f"expect :, but found {self._describe(c)}")
        return _fnv_hash(data)

    def _read_object_field_as_bytes(self) -> bytes:
        field = bytes(self.read_string_as_bytes())
        self._expect_colon("readObjectFieldAsBytes")
        return field

    # -- arrays -----------------------------------------------------------

    def _read_array_cb(self, callback: Callable[["Iterator"], bool]) -> bool:
        c = self._next_token()
        if c == _LBRACKET:
            self._increment_depth()
            c = self._next_token()
            if c != _RBRACKET:
                self._unread_byte()
                while True:
                    if not callback(self):
                        self._decrement_depth()
                        return False
                    c = self._next_token()
                    if c != _COMMA:
                        break
                if c != _RBRACKET:
                    raise self._error(
                        "ReadArrayCB", f"expect ] in the end, but found {self._describe(c)}"
                    )
            self._decrement_depth()
            return True
        if c == _LETTER_N:
            self._skip_bytes(b"ull", "skipThreeBytes")
            return True
        raise self._error("ReadArrayCB", f"expect [ or n, but found {self._describe(c)}")

    # -- literals ---------------------------------------------------------

    def read_nil(self) -> bool:
        """Consume ``null`` if it comes next and report whether it did."""
        c = self._next_token()
        if c == _LETTER_N:
            self._skip_bytes(b"ull", "skipThreeBytes")
            return True
        if c is not None:
            self._unread_byte()
        return False

    def read_bool(self) -> bool:
        c = self._next_token()
        if c == _LETTER_T:
            self._skip_bytes(b"rue", "skipThreeBytes")
            return True
        if c == _LETTER_F:
            self._skip_bytes(b"alse", "skipFourBytes")
            return False
        raise self._error("ReadBool", f"expect t or f, but found {self._describe(c)}")

    # -- skipping ---------------------------------------------------------

    def skip(self) -> None:
        """Skip the next JSON value, validating it on the way."""
        c = self._next_token()
        if c == _QUOTE:
            self._skip_string()
        elif c == _LETTER_N:
            self._skip_bytes(b"ull", "skipThreeBytes")
        elif c == _LETTER_T:
            self._skip_bytes(b"rue", "skipThreeBytes")
        elif c == _LETTER_F:
            self._skip_bytes(b"alse", "skipFourBytes")
        elif c == _ZERO:
            self._unread_byte()
            self.read_float32()
        elif c in _NUMBER_START:
            self._skip_number()
        elif c == _LBRACKET:
            self._skip_array()
        elif c == _LBRACE:
            self._skip_object()
        else:
            shown = "end of input" if c is None else c
            raise self._error("Skip", f"do not know how to skip: {shown}")

    def _skip_number(self) -> None:
        if self._try_skip_number():
            return
        self._unread_byte()
        try:
            self.read_float64()
        except ValueError:
            self.read_big_float()

    def _try_skip_number(self) -> bool:
        buf, start, tail = self._buf, self._head, self._tail
        dot_found = False
        for pos in range(start, tail):
            c = buf[pos]
            if c in _DIGITS:
                continue
            if c == _DOT:
                if dot_found:
                    raise self._error("validateNumber", "more than one dot found in number")
                if pos + 1 == tail:
                    return False
                if buf[pos + 1] not in _DIGITS:
                    raise self._error("validateNumber", "missing digit after dot")
                dot_found = True
                continue
            if c in _NUMBER_END:
                if pos == start:
                    return False
                self._head = pos
                return True
            return False
        return False

    def _skip_string(self) -> None:
        if not self._try_skip_string():
            self._unread_byte()
            self.read_string()

    def _try_skip_string(self) -> bool:
        match = _STRING_STOP.search(self._buf, self._head, self._tail)
        if match is None:
            return False
        stop = self._buf[match.start()]
        if stop == _QUOTE:
            self._head = match.end()
            return True
        if stop == ord("\\"):
            return False
        raise self._error("trySkipString", f"invalid control character found: {stop}")

    def _skip_object(self) -> None:
        self._unread_byte()
        self.read_object_cb(_skip_field)

    def _skip_array(self) -> None:
        self._unread_byte()
        self._read_array_cb(_skip_element)

    # -- capture ----------------------------------------------------------

    def skip_and_return_bytes(self) -> bytes:
        """Skip the next value and return its raw bytes."""
        return self.skip_and_append_bytes(b"")

    def skip_and_append_bytes(self, buf: bytes) -> bytes:
        """Skip the next value and return ``buf`` followed by its raw bytes."""
        if self._captured is not None:
            raise RuntimeError("already in capture mode")
        self._captured = bytearray(buf)
        self._capture_start = self._head
        try:
            self.skip()
            return bytes(self._captured + self._buf[self._capture_start:self._head])
        finally:
            self._captured = None
            self._capture_start = -1


def _skip_field(iterator: Iterator, _field: str) -> bool:
    iterator.skip()
    return True


def _skip_element(iterator: Iterator) -> bool:
    iterator.skip()
    return True