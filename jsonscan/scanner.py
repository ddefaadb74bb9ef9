"""Buffered scanning of JSON input and decoding of JSON strings."""

from __future__ import annotations

import re
from typing import Any

MAX_RUNE = 0x10FFFF
RUNE_ERROR = 0xFFFD
SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

DEFAULT_BUFFER_SIZE = 4096

_WHITESPACE = frozenset(b" \t\n\r")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_LETTER_U = ord("u")
_LETTER_N = ord("n")

_STRING_STOP = re.compile(rb'["\\\x00-\x1f]')

_SIMPLE_ESCAPES = {
    ord('"'): b'"',
    ord("\\"): b"\\",
    ord("/"): b"/",
    ord("b"): b"\b",
    ord("f"): b"\f",
    ord("n"): b"\n",
    ord("r"): b"\r",
    ord("t"): b"\t",
}

_HEX_DIGITS = {ord(ch): int(ch, 16) for ch in "0123456789abcdefABCDEF"}


class JsonDecodeError(ValueError):
    """Raised when the input is not valid JSON for the requested read."""

    def __init__(self, operation: str, message: str, offset: int = 0) -> None:
        super().__init__(f"{operation}: {message}, error found at offset {offset}")
        self.operation = operation
        self.message = message
        self.offset = offset


def encode_rune(rune: int) -> bytes:
    """Encode a code point as UTF-8, substituting U+FFFD for invalid ones."""
    code = rune & 0xFFFFFFFF
    if code > MAX_RUNE or SURROGATE_MIN <= code <= SURROGATE_MAX:
        code = RUNE_ERROR
    return chr(code).encode("utf-8")


def _combine_surrogates(high: int, low: int) -> int | None:
    if 0xD800 <= high < 0xDC00 and 0xDC00 <= low < 0xE000:
        return 0x10000 + (((high - 0xD800) << 10) | (low - 0xDC00))
    return None


def _to_text(data: bytes | bytearray) -> str:
    return bytes(data).decode("utf-8", errors="replace")


class Scanner:
    """Reads JSON from bytes, text or a readable stream, one chunk at a time."""

    def __init__(self, source: Any = b"", buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self._buffer_size = buffer_size
        self._set_source(source)

    def reset(self, data: Any) -> None:
        """Start scanning new input, discarding whatever is left."""
        self._set_source(data)

    @property
    def head(self) -> int:
        """Offset of the read position inside the current buffer."""
        return self._head

    def _set_source(self, source: Any) -> None:
        if source is None:
            source = b""
        if isinstance(source, str):
            source = source.encode("utf-8")
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._reader = None
            self._buf = bytes(source)
        elif hasattr(source, "read"):
            self._reader = source
            self._buf = b""
        else:
            raise TypeError(f"cannot scan JSON from {type(source).__name__}")
        self._head = 0
        self._tail = len(self._buf)
        self._consumed = 0
        self._captured: bytearray | None = None
        self._capture_start = -1

    # -- buffer mechanics -------------------------------------------------

    def _error(self, operation: str, message: str) -> JsonDecodeError:
        return JsonDecodeError(operation, message, self._consumed + self._head)

    @staticmethod
    def _describe(c: int | None) -> str:
        return "end of input" if c is None else chr(c)

    def _load_more(self) -> bool:
        if self._reader is None:
            self._head = self._tail
            return False
        if self._captured is not None:
            self._captured += self._buf[self._capture_start:self._tail]
            self._capture_start = 0
        chunk = self._reader.read(self._buffer_size)
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        if not chunk:
            self._reader = None
            self._head = self._tail
            return False
        self._consumed += self._tail
        self._buf = bytes(chunk)
        self._head = 0
        self._tail = len(self._buf)
        return True

    def _next_token(self) -> int | None:
        while True:
            while self._head < self._tail:
                c = self._buf[self._head]
                self._head += 1
                if c not in _WHITESPACE:
                    return c
            if not self._load_more():
                return None

    def _read_byte(self) -> int | None:
        if self._head == self._tail and not self._load_more():
            return None
        c = self._buf[self._head]
        self._head += 1
        return c

    def _unread_byte(self) -> None:
        self._head -= 1

    def _skip_bytes(self, expected: bytes, operation: str) -> None:
        for b in expected:
            if self._read_byte() != b:
                raise self._error(operation, f"expect {expected.decode('ascii')}")

    # -- strings ----------------------------------------------------------

    def read_string(self) -> str:
        """Read a JSON string; ``null`` reads as the empty string."""
        c = self._next_token()
        if c == _QUOTE:
            match = _STRING_STOP.search(self._buf, self._head, self._tail)
            if match is not None:
                end = match.start()
                stop = self._buf[end]
                if stop == _QUOTE:
                    text = _to_text(self._buf[self._head:end])
                    self._head = end + 1
                    return text
                if stop != _BACKSLASH:
                    raise self._error("ReadString", f"invalid control character found: {stop}")
            return self._read_string_slow_path()
        if c == _LETTER_N:
            self._skip_bytes(b"ull", "skipThreeBytes")
            return ""
        raise self._error("ReadString", f'expects " or n, but found {self._describe(c)}')

    def _read_string_slow_path(self) -> str:
        out = bytearray()
        while True:
            c = self._read_byte()
            if c is None:
                raise self._error("readStringSlowPath", "unexpected end of input")
            if c == _QUOTE:
                return _to_text(out)
            if c == _BACKSLASH:
                escaped = self._read_byte()
                if escaped is None:
                    raise self._error("readStringSlowPath", "unexpected end of input")
                self._read_escaped_char(escaped, out)
            else:
                out.append(c)

    def _read_escaped_char(self, c: int, out: bytearray) -> None:
        if c == _LETTER_U:
            rune = self._read_u4()
            if not SURROGATE_MIN <= rune <= SURROGATE_MAX:
                out += encode_rune(rune)
                return
            c = self._read_byte()
            if c is None:
                raise self._error("readEscapedChar", "unexpected end of input")
            if c != _BACKSLASH:
                self._unread_byte()
                out += encode_rune(rune)
                return
            c = self._read_byte()
            if c is None:
                raise self._error("readEscapedChar", "unexpected end of input")
            if c != _LETTER_U:
                out += encode_rune(rune)
                self._read_escaped_char(c, out)
                return
            second = self._read_u4()
            combined = _combine_surrogates(rune, second)
            if combined is None:
                out += encode_rune(rune)
                out += encode_rune(second)
            else:
                out += encode_rune(combined)
            return
        simple = _SIMPLE_ESCAPES.get(c)
        if simple is None:
            raise self._error("readEscapedChar", "invalid escape char after \\")
        out += simple

    def _read_u4(self) -> int:
        value = 0
        for _ in range(4):
            c = self._read_byte()
            if c is None:
                raise self._error("readU4", "unexpected end of input")
            digit = _HEX_DIGITS.get(c)
            if digit is None:
                raise self._error("readU4", f"expects 0~9 or a~f, but found {chr(c)}")
            value = value * 16 + digit
        return value

    def read_string_as_bytes(self) -> bytes:
        """Read the raw bytes of a JSON string without processing escapes."""
        c = self._next_token()
        if c != _QUOTE:
            raise self._error("ReadStringAsSlice", f'expects " or n, but found {self._describe(c)}')
        end = self._buf.find(b'"', self._head, self._tail)
        if end >= 0:
            data = self._buf[self._head:end]
            self._head = end + 1
            return data
        out = bytearray(self._buf[self._head:self._tail])
        self._head = self._tail
        while True:
            c = self._read_byte()
            if c is None:
                raise self._error("ReadStringAsSlice", "unexpected end of input")
            if c == _QUOTE:
                return bytes(out)
            out.append(c)