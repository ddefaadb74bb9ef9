"""Faster skipping that does not validate the values it passes over."""

from __future__ import annotations

import re

from .iterator import Iterator

_QUOTE = ord('"')
_OBJECT_STOP = re.compile(rb'["{}]')
_ARRAY_STOP = re.compile(rb'["\[\]]')
_NUMBER_STOP = re.compile(rb"[ \n\r\t,}\]]")


def _trailing_backslashes(data: bytes) -> int:
    return len(data) - len(data.rstrip(b"\\"))


class SloppyIterator(Iterator):
    """Iterator whose skip only finds where a value ends, without checking it."""

    def find_string_end(self) -> tuple[int, bool]:
        """Return the offset just past the closing quote (or -1) and whether escapes were seen."""
        data = self._buf[self._head:self._tail]
        pos = 0
        while True:
            quote = data.find(b'"', pos)
            if quote < 0:
                break
            before = data[:quote]
            if b"\\" not in before:
                return self._head + quote + 1, False
            if _trailing_backslashes(before) % 2 == 0:
                return self._head + quote + 1, True
            pos = quote + 1
        return -1, _trailing_backslashes(data) % 2 == 1

    def skip_string(self) -> None:
        while True:
            end, escaped = self.find_string_end()
            if end != -1:
                self._head = end
                return
            if not self._load_more():
                raise self._error("skipString", "incomplete string")
            if escaped:
                # The previous chunk ended in a backslash that escapes this first byte.
                self._head = 1

    def _skip_container(self, stops: re.Pattern[bytes], opening: int, what: str) -> None:
        level = 1
        self._increment_depth()
        while True:
            pos = self._head
            while True:
                match = stops.search(self._buf, pos, self._tail)
                if match is None:
                    break
                c = self._buf[match.start()]
                if c == _QUOTE:
                    self._head = match.end()
                    self.skip_string()
                    pos = self._head
                elif c == opening:
                    level += 1
                    self._increment_depth()
                    pos = match.end()
                else:
                    level -= 1
                    self._decrement_depth()
                    if level == 0:
                        self._head = match.end()
                        return
                    pos = match.end()
            if not self._load_more():
                raise self._error("skipObject", f"incomplete {what}")

    def skip_object(self) -> None:
        self._skip_container(_OBJECT_STOP, ord("{"), "object")

    def skip_array(self) -> None:
        self._skip_container(_ARRAY_STOP, ord("["), "array")

    def skip_number(self) -> None:
        while True:
            match = _NUMBER_STOP.search(self._buf, self._head, self._tail)
            if match is not None:
                self._head = match.start()
                return
            if not self._load_more():
                return

    _skip_string = skip_string
    _skip_object = skip_object
    _skip_array = skip_array
    _skip_number = skip_number