"""Decoders for fixed-length arrays, maps, map keys and self-decoding objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from .iterator import Iterator
from .scanner import JsonDecodeError

_QUOTE = ord('"')
_COLON = ord(":")
_COMMA = ord(",")
_LBRACE = ord("{")
_RBRACE = ord("}")
_LBRACKET = ord("[")
_RBRACKET = ord("]")
_LETTER_N = ord("n")


class ValueDecoder(Protocol):
    def decode(self, iterator: Iterator) -> Any: ...


class _StringDecoder:
    def decode(self, iterator: Iterator) -> str:
        return iterator.read_string()


@dataclass
class ArrayDecoder:
    """Decodes a JSON array into a list of exactly ``length`` items.

    Missing trailing items are filled with ``zero()``, surplus ones are skipped,
    and ``null`` gives a list of zero values.
    """

    length: int
    element_decoder: ValueDecoder
    zero: Callable[[], Any] = type(None)
    name: str = ""

    @property
    def _label(self) -> str:
        return self.name or f"[{self.length}]"

    def decode(self, iterator: Iterator) -> list[Any]:
        try:
            return self._decode(iterator)
        except JsonDecodeError as exc:
            raise JsonDecodeError(
                exc.operation, f"{self._label}: {exc.message}", exc.offset
            ) from exc

    def _decode(self, iterator: Iterator) -> list[Any]:
        values = [self.zero() for _ in range(self.length)]
        c = iterator._next_token()
        if c == _LETTER_N:
            iterator._skip_bytes(b"ull", "skipThreeBytes")
            return values
        if c != _LBRACKET:
            raise iterator._error(
                "decode array", f"expect [ or n, but found {iterator._describe(c)}"
            )
        c = iterator._next_token()
        if c == _RBRACKET:
            return values
        if c is not None:
            iterator._unread_byte()
        count = 0
        while True:
            if count < self.length:
                values[count] = self.element_decoder.decode(iterator)
                count += 1
            else:
                iterator.skip()
            c = iterator._next_token()
            if c != _COMMA:
                break
        if c != _RBRACKET:
            raise iterator._error(
                "decode array", f"expect ], but found {iterator._describe(c)}"
            )
        return values


@dataclass
class MapDecoder:
    """Decodes a JSON object into a dict; ``null`` decodes as None."""

    element_decoder: ValueDecoder
    key_decoder: ValueDecoder = _StringDecoder()

    def decode(self, iterator: Iterator) -> dict[Any, Any] | None:
        c = iterator._next_token()
        if c == _LETTER_N:
            iterator._skip_bytes(b"ull", "skipThreeBytes")
            return None
        if c != _LBRACE:
            raise iterator._error(
                "ReadMapCB", f"expect {{ or n, but found {iterator._describe(c)}"
            )
        result: dict[Any, Any] = {}
        c = iterator._next_token()
        if c == _RBRACE:
            return result
        if c is not None:
            iterator._unread_byte()
        while True:
            key = self.key_decoder.decode(iterator)
            c = iterator._next_token()
            if c != _COLON:
                raise iterator._error(
                    "ReadMapCB",
                    f"expect : after object field, but found {iterator._describe(c)}",
                )
            result[key] = self.element_decoder.decode(iterator)
            c = iterator._next_token()
            if c != _COMMA:
                break
        if c != _RBRACE:
            raise iterator._error("ReadMapCB", f"expect }}, but found {iterator._describe(c)}")
        return result


@dataclass
class NumericMapKeyDecoder:
    """Decodes a map key written as a quoted number, such as ``"12"``."""

    decoder: ValueDecoder

    def decode(self, iterator: Iterator) -> Any:
        c = iterator._next_token()
        if c != _QUOTE:
            raise iterator._error("ReadMapCB", f'expect ", but found {iterator._describe(c)}')
        value = self.decoder.decode(iterator)
        c = iterator._next_token()
        if c != _QUOTE:
            raise iterator._error("ReadMapCB", f'expect ", but found {iterator._describe(c)}')
        return value


@dataclass
class UnmarshalerDecoder:
    """Hands the raw bytes of the next value to ``factory().unmarshal_json``."""

    factory: Callable[[], Any]

    def decode(self, iterator: Iterator) -> Any:
        target = self.factory()
        c = iterator._next_token()
        if c is not None:
            iterator._unread_byte()
        data = iterator.skip_and_return_bytes()
        try:
            target.unmarshal_json(data)
        except Exception as exc:  # the target reports failure by raising
            raise iterator._error("unmarshalerDecoder", str(exc)) from exc
        return target


@dataclass
class TextUnmarshalerDecoder:
    """Reads a JSON string and hands its bytes to ``factory().unmarshal_text``."""

    factory: Callable[[], Any]

    def decode(self, iterator: Iterator) -> Any:
        target = self.factory()
        text = iterator.read_string()
        try:
            target.unmarshal_text(text.encode("utf-8"))
        except Exception as exc:  # the target reports failure by raising
            raise iterator._error("textUnmarshalerDecoder", str(exc)) from exc
        return target