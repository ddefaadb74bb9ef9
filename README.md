# jsonscan

A JSON reader that walks input one element at a time instead of building a
whole document up front. It reads from bytes, text or a file-like object with
a `read` method, refilling its buffer as it goes, and reports malformed input
by raising `jsonscan.scanner.JsonDecodeError` (a `ValueError` carrying
`operation`, `message` and `offset`).

## Modules

- `jsonscan.scanner`
  - `Scanner(source=b"", buffer_size=4096)`: the buffered reader.
    `reset(data)` starts over on new input. `read_string()` decodes a JSON
    string, including `\uXXXX` escapes and surrogate pairs; `null` reads as
    `""`. `read_string_as_bytes()` returns the raw bytes between the quotes,
    escapes untouched.
  - `encode_rune(rune)`: UTF-8 bytes of a code point, with U+FFFD in place of
    surrogates and out-of-range values.
- `jsonscan.numbers`
  - `NumberScanner`: a `Scanner` with range-checked integer reads
    (`read_int8`, `read_int16`, `read_int32`, `read_int64`, `read_int`,
    `read_uint8`, `read_uint16`, `read_uint32`, `read_uint64`, `read_uint`),
    float reads (`read_float32`, rounded to single precision, and
    `read_float64`), and arbitrary-precision reads: `read_big_int()` returns
    an `int`, `read_big_float()` a `decimal.Decimal`, and `read_number()` the
    literal text. Overflow, leading zeros, a float where an integer is
    expected and similar faults raise `JsonDecodeError`.
  - `validate_float(text)`: the reason `text` is not an acceptable float, or
    `None`.
- `jsonscan.iterator`
  - `Iterator(source=b"", buffer_size=4096, case_sensitive=False,
    max_depth=10000)`: a `NumberScanner` that also reads objects and
    literals. `read_object()` returns the next field name, or `None` when the
    object ends or is `null`. `read_object_cb(callback)` and
    `read_map_cb(callback)` call `callback(iterator, field)` for each field
    and stop early when it returns false. `read_nil()`, `read_bool()`,
    `skip()` (validating), `skip_and_return_bytes()` and
    `skip_and_append_bytes(buf)` complete the set. Nesting beyond
    `max_depth` raises `JsonDecodeError`.
  - `field_hash(name, case_sensitive=False)`: the signed 64-bit FNV-1 hash of
    a field name, lower-cased unless case-sensitive.
- `jsonscan.sloppy`
  - `SloppyIterator`: an `Iterator` whose `skip()` only finds where a value
    ends without checking it. Its `skip_string()`, `skip_object()`,
    `skip_array()` and `skip_number()` expect to be called just after the
    opening character; `find_string_end()` reports where the current string
    closes and whether escapes were seen.
- `jsonscan.pool`
  - `IteratorPool(factory=None)`: a thread-safe pool; `borrow(data)` hands
    out an iterator reset to `data`, `give_back(iterator)` returns it.
- `jsonscan.number`
  - `Number`: a `str` holding a number's literal text, with `to_float()` and
    `to_int()` (signed 64-bit; raises `ValueError` out of range).
  - `RawMessage`: the raw `bytes` of a JSON value.
  - `decode_number(iterator)`, `decode_raw_message(iterator)` and
    `cast_json_number(value)`.
- `jsonscan.containers`
  - `ArrayDecoder(length, element_decoder, zero=type(None), name="")`: a list
    of exactly `length` items; missing items are `zero()`, surplus ones are
    skipped.
  - `MapDecoder(element_decoder, key_decoder=...)`: a `dict`, or `None` for
    `null`; keys are strings unless another key decoder is given.
  - `NumericMapKeyDecoder(decoder)`: map keys written as quoted numbers.
  - `UnmarshalerDecoder(factory)` and `TextUnmarshalerDecoder(factory)`: pass
    the raw value, or a string's bytes, to `factory().unmarshal_json(data)`
    or `factory().unmarshal_text(data)`.

  Each of these has a `decode(iterator)` method; any object with such a
  method can serve as an element or key decoder.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from jsonscan.containers import ArrayDecoder, MapDecoder, NumericMapKeyDecoder
from jsonscan.iterator import Iterator

it = Iterator(b'{"name": "box", "size": 12}')
assert it.read_object() == "name"
assert it.read_string() == "box"
assert it.read_object() == "size"
assert it.read_int() == 12
assert it.read_object() is None

it = Iterator(b'{"a":[1,2,3],"b":true}')
fields = {}


def on_field(iterator, name):
    fields[name] = iterator.skip_and_return_bytes()
    return True


it.read_object_cb(on_field)
assert fields == {"a": b"[1,2,3]", "b": b"true"}


class Ints:
    def decode(self, iterator):
        return iterator.read_int()


assert ArrayDecoder(3, Ints(), int).decode(Iterator(b"[1,2]")) == [1, 2, 0]
assert MapDecoder(Ints(), NumericMapKeyDecoder(Ints())).decode(
    Iterator(b'{"7":1}')
) == {7: 1}
```

## What it does not do

The package reads JSON; it does not write it. There is no encoder or
streaming writer, and no decoding driven by a target type: values are read
through the iterator methods and the decoders in `jsonscan.containers`, and
it is up to the caller to put them into objects. There is no registry of
custom decoders and no command-line tool.