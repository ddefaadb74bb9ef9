import pytest

from jsonscan.containers import (
    ArrayDecoder,
    MapDecoder,
    NumericMapKeyDecoder,
    TextUnmarshalerDecoder,
    UnmarshalerDecoder,
)
from jsonscan.iterator import Iterator
from jsonscan.scanner import JsonDecodeError


class Call:
    def __init__(self, fn):
        self.fn = fn

    def decode(self, iterator):
        return self.fn(iterator)


INT32 = Call(lambda it: it.read_int32())
STRING = Call(lambda it: it.read_string())


class RawHolder:
    def __init__(self):
        self.data = None

    def unmarshal_json(self, data):
        self.data = data


class Failing:
    def unmarshal_json(self, data):
        raise ValueError("refused")

    def unmarshal_text(self, data):
        raise ValueError("refused")


class TextHolder:
    def __init__(self):
        self.text = None

    def unmarshal_text(self, data):
        self.text = data.decode("utf-8").removeprefix("MANUAL__")


# -- arrays ---------------------------------------------------------------


def test_array_full():
    it = Iterator("[1, 2, 3, 4]")
    assert ArrayDecoder(4, INT32, lambda: 0).decode(it) == [1, 2, 3, 4]


def test_array_short_is_padded_with_zero():
    it = Iterator("[1,2]")
    assert ArrayDecoder(4, INT32, lambda: 0).decode(it) == [1, 2, 0, 0]


def test_array_surplus_elements_skipped_and_position_kept():
    it = Iterator('[[1,2,3,{"a":"b"}] , 7]')
    inner = ArrayDecoder(2, INT32, lambda: 0)
    outer = ArrayDecoder(1, inner)
    assert outer.decode(it) == [[1, 2]]


def test_array_null_and_empty():
    decoder = ArrayDecoder(3, INT32, lambda: 0)
    assert decoder.decode(Iterator("null")) == [0, 0, 0]
    assert decoder.decode(Iterator("[]")) == [0, 0, 0]


def test_array_zero_length_skips_everything():
    it = Iterator('[1, "x"] 5')
    assert ArrayDecoder(0, INT32).decode(it) == []
    assert it.read_int() == 5


def test_array_bad_start_raises():
    with pytest.raises(JsonDecodeError, match="expect \\[ or n"):
        ArrayDecoder(2, INT32).decode(Iterator("{}"))


def test_array_unterminated_raises_with_label():
    with pytest.raises(JsonDecodeError, match="expect \\], but found") as info:
        ArrayDecoder(2, INT32, name="pair").decode(Iterator("[1 2]"))
    assert info.value.message.startswith("pair: ")


def test_array_element_error_is_prefixed():
    with pytest.raises(JsonDecodeError) as info:
        ArrayDecoder(2, INT32).decode(Iterator('[1, "x"]'))
    assert info.value.message.startswith("[2]: ")


# -- maps -----------------------------------------------------------------


def test_map_string_keys():
    it = Iterator('{"a": 1, "b": 2}')
    assert MapDecoder(INT32).decode(it) == {"a": 1, "b": 2}


def test_map_empty_and_null():
    assert MapDecoder(INT32).decode(Iterator("{}")) == {}
    assert MapDecoder(INT32).decode(Iterator("null")) is None


def test_map_numeric_keys():
    decoder = MapDecoder(STRING, NumericMapKeyDecoder(INT32))
    assert decoder.decode(Iterator('{"1": "x", "-3": "y"}')) == {1: "x", -3: "y"}


def test_map_of_arrays_then_continue():
    it = Iterator('{"k": [1, 2]} 9')
    decoder = MapDecoder(ArrayDecoder(2, INT32))
    assert decoder.decode(it) == {"k": [1, 2]}
    assert it.read_int() == 9


def test_map_bad_start():
    with pytest.raises(JsonDecodeError, match="expect { or n"):
        MapDecoder(INT32).decode(Iterator("[1]"))


def test_map_missing_colon():
    with pytest.raises(JsonDecodeError, match="expect : after object field"):
        MapDecoder(INT32).decode(Iterator('{"a" 1}'))


def test_map_not_closed():
    with pytest.raises(JsonDecodeError, match="expect }, but found"):
        MapDecoder(INT32).decode(Iterator('{"a": 1 "b": 2}'))


def test_numeric_key_requires_quotes():
    with pytest.raises(JsonDecodeError, match='expect ", but found'):
        NumericMapKeyDecoder(INT32).decode(Iterator("12"))


# -- unmarshalers ---------------------------------------------------------


def test_unmarshaler_receives_raw_bytes_without_leading_space():
    it = Iterator('   {"a": [1, 2]} , 3')
    holder = UnmarshalerDecoder(RawHolder).decode(it)
    assert holder.data == b'{"a": [1, 2]}'


def test_unmarshaler_error_is_reported():
    with pytest.raises(JsonDecodeError, match="refused") as info:
        UnmarshalerDecoder(Failing).decode(Iterator("1"))
    assert info.value.operation == "unmarshalerDecoder"


def test_text_unmarshaler_reads_string():
    holder = TextUnmarshalerDecoder(TextHolder).decode(Iterator('"MANUAL__abc"'))
    assert holder.text == "abc"


def test_text_unmarshaler_error_is_reported():
    with pytest.raises(JsonDecodeError) as info:
        TextUnmarshalerDecoder(Failing).decode(Iterator('"x"'))
    assert info.value.operation == "textUnmarshalerDecoder"


def test_text_unmarshaler_as_map_key():
    decoder = MapDecoder(INT32, TextUnmarshalerDecoder(TextHolder))
    result = decoder.decode(Iterator('{"MANUAL__k": 1}'))
    assert [(key.text, value) for key, value in result.items()] == [("k", 1)]