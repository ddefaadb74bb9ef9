import io
from decimal import Decimal

import pytest

from jsonscan.numbers import UINT32_MAX, UINT64_MAX, NumberScanner, validate_float
from jsonscan.scanner import JsonDecodeError


@pytest.mark.parametrize("text", ["0", "7", "42", "-42", "123456789", "-2147483648", "2147483647"])
def test_read_int32_values(text):
    assert NumberScanner(text).read_int32() == int(text)


@pytest.mark.parametrize("text", ["127", "-128", "0", "-1"])
def test_read_int8_in_range(text):
    assert NumberScanner(text).read_int8() == int(text)


@pytest.mark.parametrize("text", ["128", "-129", "300"])
def test_read_int8_overflow(text):
    with pytest.raises(JsonDecodeError, match="overflow"):
        NumberScanner(text).read_int8()


@pytest.mark.parametrize(("method", "bits"), [("read_int16", 16), ("read_int32", 32), ("read_int64", 64)])
def test_signed_bounds(method, bits):
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    assert getattr(NumberScanner(str(low)), method)() == low
    assert getattr(NumberScanner(str(high)), method)() == high
    with pytest.raises(JsonDecodeError, match="overflow"):
        getattr(NumberScanner(str(high + 1)), method)()
    with pytest.raises(JsonDecodeError, match="overflow"):
        getattr(NumberScanner(str(low - 1)), method)()


@pytest.mark.parametrize(("method", "limit"), [("read_uint8", 0xFF), ("read_uint16", 0xFFFF),
                                               ("read_uint32", UINT32_MAX), ("read_uint64", UINT64_MAX)])
def test_unsigned_bounds(method, limit):
    assert getattr(NumberScanner(str(limit)), method)() == limit
    with pytest.raises(JsonDecodeError, match="overflow"):
        getattr(NumberScanner(str(limit + 1)), method)()


def test_read_int_and_uint_are_64_bit():
    assert NumberScanner(str(UINT64_MAX)).read_uint() == UINT64_MAX
    assert NumberScanner("-9223372036854775808").read_int() == -(1 << 63)


def test_very_long_integer_overflows():
    with pytest.raises(JsonDecodeError, match="overflow"):
        NumberScanner("9" * 5000).read_uint64()


def test_leading_zero_stops_integer():
    scanner = NumberScanner("01")
    assert scanner.read_int() == 0
    assert scanner.read_int() == 1


def test_integer_rejects_fraction():
    with pytest.raises(JsonDecodeError, match="can not decode float as int"):
        NumberScanner("1.5").read_int32()


def test_integer_rejects_letters():
    with pytest.raises(JsonDecodeError, match="unexpected character"):
        NumberScanner("abc").read_int64()


def test_integer_at_end_of_input():
    with pytest.raises(JsonDecodeError, match="unexpected character"):
        NumberScanner("  ").read_uint32()


def test_integers_in_sequence():
    scanner = NumberScanner(" 12 , 34")
    first = scanner.read_int()
    assert scanner._next_token() == ord(",")
    assert (first, scanner.read_int()) == (12, 34)


@pytest.mark.parametrize("size", [1, 3, 7])
def test_integer_from_stream(size):
    text = "123456789012"
    assert NumberScanner(io.BytesIO(text.encode()), size).read_int64() == int(text)


@pytest.mark.parametrize("text", ["1.5", "0", "-0.25", "1e10", "123.456", "1E-3", "+1", "0.1", "-7"])
def test_read_float64_values(text):
    assert NumberScanner(text).read_float64() == float(text)


@pytest.mark.parametrize("text", ["0.5", "-2.25", "8"])
def test_read_float32_exact_values(text):
    assert NumberScanner(text).read_float32() == float(text)


def test_read_float32_loses_precision_like_single():
    value = NumberScanner("0.1").read_float32()
    assert value != 0.1
    assert abs(value - 0.1) < 1e-7


def test_float_followed_by_delimiter():
    scanner = NumberScanner("1.5,2")
    assert scanner.read_float64() == 1.5
    assert scanner.head == len("1.5")


@pytest.mark.parametrize("size", [1, 2, 4])
def test_float_from_stream(size):
    text = "-3.14159e2"
    assert NumberScanner(io.BytesIO(text.encode()), size).read_float64() == float(text)


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("01", "leading zero is invalid"),
        (".5", "leading dot is invalid"),
        ("1.", "dot can not be last character"),
        ("1.e5", "missing digit after dot"),
        ("--1", "-- is not valid"),
        (",", "empty number"),
        ("x", "invalid number"),
    ],
)
def test_float_errors(text, message):
    with pytest.raises(JsonDecodeError, match=message):
        NumberScanner(text).read_float64()


def test_float64_out_of_range():
    with pytest.raises(JsonDecodeError):
        NumberScanner("1e400").read_float64()


def test_malformed_exponent():
    with pytest.raises(JsonDecodeError):
        NumberScanner("1e").read_float64()


def test_validate_float():
    assert validate_float("1.5") is None
    assert validate_float("") == "empty number"
    assert validate_float("-1") == "-- is not valid"
    assert validate_float("1.") == "dot can not be last character"
    assert validate_float("1.x") == "missing digit after dot"


def test_read_big_int():
    text = "123456789123456789123456789"
    assert NumberScanner(text).read_big_int() == int(text)


def test_read_big_int_rejects_fraction():
    with pytest.raises(JsonDecodeError, match="invalid big int"):
        NumberScanner("1.5").read_big_int()


def test_read_big_float():
    text = "123456789123456789123456789.5"
    assert NumberScanner(text).read_big_float() == Decimal(text)


def test_read_big_float_rejects_garbage():
    with pytest.raises(JsonDecodeError):
        NumberScanner("1e+-").read_big_float()


def test_read_number_returns_literal():
    scanner = NumberScanner("123.4e5,")
    assert scanner.read_number() == "123.4e5"


def test_read_number_empty():
    with pytest.raises(JsonDecodeError, match="invalid number"):
        NumberScanner("]").read_number()