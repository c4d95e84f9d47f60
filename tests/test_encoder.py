import pytest

from respcheck.decoder import decode, decode_full_resync_rdb_file
from respcheck.encoder import encode, encode_full_resync_rdb_file
from respcheck.value import (
    array,
    bulk_string,
    error,
    integer,
    nil,
    nil_array,
    simple_string,
    string_array,
)


def test_nil_bytes():
    assert encode(nil()) == b"$-1\r\n"
    assert encode(nil_array()) == b"*-1\r\n"


def test_simple_string_bytes():
    assert encode(simple_string("OK")) == b"+OK\r\n"


def test_bulk_string_bytes():
    assert encode(bulk_string("hello")) == b"$5\r\nhello\r\n"


def test_integer_bytes():
    assert encode(integer(42)) == b":42\r\n"


def test_array_header_counts_items():
    encoded = encode(string_array(["a", "b"]))
    assert encoded.startswith(b"*2\r\n")
    assert encoded.endswith(encode(bulk_string("b")))


@pytest.mark.parametrize(
    "value",
    [
        simple_string("OK"),
        bulk_string(""),
        bulk_string(b"bin\r\n\x00\xff"),
        integer(0),
        integer(-123456789),
        error("ERR unknown command"),
        nil(),
        nil_array(),
        array([]),
        string_array(["SET", "foo", "bar"]),
        array([integer(1), array([nil(), bulk_string("x")]), nil_array()]),
    ],
)
def test_round_trip(value):
    encoded = encode(value)
    assert decode(encoded) == (value, len(encoded))


def test_full_resync_round_trip():
    contents = b"REDIS0011\xfa\x00\xff"
    encoded = encode_full_resync_rdb_file(contents)
    assert not encoded.endswith(b"\r\n")
    assert decode_full_resync_rdb_file(encoded) == (contents, len(encoded))