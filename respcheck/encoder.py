"""Serialisation of RESP2 values to wire bytes."""

from __future__ import annotations

from respcheck.value import Value, ValueType

_CRLF = b"\r\n"


def encode(value: Value) -> bytes:
    """Encode a value as RESP2 bytes."""
    kind = value.type
    if kind is ValueType.INTEGER:
        return b":%d\r\n" % value.number
    if kind is ValueType.SIMPLE_STRING:
        return b"+" + value.data + _CRLF
    if kind is ValueType.BULK_STRING:
        return b"$%d\r\n" % len(value.data) + value.data + _CRLF
    if kind is ValueType.ERROR:
        return b"-" + value.data + _CRLF
    if kind is ValueType.ARRAY:
        return b"*%d\r\n" % len(value.items) + b"".join(encode(item) for item in value.items)
    if kind is ValueType.NIL:
        return b"$-1\r\n"
    if kind is ValueType.NIL_ARRAY:
        return b"*-1\r\n"
    raise ValueError(f"unsupported type: {kind}")


def encode_full_resync_rdb_file(contents: bytes) -> bytes:
    """Encode an RDB payload as sent after FULLRESYNC (no trailing CRLF)."""
    return b"$%d\r\n" % len(contents) + bytes(contents)