"""Decoding of RESP2 values from raw bytes."""

from __future__ import annotations

import re
from typing import Callable

from respcheck import value as resp
from respcheck.value import Value, _go_quote

_CRLF = b"\r\n"
_INTEGER = re.compile(rb"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_BYTE_ESCAPES = {
    ord("\r"): "\\r",
    ord("\n"): "\\n",
    ord("\t"): "\\t",
    ord('"'): '\\"',
    ord("\\"): "\\\\",
}


def _escape_byte(b: int) -> str:
    if b in _BYTE_ESCAPES:
        return _BYTE_ESCAPES[b]
    if 0x20 <= b < 0x7F:
        return chr(b)
    return f"\\x{b:02x}"


def _format_detailed_error(data: bytes, offset: int, message: str) -> str:
    label = "Received: "
    pieces = [_escape_byte(b) for b in data]
    suffix = "" if data else " (no content received)"
    received = f'{label}"{"".join(pieces)}"{suffix}'
    column = len(label) + 1 + sum(len(piece) for piece in pieces[:offset])
    pointer = " " * column + "^ error"
    return "\n".join([received, pointer, f"Error: {message}"])


class DecodeError(Exception):
    """Raised when bytes cannot be decoded; points at the offending offset."""

    def __init__(self, data: bytes, offset: int, message: str) -> None:
        super().__init__(message)
        self.data = bytes(data)
        self.offset = offset
        self.message = message

    def __str__(self) -> str:
        return _format_detailed_error(self.data, self.offset, self.message)


class IncompleteInputError(DecodeError):
    """The input ended before a complete value was read."""


class InvalidInputError(DecodeError):
    """The input can never form a valid value."""


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def read_byte(self) -> int | None:
        if self.pos >= len(self.data):
            return None
        b = self.data[self.pos]
        self.pos += 1
        return b

    def incomplete(self, message: str) -> IncompleteInputError:
        return IncompleteInputError(self.data, self.pos, message)

    def invalid(self, message: str, offset: int | None = None) -> InvalidInputError:
        return InvalidInputError(self.data, self.pos if offset is None else offset, message)

    def read_line(self, message: str) -> bytes:
        end = self.data.find(_CRLF, self.pos)
        if end == -1:
            self.pos = len(self.data)
            raise self.incomplete(message)
        line = self.data[self.pos:end]
        self.pos = end + len(_CRLF)
        return line

    def read_exactly(self, length: int, what: str) -> bytes:
        available = len(self.data) - self.pos
        if available < length:
            self.pos = len(self.data)
            raise self.incomplete(f"Expected {length} bytes of data in {what}, got {available}")
        chunk = self.data[self.pos:self.pos + length]
        self.pos += length
        return chunk

    def read_crlf(self, message: str) -> None:
        start = self.pos
        for expected in _CRLF:
            b = self.read_byte()
            if b is None:
                raise self.incomplete(message)
            if b != expected:
                raise self.invalid(message, start)


def _parse_int(raw: bytes) -> int | None:
    if not _INTEGER.fullmatch(raw):
        return None
    number = int(raw)
    return number if _INT_MIN <= number <= _INT_MAX else None


def _decode_simple_string(reader: _Reader) -> Value:
    line = reader.read_line(r"Expected \r\n at the end of a simple string")
    return resp.simple_string(line)


def _decode_error(reader: _Reader) -> Value:
    line = reader.read_line(r"Expected \r\n at the end of a simple error")
    return resp.error(line)


def _decode_integer(reader: _Reader) -> Value:
    start = reader.pos
    line = reader.read_line(r"Expected \r\n at the end of an integer")
    number = _parse_int(line)
    if number is None:
        raise reader.invalid(f"Invalid integer: {_go_quote(line)}, expected a number", start)
    return resp.integer(number)


def _decode_bulk_string_or_nil(reader: _Reader) -> Value:
    start = reader.pos
    line = reader.read_line(r"Expected \r\n after bulk string length")
    length = _parse_int(line)
    if length is None:
        raise reader.invalid(
            f"Invalid bulk string length: {_go_quote(line)}, expected a number", start
        )
    if length == -1:
        return resp.nil()
    if length < 0:
        raise reader.invalid(
            f"Invalid bulk string length: {length}, expected a positive integer", start
        )
    data = reader.read_exactly(length, "bulk string")
    reader.read_crlf(f"Expected \\r\\n after {length} bytes of data in bulk string")
    return resp.bulk_string(data)


def _decode_array(reader: _Reader) -> Value:
    start = reader.pos
    line = reader.read_line(r"Expected \r\n after array length")
    length = _parse_int(line)
    if length is None:
        raise reader.invalid(f"Invalid array length: {_go_quote(line)}, expected a number", start)
    if length == -1:
        return resp.nil_array()
    if length < -1:
        raise reader.invalid(
            f"Invalid array length: {length}, expected 0 or a positive integer", start
        )
    return resp.array([_decode_value(reader) for _ in range(length)])


_DECODERS: dict[int, Callable[[_Reader], Value]] = {
    ord("+"): _decode_simple_string,
    ord("-"): _decode_error,
    ord(":"): _decode_integer,
    ord("$"): _decode_bulk_string_or_nil,
    ord("*"): _decode_array,
}


def _decode_value(reader: _Reader) -> Value:
    first = reader.read_byte()
    if first is None:
        raise reader.incomplete("Expected start of a new RESP2 value (either +, -, :, $ or *)")
    decoder = _DECODERS.get(first)
    if decoder is None:
        reader.pos -= 1
        raise reader.invalid(
            f"{_go_quote(bytes([first]))} is not a valid start of a RESP2 value "
            "(expected +, -, :, $ or *)"
        )
    return decoder(reader)


def decode(data: bytes) -> tuple[Value, int]:
    """Decode one value from the start of data; return it and the bytes consumed."""
    reader = _Reader(bytes(data))
    decoded = _decode_value(reader)
    return decoded, reader.pos


def decode_full_resync_rdb_file(data: bytes) -> tuple[bytes, int]:
    """Decode an RDB payload sent after FULLRESYNC; return it and the bytes consumed."""
    reader = _Reader(bytes(data))
    first = reader.read_byte()
    if first is None:
        raise reader.incomplete("Expected first byte of RDB file message to be $")
    if first != ord("$"):
        reader.pos -= 1
        raise reader.invalid(
            f"Expected first byte of RDB file message to be $, got {_go_quote(bytes([first]))}"
        )

    start = reader.pos
    line = reader.read_line(r"Expected \r\n after RDB file length")
    length = _parse_int(line)
    if length is None:
        raise reader.invalid(
            f"Invalid RDB file length: {_go_quote(line)}, expected a number", start
        )
    if length < 1:
        raise reader.invalid(
            f"Invalid RDB file length: {length}, expected a positive integer", start
        )

    contents = reader.read_exactly(length, "RDB file message")
    return contents, reader.pos