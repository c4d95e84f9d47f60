"""RESP2 values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from respcheck.formatter import prettify


class ValueType(str, Enum):
    """Kinds of RESP2 values."""

    SIMPLE_STRING = "simple string"
    INTEGER = "integer"
    BULK_STRING = "bulk string"
    ARRAY = "array"
    ERROR = "error"
    NIL = "null bulk string"
    NIL_ARRAY = "null array"

    def __str__(self) -> str:
        return self.value


_QUOTE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}

_JSON_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _go_quote(data: bytes) -> str:
    """Double-quote bytes, escaping invalid UTF-8 and non-printable characters."""
    parts = ['"']
    for char in data.decode("utf-8", errors="surrogateescape"):
        code = ord(char)
        if 0xDC80 <= code <= 0xDCFF:
            parts.append(f"\\x{code - 0xDC00:02x}")
        elif char in _QUOTE_ESCAPES:
            parts.append(_QUOTE_ESCAPES[char])
        elif char.isprintable():
            parts.append(char)
        elif code < 0x20 or code == 0x7F:
            parts.append(f"\\x{code:02x}")
        elif code < 0x10000:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    parts.append('"')
    return "".join(parts)


def _json_string(text: str) -> str:
    parts = ['"']
    for char in text:
        if char in _JSON_ESCAPES:
            parts.append(_JSON_ESCAPES[char])
        elif char < " ":
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def _to_json(obj: object) -> str:
    if isinstance(obj, str):
        return _json_string(obj)
    if isinstance(obj, int):
        return str(obj)
    return "[" + ",".join(_to_json(item) for item in obj) + "]"


def _to_bytes(s: Union[str, bytes]) -> bytes:
    return s.encode("utf-8") if isinstance(s, str) else bytes(s)


@dataclass(frozen=True)
class Value:
    """A decoded or to-be-encoded RESP2 value."""

    type: ValueType
    data: bytes = b""
    number: int = 0
    items: tuple[Value, ...] = ()

    def as_bytes(self) -> bytes:
        return self.data

    def as_string(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def as_integer(self) -> int:
        return self.number

    def as_array(self) -> list[Value]:
        return list(self.items) if self.type is ValueType.ARRAY else []

    def error_message(self) -> str:
        return self.as_string() if self.type is ValueType.ERROR else ""

    def formatted_string(self) -> str:
        """Render the value for human-readable logs."""
        if self.type in (ValueType.SIMPLE_STRING, ValueType.BULK_STRING, ValueType.ERROR):
            return _go_quote(self.data)
        if self.type is ValueType.INTEGER:
            return str(self.number)
        if self.type is ValueType.ARRAY:
            return prettify(_to_json(self.to_serializable()))
        if self.type is ValueType.NIL:
            return '"$-1\\r\\n"'
        if self.type is ValueType.NIL_ARRAY:
            return '"*-1\\r\\n"'
        return ""

    def to_serializable(self) -> object:
        """Convert to plain strings, ints and lists."""
        if self.type is ValueType.NIL:
            return "$-1\r\n"
        if self.type is ValueType.NIL_ARRAY:
            return "*-1\r\n"
        if self.type is ValueType.INTEGER:
            return self.number
        if self.type is ValueType.ARRAY:
            return [item.to_serializable() for item in self.items]
        return self.as_string()


def simple_string(s: Union[str, bytes]) -> Value:
    return Value(ValueType.SIMPLE_STRING, data=_to_bytes(s))


def bulk_string(s: Union[str, bytes]) -> Value:
    return Value(ValueType.BULK_STRING, data=_to_bytes(s))


def integer(i: int) -> Value:
    return Value(ValueType.INTEGER, number=i)


def error(message: Union[str, bytes]) -> Value:
    return Value(ValueType.ERROR, data=_to_bytes(message))


def array(values: Iterable[Value]) -> Value:
    return Value(ValueType.ARRAY, items=tuple(values))


def string_array(strings: Iterable[Union[str, bytes]]) -> Value:
    return array(bulk_string(s) for s in strings)


def nil() -> Value:
    return Value(ValueType.NIL)


def nil_array() -> Value:
    return Value(ValueType.NIL_ARRAY)