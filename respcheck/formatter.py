"""Width-aware JSON layout used when logging RESP arrays."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

INDENT = "  "
WIDTH = 32

_WHITESPACE = " \t\r\n"
_SCALAR = re.compile(
    r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?|true|false|null"
)
_STRING = re.compile(r'"(?:[^"\\\x00-\x1f]|\\(?:["\\/bfnrt]|u[0-9a-fA-F]{4}))*"')


@dataclass
class _Object:
    members: list[tuple[str, "_Node"]] = field(default_factory=list)


_Node = Union[str, list, _Object]


class _Parser:
    """Parses JSON text into a tree whose leaves keep their literal spelling."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def parse(self) -> _Node:
        node = self._value()
        self._skip_whitespace()
        if self.pos != len(self.text):
            raise ValueError(f"unexpected trailing data at offset {self.pos}")
        return node

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _peek(self) -> str:
        self._skip_whitespace()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            raise ValueError(f"expected {char!r} at offset {self.pos}")
        self.pos += 1

    def _value(self) -> _Node:
        char = self._peek()
        if char == "[":
            return self._array()
        if char == "{":
            return self._object()
        if char == '"':
            return self._string()
        match = _SCALAR.match(self.text, self.pos)
        if match is None:
            raise ValueError(f"invalid JSON value at offset {self.pos}")
        self.pos = match.end()
        return match.group()

    def _string(self) -> str:
        match = _STRING.match(self.text, self.pos)
        if match is None:
            raise ValueError(f"invalid JSON string at offset {self.pos}")
        self.pos = match.end()
        return match.group()

    def _array(self) -> list:
        self.pos += 1
        items: list = []
        if self._peek() == "]":
            self.pos += 1
            return items
        while True:
            items.append(self._value())
            if self._peek() == ",":
                self.pos += 1
                continue
            self._expect("]")
            return items

    def _object(self) -> _Object:
        self.pos += 1
        obj = _Object()
        if self._peek() == "}":
            self.pos += 1
            return obj
        while True:
            if self._peek() != '"':
                raise ValueError(f"expected object key at offset {self.pos}")
            key = self._string()
            self._expect(":")
            obj.members.append((key, self._value()))
            if self._peek() == ",":
                self.pos += 1
                continue
            self._expect("}")
            return obj


def _flat(node: _Node) -> str | None:
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        parts = [_flat(item) for item in node]
        if any(part is None for part in parts):
            return None
        return "[" + ", ".join(parts) + "]"
    return None


def _render(node: _Node, column: int, depth: int) -> str:
    if isinstance(node, str):
        return node

    inner = INDENT * (depth + 1)
    if isinstance(node, list):
        room = WIDTH - column
        if room > 3:
            flat = _flat(node)
            if flat is not None and len(flat) <= room:
                return flat
        if not node:
            return "[]"
        lines = [inner + _render(item, len(inner), depth + 1) for item in node]
        opening, closing = "[", "]"
    else:
        if not node.members:
            return "{}"
        lines = []
        for key, member in node.members:
            head = f"{inner}{key}: "
            lines.append(head + _render(member, len(head), depth + 1))
        opening, closing = "{", "}"

    return opening + "\n" + ",\n".join(lines) + "\n" + INDENT * depth + closing


def prettify(json_text: str | bytes) -> str:
    """Lay out JSON with two-space indents, keeping short arrays on one line."""
    if isinstance(json_text, (bytes, bytearray)):
        json_text = bytes(json_text).decode("utf-8")
    return _render(_Parser(json_text).parse(), 0, 0)