"""Creation of small RDB files holding string keys."""

from __future__ import annotations

import logging
import random
import shutil
import struct
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

AnyLogger = Union[logging.Logger, logging.LoggerAdapter]

_MAGIC = b"REDIS"
_VERSION = b"0011"

_OP_AUX = 0xFA
_OP_RESIZE_DB = 0xFB
_OP_EXPIRE_MS = 0xFC
_OP_SELECT_DB = 0xFE
_OP_EOF = 0xFF
_TYPE_STRING = 0x00

_ENC_INT8 = 0xC0
_ENC_INT16 = 0xC1
_ENC_INT32 = 0xC2

_AUX_FIELDS = (("redis-ver", "7.2.0"), ("redis-bits", "64"))

_WORDS = (
    "apple", "banana", "blueberry", "cherry", "grape", "mango", "orange",
    "pear", "pineapple", "raspberry", "strawberry", "watermelon", "lemon",
    "lime", "kiwi", "peach", "plum", "apricot", "coconut", "fig", "papaya",
)

_CRC64_POLY = 0x95AC9329AC4BC9B5


def _build_crc64_table() -> list[int]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ _CRC64_POLY if crc & 1 else crc >> 1
        table.append(crc)
    return table


_CRC64_TABLE = _build_crc64_table()


def _crc64(data: bytes, crc: int = 0) -> int:
    """CRC-64 (Jones polynomial, reflected) as used for RDB checksums."""
    for byte in data:
        crc = _CRC64_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc


def _encode_length(length: int) -> bytes:
    if length < 1 << 6:
        return bytes([length])
    if length < 1 << 14:
        return bytes([0x40 | (length >> 8), length & 0xFF])
    if length <= 0xFFFFFFFF:
        return b"\x80" + struct.pack(">I", length)
    return b"\x81" + struct.pack(">Q", length)


def _encode_int_string(data: bytes) -> Optional[bytes]:
    if not data or len(data) > 11:
        return None
    try:
        text = data.decode("ascii")
        number = int(text)
    except (UnicodeDecodeError, ValueError):
        return None
    if str(number) != text:
        return None
    if -(1 << 7) <= number < 1 << 7:
        return bytes([_ENC_INT8]) + struct.pack("<b", number)
    if -(1 << 15) <= number < 1 << 15:
        return bytes([_ENC_INT16]) + struct.pack("<h", number)
    if -(1 << 31) <= number < 1 << 31:
        return bytes([_ENC_INT32]) + struct.pack("<i", number)
    return None


def _encode_string(s: Union[str, bytes]) -> bytes:
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    as_int = _encode_int_string(data)
    if as_int is not None:
        return as_int
    return _encode_length(len(data)) + data


@dataclass(frozen=True)
class KeyValuePair:
    """A string key and value, with an optional expiry in Unix milliseconds."""

    key: str
    value: str
    expiry_ts: int = 0


def _encode_rdb(pairs: list[KeyValuePair]) -> bytes:
    out = bytearray(_MAGIC + _VERSION)
    for name, value in _AUX_FIELDS:
        out.append(_OP_AUX)
        out += _encode_string(name)
        out += _encode_string(value)

    ttl_count = sum(1 for pair in pairs if pair.expiry_ts > 0)
    out.append(_OP_SELECT_DB)
    out += _encode_length(0)
    out.append(_OP_RESIZE_DB)
    out += _encode_length(len(pairs))
    out += _encode_length(ttl_count)

    for pair in pairs:
        if pair.expiry_ts > 0:
            out.append(_OP_EXPIRE_MS)
            out += struct.pack("<Q", pair.expiry_ts)
        out.append(_TYPE_STRING)
        out += _encode_string(pair.key)
        out += _encode_string(pair.value)

    out.append(_OP_EOF)
    out += struct.pack("<Q", _crc64(bytes(out)))
    return bytes(out)


def formatted_hexdump(data: bytes) -> str:
    """Render bytes as rows of 16: offset, hex bytes and printable ASCII."""
    lines = [
        f"{'Idx':<4} | {'Hex':<47} | ASCII",
        f"{'-' * 4}-+-{'-' * 47}-+-{'-' * 16}",
    ]
    for offset in range(0, len(data), 16):
        row = data[offset:offset + 16]
        hex_part = " ".join(f"{b:02x}" for b in row)
        ascii_part = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in row)
        lines.append(f"{offset:04x} | {hex_part:<47} | {ascii_part}")
    return "\n".join(lines)


class RDBFileCreator:
    """Writes an RDB file with a random name into a fresh temporary directory."""

    def __init__(self) -> None:
        self.dir = tempfile.mkdtemp(prefix="rdb")
        self.filename = f"{random.choice(_WORDS)}.rdb"

    def __enter__(self) -> RDBFileCreator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    @property
    def path(self) -> Path:
        return Path(self.dir) / self.filename

    def cleanup(self) -> None:
        shutil.rmtree(self.dir, ignore_errors=True)

    def write(self, pairs: Iterable[KeyValuePair]) -> None:
        self.path.write_bytes(_encode_rdb(list(pairs)))

    def contents(self) -> bytes:
        return self.path.read_bytes()

    def print_content_hexdump(self, logger: AnyLogger) -> None:
        logger.debug("Hexdump of RDB file contents: \n%s\n", formatted_hexdump(self.contents()))