"""A RESP2 connection over a TCP socket with byte accounting and hooks."""

from __future__ import annotations

import socket
import time
from dataclasses import dataclass
from typing import Callable, Optional

from respcheck.decoder import (
    DecodeError,
    InvalidInputError,
    decode,
    decode_full_resync_rdb_file,
)
from respcheck.encoder import encode
from respcheck.value import Value, string_array

DEFAULT_READ_TIMEOUT = 2.0
_POLL_TIMEOUT = 0.001
_POLL_INTERVAL = 0.01
_CONNECT_ATTEMPTS = 50
_CONNECT_RETRY_DELAY = 0.1


@dataclass
class RespConnectionCallbacks:
    """Hooks called at points in a connection's lifecycle; any may be None."""

    before_send_command: Optional[Callable[..., None]] = None
    before_send_value: Optional[Callable[[Value], None]] = None
    before_send_bytes: Optional[Callable[[bytes], None]] = None
    after_bytes_received: Optional[Callable[[bytes], None]] = None
    after_read_value: Optional[Callable[[Value], None]] = None


def _is_complete_or_invalid(decoder: Callable[[bytes], object], data: bytes) -> bool:
    try:
        decoder(data)
    except InvalidInputError:
        return True
    except DecodeError:
        return False
    return True


class RespConnection:
    """Sends commands and reads RESP2 values over a connected socket."""

    def __init__(
        self, sock: socket.socket, callbacks: Optional[RespConnectionCallbacks] = None
    ) -> None:
        self.sock = sock
        self.callbacks = callbacks or RespConnectionCallbacks()
        # Size of the last decoded value, needed to report replication offsets.
        self.last_value_bytes_count = 0
        self.read_value_interceptor: Optional[Callable[[Value], Value]] = None
        self.received_bytes_count = 0
        # May be reset (handshake bytes are not counted for acks).
        self.sent_bytes_count = 0
        # Never reset; tells whether the connection has been used before.
        self.total_sent_bytes_count = 0
        self.unread_buffer = bytearray()

    def __enter__(self) -> "RespConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.sock.close()

    def send_command(self, command: str, *args: str) -> None:
        if self.callbacks.before_send_command is not None:
            reused = self.total_sent_bytes_count > 0
            self.callbacks.before_send_command(reused, command, *args)
        self.send_bytes(encode(string_array([command, *args])))

    def send_value(self, value: Value) -> None:
        if self.callbacks.before_send_value is not None:
            self.callbacks.before_send_value(value)
        self.send_bytes(encode(value))

    def send_bytes(self, data: bytes) -> None:
        data = bytes(data)
        if self.callbacks.before_send_bytes is not None:
            self.callbacks.before_send_bytes(data)
        self.sock.sendall(data)
        self.sent_bytes_count += len(data)
        self.total_sent_bytes_count += len(data)

    def read_into_buffer(self) -> int:
        """Read whatever is available within a millisecond; return the byte count.

        Raises EOFError when the peer has closed the connection.
        """
        previous_timeout = self.sock.gettimeout()
        self.sock.settimeout(_POLL_TIMEOUT)
        try:
            chunk = self.sock.recv(1024)
        except (socket.timeout, BlockingIOError):
            return 0
        finally:
            self.sock.settimeout(previous_timeout)
        if not chunk:
            raise EOFError("EOF")
        self.unread_buffer.extend(chunk)
        return len(chunk)

    def _read_into_buffer_until(
        self, condition: Callable[[bytes], bool], timeout: float
    ) -> None:
        deadline = time.monotonic() + timeout
        while time.monotonic() <= deadline:
            try:
                self.read_into_buffer()
            except (OSError, EOFError):
                pass
            if condition(bytes(self.unread_buffer)):
                return
            time.sleep(_POLL_INTERVAL)

    def read_full_resync_rdb_file(self) -> bytes:
        """Read an RDB payload sent after FULLRESYNC."""
        self._read_into_buffer_until(
            lambda data: _is_complete_or_invalid(decode_full_resync_rdb_file, data),
            DEFAULT_READ_TIMEOUT,
        )
        buffered = bytes(self.unread_buffer)
        try:
            contents, count = decode_full_resync_rdb_file(buffered)
        except DecodeError:
            if self.callbacks.after_bytes_received is not None and buffered:
                self.callbacks.after_bytes_received(buffered)
            raise

        if self.callbacks.after_bytes_received is not None and count > 0:
            self.callbacks.after_bytes_received(buffered[:count])

        del self.unread_buffer[:count]
        self.received_bytes_count += count
        self.last_value_bytes_count = count
        return contents

    def read_value(self) -> Value:
        return self.read_value_with_timeout(DEFAULT_READ_TIMEOUT)

    def read_value_with_timeout(self, timeout: float) -> Value:
        """Read one value, waiting up to timeout seconds for it to arrive."""
        self._read_into_buffer_until(
            lambda data: _is_complete_or_invalid(decode, data), timeout
        )
        buffered = bytes(self.unread_buffer)
        try:
            value, count = decode(buffered)
        except DecodeError:
            if self.callbacks.after_bytes_received is not None and buffered:
                self.callbacks.after_bytes_received(buffered)
            raise

        value_bytes = buffered[:count]
        self.received_bytes_count += count
        del self.unread_buffer[:count]
        self.last_value_bytes_count = count

        if self.read_value_interceptor is not None:
            value = self.read_value_interceptor(value)
            value_bytes = encode(value)

        if self.callbacks.after_bytes_received is not None:
            self.callbacks.after_bytes_received(value_bytes)
        if self.callbacks.after_read_value is not None:
            self.callbacks.after_read_value(value)
        return value

    def reset_byte_counters(self) -> None:
        self.received_bytes_count = 0
        self.sent_bytes_count = 0

    def update_callbacks(self, callbacks: RespConnectionCallbacks) -> None:
        self.callbacks = callbacks


def _split_address(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid address: {addr!r}")
    return host.strip("[]") or "localhost", int(port)


def open_socket(addr: str) -> socket.socket:
    """Connect to host:port, retrying for about five seconds."""
    host, port = _split_address(addr)
    attempts = 0
    while True:
        try:
            return socket.create_connection((host, port))
        except socket.timeout:
            raise
        except OSError:
            if attempts > _CONNECT_ATTEMPTS:
                raise
            attempts += 1
            time.sleep(_CONNECT_RETRY_DELAY)


def connect(
    addr: str, callbacks: Optional[RespConnectionCallbacks] = None
) -> RespConnection:
    """Open a RESP connection to host:port."""
    return RespConnection(open_socket(addr), callbacks)