"""RESP connections that log their network activity."""

from __future__ import annotations

import logging
import socket
from typing import Callable, Optional, Union

from respcheck.connection import RespConnection, RespConnectionCallbacks, open_socket
from respcheck.value import Value, _go_quote

AnyLogger = Union[logging.Logger, logging.LoggerAdapter]


class _PrefixedLogger(logging.LoggerAdapter):
    """Logger that puts bracketed prefixes in front of each message."""

    def __init__(self, logger: AnyLogger, prefixes: tuple[str, ...]) -> None:
        super().__init__(logger, {})
        self.prefixes = prefixes

    def process(self, msg, kwargs):
        prefix = "".join(f"[{p}] " for p in self.prefixes)
        return f"{prefix}{msg}", kwargs


def _with_prefix(base: AnyLogger, identifier: str) -> _PrefixedLogger:
    if isinstance(base, _PrefixedLogger):
        return _PrefixedLogger(base.logger, (*base.prefixes, identifier))
    return _PrefixedLogger(base, (identifier,))


def quote_if_has_space_or_escape_sequence(s: str) -> str:
    """Quote s if it holds a space or a character that needs escaping."""
    quoted = _go_quote(s.encode("utf-8"))
    if s == quoted.strip('"') and " " not in s:
        return s
    return quoted


def quote_cli_command(command_with_args) -> str:
    """Quote each argument where needed and join them with spaces."""
    return " ".join(quote_if_has_space_or_escape_sequence(a) for a in command_with_args)


def _default_callbacks(logger: AnyLogger) -> RespConnectionCallbacks:
    def before_send_command(reused: bool, command: str, *args: str) -> None:
        prefix = ">" if reused else "$ redis-cli"
        logger.info("%s %s", prefix, quote_cli_command([command, *args]))

    return RespConnectionCallbacks(
        before_send_command=before_send_command,
        before_send_value=lambda value: logger.info("Sent %s", value.formatted_string()),
        before_send_bytes=lambda data: logger.debug("Sent bytes: %s", _go_quote(data)),
        after_bytes_received=lambda data: logger.debug("Received bytes: %s", _go_quote(data)),
        after_read_value=lambda value: logger.debug(
            "Received RESP %s: %s", value.type, value.formatted_string()
        ),
    )


class InstrumentedRespConnection(RespConnection):
    """A RESP connection that logs what it sends and receives."""

    def __init__(self, sock: socket.socket, base_logger: AnyLogger, conn_identifier: str) -> None:
        self._logger = _with_prefix(base_logger, conn_identifier)
        super().__init__(sock, _default_callbacks(self._logger))

    def identifier(self) -> str:
        return self._logger.prefixes[-1]

    def get_logger(self) -> AnyLogger:
        """The connection's logger, prefixed with its identifier."""
        return self._logger

    def update_base_logger(self, logger: AnyLogger) -> None:
        """Log through logger from now on, keeping the connection's identifier."""
        self._logger = _with_prefix(logger, self.identifier())
        self.update_callbacks(_default_callbacks(self._logger))

    def set_read_value_interceptor(self, transformer: Callable[[Value], Value]) -> None:
        self.read_value_interceptor = transformer

    def unset_read_value_interceptor(self) -> None:
        self.read_value_interceptor = None


def new_from_addr(
    base_logger: AnyLogger, addr: str, conn_identifier: str
) -> InstrumentedRespConnection:
    """Connect to host:port and log under conn_identifier."""
    return InstrumentedRespConnection(open_socket(addr), base_logger, conn_identifier)


def new_from_conn(
    base_logger: AnyLogger, conn: socket.socket, conn_identifier: str
) -> InstrumentedRespConnection:
    """Wrap an already connected socket and log under conn_identifier."""
    return InstrumentedRespConnection(conn, base_logger, conn_identifier)