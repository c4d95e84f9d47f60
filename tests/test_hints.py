import logging

import pytest

from respcheck.hints import log_friendly_bind_error, log_friendly_error

LOGGER_NAME = "respcheck.tests.hints"


@pytest.fixture
def logger(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    return logging.getLogger(LOGGER_NAME)


def _messages(caplog):
    return [r.getMessage() for r in caplog.records]


def test_eof_hint(logger, caplog):
    log_friendly_error(logger, Exception("EOF"))
    messages = _messages(caplog)
    assert len(messages) == 3
    assert messages[0].startswith("Hint: EOF is short for 'end of file'.")
    assert all(r.levelno == logging.INFO for r in caplog.records)


def test_bare_eoferror_gets_eof_hint(logger, caplog):
    log_friendly_error(logger, EOFError())
    assert _messages(caplog)[1] == " (a) didn't send a complete response, or"


def test_connection_reset_hint(logger, caplog):
    log_friendly_error(logger, ConnectionResetError("read: connection reset by peer"))
    messages = _messages(caplog)
    assert len(messages) == 1
    assert messages[0].startswith("Hint: 'connection reset by peer'")


def test_reply_is_empty_hint(logger, caplog):
    log_friendly_error(logger, Exception("reply is empty"))
    messages = _messages(caplog)
    assert len(messages) == 2
    assert "`Println`" in messages[1]


def test_unrelated_error_logs_nothing(logger, caplog):
    log_friendly_error(logger, Exception("something else"))
    log_friendly_bind_error(logger, Exception("something else"))
    assert _messages(caplog) == []


def test_bind_error_hint(logger, caplog):
    log_friendly_bind_error(logger, OSError("listen tcp :6379: bind: address already in use"))
    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.ERROR
    assert "SO_REUSEADDR" in caplog.records[0].getMessage()