"""Friendly hints for common failures seen when talking to a server."""

from __future__ import annotations

import logging
from typing import Union

AnyLogger = Union[logging.Logger, logging.LoggerAdapter]


def log_friendly_error(logger: AnyLogger, err: BaseException) -> None:
    """Log hints that explain common connection errors."""
    message = str(err)

    if message == "EOF" or (isinstance(err, EOFError) and not message):
        logger.info(
            "Hint: EOF is short for 'end of file'. This usually means that your program either:"
        )
        logger.info(" (a) didn't send a complete response, or")
        logger.info(" (b) closed the connection early")

    if "connection reset by peer" in message:
        logger.info(
            "Hint: 'connection reset by peer' usually means that your program closed the "
            "connection before sending a complete response."
        )

    if "reply is empty" in message:
        logger.info(
            "Hint: 'reply is empty' usually means that your program sent an additional "
            "`\\n` in the response."
        )
        logger.info(
            "       A common reason for this is using methods like `Println` that append "
            "a newline charater."
        )


def log_friendly_bind_error(logger: AnyLogger, err: BaseException) -> None:
    """Log a hint when binding failed because the address is in use."""
    if "bind: address already in use" in str(err):
        logger.error(
            "This failure most likely means that your server didn't use the SO_REUSEADDR "
            "socket option while starting the server in the previous stage. SO_REUSEADDR is "
            "required to reuse previous sockets which were bound on the same address. Try "
            "setting the SO_REUSEADDR flag when creating your TCP server."
        )