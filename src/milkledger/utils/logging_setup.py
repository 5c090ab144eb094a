"""Logging setup for the milkledger command line."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Warnings and errors are shown by default; ``verbose`` shows debug output.
    Calling it again adjusts the level and points the handler at the
    current ``sys.stderr``.
    """
    logger = logging.getLogger("milkledger")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in logger.handlers:
        if getattr(handler, "_milkledger", False):
            handler.setStream(sys.stderr)
            return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._milkledger = True
    logger.addHandler(handler)
    return logger
