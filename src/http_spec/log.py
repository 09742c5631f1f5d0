"""Logging setup for the http-spec command line.

Library modules only create ``logging.getLogger(__name__)`` loggers; this
module attaches the single handler used when running the CLI.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_logger = logging.getLogger("http_spec")


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure and return the package logger."""
    _logger.setLevel(level.upper())

    if not _logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        _logger.addHandler(handler)

    _logger.propagate = False
    return _logger
