"""Logging helpers for logstash_reporter.

The library logs through the standard ``logging`` module and installs no
handlers of its own beyond a ``NullHandler`` on the package logger.
Applications decide where records go.
"""

import logging

from logstash_reporter.core.exceptions import ReporterError

PACKAGE_LOGGER = "logstash_reporter"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name``.

    Example:
        ```python
        from logstash_reporter import get_logger

        logger = get_logger(__name__)
        ```
    """
    return logging.getLogger(name)


def log_cycle_error(logger: logging.Logger, exc: BaseException) -> None:
    """Report a failed flush cycle.

    Reporter errors are expected operating conditions (collector down,
    unresolvable host) and are logged without a traceback. Anything else is
    a fault and is logged with one.
    """
    if isinstance(exc, ReporterError):
        logger.error("metrics flush failed: %s", exc)
    else:
        logger.error("unexpected fault during metrics flush", exc_info=exc)
