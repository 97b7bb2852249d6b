import logging
import os
import sys

from pythonjsonlogger import jsonlogger

_HANDLER_NAME = "scribe_backends"


def setup_logging():
    """
    Configures structured JSON logging for the backends package.

    Installs a single JSON stream handler on the package logger. Records carry
    timestamp, level, logger name, message and any ``extra`` context passed at
    the call site. The level is read from ``SCRIBE_LOG_LEVEL`` (default INFO).
    Calling this more than once is safe: the handler is only attached once.

    Returns:
        logging.Logger: The configured package logger.
    """
    package_logger = logging.getLogger("scribe_backends")
    package_logger.setLevel(os.getenv("SCRIBE_LOG_LEVEL", "INFO").upper())

    if any(h.get_name() == _HANDLER_NAME for h in package_logger.handlers):
        return package_logger

    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.set_name(_HANDLER_NAME)
    stream_handler.setFormatter(formatter)

    package_logger.addHandler(stream_handler)
    package_logger.propagate = False

    return package_logger
