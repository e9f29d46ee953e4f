"""Logging configuration for the devtodo command line."""
import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.WARNING) -> None:
    """Send devtodo log records to stderr at ``level`` and above.

    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger("devtodo")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_devtodo_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._devtodo_handler = True
    logger.addHandler(handler)
