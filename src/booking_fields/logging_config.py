"""Logging setup for the Booking User Fields service"""

import logging
import sys
from typing import Optional


class BelowWarningFilter(logging.Filter):
    """Pass DEBUG/INFO records only; WARNING and above go to stderr"""

    def filter(self, record):
        return record.levelno < logging.WARNING


def setup_logging(app_config: dict, stream_out=None, stream_err=None) -> None:
    """
    Route INFO/DEBUG to stdout and WARNING/ERROR to stderr.

    Args:
        app_config: Application config; ``log_level`` selects the root level
        stream_out: Optional override for the stdout stream
        stream_err: Optional override for the stderr stream
    """
    level_name = (app_config.get("log_level") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s")

    out_handler = logging.StreamHandler(stream_out or sys.stdout)
    out_handler.setLevel(logging.DEBUG)
    out_handler.addFilter(BelowWarningFilter())
    out_handler.setFormatter(formatter)

    err_handler = logging.StreamHandler(stream_err or sys.stderr)
    err_handler.setLevel(logging.WARNING)
    err_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace handlers so repeated setup does not duplicate output
    root_logger.handlers.clear()
    root_logger.addHandler(out_handler)
    root_logger.addHandler(err_handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the logger for a module (usually ``__name__``)"""
    return logging.getLogger(name)
