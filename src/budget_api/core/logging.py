"""
Shared logging setup.
"""

import logging
import sys

from budget_api.api.middleware.logging import JSONLogFormatter

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "budget_api.console"


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Configure the root logger with a single console handler.

    Calling this again (e.g. when the app is rebuilt in tests) replaces the
    handler installed earlier instead of stacking another one.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        json_format: Emit JSON lines instead of plain text
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(log_level)
    if json_format:
        console_handler.setFormatter(JSONLogFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)

    # httpx logs every request URL at INFO, including filter formulas.
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
