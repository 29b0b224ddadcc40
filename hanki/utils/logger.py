"""Logging setup for the hanki package."""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "hanki"


def setup_logger(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger once.

    Args:
        level: Log level name (``Config.log_level``)
        log_file: Optional log file path (``Config.log_file``)

    Returns:
        The ``hanki`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(level.upper())
    logger.propagate = False

    # stderr keeps log lines apart from the menus on stdout
    console_handler = RichHandler(console=Console(stderr=True), show_path=False)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(file_handler)

    return logger
