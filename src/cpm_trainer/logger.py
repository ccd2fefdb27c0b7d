"""Logging configuration for the CPM trainer."""
import logging
from typing import Optional

from cpm_trainer.config import settings

PACKAGE_LOGGER = "cpm_trainer"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger once.

    Args:
        level: Log level name; defaults to settings.LOG_LEVEL

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Streamlit re-executes the entry script on every interaction
    if not any(h.get_name() == PACKAGE_LOGGER for h in logger.handlers):
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.set_name(PACKAGE_LOGGER)
        logger.addHandler(console_handler)

    return logger
