"""
Logging configuration for Flowpilot.

The library logs through loguru and stays silent unless the host opts in
with ``configure_logging(verbose=True)``. The level is read from the
FLOWPILOT_LOG_LEVEL environment variable.
"""

import os
import sys

from loguru import logger

LOG_LEVEL_ENV_VAR = "FLOWPILOT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _get_log_level_from_env() -> str:
    """
    Read the log level from FLOWPILOT_LOG_LEVEL.

    Returns:
        str: The upper-cased level name, or INFO when unset or invalid.
    """
    level = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    if level not in VALID_LOG_LEVELS:
        return DEFAULT_LOG_LEVEL
    return level


def configure_logging(verbose: bool = False) -> None:
    """
    Reset loguru handlers for Flowpilot output.

    Parameters:
        verbose (bool): When True, log to stderr at the level from FLOWPILOT_LOG_LEVEL;
            when False, install a handler that drops every record.
    """
    logger.remove()
    if verbose:
        logger.add(
            sys.stderr,
            level=_get_log_level_from_env(),
            format=(
                "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
            ),
        )
    else:
        logger.add(lambda _message: None, level="CRITICAL")
