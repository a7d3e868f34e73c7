"""
Logger setup - loguru configuration for the API process.

Console output is colorized at the configured level; an optional log file
captures everything at DEBUG.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

# Default level colors for console output
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum level for the console sink
        log_file: Optional path; when given, a DEBUG file sink is added

    Example:
        from jobboard.core.logger import setup_logger
        setup_logger("DEBUG", "logs/api.log")
    """
    # Remove default logger
    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(
        sys.stdout,
        format="{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>",
        level=level.upper(),
        colorize=True,
    )

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(exist_ok=True, parents=True)
        logger.add(
            path, format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}", level="DEBUG"
        )
