"""
Logging configuration for the bot.
"""

import logging
import sys

LOGGER_NAME = "ltexbot"


def setup_logging(level: int = logging.INFO):
    """Setup logging with proper format and handlers."""

    # Create logger
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # Create console handler with formatting
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    # Create formatter
    formatter = logging.Formatter(
        '[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)

    # Add handler to logger
    logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def set_debug_logging(debug: bool) -> None:
    """Switch the shared logger between DEBUG and INFO."""
    bot_logger.setLevel(logging.DEBUG if debug else logging.INFO)


# Global logger instance
bot_logger = setup_logging()
