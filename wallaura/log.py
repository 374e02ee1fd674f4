"""
loguru setup for the proxy process.
"""

import sys

from loguru import logger


def setup_logging(log_level: str = "INFO") -> None:
    """Replace loguru's default handler with a single stdout sink."""
    logger.remove()
    logger.add(
        sys.stdout,
        level=log_level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message}",
        backtrace=True,
        diagnose=False,
        colorize=False,
    )
