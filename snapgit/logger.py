"""Logging setup for the snapgit command line."""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(level="WARNING", sink=None):
    """Replace loguru's default handler with a single sink at LEVEL."""
    logger.remove()
    logger.add(sink or sys.stderr, format=LOG_FORMAT, level=level.upper())
