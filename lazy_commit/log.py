"""Diagnostic logging setup (loguru). User-facing text goes through lazy_commit.output."""

import os
import sys

from loguru import logger

LOG_LEVEL_ENV = "LAZY_COMMIT_LOG_LEVEL"
LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def setup_logging(verbose: bool = False) -> str | None:
    """Configure loguru sinks for this process.

    Returns the active stderr level, or None when diagnostics are silenced.
    """
    logger.remove()

    level = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not level:
        return None
    if level not in LEVELS:
        print(f"Config warning: unknown {LOG_LEVEL_ENV} '{level}', using INFO", file=sys.stderr)
        level = "INFO"

    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | {name}:{function} | {message}",
        colorize=None,
        catch=True,
    )
    logger.debug("Logging initialised at {}", level)
    return level
