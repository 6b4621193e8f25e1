# =============================================================================
# Paranoid Snake - Logging Setup
# =============================================================================
"""
Logging configuration for programs embedding the engine.

The engine modules only create loggers; handlers are installed here, by the
embedding program, never on import.
"""

import logging
import os
from typing import Optional, Union

LOG_LEVEL_ENV = "PARANOID_SNAKE_LOG"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(level: Optional[Union[int, str]] = None) -> int:
    """Explicit level, else $PARANOID_SNAKE_LOG, else INFO"""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV) or "INFO"
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(level: Optional[Union[int, str]] = None) -> int:
    """Configure root logging and return the level in effect"""
    resolved = resolve_level(level)
    logging.basicConfig(level=resolved, format=DEFAULT_FORMAT)
    logging.getLogger("paranoid_snake").setLevel(resolved)
    return resolved
