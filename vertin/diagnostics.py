"""
Vertin diagnostics: opt-in debug logging.

Every vertin module logs through logging.getLogger(__name__), so all records
live under the "vertin" logger and stay silent until a handler is attached.
enable_debug() attaches one rich handler (on stderr, next to the fault
renderer) and is safe to call more than once.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def enable_debug(level="DEBUG", /):
    """
    Attach a RichHandler to the "vertin" logger and set its level.

    Parameters
    - level: str | int, a logging level name ("DEBUG", "info", ...) or number.

    Returns
    - the "vertin" logger.
    """
    if isinstance(level, str):
        if not isinstance(number := logging.getLevelName(level.upper()), int):
            raise ValueError(f"unknown logging level {level!r}")
        level = number
    elif isinstance(level, bool) or not isinstance(level, int):
        raise TypeError("enable_debug() argument must be a level name or number")

    logger = logging.getLogger("vertin")
    logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=console, show_time=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger


__all__ = (
    "enable_debug",
)
