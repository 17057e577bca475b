"""Logging setup and timing instrumentation built on *Loguru*.

Library modules import ``logger`` from :mod:`loguru` directly and never add
handlers; only entry points call :func:`configure_logging`.
"""

from __future__ import annotations

import functools
import sys
import time
from typing import Any, Callable, TypeVar

from loguru import logger

F = TypeVar("F", bound=Callable[..., Any])

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level:<8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(level: str = "INFO", colorize: bool | None = None) -> None:
    """Replace Loguru's default handler with a formatted stderr sink.

    Args:
        level: Minimum level to emit (``"DEBUG"``, ``"INFO"``, ...).
        colorize: Force colour on or off; ``None`` lets Loguru detect a TTY.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level.upper(),
        colorize=colorize,
    )


def timed(label: str | None = None) -> Callable[[F], F]:
    """Decorator that logs the wall-clock duration of each call at DEBUG.

    Args:
        label: Name to log; defaults to the wrapped function's qualified name.

    Returns:
        The decorator.
    """

    def decorator(func: F) -> F:
        name = label or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000.0
                logger.debug("{} took {:.1f} ms", name, elapsed_ms)

        return wrapper  # type: ignore[return-value]

    return decorator
