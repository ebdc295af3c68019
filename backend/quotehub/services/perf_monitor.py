"""Timing decorators for engine entry points and store round-trips."""
import time
import logging
import functools
from typing import Callable

logger = logging.getLogger("quotehub-api.perf")


def timed(func: Callable) -> Callable:
    """
    Decorator that measures and logs (DEBUG) execution time of a synchronous
    function.

    Usage::

        @timed
        def recompute(quote):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.debug(
                "function timed",
                extra={
                    "function": func.__qualname__,
                    "duration_ms": duration_ms,
                },
            )
    return wrapper


def timed_async(func: Callable) -> Callable:
    """Async counterpart of :func:`timed`."""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.debug(
                "async function timed",
                extra={
                    "function": func.__qualname__,
                    "duration_ms": duration_ms,
                },
            )
    return wrapper
