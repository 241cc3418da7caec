"""Total-function wrapper for report aggregators.

Aggregators are written assuming well-formed, normalized input. This wrapper
is the single place where an unexpected record shape is turned into a logged
warning plus a neutral result, so one bad record can never take down a
dashboard or a bulk export.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


def total_function(fallback: Callable[..., R]) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """Make an aggregator total by substituting a fallback result on failure.

    Args:
        fallback: Called with the same arguments as the wrapped function when
            it raises; its return value is used instead. Taking the arguments
            lets fallbacks shape their result (e.g. a zero-filled trend of the
            requested window).

    Returns:
        Decorator applying the fallback to the wrapped function.

    Example:
        >>> @total_function(lambda registrations: [])
        ... def event_distribution(registrations): ...
    """

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> R:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.warning(f"{func.__qualname__} failed, using fallback result: {e}", exc_info=True)
                return fallback(*args, **kwargs)

        return wrapper

    return decorator


def empty_list(*args: Any, **kwargs: Any) -> list[Any]:
    """Fallback returning an empty list."""
    return []


def zero(*args: Any, **kwargs: Any) -> int:
    """Fallback returning zero."""
    return 0
