"""Decorator utilities for cross-cutting concerns."""
import time
import logging
import functools
from typing import Any, Callable, TypeVar, cast

from b2_relay.errors import describe_upstream_error

# Setup logging
logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_execution_time(func: F) -> F:
    """Decorator to log how long an upstream call took.

    Failures are logged at DEBUG level only, with the upstream error body when
    there is one, and re-raised unchanged for the caller to report. Nothing is
    retried.

    Args:
        func: The function to decorate

    Returns:
        Decorated function that logs execution time
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            duration = time.perf_counter() - start_time
            logger.info(f"{func.__name__} completed in {duration:.2f}s")
            return result
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.debug(f"{func.__name__} failed after {duration:.2f}s: {describe_upstream_error(e)}")
            raise
    return cast(F, wrapper)
