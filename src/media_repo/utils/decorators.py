"""Decorator utilities for cross-cutting concerns."""
import time
import logging
import functools
from typing import Any, Callable, TypeVar, cast

# Setup logging
logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_execution_time(func: F) -> F:
    """Decorator to log how long a storage backend method took.

    The owning object's class name is included so local and S3 calls can be
    told apart in the log.

    Args:
        func: The method to decorate

    Returns:
        Decorated method that logs execution time
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        name = f"{type(self).__name__}.{func.__name__}"
        start_time = time.perf_counter()
        try:
            result = func(self, *args, **kwargs)
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(f"{name} completed in {duration_ms:.1f}ms")
            return result
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(f"{name} failed after {duration_ms:.1f}ms: {str(e)}")
            raise
    return cast(F, wrapper)
