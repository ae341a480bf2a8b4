import time
import functools
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Timer:
    """
    Wall-clock timing for calibrations and other long computations.

    Works as a context manager (``elapsed`` is set on exit) or as a
    decorator. Start and end are logged at ``log_level``; a block that
    raises is logged as failed and the exception propagates.
    """

    def __init__(self, name: str = "operation", log_level: int = logging.INFO):
        self.name = name
        self.log_level = log_level
        self.start_time: Optional[float] = None
        self.elapsed: Optional[float] = None

    def __enter__(self) -> "Timer":
        logger.log(self.log_level, f"{self.name} started")
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        status = "finished" if exc_type is None else f"failed ({exc_type.__name__})"
        logger.log(self.log_level, f"{self.name} {status} after {self.elapsed:.3f}s")

    def __call__(self, func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with Timer(func.__qualname__, self.log_level):
                return func(*args, **kwargs)
        return wrapper
