"""Timing helpers for pipeline stages."""

import time
from contextlib import contextmanager

from loguru import logger


@contextmanager
def timer(operation: str, log_level: str = "DEBUG", threshold_ms: float = 0):
    """Log how long the wrapped block took.

    Example:
        >>> with timer("Embedding 12 chunks"):
        ...     vectors = embedder.embed(texts)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        if elapsed_ms >= threshold_ms:
            logger.log(log_level.upper(), f"{operation} took {elapsed_ms:.2f}ms")
