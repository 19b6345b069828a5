"""
Retry with exponential backoff for calls to external services.

The embedding client routes its HTTP request through ``execute_with_retry``;
the number of attempts comes from ``EMBEDDING_MAX_ATTEMPTS`` (default 1, so
no retry unless configured).

Usage:
------
    from portfolio_rag.utils.retry import retry_with_backoff, RetryConfig

    @retry_with_backoff(max_attempts=3, base_delay=0.5)
    def fetch_embeddings(batch):
        return client.post("/embeddings", json=...)

    result = execute_with_retry(fetch_embeddings, batch, config=RetryConfig(max_attempts=2))
"""

import logging
import random
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, TypeVar

from portfolio_rag.errors import (
    PermanentError,
    PortfolioRAGError,
    RateLimitError,
    RetryableError,
    is_retryable,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    RetryableError,
    ConnectionError,
)


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum number of attempts, including the first one
        base_delay: Delay before the first retry (seconds)
        max_delay: Upper bound for any single delay (seconds)
        exponential_base: Growth factor between consecutive delays
        jitter: Random spread applied to each delay, as a fraction of it
        retry_on: Exception types that are retried
        stop_on: Exception types that are never retried
        on_retry: Callback ``(attempt, error, delay)`` invoked before sleeping
        respect_retry_after: Honor ``retry_after`` carried by RateLimitError
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: float = 0.1
    retry_on: tuple[type[Exception], ...] = DEFAULT_RETRYABLE_EXCEPTIONS
    stop_on: tuple[type[Exception], ...] = (PermanentError,)
    on_retry: Callable[[int, Exception, float], None] | None = None
    respect_retry_after: bool = True

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if not 0 <= self.jitter <= 1:
            raise ValueError("jitter must be between 0 and 1")


@dataclass
class RetryState:
    """Attempts, accumulated delay and errors seen by one retried call."""

    attempt: int = 0
    total_delay: float = 0.0
    errors: list[Exception] = field(default_factory=list)
    start_time: float = field(default_factory=time.monotonic)

    @property
    def elapsed_time(self) -> float:
        return time.monotonic() - self.start_time


def calculate_delay(attempt: int, config: RetryConfig, error: Exception | None = None) -> float:
    """
    Delay before the retry that follows ``attempt`` (1-based).

    A positive ``retry_after`` on a RateLimitError wins over the backoff curve.
    """
    if config.respect_retry_after and isinstance(error, RateLimitError):
        if error.retry_after is not None and error.retry_after > 0:
            logger.debug(f"Using Retry-After header: {error.retry_after}s")
            return min(error.retry_after, config.max_delay)

    delay = config.base_delay * (config.exponential_base ** (attempt - 1))

    if config.jitter > 0:
        spread = delay * config.jitter
        delay += random.uniform(-spread, spread)

    return max(0.0, min(delay, config.max_delay))


def should_retry(error: Exception, attempt: int, config: RetryConfig) -> bool:
    """Whether ``error`` raised on ``attempt`` should be retried."""
    if attempt >= config.max_attempts:
        return False

    if isinstance(error, config.stop_on):
        logger.debug(f"Error type {type(error).__name__} in stop_on list, not retrying")
        return False

    if isinstance(error, config.retry_on) or is_retryable(error):
        return True

    logger.debug(f"Error type {type(error).__name__} is not retryable")
    return False


def retry_with_backoff(
    func: Callable[..., T] | None = None,
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    on_retry: Callable[[int, Exception, float], None] | None = None,
    config: RetryConfig | None = None,
) -> Callable[..., T] | Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that retries a function with exponential backoff.

    Works bare (``@retry_with_backoff``) or with arguments
    (``@retry_with_backoff(max_attempts=5)``). A full ``config`` overrides the
    individual keyword arguments. The last error is re-raised once attempts
    are exhausted or the error is not retryable.
    """
    if config is None:
        config = RetryConfig(
            max_attempts=max_attempts,
            base_delay=base_delay,
            max_delay=max_delay,
            on_retry=on_retry,
        )

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            state = RetryState()

            while True:
                state.attempt += 1
                try:
                    return fn(*args, **kwargs)
                except Exception as e:
                    state.errors.append(e)
                    _log_error(fn.__name__, state.attempt, config.max_attempts, e)

                    if not should_retry(e, state.attempt, config):
                        if state.attempt > 1:
                            logger.error(
                                f"[{fn.__name__}] Giving up after {state.attempt} attempts "
                                f"({state.elapsed_time:.2f}s): {type(e).__name__}: {e}"
                            )
                        raise

                    delay = calculate_delay(state.attempt, config, e)
                    state.total_delay += delay

                    if config.on_retry:
                        try:
                            config.on_retry(state.attempt, e, delay)
                        except Exception as callback_error:
                            logger.warning(f"on_retry callback failed: {callback_error}")

                    logger.warning(
                        f"[{fn.__name__}] Retrying in {delay:.2f}s "
                        f"(attempt {state.attempt}/{config.max_attempts}) "
                        f"after {type(e).__name__}: {e}"
                    )
                    time.sleep(delay)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


def _log_error(func_name: str, attempt: int, max_attempts: int, error: Exception) -> None:
    error_info: dict[str, Any] = {
        "function": func_name,
        "attempt": attempt,
        "max_attempts": max_attempts,
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    if isinstance(error, PortfolioRAGError):
        error_info["details"] = error.details

    logger.debug(f"[{func_name}] Attempt {attempt} failed: {error_info}")


def execute_with_retry(
    func: Callable[..., T],
    *args: Any,
    config: RetryConfig | None = None,
    **kwargs: Any
) -> T:
    """Run ``func(*args, **kwargs)`` under a retry policy (non-decorator style)."""
    config = config or RetryConfig()

    @retry_with_backoff(config=config)
    def _call() -> T:
        return func(*args, **kwargs)

    return _call()
