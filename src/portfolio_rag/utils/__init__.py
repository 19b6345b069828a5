"""Utility functions for portfolio_rag."""

from .performance import timer
from .retry import RetryConfig, execute_with_retry, retry_with_backoff
from .similarity import clamp_score, cosine_similarity, normalize

__all__ = [
    "RetryConfig",
    "clamp_score",
    "cosine_similarity",
    "execute_with_retry",
    "normalize",
    "retry_with_backoff",
    "timer",
]
