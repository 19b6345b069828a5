"""
Portfolio RAG error classification.

Two axes are modelled here:

1. What failed (the kind the caller reacts to):
   - ValidationError: bad input, rejected before any side effect
   - DependencyError: the embedding service, vector store, completion
     service or conversation store failed
   - PartialIngestionError: chunk writes stopped partway through a document
   - RetrievalDegradedError: retrieval or entity extraction failed inside a
     chat call and the call continued without augmentation

2. Whether retrying can help (how a retry policy reacts):
   - RetryableError: rate limits, 503s, timeouts, connection failures
   - PermanentError: bad credentials, malformed requests, missing resources

Dependency errors usually carry the classified transport error as
``original_error`` so the retry decision and the log line both have it.

Usage:
------
    from portfolio_rag.errors import EmbeddingError, classify_http_error

    if response.status_code >= 400:
        raise classify_http_error(response.status_code, response.text, dict(response.headers))
"""

from typing import Any


class PortfolioRAGError(Exception):
    """
    Base exception for all portfolio_rag errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error (optional)
        original_error: The underlying exception that caused this error (optional)
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.original_error:
            base += f" | Caused by: {type(self.original_error).__name__}: {self.original_error}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "original_error": str(self.original_error) if self.original_error else None
        }


# =============================================================================
# Caller-facing kinds
# =============================================================================

class ValidationError(PortfolioRAGError):
    """
    Raised when input is rejected before any side effect.

    Examples: empty ingestion text, a document type outside the closed
    enumeration, an empty chat message.
    """
    pass


class DependencyError(PortfolioRAGError):
    """Base class for failures of an external collaborator."""
    pass


class EmbeddingError(DependencyError):
    """Raised when the embedding service fails."""
    pass


class VectorStoreError(DependencyError):
    """Raised when a vector/document store operation fails."""
    pass


class CompletionError(DependencyError):
    """Raised when the completion service fails."""
    pass


class ConversationStoreError(DependencyError):
    """Raised when conversation history cannot be read or written."""
    pass


class PartialIngestionError(PortfolioRAGError):
    """
    Raised when chunk writes fail partway through a document.

    Chunks written before the failure are not rolled back; re-running the
    ingestion for the same document id replaces them.

    Attributes:
        document_id: The document being ingested
        chunks_written: How many chunks reached the store before the failure
    """

    def __init__(
        self,
        message: str,
        document_id: str,
        chunks_written: int = 0,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        details = details or {}
        details["document_id"] = document_id
        details["chunks_written"] = chunks_written
        super().__init__(message, details, original_error)
        self.document_id = document_id
        self.chunks_written = chunks_written


class RetrievalDegradedError(PortfolioRAGError):
    """Retrieval failed inside a chat call; the answer continues without context."""
    pass


# =============================================================================
# Retryable Errors - Transient failures that may succeed on retry
# =============================================================================

class RetryableError(PortfolioRAGError):
    """
    Base class for errors that may succeed on retry.

    Attributes:
        retry_after: Suggested wait time before retry (seconds), if known
    """

    def __init__(
        self,
        message: str,
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, details, original_error)
        self.retry_after = retry_after


class RateLimitError(RetryableError):
    """Raised when API rate limit is exceeded (HTTP 429)."""

    def __init__(
        self,
        message: str = "API rate limit exceeded",
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, retry_after, details, original_error)


class ServiceUnavailableError(RetryableError):
    """Raised when service is temporarily unavailable (HTTP 503)."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, retry_after, details, original_error)


class ServiceConnectionError(RetryableError):
    """Raised when connection to service fails (DNS, refused, unreachable)."""

    def __init__(
        self,
        message: str = "Failed to connect to service",
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, retry_after=None, details=details, original_error=original_error)


class TransientError(RetryableError):
    """Generic retryable error for unclassified transient failures."""
    pass


class RequestTimeoutError(RetryableError):
    """
    Raised when a request exceeds its time limit.

    Attributes:
        timeout: The timeout value that was exceeded (seconds)
    """

    def __init__(
        self,
        message: str = "Request timed out",
        timeout: float | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        details = details or {}
        details["timeout"] = timeout
        super().__init__(message, retry_after=None, details=details, original_error=original_error)
        self.timeout = timeout


# =============================================================================
# Permanent Errors - Failures that won't succeed on retry
# =============================================================================

class PermanentError(PortfolioRAGError):
    """Base class for errors that will not succeed on retry."""
    pass


class AuthenticationError(PermanentError):
    """Raised when authentication fails (HTTP 401/403)."""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, details, original_error)


class InvalidRequestError(PermanentError):
    """Raised when request parameters are invalid (HTTP 400)."""

    def __init__(
        self,
        message: str = "Invalid request parameters",
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, details, original_error)


class NotFoundError(PermanentError):
    """Raised when requested resource is not found (HTTP 404)."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, details, original_error)


class ConfigurationError(PermanentError):
    """Raised when required configuration is missing or invalid."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, details, original_error)


# =============================================================================
# Helper Functions
# =============================================================================

def is_retryable(error: Exception) -> bool:
    """
    Check if an error is retryable.

    Dependency errors are judged by the transport error they wrap.
    """
    if isinstance(error, RetryableError):
        return True
    if isinstance(error, PortfolioRAGError) and error.original_error is not None:
        return isinstance(error.original_error, RetryableError)
    return False


def classify_http_error(status_code: int, message: str = "", headers: dict | None = None) -> PortfolioRAGError:
    """
    Classify an HTTP error based on status code.

    Args:
        status_code: HTTP status code
        message: Error message from response
        headers: Response headers (used to extract Retry-After)

    Returns:
        Appropriate PortfolioRAGError subclass instance
    """
    headers = headers or {}
    retry_after = None

    raw_retry_after = headers.get("Retry-After") or headers.get("retry-after")
    if raw_retry_after is not None:
        try:
            retry_after = float(raw_retry_after)
        except (ValueError, TypeError):
            pass

    details = {"status_code": status_code}

    if status_code == 429:
        return RateLimitError(
            message=message or "API rate limit exceeded",
            retry_after=retry_after,
            details=details
        )
    elif status_code == 401:
        return AuthenticationError(
            message=message or "Authentication failed - invalid API key",
            details=details
        )
    elif status_code == 403:
        return AuthenticationError(
            message=message or "Access forbidden - insufficient permissions",
            details=details
        )
    elif status_code == 400:
        return InvalidRequestError(
            message=message or "Invalid request parameters",
            details=details
        )
    elif status_code == 404:
        return NotFoundError(
            message=message or "Resource not found",
            details=details
        )
    elif status_code == 503:
        return ServiceUnavailableError(
            message=message or "Service temporarily unavailable",
            retry_after=retry_after,
            details=details
        )
    elif status_code >= 500:
        return TransientError(
            message=message or f"Server error (HTTP {status_code})",
            details=details
        )
    else:
        return PermanentError(
            message=message or f"HTTP error {status_code}",
            details=details
        )


def wrap_exception(error: Exception, context: str = "") -> PortfolioRAGError:
    """
    Wrap a generic exception in the closest PortfolioRAGError subclass.

    Already-classified errors are returned unchanged.

    Args:
        error: The original exception
        context: Where the error occurred, prefixed to the message

    Returns:
        PortfolioRAGError instance wrapping the original error
    """
    if isinstance(error, PortfolioRAGError):
        return error

    error_str = str(error).lower()
    error_type = type(error).__name__
    message = f"{context}: {error}" if context else str(error)

    if "timeout" in error_type.lower() or "timed out" in error_str or "timeout" in error_str:
        return RequestTimeoutError(message=message, original_error=error)

    if error_type in ("ConnectError", "ConnectionError", "APIConnectionError") or any(
        x in error_str for x in ["connection refused", "network", "dns"]
    ):
        return ServiceConnectionError(message=message, original_error=error)

    if any(x in error_str for x in ["rate limit", "too many requests", "429"]):
        return RateLimitError(message=message, original_error=error)

    if any(x in error_str for x in ["api key", "unauthorized", "401", "403"]):
        return AuthenticationError(message=message, original_error=error)

    # Unknown errors are not retried
    return PermanentError(message=message, original_error=error)
