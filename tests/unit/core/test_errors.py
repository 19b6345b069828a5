"""Tests for error classification."""

import pytest

from portfolio_rag.errors import (
    AuthenticationError,
    ConfigurationError,
    DependencyError,
    EmbeddingError,
    InvalidRequestError,
    NotFoundError,
    PartialIngestionError,
    PermanentError,
    PortfolioRAGError,
    RateLimitError,
    RequestTimeoutError,
    RetryableError,
    ServiceConnectionError,
    ServiceUnavailableError,
    TransientError,
    ValidationError,
    VectorStoreError,
    classify_http_error,
    is_retryable,
    wrap_exception,
)


class TestErrorHierarchy:

    def test_dependency_errors(self):
        assert issubclass(EmbeddingError, DependencyError)
        assert issubclass(VectorStoreError, DependencyError)
        assert issubclass(DependencyError, PortfolioRAGError)

    def test_str_includes_details_and_cause(self):
        error = EmbeddingError("Embedding failed", details={"model": "m"}, original_error=RateLimitError())

        text = str(error)

        assert text.startswith("Embedding failed")
        assert "'model': 'm'" in text
        assert "Caused by: RateLimitError" in text

    def test_to_dict(self):
        error = ValidationError("Document text is required")

        assert error.to_dict() == {
            "error_type": "ValidationError",
            "message": "Document text is required",
            "details": {},
            "original_error": None,
        }

    def test_partial_ingestion_carries_progress(self):
        error = PartialIngestionError("stopped", document_id="doc", chunks_written=3)

        assert error.chunks_written == 3
        assert error.details == {"document_id": "doc", "chunks_written": 3}


class TestIsRetryable:

    @pytest.mark.parametrize("error,expected", [
        (RateLimitError(), True),
        (RequestTimeoutError(timeout=5), True),
        (AuthenticationError(), False),
        (ValueError("x"), False),
        (EmbeddingError("e", original_error=ServiceUnavailableError()), True),
        (EmbeddingError("e", original_error=InvalidRequestError()), False),
        (EmbeddingError("e"), False),
    ])
    def test_is_retryable(self, error, expected):
        assert is_retryable(error) is expected


class TestClassifyHttpError:

    @pytest.mark.parametrize("status,kind", [
        (400, InvalidRequestError),
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, NotFoundError),
        (429, RateLimitError),
        (500, TransientError),
        (503, ServiceUnavailableError),
        (418, PermanentError),
    ])
    def test_status_codes(self, status, kind):
        error = classify_http_error(status, "body")

        assert type(error) is kind
        assert error.details == {"status_code": status}

    def test_retry_after_header(self):
        error = classify_http_error(429, "", {"retry-after": "12"})

        assert error.retry_after == 12.0
        assert error.message == "API rate limit exceeded"

    def test_unparseable_retry_after(self):
        assert classify_http_error(503, "", {"Retry-After": "soon"}).retry_after is None


class TestWrapException:

    def test_classified_error_returned_unchanged(self):
        error = VectorStoreError("gone")
        assert wrap_exception(error) is error

    @pytest.mark.parametrize("raised,kind", [
        (TimeoutError("operation timed out"), RequestTimeoutError),
        (ConnectionError("connection refused"), ServiceConnectionError),
        (RuntimeError("Rate limit reached"), RateLimitError),
        (RuntimeError("Invalid API key provided"), AuthenticationError),
        (RuntimeError("something odd"), PermanentError),
    ])
    def test_classification(self, raised, kind):
        wrapped = wrap_exception(raised, "Embedding request failed")

        assert type(wrapped) is kind
        assert wrapped.original_error is raised
        assert wrapped.message.startswith("Embedding request failed: ")

    def test_retryable_family(self):
        assert isinstance(wrap_exception(TimeoutError("t")), RetryableError)
        assert not isinstance(ConfigurationError(), RetryableError)
