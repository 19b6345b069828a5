"""
Embedder for OpenAI-compatible ``/embeddings`` endpoints.

Works with OpenAI, Azure OpenAI and local servers exposing the same API.
The request goes through ``httpx`` synchronously; async callers run it in a
worker thread.
"""

import logging

import httpx

from portfolio_rag.errors import (
    EmbeddingError,
    classify_http_error,
    wrap_exception,
)
from portfolio_rag.llm.config import TimeoutConfig
from portfolio_rag.llm.embedder.base import BaseEmbedder
from portfolio_rag.utils.retry import RetryConfig, execute_with_retry

logger = logging.getLogger(__name__)


class OpenAIEmbedder(BaseEmbedder):
    """
    OpenAI-compatible embedder.

    Attributes:
        base_url: API base URL (e.g. "https://api.openai.com/v1")
        model: Model identifier (e.g. "text-embedding-3-small")
        batch_size: Maximum texts per API call
        retry_config: Policy applied to each batch request
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        model: str,
        dimension: int = 1536,
        batch_size: int = 100,
        timeout: TimeoutConfig | None = None,
        retry_config: RetryConfig | None = None,
        client: httpx.Client | None = None,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.batch_size = batch_size
        self.retry_config = retry_config or RetryConfig(max_attempts=1)
        self.client = client or httpx.Client(timeout=(timeout or TimeoutConfig()).to_httpx())
        self._dimension = dimension

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        vectors: list[list[float]] = []
        total_batches = (len(texts) + self.batch_size - 1) // self.batch_size
        if total_batches > 1:
            logger.info(
                f"Embedding {len(texts)} texts in {total_batches} batches "
                f"(batch_size={self.batch_size})"
            )

        for i in range(0, len(texts), self.batch_size):
            batch = texts[i:i + self.batch_size]
            try:
                vectors.extend(execute_with_retry(self._request, batch, config=self.retry_config))
            except EmbeddingError:
                raise
            except Exception as e:
                classified = wrap_exception(e, "Embedding request failed")
                logger.error(f"Embedding failed for batch {i // self.batch_size + 1}/{total_batches}: {classified}")
                raise EmbeddingError(
                    classified.message,
                    details={"model": self.model, "batch_size": len(batch)},
                    original_error=classified,
                ) from e

        return vectors

    def _request(self, batch: list[str]) -> list[list[float]]:
        """One POST to /embeddings; raises classified errors for HTTP failures."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            resp = self.client.post(
                f"{self.base_url}/embeddings",
                headers=headers,
                json={"input": batch, "model": self.model},
            )
        except httpx.HTTPError as e:
            raise wrap_exception(e, "Embedding request failed") from e
        if resp.status_code >= 400:
            raise classify_http_error(resp.status_code, resp.text, dict(resp.headers))

        results = resp.json().get("data", [])
        results.sort(key=lambda item: item.get("index", 0))
        vectors = [item["embedding"] for item in results]

        if len(vectors) != len(batch):
            raise EmbeddingError(
                f"Embedding service returned {len(vectors)} vectors for {len(batch)} inputs",
                details={"model": self.model},
            )
        if vectors:
            self._dimension = len(vectors[0])
        return vectors

    @property
    def dimension(self) -> int:
        return self._dimension

    def close(self) -> None:
        self.client.close()
