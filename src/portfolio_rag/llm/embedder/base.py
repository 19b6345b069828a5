"""Base embedder interface."""

from abc import ABC, abstractmethod


class BaseEmbedder(ABC):
    """Abstract base class for embedding generation.

    Embedders convert text strings into fixed-dimension vectors.
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts.

        Args:
            texts: Strings to embed

        Returns:
            One vector per input, in input order; ``[]`` for empty input

        Raises:
            EmbeddingError: If the embedding service fails
        """
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Size of the vectors produced by this embedder."""
        pass

    def close(self) -> None:
        """Release network resources, if any."""
