"""Deterministic embedder for demos and tests."""

import hashlib

import numpy as np
from loguru import logger

from portfolio_rag.llm.embedder.base import BaseEmbedder


class MockEmbedder(BaseEmbedder):
    """Generates deterministic pseudo-random unit vectors.

    The same text always maps to the same vector, across processes.
    Not suitable for production: vectors carry no meaning.
    """

    def __init__(self, dimension: int = 64, seed: int = 42):
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self._dimension = dimension
        self.seed = seed
        logger.warning("Using MockEmbedder - NOT for production use!")

    def embed(self, texts: list[str]) -> list[list[float]]:
        return [self._vector(text) for text in texts]

    def _vector(self, text: str) -> list[float]:
        digest = hashlib.sha256(f"{self.seed}:{text}".encode("utf-8")).digest()
        rng = np.random.default_rng(int.from_bytes(digest[:8], "big"))
        vec = rng.standard_normal(self._dimension)
        return (vec / np.linalg.norm(vec)).tolist()

    @property
    def dimension(self) -> int:
        return self._dimension
