"""Retrieval entities: scored results and the context assembled from them."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class RetrievalResult(BaseModel):
    """A stored chunk returned by a similarity search.

    Attributes:
        content: The chunk text
        metadata: The chunk metadata (document_id, title, type, source, ...)
        score: Cosine similarity clamped to [0, 1], higher is more similar
    """

    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    score: float = Field(..., ge=0.0, le=1.0)

    model_config = {
        "frozen": True,
    }

    def __lt__(self, other: "RetrievalResult") -> bool:
        """Enable sorting by score (descending)."""
        return self.score > other.score


class ContextItem(BaseModel):
    """One retrieved chunk prepared for the prompt."""

    content: str
    source: str | None = None
    title: str | None = None
    type: str | None = None
    relevance: float


class ContextStatus(StrEnum):
    FOUND = "found"
    NO_RELEVANT_CONTEXT = "no_relevant_context"


class RetrievedContext(BaseModel):
    """Result of a context lookup.

    An empty lookup is a normal outcome reported through ``status``,
    never an exception.
    """

    items: list[ContextItem] = Field(default_factory=list)
    filter: dict[str, Any] = Field(default_factory=dict)

    @property
    def status(self) -> ContextStatus:
        return ContextStatus.FOUND if self.items else ContextStatus.NO_RELEVANT_CONTEXT

    @property
    def found(self) -> bool:
        return self.status is ContextStatus.FOUND
