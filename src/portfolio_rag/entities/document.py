"""Document entities: the metadata row, its chunks and the ingestion request."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentType(StrEnum):
    CV = "cv"
    PORTFOLIO = "portfolio"
    PROJECT = "project"
    BLOG = "blog"
    GITHUB = "github"
    LINKEDIN = "linkedin"
    OTHER = "other"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls._value2member_map_


class DocumentRecord(BaseModel):
    """
    A row of the documents_metadata table.

    One record per logical source unit (a CV, a blog post). ``chunk_count``
    reflects the newest ingestion only.
    """
    id: str
    title: str
    type: DocumentType
    source: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    chunk_count: int = Field(default=0, ge=0)


class Chunk(BaseModel):
    """
    A contiguous slice of a document's text with its embedding.

    ``metadata`` always carries document_id, title, type, source and the
    zero-based chunk_index; tags such as technologies, skills,
    years_experience or project_name are optional.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    content: str = Field(..., min_length=1)
    embedding: list[float] | None = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def document_id(self) -> str | None:
        return self.metadata.get("document_id")

    @property
    def chunk_index(self) -> int | None:
        return self.metadata.get("chunk_index")


class IngestMetadata(BaseModel):
    """Caller-supplied metadata for one ingestion call."""
    document_id: str | None = None
    title: str = "Untitled Document"
    type: DocumentType
    source: str = "manual-input"
    # Copied onto every chunk so metadata filters can match them
    tags: dict[str, Any] = Field(default_factory=dict)
