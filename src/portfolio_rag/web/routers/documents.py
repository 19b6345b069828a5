"""Document management API"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portfolio_rag.engine import PortfolioRAG
from portfolio_rag.entities.document import DocumentRecord, DocumentType
from portfolio_rag.pipeline.ingestion import IngestionResult
from portfolio_rag.web.dependencies import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["documents"])


class DocumentCreate(BaseModel):
    text: str = ""
    title: str | None = None
    type: str | None = None
    source: str | None = None


class DocumentOut(BaseModel):
    id: str
    title: str
    type: DocumentType
    source: str
    chunk_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "DocumentOut":
        return cls(**record.model_dump())


class DocumentList(BaseModel):
    documents: list[DocumentOut]


class DeleteResponse(BaseModel):
    success: bool
    message: str


def ingestion_response(result: IngestionResult):
    """200 on success, 400 for rejected input, 500 for dependency failures."""
    if result.success:
        return result
    status = 400 if result.error_type == "ValidationError" else 500
    return JSONResponse(status_code=status, content=result.model_dump(by_alias=True))


@router.get("", response_model=DocumentList)
async def list_documents(engine: PortfolioRAG = Depends(get_engine)):
    """All documents, newest first."""
    records = await engine.list_documents()
    return DocumentList(documents=[DocumentOut.from_record(r) for r in records])


@router.post("", response_model=IngestionResult)
async def create_document(req: DocumentCreate, engine: PortfolioRAG = Depends(get_engine)):
    if not req.text.strip() or not req.type:
        raise HTTPException(status_code=400, detail="Text and document type are required")
    if not DocumentType.is_valid(req.type):
        allowed = ", ".join(t.value for t in DocumentType)
        raise HTTPException(status_code=400, detail=f"Invalid document type '{req.type}'. Allowed: {allowed}")

    result = await engine.ingest(
        req.text,
        {
            "title": req.title or "Untitled Document",
            "type": req.type,
            "source": req.source or "manual-input",
        },
    )
    logger.info(f"Ingested document {result.document_id}: success={result.success}, chunks={result.chunk_count}")
    return ingestion_response(result)


@router.delete("/{document_id}", response_model=DeleteResponse)
async def delete_document(document_id: str, engine: PortfolioRAG = Depends(get_engine)):
    if not await engine.delete_document(document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return DeleteResponse(success=True, message="Document successfully deleted")
