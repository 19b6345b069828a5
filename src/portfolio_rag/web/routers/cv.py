"""Structured CV ingestion API"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from portfolio_rag.engine import PortfolioRAG
from portfolio_rag.pipeline.ingestion import IngestionResult
from portfolio_rag.web.dependencies import get_engine
from portfolio_rag.web.routers.documents import ingestion_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cv", tags=["cv"])


@router.post("", response_model=IngestionResult)
async def ingest_cv(payload: dict[str, Any] | None = Body(default=None), engine: PortfolioRAG = Depends(get_engine)):
    """Replace the ``cv-main`` document with the posted CV."""
    if not payload:
        raise HTTPException(status_code=400, detail="CV data is required")

    result = await engine.ingest_cv(payload)
    logger.info(f"Ingested CV: success={result.success}, chunks={result.chunk_count}")
    return ingestion_response(result)
