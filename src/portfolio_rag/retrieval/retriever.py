"""Similarity-filtered retrieval over the vector store."""

import asyncio
from typing import Any

from loguru import logger

from portfolio_rag.datasource.vdb.base import BaseVectorStore
from portfolio_rag.entities.search_result import RetrievalResult, RetrievedContext
from portfolio_rag.errors import EmbeddingError
from portfolio_rag.llm.embedder.base import BaseEmbedder
from portfolio_rag.retrieval.context import assemble_context
from portfolio_rag.retrieval.entity_extractor import EntityExtractor


class Retriever:
    """
    Embeds text queries, searches the store and drops weak matches.

    "Nothing relevant" is an empty list (or a NO_RELEVANT_CONTEXT status),
    never an error. Metadata filters are advisory: when a filtered search
    leaves nothing above the threshold, one unfiltered search is made.

    Attributes:
        default_threshold: Minimum score kept when the caller passes none
        default_limit: Results requested when the caller passes none
    """

    def __init__(
        self,
        embedder: BaseEmbedder,
        vector_store: BaseVectorStore,
        entity_extractor: EntityExtractor | None = None,
        default_threshold: float = 0.75,
        default_limit: int = 5,
    ):
        self.embedder = embedder
        self.vector_store = vector_store
        self.entity_extractor = entity_extractor
        self.default_threshold = default_threshold
        self.default_limit = default_limit

    async def retrieve(
        self,
        query: str,
        limit: int | None = None,
        filter: dict[str, Any] | None = None,
        threshold_score: float | None = None,
    ) -> list[RetrievalResult]:
        """
        Return up to ``limit`` results scoring at least ``threshold_score``,
        best first.

        Raises:
            EmbeddingError: If the query cannot be embedded
            VectorStoreError: If the search fails
        """
        limit = self.default_limit if limit is None else limit
        threshold = self.default_threshold if threshold_score is None else threshold_score

        if not query.strip() or limit <= 0:
            return []

        vectors = await asyncio.to_thread(self.embedder.embed, [query])
        if not vectors:
            raise EmbeddingError("Embedding service returned no vector for the query")
        query_vector = vectors[0]

        results = await self._search(query_vector, limit, filter, threshold)
        if not results and filter:
            logger.debug(f"No results above {threshold} with filter {filter}, retrying unfiltered")
            results = await self._search(query_vector, limit, None, threshold)

        logger.debug(f"Retrieved {len(results)} results (limit={limit}, threshold={threshold})")
        return results

    async def _search(
        self,
        query_vector: list[float],
        limit: int,
        filter: dict[str, Any] | None,
        threshold: float,
    ) -> list[RetrievalResult]:
        results = await asyncio.to_thread(
            self.vector_store.similarity_search,
            query_vector,
            limit,
            filter,
        )
        return [r for r in results if r.score >= threshold]

    async def retrieve_context(
        self,
        query: str,
        limit: int | None = None,
        use_entity_filter: bool = False,
        threshold_score: float | None = None,
    ) -> RetrievedContext:
        """Retrieve and assemble context, optionally narrowed by extracted entities."""
        filter: dict[str, Any] = {}
        if use_entity_filter and self.entity_extractor is not None:
            filter = await self.entity_extractor.build_filter(query)

        results = await self.retrieve(query, limit=limit, filter=filter or None, threshold_score=threshold_score)
        return RetrievedContext(items=assemble_context(results), filter=filter)
