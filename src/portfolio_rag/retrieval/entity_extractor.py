"""Turn a free-text query into structured entities and a metadata filter."""

import json
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from portfolio_rag.entities.query import QueryEntities
from portfolio_rag.llm.base import BaseLLM

EXTRACTION_TEMPERATURE = 0.3

ENTITY_EXTRACTION_PROMPT = """
Extract the key entities from the user's query, especially technologies,
skills, professional experience or project types it mentions.
Return only a JSON object with these keys:
- technologies: array of technologies/frameworks mentioned
- experience: references to years of experience
- projectTypes: array of project types mentioned
- skills: array of skills mentioned
""".strip()


class EntityExtractor:
    """
    Asks the completion service for the technologies, experience, project
    types and skills a query mentions.

    Metadata keys produced by ``build_filter``:
        technologies -> "technologies"
        projectTypes -> "project_name"
    """

    def __init__(self, llm: BaseLLM):
        self.llm = llm

    async def extract_entities(self, query: str) -> QueryEntities | None:
        """
        Extract entities from ``query``.

        Returns:
            The parsed entities, or None when the service returned no content
            or something that is not a valid JSON object

        Raises:
            CompletionError: If the completion service fails
        """
        content = await self.llm.chat(
            messages=[
                {"role": "system", "content": ENTITY_EXTRACTION_PROMPT},
                {"role": "user", "content": query},
            ],
            temperature=EXTRACTION_TEMPERATURE,
            response_format={"type": "json_object"},
        )
        if not content:
            logger.debug("Entity extraction returned no content")
            return None

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse entity extraction response: {e}")
            return None
        if not isinstance(payload, dict):
            logger.warning(f"Entity extraction returned {type(payload).__name__}, expected object")
            return None

        try:
            return QueryEntities.model_validate(payload)
        except PydanticValidationError as e:
            logger.warning(f"Entity extraction response has an unexpected shape: {e.error_count()} errors")
            return None

    async def build_filter(self, query: str) -> dict[str, Any]:
        """
        Build a metadata filter from the entities in ``query``.

        Never raises: any failure yields an empty filter.
        """
        try:
            entities = await self.extract_entities(query)
        except Exception as e:
            logger.warning(f"Entity extraction failed, searching without a filter: {e}")
            return {}

        if entities is None:
            return {}

        filter: dict[str, Any] = {}
        if entities.technologies:
            filter["technologies"] = entities.technologies
        if entities.project_types:
            filter["project_name"] = entities.project_types

        if filter:
            logger.debug(f"Built metadata filter: {filter}")
        return filter
