"""Structured entities extracted from a free-text query."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class QueryEntities(BaseModel):
    """
    Entities the completion service found in a user query.

    The model answers in camelCase (``projectTypes``); both spellings are
    accepted.
    """
    technologies: list[str] = Field(default_factory=list)
    experience: str | int | float | list[str] | None = None
    project_types: list[str] = Field(default_factory=list, alias="projectTypes")
    skills: list[str] = Field(default_factory=list)

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("technologies", "project_types", "skills", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value

    def is_empty(self) -> bool:
        return not (self.technologies or self.project_types or self.skills or self.experience)
