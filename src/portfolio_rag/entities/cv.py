"""Structured CV payload accepted by the CV ingestion endpoint."""

from pydantic import BaseModel, Field


class PersonalInfo(BaseModel):
    name: str
    title: str
    location: str
    email: str | None = None
    website: str | None = None
    linkedin: str | None = None
    github: str | None = None
    summary: str


class Experience(BaseModel):
    title: str
    company: str
    start_date: str
    end_date: str | None = None
    location: str | None = None
    description: str | None = None
    highlights: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)


class Education(BaseModel):
    degree: str
    field: str
    institution: str
    start_date: str
    end_date: str | None = None
    location: str | None = None
    description: str | None = None


class Skill(BaseModel):
    name: str
    category: str
    proficiency: int = Field(..., ge=0, le=5)
    years_experience: float | None = None


class Project(BaseModel):
    name: str
    description: str | None = None
    url: str | None = None
    repository: str | None = None
    technologies: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)


class CVData(BaseModel):
    personal_info: PersonalInfo = Field(..., alias="personalInfo")
    experiences: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

    model_config = {
        "populate_by_name": True,
    }

    def technologies(self) -> list[str]:
        """All technologies mentioned by experiences and projects, first mention order."""
        seen: dict[str, None] = {}
        for item in [*self.experiences, *self.projects]:
            for tech in item.technologies:
                seen.setdefault(tech, None)
        return list(seen)

    def skill_names(self) -> list[str]:
        return [skill.name for skill in self.skills]
