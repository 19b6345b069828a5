"""Render structured CV data as markdown-like text for ingestion."""

from datetime import datetime

from loguru import logger

from portfolio_rag.entities.cv import CVData, Skill

CV_DOCUMENT_ID = "cv-main"
CV_SOURCE = "direct-input"


def format_date(value: str | None) -> str:
    """Format an ISO date (``2021-03`` or ``2021-03-15``) as ``March 2021``.

    Unparseable values are returned unchanged; a missing value is ``N/A``.
    """
    if not value:
        return "N/A"
    candidate = value.strip()
    for fmt in ("%Y-%m-%d", "%Y-%m", "%Y"):
        try:
            parsed = datetime.strptime(candidate[:len(fmt) + 2], fmt)
        except ValueError:
            continue
        return parsed.strftime("%B %Y")
    try:
        return datetime.fromisoformat(candidate).strftime("%B %Y")
    except ValueError:
        logger.debug(f"Keeping unparseable CV date as-is: {value!r}")
        return value


def _duration(start: str, end: str | None) -> str:
    return f"Duration: {format_date(start)} - {format_date(end) if end else 'Present'}"


def format_cv_as_text(cv: CVData) -> str:
    """Render a CV as sections: personal info, experience, education, skills, projects."""
    info = cv.personal_info
    lines = [f"# {info.name} - CV", "", "## Personal Information"]
    lines.append(f"Name: {info.name}")
    lines.append(f"Title: {info.title}")
    lines.append(f"Location: {info.location}")
    for label, value in (
        ("Email", info.email),
        ("Website", info.website),
        ("LinkedIn", info.linkedin),
        ("GitHub", info.github),
    ):
        if value:
            lines.append(f"{label}: {value}")
    lines += ["", f"Summary: {info.summary}", ""]

    if cv.experiences:
        lines += ["## Work Experience", ""]
        for exp in cv.experiences:
            lines.append(f"### {exp.title} at {exp.company}")
            lines.append(_duration(exp.start_date, exp.end_date))
            if exp.location:
                lines.append(f"Location: {exp.location}")
            lines.append("")
            if exp.description:
                lines += [exp.description, ""]
            if exp.highlights:
                lines.append("Key Achievements:")
                lines += [f"- {item}" for item in exp.highlights]
                lines.append("")
            if exp.technologies:
                lines += [f"Technologies: {', '.join(exp.technologies)}", ""]

    if cv.education:
        lines += ["## Education", ""]
        for edu in cv.education:
            lines.append(f"### {edu.degree} in {edu.field}")
            lines.append(f"Institution: {edu.institution}")
            lines.append(_duration(edu.start_date, edu.end_date))
            if edu.location:
                lines.append(f"Location: {edu.location}")
            lines.append("")
            if edu.description:
                lines += [edu.description, ""]

    if cv.skills:
        lines += ["## Skills", ""]
        by_category: dict[str, list[Skill]] = {}
        for skill in cv.skills:
            by_category.setdefault(skill.category, []).append(skill)
        for category, skills in by_category.items():
            lines.append(f"### {category}")
            for skill in skills:
                years = f", {skill.years_experience:g} years" if skill.years_experience else ""
                lines.append(f"- {skill.name} ({skill.proficiency}/5{years})")
            lines.append("")

    if cv.projects:
        lines += ["## Projects", ""]
        for project in cv.projects:
            lines += [f"### {project.name}", ""]
            if project.description:
                lines += [project.description, ""]
            if project.url:
                lines.append(f"URL: {project.url}")
            if project.repository:
                lines.append(f"Repository: {project.repository}")
            if project.technologies:
                lines += [f"Technologies: {', '.join(project.technologies)}", ""]
            if project.highlights:
                lines.append("Key Features:")
                lines += [f"- {item}" for item in project.highlights]
                lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"
