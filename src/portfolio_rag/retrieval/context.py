"""Context assembly: scored results to prompt-ready text."""

from portfolio_rag.entities.search_result import ContextItem, RetrievalResult


def assemble_context(results: list[RetrievalResult]) -> list[ContextItem]:
    """
    Convert results into context items, appending the experience and
    project tags carried in chunk metadata to the content.
    """
    items = []
    for result in results:
        metadata = result.metadata
        content = result.content
        if metadata.get("years_experience"):
            content += f"\nExperience: {metadata['years_experience']} years"
        if metadata.get("project_name"):
            content += f"\nProject: {metadata['project_name']}"

        items.append(ContextItem(
            content=content,
            source=metadata.get("source"),
            title=metadata.get("title"),
            type=metadata.get("type"),
            relevance=round(result.score, 2),
        ))
    return items


def _render(index: int, item: ContextItem, content: str) -> str:
    lines = [f"DOCUMENT {index}:"]
    if item.source:
        lines.append(f"Source: {item.source}")
    if item.title:
        lines.append(f"Title: {item.title}")
    if item.type:
        lines.append(f"Type: {item.type}")
    lines.append(f"Relevance: {item.relevance:.2f}")
    lines.append(f"Content:\n{content}")
    return "\n".join(lines) + "\n\n"


def format_context(items: list[ContextItem], max_chars: int = 6000) -> str:
    """
    Render items as ``DOCUMENT n:`` blocks within a character budget.

    Blocks are added in order until the next one would overflow the budget.
    When the first block alone is too long its content is truncated so the
    result is never empty for non-empty input.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")

    parts: list[str] = []
    used = 0
    for index, item in enumerate(items, start=1):
        block = _render(index, item, item.content)
        if used + len(block) > max_chars:
            if not parts:
                overhead = len(_render(index, item, ""))
                room = max(0, max_chars - overhead)
                parts.append(_render(index, item, item.content[:room]))
            break
        parts.append(block)
        used += len(block)

    return "".join(parts).rstrip("\n")
