from .context import assemble_context, format_context
from .entity_extractor import EntityExtractor
from .retriever import Retriever

__all__ = ["EntityExtractor", "Retriever", "assemble_context", "format_context"]
