from .extractor import format_cv_as_text
from .splitter import BaseChunker, RecursiveCharacterChunker

__all__ = ["BaseChunker", "RecursiveCharacterChunker", "format_cv_as_text"]
