from .base import BaseChunker
from .recursive_character import RecursiveCharacterChunker

__all__ = ["BaseChunker", "RecursiveCharacterChunker"]
