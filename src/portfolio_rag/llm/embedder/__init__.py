from .base import BaseEmbedder
from .mock import MockEmbedder
from .openai import OpenAIEmbedder

__all__ = ["BaseEmbedder", "MockEmbedder", "OpenAIEmbedder"]
