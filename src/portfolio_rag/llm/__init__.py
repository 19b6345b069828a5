from .base import BaseLLM
from .config import TimeoutConfig
from .embedder import BaseEmbedder, MockEmbedder, OpenAIEmbedder
from .providers import OpenAILLM

__all__ = [
    "BaseEmbedder",
    "BaseLLM",
    "MockEmbedder",
    "OpenAIEmbedder",
    "OpenAILLM",
    "TimeoutConfig",
]
