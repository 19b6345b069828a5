from .base import BaseVectorStore
from .duckdb import DuckDBVectorStore
from .filters import metadata_matches

__all__ = ["BaseVectorStore", "DuckDBVectorStore", "metadata_matches"]
