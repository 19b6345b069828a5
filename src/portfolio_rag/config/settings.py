import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# This file: src/portfolio_rag/config/settings.py
SERVER_ROOT = Path(__file__).resolve().parent.parent.parent.parent
ENV_PATH = SERVER_ROOT / ".env"

if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:
    load_dotenv()


class Settings(BaseModel):
    """Global Application Settings"""

    # Environment
    ENV: str = Field(default="development", description="Environment: development, production, testing")
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    # External services (OpenAI compatible)
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="API key for embeddings and completions")
    OPENAI_BASE_URL: str = Field(default="https://api.openai.com/v1", description="OpenAI-compatible base URL")
    EMBEDDING_MODEL: str = Field(default="text-embedding-3-small")
    EMBEDDING_DIMENSION: int = Field(default=1536, gt=0)
    EMBEDDING_BATCH_SIZE: int = Field(default=100, gt=0)
    EMBEDDING_MAX_ATTEMPTS: int = Field(default=1, ge=1, description="1 disables retries")
    COMPLETION_MODEL: str = Field(default="gpt-4o")
    CONNECT_TIMEOUT: float = Field(default=10.0, gt=0)
    REQUEST_TIMEOUT: float = Field(default=60.0, gt=0)

    # Chunking / retrieval
    CHUNK_SIZE: int = Field(default=500, gt=0)
    CHUNK_OVERLAP: int = Field(default=50, ge=0)
    SIMILARITY_THRESHOLD: float = Field(default=0.75, ge=0.0, le=1.0)
    RETRIEVAL_COUNT: int = Field(default=5, gt=0)
    MAX_CONTEXT_CHARS: int = Field(default=6000, gt=0, description="Budget for the retrieved context block")

    # Storage
    DUCKDB_PATH: str = Field(default="storage/portfolio_rag.duckdb", description="Vector/document store file")
    DATABASE_URL: str = Field(default="sqlite:///storage/conversations.db", description="Conversation store URL")

    # Persona
    PERSONA_NAME: str = Field(default="Alison Galindo")
    PERSONA_TITLE: str = Field(default="senior frontend developer")
    PERSONA_LOCATION: str = Field(default="Caruaru, Pernambuco, Brazil")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True
    }


def load_settings() -> Settings:
    """Load settings from environment variables."""
    env = os.environ
    defaults = Settings()
    return Settings(
        ENV=env.get("ENV", defaults.ENV),
        LOG_LEVEL=env.get("LOG_LEVEL", defaults.LOG_LEVEL),
        OPENAI_API_KEY=env.get("OPENAI_API_KEY"),
        OPENAI_BASE_URL=env.get("OPENAI_BASE_URL", defaults.OPENAI_BASE_URL),
        EMBEDDING_MODEL=env.get("EMBEDDING_MODEL", defaults.EMBEDDING_MODEL),
        EMBEDDING_DIMENSION=int(env.get("EMBEDDING_DIMENSION", defaults.EMBEDDING_DIMENSION)),
        EMBEDDING_BATCH_SIZE=int(env.get("EMBEDDING_BATCH_SIZE", defaults.EMBEDDING_BATCH_SIZE)),
        EMBEDDING_MAX_ATTEMPTS=int(env.get("EMBEDDING_MAX_ATTEMPTS", defaults.EMBEDDING_MAX_ATTEMPTS)),
        COMPLETION_MODEL=env.get("COMPLETION_MODEL", defaults.COMPLETION_MODEL),
        CONNECT_TIMEOUT=float(env.get("CONNECT_TIMEOUT", defaults.CONNECT_TIMEOUT)),
        REQUEST_TIMEOUT=float(env.get("REQUEST_TIMEOUT", defaults.REQUEST_TIMEOUT)),
        CHUNK_SIZE=int(env.get("CHUNK_SIZE", defaults.CHUNK_SIZE)),
        CHUNK_OVERLAP=int(env.get("CHUNK_OVERLAP", defaults.CHUNK_OVERLAP)),
        SIMILARITY_THRESHOLD=float(env.get("SIMILARITY_THRESHOLD", defaults.SIMILARITY_THRESHOLD)),
        RETRIEVAL_COUNT=int(env.get("RETRIEVAL_COUNT", defaults.RETRIEVAL_COUNT)),
        MAX_CONTEXT_CHARS=int(env.get("MAX_CONTEXT_CHARS", defaults.MAX_CONTEXT_CHARS)),
        DUCKDB_PATH=env.get("DUCKDB_PATH", str(SERVER_ROOT / "storage/portfolio_rag.duckdb")),
        DATABASE_URL=env.get("DATABASE_URL", f"sqlite:///{SERVER_ROOT / 'storage/conversations.db'}"),
        PERSONA_NAME=env.get("PERSONA_NAME", defaults.PERSONA_NAME),
        PERSONA_TITLE=env.get("PERSONA_TITLE", defaults.PERSONA_TITLE),
        PERSONA_LOCATION=env.get("PERSONA_LOCATION", defaults.PERSONA_LOCATION),
    )


# Global settings instance
settings = load_settings()
