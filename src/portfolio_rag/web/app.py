"""
Portfolio RAG Web Application

JSON API over the ingestion and chat pipelines.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from portfolio_rag.config.settings import settings
from portfolio_rag.engine import PortfolioRAG
from portfolio_rag.web.routers import chat_router, cv_router, documents_router

logger = logging.getLogger("portfolio-rag-web")


def create_app(engine: PortfolioRAG | None = None) -> FastAPI:
    """
    Build the application.

    With an ``engine`` the app uses it as is (tests, embedding in another
    process); otherwise the lifespan builds one from settings and closes it
    on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if getattr(app.state, "engine", None) is None:
            logger.info("Building engine from settings...")
            owned = PortfolioRAG.from_settings(settings)
            app.state.engine = owned
        logger.info("Application started successfully")

        yield

        logger.info("Application shutting down...")
        if owned is not None:
            await owned.aclose()
            app.state.engine = None

    app = FastAPI(
        title="Portfolio RAG API",
        description="Document ingestion and retrieval-augmented chat for a portfolio assistant",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine

    app.include_router(chat_router)
    app.include_router(documents_router)
    app.include_router(cv_router)
    return app


def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
