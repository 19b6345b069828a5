from fastapi import HTTPException, Request

from portfolio_rag.engine import PortfolioRAG


def get_engine(request: Request) -> PortfolioRAG:
    """Dependency injection: the engine built by the application lifespan."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine
