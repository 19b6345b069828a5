from .chat import router as chat_router
from .cv import router as cv_router
from .documents import router as documents_router

__all__ = ["chat_router", "cv_router", "documents_router"]
