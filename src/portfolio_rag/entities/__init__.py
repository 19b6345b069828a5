from .conversation import Message, MessageRole
from .cv import CVData, Education, Experience, PersonalInfo, Project, Skill
from .document import Chunk, DocumentRecord, DocumentType, IngestMetadata
from .query import QueryEntities
from .search_result import ContextItem, ContextStatus, RetrievalResult, RetrievedContext

__all__ = [
    "Chunk",
    "ContextItem",
    "ContextStatus",
    "CVData",
    "DocumentRecord",
    "DocumentType",
    "Education",
    "Experience",
    "IngestMetadata",
    "Message",
    "MessageRole",
    "PersonalInfo",
    "Project",
    "QueryEntities",
    "RetrievalResult",
    "RetrievedContext",
    "Skill",
]
