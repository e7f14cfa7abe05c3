"""
Domain layer - Contains business entities and domain logic.
This layer is independent of infrastructure and frameworks.
"""
from .entities import Session, StoredConflict, StoredDocument
from .value_objects import AccessToken, ConflictId, DocumentId, UserId

__all__ = [
    "Session",
    "StoredConflict",
    "StoredDocument",
    "AccessToken",
    "ConflictId",
    "DocumentId",
    "UserId",
]
