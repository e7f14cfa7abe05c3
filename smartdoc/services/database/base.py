"""
Abstract base class for reference-backend stores.
All store implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ...domain.entities import StoredConflict, StoredDocument


class DatabaseInterface(ABC):
    """
    Abstract interface for document, conflict and raw-file persistence.
    Every query is scoped to one owner.
    """

    # Document operations
    @abstractmethod
    async def create_document(self, document: StoredDocument) -> StoredDocument:
        """Create a new document record."""
        pass

    @abstractmethod
    async def get_document(self, doc_id: str) -> Optional[StoredDocument]:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def list_documents(self, owner_id: str) -> List[StoredDocument]:
        """Get the owner's documents in upload order."""
        pass

    @abstractmethod
    async def update_document(self, document: StoredDocument) -> StoredDocument:
        """Persist changes to an existing document."""
        pass

    @abstractmethod
    async def delete_document(self, doc_id: str) -> bool:
        """Delete a document record (conflicts are kept)."""
        pass

    # Conflict operations
    @abstractmethod
    async def create_conflict(self, conflict: StoredConflict) -> StoredConflict:
        pass

    @abstractmethod
    async def get_conflict(self, conflict_id: str) -> Optional[StoredConflict]:
        pass

    @abstractmethod
    async def list_conflicts(self, owner_id: str) -> List[StoredConflict]:
        pass

    @abstractmethod
    async def update_conflict(self, conflict: StoredConflict) -> StoredConflict:
        pass

    @abstractmethod
    async def delete_conflict(self, conflict_id: str) -> bool:
        pass

    # Raw file operations
    @abstractmethod
    async def save_file(self, file_key: str, content: bytes) -> str:
        pass

    @abstractmethod
    async def get_file(self, file_key: str) -> bytes:
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize store (create tables/collections, indexes, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        """Close store connection."""
        pass
