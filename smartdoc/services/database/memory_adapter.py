"""
In-memory adapter implementing DatabaseInterface.
Perfect for demos and testing - stores all data in memory using Python dicts.
Data is lost on restart.
"""
import copy
from typing import Dict, List, Optional

from ...core.logging_config import get_logger
from ...domain.entities import StoredConflict, StoredDocument
from .base import DatabaseInterface

logger = get_logger(__name__)


class MemoryAdapter(DatabaseInterface):
    """
    In-memory store using Python dictionaries.
    Records are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self):
        # Dicts keep insertion order, which is the upload order
        self._documents: Dict[str, StoredDocument] = {}
        self._conflicts: Dict[str, StoredConflict] = {}
        self._files: Dict[str, bytes] = {}

    async def initialize(self):
        """Initialize store (clears any existing data)."""
        self._documents.clear()
        self._conflicts.clear()
        self._files.clear()

    async def close(self):
        """Close store connection (no-op for in-memory)."""
        pass

    # Document operations
    async def create_document(self, document: StoredDocument) -> StoredDocument:
        if not document.id:
            raise ValueError("Document must have an 'id' field")
        if document.id in self._documents:
            raise ValueError(f"Document {document.id} already exists")
        self._documents[document.id] = copy.deepcopy(document)
        return copy.deepcopy(document)

    async def get_document(self, doc_id: str) -> Optional[StoredDocument]:
        doc = self._documents.get(doc_id)
        return copy.deepcopy(doc) if doc else None

    async def list_documents(self, owner_id: str) -> List[StoredDocument]:
        return [copy.deepcopy(doc) for doc in self._documents.values() if doc.owner_id == owner_id]

    async def update_document(self, document: StoredDocument) -> StoredDocument:
        if document.id not in self._documents:
            raise KeyError(f"Document {document.id} not found")
        self._documents[document.id] = copy.deepcopy(document)
        return copy.deepcopy(document)

    async def delete_document(self, doc_id: str) -> bool:
        doc = self._documents.pop(doc_id, None)
        if doc is None:
            return False
        self._files.pop(doc.file_key, None)
        return True

    # Conflict operations
    async def create_conflict(self, conflict: StoredConflict) -> StoredConflict:
        self._conflicts[conflict.id] = copy.deepcopy(conflict)
        return copy.deepcopy(conflict)

    async def get_conflict(self, conflict_id: str) -> Optional[StoredConflict]:
        conflict = self._conflicts.get(conflict_id)
        return copy.deepcopy(conflict) if conflict else None

    async def list_conflicts(self, owner_id: str) -> List[StoredConflict]:
        return [copy.deepcopy(c) for c in self._conflicts.values() if c.owner_id == owner_id]

    async def update_conflict(self, conflict: StoredConflict) -> StoredConflict:
        if conflict.id not in self._conflicts:
            raise KeyError(f"Conflict {conflict.id} not found")
        self._conflicts[conflict.id] = copy.deepcopy(conflict)
        return copy.deepcopy(conflict)

    async def delete_conflict(self, conflict_id: str) -> bool:
        return self._conflicts.pop(conflict_id, None) is not None

    # Raw file operations
    async def save_file(self, file_key: str, content: bytes) -> str:
        self._files[file_key] = bytes(content)
        return file_key

    async def get_file(self, file_key: str) -> bytes:
        if file_key not in self._files:
            raise FileNotFoundError(f"File not found in memory store: {file_key}")
        return self._files[file_key]

    def get_stats(self) -> Dict:
        """Get statistics about the in-memory store (useful for debugging)."""
        return {
            "total_documents": len(self._documents),
            "total_conflicts": len(self._conflicts),
            "total_files": len(self._files)
        }
