"""
Document Service - owner-scoped reads and collaborator actions.
"""
from typing import List, Tuple

from ..api.exceptions import ConflictNotFoundError, DocumentNotFoundError
from ..core.logging_config import get_logger
from ..domain.entities import StoredConflict, StoredDocument
from ..domain.value_objects import UserId
from .database.base import DatabaseInterface

logger = get_logger(__name__)


class DocumentService:

    def __init__(self, db_service: DatabaseInterface):
        self.db_service = db_service

    async def get_state(self, owner_id: UserId) -> Tuple[List[StoredDocument], List[StoredConflict]]:
        """Complete document and conflict sets for ``owner_id``."""
        documents = await self.db_service.list_documents(owner_id)
        conflicts = await self.db_service.list_conflicts(owner_id)
        return documents, conflicts

    async def get_owned_document(self, owner_id: UserId, doc_id: str) -> StoredDocument:
        document = await self.db_service.get_document(doc_id)
        if document is None or document.owner_id != owner_id:
            raise DocumentNotFoundError(f"Document {doc_id} not found")
        return document

    async def delete_document(self, owner_id: UserId, doc_id: str) -> None:
        """
        Delete a document. Conflicts that reference it are kept as an audit
        trail; clients treat them as stale.
        """
        await self.get_owned_document(owner_id, doc_id)
        await self.db_service.delete_document(doc_id)
        await self.recount_conflicts(owner_id)
        logger.info(f"Deleted document {doc_id}")

    async def resolve_conflict(self, owner_id: UserId, conflict_id: str) -> StoredConflict:
        conflict = await self.db_service.get_conflict(conflict_id)
        if conflict is None or conflict.owner_id != owner_id:
            raise ConflictNotFoundError(f"Conflict {conflict_id} not found")
        if conflict.is_unresolved():
            conflict.resolve()
            conflict = await self.db_service.update_conflict(conflict)
            logger.info(f"Resolved conflict {conflict_id}")
        return conflict

    async def recount_conflicts(self, owner_id: UserId) -> None:
        """Refresh the denormalized per-document conflict counts."""
        documents = await self.db_service.list_documents(owner_id)
        conflicts = await self.db_service.list_conflicts(owner_id)
        for document in documents:
            count = sum(1 for c in conflicts if document.id in c.documents)
            if count != document.conflict_count:
                document.conflict_count = count
                await self.db_service.update_document(document)
