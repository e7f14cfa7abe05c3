"""
Mappers between domain entities and wire models.
Separates domain layer from API layer.
"""
from typing import List

from ..domain.entities import StoredConflict, StoredDocument
from ..models import Conflict, Document


class DocumentMapper:
    """Maps StoredDocument entities to the Document wire model."""

    @staticmethod
    def to_model(document: StoredDocument) -> Document:
        """Convert domain entity to wire model, honoring lifecycle visibility."""
        data = {
            "id": document.id,
            "name": document.name,
            "type": document.type,
            "uploadDate": document.upload_date.isoformat(),
            "lastModified": document.last_modified.isoformat(),
            "status": document.status,
            "teamId": document.team_id,
            "modifiedBy": document.modified_by,
        }
        if document.version > 0:
            data["version"] = document.version
        if not document.is_processing():
            # Error documents keep the last successful analysis, if any
            data["aiSummary"] = document.ai_summary
            data["confidence"] = document.confidence
            data["conflicts"] = document.conflict_count
        return Document.model_validate(data)

    @staticmethod
    def to_model_list(documents: List[StoredDocument]) -> List[Document]:
        return [DocumentMapper.to_model(doc) for doc in documents]


class ConflictMapper:
    """Maps StoredConflict entities to the Conflict wire model."""

    @staticmethod
    def to_model(conflict: StoredConflict) -> Conflict:
        return Conflict(
            id=conflict.id,
            type=conflict.type,
            severity=conflict.severity,
            description=conflict.description,
            recommendation=conflict.recommendation,
            documents=list(conflict.documents),
            status=conflict.status
        )

    @staticmethod
    def to_model_list(conflicts: List[StoredConflict]) -> List[Conflict]:
        return [ConflictMapper.to_model(c) for c in conflicts]
