"""
Domain entities - Core business objects.
These represent the business concepts, not wire models.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .value_objects import AccessToken, ConflictId, DocumentId, UserId


@dataclass(frozen=True)
class Session:
    """
    An authenticated session as seen by the client.

    Two sessions belong to the same identity when their ``identity`` matches,
    even if the access token was refreshed in between.
    """
    identity: UserId
    access_token: AccessToken
    email: Optional[str] = None

    def same_identity(self, other: Optional["Session"]) -> bool:
        return other is not None and other.identity == self.identity


@dataclass
class StoredDocument:
    """
    Document entity held by the reference backend.

    ``version`` stays at 0 until the first successful analysis. Analysis
    output from earlier versions is kept through a failed re-analysis and
    hidden while the document is processing.
    """
    id: DocumentId
    name: str
    type: str
    owner_id: UserId
    file_key: str
    upload_date: datetime
    last_modified: datetime
    status: str = "processing"  # processing, analyzed, error
    version: int = 0
    ai_summary: Optional[str] = None
    confidence: Optional[float] = None
    conflict_count: int = 0
    team_id: Optional[str] = None
    modified_by: Optional[UserId] = None
    error: Optional[str] = None

    def is_processing(self) -> bool:
        """Check if document is being analyzed."""
        return self.status == "processing"

    def is_analyzed(self) -> bool:
        return self.status == "analyzed"

    def is_failed(self) -> bool:
        return self.status == "error"

    def mark_processing(self, modified_by: Optional[UserId] = None):
        """Re-enter analysis (analyzed -> processing). Failed documents are terminal."""
        self.status = "processing"
        self.error = None
        self.last_modified = datetime.now()
        if modified_by:
            self.modified_by = modified_by

    def mark_analyzed(self, summary: str, confidence: float):
        """Mark document as analyzed; every successful analysis is a new version."""
        self.status = "analyzed"
        self.ai_summary = summary
        self.confidence = confidence
        self.version += 1
        self.error = None
        self.last_modified = datetime.now()

    def mark_failed(self, reason: str):
        """Mark document as failed, keeping the last successful analysis."""
        self.status = "error"
        self.error = reason
        self.last_modified = datetime.now()


@dataclass
class StoredConflict:
    """Conflict entity held by the reference backend."""
    id: ConflictId
    type: str
    severity: str
    description: str
    recommendation: str
    documents: List[DocumentId]
    owner_id: UserId
    source_document_id: Optional[DocumentId] = None
    status: str = "unresolved"
    created_at: datetime = field(default_factory=datetime.now)
    resolved_at: Optional[datetime] = None

    def is_unresolved(self) -> bool:
        return self.status == "unresolved"

    def resolve(self):
        self.status = "resolved"
        self.resolved_at = datetime.now()
