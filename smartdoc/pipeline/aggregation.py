"""
Aggregation view - dashboard counters derived from the projections.
"""
from dataclasses import dataclass
from typing import Iterable

from ..models import Conflict, Document, DocumentStatus, Severity


@dataclass(frozen=True)
class DashboardStats:
    total_documents: int
    unresolved_conflicts: int
    high_severity_unresolved: int
    processing_documents: int

    def to_dict(self) -> dict:
        return {
            "total": self.total_documents,
            "unresolvedConflicts": self.unresolved_conflicts,
            "highSeverityUnresolved": self.high_severity_unresolved,
            "processing": self.processing_documents,
        }


def is_stale(conflict: Conflict, known_document_ids) -> bool:
    """A conflict is stale once any document it references is gone."""
    return any(doc_id not in known_document_ids for doc_id in conflict.documents)


def compute_dashboard_stats(documents: Iterable[Document], conflicts: Iterable[Conflict]) -> DashboardStats:
    """Pure O(n) recomputation; stale conflicts are not counted."""
    documents = list(documents)
    known_ids = {doc.id for doc in documents}

    live_unresolved = [
        c for c in conflicts
        if c.is_unresolved() and not is_stale(c, known_ids)
    ]

    return DashboardStats(
        total_documents=len(documents),
        unresolved_conflicts=len(live_unresolved),
        high_severity_unresolved=sum(1 for c in live_unresolved if c.severity == Severity.HIGH),
        processing_documents=sum(1 for d in documents if d.status == DocumentStatus.PROCESSING),
    )
