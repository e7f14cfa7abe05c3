from .document import (
    Conflict,
    ConflictStatus,
    ConflictType,
    Document,
    DocumentStatus,
    DocumentType,
    Severity,
    StateSnapshot,
    UploadPayload,
)

__all__ = [
    "Conflict",
    "ConflictStatus",
    "ConflictType",
    "Document",
    "DocumentStatus",
    "DocumentType",
    "Severity",
    "StateSnapshot",
    "UploadPayload",
]
