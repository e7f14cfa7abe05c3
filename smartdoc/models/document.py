"""
Wire models for documents and conflicts.

Field names follow the backend's camelCase JSON; Python code uses the
snake_case attribute names. Both are accepted on input.
"""
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DocumentType(str, Enum):
    RESUME = "resume"
    MEDICAL = "medical"
    POLICY = "policy"
    NOTE = "note"
    CONTRACT = "contract"
    OTHER = "other"


class DocumentStatus(str, Enum):
    PROCESSING = "processing"
    ANALYZED = "analyzed"
    ERROR = "error"


class ConflictType(str, Enum):
    POLICY = "policy"
    COMPLIANCE = "compliance"
    AMBIGUITY = "ambiguity"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {Severity.LOW: 0, Severity.MEDIUM: 1, Severity.HIGH: 2}


class ConflictStatus(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


_ANALYSIS_FIELDS = {"aiSummary", "ai_summary", "confidence", "conflicts"}


class Document(BaseModel):
    id: str
    name: str
    type: DocumentType
    upload_date: str = Field(alias="uploadDate")
    status: DocumentStatus = DocumentStatus.PROCESSING
    last_modified: Optional[str] = Field(default=None, alias="lastModified")
    version: Optional[int] = None
    conflicts: Optional[int] = None  # Denormalized; ConflictStore is authoritative
    url: Optional[str] = None
    team_id: Optional[str] = Field(default=None, alias="teamId")
    modified_by: Optional[str] = Field(default=None, alias="modifiedBy")
    ai_summary: Optional[str] = Field(default=None, alias="aiSummary")
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _processing_has_no_analysis(cls, data):
        # A document under analysis never exposes analysis output
        if isinstance(data, dict) and data.get("status", DocumentStatus.PROCESSING.value) in (
            DocumentStatus.PROCESSING, DocumentStatus.PROCESSING.value
        ):
            data = {
                key: value for key, value in data.items()
                if key not in _ANALYSIS_FIELDS
            }
        return data

    def is_processing(self) -> bool:
        return self.status == DocumentStatus.PROCESSING

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Conflict(BaseModel):
    id: str
    type: ConflictType
    severity: Severity
    description: str
    documents: List[str]
    recommendation: str = ""
    status: ConflictStatus = ConflictStatus.UNRESOLVED

    model_config = ConfigDict(frozen=True)

    @field_validator("documents")
    @classmethod
    def _documents_form_a_set(cls, value: List[str]) -> List[str]:
        unique = list(dict.fromkeys(value))
        if not unique:
            raise ValueError("a conflict must reference at least one document")
        return unique

    def references(self, doc_id: str) -> bool:
        return doc_id in self.documents

    def is_unresolved(self) -> bool:
        return self.status == ConflictStatus.UNRESOLVED

    def to_wire(self) -> dict:
        return self.model_dump(mode="json")


class StateSnapshot(BaseModel):
    """Full authoritative state returned by one reconciliation fetch."""
    documents: List[Document] = Field(default_factory=list)
    conflicts: List[Conflict] = Field(default_factory=list)


class UploadPayload(BaseModel):
    """Raw file handed to the intake submitter."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path, content_type: Optional[str] = None) -> "UploadPayload":
        path = Path(path)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type or _guess_content_type(path.suffix)
        )


def _guess_content_type(suffix: str) -> str:
    return {
        ".pdf": "application/pdf",
        ".txt": "text/plain",
        ".md": "text/markdown",
    }.get(suffix.lower(), "application/octet-stream")
