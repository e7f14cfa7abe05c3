"""
Upload Service - stores an uploaded file and creates its document record.

The record starts in ``processing``; analysis is triggered separately by the
caller (see AnalysisService).
"""
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..api.exceptions import FileTooLargeError, InvalidDocumentTypeError, UploadRejected
from ..core.config import MAX_UPLOAD_BYTES
from ..core.logging_config import get_logger
from ..domain.entities import StoredDocument
from ..domain.value_objects import DocumentId, UserId
from ..models import DocumentType
from .database.base import DatabaseInterface

logger = get_logger(__name__)


class UploadService:

    def __init__(self, db_service: DatabaseInterface, max_upload_bytes: Optional[int] = None):
        """
        Args:
            db_service: Store for records and raw files
            max_upload_bytes: Size limit (defaults to MAX_UPLOAD_BYTES)
        """
        self.db_service = db_service
        self.max_upload_bytes = MAX_UPLOAD_BYTES if max_upload_bytes is None else max_upload_bytes

    async def create_upload(
        self,
        owner_id: UserId,
        filename: str,
        content: bytes,
        doc_type: str,
        team_id: Optional[str] = None
    ) -> StoredDocument:
        """
        Validate and store an upload.

        Raises:
            InvalidDocumentTypeError: unknown declared type
            FileTooLargeError: content exceeds the size limit
            UploadRejected: empty file or missing filename
        """
        try:
            doc_type = DocumentType(doc_type).value
        except ValueError:
            raise InvalidDocumentTypeError(
                f"Unsupported document type '{doc_type}'. "
                f"Supported types: {', '.join(t.value for t in DocumentType)}"
            )

        name = Path(filename or "").name
        if not name:
            raise UploadRejected("Uploaded file has no filename")
        if not content:
            raise UploadRejected(f"Uploaded file '{name}' is empty")
        if len(content) > self.max_upload_bytes:
            raise FileTooLargeError(
                f"File '{name}' is {len(content)} bytes; the limit is {self.max_upload_bytes} bytes"
            )

        doc_id = DocumentId(str(uuid.uuid4()))
        file_key = f"{owner_id}/{doc_id}{Path(name).suffix.lower()}"
        await self.db_service.save_file(file_key, content)

        now = datetime.now()
        document = StoredDocument(
            id=doc_id,
            name=name,
            type=doc_type,
            owner_id=owner_id,
            file_key=file_key,
            upload_date=now,
            last_modified=now,
            status="processing",
            team_id=team_id,
            modified_by=owner_id
        )
        document = await self.db_service.create_document(document)
        logger.info(f"Stored upload {name} as {doc_id} ({len(content)} bytes, type {doc_type})")
        return document
