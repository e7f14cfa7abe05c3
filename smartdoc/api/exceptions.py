"""
Custom exceptions shared by the client pipeline and the reference backend.
Separates business exceptions from HTTP exceptions.
"""
from typing import Optional

from fastapi import HTTPException, status


class SmartDocError(Exception):
    """Base class for all Smart Doc Checker errors."""
    pass


class AuthFailure(SmartDocError):
    """Raised on bad credentials or an expired/missing session. Not retried."""
    pass


class UploadRejected(SmartDocError):
    """Raised when the upload capability refuses a submission."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FetchFailure(SmartDocError):
    """Raised when a reconciliation fetch fails (network or non-success status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StaleResponseDiscarded(SmartDocError):
    """A response arrived after the session that requested it ended."""

    def __init__(self, initiated_epoch: int, current_epoch: int):
        super().__init__(
            f"response from session epoch {initiated_epoch} discarded (current epoch {current_epoch})"
        )
        self.initiated_epoch = initiated_epoch
        self.current_epoch = current_epoch


class DocumentNotFoundError(SmartDocError):
    """Raised when document is not found."""
    pass


class ConflictNotFoundError(SmartDocError):
    """Raised when conflict is not found."""
    pass


class InvalidDocumentTypeError(UploadRejected):
    """Raised when the declared document type is not supported."""
    pass


class FileTooLargeError(UploadRejected):
    """Raised when an upload exceeds the configured size limit."""
    pass


class FileProcessingError(SmartDocError):
    """Raised when text cannot be extracted from a stored file."""
    pass


class AnalysisError(SmartDocError):
    """Raised when the analyzer fails or returns unusable output."""
    pass


class RegistrationError(SmartDocError):
    """Raised when a new identity cannot be registered."""
    pass


class DocumentStateError(SmartDocError):
    """Raised when a document cannot make the requested lifecycle transition."""
    pass


def handle_business_exception(e: Exception) -> HTTPException:
    """
    Convert business exceptions to HTTP exceptions.
    This keeps business logic clean of HTTP concerns.
    """
    if isinstance(e, AuthFailure):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    elif isinstance(e, (DocumentNotFoundError, ConflictNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    elif isinstance(e, FileTooLargeError):
        return HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e))
    elif isinstance(e, (UploadRejected, RegistrationError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    elif isinstance(e, DocumentStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    elif isinstance(e, FileProcessingError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    else:
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
