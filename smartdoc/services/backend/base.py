"""
Abstract base class for the backend data capability.
"""
from abc import ABC, abstractmethod

from ...models import Document, DocumentType, StateSnapshot, UploadPayload


class BackendDataInterface(ABC):
    """
    Authoritative document/conflict state for a session's scope.
    Every call carries the session's access token.
    """

    @abstractmethod
    async def fetch_state(self, access_token: str) -> StateSnapshot:
        """
        Fetch the complete document and conflict sets.

        Raises:
            FetchFailure: on network error, non-success status or malformed body
        """
        pass

    @abstractmethod
    async def submit_upload(self, access_token: str, payload: UploadPayload, doc_type: DocumentType) -> Document:
        """
        Upload a file; the backend answers with the new document in processing state.

        Raises:
            UploadRejected: on any non-success response or transport error
        """
        pass

    async def close(self) -> None:
        """Release connections, if any."""
        pass
