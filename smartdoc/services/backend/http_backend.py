"""
HTTP client for the backend data capability.
"""
from typing import Optional

import httpx
from pydantic import ValidationError

from ...api.exceptions import FetchFailure, UploadRejected
from ...core.config import HTTP_TIMEOUT_SECONDS, SMARTDOC_API_URL
from ...core.logging_config import get_logger
from ...models import Document, DocumentType, StateSnapshot, UploadPayload
from .base import BackendDataInterface

logger = get_logger(__name__)


class HttpBackendClient(BackendDataInterface):
    """
    Talks to the backend over HTTP with a shared httpx.AsyncClient.

    Routes:
        GET  {base_url}/documents  -> {"documents": [...], "conflicts": [...]}
        POST {base_url}/upload     multipart file + type -> {"document": {...}}
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            base_url: Backend base URL (defaults to SMARTDOC_API_URL)
            timeout: Per-request timeout in seconds (defaults to HTTP_TIMEOUT_SECONDS)
            transport: Optional httpx transport (mock or ASGI transport in tests)
        """
        self.base_url = (base_url or SMARTDOC_API_URL).rstrip("/")
        self.timeout = HTTP_TIMEOUT_SECONDS if timeout is None else timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport
        )

    @staticmethod
    def _auth_headers(access_token: str) -> dict:
        return {"Authorization": f"Bearer {access_token}"}

    async def fetch_state(self, access_token: str) -> StateSnapshot:
        try:
            response = await self._client.get("/documents", headers=self._auth_headers(access_token))
        except httpx.HTTPError as e:
            raise FetchFailure(f"Error loading documents: {e}") from e

        if response.status_code != 200:
            raise FetchFailure(
                f"Error loading documents ({response.status_code}): {response.text}",
                status_code=response.status_code
            )

        try:
            data = response.json()
            return StateSnapshot(
                documents=data.get("documents") or [],
                conflicts=data.get("conflicts") or []
            )
        except (ValueError, AttributeError, ValidationError) as e:
            raise FetchFailure(f"Malformed state response: {e}") from e

    async def submit_upload(self, access_token: str, payload: UploadPayload, doc_type: DocumentType) -> Document:
        try:
            response = await self._client.post(
                "/upload",
                headers=self._auth_headers(access_token),
                files={"file": (payload.filename, payload.content, payload.content_type)},
                data={"type": doc_type.value}
            )
        except httpx.HTTPError as e:
            raise UploadRejected(f"Upload error: {e}") from e

        if not response.is_success:
            raise UploadRejected(
                f"Upload error ({response.status_code}): {response.text}",
                status_code=response.status_code
            )

        try:
            return Document.model_validate(response.json()["document"])
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise UploadRejected(f"Malformed upload response: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
