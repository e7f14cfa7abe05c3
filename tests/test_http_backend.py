import json

import httpx
import pytest

from smartdoc.api.exceptions import FetchFailure, UploadRejected
from smartdoc.models import DocumentStatus, DocumentType
from smartdoc.services.backend import HttpBackendClient

STATE_BODY = {
    "documents": [
        {"id": "d1", "name": "Handbook.pdf", "type": "policy", "uploadDate": "2024-05-01",
         "status": "analyzed", "version": 1, "aiSummary": "Leave rules.", "confidence": 0.9, "conflicts": 1},
    ],
    "conflicts": [
        {"id": "c1", "type": "policy", "severity": "high", "description": "Notice period differs",
         "recommendation": "Align", "documents": ["d1"], "status": "unresolved"},
    ],
}


def make_client(handler) -> HttpBackendClient:
    return HttpBackendClient(base_url="http://backend.test", timeout=5, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_state_sends_bearer_token_and_parses_snapshot():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=STATE_BODY)

    client = make_client(handler)
    snapshot = await client.fetch_state("token-a")
    await client.close()

    assert seen == {"path": "/documents", "auth": "Bearer token-a"}
    assert [d.id for d in snapshot.documents] == ["d1"]
    assert snapshot.documents[0].ai_summary == "Leave rules."
    assert snapshot.conflicts[0].documents == ["d1"]


@pytest.mark.asyncio
async def test_fetch_state_tolerates_missing_collections():
    client = make_client(lambda request: httpx.Response(200, json={}))

    snapshot = await client.fetch_state("token-a")

    assert snapshot.documents == []
    assert snapshot.conflicts == []


@pytest.mark.asyncio
async def test_fetch_state_non_success_is_fetch_failure():
    client = make_client(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(FetchFailure) as exc_info:
        await client.fetch_state("token-a")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_fetch_state_unauthorized_is_fetch_failure():
    client = make_client(lambda request: httpx.Response(401, json={"error": "Invalid or expired access token"}))

    with pytest.raises(FetchFailure) as exc_info:
        await client.fetch_state("expired")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_fetch_state_network_error_is_fetch_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(FetchFailure):
        await client.fetch_state("token-a")


@pytest.mark.asyncio
async def test_fetch_state_malformed_body_is_fetch_failure():
    client = make_client(lambda request: httpx.Response(200, json={"documents": [{"id": "d1"}]}))

    with pytest.raises(FetchFailure):
        await client.fetch_state("token-a")


@pytest.mark.asyncio
async def test_submit_upload_posts_multipart_and_returns_document(payload):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = request.content
        return httpx.Response(200, json={"document": {
            "id": "new-1", "name": "handbook.txt", "type": "contract",
            "uploadDate": "2024-05-01T10:00:00", "status": "processing",
        }})

    client = make_client(handler)
    document = await client.submit_upload("token-a", payload, DocumentType.CONTRACT)

    assert seen["path"] == "/upload"
    assert seen["auth"] == "Bearer token-a"
    assert b'name="type"' in seen["body"]
    assert b"contract" in seen["body"]
    assert b'filename="handbook.txt"' in seen["body"]
    assert document.status == DocumentStatus.PROCESSING
    assert document.type == DocumentType.CONTRACT


@pytest.mark.asyncio
async def test_submit_upload_non_success_is_upload_rejected(payload):
    client = make_client(lambda request: httpx.Response(413, content=json.dumps({"error": "too large"})))

    with pytest.raises(UploadRejected) as exc_info:
        await client.submit_upload("token-a", payload, DocumentType.POLICY)

    assert exc_info.value.status_code == 413


@pytest.mark.asyncio
async def test_submit_upload_network_error_is_upload_rejected(payload):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(handler)

    with pytest.raises(UploadRejected):
        await client.submit_upload("token-a", payload, DocumentType.POLICY)


@pytest.mark.asyncio
async def test_submit_upload_without_document_is_upload_rejected(payload):
    client = make_client(lambda request: httpx.Response(200, json={"ok": True}))

    with pytest.raises(UploadRejected):
        await client.submit_upload("token-a", payload, DocumentType.POLICY)
