"""Pytest configuration and shared fixtures."""

import asyncio
import os
from typing import List, Optional

import pytest

# Set environment BEFORE importing the package (config is read at import time)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("IDENTITY_PROVIDER", "memory")
os.environ.setdefault("ANALYZER", "mock")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from smartdoc.domain.entities import Session
from smartdoc.models import Conflict, Document, DocumentType, StateSnapshot, UploadPayload
from smartdoc.pipeline import PipelineContext, Reconciler
from smartdoc.services.backend import BackendDataInterface


def make_document(doc_id: str, status: str = "analyzed", doc_type: str = "policy", **extra) -> Document:
    data = {
        "id": doc_id,
        "name": f"{doc_id}.txt",
        "type": doc_type,
        "uploadDate": "2024-05-01T10:00:00",
        "status": status,
    }
    if status != "processing":
        data.setdefault("aiSummary", f"Summary of {doc_id}")
        data.setdefault("confidence", 0.9)
        data.setdefault("version", 1)
    data.update(extra)
    return Document.model_validate(data)


def make_conflict(
    conflict_id: str,
    documents: List[str],
    severity: str = "high",
    status: str = "unresolved",
    conflict_type: str = "policy"
) -> Conflict:
    return Conflict(
        id=conflict_id,
        type=conflict_type,
        severity=severity,
        description=f"Conflict {conflict_id}",
        recommendation="Align the documents.",
        documents=documents,
        status=status
    )


class FakeBackend(BackendDataInterface):
    """
    Scriptable backend data capability.

    ``fetch_gate`` (when set) holds every fetch until the test releases it,
    which lets tests interleave sign-out with an in-flight response.
    """

    def __init__(self, snapshot: Optional[StateSnapshot] = None):
        self.snapshot = snapshot or StateSnapshot()
        self.fetch_error: Optional[Exception] = None
        self.upload_error: Optional[Exception] = None
        self.fetch_gate: Optional[asyncio.Event] = None
        self.upload_gate: Optional[asyncio.Event] = None
        self.fetch_calls: List[str] = []
        self.upload_calls: List[tuple] = []
        self.closed = False
        self._counter = 0

    async def fetch_state(self, access_token: str) -> StateSnapshot:
        self.fetch_calls.append(access_token)
        snapshot = self.snapshot
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return snapshot

    async def submit_upload(self, access_token: str, payload: UploadPayload, doc_type: DocumentType) -> Document:
        self.upload_calls.append((access_token, payload.filename, doc_type))
        if self.upload_gate is not None:
            await self.upload_gate.wait()
        if self.upload_error is not None:
            raise self.upload_error
        self._counter += 1
        return make_document(f"new-{self._counter}", status="processing", doc_type=doc_type.value, name=payload.filename)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def session_a() -> Session:
    return Session(identity="user-a", access_token="token-a", email="a@example.com")


@pytest.fixture
def session_b() -> Session:
    return Session(identity="user-b", access_token="token-b", email="b@example.com")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(StateSnapshot(
        documents=[make_document("d1"), make_document("d2"), make_document("d3", status="processing")],
        conflicts=[
            make_conflict("c1", ["d1", "d2"], severity="high"),
            make_conflict("c2", ["d1"], severity="low", status="resolved"),
        ]
    ))


@pytest.fixture
def context() -> PipelineContext:
    return PipelineContext()


@pytest.fixture
def reconciler(context, backend) -> Reconciler:
    return Reconciler(context, backend)


@pytest.fixture
def payload() -> UploadPayload:
    return UploadPayload(filename="handbook.txt", content=b"Notice period: 30 days\n", content_type="text/plain")


