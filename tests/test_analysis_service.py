import time

import pytest

from smartdoc.api.exceptions import (
    AnalysisError,
    ConflictNotFoundError,
    DocumentNotFoundError,
    DocumentStateError,
    FileTooLargeError,
    InvalidDocumentTypeError,
    UploadRejected,
)
from smartdoc.api.mappers import DocumentMapper
from smartdoc.services.analysis_service import AnalysisService
from smartdoc.services.analyzers import AnalysisResult, Analyzer, MockAnalyzer
from smartdoc.services.database import MemoryAdapter
from smartdoc.services.document_service import DocumentService
from smartdoc.services.upload_service import UploadService

OWNER = "user-a"
HANDBOOK = b"Employee handbook.\nNotice period: 30 days\n"
CONTRACT = b"Employment contract.\nNotice period: 60 days\n"


class FailingAnalyzer(Analyzer):
    name = "failing"

    def analyze(self, document, corpus):
        raise AnalysisError("model unavailable")


class SlowAnalyzer(Analyzer):
    name = "slow"

    def analyze(self, document, corpus):
        time.sleep(0.2)
        return AnalysisResult(summary="late", confidence=0.5)


@pytest.fixture
def db() -> MemoryAdapter:
    return MemoryAdapter()


@pytest.fixture
def document_service(db) -> DocumentService:
    return DocumentService(db)


@pytest.fixture
def uploads(db) -> UploadService:
    return UploadService(db, max_upload_bytes=1024)


@pytest.fixture
def analysis(db, document_service) -> AnalysisService:
    return AnalysisService(db, MockAnalyzer(), document_service, timeout=5)


@pytest.mark.asyncio
async def test_upload_creates_processing_document(uploads, db):
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")

    stored = await db.get_document(document.id)
    assert stored.status == "processing"
    assert stored.version == 0
    assert stored.modified_by == OWNER
    assert await db.get_file(stored.file_key) == HANDBOOK

    wire = DocumentMapper.to_model(stored).to_wire()
    assert wire["status"] == "processing"
    assert "aiSummary" not in wire
    assert "version" not in wire


@pytest.mark.asyncio
async def test_upload_validation(uploads):
    with pytest.raises(InvalidDocumentTypeError):
        await uploads.create_upload(OWNER, "a.txt", b"x", "spreadsheet")
    with pytest.raises(FileTooLargeError):
        await uploads.create_upload(OWNER, "a.txt", b"x" * 2048, "note")
    with pytest.raises(UploadRejected):
        await uploads.create_upload(OWNER, "a.txt", b"", "note")


@pytest.mark.asyncio
async def test_analysis_sets_summary_and_first_version(uploads, analysis):
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")

    analyzed = await analysis.analyze_document(document.id)

    assert analyzed.status == "analyzed"
    assert analyzed.version == 1
    assert analyzed.ai_summary.startswith("Employee handbook.")
    assert 0 <= analyzed.confidence <= 1


@pytest.mark.asyncio
async def test_conflicts_reference_both_documents_and_counts_follow(uploads, analysis, document_service):
    handbook = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")
    await analysis.analyze_document(handbook.id)
    contract = await uploads.create_upload(OWNER, "Contract.txt", CONTRACT, "contract")
    await analysis.analyze_document(contract.id)

    documents, conflicts = await document_service.get_state(OWNER)

    assert len(conflicts) == 1
    assert conflicts[0].severity == "high"
    assert set(conflicts[0].documents) == {handbook.id, contract.id}
    assert conflicts[0].source_document_id == contract.id
    assert {d.id: d.conflict_count for d in documents} == {handbook.id: 1, contract.id: 1}


@pytest.mark.asyncio
async def test_reanalysis_bumps_version_and_supersedes_own_findings(uploads, analysis, document_service):
    handbook = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")
    await analysis.analyze_document(handbook.id)
    contract = await uploads.create_upload(OWNER, "Contract.txt", CONTRACT, "contract")
    await analysis.analyze_document(contract.id)

    processing, started = await analysis.request_reanalysis(OWNER, contract.id)
    assert started is True
    assert processing.status == "processing"
    reanalyzed = await analysis.analyze_document(contract.id)

    _, conflicts = await document_service.get_state(OWNER)
    assert reanalyzed.version == 2
    assert len(conflicts) == 1


@pytest.mark.asyncio
async def test_resolved_findings_survive_reanalysis(uploads, analysis, document_service):
    handbook = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")
    await analysis.analyze_document(handbook.id)
    contract = await uploads.create_upload(OWNER, "Contract.txt", CONTRACT, "contract")
    await analysis.analyze_document(contract.id)
    _, conflicts = await document_service.get_state(OWNER)
    await document_service.resolve_conflict(OWNER, conflicts[0].id)

    await analysis.request_reanalysis(OWNER, contract.id)
    await analysis.analyze_document(contract.id)

    _, conflicts = await document_service.get_state(OWNER)
    assert sorted(c.status for c in conflicts) == ["resolved", "unresolved"]


@pytest.mark.asyncio
async def test_failed_reanalysis_keeps_last_known_good(db, uploads, analysis, document_service):
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")
    analyzed = await analysis.analyze_document(document.id)

    failing = AnalysisService(db, FailingAnalyzer(), document_service)
    await failing.request_reanalysis(OWNER, document.id)
    failed = await failing.analyze_document(document.id)

    assert failed.status == "error"
    assert failed.error == "model unavailable"
    assert failed.version == 1
    assert failed.ai_summary == analyzed.ai_summary
    assert failed.confidence == analyzed.confidence


@pytest.mark.asyncio
async def test_first_analysis_failure_is_error_without_output(db, uploads, document_service):
    failing = AnalysisService(db, FailingAnalyzer(), document_service)
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")

    failed = await failing.analyze_document(document.id)

    assert failed.status == "error"
    wire = DocumentMapper.to_model(failed).to_wire()
    assert "aiSummary" not in wire
    assert "confidence" not in wire


@pytest.mark.asyncio
async def test_analysis_timeout_is_an_error(db, uploads, document_service):
    slow = AnalysisService(db, SlowAnalyzer(), document_service, timeout=0.01)
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")

    failed = await slow.analyze_document(document.id)

    assert failed.status == "error"
    assert "timed out" in failed.error


@pytest.mark.asyncio
async def test_unreadable_file_is_an_error(uploads, analysis):
    document = await uploads.create_upload(OWNER, "Scan.pdf", b"not a pdf", "medical")

    failed = await analysis.analyze_document(document.id)

    assert failed.status == "error"


@pytest.mark.asyncio
async def test_deleting_a_document_keeps_its_conflicts(uploads, analysis, document_service):
    handbook = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")
    await analysis.analyze_document(handbook.id)
    contract = await uploads.create_upload(OWNER, "Contract.txt", CONTRACT, "contract")
    await analysis.analyze_document(contract.id)

    await document_service.delete_document(OWNER, handbook.id)

    documents, conflicts = await document_service.get_state(OWNER)
    assert [d.id for d in documents] == [contract.id]
    assert len(conflicts) == 1
    assert handbook.id in conflicts[0].documents


@pytest.mark.asyncio
async def test_other_owners_cannot_touch_documents(uploads, analysis, document_service):
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")

    with pytest.raises(DocumentNotFoundError):
        await document_service.delete_document("intruder", document.id)
    with pytest.raises(DocumentNotFoundError):
        await analysis.request_reanalysis("intruder", document.id)
    with pytest.raises(ConflictNotFoundError):
        await document_service.resolve_conflict("intruder", "missing")
    documents, _ = await document_service.get_state("intruder")
    assert documents == []


@pytest.mark.asyncio
async def test_analysis_of_deleted_document_is_skipped(uploads, analysis, document_service):
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")
    await document_service.delete_document(OWNER, document.id)

    assert await analysis.analyze_document(document.id) is None


@pytest.mark.asyncio
async def test_reanalysing_the_older_document_does_not_duplicate_the_pair(uploads, analysis, document_service):
    handbook = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")
    await analysis.analyze_document(handbook.id)
    contract = await uploads.create_upload(OWNER, "Contract.txt", CONTRACT, "contract")
    await analysis.analyze_document(contract.id)

    await analysis.request_reanalysis(OWNER, handbook.id)
    await analysis.analyze_document(handbook.id)

    documents, conflicts = await document_service.get_state(OWNER)
    unresolved = [c for c in conflicts if c.is_unresolved()]
    assert len(unresolved) == 1
    assert set(unresolved[0].documents) == {handbook.id, contract.id}
    assert {d.id: d.conflict_count for d in documents} == {handbook.id: 1, contract.id: 1}


@pytest.mark.asyncio
async def test_failed_document_cannot_be_reanalysed(db, uploads, document_service):
    failing = AnalysisService(db, FailingAnalyzer(), document_service)
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")
    await failing.analyze_document(document.id)

    with pytest.raises(DocumentStateError):
        await failing.request_reanalysis(OWNER, document.id)

    stored = await db.get_document(document.id)
    assert stored.status == "error"
    assert stored.error == "model unavailable"


@pytest.mark.asyncio
async def test_reanalysis_of_a_processing_document_starts_nothing(db, uploads, analysis):
    document = await uploads.create_upload(OWNER, "Handbook.txt", HANDBOOK, "policy")

    returned, started = await analysis.request_reanalysis(OWNER, document.id)

    assert started is False
    assert returned.status == "processing"
    assert (await db.get_document(document.id)).version == 0
