import pytest
from pydantic import ValidationError

from smartdoc.models import Conflict, Document, DocumentStatus, DocumentType, Severity, UploadPayload

from conftest import make_conflict, make_document


def test_document_accepts_camel_case_wire_format():
    doc = Document.model_validate({
        "id": "d1",
        "name": "Handbook.pdf",
        "type": "policy",
        "uploadDate": "2024-05-01",
        "lastModified": "2024-05-02",
        "status": "analyzed",
        "version": 2,
        "conflicts": 1,
        "teamId": "team-1",
        "modifiedBy": "user-a",
        "aiSummary": "Leave rules.",
        "confidence": 0.87,
    })

    assert doc.type == DocumentType.POLICY
    assert doc.status == DocumentStatus.ANALYZED
    assert doc.ai_summary == "Leave rules."
    assert doc.team_id == "team-1"
    assert doc.to_wire()["aiSummary"] == "Leave rules."
    assert doc.to_wire()["uploadDate"] == "2024-05-01"


def test_models_are_frozen_and_accept_field_names():
    doc = Document(id="d1", name="Notes.txt", type="note", upload_date="2024-05-01")
    conflict = make_conflict("c1", ["d1"])

    assert doc.upload_date == "2024-05-01"
    with pytest.raises(ValidationError):
        doc.name = "Renamed.txt"
    with pytest.raises(ValidationError):
        conflict.status = "resolved"


def test_processing_document_never_carries_analysis_output():
    doc = Document.model_validate({
        "id": "d1",
        "name": "x.txt",
        "type": "note",
        "uploadDate": "2024-05-01",
        "status": "processing",
        "aiSummary": "leftover",
        "confidence": 0.5,
        "conflicts": 3,
    })

    assert doc.ai_summary is None
    assert doc.confidence is None
    assert doc.conflicts is None
    assert "aiSummary" not in doc.to_wire()


def test_status_defaults_to_processing():
    doc = Document(id="d1", name="x.txt", type="other", uploadDate="2024-05-01")
    assert doc.is_processing()


def test_unknown_document_type_is_rejected():
    with pytest.raises(ValidationError):
        make_document("d1", doc_type="spreadsheet")


def test_confidence_must_be_a_probability():
    with pytest.raises(ValidationError):
        make_document("d1", confidence=1.5)


def test_conflict_documents_form_a_set():
    conflict = make_conflict("c1", ["d1", "d2", "d1"])
    assert conflict.documents == ["d1", "d2"]
    assert conflict.references("d2")
    assert not conflict.references("d3")


def test_conflict_requires_at_least_one_document():
    with pytest.raises(ValidationError):
        make_conflict("c1", [])


def test_conflict_starts_unresolved():
    conflict = Conflict(id="c1", type="ambiguity", severity="low", description="vague", documents=["d1"])
    assert conflict.is_unresolved()


def test_severity_is_ordered():
    assert Severity.LOW < Severity.MEDIUM < Severity.HIGH
    assert max([Severity.MEDIUM, Severity.HIGH, Severity.LOW]) == Severity.HIGH


def test_upload_payload_from_path(tmp_path):
    path = tmp_path / "policy.pdf"
    path.write_bytes(b"%PDF-1.4")

    payload = UploadPayload.from_path(path)

    assert payload.filename == "policy.pdf"
    assert payload.content == b"%PDF-1.4"
    assert payload.content_type == "application/pdf"
