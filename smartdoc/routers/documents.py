"""
Documents Router - state fetch, uploads and document actions.

Architecture:
- Router handles HTTP request/response only
- UploadService, DocumentService and AnalysisService hold the logic
- Analysis runs as a FastAPI background task after the response is built

Example Usage:
    GET /documents - Full document and conflict set for the caller
    POST /upload - Upload a file (multipart: file, type)
    POST /documents/{doc_id}/reanalyze - Run analysis again
    DELETE /documents/{doc_id} - Delete a document
"""
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status

from ..api.dto import StateResponseDTO, UploadResponseDTO
from ..api.mappers import ConflictMapper, DocumentMapper
from ..core.logging_config import get_logger
from ..domain.value_objects import UserId
from .dependencies import (
    get_analysis_service,
    get_current_user,
    get_document_service,
    get_upload_service
)

logger = get_logger(__name__)

router = APIRouter()


@router.get("/documents", response_model=StateResponseDTO, response_model_by_alias=True, response_model_exclude_none=True)
async def get_documents(user_id: UserId = Depends(get_current_user)):
    """
    Return every document and conflict visible to the caller.

    The response is always the complete set; clients replace their local
    view with it wholesale.
    """
    documents, conflicts = await get_document_service().get_state(user_id)
    return StateResponseDTO(
        documents=DocumentMapper.to_model_list(documents),
        conflicts=ConflictMapper.to_model_list(conflicts)
    )


@router.post("/upload", response_model=UploadResponseDTO, response_model_by_alias=True, response_model_exclude_none=True)
async def upload_file(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    doc_type: str = Form(..., alias="type"),
    user_id: UserId = Depends(get_current_user)
):
    """
    Upload a single document.

    The document is created in ``processing`` and analyzed in the
    background; callers pick up the result with a later GET /documents.

    Status Codes:
        200: Accepted, analysis scheduled
        400: Unsupported type or empty file
        401: Missing or invalid token
        413: File too large
    """
    content = await file.read()
    document = await get_upload_service().create_upload(
        owner_id=user_id,
        filename=file.filename,
        content=content,
        doc_type=doc_type
    )
    background_tasks.add_task(get_analysis_service().analyze_document, document.id)
    return UploadResponseDTO(document=DocumentMapper.to_model(document))


@router.post("/documents/{doc_id}/reanalyze", response_model=UploadResponseDTO, response_model_by_alias=True, response_model_exclude_none=True)
async def reanalyze_document(
    doc_id: str,
    background_tasks: BackgroundTasks,
    user_id: UserId = Depends(get_current_user)
):
    """
    Move an analyzed document back to ``processing`` and analyze it again.

    A document already in ``processing`` is returned as is. A failed document
    answers 409; the fix is a new upload.
    """
    analysis_service = get_analysis_service()
    document, started = await analysis_service.request_reanalysis(user_id, doc_id)
    if started:
        background_tasks.add_task(analysis_service.analyze_document, document.id)
    return UploadResponseDTO(document=DocumentMapper.to_model(document))


@router.delete("/documents/{doc_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(doc_id: str, user_id: UserId = Depends(get_current_user)):
    """Delete a document. Conflicts that reference it remain, as stale entries."""
    await get_document_service().delete_document(user_id, doc_id)
