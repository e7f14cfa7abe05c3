"""
Conflicts Router - collaborator actions on detected conflicts.
"""
from fastapi import APIRouter, Depends

from ..api.dto import ConflictResponseDTO
from ..api.mappers import ConflictMapper
from ..domain.value_objects import UserId
from .dependencies import get_current_user, get_document_service

router = APIRouter()


@router.post("/conflicts/{conflict_id}/resolve", response_model=ConflictResponseDTO)
async def resolve_conflict(conflict_id: str, user_id: UserId = Depends(get_current_user)):
    """Mark a conflict resolved. Resolving twice is a no-op."""
    conflict = await get_document_service().resolve_conflict(user_id, conflict_id)
    return ConflictResponseDTO(conflict=ConflictMapper.to_model(conflict))
