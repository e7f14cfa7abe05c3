"""
Data Transfer Objects (DTOs) for the reference backend.
Separates API contracts from domain entities.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from ..models import Conflict, Document


class SignupRequestDTO(BaseModel):
    """Request body for registering a new identity."""
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    name: str = ""


class UserDTO(BaseModel):
    id: str
    email: str
    name: str = ""


class SignupResponseDTO(BaseModel):
    user: UserDTO


class StateResponseDTO(BaseModel):
    """Full document and conflict set for the caller's scope."""
    documents: List[Document]
    conflicts: List[Conflict]


class UploadResponseDTO(BaseModel):
    document: Document


class ConflictResponseDTO(BaseModel):
    conflict: Conflict


class ErrorResponseDTO(BaseModel):
    """Error response DTO."""
    error: str
    detail: Optional[str] = None
    code: Optional[str] = None
