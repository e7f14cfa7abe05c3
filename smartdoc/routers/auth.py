"""
Auth Router - account registration.

Sign-in itself happens against the identity provider; the backend only
creates accounts and checks bearer tokens.
"""
from fastapi import APIRouter, status

from ..api.dto import SignupRequestDTO, SignupResponseDTO, UserDTO
from ..core.logging_config import get_logger
from .dependencies import get_auth_service

logger = get_logger(__name__)

router = APIRouter()


@router.post("/signup", response_model=SignupResponseDTO, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequestDTO):
    """
    Register a new identity.

    Returns 201 ``{"user": {id, email, name}}``; 400 when the email is taken
    or the credentials are invalid.
    """
    user = await get_auth_service().register(request.email, request.password, request.name)
    logger.info(f"Registered account {user['email']}")
    return SignupResponseDTO(user=UserDTO(**user))
