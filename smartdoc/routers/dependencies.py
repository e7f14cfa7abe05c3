"""
Shared dependencies for routers.
Provides store and service initialization for the reference backend.
"""
from typing import Optional

from fastapi import Header

from ..api.exceptions import AuthFailure
from ..core.config import IDENTITY_PROVIDER, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_URL
from ..core.logging_config import get_logger
from ..domain.value_objects import UserId
from ..services.analysis_service import AnalysisService
from ..services.analyzers import AnalyzerFactory
from ..services.auth_service import AuthService, MemoryAuthService, SupabaseAuthService
from ..services.database import DatabaseFactory
from ..services.document_service import DocumentService
from ..services.identity.memory_identity import MemoryUserDirectory
from ..services.upload_service import UploadService

logger = get_logger(__name__)

# Global services (initialized on startup, shared across request handlers)
db_service = None
auth_service = None
upload_service = None
document_service = None
analysis_service = None


async def initialize_database():
    """Initialize the in-memory store."""
    global db_service

    logger.info("Initializing database: memory")
    db_service = await DatabaseFactory.create_and_initialize("memory")
    logger.info("  ✅ Memory Database initialized")


async def initialize_services(
    user_directory: Optional[MemoryUserDirectory] = None,
    analyzer_type: Optional[str] = None
):
    """
    Initialize all services after the store is ready.

    Args:
        user_directory: Directory to share with an in-process
            MemoryIdentityProvider (memory identity mode only)
        analyzer_type: Overrides the ANALYZER setting
    """
    global auth_service, upload_service, document_service, analysis_service

    if db_service is None:
        await initialize_database()

    logger.info("Initializing services...")

    if IDENTITY_PROVIDER.lower() == "supabase":
        if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set for supabase identity")
        auth_service = SupabaseAuthService(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
        logger.info("  ✅ Auth Service initialized (supabase)")
    else:
        auth_service = MemoryAuthService(user_directory)
        logger.info("  ✅ Auth Service initialized (memory)")

    upload_service = UploadService(db_service)
    document_service = DocumentService(db_service)
    analysis_service = AnalysisService(
        db_service,
        AnalyzerFactory.get_analyzer(analyzer_type),
        document_service
    )
    logger.info("✅ All services initialized successfully")


async def shutdown_services():
    global db_service, auth_service, upload_service, document_service, analysis_service

    if db_service is not None:
        await db_service.close()
    db_service = auth_service = upload_service = document_service = analysis_service = None


def get_db_service():
    """Get database service (dependency injection)."""
    if db_service is None:
        raise RuntimeError("Database service not initialized")
    return db_service


def get_auth_service() -> AuthService:
    if auth_service is None:
        raise RuntimeError("Auth service not initialized")
    return auth_service


def get_upload_service() -> UploadService:
    if upload_service is None:
        raise RuntimeError("Upload service not initialized")
    return upload_service


def get_document_service() -> DocumentService:
    if document_service is None:
        raise RuntimeError("Document service not initialized")
    return document_service


def get_analysis_service() -> AnalysisService:
    if analysis_service is None:
        raise RuntimeError("Analysis service not initialized")
    return analysis_service


async def get_current_user(authorization: Optional[str] = Header(None)) -> UserId:
    """Resolve ``Authorization: Bearer <token>`` to the caller's identity."""
    if not authorization:
        raise AuthFailure("Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthFailure("Authorization header must be 'Bearer <token>'")
    return await get_auth_service().verify_token(token.strip())
