"""
Reference backend for the Smart Doc Checker.

Run with:
    uvicorn smartdoc.main:app --reload
"""
import os
import sys
from typing import Optional

from .core.config import ANALYZER, IDENTITY_PROVIDER
from .core.logging_config import get_logger
from .gateway import APIGateway
from .routers import auth, conflicts, documents
from .routers.dependencies import initialize_database, initialize_services, shutdown_services
from .services.identity.memory_identity import MemoryUserDirectory

logger = get_logger(__name__)


def create_app(
    user_directory: Optional[MemoryUserDirectory] = None,
    analyzer_type: Optional[str] = None
):
    """
    Build the FastAPI application.

    Args:
        user_directory: Shared with an in-process MemoryIdentityProvider
        analyzer_type: Overrides the ANALYZER setting
    """
    gateway = APIGateway()
    gateway.setup_middleware()
    gateway.setup_exception_handlers()

    gateway.register_router(auth.router, tags=["Auth"])
    gateway.register_router(documents.router, tags=["Documents"])
    gateway.register_router(conflicts.router, tags=["Conflicts"])
    gateway.register_health_endpoints()

    app = gateway.get_app()

    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup."""
        logger.info("=" * 60)
        logger.info("Starting Smart Doc Checker backend...")
        logger.info("=" * 60)
        logger.info(f"  → Python Version: {sys.version.split()[0]}")
        logger.info(f"  → Environment: {os.getenv('ENVIRONMENT', 'development')}")
        logger.info(f"  → Identity Provider: {IDENTITY_PROVIDER}")
        logger.info(f"  → Analyzer: {analyzer_type or ANALYZER}")
        logger.info(f"  → Docs URL: {app.docs_url if app.docs_url else 'Disabled (production)'}")

        await initialize_database()
        await initialize_services(user_directory=user_directory, analyzer_type=analyzer_type)

        logger.info("✅ Backend ready")

    @app.on_event("shutdown")
    async def shutdown_event():
        await shutdown_services()
        logger.info("Backend stopped")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "smartdoc.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") != "production"
    )
