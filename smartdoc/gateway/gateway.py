"""
API Gateway

Main gateway class that orchestrates middleware, error rendering and
router registration for the reference backend.
"""
import os
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..api.exceptions import SmartDocError, handle_business_exception
from ..core.config import CORS_ORIGINS
from ..core.logging_config import get_logger
from .middleware import (
    ErrorHandlingMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    error_payload
)

logger = get_logger(__name__)


class APIGateway:
    """
    API Gateway that manages middleware and routing.

    Responsibilities:
    - Initialize FastAPI application
    - Register middleware (CORS, request IDs, logging, error handling)
    - Render business and HTTP errors as a uniform JSON body
    - Register routers and health check endpoints
    """

    def __init__(
        self,
        title: str = "Smart Doc Checker API",
        description: str = "Document intake and conflict detection",
        version: str = "1.0.0",
        enable_docs: Optional[bool] = None
    ):
        """
        Initialize API Gateway.

        Args:
            title: API title
            description: API description
            version: API version
            enable_docs: Enable API docs (auto-detected from ENVIRONMENT if None)
        """
        self.title = title
        self.version = version
        self.enable_docs = enable_docs if enable_docs is not None else (
            os.getenv("ENVIRONMENT") != "production"
        )

        self.app = FastAPI(
            title=title,
            description=description,
            version=version,
            docs_url="/docs" if self.enable_docs else None,
            redoc_url="/redoc" if self.enable_docs else None
        )
        self.routers: List[str] = []

        logger.info("API Gateway initialized")

    def setup_middleware(self):
        """Configure all middleware. The last one added runs first."""
        logger.info("Setting up middleware...")

        self.app.add_middleware(ErrorHandlingMiddleware)
        self.app.add_middleware(RequestLoggingMiddleware)
        self.app.add_middleware(RequestIDMiddleware)
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.debug(f"  → CORS middleware added (origins: {', '.join(CORS_ORIGINS)})")

        logger.info("✅ All middleware configured")

    def setup_exception_handlers(self):
        """Render business exceptions, HTTP errors and validation errors as JSON."""

        @self.app.exception_handler(SmartDocError)
        async def business_exception_handler(request: Request, exc: SmartDocError):
            http_exception = handle_business_exception(exc)
            logger.warning(
                f"Business exception for {request.method} {request.url.path}: "
                f"{http_exception.status_code} {http_exception.detail}"
            )
            return JSONResponse(
                status_code=http_exception.status_code,
                content=error_payload(request, http_exception.status_code, http_exception.detail)
            )

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            logger.debug(f"HTTP exception for {request.method} {request.url.path}: {exc.status_code} - {exc.detail}")
            return JSONResponse(
                status_code=exc.status_code,
                content=error_payload(request, exc.status_code, exc.detail),
                headers=getattr(exc, "headers", None)
            )

        @self.app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            logger.warning(f"Validation error for {request.method} {request.url.path}: {exc.errors()}")
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content=error_payload(request, status.HTTP_422_UNPROCESSABLE_ENTITY, _jsonable_errors(exc))
            )

    def register_router(
        self,
        router: APIRouter,
        prefix: str = "",
        tags: Optional[List[str]] = None
    ):
        """
        Register a router with the gateway.

        Args:
            router: FastAPI router instance
            prefix: URL prefix for the router
            tags: OpenAPI tags for documentation
        """
        self.app.include_router(router, prefix=prefix, tags=tags or [])
        self.routers.append(prefix or "/")
        logger.info(f"Registered router {', '.join(tags or [])} at prefix '{prefix}'")

    def register_health_endpoints(self):
        """Register health check endpoints."""

        @self.app.get("/")
        async def root():
            return {
                "message": f"{self.title} is running",
                "version": self.version,
                "status": "healthy"
            }

        @self.app.get("/health")
        async def health_check():
            """Returns 200 if services are initialized, 503 otherwise."""
            from ..routers import dependencies

            if dependencies.db_service is None or dependencies.analysis_service is None:
                logger.warning("Health check failed: services not initialized")
                return JSONResponse(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    content={"status": "unhealthy", "reason": "Services not initialized"}
                )
            return {
                "status": "healthy",
                "database": "connected",
                "analyzer": dependencies.analysis_service.analyzer.name
            }

        logger.info("Health check endpoints registered")

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self.app


def _jsonable_errors(exc: RequestValidationError) -> list:
    # Validation contexts may hold exception objects
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
