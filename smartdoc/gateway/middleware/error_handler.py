"""
Error Handling Middleware

Centralized error handling and response formatting. Business exceptions
are converted by the gateway's exception handlers; this middleware is the
last line for anything unexpected.
"""
import os
import traceback
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import status

from ...core.logging_config import get_logger

logger = get_logger(__name__)


def error_payload(request: Request, status_code: int, error: Any) -> dict:
    """Standard JSON error body shared by every error path."""
    return {
        "error": error,
        "status_code": status_code,
        "path": request.url.path,
        "request_id": getattr(request.state, "request_id", None)
    }


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Converts unexpected exceptions to a 500 JSON response.

    In development the message and traceback are included; in production
    only a generic message is returned.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            is_development = os.getenv("ENVIRONMENT", "development") != "production"

            logger.error(f"Unexpected error for {request.method} {request.url.path}: {e}", exc_info=True)

            content = error_payload(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                str(e) if is_development else "Internal server error"
            )
            if is_development:
                content["traceback"] = traceback.format_exc()
            return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
