"""
Gateway Middleware Module

Custom middleware for request/response handling, logging, and error handling.
"""
from .error_handler import ErrorHandlingMiddleware, error_payload
from .request_id import RequestIDMiddleware
from .request_logging import RequestLoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "error_payload"
]
