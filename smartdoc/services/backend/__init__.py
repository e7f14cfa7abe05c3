"""
Backend data capability - authoritative document and conflict state.
"""
from .base import BackendDataInterface
from .http_backend import HttpBackendClient

__all__ = ["BackendDataInterface", "HttpBackendClient"]
