"""
Store abstraction layer for the reference backend.
"""
from .base import DatabaseInterface
from .factory import DatabaseFactory
from .memory_adapter import MemoryAdapter

__all__ = [
    "DatabaseInterface",
    "DatabaseFactory",
    "MemoryAdapter"
]
