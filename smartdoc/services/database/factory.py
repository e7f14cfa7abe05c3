"""
Database Factory for creating store adapters.
Implements Factory Pattern for plug-and-play store support.
"""
import os
from typing import Optional

from ...core.logging_config import get_logger
from .base import DatabaseInterface
from .memory_adapter import MemoryAdapter

logger = get_logger(__name__)


class DatabaseFactory:
    """
    Factory for creating store adapters.
    The reference backend ships the in-memory store only.
    """

    @staticmethod
    def create(database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """
        Create a store adapter instance.

        Args:
            database_type: Type of store ('memory', or None for auto-detect)
            **kwargs: Additional arguments for specific adapters

        Returns:
            DatabaseInterface instance
        """
        if database_type is None:
            database_type = os.getenv("DATABASE_TYPE", "memory")

        database_type = database_type.lower()

        if database_type == "memory":
            return MemoryAdapter()
        else:
            raise ValueError(
                f"Unsupported database type: {database_type}. "
                f"Supported types: 'memory'"
            )

    @staticmethod
    async def create_and_initialize(database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """Create store adapter and initialize it."""
        db = DatabaseFactory.create(database_type, **kwargs)
        await db.initialize()
        return db
