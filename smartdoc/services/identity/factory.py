"""
Identity Provider Factory.
Implements Factory Pattern for plug-and-play identity support.
"""
import os
from typing import Optional

from ...core.logging_config import get_logger
from .base import IdentityProvider
from .memory_identity import MemoryIdentityProvider

logger = get_logger(__name__)
# Supabase import is conditional - only imported when needed


class IdentityProviderFactory:
    """
    Factory for creating identity providers.
    Supports Supabase Auth and an in-memory directory.
    """

    @staticmethod
    def create(provider_type: Optional[str] = None, **kwargs) -> IdentityProvider:
        """
        Create an identity provider instance.

        Args:
            provider_type: 'supabase', 'memory', or None to read IDENTITY_PROVIDER
            **kwargs: Additional arguments for the specific provider

        Returns:
            IdentityProvider instance

        Examples:
            identity = IdentityProviderFactory.create('memory')
            identity = IdentityProviderFactory.create('supabase', supabase_url=..., supabase_key=...)
        """
        if provider_type is None:
            provider_type = os.getenv("IDENTITY_PROVIDER", "memory")

        provider_type = provider_type.lower()

        if provider_type == "memory":
            return MemoryIdentityProvider(directory=kwargs.get("directory"))
        elif provider_type == "supabase":
            return IdentityProviderFactory._create_supabase(**kwargs)
        else:
            raise ValueError(
                f"Unsupported identity provider: {provider_type}. "
                f"Supported types: 'supabase', 'memory'"
            )

    @staticmethod
    def _create_supabase(**kwargs):
        """Create Supabase Auth identity provider."""
        from ...core.config import HTTP_TIMEOUT_SECONDS, SMARTDOC_API_URL, SUPABASE_ANON_KEY, SUPABASE_URL
        from .supabase_identity import SupabaseIdentityProvider

        supabase_url = kwargs.get("supabase_url", SUPABASE_URL)
        if not supabase_url:
            raise ValueError("Supabase URL is required")

        supabase_key = kwargs.get("supabase_key", SUPABASE_ANON_KEY)
        if not supabase_key:
            raise ValueError("Supabase anon key is required")

        logger.info("Using Supabase identity provider")
        return SupabaseIdentityProvider(
            supabase_url=supabase_url,
            supabase_key=supabase_key,
            api_url=kwargs.get("api_url", SMARTDOC_API_URL),
            timeout=kwargs.get("timeout", HTTP_TIMEOUT_SECONDS)
        )
