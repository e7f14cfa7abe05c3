"""
Identity capability - who is signed in, and notifications when that changes.
"""
from .base import IdentityProvider, Subscription
from .factory import IdentityProviderFactory
from .memory_identity import MemoryIdentityProvider, MemoryUserDirectory

__all__ = [
    "IdentityProvider",
    "Subscription",
    "IdentityProviderFactory",
    "MemoryIdentityProvider",
    "MemoryUserDirectory",
]
