"""
Auth Service - server-side account creation and bearer-token checks for the
reference backend.

Two implementations mirror the client identity providers:
- MemoryAuthService shares a MemoryUserDirectory with MemoryIdentityProvider
- SupabaseAuthService uses the service-role key (admin signup, token lookup)
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..api.exceptions import AuthFailure, RegistrationError
from ..core.logging_config import get_logger
from ..domain.value_objects import UserId
from .identity.memory_identity import MemoryUserDirectory

logger = get_logger(__name__)


class AuthService(ABC):

    @abstractmethod
    async def register(self, email: str, password: str, name: str = "") -> Dict:
        """Create an account. Returns ``{id, email, name}``; raises RegistrationError."""
        pass

    @abstractmethod
    async def verify_token(self, token: str) -> UserId:
        """Resolve a bearer token to its identity; raises AuthFailure."""
        pass


class MemoryAuthService(AuthService):

    def __init__(self, directory: Optional[MemoryUserDirectory] = None):
        self.directory = directory or MemoryUserDirectory()

    async def register(self, email: str, password: str, name: str = "") -> Dict:
        return self.directory.register(email, password, name)

    async def verify_token(self, token: str) -> UserId:
        user_id = self.directory.verify(token)
        if user_id is None:
            raise AuthFailure("Invalid or expired access token")
        return user_id


class SupabaseAuthService(AuthService):
    """Supabase Auth via the admin API (requires the service-role key)."""

    def __init__(self, supabase_url: str, service_role_key: str):
        from supabase import create_client

        self.supabase = create_client(supabase_url, service_role_key)

    async def register(self, email: str, password: str, name: str = "") -> Dict:
        def _create():
            return self.supabase.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"name": name}
            })

        loop = asyncio.get_event_loop()
        try:
            response = await loop.run_in_executor(None, _create)
        except Exception as e:
            raise RegistrationError(f"Supabase signup failed: {e}") from e

        user = response.user
        return {"id": user.id, "email": user.email, "name": name}

    async def verify_token(self, token: str) -> UserId:
        def _get_user():
            return self.supabase.auth.get_user(token)

        loop = asyncio.get_event_loop()
        try:
            response = await loop.run_in_executor(None, _get_user)
        except Exception as e:
            raise AuthFailure(f"Token verification failed: {e}") from e

        if response is None or response.user is None:
            raise AuthFailure("Invalid or expired access token")
        return UserId(response.user.id)
