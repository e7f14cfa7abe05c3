"""
Supabase Auth identity provider implementing IdentityProvider.
Sessions come from Supabase Auth; registration goes through the backend's
/signup endpoint so the account is created server-side.
"""
import asyncio
from typing import Optional

import httpx
from supabase import create_client, Client
from supabase.lib.client_options import ClientOptions

from ...api.exceptions import AuthFailure, RegistrationError
from ...core.logging_config import get_logger
from ...domain.entities import Session
from ...domain.value_objects import AccessToken, UserId
from .base import IdentityProvider, SessionCallback, Subscription

logger = get_logger(__name__)


class SupabaseIdentityProvider(IdentityProvider):
    """
    Identity provider using Supabase Auth.

    The Supabase client is synchronous; blocking calls run in the default
    executor. Auth-state callbacks may therefore arrive on a worker thread.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        api_url: str,
        timeout: float = 30.0
    ):
        """
        Initialize Supabase identity provider.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase anon (public) key
            api_url: Base URL of the backend data capability (for /signup)
            timeout: Timeout for the signup request in seconds
        """
        self.supabase_key = supabase_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

        self.supabase: Client = create_client(
            supabase_url,
            supabase_key,
            options=ClientOptions(
                auto_refresh_token=True,
                persist_session=True
            )
        )

    @staticmethod
    def _to_session(raw) -> Optional[Session]:
        if raw is None or getattr(raw, "user", None) is None:
            return None
        return Session(
            identity=UserId(raw.user.id),
            access_token=AccessToken(raw.access_token),
            email=getattr(raw.user, "email", None)
        )

    async def establish_session(self, email: str, password: str) -> Session:
        def _sign_in():
            return self.supabase.auth.sign_in_with_password({"email": email, "password": password})

        loop = asyncio.get_event_loop()
        try:
            response = await loop.run_in_executor(None, _sign_in)
        except Exception as e:
            raise AuthFailure(f"Supabase sign in failed: {e}") from e

        session = self._to_session(getattr(response, "session", None))
        if session is None:
            raise AuthFailure("Supabase returned no session")
        return session

    async def register(self, email: str, password: str, name: str = "") -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_url}/signup",
                    headers={"Authorization": f"Bearer {self.supabase_key}"},
                    json={"email": email, "password": password, "name": name}
                )
        except httpx.HTTPError as e:
            raise RegistrationError(f"Signup request failed: {e}") from e

        if response.status_code >= 300:
            raise RegistrationError(f"Signup rejected ({response.status_code}): {response.text}")

    async def current_session(self) -> Optional[Session]:
        def _get_session():
            return self.supabase.auth.get_session()

        loop = asyncio.get_event_loop()
        return self._to_session(await loop.run_in_executor(None, _get_session))

    def on_session_change(self, callback: SessionCallback) -> Subscription:
        def _listener(event, raw_session):
            logger.debug(f"Supabase auth event: {event}")
            callback(self._to_session(raw_session))

        subscription = self.supabase.auth.on_auth_state_change(_listener)
        return Subscription(subscription.unsubscribe)

    async def end_session(self) -> None:
        def _sign_out():
            self.supabase.auth.sign_out()

        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, _sign_out)
