"""
Session gate - ties the identity capability to the pipeline context.

The gate reacts to every session-change notification: a session with an
identity triggers a reconciliation, no session clears both projections
synchronously without touching the network.
"""
import asyncio
from typing import Optional

from ..core.logging_config import get_logger
from ..domain.entities import Session
from ..services.identity.base import IdentityProvider, Subscription
from .context import PipelineContext
from .reconciler import Reconciler

logger = get_logger(__name__)


class SessionGate:

    def __init__(self, context: PipelineContext, identity: IdentityProvider, reconciler: Reconciler):
        self._context = context
        self._identity = identity
        self._reconciler = reconciler
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._subscription: Optional[Subscription] = None

    async def init(self) -> Optional[Session]:
        """
        Resume an existing session, if any, and start listening for changes.

        Returns:
            The resumed session, or None when signed out
        """
        self._loop = asyncio.get_running_loop()

        try:
            session = await self._identity.current_session()
        except Exception as e:
            logger.error(f"Could not resume session: {e}", exc_info=True)
            session = None

        if session is not None:
            self._context.begin_session(session)
            logger.info(f"Resumed session for identity {session.identity}")
            await self._reconciler.refresh()
        else:
            logger.info("No existing session to resume")

        self._subscription = self._identity.on_session_change(self._on_notification)
        return session

    def _on_notification(self, session: Optional[Session]) -> None:
        # Identity SDKs may call back from a worker thread
        if self._loop is None:
            self.handle_session_change(session)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self.handle_session_change(session)
        else:
            self._loop.call_soon_threadsafe(self.handle_session_change, session)

    def handle_session_change(self, session: Optional[Session]) -> Optional[asyncio.Task]:
        """Re-evaluate after login, logout or token refresh."""
        if session is None:
            self._context.end_session()
            return None
        self._context.begin_session(session)
        return self._context.spawn(self._reconciler.refresh())

    async def sign_in(self, email: str, password: str) -> bool:
        """
        Exchange credentials for a session. Never raises.

        Once init() has subscribed, the identity notification applies the
        session; before that, the returned session is applied here.
        """
        try:
            session = await self._identity.establish_session(email, password)
        except Exception as e:
            logger.error(f"Sign in error: {e}")
            return False
        if self._subscription is None:
            self.handle_session_change(session)
        return True

    async def sign_up(self, email: str, password: str, name: str = "") -> bool:
        """Register, then sign in. A failed registration never attempts sign-in."""
        try:
            await self._identity.register(email, password, name)
        except Exception as e:
            logger.error(f"Sign up error: {e}")
            return False
        return await self.sign_in(email, password)

    async def sign_out(self) -> None:
        """End the session; projections are cleared even if the identity call fails."""
        try:
            await self._identity.end_session()
        except Exception as e:
            logger.error(f"Sign out error: {e}", exc_info=True)
        if self._context.session is not None:
            self._context.end_session()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
