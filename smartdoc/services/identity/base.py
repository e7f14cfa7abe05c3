"""
Abstract base class for identity providers.
All identity implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ...domain.entities import Session

SessionCallback = Callable[[Optional[Session]], None]


class Subscription:
    """Handle returned by on_session_change(); call unsubscribe() to stop notifications."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe = unsubscribe
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._unsubscribe()
            self.active = False


class IdentityProvider(ABC):
    """
    Abstract interface for the identity capability.

    Implementations notify every subscriber after each session change
    (sign-in, sign-out, token refresh), passing the new session or None.
    """

    @abstractmethod
    async def establish_session(self, email: str, password: str) -> Session:
        """
        Exchange credentials for a session.

        Raises:
            AuthFailure: if the credentials are rejected
        """
        pass

    @abstractmethod
    async def register(self, email: str, password: str, name: str = "") -> None:
        """
        Register a new identity.

        Raises:
            RegistrationError: if the identity cannot be created
        """
        pass

    @abstractmethod
    async def current_session(self) -> Optional[Session]:
        """Return the session to resume, if one exists."""
        pass

    @abstractmethod
    def on_session_change(self, callback: SessionCallback) -> Subscription:
        """Subscribe to session changes."""
        pass

    @abstractmethod
    async def end_session(self) -> None:
        """Sign out the current session."""
        pass
