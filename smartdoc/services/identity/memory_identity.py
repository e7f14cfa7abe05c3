"""
In-memory identity provider.
Perfect for demos and testing - users and tokens live in Python dicts.
Data is lost on restart.
"""
import hashlib
import secrets
import uuid
from typing import Dict, List, Optional

from ...api.exceptions import AuthFailure, RegistrationError
from ...core.logging_config import get_logger
from ...domain.entities import Session
from ...domain.value_objects import AccessToken, UserId
from .base import IdentityProvider, SessionCallback, Subscription

logger = get_logger(__name__)


def _hash_password(password: str, salt: str) -> str:
    return hashlib.sha256(f"{salt}:{password}".encode("utf-8")).hexdigest()


class MemoryUserDirectory:
    """
    User and token registry shared by MemoryIdentityProvider (client side)
    and the reference backend's token check.
    """

    def __init__(self):
        self._users: Dict[str, Dict] = {}  # email -> user record
        self._tokens: Dict[str, UserId] = {}  # access token -> user id

    def register(self, email: str, password: str, name: str = "") -> Dict:
        email = email.strip().lower()
        if not email or "@" not in email:
            raise RegistrationError(f"Invalid email address: {email!r}")
        if len(password) < 6:
            raise RegistrationError("Password must be at least 6 characters")
        if email in self._users:
            raise RegistrationError(f"A user with email {email} already exists")

        salt = secrets.token_hex(8)
        user = {
            "id": str(uuid.uuid4()),
            "email": email,
            "name": name,
            "salt": salt,
            "password_hash": _hash_password(password, salt),
        }
        self._users[email] = user
        logger.debug(f"Registered user {email} ({user['id']})")
        return self.public_user(user)

    def authenticate(self, email: str, password: str) -> Session:
        user = self._users.get(email.strip().lower())
        if user is None or _hash_password(password, user["salt"]) != user["password_hash"]:
            raise AuthFailure("Invalid login credentials")
        token = AccessToken(secrets.token_urlsafe(24))
        self._tokens[token] = UserId(user["id"])
        return Session(identity=UserId(user["id"]), access_token=token, email=user["email"])

    def refresh(self, session: Session) -> Session:
        """Issue a new token for the same identity and revoke the old one."""
        self.revoke(session.access_token)
        token = AccessToken(secrets.token_urlsafe(24))
        self._tokens[token] = session.identity
        return Session(identity=session.identity, access_token=token, email=session.email)

    def verify(self, token: str) -> Optional[UserId]:
        return self._tokens.get(token)

    def revoke(self, token: str) -> None:
        self._tokens.pop(token, None)

    @staticmethod
    def public_user(user: Dict) -> Dict:
        return {"id": user["id"], "email": user["email"], "name": user["name"]}


class MemoryIdentityProvider(IdentityProvider):
    """Identity provider backed by a MemoryUserDirectory."""

    def __init__(self, directory: Optional[MemoryUserDirectory] = None):
        self.directory = directory or MemoryUserDirectory()
        self._session: Optional[Session] = None
        self._callbacks: List[SessionCallback] = []

    async def establish_session(self, email: str, password: str) -> Session:
        session = self.directory.authenticate(email, password)
        self._set_session(session)
        return session

    async def register(self, email: str, password: str, name: str = "") -> None:
        self.directory.register(email, password, name)

    async def current_session(self) -> Optional[Session]:
        return self._session

    def on_session_change(self, callback: SessionCallback) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(lambda: self._callbacks.remove(callback))

    async def end_session(self) -> None:
        if self._session is not None:
            self.directory.revoke(self._session.access_token)
        self._set_session(None)

    async def refresh_token(self) -> Session:
        """Rotate the access token, as a hosted provider does periodically."""
        if self._session is None:
            raise AuthFailure("No session to refresh")
        session = self.directory.refresh(self._session)
        self._set_session(session)
        return session

    def _set_session(self, session: Optional[Session]) -> None:
        self._session = session
        for callback in list(self._callbacks):
            callback(session)
