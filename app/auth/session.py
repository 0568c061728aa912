"""
Database-backed session management.

Sessions live in the ``sessions`` table and the session id is the cookie
value. Expiration is rolling: once a session has used up half of its
lifetime, validating it pushes ``expires_at`` forward by a full lifetime
and flags it ``fresh`` so the caller re-sends the cookie.
"""

import base64
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, NamedTuple, Optional

from ..config import Settings
from ..db import SQLiteDatabase, Session, User
from .cookies import CookieAttributes, SessionCookie

logger = logging.getLogger(__name__)


DEFAULT_COOKIE_NAME = "auth_session"
DEFAULT_EXPIRES_IN = timedelta(days=30)


def generate_session_id() -> str:
    """40 lowercase base32 characters from 25 random bytes."""
    return base64.b32encode(secrets.token_bytes(25)).decode("ascii").lower()


@dataclass(frozen=True)
class SessionPolicy:
    """Session and cookie settings. Built once at startup."""
    cookie_name: str = DEFAULT_COOKIE_NAME
    expires_in: timedelta = DEFAULT_EXPIRES_IN
    cookie_expires: bool = False
    secure: bool = False
    same_site: str = "strict"
    path: str = "/"

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionPolicy":
        return cls(
            cookie_name=settings.session_cookie_name,
            expires_in=timedelta(days=settings.session_expires_in_days),
            cookie_expires=settings.session_cookie_expires,
            secure=settings.is_production,
            same_site=settings.session_cookie_same_site,
        )


class SessionValidation(NamedTuple):
    """Result of validating a session id. Both fields are None when invalid."""
    user: Optional[User]
    session: Optional[Session]


class SessionManager:
    """Creates, validates and invalidates sessions."""

    def __init__(
        self,
        db: SQLiteDatabase,
        policy: Optional[SessionPolicy] = None,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        """
        Initialize session manager.

        Args:
            db: Database holding users and sessions
            policy: Cookie and expiration settings
            clock: Returns the current naive UTC time
        """
        self._db = db
        self.policy = policy or SessionPolicy()
        self._clock = clock

    @property
    def session_cookie_name(self) -> str:
        return self.policy.cookie_name

    async def create_session(
        self,
        user_id: str,
        attributes: Optional[Dict[str, Any]] = None
    ) -> Session:
        """
        Create and store a new session for a user.

        Args:
            user_id: Owner of the session
            attributes: Extra data kept with the session (e.g. a role)

        Raises:
            StoreUnavailable: the session could not be saved
        """
        session = Session(
            id=generate_session_id(),
            user_id=user_id,
            expires_at=self._clock() + self.policy.expires_in,
            attributes=dict(attributes or {}),
            fresh=True,
        )
        await self._db.create_session(session)
        logger.info(f"Created session for user {user_id}")
        return session

    async def validate_session(self, session_id: str) -> SessionValidation:
        """
        Look up a session and apply the rolling expiration policy.

        Expired sessions are deleted and reported as invalid.
        """
        session, user = await self._db.get_session_and_user(session_id)
        if session is None or user is None:
            return SessionValidation(user=None, session=None)

        now = self._clock()
        if now >= session.expires_at:
            await self._db.delete_session(session.id)
            logger.info(f"Session for user {user.id} expired")
            return SessionValidation(user=None, session=None)

        if now >= session.expires_at - self.policy.expires_in / 2:
            session.expires_at = now + self.policy.expires_in
            await self._db.update_session_expiration(session.id, session.expires_at)
            session.fresh = True

        return SessionValidation(user=user, session=session)

    async def invalidate_session(self, session_id: str) -> None:
        await self._db.delete_session(session_id)

    async def delete_expired_sessions(self) -> int:
        """Remove every expired session. Returns how many were removed."""
        return await self._db.delete_expired_sessions(self._clock())

    def _cookie_attributes(self, max_age: Optional[int]) -> CookieAttributes:
        return CookieAttributes(
            secure=self.policy.secure,
            http_only=True,
            same_site=self.policy.same_site,
            path=self.policy.path,
            max_age=max_age,
        )

    def create_session_cookie(self, session_id: str) -> SessionCookie:
        max_age = None
        if self.policy.cookie_expires:
            max_age = int(self.policy.expires_in.total_seconds())
        return SessionCookie(
            name=self.session_cookie_name,
            value=session_id,
            attributes=self._cookie_attributes(max_age),
        )

    def create_blank_session_cookie(self) -> SessionCookie:
        """A cookie that makes the client drop its session cookie."""
        return SessionCookie(
            name=self.session_cookie_name,
            value="",
            attributes=self._cookie_attributes(0),
        )
