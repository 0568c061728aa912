"""
Session lifecycle for the current request: issue, verify, destroy.

All three work on the cookie jar of the request being handled and must be
called while a request is in flight.
"""

import logging
from typing import Any, Dict, Optional

from ..db import Session
from .cookies import CookieJar, SessionCookie, cookies
from .session import SessionManager, SessionValidation

logger = logging.getLogger(__name__)

UNAUTHORIZED = {"error": "Unauthorized!"}


def _write_cookie(jar: CookieJar, cookie: SessionCookie) -> bool:
    """Best-effort cookie write. Returns False if the write failed."""
    try:
        jar.set(cookie)
    except Exception:
        logger.warning(f"Could not write cookie '{cookie.name}'", exc_info=True)
        return False
    return True


async def create_auth_session(
    sessions: SessionManager,
    user_id: str,
    attributes: Optional[Dict[str, Any]] = None
) -> Session:
    """
    Start a session for a user and send its cookie.

    Raises:
        NoResponseContext: no request is being handled
        StoreUnavailable: the session could not be saved
    """
    jar = cookies()
    session = await sessions.create_session(user_id, attributes)
    jar.set(sessions.create_session_cookie(session.id))
    return session


async def verify_auth(sessions: SessionManager) -> SessionValidation:
    """
    Resolve the user behind the current request's session cookie.

    Renews the cookie when the session was extended and clears it when the
    session is unknown or expired. A failed cookie write is logged and does
    not change the result.
    """
    jar = cookies()
    session_id = jar.get(sessions.session_cookie_name)

    if session_id is None:
        return SessionValidation(user=None, session=None)

    if not session_id:
        return SessionValidation(user=None, session=None)

    result = await sessions.validate_session(session_id)

    if result.session and result.session.fresh:
        if _write_cookie(jar, sessions.create_session_cookie(result.session.id)):
            logger.debug(f"Renewed session cookie for user {result.user.id}")

    if not result.session:
        if _write_cookie(jar, sessions.create_blank_session_cookie()):
            logger.debug("Cleared invalid session cookie")

    return result


async def destroy_session(sessions: SessionManager) -> Optional[Dict[str, str]]:
    """
    Log out the current request's session.

    Returns:
        None on success, or ``UNAUTHORIZED`` if there was no valid session
    """
    _, session = await verify_auth(sessions)
    if not session:
        return dict(UNAUTHORIZED)

    await sessions.invalidate_session(session.id)
    logger.info(f"Invalidated session for user {session.user_id}")

    cookies().set(sessions.create_blank_session_cookie())
    return None
