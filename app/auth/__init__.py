"""
Authentication module.
"""

from app.auth.errors import AuthError, NoResponseContext, CookieWriteError
from app.auth.password import hash_password, verify_password
from app.auth.cookies import (
    CookieAttributes,
    CookieJar,
    SessionCookie,
    bind_cookies,
    cookie_middleware,
    cookies,
)
from app.auth.session import SessionManager, SessionPolicy, SessionValidation
from app.auth.lifecycle import (
    UNAUTHORIZED,
    create_auth_session,
    destroy_session,
    verify_auth,
)

__all__ = [
    "AuthError",
    "NoResponseContext",
    "CookieWriteError",
    "hash_password",
    "verify_password",
    "CookieAttributes",
    "CookieJar",
    "SessionCookie",
    "bind_cookies",
    "cookie_middleware",
    "cookies",
    "SessionManager",
    "SessionPolicy",
    "SessionValidation",
    "UNAUTHORIZED",
    "create_auth_session",
    "destroy_session",
    "verify_auth",
]
