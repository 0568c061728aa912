"""
FastAPI dependency injection.
Simple setup - just database and session management.
"""

from typing import Optional
from fastapi import HTTPException

from .config import settings
from .db import SQLiteDatabase, User
from .auth import SessionManager, SessionPolicy, verify_auth


# Global instances (initialized on startup)
_db: Optional[SQLiteDatabase] = None
_session_manager: Optional[SessionManager] = None


async def init_dependencies(database_path: Optional[str] = None):
    """Initialize global dependencies. Called on app startup."""
    global _db, _session_manager

    _db = SQLiteDatabase(database_path or settings.database_path)
    await _db.initialize()

    _session_manager = SessionManager(_db, SessionPolicy.from_settings(settings))


async def close_dependencies():
    """Close global dependencies. Called on app shutdown."""
    global _db, _session_manager
    if _db:
        await _db.close()
    _db = None
    _session_manager = None


def get_db() -> SQLiteDatabase:
    """Get the database instance."""
    if _db is None:
        raise RuntimeError("Database not initialized")
    return _db


def get_session_manager() -> SessionManager:
    """Get the session manager instance."""
    if _session_manager is None:
        raise RuntimeError("Session manager not initialized")
    return _session_manager


async def require_auth() -> User:
    """
    Dependency that requires authentication.
    Redirects to the landing page if not authenticated.
    """
    user, _ = await verify_auth(get_session_manager())

    if user is None:
        raise HTTPException(status_code=307, headers={"Location": settings.landing_redirect})
    return user


async def check_auth() -> bool:
    """Check if user is authenticated (without raising exception)."""
    user, _ = await verify_auth(get_session_manager())
    return user is not None
