"""
Database package - SQLite only.
"""

from .models import User, Session, generate_uuid
from .sqlite import SQLiteDatabase, StoreUnavailable, EmailTakenError

__all__ = [
    "SQLiteDatabase",
    "StoreUnavailable",
    "EmailTakenError",
    "User",
    "Session",
    "generate_uuid",
]
