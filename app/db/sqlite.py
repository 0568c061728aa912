"""
SQLite database implementation.
Users and sessions, nothing else.
"""

import json
import aiosqlite
from datetime import datetime
from typing import Any, Iterable, Optional, Tuple
import os

from .models import User, Session


class StoreUnavailable(Exception):
    """The database could not be read or written."""
    pass


class EmailTakenError(Exception):
    """A user with this email already exists."""

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class SQLiteDatabase:
    """SQLite database for all operations."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
            await self._connection.execute("PRAGMA foreign_keys = ON")
        return self._connection

    async def _execute(
        self,
        query: str,
        params: Iterable[Any] = (),
        commit: bool = False
    ) -> aiosqlite.Cursor:
        """Run a statement, turning driver failures into StoreUnavailable.

        IntegrityError is passed through untouched so callers can map
        constraint violations they know about.
        """
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(query, tuple(params))
            if commit:
                await conn.commit()
            return cursor
        except aiosqlite.IntegrityError:
            raise
        except aiosqlite.Error as e:
            raise StoreUnavailable(str(e)) from e

    async def initialize(self) -> None:
        """Create database tables."""
        try:
            conn = await self._get_connection()
            await conn.executescript("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS sessions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    expires_at TEXT NOT NULL,
                    attributes TEXT NOT NULL DEFAULT '{}',
                    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_sessions_user_id ON sessions(user_id);
                CREATE INDEX IF NOT EXISTS idx_sessions_expires_at ON sessions(expires_at);
            """)
            await conn.commit()
        except aiosqlite.Error as e:
            raise StoreUnavailable(str(e)) from e

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    # ===== Helper Methods =====

    def _row_to_user(self, row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"]
        )

    def _row_to_session(self, row: aiosqlite.Row) -> Session:
        # Stored naive (UTC); drop tzinfo if a value was written with one
        expires_at = datetime.fromisoformat(row["expires_at"])
        if expires_at.tzinfo is not None:
            expires_at = expires_at.replace(tzinfo=None)

        return Session(
            id=row["id"],
            user_id=row["user_id"],
            expires_at=expires_at,
            attributes=json.loads(row["attributes"] or "{}")
        )

    # ===== User Operations =====

    async def create_user(self, email: str, password_hash: str) -> str:
        """Insert a user and return its id.

        Raises:
            EmailTakenError: the email is already registered
            StoreUnavailable: any other database failure
        """
        user = User(email=email, password_hash=password_hash)
        try:
            await self._execute(
                "INSERT INTO users (id, email, password_hash) VALUES (?, ?, ?)",
                (user.id, user.email, user.password_hash),
                commit=True
            )
        except aiosqlite.IntegrityError as e:
            if "users.email" in str(e):
                raise EmailTakenError(email) from e
            raise StoreUnavailable(str(e)) from e
        return user.id

    async def get_user_by_email(self, email: str) -> Optional[User]:
        cursor = await self._execute("SELECT * FROM users WHERE email = ?", (email,))
        row = await cursor.fetchone()
        return self._row_to_user(row) if row else None

    # ===== Session Operations =====

    async def create_session(self, session: Session) -> Session:
        try:
            await self._execute(
                """
                INSERT INTO sessions (id, user_id, expires_at, attributes)
                VALUES (?, ?, ?, ?)
                """,
                (
                    session.id,
                    session.user_id,
                    session.expires_at.isoformat(),
                    json.dumps(session.attributes)
                ),
                commit=True
            )
        except aiosqlite.IntegrityError as e:
            # Unknown user_id or an id collision
            raise StoreUnavailable(str(e)) from e
        return session

    async def get_session_and_user(
        self, session_id: str
    ) -> Tuple[Optional[Session], Optional[User]]:
        cursor = await self._execute(
            """
            SELECT s.id, s.user_id, s.expires_at, s.attributes,
                   u.email, u.password_hash
            FROM sessions s
            JOIN users u ON u.id = s.user_id
            WHERE s.id = ?
            """,
            (session_id,)
        )
        row = await cursor.fetchone()
        if not row:
            return None, None

        user = User(
            id=row["user_id"],
            email=row["email"],
            password_hash=row["password_hash"]
        )
        return self._row_to_session(row), user

    async def update_session_expiration(self, session_id: str, expires_at: datetime) -> None:
        await self._execute(
            "UPDATE sessions SET expires_at = ? WHERE id = ?",
            (expires_at.isoformat(), session_id),
            commit=True
        )

    async def delete_session(self, session_id: str) -> bool:
        cursor = await self._execute(
            "DELETE FROM sessions WHERE id = ?", (session_id,), commit=True
        )
        return cursor.rowcount > 0

    async def delete_expired_sessions(self, now: datetime) -> int:
        cursor = await self._execute(
            "DELETE FROM sessions WHERE expires_at <= ?",
            (now.isoformat(),),
            commit=True
        )
        return cursor.rowcount
