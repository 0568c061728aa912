"""
Shared fixtures.
"""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio

from app.auth import CookieJar, SessionManager, SessionPolicy
from app.db import SQLiteDatabase


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = datetime(2026, 1, 1, 12, 0, 0)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def db(tmp_path):
    database = SQLiteDatabase(str(tmp_path / "test.db"))
    await database.initialize()
    yield database
    await database.close()


@pytest.fixture
def sessions(db, clock):
    return SessionManager(db, SessionPolicy(), clock=clock)


@pytest_asyncio.fixture
async def user_id(db):
    return await db.create_user("a@b.com", "not-a-real-hash")


@pytest.fixture
def jar():
    """An empty, writable cookie jar. Bind it with bind_cookies() in the test."""
    return CookieJar({})
