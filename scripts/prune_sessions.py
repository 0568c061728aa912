#!/usr/bin/env python3
"""
Cron job script to delete expired sessions.
Add to crontab: 0 3 * * * cd /path/to/app && /path/to/venv/bin/python scripts/prune_sessions.py
"""

import asyncio
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.db import SQLiteDatabase
from app.auth import SessionManager, SessionPolicy

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


async def main():
    db = SQLiteDatabase(settings.database_path)
    await db.initialize()

    try:
        sessions = SessionManager(db, SessionPolicy.from_settings(settings))
        removed = await sessions.delete_expired_sessions()
        logger.info(f"Removed {removed} expired sessions")
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())
