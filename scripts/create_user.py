#!/usr/bin/env python3
"""
Create a user account from the command line.
Usage: python scripts/create_user.py <email> <password>
"""

import asyncio
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.db import SQLiteDatabase, EmailTakenError
from app.auth import hash_password
from app.actions import MIN_PASSWORD_LENGTH

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


async def main(email: str, password: str):
    if "@" not in email:
        logger.error(f"Not an email address: {email}")
        sys.exit(1)

    if len(password.strip()) < MIN_PASSWORD_LENGTH:
        logger.error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        sys.exit(1)

    db = SQLiteDatabase(settings.database_path)
    await db.initialize()

    try:
        user_id = await db.create_user(email, hash_password(password))
        logger.info(f"Created user {user_id} ({email})")
    except EmailTakenError:
        logger.error(f"Email already registered: {email}")
        sys.exit(1)
    finally:
        await db.close()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python scripts/create_user.py <email> <password>")
        sys.exit(1)
    asyncio.run(main(sys.argv[1], sys.argv[2]))
