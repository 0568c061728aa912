"""
Pydantic models for database entities.
"""

from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel, Field
import uuid


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class User(BaseModel):
    """A registered user."""
    id: str = Field(default_factory=generate_uuid)
    email: str
    password_hash: str


class Session(BaseModel):
    """A login session. The id is also the cookie token."""
    id: str
    user_id: str
    expires_at: datetime
    attributes: Dict[str, Any] = Field(default_factory=dict)

    # Not stored: set when expires_at was just (re)issued and the
    # cookie should be sent again.
    fresh: bool = False
