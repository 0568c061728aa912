"""
Auth form actions: signup, login, logout.

Each action returns either a ``Redirect`` or a form state of the shape
``{"errors": {field: message}}`` for the page to render.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .config import settings
from .db import EmailTakenError
from .dependencies import get_db, get_session_manager
from .auth import create_auth_session, destroy_session, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_EMAIL = "Please enter a valid email address"
PASSWORD_TOO_SHORT = "Password must be at least 8 characters long"
EMAIL_TAKEN = "This email already exists."
INVALID_CREDENTIALS = "Please check your email or password"

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class Redirect:
    """Navigate the client to ``url``."""
    url: str


FormState = Dict[str, Dict[str, str]]
ActionResult = Union[Redirect, FormState]


def _field(form_data: Mapping[str, Any], name: str) -> str:
    value = form_data.get(name)
    return value if isinstance(value, str) else ""


async def signup(form_state: Optional[FormState], form_data: Mapping[str, Any]) -> ActionResult:
    """Create an account and log it in."""
    email = _field(form_data, "email")
    password = _field(form_data, "password")

    errors = {}

    if "@" not in email:
        errors["email"] = INVALID_EMAIL

    if len(password.strip()) < MIN_PASSWORD_LENGTH:
        errors["password"] = PASSWORD_TOO_SHORT

    if errors:
        return {"errors": errors}

    # bcrypt is slow; keep it off the event loop
    hashed_password = await asyncio.to_thread(hash_password, password)
    try:
        user_id = await get_db().create_user(email, hashed_password)
    except EmailTakenError:
        return {"errors": {"email": EMAIL_TAKEN}}

    logger.info(f"New user signed up: {user_id}")
    await create_auth_session(get_session_manager(), user_id)
    return Redirect(settings.authenticated_redirect)


async def login(form_state: Optional[FormState], form_data: Mapping[str, Any]) -> ActionResult:
    """Log in with email and password."""
    email = _field(form_data, "email")
    password = _field(form_data, "password")

    # Same message for unknown email and wrong password
    existing_user = await get_db().get_user_by_email(email)
    if not existing_user:
        return {"errors": {"email": INVALID_CREDENTIALS}}

    if not await asyncio.to_thread(verify_password, password, existing_user.password_hash):
        logger.info(f"Failed login for user {existing_user.id}")
        return {"errors": {"email": INVALID_CREDENTIALS}}

    await create_auth_session(get_session_manager(), existing_user.id)
    return Redirect(settings.authenticated_redirect)


async def auth(mode: str, form_state: Optional[FormState], form_data: Mapping[str, Any]) -> ActionResult:
    """Dispatch to login or signup."""
    if mode == "login":
        return await login(form_state, form_data)
    return await signup(form_state, form_data)


async def logout() -> Redirect:
    """End the current session and go back to the landing page."""
    await destroy_session(get_session_manager())
    return Redirect(settings.landing_redirect)
