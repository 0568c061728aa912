"""
Password hashing with bcrypt.
"""

from passlib.hash import bcrypt


def hash_password(password: str) -> str:
    """Hash a plain text password."""
    return bcrypt.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plain text password against a stored hash.

    Malformed hashes count as a mismatch.
    """
    try:
        return bcrypt.verify(password, password_hash)
    except ValueError:
        return False
