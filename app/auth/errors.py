"""
Authentication errors.
"""


class AuthError(Exception):
    """Base authentication error."""
    pass


class NoResponseContext(AuthError):
    """Cookies were accessed outside of a request/response cycle."""
    pass


class CookieWriteError(AuthError):
    """The current cookie jar does not accept writes."""
    pass
