"""
Request-scoped cookie access.

Each HTTP request gets one CookieJar holding the incoming cookies and the
Set-Cookie writes made while handling it. The jar is bound to a context
variable by ``cookie_middleware`` so auth code can reach it with
``cookies()`` without threading the request/response pair through every call.
Writes are copied onto the outgoing response once the handler returns.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional

from fastapi import Request, Response

from .errors import CookieWriteError, NoResponseContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CookieAttributes:
    """Attributes sent with a Set-Cookie header."""
    secure: bool = False
    http_only: bool = True
    same_site: str = "strict"
    path: str = "/"
    max_age: Optional[int] = None  # None = browser-session cookie


@dataclass(frozen=True)
class SessionCookie:
    """A cookie to be written to the response."""
    name: str
    value: str
    attributes: CookieAttributes

    @property
    def is_blank(self) -> bool:
        """True if this cookie tells the client to delete it."""
        return self.value == "" and self.attributes.max_age == 0

    def apply(self, response: Response) -> None:
        """Write this cookie onto a response."""
        response.set_cookie(
            key=self.name,
            value=self.value,
            max_age=self.attributes.max_age,
            path=self.attributes.path,
            secure=self.attributes.secure,
            httponly=self.attributes.http_only,
            samesite=self.attributes.same_site,
        )


class CookieJar:
    """Cookies of the current request plus pending response writes."""

    def __init__(self, request_cookies: Mapping[str, str], writable: bool = True):
        self._values: Dict[str, str] = dict(request_cookies)
        self._pending: Dict[str, SessionCookie] = {}
        self._writable = writable

    def get(self, name: str) -> Optional[str]:
        """
        Get a cookie value.

        Returns None if the cookie is absent, which is different from
        a cookie that is present with an empty value.
        """
        return self._values.get(name)

    def set(self, cookie: SessionCookie) -> None:
        """
        Queue a cookie for the response.

        Raises:
            CookieWriteError: the jar is read-only or the response is gone
        """
        if not self._writable:
            raise CookieWriteError(
                f"Cannot set cookie '{cookie.name}': response headers are not writable"
            )

        # Later writes to the same name replace earlier ones
        self._pending[cookie.name] = cookie
        if cookie.is_blank:
            self._values.pop(cookie.name, None)
        else:
            self._values[cookie.name] = cookie.value

    @property
    def pending(self) -> List[SessionCookie]:
        return list(self._pending.values())

    def freeze(self) -> None:
        """Refuse further writes."""
        self._writable = False

    def apply(self, response: Response) -> None:
        """Copy all pending writes onto the response."""
        for cookie in self._pending.values():
            cookie.apply(response)


_current_jar: ContextVar[Optional[CookieJar]] = ContextVar("cookie_jar", default=None)


def cookies() -> CookieJar:
    """
    Get the cookie jar of the current request.

    Raises:
        NoResponseContext: called outside of a request
    """
    jar = _current_jar.get()
    if jar is None:
        raise NoResponseContext("Cookies are only available while handling a request")
    return jar


@contextmanager
def bind_cookies(jar: CookieJar) -> Iterator[CookieJar]:
    """Make ``jar`` the current cookie jar for the duration of the block."""
    token = _current_jar.set(jar)
    try:
        yield jar
    finally:
        _current_jar.reset(token)


async def cookie_middleware(request: Request, call_next):
    """HTTP middleware binding a CookieJar to each request."""
    jar = CookieJar(request.cookies)
    with bind_cookies(jar):
        response = await call_next(request)

    jar.freeze()
    if jar.pending:
        logger.debug(f"Writing {len(jar.pending)} cookie(s) for {request.url.path}")
    jar.apply(response)
    return response
