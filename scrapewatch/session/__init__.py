"""Session Gate - sign-in flag checks for the dashboard routes.

The gate has two states, anonymous and authenticated. Signing in with the
configured credential pair sets the `isAuthenticated` cookie; signing out
clears it. The flag is checked twice: by `SessionGateMiddleware` before a
route runs, and by the dashboard view itself.

Note: this is a single hardcoded credential pair and a client-held flag. It
keeps casual visitors out of the dashboard; it is not an authentication
scheme.

Example:
    >>> gate = SessionGate(Credentials("admin@dashboard.com", "secret"))
    >>> gate.sign_in("admin@dashboard.com", "secret")
    True
    >>> resolve_redirect("/dashboard", SessionState.ANONYMOUS)
    '/sign-in'
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

SESSION_COOKIE = "isAuthenticated"
SESSION_VALUE = "true"

SIGN_IN_PATH = "/sign-in"
SIGN_UP_PATH = "/sign-up"
FORGOT_PASSWORD_PATH = "/forgot-password"
DASHBOARD_PATH = "/dashboard"

PUBLIC_PATHS = frozenset({SIGN_IN_PATH, SIGN_UP_PATH, FORGOT_PASSWORD_PATH})
UNGUARDED_PREFIXES = ("/api", "/static", "/favicon.ico")


class SessionState(Enum):
    """Session gate states."""
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionRequired(Exception):
    """Raised by a view reached without the session flag."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Session required for {path}")


@dataclass(frozen=True)
class Credentials:
    """The one accepted email/password pair."""
    email: str
    password: str

    def matches(self, email: str, password: str) -> bool:
        """Exact comparison of both fields."""
        email_ok = hmac.compare_digest(email.encode("utf-8"), self.email.encode("utf-8"))
        password_ok = hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        return email_ok and password_ok

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


def state_from_cookies(cookies: Mapping[str, str]) -> SessionState:
    """Read the session flag from request cookies."""
    if cookies.get(SESSION_COOKIE) == SESSION_VALUE:
        return SessionState.AUTHENTICATED
    return SessionState.ANONYMOUS


def is_guarded(path: str) -> bool:
    """Whether the routing layer inspects requests for `path`."""
    return not path.startswith(UNGUARDED_PREFIXES)


def resolve_redirect(path: str, state: SessionState) -> str | None:
    """Decide where a request for `path` must go instead, if anywhere.

    Args:
        path: Request path
        state: Session state of the requester

    Returns:
        Target path, or None when the request may proceed
    """
    if not is_guarded(path):
        return None

    is_public = path in PUBLIC_PATHS
    if not is_public and state is SessionState.ANONYMOUS:
        return SIGN_IN_PATH
    if is_public and state is SessionState.AUTHENTICATED and path != FORGOT_PASSWORD_PATH:
        return DASHBOARD_PATH
    return None


def redirect(path: str) -> RedirectResponse:
    """See-other redirect, so form posts land on a GET."""
    return RedirectResponse(path, status_code=303)


class SessionGate:
    """Sign-in check and session flag persistence.

    Attributes:
        credentials: The accepted credential pair
    """

    def __init__(self, credentials: Credentials) -> None:
        self.credentials = credentials

    def state(self, cookies: Mapping[str, str]) -> SessionState:
        """Session state carried by a request's cookies."""
        return state_from_cookies(cookies)

    def is_authenticated(self, cookies: Mapping[str, str]) -> bool:
        return self.state(cookies) is SessionState.AUTHENTICATED

    def sign_in(self, email: str, password: str) -> bool:
        """Check a submitted pair. True moves the session to authenticated."""
        return self.credentials.matches(email, password)

    def grant(self, response: Response) -> Response:
        """Persist the session flag on a response."""
        response.set_cookie(SESSION_COOKIE, SESSION_VALUE, path="/", samesite="lax")
        return response

    def revoke(self, response: Response) -> Response:
        """Expire the session flag on a response."""
        response.delete_cookie(SESSION_COOKIE, path="/")
        return response

    def require(self, request: Request) -> None:
        """View-level check.

        Raises:
            SessionRequired: If the request carries no session flag
        """
        if not self.is_authenticated(request.cookies):
            raise SessionRequired(request.url.path)


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Routing-layer check run before every guarded route."""

    def __init__(self, app: ASGIApp, enabled: bool = True) -> None:
        super().__init__(app)
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self.enabled:
            target = resolve_redirect(request.url.path, state_from_cookies(request.cookies))
            if target is not None:
                return redirect(target)
        return await call_next(request)


__all__ = [
    "Credentials",
    "DASHBOARD_PATH",
    "FORGOT_PASSWORD_PATH",
    "PUBLIC_PATHS",
    "SESSION_COOKIE",
    "SIGN_IN_PATH",
    "SIGN_UP_PATH",
    "SessionGate",
    "SessionGateMiddleware",
    "SessionRequired",
    "SessionState",
    "is_guarded",
    "redirect",
    "resolve_redirect",
    "state_from_cookies",
]
