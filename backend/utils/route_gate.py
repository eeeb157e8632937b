# backend/utils/route_gate.py
"""Path-based request gate, run before any route handler.

Public pages match exactly, public API routes match by prefix and every
other path requires a session (fail closed). Only the signed token is
inspected here; the database is never touched. Role checks are left to the
per-handler guards.
"""
import re
from enum import Enum
from typing import Optional

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from utils.tokenJWT import read_session, signin_url

PUBLIC_ROUTES = frozenset({"/", "/auth/signin", "/auth/error"})
PUBLIC_API_PREFIXES = ("/api/auth",)

# Static files, image optimisation and images never go through the gate
_EXCLUDED = re.compile(
    r"^/(?:static/|_image|favicon\.ico$)|\.(?:svg|png|jpg|jpeg|gif|webp)$",
    re.IGNORECASE,
)


class PathKind(str, Enum):
    EXCLUDED = "excluded"
    PUBLIC = "public"
    PROTECTED = "protected"


def classify_path(path: str) -> PathKind:
    if _EXCLUDED.search(path):
        return PathKind.EXCLUDED
    if path in PUBLIC_ROUTES:
        return PathKind.PUBLIC
    if any(path == prefix or path.startswith(prefix + "/") for prefix in PUBLIC_API_PREFIXES):
        return PathKind.PUBLIC
    return PathKind.PROTECTED


def gate_request(request: Request) -> Optional[RedirectResponse]:
    """Return a redirect for anonymous requests to protected paths, else None."""
    if classify_path(request.url.path) is not PathKind.PROTECTED:
        return None

    session = read_session(request)
    # Request-scoped view for downstream inspection only; guards re-derive the session themselves
    request.state.session = session
    if session is not None:
        return None
    return RedirectResponse(signin_url(str(request.url)), status_code=302)


class RouteGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = gate_request(request)
        if response is not None:
            return response
        return await call_next(request)
