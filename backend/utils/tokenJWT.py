# utils/tokenJWT.py
import logging
from datetime import timedelta
from typing import Optional
from urllib.parse import urlencode

from fastapi import Depends, HTTPException, Request, status
from jose import jwt, JWTError
from pydantic import ValidationError

from config import settings
from models.users import Role
from schemas.user import SessionUser
from utils.permissions import can_perform
from utils.time_utils import utcnow

logger = logging.getLogger(__name__)

SIGNIN_PATH = "/auth/signin"
DASHBOARD_PATH = "/dashboard"


class PageRedirect(Exception):
    """Raised by page guards; the app turns it into a 302 to `location`."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_session_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Sign {id, username, name, role} for a user row."""
    role = user.role.value if isinstance(user.role, Role) else user.role
    return create_access_token(
        {"sub": str(user.id), "username": user.username, "name": user.name, "role": role},
        expires_delta,
    )


def decode_session_token(token: Optional[str]) -> Optional[SessionUser]:
    """Verify signature and expiry; None means anonymous."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    user_id = payload.get("sub")
    username = payload.get("username")
    if user_id is None or username is None:
        return None
    try:
        return SessionUser(
            id=user_id,
            username=username,
            name=payload.get("name"),
            # Unrecognized roles decode to None and carry no permissions
            role=Role.parse(payload.get("role")),
        )
    except ValidationError:
        return None


def extract_token(request: Request) -> Optional[str]:
    """Bearer header wins over the session cookie."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def read_session(request: Request) -> Optional[SessionUser]:
    return decode_session_token(extract_token(request))


def signin_url(callback_url: Optional[str] = None) -> str:
    if not callback_url:
        return SIGNIN_PATH
    return f"{SIGNIN_PATH}?{urlencode({'callbackUrl': callback_url})}"


# ---- API guards ----

# Retrieve the currently authenticated user from the request.
# Re-validates the token even though the route gate already ran.
def get_current_user(request: Request) -> SessionUser:
    user = read_session(request)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


# Dependency factory gating a write on the permission policy
def permission_required(action: str):
    def _checker(current_user: SessionUser = Depends(get_current_user)) -> SessionUser:
        if not can_perform(current_user.role, action):
            logger.info("Denied %s to %s (role=%s)", action, current_user.username, current_user.role)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return current_user
    return _checker


# ---- Page guards ----

def require_page_user(request: Request) -> SessionUser:
    user = read_session(request)
    if user is None:
        raise PageRedirect(signin_url())
    return user


def page_role_required(*allowed_roles: Role, fallback: str = DASHBOARD_PATH):
    def _checker(current_user: SessionUser = Depends(require_page_user)) -> SessionUser:
        if current_user.role not in allowed_roles:
            raise PageRedirect(fallback)
        return current_user
    return _checker
