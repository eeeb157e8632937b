# backend/routes/auth.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from schemas import user as schemas
from schemas.common import MessageResponse
from utils.hashing import verify_password
from utils.tokenJWT import create_session_token, read_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    """Active user matching the credentials, or None."""
    db_user = db.query(User).filter(User.username == username.strip()).first()
    if not db_user or not db_user.is_active or not verify_password(password, db_user.password_hash):
        return None
    return db_user


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


# Authenticate user and issue a session token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, response: Response, request: Request, db: Session = Depends(get_db)):
    db_user = authenticate(db, payload.username, payload.password)
    if db_user is None:
        client = request.client.host if request.client else None
        logger.warning("Failed sign-in for %r from %s", payload.username, client)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_session_token(db_user)
    set_session_cookie(response, access_token)
    logger.info("User %s signed in", db_user.username)

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": {"id": db_user.id, "username": db_user.username, "name": db_user.name, "role": db_user.role},
    }


@router.api_route("/signout", methods=["GET", "POST"], response_model=MessageResponse)
def signout(response: Response):
    clear_session_cookie(response)
    return {"message": "Signed out"}


# Current session, or null when anonymous
@router.get("/session", response_model=Optional[schemas.SessionUser])
def session(request: Request):
    return read_session(request)
