"""Session token encoding and decoding."""
import uuid
from datetime import timedelta
from types import SimpleNamespace

from jose import jwt

from config import settings
from models.users import Role
from utils.tokenJWT import (
    create_access_token,
    create_session_token,
    decode_session_token,
    signin_url,
)


def _user(role=Role.EDITOR):
    return SimpleNamespace(id=uuid.uuid4(), username="jane", name="Jane Doe", role=role)


def test_round_trip_carries_identity():
    user = _user()
    session = decode_session_token(create_session_token(user))

    assert session.id == user.id
    assert session.username == "jane"
    assert session.name == "Jane Doe"
    assert session.role is Role.EDITOR


def test_unknown_role_decodes_to_none():
    token = create_access_token({"sub": str(uuid.uuid4()), "username": "x", "role": "GOD_MODE"})
    session = decode_session_token(token)

    assert session is not None
    assert session.role is None


def test_expired_token_is_anonymous():
    token = create_session_token(_user(), expires_delta=timedelta(minutes=-5))
    assert decode_session_token(token) is None


def test_foreign_signature_is_anonymous():
    token = jwt.encode({"sub": str(uuid.uuid4()), "username": "x"}, "other-key", algorithm=settings.ALGORITHM)
    assert decode_session_token(token) is None


def test_missing_claims_are_anonymous():
    assert decode_session_token(create_access_token({"username": "x"})) is None
    assert decode_session_token(None) is None
    assert decode_session_token("garbage") is None


def test_signin_url_encodes_callback():
    assert signin_url() == "/auth/signin"
    assert signin_url("http://testserver/dashboard?x=1") == (
        "/auth/signin?callbackUrl=http%3A%2F%2Ftestserver%2Fdashboard%3Fx%3D1"
    )
