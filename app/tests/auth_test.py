from datetime import datetime, timedelta, timezone
import jwt
from app.core.authentication.auth_token import create_access_token, decode_token
from app.core.config import settings


def test_token_creation_and_validation():
    token = create_access_token("test_user_id", ["org-1", "org-2"])
    assert isinstance(token, str)

    user = decode_token(token)
    assert user.user_id == "test_user_id"
    assert user.organizations == ["org-1", "org-2"]


def test_token_without_organizations():
    user = decode_token(create_access_token("test_user_id"))

    assert user.user_id == "test_user_id"
    assert user.organizations == []


def test_invalid_token():
    assert decode_token("invalid.token.here") is None


def test_expired_token():
    payload = {
        "user_id": "test_user_id",
        "exp": datetime.now(timezone.utc) - timedelta(minutes=1)
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)

    assert decode_token(token) is None


def test_token_signed_with_other_key():
    payload = {
        "user_id": "test_user_id",
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5)
    }
    token = jwt.encode(payload, "some-other-secret-key-of-sufficient-length", algorithm=settings.algorithm)

    assert decode_token(token) is None


def test_token_without_user_id():
    payload = {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)

    assert decode_token(token) is None
