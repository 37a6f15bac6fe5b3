from datetime import datetime, timedelta, timezone
from typing import List, Optional
import jwt
from app.core.config import settings
from app.schemas.user import AuthenticatedUser


def create_access_token(user_id: str, organizations: Optional[List[str]] = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "user_id": user_id,
        "organizations": organizations or [],
        "exp": expire
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)
    return token


def decode_token(token: str) -> Optional[AuthenticatedUser]:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        user_id: str = payload.get("user_id")
        if user_id is None:
            return None
        return AuthenticatedUser(user_id=user_id, organizations=payload.get("organizations") or [])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
