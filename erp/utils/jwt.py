# erp/utils/jwt.py
from datetime import datetime, timedelta, timezone
from typing import Tuple

from jose import jwt, JWTError

from erp.core.config import settings
from erp.core.errors import Unauthorized


def _create_token(*, subject: str, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,  # user id
        "typ": token_type,  # access / refresh
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def create_access_refresh(subject: str) -> Tuple[str, str]:
    access_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    refresh_delta = timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)
    access_token = _create_token(subject=subject, token_type="access", expires_delta=access_delta)
    refresh_token = _create_token(subject=subject, token_type="refresh", expires_delta=refresh_delta)
    return access_token, refresh_token


def decode_token(raw_token: str, *, expected_type: str = "access") -> dict:
    try:
        payload = jwt.decode(raw_token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise Unauthorized("Invalid access token")
    if payload.get("typ") != expected_type:
        raise Unauthorized("Invalid token type")
    return payload
