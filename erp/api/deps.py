# erp/api/deps.py
from __future__ import annotations

from typing import Generator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session, joinedload

from erp.core.access_policy import relative_api_path, resolve_access
from erp.core.config import settings
from erp.core.errors import Forbidden, Unauthorized
from erp.core.rbac import require_all
from erp.db.session import SessionLocal
from erp.models.role import Role
from erp.models.user import User
from erp.utils.jwt import decode_token


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =========================================================
# AUTH HELPERS
# =========================================================
def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def load_user(db: Session, user_id: int) -> Optional[User]:
    return (
        db.query(User)
        .options(
            joinedload(User.roles).joinedload(Role.permissions),
            joinedload(User.permissions),
        )
        .filter(User.id == user_id)
        .first()
    )


def current_user(authorization: Optional[str] = Header(None)) -> User:
    """
    Resolve the bearer token to a User with roles and permissions loaded.
    Uses its own short-lived session so the request session stays free
    for the route's `with db.begin():` block.
    """
    raw = _extract_bearer(authorization)
    if not raw:
        raise Unauthorized("Missing token")

    payload = decode_token(raw, expected_type="access")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token payload")

    db = SessionLocal()
    try:
        user = load_user(db, user_id)
        if not user:
            raise Unauthorized("User not found")
        if not user.is_active:
            raise Forbidden("User is inactive")
        return user
    finally:
        db.close()


def guard_api_access(request: Request, user: User = Depends(current_user)) -> User:
    """Router-level gate: permissions from the access table, before any handler code runs."""
    path = relative_api_path(request.url.path, settings.API_V1_STR)
    required = resolve_access(path, request.method)
    require_all(user, required)
    return user
