# FILE: erp/api/routes_auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from erp.api.deps import current_user, get_db, load_user
from erp.core.errors import Forbidden, Unauthorized
from erp.core.rbac import is_admin_user, iter_user_perm_codes, role_names
from erp.core.permissions import all_permission_codes
from erp.core.security import verify_password
from erp.models.user import User
from erp.schemas.auth import LoginIn, MeOut, RefreshIn, TokenOut
from erp.utils.jwt import create_access_refresh, decode_token
from erp.utils.resp import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _tokens(user: User) -> dict:
    access, refresh = create_access_refresh(str(user.id))
    return TokenOut(access_token=access, refresh_token=refresh).model_dump(by_alias=True)


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("failed login for %s", payload.email)
        raise Unauthorized("Invalid credentials")
    if not user.is_active:
        raise Forbidden("User is inactive")
    return ok(_tokens(user))


@router.post("/refresh")
def refresh_token(payload: RefreshIn, db: Session = Depends(get_db)):
    claims = decode_token(payload.refresh_token, expected_type="refresh")
    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise Unauthorized("Invalid refresh payload")
    user = load_user(db, user_id)
    if not user:
        raise Unauthorized("User not found")
    if not user.is_active:
        raise Forbidden("User is inactive")
    return ok(_tokens(user))


@router.get("/me")
def me(user: User = Depends(current_user)):
    perms = all_permission_codes() if is_admin_user(user) else iter_user_perm_codes(user)
    out = MeOut(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=bool(user.is_admin),
        roles=sorted(role_names(user)),
        permissions=sorted(perms),
    )
    return ok(out.model_dump(by_alias=True))
