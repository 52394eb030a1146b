# erp/core/rbac.py
"""
Permission checks against a loaded User (roles -> permissions plus direct grants).

Admins pass every permission check while ADMIN_ALL_ACCESS is on. Rules that are
not permission checks (purchase order separation of duties) still apply to them.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional, Set

from erp.core.config import settings
from erp.core.errors import Forbidden


def _code(p: Any) -> str:
    # Permission row or a bare code string
    value = getattr(p, "code", p)
    return str(value or "").strip()


def is_admin_user(user: Any) -> bool:
    if not user or not settings.ADMIN_ALL_ACCESS:
        return False
    return bool(getattr(user, "is_admin", False))


def role_names(user: Any) -> Set[str]:
    return {str(r.name) for r in (getattr(user, "roles", None) or []) if getattr(r, "name", None)}


def iter_user_perm_codes(user: Any) -> Set[str]:
    """Direct grants plus everything granted through the user's roles."""
    if not user:
        return set()
    granted = list(getattr(user, "permissions", None) or [])
    for role in getattr(user, "roles", None) or []:
        granted.extend(getattr(role, "permissions", None) or [])
    return {c for c in map(_code, granted) if c}


def has_perm(user: Any, code: Any) -> bool:
    if is_admin_user(user):
        return True
    wanted = _code(code)
    return bool(wanted) and wanted in iter_user_perm_codes(user)


def missing_perms(user: Any, required: Iterable[Any]) -> Set[str]:
    if is_admin_user(user):
        return set()
    wanted = {c for c in map(_code, required) if c}
    return wanted - iter_user_perm_codes(user)


def require_all(user: Any, required: Iterable[Any], *, message: Optional[str] = None) -> None:
    """
    Raise 403 unless the user holds every permission in 'required'.
    """
    missing = missing_perms(user, required)
    if missing:
        raise Forbidden(message or "You do not have permission to perform this action.",
                        details={"missing": sorted(missing)})
