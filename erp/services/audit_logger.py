from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from erp.models.audit import AuditLog


def _plain(v: Any) -> Any:
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, Decimal):
        return float(v)
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    return v


def snapshot(obj: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """JSON-safe copy of the given attributes, for old_values / new_values."""
    return {f: _plain(getattr(obj, f, None)) for f in fields}


def log_audit(
    db: Session,
    *,
    user_id: Optional[int],
    action: str,  # "CREATE" | "UPDATE" | "STATUS" | "DELETE"
    table_name: str,
    record_id: Any,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    """
    Add one audit event to the caller's transaction.
    It commits or rolls back together with the change it describes.
    """
    db.add(AuditLog(
        user_id=user_id,
        action=action,
        table_name=table_name,
        record_id=str(record_id),
        old_values=old_values,
        new_values=new_values,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:255] or None,
    ))


def plain_values(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _plain(v) for k, v in values.items()}
