# erp/services/masters_service.py
"""Generic CRUD for master tables (sites, vendors, units, items, ...)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from erp.core.errors import BadRequest, Conflict, NotFound
from erp.services.audit_logger import log_audit, plain_values

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MasterSpec:
    label: str
    model: Any
    search_fields: Sequence[str]
    order_field: str
    # fk attribute -> (model, label) checked on write
    references: Tuple[Tuple[str, Any, str], ...] = ()


def list_rows(
    db: Session,
    m: MasterSpec,
    *,
    page: int,
    per_page: int,
    search: Optional[str] = None,
    filters: Optional[Mapping[str, Any]] = None,
) -> Tuple[List[Any], int]:
    q = db.query(m.model)
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(or_(*[getattr(m.model, f).ilike(like) for f in m.search_fields]))
    for attr, value in (filters or {}).items():
        if value is not None:
            q = q.filter(getattr(m.model, attr) == value)
    total = q.count()
    rows = (
        q.order_by(getattr(m.model, m.order_field).asc(), m.model.id.asc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return rows, total


def get_row(db: Session, m: MasterSpec, row_id: int) -> Any:
    row = db.get(m.model, row_id)
    if not row:
        raise NotFound(f"{m.label} not found")
    return row


def _check_refs(db: Session, m: MasterSpec, data: Mapping[str, Any]) -> None:
    for attr, model, label in m.references:
        value = data.get(attr)
        if value is not None and db.get(model, value) is None:
            raise BadRequest(f"Invalid {label}")


def _flush_unique(db: Session, m: MasterSpec) -> None:
    try:
        db.flush()
    except IntegrityError as e:
        logger.info("%s write rejected: %s", m.label, e.orig)
        raise Conflict(f"{m.label} already exists")


def create_row(db: Session, m: MasterSpec, data: Dict[str, Any], *, user_id: Optional[int]) -> Any:
    _check_refs(db, m, data)
    row = m.model(**data)
    db.add(row)
    _flush_unique(db, m)
    log_audit(db, user_id=user_id, action="CREATE", table_name=m.model.__tablename__, record_id=row.id,
              new_values=plain_values(data))
    return row


def update_row(db: Session, m: MasterSpec, row_id: int, data: Dict[str, Any], *, user_id: Optional[int]) -> Any:
    # explicit null on a NOT NULL column means "leave as is"
    columns = m.model.__table__.columns
    data = {k: v for k, v in data.items() if v is not None or k not in columns or columns[k].nullable}
    if not data:
        raise BadRequest("No valid fields to update")
    row = get_row(db, m, row_id)
    _check_refs(db, m, data)
    old = {k: getattr(row, k) for k in data}
    for k, v in data.items():
        setattr(row, k, v)
    _flush_unique(db, m)
    log_audit(db, user_id=user_id, action="UPDATE", table_name=m.model.__tablename__, record_id=row.id,
              old_values=plain_values(old), new_values=plain_values(data))
    return row


def delete_row(db: Session, m: MasterSpec, row_id: int, *, user_id: Optional[int]) -> None:
    row = get_row(db, m, row_id)
    db.delete(row)
    try:
        db.flush()
    except IntegrityError as e:
        logger.info("%s %s still referenced: %s", m.label, row_id, e.orig)
        raise Conflict(f"{m.label} is in use and cannot be deleted")
    log_audit(db, user_id=user_id, action="DELETE", table_name=m.model.__tablename__, record_id=row_id)
