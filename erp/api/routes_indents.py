# FILE: erp/api/routes_indents.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from erp.api.deps import current_user, get_db
from erp.models.approval import ApprovalStatus
from erp.models.user import User
from erp.schemas.indent import IndentCreate, IndentListRow, IndentOut, IndentUpdate
from erp.services import document_workflow as wf
from erp.services.indent_service import (
    INDENT, create_indent, delete_indent, get_indent, list_indents, update_indent,
)
from erp.utils.resp import ok, paged

router = APIRouter(prefix="/indents", tags=["Indents"])


def _out(ind, user: User, schema=IndentOut) -> dict:
    out = schema.model_validate(ind)
    out.available_actions = wf.actions_for(user, INDENT, ind.approval_status)
    return out.model_dump(by_alias=True)


@router.get("")
def list_indents_api(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, alias="perPage", ge=1),
    search: Optional[str] = None,
    site: Optional[int] = None,
    approval_status: Optional[ApprovalStatus] = Query(None, alias="approvalStatus"),
    sort: Optional[str] = None,
    order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    page, per_page = wf.clamp_paging(page, per_page)
    rows, total = list_indents(db, page=page, per_page=per_page, search=search, site_id=site,
                               approval_status=approval_status, sort=sort, order=order)
    return paged([_out(r, user, IndentListRow) for r in rows], page=page, per_page=per_page, total=total)


@router.get("/{indent_id}")
def get_indent_api(indent_id: int, db: Session = Depends(get_db), user: User = Depends(current_user)):
    return ok(_out(get_indent(db, indent_id), user))


@router.post("")
def create_indent_api(payload: IndentCreate, db: Session = Depends(get_db), user: User = Depends(current_user)):
    with db.begin():
        ind = create_indent(db, payload, user)
    return ok(_out(get_indent(db, ind.id), user), status_code=201)


@router.patch("/{indent_id}")
def update_indent_api(indent_id: int, payload: IndentUpdate, db: Session = Depends(get_db),
                      user: User = Depends(current_user)):
    with db.begin():
        update_indent(db, indent_id, payload, user)
    return ok(_out(get_indent(db, indent_id), user))


@router.delete("/{indent_id}")
def delete_indent_api(indent_id: int, db: Session = Depends(get_db), user: User = Depends(current_user)):
    with db.begin():
        delete_indent(db, indent_id, user)
    return ok({"message": "Indent deleted"})
