# erp/services/indent_service.py
from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from erp.core.errors import BadRequest, NotFound
from erp.core.permissions import PERMISSIONS as P
from erp.models.approval import ApprovalStatus
from erp.models.indent import Indent, IndentItem
from erp.models.masters import Item, Site, Unit
from erp.schemas.indent import IndentCreate, IndentUpdate
from erp.services.approval_workflow import ApprovalAction
from erp.services.audit_logger import log_audit, plain_values, snapshot
from erp.services.doc_numbers import next_indent_no
from erp.services import document_workflow as wf
from erp.utils.timezone import local_now, local_today

logger = logging.getLogger(__name__)

INDENT = wf.DocumentKind(
    label="indent",
    model=Indent,
    item_model=IndentItem,
    number_attr="indent_no",
    action_perms={
        ApprovalAction.APPROVE1: P.APPROVE_INDENTS_L1,
        ApprovalAction.APPROVE2: P.APPROVE_INDENTS_L2,
        ApprovalAction.COMPLETE: P.COMPLETE_INDENTS,
        ApprovalAction.SUSPEND: P.SUSPEND_INDENTS,
        ApprovalAction.UNSUSPEND: P.SUSPEND_INDENTS,
    },
)

SORTABLE = {
    "indentNo": "indent_no",
    "indentDate": "indent_date",
    "deliveryDate": "delivery_date",
    "approvalStatus": "approval_status",
    "createdAt": "created_at",
}

# header columns that cannot be cleared with an explicit null
_REQUIRED = ("indent_date", "site_id")


def _load_options():
    return (
        selectinload(Indent.site),
        selectinload(Indent.items).selectinload(IndentItem.item),
        selectinload(Indent.items).selectinload(IndentItem.unit),
        selectinload(Indent.approved1_by),
        selectinload(Indent.approved2_by),
        selectinload(Indent.completed_by),
        selectinload(Indent.suspended_by),
        selectinload(Indent.created_by),
        selectinload(Indent.updated_by),
    )


def get_indent(db: Session, indent_id: int) -> Indent:
    ind = db.query(Indent).options(*_load_options()).filter(Indent.id == indent_id).first()
    if not ind:
        raise NotFound("Indent not found")
    return ind


def list_indents(
    db: Session,
    *,
    page: int,
    per_page: int,
    search: Optional[str] = None,
    site_id: Optional[int] = None,
    approval_status: Optional[ApprovalStatus] = None,
    sort: Optional[str] = None,
    order: str = "desc",
) -> Tuple[List[Indent], int]:
    q = db.query(Indent).options(
        selectinload(Indent.site),
        selectinload(Indent.created_by),
        selectinload(Indent.approved1_by),
        selectinload(Indent.approved2_by),
    )
    if search:
        like = f"%{search.strip()}%"
        q = q.outerjoin(Site, Indent.site_id == Site.id).filter(
            or_(Indent.indent_no.ilike(like), Indent.remarks.ilike(like), Site.site.ilike(like)))
    if site_id:
        q = q.filter(Indent.site_id == site_id)
    if approval_status:
        q = q.filter(Indent.approval_status == approval_status)

    total = q.count()
    col = wf.sort_column(Indent, sort, SORTABLE, "indentDate")
    q = q.order_by(col.asc() if order == "asc" else col.desc(), Indent.id.desc())
    rows = q.offset((page - 1) * per_page).limit(per_page).all()
    return rows, total


def _validate_refs(db: Session, *, site_id: Optional[int] = None, items: Optional[List[dict]] = None) -> None:
    wf.ensure_exists(db, Site, site_id, "site")
    for it in items or []:
        wf.ensure_exists(db, Item, it.get("item_id"), "item")
        wf.ensure_exists(db, Unit, it.get("unit_id"), "unit")


def create_indent(db: Session, payload: IndentCreate, user: Any) -> Indent:
    items = [it.model_dump(exclude={"id"}) for it in payload.indent_items]
    _validate_refs(db, site_id=payload.site_id, items=items)

    ind = Indent(
        indent_no=next_indent_no(db),
        indent_date=payload.indent_date or local_today(),
        delivery_date=payload.delivery_date,
        site_id=payload.site_id,
        remarks=payload.remarks,
        approval_status=ApprovalStatus.DRAFT,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    ind.items = wf.build_items(INDENT, items)
    db.add(ind)
    wf.flush_new(db, INDENT)

    log_audit(db, user_id=user.id, action="CREATE", table_name=INDENT.table_name, record_id=ind.id,
              new_values={"indent_no": ind.indent_no, "site_id": ind.site_id, "items": len(items)})
    logger.info("indent %s (%s) created by user %s", ind.id, ind.indent_no, user.id)
    return ind


def update_indent(db: Session, indent_id: int, payload: IndentUpdate, user: Any) -> Indent:
    data = payload.model_dump(exclude_unset=True)
    action: Optional[ApprovalAction] = data.pop("status_action", None)
    items: Optional[List[dict]] = data.pop("indent_items", None)
    version = data.pop("version", None)
    for key in _REQUIRED:
        if key in data and data[key] is None:
            data.pop(key)

    if not data and action is None and items is None:
        raise BadRequest("No valid fields to update")

    if action is not None:
        wf.authorize_status_action(user, INDENT, action)

    ind = wf.lock_document(db, INDENT, indent_id)
    wf.check_version(INDENT, ind, version)
    _validate_refs(db, site_id=data.get("site_id"), items=items)

    before = snapshot(ind, wf.APPROVAL_FIELDS)
    old_header = wf.apply_header(ind, data)

    if action is not None:
        wf.apply_status_action(INDENT, ind, action, actor_id=user.id, now=local_now())

        # approving with edited items means approving their quantities too
        if action != ApprovalAction.SUSPEND and items is not None:
            if any(it.get("approved_qty") is None for it in items):
                raise BadRequest("Approved quantity is required for all items")

    if items:
        wf.reconcile_items(ind, INDENT, items)

    ind.updated_by_id = user.id
    ind.updated_at = local_now()
    db.flush()

    log_audit(
        db,
        user_id=user.id,
        action="STATUS" if action is not None else "UPDATE",
        table_name=INDENT.table_name,
        record_id=ind.id,
        old_values={**before, **plain_values(old_header)},
        new_values={**snapshot(ind, wf.APPROVAL_FIELDS), "status_action": action.value if action else None},
    )
    return ind


def delete_indent(db: Session, indent_id: int, user: Any) -> None:
    wf.delete_document(db, INDENT, indent_id, user_id=user.id)
