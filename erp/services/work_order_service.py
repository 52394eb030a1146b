# erp/services/work_order_service.py
from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from erp.core.errors import BadRequest, NotFound
from erp.core.permissions import PERMISSIONS as P
from erp.models.approval import ApprovalStatus
from erp.models.masters import Site, Vendor
from erp.models.work_order import WorkOrder, WorkOrderDetail, WorkOrderStatus, WorkOrderType
from erp.schemas.work_order import WorkOrderCreate, WorkOrderUpdate
from erp.services.amount_words import amount_in_words
from erp.services.approval_workflow import ApprovalAction
from erp.services.audit_logger import log_audit, plain_values, snapshot
from erp.services.doc_numbers import next_work_order_no
from erp.services import document_workflow as wf
from erp.utils.timezone import local_now, local_today

logger = logging.getLogger(__name__)

WORK_ORDER = wf.DocumentKind(
    label="work order",
    model=WorkOrder,
    item_model=WorkOrderDetail,
    number_attr="work_order_no",
    action_perms={
        ApprovalAction.APPROVE1: P.APPROVE_WORK_ORDERS_L1,
        ApprovalAction.APPROVE2: P.APPROVE_WORK_ORDERS_L2,
        ApprovalAction.COMPLETE: P.COMPLETE_WORK_ORDERS,
        ApprovalAction.SUSPEND: P.SUSPEND_WORK_ORDERS,
        ApprovalAction.UNSUSPEND: P.SUSPEND_WORK_ORDERS,
    },
)

SORTABLE = {
    "workOrderNo": "work_order_no",
    "workOrderDate": "work_order_date",
    "deliveryDate": "delivery_date",
    "amount": "amount",
    "approvalStatus": "approval_status",
    "createdAt": "created_at",
}

_REQUIRED = (
    "work_order_date", "site_id", "vendor_id", "type",
    "amount", "total_cgst_amount", "total_sgst_amount", "total_igst_amount",
)


def _load_options():
    return (
        selectinload(WorkOrder.site),
        selectinload(WorkOrder.vendor),
        selectinload(WorkOrder.billing_address),
        selectinload(WorkOrder.site_delivery_address),
        selectinload(WorkOrder.payment_term),
        selectinload(WorkOrder.items).selectinload(WorkOrderDetail.item),
        selectinload(WorkOrder.approved1_by),
        selectinload(WorkOrder.approved2_by),
        selectinload(WorkOrder.completed_by),
        selectinload(WorkOrder.suspended_by),
        selectinload(WorkOrder.created_by),
        selectinload(WorkOrder.updated_by),
    )


def get_work_order(db: Session, work_order_id: int) -> WorkOrder:
    wo = db.query(WorkOrder).options(*_load_options()).filter(WorkOrder.id == work_order_id).first()
    if not wo:
        raise NotFound("Work order not found")
    return wo


def list_work_orders(
    db: Session,
    *,
    page: int,
    per_page: int,
    search: Optional[str] = None,
    site_id: Optional[int] = None,
    vendor_id: Optional[int] = None,
    approval_status: Optional[ApprovalStatus] = None,
    sort: Optional[str] = None,
    order: str = "desc",
) -> Tuple[List[WorkOrder], int]:
    q = db.query(WorkOrder).options(
        selectinload(WorkOrder.site),
        selectinload(WorkOrder.vendor),
        selectinload(WorkOrder.created_by),
        selectinload(WorkOrder.approved1_by),
        selectinload(WorkOrder.approved2_by),
    )
    if search:
        like = f"%{search.strip()}%"
        q = (
            q.outerjoin(Site, WorkOrder.site_id == Site.id)
            .outerjoin(Vendor, WorkOrder.vendor_id == Vendor.id)
            .filter(or_(
                WorkOrder.work_order_no.ilike(like),
                Site.site.ilike(like),
                Vendor.vendor_name.ilike(like),
            ))
        )
    if site_id:
        q = q.filter(WorkOrder.site_id == site_id)
    if vendor_id:
        q = q.filter(WorkOrder.vendor_id == vendor_id)
    if approval_status:
        q = q.filter(WorkOrder.approval_status == approval_status)

    total = q.count()
    col = wf.sort_column(WorkOrder, sort, SORTABLE, "workOrderDate")
    q = q.order_by(col.asc() if order == "asc" else col.desc(), WorkOrder.id.desc())
    rows = q.offset((page - 1) * per_page).limit(per_page).all()
    return rows, total


def create_work_order(db: Session, payload: WorkOrderCreate, user: Any) -> WorkOrder:
    data = payload.model_dump(exclude={"work_order_items"}, exclude_none=True)
    items = [it.model_dump(exclude={"id"}) for it in payload.work_order_items]
    wf.validate_order_refs(db, data, items)

    data.setdefault("type", WorkOrderType.SUB_CONTRACT)
    data.setdefault("wo_status", WorkOrderStatus.HOLD)
    data["work_order_date"] = data.get("work_order_date") or local_today()
    data.setdefault("amount", 0)

    wo = WorkOrder(
        **data,
        work_order_no=next_work_order_no(db),
        amount_in_words=amount_in_words(data["amount"]),
        approval_status=ApprovalStatus.DRAFT,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    wo.items = wf.build_items(WORK_ORDER, items)
    db.add(wo)
    wf.flush_new(db, WORK_ORDER)

    log_audit(db, user_id=user.id, action="CREATE", table_name=WORK_ORDER.table_name, record_id=wo.id,
              new_values={"work_order_no": wo.work_order_no, "vendor_id": wo.vendor_id,
                          "amount": float(wo.amount or 0), "items": len(items)})
    logger.info("work order %s (%s) created by user %s", wo.id, wo.work_order_no, user.id)
    return wo


def update_work_order(db: Session, work_order_id: int, payload: WorkOrderUpdate, user: Any) -> WorkOrder:
    data = payload.model_dump(exclude_unset=True)
    action: Optional[ApprovalAction] = data.pop("status_action", None)
    items: Optional[List[dict]] = data.pop("work_order_items", None)
    version = data.pop("version", None)
    for key in _REQUIRED:
        if key in data and data[key] is None:
            data.pop(key)

    if not data and action is None and items is None:
        raise BadRequest("No valid fields to update")

    if action is not None:
        wf.authorize_status_action(user, WORK_ORDER, action)

    wo = wf.lock_document(db, WORK_ORDER, work_order_id)
    wf.check_version(WORK_ORDER, wo, version)
    wf.validate_order_refs(db, data, items)

    before = snapshot(wo, wf.APPROVAL_FIELDS)
    if data.get("amount") is not None:
        data["amount_in_words"] = amount_in_words(data["amount"])
    old_header = wf.apply_header(wo, data)

    if action is not None:
        wf.apply_status_action(WORK_ORDER, wo, action, actor_id=user.id, now=local_now())

    if items:
        wf.reconcile_items(wo, WORK_ORDER, items)

    wo.updated_by_id = user.id
    wo.updated_at = local_now()
    db.flush()

    log_audit(
        db,
        user_id=user.id,
        action="STATUS" if action is not None else "UPDATE",
        table_name=WORK_ORDER.table_name,
        record_id=wo.id,
        old_values={**before, **plain_values(old_header)},
        new_values={**snapshot(wo, wf.APPROVAL_FIELDS), "status_action": action.value if action else None},
    )
    return wo


def delete_work_order(db: Session, work_order_id: int, user: Any) -> None:
    wf.delete_document(db, WORK_ORDER, work_order_id, user_id=user.id)
