# erp/services/purchase_order_service.py
"""
Purchase orders follow the common approval workflow plus a few rules of their own:

- separation of duties: the creator approves neither level and the level 1
  approver cannot also approve level 2 (applies to admins too)
- level 2 is granted together with level 1 for small orders
  (amount <= PO_AUTO_APPROVE_L2_LIMIT) or when a project director holding the
  level 2 permission approves; approved2_qty then defaults per line
- remarks and bill status each need their own permission
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from erp.core.config import settings
from erp.core.errors import BadRequest, Forbidden, NotFound
from erp.core.permissions import PERMISSIONS as P, ROLES
from erp.core.rbac import has_perm, require_all, role_names
from erp.models.approval import ApprovalStatus
from erp.models.masters import Site, Vendor
from erp.models.purchase_order import PurchaseOrder, PurchaseOrderDetail, PurchaseOrderStatus
from erp.schemas.purchase_order import PurchaseOrderCreate, PurchaseOrderUpdate
from erp.services.amount_words import amount_in_words
from erp.services.approval_workflow import ApprovalAction
from erp.services.audit_logger import log_audit, plain_values, snapshot
from erp.services.doc_numbers import next_purchase_order_no
from erp.services import document_workflow as wf
from erp.utils.timezone import local_now, local_today

logger = logging.getLogger(__name__)

PURCHASE_ORDER = wf.DocumentKind(
    label="purchase order",
    model=PurchaseOrder,
    item_model=PurchaseOrderDetail,
    number_attr="purchase_order_no",
    action_perms={
        ApprovalAction.APPROVE1: P.APPROVE_PURCHASE_ORDERS_L1,
        ApprovalAction.APPROVE2: P.APPROVE_PURCHASE_ORDERS_L2,
        ApprovalAction.COMPLETE: P.COMPLETE_PURCHASE_ORDERS,
        ApprovalAction.SUSPEND: P.SUSPEND_PURCHASE_ORDERS,
        ApprovalAction.UNSUSPEND: P.SUSPEND_PURCHASE_ORDERS,
    },
)

SORTABLE = {
    "purchaseOrderNo": "purchase_order_no",
    "purchaseOrderDate": "purchase_order_date",
    "deliveryDate": "delivery_date",
    "amount": "amount",
    "approvalStatus": "approval_status",
    "createdAt": "created_at",
}

_REQUIRED = (
    "purchase_order_date", "site_id", "vendor_id",
    "amount", "total_cgst_amount", "total_sgst_amount", "total_igst_amount",
)

# field -> permission needed to change it
_GUARDED_FIELDS = {
    "remarks": (P.UPDATE_PURCHASE_ORDER_REMARKS, "You do not have permission to update remarks"),
    "bill_status": (P.UPDATE_PURCHASE_ORDER_BILL_STATUS, "You do not have permission to update bill status"),
}


def _load_options():
    return (
        selectinload(PurchaseOrder.site),
        selectinload(PurchaseOrder.vendor),
        selectinload(PurchaseOrder.billing_address),
        selectinload(PurchaseOrder.site_delivery_address),
        selectinload(PurchaseOrder.payment_term),
        selectinload(PurchaseOrder.items).selectinload(PurchaseOrderDetail.item),
        selectinload(PurchaseOrder.approved1_by),
        selectinload(PurchaseOrder.approved2_by),
        selectinload(PurchaseOrder.completed_by),
        selectinload(PurchaseOrder.suspended_by),
        selectinload(PurchaseOrder.created_by),
        selectinload(PurchaseOrder.updated_by),
    )


def get_purchase_order(db: Session, purchase_order_id: int) -> PurchaseOrder:
    po = db.query(PurchaseOrder).options(*_load_options()).filter(PurchaseOrder.id == purchase_order_id).first()
    if not po:
        raise NotFound("Purchase order not found")
    return po


def list_purchase_orders(
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
) -> Tuple[List[PurchaseOrder], int]:
    q = db.query(PurchaseOrder).options(
        selectinload(PurchaseOrder.site),
        selectinload(PurchaseOrder.vendor),
        selectinload(PurchaseOrder.created_by),
        selectinload(PurchaseOrder.approved1_by),
        selectinload(PurchaseOrder.approved2_by),
    )
    if search:
        like = f"%{search.strip()}%"
        q = (
            q.outerjoin(Site, PurchaseOrder.site_id == Site.id)
            .outerjoin(Vendor, PurchaseOrder.vendor_id == Vendor.id)
            .filter(or_(
                PurchaseOrder.purchase_order_no.ilike(like),
                Site.site.ilike(like),
                Vendor.vendor_name.ilike(like),
            ))
        )
    if site_id:
        q = q.filter(PurchaseOrder.site_id == site_id)
    if vendor_id:
        q = q.filter(PurchaseOrder.vendor_id == vendor_id)
    if approval_status:
        q = q.filter(PurchaseOrder.approval_status == approval_status)

    total = q.count()
    col = wf.sort_column(PurchaseOrder, sort, SORTABLE, "purchaseOrderDate")
    q = q.order_by(col.asc() if order == "asc" else col.desc(), PurchaseOrder.id.desc())
    rows = q.offset((page - 1) * per_page).limit(per_page).all()
    return rows, total


def create_purchase_order(db: Session, payload: PurchaseOrderCreate, user: Any) -> PurchaseOrder:
    data = payload.model_dump(exclude={"purchase_order_items"}, exclude_none=True)
    items = [it.model_dump(exclude={"id"}) for it in payload.purchase_order_items]
    wf.validate_order_refs(db, data, items)

    data.setdefault("po_status", PurchaseOrderStatus.HOLD)
    data["purchase_order_date"] = data.get("purchase_order_date") or local_today()
    data.setdefault("amount", 0)

    po = PurchaseOrder(
        **data,
        purchase_order_no=next_purchase_order_no(db, data["site_id"]),
        amount_in_words=amount_in_words(data["amount"]),
        approval_status=ApprovalStatus.DRAFT,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    po.items = wf.build_items(PURCHASE_ORDER, items)
    db.add(po)
    wf.flush_new(db, PURCHASE_ORDER)

    log_audit(db, user_id=user.id, action="CREATE", table_name=PURCHASE_ORDER.table_name, record_id=po.id,
              new_values={"purchase_order_no": po.purchase_order_no, "vendor_id": po.vendor_id,
                          "amount": float(po.amount or 0), "items": len(items)})
    logger.info("purchase order %s (%s) created by user %s", po.id, po.purchase_order_no, user.id)
    return po


def _check_separation_of_duties(po: PurchaseOrder, action: ApprovalAction, user: Any) -> None:
    if action not in (ApprovalAction.APPROVE1, ApprovalAction.APPROVE2):
        return
    level = "1" if action == ApprovalAction.APPROVE1 else "2"
    if po.created_by_id == user.id:
        raise Forbidden(f"Creator cannot approve level {level}")
    if action == ApprovalAction.APPROVE2 and po.approved1_by_id == user.id:
        raise Forbidden("Level 1 approver cannot approve level 2")


def should_auto_approve_l2(amount: Any, user: Any) -> bool:
    """Level 1 approval also grants level 2 for small orders or a project director with L2 rights."""
    total = Decimal(str(amount or 0))
    if total <= Decimal(str(settings.PO_AUTO_APPROVE_L2_LIMIT)):
        return True
    return ROLES.PROJECT_DIRECTOR in role_names(user) and has_perm(user, P.APPROVE_PURCHASE_ORDERS_L2)


def _default_approved2(items: List[dict]) -> None:
    for it in items:
        if it.get("approved2_qty") is None:
            it["approved2_qty"] = it.get("approved1_qty") if it.get("approved1_qty") is not None else it.get("qty")


def update_purchase_order(db: Session, purchase_order_id: int, payload: PurchaseOrderUpdate,
                          user: Any) -> PurchaseOrder:
    data = payload.model_dump(exclude_unset=True)
    action: Optional[ApprovalAction] = data.pop("status_action", None)
    items: Optional[List[dict]] = data.pop("purchase_order_items", None)
    version = data.pop("version", None)
    for key in _REQUIRED:
        if key in data and data[key] is None:
            data.pop(key)

    if not data and action is None and items is None:
        raise BadRequest("No valid fields to update")

    for attr, (perm, message) in _GUARDED_FIELDS.items():
        if attr in data:
            require_all(user, [perm], message=message)
    if action is not None:
        wf.authorize_status_action(user, PURCHASE_ORDER, action)

    po = wf.lock_document(db, PURCHASE_ORDER, purchase_order_id)
    wf.check_version(PURCHASE_ORDER, po, version)
    wf.validate_order_refs(db, data, items)

    before = snapshot(po, wf.APPROVAL_FIELDS)
    if data.get("amount") is not None:
        data["amount_in_words"] = amount_in_words(data["amount"])
    old_header = wf.apply_header(po, data)

    auto_l2 = False
    if action is not None:
        _check_separation_of_duties(po, action, user)
        now = local_now()
        wf.apply_status_action(PURCHASE_ORDER, po, action, actor_id=user.id, now=now)
        if action == ApprovalAction.APPROVE1 and should_auto_approve_l2(po.amount, user):
            wf.apply_status_action(PURCHASE_ORDER, po, ApprovalAction.APPROVE2, actor_id=user.id, now=now)
            auto_l2 = True

    if items:
        if auto_l2:
            _default_approved2(items)
        wf.reconcile_items(po, PURCHASE_ORDER, items)
    elif auto_l2:
        for row in po.items:
            row.approved2_qty = row.approved1_qty if row.approved1_qty is not None else row.qty

    po.updated_by_id = user.id
    po.updated_at = local_now()
    db.flush()

    log_audit(
        db,
        user_id=user.id,
        action="STATUS" if action is not None else "UPDATE",
        table_name=PURCHASE_ORDER.table_name,
        record_id=po.id,
        old_values={**before, **plain_values(old_header)},
        new_values={
            **snapshot(po, wf.APPROVAL_FIELDS),
            "status_action": action.value if action else None,
            "auto_approved_level_2": auto_l2,
        },
    )
    return po


def delete_purchase_order(db: Session, purchase_order_id: int, user: Any) -> None:
    wf.delete_document(db, PURCHASE_ORDER, purchase_order_id, user_id=user.id)
