# erp/services/document_workflow.py
"""
Plumbing shared by the indent, work order and purchase order services:
row locking, version checks, status actions, line-item reconciliation,
list paging and the per-caller action list.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from erp.core.config import settings
from erp.core.errors import BadRequest, Conflict, NotFound
from erp.core.rbac import is_admin_user, iter_user_perm_codes, require_all
from erp.models.approval import ApprovalStatus
from erp.models.indent import Indent
from erp.models.masters import BillingAddress, Item, PaymentTerm, Site, SiteDeliveryAddress, Vendor
from erp.services.approval_workflow import (
    ApprovalAction, TransitionResult, apply_changes, available_actions, transition,
)
from erp.services.audit_logger import log_audit, snapshot
from erp.services.line_items import ReconcilePlan, apply_line_item_plan, plan_line_items

logger = logging.getLogger(__name__)

APPROVAL_FIELDS = (
    "approval_status", "is_approved1", "is_approved2", "is_complete", "is_suspended",
)

_ACTION_VERBS = {
    ApprovalAction.APPROVE1: "approve (level 1)",
    ApprovalAction.APPROVE2: "approve (level 2)",
    ApprovalAction.COMPLETE: "complete",
    ApprovalAction.SUSPEND: "suspend",
    ApprovalAction.UNSUSPEND: "unsuspend",
}


@dataclass(frozen=True)
class DocumentKind:
    label: str                 # "work order", used in messages
    model: Any
    item_model: Any
    number_attr: str
    action_perms: Dict[ApprovalAction, str] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.label[:1].upper() + self.label[1:]

    @property
    def table_name(self) -> str:
        return self.model.__tablename__


# ---------- loading ----------
def lock_document(db: Session, kind: DocumentKind, doc_id: int) -> Any:
    """SELECT ... FOR UPDATE on the document row; NotFound when absent."""
    doc = (
        db.query(kind.model)
        .filter(kind.model.id == doc_id)
        .with_for_update()
        .first()
    )
    if not doc:
        raise NotFound(f"{kind.title} not found")
    return doc


def check_version(kind: DocumentKind, doc: Any, version: Optional[int]) -> None:
    if version is None:
        return
    if int(version) != int(doc.version):
        raise Conflict(
            f"{kind.title} was modified by another user. Reload and try again.",
            details={"currentVersion": doc.version},
        )


def ensure_exists(db: Session, model: Any, pk: Optional[int], label: str) -> None:
    if pk is None:
        return
    if db.get(model, pk) is None:
        raise BadRequest(f"Invalid {label}")


def validate_order_refs(db: Session, data: Mapping[str, Any], items: Optional[Sequence[Mapping[str, Any]]]) -> None:
    """Header and line references shared by work orders and purchase orders."""
    ensure_exists(db, Site, data.get("site_id"), "site")
    ensure_exists(db, Vendor, data.get("vendor_id"), "vendor")
    ensure_exists(db, BillingAddress, data.get("billing_address_id"), "billing address")
    ensure_exists(db, SiteDeliveryAddress, data.get("site_delivery_address_id"), "site delivery address")
    ensure_exists(db, PaymentTerm, data.get("payment_term_id"), "payment term")
    ensure_exists(db, Indent, data.get("indent_id"), "indent")
    for it in items or []:
        ensure_exists(db, Item, it.get("item_id"), "item")


def flush_new(db: Session, kind: DocumentKind) -> None:
    """Flush a freshly numbered document; a number collision is a 409."""
    try:
        db.flush()
    except IntegrityError as e:
        logger.warning("%s number collision: %s", kind.label, e.orig)
        raise Conflict(f"{kind.title} number already exists")


# ---------- header ----------
def apply_header(doc: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
    """Set header attributes; returns the previous values of those that changed."""
    old: Dict[str, Any] = {}
    for attr, value in data.items():
        current = getattr(doc, attr)
        if current != value:
            old[attr] = current
            setattr(doc, attr, value)
    return old


# ---------- status ----------
def authorize_status_action(user: Any, kind: DocumentKind, action: ApprovalAction) -> None:
    perm = kind.action_perms.get(action)
    require_all(
        user,
        [perm] if perm else [],
        message=f"You do not have permission to {_ACTION_VERBS[action]} this {kind.label}",
    )


def apply_status_action(
    kind: DocumentKind,
    doc: Any,
    action: ApprovalAction,
    *,
    actor_id: Optional[int],
    now,
) -> TransitionResult:
    result = transition(doc, action, actor_id=actor_id, now=now, label=kind.label)
    apply_changes(doc, result)
    logger.info(
        "%s %s: %s %s -> %s by user %s",
        kind.label, doc.id, action.value, result.previous_status.value, result.new_status.value, actor_id,
    )
    return result


def actions_for(user: Any, kind: DocumentKind, status: Any) -> List[str]:
    return available_actions(
        status,
        kind.action_perms,
        iter_user_perm_codes(user),
        is_admin=is_admin_user(user),
    )


# ---------- items ----------
def reconcile_items(doc: Any, kind: DocumentKind, incoming: Sequence[Mapping[str, Any]]) -> ReconcilePlan:
    plan = plan_line_items([row.id for row in doc.items], incoming)
    apply_line_item_plan(doc.items, plan, kind.item_model)
    return plan


def build_items(kind: DocumentKind, incoming: Iterable[Mapping[str, Any]]) -> List[Any]:
    """New rows for a fresh document, serial numbers 1..n."""
    rows = []
    for serial_no, data in enumerate(incoming, start=1):
        data = dict(data)
        data.pop("id", None)
        rows.append(kind.item_model(serial_no=serial_no, **data))
    return rows


# ---------- delete ----------
def delete_document(db: Session, kind: DocumentKind, doc_id: int, *, user_id: Optional[int]) -> None:
    doc = lock_document(db, kind, doc_id)
    if doc.approval_status != ApprovalStatus.DRAFT or doc.is_complete:
        raise BadRequest(
            f"Cannot delete a {kind.label} that is not in DRAFT status or is already completed")

    log_audit(
        db,
        user_id=user_id,
        action="DELETE",
        table_name=kind.table_name,
        record_id=doc.id,
        old_values=snapshot(doc, (kind.number_attr, *APPROVAL_FIELDS)),
    )
    db.delete(doc)
    db.flush()
    logger.info("%s %s deleted by user %s", kind.label, doc_id, user_id)


# ---------- lists ----------
def clamp_paging(page: Optional[int], per_page: Optional[int]) -> Tuple[int, int]:
    page = max(int(page or 1), 1)
    per_page = int(per_page or settings.DEFAULT_PER_PAGE)
    per_page = min(max(per_page, 1), settings.MAX_PER_PAGE)
    return page, per_page


def sort_column(model: Any, sort: Optional[str], allowed: Mapping[str, str], default: str):
    """Map a client sort key (camelCase) to a column; unknown keys fall back to `default`."""
    attr = allowed.get(sort or "", allowed[default])
    return getattr(model, attr)
