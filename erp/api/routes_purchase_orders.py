# FILE: erp/api/routes_purchase_orders.py
from __future__ import annotations

from io import BytesIO
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from erp.api.deps import current_user, get_db
from erp.models.approval import ApprovalStatus
from erp.models.user import User
from erp.schemas.purchase_order import (
    PurchaseOrderCreate, PurchaseOrderListRow, PurchaseOrderOut, PurchaseOrderUpdate,
)
from erp.services import document_workflow as wf
from erp.services.pdf_orders import build_order_pdf
from erp.services.purchase_order_service import (
    PURCHASE_ORDER, create_purchase_order, delete_purchase_order, get_purchase_order,
    list_purchase_orders, update_purchase_order,
)
from erp.utils.resp import ok, paged

router = APIRouter(prefix="/purchase-orders", tags=["Purchase Orders"])


def _out(po, user: User, schema=PurchaseOrderOut) -> dict:
    out = schema.model_validate(po)
    out.available_actions = wf.actions_for(user, PURCHASE_ORDER, po.approval_status)
    return out.model_dump(by_alias=True)


@router.get("")
def list_purchase_orders_api(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, alias="perPage", ge=1),
    search: Optional[str] = None,
    site: Optional[int] = None,
    vendor: Optional[int] = None,
    approval_status: Optional[ApprovalStatus] = Query(None, alias="approvalStatus"),
    sort: Optional[str] = None,
    order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    page, per_page = wf.clamp_paging(page, per_page)
    rows, total = list_purchase_orders(db, page=page, per_page=per_page, search=search, site_id=site,
                                       vendor_id=vendor, approval_status=approval_status, sort=sort,
                                       order=order)
    return paged([_out(r, user, PurchaseOrderListRow) for r in rows], page=page, per_page=per_page, total=total)


@router.get("/{purchase_order_id}")
def get_purchase_order_api(purchase_order_id: int, db: Session = Depends(get_db),
                           user: User = Depends(current_user)):
    return ok(_out(get_purchase_order(db, purchase_order_id), user))


@router.get("/{purchase_order_id}/print")
def print_purchase_order_api(purchase_order_id: int, db: Session = Depends(get_db)):
    po = get_purchase_order(db, purchase_order_id)
    pdf_bytes = build_order_pdf(po, title="PURCHASE ORDER", number=po.purchase_order_no,
                                order_date=po.purchase_order_date)
    filename = "PO_" + po.purchase_order_no.replace("/", "-") + ".pdf"
    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.post("")
def create_purchase_order_api(payload: PurchaseOrderCreate, db: Session = Depends(get_db),
                              user: User = Depends(current_user)):
    with db.begin():
        po = create_purchase_order(db, payload, user)
    return ok(_out(get_purchase_order(db, po.id), user), status_code=201)


@router.patch("/{purchase_order_id}")
def update_purchase_order_api(purchase_order_id: int, payload: PurchaseOrderUpdate, db: Session = Depends(get_db),
                              user: User = Depends(current_user)):
    with db.begin():
        update_purchase_order(db, purchase_order_id, payload, user)
    return ok(_out(get_purchase_order(db, purchase_order_id), user))


@router.delete("/{purchase_order_id}")
def delete_purchase_order_api(purchase_order_id: int, db: Session = Depends(get_db),
                              user: User = Depends(current_user)):
    with db.begin():
        delete_purchase_order(db, purchase_order_id, user)
    return ok({"message": "Purchase order deleted"})
