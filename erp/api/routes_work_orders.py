# FILE: erp/api/routes_work_orders.py
from __future__ import annotations

from io import BytesIO
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from erp.api.deps import current_user, get_db
from erp.models.approval import ApprovalStatus
from erp.models.user import User
from erp.schemas.work_order import WorkOrderCreate, WorkOrderListRow, WorkOrderOut, WorkOrderUpdate
from erp.services import document_workflow as wf
from erp.services.pdf_orders import build_order_pdf
from erp.services.work_order_service import (
    WORK_ORDER, create_work_order, delete_work_order, get_work_order, list_work_orders, update_work_order,
)
from erp.utils.resp import ok, paged

router = APIRouter(prefix="/work-orders", tags=["Work Orders"])


def _out(wo, user: User, schema=WorkOrderOut) -> dict:
    out = schema.model_validate(wo)
    out.available_actions = wf.actions_for(user, WORK_ORDER, wo.approval_status)
    return out.model_dump(by_alias=True)


@router.get("")
def list_work_orders_api(
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
    rows, total = list_work_orders(db, page=page, per_page=per_page, search=search, site_id=site,
                                   vendor_id=vendor, approval_status=approval_status, sort=sort, order=order)
    return paged([_out(r, user, WorkOrderListRow) for r in rows], page=page, per_page=per_page, total=total)


@router.get("/{work_order_id}")
def get_work_order_api(work_order_id: int, db: Session = Depends(get_db), user: User = Depends(current_user)):
    return ok(_out(get_work_order(db, work_order_id), user))


@router.get("/{work_order_id}/print")
def print_work_order_api(work_order_id: int, db: Session = Depends(get_db)):
    wo = get_work_order(db, work_order_id)
    pdf_bytes = build_order_pdf(wo, title="WORK ORDER", number=wo.work_order_no, order_date=wo.work_order_date)
    filename = f"WO_{wo.work_order_no}.pdf"
    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.post("")
def create_work_order_api(payload: WorkOrderCreate, db: Session = Depends(get_db),
                          user: User = Depends(current_user)):
    with db.begin():
        wo = create_work_order(db, payload, user)
    return ok(_out(get_work_order(db, wo.id), user), status_code=201)


@router.patch("/{work_order_id}")
def update_work_order_api(work_order_id: int, payload: WorkOrderUpdate, db: Session = Depends(get_db),
                          user: User = Depends(current_user)):
    with db.begin():
        update_work_order(db, work_order_id, payload, user)
    return ok(_out(get_work_order(db, work_order_id), user))


@router.delete("/{work_order_id}")
def delete_work_order_api(work_order_id: int, db: Session = Depends(get_db), user: User = Depends(current_user)):
    with db.begin():
        delete_work_order(db, work_order_id, user)
    return ok({"message": "Work order deleted"})
