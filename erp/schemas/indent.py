# erp/schemas/indent.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from erp.services.approval_workflow import ApprovalAction
from erp.schemas.approval import ApprovalStateOut
from erp.schemas.common import CamelModel, OptQtyIn, QtyIn
from erp.schemas.masters import ItemRef, SiteRef, UnitOut


class IndentItemIn(CamelModel):
    id: Optional[int] = None  # existing row to update; omit for a new row
    item_id: int
    unit_id: Optional[int] = None
    closing_stock: Optional[OptQtyIn] = None
    indent_qty: QtyIn
    approved_qty: Optional[OptQtyIn] = None
    delivery_date: Optional[date] = None
    remark: Optional[str] = Field(None, max_length=255)


class IndentCreate(CamelModel):
    indent_date: Optional[date] = None
    delivery_date: Optional[date] = None
    site_id: int
    remarks: Optional[str] = None
    indent_items: List[IndentItemIn] = Field(..., min_length=1)


class IndentUpdate(CamelModel):
    indent_date: Optional[date] = None
    delivery_date: Optional[date] = None
    site_id: Optional[int] = None
    remarks: Optional[str] = None
    status_action: Optional[ApprovalAction] = None
    indent_items: Optional[List[IndentItemIn]] = None
    version: Optional[int] = None


class IndentItemOut(CamelModel):
    id: int
    serial_no: int
    item_id: int
    item: Optional[ItemRef] = None
    unit_id: Optional[int] = None
    unit: Optional[UnitOut] = None
    closing_stock: Optional[float] = None
    indent_qty: float
    approved_qty: Optional[float] = None
    delivery_date: Optional[date] = None
    remark: Optional[str] = None


class IndentListRow(ApprovalStateOut):
    id: int
    indent_no: str
    indent_date: date
    delivery_date: Optional[date] = None
    site_id: int
    site: Optional[SiteRef] = None
    remarks: Optional[str] = None


class IndentOut(IndentListRow):
    indent_items: List[IndentItemOut] = Field(default_factory=list, validation_alias="items")
