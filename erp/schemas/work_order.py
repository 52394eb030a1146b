# erp/schemas/work_order.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from erp.models.work_order import ChargeStatus, WorkOrderStatus, WorkOrderType
from erp.services.approval_workflow import ApprovalAction
from erp.schemas.approval import ApprovalStateOut
from erp.schemas.common import CamelModel, MoneyIn, OptQtyIn, PercentIn, QtyIn, RateIn
from erp.schemas.masters import (
    BillingAddressOut, ItemRef, PaymentTermOut, SiteDeliveryAddressOut, SiteRef, VendorRef,
)


class WorkOrderItemIn(CamelModel):
    id: Optional[int] = None
    item_id: int
    sac_code: Optional[str] = Field(None, max_length=20)
    remark: Optional[str] = Field(None, max_length=255)
    qty: QtyIn
    ordered_qty: Optional[OptQtyIn] = None
    approved1_qty: Optional[OptQtyIn] = None
    approved2_qty: Optional[OptQtyIn] = None
    rate: RateIn
    cgst_percent: PercentIn = 0
    cgst_amt: MoneyIn = 0
    sgst_percent: PercentIn = 0
    sgst_amt: MoneyIn = 0
    igst_percent: PercentIn = 0
    igst_amt: MoneyIn = 0
    amount: MoneyIn = 0


class _WorkOrderHeader(CamelModel):
    type: Optional[WorkOrderType] = None
    work_order_date: Optional[date] = None
    delivery_date: Optional[date] = None
    billing_address_id: Optional[int] = None
    site_delivery_address_id: Optional[int] = None
    payment_term_id: Optional[int] = None
    indent_id: Optional[int] = None
    quotation_no: Optional[str] = Field(None, max_length=100)
    quotation_date: Optional[date] = None
    transport: Optional[str] = Field(None, max_length=255)
    note: Optional[str] = None
    terms: Optional[str] = None
    payment_terms_in_days: Optional[int] = Field(None, ge=0)
    delivery_schedule: Optional[str] = None
    wo_status: Optional[WorkOrderStatus] = None
    amount: Optional[MoneyIn] = None
    total_cgst_amount: Optional[MoneyIn] = None
    total_sgst_amount: Optional[MoneyIn] = None
    total_igst_amount: Optional[MoneyIn] = None
    transit_insurance_status: Optional[ChargeStatus] = None
    transit_insurance_amount: Optional[MoneyIn] = None
    pf_status: Optional[ChargeStatus] = None
    pf_charges: Optional[MoneyIn] = None
    gst_reverse_status: Optional[ChargeStatus] = None
    gst_reverse_amount: Optional[MoneyIn] = None
    remarks: Optional[str] = None
    bill_status: Optional[str] = Field(None, max_length=50)


class WorkOrderCreate(_WorkOrderHeader):
    site_id: int
    vendor_id: int
    work_order_items: List[WorkOrderItemIn] = Field(..., min_length=1)


class WorkOrderUpdate(_WorkOrderHeader):
    site_id: Optional[int] = None
    vendor_id: Optional[int] = None
    status_action: Optional[ApprovalAction] = None
    work_order_items: Optional[List[WorkOrderItemIn]] = None
    version: Optional[int] = None


class WorkOrderItemOut(CamelModel):
    id: int
    serial_no: int
    item_id: int
    item: Optional[ItemRef] = None
    sac_code: Optional[str] = None
    remark: Optional[str] = None
    qty: float
    ordered_qty: Optional[float] = None
    approved1_qty: Optional[float] = None
    approved2_qty: Optional[float] = None
    rate: float
    cgst_percent: float
    cgst_amt: float
    sgst_percent: float
    sgst_amt: float
    igst_percent: float
    igst_amt: float
    amount: float


class WorkOrderListRow(ApprovalStateOut):
    id: int
    work_order_no: str
    type: WorkOrderType
    work_order_date: date
    delivery_date: Optional[date] = None
    site_id: int
    site: Optional[SiteRef] = None
    vendor_id: int
    vendor: Optional[VendorRef] = None
    wo_status: Optional[WorkOrderStatus] = None
    amount: float
    bill_status: Optional[str] = None


class WorkOrderOut(WorkOrderListRow):
    billing_address_id: Optional[int] = None
    billing_address: Optional[BillingAddressOut] = None
    site_delivery_address_id: Optional[int] = None
    site_delivery_address: Optional[SiteDeliveryAddressOut] = None
    payment_term_id: Optional[int] = None
    payment_term: Optional[PaymentTermOut] = None
    indent_id: Optional[int] = None
    quotation_no: Optional[str] = None
    quotation_date: Optional[date] = None
    transport: Optional[str] = None
    note: Optional[str] = None
    terms: Optional[str] = None
    payment_terms_in_days: Optional[int] = None
    delivery_schedule: Optional[str] = None
    amount_in_words: Optional[str] = None
    total_cgst_amount: float = 0
    total_sgst_amount: float = 0
    total_igst_amount: float = 0
    transit_insurance_status: Optional[ChargeStatus] = None
    transit_insurance_amount: Optional[float] = None
    pf_status: Optional[ChargeStatus] = None
    pf_charges: Optional[float] = None
    gst_reverse_status: Optional[ChargeStatus] = None
    gst_reverse_amount: Optional[float] = None
    remarks: Optional[str] = None
    work_order_items: List[WorkOrderItemOut] = Field(default_factory=list, validation_alias="items")
