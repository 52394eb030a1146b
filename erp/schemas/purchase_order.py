# erp/schemas/purchase_order.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from erp.models.purchase_order import PurchaseOrderStatus
from erp.models.work_order import ChargeStatus
from erp.services.approval_workflow import ApprovalAction
from erp.schemas.approval import ApprovalStateOut
from erp.schemas.common import CamelModel, MoneyIn, OptQtyIn, PercentIn, QtyIn, RateIn
from erp.schemas.masters import (
    BillingAddressOut, ItemRef, PaymentTermOut, SiteDeliveryAddressOut, SiteRef, VendorRef,
)


class PurchaseOrderItemIn(CamelModel):
    id: Optional[int] = None
    item_id: int
    remark: Optional[str] = Field(None, max_length=255)
    qty: QtyIn
    ordered_qty: Optional[OptQtyIn] = None
    approved1_qty: Optional[OptQtyIn] = None
    approved2_qty: Optional[OptQtyIn] = None
    rate: RateIn
    discount_percent: PercentIn = 0
    dis_amt: MoneyIn = 0
    cgst_percent: PercentIn = 0
    cgst_amt: MoneyIn = 0
    sgst_percent: PercentIn = 0
    sgst_amt: MoneyIn = 0
    igst_percent: PercentIn = 0
    igst_amt: MoneyIn = 0
    amount: MoneyIn = 0


class _PurchaseOrderHeader(CamelModel):
    purchase_order_date: Optional[date] = None
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
    po_status: Optional[PurchaseOrderStatus] = None
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


class PurchaseOrderCreate(_PurchaseOrderHeader):
    site_id: int
    vendor_id: int
    remarks: Optional[str] = None
    purchase_order_items: List[PurchaseOrderItemIn] = Field(..., min_length=1)


class PurchaseOrderUpdate(_PurchaseOrderHeader):
    site_id: Optional[int] = None
    vendor_id: Optional[int] = None
    # editable only with their own permissions
    remarks: Optional[str] = None
    bill_status: Optional[str] = Field(None, max_length=50)
    status_action: Optional[ApprovalAction] = None
    purchase_order_items: Optional[List[PurchaseOrderItemIn]] = None
    version: Optional[int] = None


class PurchaseOrderItemOut(CamelModel):
    id: int
    serial_no: int
    item_id: int
    item: Optional[ItemRef] = None
    remark: Optional[str] = None
    qty: float
    ordered_qty: Optional[float] = None
    approved1_qty: Optional[float] = None
    approved2_qty: Optional[float] = None
    rate: float
    discount_percent: float
    dis_amt: float
    cgst_percent: float
    cgst_amt: float
    sgst_percent: float
    sgst_amt: float
    igst_percent: float
    igst_amt: float
    amount: float


class PurchaseOrderListRow(ApprovalStateOut):
    id: int
    purchase_order_no: str
    purchase_order_date: date
    delivery_date: Optional[date] = None
    site_id: int
    site: Optional[SiteRef] = None
    vendor_id: int
    vendor: Optional[VendorRef] = None
    po_status: Optional[PurchaseOrderStatus] = None
    amount: float
    bill_status: Optional[str] = None


class PurchaseOrderOut(PurchaseOrderListRow):
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
    purchase_order_items: List[PurchaseOrderItemOut] = Field(default_factory=list, validation_alias="items")
