from __future__ import annotations

import enum

from sqlalchemy import (
    Column, Integer, String, Text, Date, Enum, ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from erp.db.base import Base, MYSQL_ARGS
from erp.models.approval import ApprovalMixin, Money, Qty, Percent
from erp.models.work_order import ChargeStatus


class PurchaseOrderStatus(str, enum.Enum):
    ORDER_PLACED = "ORDER_PLACED"
    IN_TRANSIT = "IN_TRANSIT"
    RECEIVED = "RECEIVED"
    HOLD = "HOLD"
    OPEN = "OPEN"


class PurchaseOrder(ApprovalMixin, Base):
    __tablename__ = "purchase_orders"
    __table_args__ = (
        UniqueConstraint("purchase_order_no", name="uq_purchase_orders_purchase_order_no"),
        Index("ix_purchase_orders_site_date", "site_id", "purchase_order_date"),
        Index("ix_purchase_orders_vendor", "vendor_id"),
        MYSQL_ARGS,
    )

    id = Column(Integer, primary_key=True, index=True)
    purchase_order_no = Column(String(60), nullable=False)
    purchase_order_date = Column(Date, nullable=False)
    delivery_date = Column(Date, nullable=True)

    site_id = Column(Integer, ForeignKey("sites.id"), nullable=False)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False)
    billing_address_id = Column(Integer, ForeignKey("billing_addresses.id"), nullable=True)
    site_delivery_address_id = Column(Integer, ForeignKey("site_delivery_addresses.id"), nullable=True)
    payment_term_id = Column(Integer, ForeignKey("payment_terms.id"), nullable=True)
    indent_id = Column(Integer, ForeignKey("indents.id"), nullable=True, index=True)

    quotation_no = Column(String(100), nullable=True)
    quotation_date = Column(Date, nullable=True)
    transport = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    payment_terms_in_days = Column(Integer, nullable=True)
    delivery_schedule = Column(Text, nullable=True)

    po_status = Column(Enum(PurchaseOrderStatus, name="purchase_order_status"), nullable=True,
                       default=PurchaseOrderStatus.HOLD)

    amount = Column(Money, nullable=False, default=0)
    amount_in_words = Column(String(500), nullable=True)
    total_cgst_amount = Column(Money, nullable=False, default=0)
    total_sgst_amount = Column(Money, nullable=False, default=0)
    total_igst_amount = Column(Money, nullable=False, default=0)

    transit_insurance_status = Column(Enum(ChargeStatus, name="po_transit_insurance_status"), nullable=True)
    transit_insurance_amount = Column(Money, nullable=True)
    pf_status = Column(Enum(ChargeStatus, name="po_pf_status"), nullable=True)
    pf_charges = Column(Money, nullable=True)
    gst_reverse_status = Column(Enum(ChargeStatus, name="po_gst_reverse_status"), nullable=True)
    gst_reverse_amount = Column(Money, nullable=True)

    remarks = Column(Text, nullable=True)
    bill_status = Column(String(50), nullable=True)

    version = Column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    site = relationship("Site")
    vendor = relationship("Vendor")
    billing_address = relationship("BillingAddress")
    site_delivery_address = relationship("SiteDeliveryAddress")
    payment_term = relationship("PaymentTerm")
    indent = relationship("Indent")

    items = relationship(
        "PurchaseOrderDetail",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderDetail.serial_no",
    )


class PurchaseOrderDetail(Base):
    __tablename__ = "purchase_order_details"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True, index=True)
    purchase_order_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="CASCADE"),
                               nullable=False, index=True)
    serial_no = Column(Integer, nullable=False, default=1)

    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    remark = Column(String(255), nullable=True)

    qty = Column(Qty, nullable=False)
    ordered_qty = Column(Qty, nullable=True)
    approved1_qty = Column(Qty, nullable=True)
    approved2_qty = Column(Qty, nullable=True)
    rate = Column(Money, nullable=False, default=0)

    discount_percent = Column(Percent, nullable=False, default=0)
    dis_amt = Column(Money, nullable=False, default=0)
    cgst_percent = Column(Percent, nullable=False, default=0)
    cgst_amt = Column(Money, nullable=False, default=0)
    sgst_percent = Column(Percent, nullable=False, default=0)
    sgst_amt = Column(Money, nullable=False, default=0)
    igst_percent = Column(Percent, nullable=False, default=0)
    igst_amt = Column(Money, nullable=False, default=0)
    amount = Column(Money, nullable=False, default=0)

    purchase_order = relationship("PurchaseOrder", back_populates="items")
    item = relationship("Item")
