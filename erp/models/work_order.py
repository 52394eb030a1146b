from __future__ import annotations

import enum

from sqlalchemy import (
    Column, Integer, String, Text, Date, Enum, ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from erp.db.base import Base, MYSQL_ARGS
from erp.models.approval import ApprovalMixin, Money, Qty, Percent


class WorkOrderType(str, enum.Enum):
    SUB_CONTRACT = "SUB_CONTRACT"
    PWR_WORK = "PWR_WORK"


class WorkOrderStatus(str, enum.Enum):
    HOLD = "HOLD"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ChargeStatus(str, enum.Enum):
    """Whether a surcharge (transit insurance, P&F, reverse GST) is in the price or extra."""
    EXCLUSIVE = "EXCLUSIVE"
    INCLUSIVE = "INCLUSIVE"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class WorkOrder(ApprovalMixin, Base):
    __tablename__ = "work_orders"
    __table_args__ = (
        UniqueConstraint("work_order_no", name="uq_work_orders_work_order_no"),
        Index("ix_work_orders_site_date", "site_id", "work_order_date"),
        Index("ix_work_orders_vendor", "vendor_id"),
        MYSQL_ARGS,
    )

    id = Column(Integer, primary_key=True, index=True)
    work_order_no = Column(String(30), nullable=False)
    type = Column(Enum(WorkOrderType, name="work_order_type"), nullable=False, default=WorkOrderType.SUB_CONTRACT)
    work_order_date = Column(Date, nullable=False)
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

    wo_status = Column(Enum(WorkOrderStatus, name="work_order_status"), nullable=True, default=WorkOrderStatus.HOLD)

    amount = Column(Money, nullable=False, default=0)
    amount_in_words = Column(String(500), nullable=True)
    total_cgst_amount = Column(Money, nullable=False, default=0)
    total_sgst_amount = Column(Money, nullable=False, default=0)
    total_igst_amount = Column(Money, nullable=False, default=0)

    transit_insurance_status = Column(Enum(ChargeStatus, name="wo_transit_insurance_status"), nullable=True)
    transit_insurance_amount = Column(Money, nullable=True)
    pf_status = Column(Enum(ChargeStatus, name="wo_pf_status"), nullable=True)
    pf_charges = Column(Money, nullable=True)
    gst_reverse_status = Column(Enum(ChargeStatus, name="wo_gst_reverse_status"), nullable=True)
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
        "WorkOrderDetail",
        back_populates="work_order",
        cascade="all, delete-orphan",
        order_by="WorkOrderDetail.serial_no",
    )


class WorkOrderDetail(Base):
    __tablename__ = "work_order_details"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True, index=True)
    work_order_id = Column(Integer, ForeignKey("work_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    serial_no = Column(Integer, nullable=False, default=1)

    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    sac_code = Column(String(20), nullable=True)
    remark = Column(String(255), nullable=True)

    qty = Column(Qty, nullable=False)
    ordered_qty = Column(Qty, nullable=True)
    approved1_qty = Column(Qty, nullable=True)
    approved2_qty = Column(Qty, nullable=True)
    rate = Column(Money, nullable=False, default=0)

    cgst_percent = Column(Percent, nullable=False, default=0)
    cgst_amt = Column(Money, nullable=False, default=0)
    sgst_percent = Column(Percent, nullable=False, default=0)
    sgst_amt = Column(Money, nullable=False, default=0)
    igst_percent = Column(Percent, nullable=False, default=0)
    igst_amt = Column(Money, nullable=False, default=0)
    amount = Column(Money, nullable=False, default=0)

    work_order = relationship("WorkOrder", back_populates="items")
    item = relationship("Item")
