from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from erp.db.base import Base, MYSQL_ARGS
from erp.models.approval import ApprovalMixin, Qty


class Indent(ApprovalMixin, Base):
    """Material requisition raised by a site."""
    __tablename__ = "indents"
    __table_args__ = (
        UniqueConstraint("indent_no", name="uq_indents_indent_no"),
        Index("ix_indents_site_date", "site_id", "indent_date"),
        MYSQL_ARGS,
    )

    id = Column(Integer, primary_key=True, index=True)
    indent_no = Column(String(30), nullable=False)
    indent_date = Column(Date, nullable=False)
    delivery_date = Column(Date, nullable=True)

    site_id = Column(Integer, ForeignKey("sites.id"), nullable=False, index=True)
    remarks = Column(Text, nullable=True)

    version = Column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    site = relationship("Site")
    items = relationship(
        "IndentItem",
        back_populates="indent",
        cascade="all, delete-orphan",
        order_by="IndentItem.serial_no",
    )


class IndentItem(Base):
    __tablename__ = "indent_items"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True, index=True)
    indent_id = Column(Integer, ForeignKey("indents.id", ondelete="CASCADE"), nullable=False, index=True)
    serial_no = Column(Integer, nullable=False, default=1)

    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    unit_id = Column(Integer, ForeignKey("units.id"), nullable=True)
    closing_stock = Column(Qty, nullable=True)
    indent_qty = Column(Qty, nullable=False)
    approved_qty = Column(Qty, nullable=True)
    delivery_date = Column(Date, nullable=True)
    remark = Column(String(255), nullable=True)

    indent = relationship("Indent", back_populates="items")
    item = relationship("Item")
    unit = relationship("Unit")
