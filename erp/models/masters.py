from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from erp.db.base import Base, MYSQL_ARGS


class Site(Base):
    """Construction site; owns indents and receives order deliveries."""
    __tablename__ = "sites"
    __table_args__ = (
        Index("ix_sites_site", "site"),
        MYSQL_ARGS,
    )

    id = Column(Integer, primary_key=True, index=True)
    site = Column(String(191), nullable=False)
    # short code used in purchase order numbers (DCTPL/25-26/<code>/00001)
    site_code = Column(String(20), nullable=True, unique=True)
    short_name = Column(String(100), nullable=True)
    address_line1 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    pin_code = Column(String(10), nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    delivery_addresses = relationship("SiteDeliveryAddress", back_populates="site", cascade="all, delete-orphan")


class SiteDeliveryAddress(Base):
    __tablename__ = "site_delivery_addresses"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True, index=True)
    site_id = Column(Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    pin_code = Column(String(10), nullable=True)

    site = relationship("Site", back_populates="delivery_addresses")


class Vendor(Base):
    __tablename__ = "vendors"
    __table_args__ = (
        Index("ix_vendors_vendor_name", "vendor_name"),
        MYSQL_ARGS,
    )

    id = Column(Integer, primary_key=True, index=True)
    vendor_name = Column(String(191), nullable=False)
    contact_person = Column(String(120), nullable=True)
    mobile = Column(String(20), nullable=True)
    email = Column(String(191), nullable=True)
    gst_number = Column(String(20), nullable=True)
    address_line1 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class Unit(Base):
    __tablename__ = "units"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True, index=True)
    unit_name = Column(String(50), nullable=False, unique=True)


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (
        Index("ix_items_item", "item"),
        MYSQL_ARGS,
    )

    id = Column(Integer, primary_key=True, index=True)
    item_code = Column(String(50), nullable=False, unique=True)
    item = Column(String(191), nullable=False)
    hsn_code = Column(String(20), nullable=True)
    unit_id = Column(Integer, ForeignKey("units.id"), nullable=True, index=True)
    description = Column(Text, nullable=True)

    unit = relationship("Unit")


class BillingAddress(Base):
    __tablename__ = "billing_addresses"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String(191), nullable=False)
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    pin_code = Column(String(10), nullable=True)
    gst_number = Column(String(20), nullable=True)
    email = Column(String(191), nullable=True)


class PaymentTerm(Base):
    __tablename__ = "payment_terms"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True, index=True)
    payment_term = Column(String(191), nullable=False)
    description = Column(Text, nullable=True)
