# erp/schemas/masters.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from erp.schemas.common import CamelModel


# ---------- Sites ----------
class SiteIn(CamelModel):
    site: str = Field(..., min_length=1, max_length=191)
    site_code: Optional[str] = Field(None, max_length=20)
    short_name: Optional[str] = None
    address_line1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = Field(None, max_length=10)


class SiteUpdate(CamelModel):
    site: Optional[str] = Field(None, min_length=1, max_length=191)
    site_code: Optional[str] = Field(None, max_length=20)
    short_name: Optional[str] = None
    address_line1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = Field(None, max_length=10)


class SiteOut(SiteIn):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SiteRef(CamelModel):
    id: int
    site: str
    site_code: Optional[str] = None


# ---------- Site delivery addresses ----------
class SiteDeliveryAddressIn(CamelModel):
    site_id: int
    address_line1: str = Field(..., min_length=1, max_length=255)
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = Field(None, max_length=10)


class SiteDeliveryAddressUpdate(CamelModel):
    site_id: Optional[int] = None
    address_line1: Optional[str] = Field(None, min_length=1, max_length=255)
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = Field(None, max_length=10)


class SiteDeliveryAddressOut(SiteDeliveryAddressIn):
    id: int


# ---------- Vendors ----------
class VendorIn(CamelModel):
    vendor_name: str = Field(..., min_length=1, max_length=191)
    contact_person: Optional[str] = None
    mobile: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = None
    gst_number: Optional[str] = Field(None, max_length=20)
    address_line1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


class VendorUpdate(CamelModel):
    vendor_name: Optional[str] = Field(None, min_length=1, max_length=191)
    contact_person: Optional[str] = None
    mobile: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = None
    gst_number: Optional[str] = Field(None, max_length=20)
    address_line1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


class VendorOut(VendorIn):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VendorRef(CamelModel):
    id: int
    vendor_name: str


# ---------- Units ----------
class UnitIn(CamelModel):
    unit_name: str = Field(..., min_length=1, max_length=50)


class UnitUpdate(CamelModel):
    unit_name: Optional[str] = Field(None, min_length=1, max_length=50)


class UnitOut(UnitIn):
    id: int


# ---------- Items ----------
class ItemIn(CamelModel):
    item_code: str = Field(..., min_length=1, max_length=50)
    item: str = Field(..., min_length=1, max_length=191)
    hsn_code: Optional[str] = Field(None, max_length=20)
    unit_id: Optional[int] = None
    description: Optional[str] = None


class ItemUpdate(CamelModel):
    item_code: Optional[str] = Field(None, min_length=1, max_length=50)
    item: Optional[str] = Field(None, min_length=1, max_length=191)
    hsn_code: Optional[str] = Field(None, max_length=20)
    unit_id: Optional[int] = None
    description: Optional[str] = None


class ItemOut(ItemIn):
    id: int
    unit: Optional[UnitOut] = None


class ItemRef(CamelModel):
    id: int
    item_code: str
    item: str


# ---------- Billing addresses ----------
class BillingAddressIn(CamelModel):
    company_name: str = Field(..., min_length=1, max_length=191)
    address_line1: str = Field(..., min_length=1, max_length=255)
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = Field(None, max_length=10)
    gst_number: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = None


class BillingAddressUpdate(CamelModel):
    company_name: Optional[str] = Field(None, min_length=1, max_length=191)
    address_line1: Optional[str] = Field(None, min_length=1, max_length=255)
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = Field(None, max_length=10)
    gst_number: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = None


class BillingAddressOut(BillingAddressIn):
    id: int


# ---------- Payment terms ----------
class PaymentTermIn(CamelModel):
    payment_term: str = Field(..., min_length=1, max_length=191)
    description: Optional[str] = None


class PaymentTermUpdate(CamelModel):
    payment_term: Optional[str] = Field(None, min_length=1, max_length=191)
    description: Optional[str] = None


class PaymentTermOut(PaymentTermIn):
    id: int
