# FILE: erp/api/routes_masters.py
from typing import Optional, Type

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from erp.api.deps import current_user, get_db
from erp.models.masters import (
    BillingAddress, Item, PaymentTerm, Site, SiteDeliveryAddress, Unit, Vendor,
)
from erp.models.user import User
from erp.schemas import masters as s
from erp.services import masters_service as svc
from erp.services.document_workflow import clamp_paging
from erp.utils.resp import ok, paged

SITES = svc.MasterSpec("Site", Site, ("site", "site_code", "short_name", "city"), "site")
SITE_DELIVERY_ADDRESSES = svc.MasterSpec(
    "Site delivery address", SiteDeliveryAddress, ("address_line1", "city"), "id",
    references=(("site_id", Site, "site"),),
)
VENDORS = svc.MasterSpec("Vendor", Vendor, ("vendor_name", "contact_person", "gst_number", "city"), "vendor_name")
UNITS = svc.MasterSpec("Unit", Unit, ("unit_name",), "unit_name")
ITEMS = svc.MasterSpec("Item", Item, ("item_code", "item", "hsn_code"), "item",
                       references=(("unit_id", Unit, "unit"),))
BILLING_ADDRESSES = svc.MasterSpec("Billing address", BillingAddress, ("company_name", "city", "gst_number"),
                                   "company_name")
PAYMENT_TERMS = svc.MasterSpec("Payment term", PaymentTerm, ("payment_term", "description"), "payment_term")


def crud_router(
    prefix: str,
    spec: svc.MasterSpec,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    out_schema: Type[BaseModel],
    *,
    site_filter: bool = False,
) -> APIRouter:
    """
    Paginated list, detail, create, patch and delete for one master table.
    With `site_filter` the list also accepts ?siteId= for rows owned by a site.
    """
    router = APIRouter(prefix=prefix, tags=[spec.label])

    def dump(row) -> dict:
        return out_schema.model_validate(row).model_dump(by_alias=True)

    @router.get("")
    def list_api(
        page: int = Query(1, ge=1),
        per_page: Optional[int] = Query(None, alias="perPage", ge=1),
        search: Optional[str] = None,
        site_id: Optional[int] = Query(None, alias="siteId"),
        db: Session = Depends(get_db),
        user: User = Depends(current_user),
    ):
        page, per_page = clamp_paging(page, per_page)
        filters = {"site_id": site_id} if site_filter else None
        rows, total = svc.list_rows(db, spec, page=page, per_page=per_page, search=search, filters=filters)
        return paged([dump(r) for r in rows], page=page, per_page=per_page, total=total)

    @router.get("/{row_id}")
    def get_api(row_id: int, db: Session = Depends(get_db), user: User = Depends(current_user)):
        return ok(dump(svc.get_row(db, spec, row_id)))

    @router.post("")
    def create_api(payload: create_schema, db: Session = Depends(get_db), user: User = Depends(current_user)):
        with db.begin():
            row = svc.create_row(db, spec, payload.model_dump(), user_id=user.id)
        return ok(dump(svc.get_row(db, spec, row.id)), status_code=201)

    @router.patch("/{row_id}")
    def update_api(row_id: int, payload: update_schema, db: Session = Depends(get_db),
                   user: User = Depends(current_user)):
        with db.begin():
            svc.update_row(db, spec, row_id, payload.model_dump(exclude_unset=True), user_id=user.id)
        return ok(dump(svc.get_row(db, spec, row_id)))

    @router.delete("/{row_id}")
    def delete_api(row_id: int, db: Session = Depends(get_db), user: User = Depends(current_user)):
        with db.begin():
            svc.delete_row(db, spec, row_id, user_id=user.id)
        return ok({"message": f"{spec.label} deleted"})

    return router


routers = [
    crud_router("/sites", SITES, s.SiteIn, s.SiteUpdate, s.SiteOut),
    crud_router("/site-delivery-addresses", SITE_DELIVERY_ADDRESSES, s.SiteDeliveryAddressIn,
                s.SiteDeliveryAddressUpdate, s.SiteDeliveryAddressOut, site_filter=True),
    crud_router("/vendors", VENDORS, s.VendorIn, s.VendorUpdate, s.VendorOut),
    crud_router("/units", UNITS, s.UnitIn, s.UnitUpdate, s.UnitOut),
    crud_router("/items", ITEMS, s.ItemIn, s.ItemUpdate, s.ItemOut),
    crud_router("/billing-addresses", BILLING_ADDRESSES, s.BillingAddressIn, s.BillingAddressUpdate,
                s.BillingAddressOut),
    crud_router("/payment-terms", PAYMENT_TERMS, s.PaymentTermIn, s.PaymentTermUpdate, s.PaymentTermOut),
]
