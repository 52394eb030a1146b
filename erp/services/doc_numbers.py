# erp/services/doc_numbers.py
"""
Document numbers, backed by doc_number_series rows locked FOR UPDATE.

    Indent          IND-00001
    Work order      0001-001 ... 0001-999, 0002-001 ...
    Purchase order  DCTPL/25-26/MUM/00001  (per company, financial year and site)
"""
from __future__ import annotations

from datetime import date
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from erp.core.config import settings
from erp.core.errors import BadRequest, NotFound
from erp.models.masters import Site
from erp.models.number_series import DocNumberSeries
from erp.utils.timezone import local_today

SITE_CODE_MISSING = "Site Code is not added. Please add Site Code to generate the Purchase Order Number."

_WO_BLOCK = 999


def financial_year(d: date) -> Tuple[int, int]:
    """April-March financial year containing `d`, as (start year, end year)."""
    start = d.year if d.month >= 4 else d.year - 1
    return start, start + 1


def financial_year_label(d: date) -> str:
    start, end = financial_year(d)
    return f"{start % 100:02d}-{end % 100:02d}"


def format_indent_no(seq: int) -> str:
    return f"IND-{seq:05d}"


def format_work_order_no(seq: int) -> str:
    left, right = divmod(seq - 1, _WO_BLOCK)
    return f"{left + 1:04d}-{right + 1:03d}"


def format_purchase_order_no(company_code: str, fy_label: str, site_code: str, seq: int) -> str:
    return f"{company_code}/{fy_label}/{site_code}/{seq:05d}"


def _lock_series(db: Session, key: str, scope: str) -> DocNumberSeries:
    row = (
        db.query(DocNumberSeries)
        .filter(DocNumberSeries.key == key, DocNumberSeries.scope == scope)
        .with_for_update()
        .first()
    )
    if row:
        return row

    # first number for this scope. Two concurrent first creators collide on
    # uq_doc_number_series_key_scope; the loser's request fails with 409.
    row = DocNumberSeries(key=key, scope=scope, next_seq=1)
    db.add(row)
    db.flush()
    return row


def next_sequence(db: Session, key: str, scope: str = "") -> int:
    row = _lock_series(db, key, scope)
    seq = int(row.next_seq or 1)
    row.next_seq = seq + 1
    db.flush()
    return seq


def next_indent_no(db: Session) -> str:
    return format_indent_no(next_sequence(db, "INDENT"))


def next_work_order_no(db: Session) -> str:
    return format_work_order_no(next_sequence(db, "WORK_ORDER"))


def next_purchase_order_no(db: Session, site_id: int, on: Optional[date] = None) -> str:
    """The financial year comes from the server date, not the order date."""
    site = db.get(Site, site_id)
    if not site:
        raise NotFound("Site not found")
    if not (site.site_code or "").strip():
        raise BadRequest(SITE_CODE_MISSING)

    fy = financial_year_label(on or local_today())
    site_code = site.site_code.strip()
    seq = next_sequence(db, "PURCHASE_ORDER", f"{settings.COMPANY_CODE}/{fy}/{site_code}")
    return format_purchase_order_no(settings.COMPANY_CODE, fy, site_code, seq)
