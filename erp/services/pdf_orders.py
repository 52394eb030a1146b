# erp/services/pdf_orders.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import BytesIO
from typing import Any, List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from erp.core.config import settings
from erp.services.amount_words import amount_in_words


def _d(v: Any) -> Decimal:
    return Decimal(str(v if v is not None else 0))


def _fmt_date(d: Optional[date]) -> str:
    return d.strftime("%d-%b-%Y") if d else "-"


def _money(v: Any) -> str:
    return f"{_d(v).quantize(Decimal('0.01')):,}"


def _qty(v: Any) -> str:
    return f"{_d(v).normalize():f}" if v is not None else "-"


BOTTOM_MARGIN = 40
PAGE_TOP = A4[1] - 40


def _make_room(c: canvas.Canvas, y: float, needed: float) -> float:
    """Start a new page when the next `needed` points would cross the bottom margin."""
    if y - needed >= BOTTOM_MARGIN:
        return y
    c.showPage()
    return PAGE_TOP


def _address_lines(addr: Any) -> List[str]:
    if addr is None:
        return []
    parts = [
        getattr(addr, "company_name", None),
        getattr(addr, "address_line1", None),
        getattr(addr, "address_line2", None),
        " ".join(p for p in (getattr(addr, "city", None), getattr(addr, "state", None),
                             getattr(addr, "pin_code", None)) if p),
    ]
    gst = getattr(addr, "gst_number", None)
    if gst:
        parts.append(f"GSTIN: {gst}")
    return [p for p in parts if p]


def build_order_pdf(doc: Any, *, title: str, number: str, order_date: Optional[date]) -> bytes:
    """A4 order print: header, party details, line table, tax totals and amount in words."""
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width = A4[0]
    y = PAGE_TOP

    c.setFont("Helvetica-Bold", 14)
    c.drawString(40, y, settings.PROJECT_NAME)
    c.drawRightString(width - 40, y, title)
    y -= 20

    c.setFont("Helvetica", 10)
    c.drawString(40, y, f"No: {number}")
    c.drawRightString(width - 40, y, f"Date: {_fmt_date(order_date)}")
    y -= 14
    c.drawString(40, y, f"Site: {getattr(doc.site, 'site', '-')}")
    c.drawRightString(width - 40, y, f"Delivery: {_fmt_date(getattr(doc, 'delivery_date', None))}")
    y -= 14
    c.drawString(40, y, f"Vendor: {getattr(doc.vendor, 'vendor_name', '-')}")
    y -= 14
    if getattr(doc, "quotation_no", None):
        c.drawString(40, y, f"Quotation: {doc.quotation_no} ({_fmt_date(doc.quotation_date)})")
        y -= 14

    bill_to = _address_lines(getattr(doc, "billing_address", None))
    if bill_to:
        c.setFont("Helvetica-Bold", 9)
        c.drawString(40, y, "Bill to:")
        c.setFont("Helvetica", 9)
        for line in bill_to:
            y -= 11
            c.drawString(40, y, line[:90])
        y -= 6
    y -= 16

    c.setFont("Helvetica-Bold", 9)
    c.drawString(40, y, "#")
    c.drawString(60, y, "Item")
    c.drawRightString(330, y, "Qty")
    c.drawRightString(400, y, "Rate")
    c.drawRightString(470, y, "Tax")
    c.drawRightString(width - 40, y, "Amount")
    y -= 4
    c.line(40, y, width - 40, y)
    y -= 12

    for li in doc.items or []:
        # keep space under the last row for the closing rule and totals
        y = _make_room(c, y, 80)
        c.setFont("Helvetica", 9)

        name = getattr(getattr(li, "item", None), "item", None) or f"Item {li.item_id}"
        tax = _d(li.cgst_amt) + _d(li.sgst_amt) + _d(li.igst_amt)
        c.drawString(40, y, str(li.serial_no))
        c.drawString(60, y, str(name)[:45])
        c.drawRightString(330, y, _qty(li.qty))
        c.drawRightString(400, y, _money(li.rate))
        c.drawRightString(470, y, _money(tax))
        c.drawRightString(width - 40, y, _money(li.amount))
        y -= 12

    y -= 4
    c.line(40, y, width - 40, y)
    y -= 14

    taxes = [(label, value) for label, value in (
        ("CGST", doc.total_cgst_amount),
        ("SGST", doc.total_sgst_amount),
        ("IGST", doc.total_igst_amount),
    ) if _d(value)]
    y = _make_room(c, y, 12 * len(taxes) + 18)
    c.setFont("Helvetica", 9)
    for label, value in taxes:
        c.drawRightString(470, y, label)
        c.drawRightString(width - 40, y, _money(value))
        y -= 12

    c.setFont("Helvetica-Bold", 10)
    c.drawRightString(470, y, "Total")
    c.drawRightString(width - 40, y, _money(doc.amount))
    y -= 18

    y = _make_room(c, y, 20)
    c.setFont("Helvetica", 9)
    c.drawString(40, y, doc.amount_in_words or amount_in_words(doc.amount))
    y -= 20

    for heading, text in (("Note", getattr(doc, "note", None)), ("Terms", getattr(doc, "terms", None))):
        if text:
            lines = str(text).splitlines()[:8]
            y = _make_room(c, y, 11 * len(lines) + 14)
            c.setFont("Helvetica-Bold", 9)
            c.drawString(40, y, f"{heading}:")
            c.setFont("Helvetica", 9)
            for line in lines:
                y -= 11
                c.drawString(40, y, line[:100])
            y -= 14

    c.showPage()
    c.save()
    buf.seek(0)
    return buf.getvalue()
