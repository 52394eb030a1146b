import re
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from erp.services.pdf_orders import build_order_pdf

PAGE = re.compile(rb"/Type\s*/Page[^s]")


def _order(rows: int, **extra) -> SimpleNamespace:
    items = [
        SimpleNamespace(serial_no=n, item=SimpleNamespace(item=f"Item {n}"), item_id=n, qty=Decimal("1"),
                        rate=Decimal("100"), cgst_amt=Decimal("9"), sgst_amt=0, igst_amt=0, amount=Decimal("109"))
        for n in range(1, rows + 1)
    ]
    doc = SimpleNamespace(
        site=SimpleNamespace(site="Mumbai Metro Line 3"),
        vendor=SimpleNamespace(vendor_name="Shree Cement Traders"),
        delivery_date=None,
        quotation_no=None,
        billing_address=None,
        items=items,
        total_cgst_amount=Decimal("9") * rows,
        total_sgst_amount=0,
        total_igst_amount=0,
        amount=Decimal("109") * rows,
        amount_in_words=None,
        note=None,
        terms=None,
    )
    for key, value in extra.items():
        setattr(doc, key, value)
    return doc


def _pages(pdf: bytes) -> int:
    return len(PAGE.findall(pdf))


def test_short_order_fits_one_page():
    pdf = build_order_pdf(_order(3), title="PURCHASE ORDER", number="PO-1", order_date=date(2025, 6, 1))
    assert pdf.startswith(b"%PDF")
    assert _pages(pdf) == 1


def test_footer_blocks_move_to_a_new_page_when_items_fill_the_first():
    clauses = "\n".join(f"{n}. Clause {n}" for n in range(1, 9))
    # 49 rows end just above the row limit of the first page
    doc = _order(49, note=clauses, terms=clauses)
    pdf = build_order_pdf(doc, title="PURCHASE ORDER", number="PO-1", order_date=date(2025, 6, 1))
    assert _pages(pdf) == 2
