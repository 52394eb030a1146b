from datetime import date, datetime, timedelta

import pytest

from erp.core.errors import BadRequest, NotFound
from erp.db.session import SessionLocal
from erp.services.doc_numbers import (
    SITE_CODE_MISSING,
    financial_year_label,
    format_indent_no,
    format_work_order_no,
    next_indent_no,
    next_purchase_order_no,
    next_sequence,
    next_work_order_no,
)
from erp.utils.timezone import LOCAL_TZ, local_now, local_today


def test_financial_year_runs_april_to_march():
    assert financial_year_label(date(2025, 3, 31)) == "24-25"
    assert financial_year_label(date(2025, 4, 1)) == "25-26"
    assert financial_year_label(date(2099, 12, 1)) == "99-00"


def test_formats():
    assert format_indent_no(1) == "IND-00001"
    assert format_work_order_no(1) == "0001-001"
    assert format_work_order_no(999) == "0001-999"
    assert format_work_order_no(1000) == "0002-001"


def test_sequences_are_per_key_and_scope():
    with SessionLocal() as db, db.begin():
        assert next_sequence(db, "X", "a") == 1
        assert next_sequence(db, "X", "a") == 2
        assert next_sequence(db, "X", "b") == 1
        assert next_sequence(db, "Y", "a") == 1


def test_indent_and_work_order_numbers_increment():
    with SessionLocal() as db, db.begin():
        assert next_indent_no(db) == "IND-00001"
        assert next_indent_no(db) == "IND-00002"
        assert next_work_order_no(db) == "0001-001"
        assert next_work_order_no(db) == "0001-002"


def test_purchase_order_number_uses_site_code_and_financial_year(masters):
    with SessionLocal() as db, db.begin():
        first = next_purchase_order_no(db, masters["site"], on=date(2025, 7, 1))
        second = next_purchase_order_no(db, masters["site"], on=date(2025, 7, 2))
        next_year = next_purchase_order_no(db, masters["site"], on=date(2026, 4, 1))
    assert first == "DCTPL/25-26/MUM/00001"
    assert second == "DCTPL/25-26/MUM/00002"
    assert next_year == "DCTPL/26-27/MUM/00001"


def test_purchase_order_number_requires_site_code(masters):
    with SessionLocal() as db, db.begin():
        with pytest.raises(BadRequest) as exc:
            next_purchase_order_no(db, masters["site_without_code"])
    assert exc.value.message == SITE_CODE_MISSING


def test_purchase_order_number_unknown_site():
    with SessionLocal() as db, db.begin():
        with pytest.raises(NotFound):
            next_purchase_order_no(db, 12345)


def test_clock_is_naive_project_local_time():
    now = local_now()
    assert now.tzinfo is None
    expected = datetime.now(LOCAL_TZ).replace(tzinfo=None)
    assert abs(expected - now) < timedelta(seconds=5)
    assert local_today() in {now.date(), expected.date()}
