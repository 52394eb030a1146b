from types import SimpleNamespace

import pytest

from erp.core.errors import BadRequest
from erp.services.line_items import apply_line_item_plan, plan_line_items


def test_plan_updates_inserts_and_deletes():
    plan = plan_line_items(
        [1, 2, 3],
        [
            {"id": 2, "qty": 1},
            {"qty": 5},
            {"id": 99, "qty": 3},  # unknown id -> new row
        ],
    )
    assert plan.updates == [(2, 1, {"qty": 1})]
    assert plan.inserts == [(2, {"qty": 5}), (3, {"qty": 3})]
    assert plan.deletes == [1, 3]
    assert not plan.is_noop


def test_empty_submission_deletes_everything():
    plan = plan_line_items([4, 5], [])
    assert plan.updates == []
    assert plan.inserts == []
    assert plan.deletes == [4, 5]


def test_duplicate_existing_id_is_rejected():
    with pytest.raises(BadRequest) as exc:
        plan_line_items([1], [{"id": 1, "qty": 1}, {"id": 1, "qty": 2}])
    assert exc.value.details == [{"field": "items.1.id", "message": "Duplicate item id"}]


def test_apply_plan_renumbers_serials():
    rows = [
        SimpleNamespace(id=1, serial_no=1, qty=10),
        SimpleNamespace(id=2, serial_no=2, qty=20),
        SimpleNamespace(id=3, serial_no=3, qty=30),
    ]
    plan = plan_line_items([1, 2, 3], [{"id": 3, "qty": 33}, {"qty": 40}])

    apply_line_item_plan(rows, plan, SimpleNamespace)

    assert [getattr(r, "id", None) for r in rows] == [3, None]
    assert [r.serial_no for r in rows] == [1, 2]
    assert [r.qty for r in rows] == [33, 40]


def test_resubmitting_unchanged_list_only_updates():
    incoming = [{"id": 7, "qty": 1}, {"id": 8, "qty": 2}]
    plan = plan_line_items([7, 8], incoming)
    assert plan.inserts == []
    assert plan.deletes == []
    assert [(row_id, serial) for row_id, serial, _ in plan.updates] == [(7, 1), (8, 2)]
    # the caller's dicts are left as they were
    assert incoming[0] == {"id": 7, "qty": 1}
