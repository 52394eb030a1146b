from fastapi.testclient import TestClient

from erp.db.session import SessionLocal
from erp.models import AuditLog
from erp.services.doc_numbers import SITE_CODE_MISSING, financial_year_label
from erp.utils.timezone import local_today

SMALL = "50000.00"
LARGE = "250000.00"


def _create(client, auth, masters, who="manager", amount=SMALL, site=None):
    payload = {
        "siteId": site or masters["site"],
        "vendorId": masters["vendor"],
        "purchaseOrderDate": "2025-06-15",
        "amount": amount,
        "remarks": "Monthly cement requirement",
        "purchaseOrderItems": [
            {"itemId": masters["cement"], "qty": "100", "rate": "350", "discountPercent": "2",
             "disAmt": "700", "amount": "34300"},
            {"itemId": masters["steel"], "qty": "10", "rate": "1570", "approved1Qty": "8", "amount": "15700"},
        ],
    }
    return client.post("/api/purchase-orders", json=payload, headers=auth[who])


def _created(client, auth, masters, **kw):
    response = _create(client, auth, masters, **kw)
    assert response.status_code == 201, response.text
    return response.json()


def _act(client, auth, po, action, who, **extra):
    return client.patch(f"/api/purchase-orders/{po['id']}", json={"statusAction": action, **extra},
                        headers=auth[who])


def test_number_is_scoped_by_company_year_and_site(client: TestClient, auth, masters) -> None:
    fy = financial_year_label(local_today())
    first = _created(client, auth, masters)
    second = _created(client, auth, masters)
    assert first["purchaseOrderNo"] == f"DCTPL/{fy}/MUM/00001"
    assert second["purchaseOrderNo"] == f"DCTPL/{fy}/MUM/00002"
    assert first["poStatus"] == "HOLD"
    assert first["purchaseOrderItems"][0]["discountPercent"] == 2.0
    assert first["amountInWords"] == "Rupees Fifty Thousand Only"


def test_site_without_code_cannot_raise_orders(client: TestClient, auth, masters) -> None:
    response = _create(client, auth, masters, site=masters["site_without_code"])
    assert response.status_code == 400
    assert response.json()["message"] == SITE_CODE_MISSING


def test_creator_cannot_approve(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters)
    response = _act(client, auth, po, "approve1", "manager")
    assert response.status_code == 403
    assert response.json()["message"] == "Creator cannot approve level 1"


def test_admin_creator_cannot_approve_either(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters, who="admin")
    response = _act(client, auth, po, "approve1", "admin")
    assert response.status_code == 403
    assert response.json()["message"] == "Creator cannot approve level 1"


def test_level_one_approver_cannot_approve_level_two(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters, amount=LARGE)
    l1 = _act(client, auth, po, "approve1", "admin")
    assert l1.status_code == 200
    assert l1.json()["approvalStatus"] == "APPROVED_LEVEL_1"

    l2 = _act(client, auth, po, "approve2", "admin")
    assert l2.status_code == 403
    assert l2.json()["message"] == "Level 1 approver cannot approve level 2"


def test_small_order_is_auto_approved_to_level_two(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters, amount=SMALL)
    response = _act(client, auth, po, "approve1", "manager2")
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["approvalStatus"] == "APPROVED_LEVEL_2"
    assert body["isApproved1"] and body["isApproved2"]
    assert body["approved1By"]["name"] == "Manager Two"
    assert body["approved2By"]["name"] == "Manager Two"
    # approved1 qty when present, otherwise ordered qty
    assert [i["approved2Qty"] for i in body["purchaseOrderItems"]] == [100.0, 8.0]

    with SessionLocal() as db:
        last = (
            db.query(AuditLog)
            .filter(AuditLog.table_name == "purchase_orders", AuditLog.action == "STATUS")
            .order_by(AuditLog.id.desc())
            .first()
        )
        assert last.new_values["auto_approved_level_2"] is True


def test_large_order_needs_a_second_approver(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters, amount=LARGE)
    l1 = _act(client, auth, po, "approve1", "manager2")
    assert l1.json()["approvalStatus"] == "APPROVED_LEVEL_1"
    assert all(i["approved2Qty"] is None for i in l1.json()["purchaseOrderItems"])

    denied = _act(client, auth, po, "approve2", "manager2")
    assert denied.status_code == 403
    assert denied.json()["message"] == "You do not have permission to approve (level 2) this purchase order"

    l2 = _act(client, auth, po, "approve2", "director")
    assert l2.status_code == 200
    assert l2.json()["approvalStatus"] == "APPROVED_LEVEL_2"
    assert l2.json()["approved2By"]["name"] == "Director"


def test_project_director_approves_both_levels_at_once(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters, amount=LARGE)
    rows = po["purchaseOrderItems"]
    response = _act(
        client, auth, po, "approve1", "director",
        purchaseOrderItems=[
            {"id": rows[0]["id"], "itemId": masters["cement"], "qty": "100", "rate": "350", "approved1Qty": "90"},
            {"id": rows[1]["id"], "itemId": masters["steel"], "qty": "10", "rate": "1570"},
        ],
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["approvalStatus"] == "APPROVED_LEVEL_2"
    assert [i["approved2Qty"] for i in body["purchaseOrderItems"]] == [90.0, 10.0]


def test_remarks_and_bill_status_need_their_own_permissions(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters)
    url = f"/api/purchase-orders/{po['id']}"

    denied = client.patch(url, json={"remarks": "changed"}, headers=auth["manager"])
    assert denied.status_code == 403
    assert denied.json()["message"] == "You do not have permission to update remarks"

    allowed = client.patch(url, json={"remarks": "changed"}, headers=auth["director"])
    assert allowed.status_code == 200
    assert allowed.json()["remarks"] == "changed"

    denied = client.patch(url, json={"billStatus": "BILLED"}, headers=auth["director"])
    assert denied.status_code == 403
    assert denied.json()["message"] == "You do not have permission to update bill status"

    allowed = client.patch(url, json={"billStatus": "BILLED"}, headers=auth["manager"])
    assert allowed.status_code == 200
    assert allowed.json()["billStatus"] == "BILLED"


def test_suspend_and_resume_keeps_level(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters, amount=LARGE)
    _act(client, auth, po, "approve1", "manager2")

    suspended = _act(client, auth, po, "suspend", "director").json()
    assert suspended["approvalStatus"] == "SUSPENDED"
    assert suspended["statusBeforeSuspend"] == "APPROVED_LEVEL_1"

    resumed = _act(client, auth, po, "unsuspend", "director").json()
    assert resumed["approvalStatus"] == "APPROVED_LEVEL_1"


def test_print_filename_has_no_slashes(client: TestClient, auth, masters) -> None:
    po = _created(client, auth, masters)
    response = client.get(f"/api/purchase-orders/{po['id']}/print", headers=auth["keeper"])
    assert response.status_code == 200
    expected = "PO_" + po["purchaseOrderNo"].replace("/", "-") + ".pdf"
    assert f'filename="{expected}"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_delete_draft_and_list(client: TestClient, auth, masters) -> None:
    keep = _created(client, auth, masters)
    drop = _created(client, auth, masters)

    assert client.delete(f"/api/purchase-orders/{drop['id']}", headers=auth["manager"]).status_code == 200

    listing = client.get("/api/purchase-orders", headers=auth["keeper"]).json()
    assert listing["total"] == 1
    assert listing["data"][0]["id"] == keep["id"]
    assert listing["data"][0]["vendor"]["vendorName"] == "Shree Cement Traders"
