from fastapi.testclient import TestClient


def _create(client, auth, masters, who="manager", amount="250000.00"):
    payload = {
        "siteId": masters["site"],
        "vendorId": masters["vendor"],
        "workOrderDate": "2025-06-10",
        "amount": amount,
        "totalCgstAmount": "19067.80",
        "note": "Shuttering labour for block C",
        "workOrderItems": [
            {"itemId": masters["cement"], "sacCode": "995454", "qty": "100", "rate": "1000",
             "cgstPercent": "9", "sgstPercent": "9", "amount": "100000"},
            {"itemId": masters["steel"], "qty": "25", "rate": "4000", "amount": "100000"},
        ],
    }
    response = client.post("/api/work-orders", json=payload, headers=auth[who])
    assert response.status_code == 201, response.text
    return response.json()


def test_create_defaults_and_numbering(client: TestClient, auth, masters) -> None:
    first = _create(client, auth, masters)
    second = _create(client, auth, masters)

    assert first["workOrderNo"] == "0001-001"
    assert second["workOrderNo"] == "0001-002"
    assert first["type"] == "SUB_CONTRACT"
    assert first["woStatus"] == "HOLD"
    assert first["approvalStatus"] == "DRAFT"
    assert first["amountInWords"] == "Rupees Two Lakh Fifty Thousand Only"
    assert first["vendor"]["vendorName"] == "Shree Cement Traders"
    assert [i["serialNo"] for i in first["workOrderItems"]] == [1, 2]
    assert first["workOrderItems"][0]["sacCode"] == "995454"
    assert first["availableActions"] == ["approve1"]


def test_engineer_can_read_but_not_create(client: TestClient, auth, masters) -> None:
    wo = _create(client, auth, masters)
    assert client.get(f"/api/work-orders/{wo['id']}", headers=auth["engineer"]).status_code == 200
    denied = client.post(
        "/api/work-orders",
        json={"siteId": masters["site"], "vendorId": masters["vendor"],
              "workOrderItems": [{"itemId": masters["cement"], "qty": 1, "rate": 1}]},
        headers=auth["engineer"],
    )
    assert denied.status_code == 403


def test_unknown_vendor_is_rejected(client: TestClient, auth, masters) -> None:
    response = client.post(
        "/api/work-orders",
        json={"siteId": masters["site"], "vendorId": 4040,
              "workOrderItems": [{"itemId": masters["cement"], "qty": 1, "rate": 1}]},
        headers=auth["manager"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid vendor"


def test_full_lifecycle_and_completed_lock(client: TestClient, auth, masters) -> None:
    wo = _create(client, auth, masters)
    url = f"/api/work-orders/{wo['id']}"

    assert client.patch(url, json={"statusAction": "approve1"}, headers=auth["manager"]).status_code == 200
    assert client.patch(url, json={"statusAction": "approve2"}, headers=auth["director"]).status_code == 200
    done = client.patch(url, json={"statusAction": "complete"}, headers=auth["director"])
    assert done.status_code == 200
    body = done.json()
    assert body["approvalStatus"] == "COMPLETED"
    assert body["isApproved1"] and body["isApproved2"] and body["isComplete"]
    assert body["completedBy"]["name"] == "Director"

    suspend = client.patch(url, json={"statusAction": "suspend"}, headers=auth["director"])
    assert suspend.status_code == 400
    assert suspend.json()["message"] == "Completed work order cannot be suspended"

    delete = client.delete(url, headers=auth["manager"])
    assert delete.status_code == 400
    assert delete.json()["message"] == (
        "Cannot delete a work order that is not in DRAFT status or is already completed"
    )


def test_complete_needs_level_two(client: TestClient, auth, masters) -> None:
    wo = _create(client, auth, masters)
    url = f"/api/work-orders/{wo['id']}"
    client.patch(url, json={"statusAction": "approve1"}, headers=auth["manager"])
    response = client.patch(url, json={"statusAction": "complete"}, headers=auth["director"])
    assert response.status_code == 400
    assert response.json()["message"] == "Only level 2 approved can be completed"


def test_header_update_refreshes_amount_in_words(client: TestClient, auth, masters) -> None:
    wo = _create(client, auth, masters)
    response = client.patch(
        f"/api/work-orders/{wo['id']}",
        json={"amount": "1500.25", "woStatus": "OPEN", "version": wo["version"]},
        headers=auth["manager"],
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["amount"] == 1500.25
    assert body["amountInWords"] == "Rupees One Thousand Five Hundred and Paise Twenty Five Only"
    assert body["woStatus"] == "OPEN"
    assert body["version"] == wo["version"] + 1


def test_explicit_null_on_required_header_is_ignored(client: TestClient, auth, masters) -> None:
    wo = _create(client, auth, masters)
    response = client.patch(
        f"/api/work-orders/{wo['id']}",
        json={"vendorId": None, "amount": None, "note": None},
        headers=auth["manager"],
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["vendorId"] == masters["vendor"]
    assert body["amount"] == 250000.0
    assert body["note"] is None


def test_print_renders_pdf(client: TestClient, auth, masters) -> None:
    wo = _create(client, auth, masters)
    response = client.get(f"/api/work-orders/{wo['id']}/print", headers=auth["engineer"])
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="WO_0001-001.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_list_filters_by_vendor_and_search(client: TestClient, auth, masters) -> None:
    _create(client, auth, masters)
    _create(client, auth, masters)

    by_vendor = client.get("/api/work-orders", params={"vendor": masters["vendor"]}, headers=auth["keeper"])
    # store keepers have no work order access at all
    assert by_vendor.status_code == 403

    listing = client.get("/api/work-orders", params={"search": "Shree"}, headers=auth["engineer"]).json()
    assert listing["total"] == 2
    assert {r["workOrderNo"] for r in listing["data"]} == {"0001-001", "0001-002"}

    none = client.get("/api/work-orders", params={"vendor": 9999}, headers=auth["engineer"]).json()
    assert none["total"] == 0
    assert none["totalPages"] == 0


def test_invalid_item_quantity_reports_the_field(client: TestClient, auth, masters) -> None:
    wo = _create(client, auth, masters)
    for qty in ("-1", "99999999999"):
        response = client.patch(
            f"/api/work-orders/{wo['id']}",
            json={"workOrderItems": [{"itemId": masters["cement"], "qty": qty, "rate": "10"}]},
            headers=auth["manager"],
        )
        assert response.status_code == 400, qty
        body = response.json()
        assert body["message"] == "Validation error"
        assert body["details"][0]["field"] == "workOrderItems.0.qty"

    # nothing changed
    unchanged = client.get(f"/api/work-orders/{wo['id']}", headers=auth["manager"]).json()
    assert [i["id"] for i in unchanged["workOrderItems"]] == [i["id"] for i in wo["workOrderItems"]]
    assert unchanged["version"] == wo["version"]


def test_level_two_approval_replaces_items(client: TestClient, auth, masters) -> None:
    wo = _create(client, auth, masters)
    url = f"/api/work-orders/{wo['id']}"
    kept, dropped = wo["workOrderItems"]
    assert client.patch(url, json={"statusAction": "approve1"}, headers=auth["manager"]).status_code == 200

    response = client.patch(
        url,
        json={"statusAction": "approve2", "workOrderItems": [
            {"id": kept["id"], "itemId": masters["cement"], "qty": "10", "rate": "1000", "amount": "10000"},
            {"itemId": masters["steel"], "qty": "20", "rate": "4000", "amount": "80000"},
        ]},
        headers=auth["director"],
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["approvalStatus"] == "APPROVED_LEVEL_2"
    assert body["approved2By"]["name"] == "Director"

    rows = body["workOrderItems"]
    assert [r["serialNo"] for r in rows] == [1, 2]
    assert rows[0]["id"] == kept["id"]
    assert rows[0]["qty"] == 10.0
    assert rows[1]["id"] not in {kept["id"], dropped["id"]}
    assert rows[1]["qty"] == 20.0
