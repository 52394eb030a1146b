from fastapi import FastAPI
from fastapi.testclient import TestClient

from erp.api.exception_handlers import register_exception_handlers
from erp.api.router import api_router
from erp.core.access_policy import ApiAccessRule, find_access_rule, relative_api_path, resolve_access
from erp.core.config import settings
from erp.core.permissions import PERMISSIONS as P


def test_method_specific_permissions():
    assert resolve_access("/indents", "GET") == (P.READ_INDENTS,)
    assert resolve_access("/indents", "POST") == (P.CREATE_INDENTS,)
    assert resolve_access("/indents/12", "PATCH") == (P.EDIT_INDENTS,)
    assert resolve_access("/purchase-orders/3", "DELETE") == (P.DELETE_PURCHASE_ORDERS,)
    assert resolve_access("/purchase-orders/3/print", "GET") == (P.READ_PURCHASE_ORDERS,)


def test_unlisted_path_needs_authentication_only():
    assert resolve_access("/auth/me", "GET") == ()
    assert find_access_rule("/reports") is None


def test_prefix_matches_on_segment_boundary():
    assert find_access_rule("/items-archive") is None
    assert find_access_rule("/items/4").prefix == "/items"


def test_longest_prefix_wins_regardless_of_order():
    rules = [
        ApiAccessRule("/docs", permissions=("DOCS",)),
        ApiAccessRule("/docs/secret", permissions=("SECRET",)),
        ApiAccessRule("/", permissions=("ANY",)),
    ]
    assert resolve_access("/docs/secret/1", "GET", rules) == ("SECRET",)
    assert resolve_access("/docs/1", "GET", rules) == ("DOCS",)
    assert resolve_access("/other", "GET", rules) == ("ANY",)


def test_fallback_permissions_for_unlisted_method():
    rule = ApiAccessRule("/x", methods={"GET": ("R",)}, permissions=("W",))
    assert rule.required_for("get") == ("R",)
    assert rule.required_for("PUT") == ("W",)


def test_request_path_is_made_relative_to_mount():
    assert relative_api_path("/api/indents/3", "/api") == "/indents/3"
    assert relative_api_path("/api/v1/indents", "/api/v1/") == "/indents"
    assert relative_api_path("/api/v1", "/api/v1") == "/"
    # only whole segments are stripped
    assert relative_api_path("/apiary/indents", "/api") == "/apiary/indents"
    assert relative_api_path("/indents", "") == "/indents"


def test_gate_applies_under_a_custom_mount(monkeypatch, auth, masters) -> None:
    monkeypatch.setattr(settings, "API_V1_STR", "/erp/v2")
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/erp/v2")
    client = TestClient(app)
    payload = {"siteId": masters["site"], "indentItems": [{"itemId": masters["cement"], "indentQty": "1"}]}

    denied = client.post("/erp/v2/indents", json=payload, headers=auth["nobody"])
    assert denied.status_code == 403
    assert denied.json()["details"] == {"missing": [P.CREATE_INDENTS]}

    assert client.get("/erp/v2/sites", headers=auth["nobody"]).status_code == 403
    assert client.post("/erp/v2/indents", json=payload, headers=auth["engineer"]).status_code == 201
