# erp/core/access_policy.py
"""
Declarative API access table: path prefix + HTTP method -> required permissions.

Prefixes are relative to the API mount point (settings.API_V1_STR); callers
pass the request path through `relative_api_path` first.

Resolution is longest-prefix: the most specific matching rule wins regardless
of its position in the table. A path with no rule only needs authentication.
All permissions listed for a method must be held.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from erp.core.permissions import PERMISSIONS as P


@dataclass(frozen=True)
class ApiAccessRule:
    prefix: str
    methods: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    # used when the method has no entry of its own
    permissions: Tuple[str, ...] = ()

    def required_for(self, method: str) -> Tuple[str, ...]:
        return self.methods.get(method.upper(), self.permissions)


def _crud(prefix: str, read: str, edit: str, delete: str, create: Optional[str] = None) -> ApiAccessRule:
    return ApiAccessRule(
        prefix=prefix,
        methods={
            "GET": (read,),
            "POST": (create or edit,),
            "PATCH": (edit,),
            "DELETE": (delete,),
        },
    )


API_ACCESS_RULES: List[ApiAccessRule] = [
    _crud("/sites", P.READ_SITES, P.EDIT_SITES, P.DELETE_SITES),
    _crud("/site-delivery-addresses", P.READ_SITES, P.EDIT_SITES, P.DELETE_SITES),
    _crud("/vendors", P.READ_VENDORS, P.EDIT_VENDORS, P.DELETE_VENDORS),
    _crud("/items", P.READ_ITEMS, P.EDIT_ITEMS, P.DELETE_ITEMS),
    _crud("/units", P.READ_UNITS, P.EDIT_UNITS, P.DELETE_UNITS),
    _crud("/billing-addresses", P.READ_BILLING_ADDRESSES, P.EDIT_BILLING_ADDRESSES,
          P.DELETE_BILLING_ADDRESSES),
    _crud("/payment-terms", P.READ_PAYMENT_TERMS, P.EDIT_PAYMENT_TERMS, P.DELETE_PAYMENT_TERMS),
    _crud("/indents", P.READ_INDENTS, P.EDIT_INDENTS, P.DELETE_INDENTS, create=P.CREATE_INDENTS),
    _crud("/work-orders", P.READ_WORK_ORDERS, P.EDIT_WORK_ORDERS, P.DELETE_WORK_ORDERS,
          create=P.CREATE_WORK_ORDERS),
    _crud("/purchase-orders", P.READ_PURCHASE_ORDERS, P.EDIT_PURCHASE_ORDERS,
          P.DELETE_PURCHASE_ORDERS, create=P.CREATE_PURCHASE_ORDERS),
]


def find_access_rule(path: str, rules: Sequence[ApiAccessRule] = API_ACCESS_RULES) -> Optional[ApiAccessRule]:
    match: Optional[ApiAccessRule] = None
    for r in rules:
        if _prefix_matches(path, r.prefix) and (match is None or len(r.prefix) > len(match.prefix)):
            match = r
    return match


def resolve_access(path: str, method: str, rules: Sequence[ApiAccessRule] = API_ACCESS_RULES) -> Tuple[str, ...]:
    """Permissions required for (path, method); empty tuple = auth only."""
    rule = find_access_rule(path, rules)
    if rule is None:
        return ()
    return rule.required_for(method)


def relative_api_path(path: str, mount: str) -> str:
    """'/api/v1/indents/3' under mount '/api/v1' -> '/indents/3'."""
    mount = (mount or "").rstrip("/")
    if mount and _prefix_matches(path, mount):
        return path[len(mount):] or "/"
    return path


def _prefix_matches(path: str, prefix: str) -> bool:
    # "/items" must not swallow "/items-archive"
    if not path.startswith(prefix):
        return False
    if prefix.endswith("/") or len(path) == len(prefix):
        return True
    return path[len(prefix)] == "/"
