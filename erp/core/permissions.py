# erp/core/permissions.py
"""
Stable permission & role identifiers plus the default role -> permission map.
Extend by adding a code here and listing it under the roles that need it.
"""
from __future__ import annotations

from typing import Dict, List


class PERMISSIONS:
    # Masters
    READ_SITES = "READ:SITES"
    EDIT_SITES = "EDIT:SITES"
    DELETE_SITES = "DELETE:SITES"
    READ_VENDORS = "READ:VENDORS"
    EDIT_VENDORS = "EDIT:VENDORS"
    DELETE_VENDORS = "DELETE:VENDORS"
    READ_ITEMS = "READ:ITEMS"
    EDIT_ITEMS = "EDIT:ITEMS"
    DELETE_ITEMS = "DELETE:ITEMS"
    READ_UNITS = "READ:UNITS"
    EDIT_UNITS = "EDIT:UNITS"
    DELETE_UNITS = "DELETE:UNITS"
    READ_BILLING_ADDRESSES = "READ:BILLING_ADDRESSES"
    EDIT_BILLING_ADDRESSES = "EDIT:BILLING_ADDRESSES"
    DELETE_BILLING_ADDRESSES = "DELETE:BILLING_ADDRESSES"
    READ_PAYMENT_TERMS = "READ:PAYMENT_TERMS"
    EDIT_PAYMENT_TERMS = "EDIT:PAYMENT_TERMS"
    DELETE_PAYMENT_TERMS = "DELETE:PAYMENT_TERMS"

    # Indents
    READ_INDENTS = "READ:INDENTS"
    CREATE_INDENTS = "CREATE:INDENTS"
    EDIT_INDENTS = "EDIT:INDENTS"
    DELETE_INDENTS = "DELETE:INDENTS"
    APPROVE_INDENTS_L1 = "APPROVE:INDENTS:L1"
    APPROVE_INDENTS_L2 = "APPROVE:INDENTS:L2"
    COMPLETE_INDENTS = "COMPLETE:INDENTS"
    SUSPEND_INDENTS = "SUSPEND:INDENTS"

    # Work orders
    READ_WORK_ORDERS = "READ:WORK_ORDERS"
    CREATE_WORK_ORDERS = "CREATE:WORK_ORDERS"
    EDIT_WORK_ORDERS = "EDIT:WORK_ORDERS"
    DELETE_WORK_ORDERS = "DELETE:WORK_ORDERS"
    APPROVE_WORK_ORDERS_L1 = "APPROVE:WORK_ORDERS:L1"
    APPROVE_WORK_ORDERS_L2 = "APPROVE:WORK_ORDERS:L2"
    COMPLETE_WORK_ORDERS = "COMPLETE:WORK_ORDERS"
    SUSPEND_WORK_ORDERS = "SUSPEND:WORK_ORDERS"

    # Purchase orders
    READ_PURCHASE_ORDERS = "READ:PURCHASE_ORDERS"
    CREATE_PURCHASE_ORDERS = "CREATE:PURCHASE_ORDERS"
    EDIT_PURCHASE_ORDERS = "EDIT:PURCHASE_ORDERS"
    DELETE_PURCHASE_ORDERS = "DELETE:PURCHASE_ORDERS"
    APPROVE_PURCHASE_ORDERS_L1 = "APPROVE:PURCHASE_ORDERS:L1"
    APPROVE_PURCHASE_ORDERS_L2 = "APPROVE:PURCHASE_ORDERS:L2"
    COMPLETE_PURCHASE_ORDERS = "COMPLETE:PURCHASE_ORDERS"
    SUSPEND_PURCHASE_ORDERS = "SUSPEND:PURCHASE_ORDERS"
    UPDATE_PURCHASE_ORDER_REMARKS = "UPDATE:PURCHASE_ORDERS:REMARKS"
    UPDATE_PURCHASE_ORDER_BILL_STATUS = "UPDATE:PURCHASE_ORDERS:BILL_STATUS"


def all_permission_codes() -> List[str]:
    return [v for k, v in vars(PERMISSIONS).items() if k.isupper() and isinstance(v, str)]


def permission_module(code: str) -> str:
    # "APPROVE:PURCHASE_ORDERS:L1" -> "purchase_orders"
    parts = code.split(":")
    return parts[1].lower() if len(parts) > 1 else parts[0].lower()


class ROLES:
    ADMIN = "admin"
    PROJECT_DIRECTOR = "project_director"
    PURCHASE_MANAGER = "purchase_manager"
    SITE_ENGINEER = "site_engineer"
    STORE_KEEPER = "store_keeper"


_READ_MASTERS = [
    PERMISSIONS.READ_SITES, PERMISSIONS.READ_VENDORS, PERMISSIONS.READ_ITEMS,
    PERMISSIONS.READ_UNITS, PERMISSIONS.READ_BILLING_ADDRESSES, PERMISSIONS.READ_PAYMENT_TERMS,
]

ROLES_PERMISSIONS: Dict[str, List[str]] = {
    ROLES.ADMIN: all_permission_codes(),
    ROLES.PROJECT_DIRECTOR: [
        *_READ_MASTERS,
        PERMISSIONS.READ_INDENTS, PERMISSIONS.EDIT_INDENTS,
        PERMISSIONS.APPROVE_INDENTS_L1, PERMISSIONS.APPROVE_INDENTS_L2,
        PERMISSIONS.COMPLETE_INDENTS, PERMISSIONS.SUSPEND_INDENTS,
        PERMISSIONS.READ_WORK_ORDERS, PERMISSIONS.EDIT_WORK_ORDERS,
        PERMISSIONS.APPROVE_WORK_ORDERS_L1, PERMISSIONS.APPROVE_WORK_ORDERS_L2,
        PERMISSIONS.COMPLETE_WORK_ORDERS, PERMISSIONS.SUSPEND_WORK_ORDERS,
        PERMISSIONS.READ_PURCHASE_ORDERS, PERMISSIONS.EDIT_PURCHASE_ORDERS,
        PERMISSIONS.APPROVE_PURCHASE_ORDERS_L1, PERMISSIONS.APPROVE_PURCHASE_ORDERS_L2,
        PERMISSIONS.COMPLETE_PURCHASE_ORDERS, PERMISSIONS.SUSPEND_PURCHASE_ORDERS,
        PERMISSIONS.UPDATE_PURCHASE_ORDER_REMARKS,
    ],
    ROLES.PURCHASE_MANAGER: [
        *_READ_MASTERS,
        PERMISSIONS.EDIT_VENDORS, PERMISSIONS.EDIT_ITEMS,
        PERMISSIONS.READ_INDENTS, PERMISSIONS.EDIT_INDENTS, PERMISSIONS.APPROVE_INDENTS_L1,
        PERMISSIONS.READ_WORK_ORDERS, PERMISSIONS.CREATE_WORK_ORDERS, PERMISSIONS.EDIT_WORK_ORDERS,
        PERMISSIONS.DELETE_WORK_ORDERS, PERMISSIONS.APPROVE_WORK_ORDERS_L1,
        PERMISSIONS.READ_PURCHASE_ORDERS, PERMISSIONS.CREATE_PURCHASE_ORDERS,
        PERMISSIONS.EDIT_PURCHASE_ORDERS, PERMISSIONS.DELETE_PURCHASE_ORDERS,
        PERMISSIONS.APPROVE_PURCHASE_ORDERS_L1, PERMISSIONS.UPDATE_PURCHASE_ORDER_BILL_STATUS,
    ],
    ROLES.SITE_ENGINEER: [
        *_READ_MASTERS,
        PERMISSIONS.READ_INDENTS, PERMISSIONS.CREATE_INDENTS, PERMISSIONS.EDIT_INDENTS,
        PERMISSIONS.DELETE_INDENTS,
        PERMISSIONS.READ_WORK_ORDERS, PERMISSIONS.READ_PURCHASE_ORDERS,
    ],
    ROLES.STORE_KEEPER: [
        *_READ_MASTERS,
        PERMISSIONS.READ_INDENTS, PERMISSIONS.READ_PURCHASE_ORDERS,
    ],
}
