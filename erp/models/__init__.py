# erp/models/__init__.py
from .user import User, UserRole, UserPermission
from .role import Role, RolePermission, Permission
from .masters import Site, SiteDeliveryAddress, Vendor, Unit, Item, BillingAddress, PaymentTerm
from .approval import ApprovalStatus
from .indent import Indent, IndentItem
from .work_order import WorkOrder, WorkOrderDetail, WorkOrderType, WorkOrderStatus, ChargeStatus
from .purchase_order import PurchaseOrder, PurchaseOrderDetail, PurchaseOrderStatus
from .audit import AuditLog
from .number_series import DocNumberSeries

__all__ = [
    "User",
    "UserRole",
    "UserPermission",
    "Role",
    "RolePermission",
    "Permission",
    "Site",
    "SiteDeliveryAddress",
    "Vendor",
    "Unit",
    "Item",
    "BillingAddress",
    "PaymentTerm",
    "ApprovalStatus",
    "Indent",
    "IndentItem",
    "WorkOrder",
    "WorkOrderDetail",
    "WorkOrderType",
    "WorkOrderStatus",
    "ChargeStatus",
    "PurchaseOrder",
    "PurchaseOrderDetail",
    "PurchaseOrderStatus",
    "AuditLog",
    "DocNumberSeries",
]
