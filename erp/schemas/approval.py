# erp/schemas/approval.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from erp.models.approval import ApprovalStatus
from erp.schemas.common import CamelModel, UserRef


class ApprovalStateOut(CamelModel):
    """Approval status, flags and stamps common to indents and orders."""
    approval_status: ApprovalStatus
    status_before_suspend: Optional[ApprovalStatus] = None
    is_approved1: bool = False
    is_approved2: bool = False
    is_complete: bool = False
    is_suspended: bool = False

    approved1_by: Optional[UserRef] = None
    approved1_at: Optional[datetime] = None
    approved2_by: Optional[UserRef] = None
    approved2_at: Optional[datetime] = None
    completed_by: Optional[UserRef] = None
    completed_at: Optional[datetime] = None
    suspended_by: Optional[UserRef] = None
    suspended_at: Optional[datetime] = None

    created_by: Optional[UserRef] = None
    updated_by: Optional[UserRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    version: int
    # filled per caller from status + permissions
    available_actions: List[str] = []
