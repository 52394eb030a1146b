from __future__ import annotations

import enum

from sqlalchemy import Column, Integer, Boolean, DateTime, Enum, ForeignKey, Numeric
from sqlalchemy.orm import declared_attr, relationship

from erp.utils.timezone import local_now

Money = Numeric(14, 2)
Qty = Numeric(14, 4)
Percent = Numeric(5, 2)


class ApprovalStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    APPROVED_LEVEL_1 = "APPROVED_LEVEL_1"
    APPROVED_LEVEL_2 = "APPROVED_LEVEL_2"
    COMPLETED = "COMPLETED"
    SUSPENDED = "SUSPENDED"


def _user_fk(nullable: bool = True) -> Column:
    return Column(Integer, ForeignKey("users.id"), nullable=nullable, index=True)


class ApprovalMixin:
    """
    Approval state + audit stamps shared by indents, work orders and purchase orders.

    The boolean flags mirror approval_status and are kept for list filters and
    for restoring the status of rows suspended before status_before_suspend existed.
    """

    approval_status = Column(
        Enum(ApprovalStatus, name="approval_status"),
        nullable=False,
        default=ApprovalStatus.DRAFT,
        index=True,
    )
    status_before_suspend = Column(Enum(ApprovalStatus, name="approval_status_before_suspend"), nullable=True)

    is_approved1 = Column(Boolean, nullable=False, default=False)
    is_approved2 = Column(Boolean, nullable=False, default=False)
    is_complete = Column(Boolean, nullable=False, default=False)
    is_suspended = Column(Boolean, nullable=False, default=False)

    approved1_at = Column(DateTime, nullable=True)
    approved2_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    suspended_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=local_now)
    updated_at = Column(DateTime, nullable=False, default=local_now, onupdate=local_now)

    @declared_attr
    def approved1_by_id(cls):
        return _user_fk()

    @declared_attr
    def approved2_by_id(cls):
        return _user_fk()

    @declared_attr
    def completed_by_id(cls):
        return _user_fk()

    @declared_attr
    def suspended_by_id(cls):
        return _user_fk()

    @declared_attr
    def created_by_id(cls):
        return _user_fk()

    @declared_attr
    def updated_by_id(cls):
        return _user_fk()

    @declared_attr
    def approved1_by(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.approved1_by_id")

    @declared_attr
    def approved2_by(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.approved2_by_id")

    @declared_attr
    def completed_by(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.completed_by_id")

    @declared_attr
    def suspended_by(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.suspended_by_id")

    @declared_attr
    def created_by(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.created_by_id")

    @declared_attr
    def updated_by(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.updated_by_id")
