from sqlalchemy import Column, Integer, String, DateTime, JSON

from erp.db.base import Base, MYSQL_ARGS
from erp.utils.timezone import local_now


class AuditLog(Base):
    """
    Every CREATE / UPDATE / STATUS / DELETE on a document writes here,
    in the same transaction as the change itself.
    """
    __tablename__ = "audit_logs"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, nullable=True)  # system jobs may be null
    action = Column(String(20), nullable=False)

    table_name = Column(String(255), nullable=False)
    record_id = Column(String(100), nullable=False)  # generic pk, stored as string

    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)

    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=local_now, nullable=False)
