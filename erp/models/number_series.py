from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint

from erp.db.base import Base, MYSQL_ARGS
from erp.utils.timezone import local_now


class DocNumberSeries(Base):
    __tablename__ = "doc_number_series"
    __table_args__ = (
        UniqueConstraint("key", "scope", name="uq_doc_number_series_key_scope"),
        MYSQL_ARGS,
    )

    id = Column(Integer, primary_key=True)
    key = Column(String(30), nullable=False)          # INDENT / WORK_ORDER / PURCHASE_ORDER
    scope = Column(String(60), nullable=False, default="")  # e.g. "25-26/MUM" for PO
    next_seq = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime, nullable=False, default=local_now, onupdate=local_now)
