from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from erp.db.base import Base, MYSQL_ARGS


class Role(Base):
    __tablename__ = "roles"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True)
    name = Column(String(120), unique=True, nullable=False)
    description = Column(String(255))

    users = relationship("User", secondary="user_roles", back_populates="roles")
    permissions = relationship("Permission", secondary="role_permissions", back_populates="roles")


class RolePermission(Base):
    __tablename__ = "role_permissions"
    __table_args__ = MYSQL_ARGS

    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    permission_id = Column(Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True)


class Permission(Base):
    __tablename__ = "permissions"
    __table_args__ = MYSQL_ARGS

    id = Column(Integer, primary_key=True)
    code = Column(String(120), unique=True, nullable=False)   # e.g. "APPROVE:WORK_ORDERS:L1"
    label = Column(String(255), nullable=False)               # UI label
    module = Column(String(120), nullable=False)              # e.g. "work_orders"

    roles = relationship("Role", secondary="role_permissions", back_populates="permissions")
