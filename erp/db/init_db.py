# erp/db/init_db.py
from __future__ import annotations

import argparse

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from erp.core.config import settings
from erp.core.permissions import ROLES_PERMISSIONS, all_permission_codes, permission_module
from erp.core.security import hash_password
from erp.db.base import Base
from erp.db.session import engine

# Import all models so metadata is complete
from erp.models import (  # noqa: F401
    User, Role, Permission, Site, Vendor, Unit, Item, Indent, WorkOrder, PurchaseOrder,
    AuditLog, DocNumberSeries)


def seed_permissions(db: Session) -> None:
    """
    Seed ONLY missing permission codes; safe to run multiple times.
    """
    existing = {code for (code,) in db.query(Permission.code).all()}
    for code in all_permission_codes():
        if code in existing:
            continue
        # "APPROVE:PURCHASE_ORDERS:L1" -> "Purchase Orders - Approve L1"
        parts = code.split(":")
        action = " ".join([parts[0].title(), *parts[2:]])
        label = f"{permission_module(code).replace('_', ' ').title()} - {action}"
        db.add(Permission(code=code, label=label, module=permission_module(code)))
    db.flush()


def seed_roles(db: Session) -> None:
    """Create missing roles and grant any permission a role is missing."""
    perms = {p.code: p for p in db.query(Permission).all()}
    for name, codes in ROLES_PERMISSIONS.items():
        role = db.query(Role).filter(Role.name == name).first()
        if not role:
            role = Role(name=name, description=name.replace("_", " ").title())
            db.add(role)
        have = {p.code for p in role.permissions}
        for code in codes:
            if code not in have and code in perms:
                role.permissions.append(perms[code])
    db.flush()


def seed_admin(db: Session, email: str | None = None, password: str | None = None) -> User:
    email = (email or settings.ADMIN_EMAIL).strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user
    user = User(
        name="Administrator",
        email=email,
        password_hash=hash_password(password or settings.ADMIN_PASSWORD),
        is_active=True,
        is_admin=True,
    )
    admin_role = db.query(Role).filter(Role.name == "admin").first()
    if admin_role:
        user.roles.append(admin_role)
    db.add(user)
    db.flush()
    return user


def seed(db: Session, *, with_admin: bool = True) -> None:
    seed_permissions(db)
    seed_roles(db)
    if with_admin:
        seed_admin(db)


def run(fresh: bool = False, with_admin: bool = True) -> None:
    if fresh:
        print("WARNING: Dropping ALL tables (dev only) …")
        Base.metadata.drop_all(bind=engine)

    print("Creating all missing tables …")
    Base.metadata.create_all(bind=engine)
    print("Existing tables:", sorted(inspect(engine).get_table_names()))

    try:
        with Session(engine) as db:
            seed(db, with_admin=with_admin)
            db.commit()
            print("Permissions, roles" + (" and admin user" if with_admin else "") + " seeded.")
    except SQLAlchemyError as e:
        print("Seeding failed:", e)
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Initialize DB (create tables, seed permissions, roles and admin).")
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Drop & recreate all tables (DEV ONLY).",
    )
    parser.add_argument(
        "--no-admin",
        action="store_true",
        help="Skip creating the ADMIN_EMAIL user.",
    )
    args = parser.parse_args()
    run(fresh=args.fresh, with_admin=not args.no_admin)
