import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ADMIN_ALL_ACCESS", "true")
os.environ.setdefault("PO_AUTO_APPROVE_L2_LIMIT", "100000")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from erp.core.permissions import ROLES  # noqa: E402
from erp.core.security import hash_password  # noqa: E402
from erp.db.base import Base  # noqa: E402
from erp.db.init_db import seed  # noqa: E402
from erp.db.session import SessionLocal, engine  # noqa: E402
from erp.main import app  # noqa: E402
from erp.models import Item, Role, Site, Unit, User, Vendor  # noqa: E402
from erp.utils.jwt import create_access_refresh  # noqa: E402

PASSWORD = "changeme"


def _reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed(db, with_admin=False)
        db.commit()


def create_user(name: str, email: str, *, roles=(), is_admin: bool = False, is_active: bool = True) -> int:
    with SessionLocal() as db:
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(PASSWORD),
            is_active=is_active,
            is_admin=is_admin,
        )
        for role_name in roles:
            user.roles.append(db.query(Role).filter(Role.name == role_name).one())
        db.add(user)
        db.commit()
        return user.id


def bearer(user_id: int) -> dict:
    access, _ = create_access_refresh(str(user_id))
    return {"Authorization": f"Bearer {access}"}


@pytest.fixture(autouse=True)
def fresh_db():
    _reset_db()
    yield


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture()
def users() -> dict:
    return {
        "admin": create_user("Admin", "admin@dctpl.in", roles=[ROLES.ADMIN], is_admin=True),
        "director": create_user("Director", "director@dctpl.in", roles=[ROLES.PROJECT_DIRECTOR]),
        "manager": create_user("Manager", "manager@dctpl.in", roles=[ROLES.PURCHASE_MANAGER]),
        "manager2": create_user("Manager Two", "manager2@dctpl.in", roles=[ROLES.PURCHASE_MANAGER]),
        "engineer": create_user("Engineer", "engineer@dctpl.in", roles=[ROLES.SITE_ENGINEER]),
        "keeper": create_user("Keeper", "keeper@dctpl.in", roles=[ROLES.STORE_KEEPER]),
        "nobody": create_user("Nobody", "nobody@dctpl.in"),
    }


@pytest.fixture()
def auth(users) -> dict:
    """Authorization headers keyed like `users`."""
    return {key: bearer(user_id) for key, user_id in users.items()}


@pytest.fixture()
def masters() -> dict:
    with SessionLocal() as db:
        unit = Unit(unit_name="Nos")
        site = Site(site="Mumbai Metro Line 3", site_code="MUM", city="Mumbai")
        bare_site = Site(site="Pune Depot")
        vendor = Vendor(vendor_name="Shree Cement Traders", gst_number="27AAACS1234A1Z5")
        db.add_all([unit, site, bare_site, vendor])
        db.flush()
        cement = Item(item_code="CEM-53", item="Cement OPC 53", hsn_code="2523", unit_id=unit.id)
        steel = Item(item_code="TMT-12", item="TMT Bar 12mm", hsn_code="7214", unit_id=unit.id)
        db.add_all([cement, steel])
        db.commit()
        return {
            "unit": unit.id,
            "site": site.id,
            "site_without_code": bare_site.id,
            "vendor": vendor.id,
            "cement": cement.id,
            "steel": steel.id,
        }
