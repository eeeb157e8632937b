"""
Pytest fixtures for the inventory backend tests.

Provides an in-memory database shared by the app and the tests, a test
client per Route Gate mode, and users for every role.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import create_app
from models.catalog import Category, Project, Unit
from models.material import Material, MaterialUnit
from models.stock import Inflow, Outflow
from models.users import Role, User
from utils import hashing
from utils.tokenJWT import create_session_token

# Keep password hashing fast in tests
hashing.BCRYPT_ROUNDS = 4

PASSWORD = "secret123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope='function')
def db_session():
    """Fresh schema for each test."""
    import models.log  # noqa: F401
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _make_client(enable_route_gate: bool) -> TestClient:
    app = create_app(enable_route_gate=enable_route_gate)
    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture(scope='function')
def client(db_session):
    """Full application, Route Gate included."""
    return _make_client(enable_route_gate=True)


@pytest.fixture(scope='function')
def api_client(db_session):
    """Application without the Route Gate, to exercise the handler guards alone."""
    return _make_client(enable_route_gate=False)


def make_user(session, username, role, name=None, is_active=True):
    user = User(
        name=name or username.title(),
        username=username,
        password_hash=hashing.get_password_hash(PASSWORD),
        role=role,
        is_active=is_active,
    )
    session.add(user)
    session.commit()
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_session_token(user)}"}


@pytest.fixture
def super_user(db_session):
    return make_user(db_session, "admin", Role.SUPER_USER, name="Super Admin")


@pytest.fixture
def editor(db_session):
    return make_user(db_session, "editor", Role.EDITOR)


@pytest.fixture
def viewer(db_session):
    return make_user(db_session, "viewer", Role.VIEWER)


@pytest.fixture
def admin_headers(super_user):
    return auth_headers(super_user)


@pytest.fixture
def editor_headers(editor):
    return auth_headers(editor)


@pytest.fixture
def viewer_headers(viewer):
    return auth_headers(viewer)


# ---- Inventory data ----

@pytest.fixture
def catalog(db_session):
    """One project, category and unit."""
    project = Project(name="Tower A", description="Main tower")
    category = Category(name="Cement & Concrete")
    bags = Unit(name="Bags", abbreviation="bags")
    tons = Unit(name="Tons", abbreviation="tons")
    db_session.add_all([project, category, bags, tons])
    db_session.commit()
    return {"project": project, "category": category, "unit": bags, "alt_unit": tons}


def make_material(session, name, category, unit, min_stock_level=None):
    material = Material(name=name, category_id=category.id, min_stock_level=min_stock_level)
    material.material_units = [MaterialUnit(unit_id=unit.id, is_primary=True)]
    session.add(material)
    session.commit()
    return material


def add_inflow(session, material, unit, project, user, quantity, when=None, created_at=None):
    inflow = Inflow(
        material_id=material.id,
        unit_id=unit.id,
        project_id=project.id,
        quantity=Decimal(str(quantity)),
        delivery_date=when or datetime(2024, 1, 1),
        received_by="Store keeper",
        supplier_name="Acme Supplies",
        purpose="Foundation",
        created_by=user.id,
    )
    if created_at is not None:
        inflow.created_at = created_at
    session.add(inflow)
    session.commit()
    return inflow


def add_outflow(session, material, unit, project, user, quantity, when=None, created_at=None):
    outflow = Outflow(
        material_id=material.id,
        unit_id=unit.id,
        project_id=project.id,
        quantity=Decimal(str(quantity)),
        release_date=when or datetime(2024, 1, 2),
        authorized_by="Site manager",
        received_by="Foreman",
        purpose="Foundation",
        created_by=user.id,
    )
    if created_at is not None:
        outflow.created_at = created_at
    session.add(outflow)
    session.commit()
    return outflow
