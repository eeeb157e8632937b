"""Seeding creates the default super user and sample catalog exactly once."""
from models.catalog import Category, Project, Unit
from models.material import Material, MaterialUnit
from models.users import Role, User
from seed import ADMIN_PASSWORD, CATEGORIES, MATERIALS, PROJECTS, UNITS, seed_database


def test_seed_is_idempotent(db_session):
    assert seed_database(db_session) is True
    assert seed_database(db_session) is False

    assert db_session.query(User).count() == 1
    assert db_session.query(Project).count() == len(PROJECTS)
    assert db_session.query(Category).count() == len(CATEGORIES)
    assert db_session.query(Unit).count() == len(UNITS)
    assert db_session.query(Material).count() == len(MATERIALS)


def test_seeded_admin(db_session):
    seed_database(db_session)

    admin = db_session.query(User).filter(User.username == "admin").one()
    assert admin.role is Role.SUPER_USER
    assert admin.password_hash != ADMIN_PASSWORD


def test_every_material_has_one_primary_unit(db_session):
    seed_database(db_session)

    for material in db_session.query(Material):
        primaries = [link for link in material.material_units if link.is_primary]
        assert len(primaries) == 1
    assert db_session.query(MaterialUnit).count() == 6


def test_admin_can_sign_in_after_seed(client, db_session):
    seed_database(db_session)

    resp = client.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "SUPER_USER"
