import logging
import os
import sys
from decimal import Decimal

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from sqlalchemy.orm import Session

from database import SessionLocal, init_db
from models.catalog import Category, Project, Unit
from models.material import Material, MaterialUnit
from models.users import Role, User
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

# Configuration
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"

PROJECTS = [
    ("Construction Project A", "Main building construction"),
    ("Renovation Project B", "Office renovation project"),
    ("Infrastructure Project C", "Road and utilities"),
]

CATEGORIES = [
    ("Cement & Concrete", "All cement and concrete related materials"),
    ("Steel & Metal", "Steel bars, metal sheets, and fittings"),
    ("Electrical", "Wires, cables, and electrical components"),
    ("Plumbing", "Pipes, fittings, and plumbing materials"),
    ("Lumber & Wood", "Wood planks, timber, and wooden materials"),
    ("Paint & Finishing", "Paints, varnish, and finishing materials"),
]

UNITS = [
    ("Bags", "bags"),
    ("Pieces", "pcs"),
    ("Meters", "m"),
    ("Square Meters", "m²"),
    ("Cubic Meters", "m³"),
    ("Kilograms", "kg"),
    ("Tons", "tons"),
    ("Liters", "L"),
    ("Gallons", "gal"),
    ("Rolls", "rolls"),
]

# (name, description, category, [(unit, is_primary, conversion_factor)])
MATERIALS = [
    ("Portland Cement", "High-quality portland cement for construction", "Cement & Concrete",
     [("Bags", True, None)]),
    ("Steel Rebar 12mm", "12mm diameter steel reinforcement bars", "Steel & Metal",
     [("Pieces", True, None), ("Tons", False, Decimal("0.001"))]),
    ("Electrical Wire 2.5mm", "2.5mm electrical copper wire", "Electrical",
     [("Meters", True, None)]),
    ("PVC Pipe 4 inch", "4 inch PVC pipe for plumbing", "Plumbing",
     [("Pieces", True, None)]),
    ("Pine Wood Planks", "Quality pine wood planks for construction", "Lumber & Wood",
     [("Pieces", True, None)]),
]
# End Configuration


def seed_database(session: Session) -> bool:
    """Insert the default super user and sample catalog. Returns False when already seeded."""
    if session.query(User).filter(User.username == ADMIN_USERNAME).first():
        logger.info("User %r already exists, skipping seed", ADMIN_USERNAME)
        return False

    session.add(User(
        name="Super Admin",
        username=ADMIN_USERNAME,
        password_hash=get_password_hash(ADMIN_PASSWORD),
        role=Role.SUPER_USER,
    ))

    session.add_all(Project(name=name, description=description) for name, description in PROJECTS)

    categories = {name: Category(name=name, description=description) for name, description in CATEGORIES}
    session.add_all(categories.values())

    units = {name: Unit(name=name, abbreviation=abbreviation) for name, abbreviation in UNITS}
    session.add_all(units.values())
    session.flush()

    for name, description, category, unit_links in MATERIALS:
        material = Material(name=name, description=description, category_id=categories[category].id)
        material.material_units = [
            MaterialUnit(
                unit_id=units[unit].id,
                is_primary=is_primary,
                conversion_factor=factor if factor is not None else 1,
            )
            for unit, is_primary, factor in unit_links
        ]
        session.add(material)

    session.commit()
    logger.info(
        "Seeded %d projects, %d categories, %d units, %d materials",
        len(PROJECTS), len(CATEGORIES), len(UNITS), len(MATERIALS),
    )
    return True


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    init_db()
    session = SessionLocal()
    try:
        seed_database(session)
    except Exception:
        session.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
