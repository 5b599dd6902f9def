# backend/scripts/seed_directory_data.py
"""
Create the directory tables and seed them with an admin account plus the
default categories and locations. Safe to run more than once.

    python -m scripts.seed_directory_data
"""
import logging

from app.auth import get_password_hash
from app.core.settings import get_settings
from app.db import Base, SessionLocal, engine
from app.enums import UserRole
from app.models import Category, Location, User

logger = logging.getLogger(__name__)

# ----------------------------
# Tunables
# ----------------------------
CATEGORIES = [
    "Salon & Beauty",
    "Restaurants & Food",
    "Retail & Shopping",
    "Health & Medical",
    "Repair Services",
    "Education",
    "Transportation",
    "Technology",
    "Financial Services",
    "Entertainment",
]
LOCATIONS = [
    "Nyarugenge",
    "Kicukiro",
    "Gasabo",
    "Huye",
    "Musanze",
    "Rubavu",
    "Muhanga",
    "Rusizi",
    "Nyagatare",
    "Rwamagana",
]


def create_admin(db, settings):
    admin = db.query(User).filter(User.email == settings.admin_email).first()
    if admin:
        return admin
    admin = User(
        name=settings.admin_name,
        email=settings.admin_email,
        password_hash=get_password_hash(settings.admin_password),
        role=UserRole.ADMIN,
    )
    db.add(admin)
    db.commit()
    logger.info(f"Created admin user {settings.admin_email}")
    return admin


def create_named(db, model, names):
    existing = {row.name for row in db.query(model).all()}
    created = 0
    for name in names:
        if name not in existing:
            db.add(model(name=name))
            created += 1
    db.commit()
    logger.info(f"Inserted {created} {model.__tablename__}")
    return created


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = get_settings()

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    db = SessionLocal()
    try:
        create_admin(db, settings)
        create_named(db, Category, CATEGORIES)
        create_named(db, Location, LOCATIONS)
    finally:
        db.close()

    logger.info("Database initialization completed successfully")


if __name__ == "__main__":
    main()
