# backend/tests/unit/conftest.py
import os

# cheap hashing and no Postgres driver needed while importing app.db
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db import Base, get_db
from app import models
from app.auth import get_password_hash
from app.enums import UserRole
from app.services.auth_service import AuthService
from app.services.image_storage import get_image_storage

# One in-memory DB shared across threads (TestClient) via StaticPool
engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enforce FKs in SQLite (off by default otherwise)
@event.listens_for(engine, "connect")
def _set_sqlite_pragma(dbapi_connection, _):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base.metadata.create_all(bind=engine)


class FakeImageStorage:
    """Records uploads and deletions instead of talking to Azure"""

    def __init__(self):
        self.uploaded = []
        self.deleted = []

    async def upload_image(self, file, owner_id):
        url = f"https://images.test/business-images/businesses/{owner_id}/{file.filename}"
        self.uploaded.append(url)
        return url

    async def delete_image(self, image_url):
        self.deleted.append(image_url)
        return True


@pytest.fixture
def connection():
    conn = engine.connect()
    tx = conn.begin()
    try:
        yield conn
    finally:
        tx.rollback()
        conn.close()

@pytest.fixture
def db_session(connection):
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def image_storage():
    return FakeImageStorage()

@pytest.fixture(autouse=True)
def _override_dependencies(db_session, image_storage):
    def _get_db():
        yield db_session
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    yield
    app.dependency_overrides.clear()

@pytest.fixture
def client():
    return TestClient(app)


# ----------------------------
# Directory data
# ----------------------------

def _make_user(db_session, name, email, role):
    user = models.User(
        name=name,
        email=email,
        password_hash=get_password_hash("testpass123"),
        role=role
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user

@pytest.fixture
def owner(db_session):
    return _make_user(db_session, "Owner", "owner@example.com", UserRole.USER)

@pytest.fixture
def other_user(db_session):
    return _make_user(db_session, "Other", "other@example.com", UserRole.BUSINESS_OWNER)

@pytest.fixture
def admin(db_session):
    return _make_user(db_session, "Admin", "admin@example.com", UserRole.ADMIN)

@pytest.fixture
def category(db_session):
    category = models.Category(name="Restaurants & Food")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category

@pytest.fixture
def location(db_session):
    location = models.Location(name="Kicukiro")
    db_session.add(location)
    db_session.commit()
    db_session.refresh(location)
    return location

@pytest.fixture
def make_business(db_session, owner, category, location):
    """Insert a business directly, bypassing the workflow"""
    def _make(name="Cafe X", is_approved=False, business_owner=None, **fields):
        business = models.Business(
            name=name,
            description=fields.pop("description", "Coffee and pastries"),
            phone=fields.pop("phone", "123"),
            category_id=fields.pop("category_id", category.id),
            location_id=fields.pop("location_id", location.id),
            owner_id=(business_owner or owner).id,
            is_approved=is_approved,
            **fields
        )
        db_session.add(business)
        db_session.commit()
        db_session.refresh(business)
        return business
    return _make

@pytest.fixture
def auth_headers():
    """Build bearer headers for a user"""
    def _headers(user):
        token = AuthService.create_access_token_for_user(user)
        return {"Authorization": f"Bearer {token}"}
    return _headers