"""Shared fixtures: an in-memory SQLite database and a FastAPI test client."""

from __future__ import annotations

import os

os.environ["SECRET_KEY"] = "tests-secret-key-with-at-least-32-bytes"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_DOMAIN"] = "company.com"

import pytest
from fastapi.testclient import TestClient

from app.db.database import Base, SessionLocal, engine
from app.main import app
from app.models.user_models import User
from app.models.user_role_models import AppRole, UserRole
from app.services.dependencies import create_user_access_token
from app.utils.hashing import get_password_hash


ADMIN_EMAIL = "admin@example.com"
USER_EMAIL = "viewer@example.com"
PASSWORD = "Sup3rSecurePwd!"

VALID_CSV = (
    "name,postal_code,birthday\n"
    "Jane Doe,12345,1990-05-17\n"
    "John Smith,AB1 2CD,1985-12-01\n"
)


@pytest.fixture(autouse=True)
def _reset_database():
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


def make_user(db, email: str, roles=(AppRole.user,), password: str = PASSWORD) -> User:
    user = User(email=email, full_name="Test User", password=get_password_hash(password))
    for role in roles:
        user.roles.append(UserRole(role=role))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def admin_user(db) -> User:
    return make_user(db, ADMIN_EMAIL, roles=(AppRole.user, AppRole.admin))


@pytest.fixture()
def regular_user(db) -> User:
    return make_user(db, USER_EMAIL)


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_access_token(user)}"}
