from __future__ import annotations

import os

# Settings are read once at import time, so the test values must be in place first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["HOUSEKEEPING_ENABLED"] = "false"
os.environ["SEED_DEFAULT_USERS"] = "false"
os.environ["LOG_FILE"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import expense_tracker.expenses.models  # noqa: F401  # Ensure models are registered with metadata
import expense_tracker.users.models  # noqa: F401
from expense_tracker.database import Base, get_db
from expense_tracker.main import app
from expense_tracker.users import schemas as user_schemas
from expense_tracker.users import service as user_service


@pytest.fixture()
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def alice(db_session):
    return user_service.register(
        db_session, user_schemas.UserSchema(username="alice", password="alice-pw")
    )


@pytest.fixture()
def bob(db_session):
    return user_service.register(
        db_session, user_schemas.UserSchema(username="bob", password="bob-pw")
    )


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
