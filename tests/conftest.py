import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "development"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from budget_manager import crud
from budget_manager.database import Base, get_db
from budget_manager.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, name="Asha", email="asha@example.com", password="secret123"):
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["user"]


@pytest.fixture
def auth_client(client):
    """Client with a logged-in session."""
    register(client)
    return client


@pytest.fixture
def budget(auth_client):
    response = auth_client.post("/api/budgets", json={"year": 2024, "monthNumber": 5, "income": 50000})
    assert response.status_code == 201, response.text
    return response.json()["budget"]


@pytest.fixture
def owner_and_budget(db_session):
    """A user and budget created straight through crud, for service-level tests."""
    user = crud.create_user(db_session, "Ravi", "ravi@example.com", "not-a-real-hash")
    budget = crud.create_budget(db_session, user.id, 2024, 6, 40000)
    return user, budget


@pytest.fixture
def other_client(client):
    """A second logged-in user sharing the same database."""
    other = TestClient(app)
    register(other, name="Bo", email="bo@example.com")
    return other
