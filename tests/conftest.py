# tests/conftest.py - In-memory database, two provisioned schools and logged-in clients
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["JWT_SECRET"] = "test-secret-test-secret-test-secret-0123"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_COOKIE_SECURE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from schooldesk.core.db import get_engine, get_session_maker
from schooldesk.main import app
from schooldesk.models import Base
from schooldesk.services.provisioning import provision_school

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def database():
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = get_session_maker()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def schools(db):
    alpha = provision_school(db, name="Alpha Academy", code="alpha", admin_username="admin_a", admin_password=PASSWORD)
    beta = provision_school(db, name="Beta High", code="BETA", admin_username="admin_b", admin_password=PASSWORD)
    return {"alpha": alpha, "beta": beta}


def login(username: str, password: str = PASSWORD) -> TestClient:
    client = TestClient(app)
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    client.headers["Authorization"] = f"Bearer {response.json()['data']['token']}"
    return client


@pytest.fixture
def client_a(schools):
    return login("admin_a")


@pytest.fixture
def client_b(schools):
    return login("admin_b")


@pytest.fixture
def anonymous():
    return TestClient(app)


def create(client: TestClient, path: str, payload: dict) -> dict:
    response = client.post(path, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]
