import os
import uuid

# Settings are read at import time; point them at an in-memory DB first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from organic_store.database import get_session
from organic_store.main import app
from organic_store.models.product import Product
from organic_store.models.user import User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(session):
    """Insert a product straight into the DB and return it."""

    def _make(**overrides) -> Product:
        data = {
            "name": "Organic Broccoli",
            "category": "vegetables",
            "price": 100.0,
            "image": "https://img.example.com/broccoli.jpg",
            "stock": 10,
        }
        data.update(overrides)
        product = Product(**data)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def register(client):
    """Register a user through the API; returns (headers, user_json)."""

    def _register(email: str = "asha@example.com", name: str = "Asha"):
        res = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": "secret123"},
        )
        assert res.status_code == 201, res.text
        body = res.json()
        headers = {"Authorization": f"Bearer {body['token']}"}
        return headers, body["user"]

    return _register


@pytest.fixture
def user_headers(register):
    headers, _ = register()
    return headers


@pytest.fixture
def admin_headers(register, session):
    headers, user_json = register(email="admin@example.com", name="Admin")
    user = session.get(User, uuid.UUID(user_json["id"]))
    user.role = "admin"
    session.add(user)
    session.commit()
    return headers
