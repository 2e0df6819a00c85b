import os

# Settings are read at import time; give the app a throwaway config.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.core.security import create_access_token, hash_password
from app.database import get_session
from app.main import app
from app.models.product import Product
from app.models.user import User


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
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(session):
    def _make(**overrides) -> Product:
        data = {
            "name": "Classic Tee",
            "description": "Plain cotton t-shirt",
            "price": 10.0,
            "count_in_stock": 10,
            "sku": f"SKU-{uuid.uuid4().hex[:8]}",
            "category": "Top Wear",
            "collections": "Basics",
            "sizes": ["S", "M", "L"],
            "colors": ["Red", "Blue"],
            "images": [{"url": "https://img.example/tee.png", "alt_text": "tee"}],
            "is_published": True,
        }
        data.update(overrides)
        product = Product(**data)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_user(session):
    def _make(email: str = "jane@example.com", role: str = "customer", password: str = "secret123") -> User:
        user = User(
            name=email.split("@", 1)[0],
            email=email,
            password_hash=hash_password(password),
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(str(user.id), user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers
