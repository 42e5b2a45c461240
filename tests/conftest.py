import itertools
import os
import tempfile

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="car-marketplace-uploads-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models import Car, CarCondition, RoleName, User
from app.utils.security import create_access_token, hash_password

API = "/api"
PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def auth_header(user: User) -> dict:
    token = create_access_token(user.id, user.email, user.role.value)
    return {"Authorization": f"Bearer {token}"}


def image_file(name: str = "photo.jpg", content: bytes = b"\xff\xd8\xff fake jpeg", field: str = "images"):
    return (field, (name, content, "image/jpeg"))


def car_form(**overrides) -> dict:
    data = {
        "brand": "Toyota",
        "model": "Corolla",
        "year": "2020",
        "condition": "PRE_OWNED",
        "price": "15000",
        "description": "Single owner, full service history",
    }
    data.update(overrides)
    return data


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role: RoleName = RoleName.OWNER, name: str | None = None, email: str | None = None) -> User:
        n = next(counter)
        user = User(
            name=name or f"{role.value.title()} {n}",
            email=email or f"{role.value.lower()}{n}@example.com",
            password=PASSWORD_HASH,
            role=role,
            isVerified=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_car(db):
    def _make(owner: User, **overrides) -> Car:
        fields = {
            "brand": "Honda",
            "model": "Civic",
            "year": 2019,
            "condition": CarCondition.PRE_OWNED,
            "price": 12000.0,
            "description": "Well kept",
            "images": ["/uploads/civic-front.jpg"],
            "approved": True,
        }
        fields.update(overrides)
        car = Car(userId=owner.id, **fields)
        db.add(car)
        db.commit()
        db.refresh(car)
        return car

    return _make
