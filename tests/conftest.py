"""
Shared fixtures: in-memory SQLite database, API client and signed-in users.
"""
import os

# Must be set before parking_server.config builds its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from parking_server.auth_utils import create_access_token, get_password_hash
from parking_server.db import Base, get_db
from parking_server.main import app
from parking_server.models import (
    Parking,
    PaymentMethod,
    Reservation,
    ReservationStatus,
    User,
    UserRole,
)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, username, role=UserRole.USER, password="secret123"):
    user = User(
        username=username,
        password_hash=get_password_hash(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def make_parking(db, name="Lot A", location="Main St 1", capacity=10):
    parking = Parking(name=name, location=location, capacity=capacity)
    db.add(parking)
    db.commit()
    db.refresh(parking)
    return parking


def make_reservation(db, user, parking, start, end,
                     status=ReservationStatus.PENDING,
                     payment_method=PaymentMethod.CASH):
    reservation = Reservation(
        user_id=user.id,
        parking_id=parking.id,
        start_time=start,
        end_time=end,
        status=status,
        payment_method=payment_method,
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation


def at(hour, minute=0, day=1):
    """Naive UTC timestamp on June 2025"""
    return datetime(2025, 6, day, hour, minute)


@pytest.fixture
def user(db):
    return make_user(db, "andi")


@pytest.fixture
def other_user(db):
    return make_user(db, "budi")


@pytest.fixture
def officer(db):
    return make_user(db, "joko", role=UserRole.OFFICER)


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)


@pytest.fixture
def officer_headers(officer):
    return auth_headers(officer)


@pytest.fixture
def p1(db):
    return make_parking(db, name="P1", location="North gate", capacity=50)


@pytest.fixture
def p2(db):
    return make_parking(db, name="P2", location="South gate", capacity=100)
