"""
Pytest configuration and fixtures for Court Scheduler tests.

Provides database session fixtures and sample data for testing.
"""

import os

# The application engine is created at import time; keep it off disk.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("PYTHON_ENV", "development")

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Generator

import pytest
import sqlalchemy as sa
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from court_scheduler.config import get_settings
from court_scheduler.models.base import Base
from court_scheduler.models.catalog import Complex, Court, Client
from court_scheduler.models.bookings import Booking
from court_scheduler.models.blackouts import CourtBlackout
from court_scheduler.services.locking import reset_court_locks

# Monday used throughout the tests
BOOKING_DAY = date(2024, 1, 15)


def at(hhmm: str, day: date = BOOKING_DAY) -> datetime:
    """Naive instant on a day, e.g. at("14:30")."""
    hour, minute = hhmm.split(":")
    return datetime(day.year, day.month, day.day, int(hour), int(minute))


@pytest.fixture(autouse=True)
def fresh_court_locks():
    """Each test starts with an empty lock registry."""
    reset_court_locks()
    yield
    reset_court_locks()


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    """Read retries run back to back."""
    monkeypatch.setattr(get_settings(), "read_retry_delay_seconds", 0)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a clean database session for each test.

    Uses an in-memory SQLite database that is torn down after each test. The
    single connection is shared across threads so TestClient handlers see
    the same data.

    Yields:
        Session: SQLAlchemy session for database operations
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()
        # Disable foreign key constraints for drop operations
        with engine.begin() as connection:
            connection.execute(sa.text("PRAGMA foreign_keys=OFF"))
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.UUID("11111111-1111-4111-8111-111111111111")


@pytest.fixture
def other_owner_id() -> uuid.UUID:
    return uuid.UUID("22222222-2222-4222-8222-222222222222")


@pytest.fixture
def sample_complex(db_session: Session, owner_id: uuid.UUID) -> Complex:
    """
    Create a sample Complex for testing.

    Returns:
        Complex: A persisted complex owned by owner_id
    """
    complex_ = Complex(
        owner_id=owner_id,
        name="Riverside Sports Club",
        address="12 River Road",
        phone="+54 11 5555 0000",
    )
    db_session.add(complex_)
    db_session.commit()
    db_session.refresh(complex_)
    return complex_


@pytest.fixture
def sample_court(db_session: Session, sample_complex: Complex) -> Court:
    """
    Create a sample active Court for testing.

    Returns:
        Court: A persisted padel court inside sample_complex
    """
    court = Court(
        complex_id=sample_complex.id,
        name="Court 1 - Padel",
        sport_type="padel",
        is_active=True,
    )
    db_session.add(court)
    db_session.commit()
    db_session.refresh(court)
    return court


@pytest.fixture
def second_court(db_session: Session, sample_complex: Complex) -> Court:
    court = Court(
        complex_id=sample_complex.id,
        name="Court 2 - Football",
        sport_type="football",
        is_active=True,
    )
    db_session.add(court)
    db_session.commit()
    db_session.refresh(court)
    return court


@pytest.fixture
def foreign_court(db_session: Session, other_owner_id: uuid.UUID) -> Court:
    """A court in a complex belonging to another owner."""
    complex_ = Complex(owner_id=other_owner_id, name="Other Owner Arena")
    db_session.add(complex_)
    db_session.flush()
    court = Court(complex_id=complex_.id, name="Arena Court", sport_type="tennis")
    db_session.add(court)
    db_session.commit()
    db_session.refresh(court)
    return court


@pytest.fixture
def sample_client(db_session: Session, owner_id: uuid.UUID) -> Client:
    """
    Create a sample Client for testing.

    Returns:
        Client: A persisted client owned by owner_id
    """
    client = Client(
        owner_id=owner_id,
        first_name="Lucia",
        last_name="Fernandez",
        email="lucia@example.com",
        phone="+54 11 5555 1234",
    )
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


@pytest.fixture
def make_booking(db_session: Session, sample_court: Court, owner_id: uuid.UUID) -> Callable[..., Booking]:
    """
    Factory inserting bookings directly, bypassing the lifecycle services.

    Usage:
        booking = make_booking("14:00", "15:00", status="confirmed")
    """

    def _make(
        start: str,
        end: str,
        day: date = BOOKING_DAY,
        court: Court | None = None,
        status: str = "pending",
        payment_status: str = "pending",
        price: Decimal = Decimal("20.00"),
    ) -> Booking:
        start_time = at(start, day)
        end_time = at(end, day)
        booking = Booking(
            court_id=(court or sample_court).id,
            owner_id=owner_id,
            booking_date=day,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=int((end_time - start_time).total_seconds() // 60),
            price=price,
            status=status,
            payment_status=payment_status,
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make


@pytest.fixture
def make_blackout(db_session: Session, sample_court: Court, owner_id: uuid.UUID) -> Callable[..., CourtBlackout]:
    """
    Factory inserting blackouts directly.

    Usage:
        make_blackout(date(2024, 1, 20), date(2024, 1, 25))            # full day
        make_blackout(day, day, start_time="14:00", end_time="18:00")  # timed
    """

    def _make(
        start_date: date = BOOKING_DAY,
        end_date: date = BOOKING_DAY,
        start_time: str | None = None,
        end_time: str | None = None,
        reason: str = "maintenance",
        is_active: bool = True,
        court: Court | None = None,
    ) -> CourtBlackout:
        blackout = CourtBlackout(
            court_id=(court or sample_court).id,
            owner_id=owner_id,
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
            end_time=end_time,
            reason=reason,
            is_active=is_active,
        )
        db_session.add(blackout)
        db_session.commit()
        db_session.refresh(blackout)
        return blackout

    return _make


@pytest.fixture
def api_client(db_session: Session):
    """
    TestClient whose requests share the test session.

    Yields:
        TestClient: Client for the FastAPI app
    """
    from fastapi.testclient import TestClient

    from court_scheduler.api.dependencies import get_db_session
    from court_scheduler.api.main import app

    def override_get_db_session():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def owner_headers(owner_id: uuid.UUID) -> dict:
    return {"X-Owner-ID": str(owner_id)}
