"""
Concurrency tests for booking writes.

Two writers racing for the same window on one court, whether creating or
moving a booking, must leave exactly one active booking there. Uses a
file-backed SQLite database so each thread gets its own connection.
"""

import threading
import uuid
from datetime import datetime

import pytest
from sqlalchemy import func, select

from court_scheduler.config import get_settings
from court_scheduler.database import build_engine, build_sessionmaker
from court_scheduler.exceptions import PersistenceError, SchedulingConflict
from court_scheduler.models.base import Base
from court_scheduler.models.catalog import Complex, Court
from court_scheduler.models.bookings import ACTIVE_BOOKING_STATUSES, Booking
from court_scheduler.services.bookings import (
    BookingChanges,
    BookingDraft,
    create_booking,
    update_booking,
)
from court_scheduler.services.locking import CourtLockRegistry, get_court_locks

OWNER_ID = uuid.UUID("33333333-3333-4333-8333-333333333333")


@pytest.fixture
def file_sessionmaker(tmp_path):
    """Session factory bound to a throwaway on-disk database."""
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    factory = build_sessionmaker(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def race_court(file_sessionmaker) -> Court:
    session = file_sessionmaker()
    try:
        complex_ = Complex(owner_id=OWNER_ID, name="Race Club")
        session.add(complex_)
        session.flush()
        court = Court(complex_id=complex_.id, name="Center Court", sport_type="tennis")
        session.add(court)
        session.commit()
        return court
    finally:
        session.close()


def _run_together(file_sessionmaker, operations):
    """Run each operation on its own thread and session, released together."""
    barrier = threading.Barrier(len(operations))
    outcomes = []
    outcomes_lock = threading.Lock()

    def worker(operation):
        session = file_sessionmaker()
        try:
            barrier.wait()
            try:
                booking = operation(session)
                outcome = ("succeeded", booking.id)
            except SchedulingConflict as e:
                outcome = ("conflict", e)
            with outcomes_lock:
                outcomes.append(outcome)
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(operation,)) for operation in operations]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    return outcomes


def _race(file_sessionmaker, court_id, windows):
    """Run create_booking for each window concurrently."""

    def creator(start, end):
        return lambda session: create_booking(
            session, OWNER_ID, BookingDraft(court_id=court_id, start_time=start, end_time=end)
        )

    return _run_together(file_sessionmaker, [creator(start, end) for start, end in windows])


def _count_bookings(file_sessionmaker, court_id) -> int:
    session = file_sessionmaker()
    try:
        return session.scalar(
            select(func.count()).select_from(Booking).where(Booking.court_id == court_id)
        )
    finally:
        session.close()


class TestConcurrentCreates:
    def test_identical_windows_create_exactly_one(self, file_sessionmaker, race_court):
        window = (datetime(2024, 1, 15, 14, 0), datetime(2024, 1, 15, 15, 0))

        outcomes = _race(file_sessionmaker, race_court.id, [window, window])

        kinds = sorted(kind for kind, _ in outcomes)
        assert kinds == ["conflict", "succeeded"]
        created_id = next(value for kind, value in outcomes if kind == "succeeded")
        conflict = next(value for kind, value in outcomes if kind == "conflict")
        assert conflict.conflicting_booking_id == created_id
        assert _count_bookings(file_sessionmaker, race_court.id) == 1

    def test_overlapping_windows_create_exactly_one(self, file_sessionmaker, race_court):
        windows = [
            (datetime(2024, 1, 15, 14, 0), datetime(2024, 1, 15, 15, 0)),
            (datetime(2024, 1, 15, 14, 30), datetime(2024, 1, 15, 15, 30)),
        ]

        outcomes = _race(file_sessionmaker, race_court.id, windows)

        assert sorted(kind for kind, _ in outcomes) == ["conflict", "succeeded"]
        assert _count_bookings(file_sessionmaker, race_court.id) == 1

    def test_disjoint_windows_both_succeed(self, file_sessionmaker, race_court):
        windows = [
            (datetime(2024, 1, 15, 14, 0), datetime(2024, 1, 15, 15, 0)),
            (datetime(2024, 1, 15, 15, 0), datetime(2024, 1, 15, 16, 0)),
        ]

        outcomes = _race(file_sessionmaker, race_court.id, windows)

        assert [kind for kind, _ in outcomes] == ["succeeded", "succeeded"]
        assert _count_bookings(file_sessionmaker, race_court.id) == 2


def _count_active_overlapping(file_sessionmaker, court_id, start, end) -> int:
    session = file_sessionmaker()
    try:
        return session.scalar(
            select(func.count())
            .select_from(Booking)
            .where(
                Booking.court_id == court_id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
                Booking.start_time < end,
                Booking.end_time > start,
            )
        )
    finally:
        session.close()


class TestConcurrentMoveAndCreate:
    def test_move_and_create_onto_same_window(self, file_sessionmaker, race_court):
        """Moving one booking onto a window while another is created there keeps one."""
        window_start = datetime(2024, 1, 15, 14, 0)
        window_end = datetime(2024, 1, 15, 15, 0)
        session = file_sessionmaker()
        try:
            existing = create_booking(
                session,
                OWNER_ID,
                BookingDraft(
                    court_id=race_court.id,
                    start_time=datetime(2024, 1, 15, 10, 0),
                    end_time=datetime(2024, 1, 15, 11, 0),
                ),
            )
        finally:
            session.close()

        def mover(session):
            return update_booking(
                session,
                existing.id,
                OWNER_ID,
                BookingChanges(start_time=window_start, end_time=window_end),
            )

        def creator(session):
            return create_booking(
                session,
                OWNER_ID,
                BookingDraft(
                    court_id=race_court.id,
                    start_time=datetime(2024, 1, 15, 14, 30),
                    end_time=datetime(2024, 1, 15, 15, 30),
                ),
            )

        outcomes = _run_together(file_sessionmaker, [mover, creator])

        assert sorted(kind for kind, _ in outcomes) == ["conflict", "succeeded"]
        assert _count_active_overlapping(
            file_sessionmaker, race_court.id, window_start, datetime(2024, 1, 15, 15, 30)
        ) == 1


class TestCourtLockRegistry:
    def test_lock_per_court(self):
        registry = CourtLockRegistry()
        first, second = uuid.uuid4(), uuid.uuid4()

        with registry.hold(first, timeout=0.1):
            # A different court never contends
            with registry.hold(second, timeout=0.1):
                pass

        assert len(registry) == 2

    def test_timeout_raises_persistence_error(self):
        registry = CourtLockRegistry()
        court_id = uuid.uuid4()
        holding = threading.Event()
        release = threading.Event()

        def holder():
            with registry.hold(court_id, timeout=1):
                holding.set()
                release.wait(timeout=5)

        thread = threading.Thread(target=holder)
        thread.start()
        try:
            assert holding.wait(timeout=5)
            with pytest.raises(PersistenceError) as exc_info:
                with registry.hold(court_id, timeout=0.05):
                    pass
            assert exc_info.value.retryable is True
        finally:
            release.set()
            thread.join(timeout=5)

    def test_lock_released_after_error(self):
        registry = CourtLockRegistry()
        court_id = uuid.uuid4()

        with pytest.raises(RuntimeError):
            with registry.hold(court_id, timeout=0.1):
                raise RuntimeError("boom")

        with registry.hold(court_id, timeout=0.1):
            pass

    def test_busy_court_rejects_booking_without_writing(
        self, db_session, sample_court, owner_id, monkeypatch
    ):
        monkeypatch.setattr(get_settings(), "booking_lock_timeout_seconds", 0.05)
        draft = BookingDraft(
            court_id=sample_court.id,
            start_time=datetime(2024, 1, 15, 14, 0),
            end_time=datetime(2024, 1, 15, 15, 0),
        )

        with get_court_locks().hold(sample_court.id):
            with pytest.raises(PersistenceError):
                create_booking(db_session, owner_id, draft)

        assert db_session.query(Booking).count() == 0
