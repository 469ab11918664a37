"""
Query service for courts, bookings and blackouts.

Filters are expressed as typed query specifications (BookingQuery,
BlackoutQuery) and evaluated here; callers never build where-clauses.

Provides common query patterns with:
- Eager loading to avoid N+1 queries
- Half-open time-range filtering
- Active-status filtering for conflict checks
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select, and_, func
from sqlalchemy.orm import Session, joinedload

from court_scheduler.models.catalog import Complex, Court, Client
from court_scheduler.models.bookings import Booking, ACTIVE_BOOKING_STATUSES
from court_scheduler.models.blackouts import CourtBlackout


@dataclass
class BookingQuery:
    """Filter specification for booking listings. Unset fields do not filter."""

    owner_id: Optional[UUID] = None
    court_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    statuses: Optional[Sequence[str]] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    starts_at_or_after: Optional[datetime] = None
    ends_at_or_before: Optional[datetime] = None
    newest_first: bool = True
    offset: int = 0
    limit: Optional[int] = None


@dataclass
class BlackoutQuery:
    """Filter specification for blackout listings."""

    owner_id: Optional[UUID] = None
    court_id: Optional[UUID] = None
    is_active: Optional[bool] = None
    # Inclusive date range the blackout must intersect
    covers_from: Optional[date] = None
    covers_to: Optional[date] = None
    newest_first: bool = True


@dataclass
class Page:
    """A slice of results plus the total count."""

    items: list = field(default_factory=list)
    total: int = 0


# =============================================================================
# Catalog Queries
# =============================================================================


def get_court(session: Session, court_id: UUID) -> Optional[Court]:
    """
    Get a court with its complex loaded.

    Args:
        session: Database session
        court_id: Court ID

    Returns:
        Court or None
    """
    stmt = (
        select(Court)
        .where(Court.id == court_id)
        .options(joinedload(Court.complex))
    )
    return session.scalar(stmt)


def get_client(session: Session, client_id: UUID) -> Optional[Client]:
    """Get a client by ID."""
    return session.get(Client, client_id)


def list_complexes(session: Session, owner_id: UUID) -> Sequence[Complex]:
    """Get all complexes belonging to an owner, by name."""
    stmt = (
        select(Complex)
        .where(Complex.owner_id == owner_id)
        .order_by(Complex.name)
    )
    return session.scalars(stmt).all()


def list_courts(
    session: Session,
    owner_id: UUID,
    complex_id: Optional[UUID] = None,
    active_only: bool = False,
) -> Sequence[Court]:
    """
    Get courts belonging to an owner.

    Args:
        session: Database session
        owner_id: Owner account
        complex_id: Restrict to one complex
        active_only: Only return active courts

    Returns:
        Courts with their complex loaded
    """
    conditions = [Complex.owner_id == owner_id]
    if complex_id:
        conditions.append(Court.complex_id == complex_id)
    if active_only:
        conditions.append(Court.is_active.is_(True))

    stmt = (
        select(Court)
        .join(Complex)
        .where(and_(*conditions))
        .options(joinedload(Court.complex))
        .order_by(Complex.name, Court.name)
    )
    return session.scalars(stmt).all()


def list_clients(session: Session, owner_id: UUID) -> Sequence[Client]:
    """Get all clients of an owner, by last name."""
    stmt = (
        select(Client)
        .where(Client.owner_id == owner_id)
        .order_by(Client.last_name, Client.first_name)
    )
    return session.scalars(stmt).all()


# =============================================================================
# Booking Queries
# =============================================================================


def get_booking(session: Session, booking_id: UUID) -> Optional[Booking]:
    """
    Get a single booking with court, complex and client loaded.

    Args:
        session: Database session
        booking_id: Booking ID

    Returns:
        Booking or None
    """
    stmt = (
        select(Booking)
        .where(Booking.id == booking_id)
        .options(
            joinedload(Booking.court).joinedload(Court.complex),
            joinedload(Booking.client),
        )
    )
    return session.scalar(stmt)


def _booking_conditions(query: BookingQuery) -> list:
    conditions = []
    if query.owner_id:
        conditions.append(Booking.owner_id == query.owner_id)
    if query.court_id:
        conditions.append(Booking.court_id == query.court_id)
    if query.client_id:
        conditions.append(Booking.client_id == query.client_id)
    if query.statuses:
        conditions.append(Booking.status.in_(list(query.statuses)))
    if query.date_from:
        conditions.append(Booking.booking_date >= query.date_from)
    if query.date_to:
        conditions.append(Booking.booking_date <= query.date_to)
    if query.starts_at_or_after:
        conditions.append(Booking.start_time >= query.starts_at_or_after)
    if query.ends_at_or_before:
        conditions.append(Booking.end_time <= query.ends_at_or_before)
    return conditions


def find_bookings(session: Session, query: BookingQuery) -> Page:
    """
    Evaluate a booking query.

    Args:
        session: Database session
        query: Filter, ordering and paging specification

    Returns:
        Page of bookings (court and client eagerly loaded) with total count
    """
    conditions = _booking_conditions(query)

    count_stmt = select(func.count()).select_from(Booking).where(and_(True, *conditions))
    total = session.scalar(count_stmt) or 0

    if query.newest_first:
        ordering = (Booking.booking_date.desc(), Booking.start_time.desc())
    else:
        ordering = (Booking.booking_date.asc(), Booking.start_time.asc())

    stmt = (
        select(Booking)
        .where(and_(True, *conditions))
        .options(
            joinedload(Booking.court).joinedload(Court.complex),
            joinedload(Booking.client),
        )
        .order_by(*ordering)
        .offset(query.offset)
    )
    if query.limit is not None:
        stmt = stmt.limit(query.limit)

    return Page(items=list(session.scalars(stmt).all()), total=total)


def find_active_bookings_overlapping(
    session: Session,
    court_id: UUID,
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[UUID] = None,
) -> Sequence[Booking]:
    """
    Find active bookings on a court that overlap [start, end).

    Used for conflict detection and slot projection.

    Args:
        session: Database session
        court_id: Court to check
        start: Window start (inclusive)
        end: Window end (exclusive)
        exclude_booking_id: Booking to ignore (for updates)

    Returns:
        Overlapping pending/confirmed bookings ordered by start time
    """
    conditions = [
        Booking.court_id == court_id,
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        # Overlap condition: booking starts before we end AND ends after we start
        Booking.start_time < end,
        Booking.end_time > start,
    ]

    if exclude_booking_id:
        conditions.append(Booking.id != exclude_booking_id)

    stmt = (
        select(Booking)
        .where(and_(*conditions))
        .order_by(Booking.start_time)
    )

    return session.scalars(stmt).all()


# =============================================================================
# Blackout Queries
# =============================================================================


def get_blackout(session: Session, blackout_id: UUID) -> Optional[CourtBlackout]:
    """Get a blackout with its court and complex loaded."""
    stmt = (
        select(CourtBlackout)
        .where(CourtBlackout.id == blackout_id)
        .options(joinedload(CourtBlackout.court).joinedload(Court.complex))
    )
    return session.scalar(stmt)


def find_blackouts(session: Session, query: BlackoutQuery) -> Sequence[CourtBlackout]:
    """
    Evaluate a blackout query.

    Date-range filtering keeps blackouts whose inclusive [start_date, end_date]
    intersects [covers_from, covers_to].

    Args:
        session: Database session
        query: Filter specification

    Returns:
        Matching blackouts with their court loaded
    """
    conditions = []
    if query.owner_id:
        conditions.append(CourtBlackout.owner_id == query.owner_id)
    if query.court_id:
        conditions.append(CourtBlackout.court_id == query.court_id)
    if query.is_active is not None:
        conditions.append(CourtBlackout.is_active.is_(query.is_active))
    if query.covers_to:
        conditions.append(CourtBlackout.start_date <= query.covers_to)
    if query.covers_from:
        conditions.append(CourtBlackout.end_date >= query.covers_from)

    if query.newest_first:
        ordering = (CourtBlackout.start_date.desc(), CourtBlackout.created_at.desc())
    else:
        ordering = (CourtBlackout.start_date.asc(), CourtBlackout.created_at.asc())

    stmt = (
        select(CourtBlackout)
        .where(and_(True, *conditions))
        .options(joinedload(CourtBlackout.court))
        .order_by(*ordering)
    )
    return session.scalars(stmt).all()
