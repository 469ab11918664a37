"""
Ownership checks.

Every owner-scoped operation runs one of these before any conflict or
lifecycle logic. Each check raises NotFoundError when the record is missing
and ForbiddenError when it belongs to another owner.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from court_scheduler.exceptions import NotFoundError, ForbiddenError
from court_scheduler.models.catalog import Court, Client, Complex
from court_scheduler.models.bookings import Booking
from court_scheduler.models.blackouts import CourtBlackout
from court_scheduler.services import queries


def require_court(session: Session, court_id: UUID) -> Court:
    """Load a court or raise NotFoundError."""
    court = queries.get_court(session, court_id)
    if court is None:
        raise NotFoundError(f"Court {court_id} not found")
    return court


def require_court_owned(session: Session, court_id: UUID, owner_id: UUID) -> Court:
    """
    Load a court and verify it belongs to the caller.

    Ownership is transitive: court -> complex -> owner.
    """
    court = require_court(session, court_id)
    if court.complex.owner_id != owner_id:
        raise ForbiddenError(f"Court {court_id} does not belong to this owner")
    return court


def require_complex_owned(session: Session, complex_id: UUID, owner_id: UUID) -> Complex:
    """Load a complex and verify it belongs to the caller."""
    complex_ = session.get(Complex, complex_id)
    if complex_ is None:
        raise NotFoundError(f"Complex {complex_id} not found")
    if complex_.owner_id != owner_id:
        raise ForbiddenError(f"Complex {complex_id} does not belong to this owner")
    return complex_


def require_client_owned(session: Session, client_id: UUID, owner_id: UUID) -> Client:
    """Load a client and verify it belongs to the caller."""
    client = queries.get_client(session, client_id)
    if client is None:
        raise NotFoundError(f"Client {client_id} not found")
    if client.owner_id != owner_id:
        raise ForbiddenError(f"Client {client_id} does not belong to this owner")
    return client


def require_booking_owned(session: Session, booking_id: UUID, owner_id: UUID) -> Booking:
    """Load a booking and verify it belongs to the caller."""
    booking = queries.get_booking(session, booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")
    if booking.owner_id != owner_id:
        raise ForbiddenError(f"Booking {booking_id} does not belong to this owner")
    return booking


def require_blackout_owned(
    session: Session,
    blackout_id: UUID,
    owner_id: UUID,
) -> CourtBlackout:
    """Load a blackout and verify the caller owns its court."""
    blackout = queries.get_blackout(session, blackout_id)
    if blackout is None:
        raise NotFoundError(f"Blackout {blackout_id} not found")
    if blackout.court.complex.owner_id != owner_id:
        raise ForbiddenError(f"Blackout {blackout_id} does not belong to this owner")
    return blackout
