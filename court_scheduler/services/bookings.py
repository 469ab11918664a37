"""
Booking lifecycle manager.

Orchestrates create, move and status transitions of bookings. Every path
that creates a booking or moves its window runs the conflict resolver while
holding the court's lock, and commits before releasing it.

Status workflow:
    pending -> confirmed -> completed
    pending | confirmed -> cancelled
Nothing leaves cancelled or completed.
"""

import enum
import logging
from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence, Type
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from court_scheduler.exceptions import (
    ValidationError,
    InvalidStateError,
    SchedulingConflict,
)
from court_scheduler.models.bookings import (
    Booking,
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
    ACTIVE_BOOKING_STATUSES,
    TERMINAL_BOOKING_STATUSES,
)
from court_scheduler.services import queries
from court_scheduler.services.conflicts import evaluate_availability
from court_scheduler.services.intervals import combine, duration_minutes, validate_window
from court_scheduler.services.locking import get_court_locks
from court_scheduler.services.ownership import (
    require_court,
    require_court_owned,
    require_client_owned,
    require_booking_owned,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass
class BookingDraft:
    """Input for an owner (dashboard) booking."""

    court_id: UUID
    start_time: datetime
    end_time: datetime
    client_id: Optional[UUID] = None
    booking_date: Optional[date] = None
    price: Decimal = Decimal("0")
    payment_method: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class PublicBookingDraft:
    """Input for a booking made through the public app."""

    court_id: UUID
    booking_date: date
    start_time: str
    end_time: str
    is_app_native: bool = True
    app_user_id: Optional[str] = None
    client_id: Optional[UUID] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    price: Decimal = Decimal("0")
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class _Unset:
    """Marker for a field left out of a partial update."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

# Fields a partial update may set back to null
NULLABLE_CHANGE_FIELDS = frozenset({"payment_method", "notes"})


@dataclass
class BookingChanges:
    """
    Partial update of a booking.

    UNSET leaves a field unchanged. None clears payment_method or notes and is
    rejected for every other field.
    """

    start_time: Optional[datetime] = UNSET
    end_time: Optional[datetime] = UNSET
    booking_date: Optional[date] = UNSET
    price: Optional[Decimal] = UNSET
    payment_method: Optional[str] = UNSET
    payment_status: Optional[str] = UNSET
    notes: Optional[str] = UNSET

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not UNSET

    def validate_nulls(self) -> None:
        for item in fields(self):
            if getattr(self, item.name) is None and item.name not in NULLABLE_CHANGE_FIELDS:
                raise ValidationError(f"{item.name} cannot be null")

    @property
    def moves_window(self) -> bool:
        return self.is_set("start_time") or self.is_set("end_time")


def _enum_value(enum_cls: Type[enum.Enum], value: Optional[str], label: str) -> Optional[str]:
    if value is None:
        return None
    try:
        return enum_cls(value).value
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}' (expected one of: {allowed})", original_error=e)


def _validate_price(price: Decimal) -> Decimal:
    if price < 0:
        raise ValidationError("Price must not be negative")
    return price


def _commit_booking(session: Session, booking: Booking) -> None:
    """
    Flush and commit a booking write.

    The unique index on active (court_id, start_time) can still reject the
    write; that is reported as a conflict, never retried.
    """
    try:
        session.flush()
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.info(
            f"Store rejected booking on court {booking.court_id} at {booking.start_time}: {e.orig}"
        )
        raise SchedulingConflict(
            "Court already booked at this start time",
            original_error=e,
        )


def _insert_checked(session: Session, booking: Booking) -> Booking:
    """Run the resolver and insert under the court lock."""
    with get_court_locks().hold(booking.court_id):
        result = evaluate_availability(
            session, booking.court_id, booking.start_time, booking.end_time
        )
        if not result.available:
            logger.info(
                f"Booking rejected on court {booking.court_id} "
                f"[{booking.start_time}, {booking.end_time}): {result.message}"
            )
            raise result.to_conflict()

        session.add(booking)
        _commit_booking(session, booking)

    logger.info(
        f"Booking {booking.id} created on court {booking.court_id} "
        f"[{booking.start_time}, {booking.end_time})"
    )
    return booking


# =============================================================================
# Create
# =============================================================================


def create_booking(session: Session, owner_id: UUID, draft: BookingDraft) -> Booking:
    """
    Create a booking on an owned court.

    Args:
        session: Database session
        owner_id: Caller
        draft: Booking fields

    Returns:
        The committed booking (status pending, payment pending)

    Raises:
        ValidationError: Window not positive, court inactive, bad enum value
        NotFoundError: Court or client missing
        ForbiddenError: Court or client owned by someone else
        SchedulingConflict: Window overlaps a booking or a blackout
    """
    # Shape checks come before any query
    validate_window(draft.start_time, draft.end_time)
    price = _validate_price(draft.price)
    payment_method = _enum_value(PaymentMethod, draft.payment_method, "payment method")

    court = require_court_owned(session, draft.court_id, owner_id)
    if not court.is_active:
        raise ValidationError(f"Court {court.id} is not active")

    if draft.client_id is not None:
        require_client_owned(session, draft.client_id, owner_id)

    booking = Booking(
        court_id=court.id,
        owner_id=owner_id,
        client_id=draft.client_id,
        booking_date=draft.booking_date or draft.start_time.date(),
        start_time=draft.start_time,
        end_time=draft.end_time,
        duration_minutes=duration_minutes(draft.start_time, draft.end_time),
        price=price,
        payment_method=payment_method,
        payment_status=PaymentStatus.PENDING.value,
        status=BookingStatus.PENDING.value,
        notes=draft.notes,
        is_app_native=False,
    )
    return _insert_checked(session, booking)


def create_public_booking(session: Session, draft: PublicBookingDraft) -> Booking:
    """
    Create a booking from the public app.

    The booking belongs to the owner of the court's complex. App-native
    bookings identify the player by app_user_id; other public bookings must
    reference a client of that owner.
    """
    start = combine(draft.booking_date, draft.start_time)
    end = combine(draft.booking_date, draft.end_time)
    validate_window(start, end)
    price = _validate_price(draft.price)
    payment_method = _enum_value(PaymentMethod, draft.payment_method, "payment method")

    if draft.is_app_native:
        if not draft.app_user_id:
            raise ValidationError("App-native bookings require app_user_id")
    elif draft.client_id is None:
        raise ValidationError("client_id is required when the booking is not app-native")

    court = require_court(session, draft.court_id)
    if not court.is_active:
        raise ValidationError(f"Court {court.id} is not active")
    owner_id = court.complex.owner_id

    if draft.client_id is not None:
        require_client_owned(session, draft.client_id, owner_id)

    booking = Booking(
        court_id=court.id,
        owner_id=owner_id,
        client_id=draft.client_id,
        booking_date=draft.booking_date,
        start_time=start,
        end_time=end,
        duration_minutes=duration_minutes(start, end),
        price=price,
        payment_method=payment_method,
        payment_status=PaymentStatus.PENDING.value,
        status=BookingStatus.PENDING.value,
        notes=draft.notes,
        is_app_native=draft.is_app_native,
        app_user_id=draft.app_user_id,
        contact_name=draft.contact_name,
        contact_phone=draft.contact_phone,
        contact_email=draft.contact_email,
    )
    return _insert_checked(session, booking)


# =============================================================================
# Update
# =============================================================================


def _apply_field_changes(booking: Booking, changes: BookingChanges) -> None:
    if changes.is_set("booking_date"):
        booking.booking_date = changes.booking_date
    if changes.is_set("price"):
        booking.price = _validate_price(changes.price)
    if changes.is_set("payment_method"):
        booking.payment_method = _enum_value(PaymentMethod, changes.payment_method, "payment method")
    if changes.is_set("payment_status"):
        booking.payment_status = _enum_value(PaymentStatus, changes.payment_status, "payment status")
    if changes.is_set("notes"):
        booking.notes = changes.notes


def update_booking(
    session: Session,
    booking_id: UUID,
    owner_id: UUID,
    changes: BookingChanges,
) -> Booking:
    """
    Apply a partial update to a booking.

    When start or end changes, the effective window falls back to the stored
    value for the untouched side, is re-validated, and re-checked against the
    court excluding this booking. Other fields change without any check. An
explicit None clears payment_method or notes.

    Raises:
        ValidationError: New window not positive or bad field value
        InvalidStateError: Moving a cancelled or completed booking
        SchedulingConflict: New window is taken
    """
    booking = require_booking_owned(session, booking_id, owner_id)

    # Validate every value up front so a bad one never half-applies
    changes.validate_nulls()
    if changes.is_set("payment_method"):
        _enum_value(PaymentMethod, changes.payment_method, "payment method")
    if changes.is_set("payment_status"):
        _enum_value(PaymentStatus, changes.payment_status, "payment status")
    if changes.is_set("price"):
        _validate_price(changes.price)

    if not changes.moves_window:
        _apply_field_changes(booking, changes)
        session.flush()
        logger.info(f"Booking {booking_id} updated")
        return booking

    if booking.status in TERMINAL_BOOKING_STATUSES:
        raise InvalidStateError(f"Cannot move a {booking.status} booking")

    new_start = changes.start_time if changes.is_set("start_time") else booking.start_time
    new_end = changes.end_time if changes.is_set("end_time") else booking.end_time
    validate_window(new_start, new_end)

    with get_court_locks().hold(booking.court_id):
        result = evaluate_availability(
            session, booking.court_id, new_start, new_end, exclude_booking_id=booking.id
        )
        if not result.available:
            logger.info(
                f"Move of booking {booking_id} to [{new_start}, {new_end}) rejected: "
                f"{result.message}"
            )
            raise result.to_conflict()

        old_start, old_end = booking.start_time, booking.end_time
        booking.start_time = new_start
        booking.end_time = new_end
        booking.duration_minutes = duration_minutes(new_start, new_end)
        if not changes.is_set("booking_date"):
            booking.booking_date = new_start.date()
        _apply_field_changes(booking, changes)
        _commit_booking(session, booking)

    logger.info(
        f"Booking {booking_id} moved from [{old_start}, {old_end}) to [{new_start}, {new_end})"
    )
    return booking


# =============================================================================
# Status transitions
# =============================================================================


def confirm_booking(session: Session, booking_id: UUID, owner_id: UUID) -> Booking:
    """Move a pending booking to confirmed."""
    booking = require_booking_owned(session, booking_id, owner_id)
    if booking.status != BookingStatus.PENDING.value:
        raise InvalidStateError(f"Only pending bookings can be confirmed (booking is {booking.status})")

    booking.status = BookingStatus.CONFIRMED.value
    session.flush()
    logger.info(f"Booking {booking_id} confirmed")
    return booking


def complete_booking(session: Session, booking_id: UUID, owner_id: UUID) -> Booking:
    """Move a confirmed booking to completed."""
    booking = require_booking_owned(session, booking_id, owner_id)
    if booking.status != BookingStatus.CONFIRMED.value:
        raise InvalidStateError(f"Only confirmed bookings can be completed (booking is {booking.status})")

    booking.status = BookingStatus.COMPLETED.value
    session.flush()
    logger.info(f"Booking {booking_id} completed")
    return booking


def cancel_booking(session: Session, booking_id: UUID, owner_id: UUID) -> Booking:
    """
    Cancel an active booking.

    A paid booking is marked refunded; any other payment stays pending.

    Raises:
        InvalidStateError: If the booking is already cancelled or completed
    """
    booking = require_booking_owned(session, booking_id, owner_id)
    if booking.status in TERMINAL_BOOKING_STATUSES:
        raise InvalidStateError(f"Cannot cancel a {booking.status} booking")

    booking.status = BookingStatus.CANCELLED.value
    if booking.payment_status == PaymentStatus.PAID.value:
        booking.payment_status = PaymentStatus.REFUNDED.value
    else:
        booking.payment_status = PaymentStatus.PENDING.value
    session.flush()

    logger.info(f"Booking {booking_id} cancelled (payment {booking.payment_status})")
    return booking


def delete_booking(session: Session, booking_id: UUID, owner_id: UUID) -> None:
    """Remove a booking permanently. No window checks apply."""
    booking = require_booking_owned(session, booking_id, owner_id)
    session.delete(booking)
    session.flush()
    logger.info(f"Booking {booking_id} deleted")


# =============================================================================
# Reads
# =============================================================================


def get_booking(session: Session, booking_id: UUID, owner_id: UUID) -> Booking:
    """Get an owned booking."""
    return require_booking_owned(session, booking_id, owner_id)


def list_bookings(session: Session, owner_id: UUID, query: queries.BookingQuery) -> queries.Page:
    """
    List an owner's bookings.

    The owner filter always applies, whatever the query says.
    """
    if query.client_id is not None:
        require_client_owned(session, query.client_id, owner_id)
    return queries.find_bookings(session, replace(query, owner_id=owner_id))


def get_court_bookings(
    session: Session,
    court_id: UUID,
    owner_id: UUID,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    statuses: Optional[Sequence[str]] = None,
) -> Sequence[Booking]:
    """Bookings of one owned court in chronological order."""
    require_court_owned(session, court_id, owner_id)
    page = queries.find_bookings(
        session,
        queries.BookingQuery(
            court_id=court_id,
            statuses=statuses,
            date_from=date_from,
            date_to=date_to,
            newest_first=False,
        ),
    )
    return page.items


def query_public_bookings(
    session: Session,
    court_id: Optional[UUID] = None,
    day: Optional[date] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> queries.Page:
    """
    Paginated booking listing for the public app.

    Only active bookings are returned unless a status is requested.
    """
    if page < 1:
        raise ValidationError("page must be at least 1")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

    statuses = [_enum_value(BookingStatus, status, "status")] if status else list(ACTIVE_BOOKING_STATUSES)

    return queries.find_bookings(
        session,
        queries.BookingQuery(
            court_id=court_id,
            statuses=statuses,
            date_from=day,
            date_to=day,
            newest_first=False,
            offset=(page - 1) * limit,
            limit=limit,
        ),
    )
