"""
Conflict resolver.

The single authority on whether a court is free for a window. Every path
that creates or moves a booking, and every availability display, goes
through evaluate_availability.

A window is available when:
1. No pending/confirmed booking on the court overlaps it (half-open), and
2. No active blackout covers it on the window's calendar day.

The resolver never raises for a conflict; callers translate an unavailable
result into SchedulingConflict (writes) or an "unavailable" state (reads).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from court_scheduler.database import retry_read
from court_scheduler.exceptions import SchedulingConflict
from court_scheduler.models.bookings import Booking
from court_scheduler.models.blackouts import CourtBlackout
from court_scheduler.services import queries
from court_scheduler.services.blackouts import is_blocked
from court_scheduler.services.intervals import minutes_from_midnight


@dataclass
class AvailabilityResult:
    """Availability of a court for one window, with the reason when unavailable."""

    court_id: UUID
    start: datetime
    end: datetime
    available: bool
    conflicting_booking: Optional[Booking] = None
    blocked_by: Optional[CourtBlackout] = None

    @property
    def message(self) -> str:
        """Human-readable summary."""
        if self.available:
            return "Court available"
        if self.conflicting_booking is not None:
            booking = self.conflicting_booking
            return (
                f"Court already booked from {booking.start_time:%H:%M} "
                f"to {booking.end_time:%H:%M}"
            )
        block = self.blocked_by
        if block.is_full_day:
            return f"Court blocked: {block.reason}"
        return f"Court blocked from {block.start_time} to {block.end_time}: {block.reason}"

    def to_conflict(self) -> SchedulingConflict:
        """Build the domain error for an unavailable window."""
        return SchedulingConflict(
            self.message,
            conflicting_booking_id=self.conflicting_booking.id if self.conflicting_booking else None,
            blackout_id=self.blocked_by.id if self.blocked_by else None,
            blackout_reason=self.blocked_by.reason if self.blocked_by else None,
        )


def find_conflicting_bookings(
    session: Session,
    court_id: UUID,
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[UUID] = None,
) -> Sequence[Booking]:
    """
    Find active bookings that overlap [start, end) on a court.

    Cancelled and completed bookings never conflict.
    """
    return queries.find_active_bookings_overlapping(
        session, court_id, start, end, exclude_booking_id
    )


def evaluate_availability(
    session: Session,
    court_id: UUID,
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[UUID] = None,
) -> AvailabilityResult:
    """
    Decide whether a court is free for [start, end).

    Args:
        session: Database session
        court_id: Court to check
        start: Candidate start (inclusive)
        end: Candidate end (exclusive)
        exclude_booking_id: Booking to ignore, so an update does not collide
            with itself

    Returns:
        AvailabilityResult naming the first conflicting booking or blackout
    """
    # 1. Existing reservations
    conflicting = find_conflicting_bookings(session, court_id, start, end, exclude_booking_id)
    if conflicting:
        return AvailabilityResult(
            court_id=court_id,
            start=start,
            end=end,
            available=False,
            conflicting_booking=conflicting[0],
        )

    # 2. Blackouts on the candidate's calendar day
    day = start.date()
    check = is_blocked(
        session,
        court_id,
        day,
        minutes_from_midnight(day, start),
        minutes_from_midnight(day, end),
    )
    if check.blocked:
        return AvailabilityResult(
            court_id=court_id,
            start=start,
            end=end,
            available=False,
            blocked_by=check.block,
        )

    return AvailabilityResult(court_id=court_id, start=start, end=end, available=True)


def check_availability(
    session: Session,
    court_id: UUID,
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[UUID] = None,
) -> bool:
    """
    Check whether a court is free for [start, end).

    Returns:
        True only if no active booking overlaps and no blackout blocks the window
    """
    return evaluate_availability(session, court_id, start, end, exclude_booking_id).available


# Read-only variant for display paths; retried on transient database errors
evaluate_availability_for_display = retry_read(evaluate_availability)
