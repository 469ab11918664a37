"""
Slot projector.

Materializes a fixed-granularity grid over the operating window of one court
and day for calendar views. Each cell is free, occupied by a booking, or
occupied by a blackout. Blackouts take precedence over bookings.

Bookings and blackouts are fetched once per projection and stamped onto the
grid by index range, so cost grows with slots + bookings + blocks rather
than with their product.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from court_scheduler.config import get_settings
from court_scheduler.database import retry_read
from court_scheduler.services import queries
from court_scheduler.services.blackouts import block_minutes, find_active_blocks
from court_scheduler.services.intervals import (
    combine,
    format_minutes,
    minutes_from_midnight,
    tile_window,
    to_minutes_since_midnight,
)
from court_scheduler.services.ownership import require_court

logger = logging.getLogger(__name__)

BOOKING_REASON = "existing booking"


@dataclass
class Slot:
    """One calendar cell."""

    start_time: str
    end_time: str
    available: bool = True
    reason: Optional[str] = None
    booking_id: Optional[UUID] = None
    blackout_id: Optional[UUID] = None


@dataclass
class DayProjection:
    """The slot grid of one court for one day."""

    court_id: UUID
    date: date
    slots: list[Slot] = field(default_factory=list)
    court_name: str = ""

    @property
    def total_slots(self) -> int:
        return len(self.slots)

    @property
    def available_slots(self) -> int:
        return sum(1 for slot in self.slots if slot.available)


def _cell_range(
    start_minute: int,
    end_minute: int,
    window_start: int,
    granularity: int,
    cell_count: int,
) -> range:
    """Indices of the cells that [start_minute, end_minute) touches."""
    first = max(0, (start_minute - window_start) // granularity)
    # Ceiling division: a partial overlap still occupies the cell
    last = min(cell_count, -((window_start - end_minute) // granularity))
    return range(first, last)


def project_day(
    session: Session,
    court_id: UUID,
    day: date,
    granularity_minutes: Optional[int] = None,
    window_start: Optional[str] = None,
    window_end: Optional[str] = None,
) -> DayProjection:
    """
    Build the slot grid for a court on a day.

    Args:
        session: Database session
        court_id: Court to project
        day: Calendar day
        granularity_minutes: Cell length (defaults to slot_granularity_minutes)
        window_start: First cell start, HH:mm (defaults to operating_window_start)
        window_end: Last cell end, HH:mm (defaults to operating_window_end)

    Returns:
        DayProjection with cells in chronological order

    Raises:
        ValidationError: If the grid configuration is invalid
        NotFoundError: If the court does not exist
    """
    settings = get_settings()
    granularity = granularity_minutes if granularity_minutes is not None else settings.slot_granularity_minutes
    start_minute = to_minutes_since_midnight(window_start or settings.operating_window_start)
    end_minute = to_minutes_since_midnight(window_end or settings.operating_window_end)

    # Reject a bad grid before touching the database
    cells = tile_window(start_minute, end_minute, granularity)

    court = require_court(session, court_id)

    slots = [
        Slot(start_time=format_minutes(cell_start), end_time=format_minutes(cell_end))
        for cell_start, cell_end in cells
    ]
    count = len(slots)

    # Blackouts first; registry order decides between overlapping blocks
    for block in find_active_blocks(session, court_id, day):
        bounds = block_minutes(block)
        if bounds is None:
            indices = range(count)
        else:
            indices = _cell_range(bounds[0], bounds[1], start_minute, granularity, count)
        for index in indices:
            slot = slots[index]
            if slot.available:
                slot.available = False
                slot.reason = block.reason
                slot.blackout_id = block.id

    bookings = queries.find_active_bookings_overlapping(
        session,
        court_id,
        combine(day, start_minute),
        combine(day, end_minute),
    )
    for booking in bookings:
        indices = _cell_range(
            minutes_from_midnight(day, booking.start_time),
            minutes_from_midnight(day, booking.end_time),
            start_minute,
            granularity,
            count,
        )
        for index in indices:
            slot = slots[index]
            if slot.available:
                slot.available = False
                slot.reason = BOOKING_REASON
                slot.booking_id = booking.id

    projection = DayProjection(court_id=court_id, date=day, slots=slots, court_name=court.name)
    logger.debug(
        f"Projected {projection.total_slots} slots for court {court_id} on {day} "
        f"({projection.available_slots} free)"
    )
    return projection


# Display path; retried on transient database errors
project_day_for_display = retry_read(project_day)
