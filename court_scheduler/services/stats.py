"""
Booking statistics for owner dashboards.

Aggregates already-resolved bookings; no availability logic runs here.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, and_, func, case
from sqlalchemy.orm import Session

from court_scheduler.models.bookings import Booking, BookingStatus, PaymentStatus


@dataclass
class BookingStats:
    total_bookings: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    total_revenue: Decimal = Decimal("0")
    paid_revenue: Decimal = Decimal("0")

    @property
    def pending_revenue(self) -> Decimal:
        """Revenue not collected yet."""
        return self.total_revenue - self.paid_revenue


def booking_stats(
    session: Session,
    owner_id: UUID,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> BookingStats:
    """
    Summarize an owner's bookings.

    Revenue counts bookings that are not cancelled; paid revenue only those
    with payment_status 'paid'.

    Args:
        session: Database session
        owner_id: Owner account
        date_from: First booking_date included
        date_to: Last booking_date included

    Returns:
        BookingStats with a count for every status (zero when absent)
    """
    conditions = [Booking.owner_id == owner_id]
    if date_from:
        conditions.append(Booking.booking_date >= date_from)
    if date_to:
        conditions.append(Booking.booking_date <= date_to)

    count_stmt = (
        select(Booking.status, func.count())
        .where(and_(*conditions))
        .group_by(Booking.status)
    )
    by_status = {status.value: 0 for status in BookingStatus}
    for status, count in session.execute(count_stmt).all():
        by_status[status] = count

    not_cancelled = Booking.status != BookingStatus.CANCELLED.value
    revenue_stmt = select(
        func.coalesce(func.sum(Booking.price), 0),
        func.coalesce(
            func.sum(
                case((Booking.payment_status == PaymentStatus.PAID.value, Booking.price), else_=0)
            ),
            0,
        ),
    ).where(and_(not_cancelled, *conditions))
    total_revenue, paid_revenue = session.execute(revenue_stmt).one()

    return BookingStats(
        total_bookings=sum(by_status.values()),
        by_status=by_status,
        total_revenue=Decimal(str(total_revenue)),
        paid_revenue=Decimal(str(paid_revenue)),
    )
