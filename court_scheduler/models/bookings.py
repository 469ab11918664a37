"""
Booking model.

Entities:
- Booking: A reservation of one court for a half-open time window
"""

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from sqlalchemy import (
    String, Text, Boolean, Date, DateTime, Integer, Numeric, ForeignKey, Index,
    CheckConstraint, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from court_scheduler.models.base import BaseModel

# Avoid circular imports for type hints
if TYPE_CHECKING:
    from court_scheduler.models.catalog import Court, Client


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    OTHER = "other"


# Only these statuses occupy a court
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)
TERMINAL_BOOKING_STATUSES = (BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value)

_ACTIVE_SQL = "status IN ('pending', 'confirmed')"


class Booking(BaseModel):
    """
    A reservation of a court.

    Time fields are naive local instants; the window is half-open
    [start_time, end_time), so back-to-back bookings do not collide.

    Status workflow:
    1. pending: Created, awaiting confirmation
    2. confirmed: Accepted by the operator
    3. completed: Played (terminal)
    4. cancelled: Withdrawn (terminal, payment refunded if it was paid)
    """

    __tablename__ = "bookings"

    # Court and ownership
    court_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courts.id", ondelete="CASCADE"),
        nullable=False,
        doc="Court being reserved"
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        nullable=False,
        doc="Owner account the booking belongs to"
    )

    client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("clients.id"),
        nullable=True,
        doc="Client the booking is for (NULL for app-native bookings)"
    )

    # Time window
    booking_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        doc="Calendar day of the booking"
    )

    start_time: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        doc="Reservation start (naive local time, inclusive)"
    )

    end_time: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        doc="Reservation end (naive local time, exclusive)"
    )

    duration_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Length of the window in minutes"
    )

    # Money
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
    )

    payment_method: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        doc="Payment method: 'cash', 'card', 'transfer', 'other'"
    )

    payment_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.PENDING.value,
        doc="Payment status: 'pending', 'paid', 'refunded'"
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING.value,
        doc="Booking status: 'pending', 'confirmed', 'cancelled', 'completed'"
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # App-native bookings carry contact data instead of a client record
    is_app_native: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    app_user_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    contact_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Relationships
    court: Mapped["Court"] = relationship(
        "Court",
        back_populates="bookings",
    )

    client: Mapped[Optional["Client"]] = relationship(
        "Client",
        back_populates="bookings",
    )

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_booking_window_positive"),
        Index("idx_booking_court", "court_id"),
        Index("idx_booking_owner", "owner_id"),
        Index("idx_booking_client", "client_id"),
        Index("idx_booking_status", "status"),
        Index("idx_booking_date", "booking_date"),
        # Composite index for availability queries
        Index("idx_booking_court_time", "court_id", "start_time", "end_time"),
        # Store-level backstop: two active bookings never share a start on one court
        Index(
            "uq_booking_active_court_start",
            "court_id",
            "start_time",
            unique=True,
            sqlite_where=text(_ACTIVE_SQL),
            postgresql_where=text(_ACTIVE_SQL),
        ),
    )

    @property
    def is_active(self) -> bool:
        """Whether the booking currently occupies its court."""
        return self.status in ACTIVE_BOOKING_STATUSES

    def __repr__(self) -> str:
        return f"<Booking(court_id={self.court_id}, start={self.start_time}, status='{self.status}')>"
