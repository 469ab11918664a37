"""
Court blackout model.

Entities:
- CourtBlackout: An owner-declared unavailability window on a court
"""

import enum
import uuid
from datetime import date
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, Boolean, Date, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from court_scheduler.models.base import BaseModel

# Avoid circular imports for type hints
if TYPE_CHECKING:
    from court_scheduler.models.catalog import Court


class BlackoutReason(str, enum.Enum):
    MAINTENANCE = "maintenance"
    PRIVATE_EVENT = "private_event"
    WEATHER = "weather"
    OTHER = "other"


class CourtBlackout(BaseModel):
    """
    Blocks a court for a range of days.

    The day range is inclusive. start_time/end_time are "HH:mm" strings applied
    to every day in the range; when both are NULL the whole day is blocked.
    Times are stored as strings rather than instants because they are
    day-agnostic daily bounds.

    Blackouts never touch existing bookings; they only affect later
    availability checks.
    """

    __tablename__ = "court_blackouts"

    court_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courts.id", ondelete="CASCADE"),
        nullable=False,
        doc="Court being blocked"
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        nullable=False,
        doc="Owner account that declared the blackout"
    )

    # Day range (inclusive)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)

    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Daily time bounds (HH:mm); both NULL means all day
    start_time: Mapped[Optional[str]] = mapped_column(
        String(5),
        nullable=True,
        doc="Daily block start (HH:mm)"
    )

    end_time: Mapped[Optional[str]] = mapped_column(
        String(5),
        nullable=True,
        doc="Daily block end (HH:mm, exclusive)"
    )

    reason: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        doc="Reason: 'maintenance', 'private_event', 'weather', 'other'"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Inactive blackouts are ignored by availability checks"
    )

    court: Mapped["Court"] = relationship(
        "Court",
        back_populates="blackouts",
    )

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_blackout_date_range"),
        Index("idx_blackout_court", "court_id"),
        Index("idx_blackout_owner", "owner_id"),
        # Composite index for "blocks on this day" lookups
        Index("idx_blackout_court_dates", "court_id", "is_active", "start_date", "end_date"),
    )

    @property
    def is_full_day(self) -> bool:
        """True when the blackout has no daily time bounds."""
        return not self.start_time or not self.end_time

    def __repr__(self) -> str:
        bounds = "all day" if self.is_full_day else f"{self.start_time}-{self.end_time}"
        return (
            f"<CourtBlackout(court_id={self.court_id}, "
            f"{self.start_date}..{self.end_date} {bounds}, reason='{self.reason}')>"
        )
