"""
Catalog models owned by complex operators.

Entities:
- Complex: A sports complex belonging to one owner account
- Court: A bookable court inside a complex
- Client: A customer record kept by an owner
"""

import uuid
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from court_scheduler.models.base import BaseModel

# Avoid circular imports for type hints
if TYPE_CHECKING:
    from court_scheduler.models.bookings import Booking
    from court_scheduler.models.blackouts import CourtBlackout


class Complex(BaseModel):
    """
    A sports complex run by a single owner account.

    The owner account lives in the identity service; only its id is kept here.
    """

    __tablename__ = "complexes"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        nullable=False,
        doc="Owning account (identity is managed externally)"
    )

    name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        doc="Complex name"
    )

    address: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    courts: Mapped[list["Court"]] = relationship(
        "Court",
        back_populates="complex",
        cascade="all, delete-orphan",
        doc="Courts inside this complex"
    )

    __table_args__ = (
        Index("idx_complex_owner", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<Complex(name='{self.name}', owner_id={self.owner_id})>"


class Court(BaseModel):
    """
    A bookable court (the scheduling resource).

    Ownership is transitive: a court belongs to its complex's owner.
    """

    __tablename__ = "courts"

    complex_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("complexes.id", ondelete="CASCADE"),
        nullable=False,
        doc="Complex this court belongs to"
    )

    name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        doc="Court name (e.g., 'Court 1 - Football')"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    sport_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        doc="Sport played on the court: 'football', 'padel', 'tennis', ..."
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Inactive courts accept no new bookings"
    )

    # Relationships
    complex: Mapped["Complex"] = relationship(
        "Complex",
        back_populates="courts",
    )

    bookings: Mapped[list["Booking"]] = relationship(
        "Booking",
        back_populates="court",
        cascade="all, delete-orphan",
    )

    blackouts: Mapped[list["CourtBlackout"]] = relationship(
        "CourtBlackout",
        back_populates="court",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_court_complex", "complex_id"),
        Index("idx_court_active", "is_active"),
    )

    @property
    def owner_id(self) -> uuid.UUID:
        """Owner of the complex this court belongs to."""
        return self.complex.owner_id

    def __repr__(self) -> str:
        return f"<Court(name='{self.name}', active={self.is_active})>"


class Client(BaseModel):
    """A customer record kept by an owner for dashboard bookings."""

    __tablename__ = "clients"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        nullable=False,
        doc="Owner account that manages this client"
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)

    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    bookings: Mapped[list["Booking"]] = relationship(
        "Booking",
        back_populates="client",
    )

    __table_args__ = (
        Index("idx_client_owner", "owner_id"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Client(name='{self.full_name}')>"
