"""
SQLAlchemy models for Court Scheduler.

This module exports all database models for easy importing and
ensures Alembic can discover them for migrations.
"""

# Import base classes
from court_scheduler.models.base import Base, BaseModel, GUID

# Import all models (must be imported for Alembic autogenerate)
from court_scheduler.models.catalog import Complex, Court, Client
from court_scheduler.models.bookings import (
    Booking,
    BookingStatus,
    PaymentStatus,
    PaymentMethod,
    ACTIVE_BOOKING_STATUSES,
    TERMINAL_BOOKING_STATUSES,
)
from court_scheduler.models.blackouts import CourtBlackout, BlackoutReason

# Export all for easy importing
__all__ = [
    # Base classes
    "Base",
    "BaseModel",
    "GUID",
    # Catalog models
    "Complex",
    "Court",
    "Client",
    # Booking model
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "PaymentMethod",
    "ACTIVE_BOOKING_STATUSES",
    "TERMINAL_BOOKING_STATUSES",
    # Blackout model
    "CourtBlackout",
    "BlackoutReason",
]
