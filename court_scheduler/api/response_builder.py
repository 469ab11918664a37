"""
Response builder utilities for transforming ORM records to API responses.
"""

import math
from typing import Any, Optional

from court_scheduler.api.models import (
    BookingResponse,
    PublicBookingSummary,
    BlackoutResponse,
    CourtSummary,
    CourtInfoResponse,
    ComplexContact,
    CourtRef,
    SlotResponse,
    SlotsResponse,
    ComplexResponse,
    CourtResponse,
    ClientResponse,
)
from court_scheduler.models.blackouts import CourtBlackout
from court_scheduler.models.bookings import Booking
from court_scheduler.models.catalog import Complex, Court, Client
from court_scheduler.services.slots import DayProjection


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _id(value) -> Optional[str]:
    return str(value) if value is not None else None


def build_booking(booking: Booking) -> BookingResponse:
    """Convert a Booking to its API form."""
    court = booking.court
    client = booking.client
    return BookingResponse(
        id=str(booking.id),
        court_id=str(booking.court_id),
        court_name=court.name if court else None,
        owner_id=str(booking.owner_id),
        client_id=_id(booking.client_id),
        client_name=client.full_name if client else None,
        booking_date=booking.booking_date.isoformat(),
        start_time=booking.start_time.isoformat(),
        end_time=booking.end_time.isoformat(),
        duration_minutes=booking.duration_minutes,
        price=float(booking.price or 0),
        payment_method=booking.payment_method,
        payment_status=booking.payment_status,
        status=booking.status,
        notes=booking.notes,
        is_app_native=booking.is_app_native,
        app_user_id=booking.app_user_id,
        contact_name=booking.contact_name,
        contact_phone=booking.contact_phone,
        contact_email=booking.contact_email,
        created_at=_iso(booking.created_at),
    )


def build_public_booking(booking: Booking) -> PublicBookingSummary:
    """Public view of a booking: the window and status only."""
    return PublicBookingSummary(
        id=str(booking.id),
        court_id=str(booking.court_id),
        booking_date=booking.booking_date.isoformat(),
        start_time=booking.start_time.isoformat(),
        end_time=booking.end_time.isoformat(),
        status=booking.status,
    )


def build_blackout(blackout: CourtBlackout) -> BlackoutResponse:
    return BlackoutResponse(
        id=str(blackout.id),
        court_id=str(blackout.court_id),
        start_date=blackout.start_date.isoformat(),
        end_date=blackout.end_date.isoformat(),
        start_time=blackout.start_time,
        end_time=blackout.end_time,
        full_day=blackout.is_full_day,
        reason=blackout.reason,
        description=blackout.description,
        is_active=blackout.is_active,
        created_at=_iso(blackout.created_at),
    )


def build_court_summary(court: Court) -> CourtSummary:
    return CourtSummary(
        id=str(court.id),
        name=court.name,
        sport_type=court.sport_type,
        complex_name=court.complex.name if court.complex else None,
        is_active=court.is_active,
    )


def build_court_info(court: Court) -> CourtInfoResponse:
    complex_ = court.complex
    return CourtInfoResponse(
        id=str(court.id),
        name=court.name,
        description=court.description,
        sport_type=court.sport_type,
        is_active=court.is_active,
        complex=ComplexContact(name=complex_.name, address=complex_.address, phone=complex_.phone),
    )


def build_slots(projection: DayProjection) -> SlotsResponse:
    """Convert a day projection to the calendar response."""
    return SlotsResponse(
        court_id=str(projection.court_id),
        court=CourtRef(id=str(projection.court_id), name=projection.court_name),
        date=projection.date.isoformat(),
        total_slots=projection.total_slots,
        available_slots=projection.available_slots,
        slots=[
            SlotResponse(
                start_time=slot.start_time,
                end_time=slot.end_time,
                available=slot.available,
                reason=slot.reason,
                booking_id=_id(slot.booking_id),
                blackout_id=_id(slot.blackout_id),
            )
            for slot in projection.slots
        ],
    )


def build_complex(complex_: Complex) -> ComplexResponse:
    return ComplexResponse(
        id=str(complex_.id),
        owner_id=str(complex_.owner_id),
        name=complex_.name,
        address=complex_.address,
        phone=complex_.phone,
    )


def build_court(court: Court) -> CourtResponse:
    return CourtResponse(
        id=str(court.id),
        complex_id=str(court.complex_id),
        name=court.name,
        sport_type=court.sport_type,
        description=court.description,
        is_active=court.is_active,
    )


def build_client(client: Client) -> ClientResponse:
    return ClientResponse(
        id=str(client.id),
        first_name=client.first_name,
        last_name=client.last_name,
        email=client.email,
        phone=client.phone,
    )


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for total items at limit per page."""
    return math.ceil(total / limit) if limit else 0


def build_error_response(
    error_type: str,
    message: str,
    details: dict[str, Any] | None = None,
    retryable: bool = False,
) -> dict[str, Any]:
    """Build standardized error response dictionary."""
    return {
        "error_type": error_type,
        "message": message,
        "details": details,
        "retryable": retryable,
    }
