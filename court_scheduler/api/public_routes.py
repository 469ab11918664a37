"""
Public routes used by the player-facing app.

No owner header is needed. Availability and slot reads are advisory and run
without the court lock; bookings made here go through the same conflict
checks as dashboard bookings.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from court_scheduler.api.dependencies import get_db_session, parse_id
from court_scheduler.api.models import (
    HHMM_REGEX,
    AvailabilityResponse,
    CourtInfoResponse,
    SlotsResponse,
    PublicBookingRequest,
    PublicBookingListResponse,
    BookingResponse,
    ErrorResponse,
)
from court_scheduler.api.response_builder import (
    build_blackout,
    build_booking,
    build_court_info,
    build_court_summary,
    build_public_booking,
    build_slots,
    total_pages,
)
from court_scheduler.services import bookings as booking_service
from court_scheduler.services.conflicts import evaluate_availability_for_display
from court_scheduler.services.intervals import combine, validate_window
from court_scheduler.services.ownership import require_court
from court_scheduler.services.slots import project_day_for_display

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public", tags=["Public"])


@router.get(
    "/courts/{court_id}/info",
    response_model=CourtInfoResponse,
    summary="Court details for public listings",
    responses={404: {"model": ErrorResponse, "description": "Court not found"}},
)
def get_court_info(
    court_id: UUID,
    db: Session = Depends(get_db_session),
) -> CourtInfoResponse:
    """Describe a court and its complex contact details, active or not."""
    return build_court_info(require_court(db, court_id))


@router.get(
    "/courts/{court_id}/availability",
    response_model=AvailabilityResponse,
    summary="Check whether a court is free",
    responses={
        400: {"model": ErrorResponse, "description": "End time not after start time"},
        404: {"model": ErrorResponse, "description": "Court not found"},
    },
)
def check_availability(
    court_id: UUID,
    day: date = Query(..., alias="date", description="Calendar day"),
    start_time: str = Query(..., pattern=HHMM_REGEX, description="Window start (HH:mm)"),
    end_time: str = Query(..., pattern=HHMM_REGEX, description="Window end (HH:mm)"),
    exclude_booking_id: Optional[UUID] = Query(
        None,
        description="Booking to ignore, when checking a move of that booking",
    ),
    db: Session = Depends(get_db_session),
) -> AvailabilityResponse:
    """
    Check a court for [start_time, end_time) on a day.

    An unavailable window is a normal answer (200), not an error.
    """
    start = combine(day, start_time)
    end = combine(day, end_time)
    validate_window(start, end)
    court = require_court(db, court_id)

    response = AvailabilityResponse(
        court=build_court_summary(court),
        date=day.isoformat(),
        start_time=start_time,
        end_time=end_time,
        available=False,
        message="Court is not active",
    )
    if not court.is_active:
        return response

    result = evaluate_availability_for_display(
        db, court_id, start, end, exclude_booking_id=exclude_booking_id
    )
    response.available = result.available
    response.message = result.message
    if result.conflicting_booking is not None:
        response.conflicting_booking_id = str(result.conflicting_booking.id)
    if result.blocked_by is not None:
        response.blocked_by = build_blackout(result.blocked_by)
    return response


@router.get(
    "/courts/{court_id}/slots",
    response_model=SlotsResponse,
    summary="Calendar slots of a court for a day",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid slot granularity"},
        404: {"model": ErrorResponse, "description": "Court not found"},
    },
)
def get_slots(
    court_id: UUID,
    day: date = Query(..., alias="date", description="Calendar day"),
    granularity: Optional[int] = Query(
        None,
        description="Slot length in minutes (defaults to the configured granularity)",
    ),
    db: Session = Depends(get_db_session),
) -> SlotsResponse:
    projection = project_day_for_display(db, court_id, day, granularity_minutes=granularity)
    return build_slots(projection)


@router.get(
    "/bookings",
    response_model=PublicBookingListResponse,
    summary="Browse bookings",
)
def list_public_bookings(
    court_id: Optional[UUID] = Query(None),
    day: Optional[date] = Query(None, alias="date"),
    status: Optional[str] = Query(
        None,
        pattern="^(pending|confirmed|cancelled|completed)$",
        description="Defaults to active bookings (pending and confirmed)",
    ),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db_session),
) -> PublicBookingListResponse:
    result = booking_service.query_public_bookings(
        db, court_id=court_id, day=day, status=status, page=page, limit=limit
    )
    return PublicBookingListResponse(
        bookings=[build_public_booking(b) for b in result.items],
        total=result.total,
        page=page,
        limit=limit,
        total_pages=total_pages(result.total, limit),
    )


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=201,
    summary="Book a court from the app",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid window or missing player identity"},
        404: {"model": ErrorResponse, "description": "Court or client not found"},
        409: {"model": ErrorResponse, "description": "Window overlaps a booking or blackout"},
    },
)
def create_public_booking(
    request: PublicBookingRequest,
    db: Session = Depends(get_db_session),
) -> BookingResponse:
    draft = booking_service.PublicBookingDraft(
        court_id=parse_id(request.court_id, "court_id"),
        booking_date=request.booking_date,
        start_time=request.start_time,
        end_time=request.end_time,
        is_app_native=request.is_app_native,
        app_user_id=request.app_user_id,
        client_id=parse_id(request.client_id, "client_id") if request.client_id else None,
        contact_name=request.contact_name,
        contact_phone=request.contact_phone,
        contact_email=request.contact_email,
        price=request.price,
        payment_method=request.payment_method,
        notes=request.notes,
    )
    booking = booking_service.create_public_booking(db, draft)
    logger.info(f"Public booking {booking.id} created for app user {booking.app_user_id}")
    return build_booking(booking)
