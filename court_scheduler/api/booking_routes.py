"""
Owner-scoped booking routes.

Every route requires the X-Owner-ID header and only touches bookings of
courts the caller owns.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from court_scheduler.api.dependencies import get_db_session, get_owner_id, parse_id
from court_scheduler.api.models import (
    CreateBookingRequest,
    UpdateBookingRequest,
    BookingResponse,
    BookingListResponse,
    BookingStatsResponse,
    DeleteResponse,
    ErrorResponse,
)
from court_scheduler.api.response_builder import build_booking, total_pages
from court_scheduler.services import bookings as booking_service
from court_scheduler.services.queries import BookingQuery
from court_scheduler.services.stats import booking_stats

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bookings"])


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=201,
    summary="Create a booking",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid window or inactive court"},
        403: {"model": ErrorResponse, "description": "Court or client not owned"},
        404: {"model": ErrorResponse, "description": "Court or client not found"},
        409: {"model": ErrorResponse, "description": "Window overlaps a booking or blackout"},
    },
)
def create_booking(
    request: CreateBookingRequest,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BookingResponse:
    """
    Reserve a court for [start_time, end_time).

    The new booking is pending with payment pending.
    """
    draft = booking_service.BookingDraft(
        court_id=parse_id(request.court_id, "court_id"),
        start_time=request.start_time,
        end_time=request.end_time,
        client_id=parse_id(request.client_id, "client_id") if request.client_id else None,
        booking_date=request.booking_date,
        price=request.price,
        payment_method=request.payment_method,
        notes=request.notes,
    )
    booking = booking_service.create_booking(db, owner_id, draft)
    return build_booking(booking)


@router.get(
    "/bookings",
    response_model=BookingListResponse,
    summary="List bookings",
)
def list_bookings(
    court_id: Optional[UUID] = Query(None),
    client_id: Optional[UUID] = Query(None),
    status: Optional[str] = Query(
        None,
        pattern="^(pending|confirmed|cancelled|completed)$",
        description="Filter by booking status",
    ),
    date_from: Optional[date] = Query(None, description="First booking_date included"),
    date_to: Optional[date] = Query(None, description="Last booking_date included"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BookingListResponse:
    """List the caller's bookings, newest first."""
    query = BookingQuery(
        court_id=court_id,
        client_id=client_id,
        statuses=[status] if status else None,
        date_from=date_from,
        date_to=date_to,
        offset=(page - 1) * limit,
        limit=limit,
    )
    result = booking_service.list_bookings(db, owner_id, query)
    return BookingListResponse(
        bookings=[build_booking(b) for b in result.items],
        total=result.total,
        page=page,
        limit=limit,
        total_pages=total_pages(result.total, limit),
    )


@router.get(
    "/bookings/stats",
    response_model=BookingStatsResponse,
    summary="Booking counts and revenue",
)
def get_booking_stats(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BookingStatsResponse:
    stats = booking_stats(db, owner_id, date_from, date_to)
    return BookingStatsResponse(
        total_bookings=stats.total_bookings,
        by_status=stats.by_status,
        total_revenue=float(stats.total_revenue),
        paid_revenue=float(stats.paid_revenue),
        pending_revenue=float(stats.pending_revenue),
    )


@router.get(
    "/bookings/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking",
)
def get_booking(
    booking_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BookingResponse:
    return build_booking(booking_service.get_booking(db, booking_id, owner_id))


@router.patch(
    "/bookings/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
    responses={
        409: {"model": ErrorResponse, "description": "New window taken, or booking is terminal"},
    },
)
def update_booking(
    booking_id: UUID,
    request: UpdateBookingRequest,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BookingResponse:
    """
    Partially update a booking.

    Changing start_time or end_time re-checks the court, ignoring this
    booking's own window.
    """
    changes = booking_service.BookingChanges(**request.model_dump(exclude_unset=True))
    booking = booking_service.update_booking(db, booking_id, owner_id, changes)
    return build_booking(booking)


@router.post(
    "/bookings/{booking_id}/confirm",
    response_model=BookingResponse,
    summary="Confirm a pending booking",
)
def confirm_booking(
    booking_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BookingResponse:
    return build_booking(booking_service.confirm_booking(db, booking_id, owner_id))


@router.post(
    "/bookings/{booking_id}/complete",
    response_model=BookingResponse,
    summary="Mark a confirmed booking as played",
)
def complete_booking(
    booking_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BookingResponse:
    return build_booking(booking_service.complete_booking(db, booking_id, owner_id))


@router.post(
    "/bookings/{booking_id}/cancel",
    response_model=BookingResponse,
    summary="Cancel a booking",
    responses={409: {"model": ErrorResponse, "description": "Booking already cancelled or completed"}},
)
def cancel_booking(
    booking_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BookingResponse:
    """Cancel a booking; a paid booking is marked refunded."""
    return build_booking(booking_service.cancel_booking(db, booking_id, owner_id))


@router.delete(
    "/bookings/{booking_id}",
    response_model=DeleteResponse,
    summary="Delete a booking permanently",
)
def delete_booking(
    booking_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> DeleteResponse:
    booking_service.delete_booking(db, booking_id, owner_id)
    return DeleteResponse(
        success=True,
        id=str(booking_id),
        message="Booking deleted",
    )


@router.get(
    "/courts/{court_id}/bookings",
    response_model=list[BookingResponse],
    summary="Bookings of one court",
)
def get_court_bookings(
    court_id: UUID,
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    status: Optional[str] = Query(
        None,
        pattern="^(pending|confirmed|cancelled|completed)$",
    ),
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> list[BookingResponse]:
    """Chronological bookings of an owned court."""
    items = booking_service.get_court_bookings(
        db,
        court_id,
        owner_id,
        date_from=date_from,
        date_to=date_to,
        statuses=[status] if status else None,
    )
    return [build_booking(b) for b in items]
