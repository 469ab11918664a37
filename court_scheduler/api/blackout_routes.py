"""
Owner-scoped blackout routes.

Blackouts block a court for a range of days, optionally only between two
daily times. They never touch existing bookings.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from court_scheduler.api.dependencies import get_db_session, get_owner_id, parse_id
from court_scheduler.api.models import (
    CreateBlackoutRequest,
    UpdateBlackoutRequest,
    BlackoutResponse,
    BlackoutListResponse,
    DeleteResponse,
    ErrorResponse,
)
from court_scheduler.api.response_builder import build_blackout
from court_scheduler.services import blackouts as blackout_service
from court_scheduler.services.ownership import require_court_owned

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Blackouts"])


@router.post(
    "/blackouts",
    response_model=BlackoutResponse,
    status_code=201,
    summary="Block a court",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid date or time range"},
        403: {"model": ErrorResponse, "description": "Court not owned"},
        404: {"model": ErrorResponse, "description": "Court not found"},
    },
)
def create_blackout(
    request: CreateBlackoutRequest,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BlackoutResponse:
    draft = blackout_service.BlackoutDraft(
        court_id=parse_id(request.court_id, "court_id"),
        start_date=request.start_date,
        end_date=request.end_date,
        start_time=request.start_time,
        end_time=request.end_time,
        reason=request.reason,
        description=request.description,
    )
    return build_blackout(blackout_service.create_blackout(db, owner_id, draft))


@router.get(
    "/blackouts",
    response_model=BlackoutListResponse,
    summary="List blackouts",
)
def list_blackouts(
    court_id: Optional[UUID] = Query(None),
    is_active: Optional[bool] = Query(None),
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BlackoutListResponse:
    """List the caller's blackouts, latest start date first."""
    items = blackout_service.list_blackouts(db, owner_id, court_id=court_id, is_active=is_active)
    return BlackoutListResponse(
        blackouts=[build_blackout(b) for b in items],
        total=len(items),
    )


@router.get(
    "/blackouts/{blackout_id}",
    response_model=BlackoutResponse,
    summary="Get a blackout",
)
def get_blackout(
    blackout_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BlackoutResponse:
    return build_blackout(blackout_service.get_blackout(db, blackout_id, owner_id))


@router.patch(
    "/blackouts/{blackout_id}",
    response_model=BlackoutResponse,
    summary="Update a blackout",
)
def update_blackout(
    blackout_id: UUID,
    request: UpdateBlackoutRequest,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BlackoutResponse:
    """
    Partially update a blackout.

    Only fields present in the body change; the result is validated as a whole.
    """
    changes = request.model_dump(exclude_unset=True)
    return build_blackout(blackout_service.update_blackout(db, blackout_id, owner_id, changes))


@router.post(
    "/blackouts/{blackout_id}/toggle",
    response_model=BlackoutResponse,
    summary="Activate or deactivate a blackout",
)
def toggle_blackout(
    blackout_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BlackoutResponse:
    return build_blackout(blackout_service.toggle_blackout(db, blackout_id, owner_id))


@router.delete(
    "/blackouts/{blackout_id}",
    response_model=DeleteResponse,
    summary="Delete a blackout",
)
def delete_blackout(
    blackout_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> DeleteResponse:
    blackout_service.delete_blackout(db, blackout_id, owner_id)
    return DeleteResponse(success=True, id=str(blackout_id), message="Blackout deleted")


@router.get(
    "/courts/{court_id}/blackouts",
    response_model=BlackoutListResponse,
    summary="Blackouts of one court",
)
def get_court_blackouts(
    court_id: UUID,
    start_date: Optional[date] = Query(None, description="Range start (inclusive)"),
    end_date: Optional[date] = Query(None, description="Range end (inclusive)"),
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> BlackoutListResponse:
    """
    Blackouts of an owned court.

    With a date range, only active blackouts intersecting it are returned,
    earliest first.
    """
    require_court_owned(db, court_id, owner_id)
    if start_date or end_date:
        items = blackout_service.get_active_blocks_in_range(
            db,
            court_id,
            start_date or end_date,
            end_date or start_date,
        )
    else:
        items = blackout_service.list_blackouts(db, owner_id, court_id=court_id)
    return BlackoutListResponse(
        blackouts=[build_blackout(b) for b in items],
        total=len(items),
    )
