"""
Catalog routes: complexes, courts and clients of the calling owner.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from court_scheduler.api.dependencies import get_db_session, get_owner_id, parse_id
from court_scheduler.api.models import (
    CreateComplexRequest,
    ComplexResponse,
    CreateCourtRequest,
    CourtResponse,
    CreateClientRequest,
    ClientResponse,
)
from court_scheduler.api.response_builder import build_complex, build_court, build_client
from court_scheduler.services import catalog

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Catalog"])


@router.post("/complexes", response_model=ComplexResponse, status_code=201)
def create_complex(
    request: CreateComplexRequest,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> ComplexResponse:
    complex_ = catalog.create_complex(
        db, owner_id, request.name, address=request.address, phone=request.phone
    )
    return build_complex(complex_)


@router.get("/complexes", response_model=list[ComplexResponse])
def list_complexes(
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> list[ComplexResponse]:
    return [build_complex(c) for c in catalog.list_complexes(db, owner_id)]


@router.post("/courts", response_model=CourtResponse, status_code=201)
def create_court(
    request: CreateCourtRequest,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> CourtResponse:
    court = catalog.create_court(
        db,
        owner_id,
        parse_id(request.complex_id, "complex_id"),
        request.name,
        sport_type=request.sport_type,
        description=request.description,
        is_active=request.is_active,
    )
    return build_court(court)


@router.get("/courts", response_model=list[CourtResponse])
def list_courts(
    complex_id: Optional[UUID] = Query(None),
    active_only: bool = Query(False),
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> list[CourtResponse]:
    courts = catalog.list_courts(db, owner_id, complex_id=complex_id, active_only=active_only)
    return [build_court(c) for c in courts]


@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(
    request: CreateClientRequest,
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> ClientResponse:
    client = catalog.create_client(
        db,
        owner_id,
        request.first_name,
        request.last_name,
        email=request.email,
        phone=request.phone,
    )
    return build_client(client)


@router.get("/clients", response_model=list[ClientResponse])
def list_clients(
    owner_id: UUID = Depends(get_owner_id),
    db: Session = Depends(get_db_session),
) -> list[ClientResponse]:
    return [build_client(c) for c in catalog.list_clients(db, owner_id)]
