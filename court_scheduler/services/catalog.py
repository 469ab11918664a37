"""
Catalog records: complexes, courts and clients.

Plain owner-scoped records the scheduling engine reads from.
"""

import logging
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from court_scheduler.exceptions import ValidationError
from court_scheduler.models.catalog import Complex, Court, Client
from court_scheduler.services import queries
from court_scheduler.services.ownership import require_complex_owned

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required")
    return value.strip()


def create_complex(
    session: Session,
    owner_id: UUID,
    name: str,
    address: Optional[str] = None,
    phone: Optional[str] = None,
) -> Complex:
    """Register a complex for an owner."""
    complex_ = Complex(
        owner_id=owner_id,
        name=_require_text(name, "Complex name"),
        address=address,
        phone=phone,
    )
    session.add(complex_)
    session.flush()
    logger.info(f"Complex {complex_.id} created for owner {owner_id}")
    return complex_


def create_court(
    session: Session,
    owner_id: UUID,
    complex_id: UUID,
    name: str,
    sport_type: Optional[str] = None,
    description: Optional[str] = None,
    is_active: bool = True,
) -> Court:
    """
    Add a court to an owned complex.

    Raises:
        NotFoundError: Complex missing
        ForbiddenError: Complex owned by someone else
    """
    complex_ = require_complex_owned(session, complex_id, owner_id)
    court = Court(
        complex_id=complex_.id,
        name=_require_text(name, "Court name"),
        sport_type=sport_type,
        description=description,
        is_active=is_active,
    )
    court.complex = complex_
    session.add(court)
    session.flush()
    logger.info(f"Court {court.id} created in complex {complex_id}")
    return court


def create_client(
    session: Session,
    owner_id: UUID,
    first_name: str,
    last_name: str,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> Client:
    """Register a client for an owner."""
    client = Client(
        owner_id=owner_id,
        first_name=_require_text(first_name, "First name"),
        last_name=_require_text(last_name, "Last name"),
        email=email,
        phone=phone,
    )
    session.add(client)
    session.flush()
    logger.info(f"Client {client.id} created for owner {owner_id}")
    return client


def list_complexes(session: Session, owner_id: UUID) -> Sequence[Complex]:
    return queries.list_complexes(session, owner_id)


def list_courts(
    session: Session,
    owner_id: UUID,
    complex_id: Optional[UUID] = None,
    active_only: bool = False,
) -> Sequence[Court]:
    if complex_id is not None:
        require_complex_owned(session, complex_id, owner_id)
    return queries.list_courts(session, owner_id, complex_id, active_only)


def list_clients(session: Session, owner_id: UUID) -> Sequence[Client]:
    return queries.list_clients(session, owner_id)
