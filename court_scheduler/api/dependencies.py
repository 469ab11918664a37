"""
FastAPI dependency injection providers.

Provides database sessions and the calling owner's identity.
"""

import logging
from typing import Generator, Optional
from uuid import UUID

from fastapi import Header, HTTPException
from sqlalchemy.orm import Session

from court_scheduler.database import get_db

logger = logging.getLogger(__name__)


def get_db_session() -> Generator[Session, None, None]:
    """
    Dependency injection for database session.

    Commits when the request succeeds and rolls back when it raises.
    """
    yield from get_db()


def get_owner_id(
    x_owner_id: Optional[str] = Header(None, description="Owner account ID (UUID)"),
) -> UUID:
    """
    Resolve the calling owner from the X-Owner-ID header.

    Authentication happens upstream; this only parses the forwarded identity.

    Raises:
        HTTPException: 401 if the header is missing or not a UUID
    """
    if not x_owner_id:
        raise HTTPException(status_code=401, detail="X-Owner-ID header is required")
    try:
        return UUID(x_owner_id)
    except ValueError:
        logger.warning(f"Rejected malformed owner id '{x_owner_id}'")
        raise HTTPException(status_code=401, detail="X-Owner-ID must be a valid UUID")


def parse_id(value: str, label: str) -> UUID:
    """Parse a path or body identifier, answering 400 when malformed."""
    try:
        return UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} '{value}'")
