"""
Blackout registry.

Holds date-ranged, optionally time-ranged blocks per court and answers
"is court C blocked during [day, start, end)?".

Blocks are evaluated lazily at query time and never rewrite existing
bookings.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from court_scheduler.exceptions import ValidationError
from court_scheduler.models.blackouts import CourtBlackout, BlackoutReason
from court_scheduler.services import queries
from court_scheduler.services.intervals import overlaps, to_minutes_since_midnight
from court_scheduler.services.ownership import (
    require_court_owned,
    require_blackout_owned,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"start_date", "end_date", "start_time", "end_time", "reason", "description"}


@dataclass
class BlockCheck:
    """Result of checking a window against a court's blackouts."""

    blocked: bool
    block: Optional[CourtBlackout] = None


@dataclass
class BlackoutDraft:
    """Input for a new blackout."""

    court_id: UUID
    start_date: date
    end_date: date
    reason: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None


def block_minutes(block: CourtBlackout) -> Optional[tuple[int, int]]:
    """
    Daily bounds of a blackout in minutes since midnight.

    Returns:
        (start, end) or None for a full-day blackout
    """
    if block.is_full_day:
        return None
    return (
        to_minutes_since_midnight(block.start_time),
        to_minutes_since_midnight(block.end_time),
    )


def evaluate_blocks(
    blocks: Sequence[CourtBlackout],
    start_minute: int,
    end_minute: int,
) -> BlockCheck:
    """
    Check a window of one day against already-fetched blackouts.

    Blocks are examined in the given order and the first match wins. A block
    without time bounds blocks the whole day.

    Args:
        blocks: Active blackouts covering the day
        start_minute: Window start in minutes since that day's midnight
        end_minute: Window end in minutes since that day's midnight

    Returns:
        BlockCheck naming the first blocking blackout, if any
    """
    for block in blocks:
        bounds = block_minutes(block)
        if bounds is None:
            return BlockCheck(blocked=True, block=block)
        if overlaps(start_minute, end_minute, bounds[0], bounds[1]):
            return BlockCheck(blocked=True, block=block)
    return BlockCheck(blocked=False)


def find_active_blocks(session: Session, court_id: UUID, day: date) -> Sequence[CourtBlackout]:
    """
    Get active blackouts whose inclusive date range contains a day.

    Ordered by start_date ascending so the first match is reproducible.
    """
    return queries.find_blackouts(
        session,
        queries.BlackoutQuery(
            court_id=court_id,
            is_active=True,
            covers_from=day,
            covers_to=day,
            newest_first=False,
        ),
    )


def is_blocked(
    session: Session,
    court_id: UUID,
    day: date,
    start_minute: int,
    end_minute: int,
) -> BlockCheck:
    """
    Check whether a court is blocked during [start_minute, end_minute) on a day.

    Args:
        session: Database session
        court_id: Court to check
        day: Calendar day
        start_minute: Window start in minutes since midnight
        end_minute: Window end in minutes since midnight

    Returns:
        BlockCheck with the blocking blackout when blocked
    """
    blocks = find_active_blocks(session, court_id, day)
    if not blocks:
        return BlockCheck(blocked=False)
    return evaluate_blocks(blocks, start_minute, end_minute)


def get_active_blocks_in_range(
    session: Session,
    court_id: UUID,
    start_date: date,
    end_date: date,
) -> Sequence[CourtBlackout]:
    """Get active blackouts intersecting an inclusive date range, earliest first."""
    if end_date < start_date:
        raise ValidationError("End date must not be before start date")
    return queries.find_blackouts(
        session,
        queries.BlackoutQuery(
            court_id=court_id,
            is_active=True,
            covers_from=start_date,
            covers_to=end_date,
            newest_first=False,
        ),
    )


# =============================================================================
# Blackout management (owner-scoped)
# =============================================================================


def _validate_blackout_fields(
    start_date: date,
    end_date: date,
    start_time: Optional[str],
    end_time: Optional[str],
    reason: str,
) -> str:
    """Validate blackout fields together and return the normalized reason."""
    if end_date < start_date:
        raise ValidationError("End date must not be before start date")

    if (start_time is None) != (end_time is None):
        raise ValidationError(
            "Provide both start_time and end_time, or neither for a full-day blackout"
        )

    if start_time is not None:
        if to_minutes_since_midnight(end_time) <= to_minutes_since_midnight(start_time):
            raise ValidationError("Blackout end time must be after its start time")

    try:
        return BlackoutReason(reason).value
    except ValueError as e:
        raise ValidationError(f"Unknown blackout reason '{reason}'", original_error=e)


def create_blackout(session: Session, owner_id: UUID, draft: BlackoutDraft) -> CourtBlackout:
    """
    Declare a blackout on an owned court.

    Args:
        session: Database session
        owner_id: Caller
        draft: Blackout fields

    Returns:
        The new, active blackout
    """
    require_court_owned(session, draft.court_id, owner_id)
    reason = _validate_blackout_fields(
        draft.start_date, draft.end_date, draft.start_time, draft.end_time, draft.reason
    )

    blackout = CourtBlackout(
        court_id=draft.court_id,
        owner_id=owner_id,
        start_date=draft.start_date,
        end_date=draft.end_date,
        start_time=draft.start_time,
        end_time=draft.end_time,
        reason=reason,
        description=draft.description,
        is_active=True,
    )
    session.add(blackout)
    session.flush()

    logger.info(f"Blackout {blackout.id} created on court {draft.court_id}: {blackout!r}")
    return blackout


def get_blackout(session: Session, blackout_id: UUID, owner_id: UUID) -> CourtBlackout:
    """Get an owned blackout."""
    return require_blackout_owned(session, blackout_id, owner_id)


def list_blackouts(
    session: Session,
    owner_id: UUID,
    court_id: Optional[UUID] = None,
    is_active: Optional[bool] = None,
) -> Sequence[CourtBlackout]:
    """List an owner's blackouts, newest start date first."""
    return queries.find_blackouts(
        session,
        queries.BlackoutQuery(owner_id=owner_id, court_id=court_id, is_active=is_active),
    )


def update_blackout(
    session: Session,
    blackout_id: UUID,
    owner_id: UUID,
    changes: dict[str, Any],
) -> CourtBlackout:
    """
    Apply a partial update to a blackout.

    The merged result is validated as a whole, so clearing both times turns
    the blackout into a full-day block.

    Args:
        session: Database session
        blackout_id: Blackout to edit
        owner_id: Caller
        changes: Field values to set (only keys present are changed)
    """
    blackout = require_blackout_owned(session, blackout_id, owner_id)

    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update blackout fields: {', '.join(sorted(unknown))}")

    merged = {field: getattr(blackout, field) for field in UPDATABLE_FIELDS}
    merged.update(changes)
    merged["reason"] = _validate_blackout_fields(
        merged["start_date"],
        merged["end_date"],
        merged["start_time"],
        merged["end_time"],
        merged["reason"],
    )

    for field in changes:
        setattr(blackout, field, merged[field])
    session.flush()

    logger.info(f"Blackout {blackout_id} updated: {sorted(changes)}")
    return blackout


def toggle_blackout(session: Session, blackout_id: UUID, owner_id: UUID) -> CourtBlackout:
    """Flip a blackout between active and inactive."""
    blackout = require_blackout_owned(session, blackout_id, owner_id)
    blackout.is_active = not blackout.is_active
    session.flush()

    logger.info(
        f"Blackout {blackout_id} {'activated' if blackout.is_active else 'deactivated'}"
    )
    return blackout


def delete_blackout(session: Session, blackout_id: UUID, owner_id: UUID) -> None:
    """Remove a blackout permanently."""
    blackout = require_blackout_owned(session, blackout_id, owner_id)
    session.delete(blackout)
    session.flush()
    logger.info(f"Blackout {blackout_id} deleted")
