"""
Domain exceptions for the scheduling engine.

Provides structured error handling with retryable flags. Only persistence
failures are retryable; a scheduling conflict is a business outcome and is
surfaced immediately.
"""

from typing import Any, Optional


class CourtSchedulerError(Exception):
    """Base exception for scheduling operations."""

    retryable: bool = False
    error_type: str = "scheduler_error"

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    @property
    def details(self) -> dict[str, Any]:
        """Extra context rendered alongside the message."""
        return {}


class ValidationError(CourtSchedulerError):
    """
    Malformed or logically inconsistent input.

    Causes:
    - End time not after start time
    - Malformed HH:mm strings
    - Blackout date range reversed
    - Invalid slot grid configuration
    """

    error_type = "validation_error"


class NotFoundError(CourtSchedulerError):
    """Referenced court, client, booking or blackout does not exist."""

    error_type = "not_found"


class ForbiddenError(CourtSchedulerError):
    """Caller does not own the court, client, booking or blackout."""

    error_type = "forbidden"


class SchedulingConflict(CourtSchedulerError):
    """
    Requested window is not available.

    Carries either the overlapping booking or the blackout that blocks the
    window so the caller can render a useful message.
    """

    error_type = "scheduling_conflict"

    def __init__(
        self,
        message: str,
        conflicting_booking_id: Optional[Any] = None,
        blackout_id: Optional[Any] = None,
        blackout_reason: Optional[str] = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.conflicting_booking_id = conflicting_booking_id
        self.blackout_id = blackout_id
        self.blackout_reason = blackout_reason

    @property
    def details(self) -> dict[str, Any]:
        details = {}
        if self.conflicting_booking_id is not None:
            details["conflicting_booking_id"] = str(self.conflicting_booking_id)
        if self.blackout_id is not None:
            details["blackout_id"] = str(self.blackout_id)
        if self.blackout_reason is not None:
            details["blackout_reason"] = self.blackout_reason
        return details


class InvalidStateError(CourtSchedulerError):
    """
    Illegal lifecycle transition.

    Causes:
    - Cancelling a cancelled or completed booking
    - Confirming a booking that is not pending
    - Moving the window of a terminal booking
    """

    error_type = "invalid_state"


class PersistenceError(CourtSchedulerError):
    """
    Database unavailable or the court lock could not be acquired in time.

    Retryable: nothing was written.
    """

    error_type = "persistence_error"
    retryable = True
