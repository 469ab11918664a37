"""
Per-court write serialization.

The availability check and the write that follows it must not interleave
with another writer on the same court, otherwise two requests can both see
a free window and both insert. Each court gets its own mutex, held across
check, write and commit by the booking lifecycle services.

Locks are in-process: one application process per database is assumed.
Different courts never contend.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional
from uuid import UUID

from court_scheduler.config import get_settings
from court_scheduler.exceptions import PersistenceError

logger = logging.getLogger(__name__)

# Module-level registry instance (singleton pattern)
_court_locks: Optional["CourtLockRegistry"] = None


class CourtLockRegistry:
    """Lazily created mutexes keyed by court id."""

    def __init__(self):
        self._locks: dict[UUID, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, court_id: UUID) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(court_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[court_id] = lock
            return lock

    @contextmanager
    def hold(self, court_id: UUID, timeout: Optional[float] = None) -> Generator[None, None, None]:
        """
        Hold the lock for a court for the duration of the block.

        Args:
            court_id: Court whose bookings are being written
            timeout: Seconds to wait (defaults to booking_lock_timeout_seconds)

        Raises:
            PersistenceError: If the lock is not acquired in time
        """
        if timeout is None:
            timeout = get_settings().booking_lock_timeout_seconds

        lock = self._lock_for(court_id)
        if not lock.acquire(timeout=timeout):
            logger.warning(f"Timed out after {timeout}s waiting for court {court_id}")
            raise PersistenceError(f"Court {court_id} is busy, try again")

        try:
            yield
        finally:
            lock.release()

    def __len__(self) -> int:
        return len(self._locks)


def get_court_locks() -> CourtLockRegistry:
    """Get the court lock registry singleton."""
    global _court_locks

    if _court_locks is None:
        _court_locks = CourtLockRegistry()

    return _court_locks


def reset_court_locks() -> None:
    """Reset the lock registry singleton (useful for testing)."""
    global _court_locks
    _court_locks = None
