"""
Service layer for the Court Scheduler.

Provides business logic and data access patterns for:
- Interval arithmetic (half-open overlap, HH:mm conversion, slot tiling)
- Blackout registry and conflict resolution
- Slot projection for calendar views
- Booking lifecycle (create, move, confirm, complete, cancel)
- Catalog records and booking statistics
"""

from court_scheduler.services.intervals import (
    overlaps,
    parse_hhmm,
    to_minutes_since_midnight,
    format_minutes,
    combine,
    day_bounds,
    minutes_from_midnight,
    duration_minutes,
    validate_window,
    tile_window,
)

from court_scheduler.services.queries import (
    BookingQuery,
    BlackoutQuery,
    Page,
    find_bookings,
    find_blackouts,
    find_active_bookings_overlapping,
)

from court_scheduler.services.ownership import (
    require_court,
    require_court_owned,
    require_complex_owned,
    require_client_owned,
    require_booking_owned,
    require_blackout_owned,
)

from court_scheduler.services.blackouts import (
    BlockCheck,
    BlackoutDraft,
    find_active_blocks,
    evaluate_blocks,
    is_blocked,
    get_active_blocks_in_range,
    create_blackout,
    update_blackout,
    toggle_blackout,
    delete_blackout,
    list_blackouts,
)

from court_scheduler.services.conflicts import (
    AvailabilityResult,
    find_conflicting_bookings,
    evaluate_availability,
    evaluate_availability_for_display,
    check_availability,
)

from court_scheduler.services.locking import (
    CourtLockRegistry,
    get_court_locks,
    reset_court_locks,
)

from court_scheduler.services.slots import (
    Slot,
    DayProjection,
    project_day,
    project_day_for_display,
)

from court_scheduler.services.bookings import (
    BookingDraft,
    PublicBookingDraft,
    BookingChanges,
    create_booking,
    create_public_booking,
    update_booking,
    confirm_booking,
    complete_booking,
    cancel_booking,
    delete_booking,
    list_bookings,
    get_court_bookings,
    query_public_bookings,
)

from court_scheduler.services.stats import BookingStats, booking_stats

__all__ = [
    # Intervals
    "overlaps",
    "parse_hhmm",
    "to_minutes_since_midnight",
    "format_minutes",
    "combine",
    "day_bounds",
    "minutes_from_midnight",
    "duration_minutes",
    "validate_window",
    "tile_window",
    # Queries
    "BookingQuery",
    "BlackoutQuery",
    "Page",
    "find_bookings",
    "find_blackouts",
    "find_active_bookings_overlapping",
    # Ownership
    "require_court",
    "require_court_owned",
    "require_complex_owned",
    "require_client_owned",
    "require_booking_owned",
    "require_blackout_owned",
    # Blackouts
    "BlockCheck",
    "BlackoutDraft",
    "find_active_blocks",
    "evaluate_blocks",
    "is_blocked",
    "get_active_blocks_in_range",
    "create_blackout",
    "update_blackout",
    "toggle_blackout",
    "delete_blackout",
    "list_blackouts",
    # Conflicts
    "AvailabilityResult",
    "find_conflicting_bookings",
    "evaluate_availability",
    "evaluate_availability_for_display",
    "check_availability",
    # Locking
    "CourtLockRegistry",
    "get_court_locks",
    "reset_court_locks",
    # Slots
    "Slot",
    "DayProjection",
    "project_day",
    "project_day_for_display",
    # Bookings
    "BookingDraft",
    "PublicBookingDraft",
    "BookingChanges",
    "create_booking",
    "create_public_booking",
    "update_booking",
    "confirm_booking",
    "complete_booking",
    "cancel_booking",
    "delete_booking",
    "list_bookings",
    "get_court_bookings",
    "query_public_bookings",
    # Stats
    "BookingStats",
    "booking_stats",
]
