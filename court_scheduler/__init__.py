"""
Court Scheduler.

Availability and conflict resolution engine for sports court bookings.
"""

__version__ = "0.1.0"
