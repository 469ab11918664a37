"""
Unit tests for owner booking statistics.
"""

from datetime import date
from decimal import Decimal

from court_scheduler.services.stats import booking_stats


class TestBookingStats:
    def test_empty(self, db_session, owner_id):
        stats = booking_stats(db_session, owner_id)

        assert stats.total_bookings == 0
        assert stats.by_status == {"pending": 0, "confirmed": 0, "cancelled": 0, "completed": 0}
        assert stats.total_revenue == Decimal("0")
        assert stats.pending_revenue == Decimal("0")

    def test_counts_and_revenue(self, db_session, owner_id, make_booking):
        make_booking("08:00", "09:00", price=Decimal("20.00"))
        make_booking("09:00", "10:00", status="confirmed", payment_status="paid", price=Decimal("25.00"))
        make_booking("10:00", "11:00", status="completed", payment_status="paid", price=Decimal("30.00"))
        make_booking("11:00", "12:00", status="cancelled", payment_status="refunded", price=Decimal("40.00"))

        stats = booking_stats(db_session, owner_id)

        assert stats.total_bookings == 4
        assert stats.by_status == {"pending": 1, "confirmed": 1, "cancelled": 1, "completed": 1}
        assert stats.total_revenue == Decimal("75.00")
        assert stats.paid_revenue == Decimal("55.00")
        assert stats.pending_revenue == Decimal("20.00")

    def test_date_range(self, db_session, owner_id, make_booking):
        make_booking("08:00", "09:00", day=date(2024, 1, 10))
        make_booking("08:00", "09:00", day=date(2024, 1, 15))
        make_booking("08:00", "09:00", day=date(2024, 1, 20))

        stats = booking_stats(
            db_session, owner_id, date_from=date(2024, 1, 12), date_to=date(2024, 1, 20)
        )

        assert stats.total_bookings == 2

    def test_scoped_to_owner(self, db_session, other_owner_id, make_booking):
        make_booking("08:00", "09:00")
        assert booking_stats(db_session, other_owner_id).total_bookings == 0
