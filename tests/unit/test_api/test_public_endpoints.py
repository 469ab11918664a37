"""
Unit tests for the public availability, slot and booking endpoints.
"""

import uuid
from unittest.mock import patch

from sqlalchemy.exc import OperationalError


def availability_url(court, start, end, day="2024-01-15"):
    return f"/public/courts/{court.id}/availability?date={day}&start_time={start}&end_time={end}"


class TestAvailabilityEndpoint:
    def test_free_court(self, api_client, sample_court):
        response = api_client.get(availability_url(sample_court, "14:00", "15:00"))

        assert response.status_code == 200
        data = response.json()
        assert data["available"] is True
        assert data["message"] == "Court available"
        assert data["court"]["name"] == "Court 1 - Padel"

    def test_overlap_reported_with_booking_id(self, api_client, sample_court, make_booking):
        """[14:30, 15:30) against a booking [14:00, 15:00) is unavailable."""
        booking = make_booking("14:00", "15:00")

        data = api_client.get(availability_url(sample_court, "14:30", "15:30")).json()

        assert data["available"] is False
        assert data["conflicting_booking_id"] == str(booking.id)
        assert data["blocked_by"] is None

    def test_back_to_back_available(self, api_client, sample_court, make_booking):
        make_booking("14:00", "15:00")
        data = api_client.get(availability_url(sample_court, "15:00", "16:00")).json()
        assert data["available"] is True

    def test_exclude_own_booking(self, api_client, sample_court, make_booking):
        booking = make_booking("14:00", "15:00")

        data = api_client.get(
            availability_url(sample_court, "14:30", "15:30") + f"&exclude_booking_id={booking.id}"
        ).json()

        assert data["available"] is True

    def test_blackout_reported(self, api_client, sample_court, make_blackout):
        block = make_blackout(start_time="14:00", end_time="18:00", reason="private_event")

        data = api_client.get(availability_url(sample_court, "17:00", "18:30")).json()

        assert data["available"] is False
        assert data["blocked_by"]["id"] == str(block.id)
        assert data["blocked_by"]["reason"] == "private_event"

    def test_inactive_court_unavailable(self, api_client, db_session, sample_court):
        sample_court.is_active = False
        db_session.commit()

        data = api_client.get(availability_url(sample_court, "09:00", "10:00")).json()

        assert data["available"] is False
        assert data["message"] == "Court is not active"

    def test_reversed_window_is_400(self, api_client, sample_court):
        response = api_client.get(availability_url(sample_court, "15:00", "14:00"))
        assert response.status_code == 400

    def test_malformed_time_is_422(self, api_client, sample_court):
        response = api_client.get(availability_url(sample_court, "2pm", "15:00"))
        assert response.status_code == 422

    def test_reversed_window_checked_before_court_lookup(self, api_client):
        response = api_client.get(
            f"/public/courts/{uuid.uuid4()}/availability?date=2024-01-15&start_time=15:00&end_time=14:00"
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "validation_error"

    def test_unknown_court_is_404(self, api_client):
        response = api_client.get(
            f"/public/courts/{uuid.uuid4()}/availability?date=2024-01-15&start_time=14:00&end_time=15:00"
        )
        assert response.status_code == 404

    def test_database_down_is_503(self, api_client, sample_court):
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch("court_scheduler.services.conflicts.find_conflicting_bookings", side_effect=error):
            response = api_client.get(availability_url(sample_court, "14:00", "15:00"))

        assert response.status_code == 503
        assert response.json()["error_type"] == "persistence_error"
        assert response.json()["retryable"] is True


class TestCourtInfoEndpoint:
    def test_info(self, api_client, sample_court):
        response = api_client.get(f"/public/courts/{sample_court.id}/info")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(sample_court.id)
        assert data["sport_type"] == "padel"
        assert data["is_active"] is True
        assert data["complex"] == {
            "name": "Riverside Sports Club",
            "address": "12 River Road",
            "phone": "+54 11 5555 0000",
        }

    def test_unknown_court_is_404(self, api_client):
        response = api_client.get(f"/public/courts/{uuid.uuid4()}/info")
        assert response.status_code == 404


class TestSlotsEndpoint:
    def test_default_grid(self, api_client, sample_court, make_booking):
        booking = make_booking("14:00", "15:00")

        response = api_client.get(f"/public/courts/{sample_court.id}/slots?date=2024-01-15")

        assert response.status_code == 200
        data = response.json()
        assert data["court"] == {"id": str(sample_court.id), "name": "Court 1 - Padel"}
        assert data["total_slots"] == 34
        assert data["available_slots"] == 32
        busy = [s for s in data["slots"] if not s["available"]]
        assert [s["start_time"] for s in busy] == ["14:00", "14:30"]
        assert all(s["booking_id"] == str(booking.id) for s in busy)
        assert all(s["reason"] == "existing booking" for s in busy)

    def test_hourly_grid(self, api_client, sample_court):
        data = api_client.get(
            f"/public/courts/{sample_court.id}/slots?date=2024-01-15&granularity=60"
        ).json()
        assert data["total_slots"] == 17

    def test_invalid_granularity_is_400(self, api_client, sample_court):
        response = api_client.get(
            f"/public/courts/{sample_court.id}/slots?date=2024-01-15&granularity=0"
        )
        assert response.status_code == 400

    def test_full_day_blackout(self, api_client, sample_court, make_blackout):
        make_blackout()

        data = api_client.get(f"/public/courts/{sample_court.id}/slots?date=2024-01-15").json()

        assert data["available_slots"] == 0
        assert {s["reason"] for s in data["slots"]} == {"maintenance"}


class TestPublicBookings:
    def test_app_native_booking(self, api_client, sample_court, owner_id):
        response = api_client.post(
            "/public/bookings",
            json={
                "court_id": str(sample_court.id),
                "booking_date": "2024-01-15",
                "start_time": "18:00",
                "end_time": "19:00",
                "app_user_id": "app-user-7",
                "contact_name": "Tomas",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["owner_id"] == str(owner_id)
        assert data["is_app_native"] is True
        assert data["start_time"] == "2024-01-15T18:00:00"

    def test_missing_app_user_is_400(self, api_client, sample_court):
        response = api_client.post(
            "/public/bookings",
            json={
                "court_id": str(sample_court.id),
                "booking_date": "2024-01-15",
                "start_time": "18:00",
                "end_time": "19:00",
            },
        )
        assert response.status_code == 400

    def test_conflict_is_409(self, api_client, sample_court, make_booking):
        make_booking("18:00", "19:00")

        response = api_client.post(
            "/public/bookings",
            json={
                "court_id": str(sample_court.id),
                "booking_date": "2024-01-15",
                "start_time": "18:30",
                "end_time": "19:30",
                "app_user_id": "app-user-7",
            },
        )

        assert response.status_code == 409

    def test_listing_hides_inactive_and_contact(self, api_client, sample_court, make_booking):
        make_booking("08:00", "09:00")
        make_booking("10:00", "11:00", status="cancelled")

        data = api_client.get(f"/public/bookings?court_id={sample_court.id}&date=2024-01-15").json()

        assert data["total"] == 1
        assert data["page"] == 1
        assert "contact_name" not in data["bookings"][0]

    def test_listing_by_status(self, api_client, sample_court, make_booking):
        make_booking("10:00", "11:00", status="cancelled")

        data = api_client.get("/public/bookings?status=cancelled").json()

        assert data["total"] == 1
