"""
Unit tests for the blackout registry.

Tests day lookups, window checks and owner-scoped blackout management.
"""

from datetime import date

import pytest

from court_scheduler.exceptions import ValidationError, NotFoundError, ForbiddenError
from court_scheduler.models.blackouts import CourtBlackout
from court_scheduler.services.blackouts import (
    BlackoutDraft,
    evaluate_blocks,
    find_active_blocks,
    is_blocked,
    get_active_blocks_in_range,
    create_blackout,
    get_blackout,
    list_blackouts,
    update_blackout,
    toggle_blackout,
    delete_blackout,
)

DAY = date(2024, 1, 15)


class TestFindActiveBlocks:
    """Test which blackouts apply to a day."""

    def test_inclusive_date_range(self, db_session, sample_court, make_blackout):
        make_blackout(date(2024, 1, 20), date(2024, 1, 25))

        for day in (date(2024, 1, 20), date(2024, 1, 22), date(2024, 1, 25)):
            assert len(find_active_blocks(db_session, sample_court.id, day)) == 1

        assert find_active_blocks(db_session, sample_court.id, date(2024, 1, 19)) == []
        assert find_active_blocks(db_session, sample_court.id, date(2024, 1, 26)) == []

    def test_inactive_blocks_ignored(self, db_session, sample_court, make_blackout):
        make_blackout(is_active=False)
        assert find_active_blocks(db_session, sample_court.id, DAY) == []

    def test_other_court_blocks_ignored(self, db_session, sample_court, second_court, make_blackout):
        make_blackout(court=second_court)
        assert find_active_blocks(db_session, sample_court.id, DAY) == []

    def test_ordered_by_start_date(self, db_session, sample_court, make_blackout):
        later = make_blackout(date(2024, 1, 14), date(2024, 1, 16), reason="weather")
        earlier = make_blackout(date(2024, 1, 10), date(2024, 1, 20), reason="private_event")

        blocks = find_active_blocks(db_session, sample_court.id, DAY)

        assert [b.id for b in blocks] == [earlier.id, later.id]


class TestEvaluateBlocks:
    """Test the pure window check over fetched blocks."""

    def _block(self, start_time=None, end_time=None, reason="maintenance"):
        return CourtBlackout(
            start_date=DAY,
            end_date=DAY,
            start_time=start_time,
            end_time=end_time,
            reason=reason,
        )

    def test_no_blocks(self):
        assert evaluate_blocks([], 540, 600).blocked is False

    def test_full_day_blocks_any_window(self):
        block = self._block()
        result = evaluate_blocks([block], 0, 30)
        assert result.blocked is True
        assert result.block is block

    def test_timed_block_does_not_affect_morning(self):
        """14:00-18:00 leaves [09:00, 10:00) free."""
        result = evaluate_blocks([self._block("14:00", "18:00")], 540, 600)
        assert result.blocked is False

    def test_timed_block_overlap(self):
        result = evaluate_blocks([self._block("14:00", "18:00")], 1020, 1110)
        assert result.blocked is True

    def test_timed_block_is_half_open(self):
        block = self._block("14:00", "18:00")
        assert evaluate_blocks([block], 780, 840).blocked is False  # 13:00-14:00
        assert evaluate_blocks([block], 1080, 1140).blocked is False  # 18:00-19:00

    def test_first_match_wins(self):
        first = self._block("08:00", "12:00", reason="weather")
        second = self._block(reason="maintenance")
        result = evaluate_blocks([first, second], 600, 660)
        assert result.block is first

    def test_full_day_short_circuits(self):
        full_day = self._block(reason="private_event")
        timed = self._block("10:00", "11:00")
        result = evaluate_blocks([full_day, timed], 600, 660)
        assert result.block is full_day


class TestIsBlocked:
    def test_full_day_range_blocks_every_hour(self, db_session, sample_court, make_blackout):
        block = make_blackout(date(2024, 1, 20), date(2024, 1, 25))

        for day in (date(2024, 1, 20), date(2024, 1, 23), date(2024, 1, 25)):
            for start in (360, 720, 1320):
                result = is_blocked(db_session, sample_court.id, day, start, start + 60)
                assert result.blocked is True
                assert result.block.id == block.id

    def test_unblocked_day(self, db_session, sample_court, make_blackout):
        make_blackout(date(2024, 1, 20), date(2024, 1, 25))
        assert is_blocked(db_session, sample_court.id, DAY, 540, 600).blocked is False


class TestBlocksInRange:
    def test_intersecting_range(self, db_session, sample_court, make_blackout):
        inside = make_blackout(date(2024, 1, 10), date(2024, 1, 12))
        make_blackout(date(2024, 2, 1), date(2024, 2, 2))
        make_blackout(date(2024, 1, 11), date(2024, 1, 11), is_active=False)

        blocks = get_active_blocks_in_range(
            db_session, sample_court.id, date(2024, 1, 12), date(2024, 1, 31)
        )

        assert [b.id for b in blocks] == [inside.id]

    def test_reversed_range_rejected(self, db_session, sample_court):
        with pytest.raises(ValidationError):
            get_active_blocks_in_range(
                db_session, sample_court.id, date(2024, 1, 31), date(2024, 1, 1)
            )


class TestCreateBlackout:
    """Test owner-scoped blackout creation."""

    def test_create_full_day(self, db_session, sample_court, owner_id):
        blackout = create_blackout(
            db_session,
            owner_id,
            BlackoutDraft(
                court_id=sample_court.id,
                start_date=date(2024, 1, 20),
                end_date=date(2024, 1, 25),
                reason="maintenance",
                description="Resurfacing",
            ),
        )

        assert blackout.id is not None
        assert blackout.is_active is True
        assert blackout.is_full_day is True
        assert blackout.owner_id == owner_id

    def test_create_timed(self, db_session, sample_court, owner_id):
        blackout = create_blackout(
            db_session,
            owner_id,
            BlackoutDraft(
                court_id=sample_court.id,
                start_date=DAY,
                end_date=DAY,
                start_time="14:00",
                end_time="18:00",
                reason="private_event",
            ),
        )
        assert blackout.is_full_day is False

    def test_reversed_dates_rejected(self, db_session, sample_court, owner_id):
        with pytest.raises(ValidationError, match="End date"):
            create_blackout(
                db_session,
                owner_id,
                BlackoutDraft(
                    court_id=sample_court.id,
                    start_date=date(2024, 1, 25),
                    end_date=date(2024, 1, 20),
                    reason="maintenance",
                ),
            )

    def test_only_one_time_rejected(self, db_session, sample_court, owner_id):
        with pytest.raises(ValidationError, match="both"):
            create_blackout(
                db_session,
                owner_id,
                BlackoutDraft(
                    court_id=sample_court.id,
                    start_date=DAY,
                    end_date=DAY,
                    start_time="14:00",
                    reason="maintenance",
                ),
            )

    def test_reversed_times_rejected(self, db_session, sample_court, owner_id):
        with pytest.raises(ValidationError):
            create_blackout(
                db_session,
                owner_id,
                BlackoutDraft(
                    court_id=sample_court.id,
                    start_date=DAY,
                    end_date=DAY,
                    start_time="18:00",
                    end_time="14:00",
                    reason="maintenance",
                ),
            )

    def test_unknown_reason_rejected(self, db_session, sample_court, owner_id):
        with pytest.raises(ValidationError, match="reason"):
            create_blackout(
                db_session,
                owner_id,
                BlackoutDraft(
                    court_id=sample_court.id, start_date=DAY, end_date=DAY, reason="holiday"
                ),
            )

    def test_foreign_court_forbidden(self, db_session, foreign_court, owner_id):
        with pytest.raises(ForbiddenError):
            create_blackout(
                db_session,
                owner_id,
                BlackoutDraft(
                    court_id=foreign_court.id, start_date=DAY, end_date=DAY, reason="weather"
                ),
            )


class TestManageBlackouts:
    """Test update, toggle, delete and listing."""

    def test_update_makes_full_day(self, db_session, owner_id, make_blackout):
        blackout = make_blackout(start_time="14:00", end_time="18:00")

        updated = update_blackout(
            db_session, blackout.id, owner_id, {"start_time": None, "end_time": None}
        )

        assert updated.is_full_day is True

    def test_update_validates_merged_values(self, db_session, owner_id, make_blackout):
        blackout = make_blackout(start_time="14:00", end_time="18:00")

        with pytest.raises(ValidationError):
            update_blackout(db_session, blackout.id, owner_id, {"start_time": "19:00"})

        db_session.refresh(blackout)
        assert blackout.start_time == "14:00"

    def test_update_rejects_unknown_fields(self, db_session, owner_id, make_blackout):
        blackout = make_blackout()
        with pytest.raises(ValidationError, match="court_id"):
            update_blackout(db_session, blackout.id, owner_id, {"court_id": None})

    def test_toggle(self, db_session, sample_court, owner_id, make_blackout):
        blackout = make_blackout()

        assert toggle_blackout(db_session, blackout.id, owner_id).is_active is False
        assert is_blocked(db_session, sample_court.id, DAY, 600, 660).blocked is False

        assert toggle_blackout(db_session, blackout.id, owner_id).is_active is True
        assert is_blocked(db_session, sample_court.id, DAY, 600, 660).blocked is True

    def test_delete(self, db_session, owner_id, make_blackout):
        blackout = make_blackout()
        delete_blackout(db_session, blackout.id, owner_id)

        with pytest.raises(NotFoundError):
            get_blackout(db_session, blackout.id, owner_id)

    def test_other_owner_cannot_touch(self, db_session, other_owner_id, make_blackout):
        blackout = make_blackout()
        with pytest.raises(ForbiddenError):
            toggle_blackout(db_session, blackout.id, other_owner_id)
        with pytest.raises(ForbiddenError):
            delete_blackout(db_session, blackout.id, other_owner_id)

    def test_list_newest_first_and_filtered(self, db_session, owner_id, make_blackout):
        old = make_blackout(date(2024, 1, 1), date(2024, 1, 2))
        new = make_blackout(date(2024, 3, 1), date(2024, 3, 2))
        inactive = make_blackout(date(2024, 2, 1), date(2024, 2, 2), is_active=False)

        assert [b.id for b in list_blackouts(db_session, owner_id)] == [new.id, inactive.id, old.id]
        assert [b.id for b in list_blackouts(db_session, owner_id, is_active=True)] == [new.id, old.id]
