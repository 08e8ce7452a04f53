"""
Tests for the game phase clock.
"""

from datetime import datetime, timedelta, timezone

from sportsbook.utils.phase import (
    Phase,
    format_time_remaining,
    get_game_phase,
    get_phase,
    get_round_phase,
)

LOCK = datetime(2026, 2, 2, 23, 0, tzinfo=timezone.utc)
ONE_MS = timedelta(milliseconds=1)


class TestGetGamePhase:
    def test_open_just_before_lock(self):
        assert get_game_phase(LOCK - ONE_MS, LOCK) == Phase.OPEN

    def test_locked_at_lock_instant(self):
        assert get_game_phase(LOCK, LOCK) == Phase.LOCKED

    def test_locked_after_lock(self):
        assert get_game_phase(LOCK + ONE_MS, LOCK) == Phase.LOCKED

    def test_naive_datetimes_are_utc(self):
        naive_lock = LOCK.replace(tzinfo=None)

        assert get_game_phase(LOCK - ONE_MS, naive_lock) == Phase.OPEN
        assert get_game_phase(naive_lock, LOCK) == Phase.LOCKED

    def test_other_timezones_compare_by_instant(self):
        # 17:00 Central is the 23:00 UTC lock
        central = timezone(timedelta(hours=-6))
        now = datetime(2026, 2, 2, 16, 59, tzinfo=central)

        assert get_game_phase(now, LOCK) == Phase.OPEN

    def test_phase_values_are_strings(self):
        assert Phase.LOCKED == "locked"
        assert Phase.OPEN.value == "open"


class TestGetRoundPhase:
    LINES_LOCK = LOCK - timedelta(hours=2)

    def test_open_before_lines_lock(self):
        assert get_round_phase(self.LINES_LOCK - ONE_MS, self.LINES_LOCK, LOCK) == Phase.OPEN

    def test_picks_open_between_locks(self):
        assert get_round_phase(self.LINES_LOCK, self.LINES_LOCK, LOCK) == Phase.PICKS_OPEN
        assert get_round_phase(LOCK - ONE_MS, self.LINES_LOCK, LOCK) == Phase.PICKS_OPEN

    def test_locked_at_picks_lock(self):
        assert get_round_phase(LOCK, self.LINES_LOCK, LOCK) == Phase.LOCKED

    def test_single_lock_matches_game_phase(self):
        for now in (LOCK - ONE_MS, LOCK, LOCK + ONE_MS):
            assert get_round_phase(now, LOCK) == get_game_phase(now, LOCK)
            assert get_round_phase(now, LOCK, LOCK) == get_game_phase(now, LOCK)


class TestGetPhase:
    def test_no_thresholds_is_terminal(self):
        assert get_phase(LOCK, []) == Phase.LOCKED

    def test_custom_labels(self):
        thresholds = [(LOCK, "early"), (LOCK + timedelta(hours=1), "late")]

        assert get_phase(LOCK - ONE_MS, thresholds, terminal="done") == "early"
        assert get_phase(LOCK, thresholds, terminal="done") == "late"
        assert get_phase(LOCK + timedelta(hours=1), thresholds, terminal="done") == "done"


class TestFormatTimeRemaining:
    def test_past_lock(self):
        assert format_time_remaining(LOCK, now=LOCK) == "Locked"
        assert format_time_remaining(LOCK, now=LOCK + ONE_MS) == "Locked"

    def test_hours_and_minutes(self):
        now = LOCK - timedelta(hours=3, minutes=25)
        assert format_time_remaining(LOCK, now=now) == "3h 25m"

    def test_days_and_hours(self):
        now = LOCK - timedelta(days=2, hours=5)
        assert format_time_remaining(LOCK, now=now) == "2d 5h"
