"""
Unit tests for study streak derivation.

Tests:
- Same-day and next-day study extends the streak
- Gaps longer than one day reset it
- First-ever study starts at 1
- Flat 24-hour day arithmetic
"""

from datetime import datetime, timedelta, timezone

import pytest

from korkort.progress import StudyStreak, days_between, update_streak

T = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)


class TestDaysBetween:
    """Tests for whole-day difference."""

    @pytest.mark.parametrize("hours,expected", [
        (0, 0),
        (12, 0),
        (23.9, 0),
        (24, 1),
        (47, 1),
        (48, 2),
        (50, 2),
    ])
    def test_whole_days(self, hours, expected):
        """Differences are floored 24-hour periods."""
        assert days_between(T, T + timedelta(hours=hours)) == expected

    def test_negative_difference(self):
        """Earlier 'now' yields a negative day count."""
        assert days_between(T, T - timedelta(hours=1)) == -1


class TestUpdateStreak:
    """Tests for update_streak."""

    def test_same_day_increments(self):
        """Study 12h after the last session extends the streak."""
        result = update_streak(StudyStreak(4, T), T + timedelta(hours=12))
        assert result.current_streak == 5

    def test_next_day_increments(self):
        """Study 30h later still counts as consecutive."""
        result = update_streak(StudyStreak(4, T), T + timedelta(hours=30))
        assert result.current_streak == 5

    def test_gap_resets_to_one(self):
        """Study 50h later breaks the streak."""
        result = update_streak(StudyStreak(9, T), T + timedelta(hours=50))
        assert result.current_streak == 1

    def test_first_study_starts_at_one(self):
        """No previous study time starts a fresh streak."""
        result = update_streak(StudyStreak(0, None), T)
        assert result.current_streak == 1
        assert result.last_study_time == T

    def test_first_study_ignores_stale_counter(self):
        """A counter without a timestamp is not trusted."""
        result = update_streak(StudyStreak(7, None), T)
        assert result.current_streak == 1

    def test_clock_moved_backwards_counts_as_same_day(self):
        """A negative gap still changes the streak."""
        result = update_streak(StudyStreak(2, T), T - timedelta(hours=3))
        assert result.current_streak == 3

    def test_last_study_time_always_updated(self):
        """Every event moves last_study_time to now."""
        now = T + timedelta(days=5)
        result = update_streak(StudyStreak(3, T), now)
        assert result.last_study_time == now

    def test_input_not_mutated(self):
        """update_streak returns a new object."""
        original = StudyStreak(3, T)
        update_streak(original, T + timedelta(hours=1))
        assert original.current_streak == 3
        assert original.last_study_time == T
