"""
Progress data model.

- CompletedLessonSet helpers (prefix-dense expansion)
- StudyStreak: streak counter plus last study instant
- NotificationPreferences: the two reminder toggles
- ProgressSnapshot / ProgressSummary: what observers and the CLI see
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable


class ProgressState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


def expand_completed(lessons: Iterable[int]) -> list[int]:
    """
    Make a completed-lesson collection prefix-dense.

    A lesson only counts as completed once every lower index is too, so a
    non-empty collection becomes every integer from 0 to its maximum.

    >>> expand_completed([0, 1, 2, 5])
    [0, 1, 2, 3, 4, 5]
    >>> expand_completed([])
    []
    """
    lessons = [int(i) for i in lessons]
    if not lessons:
        return []
    return list(range(max(lessons) + 1))


def next_lesson_index(completed: list[int]) -> int:
    """Lowest lesson index not yet completed."""
    if not completed:
        return 0
    return max(completed) + 1


@dataclass
class StudyStreak:
    """Consecutive-day study counter."""

    current_streak: int = 0
    last_study_time: datetime | None = None


@dataclass
class NotificationPreferences:
    """Which study reminders the identity wants."""

    daily_reminder: bool = False
    streak_reminder: bool = False

    def to_dict(self) -> dict[str, bool]:
        """Convert to the persisted JSON shape."""
        return {
            "dailyReminder": self.daily_reminder,
            "streakReminder": self.streak_reminder,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NotificationPreferences:
        """Parse the persisted JSON shape."""
        return cls(
            daily_reminder=bool(data.get("dailyReminder", False)),
            streak_reminder=bool(data.get("streakReminder", False)),
        )


@dataclass
class ProgressSummary:
    """Derived numbers for profile-style display."""

    completed_count: int
    next_lesson_index: int
    minutes_studied: int
    current_streak: int


@dataclass
class ProgressSnapshot:
    """Immutable view of the store published to observers."""

    state: ProgressState
    completed_lessons: list[int] = field(default_factory=list)
    streak: StudyStreak = field(default_factory=StudyStreak)
    preferences: NotificationPreferences = field(default_factory=NotificationPreferences)

    @property
    def next_lesson_index(self) -> int:
        return next_lesson_index(self.completed_lessons)

    def summarize(self, minutes_per_lesson: int = 5) -> ProgressSummary:
        """Build a ProgressSummary from this snapshot."""
        count = len(self.completed_lessons)
        return ProgressSummary(
            completed_count=count,
            next_lesson_index=self.next_lesson_index,
            minutes_studied=count * minutes_per_lesson,
            current_streak=self.streak.current_streak,
        )
