"""
Lesson progress: completed lessons, study streak and reminder preferences.

Components:
- ProgressStore: load / record_completion / clear_progress / update_preferences
- update_streak: streak derivation for one study event
- expand_completed: prefix-dense completed-lesson sets
"""

from korkort.progress.models import (
    NotificationPreferences,
    ProgressSnapshot,
    ProgressState,
    ProgressSummary,
    StudyStreak,
    expand_completed,
    next_lesson_index,
)
from korkort.progress.store import ProgressStore
from korkort.progress.streak import days_between, update_streak

__all__ = [
    "ProgressStore",
    # Models
    "NotificationPreferences",
    "ProgressSnapshot",
    "ProgressState",
    "ProgressSummary",
    "StudyStreak",
    "expand_completed",
    "next_lesson_index",
    # Streak
    "days_between",
    "update_streak",
]
