"""Local key-value persistence."""

from korkort.storage.keys import (
    COMPLETED_LESSONS_KEY,
    NOTIFICATION_PERMISSION_REQUESTED_KEY,
    USER_KEY,
    current_streak_key,
    last_study_time_key,
    notification_preferences_key,
)
from korkort.storage.local_store import LocalStorage, LocalStorageError

__all__ = [
    "LocalStorage",
    "LocalStorageError",
    # Keys
    "COMPLETED_LESSONS_KEY",
    "NOTIFICATION_PERMISSION_REQUESTED_KEY",
    "USER_KEY",
    "current_streak_key",
    "last_study_time_key",
    "notification_preferences_key",
]
