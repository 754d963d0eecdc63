"""
Storage key names.

`completedLessons`, `user` and `notificationPermissionRequested` are global;
the rest are scoped by the identity's user id.
"""

COMPLETED_LESSONS_KEY = "completedLessons"
USER_KEY = "user"
NOTIFICATION_PERMISSION_REQUESTED_KEY = "notificationPermissionRequested"


def notification_preferences_key(user_id: str) -> str:
    return f"notificationPreferences_{user_id}"


def last_study_time_key(user_id: str) -> str:
    return f"lastStudyTime_{user_id}"


def current_streak_key(user_id: str) -> str:
    return f"currentStreak_{user_id}"
