"""Study reminder notifications."""

from korkort.notifications.reminders import (
    STUDY_REMINDER_CHANNEL,
    ReminderService,
    next_daily_reminder,
    next_streak_reminder,
    resolve_zone,
)
from korkort.notifications.scheduler import (
    LocalNotificationScheduler,
    NotificationChannel,
    ScheduledNotification,
)

__all__ = [
    "ReminderService",
    "STUDY_REMINDER_CHANNEL",
    "next_daily_reminder",
    "next_streak_reminder",
    "resolve_zone",
    # Scheduler
    "LocalNotificationScheduler",
    "NotificationChannel",
    "ScheduledNotification",
]
