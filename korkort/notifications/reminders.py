"""
Study reminder scheduling.

Turns NotificationPreferences into concrete reminder instants:
- daily reminder: every day at the reminder hour (today, or tomorrow if passed)
- streak reminder: the reminder hour on the day after the last study time,
  rolled forward to the next occurrence after now if that has passed

Instants are computed on the wall clock of `zone`. With no zone the
system's local time rules apply, so the hour stays fixed across DST
changes.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from korkort.notifications.scheduler import LocalNotificationScheduler, NotificationChannel
from korkort.progress.models import NotificationPreferences

STUDY_REMINDER_CHANNEL = NotificationChannel(
    id="study-reminders",
    name="Study Reminders",
    importance=4,
)

DAILY_TITLE = "Time to Study!"
DAILY_BODY = "Keep your streak going by studying today."
STREAK_TITLE = "Don't Break Your Streak!"
STREAK_BODY = "You're close to breaking your study streak. Study now to keep it going!"


def resolve_zone(name: str | None) -> tzinfo | None:
    """IANA zone for name, or None (system local time) if unset or unknown."""
    if name is None or not name.strip():
        return None
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Ignoring unsupported timezone value: {}", name)
        return None


def _wall_time(day: date, hour: int, zone: tzinfo | None) -> datetime:
    naive = datetime.combine(day, time(hour))
    return naive.astimezone() if zone is None else naive.replace(tzinfo=zone)


def _next_at_hour(day: date, hour: int, now: datetime, zone: tzinfo | None) -> datetime:
    target = _wall_time(day, hour, zone)
    while target <= now:
        day += timedelta(days=1)
        target = _wall_time(day, hour, zone)
    return target


def next_daily_reminder(now: datetime, hour: int = 20, zone: tzinfo | None = None) -> datetime:
    """Next occurrence of the reminder hour strictly after now."""
    return _next_at_hour(now.astimezone(zone).date(), hour, now, zone)


def next_streak_reminder(
    last_study_time: datetime,
    now: datetime,
    hour: int = 20,
    zone: tzinfo | None = None,
) -> datetime:
    """Reminder hour on the day after the last study time, or the next one after now."""
    day_after = last_study_time.astimezone(zone).date() + timedelta(days=1)
    return _next_at_hour(day_after, hour, now, zone)


class ReminderService:
    """Re-schedules study reminders whenever preferences change."""

    def __init__(
        self,
        scheduler: LocalNotificationScheduler,
        reminder_hour: int = 20,
        zone: tzinfo | None = None,
    ):
        self.scheduler = scheduler
        self.reminder_hour = reminder_hour
        self.zone = zone

    async def ensure_channel(self) -> None:
        await self.scheduler.create_channel(STUDY_REMINDER_CHANNEL)

    async def request_permission(self) -> bool:
        return await self.scheduler.request_permission()

    async def check_permission(self) -> bool:
        return await self.scheduler.permission_granted()

    async def cancel_all(self) -> None:
        await self.scheduler.cancel_all()

    async def apply(
        self,
        preferences: NotificationPreferences,
        last_study_time: datetime | None,
        now: datetime | None = None,
    ) -> None:
        """
        Cancel all pending reminders and schedule the ones preferences ask for.

        Nothing is scheduled until notification permission has been granted.
        Scheduler failures propagate to the caller.
        """
        now = now or datetime.now().astimezone()
        await self.scheduler.cancel_all()

        if not (preferences.daily_reminder or preferences.streak_reminder):
            return
        if not await self.scheduler.permission_granted():
            logger.warning("Notification permission not granted - reminders not scheduled")
            return

        if preferences.daily_reminder:
            await self.scheduler.schedule_at(
                next_daily_reminder(now, self.reminder_hour, self.zone),
                title=DAILY_TITLE,
                body=DAILY_BODY,
                channel_id=STUDY_REMINDER_CHANNEL.id,
                repeat="daily",
            )

        if preferences.streak_reminder:
            if last_study_time is None:
                logger.debug("No last study time - streak reminder not scheduled")
            else:
                await self.scheduler.schedule_at(
                    next_streak_reminder(last_study_time, now, self.reminder_hour, self.zone),
                    title=STREAK_TITLE,
                    body=STREAK_BODY,
                    channel_id=STUDY_REMINDER_CHANNEL.id,
                )
