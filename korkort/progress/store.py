"""
Progress Store: completed lessons and study streak for the current identity.

Local storage is the source of truth; the remote progress service is
merged in opportunistically:

    load              local ∪ remote (if online and not a guest), expanded to 0..max
    record_completion local write first, then best-effort remote append, then streak
    clear_progress    best-effort remote delete, then unconditional local wipe

Remote failures are logged and swallowed. Local storage failures
propagate (LocalStorageError). Operations are not safe to interleave for
the same identity; callers serialize them.

State machine:
    UNINITIALIZED --identity set/cleared--> LOADING --load done--> READY
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Callable

from loguru import logger

from korkort.auth.identity import Identity, IdentityProvider
from korkort.progress.models import (
    NotificationPreferences,
    ProgressSnapshot,
    ProgressState,
    StudyStreak,
    expand_completed,
    next_lesson_index,
)
from korkort.progress.streak import update_streak
from korkort.remote.connectivity import ConnectivityChecker
from korkort.remote.progress_client import ProgressClient, RemoteServiceError
from korkort.storage import (
    COMPLETED_LESSONS_KEY,
    NOTIFICATION_PERMISSION_REQUESTED_KEY,
    LocalStorage,
    LocalStorageError,
    current_streak_key,
    last_study_time_key,
    notification_preferences_key,
)

if TYPE_CHECKING:
    from korkort.notifications.reminders import ReminderService

ProgressListener = Callable[[ProgressSnapshot], None]


def _parse_timestamp(key: str, raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise LocalStorageError(f"Corrupt timestamp under {key!r}: {exc}") from exc
    # Naive values are read as local time.
    return parsed if parsed.tzinfo else parsed.astimezone()


def _parse_streak(key: str, raw: str | None) -> int:
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        raise LocalStorageError(f"Corrupt streak under {key!r}: {exc}") from exc


class ProgressStore:
    """
    Owns CompletedLessonSet and StudyStreak for the current identity.

    Usage:
        store = ProgressStore(storage, client, connectivity, reminders)
        store.attach(identity_provider)
        await identity_provider.restore()      # triggers load()
        await store.record_completion(identity, 3)
    """

    def __init__(
        self,
        storage: LocalStorage,
        client: ProgressClient | None,
        connectivity: ConnectivityChecker | None,
        reminders: ReminderService | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the store.

        Args:
            storage: Local key-value persistence
            client: Remote progress client (None disables the remote path)
            connectivity: Reachability check run before each remote attempt
            reminders: Reminder scheduler (re-scheduled on preference changes, cleared on sign-out)
            clock: Returns the current aware datetime (defaults to local now)
        """
        self.storage = storage
        self.client = client
        self.connectivity = connectivity
        self.reminders = reminders
        self.clock = clock or (lambda: datetime.now().astimezone())

        self.state = ProgressState.UNINITIALIZED
        self.completed_lessons: list[int] = []
        self.streak = StudyStreak()
        self.preferences = NotificationPreferences()
        self.next_lesson_index = 0
        self.notification_permission = False
        self._listeners: list[ProgressListener] = []

    # =========================================================================
    # Observers
    # =========================================================================

    def attach(self, provider: IdentityProvider) -> None:
        """Reload whenever the provider announces an identity change."""
        provider.subscribe(self.load)

    def subscribe(self, listener: ProgressListener) -> None:
        """Register a callback receiving a snapshot after every publish."""
        self._listeners.append(listener)

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            state=self.state,
            completed_lessons=list(self.completed_lessons),
            streak=StudyStreak(self.streak.current_streak, self.streak.last_study_time),
            preferences=NotificationPreferences(
                self.preferences.daily_reminder, self.preferences.streak_reminder
            ),
        )

    def _publish(self) -> None:
        self.next_lesson_index = next_lesson_index(self.completed_lessons)
        snapshot = self.snapshot()
        for listener in self._listeners:
            listener(snapshot)

    def is_unlocked(self, lesson_index: int) -> bool:
        """A lesson is playable once every earlier lesson is completed."""
        return 0 <= lesson_index <= self.next_lesson_index

    # =========================================================================
    # Remote helpers
    # =========================================================================

    async def _remote_available(self, identity: Identity | None) -> bool:
        if self.client is None or identity is None or not identity.can_sync:
            return False
        if self.connectivity is not None and not await self.connectivity.is_connected():
            return False
        return True

    # =========================================================================
    # Load
    # =========================================================================

    async def load(self, identity: Identity | None) -> ProgressSnapshot:
        """
        Rebuild state for identity from local storage and, if possible, the remote service.

        Args:
            identity: Current identity, or None when signed out

        Returns:
            Snapshot after loading (always READY with a prefix-dense set)
        """
        self.state = ProgressState.LOADING

        if identity is None:
            logger.info("No identity - cleared progress state")
            self.completed_lessons = []
            self.preferences = NotificationPreferences()
            self.streak = StudyStreak()
            try:
                # Default preferences ask for no reminders.
                if self.reminders is not None:
                    await self.reminders.cancel_all()
            finally:
                self.state = ProgressState.READY
            self._publish()
            return self.snapshot()

        try:
            lessons = await self._load_completed_lessons(identity)
            self.completed_lessons = lessons
            await self._load_user_data(identity)
        finally:
            self.state = ProgressState.READY

        self._publish()
        return self.snapshot()

    async def _load_completed_lessons(self, identity: Identity) -> list[int]:
        local_lessons = await self.storage.get_json(COMPLETED_LESSONS_KEY, default=[]) or []
        logger.debug("Lessons from local storage: {}", local_lessons)
        merged = set(int(i) for i in local_lessons)

        if await self._remote_available(identity):
            try:
                remote_lessons = await self.client.get_completed_lessons(identity.user_id)
                logger.debug("Lessons from remote: {}", remote_lessons)
                merged |= set(remote_lessons)
            except RemoteServiceError as exc:
                logger.warning("Remote fetch failed for {}, using local data: {}", identity.user_id, exc)
        else:
            logger.debug("Offline or guest user, using only local data")

        lessons = expand_completed(merged)
        await self.storage.set_json(COMPLETED_LESSONS_KEY, lessons)
        logger.info("Loaded {} completed lessons for {}", len(lessons), identity.user_id)
        return lessons

    async def _load_user_data(self, identity: Identity) -> None:
        prefs = await self.storage.get_json(notification_preferences_key(identity.user_id))
        self.preferences = (
            NotificationPreferences.from_dict(prefs) if prefs else NotificationPreferences()
        )

        time_key = last_study_time_key(identity.user_id)
        streak_key = current_streak_key(identity.user_id)
        last_study = _parse_timestamp(time_key, await self.storage.get_item(time_key))
        self.streak = StudyStreak(
            current_streak=_parse_streak(streak_key, await self.storage.get_item(streak_key)),
            last_study_time=last_study,
        )

    # =========================================================================
    # Record completion
    # =========================================================================

    async def record_completion(self, identity: Identity | None, lesson_index: int | None) -> bool:
        """
        Mark a lesson as completed.

        Args:
            identity: Current identity (may be None)
            lesson_index: Index of the finished lesson

        Returns:
            True if state changed, False for a no-op (None or already completed)

        Raises:
            ValueError: If lesson_index is negative
            LocalStorageError: If the local write fails
        """
        if lesson_index is None or lesson_index in self.completed_lessons:
            logger.debug("Lesson already completed or invalid index: {}", lesson_index)
            return False
        if lesson_index < 0:
            raise ValueError(f"lesson_index must be non-negative, got {lesson_index}")

        updated = expand_completed([*self.completed_lessons, lesson_index])
        await self.storage.set_json(COMPLETED_LESSONS_KEY, updated)
        self.completed_lessons = updated
        self._publish()
        logger.info("Stored completed lesson {} ({} total)", lesson_index, len(updated))

        if await self._remote_available(identity):
            try:
                await self.client.add_completed_lesson(identity.user_id, lesson_index)
            except RemoteServiceError as exc:
                logger.warning("Remote append of lesson {} failed: {}", lesson_index, exc)
        else:
            logger.debug("No syncable identity or offline, skipping remote storage")

        await self._record_study_event(identity)
        return True

    async def _record_study_event(self, identity: Identity | None) -> None:
        self.streak = update_streak(self.streak, self.clock())
        if identity is not None:
            await self.storage.set_item(
                last_study_time_key(identity.user_id),
                self.streak.last_study_time.isoformat(),
            )
            await self.storage.set_item(
                current_streak_key(identity.user_id),
                str(self.streak.current_streak),
            )
        self._publish()

    # =========================================================================
    # Clear
    # =========================================================================

    async def clear_progress(self, identity: Identity | None) -> None:
        """
        Wipe completed lessons and streak locally, and remotely when possible.

        Irreversible; confirmation is the caller's job.
        """
        if await self._remote_available(identity):
            try:
                if await self.client.delete_all_completed_lessons(identity.user_id):
                    logger.info("Deleted all remote lessons for {}", identity.user_id)
                else:
                    logger.error("Remote service refused to delete lessons for {}", identity.user_id)
            except RemoteServiceError as exc:
                logger.error("Remote delete failed for {}: {}", identity.user_id, exc)

        self.completed_lessons = []
        self.streak = StudyStreak()

        await self.storage.remove_item(COMPLETED_LESSONS_KEY)
        if identity is not None:
            await self.storage.remove_item(last_study_time_key(identity.user_id))
            await self.storage.remove_item(current_streak_key(identity.user_id))

        self._publish()

    # =========================================================================
    # Preferences
    # =========================================================================

    async def update_preferences(
        self,
        identity: Identity | None,
        preferences: NotificationPreferences,
    ) -> None:
        """
        Persist reminder preferences and re-schedule reminders.

        Without an identity the change is kept in memory only.
        Scheduler failures propagate.
        """
        self.preferences = preferences
        if identity is not None:
            await self.storage.set_json(
                notification_preferences_key(identity.user_id),
                preferences.to_dict(),
            )
            if self.reminders is not None:
                await self.reminders.apply(preferences, self.streak.last_study_time, now=self.clock())
        self._publish()

    async def request_notification_permission(self) -> bool:
        """Ask for notification permission and remember that it was asked."""
        granted = await self.reminders.request_permission() if self.reminders else False
        await self.storage.set_item(NOTIFICATION_PERMISSION_REQUESTED_KEY, "true")
        self.notification_permission = granted
        return granted

    async def check_notification_permission(self) -> bool:
        granted = await self.reminders.check_permission() if self.reminders else False
        self.notification_permission = granted
        return granted
