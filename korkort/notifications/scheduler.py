"""
Local notification scheduler.

Keeps pending study reminders in the same SQLite file as the key-value
store. Delivery belongs to the platform; this module only records what
should fire and when, and whether notifications were permitted.
"""

from __future__ import annotations

import asyncio
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Literal

from loguru import logger

Repeat = Literal["daily"]


@dataclass
class NotificationChannel:
    """A named group of notifications with a shared importance."""

    id: str
    name: str
    importance: int = 4


@dataclass
class ScheduledNotification:
    """A reminder waiting to fire."""

    id: int
    channel_id: str
    title: str
    body: str
    fire_at: datetime
    repeat: Repeat | None = None


class LocalNotificationScheduler:
    """SQLite-backed store of pending notifications."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        conn = self._connect()
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS notification_channels (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    importance INTEGER DEFAULT 4
                );

                CREATE TABLE IF NOT EXISTS scheduled_notifications (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    channel_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    body TEXT NOT NULL,
                    fire_at TEXT NOT NULL,
                    repeat TEXT
                );

                CREATE INDEX IF NOT EXISTS idx_scheduled_fire_at
                ON scheduled_notifications(fire_at);

                CREATE TABLE IF NOT EXISTS notification_permission (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    granted INTEGER NOT NULL DEFAULT 0,
                    requested_at TEXT
                );
            """)
            conn.commit()
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Blocking primitives
    # -------------------------------------------------------------------------

    def _create_channel(self, channel: NotificationChannel) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """INSERT INTO notification_channels (id, name, importance)
                   VALUES (?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     name = excluded.name,
                     importance = excluded.importance""",
                (channel.id, channel.name, channel.importance),
            )
            conn.commit()
        finally:
            conn.close()

    def _cancel_all(self) -> int:
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM scheduled_notifications")
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def _schedule(
        self,
        channel_id: str,
        title: str,
        body: str,
        fire_at: datetime,
        repeat: Repeat | None,
    ) -> int:
        conn = self._connect()
        try:
            cursor = conn.execute(
                """INSERT INTO scheduled_notifications (channel_id, title, body, fire_at, repeat)
                   VALUES (?, ?, ?, ?, ?)""",
                (channel_id, title, body, fire_at.isoformat(), repeat),
            )
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    def _set_permission(self, granted: bool) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """INSERT INTO notification_permission (id, granted, requested_at)
                   VALUES (1, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     granted = excluded.granted,
                     requested_at = excluded.requested_at""",
                (int(granted), datetime.now().astimezone().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def _permission_granted(self) -> bool:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT granted FROM notification_permission WHERE id = 1"
            ).fetchone()
            return bool(row and row["granted"])
        finally:
            conn.close()

    def _pending(self) -> list[ScheduledNotification]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT * FROM scheduled_notifications ORDER BY fire_at ASC"
            ).fetchall()
            return [
                ScheduledNotification(
                    id=row["id"],
                    channel_id=row["channel_id"],
                    title=row["title"],
                    body=row["body"],
                    fire_at=datetime.fromisoformat(row["fire_at"]),
                    repeat=row["repeat"],
                )
                for row in rows
            ]
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Scheduler contract
    # -------------------------------------------------------------------------

    async def create_channel(self, channel: NotificationChannel) -> None:
        """Register (or update) a notification channel."""
        await asyncio.to_thread(self._create_channel, channel)

    async def cancel_all(self) -> None:
        """Drop every pending notification."""
        removed = await asyncio.to_thread(self._cancel_all)
        logger.debug("Cancelled {} pending notifications", removed)

    async def schedule_at(
        self,
        fire_at: datetime,
        *,
        title: str,
        body: str,
        channel_id: str,
        repeat: Repeat | None = None,
    ) -> int:
        """
        Schedule a notification.

        Args:
            fire_at: Instant the notification should fire
            title: Notification title
            body: Notification body
            channel_id: Channel the notification belongs to
            repeat: "daily" to repeat every day, None for one-shot

        Returns:
            ID of the scheduled notification
        """
        notification_id = await asyncio.to_thread(
            self._schedule, channel_id, title, body, fire_at, repeat
        )
        logger.info("Scheduled '{}' at {} (repeat={})", title, fire_at.isoformat(), repeat)
        return notification_id

    async def pending(self) -> list[ScheduledNotification]:
        """List pending notifications, soonest first."""
        return await asyncio.to_thread(self._pending)

    async def request_permission(self) -> bool:
        """
        Ask to deliver notifications.

        Terminal delivery has no OS prompt, so the request is always granted
        and the grant is recorded.
        """
        await asyncio.to_thread(self._set_permission, True)
        logger.info("Notification permission granted")
        return True

    async def permission_granted(self) -> bool:
        return await asyncio.to_thread(self._permission_granted)
