"""
Service wiring.

Builds every collaborator once from Settings and connects identity
changes to ProgressStore.load. Consumers get the AppServices object
instead of reaching for globals.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from config import Settings, get_settings
from korkort.auth import IdentityProvider
from korkort.notifications import LocalNotificationScheduler, ReminderService, resolve_zone
from korkort.progress import ProgressStore
from korkort.remote import ConnectivityChecker, ProgressClient
from korkort.storage import LocalStorage


@dataclass
class AppServices:
    """Everything a front-end needs, constructed once per process."""

    settings: Settings
    storage: LocalStorage
    identity: IdentityProvider
    progress: ProgressStore
    reminders: ReminderService
    scheduler: LocalNotificationScheduler
    client: ProgressClient | None = None
    connectivity: ConnectivityChecker | None = None

    async def start(self) -> None:
        """Create the reminder channel and restore the persisted identity (triggers load)."""
        await self.reminders.ensure_channel()
        await self.identity.restore()

    async def close(self) -> None:
        """Release HTTP clients."""
        if self.client is not None:
            await self.client.close()
        if self.connectivity is not None:
            await self.connectivity.close()


def create_services(settings: Settings | None = None) -> AppServices:
    """
    Build and wire the application services.

    Args:
        settings: Settings to use (default: cached get_settings())

    Returns:
        AppServices with the progress store attached to the identity provider
    """
    settings = settings or get_settings()

    storage = LocalStorage(settings.storage_path)
    scheduler = LocalNotificationScheduler(settings.storage_path)
    reminders = ReminderService(
        scheduler,
        reminder_hour=settings.reminder_hour,
        zone=resolve_zone(settings.reminder_timezone),
    )

    client = None
    connectivity = None
    if settings.has_remote_configured():
        client = ProgressClient(
            api_url=settings.api_graphql_url,
            api_key=settings.api_key,
            timeout_seconds=settings.remote_timeout_seconds,
        )
        connectivity = ConnectivityChecker(
            probe_url=settings.connectivity_probe_url,
            timeout_seconds=settings.connectivity_timeout_seconds,
        )
    else:
        logger.info("Remote progress service disabled - running local-only")

    progress = ProgressStore(storage, client, connectivity, reminders)
    identity = IdentityProvider(storage)
    progress.attach(identity)

    return AppServices(
        settings=settings,
        storage=storage,
        identity=identity,
        progress=progress,
        reminders=reminders,
        scheduler=scheduler,
        client=client,
        connectivity=connectivity,
    )
