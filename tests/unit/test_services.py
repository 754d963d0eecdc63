"""
Unit tests for service wiring.
"""

import pytest

from config import Settings
from korkort.progress import NotificationPreferences, ProgressState
from korkort.services import create_services


@pytest.fixture
def offline_settings(tmp_path):
    return Settings(storage_path=tmp_path / "state.db", offline_mode=True)


class TestCreateServices:
    """Tests for create_services."""

    def test_offline_has_no_remote(self, offline_settings):
        services = create_services(offline_settings)

        assert services.client is None
        assert services.connectivity is None
        assert services.progress.client is None

    @pytest.mark.asyncio
    async def test_online_builds_clients(self, tmp_path):
        services = create_services(Settings(storage_path=tmp_path / "state.db"))
        try:
            assert services.client is not None
            assert services.connectivity is not None
        finally:
            await services.close()

    @pytest.mark.asyncio
    async def test_start_restores_identity_and_loads(self, offline_settings):
        services = create_services(offline_settings)

        await services.start()

        assert services.identity.current is None
        assert services.progress.state == ProgressState.READY

    @pytest.mark.asyncio
    async def test_sign_in_flows_into_store(self, offline_settings, real_user):
        services = create_services(offline_settings)
        await services.start()

        await services.identity.sign_in(real_user)
        await services.progress.record_completion(real_user, 0)

        again = create_services(offline_settings)
        await again.start()

        assert again.identity.current == real_user
        assert again.progress.completed_lessons == [0]
        assert again.progress.streak.current_streak == 1

    @pytest.mark.asyncio
    async def test_sign_out_cancels_reminders(self, offline_settings, real_user):
        services = create_services(offline_settings)
        await services.start()
        await services.identity.sign_in(real_user)
        await services.progress.request_notification_permission()
        await services.progress.update_preferences(real_user, NotificationPreferences(True, False))
        assert len(await services.scheduler.pending()) == 1

        await services.identity.sign_out()

        assert services.progress.preferences == NotificationPreferences(False, False)
        assert await services.scheduler.pending() == []

    def test_reminder_timezone_from_settings(self, tmp_path):
        services = create_services(
            Settings(storage_path=tmp_path / "state.db", offline_mode=True, reminder_timezone="UTC")
        )

        assert services.reminders.zone is not None
        assert services.reminders.zone.key == "UTC"
