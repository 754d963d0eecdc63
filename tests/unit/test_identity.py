"""
Unit tests for identity tracking.
"""

import pytest

from korkort.auth import Identity, IdentityProvider, create_guest_identity
from korkort.storage import USER_KEY


class TestIdentity:
    """Tests for the Identity value."""

    def test_real_user_can_sync(self, real_user):
        assert real_user.can_sync is True

    def test_guest_cannot_sync(self, guest_user):
        assert guest_user.can_sync is False

    def test_empty_id_cannot_sync(self):
        assert Identity(user_id="").can_sync is False

    def test_dict_round_trip_shape(self, real_user):
        data = real_user.to_dict()
        assert data == {"userId": "user-123", "isGuest": False, "username": "Alva"}
        assert Identity.from_dict(data) == real_user

    def test_guest_id_format(self):
        guest = create_guest_identity(now_ms=1700000000000)
        assert guest.user_id == "guest-1700000000000"
        assert guest.is_guest is True
        assert guest.username == "Guest"


class TestIdentityProvider:
    """Tests for IdentityProvider."""

    @pytest.mark.asyncio
    async def test_sign_in_persists_and_notifies(self, storage, real_user):
        provider = IdentityProvider(storage)
        seen = []

        async def listener(identity):
            seen.append(identity)

        provider.subscribe(listener)
        await provider.sign_in(real_user)

        assert provider.current == real_user
        assert seen == [real_user]
        assert await storage.get_json(USER_KEY) == real_user.to_dict()

    @pytest.mark.asyncio
    async def test_restore(self, storage, real_user):
        await storage.set_json(USER_KEY, real_user.to_dict())
        provider = IdentityProvider(storage)

        assert await provider.restore() == real_user

    @pytest.mark.asyncio
    async def test_restore_signed_out(self, storage):
        provider = IdentityProvider(storage)
        seen = []

        async def listener(identity):
            seen.append(identity)

        provider.subscribe(listener)

        assert await provider.restore() is None
        assert seen == [None]

    @pytest.mark.asyncio
    async def test_continue_as_guest(self, storage):
        provider = IdentityProvider(storage)
        guest = await provider.continue_as_guest()

        assert guest.is_guest is True
        assert guest.user_id.startswith("guest-")
        assert provider.current == guest

    @pytest.mark.asyncio
    async def test_sign_out_wipes_storage(self, storage, real_user):
        provider = IdentityProvider(storage)
        await provider.sign_in(real_user)
        await storage.set_json("completedLessons", [0, 1])

        await provider.sign_out()

        assert provider.current is None
        assert await storage.keys() == []
