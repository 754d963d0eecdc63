"""
Current identity and change notification.

The authentication protocol itself is handled elsewhere; this module only
tracks who is signed in (a real user or a local guest), persists that
choice under the `user` key, and tells registered observers when it
changes.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from loguru import logger

from korkort.storage import USER_KEY, LocalStorage

IdentityListener = Callable[["Identity | None"], Awaitable[None]]


@dataclass(frozen=True)
class Identity:
    """A signed-in user or a locally generated guest."""

    user_id: str
    is_guest: bool = False
    username: str | None = None

    @property
    def can_sync(self) -> bool:
        """Whether this identity may read or write the remote service."""
        return bool(self.user_id) and not self.is_guest

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "isGuest": self.is_guest,
            "username": self.username,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Identity:
        return cls(
            user_id=data.get("userId", ""),
            is_guest=bool(data.get("isGuest", False)),
            username=data.get("username"),
        )


def create_guest_identity(now_ms: int | None = None) -> Identity:
    """Create a guest identity with a `guest-<epoch ms>` id."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return Identity(user_id=f"guest-{now_ms}", is_guest=True, username="Guest")


class IdentityProvider:
    """
    Holds the current identity and notifies listeners on change.

    Usage:
        provider = IdentityProvider(storage)
        provider.subscribe(progress_store.load)
        await provider.restore()
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self._identity: Identity | None = None
        self._listeners: list[IdentityListener] = []

    @property
    def current(self) -> Identity | None:
        return self._identity

    def subscribe(self, listener: IdentityListener) -> None:
        """Register a coroutine called with the new identity after each change."""
        self._listeners.append(listener)

    async def _notify(self) -> None:
        for listener in self._listeners:
            await listener(self._identity)

    async def restore(self) -> Identity | None:
        """
        Load the persisted identity and announce it.

        Returns:
            The restored identity, or None when signed out
        """
        data = await self.storage.get_json(USER_KEY)
        self._identity = Identity.from_dict(data) if data else None
        logger.debug("Restored identity: {}", self._identity)
        await self._notify()
        return self._identity

    async def sign_in(self, identity: Identity) -> None:
        """Make identity current, persist it and notify listeners."""
        self._identity = identity
        await self.storage.set_json(USER_KEY, identity.to_dict())
        logger.info("Signed in as {} (guest={})", identity.user_id, identity.is_guest)
        await self._notify()

    async def continue_as_guest(self) -> Identity:
        """Create and sign in a new guest identity."""
        guest = create_guest_identity()
        await self.sign_in(guest)
        return guest

    async def sign_out(self) -> None:
        """Forget the current identity and wipe local storage."""
        logger.info("Signing out {}", self._identity.user_id if self._identity else None)
        self._identity = None
        await self.storage.clear()
        await self._notify()
