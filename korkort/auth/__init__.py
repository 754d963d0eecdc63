"""Identity tracking."""

from korkort.auth.identity import Identity, IdentityProvider, create_guest_identity

__all__ = [
    "Identity",
    "IdentityProvider",
    "create_guest_identity",
]
