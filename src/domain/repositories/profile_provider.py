"""Collaborator protocols the card service depends on."""

from typing import Any, Protocol

from domain.entities.profile import NormalizedProfile, Platform


class IProfileProvider(Protocol):
    """Fetches a platform profile and normalizes it."""

    platform: Platform

    async def fetch_profile(self, handle: str) -> NormalizedProfile:
        """
        Fetch and normalize the profile for a handle.

        Raises:
            UpstreamDataError: if the upstream cannot produce the profile
        """
        ...


class IAvatarResolver(Protocol):
    """Turns an avatar reference into an embeddable data URI."""

    async def resolve(self, avatar_ref: str | None) -> str:
        """Return a data URI, or the placeholder data URI on any failure."""
        ...


class IProfileCache(Protocol):
    """Read-through cache with explicit expiry."""

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss or after expiry."""
        ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value that expires after ttl_seconds."""
        ...
