"""Dependency injection factories for the card routes."""

from functools import lru_cache

import httpx

from core.config import settings
from domain.entities.profile import Platform
from domain.repositories.profile_provider import IProfileProvider
from domain.services.card_service import CardService
from infrastructure.cache.ttl_cache import TTLCache
from infrastructure.upstream.avatar import AvatarResolver
from infrastructure.upstream.codechef import CodeChefProvider
from infrastructure.upstream.codeforces import CodeforcesProvider
from infrastructure.upstream.http import create_http_client


@lru_cache
def get_profile_cache() -> TTLCache:
    """Process-wide cache for normalized profiles and avatars."""
    return TTLCache()


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    """Shared upstream client; closed by the app lifespan."""
    return create_http_client()


@lru_cache
def get_providers() -> dict[Platform, IProfileProvider]:
    """One provider per supported platform."""
    client = get_http_client()
    return {
        Platform.CODEFORCES: CodeforcesProvider(
            client,
            base_url=settings.codeforces_base_url,
            api_key=settings.codeforces_api_key,
            api_secret=settings.codeforces_api_secret,
        ),
        Platform.CODECHEF: CodeChefProvider(client, base_url=settings.codechef_base_url),
    }


@lru_cache
def get_avatar_resolver() -> AvatarResolver:
    """Get Avatar resolver instance."""
    return AvatarResolver(
        get_http_client(),
        cache=get_profile_cache(),
        ttl_seconds=settings.profile_cache_ttl_seconds,
        timeout=settings.avatar_timeout_seconds,
    )


@lru_cache
def get_card_service() -> CardService:
    """Get Card service instance."""
    return CardService(
        get_providers(),
        get_avatar_resolver(),
        cache=get_profile_cache(),
        cache_ttl_seconds=settings.profile_cache_ttl_seconds,
    )


async def close_http_clients() -> None:
    """Close the shared client if it was ever created."""
    if get_http_client.cache_info().currsize:
        await get_http_client().aclose()
    for factory in (get_card_service, get_avatar_resolver, get_providers, get_http_client):
        factory.cache_clear()
