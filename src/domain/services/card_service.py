"""Card service: profile lookup, caching and rendering."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime

import structlog

from core.config import settings
from core.exceptions import AppException, UnsupportedPlatformError
from domain.entities.profile import NormalizedProfile, Platform
from domain.rendering.card import build_profile_card
from domain.rendering.fallback import CardKind, render_fallback, render_with_fallback
from domain.rendering.graph import build_rating_graph
from domain.rendering.heatmap import build_heatmap
from domain.rendering.timeutils import utc_now
from domain.repositories.profile_provider import (
    IAvatarResolver,
    IProfileCache,
    IProfileProvider,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class CardResponse:
    """Rendered SVG with the HTTP status the route should answer with."""

    svg: str
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class CardService:
    """Service layer turning (platform, handle) into SVG cards.

    Provider failures and render failures never escape: they come back as a
    fallback card of the requested size with a non-2xx status.
    """

    def __init__(
        self,
        providers: Mapping[Platform, IProfileProvider],
        avatar_resolver: IAvatarResolver,
        cache: IProfileCache | None = None,
        cache_ttl_seconds: int = settings.profile_cache_ttl_seconds,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._providers = dict(providers)
        self._avatar_resolver = avatar_resolver
        self._cache = cache
        self._cache_ttl_seconds = cache_ttl_seconds
        self._clock = clock

    @staticmethod
    def cache_key(platform: Platform, handle: str) -> str:
        return f"{platform.value}:{handle.lower()}"

    async def _load_profile(self, platform: Platform, handle: str) -> NormalizedProfile:
        """Read-through lookup; only successful fetches are cached."""
        key = self.cache_key(platform, handle)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("profile_cache_hit", platform=platform.value, handle=handle)
                return cached
            logger.debug("profile_cache_miss", platform=platform.value, handle=handle)

        provider = self._providers.get(platform)
        if provider is None:
            raise UnsupportedPlatformError(platform.value)
        profile = await provider.fetch_profile(handle)
        if self._cache is not None:
            self._cache.set(key, profile, self._cache_ttl_seconds)
        return profile

    async def _fetch_or_fallback(
        self, platform: Platform, handle: str, kind: CardKind, message: Callable[[Exception], str]
    ) -> NormalizedProfile | CardResponse:
        try:
            return await self._load_profile(platform, handle)
        except AppException as exc:
            logger.warning(
                "profile_fetch_failed",
                platform=platform.value,
                handle=handle,
                card=kind.value,
                error_code=exc.error_code.value,
                message=exc.message,
            )
            return CardResponse(
                svg=render_fallback(message(exc), kind.width, kind.height),
                status_code=exc.status_code,
            )
        except Exception as exc:
            logger.error(
                "profile_fetch_crashed",
                platform=platform.value,
                handle=handle,
                card=kind.value,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            return CardResponse(
                svg=render_fallback(message(exc), kind.width, kind.height),
                status_code=500,
            )

    async def profile_card(self, platform: Platform, handle: str) -> CardResponse:
        def message(exc: Exception) -> str:
            detail = exc.message if isinstance(exc, AppException) else "Please try again later."
            return f'Unable to load profile for "{handle}". {detail}'

        loaded = await self._fetch_or_fallback(platform, handle, CardKind.PROFILE, message)
        if isinstance(loaded, CardResponse):
            return loaded

        avatar = await self._avatar_resolver.resolve(loaded.avatar_ref)
        now = self._clock()
        outcome = render_with_fallback(
            lambda: build_profile_card(loaded, avatar, now), CardKind.PROFILE
        )
        return CardResponse(svg=outcome.svg, status_code=outcome.status_code)

    async def rating_graph(self, platform: Platform, handle: str) -> CardResponse:
        def message(exc: Exception) -> str:
            return f'Unable to load rating graph for "{handle}". Please check if the handle exists.'

        loaded = await self._fetch_or_fallback(platform, handle, CardKind.GRAPH, message)
        if isinstance(loaded, CardResponse):
            return loaded

        outcome = render_with_fallback(lambda: build_rating_graph(loaded), CardKind.GRAPH)
        return CardResponse(svg=outcome.svg, status_code=outcome.status_code)

    async def heatmap(self, platform: Platform, handle: str) -> CardResponse:
        def message(exc: Exception) -> str:
            return f'Unable to generate heatmap for "{handle}". Please try again later.'

        loaded = await self._fetch_or_fallback(platform, handle, CardKind.HEATMAP, message)
        if isinstance(loaded, CardResponse):
            return loaded

        now = self._clock()
        outcome = render_with_fallback(lambda: build_heatmap(loaded, now), CardKind.HEATMAP)
        return CardResponse(svg=outcome.svg, status_code=outcome.status_code)

    async def render(self, platform: Platform, handle: str, kind: CardKind) -> CardResponse:
        """Dispatch on card kind."""
        if kind is CardKind.GRAPH:
            return await self.rating_graph(platform, handle)
        if kind is CardKind.HEATMAP:
            return await self.heatmap(platform, handle)
        return await self.profile_card(platform, handle)