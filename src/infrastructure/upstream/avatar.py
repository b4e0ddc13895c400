"""Avatar resolution: remote image -> embeddable data URI."""

import base64

import httpx
import structlog

from core.config import settings
from domain.repositories.profile_provider import IProfileCache

logger = structlog.get_logger()

# 100x100 grey square reading "No Image"
PLACEHOLDER_AVATAR = (
    "data:image/svg+xml;base64,PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciIHdpZHRo"
    "PSIxMDAiIGhlaWdodD0iMTAwIiB2aWV3Qm94PSIwIDAgMTAwIDEwMCI+PHJlY3Qgd2lkdGg9IjEwMCIgaGVp"
    "Z2h0PSIxMDAiIGZpbGw9IiNlZWUiLz48dGV4dCB4PSI1MCIgeT0iNTAiIGZvbnQtZmFtaWx5PSJBcmlhbCIg"
    "Zm9udC1zaXplPSIxNCIgZmlsbD0iIzY2NiIgdGV4dC1hbmNob3I9Im1pZGRsZSIgZHk9Ii4zZW0iPk5vIElt"
    "YWdlPC90ZXh0Pjwvc3ZnPg=="
)
MAX_AVATAR_BYTES = 2 * 1024 * 1024


def normalize_avatar_url(avatar_ref: str) -> str:
    """Protocol-relative and scheme-less references get https."""
    ref = avatar_ref.strip()
    if ref.startswith("//"):
        return f"https:{ref}"
    if not ref.startswith(("http://", "https://")):
        return f"https://{ref.lstrip('/')}"
    return ref


class AvatarResolver:
    """IAvatarResolver fetching images over HTTP, with an optional cache."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: IProfileCache | None = None,
        ttl_seconds: int = settings.profile_cache_ttl_seconds,
        timeout: float = settings.avatar_timeout_seconds,
    ) -> None:
        self._client = client
        self._cache = cache
        self._ttl_seconds = ttl_seconds
        self._timeout = timeout

    async def resolve(self, avatar_ref: str | None) -> str:
        if not avatar_ref:
            return PLACEHOLDER_AVATAR
        if avatar_ref.startswith("data:"):
            return avatar_ref

        url = normalize_avatar_url(avatar_ref)
        cache_key = f"avatar:{url}"
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return str(cached)

        try:
            response = await self._client.get(url, timeout=self._timeout)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("avatar_fetch_failed", url=url, error=str(exc) or type(exc).__name__)
            return PLACEHOLDER_AVATAR

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not content_type.startswith("image/") or len(response.content) > MAX_AVATAR_BYTES:
            logger.warning(
                "avatar_rejected",
                url=url,
                content_type=content_type,
                size=len(response.content),
            )
            return PLACEHOLDER_AVATAR

        encoded = base64.b64encode(response.content).decode("ascii")
        data_uri = f"data:{content_type};base64,{encoded}"
        if self._cache is not None:
            self._cache.set(cache_key, data_uri, self._ttl_seconds)
        return data_uri
