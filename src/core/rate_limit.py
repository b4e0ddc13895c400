"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from domain.rendering.fallback import CardKind, render_fallback

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)

SVG_MEDIA_TYPE = "image/svg+xml"


def card_kind_for_path(path: str) -> CardKind:
    """Pick the fallback canvas that matches the card the client asked for."""
    for kind in CardKind:
        if path.rstrip("/").endswith(f"/{kind.value}"):
            return kind
    return CardKind.PROFILE


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    """Answer with an SVG placeholder so <img> embeds still show something."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    kind = card_kind_for_path(request.url.path)
    svg = render_fallback(f"Rate limit exceeded: {detail}", kind.width, kind.height)
    return Response(
        content=svg,
        status_code=429,
        media_type=SVG_MEDIA_TYPE,
        headers={"Retry-After": "60", "Cache-Control": "no-store"},
    )
