"""SVG card routes."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse, Response

from api.dependencies.cards import get_card_service
from core.config import settings
from core.exceptions import UnsupportedPlatformError
from core.rate_limit import SVG_MEDIA_TYPE, limiter
from domain.entities.profile import Platform
from domain.rendering.fallback import CardKind, render_fallback
from domain.services.card_service import CardResponse, CardService

router = APIRouter(prefix="/card", tags=["cards"])

SVG_RESPONSES: dict[int | str, dict[str, object]] = {
    200: {"content": {SVG_MEDIA_TYPE: {}}, "description": "Rendered card"},
    404: {"description": "Unknown platform or handle (fallback SVG)"},
    429: {"description": "Rate limit exceeded (fallback SVG)"},
    502: {"description": "Upstream platform failure (fallback SVG)"},
}


def svg_response(card: CardResponse) -> Response:
    """Wrap rendered SVG; only successful cards are cacheable."""
    cache_control = (
        f"public, max-age={settings.card_cache_max_age}" if card.ok else "no-store"
    )
    return Response(
        content=card.svg,
        status_code=card.status_code,
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": cache_control},
    )


async def _render(
    service: CardService, platform_slug: str, handle: str, kind: CardKind
) -> Response:
    platform = Platform.from_slug(platform_slug)
    if platform is None:
        exc = UnsupportedPlatformError(platform_slug)
        return svg_response(
            CardResponse(
                svg=render_fallback(exc.message, kind.width, kind.height),
                status_code=exc.status_code,
            )
        )
    return svg_response(await service.render(platform, handle, kind))


@router.get(
    "/{platform}/{handle}/profile",
    response_class=Response,
    responses=SVG_RESPONSES,
    summary="Profile card",
)
@limiter.limit(settings.card_rate_limit)  # type: ignore[untyped-decorator]
async def profile_card(
    request: Request,
    platform: str,
    handle: str,
    service: CardService = Depends(get_card_service),
) -> Response:
    """500x300 summary card with rating, tier, stats and avatar."""
    return await _render(service, platform, handle, CardKind.PROFILE)


@router.get(
    "/{platform}/{handle}/graph",
    response_class=Response,
    responses=SVG_RESPONSES,
    summary="Rating graph",
)
@limiter.limit(settings.card_rate_limit)  # type: ignore[untyped-decorator]
async def rating_graph(
    request: Request,
    platform: str,
    handle: str,
    service: CardService = Depends(get_card_service),
) -> Response:
    """900x420 rating history chart over the platform's rating bands."""
    return await _render(service, platform, handle, CardKind.GRAPH)


@router.get(
    "/{platform}/{handle}/heatmap",
    response_class=Response,
    responses=SVG_RESPONSES,
    summary="Activity heatmap",
)
@limiter.limit(settings.card_rate_limit)  # type: ignore[untyped-decorator]
async def heatmap(
    request: Request,
    platform: str,
    handle: str,
    service: CardService = Depends(get_card_service),
) -> Response:
    """700x250 solved-problems heatmap for the last 52 weeks, with streaks."""
    return await _render(service, platform, handle, CardKind.HEATMAP)


@router.get(
    "/{platform}/{handle}",
    status_code=307,
    response_class=RedirectResponse,
    summary="Redirect to the profile card",
)
async def legacy_card(platform: str, handle: str) -> RedirectResponse:
    target = f"/card/{quote(platform, safe='')}/{quote(handle, safe='')}/profile"
    return RedirectResponse(url=target, status_code=307)
