"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies.cards import get_profile_cache
from core.config import settings
from infrastructure.cache.ttl_cache import TTLCache

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    cache_entries: int | None = None
    codeforces_signing: bool | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without touching upstream platforms.
    """
    return HealthResponse(
        status="healthy",
        version=settings.version,
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    cache: TTLCache = Depends(get_profile_cache),
) -> HealthResponse:
    """
    Health check including cache occupancy.

    Expired entries are purged first so the count reflects live profiles.
    """
    cache.purge_expired()
    return HealthResponse(
        status="healthy",
        version=settings.version,
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.app_env,
        cache_entries=len(cache),
        codeforces_signing=settings.codeforces_signing_enabled,
    )
