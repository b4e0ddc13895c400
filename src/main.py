"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.dependencies.cards import close_http_clients
from api.exception_handlers import setup_exception_handlers
from api.middleware.request_context import RequestContextMiddleware
from api.routes.cards import router as cards_router
from api.routes.docs import router as docs_router
from api.routes.health import router as health_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    logger.info(
        "app_started",
        environment=settings.app_env,
        codeforces_signing=settings.codeforces_signing_enabled,
    )
    yield
    await close_http_clients()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Competitive Programming Profile Cards\n\n"
            "Embeddable SVG cards rendered from Codeforces and CodeChef data.\n\n"
            "### Cards\n"
            "- **Profile**: `/card/{platform}/{handle}/profile` (500x300)\n"
            "- **Rating graph**: `/card/{platform}/{handle}/graph` (900x420)\n"
            "- **Heatmap**: `/card/{platform}/{handle}/heatmap` (700x250)\n\n"
            "`platform` is `cf` (Codeforces) or `cc` (CodeChef). Failures are "
            "answered with a placeholder SVG and a non-2xx status.\n\n"
            "### Rate Limits\n"
            f"- Card endpoints: {settings.card_rate_limit} per IP"
        ),
        version=settings.version,
        debug=settings.debug,
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "cards",
                "description": "SVG profile cards, rating graphs and heatmaps",
            },
            {
                "name": "docs",
                "description": "Human-readable landing page",
            },
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Request tracking (LIFO order - last added = outermost)
    app.add_middleware(RequestContextMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Cards are public images
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(docs_router)
    app.include_router(health_router)
    app.include_router(cards_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
