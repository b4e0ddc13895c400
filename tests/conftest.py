"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from datetime import datetime
from pathlib import Path

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.profile import NormalizedProfile, Platform
from domain.services.card_service import CardService
from infrastructure.cache.ttl_cache import TTLCache
from tests.factories import FIXED_NOW, FakeAvatarResolver, FakeProvider, make_profile


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def profile_factory() -> Callable[..., NormalizedProfile]:
    return make_profile


@pytest.fixture
def providers() -> dict[Platform, FakeProvider]:
    return {
        Platform.CODEFORCES: FakeProvider(Platform.CODEFORCES, {"tourist": make_profile()}),
        Platform.CODECHEF: FakeProvider(
            Platform.CODECHEF,
            {
                "gennady.korotkevich": make_profile(
                    handle="gennady.korotkevich",
                    platform=Platform.CODECHEF,
                    rank_label="7★",
                    max_rank_label="7★",
                    global_rank=1,
                    country_rank=1,
                )
            },
        ),
    }


@pytest.fixture
def card_service(providers: dict[Platform, FakeProvider]) -> CardService:
    """Card service over fake providers with a real TTL cache."""
    return CardService(
        providers,
        FakeAvatarResolver(),
        cache=TTLCache(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client against the real dependency graph."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def card_client(card_service: CardService) -> AsyncGenerator[AsyncClient, None]:
    """Test client whose card service never leaves the process."""
    from api.dependencies.cards import get_card_service
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_card_service] = lambda: card_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
