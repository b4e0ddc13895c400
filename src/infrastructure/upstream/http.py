"""Shared HTTP helpers for upstream platform APIs."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
import structlog

from core.config import settings
from core.exceptions import HandleNotFoundError, UpstreamDataError
from domain.entities.profile import Platform

logger = structlog.get_logger()

T = TypeVar("T")

Sleeper = Callable[[float], Awaitable[None]]


def create_http_client(timeout: float | None = None) -> httpx.AsyncClient:
    """AsyncClient with the service's User-Agent and default timeout."""
    return httpx.AsyncClient(
        timeout=timeout if timeout is not None else settings.upstream_timeout_seconds,
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


def _error_comment(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        comment = payload.get("comment") or payload.get("message")
        return str(comment) if comment else None
    return None


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    platform: Platform,
    handle: str,
    params: dict[str, Any] | None = None,
) -> Any:
    """Single GET returning parsed JSON.

    Raises:
        HandleNotFoundError: on any 4xx answer (not retryable)
        httpx.HTTPError: on transport failures and 5xx answers
        ValueError: when the body is not JSON
    """
    response = await client.get(url, params=params)
    if 400 <= response.status_code < 500:
        raise HandleNotFoundError(
            handle,
            platform.value,
            comment=_error_comment(response) or f"User not found: {handle}",
        )
    response.raise_for_status()
    return response.json()


class RetryPolicy:
    """Bounded retry with linear backoff; 4xx (HandleNotFoundError) is final."""

    def __init__(
        self,
        platform: Platform,
        max_attempts: int = settings.upstream_max_retries,
        backoff_seconds: float = settings.retry_backoff_seconds,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._platform = platform
        self._max_attempts = max(1, max_attempts)
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    async def run(self, operation: Callable[[], Awaitable[T]], handle: str) -> T:
        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            if attempt > 1:
                await self._sleep(self._backoff_seconds * attempt)
            try:
                return await operation()
            except HandleNotFoundError:
                raise
            except (httpx.HTTPError, UpstreamDataError, ValueError) as exc:
                last_error = exc
                logger.warning(
                    "upstream_request_failed",
                    platform=self._platform.value,
                    handle=handle,
                    attempt=attempt,
                    error=str(exc) or type(exc).__name__,
                )
        raise UpstreamDataError(
            f"Failed to fetch {self._platform.value} data after "
            f"{self._max_attempts} attempts: {last_error}",
            platform=self._platform.value,
        )
