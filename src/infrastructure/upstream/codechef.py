"""CodeChef profile provider (community JSON API)."""

from urllib.parse import quote

import httpx
import structlog

from core.config import settings
from core.exceptions import HandleNotFoundError
from domain.entities.profile import ActivityEvent, NormalizedProfile, Platform, RatingChange
from infrastructure.upstream.http import RetryPolicy, get_json
from infrastructure.upstream.schemas import CodeChefProfile

logger = structlog.get_logger()


def normalize_codechef(handle: str, data: CodeChefProfile) -> NormalizedProfile:
    """Map the CodeChef payload onto the normalized profile.

    The heatmap only carries a solve count per day, so each solved problem
    becomes an event with a per-day synthetic key. Lifetime distinct problems
    then equal the summed daily counts.
    """
    history = []
    for entry in data.rating_data:
        timestamp = entry.timestamp_seconds
        if timestamp is None or not entry.rating or entry.rating <= 0:
            continue
        history.append(
            RatingChange(
                timestamp_seconds=timestamp,
                new_rating=entry.rating,
                contest_name=entry.name,
                contest_rank=entry.rank,
            )
        )

    events = []
    for day in data.heat_map:
        moment = day.day
        if moment is None or not day.value or day.value <= 0:
            continue
        key_prefix = moment.date().isoformat()
        timestamp = int(moment.timestamp())
        events.extend(
            ActivityEvent(timestamp_seconds=timestamp, problem_key=f"{key_prefix}#{i}")
            for i in range(day.value)
        )

    return NormalizedProfile(
        handle=handle,
        platform=Platform.CODECHEF,
        current_rating=data.current_rating,
        max_rating=data.highest_rating,
        rank_label=data.stars or "unrated",
        max_rank_label=data.stars or "unrated",
        rating_history=tuple(history),
        activity_events=tuple(events),
        avatar_ref=data.profile,
        display_name=data.name,
        country=data.country_name,
        organization=data.institution,
        global_rank=data.global_rank,
        country_rank=data.country_rank,
    )


class CodeChefProvider:
    """IProfileProvider backed by the CodeChef community API."""

    platform = Platform.CODECHEF

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = settings.codechef_base_url,
        retry: RetryPolicy | None = None,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._retry = retry or RetryPolicy(Platform.CODECHEF)

    async def _fetch(self, handle: str) -> NormalizedProfile:
        payload = await get_json(
            self._client,
            f"{self._base_url}/handle/{quote(handle, safe='')}",
            platform=self.platform,
            handle=handle,
        )
        data = CodeChefProfile.model_validate(payload)
        if not data.success:
            raise HandleNotFoundError(handle, self.platform.value)
        return normalize_codechef(handle, data)

    async def fetch_profile(self, handle: str) -> NormalizedProfile:
        profile = await self._retry.run(lambda: self._fetch(handle), handle)
        logger.info(
            "upstream_profile_fetched",
            platform=self.platform.value,
            handle=handle,
            contests=len(profile.rating_history),
            solved_events=len(profile.activity_events),
        )
        return profile
