"""Codeforces profile provider.

Fetches ``user.info``, ``user.rating`` and ``user.status`` concurrently and
normalizes them. When API credentials are configured, ``user.info`` is signed
the way the Codeforces API documents it:

    apiSig = rand + sha512("{rand}/{method}?{sorted params}#{secret}")
"""

import asyncio
import hashlib
import secrets
import string
import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter

from core.config import settings
from core.exceptions import UpstreamDataError
from domain.entities.profile import ActivityEvent, NormalizedProfile, Platform, RatingChange
from infrastructure.upstream.http import RetryPolicy, get_json
from infrastructure.upstream.schemas import (
    CodeforcesEnvelope,
    CodeforcesRatingChange,
    CodeforcesSubmission,
    CodeforcesUser,
)

logger = structlog.get_logger()

DEFAULT_AVATAR = "https://userpic.codeforces.org/no-title.jpg"
ACCEPTED = "OK"
_NONCE_ALPHABET = string.ascii_lowercase + string.digits

_users = TypeAdapter(list[CodeforcesUser])
_rating_changes = TypeAdapter(list[CodeforcesRatingChange])
_submissions = TypeAdapter(list[CodeforcesSubmission])


def random_nonce() -> str:
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(6))


def sign_request(method: str, params: dict[str, Any], secret: str, nonce: str) -> str:
    """Build the apiSig value for a Codeforces method call."""
    query = "&".join(f"{key}={value}" for key, value in sorted(params.items()))
    digest = hashlib.sha512(f"{nonce}/{method}?{query}#{secret}".encode()).hexdigest()
    return f"{nonce}{digest}"


def normalize_codeforces(
    user: CodeforcesUser,
    ratings: list[CodeforcesRatingChange],
    submissions: list[CodeforcesSubmission],
) -> NormalizedProfile:
    history = tuple(
        RatingChange(
            timestamp_seconds=change.rating_update_time_seconds,
            new_rating=change.new_rating,
            contest_name=change.contest_name,
            contest_rank=change.rank,
        )
        for change in ratings
        if change.new_rating > 0
    )
    events = tuple(
        ActivityEvent(timestamp_seconds=sub.creation_time_seconds, problem_key=sub.problem.key)
        for sub in submissions
        if sub.verdict == ACCEPTED
    )
    full_name = " ".join(part for part in (user.first_name, user.last_name) if part)
    return NormalizedProfile(
        handle=user.handle,
        platform=Platform.CODEFORCES,
        current_rating=user.rating,
        max_rating=user.max_rating,
        rank_label=user.rank or "unrated",
        max_rank_label=user.max_rank or "unrated",
        rating_history=history,
        activity_events=events,
        avatar_ref=user.title_photo or user.avatar or DEFAULT_AVATAR,
        display_name=full_name or None,
        city=user.city,
        country=user.country,
        organization=user.organization,
        contribution=user.contribution or 0,
        friend_of_count=user.friend_of_count or 0,
        last_online_seconds=user.last_online_time_seconds,
        registered_seconds=user.registration_time_seconds,
    )


class CodeforcesProvider:
    """IProfileProvider backed by the official Codeforces API."""

    platform = Platform.CODEFORCES

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = settings.codeforces_base_url,
        api_key: str = settings.codeforces_api_key,
        api_secret: str = settings.codeforces_api_secret,
        retry: RetryPolicy | None = None,
        clock: Callable[[], float] = time.time,
        nonce: Callable[[], str] = random_nonce,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._api_secret = api_secret
        self._retry = retry or RetryPolicy(Platform.CODEFORCES)
        self._clock = clock
        self._nonce = nonce

    def user_info_params(self, handle: str) -> dict[str, Any]:
        """Query for user.info, signed when credentials are configured."""
        if not (self._api_key and self._api_secret):
            return {"handles": handle}
        params: dict[str, Any] = {
            "apiKey": self._api_key,
            "time": int(self._clock()),
            "handles": handle,
        }
        params["apiSig"] = sign_request("user.info", params, self._api_secret, self._nonce())
        return params

    async def _call(self, method: str, params: dict[str, Any], handle: str) -> Any:
        payload = await get_json(
            self._client,
            f"{self._base_url}/{method}",
            platform=self.platform,
            handle=handle,
            params=params,
        )
        envelope = CodeforcesEnvelope.model_validate(payload)
        if envelope.status != "OK":
            raise UpstreamDataError(
                f"Invalid response from Codeforces API: {envelope.comment or envelope.status}",
                platform=self.platform.value,
            )
        return envelope.result

    async def _fetch(self, handle: str) -> NormalizedProfile:
        info, ratings, statuses = await asyncio.gather(
            self._call("user.info", self.user_info_params(handle), handle),
            self._call("user.rating", {"handle": handle}, handle),
            self._call("user.status", {"handle": handle}, handle),
        )
        users = _users.validate_python(info)
        if not users:
            raise UpstreamDataError("Codeforces returned no user", platform=self.platform.value)
        return normalize_codeforces(
            users[0],
            _rating_changes.validate_python(ratings or []),
            _submissions.validate_python(statuses or []),
        )

    async def fetch_profile(self, handle: str) -> NormalizedProfile:
        profile = await self._retry.run(lambda: self._fetch(handle), handle)
        logger.info(
            "upstream_profile_fetched",
            platform=self.platform.value,
            handle=handle,
            contests=len(profile.rating_history),
            accepted=len(profile.activity_events),
        )
        return profile
