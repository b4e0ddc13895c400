"""Unit tests for the Codeforces provider."""

import hashlib
from typing import Any

import httpx
import pytest

from core.exceptions import HandleNotFoundError, UpstreamDataError
from domain.entities.profile import Platform
from infrastructure.upstream.codeforces import (
    DEFAULT_AVATAR,
    CodeforcesProvider,
    normalize_codeforces,
    sign_request,
)
from infrastructure.upstream.http import RetryPolicy
from infrastructure.upstream.schemas import (
    CodeforcesRatingChange,
    CodeforcesSubmission,
    CodeforcesUser,
)

BASE_URL = "https://cf.test/api"

USER = {
    "handle": "tourist",
    "rating": 3757,
    "maxRating": 4009,
    "rank": "legendary grandmaster",
    "maxRank": "legendary grandmaster",
    "contribution": 72,
    "friendOfCount": 60000,
    "firstName": "Gennady",
    "lastName": "Korotkevich",
    "city": "Gomel",
    "country": "Belarus",
    "organization": "ITMO University",
    "titlePhoto": "https://userpic.codeforces.org/422/title/50a270ed4a722867.jpg",
    "lastOnlineTimeSeconds": 1719700000,
    "registrationTimeSeconds": 1265987288,
}

RATINGS = [
    {"contestId": 1, "contestName": "Round 1", "rank": 5,
     "ratingUpdateTimeSeconds": 1300000000, "newRating": 2500},
    {"contestId": 2, "contestName": "Round 2", "rank": 1,
     "ratingUpdateTimeSeconds": 1400000000, "newRating": 3000},
]

SUBMISSIONS = [
    {"creationTimeSeconds": 1719600000, "verdict": "OK",
     "problem": {"contestId": 1900, "index": "A", "name": "Easy"}},
    {"creationTimeSeconds": 1719600100, "verdict": "OK",
     "problem": {"contestId": 1900, "index": "A", "name": "Easy"}},
    {"creationTimeSeconds": 1719600200, "verdict": "WRONG_ANSWER",
     "problem": {"contestId": 1900, "index": "B", "name": "Hard"}},
    {"creationTimeSeconds": 1719600300, "verdict": "OK",
     "problem": {"problemsetName": "acmsguru", "index": "100", "name": "A+B"}},
]


def ok(result: Any) -> httpx.Response:
    return httpx.Response(200, json={"status": "OK", "result": result})


def happy_handler(request: httpx.Request) -> httpx.Response:
    method = request.url.path.rsplit("/", 1)[-1]
    return {
        "user.info": ok([USER]),
        "user.rating": ok(RATINGS),
        "user.status": ok(SUBMISSIONS),
    }[method]


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_provider(handler: Any, sleep: RecordingSleep | None = None, **kwargs: Any) -> CodeforcesProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    retry = RetryPolicy(Platform.CODEFORCES, max_attempts=3, backoff_seconds=1.0,
                        sleep=sleep or RecordingSleep())
    return CodeforcesProvider(client, base_url=BASE_URL, retry=retry, **kwargs)


class TestSigning:
    def test_signature_format(self) -> None:
        params = {"apiKey": "key", "time": 1700000000, "handles": "tourist"}
        expected_hash = hashlib.sha512(
            b"abcdef/user.info?apiKey=key&handles=tourist&time=1700000000#secret"
        ).hexdigest()

        assert sign_request("user.info", params, "secret", "abcdef") == "abcdef" + expected_hash

    def test_unsigned_without_credentials(self) -> None:
        provider = make_provider(happy_handler)

        assert provider.user_info_params("tourist") == {"handles": "tourist"}

    def test_signed_with_credentials(self) -> None:
        provider = make_provider(
            happy_handler,
            api_key="key",
            api_secret="secret",
            clock=lambda: 1700000000.5,
            nonce=lambda: "abcdef",
        )
        params = provider.user_info_params("tourist")

        assert params["apiKey"] == "key"
        assert params["time"] == 1700000000
        assert params["apiSig"] == sign_request(
            "user.info",
            {"apiKey": "key", "time": 1700000000, "handles": "tourist"},
            "secret",
            "abcdef",
        )
        assert len(params["apiSig"]) == 6 + 128


class TestNormalize:
    def test_maps_fields(self) -> None:
        profile = normalize_codeforces(
            CodeforcesUser.model_validate(USER),
            [CodeforcesRatingChange.model_validate(r) for r in RATINGS],
            [CodeforcesSubmission.model_validate(s) for s in SUBMISSIONS],
        )

        assert profile.platform is Platform.CODEFORCES
        assert profile.current_rating == 3757
        assert profile.rank_label == "legendary grandmaster"
        assert profile.display_name == "Gennady Korotkevich"
        assert profile.location == "Gomel, Belarus"
        assert profile.contribution == 72
        assert [c.new_rating for c in profile.rating_history] == [2500, 3000]
        assert [e.problem_key for e in profile.activity_events] == [
            "1900-A", "1900-A", "acmsguru-100"
        ]

    def test_unrated_user_defaults(self) -> None:
        profile = normalize_codeforces(CodeforcesUser(handle="newcomer"), [], [])

        assert profile.rank_label == "unrated"
        assert profile.current_rating is None
        assert profile.avatar_ref == DEFAULT_AVATAR
        assert profile.contribution == 0
        assert profile.friend_of_count == 0


class TestFetchProfile:
    @pytest.mark.asyncio
    async def test_fetches_three_methods(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return happy_handler(request)

        profile = await make_provider(handler).fetch_profile("tourist")

        assert sorted(seen) == ["/api/user.info", "/api/user.rating", "/api/user.status"]
        assert profile.handle == "tourist"
        assert len(profile.rating_history) == 2

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self) -> None:
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(
                400, json={"status": "FAILED", "comment": "handles: User with handle nope not found"}
            )

        sleep = RecordingSleep()
        with pytest.raises(HandleNotFoundError) as exc_info:
            await make_provider(handler, sleep).fetch_profile("nope")

        assert exc_info.value.status_code == 404
        assert "not found" in exc_info.value.message
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_server_errors_retry_with_backoff(self) -> None:
        sleep = RecordingSleep()

        with pytest.raises(UpstreamDataError) as exc_info:
            await make_provider(lambda r: httpx.Response(503), sleep).fetch_profile("tourist")

        assert "after 3 attempts" in exc_info.value.message
        assert exc_info.value.status_code == 502
        assert sleep.delays == [2.0, 3.0]

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self) -> None:
        failures = {"remaining": 1}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("user.rating") and failures["remaining"]:
                failures["remaining"] -= 1
                raise httpx.ConnectError("connection reset", request=request)
            return happy_handler(request)

        sleep = RecordingSleep()
        profile = await make_provider(handler, sleep).fetch_profile("tourist")

        assert profile.current_rating == 3757
        assert sleep.delays == [2.0]

    @pytest.mark.asyncio
    async def test_failed_envelope_is_retried(self) -> None:
        sleep = RecordingSleep()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "FAILED", "comment": "Call limit exceeded"})

        with pytest.raises(UpstreamDataError) as exc_info:
            await make_provider(handler, sleep).fetch_profile("tourist")

        assert "Call limit exceeded" in exc_info.value.message
        assert len(sleep.delays) == 2
