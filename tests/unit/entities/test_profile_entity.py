"""Unit tests for the normalized profile entity."""

import pytest

from core.exceptions import MalformedInputError
from domain.entities.profile import (
    ActivityEvent,
    NormalizedProfile,
    Platform,
    RatingChange,
    validate_profile,
)
from tests.factories import make_profile


class TestPlatform:
    @pytest.mark.parametrize(
        ("slug", "expected"),
        [
            ("cf", Platform.CODEFORCES),
            ("CC", Platform.CODECHEF),
            ("codeforces", Platform.CODEFORCES),
            ("atcoder", None),
        ],
    )
    def test_from_slug(self, slug: str, expected: Platform | None) -> None:
        assert Platform.from_slug(slug) is expected


class TestNormalizedProfile:
    def test_sorted_history(self) -> None:
        profile = make_profile(
            rating_history=(RatingChange(300, 1500), RatingChange(100, 1400), RatingChange(200, 1450))
        )

        assert [c.timestamp_seconds for c in profile.sorted_history()] == [100, 200, 300]

    def test_location(self) -> None:
        assert make_profile(city="Gomel", country="Belarus").location == "Gomel, Belarus"
        assert make_profile(country="Belarus").location == "Belarus"
        assert make_profile().location is None

    def test_is_rated(self) -> None:
        assert make_profile().is_rated
        assert not make_profile(current_rating=None).is_rated
        assert not make_profile(current_rating=0).is_rated


class TestValidateProfile:
    def test_valid_profile_passes(self) -> None:
        validate_profile(make_profile())

    def test_empty_handle(self) -> None:
        with pytest.raises(MalformedInputError) as exc_info:
            validate_profile(make_profile(handle=""))

        assert exc_info.value.details == {"field": "handle"}
        assert exc_info.value.status_code == 422

    def test_non_positive_rating(self) -> None:
        with pytest.raises(MalformedInputError):
            validate_profile(make_profile(rating_history=(RatingChange(100, 0),)))

    def test_non_integer_timestamp(self) -> None:
        with pytest.raises(MalformedInputError):
            validate_profile(
                make_profile(activity_events=(ActivityEvent("yesterday", "1-A"),))  # type: ignore[arg-type]
            )

    def test_not_a_profile(self) -> None:
        with pytest.raises(MalformedInputError):
            validate_profile({"handle": "tourist"})  # type: ignore[arg-type]

    def test_profile_is_immutable(self) -> None:
        profile = NormalizedProfile(handle="tourist")

        with pytest.raises(AttributeError):
            profile.handle = "other"  # type: ignore[misc]
