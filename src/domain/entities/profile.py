"""Normalized profile domain entity.

Every upstream platform is mapped into this shape before rendering, so the
renderers never see raw API payloads.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from core.exceptions import MalformedInputError


class Platform(StrEnum):
    """Supported competitive-programming platforms."""

    CODEFORCES = "codeforces"
    CODECHEF = "codechef"

    @classmethod
    def from_slug(cls, slug: str) -> "Platform | None":
        """Resolve a short URL slug (``cf``/``cc``) or full platform name."""
        slug = slug.lower()
        for platform in cls:
            if slug in (platform.value, PLATFORM_SLUGS[platform]):
                return platform
        return None


PLATFORM_SLUGS: dict[Platform, str] = {
    Platform.CODEFORCES: "cf",
    Platform.CODECHEF: "cc",
}


@dataclass(frozen=True)
class RatingChange:
    """One rated contest result."""

    timestamp_seconds: int
    new_rating: int
    contest_name: str = ""
    contest_rank: int | None = None


@dataclass(frozen=True)
class ActivityEvent:
    """One accepted-submission-equivalent event."""

    timestamp_seconds: int
    problem_key: str


@dataclass(frozen=True)
class NormalizedProfile:
    """Platform-independent profile consumed read-only by the renderers."""

    handle: str
    platform: Platform = Platform.CODEFORCES
    current_rating: int | None = None
    max_rating: int | None = None
    rank_label: str = "unrated"
    max_rank_label: str = "unrated"
    rating_history: tuple[RatingChange, ...] = field(default_factory=tuple)
    activity_events: tuple[ActivityEvent, ...] = field(default_factory=tuple)
    avatar_ref: str | None = None

    # Secondary display fields, rendered only when present
    display_name: str | None = None
    city: str | None = None
    country: str | None = None
    organization: str | None = None
    contribution: int | None = None
    friend_of_count: int | None = None
    global_rank: int | None = None
    country_rank: int | None = None
    last_online_seconds: int | None = None
    registered_seconds: int | None = None

    @property
    def is_rated(self) -> bool:
        return bool(self.current_rating)

    @property
    def location(self) -> str | None:
        parts = [part for part in (self.city, self.country) if part]
        return ", ".join(parts) if parts else None

    def sorted_history(self) -> list[RatingChange]:
        """Rating history in chronological order, regardless of input order."""
        return sorted(self.rating_history, key=lambda change: change.timestamp_seconds)


def validate_profile(profile: NormalizedProfile) -> None:
    """Raise MalformedInputError if the profile cannot be rendered."""
    if not isinstance(profile, NormalizedProfile):
        raise MalformedInputError("Expected a normalized profile")
    if not isinstance(profile.handle, str) or not profile.handle.strip():
        raise MalformedInputError("Profile handle is required", field="handle")
    for change in profile.rating_history:
        if not isinstance(change.timestamp_seconds, int):
            raise MalformedInputError(
                "Rating timestamps must be integers", field="rating_history"
            )
        if not isinstance(change.new_rating, int) or change.new_rating <= 0:
            raise MalformedInputError(
                "Ratings must be positive integers", field="rating_history"
            )
    for event in profile.activity_events:
        if not isinstance(event.timestamp_seconds, int):
            raise MalformedInputError(
                "Activity timestamps must be integers", field="activity_events"
            )
