"""Pydantic schemas for upstream platform payloads.

Only the fields the cards use are declared; everything else is ignored.
"""

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _optional_int(value: Any) -> int | None:
    """Numbers may arrive as strings, blanks or words like "Inactive"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value).strip().replace(",", "")
    if text.lstrip("-").isdigit():
        return int(text)
    return None


OptionalInt = Annotated[int | None, BeforeValidator(_optional_int)]


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# --- Codeforces ---


class CodeforcesEnvelope(UpstreamModel):
    status: str
    comment: str | None = None
    result: Any = None


class CodeforcesUser(UpstreamModel):
    handle: str
    rating: OptionalInt = None
    max_rating: OptionalInt = Field(default=None, alias="maxRating")
    rank: str | None = None
    max_rank: str | None = Field(default=None, alias="maxRank")
    contribution: OptionalInt = None
    friend_of_count: OptionalInt = Field(default=None, alias="friendOfCount")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    city: str | None = None
    country: str | None = None
    organization: str | None = None
    title_photo: str | None = Field(default=None, alias="titlePhoto")
    avatar: str | None = None
    last_online_time_seconds: OptionalInt = Field(default=None, alias="lastOnlineTimeSeconds")
    registration_time_seconds: OptionalInt = Field(
        default=None, alias="registrationTimeSeconds"
    )


class CodeforcesRatingChange(UpstreamModel):
    contest_id: OptionalInt = Field(default=None, alias="contestId")
    contest_name: str = Field(default="", alias="contestName")
    rank: OptionalInt = None
    rating_update_time_seconds: int = Field(alias="ratingUpdateTimeSeconds")
    new_rating: int = Field(alias="newRating")


class CodeforcesProblem(UpstreamModel):
    contest_id: OptionalInt = Field(default=None, alias="contestId")
    problemset_name: str | None = Field(default=None, alias="problemsetName")
    index: str = ""
    name: str = ""

    @property
    def key(self) -> str:
        """Stable identifier: contest id (or problemset) plus problem index."""
        prefix = self.contest_id if self.contest_id is not None else self.problemset_name
        return f"{prefix}-{self.index}"


class CodeforcesSubmission(UpstreamModel):
    creation_time_seconds: int = Field(alias="creationTimeSeconds")
    problem: CodeforcesProblem
    verdict: str | None = None


# --- CodeChef ---


class CodeChefRating(UpstreamModel):
    name: str = ""
    rating: OptionalInt = None
    rank: OptionalInt = None
    end_date: str | None = None
    getyear: OptionalInt = None
    getmonth: OptionalInt = None
    getday: OptionalInt = None

    @property
    def timestamp_seconds(self) -> int | None:
        if self.end_date:
            for pattern in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
                try:
                    moment = datetime.strptime(self.end_date.strip(), pattern)
                except ValueError:
                    continue
                return int(moment.replace(tzinfo=timezone.utc).timestamp())
        if self.getyear and self.getmonth and self.getday:
            try:
                moment = datetime(self.getyear, self.getmonth, self.getday, tzinfo=timezone.utc)
            except ValueError:
                return None
            return int(moment.timestamp())
        return None


class CodeChefHeatmapDay(UpstreamModel):
    date: str
    value: OptionalInt = 0

    @property
    def day(self) -> datetime | None:
        """Dates arrive unpadded, e.g. ``2023-1-5``."""
        try:
            year, month, day = (int(part) for part in self.date.split("-")[:3])
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            return None


class CodeChefProfile(UpstreamModel):
    success: bool = True
    name: str | None = None
    profile: str | None = None
    current_rating: OptionalInt = Field(default=None, alias="currentRating")
    highest_rating: OptionalInt = Field(default=None, alias="highestRating")
    country_flag: str | None = Field(default=None, alias="countryFlag")
    country_name: str | None = Field(default=None, alias="countryName")
    global_rank: OptionalInt = Field(default=None, alias="globalRank")
    country_rank: OptionalInt = Field(default=None, alias="countryRank")
    stars: str | None = None
    institution: str | None = None
    heat_map: list[CodeChefHeatmapDay] = Field(default_factory=list, alias="heatMap")
    rating_data: list[CodeChefRating] = Field(default_factory=list, alias="ratingData")
