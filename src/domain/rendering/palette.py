"""Rank tiers, rating bands and heatmap levels, shared by every renderer."""

from dataclasses import dataclass

from domain.entities.profile import Platform

DEFAULT_TIER_COLOR = "#000000"
BAND_OPACITY = 0.1

# Ordered low -> high; lookups are case-insensitive.
CODEFORCES_TIERS: tuple[tuple[str, str], ...] = (
    ("newbie", "#808080"),
    ("pupil", "#008000"),
    ("specialist", "#03A89E"),
    ("expert", "#0000FF"),
    ("candidate master", "#AA00AA"),
    ("master", "#FF8C00"),
    ("international master", "#FF8C00"),
    ("grandmaster", "#FF0000"),
    ("international grandmaster", "#FF0000"),
    ("legendary grandmaster", "#FF0000"),
    ("unrated", DEFAULT_TIER_COLOR),
)

CODECHEF_TIERS: tuple[tuple[str, str], ...] = (
    ("1★", "#666666"),
    ("2★", "#1E7D22"),
    ("3★", "#3366CC"),
    ("4★", "#684273"),
    ("5★", "#FFBF00"),
    ("6★", "#FF7F00"),
    ("7★", "#D0011B"),
)

TIERS: dict[Platform, tuple[tuple[str, str], ...]] = {
    Platform.CODEFORCES: CODEFORCES_TIERS,
    Platform.CODECHEF: CODECHEF_TIERS,
}


@dataclass(frozen=True)
class RatingBand:
    """Background stripe of the rating graph.

    ``low`` of None means the band starts at the plot floor; ``high`` of None
    means it runs to the plot ceiling.
    """

    low: int | None
    high: int | None
    color: str
    opacity: float = BAND_OPACITY


CODEFORCES_BANDS: tuple[RatingBand, ...] = (
    RatingBand(None, 1200, "#CCCCCC"),
    RatingBand(1200, 1400, "#808080"),
    RatingBand(1400, 1600, "#008000"),
    RatingBand(1600, 1900, "#03A89E"),
    RatingBand(1900, 2100, "#0000FF"),
    RatingBand(2100, 2400, "#AA00AA"),
    RatingBand(2400, 3000, "#FF8C00"),
    RatingBand(3000, None, "#FF0000"),
)

CODECHEF_BANDS: tuple[RatingBand, ...] = (
    RatingBand(None, 1400, "#666666"),
    RatingBand(1400, 1600, "#1E7D22"),
    RatingBand(1600, 1800, "#3366CC"),
    RatingBand(1800, 2000, "#684273"),
    RatingBand(2000, 2200, "#FFBF00"),
    RatingBand(2200, 2500, "#FF7F00"),
    RatingBand(2500, None, "#D0011B"),
)

BANDS: dict[Platform, tuple[RatingBand, ...]] = {
    Platform.CODEFORCES: CODEFORCES_BANDS,
    Platform.CODECHEF: CODECHEF_BANDS,
}

# (minimum distinct solves, colour), checked from the top down
HEATMAP_LEVELS: tuple[tuple[int, str], ...] = (
    (5, "#196127"),
    (3, "#239a3b"),
    (2, "#40c463"),
    (1, "#9be9a8"),
)
HEATMAP_EMPTY = "#ebedf0"


def tier_color(rank_label: str | None, platform: Platform = Platform.CODEFORCES) -> str:
    """Colour for a tier name, falling back to the default for unknown tiers."""
    if not rank_label:
        return DEFAULT_TIER_COLOR
    wanted = rank_label.strip().lower()
    for name, color in TIERS.get(platform, CODEFORCES_TIERS):
        if name == wanted:
            return color
    return DEFAULT_TIER_COLOR


def rating_bands(platform: Platform) -> tuple[RatingBand, ...]:
    return BANDS.get(platform, CODEFORCES_BANDS)


def heatmap_color(solved: int) -> str:
    for minimum, color in HEATMAP_LEVELS:
        if solved >= minimum:
            return color
    return HEATMAP_EMPTY
