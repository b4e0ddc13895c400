"""Profile summary card (500x300)."""

from dataclasses import dataclass
from datetime import datetime

from domain.entities.profile import NormalizedProfile, validate_profile
from domain.rendering.fallback import CardKind, render_with_fallback
from domain.rendering.palette import tier_color
from domain.rendering.scene import (
    Circle,
    ClipPath,
    DropShadow,
    Group,
    Image,
    Line,
    LinearGradient,
    Path,
    Rect,
    SvgDocument,
    Text,
)
from domain.rendering.timeutils import distinct_problems, format_time_ago

WIDTH, HEIGHT = CardKind.PROFILE.width, CardKind.PROFILE.height
HEADER_HEIGHT = 80
TILE_WIDTH = 150
TILE_HEIGHT = 60
TILE_GAP = 10
FIRST_ROW_TILES = 2
SECOND_ROW_TILES = 3
MAX_TILES = FIRST_ROW_TILES + SECOND_ROW_TILES
AVATAR_CX, AVATAR_CY, AVATAR_R = 430, 70, 50
POSITIVE_COLOR = "green"
NON_POSITIVE_COLOR = "red"

LOCATION_ICON = (
    "M7,0C3.13,0,0,3.13,0,7c0,5.25,7,13,7,13s7-7.75,7-13C14,3.13,10.87,0,7,0z "
    "M7,9.5C5.62,9.5,4.5,8.38,4.5,7S5.62,4.5,7,4.5S9.5,5.62,9.5,7S8.38,9.5,7,9.5z"
)
ORGANIZATION_ICON = (
    "M12,0H4C2.9,0,2,0.9,2,2v14c0,1.1,0.9,2,2,2h8c1.1,0,2-0.9,2-2V2C14,0.9,13.1,0,12,0z "
    "M12,16H4V2h8V16z M6,4h4v2H6V4z M6,8h4v2H6V8z M6,12h4v2H6V12z"
)

STYLE = """
.title { font: 700 24px 'Open Sans', 'Segoe UI', Arial, sans-serif; }
.rank { font: 700 20px 'Open Sans', 'Segoe UI', Arial, sans-serif; }
.info { font: 400 14px 'Open Sans', 'Segoe UI', Arial, sans-serif; fill: #444; }
.stat { font: 600 16px 'Open Sans', 'Segoe UI', Arial, sans-serif; }
.small-stat { font: 400 12px 'Open Sans', 'Segoe UI', Arial, sans-serif; fill: #666; }
.label { font: 400 11px 'Open Sans', 'Segoe UI', Arial, sans-serif; fill: #666; }
.time-info { font: 400 12px 'Open Sans', 'Segoe UI', Arial, sans-serif; fill: #666; }
"""


@dataclass(frozen=True)
class StatTile:
    label: str
    value: str
    color: str | None = None


def display_rank(rank_label: str | None) -> str:
    label = (rank_label or "unrated").strip() or "unrated"
    return label[0].upper() + label[1:]


def stat_tiles(profile: NormalizedProfile) -> list[StatTile]:
    """Tiles in display order; optional ones only when the field is present."""
    tiles = [
        StatTile("Current Rating", str(profile.current_rating or 0)),
        StatTile("Contests", str(len(profile.rating_history))),
    ]
    if profile.contribution is not None:
        contribution = profile.contribution
        if contribution > 0:
            tiles.append(StatTile("Contribution", f"+{contribution}", POSITIVE_COLOR))
        else:
            tiles.append(StatTile("Contribution", str(contribution), NON_POSITIVE_COLOR))
    tiles.append(StatTile("Problems Solved", str(distinct_problems(profile.activity_events))))
    if profile.friend_of_count is not None:
        tiles.append(StatTile("Friend of", str(profile.friend_of_count)))
    if profile.global_rank is not None:
        tiles.append(StatTile("Global Rank", f"#{profile.global_rank}"))
    if profile.country_rank is not None:
        tiles.append(StatTile("Country Rank", f"#{profile.country_rank}"))
    return tiles[:MAX_TILES]


def _tile(tile: StatTile, column: int) -> Group:
    return Group(
        [
            Rect(0, 0, TILE_WIDTH, TILE_HEIGHT, fill="#ffffff", rx=8, filter="url(#cardShadow)"),
            Text(TILE_WIDTH / 2, 25, tile.value, css_class="stat", anchor="middle",
                 fill=tile.color),
            Text(TILE_WIDTH / 2, 45, tile.label, css_class="label", anchor="middle"),
        ],
        translate=(column * (TILE_WIDTH + TILE_GAP), 0),
        css_class="stat-tile",
    )


def _info_lines(profile: NormalizedProfile) -> Group:
    lines = Group(translate=(0, 60), css_class="info")
    entries = []
    if profile.location:
        entries.append((LOCATION_ICON, profile.location))
    if profile.organization:
        entries.append((ORGANIZATION_ICON, f"@ {profile.organization}"))
    for index, (icon, text) in enumerate(entries):
        lines.add(
            Group(
                [
                    Group([Path(raw_d=icon, fill="#666666")], translate=(0, -3)),
                    Text(20, 10, text, css_class="info"),
                ],
                translate=(0, index * 18),
            )
        )
    return lines


def _footer(profile: NormalizedProfile, now: datetime | None) -> Group:
    footer = Group(translate=(0, 250), css_class="footer")
    if profile.last_online_seconds is not None:
        footer.add(Text(0, 5, f"Last online: {format_time_ago(profile.last_online_seconds, now)}",
                        css_class="time-info"))
    if profile.registered_seconds is not None:
        footer.add(Text(165, 5, f"Registered: {format_time_ago(profile.registered_seconds, now)}",
                        css_class="time-info"))
    if not footer.children and profile.rating_history:
        last = profile.sorted_history()[-1]
        text = f"Last contest: {last.contest_name}"
        if last.contest_rank is not None:
            text += f" (#{last.contest_rank})"
        footer.add(Text(0, 5, text, css_class="time-info"))
    return footer


def build_profile_card(
    profile: NormalizedProfile,
    avatar_data_uri: str,
    now: datetime | None = None,
) -> SvgDocument:
    validate_profile(profile)
    color = tier_color(profile.rank_label, profile.platform)
    tiles = stat_tiles(profile)

    document = SvgDocument(width=WIDTH, height=HEIGHT, style=STYLE)
    document.defs = [
        LinearGradient("backgroundGrad", [("0%", "#ffffff"), ("100%", "#f0f2f5")]),
        DropShadow("shadow", std_deviation=3, opacity=0.15),
        DropShadow("cardShadow", std_deviation=2, opacity=0.1),
        ClipPath("avatarClip", [Circle(AVATAR_CX, AVATAR_CY, AVATAR_R)]),
    ]
    document.add(
        Rect(0, 0, WIDTH, HEIGHT, fill="url(#backgroundGrad)", rx=15),
        Rect(0, 0, WIDTH, HEADER_HEIGHT, fill=color, opacity=0.15, css_class="header"),
        Line(0, HEADER_HEIGHT, WIDTH, HEADER_HEIGHT, stroke="#eee"),
    )

    content = Group(translate=(20, 25), css_class="content")
    content.add(
        Text(0, 20, display_rank(profile.rank_label), css_class="rank", fill=color),
        Text(0, 45, profile.handle, css_class="title", fill=color),
        _info_lines(profile),
        Group([_tile(t, i) for i, t in enumerate(tiles[:FIRST_ROW_TILES])],
              translate=(0, 100), css_class="stats-row"),
        Group([_tile(t, i) for i, t in enumerate(tiles[FIRST_ROW_TILES:])],
              translate=(0, 170), css_class="stats-row"),
        _footer(profile, now),
    )
    document.add(content)

    document.add(
        Circle(AVATAR_CX, AVATAR_CY, AVATAR_R, fill="#fff", filter="url(#shadow)"),
        Image(AVATAR_CX - AVATAR_R, AVATAR_CY - AVATAR_R, 2 * AVATAR_R, 2 * AVATAR_R,
              href=avatar_data_uri, clip_path="url(#avatarClip)"),
        Circle(AVATAR_CX, AVATAR_CY, AVATAR_R, fill="none", stroke=color, stroke_width=2),
        Text(AVATAR_CX, AVATAR_CY + AVATAR_R + 23, f"max. {profile.max_rating or 0}",
             css_class="small-stat", anchor="middle", font_size=10),
    )
    return document


def render_profile_card(
    profile: NormalizedProfile,
    avatar_data_uri: str,
    now: datetime | None = None,
) -> str:
    """Profile card as SVG text; failures come back as a 500x300 placeholder."""
    return render_with_fallback(
        lambda: build_profile_card(profile, avatar_data_uri, now), CardKind.PROFILE
    ).svg
