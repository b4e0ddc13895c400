"""Rating history chart (900x420).

Time runs left to right over the contest timestamps, rating bottom to top
from the user's lowest rating up to a rounded ceiling above the top band.
"""

import math

from domain.entities.profile import NormalizedProfile, validate_profile
from domain.rendering.fallback import CardKind, build_message_card, render_with_fallback
from domain.rendering.palette import RatingBand, rating_bands, tier_color
from domain.rendering.scale import map_linear
from domain.rendering.scene import Circle, Group, Line, Path, Rect, Span, SvgDocument, Text
from domain.rendering.timeutils import month_year_label

WIDTH, HEIGHT = CardKind.GRAPH.width, CardKind.GRAPH.height
PAD_LEFT = 50
PAD_RIGHT = 30
PAD_TOP = 20
PLOT_TOP = 20
PLOT_BOTTOM = 385
PLOT_LEFT = PAD_LEFT
PLOT_RIGHT = WIDTH - PAD_RIGHT
X_LABEL_Y = 400
MIN_LABEL_SPACING = 100
CEILING_FLOOR = 3000
CEILING_HEADROOM = 200
MARKER_RADIUS = 3

STYLE = """
.axis-label { font: 400 11px 'Open Sans', 'Segoe UI', Arial, sans-serif; fill: #666; }
.handle-label { font: 600 14px 'Open Sans', 'Segoe UI', Arial, sans-serif; fill: #666; }
.ratings-label { font: 600 14px 'Open Sans', 'Segoe UI', Arial, sans-serif; fill: #000; }
.graph-path { stroke-width: 1.5; fill: none; }
.grid-line { stroke: #ddd; stroke-width: 1; opacity: 0.5; }
.border { stroke: #000; stroke-width: 1; fill: none; }
"""


def no_history_message(handle: str) -> str:
    return f"No rating history available for {handle}"


def dynamic_max_rating(max_rating: int | None, highest_seen: int) -> int:
    """Ceiling of the plot, rounded up to a hundred with headroom."""
    top = max(max_rating or 0, highest_seen, CEILING_FLOOR)
    return math.ceil((top + CEILING_HEADROOM) / 100) * 100


def x_label_indices(xs: list[float], min_spacing: float = MIN_LABEL_SPACING) -> list[int]:
    """Indices of points that get an x-axis date label.

    First and last points are always labelled. An interior point is labelled
    when it sits at least min_spacing past the previous label and at least
    min_spacing before the last point.
    """
    if not xs:
        return []
    last = len(xs) - 1
    chosen = [0]
    for index in range(1, last):
        if xs[index] - xs[chosen[-1]] >= min_spacing and xs[last] - xs[index] >= min_spacing:
            chosen.append(index)
    if last > 0:
        chosen.append(last)
    return chosen


def visible_band_span(
    band: RatingBand, floor: int, ceiling: int
) -> tuple[int, int] | None:
    """Clip a band to [floor, ceiling]; None when nothing of it is visible."""
    low = floor if band.low is None else max(band.low, floor)
    high = ceiling if band.high is None else min(band.high, ceiling)
    if high <= low:
        return None
    return low, high


def build_rating_graph(profile: NormalizedProfile) -> SvgDocument:
    validate_profile(profile)
    history = profile.sorted_history()
    if not history:
        return build_message_card(no_history_message(profile.handle), WIDTH, HEIGHT)

    color = tier_color(profile.rank_label, profile.platform)
    ratings = [change.new_rating for change in history]
    floor = min(ratings)
    ceiling = dynamic_max_rating(profile.max_rating, max(ratings))
    t_min = history[0].timestamp_seconds
    t_max = history[-1].timestamp_seconds

    def x_of(timestamp: int) -> float:
        return map_linear(timestamp, t_min, t_max, PLOT_LEFT, PLOT_RIGHT)

    def y_of(rating: int) -> float:
        return map_linear(rating, floor, ceiling, PLOT_BOTTOM, PLOT_TOP)

    document = SvgDocument(width=WIDTH, height=HEIGHT, style=STYLE)
    document.add(Rect(0, 0, WIDTH, HEIGHT, fill="#ffffff", rx=15))

    stripes = Group(css_class="bands")
    for band in rating_bands(profile.platform):
        span = visible_band_span(band, floor, ceiling)
        if span is None:
            continue
        low, high = span
        top, bottom = y_of(high), y_of(low)
        stripes.add(
            Rect(PLOT_LEFT, top, PLOT_RIGHT - PLOT_LEFT, bottom - top,
                 fill=band.color, opacity=band.opacity)
        )
    document.add(stripes)

    boundaries = {floor}
    boundaries.update(
        band.low for band in rating_bands(profile.platform)
        if band.low is not None and floor <= band.low <= ceiling
    )
    y_axis = Group(css_class="y-axis")
    for value in sorted(boundaries):
        y = y_of(value)
        y_axis.add(
            Text(PLOT_LEFT - 10, y, str(value), css_class="axis-label",
                 anchor="end", baseline="middle"),
            Line(PLOT_LEFT, y, PLOT_RIGHT, y, css_class="grid-line"),
        )
    document.add(y_axis)

    document.add(
        Line(PLOT_LEFT, PLOT_BOTTOM, PLOT_RIGHT, PLOT_BOTTOM, css_class="border"),
        Line(PLOT_LEFT, PLOT_TOP, PLOT_LEFT, PLOT_BOTTOM, css_class="border"),
    )

    points = [(x_of(c.timestamp_seconds), y_of(c.new_rating)) for c in history]
    if len(points) > 1:
        document.add(Path(points, css_class="graph-path", stroke=color))

    markers = Group(css_class="rating-points")
    for change, (x, y) in zip(history, points):
        tooltip = f"{change.new_rating} — {month_year_label(change.timestamp_seconds)}"
        markers.add(
            Group(
                [Circle(x, y, MARKER_RADIUS, fill=color, title=tooltip)],
                css_class="rating-point",
            )
        )
    document.add(markers)

    x_axis = Group(css_class="x-axis")
    for index in x_label_indices([x for x, _ in points]):
        x_axis.add(
            Text(points[index][0], X_LABEL_Y,
                 month_year_label(history[index].timestamp_seconds),
                 css_class="axis-label", anchor="middle")
        )
    document.add(x_axis)

    document.add(
        Text(
            PLOT_LEFT,
            PAD_TOP - 5,
            [
                "Contest rating: ",
                Span(str(profile.current_rating or 0), "bold"),
                " (max. ",
                Span(str(profile.max_rating or 0), "bold"),
                ")",
            ],
            css_class="ratings-label",
        ),
        Text(PLOT_RIGHT, PAD_TOP - 5, profile.handle, css_class="handle-label", anchor="end"),
    )
    return document


def render_rating_graph(profile: NormalizedProfile) -> str:
    """Rating chart as SVG text; failures come back as a 900x420 placeholder."""
    return render_with_fallback(lambda: build_rating_graph(profile), CardKind.GRAPH).svg
