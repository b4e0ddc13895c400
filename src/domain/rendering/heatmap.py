"""Activity heatmap (700x250): 52 weeks of distinct daily solves plus totals."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from domain.entities.profile import NormalizedProfile, validate_profile
from domain.rendering.fallback import CardKind, render_with_fallback
from domain.rendering.palette import heatmap_color
from domain.rendering.scene import Group, Rect, SvgDocument, Text
from domain.rendering.timeutils import (
    MONTH_NAMES,
    SECONDS_PER_DAY,
    distinct_problems,
    longest_streak,
    solved_by_day,
    to_utc,
    utc_day,
    utc_now,
    window_streak,
)

WIDTH, HEIGHT = CardKind.HEATMAP.width, CardKind.HEATMAP.height
CELL_SIZE = 10
CELL_PADDING = 2
CELL_STRIDE = CELL_SIZE + CELL_PADDING
WEEKS = 52
DAYS_PER_WEEK = 7
GRID_DAYS = WEEKS * DAYS_PER_WEEK
X_OFFSET = 35
Y_OFFSET = 35
YEAR_DAYS = 365
MONTH_DAYS = 30
DAY_LABELS = ((0, "Mon"), (2, "Wed"), (4, "Fri"))
STATS_Y = 172
STREAK_Y = 217
STAT_SPACING = 220

STYLE = """
text { font-family: 'Open Sans', 'Segoe UI', Arial, sans-serif; font-size: 10px; fill: #666; }
.title { font-size: 16px; font-weight: 600; fill: #333; }
.subtitle { font-size: 12px; fill: #666; }
"""


@dataclass(frozen=True)
class HeatmapStats:
    """Distinct-problem totals and longest streaks over three windows."""

    total_solved: int = 0
    last_year_solved: int = 0
    last_month_solved: int = 0
    max_streak: int = 0
    last_year_streak: int = 0
    last_month_streak: int = 0


@dataclass(frozen=True)
class HeatmapCell:
    day: date
    solved: int
    column: int
    row: int

    @property
    def x(self) -> int:
        return X_OFFSET + self.column * CELL_STRIDE

    @property
    def y(self) -> int:
        return Y_OFFSET + self.row * CELL_STRIDE

    @property
    def color(self) -> str:
        return heatmap_color(self.solved)


def compute_stats(profile: NormalizedProfile, now: datetime) -> HeatmapStats:
    events = profile.activity_events
    now_seconds = int(now.timestamp())
    today = now.date()
    active_days = {utc_day(event.timestamp_seconds) for event in events}
    return HeatmapStats(
        total_solved=distinct_problems(events),
        last_year_solved=distinct_problems(
            events, now_seconds - YEAR_DAYS * SECONDS_PER_DAY, now_seconds
        ),
        last_month_solved=distinct_problems(
            events, now_seconds - MONTH_DAYS * SECONDS_PER_DAY, now_seconds
        ),
        max_streak=longest_streak(active_days),
        last_year_streak=window_streak(
            active_days, today - timedelta(days=YEAR_DAYS - 1), today
        ),
        last_month_streak=window_streak(
            active_days, today - timedelta(days=MONTH_DAYS - 1), today
        ),
    )


def build_cells(profile: NormalizedProfile, now: datetime) -> list[HeatmapCell]:
    """One cell per day for the 364 days ending today, oldest first."""
    since = int(now.timestamp()) - YEAR_DAYS * SECONDS_PER_DAY
    by_day = solved_by_day(profile.activity_events, since)
    start = now.date() - timedelta(days=GRID_DAYS - 1)
    cells = []
    for index in range(GRID_DAYS):
        day = start + timedelta(days=index)
        cells.append(
            HeatmapCell(
                day=day,
                solved=len(by_day.get(day.isoformat(), ())),
                column=index // DAYS_PER_WEEK,
                row=index % DAYS_PER_WEEK,
            )
        )
    return cells


def month_label_columns(start: date) -> list[tuple[int, str]]:
    """Columns whose week starts in the first seven days of a new month."""
    labels = []
    last_month = None
    for column in range(WEEKS):
        week_start = start + timedelta(days=column * DAYS_PER_WEEK)
        if week_start.day <= 7 and week_start.month != last_month:
            labels.append((column, MONTH_NAMES[week_start.month - 1]))
            last_month = week_start.month
    return labels


def _count(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"


def _stat(x: float, y: float, title: str, subtitle: str) -> Group:
    return Group(
        [Text(0, 0, title, css_class="title"), Text(0, 18, subtitle, css_class="subtitle")],
        translate=(x, y),
        css_class="stat",
    )


def build_heatmap(profile: NormalizedProfile, now: datetime | None = None) -> SvgDocument:
    validate_profile(profile)
    now = to_utc(now) if now is not None else utc_now()
    cells = build_cells(profile, now)
    stats = compute_stats(profile, now)

    document = SvgDocument(width=WIDTH, height=HEIGHT, style=STYLE)
    document.add(Rect(0, 0, WIDTH, HEIGHT, fill="#ffffff", rx=15))

    months = Group(css_class="month-labels")
    for column, name in month_label_columns(cells[0].day):
        months.add(Text(X_OFFSET + column * CELL_STRIDE, Y_OFFSET - 8, name,
                        css_class="month-label"))
    document.add(months)

    days = Group(css_class="day-labels")
    for row, name in DAY_LABELS:
        days.add(
            Text(X_OFFSET - 6, Y_OFFSET + row * CELL_STRIDE + CELL_SIZE / 2, name,
                 css_class="day-label", anchor="end", baseline="middle")
        )
    document.add(days)

    grid = Group(css_class="cells")
    for cell in cells:
        grid.add(
            Rect(cell.x, cell.y, CELL_SIZE, CELL_SIZE, fill=cell.color, rx=2,
                 title=f"{cell.solved} problems on {cell.day.isoformat()}")
        )
    document.add(grid)

    counts = (
        (stats.total_solved, "solved for all time"),
        (stats.last_year_solved, "solved for the last year"),
        (stats.last_month_solved, "solved for the last month"),
    )
    streaks = (
        (stats.max_streak, "in a row max."),
        (stats.last_year_streak, "in a row for the last year"),
        (stats.last_month_streak, "in a row for the last month"),
    )
    for index, (value, caption) in enumerate(counts):
        document.add(_stat(X_OFFSET + index * STAT_SPACING, STATS_Y,
                           _count(value, "problem"), caption))
    for index, (value, caption) in enumerate(streaks):
        document.add(_stat(X_OFFSET + index * STAT_SPACING, STREAK_Y,
                           _count(value, "day"), caption))
    return document


def render_heatmap(profile: NormalizedProfile, now: datetime | None = None) -> str:
    """Heatmap as SVG text; failures come back as a 700x250 placeholder."""
    return render_with_fallback(lambda: build_heatmap(profile, now), CardKind.HEATMAP).svg
