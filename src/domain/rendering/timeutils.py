"""Time and date helpers for the renderers.

All bucketing is done on UTC calendar days.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone

from domain.entities.profile import ActivityEvent

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

SECONDS_PER_DAY = 86400


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_day(timestamp_seconds: int) -> date:
    return datetime.fromtimestamp(timestamp_seconds, tz=timezone.utc).date()


def day_key(timestamp_seconds: int) -> str:
    """ISO calendar day (YYYY-MM-DD) of a unix timestamp, in UTC."""
    return utc_day(timestamp_seconds).isoformat()


def month_year_label(timestamp_seconds: int) -> str:
    moment = datetime.fromtimestamp(timestamp_seconds, tz=timezone.utc)
    return f"{MONTH_NAMES[moment.month - 1]} {moment.year}"


def format_time_ago(timestamp_seconds: int, now: datetime | None = None) -> str:
    """Human relative time: minutes under an hour, hours under a day, else days."""
    reference = to_utc(now) if now is not None else utc_now()
    diff = max(0, int(reference.timestamp()) - timestamp_seconds)
    if diff < 3600:
        value, unit = diff // 60, "minute"
    elif diff < SECONDS_PER_DAY:
        value, unit = diff // 3600, "hour"
    else:
        value, unit = diff // SECONDS_PER_DAY, "day"
    suffix = "" if value == 1 else "s"
    return f"{value} {unit}{suffix} ago"


def longest_streak(days: Iterable[date]) -> int:
    """Length of the longest run of consecutive calendar days.

    A missing day breaks the run, so days outside the data count as zero.
    """
    ordered = sorted(set(days))
    best = 0
    run = 0
    previous: date | None = None
    for day in ordered:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day
    return best


def window_streak(days: Iterable[date], start: date, end: date) -> int:
    """Longest streak with runs clipped to [start, end]."""
    return longest_streak(day for day in days if start <= day <= end)


def distinct_problems(
    events: Iterable[ActivityEvent],
    since_seconds: int | None = None,
    until_seconds: int | None = None,
) -> int:
    """Number of distinct problem keys solved within [since_seconds, until_seconds]."""
    return len({
        event.problem_key
        for event in events
        if (since_seconds is None or event.timestamp_seconds >= since_seconds)
        and (until_seconds is None or event.timestamp_seconds <= until_seconds)
    })


def solved_by_day(
    events: Iterable[ActivityEvent], since_seconds: int | None = None
) -> dict[str, set[str]]:
    """Map each UTC day to the set of distinct problems solved that day."""
    by_day: dict[str, set[str]] = {}
    for event in events:
        if since_seconds is not None and event.timestamp_seconds < since_seconds:
            continue
        by_day.setdefault(day_key(event.timestamp_seconds), set()).add(event.problem_key)
    return by_day
