"""Time utilities for timezone-aware datetimes and calendar windows."""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from academy.app.core.settings import get_settings


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def reference_tz() -> ZoneInfo:
    return ZoneInfo(get_settings().reference_timezone)


def local_date(moment: datetime) -> date:
    """Calendar date of ``moment`` in the server's reference timezone."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(reference_tz()).date()


def day_window(moment: datetime) -> tuple[datetime, datetime]:
    """Return the inclusive ``[00:00:00, 23:59:59.999999]`` bounds of the reference-timezone day containing ``moment``, in UTC."""
    tz = reference_tz()
    day = local_date(moment)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start.astimezone(UTC), end.astimezone(UTC)


def month_bounds(month: str) -> tuple[date, date]:
    """First and last calendar day of a ``YYYY-MM`` month string."""
    start = datetime.strptime(month, "%Y-%m").date()
    if start.month == 12:
        next_month = date(start.year + 1, 1, 1)
    else:
        next_month = date(start.year, start.month + 1, 1)
    return start, next_month - timedelta(days=1)


def minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute
