"""UTC time windows for digests."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from digest.types import DigestContext


def _utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def get_utc_daily_window(now: Optional[datetime] = None) -> tuple[datetime, datetime, str]:
    """The last complete UTC day before ``now``.

    Returns:
        (start, end, date_title) where start is midnight UTC of the previous
        day, end is midnight UTC of ``now``'s day and date_title is YYYY-MM-DD
        of start
    """
    current = _utc(now)
    end = current.replace(hour=0, minute=0, second=0, microsecond=0)
    start = end - timedelta(days=1)
    return start, end, start.strftime('%Y-%m-%d')


def get_digest_window(hours: int, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Rolling window covering the last ``hours`` hours."""
    end = _utc(now)
    return end - timedelta(hours=hours), end


def daily_context(now: Optional[datetime] = None) -> DigestContext:
    start, end, date_title = get_utc_daily_window(now)
    return DigestContext(
        start=start.strftime('%Y-%m-%d %H:%M'),
        end=end.strftime('%Y-%m-%d %H:%M'),
        date_title=date_title,
    )
