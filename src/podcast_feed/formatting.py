from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime


def format_pub_date(dt: datetime) -> str:
    """Format ``dt`` as an RFC 2822 date, e.g. ``Thu, 01 Jan 2015 00:00:00 +0000``.

    Day and month names are fixed English abbreviations regardless of locale.
    Naive datetimes are treated as UTC; the offset of aware datetimes is kept
    and truncated to whole minutes.
    """
    offset = dt.utcoffset()
    offset_minutes = 0 if offset is None else int(offset.total_seconds() / 60)
    # format_datetime writes "-0000" for naive values and keeps offset seconds.
    return format_datetime(dt.replace(tzinfo=timezone(timedelta(minutes=offset_minutes))))


def format_duration(duration: timedelta) -> str:
    """Format ``duration`` as ``M:SS`` below one hour and ``H:MM:SS`` from one hour on.

    Fractional seconds are truncated and negative durations clamp to ``0:00``.
    """
    total = max(int(duration.total_seconds()), 0)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
