"""Display helpers shared by the clients."""

from __future__ import annotations

from datetime import datetime, timezone


def format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n != 1 else ''} ago"


def time_ago(when: datetime, now: datetime | None = None) -> str:
    """Coarse relative time, e.g. ``"3 hours ago"``."""
    now = now or datetime.now(timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    seconds = int((now - when).total_seconds())
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if days > 0:
        return _plural(days, "day")
    if hours > 0:
        return _plural(hours, "hour")
    if minutes > 0:
        return _plural(minutes, "minute")
    return "Just now"
