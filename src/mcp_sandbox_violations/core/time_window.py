"""Lookback-window helpers.

Converts lookback durations to and from the textual forms used by the
log backends and by configuration.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

_DURATION_RE = re.compile(r"^(?:(?P<d>\d+)d)?(?:(?P<h>\d+)h)?(?:(?P<m>\d+)m)?(?:(?P<s>\d+)s)?$")


def parse_duration(s: str) -> timedelta:
    """Parse a compact duration such as 90s, 30m, 1h30m or 2d."""
    text = s.strip().lower()
    m = _DURATION_RE.match(text)
    if not text or not m:
        raise ValueError("duration must look like 30m, 1h, 1h30m or 2d")
    return timedelta(
        days=int(m.group("d") or 0),
        hours=int(m.group("h") or 0),
        minutes=int(m.group("m") or 0),
        seconds=int(m.group("s") or 0),
    )


def format_minutes(since: timedelta) -> str:
    """Render a lookback for `log show --last` (whole minutes)."""
    minutes = since.total_seconds() / 60
    return f"{minutes:.0f}m"


def format_relative_since(since: timedelta) -> str:
    """Render a lookback for `journalctl --since` (e.g. "2 hours ago")."""
    hours = since.total_seconds() / 3600
    if hours >= 1:
        return f"{hours:.0f} hours ago"
    return f"{since.total_seconds() / 60:.0f} minutes ago"


def window_start(since: timedelta, now: datetime) -> datetime:
    """Return the earliest instant covered by a lookback ending at now."""
    return now - since
