"""Parser interfaces and line prefilter configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol

from ..models import Violation


class ViolationParser(Protocol):
    """Parser interface: return a Violation if the line is recognized, else None."""

    def parse(self, line: str, *, now: datetime) -> Violation | None:
        """Parse one raw log line. `now` is the collection-time context."""
        ...


class YearPolicy(str, Enum):
    """How to fill in the year for timestamps that omit it."""

    CURRENT = "current"
    NEAREST_PAST = "nearest_past"


@dataclass(frozen=True, slots=True)
class LineFilter:
    """Cheap substring test applied before pattern matching."""

    markers: tuple[str, ...]
    case_insensitive: bool = False

    def matches(self, line: str) -> bool:
        hay = line.lower() if self.case_insensitive else line
        for marker in self.markers:
            needle = marker.lower() if self.case_insensitive else marker
            if needle in hay:
                return True
        return False


def local_now() -> datetime:
    """Timezone-aware current time in the host's local zone."""
    return datetime.now().astimezone()


def reconstruct_year(naive: datetime, *, now: datetime, policy: YearPolicy) -> datetime:
    """Attach a year and the local timezone to a year-less timestamp.

    `naive` already carries the year of `now`; NEAREST_PAST moves it back a
    year when it would land more than a day after `now`.
    """
    ts = naive.astimezone() if naive.tzinfo is None else naive
    if policy is YearPolicy.NEAREST_PAST and ts > now + timedelta(days=1):
        try:
            ts = ts.replace(year=ts.year - 1)
        except ValueError:
            # Feb 29 has no counterpart in the previous year
            ts = ts.replace(year=ts.year - 1, day=28)
    return ts


def macos_default_filter() -> LineFilter:
    return LineFilter(markers=("Sandbox:",))


def linux_default_filter() -> LineFilter:
    return LineFilter(markers=("bwrap", "bubblewrap", "permission denied"), case_insensitive=True)
