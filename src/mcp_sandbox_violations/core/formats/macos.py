"""macOS unified logging (Seatbelt) parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from ..models import Violation


@dataclass(frozen=True, slots=True)
class MacOSSandboxParser:
    """Parse `log show --style syslog` lines reporting Sandbox denials.

    Example:
        2025-11-03 16:25:43.448666+0900  localhost kernel[0]: (Sandbox) Sandbox: cat(13276) deny(1) file-read-data /Users/x/.ssh/config
    """

    _timestamp = re.compile(
        r"^(?P<date>\d{4}-\d{2}-\d{2})\s+(?P<time>\d{2}:\d{2}:\d{2})\.(?P<frac>\d+)(?P<offset>[+-]\d{4})"
    )

    _sandbox = re.compile(
        r"Sandbox:\s+(?P<proc>[\w.\-]+)\((?P<pid>\d+)\)\s+"
        r"deny\((?P<code>\d+)\)\s+"
        r"(?P<op>[\w-]+)\s+"
        r"(?P<target>.+)$"
    )

    @staticmethod
    def _parse_ts(m: re.Match[str]) -> datetime | None:
        """Parse the leading timestamp, keeping its UTC offset."""
        frac = m.group("frac")[:6].ljust(6, "0")
        text = f"{m.group('date')} {m.group('time')}.{frac}{m.group('offset')}"
        try:
            return datetime.strptime(text, "%Y-%m-%d %H:%M:%S.%f%z")
        except ValueError:
            return None

    def parse(self, line: str, *, now: datetime) -> Violation | None:
        """Parse a macOS sandbox line into a Violation."""
        ts_match = self._timestamp.match(line)
        if ts_match is None:
            return None
        m = self._sandbox.search(line)
        if m is None:
            return None

        ts = self._parse_ts(ts_match) or now

        return Violation(
            timestamp=ts,
            process_name=m.group("proc"),
            process_id=m.group("pid"),
            operation=m.group("op"),
            target_path=m.group("target").strip(),
            deny_code=m.group("code"),
            raw_line=line,
        )
