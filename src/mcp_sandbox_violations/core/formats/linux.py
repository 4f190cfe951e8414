"""Linux journal / kernel ring buffer parser for bubblewrap denials."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from ..models import Violation
from .base import YearPolicy, reconstruct_year

DENY_CODE = "EPERM"
UNKNOWN_OPERATION = "unknown"


@dataclass(frozen=True, slots=True)
class LinuxSandboxParser:
    """Parse bubblewrap denials from `journalctl -o short` or `dmesg -T` output.

    Examples:
        Nov 03 16:25:43 hostname bwrap[12345]: Permission denied: /path/to/file
        [Mon Nov  3 16:25:43 2025] bwrap[12345]: Permission denied: /path/to/file
    """

    year_policy: YearPolicy = YearPolicy.CURRENT

    _journal = re.compile(
        r"^(?P<ts>\w+\s+\d+\s+\d{2}:\d{2}:\d{2})\s+"
        r"\S+\s+"
        r"(?P<proc>[\w.\-]+)\[(?P<pid>\d+)\]:\s+"
        r"(?P<msg>.+)$"
    )

    _kernel = re.compile(
        r"^\[(?P<ts>\w+\s+\w+\s+\d+\s+\d{2}:\d{2}:\d{2}\s+\d{4})\]\s+"
        r"(?P<proc>[\w.\-]+)\[(?P<pid>\d+)\]:\s+"
        r"(?P<msg>.+)$"
    )

    _denial = re.compile(r"(?i)(permission denied|eperm|access denied|denied).*?([/\w\-.]+)")

    def _journal_ts(self, ts_str: str, *, now: datetime) -> datetime | None:
        """Parse a year-less journal timestamp and reconstruct its year."""
        try:
            naive = datetime.strptime(f"{now.year} {' '.join(ts_str.split())}", "%Y %b %d %H:%M:%S")
        except ValueError:
            return None
        return reconstruct_year(naive, now=now, policy=self.year_policy)

    @staticmethod
    def _kernel_ts(ts_str: str) -> datetime | None:
        """Parse a `dmesg -T` timestamp (local time, explicit year)."""
        try:
            naive = datetime.strptime(" ".join(ts_str.split()), "%a %b %d %H:%M:%S %Y")
        except ValueError:
            return None
        return naive.astimezone()

    @staticmethod
    def is_sandbox_related(proc: str, message: str) -> bool:
        return "bwrap" in proc.lower() or "bubblewrap" in message.lower()

    def parse(self, line: str, *, now: datetime) -> Violation | None:
        """Parse a journal or kernel line into a Violation."""
        m = self._journal.match(line)
        if m:
            ts = self._journal_ts(m.group("ts"), now=now)
        else:
            m = self._kernel.match(line)
            if m is None:
                return None
            ts = self._kernel_ts(m.group("ts"))

        proc = m.group("proc")
        message = m.group("msg")
        if not self.is_sandbox_related(proc, message):
            return None

        operation = UNKNOWN_OPERATION
        target_path = ""
        d = self._denial.search(message)
        if d:
            operation = d.group(1)
            target_path = d.group(2)

        return Violation(
            timestamp=ts or now,
            process_name=proc,
            process_id=m.group("pid"),
            operation=operation,
            target_path=target_path,
            deny_code=DENY_CODE,
            raw_line=line,
        )
