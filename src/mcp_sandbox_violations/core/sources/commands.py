"""Readers backed by OS log query tools."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ..time_window import format_minutes, format_relative_since
from .base import CommandSourceReader

LOG_SHOW_PREDICATE = 'eventMessage CONTAINS "Sandbox:" AND eventMessage CONTAINS "deny"'


@dataclass(frozen=True, slots=True)
class LogShowReader(CommandSourceReader):
    """macOS unified logging via `log show`, syslog style."""

    name: str = "log show"
    predicate: str = LOG_SHOW_PREDICATE

    def args(self, since: timedelta) -> list[str]:
        return [
            "log",
            "show",
            "--predicate",
            self.predicate,
            "--style",
            "syslog",
            "--last",
            format_minutes(since),
        ]


@dataclass(frozen=True, slots=True)
class JournalctlReader(CommandSourceReader):
    """systemd journal in short format."""

    name: str = "journalctl"

    def args(self, since: timedelta) -> list[str]:
        return [
            "journalctl",
            "--since",
            format_relative_since(since),
            "--no-pager",
            "-o",
            "short",
        ]


@dataclass(frozen=True, slots=True)
class DmesgReader(CommandSourceReader):
    """Kernel ring buffer with human-readable timestamps (whole buffer)."""

    name: str = "dmesg"
    windowed: bool = False

    def args(self, since: timedelta) -> list[str]:
        return ["dmesg", "-T"]
